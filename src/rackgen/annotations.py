"""
Annotation column values.

An annotation column sits beside a rack and shows one field per device
(name, IP, notes, ...). Missing values show an em-dash and long values are
cut to a fixed number of characters, with the full value kept for tooltips.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from .constants import ANNOTATION_MAX_CHARS, ELLIPSIS, EM_DASH
from .models import DeviceType, PlacedDevice, device_display_name


@dataclass(frozen=True)
class Annotation:
    """
    One annotation cell.

    Attributes:
        text: Displayed (possibly truncated) value
        full_text: Untruncated value for a tooltip
        empty: True when the field had no value
    """
    text: str
    full_text: str
    empty: bool = False


def annotation_value(
    placed: PlacedDevice,
    device_types: Mapping[str, DeviceType],
    field: str,
) -> str | None:
    """
    Raw value of an annotation field, or None when it is missing.

    Fields:
        name: display name (placement name, model, manufacturer, slug)
        ip: custom field "ip"
        notes: placement notes
        manufacturer, asset_tag, serial: from the device type
    """
    device_type = device_types.get(placed.device_type)

    if field == "name":
        return device_display_name(placed, device_types)
    if field == "ip":
        return placed.custom_fields.get("ip") or None
    if field == "notes":
        return placed.notes or None
    if field in ("manufacturer", "asset_tag", "serial"):
        if device_type is None:
            return None
        attr = "serial_number" if field == "serial" else field
        return getattr(device_type, attr) or None

    raise ValueError(f"Unknown annotation field: {field}")


def annotation_label(value: str, max_chars: int = ANNOTATION_MAX_CHARS) -> str:
    """Cut a value to at most max_chars characters, ending in an ellipsis."""
    if len(value) <= max_chars:
        return value
    return value[:max_chars - 1].rstrip() + ELLIPSIS


def build_annotation(
    placed: PlacedDevice,
    device_types: Mapping[str, DeviceType],
    field: str,
    max_chars: int = ANNOTATION_MAX_CHARS,
) -> Annotation:
    """Annotation cell for one device."""
    value = annotation_value(placed, device_types, field)
    if value is None:
        return Annotation(text=EM_DASH, full_text=EM_DASH, empty=True)
    return Annotation(text=annotation_label(value, max_chars), full_text=value)
