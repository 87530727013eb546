"""
Rack data model.

Device types, placed devices and racks. All types are frozen dataclasses;
edits produce new values (see placement.py). Placements reference their
device type by slug, never by value.

Loading from plain dictionaries (YAML/JSON) goes through ``from_dict`` so
optional fields get their documented defaults instead of being guessed at
render time.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .constants import (
    CATEGORY_COLOURS,
    MAX_DEVICE_HEIGHT,
    MAX_RACK_HEIGHT,
    MIN_DEVICE_HEIGHT,
    MIN_RACK_HEIGHT,
    RACK_WIDTHS,
)

_SLUG_PATTERN = re.compile(r"[a-z0-9-]+")


class UnknownDeviceTypeError(LookupError):
    """Raised when a placement references a slug missing from the library."""

    def __init__(self, slug: str):
        super().__init__(f"Unknown device type: {slug!r}")
        self.slug = slug


class Face(str, Enum):
    """Rack face a device is mounted on."""
    FRONT = "front"
    REAR = "rear"
    BOTH = "both"


class DeviceCategory(str, Enum):
    SERVER = "server"
    NETWORK = "network"
    PATCH_PANEL = "patch-panel"
    POWER = "power"
    STORAGE = "storage"
    KVM = "kvm"
    AV_MEDIA = "av-media"
    COOLING = "cooling"
    SHELF = "shelf"
    BLANK = "blank"
    OTHER = "other"


def _is_half_step(value: float) -> bool:
    return float(value * 2).is_integer()


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    return None if value is None else str(value)


# =============================================================================
# DEVICE TYPES
# =============================================================================

@dataclass(frozen=True)
class Interface:
    """
    A named port on a device.

    Attributes:
        name: Interface name (e.g., "eth0", "Gi1/0/1")
        type: Physical/speed class tag (e.g., "1000base-t", "10gbase-x-sfpp")
        mgmt_only: True for dedicated management ports
    """
    name: str
    type: str
    mgmt_only: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Interface:
        return cls(
            name=str(data["name"]),
            type=str(data.get("type", "other")),
            mgmt_only=bool(data.get("mgmt_only", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name, "type": self.type}
        if self.mgmt_only:
            result["mgmt_only"] = True
        return result


@dataclass(frozen=True)
class DeviceType:
    """
    A catalog entry describing a class of equipment.

    Attributes:
        slug: Unique identifier, lowercase letters, digits and hyphens
        u_height: Height in rack units (0.5 to 42, in 0.5 steps)
        is_full_depth: Full-depth devices block both faces
        colour: Display colour; the category colour is used when None
        category: Equipment category
        manufacturer: Optional manufacturer name
        model: Optional model name
        interfaces: Ordered ports on the device front
        asset_tag: Optional asset tag
        serial_number: Optional serial number
    """
    slug: str
    u_height: float
    is_full_depth: bool = True
    colour: str | None = None
    category: DeviceCategory = DeviceCategory.OTHER
    manufacturer: str | None = None
    model: str | None = None
    interfaces: tuple[Interface, ...] = ()
    asset_tag: str | None = None
    serial_number: str | None = None

    def __post_init__(self):
        if not _SLUG_PATTERN.fullmatch(self.slug or ""):
            raise ValueError(f"Invalid device type slug: {self.slug!r}")
        if not MIN_DEVICE_HEIGHT <= self.u_height <= MAX_DEVICE_HEIGHT:
            raise ValueError(
                f"Device type {self.slug!r}: u_height {self.u_height} outside "
                f"{MIN_DEVICE_HEIGHT}-{MAX_DEVICE_HEIGHT}"
            )
        if not _is_half_step(self.u_height):
            raise ValueError(
                f"Device type {self.slug!r}: u_height {self.u_height} is not a multiple of 0.5"
            )

    @property
    def display_colour(self) -> str:
        """Explicit colour, or the category default."""
        return self.colour or default_colour(self.category)

    @property
    def port_count(self) -> int:
        return len(self.interfaces)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DeviceType:
        """Build a DeviceType from a catalog dictionary."""
        return cls(
            slug=str(data["slug"]),
            u_height=float(data["u_height"]),
            is_full_depth=bool(data.get("is_full_depth", True)),
            colour=_optional_str(data, "colour"),
            category=DeviceCategory(data.get("category", "other")),
            manufacturer=_optional_str(data, "manufacturer"),
            model=_optional_str(data, "model"),
            interfaces=tuple(
                Interface.from_dict(i) for i in data.get("interfaces") or ()
            ),
            asset_tag=_optional_str(data, "asset_tag"),
            serial_number=_optional_str(data, "serial_number"),
        )

    def to_dict(self) -> dict[str, Any]:
        u_height: float | int = self.u_height
        if float(u_height).is_integer():
            u_height = int(u_height)
        result: dict[str, Any] = {
            "slug": self.slug,
            "u_height": u_height,
            "is_full_depth": self.is_full_depth,
            "category": self.category.value,
        }
        for key in ("colour", "manufacturer", "model", "asset_tag", "serial_number"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.interfaces:
            result["interfaces"] = [i.to_dict() for i in self.interfaces]
        return result


# =============================================================================
# PLACEMENTS AND RACKS
# =============================================================================

@dataclass(frozen=True)
class PlacedDevice:
    """
    An instance of a device type placed in a rack.

    Attributes:
        id: Unique instance id
        device_type: Slug of the DeviceType
        position: Bottom-most occupied unit (1-based, 0.5 steps)
        face: Mounting face
        colour_override: Per-instance colour
        name: User-assigned name
        notes: Free-form notes
        custom_fields: Extra string fields (e.g., {"ip": "10.0.0.1"})
    """
    id: str
    device_type: str
    position: float
    face: Face = Face.FRONT
    colour_override: str | None = None
    name: str | None = None
    notes: str | None = None
    custom_fields: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.position < 1:
            raise ValueError(f"Device {self.id!r}: position must be >= 1, got {self.position}")
        if not _is_half_step(self.position):
            raise ValueError(
                f"Device {self.id!r}: position {self.position} is not a multiple of 0.5"
            )

    def __hash__(self) -> int:
        return hash((self.id, self.device_type, self.position, self.face))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PlacedDevice:
        return cls(
            id=str(data.get("id") or generate_id()),
            device_type=str(data["device_type"]),
            position=float(data["position"]),
            face=Face(data.get("face", "front")),
            colour_override=_optional_str(data, "colour_override"),
            name=_optional_str(data, "name"),
            notes=_optional_str(data, "notes"),
            custom_fields={
                str(k): str(v) for k, v in (data.get("custom_fields") or {}).items()
            },
        )

    def to_dict(self) -> dict[str, Any]:
        position: float | int = self.position
        if float(position).is_integer():
            position = int(position)
        result: dict[str, Any] = {
            "id": self.id,
            "device_type": self.device_type,
            "position": position,
            "face": self.face.value,
        }
        for key in ("colour_override", "name", "notes"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.custom_fields:
            result["custom_fields"] = dict(self.custom_fields)
        return result


def _parse_width(value: Any) -> int:
    # Accept 19, "19" and "19in"
    if isinstance(value, str):
        value = value.strip().removesuffix("in")
    return int(value)


@dataclass(frozen=True)
class Rack:
    """
    A rack and its placed devices.

    Attributes:
        id: Rack id
        name: Display name
        height: Height in units (1-100)
        width: Nominal width class in inches (10, 19, 21 or 23)
        desc_units: Number units top-down instead of bottom-up
        show_rear: Whether the rear face is drawn
        devices: Placed devices
    """
    id: str
    name: str
    height: int
    width: int = 19
    desc_units: bool = False
    show_rear: bool = True
    devices: tuple[PlacedDevice, ...] = ()

    def __post_init__(self):
        if not MIN_RACK_HEIGHT <= self.height <= MAX_RACK_HEIGHT:
            raise ValueError(
                f"Rack {self.id!r}: height {self.height} outside "
                f"{MIN_RACK_HEIGHT}-{MAX_RACK_HEIGHT}"
            )
        if self.width not in RACK_WIDTHS:
            raise ValueError(
                f"Rack {self.id!r}: width {self.width} not one of {list(RACK_WIDTHS)}"
            )
        seen: set[str] = set()
        for device in self.devices:
            if device.id in seen:
                raise ValueError(f"Rack {self.id!r}: duplicate device id {device.id!r}")
            seen.add(device.id)

    def get_device(self, device_id: str) -> PlacedDevice:
        """Return the placement with the given id, or raise KeyError."""
        for device in self.devices:
            if device.id == device_id:
                return device
        raise KeyError(f"No device {device_id!r} in rack {self.id!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Rack:
        return cls(
            id=str(data.get("id") or generate_id()),
            name=str(data.get("name", "")),
            height=int(data["height"]),
            width=_parse_width(data.get("width", 19)),
            desc_units=bool(data.get("desc_units", False)),
            show_rear=bool(data.get("show_rear", True)),
            devices=tuple(PlacedDevice.from_dict(d) for d in data.get("devices") or ()),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "height": self.height,
            "width": self.width,
            "desc_units": self.desc_units,
            "show_rear": self.show_rear,
            "devices": [d.to_dict() for d in self.devices],
        }


# =============================================================================
# HELPERS
# =============================================================================

def generate_id() -> str:
    """Return a fresh UUID4 string."""
    return str(uuid.uuid4())


def default_colour(category: DeviceCategory | str) -> str:
    """Default display colour for a device category."""
    return CATEGORY_COLOURS[DeviceCategory(category).value]


def build_library(device_types: Sequence[DeviceType]) -> dict[str, DeviceType]:
    """
    Index device types by slug.

    Raises:
        ValueError: If two entries share a slug
    """
    library: dict[str, DeviceType] = {}
    for device_type in device_types:
        if device_type.slug in library:
            raise ValueError(f"Duplicate device type slug: {device_type.slug!r}")
        library[device_type.slug] = device_type
    return library


def lookup_device_type(
    device_types: Mapping[str, DeviceType], slug: str
) -> DeviceType:
    """Return the device type for a slug or raise UnknownDeviceTypeError."""
    try:
        return device_types[slug]
    except KeyError:
        raise UnknownDeviceTypeError(slug) from None


def device_type_label(device_type: DeviceType) -> str:
    """Model, then manufacturer, then slug."""
    return device_type.model or device_type.manufacturer or device_type.slug


def device_display_name(
    placed: PlacedDevice, device_types: Mapping[str, DeviceType]
) -> str:
    """
    Human-readable name for a placed device.

    Fallback chain: placement name, device type model, device type
    manufacturer, slug. Empty strings count as missing and an unknown
    slug falls back to the slug itself.
    """
    if placed.name:
        return placed.name

    device_type = device_types.get(placed.device_type)
    if device_type is not None:
        if device_type.model:
            return device_type.model
        if device_type.manufacturer:
            return device_type.manufacturer

    return placed.device_type


def unit_label(rack: Rack, unit: int) -> str:
    """Label of a 1-based unit (counted from the bottom) honouring desc_units."""
    if rack.desc_units:
        return str(rack.height - unit + 1)
    return str(unit)
