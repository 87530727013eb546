"""
Rack geometry: rack units to pixel rectangles.

Units are counted from the bottom (unit 1) while pixel y grows downward
from the top of the rack frame. A device at ``position`` with height ``h``
occupies the half-open unit interval [position, position + h).
"""

from __future__ import annotations

from .config import GeometryConfig
from .constants import BASE_RACK_WIDTH_IN
from .models import DeviceType, PlacedDevice, Rack
from .rect import Rect

DEFAULT_GEOMETRY = GeometryConfig()


class OutOfBoundsError(ValueError):
    """Raised when a device's unit range falls outside its rack."""


def occupied_range(position: float, u_height: float) -> tuple[float, float]:
    """Half-open unit interval (start, end) covered by a device."""
    return (position, position + u_height)


def fits_in_rack(rack: Rack, position: float, u_height: float) -> bool:
    """True if [position, position + u_height) lies within units 1..rack.height."""
    start, end = occupied_range(position, u_height)
    return start >= 1 and end <= rack.height + 1


def rack_width_px(width: int, config: GeometryConfig = DEFAULT_GEOMETRY) -> float:
    """
    Frame width in pixels for a nominal rack width class.

    Widths scale linearly from the 19" base and snap to whole pixels
    (220 px for 19", 116 px for 10" with the default config).
    """
    return float(round(config.base_rack_width_px * width / BASE_RACK_WIDTH_IN))


def interior_width_px(width: int, config: GeometryConfig = DEFAULT_GEOMETRY) -> float:
    """Usable device width between the two rails."""
    return rack_width_px(width, config) - 2 * config.rail_width_px


def rack_frame_rect(rack: Rack, config: GeometryConfig = DEFAULT_GEOMETRY) -> Rect:
    """Outer frame of the rack: rails on both sides, top and bottom."""
    return Rect(
        x=0.0,
        y=0.0,
        width=rack_width_px(rack.width, config),
        height=rack.height * config.unit_height_px + 2 * config.rail_offset_px,
    )


def unit_y(rack: Rack, position: float, u_height: float,
           config: GeometryConfig = DEFAULT_GEOMETRY) -> float:
    """Top pixel y of the span starting at ``position`` with ``u_height`` units."""
    return (rack.height - position - u_height + 1) * config.unit_height_px + config.rail_offset_px


def unit_rect(rack: Rack, unit: int, config: GeometryConfig = DEFAULT_GEOMETRY) -> Rect:
    """Row of a single unit across the interior (used for U labels and slots)."""
    return Rect(
        x=config.rail_width_px,
        y=unit_y(rack, unit, 1, config),
        width=interior_width_px(rack.width, config),
        height=config.unit_height_px,
    )


def compute_device_rect(
    rack: Rack,
    placement: PlacedDevice,
    device_type: DeviceType,
    config: GeometryConfig = DEFAULT_GEOMETRY,
) -> Rect:
    """
    Compute the pixel rectangle of a placed device.

    Args:
        rack: Containing rack
        placement: The placed device
        device_type: Its device type
        config: Pixel geometry

    Returns:
        Rect relative to the rack frame's top-left corner, unrounded

    Raises:
        OutOfBoundsError: If the device does not fit in the rack's units
    """
    if not fits_in_rack(rack, placement.position, device_type.u_height):
        start, end = occupied_range(placement.position, device_type.u_height)
        raise OutOfBoundsError(
            f"Device {placement.id!r} occupies units {start:g}-{end - 1:g}, "
            f"outside rack {rack.id!r} (1-{rack.height})"
        )

    return Rect(
        x=config.rail_width_px,
        y=unit_y(rack, placement.position, device_type.u_height, config),
        width=interior_width_px(rack.width, config),
        height=device_type.u_height * config.unit_height_px,
    )
