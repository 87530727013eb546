"""
Port layout packer.

Decides how a device's ports are drawn inside its rectangle at a given zoom.
The result degrades gracefully as space shrinks:

    Individual -> Individual with a smaller radius -> Grouped -> Hidden

Individual
    One circle per port, packed row-major into as many rows as the device
    height allows. A 1U 48-port switch therefore comes out as 2 rows of 24,
    matching the physical hardware, instead of one unreadable row.
Grouped
    One badge per distinct interface type with a count, used when even the
    smallest radius would squeeze ports closer than the minimum spacing.
Hidden
    Nothing, when zoomed out too far for ports to matter.

Narrow racks need no special case: a smaller device width simply reaches the
spacing floor sooner and groups earlier.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from .config import PortLayoutConfig
from .constants import PORT_COLOURS
from .models import Interface

logger = logging.getLogger(__name__)

DEFAULT_PORT_LAYOUT = PortLayoutConfig()

GENERIC_PORT_TYPE = "port"


@dataclass(frozen=True)
class PortPosition:
    """
    Centre of one port, relative to the top-left of the port area.

    Attributes:
        index: Port index in interface order
        x, y: Centre coordinates
        radius: Circle radius
        interface: The interface drawn here, when known
    """
    index: int
    x: float
    y: float
    radius: float
    interface: Interface | None = None


@dataclass(frozen=True)
class PortBadge:
    """Summary of all ports of one interface type."""
    type: str
    count: int
    colour: str


@dataclass(frozen=True)
class Hidden:
    """Ports are not drawn."""


@dataclass(frozen=True)
class Grouped:
    """One badge per interface type, in order of first occurrence."""
    badges: tuple[PortBadge, ...]


@dataclass(frozen=True)
class Individual:
    """
    One circle per port.

    Attributes:
        rows: Number of rows used
        ports_per_row: Ports in each full row
        radius: Circle radius
        spacing: Horizontal gap between ports and to the device edges
        row_gap: Vertical gap between rows
        y_offset: Top of the port area below the device top
        positions: Port centres, row-major
        detailed: True when zoomed in far enough to label each port
    """
    rows: int
    ports_per_row: int
    radius: float
    spacing: float
    row_gap: float
    y_offset: float
    positions: tuple[PortPosition, ...]
    detailed: bool = False


LayoutDecision = Hidden | Grouped | Individual


def interface_colour(interface_type: str, mgmt_only: bool = False) -> str:
    """
    Badge/port colour for an interface type tag.

    SFP/QSFP and "-x" optical classes are fiber, "base-t" is copper.
    """
    if mgmt_only:
        return PORT_COLOURS["mgmt"]

    tag = interface_type.lower()
    if "sfp" in tag or "base-x" in tag or tag.endswith("-x") or "fiber" in tag:
        return PORT_COLOURS["fiber"]
    if "base-t" in tag or "copper" in tag:
        return PORT_COLOURS["copper"]
    return PORT_COLOURS["other"]


def group_interfaces(
    port_count: int, interfaces: Sequence[Interface] | None = None
) -> tuple[PortBadge, ...]:
    """
    Count ports per interface type, ordered by first occurrence.

    Without an interface list all ports form one generic badge.
    """
    if not interfaces:
        return (PortBadge(GENERIC_PORT_TYPE, port_count, PORT_COLOURS["other"]),)

    counts: dict[str, int] = {}
    for interface in interfaces:
        counts[interface.type] = counts.get(interface.type, 0) + 1

    return tuple(
        PortBadge(type=t, count=n, colour=interface_colour(t))
        for t, n in counts.items()
    )


def _spacing(width: float, ports_per_row: int, radius: float) -> float:
    return (width - ports_per_row * 2 * radius) / (ports_per_row + 1)


def _radii(config: PortLayoutConfig) -> list[float]:
    # Default radius first, then smaller ones down to the minimum
    radii = []
    radius = config.radius
    while radius > config.min_radius + 1e-9:
        radii.append(radius)
        radius -= config.radius_step
    radii.append(config.min_radius)
    return radii


def calculate_port_layout(
    device_width_px: float,
    device_height_px: float,
    port_count: int,
    zoom: float,
    *,
    interfaces: Sequence[Interface] | None = None,
    config: PortLayoutConfig = DEFAULT_PORT_LAYOUT,
) -> LayoutDecision:
    """
    Decide how to draw a device's ports.

    Args:
        device_width_px: Width available for ports
        device_height_px: Height of the device rectangle
        port_count: Number of ports; ignored when interfaces are given
        zoom: Current zoom level
        interfaces: The ports themselves, for type grouping and labels
        config: Packer thresholds

    Returns:
        Hidden, Grouped or Individual. Never raises.
    """
    if interfaces is not None:
        port_count = len(interfaces)

    if zoom < config.hide_zoom or port_count <= 0:
        return Hidden()

    max_rows = math.floor(
        (device_height_px - config.y_offset) / (2 * config.radius + config.row_gap)
    )
    if max_rows < 1:
        logger.debug("No room for a port row in %.1fpx; grouping", device_height_px)
        return Grouped(group_interfaces(port_count, interfaces))

    ports_per_row = math.ceil(port_count / max_rows)
    rows = math.ceil(port_count / ports_per_row)

    for radius in _radii(config):
        spacing = _spacing(device_width_px, ports_per_row, radius)
        if spacing >= config.min_spacing:
            return _individual(
                port_count, rows, ports_per_row, radius, spacing, zoom, interfaces, config
            )

    logger.debug(
        "%d ports in %.1fpx fall below %.1fpx spacing; grouping",
        port_count, device_width_px, config.min_spacing,
    )
    return Grouped(group_interfaces(port_count, interfaces))


def _individual(
    port_count: int,
    rows: int,
    ports_per_row: int,
    radius: float,
    spacing: float,
    zoom: float,
    interfaces: Sequence[Interface] | None,
    config: PortLayoutConfig,
) -> Individual:
    positions = []
    for index in range(port_count):
        row = index // ports_per_row
        col = index % ports_per_row
        positions.append(PortPosition(
            index=index,
            x=spacing + col * (2 * radius + spacing) + radius,
            y=row * (2 * radius + config.row_gap) + radius,
            radius=radius,
            interface=interfaces[index] if interfaces else None,
        ))

    return Individual(
        rows=rows,
        ports_per_row=ports_per_row,
        radius=radius,
        spacing=spacing,
        row_gap=config.row_gap,
        y_offset=config.y_offset,
        positions=tuple(positions),
        detailed=zoom >= config.detail_zoom,
    )
