#!/usr/bin/env python3
"""
Tests for the port layout packer.

Tests cover:
- Hidden below the zoom threshold
- Two-row packing of 48-port 1U switches
- Reduced-radius retries and grouping on narrow devices
- Row-major positions, spacing floor and footprint
- Interface type grouping and colours
"""

import pytest

from rackgen.config import PortLayoutConfig
from rackgen.constants import PORT_COLOURS
from rackgen.models import Interface
from rackgen.port_layout import (
    Grouped,
    Hidden,
    Individual,
    PortBadge,
    calculate_port_layout,
    group_interfaces,
    interface_colour,
)

ONE_U = 22.0


def _interfaces(*counts: tuple[str, int]) -> tuple[Interface, ...]:
    result = []
    for type_tag, count in counts:
        result.extend(Interface(f"{type_tag}-{i}", type_tag) for i in range(count))
    return tuple(result)


# =============================================================================
# DECISIONS
# =============================================================================


class TestDecision:
    def test_48_ports_full_width_two_rows(self):
        layout = calculate_port_layout(186, ONE_U, 48, 1.2)
        assert isinstance(layout, Individual)
        assert layout.rows == 2
        assert layout.ports_per_row == 24
        assert layout.spacing >= 2
        assert len(layout.positions) == 48

    def test_48_ports_needs_reduced_radius(self):
        layout = calculate_port_layout(186, ONE_U, 48, 1.2)
        assert layout.radius == 2.5
        assert layout.spacing == pytest.approx((186 - 24 * 5) / 25)

    def test_48_ports_narrow_rack_groups(self):
        layout = calculate_port_layout(82, ONE_U, 48, 1.2)
        assert isinstance(layout, Grouped)

    @pytest.mark.parametrize("width", [82, 186, 500])
    @pytest.mark.parametrize("ports", [1, 24, 48])
    def test_zoomed_out_hides(self, width: float, ports: int):
        assert calculate_port_layout(width, ONE_U, ports, 0.3) == Hidden()

    def test_hide_threshold_is_exclusive(self):
        assert isinstance(calculate_port_layout(186, ONE_U, 8, 0.5), Individual)

    def test_no_ports_hidden(self):
        assert calculate_port_layout(186, ONE_U, 0, 1.0) == Hidden()

    def test_few_ports_default_radius(self):
        layout = calculate_port_layout(186, ONE_U, 8, 1.0)
        assert layout.radius == 3
        assert layout.ports_per_row == 4
        assert layout.rows == 2

    def test_taller_device_uses_more_rows(self):
        layout = calculate_port_layout(186, 2 * ONE_U, 48, 1.0)
        assert layout.rows == 5
        assert layout.ports_per_row == 10
        assert layout.radius == 3

    def test_narrow_device_shrinks_radius_first(self):
        wide = calculate_port_layout(186, ONE_U, 24, 1.0)
        narrow = calculate_port_layout(82, ONE_U, 24, 1.0)
        assert isinstance(narrow, Individual)
        assert narrow.radius == 2
        assert narrow.radius < wide.radius

    def test_too_short_for_a_row_groups(self):
        assert isinstance(calculate_port_layout(186, 8, 4, 1.0), Grouped)

    @pytest.mark.parametrize("width", [0, 1, 5, 20])
    def test_tiny_sizes_never_raise(self, width: float):
        layout = calculate_port_layout(width, ONE_U, 48, 1.0)
        assert isinstance(layout, (Grouped, Individual))

    def test_detail_flag(self):
        assert not calculate_port_layout(186, ONE_U, 8, 1.2).detailed
        assert calculate_port_layout(186, ONE_U, 8, 1.5).detailed

    def test_interfaces_decide_port_count(self):
        interfaces = _interfaces(("1000base-t", 2))
        layout = calculate_port_layout(186, ONE_U, 3, 1.0, interfaces=interfaces)
        assert isinstance(layout, Individual)
        assert [p.interface for p in layout.positions] == list(interfaces)

    def test_interfaces_decide_port_count_when_grouped(self):
        layout = calculate_port_layout(186, 8, 48, 1.0, interfaces=_interfaces(("sfp+", 4)))
        assert layout == Grouped((PortBadge("sfp+", 4, PORT_COLOURS["fiber"]),))

    def test_custom_config(self):
        config = PortLayoutConfig(hide_zoom=2.0)
        assert calculate_port_layout(186, ONE_U, 8, 1.5, config=config) == Hidden()

    def test_invalid_config(self):
        with pytest.raises(ValueError):
            PortLayoutConfig(radius=2, min_radius=3)


# =============================================================================
# POSITIONS
# =============================================================================


class TestPositions:
    @pytest.mark.parametrize(
        "width,height,ports",
        [(186, ONE_U, 48), (186, ONE_U, 7), (186, 2 * ONE_U, 52), (82, ONE_U, 24), (268, ONE_U, 48)],
    )
    def test_spacing_and_footprint(self, width: float, height: float, ports: int):
        layout = calculate_port_layout(width, height, ports, 1.0)
        assert isinstance(layout, Individual)
        assert layout.spacing >= 2
        assert min(p.x - p.radius for p in layout.positions) >= 0
        assert max(p.x + p.radius for p in layout.positions) <= width
        assert max(p.y + p.radius for p in layout.positions) + layout.y_offset <= height

    def test_row_major(self):
        layout = calculate_port_layout(186, ONE_U, 48, 1.0)
        first, second, next_row = layout.positions[0], layout.positions[1], layout.positions[24]
        r, s = layout.radius, layout.spacing
        assert first.x == pytest.approx(s + r)
        assert first.y == pytest.approx(r)
        assert second.x == pytest.approx(first.x + 2 * r + s)
        assert next_row.x == pytest.approx(first.x)
        assert next_row.y == pytest.approx(first.y + 2 * r + layout.row_gap)

    def test_partial_last_row(self):
        layout = calculate_port_layout(186, ONE_U, 7, 1.0)
        rows = {}
        for p in layout.positions:
            rows.setdefault(p.y, []).append(p)
        assert [len(r) for r in rows.values()] == [4, 3]

    def test_interfaces_attached(self):
        interfaces = _interfaces(("1000base-t", 6), ("10gbase-x-sfpp", 2))
        layout = calculate_port_layout(186, ONE_U, 8, 1.5, interfaces=interfaces)
        assert [p.interface for p in layout.positions] == list(interfaces)
        assert [p.index for p in layout.positions] == list(range(8))


# =============================================================================
# GROUPING
# =============================================================================


class TestGrouping:
    def test_badges_in_first_occurrence_order(self):
        interfaces = _interfaces(("10gbase-x-sfpp", 2), ("1000base-t", 44), ("10gbase-x-sfpp", 2))
        layout = calculate_port_layout(82, ONE_U, 48, 1.2, interfaces=interfaces)
        assert isinstance(layout, Grouped)
        assert layout.badges == (
            PortBadge("10gbase-x-sfpp", 4, PORT_COLOURS["fiber"]),
            PortBadge("1000base-t", 44, PORT_COLOURS["copper"]),
        )

    def test_generic_badge_without_interfaces(self):
        assert group_interfaces(48) == (PortBadge("port", 48, PORT_COLOURS["other"]),)

    def test_badge_counts_sum_to_ports(self):
        interfaces = _interfaces(("1000base-t", 20), ("25gbase-x-sfp28", 4), ("other", 3))
        assert sum(b.count for b in group_interfaces(27, interfaces)) == 27


class TestInterfaceColour:
    @pytest.mark.parametrize(
        "type_tag,expected",
        [
            ("1000base-t", "copper"),
            ("10gbase-t", "copper"),
            ("10gbase-x-sfpp", "fiber"),
            ("100gbase-x-qsfp28", "fiber"),
            ("1000base-x-gbic", "fiber"),
            ("virtual", "other"),
        ],
    )
    def test_type_classes(self, type_tag: str, expected: str):
        assert interface_colour(type_tag) == PORT_COLOURS[expected]

    def test_mgmt_overrides_type(self):
        assert interface_colour("1000base-t", mgmt_only=True) == PORT_COLOURS["mgmt"]
