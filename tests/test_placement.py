#!/usr/bin/env python3
"""
Tests for placement validation and rack edits.

Tests cover:
- The cross-face blocking rule (full depth blocks both faces)
- Out-of-bounds candidates
- Free slot search
- Place, move, resize and remove operations
- Whole-rack conflict reports
"""

import itertools

import pytest

from rackgen.models import DeviceType, Face, PlacedDevice, Rack, UnknownDeviceTypeError
from rackgen.placement import (
    BOTH_FACES,
    PlacementConflict,
    PlacementOk,
    change_device_type,
    face_occupancy,
    find_conflicts,
    find_valid_positions,
    move_device,
    place_device,
    remove_device,
    validate_placement,
)
from rackgen.rack_geometry import occupied_range


def _rack(*devices: PlacedDevice, height: int = 42) -> Rack:
    return Rack(id="r", name="", height=height, devices=devices)


# =============================================================================
# FACE OCCUPANCY
# =============================================================================


class TestFaceOccupancy:
    def test_full_depth_blocks_both_faces(self, library):
        assert face_occupancy(Face.FRONT, library["server-2u"]) == BOTH_FACES
        assert face_occupancy(Face.REAR, library["server-2u"]) == BOTH_FACES

    def test_half_depth_blocks_own_face(self, library):
        assert face_occupancy(Face.FRONT, library["panel-1u"]) == {Face.FRONT}
        assert face_occupancy(Face.REAR, library["panel-1u"]) == {Face.REAR}

    def test_both_mounting_blocks_both_faces(self, library):
        assert face_occupancy(Face.BOTH, library["panel-1u"]) == BOTH_FACES


# =============================================================================
# VALIDATION
# =============================================================================


class TestValidatePlacement:
    def test_full_depth_then_rear_half_then_front(self, library):
        """Full-depth 2U at U1; rear half-depth at U1 collides; front 1U collides."""
        rack, result = place_device(
            _rack(), PlacedDevice(id="srv", device_type="server-2u", position=1), library
        )
        assert result.ok

        rear = PlacedDevice(id="rear", device_type="panel-1u", position=1, face=Face.REAR)
        front = PlacedDevice(id="front", device_type="panel-1u", position=1, face=Face.FRONT)

        # The full-depth server occupies the rear face too
        assert validate_placement(rack, rear, library) == PlacementConflict(conflicting_ids=("srv",))
        assert validate_placement(rack, front, library) == PlacementConflict(conflicting_ids=("srv",))

    def test_half_depth_rear_accepted_beside_half_depth_front(self, library):
        rack = _rack(PlacedDevice(id="sw", device_type="switch-48", position=1, face=Face.FRONT))
        rear = PlacedDevice(id="pp", device_type="panel-1u", position=1, face=Face.REAR)
        assert validate_placement(rack, rear, library) == PlacementOk()

    def test_full_depth_blocked_by_rear_half_depth(self, library):
        rack = _rack(PlacedDevice(id="pp", device_type="panel-1u", position=2, face=Face.REAR))
        candidate = PlacedDevice(id="srv", device_type="server-2u", position=1, face=Face.FRONT)
        result = validate_placement(rack, candidate, library)
        assert not result.ok
        assert result.conflicting_ids == ("pp",)

    def test_adjacent_units_do_not_collide(self, library):
        rack = _rack(PlacedDevice(id="srv", device_type="server-2u", position=1))
        above = PlacedDevice(id="sw", device_type="switch-48", position=3)
        assert validate_placement(rack, above, library).ok

    def test_half_unit_overlap(self, library):
        rack = _rack(PlacedDevice(id="shelf", device_type="shelf-half", position=3))
        assert not validate_placement(
            rack, PlacedDevice(id="sw", device_type="switch-48", position=2.5), library
        ).ok
        assert validate_placement(
            rack, PlacedDevice(id="sw", device_type="switch-48", position=3.5), library
        ).ok

    def test_multiple_conflicts_in_rack_order(self, library):
        rack = _rack(
            PlacedDevice(id="a", device_type="panel-1u", position=2, face=Face.REAR),
            PlacedDevice(id="b", device_type="panel-1u", position=1, face=Face.FRONT),
        )
        result = validate_placement(
            rack, PlacedDevice(id="srv", device_type="server-2u", position=1), library
        )
        assert result.conflicting_ids == ("a", "b")

    def test_out_of_bounds(self, library):
        result = validate_placement(
            _rack(), PlacedDevice(id="srv", device_type="server-2u", position=42), library
        )
        assert result == PlacementConflict(out_of_bounds=True)
        assert "outside the rack" in result.describe()

    def test_own_id_is_skipped(self, library):
        placed = PlacedDevice(id="srv", device_type="server-2u", position=1)
        assert validate_placement(_rack(placed), placed, library).ok

    def test_unknown_device_type(self, library):
        with pytest.raises(UnknownDeviceTypeError):
            validate_placement(_rack(), PlacedDevice(id="x", device_type="ghost", position=1), library)

    def test_describe_lists_ids(self):
        conflict = PlacementConflict(conflicting_ids=("a", "b"), out_of_bounds=True)
        assert conflict.describe() == "outside the rack; overlaps a, b"

    def test_accepted_placements_never_intersect(self, library):
        """Greedy placement of many candidates leaves no pairwise overlap."""
        rack = _rack(height=8)
        candidates = itertools.product(
            ["server-2u", "switch-48", "panel-1u", "shelf-half"],
            [1, 1.5, 2, 3, 4, 5.5, 6, 7],
            [Face.FRONT, Face.REAR, Face.BOTH],
        )
        for i, (slug, position, face) in enumerate(candidates):
            candidate = PlacedDevice(id=f"d{i}", device_type=slug, position=position, face=face)
            rack, _ = place_device(rack, candidate, library)

        assert len(rack.devices) > 1
        for a, b in itertools.combinations(rack.devices, 2):
            ta, tb = library[a.device_type], library[b.device_type]
            ra = occupied_range(a.position, ta.u_height)
            rb = occupied_range(b.position, tb.u_height)
            units_overlap = ra[0] < rb[1] and rb[0] < ra[1]
            faces_overlap = face_occupancy(a.face, ta) & face_occupancy(b.face, tb)
            assert not (units_overlap and faces_overlap), (a.id, b.id)


# =============================================================================
# FREE SLOTS
# =============================================================================


class TestFindValidPositions:
    def test_positions_above_server(self, library):
        rack = _rack(PlacedDevice(id="srv", device_type="server-2u", position=1), height=4)
        assert find_valid_positions(rack, library["panel-1u"], Face.FRONT, library) == [3.0, 4.0]

    def test_half_unit_steps(self, library):
        rack = _rack(PlacedDevice(id="srv", device_type="server-2u", position=1), height=4)
        positions = find_valid_positions(rack, library["shelf-half"], Face.FRONT, library)
        assert positions == [3.0, 3.5, 4.0, 4.5]

    def test_opposite_face_of_half_depth_is_free(self, library):
        rack = _rack(PlacedDevice(id="pp", device_type="panel-1u", position=1, face=Face.FRONT), height=2)
        assert find_valid_positions(rack, library["panel-1u"], Face.REAR, library) == [1.0, 2.0]
        assert find_valid_positions(rack, library["server-2u"], Face.REAR, library) == []

    def test_results_validate(self, library, populated_rack):
        for slug in library:
            device_type = library[slug]
            for face in (Face.FRONT, Face.REAR):
                for position in find_valid_positions(populated_rack, device_type, face, library):
                    candidate = PlacedDevice(id="new", device_type=slug, position=position, face=face)
                    assert validate_placement(populated_rack, candidate, library).ok


# =============================================================================
# EDIT OPERATIONS
# =============================================================================


class TestEdits:
    def test_place_accepted(self, library, empty_rack):
        placed = PlacedDevice(id="srv", device_type="server-2u", position=1)
        rack, result = place_device(empty_rack, placed, library)
        assert result.ok
        assert rack.devices == (placed,)
        assert empty_rack.devices == ()

    def test_place_rejected_returns_same_rack(self, library, populated_rack):
        rack, result = place_device(
            populated_rack, PlacedDevice(id="new", device_type="panel-1u", position=2), library
        )
        assert not result.ok
        assert rack is populated_rack

    def test_place_duplicate_id(self, library, populated_rack):
        with pytest.raises(ValueError, match="already has"):
            place_device(
                populated_rack, PlacedDevice(id="srv", device_type="panel-1u", position=5), library
            )

    def test_move(self, library, populated_rack):
        rack, result = move_device(populated_rack, "pp", 5, library)
        assert result.ok
        assert rack.get_device("pp").position == 5
        assert rack.get_device("pp").face == Face.REAR

    def test_move_onto_itself_is_allowed(self, library, populated_rack):
        _, result = move_device(populated_rack, "srv", 1, library)
        assert result.ok

    def test_move_to_other_face(self, library, populated_rack):
        # The switch holds U10 front
        _, result = move_device(populated_rack, "pp", 10, library, face=Face.FRONT)
        assert result.conflicting_ids == ("sw",)

    def test_move_missing(self, library, populated_rack):
        with pytest.raises(KeyError):
            move_device(populated_rack, "nope", 3, library)

    def test_resize_into_conflict(self, library, populated_rack):
        # Switch at U10 grown to a 2U full-depth server collides with the rear panel
        rack, result = change_device_type(populated_rack, "sw", "server-2u", library)
        assert result.conflicting_ids == ("pp",)
        assert rack is populated_rack

    def test_resize_accepted(self, library, populated_rack):
        rack, result = change_device_type(populated_rack, "pp", "shelf-half", library)
        assert not result.ok  # full depth shelf blocks the front switch

        rack, result = change_device_type(populated_rack, "srv", "switch-48", library)
        assert result.ok
        assert rack.get_device("srv").device_type == "switch-48"

    def test_remove_then_place_restores(self, library, populated_rack):
        placed = populated_rack.get_device("sw")
        removed = remove_device(populated_rack, "sw")
        assert len(removed.devices) == 2

        restored, result = place_device(removed, placed, library)
        assert result.ok
        assert set(restored.devices) == set(populated_rack.devices)

    def test_remove_missing(self, populated_rack):
        with pytest.raises(KeyError):
            remove_device(populated_rack, "nope")


class TestFindConflicts:
    def test_valid_rack(self, library, populated_rack):
        assert find_conflicts(populated_rack, library) == {}

    def test_overlapping_rack(self, library):
        rack = _rack(
            PlacedDevice(id="srv", device_type="server-2u", position=1),
            PlacedDevice(id="pp", device_type="panel-1u", position=2, face=Face.REAR),
            PlacedDevice(id="top", device_type="server-2u", position=42),
        )
        problems = find_conflicts(rack, library)
        assert problems["srv"].conflicting_ids == ("pp",)
        assert problems["pp"].conflicting_ids == ("srv",)
        assert problems["top"].out_of_bounds
        assert set(problems) == {"srv", "pp", "top"}

    def test_new_type_in_library(self, library, populated_rack):
        library = dict(library, blank=DeviceType(slug="blank", u_height=1))
        assert find_conflicts(populated_rack, library) == {}
