"""
Device placement validation and rack edit operations.

A placement is legal when its unit range lies inside the rack and, for
every other placement whose unit range intersects it, the two face
occupancy sets are disjoint.

Face occupancy:
- full-depth device, or a device mounted on "both": {front, rear}
- half-depth device: only its mounting face

So a full-depth device blocks a half-depth device on the opposite face at
the same units, while two half-depth devices back to back do not conflict.

Conflicts are expected outcomes of interactive editing and are returned as
values. Edit operations return a new Rack; the input rack is never changed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, replace

from .models import DeviceType, Face, PlacedDevice, Rack, lookup_device_type
from .rack_geometry import fits_in_rack, occupied_range

logger = logging.getLogger(__name__)

BOTH_FACES = frozenset({Face.FRONT, Face.REAR})


@dataclass(frozen=True)
class PlacementOk:
    """The candidate placement is legal."""

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class PlacementConflict:
    """
    The candidate placement is not legal.

    Attributes:
        conflicting_ids: Ids of placements that collide with the candidate,
            in rack order
        out_of_bounds: True if the candidate does not fit inside the rack
    """
    conflicting_ids: tuple[str, ...] = ()
    out_of_bounds: bool = False

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        """Short human-readable explanation."""
        parts = []
        if self.out_of_bounds:
            parts.append("outside the rack")
        if self.conflicting_ids:
            parts.append("overlaps " + ", ".join(self.conflicting_ids))
        return "; ".join(parts) or "conflict"


PlacementResult = PlacementOk | PlacementConflict


def face_occupancy(face: Face, device_type: DeviceType) -> frozenset[Face]:
    """Faces blocked by a device of this type mounted on ``face``."""
    if device_type.is_full_depth or face == Face.BOTH:
        return BOTH_FACES
    return frozenset({face})


def _ranges_intersect(a: tuple[float, float], b: tuple[float, float]) -> bool:
    return a[0] < b[1] and b[0] < a[1]


def _colliding(
    rack: Rack,
    span: tuple[float, float],
    faces: frozenset[Face],
    device_types: Mapping[str, DeviceType],
    exclude_id: str | None,
) -> Iterator[str]:
    for existing in rack.devices:
        if existing.id == exclude_id:
            continue
        existing_type = lookup_device_type(device_types, existing.device_type)
        existing_span = occupied_range(existing.position, existing_type.u_height)
        if not _ranges_intersect(span, existing_span):
            continue
        if faces & face_occupancy(existing.face, existing_type):
            yield existing.id


def validate_placement(
    rack: Rack,
    candidate: PlacedDevice,
    device_types: Mapping[str, DeviceType],
) -> PlacementResult:
    """
    Check whether a candidate placement is legal in a rack.

    The candidate's own id is skipped, so a moved device is validated
    against everything except its previous position.

    Args:
        rack: Rack with the existing placements
        candidate: Proposed placement
        device_types: Device type library keyed by slug

    Returns:
        PlacementOk, or PlacementConflict with the colliding ids

    Raises:
        UnknownDeviceTypeError: If any referenced slug is not in the library
    """
    device_type = lookup_device_type(device_types, candidate.device_type)
    span = occupied_range(candidate.position, device_type.u_height)
    faces = face_occupancy(candidate.face, device_type)

    out_of_bounds = not fits_in_rack(rack, candidate.position, device_type.u_height)
    conflicts = tuple(_colliding(rack, span, faces, device_types, candidate.id))

    if out_of_bounds or conflicts:
        logger.debug(
            "Rejected %s at U%g (%s): conflicts=%s out_of_bounds=%s",
            candidate.id, candidate.position, candidate.face.value, conflicts, out_of_bounds,
        )
        return PlacementConflict(conflicting_ids=conflicts, out_of_bounds=out_of_bounds)

    return PlacementOk()


def find_valid_positions(
    rack: Rack,
    device_type: DeviceType,
    face: Face,
    device_types: Mapping[str, DeviceType],
) -> list[float]:
    """
    List every bottom position where a device of this type could go.

    Half-unit device types are tried in 0.5 steps, others in whole units.

    Returns:
        Legal positions in ascending order
    """
    step = 1.0 if float(device_type.u_height).is_integer() else 0.5
    faces = face_occupancy(face, device_type)

    positions = []
    position = 1.0
    while fits_in_rack(rack, position, device_type.u_height):
        span = occupied_range(position, device_type.u_height)
        if next(_colliding(rack, span, faces, device_types, None), None) is None:
            positions.append(position)
        position += step
    return positions


# =============================================================================
# EDIT OPERATIONS
# =============================================================================

def _replace_device(rack: Rack, updated: PlacedDevice) -> Rack:
    return replace(
        rack,
        devices=tuple(updated if d.id == updated.id else d for d in rack.devices),
    )


def place_device(
    rack: Rack,
    candidate: PlacedDevice,
    device_types: Mapping[str, DeviceType],
) -> tuple[Rack, PlacementResult]:
    """
    Add a placement to a rack if it is legal.

    Returns:
        (rack, result): the new rack when accepted, the unchanged rack otherwise

    Raises:
        ValueError: If the rack already holds a placement with the same id
    """
    if any(d.id == candidate.id for d in rack.devices):
        raise ValueError(f"Rack {rack.id!r} already has a device with id {candidate.id!r}")

    result = validate_placement(rack, candidate, device_types)
    if not result.ok:
        return rack, result
    return replace(rack, devices=rack.devices + (candidate,)), result


def move_device(
    rack: Rack,
    device_id: str,
    position: float,
    device_types: Mapping[str, DeviceType],
    face: Face | None = None,
) -> tuple[Rack, PlacementResult]:
    """
    Move a placement to a new position and optionally a new face.

    Raises:
        KeyError: If no placement has that id
    """
    current = rack.get_device(device_id)
    moved = replace(current, position=position, face=face or current.face)

    result = validate_placement(rack, moved, device_types)
    if not result.ok:
        return rack, result
    return _replace_device(rack, moved), result


def change_device_type(
    rack: Rack,
    device_id: str,
    slug: str,
    device_types: Mapping[str, DeviceType],
) -> tuple[Rack, PlacementResult]:
    """
    Swap a placement's device type (e.g. a resize from 1U to 2U).

    Raises:
        KeyError: If no placement has that id
    """
    current = rack.get_device(device_id)
    resized = replace(current, device_type=slug)

    result = validate_placement(rack, resized, device_types)
    if not result.ok:
        return rack, result
    return _replace_device(rack, resized), result


def remove_device(rack: Rack, device_id: str) -> Rack:
    """
    Remove a placement.

    Raises:
        KeyError: If no placement has that id
    """
    rack.get_device(device_id)
    return replace(rack, devices=tuple(d for d in rack.devices if d.id != device_id))


def find_conflicts(
    rack: Rack, device_types: Mapping[str, DeviceType]
) -> dict[str, PlacementConflict]:
    """
    Validate every placement of a rack against the others.

    Returns:
        Conflict results keyed by placement id (empty when the rack is valid)
    """
    problems: dict[str, PlacementConflict] = {}
    for device in rack.devices:
        result = validate_placement(rack, device, device_types)
        if isinstance(result, PlacementConflict):
            problems[device.id] = result
    return problems
