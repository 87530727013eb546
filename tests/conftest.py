"""Shared fixtures: a small device type library and racks built from it."""

import pytest

from rackgen.models import (
    DeviceCategory,
    DeviceType,
    Face,
    Interface,
    PlacedDevice,
    Rack,
    build_library,
)


def switch_interfaces(copper: int = 44, fiber: int = 4) -> tuple[Interface, ...]:
    """Copper ports followed by SFP+ uplinks."""
    return tuple(
        [Interface(f"ge{i + 1}", "1000base-t") for i in range(copper)]
        + [Interface(f"xe{i + 1}", "10gbase-x-sfpp") for i in range(fiber)]
    )


@pytest.fixture
def device_types() -> list[DeviceType]:
    return [
        DeviceType(
            slug="server-2u",
            u_height=2,
            is_full_depth=True,
            category=DeviceCategory.SERVER,
            manufacturer="Dell",
            model="PowerEdge R740",
            interfaces=(
                Interface("idrac", "1000base-t", mgmt_only=True),
                Interface("eno1", "1000base-t"),
            ),
            serial_number="SN-0001",
        ),
        DeviceType(
            slug="switch-48",
            u_height=1,
            is_full_depth=False,
            category=DeviceCategory.NETWORK,
            manufacturer="Ubiquiti",
            model="USW-48",
            interfaces=switch_interfaces(),
        ),
        DeviceType(
            slug="panel-1u",
            u_height=1,
            is_full_depth=False,
            category=DeviceCategory.PATCH_PANEL,
        ),
        DeviceType(
            slug="shelf-half",
            u_height=0.5,
            is_full_depth=True,
            category=DeviceCategory.SHELF,
            colour="#808080",
        ),
    ]


@pytest.fixture
def library(device_types) -> dict[str, DeviceType]:
    return build_library(device_types)


@pytest.fixture
def empty_rack() -> Rack:
    return Rack(id="r1", name="Lab", height=42)


@pytest.fixture
def populated_rack() -> Rack:
    """Server at U1-2, switch at U10 front, patch panel at U10 rear."""
    return Rack(
        id="r1",
        name="Lab",
        height=12,
        devices=(
            PlacedDevice(id="srv", device_type="server-2u", position=1, name="db01",
                         custom_fields={"ip": "10.0.0.21"}),
            PlacedDevice(id="sw", device_type="switch-48", position=10, face=Face.FRONT,
                         notes="Core switch for the lab network"),
            PlacedDevice(id="pp", device_type="panel-1u", position=10, face=Face.REAR),
        ),
    )
