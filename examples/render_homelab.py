#!/usr/bin/env python3
"""
Homelab Rack Example

Loads examples/homelab.yaml and renders:
- Flat front view with an IP annotation column
- Flat front and rear views side by side
- Isometric front and rear views

Also shows the placement API: finding free slots for a new 1U device and
trying a placement that collides with an existing one.
"""

from pathlib import Path

from rackgen import (
    PlacedDevice,
    RackLayoutConfig,
    RenderOptions,
    find_valid_positions,
    place_device,
    render,
    write_svg,
)
from rackgen.models import Face


def main():
    # Create output directory
    here = Path(__file__).parent
    output_dir = here / "output"
    output_dir.mkdir(exist_ok=True)

    print("Homelab Rack Example")
    print("=" * 50)

    layout = RackLayoutConfig.from_yaml(here / "homelab.yaml")
    rack, library = layout.rack, layout.library

    # Free slots for another patch panel on the front
    free = find_valid_positions(rack, library["patch-panel-24"], Face.FRONT, library)
    print(f"Free front slots for a 1U half-depth device: {free}")

    # U5 is taken by web01, which is full depth
    _, result = place_device(
        rack,
        PlacedDevice(id="new-panel", device_type="patch-panel-24", position=5, face=Face.REAR),
        library,
    )
    print(f"Rear panel at U5: {'ok' if result.ok else result.describe()}")

    views = {
        "homelab_front.svg": RenderOptions(zoom=1.2, annotation_field="ip"),
        "homelab_dual.svg": RenderOptions(view="dual", zoom=1.2),
        "homelab_iso.svg": RenderOptions(projection="isometric", view="dual", theme="light"),
    }
    for filename, options in views.items():
        path = write_svg(render(rack, library, options), output_dir / filename)
        print(f"Exported SVG: {path}")


if __name__ == "__main__":
    main()
