"""
Command line interface for rack layout files.

Commands:
- render: Draw a layout file as an SVG rack elevation
- validate: Check a layout file for placement conflicts

Usage:
    rackgen render lab.yaml -o lab.svg --dual
    rackgen render lab.yaml --isometric --theme light
    rackgen validate lab.yaml
"""

import logging
from dataclasses import replace
from pathlib import Path

import click
import yaml

from .colors import InvalidColorFormat, parse_hex
from .config import ANNOTATION_FIELDS, THEMES, RackLayoutConfig, RenderOptions
from .models import Face, device_display_name
from .placement import find_conflicts
from .rack_geometry import fits_in_rack
from .renderer import render as render_rack
from .svg import write_svg

LOAD_ERRORS = (OSError, ValueError, LookupError, yaml.YAMLError)


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def cli(verbose: bool):
    """rackgen - rack elevation diagrams from YAML layouts."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


def _load(layout_file: Path) -> RackLayoutConfig:
    try:
        return RackLayoutConfig.from_yaml(layout_file)
    except LOAD_ERRORS as e:
        click.echo(f"Error loading layout: {e}", err=True)
        raise SystemExit(1) from None


@cli.command()
@click.argument("layout_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--output", "-o",
    type=click.Path(path_type=Path),
    default=None,
    help="Output SVG path (default: layout file name with .svg).",
)
@click.option("--isometric", is_flag=True, help="Draw an isometric projection.")
@click.option("--dual", is_flag=True, help="Draw front and rear views side by side.")
@click.option(
    "--face",
    type=click.Choice(["front", "rear"]),
    default=None,
    help="Face to draw in single view (default: front).",
)
@click.option(
    "--theme",
    type=click.Choice(sorted(THEMES)),
    default=None,
    help="Colour theme (default: dark).",
)
@click.option("--zoom", type=float, default=None, help="Zoom level; controls port detail.")
@click.option("--no-legend", is_flag=True, help="Omit the device type legend.")
@click.option(
    "--annotate",
    type=click.Choice(ANNOTATION_FIELDS),
    default=None,
    help="Add an annotation column showing this field.",
)
def render(
    layout_file: Path,
    output: Path | None,
    isometric: bool,
    dual: bool,
    face: str | None,
    theme: str | None,
    zoom: float | None,
    no_legend: bool,
    annotate: str | None,
):
    """
    Render a layout file to SVG.

    Options given on the command line override the file's ``settings``.

    Example:
        rackgen render lab.yaml -o lab.svg --dual --annotate ip
    """
    layout = _load(layout_file)
    output = output or layout_file.with_suffix(".svg")

    try:
        options = RenderOptions.from_settings(
            layout.settings,
            projection="isometric" if isometric else None,
            view="dual" if dual else None,
            face=face,
            theme=theme,
            zoom=zoom,
            show_legend=False if no_legend else None,
            annotation_field=annotate,
        )
        scene = render_rack(layout.rack, layout.library, options)
    except (ValueError, LookupError) as e:
        click.echo(f"Error rendering {layout_file}: {e}", err=True)
        raise SystemExit(1) from None

    write_svg(scene, output)
    click.echo(f"Wrote {output} ({scene.width:.0f} x {scene.height:.0f} px)")


@cli.command()
@click.argument("layout_file", type=click.Path(exists=True, path_type=Path))
def validate(layout_file: Path):
    """
    Validate a layout file.

    Reports unknown device types, devices outside the rack, overlapping
    placements and malformed colours. Exits with status 1 on any error.

    Example:
        rackgen validate lab.yaml
    """
    click.echo(f"\nValidating: {layout_file}")
    click.echo("-" * 50)

    layout = _load(layout_file)
    try:
        library = layout.library
    except ValueError as e:
        click.echo(f"Error loading layout: {e}", err=True)
        raise SystemExit(1) from None

    rack = layout.rack
    errors = []
    warnings = []

    known = []
    for device in rack.devices:
        device_type = library.get(device.device_type)
        if device_type is None:
            errors.append(f"[{device.id}] Unknown device type: {device.device_type}")
            continue
        known.append(device)

        if not fits_in_rack(rack, device.position, device_type.u_height):
            errors.append(
                f"[{device.id}] U{device.position:g} + {device_type.u_height:g}U "
                f"does not fit in a {rack.height}U rack"
            )
        colour = device.colour_override or device_type.display_colour
        try:
            parse_hex(colour)
        except InvalidColorFormat as e:
            errors.append(f"[{device.id}] {e}")
        if device.face == Face.REAR and not rack.show_rear:
            warnings.append(f"[{device.id}] Rear-mounted but the rack hides its rear view")

    conflicts = find_conflicts(replace(rack, devices=tuple(known)), library)
    for device_id, conflict in conflicts.items():
        if conflict.conflicting_ids:
            errors.append(f"[{device_id}] Overlaps {', '.join(conflict.conflicting_ids)}")

    unused = sorted(set(library) - {d.device_type for d in rack.devices})
    for slug in unused:
        warnings.append(f"Device type '{slug}' is not used")

    # Report results
    if errors:
        click.echo("\nErrors:")
        for e in errors:
            click.echo(f"  - {e}")

    if warnings:
        click.echo("\nWarnings:")
        for w in warnings:
            click.echo(f"  - {w}")

    if not errors:
        click.echo("Layout is valid.")
        click.echo(f"  Rack: {rack.name or rack.id} ({rack.height}U, {rack.width}\")")
        for device in sorted(rack.devices, key=lambda d: -d.position):
            name = device_display_name(device, library)
            click.echo(f"    - U{device.position:g} {device.face.value}: {name}")

    if errors:
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
