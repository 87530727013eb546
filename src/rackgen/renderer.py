"""
Rack elevation renderer.

Composes a SceneGraph from a rack and its device type library:

    title
    [annotations] [rack view: frame, U labels, devices, ports, labels] [rear view]
    FRONT / REAR view labels
    legend

Each view is built in flat rack-frame coordinates (origin at the frame's
top-left corner). In isometric mode receding side and top faces are added
in flat space and every point of the view is then projected. Views are
finally shifted side by side and the whole drawing is moved inside the
canvas margin.

The renderer is pure: identical inputs give identical scenes.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Mapping

from . import constants as c
from .annotations import build_annotation
from .colors import darken_color, lighten_color, parse_hex
from .config import (
    GeometryConfig,
    PortLayoutConfig,
    RenderOptions,
    TextFitConfig,
    Theme,
    get_theme,
)
from .models import (
    DeviceType,
    Face,
    PlacedDevice,
    Rack,
    device_display_name,
    device_type_label,
    lookup_device_type,
    unit_label,
)
from .placement import face_occupancy
from .port_layout import (
    DEFAULT_PORT_LAYOUT,
    Grouped,
    Individual,
    calculate_port_layout,
    interface_colour,
)
from .projection import side_face, top_face
from .rack_geometry import (
    DEFAULT_GEOMETRY,
    compute_device_rect,
    interior_width_px,
    rack_frame_rect,
    unit_rect,
)
from .rect import Rect
from .scene import (
    Circle,
    ImageRef,
    Polygon,
    Primitive,
    RectShape,
    SceneGraph,
    Text,
    content_bounds,
    project_isometric,
    translate,
)
from .text_fit import DEFAULT_TEXT_FIT, estimate_text_width, fit_text_to_width

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS = RenderOptions()

TITLE_FONT_SIZE = 14.0
VIEW_LABEL_FONT_SIZE = 11.0
UNIT_LABEL_FONT_SIZE = 8.0
LEGEND_FONT_SIZE = 11.0
ANNOTATION_FONT_SIZE = 10.0


def sort_for_paint(devices: tuple[PlacedDevice, ...]) -> list[PlacedDevice]:
    """
    Paint order: descending position, ties broken by id.

    Lower devices are painted last so that in isometric mode their top faces
    sit on top of the device below.
    """
    return sorted(devices, key=lambda d: (-d.position, d.id))


def view_faces(rack: Rack, options: RenderOptions) -> list[Face]:
    """Faces to draw, left to right."""
    if options.view == "dual":
        if not rack.show_rear:
            warnings.warn(
                f"Rack {rack.id!r} has show_rear disabled; rendering the front view only",
                stacklevel=3,
            )
            return [Face.FRONT]
        return [Face.FRONT, Face.REAR]
    return [Face(options.face)]


def render(
    rack: Rack,
    device_types: Mapping[str, DeviceType],
    options: RenderOptions = DEFAULT_OPTIONS,
    geometry: GeometryConfig = DEFAULT_GEOMETRY,
    ports: PortLayoutConfig = DEFAULT_PORT_LAYOUT,
    text: TextFitConfig = DEFAULT_TEXT_FIT,
) -> SceneGraph:
    """
    Render a rack to a scene graph.

    Args:
        rack: Rack to draw
        device_types: Device type library keyed by slug
        options: What to draw (projection, views, theme, zoom, ...)
        geometry: Pixel sizes
        ports: Port packer thresholds
        text: Text width estimation settings

    Returns:
        SceneGraph with the background sized to the content

    Raises:
        UnknownDeviceTypeError: If a placement references an unknown slug
        OutOfBoundsError: If a placement lies outside the rack
        InvalidColorFormat: If a device colour is not a hex colour
    """
    theme = get_theme(options.theme)
    ordered = sort_for_paint(rack.devices)
    faces = view_faces(rack, options)

    if options.annotation_field and options.is_isometric:
        warnings.warn(
            "Annotation columns are only drawn in flat projection",
            stacklevel=2,
        )

    logger.debug(
        "Rendering rack %s: %d devices, faces=%s, projection=%s, zoom=%.2f",
        rack.id, len(ordered), [f.value for f in faces], options.projection, options.zoom,
    )

    primitives: list[Primitive] = []
    top = geometry.margin
    if rack.name:
        primitives.append(Text(
            x=geometry.margin,
            y=geometry.margin + TITLE_FONT_SIZE,
            content=rack.name,
            font_size=TITLE_FONT_SIZE,
            fill=theme.text,
            font_weight="bold",
            role="title",
        ))
        top += c.TITLE_HEIGHT

    # Lay views out side by side
    x_cursor = geometry.margin
    views_bottom = top
    view_spans: list[tuple[Face, float, float]] = []
    for face in faces:
        view = _render_view(rack, device_types, ordered, face, options, theme, geometry, ports, text)
        min_x, min_y, max_x, max_y = content_bounds(view)
        dx, dy = x_cursor - min_x, top - min_y
        primitives.extend(translate(p, dx, dy) for p in view)
        view_spans.append((face, x_cursor, x_cursor + max_x - min_x))
        views_bottom = max(views_bottom, top + max_y - min_y)
        x_cursor += (max_x - min_x) + geometry.dual_view_gap

    label_y = views_bottom + VIEW_LABEL_FONT_SIZE + 8
    for face, left, right in view_spans:
        primitives.append(Text(
            x=(left + right) / 2,
            y=label_y,
            content=face.value.upper(),
            font_size=VIEW_LABEL_FONT_SIZE,
            fill=theme.muted_text,
            anchor="middle",
            font_weight="bold",
            role="view-label",
        ))

    if options.show_legend:
        primitives.extend(_legend(
            rack, device_types, theme, geometry.margin, label_y + geometry.legend_gap
        ))

    _, _, max_x, max_y = content_bounds(primitives)
    return SceneGraph(
        width=max_x + geometry.margin,
        height=max_y + geometry.margin,
        background=theme.background,
        primitives=tuple(primitives),
    )


# =============================================================================
# VIEWS
# =============================================================================

def _render_view(
    rack: Rack,
    device_types: Mapping[str, DeviceType],
    ordered: list[PlacedDevice],
    face: Face,
    options: RenderOptions,
    theme: Theme,
    geometry: GeometryConfig,
    ports: PortLayoutConfig,
    text: TextFitConfig,
) -> list[Primitive]:
    """One face of the rack in view-local coordinates."""
    iso = options.is_isometric
    frame = rack_frame_rect(rack, geometry)
    view: list[Primitive] = []

    if iso:
        view.append(Polygon(
            points=tuple(top_face(frame.x, frame.y, frame.width, geometry.rack_depth_px)),
            fill=lighten_color(theme.frame, geometry.top_lighten),
            stroke=theme.frame_stroke,
            role="rack-top",
        ))
        view.append(Polygon(
            points=tuple(side_face(frame.right, frame.y, frame.height, geometry.rack_depth_px)),
            fill=darken_color(theme.frame, geometry.side_darken),
            stroke=theme.frame_stroke,
            role="rack-side",
        ))

    view.append(RectShape(
        frame.x, frame.y, frame.width, frame.height,
        fill=theme.frame, stroke=theme.frame_stroke, stroke_width=2.0, role="rack-frame",
    ))
    view.append(RectShape(
        geometry.rail_width_px,
        geometry.rail_offset_px,
        interior_width_px(rack.width, geometry),
        rack.height * geometry.unit_height_px,
        fill=darken_color(theme.frame, 0.45),
        role="rack-interior",
    ))

    if not iso:
        view.extend(_unit_labels(rack, theme, geometry))

    visible = [
        placed for placed in ordered
        if face in face_occupancy(placed.face, lookup_device_type(device_types, placed.device_type))
    ]
    for placed in visible:
        view.extend(_device(rack, placed, device_types, face, options, theme, geometry, ports, text))

    if iso:
        return [project_isometric(p) for p in view]

    if options.annotation_field:
        view.extend(_annotations(rack, visible, device_types, options.annotation_field, theme, geometry))
    return view


def _unit_labels(rack: Rack, theme: Theme, geometry: GeometryConfig) -> list[Primitive]:
    labels = []
    for unit in range(1, rack.height + 1):
        row = unit_rect(rack, unit, geometry)
        labels.append(Text(
            x=geometry.rail_width_px / 2,
            y=row.center_y + UNIT_LABEL_FONT_SIZE * 0.35,
            content=unit_label(rack, unit),
            font_size=UNIT_LABEL_FONT_SIZE,
            fill=theme.text,
            anchor="middle",
            role="unit-label",
        ))
    return labels


def _device(
    rack: Rack,
    placed: PlacedDevice,
    device_types: Mapping[str, DeviceType],
    face: Face,
    options: RenderOptions,
    theme: Theme,
    geometry: GeometryConfig,
    ports: PortLayoutConfig,
    text: TextFitConfig,
) -> list[Primitive]:
    """Body, depth faces, ports and label of one device."""
    device_type = lookup_device_type(device_types, placed.device_type)
    rect = compute_device_rect(rack, placed, device_type, geometry)
    colour = placed.colour_override or device_type.display_colour
    parse_hex(colour)  # reject malformed colours in flat mode too
    name = device_display_name(placed, device_types)

    shapes: list[Primitive] = []
    if options.is_isometric:
        depth = geometry.full_depth_px if device_type.is_full_depth else geometry.half_depth_px
        shapes.append(Polygon(
            points=tuple(top_face(rect.x, rect.y, rect.width, depth)),
            fill=lighten_color(colour, geometry.top_lighten),
            stroke=theme.device_stroke,
            stroke_width=0.5,
            role="device-top",
        ))
        shapes.append(Polygon(
            points=tuple(side_face(rect.right, rect.y, rect.height, depth)),
            fill=darken_color(colour, geometry.side_darken),
            stroke=theme.device_stroke,
            stroke_width=0.5,
            role="device-side",
        ))

    shapes.append(RectShape(
        rect.x, rect.y, rect.width, rect.height,
        fill=colour, stroke=theme.device_stroke, role="device", title=name,
    ))

    # Ports belong to the mounting face only
    if placed.face in (face, Face.BOTH) and device_type.interfaces:
        shapes.extend(_ports(rect, device_type, options.zoom, theme, ports))

    shapes.extend(_label(rect, placed, device_type, name, options, theme, text))
    return shapes


def _ports(
    rect: Rect,
    device_type: DeviceType,
    zoom: float,
    theme: Theme,
    config: PortLayoutConfig,
) -> list[Primitive]:
    decision = calculate_port_layout(
        rect.width, rect.height, device_type.port_count, zoom,
        interfaces=device_type.interfaces, config=config,
    )

    if isinstance(decision, Individual):
        top = rect.y + decision.y_offset
        circles: list[Primitive] = []
        for p in decision.positions:
            fill = c.PORT_COLOURS["other"]
            title = None
            if p.interface is not None:
                fill = interface_colour(p.interface.type, p.interface.mgmt_only)
                if decision.detailed:
                    title = p.interface.name
            circles.append(Circle(
                cx=rect.x + p.x,
                cy=top + p.y,
                r=p.radius,
                fill=fill,
                stroke=theme.device_stroke,
                role="port",
                title=title,
            ))
        return circles

    if isinstance(decision, Grouped):
        if rect.height < c.BADGE_HEIGHT + 2:
            logger.debug("No room for port badges on %s", device_type.slug)
            return []
        badges: list[Primitive] = []
        x = rect.x + c.BADGE_GAP
        y = rect.bottom - c.BADGE_HEIGHT - 2
        for badge in decision.badges:
            label = f"{badge.count}× {badge.type}"
            width = estimate_text_width(label, c.BADGE_FONT_SIZE) + 6
            if x + width > rect.right - c.BADGE_GAP:
                logger.debug("No room for %s badge on %s", badge.type, device_type.slug)
                break
            badges.append(RectShape(
                x, y, width, c.BADGE_HEIGHT,
                fill=badge.colour, rx=2.0, role="port-badge",
            ))
            badges.append(Text(
                x=x + width / 2,
                y=y + c.BADGE_HEIGHT - 2.5,
                content=label,
                font_size=c.BADGE_FONT_SIZE,
                fill=theme.device_stroke,
                anchor="middle",
                role="port-badge-label",
            ))
            x += width + c.BADGE_GAP
        return badges

    return []


def _label(
    rect: Rect,
    placed: PlacedDevice,
    device_type: DeviceType,
    name: str,
    options: RenderOptions,
    theme: Theme,
    text: TextFitConfig,
) -> list[Primitive]:
    if options.label_mode == "image":
        href = options.device_images.get(device_type.slug)
        if href:
            box = rect.inset(1.0)
            return [ImageRef(box.x, box.y, box.width, box.height, href,
                             role="device-image", title=name)]
        logger.debug("No image for %s; using its name", device_type.slug)

    fitted = fit_text_to_width(
        name,
        c.DEVICE_MAX_FONT_SIZE,
        c.DEVICE_MIN_FONT_SIZE,
        rect.width - 2 * c.LABEL_PADDING_PX,
        text,
    )
    if not fitted.text:
        return []
    return [Text(
        x=rect.center_x,
        y=rect.center_y + fitted.font_size * 0.35,
        content=fitted.text,
        font_size=fitted.font_size,
        fill=theme.device_text,
        anchor="middle",
        role="device-label",
        title=name if fitted.text != name else None,
    )]


def _annotations(
    rack: Rack,
    visible: list[PlacedDevice],
    device_types: Mapping[str, DeviceType],
    field: str,
    theme: Theme,
    geometry: GeometryConfig,
) -> list[Primitive]:
    """Right-aligned annotation column to the left of the frame."""
    cells = []
    for placed in visible:
        device_type = lookup_device_type(device_types, placed.device_type)
        rect = compute_device_rect(rack, placed, device_type, geometry)
        annotation = build_annotation(placed, device_types, field)
        cells.append(Text(
            x=-8.0,
            y=rect.center_y + ANNOTATION_FONT_SIZE * 0.35,
            content=annotation.text,
            font_size=ANNOTATION_FONT_SIZE,
            fill=theme.muted_text if annotation.empty else theme.text,
            anchor="end",
            role="annotation",
            title=annotation.full_text if annotation.full_text != annotation.text else None,
        ))
    return cells


# =============================================================================
# LEGEND
# =============================================================================

def legend_entries(
    rack: Rack, device_types: Mapping[str, DeviceType]
) -> list[DeviceType]:
    """Distinct device types in order of first appearance in the rack."""
    seen: dict[str, DeviceType] = {}
    for placed in rack.devices:
        if placed.device_type not in seen:
            seen[placed.device_type] = lookup_device_type(device_types, placed.device_type)
    return list(seen.values())


def _legend(
    rack: Rack,
    device_types: Mapping[str, DeviceType],
    theme: Theme,
    x: float,
    y: float,
) -> list[Primitive]:
    entries = legend_entries(rack, device_types)
    if not entries:
        return []

    legend: list[Primitive] = [Text(
        x=x, y=y, content="LEGEND", font_size=LEGEND_FONT_SIZE,
        fill=theme.muted_text, font_weight="bold", role="legend-title",
    )]
    for i, device_type in enumerate(entries):
        row_y = y + 10 + i * c.LEGEND_ROW_HEIGHT
        legend.append(RectShape(
            x, row_y, c.LEGEND_SWATCH_SIZE, c.LEGEND_SWATCH_SIZE,
            fill=device_type.display_colour, stroke=theme.device_stroke,
            rx=2.0, role="legend-swatch",
        ))
        text_x = x + c.LEGEND_SWATCH_SIZE + 8
        baseline = row_y + c.LEGEND_SWATCH_SIZE - 4
        if not device_type.is_full_depth:
            legend.append(Text(
                x=text_x, y=baseline, content=c.HALF_MARK,
                font_size=LEGEND_FONT_SIZE, fill=theme.muted_text, role="legend-half-depth",
            ))
            text_x += LEGEND_FONT_SIZE
        legend.append(Text(
            x=text_x,
            y=baseline,
            content=f"{device_type_label(device_type)} ({device_type.u_height:g}U)",
            font_size=LEGEND_FONT_SIZE,
            fill=theme.text,
            role="legend-entry",
        ))
    return legend
