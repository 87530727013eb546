"""
rackgen

Rack elevation layout and isometric projection geometry.

Places network and server equipment into racks, validates placements
against the cross-face blocking rule, packs device ports at zoom-dependent
density, fits labels, and composes flat or isometric front/rear drawings
as a scene graph that can be written out as SVG.

Usage:
    from rackgen import RackLayoutConfig, RenderOptions, render, write_svg

    layout = RackLayoutConfig.from_yaml("lab.yaml")
    scene = render(layout.rack, layout.library, RenderOptions(view="dual"))
    write_svg(scene, "lab.svg")
"""

from .annotations import Annotation, annotation_label, annotation_value, build_annotation
from .colors import InvalidColorFormat, darken_color, hex_to_hsl, hsl_to_hex, lighten_color
from .config import (
    THEMES,
    GeometryConfig,
    PortLayoutConfig,
    RackLayoutConfig,
    RenderOptions,
    TextFitConfig,
    Theme,
    get_theme,
)
from .models import (
    DeviceCategory,
    DeviceType,
    Face,
    Interface,
    PlacedDevice,
    Rack,
    UnknownDeviceTypeError,
    build_library,
    device_display_name,
    generate_id,
)
from .placement import (
    PlacementConflict,
    PlacementOk,
    change_device_type,
    find_conflicts,
    find_valid_positions,
    move_device,
    place_device,
    remove_device,
    validate_placement,
)
from .port_layout import Grouped, Hidden, Individual, PortBadge, PortPosition, calculate_port_layout
from .projection import isometric_matrix, isometric_point, project_points
from .rack_geometry import OutOfBoundsError, compute_device_rect, rack_width_px, unit_y
from .rect import Rect
from .renderer import render
from .scene import Circle, ImageRef, Polygon, RectShape, SceneGraph, Text
from .svg import to_svg, write_svg
from .text_fit import FittedText, fit_text_to_width

__version__ = "0.1.0"

__all__ = [
    # Models
    'DeviceCategory',
    'DeviceType',
    'Face',
    'Interface',
    'PlacedDevice',
    'Rack',
    'UnknownDeviceTypeError',
    'build_library',
    'device_display_name',
    'generate_id',
    # Configuration
    'GeometryConfig',
    'PortLayoutConfig',
    'RackLayoutConfig',
    'RenderOptions',
    'TextFitConfig',
    'Theme',
    'THEMES',
    'get_theme',
    # Geometry
    'Rect',
    'OutOfBoundsError',
    'compute_device_rect',
    'rack_width_px',
    'unit_y',
    'isometric_matrix',
    'isometric_point',
    'project_points',
    'InvalidColorFormat',
    'darken_color',
    'lighten_color',
    'hex_to_hsl',
    'hsl_to_hex',
    # Placement
    'PlacementOk',
    'PlacementConflict',
    'validate_placement',
    'find_valid_positions',
    'find_conflicts',
    'place_device',
    'move_device',
    'change_device_type',
    'remove_device',
    # Ports and text
    'Hidden',
    'Grouped',
    'Individual',
    'PortBadge',
    'PortPosition',
    'calculate_port_layout',
    'FittedText',
    'fit_text_to_width',
    # Annotations
    'Annotation',
    'annotation_label',
    'annotation_value',
    'build_annotation',
    # Rendering
    'render',
    'SceneGraph',
    'RectShape',
    'Polygon',
    'Circle',
    'Text',
    'ImageRef',
    'to_svg',
    'write_svg',
]
