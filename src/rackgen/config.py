"""
Configuration for rack drawings.

This module defines the dataclasses passed explicitly into the geometry,
packer, text and render functions, plus the YAML layout file format:

- GeometryConfig: pixel sizes (one per output, e.g. screen vs export DPI)
- PortLayoutConfig: port packer thresholds
- TextFitConfig: text width estimation
- Theme / RenderOptions: what to draw and in which colours
- RackLayoutConfig: a rack plus its device type library, loaded from YAML
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Literal

import yaml

from . import constants as c
from .models import DeviceType, Rack, build_library

logger = logging.getLogger(__name__)

Projection = Literal["flat", "isometric"]
ViewMode = Literal["single", "dual"]
LabelMode = Literal["name", "image"]

PROJECTIONS = ("flat", "isometric")
VIEW_MODES = ("single", "dual")
LABEL_MODES = ("name", "image")
ANNOTATION_FIELDS = ("name", "ip", "notes", "manufacturer", "asset_tag", "serial")


@dataclass(frozen=True)
class GeometryConfig:
    """
    Pixel geometry of a rack drawing.

    Attributes:
        unit_height_px: Height of one rack unit
        rail_width_px: Width of each side rail
        rail_offset_px: Height of the top rail above unit 1 of the top
        base_rack_width_px: Frame width of a 19" rack
        full_depth_px: Side panel width of full-depth devices (isometric)
        half_depth_px: Side panel width of half-depth devices (isometric)
        rack_depth_px: Side panel width of the rack frame (isometric)
        side_darken: Lightness reduction of side panels
        top_lighten: Lightness increase of top surfaces
        dual_view_gap: Gap between front and rear views
        legend_gap: Gap between views and legend
        margin: Canvas margin around all content
    """
    unit_height_px: float = c.UNIT_HEIGHT_PX
    rail_width_px: float = c.RAIL_WIDTH_PX
    rail_offset_px: float = c.RAIL_OFFSET_PX
    base_rack_width_px: float = c.BASE_RACK_WIDTH_PX
    full_depth_px: float = c.FULL_DEPTH_PX
    half_depth_px: float = c.HALF_DEPTH_PX
    rack_depth_px: float = c.RACK_DEPTH_PX
    side_darken: float = c.SIDE_DARKEN
    top_lighten: float = c.TOP_LIGHTEN
    dual_view_gap: float = c.DUAL_VIEW_GAP
    legend_gap: float = c.LEGEND_GAP
    margin: float = c.CANVAS_MARGIN

    def scaled(self, factor: float) -> GeometryConfig:
        """Return a copy with every pixel size multiplied by factor."""
        if factor <= 0:
            raise ValueError(f"Scale factor must be positive, got {factor}")
        return replace(
            self,
            **{
                f.name: getattr(self, f.name) * factor
                for f in fields(self)
                if f.name not in ("side_darken", "top_lighten")
            },
        )


@dataclass(frozen=True)
class PortLayoutConfig:
    """
    Port packer thresholds.

    Attributes:
        hide_zoom: Zoom below which ports are hidden
        detail_zoom: Zoom at or above which ports carry their names
        radius: Default port radius
        min_radius: Smallest radius tried before grouping
        radius_step: Radius decrement between attempts
        min_spacing: Minimum horizontal gap between ports
        row_gap: Vertical gap between rows
        y_offset: Distance from the device top to the first row
    """
    hide_zoom: float = c.PORT_HIDE_ZOOM
    detail_zoom: float = c.PORT_DETAIL_ZOOM
    radius: float = c.PORT_RADIUS
    min_radius: float = c.PORT_MIN_RADIUS
    radius_step: float = c.PORT_RADIUS_STEP
    min_spacing: float = c.PORT_MIN_SPACING
    row_gap: float = c.PORT_ROW_GAP
    y_offset: float = c.PORT_Y_OFFSET

    def __post_init__(self):
        if self.min_radius > self.radius:
            raise ValueError("min_radius must not exceed radius")
        if self.radius_step <= 0:
            raise ValueError("radius_step must be positive")


@dataclass(frozen=True)
class TextFitConfig:
    """Text width estimation settings."""
    char_width_ratio: float = c.CHAR_WIDTH_RATIO
    font_size_step: float = c.FONT_SIZE_STEP
    ellipsis: str = c.ELLIPSIS

    def __post_init__(self):
        if self.char_width_ratio <= 0:
            raise ValueError("char_width_ratio must be positive")
        if self.font_size_step <= 0:
            raise ValueError("font_size_step must be positive")


@dataclass(frozen=True)
class Theme:
    """A named colour palette."""
    name: str
    background: str
    frame: str
    frame_stroke: str
    device_stroke: str
    text: str
    device_text: str
    muted_text: str


THEMES: dict[str, Theme] = {
    "dark": Theme(
        name="dark",
        background="#282a36",
        frame="#6272a4",
        frame_stroke="#44475a",
        device_stroke="#282a36",
        text="#f8f8f2",
        device_text="#f8f8f2",
        muted_text="#6272a4",
    ),
    "light": Theme(
        name="light",
        background="#ffffff",
        frame="#b0b7c3",
        frame_stroke="#5a6270",
        device_stroke="#2d3340",
        text="#1e2430",
        device_text="#ffffff",
        muted_text="#5a6270",
    ),
}


def get_theme(name: str) -> Theme:
    """
    Look up a theme by name.

    Raises:
        ValueError: If the theme does not exist
    """
    if name not in THEMES:
        raise ValueError(
            f"Unknown theme: {name}. Valid names: {list(THEMES.keys())}"
        )
    return THEMES[name]


@dataclass(frozen=True)
class RenderOptions:
    """
    What the renderer draws.

    Attributes:
        projection: "flat" or "isometric"
        view: "single" (one face) or "dual" (front and rear side by side)
        face: Face drawn in single view ("front" or "rear")
        theme: Theme name
        zoom: Current zoom level; drives port density
        show_legend: Append a legend of device types
        label_mode: "name" for text labels, "image" for device images
        device_images: Image reference per device type slug (image mode)
        annotation_field: Annotation column field, or None for no column
    """
    projection: Projection = "flat"
    view: ViewMode = "single"
    face: Literal["front", "rear"] = "front"
    theme: str = "dark"
    zoom: float = 1.0
    show_legend: bool = True
    label_mode: LabelMode = "name"
    device_images: Mapping[str, str] = field(default_factory=dict)
    annotation_field: str | None = None

    def __post_init__(self):
        if self.projection not in PROJECTIONS:
            raise ValueError(f"Unknown projection: {self.projection}. Valid names: {list(PROJECTIONS)}")
        if self.view not in VIEW_MODES:
            raise ValueError(f"Unknown view mode: {self.view}. Valid names: {list(VIEW_MODES)}")
        if self.face not in ("front", "rear"):
            raise ValueError(f"Single view face must be 'front' or 'rear', got {self.face!r}")
        if self.label_mode not in LABEL_MODES:
            raise ValueError(f"Unknown label mode: {self.label_mode}. Valid names: {list(LABEL_MODES)}")
        if self.annotation_field is not None and self.annotation_field not in ANNOTATION_FIELDS:
            raise ValueError(
                f"Unknown annotation field: {self.annotation_field}. "
                f"Valid names: {list(ANNOTATION_FIELDS)}"
            )
        get_theme(self.theme)

    def __hash__(self) -> int:
        return hash((self.projection, self.view, self.face, self.theme, self.zoom))

    @property
    def is_isometric(self) -> bool:
        return self.projection == "isometric"

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any], **overrides: Any) -> RenderOptions:
        """
        Build options from a settings mapping (e.g. the YAML ``settings`` key).

        Unknown keys are ignored. Keyword overrides that are not None win.
        """
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in settings.items() if k in known}
        ignored = sorted(set(settings) - known)
        if ignored:
            logger.debug("Ignoring unknown render settings: %s", ignored)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


# =============================================================================
# LAYOUT FILES
# =============================================================================

@dataclass
class RackLayoutConfig:
    """
    Root of a layout file: one rack and the device types it uses.

    Attributes:
        rack: The rack and its placements
        device_types: Device type library
        version: File format version (currently "1.0")
        settings: Render option overrides
    """
    rack: Rack
    device_types: list[DeviceType] = field(default_factory=list)
    version: str = "1.0"
    settings: dict = field(default_factory=dict)

    def __post_init__(self):
        # Handle nested dicts from YAML
        if isinstance(self.rack, dict):
            self.rack = Rack.from_dict(self.rack)
        self.device_types = [
            DeviceType.from_dict(d) if isinstance(d, dict) else d
            for d in self.device_types
        ]

    @property
    def library(self) -> dict[str, DeviceType]:
        """Device types keyed by slug."""
        return build_library(self.device_types)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RackLayoutConfig:
        """Load a layout from a YAML file."""
        with open(yaml_path) as f:
            data = yaml.safe_load(f)
        if not isinstance(data, dict) or "rack" not in data:
            raise ValueError(f"{yaml_path}: layout file must be a mapping with a 'rack' key")
        logger.debug("Loaded layout %s", yaml_path)
        return cls(
            rack=data["rack"],
            device_types=data.get("device_types") or [],
            version=str(data.get("version", "1.0")),
            settings=data.get("settings") or {},
        )

    def to_yaml(self, yaml_path: str | Path) -> None:
        """Save the layout to a YAML file."""
        with open(yaml_path, "w") as f:
            yaml.dump(self._to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    def _to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"version": self.version}
        if self.settings:
            result["settings"] = dict(self.settings)
        result["device_types"] = [d.to_dict() for d in self.device_types]
        result["rack"] = self.rack.to_dict()
        return result
