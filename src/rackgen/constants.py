"""
Rack drawing constants.

Default pixel sizes, packer thresholds, and colour palettes for rack
elevation drawings. These are only defaults: every function that needs them
takes an explicit config object (see config.py).
"""

import math

# =============================================================================
# RACK GEOMETRY
# =============================================================================

# One rack unit (1.75") on screen
UNIT_HEIGHT_PX = 22.0

# Side rails on the left and right of the device area
RAIL_WIDTH_PX = 17.0

# Top rail height above the first unit
RAIL_OFFSET_PX = 17.0

# Frame width of a 19" rack; other widths scale from this
BASE_RACK_WIDTH_PX = 220.0
BASE_RACK_WIDTH_IN = 19

RACK_WIDTHS = (10, 19, 21, 23)
MIN_RACK_HEIGHT = 1
MAX_RACK_HEIGHT = 100

MIN_DEVICE_HEIGHT = 0.5
MAX_DEVICE_HEIGHT = 42


# =============================================================================
# ISOMETRIC PROJECTION
# =============================================================================

# True isometric: 30 degrees from horizontal
ISO_ANGLE = math.radians(30)
COS_30 = math.cos(ISO_ANGLE)  # ~0.866
SIN_30 = math.sin(ISO_ANGLE)  # 0.5

# Side panel widths (receding depth)
FULL_DEPTH_PX = 24.0
HALF_DEPTH_PX = 12.0
RACK_DEPTH_PX = 24.0

# Shading for pseudo-3D faces
SIDE_DARKEN = 0.25  # 25% darker side panels
TOP_LIGHTEN = 0.15  # 15% lighter top surfaces


# =============================================================================
# COMPOSITION
# =============================================================================

DUAL_VIEW_GAP = 60.0
LEGEND_GAP = 40.0
CANVAS_MARGIN = 20.0
TITLE_HEIGHT = 24.0
LEGEND_ROW_HEIGHT = 24.0
LEGEND_SWATCH_SIZE = 16.0
LABEL_PADDING_PX = 6.0


# =============================================================================
# PORT LAYOUT
# =============================================================================

PORT_HIDE_ZOOM = 0.5      # Below this nothing is drawn
PORT_DETAIL_ZOOM = 1.5    # At or above this ports carry their names
PORT_RADIUS = 3.0
PORT_MIN_RADIUS = 2.0
PORT_RADIUS_STEP = 0.5
PORT_MIN_SPACING = 2.0
PORT_ROW_GAP = 2.0
PORT_Y_OFFSET = 4.0

BADGE_HEIGHT = 10.0
BADGE_FONT_SIZE = 7.0
BADGE_GAP = 3.0


# =============================================================================
# TEXT
# =============================================================================

# Average glyph advance as a fraction of font size (empirical, not metrics)
CHAR_WIDTH_RATIO = 0.58
ELLIPSIS = "…"
EM_DASH = "—"
HALF_MARK = "½"

DEVICE_MAX_FONT_SIZE = 13.0
DEVICE_MIN_FONT_SIZE = 9.0
FONT_SIZE_STEP = 0.5
FONT_FAMILY = "Inter, system-ui, sans-serif"

ANNOTATION_MAX_CHARS = 15


# =============================================================================
# COLOURS
# =============================================================================

CATEGORY_COLOURS = {
    "server": "#4A7A8A",
    "network": "#7B6BA8",
    "patch-panel": "#6B8A7A",
    "power": "#A86B6B",
    "storage": "#7A8A4A",
    "kvm": "#8A6B8A",
    "av-media": "#A8866B",
    "cooling": "#6B98A8",
    "shelf": "#7A7A7A",
    "blank": "#4A4A4A",
    "other": "#6B6B7B",
}

PORT_COLOURS = {
    "copper": "#50fa7b",
    "fiber": "#8be9fd",
    "mgmt": "#ffb86c",
    "other": "#bfbfbf",
}
