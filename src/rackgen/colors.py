"""
Colour shading helpers for pseudo-3D faces.

Side panels of an isometric box are drawn darker and top surfaces lighter
than the front face. Shading scales HSL lightness and keeps hue/saturation.
"""

import colorsys
import math
import re

_HEX_PATTERN = re.compile(r"#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


class InvalidColorFormat(ValueError):
    """Raised for a colour string that is not #RGB or #RRGGBB."""


def parse_hex(color: str) -> tuple[int, int, int]:
    """
    Parse a hex colour into 0-255 RGB channels.

    Args:
        color: "#RGB" or "#RRGGBB" (case-insensitive)

    Returns:
        (r, g, b) integers

    Raises:
        InvalidColorFormat: If the string is not a hex colour
    """
    if not isinstance(color, str) or not _HEX_PATTERN.fullmatch(color):
        raise InvalidColorFormat(f"Invalid hex colour: {color!r}")

    digits = color[1:]
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)

    return (int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))


def _channel_to_hex(value: float) -> str:
    # Round half up so .5 never flips with banker's rounding
    return f"{int(math.floor(value * 255 + 0.5)):02x}"


def hex_to_hsl(color: str) -> tuple[float, float, float]:
    """
    Convert a hex colour to HSL.

    Returns:
        (h, s, l) with h in degrees [0, 360) and s, l in percent [0, 100]
    """
    r, g, b = parse_hex(color)
    h, lightness, s = colorsys.rgb_to_hls(r / 255, g / 255, b / 255)
    return (h * 360, s * 100, lightness * 100)


def hsl_to_hex(h: float, s: float, lightness: float) -> str:
    """Convert HSL (degrees, percent, percent) to a lowercase #rrggbb string."""
    r, g, b = colorsys.hls_to_rgb((h % 360) / 360, lightness / 100, s / 100)
    return f"#{_channel_to_hex(r)}{_channel_to_hex(g)}{_channel_to_hex(b)}"


def darken_color(color: str, fraction: float) -> str:
    """
    Darken a colour by scaling its lightness by (1 - fraction).

    Args:
        color: Hex colour
        fraction: 0.25 means 25% darker

    Returns:
        Shaded hex colour, lightness clamped to [0, 100]
    """
    h, s, lightness = hex_to_hsl(color)
    return hsl_to_hex(h, s, min(100.0, max(0.0, lightness * (1 - fraction))))


def lighten_color(color: str, fraction: float) -> str:
    """Lighten a colour by scaling its lightness by (1 + fraction), clamped to 100."""
    h, s, lightness = hex_to_hsl(color)
    return hsl_to_hex(h, s, min(100.0, max(0.0, lightness * (1 + fraction))))
