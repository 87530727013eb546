"""
Adaptive text sizing for device labels.

Widths are estimated as ``len(text) * font_size * char_width_ratio`` rather
than measured, so results are identical with or without a rendering context
and for the same input every time.
"""

from __future__ import annotations

from dataclasses import dataclass

from .config import TextFitConfig
from .constants import DEVICE_MAX_FONT_SIZE, DEVICE_MIN_FONT_SIZE

DEFAULT_TEXT_FIT = TextFitConfig()


@dataclass(frozen=True)
class FittedText:
    """A label and the font size it fits at."""
    text: str
    font_size: float


def estimate_text_width(
    text: str, font_size: float, config: TextFitConfig = DEFAULT_TEXT_FIT
) -> float:
    """Estimated rendered width of text at a font size."""
    return len(text) * font_size * config.char_width_ratio


def _candidate_sizes(max_size: float, min_size: float, step: float) -> list[float]:
    sizes = []
    size = max_size
    while size > min_size:
        sizes.append(size)
        size -= step
    sizes.append(min_size)
    return sizes


def calculate_font_size(
    text: str,
    max_font_size: float = DEVICE_MAX_FONT_SIZE,
    min_font_size: float = DEVICE_MIN_FONT_SIZE,
    available_width: float = 0.0,
    config: TextFitConfig = DEFAULT_TEXT_FIT,
) -> float:
    """
    Largest font size in [min, max] at which text fits.

    Sizes are tried downward from max in ``font_size_step`` steps. Returns
    min_font_size when nothing fits and max_font_size for empty text.
    """
    if min_font_size > max_font_size:
        raise ValueError(
            f"min_font_size {min_font_size} exceeds max_font_size {max_font_size}"
        )
    if not text:
        return max_font_size

    for size in _candidate_sizes(max_font_size, min_font_size, config.font_size_step):
        if estimate_text_width(text, size, config) <= available_width:
            return size
    return min_font_size


def truncate_with_ellipsis(
    text: str,
    available_width: float,
    font_size: float,
    config: TextFitConfig = DEFAULT_TEXT_FIT,
) -> str:
    """
    Shorten text to fit, keeping a prefix and appending an ellipsis.

    Returns the text unchanged if it already fits, and a bare ellipsis when
    no prefix fits.
    """
    if not text or estimate_text_width(text, font_size, config) <= available_width:
        return text

    for length in range(len(text) - 1, 0, -1):
        candidate = text[:length].rstrip() + config.ellipsis
        if estimate_text_width(candidate, font_size, config) <= available_width:
            return candidate
    return config.ellipsis


def fit_text_to_width(
    text: str,
    max_font_size: float = DEVICE_MAX_FONT_SIZE,
    min_font_size: float = DEVICE_MIN_FONT_SIZE,
    available_width: float = 0.0,
    config: TextFitConfig = DEFAULT_TEXT_FIT,
) -> FittedText:
    """
    Fit a label into a width by shrinking, then truncating.

    Args:
        text: Label text
        max_font_size: Preferred font size
        min_font_size: Smallest acceptable font size
        available_width: Width in px
        config: Width estimation settings

    Returns:
        FittedText with a font size in [min_font_size, max_font_size]
    """
    if available_width <= 0:
        return FittedText(config.ellipsis, min_font_size)
    if not text:
        return FittedText("", max_font_size)

    size = calculate_font_size(text, max_font_size, min_font_size, available_width, config)
    if estimate_text_width(text, size, config) <= available_width:
        return FittedText(text, size)

    return FittedText(
        truncate_with_ellipsis(text, available_width, min_font_size, config),
        min_font_size,
    )
