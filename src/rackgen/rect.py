"""
Pixel boxes for devices, unit rows and the rack frame.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Rect:
    """
    Box occupied by a rack element, measured from the frame's top-left.

    Device boxes are rebuilt from their placement on every render, so a Rect
    is never edited in place. Values are raw floats; svg.py does the rounding.

    Attributes:
        x: Distance from the frame's left edge (px)
        y: Distance from the frame's top edge (px)
        width: Horizontal extent (px)
        height: Vertical extent (px); one rack unit is 22 px by default
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        """Lower edge; equals the next device's top when units are adjacent."""
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        """Vertical middle, used to centre labels and annotations on a device."""
        return self.y + self.height / 2

    def inset(self, margin: float) -> 'Rect':
        """Shrink by ``margin`` on every side (image labels sit inside the body)."""
        return Rect(
            x=self.x + margin,
            y=self.y + margin,
            width=self.width - 2 * margin,
            height=self.height - 2 * margin,
        )
