"""Pixel-space geometry shared by the layout and routing services."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A point in pixel space."""

    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    """An axis-aligned box in pixel space."""

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def mid_y(self) -> float:
        return self.y + self.h / 2
