"""Geometry helpers: normalized rects, triangle variants, grid rounding."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

Point = Tuple[float, float]


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle. Texture rects are normalized with origin bottom-left."""
    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def max_y(self) -> float:
        return self.y + self.height

    def cell(self, col: int, row: int, cols: int, rows: int) -> "Rect":
        """Sub-rect of cell (col, row) when this rect is split into cols x rows."""
        return Rect(
            x=col / cols * self.width + self.x,
            y=row / rows * self.height + self.y,
            width=self.width / cols,
            height=self.height / rows,
        )


UNIT_RECT = Rect(0.0, 0.0, 1.0, 1.0)


class TriangleVariant(Enum):
    """The two halves of a cell split along its bottom-left/top-right diagonal."""
    UPPER_LEFT = 0
    LOWER_RIGHT = 1

    def vertices(self, width: float, height: float) -> List[Point]:
        """Triangle corners relative to the cell center (y up)."""
        hw, hh = width / 2.0, height / 2.0
        if self is TriangleVariant.UPPER_LEFT:
            return [(-hw, -hh), (-hw, hh), (hw, hh)]
        return [(hw, hh), (hw, -hh), (-hw, -hh)]

    @property
    def spin_sign(self) -> float:
        return 1.0 if self is TriangleVariant.LOWER_RIGHT else -1.0


def distance(a: Point, b: Point = (0.0, 0.0)) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def round_half_up(value: float) -> int:
    """Round like CGFloat.rounded(): halves go away from zero."""
    return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)
