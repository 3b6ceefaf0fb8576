"""Grid decomposition of an image into triangular fragments."""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple, Iterator, Sequence

from .errors import InvalidGeometry, InvalidGrid
from .geometry import Point, Rect, TriangleVariant, UNIT_RECT, distance, round_half_up
from .motion import MotionProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Fragment:
    """One triangular half of a grid cell."""
    index: int
    cell: Tuple[int, int]
    variant: TriangleVariant
    source_region: Rect
    rest_position: Point
    size: Tuple[float, float]
    blast_intensity: float
    motion: Optional[MotionProfile] = field(default=None, compare=False)

    def with_motion(self, motion: MotionProfile) -> "Fragment":
        return replace(self, motion=motion)


@dataclass
class ShatterResult:
    """All fragments of one shatter, owned and discarded as a unit."""
    fragments: List[Fragment]
    image_size: Tuple[float, float]
    grid: Tuple[int, int]
    cell_size: Tuple[float, float]
    texture_rect: Rect
    max_distance: float

    def __len__(self) -> int:
        return len(self.fragments)

    def __iter__(self) -> Iterator[Fragment]:
        return iter(self.fragments)

    def __getitem__(self, i: int) -> Fragment:
        return self.fragments[i]

    def fragment_at(self, col: int, row: int, variant: TriangleVariant) -> Fragment:
        cols, rows = self.grid
        if not (0 <= col < cols and 0 <= row < rows):
            raise IndexError(f"Cell ({col}, {row}) outside {cols}x{rows} grid")
        return self.fragments[2 * (row * cols + col) + variant.value]

    def profiles(self) -> List[MotionProfile]:
        """Motion profiles in fragment order; raises if trajectories were not generated."""
        missing = [f.index for f in self.fragments if f.motion is None]
        if missing:
            raise ValueError(f"{len(missing)} fragments have no motion profile")
        return [f.motion for f in self.fragments]


def max_piece_distance(image_size: Tuple[float, float], cell_size: Tuple[float, float]) -> float:
    """Distance from the origin to the corner-most rest position.

    All four corners are equidistant, so cell (0, 0) stands in for them.
    """
    w, h = image_size
    cw, ch = cell_size
    return distance((-(w / 2.0) + cw / 2.0, -(h / 2.0) + ch / 2.0))


def blast_intensity(rest_position: Point, max_distance: float) -> float:
    """1 at the blast origin, 0 at the corner pieces."""
    if max_distance <= 0:
        return 1.0
    return min(max(1.0 - distance(rest_position) / max_distance, 0.0), 1.0)


def _validate(image_size: Sequence[float], grid: Sequence[float]) -> Tuple[Tuple[float, float], Tuple[int, int]]:
    if len(image_size) != 2 or not all(math.isfinite(v) and v > 0 for v in image_size):
        raise InvalidGeometry(f"Image size must be finite and positive, got {tuple(image_size)}")
    if len(grid) != 2:
        raise InvalidGrid(f"Grid must be (cols, rows), got {tuple(grid)}")
    cols, rows = round_half_up(grid[0]), round_half_up(grid[1])
    if cols < 1 or rows < 1:
        raise InvalidGrid(f"Grid must be at least 1x1, got {cols}x{rows}")
    return (float(image_size[0]), float(image_size[1])), (cols, rows)


def decompose(
    image_size: Tuple[float, float],
    grid: Tuple[int, int],
    texture_rect: Optional[Rect] = None,
) -> ShatterResult:
    """Split an image into 2 * cols * rows triangular fragments.

    Args:
        image_size: (width, height) of the image in scene units
        grid: (cols, rows); callers clamp to a practical range beforehand
        texture_rect: normalized region of the texture atlas holding the
            image, unit rect when None

    Returns:
        ShatterResult with fragments in row-major order (row outer, column
        inner), UPPER_LEFT before LOWER_RIGHT within a cell. Fragments carry
        no motion profile yet.

    Raises:
        InvalidGeometry: non-positive image dimension
        InvalidGrid: grid dimension below one
    """
    (w, h), (cols, rows) = _validate(image_size, grid)
    texture_rect = texture_rect or UNIT_RECT

    cell_w, cell_h = w / cols, h / rows
    half_w, half_h = cell_w / 2.0, cell_h / 2.0
    max_dist = max_piece_distance((w, h), (cell_w, cell_h))

    fragments = []
    for y in range(rows):
        for x in range(cols):
            region = texture_rect.cell(x, y, cols, rows)
            rest = (x * cell_w - w / 2.0 + half_w, y * cell_h - h / 2.0 + half_h)
            intensity = blast_intensity(rest, max_dist)
            for variant in TriangleVariant:
                fragments.append(Fragment(
                    index=len(fragments),
                    cell=(x, y),
                    variant=variant,
                    source_region=region,
                    rest_position=rest,
                    size=(cell_w, cell_h),
                    blast_intensity=intensity,
                ))

    logger.debug("Decomposed %gx%g image into %dx%d grid (%d fragments)", w, h, cols, rows, len(fragments))

    return ShatterResult(
        fragments=fragments,
        image_size=(w, h),
        grid=(cols, rows),
        cell_size=(cell_w, cell_h),
        texture_rect=texture_rect,
        max_distance=max_dist,
    )
