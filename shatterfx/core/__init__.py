"""shatterfx core: decomposition, trajectory generation and motion evaluation."""

from .config import ShatterConfig
from .decompose import Fragment, ShatterResult, decompose, max_piece_distance, blast_intensity
from .engine import ShatterEngine
from .errors import ShatterError, InvalidGeometry, InvalidGrid, MissingTexture, InvalidProgress
from .geometry import Rect, TriangleVariant, UNIT_RECT
from .motion import (
    MotionProfile,
    FragmentState,
    AutomaticPlayback,
    effective_progress,
    evaluate,
    evaluate_batch,
    unbatch,
)
from .trajectories import generate_trajectory, shatter

__all__ = [
    "ShatterConfig",
    "Fragment",
    "ShatterResult",
    "decompose",
    "max_piece_distance",
    "blast_intensity",
    "ShatterEngine",
    "ShatterError",
    "InvalidGeometry",
    "InvalidGrid",
    "MissingTexture",
    "InvalidProgress",
    "Rect",
    "TriangleVariant",
    "UNIT_RECT",
    "MotionProfile",
    "FragmentState",
    "AutomaticPlayback",
    "effective_progress",
    "evaluate",
    "evaluate_batch",
    "unbatch",
    "generate_trajectory",
    "shatter",
]
