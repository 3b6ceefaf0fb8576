"""shatterfx: triangle-grid shatter effect for textured images.

Main components:
- core: decomposition, trajectories, motion evaluation (ShatterEngine)
- render: Pillow texture provider and frame compositor
- cli: GIF export
"""

from .core import (
    ShatterConfig,
    ShatterEngine,
    ShatterResult,
    Fragment,
    MotionProfile,
    FragmentState,
    AutomaticPlayback,
    Rect,
    TriangleVariant,
    ShatterError,
    InvalidGeometry,
    InvalidGrid,
    MissingTexture,
    InvalidProgress,
    decompose,
    generate_trajectory,
    shatter,
    evaluate,
    evaluate_batch,
)
from .render import PILTextureProvider, ShatterRenderer

__version__ = "0.1.0"
__all__ = [
    # Core
    "ShatterConfig",
    "ShatterEngine",
    "ShatterResult",
    "Fragment",
    "MotionProfile",
    "FragmentState",
    "AutomaticPlayback",
    "Rect",
    "TriangleVariant",
    "ShatterError",
    "InvalidGeometry",
    "InvalidGrid",
    "MissingTexture",
    "InvalidProgress",
    "decompose",
    "generate_trajectory",
    "shatter",
    "evaluate",
    "evaluate_batch",
    # Render
    "PILTextureProvider",
    "ShatterRenderer",
]
