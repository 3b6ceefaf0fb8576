"""ShatterEngine: configuration-driven shatter pipeline."""

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np
import torch

from .config import ShatterConfig
from .decompose import ShatterResult
from .errors import MissingTexture
from .geometry import Rect
from .motion import AutomaticPlayback, FragmentState, evaluate_batch, profiles_to_tensor, unbatch
from .trajectories import shatter

logger = logging.getLogger(__name__)


class ShatterEngine:
    """Shatter pipeline with a random source seeded once per engine."""

    def __init__(self, cfg: Optional[ShatterConfig] = None, rng: Optional[np.random.Generator] = None):
        self.cfg = cfg or ShatterConfig()
        self.rng = rng if rng is not None else self.cfg.make_rng()

    def shatter(
        self,
        texture,
        size: Optional[Tuple[float, float]] = None,
        grid: Optional[Tuple[float, float]] = None,
        texture_rect: Optional[Rect] = None,
    ) -> ShatterResult:
        """Shatter a textured image.

        Args:
            texture: drawable source of the image (e.g. a PIL image); only
                checked for presence, the renderer samples it
            size: image size in scene units, texture.size when None
            grid: (cols, rows), cfg.grid when None; clamped to cfg.grid_limits
            texture_rect: normalized atlas region of the image

        Returns:
            ShatterResult whose fragments all carry motion profiles
        """
        if texture is None:
            raise MissingTexture("shatter requires an image with a valid texture")
        if size is None:
            size = getattr(texture, "size", None)
            if size is None:
                raise MissingTexture(f"Cannot infer image size from {type(texture).__name__}")
        cols, rows = self.cfg.clamped_grid(grid)

        result = shatter(size, (cols, rows), self.rng, texture_rect, self.cfg)
        logger.info("Shattered %gx%g image into %d fragments (%dx%d grid, %s mode)",
                    result.image_size[0], result.image_size[1], len(result), cols, rows, self.cfg.animation)
        return result

    def states(self, result: ShatterResult, progress: float) -> Dict[str, torch.Tensor]:
        """Manual-mode evaluation of every fragment at progress."""
        return evaluate_batch(
            profiles_to_tensor(result.profiles(), self.cfg.device),
            progress,
            floor_y=self.cfg.floor_y,
            fade_start=self.cfg.fade_start,
        )

    def playback(self) -> AutomaticPlayback:
        return AutomaticPlayback(self.cfg.duration, self.cfg.fade_at)

    def frame(self, result: ShatterResult, value: float) -> List[FragmentState]:
        """States for one frame: value is progress in manual mode, seconds in automatic mode."""
        if self.cfg.animation == "automatic":
            return self.playback().states(result, value)
        return unbatch(self.states(result, value))
