"""Trajectory generation: per-fragment motion profiles away from the blast origin."""

import logging
import math
from typing import Optional, Tuple

import numpy as np

from .config import ShatterConfig
from .decompose import Fragment, ShatterResult, blast_intensity, decompose
from .geometry import Rect
from .motion import MotionProfile

logger = logging.getLogger(__name__)


def generate_trajectory(
    fragment: Fragment,
    max_distance: float,
    rng: np.random.Generator,
    cfg: Optional[ShatterConfig] = None,
) -> MotionProfile:
    """Draw the motion profile of one fragment.

    Random draws happen in a fixed order so a seeded generator reproduces the
    same shatter: distance, speed jitter, fly-out check, rotation, scale.

    Args:
        fragment: fragment to animate
        max_distance: corner-most rest distance of the shatter this fragment
            belongs to; shared by all its fragments
        rng: random source, advanced by four uniform draws and one integer draw
        cfg: motion constants (defaults when None)

    Returns:
        MotionProfile starting at the fragment's rest position
    """
    cfg = cfg or ShatterConfig()
    rest_x, rest_y = fragment.rest_position

    intensity = blast_intensity(fragment.rest_position, max_distance)
    angle = math.atan2(rest_y, rest_x)

    d_min, d_max = cfg.distance_range
    distance = d_min + (d_max - d_min) * rng.random()
    speed = cfg.speed_base + cfg.speed_intensity_gain * intensity + cfg.speed_jitter * rng.random()
    if rng.integers(cfg.fly_out_odds) == 0:
        # A few pieces really fly out
        speed += cfg.fly_out_bonus
    rotation = angle * cfg.rotation_gain * rng.random() * fragment.variant.spin_sign
    scale = rng.random() * 2.0 - 1.0

    return MotionProfile(
        start_position=fragment.rest_position,
        distance=float(distance),
        angle=angle,
        speed=float(speed),
        scale=float(scale),
        rotation=float(rotation),
    )


def shatter(
    image_size: Tuple[float, float],
    grid: Tuple[int, int],
    rng: np.random.Generator,
    texture_rect: Optional[Rect] = None,
    cfg: Optional[ShatterConfig] = None,
) -> ShatterResult:
    """Decompose an image and attach a motion profile to every fragment.

    Validation happens in decompose(), so a failure leaves no fragments behind
    and draws nothing from rng.
    """
    result = decompose(image_size, grid, texture_rect)
    cfg = cfg or ShatterConfig()
    result.fragments = [
        fragment.with_motion(generate_trajectory(fragment, result.max_distance, rng, cfg))
        for fragment in result.fragments
    ]
    logger.debug("Generated %d trajectories (max distance %.3f)", len(result), result.max_distance)
    return result
