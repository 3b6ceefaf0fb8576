"""Motion evaluation: fragment state as a function of shatter progress."""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np
import torch

from .errors import InvalidProgress
from .geometry import Point

DEFAULT_FLOOR_Y = -160.0
DEFAULT_FADE_START = 0.9
BOUNCE_DAMPING = -0.5


@dataclass(frozen=True)
class MotionProfile:
    """Per-fragment animation parameters, drawn once at shatter time."""
    start_position: Point
    distance: float
    angle: float
    speed: float
    scale: float
    rotation: float

    @property
    def end_position(self) -> Point:
        """Fully displaced position, ignoring the floor."""
        return (
            self.start_position[0] + math.cos(self.angle) * self.distance,
            self.start_position[1] + math.sin(self.angle) * self.distance,
        )


@dataclass(frozen=True)
class FragmentState:
    position: Point
    rotation: float
    scale: float
    alpha: float


def _check_progress(progress: float, clamp: bool) -> float:
    if not math.isfinite(progress):
        raise InvalidProgress(f"Progress must be finite, got {progress}")
    if clamp:
        return min(max(float(progress), 0.0), 1.0)
    if not 0.0 <= progress <= 1.0:
        raise InvalidProgress(f"Progress must be in [0, 1], got {progress}")
    return float(progress)


def effective_progress(speed: float, progress: float) -> float:
    """Faster fragments reach their end position earlier and then hold."""
    return min(progress * 2.0 * speed, 1.0)


def evaluate(
    profile: MotionProfile,
    progress: float,
    floor_y: Optional[float] = DEFAULT_FLOOR_Y,
    fade_start: float = DEFAULT_FADE_START,
    clamp: bool = True,
) -> FragmentState:
    """Evaluate a fragment at a global progress value.

    Args:
        profile: fragment motion profile
        progress: global progress in [0, 1]
        floor_y: y below which fragments bounce back at half the overshoot;
            None disables the floor
        fade_start: progress at which the fade-out begins
        clamp: clamp out-of-range progress instead of raising InvalidProgress

    Returns:
        FragmentState with position, rotation (radians), uniform scale, alpha
    """
    progress = _check_progress(progress, clamp)
    eff = effective_progress(profile.speed, progress)

    sx, sy = profile.start_position
    y = sy + math.sin(profile.angle) * profile.distance * eff
    if floor_y is not None:
        # A fragment resting below the floor uses its own start as the floor
        floor = min(floor_y, sy)
        if y < floor:
            y = floor + (y - floor) * BOUNCE_DAMPING
    x = sx + math.cos(profile.angle) * profile.distance * eff

    # Slow fragments (speed < 0.5) never reach eff == 1, so the fade also
    # follows global progress. Equals 1 - max(fade - fade_start, 0) / (1 - fade_start).
    fade = max(eff, progress)
    alpha = min((1.0 - fade) / (1.0 - fade_start), 1.0)

    return FragmentState(
        position=(x, y),
        rotation=profile.rotation * progress,
        scale=1.0 + progress * profile.scale,
        alpha=alpha,
    )


def profiles_to_tensor(
    profiles: Sequence[MotionProfile],
    device: str = "cpu",
    dtype: torch.dtype = torch.float64,
) -> torch.Tensor:
    """Pack profiles into [N, 7]: start_x, start_y, distance, angle, speed, scale, rotation."""
    rows = [
        (p.start_position[0], p.start_position[1], p.distance, p.angle, p.speed, p.scale, p.rotation)
        for p in profiles
    ]
    arr = np.asarray(rows, dtype=np.float64).reshape(-1, 7)
    return torch.from_numpy(arr).to(device=device, dtype=dtype)


@torch.no_grad()
def evaluate_batch(
    profiles,
    progress: float,
    floor_y: Optional[float] = DEFAULT_FLOOR_Y,
    fade_start: float = DEFAULT_FADE_START,
    clamp: bool = True,
    device: str = "cpu",
) -> Dict[str, torch.Tensor]:
    """Vectorized evaluate() over all fragments.

    Args:
        profiles: sequence of MotionProfile or a packed [N, 7] tensor
        progress: global progress in [0, 1]

    Returns:
        dict with position [N, 2], rotation [N], scale [N], alpha [N]
    """
    progress = _check_progress(progress, clamp)
    packed = profiles if isinstance(profiles, torch.Tensor) else profiles_to_tensor(profiles, device)
    sx, sy, dist, angle, speed, scale, rotation = packed.unbind(dim=-1)

    eff = (progress * 2.0 * speed).clamp(max=1.0)
    y = sy + torch.sin(angle) * dist * eff
    if floor_y is not None:
        floor = sy.clamp(max=floor_y)
        y = torch.where(y < floor, floor + (y - floor) * BOUNCE_DAMPING, y)
    x = sx + torch.cos(angle) * dist * eff

    fade = eff.clamp(min=progress)
    alpha = ((1.0 - fade) / (1.0 - fade_start)).clamp(max=1.0)

    return {
        "position": torch.stack([x, y], dim=-1),
        "rotation": rotation * progress,
        "scale": 1.0 + progress * scale,
        "alpha": alpha,
    }


class AutomaticPlayback:
    """Fixed one-shot timeline: move and spin over the full duration, fade over the tail.

    Unlike evaluate(), there is no speed remap, floor or scale change; every
    fragment travels the whole distance linearly and is finished at duration.
    """

    def __init__(self, duration: float = 2.0, fade_at: float = 0.75):
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        if not 0.0 <= fade_at < 1.0:
            raise ValueError(f"fade_at must be in [0, 1), got {fade_at}")
        self.duration = duration
        self.fade_at = fade_at

    def _progress(self, t: float) -> float:
        return min(max(t, 0.0), self.duration) / self.duration

    def state_at(self, profile: MotionProfile, t: float) -> FragmentState:
        p = self._progress(t)
        sx, sy = profile.start_position
        ex, ey = profile.end_position
        fade_len = self.duration * (1.0 - self.fade_at)
        elapsed = min(max(t, 0.0), self.duration)
        alpha = min((self.duration - elapsed) / fade_len, 1.0)
        return FragmentState(
            position=(sx + (ex - sx) * p, sy + (ey - sy) * p),
            rotation=profile.rotation * p,
            scale=1.0,
            alpha=alpha,
        )

    def states(self, result, t: float) -> List[FragmentState]:
        return [self.state_at(profile, t) for profile in result.profiles()]

    def is_finished(self, t: float) -> bool:
        return t >= self.duration

    def frame_times(self, fps: float) -> List[float]:
        """Sample times from 0 to duration inclusive."""
        if not fps > 0:
            raise ValueError(f"fps must be positive, got {fps}")
        n =max(int(round(self.duration * fps)), 1)
        return [self.duration * i / n for i in range(n + 1)]


def unbatch(batch: Dict[str, torch.Tensor]) -> List[FragmentState]:
    """Split evaluate_batch() output into per-fragment states."""
    position = batch["position"].cpu().tolist()
    rotation = batch["rotation"].cpu().tolist()
    scale = batch["scale"].cpu().tolist()
    alpha = batch["alpha"].cpu().tolist()
    return [
        FragmentState(position=tuple(p), rotation=r, scale=s, alpha=a)
        for p, r, s, a in zip(position, rotation, scale, alpha)
    ]
