"""Shatter configuration."""

from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Tuple, Optional, Dict, Any, Union
import numpy as np
import yaml

from .errors import InvalidGrid
from .geometry import round_half_up

ANIMATION_MODES = ("manual", "automatic")


@dataclass
class ShatterConfig:
    """Configuration for decomposition and trajectory generation.

    The motion constants default to the values tuned for the reference demo
    (100-200 px throw, one-in-six fly-out pieces, floor at y=-160).
    """
    # Grid
    grid: Tuple[int, int] = (8, 16)
    grid_limits: Tuple[int, int] = (2, 24)

    # Presentation
    animation: str = "manual"  # "manual" | "automatic"
    show_heatmap: bool = False

    # Random source; None seeds from OS entropy
    seed: Optional[int] = None

    # Trajectory
    distance_range: Tuple[float, float] = (100.0, 200.0)
    speed_base: float = 0.3
    speed_intensity_gain: float = 0.6
    speed_jitter: float = 1.5
    fly_out_odds: int = 6  # one in N pieces gets the bonus
    fly_out_bonus: float = 4.0
    rotation_gain: float = 24.0

    # Evaluation
    floor_y: Optional[float] = -160.0
    fade_start: float = 0.9

    # Automatic playback
    duration: float = 2.0
    fade_at: float = 0.75

    device: str = "cpu"

    def __post_init__(self):
        self.grid = tuple(self.grid)
        self.grid_limits = tuple(self.grid_limits)
        self.distance_range = tuple(self.distance_range)
        if self.animation not in ANIMATION_MODES:
            raise ValueError(f"Unknown animation mode: {self.animation}")
        lo, hi = self.grid_limits
        if lo < 1 or hi < lo:
            raise ValueError(f"Invalid grid limits: {self.grid_limits}")
        if self.fly_out_odds < 1:
            raise ValueError(f"fly_out_odds must be >= 1, got {self.fly_out_odds}")
        if not 0.0 <= self.fade_start < 1.0:
            raise ValueError(f"fade_start must be in [0, 1), got {self.fade_start}")
        if self.duration <= 0 or not 0.0 <= self.fade_at < 1.0:
            raise ValueError("duration must be positive and fade_at in [0, 1)")

    def clamped_grid(self, grid: Optional[Tuple[float, float]] = None) -> Tuple[int, int]:
        """Round and clamp a grid resolution to grid_limits.

        Zero or negative dimensions are rejected rather than clamped up.
        """
        cols, rows = self.grid if grid is None else grid
        cols, rows = round_half_up(cols), round_half_up(rows)
        if cols < 1 or rows < 1:
            raise InvalidGrid(f"Grid must be at least 1x1, got {cols}x{rows}")
        lo, hi = self.grid_limits
        return max(min(cols, hi), lo), max(min(rows, hi), lo)

    def make_rng(self) -> np.random.Generator:
        return np.random.default_rng(self.seed)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ShatterConfig":
        valid_keys = {f.name for f in fields(cls)}
        unknown = set(d) - valid_keys
        if unknown:
            raise ValueError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**d)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ShatterConfig":
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data.get("shatter", data))

    def to_yaml(self, path: Union[str, Path]) -> None:
        d = self.to_dict()
        # yaml.safe_dump has no tuple representer
        d = {k: list(v) if isinstance(v, tuple) else v for k, v in d.items()}
        with open(path, "w") as f:
            yaml.safe_dump({"shatter": d}, f, sort_keys=False)
