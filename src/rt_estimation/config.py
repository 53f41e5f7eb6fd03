import numbers
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from .core.errors import ConfigurationError

INTERVAL_METHODS = ("hdi", "sample")


@dataclass(frozen=True)
class RtConfig:
    """Shared, immutable configuration for every stage of the Rt pipeline."""

    rt_max: float = 10.0
    rt_step: float = 0.01
    gamma: float = 1 / 4
    smoothing_window: int = 7
    smoothing_alpha: float = 2.5
    posterior_window: int = 7
    hdi_mass: float = 0.90
    interval_method: str = "hdi"
    n_samples: int = 10000
    seed: Optional[int] = None

    _grid: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.rt_max > 0:
            raise ConfigurationError("rt_max must be > 0")
        if not self.rt_step > 0:
            raise ConfigurationError("rt_step must be > 0")
        if not self.gamma > 0:
            raise ConfigurationError("gamma must be > 0")
        for name in ("smoothing_window", "posterior_window", "n_samples"):
            value = getattr(self, name)
            if not isinstance(value, numbers.Integral) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if self.smoothing_window < 1:
            raise ConfigurationError("smoothing_window must be >= 1")
        if not self.smoothing_alpha > 0:
            raise ConfigurationError("smoothing_alpha must be > 0")
        if self.posterior_window < 1:
            raise ConfigurationError("posterior_window must be >= 1")
        if not 0 < self.hdi_mass <= 1:
            raise ConfigurationError("hdi_mass must be in (0, 1]")
        if self.interval_method not in INTERVAL_METHODS:
            raise ConfigurationError(
                f"Unknown interval_method: {self.interval_method}. "
                f"Available: {list(INTERVAL_METHODS)}"
            )
        if self.n_samples < 1:
            raise ConfigurationError("n_samples must be >= 1")
        if self.interval_method == "sample" and self.seed is None:
            raise ConfigurationError("seed is required when interval_method='sample'")

        n_points = int(round(self.rt_max / self.rt_step)) + 1
        if n_points < 2:
            raise ConfigurationError("Rt grid must contain at least 2 points")
        if abs((n_points - 1) * self.rt_step - self.rt_max) > 1e-9 * max(1.0, self.rt_max):
            raise ConfigurationError(
                f"rt_step ({self.rt_step}) must divide rt_max ({self.rt_max}) evenly"
            )

        grid = np.linspace(0.0, self.rt_max, n_points)
        grid.setflags(write=False)
        object.__setattr__(self, "_grid", grid)

    @property
    def rt_grid(self) -> np.ndarray:
        """Candidate Rt values, ascending from 0 to rt_max (read-only)."""
        return self._grid

    @property
    def grid_size(self) -> int:
        return len(self._grid)

    @classmethod
    def default(cls) -> "RtConfig":
        return cls()
