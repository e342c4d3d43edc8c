"""
Payment frequencies and numerical settings for curve construction.

Supported Frequencies:
- ANNUAL: 1 payment per year
- SEMIANNUAL: 2 payments per year
- QUARTERLY: 4 payments per year
- MONTHLY: 12 payments per year

Solver Settings:
- min_slope: Newton damping floor on |f'(x)|
- n_epsilon: convergence tolerance in machine epsilons
- max_iter: iteration cap
- default_guess: starting forward when bootstrapping an empty curve
- verify_tolerance: repricing tolerance used after a full bootstrap

Settings can be overridden from the environment with FWDLIB_* variables.
"""

from dataclasses import dataclass, replace
from enum import Enum
import os
from typing import Union


class Frequency(Enum):
    """Coupon payment frequency (payments per year)."""
    ANNUAL = 1
    SEMIANNUAL = 2
    QUARTERLY = 4
    MONTHLY = 12

    @classmethod
    def from_string(cls, s: str) -> "Frequency":
        """Parse frequency from string representation."""
        mapping = {
            "ANNUAL": cls.ANNUAL,
            "A": cls.ANNUAL,
            "1": cls.ANNUAL,
            "SEMIANNUAL": cls.SEMIANNUAL,
            "SEMI": cls.SEMIANNUAL,
            "S": cls.SEMIANNUAL,
            "2": cls.SEMIANNUAL,
            "QUARTERLY": cls.QUARTERLY,
            "Q": cls.QUARTERLY,
            "4": cls.QUARTERLY,
            "MONTHLY": cls.MONTHLY,
            "M": cls.MONTHLY,
            "12": cls.MONTHLY,
        }
        key = s.upper().replace(" ", "").replace("-", "").replace("_", "")
        if key in mapping:
            return mapping[key]
        raise ValueError(f"Unknown payment frequency: {s}")

    @classmethod
    def coerce(cls, freq: Union["Frequency", int, str]) -> "Frequency":
        """Accept a Frequency, its integer value or its name."""
        if isinstance(freq, cls):
            return freq
        if isinstance(freq, str):
            return cls.from_string(freq)
        try:
            return cls(int(freq))
        except ValueError:
            raise ValueError(
                f"Unsupported payment frequency: {freq} "
                f"(expected one of {[f.value for f in cls]})"
            ) from None


def _get_env(key: str, default, value_type: type = float):
    """Read FWDLIB_<KEY> from the environment, falling back to default."""
    raw = os.environ.get(f"FWDLIB_{key.upper()}")
    if raw is None:
        return default
    try:
        return value_type(raw)
    except ValueError:
        raise ValueError(f"Invalid value for FWDLIB_{key.upper()}: {raw!r}") from None


@dataclass(frozen=True)
class SolverSettings:
    """
    Numerical settings for the Newton solver and the bootstrapper.

    Attributes:
        min_slope: Slopes smaller than this in magnitude are clamped to it
        n_epsilon: Stop once successive iterates differ by at most this
            many machine epsilons
        max_iter: Iteration cap (raises NonConvergence when exceeded)
        default_guess: Initial forward when the curve is empty
        verify_tolerance: Max relative repricing error accepted by a full
            bootstrap run
    """
    min_slope: float = 0.5
    n_epsilon: int = 2
    max_iter: int = 1000
    default_guess: float = 0.01
    verify_tolerance: float = 1e-10

    def __post_init__(self):
        if self.min_slope < 0:
            raise ValueError("min_slope must be non-negative")
        if self.n_epsilon < 1:
            raise ValueError("n_epsilon must be at least 1")
        if self.max_iter < 1:
            raise ValueError("max_iter must be at least 1")

    @classmethod
    def default(cls) -> "SolverSettings":
        """Standard settings."""
        return cls()

    @classmethod
    def relaxed(cls) -> "SolverSettings":
        """Looser tolerance for noisy or hand-entered quotes."""
        return cls(n_epsilon=64, verify_tolerance=1e-8)

    @classmethod
    def from_env(cls) -> "SolverSettings":
        """Default settings overridden by FWDLIB_* environment variables."""
        base = cls()
        return cls(
            min_slope=_get_env("min_slope", base.min_slope, float),
            n_epsilon=_get_env("n_epsilon", base.n_epsilon, int),
            max_iter=_get_env("max_iter", base.max_iter, int),
            default_guess=_get_env("default_guess", base.default_guess, float),
            verify_tolerance=_get_env("verify_tolerance", base.verify_tolerance, float),
        )

    def with_overrides(self, **kwargs) -> "SolverSettings":
        """Return a copy with some fields replaced."""
        return replace(self, **kwargs)


__all__ = [
    "Frequency",
    "SolverSettings",
]
