"""
Piecewise-flat forward curve.

The ForwardCurve class provides:
- Forward value f(u), right-continuous step lookup
- Integral of the forward curve from 0 to u
- Discount factor D(u) = exp(-integral(u))
- Spot rate r(u) = integral(u) / u
- Present value and duration of fixed cash flow instruments

Breakpoints (t_i, f_i) have 0 < t_1 < ... < t_n and
    f(u) = f_i  for t_{i-1} < u <= t_i   (t_0 = 0)
    f(u) = extrapolation  for u > t_n

      |                                     _f
      |          f_2              f_n  o---------
      |  f_1  o------          o-------x
      x-------x      ... ------x
      |
      0------t_1---- ... ----t_{n-1}----t_n

The extrapolation value may be undefined (NaN); querying past t_n then
raises DomainError. Curves only grow: append() is the single mutation.
"""

import math
from typing import Iterable, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from ..errors import DomainError, InvalidOrder, SizeMismatch

TimeLike = Union[float, Iterable[float], np.ndarray]


def is_monotonic(times: Iterable[float]) -> bool:
    """True if times are strictly increasing."""
    t = np.asarray(list(times) if not isinstance(times, np.ndarray) else times, dtype=float)
    return bool(np.all(np.diff(t) > 0))


def _as_times(u: TimeLike) -> Tuple[np.ndarray, bool]:
    """Convert a scalar or array-like to a float array, remembering which it was."""
    arr = np.asarray(u, dtype=float)
    return arr, arr.ndim == 0


def _result(values: np.ndarray, scalar: bool):
    return float(values) if scalar else values


class ForwardCurve:
    """
    Piecewise-flat instantaneous forward curve.

    Attributes:
        extrapolation: Forward used past the last breakpoint (NaN if undefined)

    Conventions:
        - Times are year fractions from the curve anchor (time 0)
        - Forwards are continuously compounded
        - Discount factor at t=0 is 1.0
    """

    def __init__(
        self,
        times: Optional[Iterable[float]] = None,
        forwards: Optional[Iterable[float]] = None,
        extrapolation: Optional[float] = None
    ):
        t = np.array([] if times is None else list(times), dtype=float)
        f = np.array([] if forwards is None else list(forwards), dtype=float)

        if t.shape != f.shape:
            raise SizeMismatch(
                f"Times and forwards must have same length ({t.size} != {f.size})"
            )
        if t.ndim != 1:
            raise SizeMismatch("Times and forwards must be one-dimensional")
        if np.any(np.isnan(t)):
            raise InvalidOrder(f"Curve times must not be NaN: {t.tolist()}")
        if t.size and t[0] <= 0:
            raise InvalidOrder(f"First curve time must be positive, got {t[0]}")
        if not is_monotonic(t):
            raise InvalidOrder(f"Curve times must be strictly increasing: {t.tolist()}")

        self._t = t
        self._f = f
        self.extrapolation = float("nan") if extrapolation is None else float(extrapolation)

        # cumulative integral at each breakpoint
        self._cum = np.cumsum(self._f * np.diff(self._t, prepend=0.0))

    # ------------------------------------------------------------------
    # Accessors

    @property
    def times(self) -> np.ndarray:
        """Breakpoint times (copy)."""
        return self._t.copy()

    @property
    def forwards(self) -> np.ndarray:
        """Breakpoint forwards (copy)."""
        return self._f.copy()

    @property
    def has_extrapolation(self) -> bool:
        return not math.isnan(self.extrapolation)

    def last(self) -> float:
        """Last breakpoint time, 0 for an empty curve."""
        return float(self._t[-1]) if self._t.size else 0.0

    def last_forward(self) -> Optional[float]:
        """Last breakpoint forward, None for an empty curve."""
        return float(self._f[-1]) if self._f.size else None

    def get_nodes(self) -> List[Tuple[float, float]]:
        """
        Get all curve breakpoints.

        Returns:
            List of (time, forward) tuples
        """
        return [(float(t), float(f)) for t, f in zip(self._t, self._f)]

    def __len__(self) -> int:
        return int(self._t.size)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ForwardCurve):
            return NotImplemented
        same_extrapolation = (
            self.extrapolation == other.extrapolation
            or (math.isnan(self.extrapolation) and math.isnan(other.extrapolation))
        )
        return (
            np.array_equal(self._t, other._t)
            and np.array_equal(self._f, other._f)
            and same_extrapolation
        )

    __hash__ = None

    # ------------------------------------------------------------------
    # Queries

    def _check_domain(self, u: np.ndarray) -> None:
        if np.any(u < 0) or np.any(np.isnan(u)):
            raise DomainError(f"Curve is undefined for negative times: {u.tolist()}")
        if not self.has_extrapolation and np.any(u > self.last()):
            raise DomainError(
                f"Time past curve end {self.last()} and no extrapolation defined"
            )

    def value(self, u: TimeLike):
        """
        Forward rate f(u).

        Args:
            u: Time or array of times

        Returns:
            f_i for t_{i-1} < u <= t_i, the extrapolation past the last time
        """
        arr, scalar = _as_times(u)
        self._check_domain(arr)
        if self._t.size == 0:
            # an empty curve is flat at the extrapolation value
            if not self.has_extrapolation:
                raise DomainError("Empty curve has no extrapolation defined")
            return _result(np.full(arr.shape, self.extrapolation), scalar)

        idx = np.searchsorted(self._t, arr, side="left")
        out = np.where(
            idx < self._t.size,
            self._f[np.minimum(idx, self._t.size - 1)],
            self.extrapolation,
        )
        return _result(out, scalar)

    def __call__(self, u: TimeLike):
        return self.value(u)

    def integral(self, u: TimeLike):
        """
        Integral of the forward curve from 0 to u.

        Args:
            u: Time or array of times

        Returns:
            sum f_i (t_i - t_{i-1}) over breakpoints <= u plus the partial
            final period at the interior or extrapolated rate
        """
        arr, scalar = _as_times(u)
        self._check_domain(arr)

        n = self._t.size
        # k = number of breakpoints with t_i <= u
        k = np.searchsorted(self._t, arr, side="right")
        covered = np.where(k > 0, self._cum[np.maximum(k - 1, 0)] if n else 0.0, 0.0)
        t_covered = np.where(k > 0, self._t[np.maximum(k - 1, 0)] if n else 0.0, 0.0)

        if n:
            rate = np.where(k < n, self._f[np.minimum(k, n - 1)], self.extrapolation)
        else:
            rate = np.full(arr.shape, self.extrapolation)
        remainder = arr - t_covered
        # exact hit on a breakpoint (or u == 0) contributes nothing
        partial = np.where(remainder > 0, rate * remainder, 0.0)

        return _result(covered + partial, scalar)

    def discount(self, u: TimeLike):
        """Discount factor D(u) = exp(-integral(u))."""
        arr, scalar = _as_times(u)
        return _result(np.exp(-np.asarray(self.integral(arr))), scalar)

    def spot(self, u: TimeLike):
        """
        Spot rate r(u) = integral(u) / u.

        Times before the first breakpoint return the first forward instead
        of dividing by a (possibly tiny) u.
        """
        arr, scalar = _as_times(u)
        if self._t.size == 0:
            return self.value(u)
        self._check_domain(arr)

        short = arr < self._t[0]
        safe_u = np.where(short, 1.0, arr)
        long_end = np.asarray(self.integral(np.where(short, 0.0, arr))) / safe_u
        out = np.where(short, self._f[0], long_end)
        return _result(out, scalar)

    def forward_rate(self, t1: float, t2: float) -> float:
        """
        Average continuously compounded forward between t1 and t2.

        Args:
            t1: Start time
            t2: End time

        Returns:
            (integral(t2) - integral(t1)) / (t2 - t1)
        """
        if t2 <= t1:
            raise InvalidOrder("t2 must be greater than t1")
        return (self.integral(t2) - self.integral(t1)) / (t2 - t1)

    def present_value(self, instrument) -> float:
        """
        Present value of an instrument: sum c_j D(u_j).

        Args:
            instrument: Anything exposing times and cash_flows arrays

        Returns:
            Present value
        """
        u = np.asarray(instrument.times, dtype=float)
        c = np.asarray(instrument.cash_flows, dtype=float)
        if u.size == 0:
            return 0.0
        return float(np.sum(c * self.discount(u)))

    def duration(self, instrument) -> float:
        """
        Derivative of present value with respect to a parallel shift of
        every forward: -sum u_j c_j D(u_j).
        """
        u = np.asarray(instrument.times, dtype=float)
        c = np.asarray(instrument.cash_flows, dtype=float)
        if u.size == 0:
            return 0.0
        return float(-np.sum(u * c * self.discount(u)))

    # ------------------------------------------------------------------
    # Mutation and derived curves

    def append(self, t: float, f: float) -> None:
        """
        Add a breakpoint past the current end of the curve.

        Args:
            t: Breakpoint time, must exceed last()
            f: Forward on (last(), t]

        Raises:
            InvalidOrder: If t <= last()
        """
        t = float(t)
        f = float(f)
        if not t > self.last():
            raise InvalidOrder(f"Breakpoint time {t} must exceed last curve time {self.last()}")

        prev_t = self.last()
        prev_cum = float(self._cum[-1]) if self._cum.size else 0.0
        self._t = np.append(self._t, t)
        self._f = np.append(self._f, f)
        self._cum = np.append(self._cum, prev_cum + f * (t - prev_t))

    def extended(self, t: float, f: float) -> "ForwardCurve":
        """Return a copy with one more breakpoint, leaving this curve untouched."""
        new_curve = self.copy()
        new_curve.append(t, f)
        return new_curve

    def with_extrapolation(self, f: Optional[float]) -> "ForwardCurve":
        """Return a copy using f past the last breakpoint."""
        new_curve = self.copy()
        new_curve.extrapolation = float("nan") if f is None else float(f)
        return new_curve

    def shifted(self, h: float) -> "ForwardCurve":
        """
        Create a new curve with every forward (and the extrapolation)
        shifted up by h.
        """
        return ForwardCurve(self._t, self._f + h, self.extrapolation + h)

    def bump_parallel(self, bp: float) -> "ForwardCurve":
        """Parallel bump in basis points."""
        return self.shifted(bp / 10000.0)

    def copy(self) -> "ForwardCurve":
        """Create a deep copy of the curve."""
        new_curve = ForwardCurve.__new__(ForwardCurve)
        new_curve._t = self._t.copy()
        new_curve._f = self._f.copy()
        new_curve._cum = self._cum.copy()
        new_curve.extrapolation = self.extrapolation
        return new_curve

    def to_frame(self) -> pd.DataFrame:
        """Breakpoints with integral, discount factor and spot rate."""
        if self._t.size == 0:
            return pd.DataFrame(columns=["time", "forward", "integral", "discount", "spot"])
        return pd.DataFrame({
            "time": self._t,
            "forward": self._f,
            "integral": self._cum,
            "discount": np.exp(-self._cum),
            "spot": self._cum / self._t,
        })

    def __repr__(self) -> str:
        return (f"ForwardCurve(nodes={len(self)}, last={self.last()}, "
                f"extrapolation={self.extrapolation})")


def create_flat_curve(
    rate: float,
    max_tenor_years: float = 30.0,
    extrapolate: bool = True
) -> ForwardCurve:
    """
    Create a flat forward curve.

    Args:
        rate: Flat continuously compounded forward
        max_tenor_years: Last breakpoint time
        extrapolate: Keep the same rate past the last breakpoint

    Returns:
        Flat curve
    """
    tenors = [t for t in [0.25, 0.5, 1, 2, 5, 10, 20] if t < max_tenor_years]
    tenors.append(max_tenor_years)
    return ForwardCurve(
        tenors,
        [rate] * len(tenors),
        rate if extrapolate else None,
    )


__all__ = [
    "ForwardCurve",
    "create_flat_curve",
    "is_monotonic",
]
