"""
Exception taxonomy for curve construction.

- InvalidOrder: non-increasing breakpoint or cash flow times
- SizeMismatch: paired arrays of unequal length
- NoCashflowBeyondCurve: bootstrap instrument has nothing past the curve end
- NonConvergence: Newton iteration cap exceeded
- DomainError: query outside the region where the curve is defined
"""


class CurveError(Exception):
    """Base class for all fwdlib errors."""


class InvalidOrder(CurveError, ValueError):
    """Times must be strictly increasing (and positive for curve breakpoints)."""


class SizeMismatch(CurveError, ValueError):
    """Paired arrays have different lengths."""


class NoCashflowBeyondCurve(CurveError, ValueError):
    """No cash flow of the instrument falls after the last curve time."""


class NonConvergence(CurveError, RuntimeError):
    """Root finder exceeded its iteration cap."""

    def __init__(self, message: str, last_iterate: float = float("nan"), iterations: int = 0):
        super().__init__(message)
        self.last_iterate = last_iterate
        self.iterations = iterations


class DomainError(CurveError, ValueError):
    """Negative time, or extrapolation requested with none defined."""


__all__ = [
    "CurveError",
    "InvalidOrder",
    "SizeMismatch",
    "NoCashflowBeyondCurve",
    "NonConvergence",
    "DomainError",
]
