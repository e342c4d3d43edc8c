"""
Damped Newton-Raphson root finding.

A step uses the slope f'(x), clamped away from zero:
    slope = sign(f'(x)) * max(|f'(x)|, m)
    x' = x - f(x) / slope

Clamping keeps the step bounded when the function is nearly flat, e.g.
when bootstrapping an instrument whose only cash flow past the curve end
is a very short stub.

Iteration stops when successive iterates agree to n machine epsilons.
The better of the final two iterates (smaller |f|) is returned.
"""

import logging
import math
from typing import Callable, Optional

import numpy as np

from .conventions import SolverSettings
from .errors import NonConvergence

logger = logging.getLogger(__name__)

EPSILON = float(np.finfo(float).eps)


def newton_step(
    x: float,
    f: Callable[[float], float],
    df: Callable[[float], float],
    min_slope: float = 0.5
) -> float:
    """
    Take one damped Newton step from x.

    Args:
        x: Current iterate
        f: Function whose root is sought
        df: Derivative of f
        min_slope: Damping floor on |df(x)|

    Returns:
        Next iterate
    """
    slope = df(x)
    # slope must be >= m or <= -m
    if abs(slope) < min_slope:
        slope = math.copysign(min_slope, slope)

    return x - f(x) / slope


def newton_root(
    f: Callable[[float], float],
    df: Callable[[float], float],
    x0: float,
    min_slope: float = 0.5,
    n_epsilon: int = 2,
    max_iter: int = 1000
) -> float:
    """
    Find a root of f by damped Newton-Raphson iteration.

    Args:
        f: Function whose root is sought
        df: Derivative of f
        x0: Initial guess
        min_slope: Damping floor on |df(x)|
        n_epsilon: Convergence tolerance in machine epsilons
        max_iter: Iteration cap

    Returns:
        Whichever of the final two iterates has the smaller |f|

    Raises:
        NonConvergence: If the iterates have not settled after max_iter steps
    """
    tol = n_epsilon * EPSILON

    x = float(x0)
    x_ = newton_step(x, f, df, min_slope)
    iterations = 1

    while not abs(x_ - x) <= tol:
        if iterations >= max_iter or math.isnan(x_):
            raise NonConvergence(
                f"Newton iteration did not converge from x0={x0} "
                f"after {iterations} iterations (last iterate {x_})",
                last_iterate=x_,
                iterations=iterations,
            )
        x = x_
        x_ = newton_step(x, f, df, min_slope)
        iterations += 1

    logger.debug("newton converged to %.17g in %d iterations", x_, iterations)

    return x_ if abs(f(x_)) < abs(f(x)) else x


class NewtonSolver:
    """
    Newton root finder bound to a set of SolverSettings.

    Attributes:
        settings: Damping floor, tolerance and iteration cap
    """

    def __init__(self, settings: Optional[SolverSettings] = None):
        self.settings = settings or SolverSettings.default()

    def solve(
        self,
        f: Callable[[float], float],
        df: Callable[[float], float],
        x0: float
    ) -> float:
        """Solve f(x) = 0 starting from x0."""
        return newton_root(
            f,
            df,
            x0,
            min_slope=self.settings.min_slope,
            n_epsilon=self.settings.n_epsilon,
            max_iter=self.settings.max_iter,
        )

    def __repr__(self) -> str:
        s = self.settings
        return (f"NewtonSolver(min_slope={s.min_slope}, n_epsilon={s.n_epsilon}, "
                f"max_iter={s.max_iter})")


__all__ = [
    "EPSILON",
    "newton_step",
    "newton_root",
    "NewtonSolver",
]
