"""
Unit tests for the damped Newton root finder.
"""

import math

import numpy as np
import pytest

from fwdlib.conventions import SolverSettings
from fwdlib.errors import NonConvergence
from fwdlib.newton import EPSILON, NewtonSolver, newton_root, newton_step


def f(x):
    return x * x - 2


def df(x):
    return 2 * x


class TestNewtonStep:
    """Tests for a single damped step."""

    def test_plain_step(self):
        # slope 4 is above the floor
        assert newton_step(2.0, f, df) == pytest.approx(2.0 - 2.0 / 4.0)

    def test_small_slope_clamped(self):
        # slope 0.2 is clamped to 0.5
        x = 0.1
        assert newton_step(x, f, df) == pytest.approx(x - f(x) / 0.5)

    def test_negative_small_slope_keeps_sign(self):
        x = -0.1
        assert newton_step(x, f, df) == pytest.approx(x - f(x) / -0.5)

    def test_zero_floor(self):
        assert newton_step(2.0, f, df, min_slope=0.0) == pytest.approx(1.5)


class TestNewtonRoot:
    """Tests for the full iteration."""

    @pytest.mark.parametrize("x0", [0.1, 0.5, 1.0, 1.5, 3.0, 10.0, 100.0])
    def test_sqrt_two(self, x0):
        r = newton_root(f, df, x0)
        assert abs(r - math.sqrt(2)) <= 20 * EPSILON

    def test_random_starting_points(self):
        rng = np.random.default_rng(42)
        a = rng.uniform(1.0, 4.0)
        sqrta = math.sqrt(a)
        for x in 1 / rng.uniform(0.01, 1.0, size=50):
            r = newton_root(lambda x: x * x - a, lambda x: 2 * x, x)
            assert abs(r - sqrta) <= 20 * EPSILON

    def test_linear(self):
        r = newton_root(lambda x: 3 * x - 1, lambda x: 3.0, 0.0)
        assert r == pytest.approx(1 / 3, abs=4 * EPSILON)

    def test_non_convergence(self):
        # no real root: iterates wander forever
        with pytest.raises(NonConvergence) as exc:
            newton_root(lambda x: x * x + 1, lambda x: 2 * x, 0.5, max_iter=50)
        assert exc.value.iterations == 50

    def test_non_convergence_is_runtime_error(self):
        with pytest.raises(RuntimeError):
            newton_root(lambda x: x * x + 1, lambda x: 2 * x, 0.5, max_iter=10)


class TestNewtonSolver:
    """Tests for the settings-bound solver."""

    def test_default_settings(self):
        solver = NewtonSolver()
        assert solver.settings == SolverSettings()
        assert solver.solve(f, df, 1.0) == pytest.approx(math.sqrt(2), abs=4 * EPSILON)

    def test_iteration_cap_from_settings(self):
        solver = NewtonSolver(SolverSettings(max_iter=5))
        with pytest.raises(NonConvergence):
            solver.solve(lambda x: x * x + 1, lambda x: 2 * x, 0.5)
