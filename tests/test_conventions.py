"""
Unit tests for conventions module.
"""

import pytest

from fwdlib.conventions import Frequency, SolverSettings


class TestFrequency:
    """Tests for payment frequencies."""

    def test_values(self):
        assert Frequency.ANNUAL.value == 1
        assert Frequency.SEMIANNUAL.value == 2
        assert Frequency.QUARTERLY.value == 4
        assert Frequency.MONTHLY.value == 12

    @pytest.mark.parametrize("s,expected", [
        ("annual", Frequency.ANNUAL),
        ("Semi-Annual", Frequency.SEMIANNUAL),
        ("SEMI", Frequency.SEMIANNUAL),
        ("q", Frequency.QUARTERLY),
        ("12", Frequency.MONTHLY),
    ])
    def test_from_string(self, s, expected):
        assert Frequency.from_string(s) == expected

    def test_from_string_unknown(self):
        with pytest.raises(ValueError):
            Frequency.from_string("WEEKLY")

    def test_coerce(self):
        assert Frequency.coerce(2) == Frequency.SEMIANNUAL
        assert Frequency.coerce(4.0) == Frequency.QUARTERLY
        assert Frequency.coerce("monthly") == Frequency.MONTHLY
        assert Frequency.coerce(Frequency.ANNUAL) == Frequency.ANNUAL
        with pytest.raises(ValueError):
            Frequency.coerce(3)


class TestSolverSettings:
    """Tests for solver setting presets."""

    def test_defaults(self):
        s = SolverSettings.default()
        assert s.min_slope == 0.5
        assert s.n_epsilon == 2
        assert s.max_iter == 1000
        assert s.default_guess == 0.01

    def test_relaxed_preset(self):
        s = SolverSettings.relaxed()
        assert s.n_epsilon > SolverSettings().n_epsilon
        assert s.verify_tolerance > SolverSettings().verify_tolerance

    def test_validation(self):
        with pytest.raises(ValueError):
            SolverSettings(max_iter=0)
        with pytest.raises(ValueError):
            SolverSettings(min_slope=-1)

    def test_with_overrides(self):
        s = SolverSettings().with_overrides(max_iter=10)
        assert s.max_iter == 10
        assert s.min_slope == 0.5

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FWDLIB_MAX_ITER", "25")
        monkeypatch.setenv("FWDLIB_MIN_SLOPE", "0.25")
        s = SolverSettings.from_env()
        assert s.max_iter == 25
        assert s.min_slope == 0.25
        assert s.n_epsilon == 2

    def test_from_env_invalid(self, monkeypatch):
        monkeypatch.setenv("FWDLIB_MAX_ITER", "lots")
        with pytest.raises(ValueError):
            SolverSettings.from_env()
