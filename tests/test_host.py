"""
Unit tests for the host boundary surface.
"""

import math

import numpy as np
import pytest

from fwdlib import host
from fwdlib.curves import ForwardCurve
from fwdlib.errors import DomainError, NoCashflowBeyondCurve, SizeMismatch


class TestHostCurves:
    """Tests for array-based curve functions."""

    @pytest.fixture
    def curve(self):
        return host.make_curve([1, 2, 3], [.1, .2, .3])

    def test_make_curve_size_mismatch(self):
        with pytest.raises(SizeMismatch):
            host.make_curve([1, 2], [.1])

    def test_make_curve_single_zero_is_empty(self):
        curve = host.make_curve([0], [0], extrapolation=0.03)
        assert len(curve) == 0
        assert host.curve_value(curve, 5) == 0.03

    def test_queries_scalar_and_array(self, curve):
        assert host.curve_value(curve, 1.5) == .2
        np.testing.assert_array_equal(host.curve_value(curve, [0.5, 2.5]), [.1, .3])
        assert host.curve_integral(curve, 2.5) == pytest.approx(0.45)
        assert host.curve_discount(curve, 1) == pytest.approx(math.exp(-0.1))
        np.testing.assert_allclose(host.curve_spot(curve, [0.5, 2.0]), [.1, .15])

    def test_accessors(self, curve):
        np.testing.assert_array_equal(host.curve_times(curve), [1, 2, 3])
        np.testing.assert_array_equal(host.curve_forwards(curve), [.1, .2, .3])

    def test_extrapolate_returns_new_curve(self, curve):
        longer = host.curve_extrapolate(curve, 0.4)
        assert host.curve_value(longer, 10) == 0.4
        with pytest.raises(DomainError):
            host.curve_value(curve, 10)


class TestHostInstruments:
    """Tests for instrument construction from the host."""

    def test_make_instrument(self):
        inst = host.make_instrument([1, 2], [0.05, 1.05])
        np.testing.assert_array_equal(host.instrument_times(inst), [1, 2])
        np.testing.assert_array_equal(host.instrument_cash_flows(inst), [0.05, 1.05])

    def test_make_instrument_size_mismatch(self):
        with pytest.raises(SizeMismatch):
            host.make_instrument([1, 2], [1.05])

    def test_named_builders(self):
        assert len(host.make_bond(2, 4, 0.05)) == 8
        assert len(host.make_bond(2, "semiannual", 0.05)) == 4
        assert host.make_cd(1, 0.05).cash_flows[0] == pytest.approx(1.05)
        assert host.make_fra(1, 2, 0.05).cash_flows[0] == -1.0

    def test_instrument_from_quote(self):
        b = host.instrument_from_quote({"instrument_type": "BOND", "maturity": 2, "coupon": 0.05})
        assert len(b) == 4
        f = host.instrument_from_quote({"instrument_type": "fra", "start": 0.5, "end": 1.0, "coupon": 0.04})
        assert f.maturity == 1.0
        with pytest.raises(ValueError):
            host.instrument_from_quote({"instrument_type": "SWAPTION"})

    def test_default_price(self):
        assert host.default_price({"instrument_type": "FRA"}) == 0.0
        assert host.default_price({"instrument_type": "BOND"}) == 1.0
        assert host.default_price({"instrument_type": "BOND", "price": 0.98}) == 0.98


class TestHostBootstrap:
    """Tests for copy-extend bootstrapping."""

    def test_bootstrap_next_returns_new_curve(self):
        curve = host.make_curve([0], [0])
        b1 = host.make_bond(1, 2, 0.05)
        c1 = host.bootstrap_next(curve, b1)

        assert len(curve) == 0
        assert len(c1) == 1
        assert host.present_value(b1, c1) == pytest.approx(1.0, abs=1e-13)

        b2 = host.make_bond(2, 2, 0.05)
        c2 = host.bootstrap_next(c1, b2, 1.0, 0.0)
        assert len(c1) == 1
        assert len(c2) == 2
        assert host.present_value(b2, c2) == pytest.approx(1.0, abs=1e-13)

    def test_bootstrap_next_with_guess(self):
        curve = ForwardCurve()
        inst = host.make_cd(1, 0.05)
        c = host.bootstrap_next(curve, inst, initial_guess=0.2)
        assert c.forwards[0] == pytest.approx(math.log(1.05), abs=1e-14)

    def test_bootstrap_next_error(self):
        curve = host.make_curve([1, 2], [.05, .05])
        with pytest.raises(NoCashflowBeyondCurve):
            host.bootstrap_next(curve, host.make_cd(1.5, 0.05))
        assert len(curve) == 2

    def test_duration(self):
        curve = host.make_curve([5], [0.05])
        inst = host.make_cd(2, 0.0)
        assert host.duration(inst, curve) == pytest.approx(-2 * math.exp(-0.1))

    def test_bootstrap_from_quotes(self):
        quotes = [
            {"instrument_type": "CD", "maturity": 0.25, "coupon": 0.05},
            {"instrument_type": "FRA", "start": 0.25, "end": 0.5, "coupon": 0.051},
            {"instrument_type": "BOND", "maturity": 2, "frequency": 2, "coupon": 0.052},
        ]
        curve = host.bootstrap_from_quotes(quotes)

        assert len(curve) == 3
        for q in quotes:
            inst = host.instrument_from_quote(q)
            assert host.present_value(inst, curve) == pytest.approx(host.default_price(q), abs=1e-12)
