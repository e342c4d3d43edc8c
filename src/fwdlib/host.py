"""
Array-in, array-out surface for host environments (spreadsheets, notebooks).

Every function takes plain numbers or sequences and returns a float, a
numpy array or a curve/instrument object. Curve-producing operations
never modify their inputs: bootstrap_next returns a new curve.

Host conventions:
    - A single time of 0 (e.g. an empty spreadsheet range) means an empty curve
    - An initial guess of 0 means "use the default guess"
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import numpy as np

from .conventions import Frequency, SolverSettings
from .curves.bootstrap import bootstrap_curve, next_forward
from .curves.curve import ForwardCurve
from .curves.instruments import Instrument, bond, cd, fra

TimeLike = Union[float, Sequence[float], np.ndarray]


# ----------------------------------------------------------------------
# Curves

def make_curve(
    times: Iterable[float],
    forwards: Iterable[float],
    extrapolation: Optional[float] = None
) -> ForwardCurve:
    """
    Piecewise flat forward curve from arrays.

    Args:
        times: Increasing positive breakpoint times
        forwards: Forward values, same length as times
        extrapolation: Optional forward past the last time

    Raises:
        SizeMismatch: If times and forwards differ in length
        InvalidOrder: If times are not strictly increasing and positive
    """
    t = np.asarray(list(times), dtype=float)
    f = np.asarray(list(forwards), dtype=float)
    if t.size == 1 and f.size == 1 and t[0] == 0:
        return ForwardCurve(extrapolation=extrapolation)
    return ForwardCurve(t, f, extrapolation)


def curve_times(curve: ForwardCurve) -> np.ndarray:
    return curve.times


def curve_forwards(curve: ForwardCurve) -> np.ndarray:
    return curve.forwards


def curve_extrapolate(curve: ForwardCurve, forward: float) -> ForwardCurve:
    """New curve with the given extrapolation value."""
    return curve.with_extrapolation(forward)


def curve_value(curve: ForwardCurve, t: TimeLike):
    return curve.value(t)


def curve_integral(curve: ForwardCurve, t: TimeLike):
    return curve.integral(t)


def curve_discount(curve: ForwardCurve, t: TimeLike):
    return curve.discount(t)


def curve_spot(curve: ForwardCurve, t: TimeLike):
    return curve.spot(t)


# ----------------------------------------------------------------------
# Instruments

def make_instrument(times: Iterable[float], cash_flows: Iterable[float]) -> Instrument:
    """
    Fixed cash flow instrument from arrays.

    Raises:
        SizeMismatch: If times and cash_flows differ in length
    """
    return Instrument(np.asarray(list(times), dtype=float), np.asarray(list(cash_flows), dtype=float))


def make_bond(maturity: float, frequency: Union[Frequency, int, str], coupon: float) -> Instrument:
    return bond(maturity, frequency, coupon)


def make_cd(maturity: float, coupon: float) -> Instrument:
    return cd(maturity, coupon)


def make_fra(start: float, end: float, coupon: float) -> Instrument:
    return fra(start, end, coupon)


def instrument_times(inst: Instrument) -> np.ndarray:
    return np.array(inst.times)


def instrument_cash_flows(inst: Instrument) -> np.ndarray:
    return np.array(inst.cash_flows)


def instrument_from_quote(quote: Dict[str, Any]) -> Instrument:
    """
    Build an instrument from a quote dict.

    Expected keys (subset used per instrument):
        instrument_type: BOND, CD, FRA or CASHFLOWS
        maturity: years (BOND, CD)
        frequency: payments per year or name (BOND, default 2)
        start, end: years (FRA)
        coupon: annual rate
        times, cash_flows: arrays (CASHFLOWS)
    """
    inst = str(quote.get("instrument_type", "")).upper()
    coupon = float(quote.get("coupon", 0.0))

    if inst == "BOND":
        return bond(float(quote["maturity"]), quote.get("frequency", 2), coupon)
    if inst in {"CD", "DEPOSIT"}:
        return cd(float(quote["maturity"]), coupon)
    if inst == "FRA":
        return fra(float(quote["start"]), float(quote["end"]), coupon)
    if inst in {"CASHFLOWS", "INSTRUMENT"}:
        return make_instrument(quote["times"], quote["cash_flows"])

    raise ValueError(f"Unsupported instrument_type: {inst}")


def default_price(quote: Dict[str, Any]) -> float:
    """Target price for a quote: explicit price, else 0 for FRAs and 1 otherwise."""
    if "price" in quote:
        return float(quote["price"])
    return 0.0 if str(quote.get("instrument_type", "")).upper() == "FRA" else 1.0


# ----------------------------------------------------------------------
# Pricing and bootstrapping

def present_value(inst: Instrument, curve: ForwardCurve) -> float:
    return curve.present_value(inst)


def duration(inst: Instrument, curve: ForwardCurve) -> float:
    return curve.duration(inst)


def bootstrap_next(
    curve: ForwardCurve,
    inst: Instrument,
    target_price: float = 1.0,
    initial_guess: float = 0.0,
    settings: Optional[SolverSettings] = None
) -> ForwardCurve:
    """
    Return a new curve extended so that inst prices to target_price.

    Args:
        curve: Existing curve (left unchanged)
        inst: Calibration instrument with maturity past the curve end
        target_price: 1 for par instruments, 0 for FRAs
        initial_guess: Starting forward; 0 uses the curve's last forward

    Raises:
        NoCashflowBeyondCurve: If inst has no cash flow past the curve end
        NonConvergence: If the solve fails
    """
    guess = None if initial_guess == 0 else initial_guess
    f = next_forward(curve, inst, target_price, guess, settings)
    return curve.extended(inst.maturity, f)


def bootstrap_from_quotes(
    quotes: List[Dict[str, Any]],
    settings: Optional[SolverSettings] = None
) -> ForwardCurve:
    """
    Convenience function to bootstrap a curve from quote dictionaries.

    Quotes are used in the order given and must have increasing maturity.

    Example quote format:
        {"instrument_type": "CD", "maturity": 0.25, "coupon": 0.05}
        {"instrument_type": "FRA", "start": 0.25, "end": 0.5, "coupon": 0.051}
        {"instrument_type": "BOND", "maturity": 2, "frequency": 2, "coupon": 0.052}
    """
    instruments = [instrument_from_quote(q) for q in quotes]
    prices = [default_price(q) for q in quotes]

    return bootstrap_curve(instruments, prices, settings)


__all__ = [
    "make_curve",
    "curve_times",
    "curve_forwards",
    "curve_extrapolate",
    "curve_value",
    "curve_integral",
    "curve_discount",
    "curve_spot",
    "make_instrument",
    "make_bond",
    "make_cd",
    "make_fra",
    "instrument_times",
    "instrument_cash_flows",
    "instrument_from_quote",
    "default_price",
    "present_value",
    "duration",
    "bootstrap_next",
    "bootstrap_from_quotes",
]
