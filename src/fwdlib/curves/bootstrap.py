"""
Curve bootstrapping engine.

Implements sequential bootstrap of a piecewise-flat forward curve:
1. Take instruments in increasing maturity order
2. Solve for the forward on (last curve time, maturity] that reprices
   each instrument to its target price
3. Append the breakpoint and verify repricing

Target prices are 1 for par instruments (bonds, CDs) and 0 for
instruments with no upfront cost (FRAs).
"""

from dataclasses import dataclass, field
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..conventions import SolverSettings
from ..errors import CurveError, NoCashflowBeyondCurve, SizeMismatch
from ..newton import NewtonSolver
from .curve import ForwardCurve
from .instruments import Instrument

logger = logging.getLogger(__name__)


def next_forward(
    curve: ForwardCurve,
    instrument: Instrument,
    price: float = 1.0,
    guess: Optional[float] = None,
    settings: Optional[SolverSettings] = None
) -> float:
    """
    Forward that extends curve so that instrument prices to price.

    Cash flows at or before the curve end are valued on the existing
    curve; those after it are valued with the curve extended flat at the
    unknown forward.

    Args:
        curve: Curve to extend (not modified)
        instrument: Calibration instrument
        price: Target present value
        guess: Initial forward, defaults to the last curve forward
            (or settings.default_guess on an empty curve)
        settings: Solver settings

    Returns:
        Forward F such that appending (instrument.maturity, F) reprices
        the instrument

    Raises:
        NoCashflowBeyondCurve: If no cash flow falls after the curve end
        NonConvergence: If the Newton iteration fails
    """
    settings = settings or SolverSettings.default()
    t_end = curve.last()

    before, after = instrument.split(t_end)
    if len(after) == 0:
        raise NoCashflowBeyondCurve(
            f"No cash flows past end of curve {t_end} "
            f"(instrument maturity {instrument.maturity})"
        )

    # present value of cash flows to curve end
    p0 = curve.present_value(before)

    def residual(f: float) -> float:
        return -price + p0 + curve.with_extrapolation(f).present_value(after)

    # the new forward only acts on each cash flow over (t_end, u_j]
    exposure = after.times - t_end

    def slope(f: float) -> float:
        discount = curve.with_extrapolation(f).discount(after.times)
        return float(-np.sum(exposure * after.cash_flows * discount))

    if guess is None:
        last = curve.last_forward()
        guess = settings.default_guess if last is None else last

    return NewtonSolver(settings).solve(residual, slope, guess)


@dataclass
class BootstrapResult:
    """Result of curve bootstrap."""
    curve: ForwardCurve
    forwards: List[float]
    repricing_errors: Dict[str, float]
    success: bool
    message: str
    instruments: List[Instrument] = field(default_factory=list)
    prices: List[float] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        """Per-instrument repricing report."""
        rows = []
        for inst, price, fwd in zip(self.instruments, self.prices, self.forwards):
            label = inst.name or f"{inst.maturity:g}"
            rows.append({
                "instrument": label,
                "maturity": inst.maturity,
                "target_price": price,
                "forward": fwd,
                "present_value": self.curve.present_value(inst),
                "error": self.repricing_errors.get(label, float("nan")),
            })
        return pd.DataFrame(rows)


class CurveBootstrapper:
    """
    Bootstrap a piecewise-flat forward curve from instruments and prices.

    The bootstrapper:
    1. Requires instruments in increasing maturity order
    2. Sequentially solves for each forward
    3. Verifies that instruments reprice within tolerance

    Attributes:
        settings: Newton and verification settings
    """

    def __init__(self, settings: Optional[SolverSettings] = None):
        self.settings = settings or SolverSettings.default()

    def step(
        self,
        curve: ForwardCurve,
        instrument: Instrument,
        price: float = 1.0,
        guess: Optional[float] = None
    ) -> float:
        """
        Extend curve in place by one breakpoint at the instrument maturity.

        The curve is only modified once the solve has succeeded.

        Returns:
            The new forward
        """
        f = next_forward(curve, instrument, price, guess, self.settings)
        curve.append(instrument.maturity, f)
        logger.debug(
            "bootstrapped %s: t=%g forward=%.12f",
            instrument.name or "instrument", instrument.maturity, f,
        )
        return f

    def bootstrap(
        self,
        instruments: Sequence[Instrument],
        prices: Optional[Sequence[float]] = None,
        curve: Optional[ForwardCurve] = None,
        verify: bool = True,
        raise_on_error: bool = True
    ) -> BootstrapResult:
        """
        Bootstrap curve from instruments.

        Args:
            instruments: Calibration instruments, increasing maturity
            prices: Target prices (default 1 for every instrument)
            curve: Starting curve, copied (default empty)
            verify: Whether to verify repricing after bootstrap
            raise_on_error: Raise instead of returning success=False

        Returns:
            BootstrapResult with curve and diagnostics
        """
        instruments = list(instruments)
        prices = [1.0] * len(instruments) if prices is None else [float(p) for p in prices]
        if len(prices) != len(instruments):
            raise SizeMismatch(
                f"Need one price per instrument ({len(prices)} != {len(instruments)})"
            )

        curve = ForwardCurve() if curve is None else curve.copy()
        forwards: List[float] = []

        for inst, price in zip(instruments, prices):
            try:
                forwards.append(self.step(curve, inst, price))
            except CurveError as e:
                if raise_on_error:
                    raise
                logger.warning("bootstrap failed at %s: %s", inst.name or inst.maturity, e)
                return BootstrapResult(
                    curve=curve,
                    forwards=forwards,
                    repricing_errors={},
                    success=False,
                    message=f"Bootstrap failed at {inst.name or inst.maturity}: {e}",
                    instruments=instruments[:len(forwards)],
                    prices=prices[:len(forwards)],
                )

        repricing_errors: Dict[str, float] = {}
        if verify:
            repricing_errors = self._verify_repricing(curve, instruments, prices)

            max_error = max((abs(e) for e in repricing_errors.values()), default=0.0)
            if max_error > self.settings.verify_tolerance:
                logger.warning(
                    "repricing error %.2e exceeds tolerance %.2e",
                    max_error, self.settings.verify_tolerance,
                )
                return BootstrapResult(
                    curve=curve,
                    forwards=forwards,
                    repricing_errors=repricing_errors,
                    success=False,
                    message=(f"Repricing error {max_error:.2e} exceeds "
                             f"tolerance {self.settings.verify_tolerance:.2e}"),
                    instruments=instruments,
                    prices=prices,
                )

        return BootstrapResult(
            curve=curve,
            forwards=forwards,
            repricing_errors=repricing_errors,
            success=True,
            message="Bootstrap successful",
            instruments=instruments,
            prices=prices,
        )

    def _verify_repricing(
        self,
        curve: ForwardCurve,
        instruments: List[Instrument],
        prices: List[float]
    ) -> Dict[str, float]:
        """
        Verify that instruments reprice to their target prices.

        Returns dict of {label: error} where error = (pv - price) relative to
        max(1, |price|).
        """
        errors = {}

        for inst, price in zip(instruments, prices):
            pv = curve.present_value(inst)
            errors[inst.name or f"{inst.maturity:g}"] = (pv - price) / max(1.0, abs(price))

        return errors


def bootstrap_curve(
    instruments: Sequence[Instrument],
    prices: Optional[Sequence[float]] = None,
    settings: Optional[SolverSettings] = None
) -> ForwardCurve:
    """
    Convenience function to bootstrap a curve from instruments.

    Raises:
        CurveError: If any step fails
        RuntimeError: If verification fails
    """
    result = CurveBootstrapper(settings).bootstrap(instruments, prices)

    if not result.success:
        raise RuntimeError(f"Bootstrap failed: {result.message}")

    return result.curve


__all__ = [
    "next_forward",
    "CurveBootstrapper",
    "BootstrapResult",
    "bootstrap_curve",
]
