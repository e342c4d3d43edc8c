"""
Fixed cash flow instruments for bootstrapping.

An Instrument is an immutable list of (time, cash flow) pairs. Builders
construct the standard calibration instruments:
- bond: Fixed coupon bond with unit notional
- cd: Certificate of deposit (single simple-interest payment)
- fra: Forward Rate Agreement

Each instrument knows:
1. Its cash flow times and amounts
2. Its maturity (time of the last cash flow)
3. How to split its cash flows at a given time (used by the bootstrapper)
"""

from dataclasses import dataclass, field
import math
from typing import Iterable, Tuple, Union

import numpy as np
import pandas as pd

from ..conventions import Frequency
from ..errors import DomainError, InvalidOrder, SizeMismatch


@dataclass(frozen=True, eq=False)
class Instrument:
    """
    Fixed cash flow instrument.

    Attributes:
        times: Strictly increasing cash flow times
        cash_flows: Cash flow amounts, one per time
        name: Optional label used in reports
    """
    times: np.ndarray
    cash_flows: np.ndarray
    name: str = field(default="")

    def __post_init__(self):
        u = np.array(self.times, dtype=float).ravel()
        c = np.array(self.cash_flows, dtype=float).ravel()

        if u.size != c.size:
            raise SizeMismatch(
                f"Cash flow times must equal the number of cash flows ({u.size} != {c.size})"
            )
        if np.any(np.diff(u) <= 0) or np.any(np.isnan(u)):
            raise InvalidOrder(f"Cash flow times must be strictly increasing: {u.tolist()}")

        u.setflags(write=False)
        c.setflags(write=False)
        object.__setattr__(self, "times", u)
        object.__setattr__(self, "cash_flows", c)

    @property
    def maturity(self) -> float:
        """Time of last cash flow. AKA maturity, termination."""
        return float(self.times[-1]) if self.times.size else float("nan")

    def last(self) -> float:
        return self.maturity

    def __len__(self) -> int:
        return int(self.times.size)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Instrument):
            return NotImplemented
        return (
            np.array_equal(self.times, other.times)
            and np.array_equal(self.cash_flows, other.cash_flows)
        )

    __hash__ = None

    def split(self, t: float) -> Tuple["Instrument", "Instrument"]:
        """
        Split cash flows into those paid at or before t and those after.

        Args:
            t: Split time

        Returns:
            Tuple of (before, after) instruments
        """
        k = int(np.searchsorted(self.times, t, side="right"))
        before = Instrument(self.times[:k], self.cash_flows[:k], self.name)
        after = Instrument(self.times[k:], self.cash_flows[k:], self.name)
        return before, after

    def to_frame(self) -> pd.DataFrame:
        """Cash flow table."""
        return pd.DataFrame({"time": self.times, "cash_flow": self.cash_flows})

    def __repr__(self) -> str:
        label = f"{self.name}, " if self.name else ""
        return f"Instrument({label}flows={len(self)}, maturity={self.maturity})"


def bond(
    maturity: float,
    frequency: Union[Frequency, int, str] = Frequency.SEMIANNUAL,
    coupon: float = 0.0
) -> Instrument:
    """
    Fixed coupon bond with unit notional.

    Payment times are generated backward from maturity in steps of
    1/frequency, so a maturity that is not a whole number of periods gets a
    short first (stub) period.

    Args:
        maturity: Time of the final payment in years
        frequency: Payments per year
        coupon: Annual coupon rate

    Returns:
        Instrument with ceil(frequency * maturity) cash flows of
        coupon/frequency, the last one including the notional
    """
    if not maturity > 0:
        raise DomainError(f"Bond maturity must be positive, got {maturity}")
    freq = Frequency.coerce(frequency).value

    # round away representation noise such as 3 * 0.1 before ceil
    m = int(math.ceil(round(freq * maturity, 12)))

    # fill backwards from maturity
    times = np.array([maturity - i / freq for i in range(m)][::-1], dtype=float)
    flows = np.full(m, coupon / freq, dtype=float)
    flows[-1] += 1.0  # plus unit notional at maturity

    return Instrument(times, flows, name=f"BOND {maturity:g}Y {coupon:.4%} x{freq}")


def cd(maturity: float, coupon: float) -> Instrument:
    """
    Certificate of deposit.

    Simple interest instrument: the depositor pays 1 today and receives
    1 + coupon * maturity at maturity.
    """
    if not maturity > 0:
        raise DomainError(f"CD maturity must be positive, got {maturity}")
    return Instrument([maturity], [1.0 + coupon * maturity], name=f"CD {maturity:g}Y {coupon:.4%}")


def fra(start: float, end: float, coupon: float) -> Instrument:
    """
    Forward Rate Agreement.

    Pays -1 at start and 1 + coupon * (end - start) at end, so its price
    at inception is 0.
    """
    if start < 0:
        raise DomainError(f"FRA start must be non-negative, got {start}")
    if not end > start:
        raise InvalidOrder(f"FRA end {end} must be greater than start {start}")
    return Instrument(
        [start, end],
        [-1.0, 1.0 + coupon * (end - start)],
        name=f"FRA {start:g}x{end:g} {coupon:.4%}",
    )


def instrument(times: Iterable[float], cash_flows: Iterable[float], name: str = "") -> Instrument:
    """Generic fixed cash flow instrument."""
    return Instrument(np.asarray(list(times), dtype=float), np.asarray(list(cash_flows), dtype=float), name)


certificate_of_deposit = cd
forward_rate_agreement = fra


__all__ = [
    "Instrument",
    "instrument",
    "bond",
    "cd",
    "fra",
    "certificate_of_deposit",
    "forward_rate_agreement",
]
