"""
Curves package - forward curve construction and bootstrapping.

Provides:
- ForwardCurve: Piecewise-flat forward curve with discount factors and spot rates
- Instrument: Fixed cash flow instrument, with bond/cd/fra builders
- CurveBootstrapper: Extend a curve one instrument at a time
"""

from .curve import ForwardCurve, create_flat_curve, is_monotonic
from .instruments import (
    Instrument,
    instrument,
    bond,
    cd,
    fra,
    certificate_of_deposit,
    forward_rate_agreement,
)
from .bootstrap import (
    CurveBootstrapper,
    BootstrapResult,
    bootstrap_curve,
    next_forward,
)

__all__ = [
    "ForwardCurve",
    "create_flat_curve",
    "is_monotonic",
    "Instrument",
    "instrument",
    "bond",
    "cd",
    "fra",
    "certificate_of_deposit",
    "forward_rate_agreement",
    "CurveBootstrapper",
    "BootstrapResult",
    "bootstrap_curve",
    "next_forward",
]
