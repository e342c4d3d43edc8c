"""
FwdLib: Piecewise-Flat Forward Curve Bootstrapping Library

A small library for:
- Representing piecewise-flat forward curves (value, integral, discount, spot)
- Describing fixed cash flow instruments (bonds, CDs, FRAs)
- Damped Newton-Raphson root finding
- Bootstrapping a curve so each calibration instrument reprices exactly

Scope: deterministic curves only; no stochastic evolution, no options.
"""

__version__ = "0.1.0"

# Core modules
from .conventions import Frequency, SolverSettings
from .errors import (
    CurveError,
    InvalidOrder,
    SizeMismatch,
    NoCashflowBeyondCurve,
    NonConvergence,
    DomainError,
)
from .newton import newton_root, newton_step, NewtonSolver

# Curves
from .curves import (
    ForwardCurve,
    create_flat_curve,
    Instrument,
    instrument,
    bond,
    cd,
    fra,
    CurveBootstrapper,
    BootstrapResult,
    bootstrap_curve,
    next_forward,
)

__all__ = [
    # Version
    "__version__",
    # Conventions
    "Frequency",
    "SolverSettings",
    # Errors
    "CurveError",
    "InvalidOrder",
    "SizeMismatch",
    "NoCashflowBeyondCurve",
    "NonConvergence",
    "DomainError",
    # Root finding
    "newton_root",
    "newton_step",
    "NewtonSolver",
    # Curves
    "ForwardCurve",
    "create_flat_curve",
    "Instrument",
    "instrument",
    "bond",
    "cd",
    "fra",
    # Bootstrap
    "CurveBootstrapper",
    "BootstrapResult",
    "bootstrap_curve",
    "next_forward",
]
