"""CurveLab package root.

Exposes high-level API surface for convenience.
"""
from .analysis.fits import (  # noqa: F401
    FitError,
    FitResult,
    InvalidInput,
    SingularMatrix,
    linear_fit,
    polynomial_fit,
)
from .core import TraceStore  # noqa: F401
from .config import Settings, build_store  # noqa: F401
