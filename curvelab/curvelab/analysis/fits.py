"""Fitting routines: linear and polynomial least squares.

The polynomial fit solves the normal equations built from power sums of x
with Gaussian elimination (partial pivoting). High degrees with wide x
ranges are ill-conditioned; that is a known limitation of the method.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class FitError(ValueError):
    """Base class for fitting failures."""


class InvalidInput(FitError):
    """Raised when the data cannot be fitted with the requested degree."""


class SingularMatrix(FitError):
    """Raised when the normal equations have no unique solution."""


def _horner(coefficients, x):
    value = 0.0
    for coef in reversed(coefficients):
        value = value * x + coef
    return value


@dataclass(frozen=True)
class FitStats:
    sse: float
    sst: float
    r2: float
    rmse: float


@dataclass(frozen=True)
class FitResult:
    model: str
    degree: int
    coefficients: Tuple[float, ...]
    stats: FitStats

    def evaluate(self, x):
        """Evaluate the polynomial at ``x`` (scalar or array) with Horner's rule."""
        return _horner(self.coefficients, x)

    def predict(self, xs) -> np.ndarray:
        return np.asarray(self.evaluate(np.asarray(xs, dtype=float)), dtype=float)

    @property
    def equation(self) -> str:
        return format_equation(self.coefficients)


def _as_vector(values, label: str) -> np.ndarray:
    if isinstance(values, pd.Series):
        values = values.to_numpy()
    if isinstance(values, (str, bytes, dict)) or not isinstance(
        values, (list, tuple, np.ndarray)
    ):
        raise InvalidInput(f"{label} must be an array of numbers")
    try:
        arr = np.asarray(values, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"{label} must contain only numbers") from exc
    if arr.ndim != 1:
        raise InvalidInput(f"{label} must be one-dimensional")
    return arr


def _check_inputs(xs, ys, degree) -> Tuple[np.ndarray, np.ndarray]:
    x = _as_vector(xs, "xs")
    y = _as_vector(ys, "ys")
    if len(x) == 0 or len(x) != len(y):
        raise InvalidInput("xs and ys must have the same non-zero length")
    if isinstance(degree, bool) or not isinstance(degree, (int, np.integer)):
        raise InvalidInput(f"degree must be an integer, got {degree!r}")
    if degree < 1:
        raise InvalidInput(f"degree must be >= 1, got {degree}")
    if len(x) <= degree:
        raise InvalidInput(
            f"not enough points for degree {degree}: "
            f"need at least {degree + 1}, got {len(x)}"
        )
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
        raise InvalidInput("xs and ys must contain only finite numbers")
    return x, y


def solve_linear_system(a, b) -> np.ndarray:
    """Solve ``a @ sol = b`` with partial pivoting.

    Neither input is modified. Raises SingularMatrix when the largest
    available pivot is not finite or is within rounding of zero, measured
    against the largest entry of ``a``.
    """
    m = np.array(a, dtype=float)
    rhs = np.array(b, dtype=float)
    n = m.shape[0]
    if m.shape != (n, n) or rhs.shape != (n,):
        raise InvalidInput(
            f"expected a square system, got {m.shape} and {rhs.shape}"
        )
    tol = np.finfo(float).eps * n * (np.abs(m).max() if m.size else 0.0)

    for k in range(n):
        pivot_row = k + int(np.argmax(np.abs(m[k:, k])))
        pivot_mag = abs(m[pivot_row, k])
        if not np.isfinite(pivot_mag) or pivot_mag <= tol:
            raise SingularMatrix(
                f"singular matrix in fit (pivot {pivot_mag} at step {k})"
            )
        if pivot_row != k:
            m[[k, pivot_row]] = m[[pivot_row, k]]
            rhs[[k, pivot_row]] = rhs[[pivot_row, k]]

        pivot = m[k, k]
        for i in range(k + 1, n):
            factor = m[i, k] / pivot
            rhs[i] -= factor * rhs[k]
            m[i, k:] -= factor * m[k, k:]

    sol = np.zeros(n)
    for i in range(n - 1, -1, -1):
        sol[i] = (rhs[i] - np.dot(m[i, i + 1:], sol[i + 1:])) / m[i, i]
    return sol


def _normal_equations(x: np.ndarray, y: np.ndarray, degree: int):
    size = degree + 1
    # power sums S[k] = sum(x**k), k = 0..2*degree
    power_sums = np.zeros(2 * degree + 1)
    xp = np.ones_like(x)
    for k in range(2 * degree + 1):
        power_sums[k] = xp.sum()
        xp = xp * x

    rhs = np.zeros(size)
    xp = np.ones_like(x)
    for i in range(size):
        rhs[i] = np.sum(y * xp)
        xp = xp * x

    idx = np.arange(size)
    ata = power_sums[idx[:, None] + idx[None, :]]
    return ata, rhs


def fit_statistics(ys, predicted) -> FitStats:
    y = np.asarray(ys, dtype=float)
    yhat = np.asarray(predicted, dtype=float)
    n = len(y)
    sse = float(np.sum((y - yhat) ** 2))
    sst = float(np.sum((y - np.mean(y)) ** 2))
    r2 = 1.0 if sst == 0 else 1.0 - sse / sst
    rmse = float(np.sqrt(sse / n))
    return FitStats(sse=sse, sst=sst, r2=r2, rmse=rmse)


def polynomial_fit(xs, ys, degree: int) -> FitResult:
    x, y = _check_inputs(xs, ys, degree)
    degree = int(degree)
    ata, rhs = _normal_equations(x, y, degree)
    coeffs = solve_linear_system(ata, rhs)
    coefficients = tuple(float(c) for c in coeffs)
    stats = fit_statistics(y, _horner(coefficients, x))
    logger.debug(
        "Fitted degree %d to %d points: r2=%.6g rmse=%.6g",
        degree, len(x), stats.r2, stats.rmse,
    )
    return FitResult(
        model="linear" if degree == 1 else f"poly_{degree}",
        degree=degree,
        coefficients=coefficients,
        stats=stats,
    )


def linear_fit(xs, ys) -> FitResult:
    return polynomial_fit(xs, ys, 1)


def format_equation(coefficients: Sequence[float], precision: int = 4) -> str:
    parts = []
    for power, coef in enumerate(coefficients):
        c = float(coef)
        if power == 0:
            parts.append(f"{c:.{precision}f}")
            continue
        term = "x" if power == 1 else f"x^{power}"
        sign = "+" if c >= 0 else "-"
        parts.append(f"{sign} {abs(c):.{precision}f} {term}")
    return "y = " + " ".join(parts)


def sample_curve(
    fit: FitResult,
    xs,
    samples: int = 600,
    pad_factor: float = 1.0,
) -> Tuple[np.ndarray, np.ndarray]:
    """Sample ``fit`` over the data range of ``xs`` extended on both sides.

    The range grows by ``pad_factor * span`` each way; a zero span falls
    back to ``pad_factor`` absolute units.
    """
    if samples < 2:
        raise InvalidInput(f"samples must be >= 2, got {samples}")
    if not pad_factor > 0:
        raise InvalidInput(f"pad_factor must be positive, got {pad_factor}")
    x = _as_vector(xs, "xs")
    if len(x) == 0:
        raise InvalidInput("xs must not be empty")
    lo, hi = float(np.min(x)), float(np.max(x))
    span = hi - lo
    if span == 0:
        lo, hi = lo - pad_factor, hi + pad_factor
    else:
        lo, hi = lo - span * pad_factor, hi + span * pad_factor
    curve_x = np.linspace(lo, hi, int(samples))
    return curve_x, fit.predict(curve_x)


__all__ = [
    "FitError",
    "InvalidInput",
    "SingularMatrix",
    "FitStats",
    "FitResult",
    "solve_linear_system",
    "fit_statistics",
    "polynomial_fit",
    "linear_fit",
    "format_equation",
    "sample_curve",
]
