"""Import and fitting workflow on top of a TraceStore.

Raw rows -> ``import_table`` (points trace) -> ``run_fit`` (curve trace plus
equation annotation). Every table owns at most one fit at a time.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import numpy as np
import pandas as pd

from .analysis.fits import (
    FitResult,
    linear_fit,
    polynomial_fit,
    sample_curve,
)
from .constants import CURVE_SAMPLES, DEFAULT_DEGREE, FIT_METHODS, PAD_FACTOR
from .core.trace_store import TraceStore
from .utils import read_xy_upload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FitSummary:
    name: str
    annotation_name: str
    fit: FitResult
    curve_x: np.ndarray
    curve_y: np.ndarray


def points_trace_name(table_id: int) -> str:
    return f"Table {table_id} - points"


def fit_prefix(table_id: int) -> str:
    return f"Fit Table {table_id}"


def fit_trace_name(table_id: int, method: str, degree: int = DEFAULT_DEGREE) -> str:
    name = f"{fit_prefix(table_id)} - {method}"
    if method == "polynomial":
        name += f" (deg {degree})"
    return name


def import_table(store: TraceStore, table_id: int, source) -> pd.DataFrame:
    """Parse ``source`` (text, bytes or upload) and plot it as the table's points."""
    df = read_xy_upload(source)
    name = points_trace_name(table_id)
    store.add_points(name, df["x"].to_numpy(), df["y"].to_numpy())
    logger.info("Imported %d rows into %s", len(df), name)
    return df


def table_frame(store: TraceStore, table_id: int) -> pd.DataFrame:
    data = store.get_trace_by_name(points_trace_name(table_id))
    if data is None:
        return pd.DataFrame(columns=["x", "y"], dtype=float)
    return pd.DataFrame(data)


def clear_fits(store: TraceStore, table_id: int) -> List[str]:
    prefix = fit_prefix(table_id) + " - "
    removed = [n for n in store.get_all_trace_names() if n.startswith(prefix)]
    for name in removed:
        store.remove_trace_by_name(name)
    return removed


def clear_table(store: TraceStore, table_id: int) -> None:
    clear_fits(store, table_id)
    store.remove_trace_by_name(points_trace_name(table_id))


def run_fit(
    store: TraceStore,
    table_id: int,
    method: str = "linear",
    degree: int = DEFAULT_DEGREE,
    samples: int = CURVE_SAMPLES,
    pad_factor: float = PAD_FACTOR,
) -> FitSummary:
    """Fit the table's points and replace its fit curve and equation.

    Raises LookupError when the table has no points, ValueError for an
    unknown method and lets FitError from the engine propagate.
    """
    if method not in FIT_METHODS:
        raise ValueError(f"unknown fit method {method!r}")
    data = store.get_trace_by_name(points_trace_name(table_id))
    if not data or not data["x"]:
        raise LookupError(
            f"No points found for table {table_id}. Import data first."
        )

    order = np.argsort(np.asarray(data["x"], dtype=float), kind="stable")
    xs = np.asarray(data["x"], dtype=float)[order]
    ys = np.asarray(data["y"], dtype=float)[order]
    if method == "linear":
        fit = linear_fit(xs, ys)
    else:
        fit = polynomial_fit(xs, ys, max(1, int(degree)))

    curve_x, curve_y = sample_curve(fit, xs, samples=samples, pad_factor=pad_factor)
    name = fit_trace_name(table_id, method, fit.degree)
    clear_fits(store, table_id)
    store.add_curve(name, curve_x, curve_y)

    annotation_name = f"{name} - eq"
    store.add_annotation(
        annotation_name, fit.equation, float(curve_x[-1]), float(np.max(curve_y))
    )
    logger.info("%s: %s (r2=%.6f)", name, fit.equation, fit.stats.r2)
    return FitSummary(name, annotation_name, fit, curve_x, curve_y)


__all__ = [
    "FitSummary",
    "points_trace_name",
    "fit_prefix",
    "fit_trace_name",
    "import_table",
    "table_frame",
    "clear_fits",
    "clear_table",
    "run_fit",
]
