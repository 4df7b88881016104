"""Trace records and colour assignment."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np


class TraceDataError(ValueError):
    """Raised when trace coordinates are mismatched or not finite."""


class TraceKind(str, Enum):
    POINTS = "points"
    CURVE = "curve"
    ANNOTATION = "annotation"


_MODES = {
    TraceKind.POINTS: "markers",
    TraceKind.CURVE: "lines",
    TraceKind.ANNOTATION: "text",
}


@dataclass(frozen=True)
class Trace:
    name: str
    kind: TraceKind
    x: Tuple[float, ...]
    y: Tuple[float, ...]
    color: str
    text: Optional[str] = None
    dash: Optional[str] = None

    @property
    def mode(self) -> str:
        return _MODES[self.kind]

    def data(self) -> Dict[str, List[float]]:
        return {"x": list(self.x), "y": list(self.y)}


def coerce_xy(xs: Sequence[float], ys: Sequence[float]):
    """Return ``(x, y)`` as tuples of floats, validating length and finiteness."""
    x = np.asarray(xs, dtype=float).ravel()
    y = np.asarray(ys, dtype=float).ravel()
    if len(x) != len(y):
        raise TraceDataError(
            f"x and y lengths differ ({len(x)} != {len(y)})"
        )
    if not (np.all(np.isfinite(x)) and np.all(np.isfinite(y))):
        raise TraceDataError("trace coordinates must be finite numbers")
    return tuple(float(v) for v in x), tuple(float(v) for v in y)


class ColorRegistry:
    """Assigns palette colours to names in first-seen order.

    A name keeps its colour for the lifetime of the registry, even after the
    trace is removed. Once the palette is exhausted colours repeat cyclically.
    """

    def __init__(self, palette: Sequence[str]):
        if not palette:
            raise ValueError("palette must contain at least one colour")
        self._palette = list(palette)
        self._assigned: Dict[str, str] = {}
        self._next = 0

    def color_for(self, name: str) -> str:
        color = self._assigned.get(name)
        if color is None:
            color = self._palette[self._next % len(self._palette)]
            self._next += 1
            self._assigned[name] = color
        return color

    def assigned(self) -> Dict[str, str]:
        return dict(self._assigned)

    def __contains__(self, name: str) -> bool:
        return name in self._assigned


__all__ = [
    "TraceDataError",
    "TraceKind",
    "Trace",
    "coerce_xy",
    "ColorRegistry",
]
