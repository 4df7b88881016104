"""Renderer capability contract used by the trace store.

A renderer draws traces on a surface it does not own the data for. Any of
its calls may fail (for instance when the surface was torn down in the
meantime); the store turns such failures into ``RendererUnavailable``
values instead of letting them escape.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, Sequence, Union

from .traces import Trace

Visibility = Union[bool, str]  # True, False or "legend-only"


class Renderer(Protocol):
    def initialize(self, surface: Any, traces: Sequence[Trace]) -> None:
        ...

    def append_trace(self, surface: Any, trace: Trace) -> None:
        ...

    def restyle_visibility(
        self, surface: Any, index: int, visible: Visibility
    ) -> None:
        ...

    def export_image(self, surface: Any, **options) -> str:
        ...

    def teardown(self, surface: Any) -> None:
        ...


@dataclass(frozen=True)
class RendererUnavailable:
    operation: str
    error: BaseException

    def __str__(self) -> str:
        return f"renderer {self.operation} failed: {self.error}"


class RenderOutcome(str, Enum):
    DEFERRED = "deferred"
    APPLIED = "applied"
    REDRAWN = "redrawn"
    STALE = "stale"


__all__ = ["Visibility", "Renderer", "RendererUnavailable", "RenderOutcome"]
