"""Trace store: the canonical set of named traces shown on the chart.

The store owns trace data; a renderer only ever sees what the store hands
it. Producers (importers, fitters) may mutate the store at any time, with or
without a renderer attached:

 - Detached: every mutation updates the canonical set immediately and is
   appended to a FIFO queue of pending operations.
 - Attached: the renderer receives one ``initialize`` call with the whole
   canonical set, the pending queue is discarded, and later mutations are
   pushed as an ``append_trace`` or a full redraw.

Renderer failures follow one fallback path: incremental call fails -> full
redraw; redraw fails -> the renderer is marked stale and left alone until
it is attached again. The canonical set is never rolled back.

One store is created per application context and passed to whoever needs
it; there is no module-level instance.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..constants import DEFAULT_PALETTE, PALETTES
from .renderer import Renderer, RendererUnavailable, RenderOutcome, Visibility
from .traces import ColorRegistry, Trace, TraceKind, coerce_xy

logger = logging.getLogger(__name__)

VISIBILITY_VALUES = (True, False, "legend-only")


@dataclass(frozen=True)
class PendingOperation:
    kind: str  # add_points | add_curve | add_annotation | remove | clear
    payload: Dict[str, Any] = field(default_factory=dict)


class TraceStore:
    def __init__(self, palette: Optional[Sequence[str]] = None):
        self.colors = ColorRegistry(palette or PALETTES[DEFAULT_PALETTE])
        self._traces: Dict[str, Trace] = {}
        self._pending: List[PendingOperation] = []
        self._renderer: Optional[Renderer] = None
        self._surface: Any = None
        self._stale = False
        self.last_error: Optional[RendererUnavailable] = None

    # --- Renderer lifecycle ---
    @property
    def is_attached(self) -> bool:
        return self._renderer is not None

    @property
    def is_stale(self) -> bool:
        return self._stale

    @property
    def pending_operations(self) -> Tuple[PendingOperation, ...]:
        return tuple(self._pending)

    def attach(self, renderer: Renderer, surface: Any) -> RenderOutcome:
        """Register ``renderer`` and seed it with the full canonical set."""
        if self.is_attached:
            self.detach()
        self._renderer = renderer
        self._surface = surface
        self._stale = False
        outcome = self._redraw()
        logger.debug(
            "Renderer attached with %d traces, discarded %d pending ops (%s)",
            len(self._traces), len(self._pending), outcome.value,
        )
        self._pending.clear()
        return outcome

    def detach(self) -> None:
        if not self.is_attached:
            return
        self._call("teardown", self._renderer.teardown)
        self._renderer = None
        self._surface = None
        self._stale = False
        self._pending.clear()
        logger.debug("Renderer detached, keeping %d traces", len(self._traces))

    # --- Mutations ---
    def add_points(self, name: str, xs, ys) -> Optional[RenderOutcome]:
        if xs is None or len(xs) == 0:
            return None
        x, y = coerce_xy(xs, ys)
        trace = Trace(name, TraceKind.POINTS, x, y, self.colors.color_for(name))
        return self._insert("add_points", trace)

    def add_curve(
        self, name: str, xs, ys, dash: Optional[str] = None
    ) -> Optional[RenderOutcome]:
        if xs is None or len(xs) == 0:
            return None
        x, y = coerce_xy(xs, ys)
        trace = Trace(
            name, TraceKind.CURVE, x, y, self.colors.color_for(name), dash=dash
        )
        return self._insert("add_curve", trace)

    def add_annotation(
        self, name: str, text: str, x: float, y: float
    ) -> RenderOutcome:
        ax, ay = coerce_xy([x], [y])
        trace = Trace(
            name,
            TraceKind.ANNOTATION,
            ax,
            ay,
            self.colors.color_for(name),
            text=str(text),
        )
        return self._insert("add_annotation", trace)

    def remove_trace_by_name(self, name: str) -> Optional[RenderOutcome]:
        if self._traces.pop(name, None) is None:
            return None
        return self._dispatch(PendingOperation("remove", {"name": name}), self._redraw)

    def clear_plot(self) -> RenderOutcome:
        self._traces.clear()
        return self._dispatch(PendingOperation("clear"), self._redraw)

    def set_visibility(self, name: str, visible: Visibility) -> Optional[RenderOutcome]:
        """Toggle visibility of ``name`` on the renderer only.

        Visibility is not part of the canonical set; it is lost on the next
        full redraw. Returns None when no renderer is attached.
        """
        if not isinstance(visible, (bool, str)) or visible not in VISIBILITY_VALUES:
            raise ValueError(f"invalid visibility {visible!r}")
        if name not in self._traces:
            raise KeyError(name)
        if not self.is_attached:
            return None
        if self._stale:
            return RenderOutcome.STALE
        _, failure = self._call(
            "restyle_visibility",
            self._renderer.restyle_visibility,
            self.get_all_trace_names().index(name),
            visible,
        )
        if failure is not None:
            self._mark_stale()
            return RenderOutcome.STALE
        return RenderOutcome.APPLIED

    def export_image(self, **options) -> Optional[str]:
        if not self.is_attached or self._stale:
            return None
        image, _ = self._call(
            "export_image", lambda surface: self._renderer.export_image(surface, **options)
        )
        return image

    # --- Reads ---
    def has_trace(self, name: str) -> bool:
        return name in self._traces

    def get_trace_by_name(self, name: str) -> Optional[Dict[str, List[float]]]:
        trace = self._traces.get(name)
        return trace.data() if trace is not None else None

    def get_trace_object(self, name: str) -> Optional[Trace]:
        return self._traces.get(name)

    def get_all_trace_names(self) -> List[str]:
        return list(self._traces)

    def traces(self) -> List[Trace]:
        return list(self._traces.values())

    def __len__(self) -> int:
        return len(self._traces)

    def __contains__(self, name: object) -> bool:
        return name in self._traces

    # --- Internals ---
    def _insert(self, kind: str, trace: Trace) -> RenderOutcome:
        # replace-by-name moves the trace to the end of the order
        replaced = self._traces.pop(trace.name, None) is not None
        self._traces[trace.name] = trace
        if replaced:
            effect = self._redraw
        else:
            effect = lambda: self._append(trace)  # noqa: E731
        return self._dispatch(PendingOperation(kind, {"trace": trace}), effect)

    def _dispatch(
        self, op: PendingOperation, effect: Callable[[], RenderOutcome]
    ) -> RenderOutcome:
        if not self.is_attached:
            self._pending.append(op)
            logger.debug("Queued %s (%d pending)", op.kind, len(self._pending))
            return RenderOutcome.DEFERRED
        if self._stale:
            return RenderOutcome.STALE
        return effect()

    def _call(
        self, operation: str, fn: Callable, *args
    ) -> Tuple[Any, Optional[RendererUnavailable]]:
        """Run one renderer call, turning any failure into a value."""
        try:
            return fn(self._surface, *args), None
        except Exception as exc:  # noqa: BLE001
            failure = RendererUnavailable(operation, exc)
            self.last_error = failure
            logger.warning("%s", failure)
            return None, failure

    def _append(self, trace: Trace) -> RenderOutcome:
        _, failure = self._call("append_trace", self._renderer.append_trace, trace)
        if failure is None:
            return RenderOutcome.APPLIED
        return self._redraw()

    def _redraw(self) -> RenderOutcome:
        _, failure = self._call("initialize", self._renderer.initialize, self.traces())
        if failure is None:
            return RenderOutcome.REDRAWN
        self._mark_stale()
        return RenderOutcome.STALE

    def _mark_stale(self) -> None:
        self._stale = True
        logger.error(
            "Renderer marked stale; %d traces kept until it is re-attached",
            len(self._traces),
        )


__all__ = ["PendingOperation", "TraceStore", "VISIBILITY_VALUES"]
