"""Plotly implementation of the renderer capability.

The surface is a small holder around a ``go.Figure`` that Streamlit shows
with ``st.plotly_chart``. ``teardown`` drops the figure; any later call on
that surface raises ``SurfaceReleased`` until it is initialized again.
"""
from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Sequence

import plotly.graph_objs as go

from ..constants import ANNOTATION_FONT, CURVE_LINE_WIDTH
from ..core.traces import Trace, TraceKind
from ..themes import DEFAULT_THEME, template_for

IMAGE_MIME = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "webp": "image/webp",
    "svg": "image/svg+xml",
    "pdf": "application/pdf",
    "html": "text/html",
}
PLOTLY_VISIBILITY = {True: True, False: False, "legend-only": "legendonly"}


class SurfaceReleased(RuntimeError):
    """Raised when drawing on a surface that was torn down."""


@dataclass
class PlotSurface:
    key: str = "main"
    height: int = 600
    theme: str = DEFAULT_THEME
    x_title: Optional[str] = "x"
    y_title: Optional[str] = "y"
    figure: Optional[go.Figure] = None
    released: bool = False
    layout: Dict[str, Any] = field(default_factory=dict)

    def require_figure(self) -> go.Figure:
        if self.released or self.figure is None:
            raise SurfaceReleased(f"surface {self.key!r} is not initialized")
        return self.figure


def trace_to_scatter(trace: Trace) -> go.Scatter:
    common = dict(
        x=list(trace.x), y=list(trace.y), mode=trace.mode, name=trace.name
    )
    if trace.kind is TraceKind.POINTS:
        return go.Scatter(marker=dict(color=trace.color), **common)
    if trace.kind is TraceKind.CURVE:
        line = dict(color=trace.color, width=CURVE_LINE_WIDTH)
        if trace.dash:
            line["dash"] = trace.dash
        return go.Scatter(line=line, **common)
    return go.Scatter(
        text=[trace.text or ""],
        textfont=dict(ANNOTATION_FONT),
        textposition="top left",
        **common,
    )


class PlotlyRenderer:
    """Draws store traces on a ``PlotSurface``."""

    def initialize(self, surface: PlotSurface, traces: Sequence[Trace]) -> None:
        fig = go.Figure(data=[trace_to_scatter(t) for t in traces])
        fig.update_layout(
            autosize=True,
            height=surface.height,
            template=template_for(surface.theme),
            xaxis_title=surface.x_title,
            yaxis_title=surface.y_title,
            **surface.layout,
        )
        surface.figure = fig
        surface.released = False

    def append_trace(self, surface: PlotSurface, trace: Trace) -> None:
        surface.require_figure().add_trace(trace_to_scatter(trace))

    def restyle_visibility(self, surface: PlotSurface, index: int, visible) -> None:
        if not isinstance(visible, (bool, str)) or visible not in PLOTLY_VISIBILITY:
            raise ValueError(f"invalid visibility {visible!r}")
        fig = surface.require_figure()
        if not 0 <= index < len(fig.data):
            raise IndexError(f"trace index {index} out of range")
        fig.data[index].visible = PLOTLY_VISIBILITY[visible]

    def export_image(
        self,
        surface: PlotSurface,
        format: str = "png",
        width: Optional[int] = None,
        height: Optional[int] = None,
        scale: float = 1.0,
    ) -> str:
        """Return the figure as a ``data:`` URL.

        Static formats go through ``fig.to_image`` (kaleido); ``html`` is a
        standalone page with plotly.js loaded from the CDN.
        """
        fmt = format.lower()
        if fmt not in IMAGE_MIME:
            raise ValueError(f"unsupported export format {format!r}")
        fig = surface.require_figure()
        if fmt == "html":
            payload = fig.to_html(include_plotlyjs="cdn", full_html=True).encode()
        else:
            payload = fig.to_image(
                format="jpeg" if fmt == "jpg" else fmt,
                width=width,
                height=height,
                scale=scale,
            )
        encoded = base64.b64encode(payload).decode("ascii")
        return f"data:{IMAGE_MIME[fmt]};base64,{encoded}"

    def teardown(self, surface: PlotSurface) -> None:
        surface.figure = None
        surface.released = True


__all__ = [
    "PlotSurface",
    "PlotlyRenderer",
    "SurfaceReleased",
    "trace_to_scatter",
    "IMAGE_MIME",
]
