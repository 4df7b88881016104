import base64

import pytest

from curvelab.core.trace_store import TraceStore
from curvelab.core.traces import Trace, TraceKind
from curvelab.viz.plotly_renderer import (
    PlotlyRenderer,
    PlotSurface,
    SurfaceReleased,
    trace_to_scatter,
)


def test_trace_to_scatter_styles():
    pts = trace_to_scatter(Trace("p", TraceKind.POINTS, (1.0,), (2.0,), "#ff0000"))
    assert pts.mode == "markers"
    assert pts.marker.color == "#ff0000"
    curve = trace_to_scatter(
        Trace("c", TraceKind.CURVE, (1.0, 2.0), (2.0, 3.0), "#00ff00", dash="dash")
    )
    assert curve.line.width == 2
    assert curve.line.dash == "dash"
    note = trace_to_scatter(
        Trace("n", TraceKind.ANNOTATION, (1.0,), (2.0,), "#0000ff", text="y = x")
    )
    assert note.mode == "text"
    assert tuple(note.text) == ("y = x",)
    assert note.textfont.size == 12


def test_store_drives_plotly_figure():
    store = TraceStore()
    store.add_points("A", [1, 2], [3, 4])
    surface = PlotSurface()
    renderer = PlotlyRenderer()
    store.attach(renderer, surface)
    assert [t.name for t in surface.figure.data] == ["A"]
    store.add_curve("B", [0, 1], [0, 1])
    assert [t.name for t in surface.figure.data] == ["A", "B"]
    store.remove_trace_by_name("A")
    assert [t.name for t in surface.figure.data] == ["B"]
    store.set_visibility("B", "legend-only")
    assert surface.figure.data[0].visible == "legendonly"


def test_released_surface_falls_back_to_redraw():
    store = TraceStore()
    surface = PlotSurface()
    renderer = PlotlyRenderer()
    store.attach(renderer, surface)
    renderer.teardown(surface)
    renderer.teardown(surface)
    store.add_points("A", [1], [1])
    assert store.last_error.operation == "append_trace"
    assert isinstance(store.last_error.error, SurfaceReleased)
    assert [t.name for t in surface.figure.data] == ["A"]


def test_export_html_data_url():
    surface = PlotSurface()
    renderer = PlotlyRenderer()
    renderer.initialize(surface, [])
    url = renderer.export_image(surface, format="html")
    header, payload = url.split(",", 1)
    assert header == "data:text/html;base64"
    assert b"<html>" in base64.b64decode(payload)



def test_export_rejects_unknown_format():
    surface = PlotSurface()
    renderer = PlotlyRenderer()
    renderer.initialize(surface, [])
    with pytest.raises(ValueError):
        renderer.export_image(surface, format="bmp")
