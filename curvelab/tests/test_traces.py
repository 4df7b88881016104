import pytest

from curvelab.constants import PALETTES
from curvelab.core.traces import ColorRegistry, Trace, TraceKind, coerce_xy


def test_colors_assigned_in_first_seen_order_and_cycle():
    reg = ColorRegistry(["red", "green"])
    assert reg.color_for("a") == "red"
    assert reg.color_for("b") == "green"
    assert reg.color_for("c") == "red"
    assert reg.color_for("a") == "red"
    assert reg.assigned() == {"a": "red", "b": "green", "c": "red"}


def test_empty_palette_rejected():
    with pytest.raises(ValueError):
        ColorRegistry([])


def test_trace_modes():
    pal = PALETTES["Plotly"]
    for kind, mode in [
        (TraceKind.POINTS, "markers"),
        (TraceKind.CURVE, "lines"),
        (TraceKind.ANNOTATION, "text"),
    ]:
        assert Trace("t", kind, (1.0,), (2.0,), pal[0]).mode == mode


def test_coerce_xy_returns_float_tuples():
    x, y = coerce_xy([1, 2], (3, 4))
    assert x == (1.0, 2.0)
    assert y == (3.0, 4.0)
