import pytest

from curvelab.analysis.fits import InvalidInput, SingularMatrix
from curvelab.core.trace_store import TraceStore
from curvelab.core.traces import TraceKind
from curvelab.utils import ImportFormatError
from curvelab.workflow import (
    clear_fits,
    clear_table,
    fit_trace_name,
    import_table,
    points_trace_name,
    run_fit,
    table_frame,
)


def test_import_then_linear_fit():
    store = TraceStore()
    df = import_table(store, 1, "x,y\n3,3\n0,0\n1,1\n2,2\n")
    assert len(df) == 4
    summary = run_fit(store, 1, "linear", samples=50)
    assert list(summary.fit.coefficients) == pytest.approx([0, 1], abs=1e-10)
    assert summary.name == "Fit Table 1 - linear"
    assert store.get_all_trace_names() == [
        "Table 1 - points",
        "Fit Table 1 - linear",
        "Fit Table 1 - linear - eq",
    ]
    curve = store.get_trace_object(summary.name)
    assert curve.kind is TraceKind.CURVE
    assert len(curve.x) == 50
    # data spans [0, 3], padded by the span on each side
    assert curve.x[0] == pytest.approx(-3)
    assert curve.x[-1] == pytest.approx(6)
    note = store.get_trace_object(summary.annotation_name)
    assert note.text == summary.fit.equation
    assert note.x == (pytest.approx(6),)


def test_new_fit_replaces_previous_one():
    store = TraceStore()
    import_table(store, 1, "-1,1\n0,0\n1,1\n2,4\n")
    import_table(store, 2, "0,1\n1,2\n")
    run_fit(store, 2, "linear")
    run_fit(store, 1, "linear")
    summary = run_fit(store, 1, "polynomial", degree=2)
    assert summary.name == fit_trace_name(1, "polynomial", 2) == "Fit Table 1 - polynomial (deg 2)"
    assert list(summary.fit.coefficients) == pytest.approx([0, 0, 1], abs=1e-9)
    names = store.get_all_trace_names()
    assert "Fit Table 1 - linear" not in names
    assert "Fit Table 2 - linear" in names
    assert sum(n.startswith("Fit Table 1") for n in names) == 2


def test_fit_without_points():
    with pytest.raises(LookupError):
        run_fit(TraceStore(), 7, "linear")


def test_fit_errors_propagate():
    store = TraceStore()
    import_table(store, 1, "1,1\n1,2\n")
    with pytest.raises(SingularMatrix):
        run_fit(store, 1, "linear")
    with pytest.raises(InvalidInput):
        run_fit(store, 1, "polynomial", degree=3)
    with pytest.raises(ValueError):
        run_fit(store, 1, "spline")
    assert store.get_all_trace_names() == [points_trace_name(1)]


def test_import_error_leaves_store_untouched():
    store = TraceStore()
    with pytest.raises(ImportFormatError):
        import_table(store, 1, "a;b\n")
    assert len(store) == 0


def test_clear_fits_and_table():
    store = TraceStore()
    import_table(store, 1, "0,0\n1,1\n2,2\n")
    run_fit(store, 1, "linear")
    assert clear_fits(store, 1) == ["Fit Table 1 - linear", "Fit Table 1 - linear - eq"]
    run_fit(store, 1, "linear")
    clear_table(store, 1)
    assert len(store) == 0
    assert table_frame(store, 1).empty
