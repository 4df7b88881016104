"""Helper sections for the Streamlit UI (tables, fitting, chart)."""

import base64
import hashlib
import logging
from typing import Optional

import pandas as pd
import streamlit as st

from curvelab.analysis.fits import FitError
from curvelab.config import Settings, build_store
from curvelab.constants import FIT_METHODS, MAX_DEGREE, PREVIEW_ROWS
from curvelab.core.trace_store import TraceStore
from curvelab.core.traces import TraceDataError, TraceKind
from curvelab.utils import ImportFormatError, trace_to_csv
from curvelab.viz.plotly_renderer import PlotlyRenderer, PlotSurface
from curvelab.workflow import (
    clear_fits,
    clear_table,
    import_table,
    points_trace_name,
    run_fit,
    table_frame,
)

logger = logging.getLogger(__name__)


def get_store(settings: Settings) -> TraceStore:
    """Return the session's TraceStore, creating it on first use.

    The store lives as long as the Streamlit session; every section receives
    it explicitly.
    """
    if "trace_store" not in st.session_state:
        st.session_state["trace_store"] = build_store(settings)
        logger.info("Created trace store for new session")
    return st.session_state["trace_store"]


def upload_key(state, table_id: int) -> str:
    """Widget key of the table's file uploader for its current generation."""
    return f"t{table_id}_upload_{state.get(f't{table_id}_upload_gen', 0)}"


def needs_import(state, table_id: int, digest: str) -> bool:
    return state.get(f"t{table_id}_fingerprint") != digest


def reset_table_upload(state, table_id: int) -> None:
    """Forget the table's imported file and fit so it can be imported again.

    Bumping the generation gives the uploader a fresh key, which empties the
    widget; the file still sitting in the old one is not re-imported.
    """
    state.pop(f"t{table_id}_fingerprint", None)
    state.pop(f"t{table_id}_fit_summary", None)
    gen_key = f"t{table_id}_upload_gen"
    state[gen_key] = state.get(gen_key, 0) + 1


def table_section(store: TraceStore, table_id: int) -> None:
    """Upload / preview / clear controls for one table.

    Upload fingerprint uses MD5(content) so the same file is not re-imported
    on every rerun while a new file with the same name is.
    """
    cols = st.columns([4, 1])
    # Clear runs first so the uploader below is built with the new key
    with cols[1]:
        if st.button("Clear", key=f"t{table_id}_clear"):
            clear_table(store, table_id)
            reset_table_upload(st.session_state, table_id)
            st.info("Table cleared.")
    with cols[0]:
        file_obj = st.file_uploader(
            "Import CSV/TXT (two columns: x,y)",
            type=["csv", "txt"],
            key=upload_key(st.session_state, table_id),
            help="Separator (comma, semicolon or tab) is detected automatically.",
        )

    if file_obj is not None:
        digest = hashlib.md5(file_obj.getvalue()).hexdigest()
        if needs_import(st.session_state, table_id, digest):
            try:
                df = import_table(store, table_id, file_obj)
            except ImportFormatError as e:
                st.error(str(e))
            else:
                st.session_state[f"t{table_id}_fingerprint"] = digest
                st.success(f"Imported {len(df)} rows from {file_obj.name}")

    df = table_frame(store, table_id)
    if df.empty:
        st.caption("No data imported. Import a CSV with two columns: x,y")
        return
    st.caption(f"Preview (first {PREVIEW_ROWS} of {len(df)} rows)")
    st.dataframe(df.head(PREVIEW_ROWS))
    st.download_button(
        "Download points (CSV)",
        data=trace_to_csv(store.get_trace_by_name(points_trace_name(table_id))),
        file_name=f"table_{table_id}.csv",
        mime="text/csv",
        key=f"t{table_id}_csv",
    )


def fit_section(store: TraceStore, table_id: int, settings: Settings) -> None:
    """Method/degree selectors, run & clear buttons and last fit parameters."""
    result_key = f"t{table_id}_fit_summary"
    cols = st.columns([2, 1, 1, 1])
    with cols[0]:
        method = st.selectbox(
            "Method",
            list(FIT_METHODS),
            format_func=FIT_METHODS.get,
            key=f"t{table_id}_method",
        )
    degree = settings.default_degree
    with cols[1]:
        if method == "polynomial":
            degree = int(
                st.number_input(
                    "Degree",
                    min_value=1,
                    max_value=MAX_DEGREE,
                    value=settings.default_degree,
                    key=f"t{table_id}_degree",
                )
            )
    with cols[2]:
        run = st.button("Run fit", key=f"t{table_id}_run")
    with cols[3]:
        if st.button("Clear fits", key=f"t{table_id}_clear_fits"):
            clear_fits(store, table_id)
            st.session_state.pop(result_key, None)

    if run:
        try:
            summary = run_fit(
                store,
                table_id,
                method=method,
                degree=degree,
                samples=settings.curve_samples,
                pad_factor=settings.pad_factor,
            )
        except LookupError as e:
            st.warning(str(e))
        except (FitError, TraceDataError) as e:
            st.error(f"Fit error: {e}")
        else:
            st.session_state[result_key] = summary

    summary = st.session_state.get(result_key)
    if summary is None or not store.has_trace(summary.name):
        st.caption('Use "Run fit" to compute a curve from the table points.')
        return
    fit = summary.fit
    st.markdown(f"**Fit parameters ({summary.name})**")
    st.code(fit.equation)
    st.dataframe(
        pd.DataFrame(
            {"coefficient": [f"c{i}" for i in range(len(fit.coefficients))],
             "value": list(fit.coefficients)}
        ),
        hide_index=True,
    )
    c1, c2, c3 = st.columns(3)
    c1.metric("R²", f"{fit.stats.r2:.6f}")
    c2.metric("RMSE", f"{fit.stats.rmse:.6g}")
    c3.metric("SSE", f"{fit.stats.sse:.6g}")


def _surface(settings: Settings) -> PlotSurface:
    if "plot_surface" not in st.session_state:
        st.session_state["plot_surface"] = PlotSurface(theme=settings.theme)
    return st.session_state["plot_surface"]


def chart_section(store: TraceStore, settings: Settings) -> Optional[PlotSurface]:
    """Attach a plotly surface to the store and draw it.

    Streamlit rebuilds the page on every interaction, so the surface is
    re-attached on each run; the store seeds it from the canonical set.
    """
    surface = _surface(settings)
    renderer = PlotlyRenderer()
    store.attach(renderer, surface)
    if store.is_stale:
        st.error(f"Chart could not be drawn: {store.last_error}")
        return None

    names = store.get_all_trace_names()
    if "hidden_traces" in st.session_state:
        st.session_state["hidden_traces"] = [
            n for n in st.session_state["hidden_traces"] if n in store
        ]
    if names:
        hidden = st.multiselect(
            "Hide traces", names, key="hidden_traces",
            help="Hidden traces stay listed in the legend.",
        )
        for name in hidden:
            if name in store:
                store.set_visibility(name, "legend-only")
    else:
        st.caption("No traces yet. Import a table to start.")

    if surface.figure is not None:
        st.plotly_chart(surface.figure, use_container_width=True)

    with st.expander("Export", expanded=False):
        fmt = st.selectbox("Format", ["html", "png", "svg"], key="export_fmt")
        if st.button("Prepare chart export", key="export_btn"):
            url = store.export_image(format=fmt)
            if url is None:
                st.error(f"Export failed: {store.last_error}")
            else:
                header, encoded = url.split(",", 1)
                st.download_button(
                    f"Download chart ({fmt})",
                    data=base64.b64decode(encoded),
                    file_name=f"chart.{fmt}",
                    mime=header[len("data:"):].split(";")[0],
                    key="export_download",
                )
        exportable = [
            n for n in names
            if store.get_trace_object(n).kind is not TraceKind.ANNOTATION
        ]
        if exportable:
            sel = st.selectbox("Trace to CSV", exportable, key="export_trace")
            st.download_button(
                "Download trace (CSV)",
                data=trace_to_csv(store.get_trace_object(sel)),
                file_name=f"{sel}.csv",
                mime="text/csv",
                key="export_trace_csv",
            )
    return surface
