import logging

import streamlit as st

from curvelab.config import Settings, configure_logging
from curvelab.themes import THEMES, set_theme
from curvelab.ui.helpers import (
    chart_section,
    fit_section,
    get_store,
    reset_table_upload,
    table_section,
)

st.set_page_config(page_title="CurveLab", layout="wide")

settings = Settings.from_env()
configure_logging(settings.log_level)
logger = logging.getLogger("curvelab.app")

# Initialize only once per user session (survives code reloads)
if 'startup_initialized' not in st.session_state:
    st.session_state['table_count'] = 1
    st.session_state['startup_initialized'] = True
    logger.info("Session started (palette=%s, theme=%s)", settings.palette, settings.theme)

store = get_store(settings)

with st.sidebar:
    st.markdown("## CurveLab")
    theme = st.selectbox(
        "Theme",
        list(THEMES.keys()),
        index=list(THEMES.keys()).index(settings.theme),
        key="theme_sel",
    )
    set_theme(theme)
    surface = st.session_state.get('plot_surface')
    if surface is not None:
        surface.theme = theme

    cols_m = st.columns(2)
    with cols_m[0]:
        if st.button("Add table", key="add_table_btn"):
            st.session_state['table_count'] += 1
    with cols_m[1]:
        if st.button("Clear plot", key="clear_plot_btn"):
            store.clear_plot()
            for table_id in range(1, st.session_state['table_count'] + 1):
                reset_table_upload(st.session_state, table_id)
            st.info("All traces removed.")
    st.caption(f"{len(store)} traces in store")

table_ids = list(range(1, st.session_state['table_count'] + 1))
tabs = st.tabs(["Chart"] + [f"Table {i}" for i in table_ids])
chart_tab, table_tabs = tabs[0], tabs[1:]

# Tables and fits mutate the store before the chart tab draws it
for table_id, tab in zip(table_ids, table_tabs):
    with tab:
        st.subheader(f"Table {table_id}")
        table_section(store, table_id)
        st.markdown("---")
        st.subheader(f"Fit: Table {table_id}")
        fit_section(store, table_id, settings)

with chart_tab:
    chart_section(store, settings)
