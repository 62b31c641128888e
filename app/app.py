"""NeuralCanvas - AI-Powered Visual Data Explorer"""
import sys
from pathlib import Path

import streamlit as st

app_dir = Path(__file__).parent
if str(app_dir) not in sys.path:
    sys.path.insert(0, str(app_dir))

from neuralcanvas.errors import IngestError
from neuralcanvas.state import AppState, analyze, load_table, reset

from llm_utils import get_insight_client, get_settings
from ui_components import (
    render_bar_chart,
    render_header,
    render_insight,
    render_particle_canvas,
    render_preview,
    render_stat_cards,
)

st.set_page_config(
    page_title="NeuralCanvas",
    page_icon="🧠",
    layout="wide"
)


def get_state() -> AppState:
    if "app_state" not in st.session_state:
        st.session_state["app_state"] = AppState()
        st.session_state["uploader_key"] = 0
    return st.session_state["app_state"]


def render_upload(state: AppState):
    """Upload section shown while no table is loaded."""
    settings = get_settings()
    limit_mb = settings.max_upload_bytes / (1024 * 1024)

    st.subheader("Upload Your Data")
    st.markdown(f"Support for CSV and JSON files up to {limit_mb:.0f}MB")

    uploaded = st.file_uploader(
        "Choose File",
        type=["csv", "json"],
        key=f"uploader_{st.session_state['uploader_key']}",
    )
    if uploaded is None:
        col1, col2, col3 = st.columns(3)
        with col1:
            st.markdown("**AI Analysis**  \nAutomatic pattern detection and insights")
        with col2:
            st.markdown("**Smart Visualizations**  \nDynamic charts based on data type")
        with col3:
            st.markdown("**Trend Detection**  \nIdentify correlations and anomalies")
        return

    try:
        load_table(state, uploaded.name, uploaded.getvalue(), max_bytes=settings.max_upload_bytes)
    except IngestError as e:
        st.error(f"Error parsing file. Please check format.\n\n{e}")
        return
    st.rerun()


def run_analysis(state: AppState):
    with st.spinner("AI is analyzing your data..."):
        analyze(state, client=get_insight_client())


def render_dataset(state: AppState):
    table = state.table
    render_stat_cards(state.stats)

    if state.insight is None:
        if st.button("✨ Analyze with AI", type="primary", width="stretch", disabled=state.analyzing):
            run_analysis(state)
            st.rerun()
    else:
        render_insight(state.insight)

    st.subheader("Data Visualization")
    render_bar_chart(table)

    render_preview(table)

    col1, col2 = st.columns(2)
    with col1:
        if st.button("Upload New File", width="stretch"):
            reset(state)
            st.session_state["uploader_key"] += 1
            st.rerun()
    with col2:
        if st.button("Re-analyze", width="stretch"):
            run_analysis(state)
            st.rerun()


def main():
    state = get_state()

    render_particle_canvas()
    render_header()

    st.markdown("### Transform Data Into Insights")
    st.caption("Upload your CSV or JSON files and let AI discover patterns, anomalies, and actionable insights automatically")

    if state.table is None:
        render_upload(state)
    else:
        st.sidebar.markdown(f"**File:** `{state.filename}`")
        render_dataset(state)

    st.markdown("---")
    st.caption("Turning data into actionable intelligence")


if __name__ == "__main__":
    main()
