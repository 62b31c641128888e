"""Page header and dataset stat cards."""
import streamlit as st

from neuralcanvas.models import Stats


def render_header():
    st.title("🧠 NeuralCanvas")
    st.caption("AI-Powered Visual Data Explorer")


def render_stat_cards(stats: Stats):
    """
    Render the four dataset counters.

    Args:
        stats: Summary statistics of the loaded table
    """
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Records", f"{stats.total_rows:,}")
    with col2:
        st.metric("Columns", stats.total_cols)
    with col3:
        st.metric("Numeric Fields", stats.numeric_cols)
    with col4:
        st.metric("Categorical", stats.categorical_cols)
