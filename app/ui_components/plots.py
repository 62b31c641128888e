"""Bar chart and table preview for the loaded dataset."""
import streamlit as st
import matplotlib.pyplot as plt

from neuralcanvas.models import TypedTable
from neuralcanvas.stats import PREVIEW_ROWS, chart_series, to_frame


def render_bar_chart(table: TypedTable) -> bool:
    """
    Render the first numeric column as horizontal bars (first 20 values).

    Returns:
        True if a chart was drawn, False if the table has no numeric column.
    """
    series = chart_series(table)
    if series is None or not series[1]:
        st.info("No numeric column to chart.")
        return False

    col, values = series
    labels = [str(i + 1) for i in range(len(values))]

    fig, ax = plt.subplots(figsize=(8, max(2, len(values) * 0.3)))
    ax.barh(labels[::-1], values[::-1], color="#6366f1")
    ax.set_xlabel(col)
    ax.set_ylabel("Row")
    for i, v in enumerate(values[::-1]):
        ax.text(v, i, f" {v:.1f}", va="center", fontsize=8)
    plt.tight_layout()
    st.pyplot(fig)
    plt.close(fig)
    return True


def render_preview(table: TypedTable):
    st.subheader("Data Preview")
    st.dataframe(to_frame(table), hide_index=True, width="stretch")
    if table.row_count > PREVIEW_ROWS:
        st.caption(f"Showing {PREVIEW_ROWS} of {table.row_count} rows")
