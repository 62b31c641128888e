"""AI insight panel."""
import streamlit as st

from neuralcanvas.models import Insight


def render_insight(insight: Insight):
    """
    Render all six insight fields.

    Args:
        insight: Insight from the service or the local fallback
    """
    st.subheader("AI Insights")

    if insight.generated_by == "fallback":
        st.info("The insight service was unavailable; showing a locally generated summary.")

    st.markdown("**Summary**")
    st.markdown(insight.summary)

    st.markdown("**Key Findings**")
    for finding in insight.key_findings:
        st.markdown(f"- {finding}")

    st.markdown("**Patterns Detected**")
    for pattern in insight.patterns:
        st.markdown(f"- 📈 {pattern}")

    st.markdown("**Recommendations**")
    for rec in insight.recommendations:
        st.markdown(f"- ✨ {rec}")

    st.markdown("---")
    st.markdown(f"Data Quality: **{insight.data_quality.capitalize()}**")
    if insight.interesting_columns:
        st.caption("Interesting columns: " + ", ".join(f"`{c}`" for c in insight.interesting_columns))
