from __future__ import annotations

from ..models import Insight


def render_insight_markdown(obj: Insight) -> str:
    lines: list[str] = []
    lines.append("### Summary\n")
    lines.append(f"{obj.summary}\n")

    if obj.key_findings:
        lines.append("\n### Key findings\n")
        for f in obj.key_findings:
            lines.append(f"- {f}\n")

    if obj.patterns:
        lines.append("\n### Patterns detected\n")
        for p in obj.patterns:
            lines.append(f"- {p}\n")

    if obj.recommendations:
        lines.append("\n### Recommendations\n")
        for r in obj.recommendations:
            lines.append(f"- {r}\n")

    lines.append(f"\n**Data quality:** {obj.data_quality}\n")
    if obj.interesting_columns:
        cols = ", ".join(f"`{c}`" for c in obj.interesting_columns)
        lines.append(f"**Interesting columns:** {cols}\n")
    lines.append(f"\n_generated_by: {obj.generated_by}_\n")
    return "".join(lines).strip() + "\n"
