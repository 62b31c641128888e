from __future__ import annotations

import json
import logging

import pytest

from neuralcanvas.errors import InsightAcquisitionError
from neuralcanvas.ingest import ingest
from neuralcanvas.insight import (
    acquire_insight,
    build_digest,
    build_prompt,
    fallback_insight,
    parse_insight_text,
    render_insight_markdown,
)
from neuralcanvas.insight.acquire import strip_fences
from neuralcanvas.insight.digest import sample_to_json

VALID = {
    "summary": "Sales by region",
    "key_findings": ["West leads", "East lags", "Stable totals"],
    "patterns": ["Seasonal peak in Q4"],
    "recommendations": ["Drill into East"],
    "data_quality": "excellent",
    "interesting_columns": ["region", "units"],
}


class FakeClient:
    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.prompts: list[str] = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture()
def table():
    return ingest("sales.csv", "region,units,note\nWest,3,ok\nEast,4,\nNorth,5,x\nSouth,6,y\n")


def test_digest_is_bounded_to_three_rows(table) -> None:
    digest = build_digest(table)
    assert digest.columns == ("region", "units", "note")
    assert digest.row_count == 4
    assert len(digest.sample) == 3


def test_digest_of_small_and_empty_tables() -> None:
    assert len(build_digest(ingest("d.csv", "a\n1\n")).sample) == 1
    assert build_digest(ingest("d.csv", "a\n")).sample == ()


def test_sample_json_round_trips(table) -> None:
    digest = build_digest(table)
    parsed = json.loads(sample_to_json(digest))
    assert parsed == [dict(r) for r in digest.sample]
    assert '"units":3' in sample_to_json(digest)


def test_sample_json_drops_missing_cells() -> None:
    digest = build_digest(ingest("d.csv", "a,b\n1\n"))
    assert sample_to_json(digest) == '[{"a":1}]'


def test_prompt_embeds_digest(table) -> None:
    prompt = build_prompt(build_digest(table))
    assert "return ONLY valid JSON" in prompt
    assert "Columns: region, units, note" in prompt
    assert "Rows: 4" in prompt
    assert 'Sample data: [{"region":"West","units":3,"note":"ok"}' in prompt
    for key in VALID:
        assert f'"{key}"' in prompt


def test_strip_fences_anywhere() -> None:
    assert strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_fences('Here:\n```\n{"a": 1}```  ') == 'Here:\n{"a": 1}'


def test_parse_insight_text_accepts_fenced_json() -> None:
    insight = parse_insight_text("```json\n" + json.dumps(VALID) + "\n```")
    assert insight.summary == "Sales by region"
    assert insight.generated_by == "service"


@pytest.mark.parametrize(
    "text",
    [
        "Sorry, I cannot help with that.",
        "[1, 2, 3]",
        json.dumps({k: v for k, v in VALID.items() if k != "patterns"}),
        json.dumps({**VALID, "key_findings": "not a list"}),
        "",
    ],
)
def test_parse_insight_text_rejects_bad_output(text: str) -> None:
    with pytest.raises(InsightAcquisitionError):
        parse_insight_text(text)


def test_acquire_returns_service_insight(table) -> None:
    client = FakeClient(json.dumps(VALID))
    insight = acquire_insight(table, client=client)
    assert insight.to_payload() == VALID
    assert insight.generated_by == "service"
    assert len(client.prompts) == 1


def test_acquire_falls_back_on_non_json(table, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="neuralcanvas.insight.acquire"):
        insight = acquire_insight(table, client=FakeClient("The data looks great!"))
    assert insight.data_quality == "good"
    assert insight.generated_by == "fallback"
    assert insight == fallback_insight(table)
    assert "using fallback" in caplog.text


def test_acquire_falls_back_on_client_error(table) -> None:
    client = FakeClient(error=InsightAcquisitionError("HTTP 500"))
    insight = acquire_insight(table, client=client)
    assert insight.summary == "Dataset loaded successfully with 4 records"
    assert len(client.prompts) == 1


def test_fallback_contents(table) -> None:
    fb = fallback_insight(table)
    assert fb.key_findings == [
        "Multiple data columns detected",
        "Numeric and categorical data present",
        "Ready for visualization",
    ]
    assert fb.patterns == ["Data appears structured", "No major anomalies detected"]
    assert fb.recommendations == ["Explore correlations", "Check for outliers"]
    assert fb.interesting_columns == ["region", "units", "note"]


def test_fallback_is_deterministic(table) -> None:
    a = json.dumps(fallback_insight(table).to_payload(), sort_keys=True)
    b = json.dumps(fallback_insight(table).to_payload(), sort_keys=True)
    assert a == b


def test_fallback_with_few_columns() -> None:
    fb = fallback_insight(ingest("d.json", '{"only": 1}'))
    assert fb.interesting_columns == ["only"]
    assert fb.summary == "Dataset loaded successfully with 1 records"


def test_render_markdown_has_every_section(table) -> None:
    md = render_insight_markdown(fallback_insight(table))
    assert "### Summary" in md
    assert "### Key findings" in md
    assert "### Patterns detected" in md
    assert "### Recommendations" in md
    assert "**Data quality:** good" in md


def test_invalid_environment_settings_yield_fallback(table, monkeypatch) -> None:
    monkeypatch.setenv("NEURALCANVAS_INSIGHT_TIMEOUT", "thirty")
    insight = acquire_insight(table)
    assert insight.generated_by == "fallback"
    assert insight == fallback_insight(table)
