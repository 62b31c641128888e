from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import pytest
import requests

from neuralcanvas.config import Settings
from neuralcanvas.errors import InsightAcquisitionError
from neuralcanvas.ingest import ingest
from neuralcanvas.insight import MessagesClient, OpenAIChatClient, acquire_insight, make_client
from neuralcanvas.insight import client as client_module
from neuralcanvas.insight.client import extract_text

INSIGHT = {
    "summary": "s",
    "key_findings": ["k"],
    "patterns": ["p"],
    "recommendations": ["r"],
    "data_quality": "fair",
    "interesting_columns": ["a"],
}


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, raw: str | None = None):
        self.status_code = status_code
        self._body = body
        self._raw = raw

    def json(self) -> Any:
        if self._raw is not None:
            return json.loads(self._raw)
        return self._body


class Recorder:
    def __init__(self, response: FakeResponse | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[dict[str, Any]] = []

    def __call__(self, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append({"url": url, **kwargs})
        if self.error is not None:
            raise self.error
        assert self.response is not None
        return self.response


def _messages_body(*texts: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": t} for t in texts]}


def test_request_shape(monkeypatch) -> None:
    rec = Recorder(FakeResponse(body=_messages_body(json.dumps(INSIGHT))))
    monkeypatch.setattr(client_module.requests, "post", rec)

    settings = Settings(insight_url="https://proxy.local/v1/messages", model="m-1", timeout=5)
    text = MessagesClient(settings).complete("hello")

    assert json.loads(text) == INSIGHT
    assert len(rec.calls) == 1
    call = rec.calls[0]
    assert call["url"] == "https://proxy.local/v1/messages"
    assert call["json"] == {
        "model": "m-1",
        "max_tokens": 1200,
        "messages": [{"role": "user", "content": "hello"}],
    }
    assert call["headers"] == {"Content-Type": "application/json"}
    assert call["timeout"] == 5


def test_credentials_attached_when_configured(monkeypatch) -> None:
    rec = Recorder(FakeResponse(body=_messages_body("{}")))
    monkeypatch.setattr(client_module.requests, "post", rec)

    MessagesClient(Settings(api_key="sk-test")).complete("p")

    headers = rec.calls[0]["headers"]
    assert headers["x-api-key"] == "sk-test"
    assert headers["anthropic-version"] == "2023-06-01"


def test_extract_text_joins_text_blocks_in_order() -> None:
    payload = {
        "content": [
            {"type": "text", "text": '{"summary": '},
            {"type": "tool_use", "id": "x"},
            {"type": "text", "text": '"s"}'},
        ]
    }
    assert extract_text(payload) == '{"summary": "s"}'


@pytest.mark.parametrize("payload", [None, [], {"error": {"type": "overloaded"}}, {"content": "text"}])
def test_extract_text_rejects_unexpected_bodies(payload: Any) -> None:
    with pytest.raises(InsightAcquisitionError):
        extract_text(payload)


@pytest.mark.parametrize(
    "recorder",
    [
        Recorder(FakeResponse(status_code=401, body={"error": "unauthorized"})),
        Recorder(FakeResponse(status_code=500, body=_messages_body(json.dumps(INSIGHT)))),
        Recorder(FakeResponse(raw="<html>bad gateway</html>")),
        Recorder(error=requests.exceptions.ConnectionError("refused")),
        Recorder(error=requests.exceptions.Timeout("slow")),
    ],
)
def test_transport_failures_raise_acquisition_error(monkeypatch, recorder: Recorder) -> None:
    monkeypatch.setattr(client_module.requests, "post", recorder)
    with pytest.raises(InsightAcquisitionError):
        MessagesClient(Settings()).complete("p")


def test_http_failure_end_to_end_yields_fallback(monkeypatch) -> None:
    monkeypatch.setattr(
        client_module.requests,
        "post",
        Recorder(error=requests.exceptions.ConnectionError("offline")),
    )
    table = ingest("d.csv", "a,b\n1,x\n")
    insight = acquire_insight(table, client=MessagesClient(Settings()))
    assert insight.generated_by == "fallback"
    assert insight.interesting_columns == ["a", "b"]


def test_fenced_service_reply_end_to_end(monkeypatch) -> None:
    fenced = "```json\n" + json.dumps(INSIGHT) + "\n```"
    monkeypatch.setattr(client_module.requests, "post", Recorder(FakeResponse(body=_messages_body(fenced))))
    insight = acquire_insight(ingest("d.csv", "a\n1\n"), client=MessagesClient(Settings()))
    assert insight.generated_by == "service"
    assert insight.data_quality == "fair"


def test_make_client_selects_provider() -> None:
    assert isinstance(make_client(Settings()), MessagesClient)
    assert isinstance(make_client(Settings(provider="openai")), OpenAIChatClient)
    assert isinstance(make_client(Settings(provider="bogus")), MessagesClient)


def test_make_client_reports_invalid_settings(monkeypatch) -> None:
    monkeypatch.setenv("NEURALCANVAS_INSIGHT_TIMEOUT", "thirty")
    with pytest.raises(InsightAcquisitionError):
        make_client()


class FakeOpenAI:
    """Stands in for openai.OpenAI; replies with `reply` or raises `error`."""

    reply: Any = None
    error: Exception | None = None
    calls: list[dict[str, Any]] = []

    def __init__(self, **kwargs: Any):
        self.init_kwargs = kwargs
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs: Any) -> Any:
        FakeOpenAI.calls.append(kwargs)
        if FakeOpenAI.error is not None:
            raise FakeOpenAI.error
        return FakeOpenAI.reply


def _completion(*contents: str | None) -> SimpleNamespace:
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=c)) for c in contents])


@pytest.fixture()
def fake_openai(monkeypatch):
    import openai

    monkeypatch.setattr(openai, "OpenAI", FakeOpenAI)
    monkeypatch.setattr(FakeOpenAI, "reply", None)
    monkeypatch.setattr(FakeOpenAI, "error", None)
    monkeypatch.setattr(FakeOpenAI, "calls", [])
    return FakeOpenAI


def _openai_settings() -> Settings:
    return Settings(provider="openai", openai_api_key="sk-test", openai_model="gpt-test", max_tokens=300)


def test_openai_client_returns_json_reply(fake_openai) -> None:
    fake_openai.reply = _completion(json.dumps(INSIGHT))
    insight = acquire_insight(ingest("d.csv", "a\n1\n"), client=make_client(_openai_settings()))

    assert insight.generated_by == "service"
    assert insight.to_payload() == INSIGHT
    assert len(fake_openai.calls) == 1
    call = fake_openai.calls[0]
    assert call["model"] == "gpt-test"
    assert call["max_tokens"] == 300
    assert call["response_format"] == {"type": "json_object"}
    assert call["messages"][0]["role"] == "user"


def test_openai_error_yields_fallback(fake_openai) -> None:
    import openai

    fake_openai.error = openai.OpenAIError("rate limited")
    client = OpenAIChatClient(_openai_settings())
    with pytest.raises(InsightAcquisitionError):
        client.complete("p")

    insight = acquire_insight(ingest("d.csv", "a\n1\n"), client=client)
    assert insight.generated_by == "fallback"


@pytest.mark.parametrize("reply", [_completion(), _completion(None)])
def test_openai_empty_reply_yields_fallback(fake_openai, reply: SimpleNamespace) -> None:
    fake_openai.reply = reply
    insight = acquire_insight(ingest("d.csv", "a\n1\n"), client=OpenAIChatClient(_openai_settings()))
    assert insight.generated_by == "fallback"
