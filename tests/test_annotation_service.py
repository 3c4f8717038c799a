# tests/test_annotation_service.py

from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
import requests

from taskcoach import create_app
from taskcoach.errors import AnnotationUnavailable
from taskcoach.models.enums import AIPotential
from taskcoach.services import annotation_service
from taskcoach.services.annotation_service import (
    ChatCompletionsAnnotator,
    NO_DETAILS,
    NO_TIPS,
    parse_potential,
    parse_time_estimate,
)

from .conftest import TestConfig


class _Resp:
    def __init__(self, payload=None, status_code: int = 200, text: str = "") -> None:
        self._payload = payload
        self.status_code = status_code
        self.text = text or json.dumps(payload)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


def _chat(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


@pytest.fixture()
def chat() -> ChatCompletionsAnnotator:
    return ChatCompletionsAnnotator(
        api_key="sk-test", base_url="https://llm.example/v1/", model="test-model", timeout=5
    )


@pytest.fixture()
def posted(monkeypatch):
    """Replace ``requests.post``; tests append responses to ``posted.replies``."""

    rec = SimpleNamespace(replies=[], calls=[])

    def fake_post(url, **kw):
        rec.calls.append((url, kw))
        reply = rec.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    monkeypatch.setattr(annotation_service.requests, "post", fake_post)
    return rec


# --- parsing ---


def test_parse_time_estimate() -> None:
    est = parse_time_estimate({"manualMinutes": 42.4, "aiAssistedMinutes": 15})
    assert (est.manual_minutes, est.ai_minutes) == (42, 15)

    no_ai = parse_time_estimate({"manualMinutes": 60, "aiAssistedMinutes": None})
    assert no_ai.ai_minutes is None


@pytest.mark.parametrize(
    "result",
    [{}, {"manualMinutes": "ten"}, {"manualMinutes": -5}, {"manualMinutes": True},
     {"manualMinutes": 10, "aiAssistedMinutes": -1},
     {"manualMinutes": float("nan")}, {"manualMinutes": float("inf")},
     {"manualMinutes": 10, "aiAssistedMinutes": float("nan")},
     {"manualMinutes": 10, "aiAssistedMinutes": "5"}],
)
def test_parse_time_estimate_rejects_bad_values(result) -> None:
    with pytest.raises(AnnotationUnavailable):
        parse_time_estimate(result)


def test_parse_potential() -> None:
    a = parse_potential({"potential": "advanced", "coachingTips": "Use templates.", "motivationalScore": 88})
    assert a.potential == AIPotential.ADVANCED
    assert a.coaching_tips == "Use templates."
    assert a.motivational_score == 88

    # missing tips fall back to a fixed message
    assert parse_potential({"potential": "none", "motivationalScore": 5}).coaching_tips == NO_TIPS


@pytest.mark.parametrize(
    "result",
    [
        {"potential": "pending", "motivationalScore": 50},
        {"potential": "lots", "motivationalScore": 50},
        {"motivationalScore": 50},
        {"potential": "some", "motivationalScore": 0},
        {"potential": "some", "motivationalScore": 101},
        {"potential": "some", "motivationalScore": 0.6},
        {"potential": "some", "motivationalScore": 100.4},
        {"potential": "some", "motivationalScore": float("nan")},
        {"potential": "some", "motivationalScore": float("-inf")},
        {"potential": "some"},
    ],
)
def test_parse_potential_rejects_bad_values(result) -> None:
    with pytest.raises(AnnotationUnavailable):
        parse_potential(result)


# --- HTTP client ---


def test_estimate_time_request_shape(chat, posted) -> None:
    posted.replies.append(_Resp(_chat(json.dumps({"manualMinutes": 30, "aiAssistedMinutes": 10}))))

    est = chat.estimate_time("write report")

    assert (est.manual_minutes, est.ai_minutes) == (30, 10)
    url, kw = posted.calls[0]
    assert url == "https://llm.example/v1/chat/completions"
    assert kw["timeout"] == 5
    assert kw["headers"]["Authorization"] == "Bearer sk-test"
    assert kw["json"]["model"] == "test-model"
    assert kw["json"]["response_format"] == {"type": "json_object"}
    assert '"write report"' in kw["json"]["messages"][1]["content"]


def test_analyze_potential(chat, posted) -> None:
    posted.replies.append(_Resp(_chat(json.dumps(
        {"potential": "some", "coachingTips": "Start small.", "motivationalScore": 64}
    ))))

    a = chat.analyze_potential("clean garage")
    assert a.potential == AIPotential.SOME
    assert a.motivational_score == 64


def test_explain_implementation_is_free_text(chat, posted) -> None:
    posted.replies.append(_Resp(_chat("Use a transcription tool, then summarize.")))
    assert chat.explain_implementation("take notes") == "Use a transcription tool, then summarize."
    assert "response_format" not in posted.calls[0][1]["json"]

    posted.replies.append(_Resp(_chat(None)))
    assert chat.explain_implementation("take notes") == NO_DETAILS


@pytest.mark.parametrize(
    "reply",
    [
        requests.ConnectionError("down"),
        requests.Timeout("slow"),
        _Resp({"error": "nope"}, status_code=503),
        _Resp(ValueError("not json"), text="<html>"),
        _Resp({"choices": []}),
        _Resp(_chat("this is not json")),
        _Resp(_chat("[1, 2, 3]")),
        _Resp(_chat('{"manualMinutes": NaN, "aiAssistedMinutes": 5}')),
        _Resp(_chat('{"manualMinutes": Infinity, "aiAssistedMinutes": null}')),
        _Resp(_chat("")),
    ],
)
def test_failures_surface_as_annotation_unavailable(chat, posted, reply) -> None:
    posted.replies.append(reply)
    with pytest.raises(AnnotationUnavailable) as exc:
        chat.estimate_time("anything")
    # callers only ever see the generic message
    assert exc.value.message == "Task annotation is currently unavailable"


def test_missing_api_key_fails_without_a_request(posted) -> None:
    client = ChatCompletionsAnnotator(api_key=None, base_url="https://llm.example/v1", model="m")
    with pytest.raises(AnnotationUnavailable):
        client.estimate_time("anything")
    assert posted.calls == []


def test_from_config_defaults() -> None:
    client = ChatCompletionsAnnotator.from_config({"ANNOTATION_API_KEY": "k"})
    assert client.base_url == "https://api.openai.com/v1"
    assert client.model == "gpt-4o"
    assert client.timeout == 30


def test_app_uses_injected_annotator(app, annotator) -> None:
    with app.app_context():
        assert annotation_service.get_annotator() is annotator


def test_app_builds_annotator_from_config() -> None:
    app = create_app(TestConfig)
    client = app.extensions["annotator"]
    assert isinstance(client, ChatCompletionsAnnotator)
    assert client.api_key is None
