"""Shared fixtures: a scripted transport and a recording sleep, so no test touches the network or waits."""

import json

import pytest

from aicommits.llm.base import Transport, TransportResponse


class ScriptedTransport(Transport):
    """Replays outcomes in order. Exceptions are raised, responses returned."""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    def send(self, request):
        self.requests.append(request)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


def completion_body(*contents) -> str:
    """Chat completions JSON. A None content produces a choice with no content."""
    choices = []
    for i, content in enumerate(contents):
        message = {"role": "assistant"}
        if content is not None:
            message["content"] = content
        choices.append({"index": i, "message": message, "finish_reason": "stop"})
    return json.dumps({"id": "chatcmpl-1", "object": "chat.completion", "choices": choices})


@pytest.fixture
def ok():
    """Return a factory for 200 responses carrying the given contents."""
    def _ok(*contents):
        return TransportResponse(status=200, body=completion_body(*contents))
    return _ok


@pytest.fixture
def scripted():
    """Return a factory for ScriptedTransport."""
    def _make(*outcomes):
        return ScriptedTransport(outcomes)
    return _make


@pytest.fixture
def sleeps():
    """A sleep replacement that records requested delays in seconds."""
    calls = []

    def _sleep(seconds):
        calls.append(seconds)
    _sleep.calls = calls
    return _sleep


@pytest.fixture(autouse=True)
def _no_ambient_credentials(monkeypatch):
    for name in ("OPENAI_KEY", "OPENAI_API_KEY", "AICOMMITS_MODEL", "HTTPS_PROXY", "https_proxy"):
        monkeypatch.delenv(name, raising=False)
