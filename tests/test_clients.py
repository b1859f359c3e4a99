from types import SimpleNamespace

import httpx
import pytest
from openai import APIConnectionError

from debate_arena import config
from debate_arena.clients import (
    CallableBackend,
    OpenAIChatBackend,
    make_backend,
    to_chat_messages,
    to_gemini_contents,
)
from debate_arena.errors import BackendInvocationError, ConfigurationError


class FakeCompletions:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.result


def fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def chunk(text):
    return SimpleNamespace(choices=[SimpleNamespace(delta=SimpleNamespace(content=text))])


def test_view_roles_map_to_chat_roles():
    view = [{"role": "responder", "text": "a"}, {"role": "initiator", "text": "b"}]
    assert to_chat_messages("rules", view) == [
        {"role": "system", "content": "rules"},
        {"role": "assistant", "content": "a"},
        {"role": "user", "content": "b"},
    ]


def test_gemini_contents_split_system_and_merge_turns():
    system, contents = to_gemini_contents(
        [
            {"role": "system", "content": "judge"},
            {"role": "user", "content": "transcript"},
            {"role": "user", "content": "rule now"},
            {"role": "assistant", "content": "ok"},
        ]
    )
    assert system == "judge"
    assert contents == [
        {"role": "user", "parts": ["transcript", "rule now"]},
        {"role": "model", "parts": ["ok"]},
    ]


def test_openai_stream_skips_empty_chunks():
    completions = FakeCompletions(
        result=iter([chunk("Hel"), SimpleNamespace(choices=[]), chunk(None), chunk("lo")])
    )
    backend = OpenAIChatBackend("m", "k", client=fake_client(completions))

    assert list(backend.stream([{"role": "user", "content": "hi"}])) == ["Hel", "lo"]
    assert completions.kwargs["stream"] is True


def test_openai_json_mode_requests_json_object():
    message = SimpleNamespace(content=' {"a": 1} ')
    completions = FakeCompletions(result=SimpleNamespace(choices=[SimpleNamespace(message=message)]))
    backend = OpenAIChatBackend("m", "k", client=fake_client(completions))

    assert backend.invoke([], json_mode=True) == '{"a": 1}'
    assert completions.kwargs["response_format"] == {"type": "json_object"}


def test_openai_errors_become_backend_errors():
    error = APIConnectionError(request=httpx.Request("POST", "http://localhost"))
    backend = OpenAIChatBackend("m", "k", client=fake_client(FakeCompletions(error=error)))

    with pytest.raises(BackendInvocationError):
        list(backend.stream([]))
    with pytest.raises(BackendInvocationError):
        backend.invoke([])


def test_callable_backend_passes_through():
    backend = CallableBackend(
        invoke_fn=lambda messages, json_mode: f"{len(messages)}:{json_mode}",
        stream_fn=lambda messages: ["x", "y"],
    )
    assert backend.invoke([{}], json_mode=True) == "1:True"
    assert list(backend.stream([])) == ["x", "y"]


def test_callable_backend_without_stream_fails():
    with pytest.raises(BackendInvocationError):
        list(CallableBackend().stream([]))


def test_unknown_provider_is_configuration_error():
    with pytest.raises(ConfigurationError):
        make_backend("carrier-pigeon", "m", 0.5, 100)


def test_missing_key_is_configuration_error(monkeypatch):
    monkeypatch.delenv("GROK_API_KEY", raising=False)
    with pytest.raises(ConfigurationError):
        make_backend("grok", "grok-3-mini", 0.5, 100)


def test_ollama_needs_no_key():
    backend = make_backend("ollama", "llama3.1:8b", 1.0, 600)
    assert isinstance(backend, OpenAIChatBackend)
    assert config.require_api_key("ollama") == "ollama"
