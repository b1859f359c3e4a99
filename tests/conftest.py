"""
Shared test fixtures: scripted backends that never touch the network.
"""

import json

import pytest

from debate_arena.errors import BackendInvocationError
from debate_arena.history import make_entry
from debate_arena.relay import StreamRelay

DEFAULT_VERDICT = {
    "prop_score": 7,
    "opp_score": 6,
    "winner": "Proposition",
    "reason": "Proposition weighed its impacts; Opposition never answered the cost argument.",
}


class ScriptedBackend:
    """
    Streams the same chunks for every speech and answers invoke() with
    a fixed verdict. Records every call.
    """

    def __init__(self, chunks=("Strong ", "", "case."), verdict=None, fail_on_call=None):
        self.chunks = list(chunks)
        self.verdict = DEFAULT_VERDICT if verdict is None else verdict
        self.fail_on_call = fail_on_call
        self.stream_calls = []
        self.invoke_calls = []

    def stream(self, messages):
        self.stream_calls.append(list(messages))
        if self.fail_on_call == len(self.stream_calls):
            yield "half a sen"
            raise BackendInvocationError("connection reset by peer")
        yield from self.chunks

    def invoke(self, messages, json_mode=False):
        self.invoke_calls.append((list(messages), json_mode))
        if isinstance(self.verdict, str):
            return self.verdict
        return json.dumps(self.verdict)


def stub_generate(side, state):
    """Generator stand-in: labels each speech with its position."""
    text = f"{side} {state['round']}.{state['sub_round']}"
    return make_entry(side, text, state["history"])


class CountingJudge:
    def __init__(self, verdict=None):
        self.verdict = dict(DEFAULT_VERDICT if verdict is None else verdict)
        self.calls = []

    def __call__(self, history):
        self.calls.append(list(history))
        return dict(self.verdict)


@pytest.fixture
def backend():
    return ScriptedBackend()


@pytest.fixture
def relay():
    return StreamRelay()
