import pytest

from debate_arena.errors import BackendInvocationError
from debate_arena.relay import Token, Verdict
from debate_arena.session import DebateSession

from conftest import ScriptedBackend


def test_session_streams_events_and_returns_result(backend):
    session = DebateSession(
        "Should remote work be mandatory?",
        max_rounds=1,
        max_sub_rounds=1,
        debater_backend=backend,
        judge_backend=backend,
        transcript_dir=None,
    )

    with session:
        events = list(session.events())
        result = session.wait()

    assert sum(isinstance(event, Token) for event in events) == 4
    assert isinstance(events[-1], Verdict)
    assert len(result.state["history"]) == 2


def test_session_reraises_run_failure():
    backend = ScriptedBackend(fail_on_call=1)
    session = DebateSession(
        "motion",
        max_rounds=1,
        max_sub_rounds=1,
        debater_backend=backend,
        judge_backend=backend,
        transcript_dir=None,
    )

    with session:
        list(session.events())
        with pytest.raises(BackendInvocationError):
            session.wait()


def test_events_before_start_is_an_error():
    with pytest.raises(RuntimeError):
        DebateSession("motion").events()


def test_session_cannot_start_twice(backend):
    session = DebateSession(
        "motion",
        max_rounds=1,
        max_sub_rounds=1,
        debater_backend=backend,
        judge_backend=backend,
        transcript_dir=None,
    )
    with session:
        with pytest.raises(RuntimeError):
            session.start()
        session.wait()
