import json

import pytest

from debate_arena.errors import MalformedVerdictError
from debate_arena.history import make_entry
from debate_arena.judge import VerdictJudge, parse_verdict
from debate_arena.prompts import JUDGE_INSTRUCTION
from debate_arena.state import OPPOSITION, PROPOSITION

from conftest import DEFAULT_VERDICT, ScriptedBackend


def verdict_json(**overrides):
    data = dict(DEFAULT_VERDICT)
    data.update(overrides)
    return json.dumps(data)


def test_parses_valid_verdict():
    record = parse_verdict(verdict_json(prop_score=8.5, opp_score=0))
    assert record["prop_score"] == 8.5
    assert record["opp_score"] == 0
    assert record["winner"] == PROPOSITION


def test_winner_is_normalized():
    assert parse_verdict(verdict_json(winner=" opposition "))["winner"] == OPPOSITION


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        "",
        '["a", "list"]',
        verdict_json(winner="Tie"),
        verdict_json(winner=None),
        verdict_json(prop_score=11),
        verdict_json(opp_score=-1),
        verdict_json(prop_score="7"),
        verdict_json(prop_score=True),
        verdict_json(reason=3),
    ],
)
def test_malformed_verdicts_are_fatal(raw):
    with pytest.raises(MalformedVerdictError):
        parse_verdict(raw)


@pytest.mark.parametrize("field", ["prop_score", "opp_score", "winner", "reason"])
def test_missing_field_is_fatal(field):
    data = dict(DEFAULT_VERDICT)
    del data[field]
    with pytest.raises(MalformedVerdictError) as info:
        parse_verdict(json.dumps(data))
    assert field in str(info.value)


def test_judge_makes_one_json_mode_call_with_transcript():
    backend = ScriptedBackend()
    history = [make_entry(PROPOSITION, "Yes because X.", [])]
    history.append(make_entry(OPPOSITION, "No because Y.", history))

    record = VerdictJudge(backend).judge(history)

    assert record["winner"] == PROPOSITION
    assert len(backend.invoke_calls) == 1
    messages, json_mode = backend.invoke_calls[0]
    assert json_mode is True
    assert messages[0] == {"role": "system", "content": JUDGE_INSTRUCTION}
    assert "Proposition:\nYes because X." in messages[1]["content"]
    assert "Opposition:\nNo because Y." in messages[1]["content"]


def test_judge_does_not_retry_bad_output():
    backend = ScriptedBackend(verdict="{oops")
    with pytest.raises(MalformedVerdictError):
        VerdictJudge(backend).judge([])
    assert len(backend.invoke_calls) == 1
