import pytest

from debate_arena.history import INITIATOR, RESPONDER, append_entry, entries_for, make_entry
from debate_arena.perspective import (
    OPENING_INSTRUCTION,
    canonical_view,
    present_for,
    swap_perspective,
)
from debate_arena.state import OPPOSITION, PROPOSITION


def build_history(*sides):
    history = []
    for i, side in enumerate(sides):
        history = append_entry(history, make_entry(side, f"speech {i}", history))
    return history


def test_empty_history_gives_opening_instruction():
    for side in (PROPOSITION, OPPOSITION):
        assert present_for(side, []) == [{"role": INITIATOR, "text": OPENING_INSTRUCTION}]


def test_opposition_sees_canonical_roles():
    history = build_history(PROPOSITION)
    assert present_for(OPPOSITION, history) == [{"role": INITIATOR, "text": "speech 0"}]


def test_proposition_sees_swapped_roles():
    history = build_history(PROPOSITION, OPPOSITION)
    view = present_for(PROPOSITION, history)
    assert [turn["role"] for turn in view] == [RESPONDER, INITIATOR]
    assert [turn["text"] for turn in view] == ["speech 0", "speech 1"]


@pytest.mark.parametrize("pairs", [1, 2, 5])
def test_view_always_ends_on_initiator(pairs):
    full = build_history(*([PROPOSITION, OPPOSITION] * pairs))
    assert present_for(PROPOSITION, full)[-1]["role"] == INITIATOR
    # Opposition speaks right after Proposition's latest speech
    assert present_for(OPPOSITION, full[:-1])[-1]["role"] == INITIATOR


def test_swap_is_an_involution():
    view = canonical_view(build_history(PROPOSITION, OPPOSITION, PROPOSITION))
    assert swap_perspective(swap_perspective(view)) == view
    assert swap_perspective(view) != view


def test_presenting_leaves_history_untouched():
    history = build_history(PROPOSITION, OPPOSITION)
    present_for(PROPOSITION, history)
    assert [e["canonical_role"] for e in history] == [PROPOSITION, OPPOSITION]


def test_unknown_role_is_rejected():
    with pytest.raises(ValueError):
        swap_perspective([{"role": "narrator", "text": "x"}])


def test_append_rejects_out_of_order_entry():
    history = build_history(PROPOSITION)
    stale = make_entry(OPPOSITION, "late", [])
    with pytest.raises(ValueError):
        append_entry(history, stale)


def test_make_entry_rejects_judge():
    with pytest.raises(ValueError):
        make_entry("Judge", "verdict", [])


def test_entries_for_filters_by_side():
    history = build_history(PROPOSITION, OPPOSITION, PROPOSITION)
    assert [e["sequence_index"] for e in entries_for(history, PROPOSITION)] == [0, 2]
