from debate_arena.history import append_entry, make_entry
from debate_arena.state import OPPOSITION, PROPOSITION
from debate_arena.transcript import format_transcript, write_transcript


def two_speeches():
    history = [make_entry(PROPOSITION, "We should.", [])]
    return append_entry(history, make_entry(OPPOSITION, "We should not.", history))


def test_blocks_are_labeled_by_canonical_role():
    assert format_transcript(two_speeches()) == (
        "Proposition:\nWe should.\n\nOpposition:\nWe should not.\n"
    )


def test_file_is_named_after_completion_millis(tmp_path):
    path = write_transcript(two_speeches(), tmp_path / "out", completed_at=1700000000.5)
    assert path.name == "1700000000500.txt"
    assert path.read_text(encoding="utf-8").startswith("Proposition:\n")


def test_empty_history_writes_empty_file(tmp_path):
    path = write_transcript([], tmp_path, completed_at=1.0)
    assert path.read_text(encoding="utf-8") == ""
