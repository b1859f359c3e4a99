"""
history.py

The debate's message store: an append-only, ordered list of speeches.

Lists are never mutated in place. append_entry() hands back a new list
so a transition can build the next state without touching the old one.
"""

from typing import List, Sequence

from .state import OPPOSITION, PROPOSITION, SIDES, SpeechEntry

INITIATOR = "initiator"
RESPONDER = "responder"


def make_entry(side: str, text: str, history: Sequence[SpeechEntry]) -> SpeechEntry:
    """
    Build the next entry for `side`; its index is its position in history.
    """
    if side not in SIDES:
        raise ValueError(f"Not a debate side: {side!r}")
    return {
        "canonical_role": side,
        "text": text,
        "sequence_index": len(history),
    }


def append_entry(history: Sequence[SpeechEntry], entry: SpeechEntry) -> List[SpeechEntry]:
    if entry["canonical_role"] not in SIDES:
        raise ValueError(f"Not a debate side: {entry['canonical_role']!r}")
    if entry["sequence_index"] != len(history):
        raise ValueError(
            f"Entry index {entry['sequence_index']} does not follow a history "
            f"of length {len(history)}."
        )
    return [*history, entry]


def presentation_role(entry: SpeechEntry) -> str:
    # Canonical tagging: Proposition opens, Opposition answers
    if entry["canonical_role"] == PROPOSITION:
        return INITIATOR
    if entry["canonical_role"] == OPPOSITION:
        return RESPONDER
    raise ValueError(f"Not a debate side: {entry['canonical_role']!r}")


def entries_for(history: Sequence[SpeechEntry], side: str) -> List[SpeechEntry]:
    return [entry for entry in history if entry["canonical_role"] == side]
