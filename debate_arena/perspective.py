"""
perspective.py

Turns the canonical history into the alternating view a chat call needs.

Chat backends expect turns to alternate and to end on the "user" side;
whatever they see last in the "assistant" seat is treated as their own
finished answer, and they reply with an empty continuation. Canonical
history tags Proposition as initiator and Opposition as responder, which
ends on an initiator entry when Opposition is next. When Proposition is
next, every role is swapped so the view still ends on an initiator entry.

These are pure functions over plain dicts; the backend decides what
"initiator" and "responder" mean on the wire.
"""

from typing import List, Sequence, TypedDict

from .history import INITIATOR, RESPONDER, presentation_role
from .state import OPPOSITION, PROPOSITION, SpeechEntry

OPENING_INSTRUCTION = "Start your debate"


class PresentedTurn(TypedDict):
    role: str
    text: str


def canonical_view(history: Sequence[SpeechEntry]) -> List[PresentedTurn]:
    return [{"role": presentation_role(entry), "text": entry["text"]} for entry in history]


def swap_perspective(view: Sequence[PresentedTurn]) -> List[PresentedTurn]:
    """
    Swap initiator and responder on every turn.

    Applying it twice gives back the original view.
    """
    swapped: List[PresentedTurn] = []
    for turn in view:
        if turn["role"] == INITIATOR:
            role = RESPONDER
        elif turn["role"] == RESPONDER:
            role = INITIATOR
        else:
            raise ValueError(f"Unknown presentation role: {turn['role']!r}")
        swapped.append({"role": role, "text": turn["text"]})
    return swapped


def present_for(side: str, history: Sequence[SpeechEntry]) -> List[PresentedTurn]:
    """
    View of `history` for the side about to speak.

    The last turn always appears to come from the other participant.
    An empty history (the very first speech) becomes a single opening
    instruction instead of an empty view.
    """
    if side not in (PROPOSITION, OPPOSITION):
        raise ValueError(f"Not a debate side: {side!r}")

    if not history:
        return [{"role": INITIATOR, "text": OPENING_INSTRUCTION}]

    view = canonical_view(history)
    if side == PROPOSITION:
        return swap_perspective(view)
    return view
