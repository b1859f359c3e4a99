"""
state.py

Defines the state structure that flows through the debate graph.

Everything here is plain dicts and strings so the checkpointer can
serialize it without custom types.
"""

from typing import List, Literal, Optional, TypedDict

from .errors import ConfigurationError

PROPOSITION = "Proposition"
OPPOSITION = "Opposition"
SIDES = (PROPOSITION, OPPOSITION)

Side = Literal["Proposition", "Opposition"]


class SpeechEntry(TypedDict):
    # Who actually wrote the text; never changes after creation
    canonical_role: Side
    text: str
    sequence_index: int


class VerdictRecord(TypedDict):
    prop_score: float
    opp_score: float
    winner: Side
    reason: str


class DebateState(TypedDict, total=False):
    # Input
    topic: str

    # Position in the debate
    round: int
    sub_round: int
    max_rounds: int
    max_sub_rounds: int

    # Append-only, chronological
    history: List[SpeechEntry]

    # Scheduler bookkeeping
    next_speaker: str

    # Judge result (set once, by the Judge transition)
    verdict: Optional[VerdictRecord]


def other_side(side: str) -> str:
    if side == PROPOSITION:
        return OPPOSITION
    if side == OPPOSITION:
        return PROPOSITION
    raise ValueError(f"Not a debate side: {side!r}")


def new_debate_state(
    topic: str,
    max_rounds: int = 3,
    max_sub_rounds: int = 3,
) -> DebateState:
    """
    Fresh state for one debate: round 1, sub-round 1, empty history.
    """
    topic = (topic or "").strip()
    if not topic:
        raise ValueError("A debate needs a topic.")

    # A zero bound never lets the counters reach the judge
    if max_rounds < 1 or max_sub_rounds < 1:
        raise ConfigurationError(
            f"max_rounds and max_sub_rounds must be >= 1 "
            f"(got {max_rounds} and {max_sub_rounds})."
        )

    return {
        "topic": topic,
        "round": 1,
        "sub_round": 1,
        "max_rounds": max_rounds,
        "max_sub_rounds": max_sub_rounds,
        "history": [],
        "next_speaker": "Proposition",
        "verdict": None,
    }
