"""
scheduler.py

The turn scheduler: a finite-state machine over who speaks next.

    START -> Proposition -> Opposition -> (Proposition | Judge) -> END

transition() takes the current speaker and state and returns the next
speaker and a new state; the input state is left untouched. The only
side effects are the injected generator and judge (and the events they
publish), so the whole machine can be driven with stub backends.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Tuple

from .history import append_entry
from .relay import StreamRelay, Verdict
from .state import OPPOSITION, PROPOSITION, DebateState, SpeechEntry, VerdictRecord

logger = logging.getLogger(__name__)

GenerateFn = Callable[[str, DebateState], SpeechEntry]
JudgeFn = Callable[..., VerdictRecord]


class Speaker(str, Enum):
    PROPOSITION = "Proposition"
    OPPOSITION = "Opposition"
    JUDGE = "Judge"
    END = "END"


def advance_counters(round_number: int, sub_round: int, max_sub_rounds: int) -> Tuple[int, int]:
    """
    Counters after an Opposition speech.

    Both checks read the sub-round from before the update.
    """
    next_round = round_number + 1 if sub_round == max_sub_rounds else round_number
    next_sub_round = 1 if sub_round >= max_sub_rounds else sub_round + 1
    return next_round, next_sub_round


def should_continue(state: DebateState) -> bool:
    """Checked right after the counters move."""
    return (
        state["sub_round"] <= state["max_sub_rounds"]
        and state["round"] <= state["max_rounds"]
    )


def speaker_of(state: DebateState) -> Speaker:
    return Speaker(state.get("next_speaker", Speaker.PROPOSITION.value))


class TurnScheduler:
    def __init__(
        self,
        generate: GenerateFn,
        judge: JudgeFn,
        relay: Optional[StreamRelay] = None,
    ):
        self.generate = generate
        self.judge = judge
        self.relay = relay or StreamRelay()

    def transition(self, speaker: Speaker, state: DebateState) -> Tuple[Speaker, DebateState]:
        if speaker is Speaker.PROPOSITION:
            entry = self.generate(PROPOSITION, state)
            new_state: DebateState = {
                **state,
                "history": append_entry(state["history"], entry),
                "next_speaker": Speaker.OPPOSITION.value,
            }
            logger.info(
                "Proposition spoke (round %d.%d)", state["round"], state["sub_round"]
            )
            return Speaker.OPPOSITION, new_state

        if speaker is Speaker.OPPOSITION:
            entry = self.generate(OPPOSITION, state)
            round_number, sub_round = advance_counters(
                state["round"], state["sub_round"], state["max_sub_rounds"]
            )
            new_state = {
                **state,
                "history": append_entry(state["history"], entry),
                "round": round_number,
                "sub_round": sub_round,
            }
            next_speaker = Speaker.PROPOSITION if should_continue(new_state) else Speaker.JUDGE
            new_state["next_speaker"] = next_speaker.value
            logger.info(
                "Opposition spoke (round %d.%d), next: %s",
                state["round"],
                state["sub_round"],
                next_speaker.value,
            )
            return next_speaker, new_state

        if speaker is Speaker.JUDGE:
            if state.get("verdict"):
                raise ValueError("This debate already has a verdict.")
            verdict = self.judge(state["history"])
            self.relay.publish(Verdict(record=verdict))
            logger.info(
                "Judge ruled for %s (%s-%s)",
                verdict["winner"],
                verdict["prop_score"],
                verdict["opp_score"],
            )
            return Speaker.END, {
                **state,
                "verdict": verdict,
                "next_speaker": Speaker.END.value,
            }

        raise ValueError(f"No transition out of {speaker.value}.")

    def run(self, state: DebateState) -> DebateState:
        """
        Drive the machine to END without a graph or checkpoints.
        """
        speaker = speaker_of(state)
        while speaker is not Speaker.END:
            speaker, state = self.transition(speaker, state)
        return state
