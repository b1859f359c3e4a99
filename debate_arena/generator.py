"""
generator.py

Produces one speech: builds the instruction, streams the backend's
answer through the relay, and returns the finished history entry.

The debate state is only read here. The scheduler decides whether the
entry is committed, and a failed stream never reaches history.
"""

import logging
from typing import List

from .clients import ModelBackend, to_chat_messages
from .errors import BackendInvocationError
from .history import make_entry
from .perspective import present_for
from .prompts import debater_instruction
from .relay import StreamRelay, Token, TurnEnd, TurnStart
from .state import DebateState, SpeechEntry

logger = logging.getLogger(__name__)


class SpeechGenerator:
    def __init__(self, backend: ModelBackend, relay: StreamRelay):
        self.backend = backend
        self.relay = relay

    def generate(self, side: str, state: DebateState) -> SpeechEntry:
        round_number = state["round"]
        history = state["history"]

        # Fails before anything is published if the round has no rules
        instruction = debater_instruction(side, round_number, state["topic"])
        messages = to_chat_messages(instruction, present_for(side, history))
        logger.debug(
            "%s speaking (round %d.%d) with %d message(s)",
            side,
            round_number,
            state["sub_round"],
            len(messages),
        )

        self.relay.publish(TurnStart(side=side, round=round_number))

        chunks: List[str] = []
        try:
            for chunk in self.backend.stream(messages):
                if not chunk:
                    continue
                self.relay.publish(Token(text=chunk))
                chunks.append(chunk)
        except BackendInvocationError:
            logger.error("%s stream failed in round %d", side, round_number)
            raise

        self.relay.publish(TurnEnd())

        return make_entry(side, "".join(chunks).strip(), history)
