"""
judge.py

The judge reads the finished transcript and returns a scored verdict.

One non-streaming call in the backend's JSON mode. Anything that does not
parse into a complete, in-range verdict is fatal; there is no retry.
"""

import json
import logging
from typing import List, Sequence

from .clients import ChatMessage, ModelBackend
from .errors import MalformedVerdictError
from .prompts import JUDGE_CLOSING_REQUEST, JUDGE_INSTRUCTION
from .state import SIDES, SpeechEntry, VerdictRecord
from .transcript import format_transcript

logger = logging.getLogger(__name__)

MIN_SCORE = 0
MAX_SCORE = 10
REQUIRED_FIELDS = ("prop_score", "opp_score", "winner", "reason")


def _score(data: dict, field: str, raw: str) -> float:
    value = data[field]
    # bool is an int subclass; "true" is not a score
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise MalformedVerdictError(f"{field} is not a number: {value!r}", raw)
    if not MIN_SCORE <= value <= MAX_SCORE:
        raise MalformedVerdictError(
            f"{field}={value} is outside {MIN_SCORE}-{MAX_SCORE}", raw
        )
    return value


def parse_verdict(raw: str) -> VerdictRecord:
    """
    Parse the judge's JSON answer into a VerdictRecord.

    The winner is matched case-insensitively and normalized to the
    side's canonical spelling.
    """
    try:
        data = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as exc:
        raise MalformedVerdictError(f"Judge output is not valid JSON: {exc}", raw or "") from exc

    if not isinstance(data, dict):
        raise MalformedVerdictError("Judge output is not a JSON object", raw)

    missing = [field for field in REQUIRED_FIELDS if field not in data]
    if missing:
        raise MalformedVerdictError(f"Judge output is missing {', '.join(missing)}", raw)

    winner = data["winner"]
    if not isinstance(winner, str):
        raise MalformedVerdictError(f"winner is not a string: {winner!r}", raw)
    matches = [side for side in SIDES if side.lower() == winner.strip().lower()]
    if not matches:
        raise MalformedVerdictError(f"winner must be one of {SIDES}, got {winner!r}", raw)

    reason = data["reason"]
    if not isinstance(reason, str):
        raise MalformedVerdictError(f"reason is not a string: {reason!r}", raw)

    return {
        "prop_score": _score(data, "prop_score", raw),
        "opp_score": _score(data, "opp_score", raw),
        "winner": matches[0],
        "reason": reason.strip(),
    }


class VerdictJudge:
    def __init__(self, backend: ModelBackend):
        self.backend = backend

    def build_messages(self, history: Sequence[SpeechEntry]) -> List[ChatMessage]:
        return [
            {"role": "system", "content": JUDGE_INSTRUCTION},
            {"role": "user", "content": format_transcript(history)},
            {"role": "user", "content": JUDGE_CLOSING_REQUEST},
        ]

    def judge(self, history: Sequence[SpeechEntry]) -> VerdictRecord:
        logger.debug("Judging a transcript of %d speeches", len(history))
        raw = self.backend.invoke(self.build_messages(history), json_mode=True)
        try:
            return parse_verdict(raw)
        except MalformedVerdictError:
            logger.error("Judge returned an unusable verdict: %r", raw[:500])
            raise
