"""
transcript.py

Writes a finished debate to a plain-text file.

One block per speech: a "Proposition:" or "Opposition:" label line,
then the speech. The file is named after the completion time in epoch
milliseconds.
"""

import logging
import time
from pathlib import Path
from typing import Optional, Sequence, Union

from .state import SpeechEntry

logger = logging.getLogger(__name__)


def format_block(entry: SpeechEntry) -> str:
    return f"{entry['canonical_role']}:\n{entry['text']}\n"


def format_transcript(history: Sequence[SpeechEntry]) -> str:
    return "\n".join(format_block(entry) for entry in history)


def write_transcript(
    history: Sequence[SpeechEntry],
    directory: Union[str, Path] = ".",
    completed_at: Optional[float] = None,
) -> Path:
    """
    Write the transcript and return the file path.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    if completed_at is None:
        completed_at = time.time()
    path = directory / f"{int(completed_at * 1000)}.txt"

    path.write_text(format_transcript(history), encoding="utf-8")
    logger.info("Transcript saved to %s", path)
    return path
