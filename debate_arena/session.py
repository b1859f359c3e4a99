"""
session.py

One debate as seen from a presentation layer.

A DebateSession owns the relay and the worker thread for a single run:
start() subscribes and launches the debate, events() yields what the
engine publishes, close() tears everything down. Presentation code gets
this object passed in instead of reaching for shared globals.
"""

import logging
import threading
from typing import Callable, Iterator, Optional

from . import config
from .graph_runner import DebateResult, run_debate
from .relay import StreamEvent, StreamRelay, Subscription

logger = logging.getLogger(__name__)


class DebateSession:
    def __init__(
        self,
        topic: str,
        max_rounds: int = config.MAX_ROUNDS,
        max_sub_rounds: int = config.MAX_SUB_ROUNDS,
        temperature: float = config.DEFAULT_TEMPERATURE,
        runner: Callable[..., DebateResult] = run_debate,
        **run_kwargs,
    ):
        self.topic = topic
        self.max_rounds = max_rounds
        self.max_sub_rounds = max_sub_rounds
        self.temperature = temperature
        self.runner = runner
        self.run_kwargs = run_kwargs

        self.relay: Optional[StreamRelay] = None
        self.subscription: Optional[Subscription] = None
        self.result: Optional[DebateResult] = None
        self.error: Optional[BaseException] = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> "DebateSession":
        if self._thread is not None:
            raise RuntimeError("Session already started.")
        self.relay = StreamRelay()
        # Subscribe first: nothing published before this is replayed
        self.subscription = self.relay.subscribe()
        self._thread = threading.Thread(target=self._run, name="debate-run", daemon=True)
        self._thread.start()
        return self

    def _run(self) -> None:
        try:
            self.result = self.runner(
                self.topic,
                max_rounds=self.max_rounds,
                max_sub_rounds=self.max_sub_rounds,
                temperature=self.temperature,
                relay=self.relay,
                **self.run_kwargs,
            )
        except Exception as exc:
            # Handed back to the presenting thread by wait()
            self.error = exc
        finally:
            # run_debate closes it too; this covers custom runners
            self.relay.close()

    def events(self) -> Iterator[StreamEvent]:
        if self.subscription is None:
            raise RuntimeError("Session not started.")
        return iter(self.subscription)

    def wait(self) -> DebateResult:
        """
        Block until the run ends; re-raise its error if it failed.
        """
        if self._thread is not None:
            self._thread.join()
        if self.error is not None:
            raise self.error
        return self.result

    def close(self) -> None:
        if self.subscription is not None:
            self.subscription.unsubscribe()
            # Frees a publisher that is blocked on our full queue
            self.subscription.drain()
        if self._thread is not None and self._thread.is_alive():
            logger.debug("Waiting for debate thread to finish")
            self._thread.join()

    def __enter__(self) -> "DebateSession":
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.close()
