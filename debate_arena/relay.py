"""
relay.py

Ordered event channel between the debate engine and whoever is watching.

The engine publishes TurnStart, Token..., TurnEnd for every speech and a
single Verdict at the end. Each consumer holds its own bounded queue
(a Subscription); events published before a consumer subscribed are not
replayed. Consumers only read: nothing received here may feed back into
the debate state.
"""

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

from .state import VerdictRecord

logger = logging.getLogger(__name__)

DEFAULT_MAXSIZE = 1024


@dataclass(frozen=True)
class TurnStart:
    side: str
    round: int


@dataclass(frozen=True)
class Token:
    text: str


@dataclass(frozen=True)
class TurnEnd:
    pass


@dataclass(frozen=True)
class Verdict:
    record: VerdictRecord


StreamEvent = Union[TurnStart, Token, TurnEnd, Verdict]

# Marks the end of the stream inside a subscription queue
_CLOSED = object()


class Subscription:
    """
    One consumer's view of the relay.

    A full queue blocks the publisher until the consumer catches up.
    """

    def __init__(self, relay: "StreamRelay", maxsize: int):
        self._relay = relay
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self.closed = False

    def _put(self, item: object) -> None:
        self._queue.put(item)

    def get(self, timeout: Optional[float] = None) -> Optional[StreamEvent]:
        """
        Next event, or None once the relay is closed.

        Raises queue.Empty if `timeout` passes with nothing to read.
        """
        if self.closed:
            return None
        item = self._queue.get(timeout=timeout)
        if item is _CLOSED:
            self.closed = True
            return None
        return item  # type: ignore[return-value]

    def drain(self) -> List[StreamEvent]:
        """Everything currently queued, without waiting."""
        events: List[StreamEvent] = []
        while not self.closed:
            try:
                event = self.get(timeout=0)
            except queue.Empty:
                break
            if event is not None:
                events.append(event)
        return events

    def __iter__(self) -> Iterator[StreamEvent]:
        while True:
            event = self.get()
            if event is None:
                return
            yield event

    def unsubscribe(self) -> None:
        self._relay.unsubscribe(self)


class StreamRelay:
    """
    Single producer, many consumers, in-order delivery.
    """

    def __init__(self):
        self._subscriptions: List[Subscription] = []
        self._lock = threading.Lock()
        self.closed = False

    def subscribe(self, maxsize: int = DEFAULT_MAXSIZE) -> Subscription:
        subscription = Subscription(self, maxsize)
        with self._lock:
            if self.closed:
                subscription._put(_CLOSED)
            else:
                self._subscriptions.append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        with self._lock:
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

    def publish(self, event: StreamEvent) -> None:
        if self.closed:
            raise RuntimeError("Cannot publish on a closed relay.")
        with self._lock:
            targets = list(self._subscriptions)
        for subscription in targets:
            subscription._put(event)

    def close(self) -> None:
        """Tell every consumer the stream is over. Safe to call twice."""
        with self._lock:
            if self.closed:
                return
            self.closed = True
            targets = list(self._subscriptions)
            self._subscriptions.clear()
        for subscription in targets:
            subscription._put(_CLOSED)
        logger.debug("Relay closed for %d subscriber(s)", len(targets))
