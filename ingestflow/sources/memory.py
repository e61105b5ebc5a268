"""In-memory event source — volatile FIFO with redelivery on abandon."""

from __future__ import annotations

import collections
import logging
from collections.abc import Iterable

from ingestflow.models.messages import RawMessage
from ingestflow.sources import (
    EventSourceEmptyError,
    MessageInFlightError,
    NoInFlightMessageError,
)

logger = logging.getLogger(__name__)


class InMemoryEventSource:
    """FIFO event source backed by a deque.

    Abandoned messages go to the back of the queue, so other messages are
    not starved by one that keeps failing.

    Parameters
    ----------
    messages:
        Initial messages, delivered in order.
    """

    def __init__(self, messages: Iterable[RawMessage] = ()) -> None:
        self._queue: collections.deque[RawMessage] = collections.deque(messages)
        self._in_flight: RawMessage | None = None
        self.completed: list[RawMessage] = []
        self.abandoned: list[RawMessage] = []
        self.deliveries: int = 0

    def enqueue(self, message: RawMessage) -> None:
        self._queue.append(message)

    @property
    def depth(self) -> int:
        """Messages waiting, not counting the in-flight one."""
        return len(self._queue)

    @property
    def in_flight(self) -> RawMessage | None:
        return self._in_flight

    def has_message(self) -> bool:
        return bool(self._queue)

    def next_message(self) -> RawMessage:
        if self._in_flight is not None:
            raise MessageInFlightError(
                "Previous message has not been completed or abandoned"
            )
        if not self._queue:
            raise EventSourceEmptyError("No message available")
        self._in_flight = self._queue.popleft()
        self.deliveries += 1
        return self._in_flight

    def complete(self) -> None:
        message = self._settle()
        self.completed.append(message)
        logger.debug("InMemoryEventSource: completed (remaining=%d)", len(self._queue))

    def abandon(self) -> None:
        message = self._settle()
        self.abandoned.append(message)
        self._queue.append(message)
        logger.debug("InMemoryEventSource: abandoned, requeued (depth=%d)", len(self._queue))

    def _settle(self) -> RawMessage:
        if self._in_flight is None:
            raise NoInFlightMessageError("No message is in flight")
        message, self._in_flight = self._in_flight, None
        return message
