"""Event source contract.

The ingestion core consumes any object satisfying ``EventSource``.  The
source owns delivery: ``complete()`` and ``abandon()`` always refer to the
message most recently returned by ``next_message()``, and exactly one of
them is called per dequeued message.  ``abandon()`` must make the message
available again (at-least-once redelivery).

Reference adapters:

- ``InMemoryEventSource`` — volatile deque, for tests and embedding.
- ``SqliteEventSource`` — persistent leased queue, survives restarts.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ingestflow.models.messages import RawMessage


class EventSourceError(RuntimeError):
    """Base class for event-source contract violations."""


class EventSourceEmptyError(EventSourceError):
    """Raised by ``next_message()`` when nothing is available."""


class NoInFlightMessageError(EventSourceError):
    """Raised by ``complete()``/``abandon()`` with no dequeued message."""


class MessageInFlightError(EventSourceError):
    """Raised by ``next_message()`` before the previous message was settled."""


@runtime_checkable
class EventSource(Protocol):
    """Protocol that every event source binding must satisfy."""

    def has_message(self) -> bool:
        """Return ``True`` if ``next_message()`` would return a message."""
        ...

    def next_message(self) -> RawMessage:
        """Dequeue the next message.  Only call when ``has_message()``."""
        ...

    def complete(self) -> None:
        """Acknowledge the in-flight message; it is never redelivered."""
        ...

    def abandon(self) -> None:
        """Release the in-flight message for redelivery."""
        ...
