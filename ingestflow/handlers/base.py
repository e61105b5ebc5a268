"""Abstract message handler with an enforced process lifecycle.

Every concrete handler implements the classification queries, ``save()``
and ``handle()``.  The ``process()`` wrapper is **not overridable** — it
enforces the acknowledgement contract:

    handle -> complete            (normal return)
    handle -> abandon -> re-raise (any exception)

Exactly one of ``complete()``/``abandon()`` reaches the event source per
handler, and the caller always sees the original exception with its
traceback.  A handler serves one message; calling ``process()`` twice is
a programming error.
"""

from __future__ import annotations

import abc
import logging
from typing import TYPE_CHECKING, ClassVar, final

from ingestflow.models.messages import MessageKind, RawMessage

if TYPE_CHECKING:
    from ingestflow.routing.sinks import BaseSink
    from ingestflow.sources import EventSource

logger = logging.getLogger(__name__)


class UnsupportedOperationError(NotImplementedError):
    """Raised by a handler variant for queries it cannot answer.

    Signals a routing defect, not a data problem: these queries are never
    reached for a correctly classified message.
    """


class HandlerReuseError(RuntimeError):
    """Raised when ``process()`` is called on an already-used handler."""


class MessageHandler(abc.ABC):
    """Abstract base for all message handler variants.

    Parameters
    ----------
    raw:
        The message this handler owns for the duration of ``process()``.
    event_source:
        The source the message came from; receives complete/abandon.
    """

    kind: ClassVar[MessageKind]

    def __init__(self, raw: RawMessage, event_source: EventSource) -> None:
        self._raw = raw
        self._event_source = event_source
        self._processed = False

    # ------------------------------------------------------------------
    # Classification queries and serialization (subclasses implement)
    # ------------------------------------------------------------------

    @abc.abstractmethod
    def message_id(self) -> str:
        ...

    @abc.abstractmethod
    def example_should_be_excluded(self) -> bool:
        ...

    @abc.abstractmethod
    def other_should_be_excluded(self) -> bool:
        ...

    @abc.abstractmethod
    def has_member_event_only(self) -> bool:
        ...

    @abc.abstractmethod
    def save(self, sink: BaseSink) -> None:
        """Serialize this message and push it into *sink*."""
        ...

    @abc.abstractmethod
    def handle(self) -> None:
        """Persist the message.  Raise on any failure."""
        ...

    # ------------------------------------------------------------------
    # Lifecycle (NOT overridable)
    # ------------------------------------------------------------------

    @final
    def process(self) -> None:
        """Handle the message, then complete or abandon it.  **Do not override.**"""
        if self._processed:
            raise HandlerReuseError(
                f"{type(self).__name__} has already processed its message"
            )
        self._processed = True

        try:
            self.handle()
        except Exception as exc:
            logger.warning(
                "%s failed (%s: %s); abandoning for redelivery",
                type(self).__name__,
                type(exc).__name__,
                exc,
            )
            self._abandon_quietly()
            raise

        self._event_source.complete()

    def _abandon_quietly(self) -> None:
        # The handling error is the one the caller must see; an abandon
        # failure is only logged.
        try:
            self._event_source.abandon()
        except Exception:
            logger.exception("%s: abandon() failed", type(self).__name__)

    @property
    def processed(self) -> bool:
        return self._processed

    def __repr__(self) -> str:
        return f"{type(self).__name__}(processed={self._processed})"
