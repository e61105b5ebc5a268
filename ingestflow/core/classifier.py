"""Message classifier — selects the handler variant for a raw message.

Classification is two independent steps:

1. ``classify_kind(raw)`` walks an ordered list of ``(kind, predicate)``
   pairs and returns the first kind whose predicate matches, or
   ``MessageKind.UNKNOWN``.
2. ``HANDLER_TYPE_MAP`` maps that kind to a handler constructor.

It is total: a predicate that raises counts as "no match", so every
message ends up with a handler.  Adding a message type means appending one
predicate and one ``HANDLER_TYPE_MAP`` entry; existing entries stay as
they are.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from ingestflow.handlers.base import MessageHandler
from ingestflow.handlers.context import HandlerContext
from ingestflow.handlers.member_event import MemberEventHandler
from ingestflow.handlers.unknown import UnknownMessageHandler
from ingestflow.models.messages import MessageKind, RawMessage

logger = logging.getLogger(__name__)

KindPredicate = Callable[[RawMessage], bool]
HandlerConstructor = Callable[[RawMessage, HandlerContext], MessageHandler]


def is_member_event(raw: RawMessage) -> bool:
    """``EventType`` is ``"MemberEvent"`` (case-insensitive)."""
    value = raw.fields.get("EventType")
    return isinstance(value, str) and value.strip().lower() == "memberevent"


# Evaluated in order; the first match wins.
DEFAULT_PREDICATES: tuple[tuple[MessageKind, KindPredicate], ...] = (
    (MessageKind.MEMBER_EVENT, is_member_event),
)

# Registry for handler construction by kind
HANDLER_TYPE_MAP: dict[MessageKind, HandlerConstructor] = {
    MessageKind.MEMBER_EVENT: MemberEventHandler.from_context,
    MessageKind.UNKNOWN: UnknownMessageHandler.from_context,
}


class MessageClassifier:
    """Builds the right handler for each raw message.

    Parameters
    ----------
    context:
        Wiring passed to every handler constructor.
    predicates:
        Ordered ``(kind, predicate)`` pairs.  ``MessageKind.UNKNOWN`` may
        not appear; it is the implicit last entry.
    handler_types:
        Kind to constructor table.  Defaults to ``HANDLER_TYPE_MAP``.
    """

    def __init__(
        self,
        context: HandlerContext,
        predicates: Iterable[tuple[MessageKind, KindPredicate]] = DEFAULT_PREDICATES,
        handler_types: dict[MessageKind, HandlerConstructor] | None = None,
    ) -> None:
        self._context = context
        self._predicates: tuple[tuple[MessageKind, KindPredicate], ...] = tuple(predicates)
        self._handler_types = dict(handler_types or HANDLER_TYPE_MAP)
        self._validate()

    def _validate(self) -> None:
        if MessageKind.UNKNOWN not in self._handler_types:
            raise ValueError("A handler for MessageKind.UNKNOWN is required")
        for kind, _ in self._predicates:
            if kind is MessageKind.UNKNOWN:
                raise ValueError(
                    "MessageKind.UNKNOWN is the fallback and cannot have a predicate"
                )
            if kind not in self._handler_types:
                raise ValueError(f"No handler registered for {kind.value}")

    @property
    def kinds(self) -> Sequence[MessageKind]:
        """Kinds in priority order, ending with the fallback."""
        return [kind for kind, _ in self._predicates] + [MessageKind.UNKNOWN]

    def classify_kind(self, raw: RawMessage) -> MessageKind:
        """Return the first matching kind, or ``MessageKind.UNKNOWN``."""
        for kind, predicate in self._predicates:
            try:
                matched = predicate(raw)
            except Exception:
                logger.exception("Predicate for %s raised; treating as no match", kind.value)
                continue
            if matched:
                return kind
        return MessageKind.UNKNOWN

    def classify(self, raw: RawMessage) -> MessageHandler:
        """Build the handler for *raw*, bound to its kind's rule chain."""
        kind = self.classify_kind(raw)
        logger.debug("Classified message as %s", kind.value)
        return self._handler_types[kind](raw, self._context)
