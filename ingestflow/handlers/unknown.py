"""Fallback handler for messages no classifier predicate recognised."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, NoReturn

from ingestflow.handlers.base import MessageHandler, UnsupportedOperationError
from ingestflow.models.messages import MessageKind, RawMessage
from ingestflow.models.records import SerializedRecord

if TYPE_CHECKING:
    from ingestflow.handlers.context import HandlerContext
    from ingestflow.routing.sinks import BaseSink
    from ingestflow.sources import EventSource


class UnknownMessageHandler(MessageHandler):
    """Saves the message once to the unknown sink and completes it.

    Runs no rule chain, so none of the classification queries apply; each
    raises ``UnsupportedOperationError``.
    """

    kind: ClassVar[MessageKind] = MessageKind.UNKNOWN

    def __init__(self, raw: RawMessage, event_source: EventSource, unknown_sink: BaseSink) -> None:
        super().__init__(raw, event_source)
        self._unknown_sink = unknown_sink

    @classmethod
    def from_context(cls, raw: RawMessage, context: HandlerContext) -> UnknownMessageHandler:
        return cls(raw, context.event_source, context.sinks.unknown)

    def message_id(self) -> str:
        self._unsupported("message_id")

    def example_should_be_excluded(self) -> bool:
        self._unsupported("example_should_be_excluded")

    def other_should_be_excluded(self) -> bool:
        self._unsupported("other_should_be_excluded")

    def has_member_event_only(self) -> bool:
        self._unsupported("has_member_event_only")

    def save(self, sink: BaseSink) -> None:
        sink.save(SerializedRecord())

    def handle(self) -> None:
        self.save(self._unknown_sink)

    def _unsupported(self, operation: str) -> NoReturn:
        raise UnsupportedOperationError(
            f"{operation}() is not supported for unknown messages"
        )
