"""Member event handler — the typed variant for ``EventType=MemberEvent``."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from ingestflow.core.rules import RuleChain, run_chain
from ingestflow.handlers.base import MessageHandler
from ingestflow.models.messages import MessageKind, RawMessage
from ingestflow.models.records import LoadedData, SerializedRecord

if TYPE_CHECKING:
    from ingestflow.data import DataSource
    from ingestflow.handlers.context import HandlerContext
    from ingestflow.routing.sinks import BaseSink
    from ingestflow.sources import EventSource

# Marks a cache slot that has not been loaded yet.
_UNSET = object()


class MemberEventHandler(MessageHandler):
    """Handles one member event through the member-event rule chain.

    Fields read from the message: ``MessageId``, ``Example``, ``Other``.
    Fields read from auxiliary data: ``OtherValue`` (primary source),
    ``AnotherValue`` and ``ThatValue`` (secondary source).  Each source is
    loaded at most once per handler, on first use.

    Parameters
    ----------
    raw:
        The member event message.
    event_source:
        Receives complete/abandon.
    chain:
        The member-event rule chain.
    primary_data, secondary_data:
        Auxiliary sources bound to this message.
    """

    kind: ClassVar[MessageKind] = MessageKind.MEMBER_EVENT

    def __init__(
        self,
        raw: RawMessage,
        event_source: EventSource,
        chain: RuleChain,
        primary_data: DataSource,
        secondary_data: DataSource,
    ) -> None:
        super().__init__(raw, event_source)
        self._chain = chain
        self._primary_source = primary_data
        self._secondary_source = secondary_data
        self._primary_cache: LoadedData | object = _UNSET
        self._secondary_cache: LoadedData | object = _UNSET

    @classmethod
    def from_context(cls, raw: RawMessage, context: HandlerContext) -> MemberEventHandler:
        return cls(
            raw,
            context.event_source,
            context.chain_for(cls.kind),
            context.primary_data(raw),
            context.secondary_data(raw),
        )

    # ------------------------------------------------------------------
    # From the message
    # ------------------------------------------------------------------

    def message_id(self) -> str:
        return self._raw.value_str("MessageId")

    def example_should_be_excluded(self) -> bool:
        return self._raw.value_bool("Example")

    def other_should_be_excluded(self) -> bool:
        return self._raw.value_bool("Other")

    # ------------------------------------------------------------------
    # Questions answered from auxiliary data
    # ------------------------------------------------------------------

    def has_member_event_only(self) -> bool:
        """Whether the secondary source holds a member-event-only value."""
        return bool(self._member_event_only_value().strip())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def handle(self) -> None:
        run_chain(self._chain, self)

    def save(self, sink: BaseSink) -> None:
        sink.save(self._serialized())

    def _serialized(self) -> SerializedRecord:
        return SerializedRecord(
            message_id=self.message_id(),
            fields={
                "OtherValue": self._other_value(),
                "AnotherValue": self._another_value(),
                "MemberEventOnlyValue": self._member_event_only_value(),
            },
        )

    # ------------------------------------------------------------------
    # Cached auxiliary data (private)
    # ------------------------------------------------------------------

    def _primary(self) -> LoadedData:
        if self._primary_cache is _UNSET:
            self._primary_cache = self._primary_source.load_data()
        return self._primary_cache  # type: ignore[return-value]

    def _secondary(self) -> LoadedData:
        if self._secondary_cache is _UNSET:
            self._secondary_cache = self._secondary_source.load_data()
        return self._secondary_cache  # type: ignore[return-value]

    def _other_value(self) -> str:
        return self._primary()["OtherValue"]

    def _another_value(self) -> str:
        return self._secondary()["AnotherValue"]

    def _member_event_only_value(self) -> str:
        return self._secondary()["ThatValue"]
