"""Wiring shared by every handler built during one ingestion run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ingestflow.core.chains import member_event_chain
from ingestflow.core.rules import RuleChain
from ingestflow.data import DataSourceFactory, empty_source_factory
from ingestflow.models.messages import MessageKind

if TYPE_CHECKING:
    from ingestflow.routing.registry import SinkSet
    from ingestflow.sources import EventSource


class HandlerContext:
    """Everything a handler constructor needs besides the message itself.

    Rule chains are built once here, one per message kind, and shared by
    every handler of that kind; rules hold no per-message state.

    Parameters
    ----------
    event_source:
        Receives complete/abandon from every handler.
    sinks:
        Named destinations bound into the chains.
    primary_data, secondary_data:
        Auxiliary data factories for typed handlers.  Default: no data.
    chains:
        Override the chain for one or more kinds (mainly for tests).
    """

    def __init__(
        self,
        event_source: EventSource,
        sinks: SinkSet,
        *,
        primary_data: DataSourceFactory = empty_source_factory,
        secondary_data: DataSourceFactory = empty_source_factory,
        chains: dict[MessageKind, RuleChain] | None = None,
    ) -> None:
        self.event_source = event_source
        self.sinks = sinks
        self.primary_data = primary_data
        self.secondary_data = secondary_data
        self._chains: dict[MessageKind, RuleChain] = {
            MessageKind.MEMBER_EVENT: member_event_chain(sinks.success, sinks.excluded),
        }
        if chains:
            self._chains.update(chains)

    def chain_for(self, kind: MessageKind) -> RuleChain:
        try:
            return self._chains[kind]
        except KeyError:
            raise LookupError(f"No rule chain configured for {kind.value}") from None

    @property
    def chains(self) -> dict[MessageKind, RuleChain]:
        return dict(self._chains)
