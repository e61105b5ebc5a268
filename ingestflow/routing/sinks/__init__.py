"""Sink protocol for ingestflow persistence.

All sinks implement the ``BaseSink`` protocol: a ``sink_name`` property
and a ``save(record)`` method.  Handlers push their ``SerializedRecord``
into a sink; nothing pulls fields out of a handler.

Because a failed message is abandoned and redelivered, every ``save`` must
tolerate seeing the same record more than once.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ingestflow.models.records import SerializedRecord


@runtime_checkable
class BaseSink(Protocol):
    """Protocol that every ingestflow sink must implement.

    Attributes
    ----------
    sink_name : str
        A human-readable identifier for this sink instance
        (e.g. ``"history"``, ``"excluded"``).
    """

    @property
    def sink_name(self) -> str:
        """Return the name of this sink."""
        ...

    def save(self, record: SerializedRecord) -> None:
        """Persist the record.  Raise on failure; nothing is retried here."""
        ...
