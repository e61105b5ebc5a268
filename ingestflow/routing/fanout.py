"""FanOutPersister — writes one record to an ordered set of sinks.

Every sink is attempted, in order, even when an earlier one fails.  After
the last sink, the *first* failure is re-raised unchanged, so a partial
write is never silent and the caller sees the original exception.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from ingestflow.models.records import SerializedRecord

if TYPE_CHECKING:
    from ingestflow.routing.sinks import BaseSink

logger = logging.getLogger(__name__)


class FanOutPersister:
    """Persists a record to several sinks; itself satisfies ``BaseSink``.

    Parameters
    ----------
    sinks:
        Destination sinks, called in the given order.  Must not be empty.
    name:
        Name reported as ``sink_name``.

    Usage
    -----
    >>> success = FanOutPersister([history_sink, external_sink], name="success")
    >>> success.save(record)
    """

    def __init__(self, sinks: Iterable[BaseSink], name: str = "fan_out") -> None:
        self._sinks: tuple[BaseSink, ...] = tuple(sinks)
        if not self._sinks:
            raise ValueError("FanOutPersister needs at least one sink")
        self._name = name

    @property
    def sink_name(self) -> str:
        return self._name

    @property
    def sinks(self) -> tuple[BaseSink, ...]:
        return self._sinks

    def save(self, record: SerializedRecord) -> None:
        """Save *record* to every sink, then raise the first failure, if any."""
        first_error: Exception | None = None
        failed: list[str] = []

        for sink in self._sinks:
            try:
                sink.save(record)
            except Exception as exc:
                logger.error(
                    "Sink %s failed for message %r: %s",
                    sink.sink_name,
                    record.message_id,
                    exc,
                )
                failed.append(sink.sink_name)
                if first_error is None:
                    first_error = exc

        if first_error is not None:
            logger.warning(
                "%s: %d/%d sinks failed for message %r (%s)",
                self._name,
                len(failed),
                len(self._sinks),
                record.message_id,
                ", ".join(failed),
            )
            raise first_error

    def __repr__(self) -> str:
        names = ", ".join(sink.sink_name for sink in self._sinks)
        return f"FanOutPersister(name={self._name!r}, sinks=[{names}])"
