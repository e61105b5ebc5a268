"""Auxiliary data sources consumed by typed handlers.

A ``DataSource`` is bound to one message when the handler is built and
answers a single ``load_data()`` call with a ``LoadedData`` record.  Handlers
cache the result, so a source is hit at most once per handler.

``DataSourceFactory`` is how the pipeline wires sources in: given the raw
message it returns the source to use for that message.  Factories must not
read the message, since they run during classification.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Protocol, runtime_checkable

from ingestflow.models.messages import RawMessage
from ingestflow.models.records import LoadedData

logger = logging.getLogger(__name__)


@runtime_checkable
class DataSource(Protocol):
    """Protocol for auxiliary data lookups (database row, cache entry, ...)."""

    def load_data(self) -> LoadedData:
        """Fetch the record for the bound message."""
        ...


DataSourceFactory = Callable[[RawMessage], DataSource]


class EmptyDataSource:
    """Source that always returns an empty record."""

    def load_data(self) -> LoadedData:
        return LoadedData()


class MappingDataSource:
    """Looks up the row for one message in an in-memory table.

    Parameters
    ----------
    table:
        ``{key: {field: value}}``.  Non-string values are stringified.
    message:
        The message the source is bound to.
    key_field:
        Message field holding the row key.  Read on ``load_data()``, so a
        message without it fails during processing, not classification.
    """

    def __init__(
        self,
        table: Mapping[str, Mapping[str, object]],
        message: RawMessage,
        key_field: str = "MessageId",
    ) -> None:
        self._table = table
        self._message = message
        self._key_field = key_field

    def load_data(self) -> LoadedData:
        key = self._message.value_str(self._key_field)
        row = self._table.get(key)
        if row is None:
            logger.debug("MappingDataSource: no row for %s", key)
            return LoadedData()
        return LoadedData(values={k: str(v) for k, v in row.items()})


def empty_source_factory(raw: RawMessage) -> DataSource:
    """Default factory: no auxiliary data for any message."""
    return EmptyDataSource()


def mapping_source_factory(
    table: Mapping[str, Mapping[str, object]],
    key_field: str = "MessageId",
) -> DataSourceFactory:
    """Build a factory that binds each message to its row in *table*."""

    def _factory(raw: RawMessage) -> DataSource:
        return MappingDataSource(table, raw, key_field)

    return _factory
