"""Logging sink — records are written to the log instead of storage.

Used as the default destination for messages nobody recognised: they are
acknowledged, so the log line is the only trace left of them.
"""

from __future__ import annotations

import logging

from ingestflow.models.records import SerializedRecord

logger = logging.getLogger(__name__)


class LoggingSink:
    """Logs each record at the configured level."""

    def __init__(self, name: str = "unknown", level: int = logging.WARNING) -> None:
        self._name = name
        self._level = level

    @property
    def sink_name(self) -> str:
        return self._name

    def save(self, record: SerializedRecord) -> None:
        logger.log(
            self._level,
            "Sink %s received record message_id=%r fields=%s",
            self._name,
            record.message_id,
            sorted(record.fields),
        )
