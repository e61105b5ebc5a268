"""Ingestion loop — drains an event source through the classifier.

Strictly sequential: a message is dequeued only after the previous one's
``process()`` has returned or raised.

Whether a failed message halts the loop is configuration:

- ``continue_on_error=False`` (default): the error propagates out of
  ``ingest()``.  The message has already been abandoned, by its handler
  or, when no handler could be built for it, by the loop.
- ``continue_on_error=True``: the error is logged and counted, and the
  loop carries on with the next message.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING

from ingestflow.core.classifier import MessageClassifier
from ingestflow.models.messages import MessageKind, RawMessage
from ingestflow.models.reports import IngestReport

if TYPE_CHECKING:
    from ingestflow.handlers.base import MessageHandler
    from ingestflow.sources import EventSource

logger = logging.getLogger(__name__)


class IngestionLoop:
    """Pulls messages from *source* and processes each one.

    Parameters
    ----------
    source:
        The event source to drain.
    classifier:
        Builds a handler per message.  Its context must use the same
        *source*, since handlers complete/abandon through it.
    continue_on_error:
        Skip past messages whose ``process()`` raised.
    max_messages:
        Stop after this many dequeues.  ``None`` drains until empty.
    """

    def __init__(
        self,
        source: EventSource,
        classifier: MessageClassifier,
        *,
        continue_on_error: bool = False,
        max_messages: int | None = None,
    ) -> None:
        if max_messages is not None and max_messages < 1:
            raise ValueError("max_messages must be positive when set")
        self._source = source
        self._classifier = classifier
        self._continue_on_error = continue_on_error
        self._max_messages = max_messages

    def ingest(self) -> IngestReport:
        """Process messages until the source is empty (or the bound is hit)."""
        processed = 0
        failed = 0
        kinds: Counter[MessageKind] = Counter()
        failed_ids: list[str] = []

        while self._source.has_message():
            if self._max_messages is not None and processed + failed >= self._max_messages:
                logger.info("Stopping after %d messages (max_messages)", self._max_messages)
                break

            raw = self._source.next_message()

            try:
                handler = self._build_handler(raw)
                kinds[handler.kind] += 1
                handler.process()
            except Exception as exc:
                failed += 1
                failed_ids.append(_describe(raw))
                if not self._continue_on_error:
                    logger.error(
                        "Message %s failed; halting ingestion (%s)", _describe(raw), exc
                    )
                    raise
                logger.error(
                    "Message %s failed; continuing (%s: %s)",
                    _describe(raw),
                    type(exc).__name__,
                    exc,
                )
                continue

            processed += 1

        report = IngestReport(
            processed=processed,
            failed=failed,
            kinds=dict(kinds),
            failed_message_ids=failed_ids,
        )
        logger.info(
            "Ingestion finished: %d processed, %d failed", report.processed, report.failed
        )
        return report

    def _build_handler(self, raw: RawMessage) -> MessageHandler:
        """Classify *raw*; abandon it if no handler can be built."""
        try:
            return self._classifier.classify(raw)
        except Exception as exc:
            logger.warning(
                "Could not build a handler for message %s (%s: %s); abandoning",
                _describe(raw),
                type(exc).__name__,
                exc,
            )
            try:
                self._source.abandon()
            except Exception:
                logger.exception("abandon() failed for message %s", _describe(raw))
            raise


def _describe(raw: RawMessage) -> str:
    message_id = raw.fields.get("MessageId")
    return str(message_id) if message_id not in (None, "") else "<no MessageId>"
