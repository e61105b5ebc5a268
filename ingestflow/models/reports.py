"""Ingestion run summary."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ingestflow.models.messages import MessageKind


class IngestReport(BaseModel):
    """Counts produced by one ``IngestionLoop.ingest()`` call."""

    model_config = ConfigDict(frozen=True)

    processed: int = 0
    failed: int = 0
    kinds: dict[MessageKind, int] = Field(default_factory=dict)
    failed_message_ids: list[str] = []

    @property
    def dequeued(self) -> int:
        return self.processed + self.failed
