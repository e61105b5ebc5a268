"""In-memory sink — keeps every saved record in a list."""

from __future__ import annotations

from ingestflow.models.records import SerializedRecord


class InMemorySink:
    """Collects records in ``received``, in save order."""

    def __init__(self, name: str) -> None:
        self._name = name
        self.received: list[SerializedRecord] = []

    @property
    def sink_name(self) -> str:
        return self._name

    def save(self, record: SerializedRecord) -> None:
        self.received.append(record)

    @property
    def message_ids(self) -> list[str]:
        return [record.message_id for record in self.received]

    def __repr__(self) -> str:
        return f"InMemorySink(name={self._name!r}, received={len(self.received)})"
