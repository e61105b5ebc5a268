"""Local file sink — writes records to local JSON files.

Layout: {base_path}/{sink_name}/{message_id}.json

Each record is serialized to canonical JSON.  Writing the same message
twice overwrites the same file, so redelivery is harmless.  Records
without a message id (unknown messages) get a generated file name.
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path

from ingestflow.core.canonical import canonical_json_bytes
from ingestflow.models.records import SerializedRecord

logger = logging.getLogger(__name__)


class LocalFileSink:
    """Writes records to local JSON files.

    Parameters
    ----------
    name:
        Sink name; also the sub-directory records land in.
    base_path:
        Root directory for record files.  Defaults to ``.ingestflow/sinks``.
    """

    def __init__(self, name: str, base_path: Path | str | None = None) -> None:
        self._name = name
        base = Path(base_path) if base_path else Path(".ingestflow/sinks")
        self._dir = base / name
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def sink_name(self) -> str:
        return self._name

    @property
    def directory(self) -> Path:
        return self._dir

    def save(self, record: SerializedRecord) -> None:
        """Write the record to ``{message_id}.json``."""
        stem = record.message_id or f"anonymous-{uuid.uuid4().hex}"
        target_file = self._dir / f"{_safe_stem(stem)}.json"
        target_file.write_bytes(canonical_json_bytes(record.model_dump(mode="json")))

        logger.debug("LocalFileSink[%s]: wrote %s", self._name, target_file)

    def list_records(self) -> list[Path]:
        """List all record files written by this sink."""
        return sorted(self._dir.glob("*.json"))

    def read_record(self, path: Path) -> SerializedRecord:
        """Read and parse a single record file."""
        return SerializedRecord.model_validate(json.loads(path.read_bytes()))


def _safe_stem(message_id: str) -> str:
    # Message ids come from outside; keep them inside the sink directory.
    return "".join(ch if ch.isalnum() or ch in "-_." else "_" for ch in message_id)
