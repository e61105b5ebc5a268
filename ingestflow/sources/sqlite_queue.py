"""SQLite-backed event source — a persistent, leased message queue.

Messages are stored as canonical JSON rows.  ``next_message()`` leases the
oldest available row; ``complete()`` deletes it; ``abandon()`` releases the
lease, bumps ``delivery_count`` and moves the row to the back of the queue.
A lease left behind by a crashed process is released when the queue is
opened again, so nothing that was dequeued but not completed is lost.

The queue assumes a single consumer process.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any

from ingestflow.core.canonical import canonical_json_bytes
from ingestflow.models.messages import MessageFieldError, RawMessage
from ingestflow.sources import (
    EventSourceEmptyError,
    MessageInFlightError,
    NoInFlightMessageError,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_CREATE_QUEUE = """
CREATE TABLE IF NOT EXISTS queue (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    position        INTEGER NOT NULL,
    payload         BLOB NOT NULL,
    leased          INTEGER NOT NULL DEFAULT 0,
    delivery_count  INTEGER NOT NULL DEFAULT 0,
    created_at      TEXT DEFAULT (datetime('now'))
);
"""

_CREATE_IDX_POSITION = """
CREATE INDEX IF NOT EXISTS idx_queue_position ON queue(leased, position);
"""

_NEXT_POSITION = "SELECT COALESCE(MAX(position), 0) + 1 FROM queue"


class SqliteEventSource:
    """Persistent event source.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file.  Created if it does not exist.
    """

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._db: sqlite3.Connection | None = sqlite3.connect(str(self._db_path))
        self._in_flight_id: int | None = None
        self._init_schema()
        logger.info("SqliteEventSource: using queue at %s", self._db_path)

    def _init_schema(self) -> None:
        db = self._conn()
        db.execute(_CREATE_QUEUE)
        db.execute(_CREATE_IDX_POSITION)
        released = db.execute("UPDATE queue SET leased = 0 WHERE leased = 1").rowcount
        db.commit()
        if released:
            logger.warning(
                "SqliteEventSource: released %d stale lease(s) from a previous run",
                released,
            )

    def _conn(self) -> sqlite3.Connection:
        if self._db is None:
            raise RuntimeError(f"Queue {self._db_path} is closed")
        return self._db

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def enqueue(self, message: RawMessage | dict[str, Any]) -> int:
        """Append a message to the back of the queue.  Returns its row id."""
        fields = message.to_json_dict() if isinstance(message, RawMessage) else message
        db = self._conn()
        position = db.execute(_NEXT_POSITION).fetchone()[0]
        cursor = db.execute(
            "INSERT INTO queue (position, payload) VALUES (?, ?)",
            (position, canonical_json_bytes(fields)),
        )
        db.commit()
        logger.debug("SqliteEventSource: enqueued row %d", cursor.lastrowid)
        return int(cursor.lastrowid)

    @property
    def depth(self) -> int:
        """Number of rows in the queue, including a leased one."""
        row = self._conn().execute("SELECT COUNT(*) FROM queue").fetchone()
        return row[0] if row else 0

    def delivery_count(self, row_id: int) -> int | None:
        """How many times a row has been handed out, or ``None`` if gone."""
        row = self._conn().execute(
            "SELECT delivery_count FROM queue WHERE id = ?", (row_id,)
        ).fetchone()
        return int(row[0]) if row else None

    # ------------------------------------------------------------------
    # EventSource protocol
    # ------------------------------------------------------------------

    def has_message(self) -> bool:
        row = self._conn().execute(
            "SELECT 1 FROM queue WHERE leased = 0 LIMIT 1"
        ).fetchone()
        return row is not None

    def next_message(self) -> RawMessage:
        if self._in_flight_id is not None:
            raise MessageInFlightError(
                f"Row {self._in_flight_id} has not been completed or abandoned"
            )

        db = self._conn()
        row = db.execute(
            "SELECT id, payload FROM queue WHERE leased = 0 ORDER BY position LIMIT 1"
        ).fetchone()
        if row is None:
            raise EventSourceEmptyError(f"Queue {self._db_path} is empty")

        row_id, payload = row
        db.execute(
            "UPDATE queue SET leased = 1, delivery_count = delivery_count + 1 WHERE id = ?",
            (row_id,),
        )
        db.commit()
        self._in_flight_id = row_id

        try:
            return RawMessage.from_json(bytes(payload))
        except MessageFieldError as exc:
            # An unparseable payload is still delivered, as an empty message,
            # so it reaches the unknown handler instead of blocking the queue.
            logger.warning(
                "SqliteEventSource: row %d is not a JSON object (%s); payload=%r",
                row_id,
                exc,
                bytes(payload)[:200],
            )
            return RawMessage()

    def complete(self) -> None:
        row_id = self._settle()
        db = self._conn()
        db.execute("DELETE FROM queue WHERE id = ?", (row_id,))
        db.commit()
        logger.debug("SqliteEventSource: completed row %d", row_id)

    def abandon(self) -> None:
        row_id = self._settle()
        db = self._conn()
        position = db.execute(_NEXT_POSITION).fetchone()[0]
        db.execute(
            "UPDATE queue SET leased = 0, position = ? WHERE id = ?",
            (position, row_id),
        )
        db.commit()
        logger.info("SqliteEventSource: abandoned row %d for redelivery", row_id)

    def _settle(self) -> int:
        if self._in_flight_id is None:
            raise NoInFlightMessageError("No message is in flight")
        row_id, self._in_flight_id = self._in_flight_id, None
        return row_id

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Close the database.  An in-flight lease is released on next open."""
        if self._db is not None:
            self._db.close()
            self._db = None

    def __enter__(self) -> SqliteEventSource:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"SqliteEventSource(db_path={str(self._db_path)!r})"
