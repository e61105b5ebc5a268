"""Canonical JSON serialization shared by the queue and file sinks."""

from __future__ import annotations

import json
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Serialize *obj* the same way every time it is written.

    Queue payloads and sink files both go through here, so a redelivered
    message rewrites a sink file with identical bytes.  Keys are sorted,
    separators carry no whitespace and non-ASCII text is escaped.
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True).encode()
