"""Inbound message models — the as-received document and its kind tag.

A ``RawMessage`` is immutable once received.  Handlers read it field by
field through the typed accessors; nothing else reaches into ``fields``.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict

FieldValue = Union[str, bool, int, float, None]


class MessageFieldError(KeyError):
    """Raised when a message field is missing or has the wrong type."""

    def __str__(self) -> str:
        # KeyError repr-quotes its argument; keep messages readable.
        return str(self.args[0]) if self.args else ""


class MessageKind(str, Enum):
    """Discriminated tag produced by the classifier."""

    MEMBER_EVENT = "member_event"
    UNKNOWN = "unknown"


class RawMessage(BaseModel):
    """A named-field document exactly as the event source delivered it."""

    model_config = ConfigDict(frozen=True)

    fields: dict[str, FieldValue] = {}

    @classmethod
    def from_json(cls, raw_json: bytes | str) -> RawMessage:
        """Parse a JSON object document into a RawMessage."""
        try:
            if isinstance(raw_json, bytes):
                raw_json = raw_json.decode("utf-8")
            data = json.loads(raw_json)
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
            raise MessageFieldError(f"Invalid JSON message: {exc}") from exc

        if not isinstance(data, dict):
            raise MessageFieldError(
                f"Message must be a JSON object, got {type(data).__name__}"
            )
        return cls.from_mapping(data)

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> RawMessage:
        """Build a RawMessage from a plain dict, keeping primitive values only."""
        fields: dict[str, FieldValue] = {}
        for key, value in data.items():
            if isinstance(value, (str, bool, int, float)) or value is None:
                fields[str(key)] = value
        return cls(fields=fields)

    def has_field(self, key: str) -> bool:
        return key in self.fields

    def value_str(self, key: str) -> str:
        """Return a string field.  Raises ``MessageFieldError`` if absent."""
        value = self._require(key)
        if not isinstance(value, str):
            raise MessageFieldError(
                f"Field {key!r} is {type(value).__name__}, expected str"
            )
        return value

    def value_bool(self, key: str) -> bool:
        """Return a boolean field.  Raises ``MessageFieldError`` if absent."""
        value = self._require(key)
        if not isinstance(value, bool):
            raise MessageFieldError(
                f"Field {key!r} is {type(value).__name__}, expected bool"
            )
        return value

    def to_json_dict(self) -> dict[str, Any]:
        return dict(self.fields)

    def _require(self, key: str) -> FieldValue:
        try:
            return self.fields[key]
        except KeyError:
            raise MessageFieldError(f"Message has no field {key!r}") from None
