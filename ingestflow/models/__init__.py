"""Ingestflow data models — all Pydantic v2, all frozen (immutable)."""

from ingestflow.models.messages import (
    FieldValue,
    MessageFieldError,
    MessageKind,
    RawMessage,
)
from ingestflow.models.records import LoadedData, SerializedRecord
from ingestflow.models.reports import IngestReport

__all__ = [
    # messages
    "FieldValue",
    "MessageFieldError",
    "MessageKind",
    "RawMessage",
    # records
    "LoadedData",
    "SerializedRecord",
    # reports
    "IngestReport",
]
