"""Persisted and auxiliary record models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class SerializedRecord(BaseModel):
    """Canonical persisted representation produced by a handler.

    This is the only thing a sink ever receives.  The unknown handler
    produces an empty record (blank ``message_id``, no fields).
    """

    model_config = ConfigDict(frozen=True)

    message_id: str = ""
    fields: dict[str, str] = {}

    @property
    def is_empty(self) -> bool:
        return not self.message_id and not self.fields


class LoadedData(BaseModel):
    """Auxiliary data returned by a ``DataSource``.

    Read access by field name; values are always strings and a field the
    source did not return reads as ``""``.
    """

    model_config = ConfigDict(frozen=True)

    values: dict[str, str] = {}

    def __getitem__(self, field_name: str) -> str:
        return self.values.get(field_name, "")

    def __contains__(self, field_name: object) -> bool:
        return field_name in self.values
