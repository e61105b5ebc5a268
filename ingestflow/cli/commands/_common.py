"""Helpers shared by the CLI subcommands."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import typer

from ingestflow.models.messages import RawMessage


def load_messages(path: Path) -> list[RawMessage]:
    """Read a JSON file holding one message object or an array of them."""
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read messages from {path}: {exc}") from exc

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise typer.BadParameter(
            f"{path} must contain a JSON object or an array of objects"
        )
    return [RawMessage.from_mapping(item) for item in data]


def load_data_tables(path: Path | None) -> tuple[dict[str, Any], dict[str, Any]]:
    """Read ``{"primary": {...}, "secondary": {...}}`` auxiliary data tables."""
    if path is None:
        return {}, {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise typer.BadParameter(f"Cannot read data tables from {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise typer.BadParameter(f"{path} must contain a JSON object")
    return dict(data.get("primary", {})), dict(data.get("secondary", {}))
