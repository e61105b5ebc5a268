"""Runtime configuration — env-driven.

Centralized config using pydantic-settings.  Reads from a .env file and
INGESTFLOW_* environment variables.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IngestConfig(BaseSettings):
    """Ingestion configuration with environment variable overrides.

    Examples
    --------
    Override via environment::

        export INGESTFLOW_LOG_LEVEL=DEBUG
        export INGESTFLOW_QUEUE_DB_PATH=/data/queue.db
        export INGESTFLOW_CONTINUE_ON_ERROR=true

    Or via .env file::

        INGESTFLOW_SINK_BASE_PATH=/data/sinks
        INGESTFLOW_MAX_MESSAGES=100
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="INGESTFLOW_",
        env_file_encoding="utf-8",
    )

    # Logging
    log_level: str = "INFO"

    # Storage paths
    queue_db_path: Path = Path(".ingestflow/queue.db")
    sink_base_path: Path = Path(".ingestflow/sinks")

    # Ingestion loop policy
    continue_on_error: bool = False
    max_messages: int | None = None

    # Sink wiring
    success_sinks: list[str] = ["history", "external"]
    persist_unknown: bool = False

    @field_validator("max_messages")
    @classmethod
    def _positive_bound(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("max_messages must be positive when set")
        return value

    @field_validator("success_sinks")
    @classmethod
    def _non_empty_success(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one success sink is required")
        return value


# Module-level singleton; import as `from ingestflow.config import config`
config = IngestConfig()
