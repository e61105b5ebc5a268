"""Named sink wiring.

A ``SinkSet`` binds the sink names the rule chains refer to (success,
excluded, unknown) to concrete sinks once, at start-up.  Nothing resolves
a sink by name per message.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ingestflow.routing.fanout import FanOutPersister
from ingestflow.routing.sinks.local_file import LocalFileSink
from ingestflow.routing.sinks.logging_sink import LoggingSink

if TYPE_CHECKING:
    from ingestflow.config import IngestConfig
    from ingestflow.routing.sinks import BaseSink

logger = logging.getLogger(__name__)

SUCCESS = "success"
HISTORY = "history"
EXTERNAL = "external"
EXCLUDED = "excluded"
UNKNOWN = "unknown"


class SinkSet:
    """The fixed destinations used by the rule chains.

    Parameters
    ----------
    success:
        Where messages that pass every rule go (usually a fan-out).
    excluded:
        Where messages diverted by an exclusion rule go.
    unknown:
        Where unrecognised messages go.
    """

    def __init__(self, success: BaseSink, excluded: BaseSink, unknown: BaseSink) -> None:
        self.success = success
        self.excluded = excluded
        self.unknown = unknown

    def as_dict(self) -> dict[str, BaseSink]:
        return {SUCCESS: self.success, EXCLUDED: self.excluded, UNKNOWN: self.unknown}

    def __repr__(self) -> str:
        return (
            f"SinkSet(success={self.success.sink_name!r}, "
            f"excluded={self.excluded.sink_name!r}, unknown={self.unknown.sink_name!r})"
        )


def build_sink_set(config: IngestConfig, base_path: Path | None = None) -> SinkSet:
    """Build the file-backed sink set described by *config*.

    Success sinks fan out to one ``LocalFileSink`` per name in
    ``config.success_sinks`` (history and external by default).  Unknown
    messages are logged and, when ``config.persist_unknown`` is set, also
    written to disk.
    """
    root = base_path or config.sink_base_path

    success = FanOutPersister(
        [LocalFileSink(name, root) for name in config.success_sinks],
        name=SUCCESS,
    )
    excluded = LocalFileSink(EXCLUDED, root)

    unknown: BaseSink = LoggingSink(UNKNOWN)
    if config.persist_unknown:
        unknown = FanOutPersister([unknown, LocalFileSink(UNKNOWN, root)], name=UNKNOWN)

    sink_set = SinkSet(success=success, excluded=excluded, unknown=unknown)
    logger.info("Sinks wired under %s: %r", root, sink_set)
    return sink_set
