"""End-to-end smoke run — member events through the default wiring.

Usage:
    python demo.py
"""

from __future__ import annotations

import tempfile
from pathlib import Path

from ingestflow.config import IngestConfig
from ingestflow.core.classifier import MessageClassifier
from ingestflow.core.ingestion import IngestionLoop
from ingestflow.data import mapping_source_factory
from ingestflow.handlers.context import HandlerContext
from ingestflow.models.messages import RawMessage
from ingestflow.routing.registry import build_sink_set
from ingestflow.sources.memory import InMemoryEventSource

MESSAGES = [
    {"EventType": "MemberEvent", "MessageId": "m1", "Example": True, "Other": False},
    {"EventType": "MemberEvent", "MessageId": "m2", "Example": False, "Other": True},
    {"EventType": "MemberEvent", "MessageId": "m3", "Example": False, "Other": False},
    {"EventType": "Heartbeat", "MessageId": "h1"},
]

AUX_PRIMARY = {"m3": {"OtherValue": "from-primary"}}
AUX_SECONDARY = {"m3": {"AnotherValue": "from-secondary", "ThatValue": "member-only"}}


def main() -> None:
    """Run four messages and show which sink each one reached."""
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        config = IngestConfig(sink_base_path=root)
        source = InMemoryEventSource(RawMessage.from_mapping(m) for m in MESSAGES)
        context = HandlerContext(
            source,
            build_sink_set(config),
            primary_data=mapping_source_factory(AUX_PRIMARY),
            secondary_data=mapping_source_factory(AUX_SECONDARY),
        )
        report = IngestionLoop(source, MessageClassifier(context)).ingest()

        print(f"Processed: {report.processed} | Failed: {report.failed}")
        for path in sorted(root.rglob("*.json")):
            print(f"  {path.relative_to(root)}")
        print(f"Completed on source: {len(source.completed)}")


if __name__ == "__main__":
    main()
