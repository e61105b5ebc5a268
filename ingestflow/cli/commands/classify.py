"""``ingestflow classify`` — show where each message would be routed.

Dry run: each message gets its own throwaway source and in-memory sinks,
so nothing is written and nothing is acknowledged.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ingestflow.cli.commands._common import load_messages
from ingestflow.core.classifier import MessageClassifier
from ingestflow.handlers.context import HandlerContext
from ingestflow.models.messages import RawMessage
from ingestflow.routing.registry import EXCLUDED, SUCCESS, UNKNOWN, SinkSet
from ingestflow.routing.sinks.memory import InMemorySink
from ingestflow.sources.memory import InMemoryEventSource

console = Console()


def classify_cmd(
    messages_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="JSON object or array of messages."
    ),
) -> None:
    """Classify messages and show the sink each one would reach."""
    table = Table(title="Classification")
    table.add_column("#", justify="right")
    table.add_column("MessageId", style="cyan")
    table.add_column("Kind")
    table.add_column("Sink")

    for index, raw in enumerate(load_messages(messages_file), start=1):
        kind, destination = _dry_run(raw)
        table.add_row(str(index), str(raw.fields.get("MessageId", "")), kind, destination)

    console.print(table)


def _dry_run(raw: RawMessage) -> tuple[str, str]:
    source = InMemoryEventSource([raw])
    sinks = {name: InMemorySink(name) for name in (SUCCESS, EXCLUDED, UNKNOWN)}
    context = HandlerContext(
        source,
        SinkSet(success=sinks[SUCCESS], excluded=sinks[EXCLUDED], unknown=sinks[UNKNOWN]),
    )
    handler = MessageClassifier(context).classify(source.next_message())

    try:
        handler.process()
    except Exception as exc:
        return handler.kind.value, f"[red]error: {type(exc).__name__}: {exc}[/red]"

    reached = [name for name, sink in sinks.items() if sink.received]
    return handler.kind.value, ", ".join(reached)
