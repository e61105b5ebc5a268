"""``ingestflow enqueue`` — load messages from a JSON file into the queue."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ingestflow.cli.commands._common import load_messages
from ingestflow.config import config
from ingestflow.sources.sqlite_queue import SqliteEventSource

console = Console()


def enqueue_cmd(
    messages_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="JSON object or array of messages."
    ),
    queue_db: Optional[Path] = typer.Option(
        None, "--queue", "-q", help="Queue database (default: INGESTFLOW_QUEUE_DB_PATH)."
    ),
) -> None:
    """Append messages to the persistent queue."""
    messages = load_messages(messages_file)
    with SqliteEventSource(queue_db or config.queue_db_path) as source:
        for message in messages:
            source.enqueue(message)
        depth = source.depth

    console.print(
        f"[bold green]Enqueued {len(messages)} message(s).[/bold green] "
        f"Queue depth: {depth}"
    )
