"""``ingestflow ingest`` — drain the queue through the rule chains.

Builds the file-backed sink set, wires the classifier, runs the
ingestion loop, and prints a summary.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ingestflow.cli.commands._common import load_data_tables
from ingestflow.config import config
from ingestflow.core.classifier import MessageClassifier
from ingestflow.core.ingestion import IngestionLoop
from ingestflow.data import mapping_source_factory
from ingestflow.handlers.context import HandlerContext
from ingestflow.models.reports import IngestReport
from ingestflow.routing.registry import build_sink_set
from ingestflow.sources.sqlite_queue import SqliteEventSource

console = Console()


def ingest_cmd(
    queue_db: Optional[Path] = typer.Option(
        None, "--queue", "-q", help="Queue database (default: INGESTFLOW_QUEUE_DB_PATH)."
    ),
    sink_dir: Optional[Path] = typer.Option(
        None, "--sinks", "-s", help="Sink root directory (default: INGESTFLOW_SINK_BASE_PATH)."
    ),
    data_file: Optional[Path] = typer.Option(
        None, "--data", "-d", exists=True, dir_okay=False,
        help="JSON file with 'primary'/'secondary' auxiliary data tables keyed by MessageId.",
    ),
    continue_on_error: bool = typer.Option(
        config.continue_on_error,
        "--continue-on-error/--halt-on-error",
        help="Skip past failed messages instead of stopping.",
    ),
    max_messages: Optional[int] = typer.Option(
        config.max_messages, "--max-messages", "-n", min=1,
        help="Stop after this many messages.",
    ),
) -> None:
    """Process every queued message and acknowledge or abandon it."""
    primary, secondary = load_data_tables(data_file)
    sinks = build_sink_set(config, sink_dir)

    with SqliteEventSource(queue_db or config.queue_db_path) as source:
        if continue_on_error and max_messages is None:
            # Abandoned messages are redelivered; one pass over the current
            # queue keeps a permanently failing message from looping forever.
            max_messages = max(source.depth, 1)

        context = HandlerContext(
            source,
            sinks,
            primary_data=mapping_source_factory(primary),
            secondary_data=mapping_source_factory(secondary),
        )
        loop = IngestionLoop(
            source,
            MessageClassifier(context),
            continue_on_error=continue_on_error,
            max_messages=max_messages,
        )

        try:
            report = loop.ingest()
        except Exception as exc:
            console.print(
                f"[bold red]Ingestion halted:[/bold red] {type(exc).__name__}: {exc}\n"
                "[dim]The failed message was abandoned and stays queued.[/dim]"
            )
            raise typer.Exit(code=1) from exc

        remaining = source.depth

    _print_report(report, remaining)
    if report.failed:
        raise typer.Exit(code=1)


def _print_report(report: IngestReport, remaining: int) -> None:
    table = Table(title="Messages by kind")
    table.add_column("Kind", style="cyan")
    table.add_column("Count", justify="right")
    for kind, count in sorted(report.kinds.items(), key=lambda item: item[0].value):
        table.add_row(kind.value, str(count))

    status = "[bold green]Ingestion complete[/bold green]"
    if report.failed:
        status = "[bold yellow]Ingestion finished with failures[/bold yellow]"

    console.print(
        Panel(
            "\n".join([
                status,
                "",
                f"[bold]Processed:[/bold]  {report.processed}",
                f"[bold]Failed:[/bold]     {report.failed}",
                f"[bold]Remaining:[/bold]  {remaining}",
            ]),
            title="[bold]Ingestflow[/bold]",
            border_style="red" if report.failed else "green",
            padding=(1, 2),
        )
    )
    if report.kinds:
        console.print(table)
