"""Main Typer application — imports and registers all CLI commands.

Entry point: ``ingestflow`` (configured via pyproject.toml scripts).

Commands: enqueue, ingest, classify, sinks.
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from ingestflow.cli.commands.classify import classify_cmd
from ingestflow.cli.commands.enqueue import enqueue_cmd
from ingestflow.cli.commands.ingest import ingest_cmd
from ingestflow.cli.commands.sinks import sinks_cmd
from ingestflow.config import config

app = typer.Typer(
    name="ingestflow",
    help="Ingestflow: classify, route, and acknowledge queued messages.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="enqueue", help="Load messages from a JSON file into the queue.")(enqueue_cmd)
app.command(name="ingest", help="Drain the queue through the rule chains.")(ingest_cmd)
app.command(name="classify", help="Show where each message would be routed.")(classify_cmd)
app.command(name="sinks", help="List configured sinks.")(sinks_cmd)


@app.callback()
def _configure(
    log_level: str = typer.Option(
        config.log_level, "--log-level", help="Logging level (DEBUG, INFO, ...)."
    ),
) -> None:
    """Install the rich log handler before any command runs."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
