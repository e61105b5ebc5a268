"""``ingestflow sinks`` — list the configured destinations."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from ingestflow.config import config
from ingestflow.routing.registry import EXCLUDED, SUCCESS, UNKNOWN

console = Console()


def sinks_cmd() -> None:
    """Show each named sink and where it writes."""
    root = config.sink_base_path

    table = Table(title="Configured sinks")
    table.add_column("Name", style="cyan")
    table.add_column("Writes to")

    for name in config.success_sinks:
        table.add_row(f"{SUCCESS} / {name}", str(root / name))
    table.add_row(EXCLUDED, str(root / EXCLUDED))
    unknown_target = "log"
    if config.persist_unknown:
        unknown_target = f"log + {root / UNKNOWN}"
    table.add_row(UNKNOWN, unknown_target)

    console.print(table)
