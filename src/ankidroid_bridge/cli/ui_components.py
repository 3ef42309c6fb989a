"""CLI UI components (Rich): banner, record tables, failure panel."""

from __future__ import annotations

from typing import Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ankidroid_bridge.core.domain.models import Failure, IdentifierRecord


def print_banner(console: Console) -> None:
    title = Text("ankidroid-bridge", style="bold cyan")
    subtitle = Text("Decks • Models • Notes through the AnkiDroid API", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_records_table(title: str, records: Iterable[IdentifierRecord]) -> Table:
    """Table of decks or models (id + name)."""

    table = Table(title=title)
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Name", style="white")
    for record in records:
        table.add_row(record.id, record.name)
    return table


def build_fields_table(model: str, fields: Iterable[str]) -> Table:
    table = Table(title=f"Fields of {model}")
    table.add_column("#", style="dim", no_wrap=True)
    table.add_column("Field", style="white")
    for position, name in enumerate(fields, start=1):
        table.add_row(str(position), name)
    return table


def build_failure_panel(failure: Failure) -> Panel:
    body = Text()
    body.append(failure.error.label() + "\n", style="bold")
    body.append(failure.error.value, style="dim")
    if failure.detail:
        body.append(f"\n{failure.detail}", style="dim")
    return Panel(body, title=Text("Error", style="bold red"), border_style="red")
