"""Recently-closed history commands."""

from __future__ import annotations

import typer
from rich.table import Table

from tabpalette.config.settings import load_settings, save_settings
from tabpalette.services.recently_closed import RecentlyClosedHistory
from tabpalette.utils.output import console

app = typer.Typer(help="Inspect the recently-closed tab history")


@app.command("show")
def show() -> None:
    """List recently closed tabs, most recent first."""
    history = RecentlyClosedHistory.from_list(load_settings().recently_closed)
    if not len(history):
        console.print("[yellow]No recently closed tabs[/yellow]")
        return

    table = Table(title="Recently closed")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Path")

    for position, record in enumerate(history.records, 1):
        table.add_row(str(position), record.title, record.path)

    console.print(table)


@app.command("clear")
def clear() -> None:
    """Forget all recently closed tabs."""
    settings = load_settings()
    count = len(settings.recently_closed)
    settings.recently_closed = []
    save_settings(settings)
    console.print(f"[green]✅ Cleared {count} recently closed tab(s)[/green]")
