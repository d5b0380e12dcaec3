"""Settings commands for tabpalette."""

from __future__ import annotations

import typer
from rich.table import Table

from tabpalette.config.settings import (
    PaletteSettings,
    get_settings_path,
    load_settings,
    save_settings,
    update_setting,
)
from tabpalette.exceptions import ConfigurationError
from tabpalette.utils.output import console

app = typer.Typer(help="Show and change palette settings")


@app.command("show")
def show() -> None:
    """Show the current settings."""
    settings = load_settings()

    table = Table(title="Palette settings")
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    for key, value in settings.to_dict().items():
        if key == "recently_closed":
            continue
        if isinstance(value, list):
            value = ", ".join(value) or "-"
        elif value == "":
            value = "-"
        table.add_row(key, str(value))

    console.print(table)


@app.command("set")
def set_value(
    key: str = typer.Argument(..., help="Setting name, e.g. show_tags"),
    value: str = typer.Argument(..., help="New value; lists are comma-separated"),
) -> None:
    """Change one setting.

    Examples:
        tabpalette config set sort_order opening-order
        tabpalette config set excluded_folders "attachments, templates"
    """
    settings = load_settings()
    try:
        update_setting(settings, key, value)
    except ConfigurationError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        raise typer.Exit(1) from e

    save_settings(settings)
    console.print(f"[green]✅ {key} = {getattr(settings, key)!r}[/green]")


@app.command("reset")
def reset(
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
) -> None:
    """Restore default settings. The recently-closed history is kept."""
    if not force and not typer.confirm("Reset all settings to their defaults?"):
        console.print("[yellow]Cancelled[/yellow]")
        return

    current = load_settings()
    save_settings(PaletteSettings(recently_closed=current.recently_closed))
    console.print("[green]✅ Settings reset to defaults[/green]")


@app.command("path")
def path() -> None:
    """Print the settings file location."""
    console.print(str(get_settings_path()))
