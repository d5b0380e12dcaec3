#!/usr/bin/env python3
"""
Main CLI entry point for tabpalette
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer

from tabpalette import __version__
from tabpalette.commands import config_cmd, history
from tabpalette.commands.search import search
from tabpalette.utils.output import console

app = typer.Typer(
    help="Keyboard-driven quick switcher for a folder of markdown notes",
    no_args_is_help=True,
)
app.add_typer(config_cmd.app, name="config")
app.add_typer(history.app, name="history")
app.command()(search)


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    tabpalette - quick switcher for tabs, bookmarks, vault search and daily notes

    [bold]Examples:[/bold]

    Open a vault with two notes as tabs:
        [cyan]tabpalette open ~/notes inbox.md Projects/alpha.md[/cyan]

    Search from the shell:
        [cyan]tabpalette search ~/notes proj[/cyan]
    """
    ctx.obj = {"verbose": verbose}
    if verbose:
        logging.getLogger("tabpalette").setLevel(logging.DEBUG)


@app.command("open")
def open_vault(
    ctx: typer.Context,
    vault: Path = typer.Argument(..., help="Vault directory", exists=True, file_okay=False),
    files: Optional[List[str]] = typer.Argument(None, help="Vault-relative notes to open as tabs"),
):
    """Open the workspace TUI. Press ctrl+k for the switcher."""
    from tabpalette.ui.app import TabPaletteApp
    from tabpalette.utils.logging_utils import setup_tui_logging

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    setup_tui_logging(verbose=verbose)

    try:
        TabPaletteApp(vault, files or []).run()
    except KeyboardInterrupt:
        pass
    except Exception as e:
        console.print(f"❌ Error: {e}", style="red")
        raise typer.Exit(1) from e


@app.command()
def version():
    """Show tabpalette version"""
    typer.echo(f"tabpalette version {__version__}")


def run():
    """Entry point for the CLI"""
    app()


if __name__ == "__main__":
    run()
