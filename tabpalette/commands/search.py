"""Vault search from the command line."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from tabpalette.config.constants import VAULT_SEARCH_LIMIT
from tabpalette.host.vault import LocalVault
from tabpalette.services.filter_engine import SearchState, filter_vault_search, search_state
from tabpalette.utils.output import console
from tabpalette.utils.text_formatting import truncate_title


def search(
    vault: Path = typer.Argument(..., help="Vault directory", exists=True, file_okay=False),
    query: str = typer.Argument(..., help="Text to look for in names, paths and tags"),
    limit: int = typer.Option(VAULT_SEARCH_LIMIT, "--limit", "-n", min=1, help="Maximum results"),
) -> None:
    """Search the vault the way the palette's search section does.

    Examples:
        tabpalette search ~/notes proj
        tabpalette search ~/notes "#work" --limit 10
    """
    index = LocalVault(vault)
    results = filter_vault_search(index.list_all_files(), query, index.get_tags_for, limit=limit)

    if search_state(query, results) is not SearchState.RESULTS:
        console.print(f"[yellow]No results found for '{query}'[/yellow]")
        return

    table = Table(title=f"Vault search: {query}")
    table.add_column("Name", style="cyan")
    table.add_column("Folder", style="dim")
    table.add_column("Tags")

    for item in results:
        table.add_row(truncate_title(item.display_name), item.directory, " ".join(item.tags))

    console.print(table)
