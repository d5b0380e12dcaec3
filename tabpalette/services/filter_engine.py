"""
Filtering for palette sections.

Matching is a case-insensitive substring test against an item's name, path
and tags. Nothing is scored or re-ordered: results keep the order of the
input list.

Only the vault-wide search section is narrowed by the query. Open tabs and
bookmarks stay complete while the user types so the working set is always
visible.
"""

from __future__ import annotations

import posixpath
from collections.abc import Callable, Iterable, Sequence
from enum import Enum
from typing import TypeVar

from ..config.constants import VAULT_SEARCH_LIMIT
from ..host.protocols import VaultFile
from ..models.items import PaletteItem, make_search_result

T = TypeVar("T", bound=PaletteItem)


class SearchState(Enum):
    """What the search section should say when it has nothing to list."""

    IDLE = "idle"  # No query typed yet
    RESULTS = "results"
    NO_RESULTS = "no_results"


def _text_matches(query: str, *fields: str) -> bool:
    return any(query in field.lower() for field in fields)


def _tags_match(query: str, tags: Iterable[str]) -> bool:
    return any(query in tag.lower() for tag in tags)


def matches(item: PaletteItem, query: str) -> bool:
    """Return True if item matches query (an empty query matches everything)."""
    if not query:
        return True
    needle = query.lower()
    if _text_matches(needle, item.display_name, item.file_name, item.path):
        return True
    return _tags_match(needle, item.tags)


def filter_section(items: Sequence[T], query: str) -> list[T]:
    """Keep the items matching query, preserving their relative order."""
    if not query:
        return list(items)
    return [item for item in items if matches(item, query)]


def filter_vault_search(
    files: Iterable[VaultFile],
    query: str,
    tags_for: Callable[[str], Sequence[str]],
    limit: int = VAULT_SEARCH_LIMIT,
    is_bookmarked: Callable[[str], bool] | None = None,
) -> list[PaletteItem]:
    """
    Search the whole vault.

    Args:
        files: Every indexable file, in index order
        query: Free text typed in the palette
        tags_for: Tag lookup, only consulted when name and path do not match
        limit: Maximum number of results kept
        is_bookmarked: Optional lookup used to flag bookmarked results

    Returns:
        Up to limit search-result items; empty when the query is empty
    """
    if not query:
        return []

    needle = query.lower()
    results: list[PaletteItem] = []
    for vault_file in files:
        if len(results) >= limit:
            break
        file_name = posixpath.basename(vault_file.path)
        tags: tuple[str, ...] | None = None
        if not _text_matches(needle, vault_file.display_name, file_name, vault_file.path):
            tags = tuple(tags_for(vault_file.path))
            if not _tags_match(needle, tags):
                continue
        if tags is None:
            tags = tuple(tags_for(vault_file.path))
        bookmarked = bool(is_bookmarked and is_bookmarked(vault_file.path))
        results.append(make_search_result(vault_file.path, tags=tags, bookmarked=bookmarked))
    return results


def search_state(query: str, results: Sequence[PaletteItem]) -> SearchState:
    """Distinguish "nothing typed" from "typed but nothing matched"."""
    if not query:
        return SearchState.IDLE
    return SearchState.RESULTS if results else SearchState.NO_RESULTS
