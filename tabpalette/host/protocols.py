"""
Protocols for the host services the palette depends on.

The palette never reaches into the host directly; it only talks to these
three capabilities. tabpalette ships local implementations (Workspace,
JsonBookmarkStore, LocalVault), but any object with the same shape works.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class OpenView:
    """Snapshot of one open view as reported by the view manager."""

    handle: str
    file_path: str
    pinned: bool = False
    last_active: float = 0.0


@dataclass(frozen=True)
class VaultFile:
    """A file known to the file index."""

    path: str
    display_name: str


@dataclass(frozen=True)
class OpenHint:
    """Where a file-open request should land.

    new_tab wins; otherwise the file replaces the content of reuse_handle
    (the view that was active when the palette opened), or the host's
    current view when that is None.
    """

    new_tab: bool = False
    reuse_handle: str | None = None


@runtime_checkable
class ViewManager(Protocol):
    """Open views of the host workspace."""

    def list_open_views(self) -> list[OpenView]:
        """Return open views in opening order."""
        ...

    def active_handle(self) -> str | None:
        """Return the handle of the focused view, if any."""
        ...

    def focus(self, handle: str) -> None:
        """Bring a view to front. Raises StaleViewError for unknown handles."""
        ...

    def detach(self, handle: str) -> None:
        """Close a view. Raises StaleViewError for unknown handles."""
        ...

    def set_pinned(self, handle: str, pinned: bool) -> None:
        """Pin or unpin a view. Raises StaleViewError for unknown handles."""
        ...

    def open_file(self, path: str, hint: OpenHint) -> str:
        """Open a file according to hint and return the handle showing it."""
        ...


@runtime_checkable
class BookmarkStore(Protocol):
    """File bookmarks owned by the host."""

    enabled: bool

    def list_file_bookmarks(self) -> list[str]:
        """Return bookmarked file paths in store order."""
        ...

    def add_bookmark(self, path: str, title: str) -> None:
        ...

    def remove_bookmark(self, path: str) -> None:
        ...


@runtime_checkable
class FileIndex(Protocol):
    """The set of indexable files in the vault."""

    def list_all_files(self) -> list[VaultFile]:
        ...

    def get_tags_for(self, path: str) -> list[str]:
        """Inline and frontmatter tags, each normalized to '#tag'."""
        ...

    def exists(self, path: str) -> bool:
        ...

    async def create_file(self, path: str, content: str) -> None:
        """Create a new file, including missing parent folders."""
        ...

    async def read_file(self, path: str) -> str:
        ...
