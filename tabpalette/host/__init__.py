"""Host services: protocols plus local implementations."""

from .bookmarks import JsonBookmarkStore
from .protocols import BookmarkStore, FileIndex, OpenHint, OpenView, VaultFile, ViewManager
from .vault import LocalVault
from .workspace import ViewEvent, ViewEventKind, Workspace

__all__ = [
    "BookmarkStore",
    "FileIndex",
    "JsonBookmarkStore",
    "LocalVault",
    "OpenHint",
    "OpenView",
    "VaultFile",
    "ViewEvent",
    "ViewEventKind",
    "ViewManager",
    "Workspace",
]
