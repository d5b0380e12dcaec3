"""
Palette item model.

Every row the palette can show is a PaletteItem: a common read-only
projection (path, display name, tags, bookmark flag) plus a kind-specific
payload that is only reachable after checking the item's kind.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass, replace
from datetime import date
from enum import Enum
from typing import Union


class ItemKind(Enum):
    """Kinds of addressable items."""

    TAB = "tab"
    BOOKMARK = "bookmark"
    SEARCH_RESULT = "search_result"
    DAILY_NOTE = "daily_note"


class DailyLabel(Enum):
    """Relative day a daily note candidate stands for."""

    YESTERDAY = "Yesterday"
    TODAY = "Today"
    TOMORROW = "Tomorrow"


@dataclass(frozen=True)
class TabPayload:
    """Tab-only data. A live tab has a handle; a recently closed one does not."""

    handle: str | None = None
    pinned: bool = False
    recently_closed: bool = False

    def __post_init__(self) -> None:
        if self.recently_closed == (self.handle is not None):
            raise ValueError("A tab is either live (has a handle) or recently closed, not both")


@dataclass(frozen=True)
class DailyNotePayload:
    """Daily-note-only data."""

    label: DailyLabel
    day: date
    exists: bool = False


Payload = Union[TabPayload, DailyNotePayload, None]


@dataclass(frozen=True)
class PaletteItem:
    """A single addressable item shown in one of the palette sections."""

    path: str
    display_name: str
    kind: ItemKind
    tags: tuple[str, ...] = ()
    bookmarked: bool = False
    payload: Payload = None

    def __post_init__(self) -> None:
        if self.kind is ItemKind.TAB and not isinstance(self.payload, TabPayload):
            raise ValueError("Tab items need a TabPayload")
        if self.kind is ItemKind.DAILY_NOTE and not isinstance(self.payload, DailyNotePayload):
            raise ValueError("Daily note items need a DailyNotePayload")

    @property
    def file_name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def directory(self) -> str:
        """Parent folder of the item, "/" for the vault root."""
        return posixpath.dirname(self.path) or "/"

    @property
    def extension(self) -> str:
        return posixpath.splitext(self.path)[1].lstrip(".")

    @property
    def tab(self) -> TabPayload:
        assert self.kind is ItemKind.TAB, f"{self.kind} item has no tab payload"
        assert isinstance(self.payload, TabPayload)
        return self.payload

    @property
    def daily_note(self) -> DailyNotePayload:
        assert self.kind is ItemKind.DAILY_NOTE, f"{self.kind} item has no daily note payload"
        assert isinstance(self.payload, DailyNotePayload)
        return self.payload

    @property
    def pinned(self) -> bool:
        return self.kind is ItemKind.TAB and self.tab.pinned

    @property
    def recently_closed(self) -> bool:
        return self.kind is ItemKind.TAB and self.tab.recently_closed

    @property
    def has_live_view(self) -> bool:
        return self.kind is ItemKind.TAB and self.tab.handle is not None

    @property
    def exists(self) -> bool:
        """Whether the backing file is present. Only daily notes can be missing."""
        if self.kind is ItemKind.DAILY_NOTE:
            return self.daily_note.exists
        return True

    def with_bookmarked(self, bookmarked: bool) -> PaletteItem:
        if self.kind is ItemKind.BOOKMARK or bookmarked == self.bookmarked:
            return self
        return replace(self, bookmarked=bookmarked)

    def with_pinned(self, pinned: bool) -> PaletteItem:
        return replace(self, payload=replace(self.tab, pinned=pinned))

    def with_exists(self, exists: bool) -> PaletteItem:
        return replace(self, payload=replace(self.daily_note, exists=exists))


def display_name_for(path: str) -> str:
    """File name without its extension, as shown in the palette."""
    return posixpath.splitext(posixpath.basename(path))[0]


def make_tab(
    path: str,
    handle: str,
    *,
    pinned: bool = False,
    bookmarked: bool = False,
    tags: tuple[str, ...] = (),
) -> PaletteItem:
    return PaletteItem(
        path=path,
        display_name=display_name_for(path),
        kind=ItemKind.TAB,
        tags=tags,
        bookmarked=bookmarked,
        payload=TabPayload(handle=handle, pinned=pinned),
    )


def make_closed_tab(
    path: str,
    title: str | None = None,
    *,
    bookmarked: bool = False,
    tags: tuple[str, ...] = (),
) -> PaletteItem:
    return PaletteItem(
        path=path,
        display_name=title or display_name_for(path),
        kind=ItemKind.TAB,
        tags=tags,
        bookmarked=bookmarked,
        payload=TabPayload(recently_closed=True),
    )


def make_bookmark(path: str, title: str | None = None, tags: tuple[str, ...] = ()) -> PaletteItem:
    return PaletteItem(
        path=path,
        display_name=title or display_name_for(path),
        kind=ItemKind.BOOKMARK,
        tags=tags,
        bookmarked=True,
    )


def make_search_result(
    path: str, tags: tuple[str, ...] = (), bookmarked: bool = False
) -> PaletteItem:
    return PaletteItem(
        path=path,
        display_name=display_name_for(path),
        kind=ItemKind.SEARCH_RESULT,
        tags=tags,
        bookmarked=bookmarked,
    )
