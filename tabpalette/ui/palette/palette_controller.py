"""
Controller for the quick-switcher palette.

Owns all palette state (sections, selection, query, recently-closed
history) and turns input events into requests to the host services. The
screen only forwards events and renders the snapshots it is handed.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import date
from enum import Enum

from ...config.settings import SORT_RECENCY, PaletteSettings
from ...exceptions import (
    CollaboratorUnavailableError,
    ConfigurationError,
    NoteCreationError,
    StaleViewError,
    TabPaletteError,
)
from ...host.protocols import BookmarkStore, FileIndex, OpenHint, ViewManager, VaultFile
from ...models.items import (
    ItemKind,
    PaletteItem,
    make_bookmark,
    make_closed_tab,
    make_tab,
)
from ...services.daily_notes import daily_note_candidates, render_template
from ...services.filter_engine import SearchState, filter_vault_search, search_state
from ...services.recently_closed import ClosedTabRecord, RecentlyClosedHistory
from .navigation import (
    INITIAL_PRIORITY,
    SECTION_ORDER,
    SECTION_TITLES,
    SectionId,
    clamp_index,
    nearest_enabled,
    resolve_move,
    step_section,
)

logger = logging.getLogger(__name__)

ConfirmHook = Callable[[PaletteItem], Awaitable[bool]]
NoticeHook = Callable[[str, str], None]
StateHook = Callable[["PaletteSnapshot"], None]
PersistHook = Callable[[PaletteSettings], None]

RECENTLY_CLOSED_HEADER = "Recently closed"

_EMPTY_MESSAGES = {
    SectionId.TABS: "No open tabs",
    SectionId.BOOKMARKS: "No bookmarks",
    SectionId.DAILY_NOTES: "No daily notes",
}
_SEARCH_MESSAGES = {
    SearchState.IDLE: "Type to search...",
    SearchState.NO_RESULTS: "No results found",
    SearchState.RESULTS: "",
}


class ActivationOutcome(Enum):
    """What activate_selected() ended up doing."""

    FOCUSED = "focused"  # Existing view brought to front
    OPENED = "opened"  # File opened in a view
    CREATED = "created"  # Daily note created and opened
    CANCELLED = "cancelled"  # Creation not confirmed
    FAILED = "failed"  # Creation failed, palette untouched
    BUSY = "busy"  # A creation is already in flight
    IGNORED = "ignored"  # Text composition in progress
    NOOP = "noop"  # Nothing selected or stale selection

    @property
    def closes_palette(self) -> bool:
        return self in (ActivationOutcome.FOCUSED, ActivationOutcome.OPENED, ActivationOutcome.CREATED)


@dataclass(frozen=True)
class RowView:
    """One rendered row. Separators are not selectable and have no item_index."""

    display_name: str
    item_index: int | None = None
    path: str = ""
    kind: ItemKind | None = None
    directory: str | None = None
    tags: tuple[str, ...] = ()
    pinned: bool = False
    bookmarked: bool = False
    recently_closed: bool = False
    exists: bool = True
    label: str | None = None
    selected: bool = False
    selectable: bool = True

    @property
    def is_separator(self) -> bool:
        return not self.selectable


@dataclass(frozen=True)
class SectionView:
    section: SectionId
    title: str
    rows: tuple[RowView, ...]
    selected_index: int
    item_count: int
    empty_message: str
    is_active: bool


@dataclass(frozen=True)
class PaletteSnapshot:
    """Everything the presentation layer needs to draw the palette."""

    is_open: bool
    query: str
    active_section: SectionId
    focus_query: bool
    search_state: SearchState
    sections: tuple[SectionView, ...]

    def section(self, section: SectionId) -> SectionView | None:
        for view in self.sections:
            if view.section is section:
                return view
        return None


class PaletteController:
    """
    Selection state machine and action dispatch for the palette.

    Lifecycle: Closed -> open() -> Open(section) <-> Open(other) -> Closed.
    Every operation except daily-note creation is synchronous.
    """

    def __init__(
        self,
        view_manager: ViewManager,
        file_index: FileIndex,
        settings: PaletteSettings,
        *,
        bookmark_store: BookmarkStore | None = None,
        history: RecentlyClosedHistory | None = None,
        today: Callable[[], date] = date.today,
        confirm: ConfirmHook | None = None,
        on_state_update: StateHook | None = None,
        on_notice: NoticeHook | None = None,
        persist: PersistHook | None = None,
    ):
        self.view_manager = view_manager
        self.file_index = file_index
        self.bookmark_store = bookmark_store
        self._settings = settings
        if history is None:
            history = RecentlyClosedHistory.from_list(settings.recently_closed)
        self._history = history
        self._today = today
        self.confirm = confirm
        self.on_state_update = on_state_update
        self.on_notice = on_notice
        self._persist = persist

        self._items: dict[SectionId, list[PaletteItem]] = {s: [] for s in SECTION_ORDER}
        self._selected: dict[SectionId, int] = {s: 0 for s in SECTION_ORDER}
        self._enabled: tuple[SectionId, ...] = self._compute_enabled()
        self._active: SectionId = self._enabled[0] if self._enabled else SectionId.TABS
        self._query = ""
        self._files: list[VaultFile] = []
        self._bookmarked_paths: dict[str, None] = {}
        self._open_view_paths: dict[str, str] = {}
        self._origin_handle: str | None = None

        self._is_open = False
        self._focus_query = False
        self._composing = False
        self._creation_in_flight = False

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def settings(self) -> PaletteSettings:
        return self._settings

    @property
    def history(self) -> RecentlyClosedHistory:
        return self._history

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def query(self) -> str:
        return self._query

    @property
    def active_section(self) -> SectionId:
        return self._active

    @property
    def enabled_sections(self) -> tuple[SectionId, ...]:
        return self._enabled

    @property
    def creation_in_flight(self) -> bool:
        return self._creation_in_flight

    def items(self, section: SectionId) -> list[PaletteItem]:
        return list(self._items[section])

    def selected_index(self, section: SectionId | None = None) -> int:
        return self._selected[section or self._active]

    def selected_item(self) -> PaletteItem | None:
        items = self._items[self._active]
        if not items:
            return None
        return items[self._selected[self._active]]

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _notify_update(self) -> None:
        if self.on_state_update:
            self.on_state_update(self.snapshot())

    def _notice(self, message: str, severity: str = "information") -> None:
        logger.info(f"Notice ({severity}): {message}")
        if self.on_notice:
            self.on_notice(message, severity)

    def _persist_history(self) -> None:
        self._settings.recently_closed = self._history.to_list()
        if self._persist:
            self._persist(self._settings)

    # ------------------------------------------------------------------
    # Building sections
    # ------------------------------------------------------------------

    def _compute_enabled(self) -> tuple[SectionId, ...]:
        flags = {
            SectionId.SEARCH: self._settings.enable_search,
            SectionId.TABS: self._settings.enable_tabs,
            SectionId.BOOKMARKS: self._settings.enable_bookmarks,
            SectionId.DAILY_NOTES: self._settings.enable_daily_notes,
        }
        return tuple(s for s in SECTION_ORDER if flags[s])

    def _is_excluded(self, path: str) -> bool:
        return any(path.startswith(folder) for folder in self._settings.excluded_folders if folder)

    def _bookmarks_available(self) -> bool:
        return self.bookmark_store is not None and bool(self.bookmark_store.enabled)

    def _load_bookmark_paths(self) -> list[str]:
        if not self._bookmarks_available():
            return []
        paths: list[str] = []
        for path in self.bookmark_store.list_file_bookmarks():
            if path not in paths:
                paths.append(path)
        return paths

    def _is_bookmarked(self, path: str) -> bool:
        return path in self._bookmarked_paths

    def _tags_for(self, path: str) -> tuple[str, ...]:
        return tuple(self.file_index.get_tags_for(path))

    def _build_live_tabs(self) -> list[PaletteItem]:
        views = self.view_manager.list_open_views()
        self._open_view_paths = {v.handle: v.file_path for v in views}

        visible = [
            v for v in views if not self._is_excluded(v.file_path) and self.file_index.exists(v.file_path)
        ]
        if self._settings.sort_order == SORT_RECENCY:
            visible.sort(key=lambda v: v.last_active, reverse=True)

        return [
            make_tab(
                v.file_path,
                v.handle,
                pinned=v.pinned,
                bookmarked=self._is_bookmarked(v.file_path),
                tags=self._tags_for(v.file_path),
            )
            for v in visible
        ]

    def _build_closed_tabs(self) -> list[PaletteItem]:
        open_paths = set(self._open_view_paths.values())
        return [
            make_closed_tab(
                record.path,
                record.title,
                bookmarked=self._is_bookmarked(record.path),
                tags=self._tags_for(record.path),
            )
            for record in self._history.records
            if record.path not in open_paths
            and not self._is_excluded(record.path)
            and self.file_index.exists(record.path)
        ]

    def _build_bookmarks(self) -> list[PaletteItem]:
        return [
            make_bookmark(path, tags=self._tags_for(path))
            for path in self._bookmarked_paths
            if not self._is_excluded(path) and self.file_index.exists(path)
        ]

    def _build_daily_notes(self) -> list[PaletteItem]:
        return daily_note_candidates(
            self._today(),
            self._settings.daily_note_format,
            self._settings.daily_note_folder,
            self.file_index.exists,
            is_bookmarked=self._is_bookmarked,
        )

    def _run_search(self) -> None:
        self._items[SectionId.SEARCH] = filter_vault_search(
            self._files,
            self._query,
            self.file_index.get_tags_for,
            is_bookmarked=self._is_bookmarked,
        )

    def _clamp_all(self) -> None:
        for section in SECTION_ORDER:
            self._selected[section] = clamp_index(self._selected[section], len(self._items[section]))

    def _initial_section(self) -> SectionId:
        candidates = [s for s in INITIAL_PRIORITY if s in self._enabled]
        for section in candidates:
            if self._items[section]:
                return section
        return candidates[0]

    def _load_all(self) -> None:
        self._files = self.file_index.list_all_files()
        self._bookmarked_paths = dict.fromkeys(self._load_bookmark_paths())
        live = self._build_live_tabs()
        if self._history.prune(self._open_view_paths.values()):
            self._persist_history()
        self._items[SectionId.TABS] = live + self._build_closed_tabs()
        self._items[SectionId.BOOKMARKS] = self._build_bookmarks()
        self._items[SectionId.DAILY_NOTES] = self._build_daily_notes()
        self._run_search()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> PaletteSnapshot:
        """
        Pull everything from the host services and show the palette.

        Raises:
            ConfigurationError: If every section is disabled
        """
        self._enabled = self._compute_enabled()
        if not self._enabled:
            raise ConfigurationError("At least one palette section must be enabled")

        self._origin_handle = self.view_manager.active_handle()
        self._query = ""
        self._composing = False
        self._load_all()
        self._selected = {s: 0 for s in SECTION_ORDER}
        self._active = self._initial_section()
        self._focus_query = self._active is SectionId.SEARCH
        self._is_open = True
        logger.info(
            f"Palette opened: {len(self._items[SectionId.TABS])} tabs, "
            f"{len(self._items[SectionId.BOOKMARKS])} bookmarks, {len(self._files)} files"
        )
        self._notify_update()
        return self.snapshot()

    def close(self) -> None:
        if not self._is_open:
            return
        self._is_open = False
        self._notify_update()

    def apply_settings(self, settings: PaletteSettings) -> None:
        """
        Swap in new settings and recompose the enabled sections.

        If the active section was disabled, the nearest enabled one takes over.

        Raises:
            ConfigurationError: If every section is disabled
        """
        previous_settings = self._settings
        self._settings = settings
        enabled = self._compute_enabled()
        if not enabled:
            self._settings = previous_settings
            raise ConfigurationError("At least one palette section must be enabled")

        self._enabled = enabled
        if self._is_open:
            self._load_all()
        self._active = nearest_enabled(self._active, self._enabled)
        self._focus_query = self._active is SectionId.SEARCH
        self._clamp_all()
        self._notify_update()

    # ------------------------------------------------------------------
    # Query and navigation
    # ------------------------------------------------------------------

    def set_query(self, text: str) -> None:
        """Re-run the vault search. Tabs and bookmarks are never filtered."""
        self._query = text
        self._run_search()
        self._selected[SectionId.SEARCH] = 0
        self._clamp_all()
        self._notify_update()

    def begin_composition(self) -> None:
        """An IME composition started; Enter must not activate until it ends."""
        self._composing = True

    def end_composition(self) -> None:
        self._composing = False

    def move_selection(self, delta: int) -> None:
        """Move the selection by delta (+1 down, -1 up)."""
        lengths = {s: len(self._items[s]) for s in SECTION_ORDER}
        move = resolve_move(self._active, self._selected[self._active], delta, lengths, self._enabled)
        if move.section is not self._active:
            logger.debug(f"Selection moved from {self._active.value} to {move.section.value}")
            self._active = move.section
            self._focus_query = False
        self._selected[move.section] = move.index
        self._notify_update()

    def switch_section(self, direction: str | SectionId) -> SectionId:
        """Move to the section on the left/right (clamped), or to an explicit section."""
        if isinstance(direction, SectionId):
            assert direction in self._enabled, f"Section {direction.value} is not enabled"
            target = direction
        else:
            target = step_section(self._active, direction, self._enabled)

        self._active = target
        self._selected[target] = clamp_index(self._selected[target], len(self._items[target]))
        self._focus_query = target is SectionId.SEARCH
        self._notify_update()
        return target

    def select(self, section: SectionId, index: int) -> None:
        """Select a specific row, e.g. after a mouse click."""
        assert section in self._enabled, f"Section {section.value} is not enabled"
        assert 0 <= index < len(self._items[section]), f"Index {index} out of range for {section.value}"
        self._active = section
        self._selected[section] = index
        self._focus_query = section is SectionId.SEARCH
        self._notify_update()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _open_hint(self) -> OpenHint:
        if self._settings.always_open_in_new_tab:
            return OpenHint(new_tab=True)
        return OpenHint(reuse_handle=self._origin_handle)

    def _open_path(self, path: str) -> bool:
        try:
            handle = self.view_manager.open_file(path, self._open_hint())
        except StaleViewError as e:
            logger.debug(f"Open of {path} hit a stale view: {e}")
            return False
        logger.info(f"Opened {path} in {handle}")
        return True

    async def activate_selected(self) -> ActivationOutcome:
        """Resolve the selected item to an action and perform it."""
        if not self._is_open:
            return ActivationOutcome.NOOP
        if self._composing:
            logger.debug("Ignoring activation during text composition")
            return ActivationOutcome.IGNORED
        if self._creation_in_flight:
            logger.debug("Ignoring activation while a daily note is being created")
            return ActivationOutcome.BUSY

        item = self.selected_item()
        if item is None:
            return ActivationOutcome.NOOP

        if item.has_live_view:
            try:
                self.view_manager.focus(item.tab.handle)
            except StaleViewError as e:
                logger.debug(f"Selected tab is gone: {e}")
                return ActivationOutcome.NOOP
            self.close()
            return ActivationOutcome.FOCUSED

        if item.kind is ItemKind.DAILY_NOTE and not item.exists:
            return await self._create_daily_note(item)

        if not self.file_index.exists(item.path):
            logger.debug(f"Selected file {item.path} no longer exists")
            return ActivationOutcome.NOOP
        if not self._open_path(item.path):
            return ActivationOutcome.NOOP
        self.close()
        return ActivationOutcome.OPENED

    async def _daily_note_content(self, item: PaletteItem) -> str:
        template = self._settings.daily_note_template.strip().strip("/")
        if not template:
            return ""
        if not posixpath.splitext(template)[1]:
            template = f"{template}.md"
        if not self.file_index.exists(template):
            raise NoteCreationError("Template not found", path=template)
        try:
            raw = await self.file_index.read_file(template)
        except UnicodeDecodeError as e:
            raise NoteCreationError(f"Template is not valid UTF-8 ({e.reason})", path=template) from e
        return render_template(
            raw, item.daily_note.day, item.display_name, self._settings.daily_note_format
        )

    async def _create_daily_note(self, item: PaletteItem) -> ActivationOutcome:
        self._creation_in_flight = True
        try:
            if self.confirm is not None and not await self.confirm(item):
                logger.info(f"Creation of {item.path} not confirmed")
                return ActivationOutcome.CANCELLED
            if not self._is_open:
                return ActivationOutcome.CANCELLED
            content = await self._daily_note_content(item)
            await self.file_index.create_file(item.path, content)
        except (TabPaletteError, OSError) as e:
            message = e.message if isinstance(e, TabPaletteError) else str(e)
            logger.error(f"Could not create daily note {item.path}: {e}")
            self._notice(f"Could not create daily note: {message}", "error")
            return ActivationOutcome.FAILED
        finally:
            self._creation_in_flight = False

        daily = self._items[SectionId.DAILY_NOTES]
        self._items[SectionId.DAILY_NOTES] = [
            d.with_exists(True) if d.path == item.path else d for d in daily
        ]
        self._open_path(item.path)
        self.close()
        return ActivationOutcome.CREATED

    def close_selected(self) -> bool:
        """Close the selected live tab and remember it as recently closed."""
        if not self._is_open or self._active is not SectionId.TABS:
            return False
        item = self.selected_item()
        if item is None or not item.has_live_view:
            return False

        handle = item.tab.handle
        try:
            self.view_manager.detach(handle)
        except StaleViewError as e:
            logger.debug(f"Tab already closed: {e}")
        self._open_view_paths.pop(handle, None)

        if item.path not in self._open_view_paths.values():
            self._history.push(ClosedTabRecord.for_path(item.path, item.display_name))
            self._persist_history()

        live = [t for t in self._items[SectionId.TABS] if t.has_live_view and t.tab.handle != handle]
        self._items[SectionId.TABS] = live + self._build_closed_tabs()
        self._clamp_all()
        self._notify_update()
        return True

    def pin_selected(self) -> bool:
        """Toggle the pin of the selected live tab."""
        if not self._is_open or self._active is not SectionId.TABS:
            return False
        item = self.selected_item()
        if item is None or not item.has_live_view:
            return False

        pinned = not item.pinned
        try:
            self.view_manager.set_pinned(item.tab.handle, pinned)
        except StaleViewError as e:
            logger.debug(f"Cannot pin closed tab: {e}")
            return False

        index = self._selected[SectionId.TABS]
        self._items[SectionId.TABS][index] = item.with_pinned(pinned)
        self._notify_update()
        return True

    def toggle_bookmark_selected(self) -> bool:
        """Add or remove a bookmark for the selected item's file."""
        if not self._is_open:
            return False
        if not self._bookmarks_available():
            self._notice("Bookmarks are not available", "warning")
            return False

        item = self.selected_item()
        if item is None or not item.exists or not self.file_index.exists(item.path):
            return False

        was_bookmarked = self._is_bookmarked(item.path)
        try:
            if was_bookmarked:
                self.bookmark_store.remove_bookmark(item.path)
            else:
                self.bookmark_store.add_bookmark(item.path, item.display_name)
        except CollaboratorUnavailableError as e:
            logger.warning(f"Bookmark store refused {item.path}: {e}")
            self._notice("Bookmarks are not available", "warning")
            return False
        except OSError as e:
            logger.error(f"Bookmark update failed for {item.path}: {e}")
            self._notice(f"Could not update bookmark: {e}", "error")
            return False

        self._bookmarked_paths = dict.fromkeys(self._load_bookmark_paths())
        for section in (SectionId.TABS, SectionId.SEARCH, SectionId.DAILY_NOTES):
            self._items[section] = [
                i.with_bookmarked(self._is_bookmarked(i.path)) for i in self._items[section]
            ]
        self._items[SectionId.BOOKMARKS] = self._build_bookmarks()
        self._clamp_all()

        verb = "Removed bookmark" if was_bookmarked else "Bookmarked"
        self._notice(f"{verb}: {item.display_name}")
        self._notify_update()
        return True

    # ------------------------------------------------------------------
    # Render model
    # ------------------------------------------------------------------

    def _row_for(self, item: PaletteItem, index: int, selected: bool) -> RowView:
        return RowView(
            display_name=item.display_name,
            item_index=index,
            path=item.path,
            kind=item.kind,
            directory=item.directory if self._settings.show_path else None,
            tags=item.tags if self._settings.show_tags else (),
            pinned=item.pinned,
            bookmarked=item.bookmarked,
            recently_closed=item.recently_closed,
            exists=item.exists,
            label=item.daily_note.label.value if item.kind is ItemKind.DAILY_NOTE else None,
            selected=selected,
        )

    def _section_view(self, section: SectionId, state: SearchState) -> SectionView:
        items = self._items[section]
        selected_index = self._selected[section]
        is_active = section is self._active

        rows: list[RowView] = []
        separator_added = False
        for index, item in enumerate(items):
            if item.recently_closed and not separator_added:
                rows.append(RowView(display_name=RECENTLY_CLOSED_HEADER, selectable=False))
                separator_added = True
            rows.append(self._row_for(item, index, is_active and index == selected_index))

        if section is SectionId.SEARCH:
            empty_message = _SEARCH_MESSAGES[state]
        elif section is SectionId.BOOKMARKS and not self._bookmarks_available():
            empty_message = "Bookmarks are not available"
        else:
            empty_message = _EMPTY_MESSAGES[section]

        return SectionView(
            section=section,
            title=SECTION_TITLES[section],
            rows=tuple(rows),
            selected_index=selected_index,
            item_count=len(items),
            empty_message=empty_message,
            is_active=is_active,
        )

    def snapshot(self) -> PaletteSnapshot:
        state = search_state(self._query, self._items[SectionId.SEARCH])
        return PaletteSnapshot(
            is_open=self._is_open,
            query=self._query,
            active_section=self._active,
            focus_query=self._focus_query,
            search_state=state,
            sections=tuple(self._section_view(s, state) for s in self._enabled),
        )
