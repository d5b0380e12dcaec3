"""
Host application for tabpalette.

A minimal note workspace: a tab bar, a markdown view of the active note,
and the quick switcher palette on ctrl+k.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from rich.markup import escape
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.widgets import Footer, Header, Markdown, Static

from ..config.constants import BOOKMARKS_RELATIVE_PATH
from ..config.settings import PaletteSettings, load_settings, save_settings
from ..exceptions import StaleViewError, TabPaletteError
from ..host.bookmarks import JsonBookmarkStore
from ..host.protocols import OpenHint
from ..host.vault import LocalVault
from ..host.workspace import ViewEvent, ViewEventKind, Workspace
from ..models.items import display_name_for
from ..services.recently_closed import ClosedTabRecord, RecentlyClosedHistory
from ..utils.text_formatting import truncate_title
from .palette import PaletteController, PaletteScreen

logger = logging.getLogger(__name__)

# Commands that belong to the workspace, not to an open palette
_WORKSPACE_ACTIONS = {"quit", "close_tab", "previous_tab", "next_tab", "open_palette"}


class TabBar(Static):
    """One line listing the open views; the active one highlighted."""

    DEFAULT_CSS = """
    TabBar {
        height: 1;
        background: $surface-darken-1;
        padding: 0 1;
    }
    """


class TabPaletteApp(App):
    """Note workspace with a keyboard-driven quick switcher."""

    TITLE = "tabpalette"

    CSS = """
    #note-scroll {
        height: 1fr;
        padding: 0 1;
    }

    #empty-hint {
        color: $text-muted;
        padding: 1 2;
    }
    """

    BINDINGS = [
        Binding("ctrl+k", "open_palette", "Switcher"),
        Binding("ctrl+pageup", "previous_tab", "Prev tab"),
        Binding("ctrl+pagedown", "next_tab", "Next tab"),
        Binding("ctrl+w", "close_tab", "Close tab"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        vault_root: Path | str,
        files: Iterable[str] = (),
        settings: PaletteSettings | None = None,
        persist_settings: bool = True,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.vault = LocalVault(vault_root)
        self.workspace = Workspace()
        self.bookmarks = JsonBookmarkStore(self.vault.root / BOOKMARKS_RELATIVE_PATH)
        self.settings = settings or load_settings()
        self.history = RecentlyClosedHistory.from_list(self.settings.recently_closed)
        self._persist_settings = persist_settings
        self._initial_files = list(files)
        self._unsubscribe = self.workspace.subscribe(self._on_view_event)

    def compose(self) -> ComposeResult:
        yield Header()
        yield TabBar(id="tab-bar")
        with VerticalScroll(id="note-scroll"):
            yield Static("No open notes. Press ctrl+k to open one.", id="empty-hint")
            yield Markdown("", id="note-view")
        yield Footer()

    async def on_mount(self) -> None:
        for path in self._initial_files:
            if not self.vault.exists(path):
                logger.warning(f"Skipping {path}: not a note in {self.vault.root}")
                self.notify(f"Not found: {path}", severity="warning")
                continue
            self.workspace.open_file(path, OpenHint(new_tab=True))
        await self.refresh_workspace()

    def on_unmount(self) -> None:
        self._unsubscribe()

    # ------------------------------------------------------------------
    # Workspace events
    # ------------------------------------------------------------------

    def _persist(self, settings: PaletteSettings) -> None:
        if self._persist_settings:
            save_settings(settings)

    def _on_view_event(self, event: ViewEvent) -> None:
        if event.kind is ViewEventKind.CLOSED:
            path = event.view.file_path
            still_open = any(v.file_path == path for v in self.workspace.list_open_views())
            if not still_open:
                self.history.push(ClosedTabRecord.for_path(path))
                self.settings.recently_closed = self.history.to_list()
                self._persist(self.settings)
        elif event.kind is ViewEventKind.OPENED:
            if self.history.remove(event.view.file_path):
                self.settings.recently_closed = self.history.to_list()
                self._persist(self.settings)

        if self.is_running:
            self.call_later(self.refresh_workspace)

    async def refresh_workspace(self) -> None:
        """Redraw the tab bar and show the active note."""
        # Query the base screen; a modal may be on top
        base = self.screen_stack[0]
        base.query_one("#tab-bar", TabBar).update(self._tab_bar_markup())

        markdown = base.query_one("#note-view", Markdown)
        hint = base.query_one("#empty-hint", Static)
        active = self.workspace.active_view()
        hint.display = active is None
        markdown.display = active is not None
        if active is None:
            self.sub_title = ""
            return

        self.sub_title = active.file_path
        try:
            content = await self.vault.read_file(active.file_path)
        except (TabPaletteError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Could not read {active.file_path}: {e}")
            content = f"*Could not read `{active.file_path}`*"
        await markdown.update(content)

    def _tab_bar_markup(self) -> str:
        active = self.workspace.active_handle()
        parts = []
        for view in self.workspace.list_open_views():
            name = escape(truncate_title(display_name_for(view.file_path), 24))
            if view.pinned:
                name = f"📌 {name}"
            if view.handle == active:
                parts.append(f"[reverse] {name} [/reverse]")
            else:
                parts.append(f" {name} ")
        return "│".join(parts) if parts else "[dim]No tabs[/dim]"

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def check_action(self, action: str, parameters: tuple[object, ...]) -> bool | None:
        if action in _WORKSPACE_ACTIONS and len(self.screen_stack) > 1:
            return False
        return True

    def build_controller(self) -> PaletteController:
        return PaletteController(
            self.workspace,
            self.vault,
            self.settings,
            bookmark_store=self.bookmarks,
            history=self.history,
            persist=self._persist,
        )

    def action_open_palette(self) -> None:
        self.push_screen(PaletteScreen(self.build_controller()), callback=self._on_palette_closed)

    def _on_palette_closed(self, _result: None) -> None:
        self.call_later(self.refresh_workspace)

    def action_previous_tab(self) -> None:
        self.workspace.cycle(-1)

    def action_next_tab(self) -> None:
        self.workspace.cycle(1)

    def action_close_tab(self) -> None:
        handle = self.workspace.active_handle()
        if handle is None:
            return
        try:
            self.workspace.detach(handle)
        except StaleViewError as e:
            logger.debug(f"Active view already closed: {e}")
