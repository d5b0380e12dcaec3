"""
Palette Screen - modal quick switcher overlay.

Side-by-side sections (vault search, open tabs, bookmarks with daily notes
underneath) driven entirely by the keyboard:

- typing filters the vault search
- up/down move the selection, left/right switch sections
- enter opens, ctrl+w closes a tab, ctrl+t pins it, ctrl+b toggles a bookmark
"""

import logging

from rich.markup import escape
from textual import events
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.message import Message
from textual.screen import ModalScreen
from textual.widgets import Input, Label, Static

from ...config.constants import MAX_NAME_DISPLAY_LENGTH, MAX_PATH_DISPLAY_LENGTH
from ...exceptions import ConfigurationError
from ...models.items import PaletteItem
from ...utils.text_formatting import truncate_path, truncate_title
from ..modals import ConfirmCreateScreen
from .navigation import SectionId
from .palette_controller import PaletteController, PaletteSnapshot, RowView, SectionView

logger = logging.getLogger(__name__)


def format_row(row: RowView) -> str:
    """Rich markup for one palette row."""
    if row.is_separator:
        return f"[dim]── {escape(row.display_name)} ──[/dim]"

    parts = []
    if row.pinned:
        parts.append("📌")
    if row.bookmarked:
        parts.append("[yellow]★[/yellow]")
    if row.label:
        parts.append(f"[bold]{escape(row.label)}[/bold]")

    name = escape(truncate_title(row.display_name, MAX_NAME_DISPLAY_LENGTH))
    if row.recently_closed or not row.exists:
        name = f"[dim]{name}[/dim]"
    parts.append(name)
    if not row.exists:
        parts.append("[dim italic](new)[/dim italic]")

    if row.tags:
        parts.append(f"[cyan]{escape(' '.join(row.tags))}[/cyan]")
    if row.directory is not None:
        parts.append(f"[dim]📁 {escape(truncate_path(row.directory, MAX_PATH_DISPLAY_LENGTH))}[/dim]")
    return " ".join(parts)


class PaletteRow(Static):
    """A single row of a palette section."""

    DEFAULT_CSS = """
    PaletteRow {
        height: 1;
        padding: 0 1;
    }

    PaletteRow.-selected {
        background: $accent;
    }

    PaletteRow.-separator {
        color: $text-muted;
    }
    """

    class Clicked(Message):
        """Posted when a selectable row is clicked."""

        def __init__(self, section: SectionId, index: int):
            super().__init__()
            self.section = section
            self.index = index

    def __init__(self, section: SectionId, row: RowView, **kwargs):
        classes = "-separator" if row.is_separator else ("-selected" if row.selected else "")
        super().__init__(format_row(row), classes=classes, **kwargs)
        self.section = section
        self.row = row

    def on_click(self, event: events.Click) -> None:
        if self.row.selectable and self.row.item_index is not None:
            event.stop()
            self.post_message(self.Clicked(self.section, self.row.item_index))


class PaletteColumns(Horizontal, can_focus=True):
    """Column container; holds focus while navigating the lists."""


class PaletteList(VerticalScroll, can_focus=False):
    """Scrollable rows of one section."""


class PaletteScreen(ModalScreen[None]):
    """
    Quick switcher modal overlay.

    The screen owns no palette state: it forwards input to the
    PaletteController and redraws from the snapshots it reports.
    """

    CSS = """
    PaletteScreen {
        align: center top;
        padding-top: 2;
    }

    #palette-container {
        width: 90%;
        height: 80%;
        background: $surface;
        border: solid $primary;
    }

    #palette-input {
        width: 100%;
        height: 3;
        border: none;
        border-bottom: solid $primary-darken-1;
        background: $surface-darken-1;
        padding: 0 1;
    }

    #palette-input:focus {
        border-bottom: solid $primary;
    }

    #palette-columns {
        height: 1fr;
    }

    .palette-column {
        width: 1fr;
        height: 100%;
        border-right: solid $primary-darken-2;
    }

    .palette-section-title {
        width: 100%;
        padding: 0 1;
        text-style: bold;
        color: $text-muted;
    }

    .palette-section-title.-active {
        color: $text;
        background: $primary-darken-2;
    }

    .palette-list {
        height: 1fr;
    }

    #list-daily_notes {
        height: auto;
        max-height: 5;
    }

    .palette-empty {
        padding: 0 1;
        color: $text-muted;
    }

    #palette-hints {
        height: 1;
        background: $surface-darken-1;
        color: $text-muted;
        padding: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "close_palette", "Close", show=False, priority=True),
        Binding("enter", "activate", "Open", show=False, priority=True),
        Binding("up", "cursor_up", "Up", show=False, priority=True),
        Binding("down", "cursor_down", "Down", show=False, priority=True),
        Binding("ctrl+p", "cursor_up", "Up", show=False, priority=True),
        Binding("ctrl+n", "cursor_down", "Down", show=False, priority=True),
        Binding("left", "section_left", "Left", show=False),
        Binding("right", "section_right", "Right", show=False),
        Binding("ctrl+w", "close_tab", "Close tab", show=False, priority=True),
        Binding("ctrl+t", "pin_tab", "Pin tab", show=False, priority=True),
        Binding("ctrl+b", "toggle_bookmark", "Bookmark", show=False, priority=True),
    ]

    def __init__(self, controller: PaletteController, **kwargs):
        super().__init__(**kwargs)
        self.controller = controller
        controller.on_state_update = self._on_state_update
        controller.on_notice = self._on_notice
        controller.confirm = self._confirm_creation
        self._snapshot: PaletteSnapshot | None = None
        self._render_id = 0
        self._dismissed = False

    def compose(self) -> ComposeResult:
        enabled = self.controller.enabled_sections
        with Vertical(id="palette-container"):
            yield Input(placeholder="Search tabs, bookmarks, and vault...", id="palette-input")
            with PaletteColumns(id="palette-columns"):
                for section in enabled:
                    if section is SectionId.DAILY_NOTES and SectionId.BOOKMARKS in enabled:
                        continue
                    with Vertical(classes="palette-column", id=f"column-{section.value}"):
                        yield from self._compose_section(section)
                        if section is SectionId.BOOKMARKS and SectionId.DAILY_NOTES in enabled:
                            yield from self._compose_section(SectionId.DAILY_NOTES)
            yield Static(
                "↑↓ Navigate │ ←→ Section │ Enter Open │ ^W Close tab │ ^T Pin │ ^B Bookmark │ Esc Close",
                id="palette-hints",
            )

    def _compose_section(self, section: SectionId) -> ComposeResult:
        yield Label("", classes="palette-section-title", id=f"title-{section.value}")
        yield PaletteList(classes="palette-list", id=f"list-{section.value}")

    def on_mount(self) -> None:
        try:
            self.controller.open()
        except ConfigurationError as e:
            logger.error(f"Cannot open palette: {e}")
            self.app.notify(e.message, severity="error")
            self._dismiss_once()
            return
        self.query_one("#palette-input", Input).focus()

    # ------------------------------------------------------------------
    # Controller callbacks
    # ------------------------------------------------------------------

    def _on_state_update(self, snapshot: PaletteSnapshot) -> None:
        """Handle state updates from the controller."""
        self._snapshot = snapshot
        if not snapshot.is_open:
            self._dismiss_once()
            return
        # Newer snapshots supersede pending renders
        self._render_id += 1
        self.call_later(self._render_snapshot, self._render_id)

    def _on_notice(self, message: str, severity: str) -> None:
        self.app.notify(message, severity=severity)

    async def _confirm_creation(self, item: PaletteItem) -> bool:
        label = item.daily_note.label.value
        confirmed = await self.app.push_screen_wait(ConfirmCreateScreen(item.path, label))
        return bool(confirmed)

    def _dismiss_once(self) -> None:
        if self._dismissed:
            return
        self._dismissed = True
        self.dismiss()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    async def _render_snapshot(self, render_id: int) -> None:
        if render_id != self._render_id or self._snapshot is None or self._dismissed:
            return
        snapshot = self._snapshot
        for view in snapshot.sections:
            await self._render_section(view)

        input_widget = self.query_one("#palette-input", Input)
        if snapshot.focus_query and not input_widget.has_focus:
            input_widget.focus()

    async def _render_section(self, view: SectionView) -> None:
        value = view.section.value
        title = self.query_one(f"#title-{value}", Label)
        title.update(f"{view.title} ({view.item_count})")
        title.set_class(view.is_active, "-active")

        container = self.query_one(f"#list-{value}", PaletteList)
        await container.remove_children()
        if not view.rows:
            await container.mount(Static(view.empty_message, classes="palette-empty"))
            return

        rows = [PaletteRow(view.section, row) for row in view.rows]
        await container.mount_all(rows)
        for widget in rows:
            if widget.row.selected:
                container.scroll_to_widget(widget, animate=False)
                break

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id != "palette-input":
            return
        self.controller.set_query(event.value)

    def on_key(self, event: events.Key) -> None:
        """Typing while the lists have focus goes back to the query box."""
        input_widget = self.query_one("#palette-input", Input)
        if input_widget.has_focus or not event.is_printable or not event.character:
            return
        event.stop()
        input_widget.focus()
        input_widget.insert_text_at_cursor(event.character)

    def on_palette_row_clicked(self, event: PaletteRow.Clicked) -> None:
        self.controller.select(event.section, event.index)
        self.action_activate()

    def _enter_list_mode(self) -> None:
        columns = self.query_one("#palette-columns", PaletteColumns)
        if not columns.has_focus:
            columns.focus()

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def action_cursor_up(self) -> None:
        self.controller.move_selection(-1)

    def action_cursor_down(self) -> None:
        self._enter_list_mode()
        self.controller.move_selection(1)

    def action_section_left(self) -> None:
        self.controller.switch_section("left")

    def action_section_right(self) -> None:
        self.controller.switch_section("right")

    def action_activate(self) -> None:
        # Textual reports no IME composition events, so begin_composition/end_composition
        # are left to embedders that can observe them.
        self.run_worker(self._activate(), group="palette-activate")

    async def _activate(self) -> None:
        outcome = await self.controller.activate_selected()
        logger.debug(f"Activation finished: {outcome.value}")

    def action_close_tab(self) -> None:
        self.controller.close_selected()

    def action_pin_tab(self) -> None:
        self.controller.pin_selected()

    def action_toggle_bookmark(self) -> None:
        self.controller.toggle_bookmark_selected()

    def action_close_palette(self) -> None:
        self.controller.close()
