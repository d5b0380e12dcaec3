"""Pilot tests for the palette screen."""

import pytest
from textual.app import App
from textual.widgets import Input

from tabpalette.config.settings import PaletteSettings
from tabpalette.models.items import ItemKind
from tabpalette.ui.modals import ConfirmCreateScreen
from tabpalette.ui.palette.navigation import SectionId
from tabpalette.ui.palette.palette_controller import RowView
from tabpalette.ui.palette.palette_screen import PaletteRow, PaletteScreen, format_row


class PaletteTestApp(App[None]):
    """Minimal app that shows the palette on start."""

    def __init__(self, controller):
        super().__init__()
        self.controller = controller

    def on_mount(self) -> None:
        self.push_screen(PaletteScreen(self.controller))


def section_rows(screen, section):
    return list(screen.query_one(f"#list-{section.value}").query(PaletteRow))


class TestFormatRow:
    """Tests for row markup."""

    def test_separator(self) -> None:
        row = RowView(display_name="Recently closed", selectable=False)
        assert "Recently closed" in format_row(row)

    def test_flags_and_details(self) -> None:
        row = RowView(
            display_name="alpha",
            item_index=0,
            kind=ItemKind.TAB,
            directory="Projects",
            tags=("#work",),
            pinned=True,
            bookmarked=True,
        )
        markup = format_row(row)
        assert "📌" in markup
        assert "★" in markup
        assert "#work" in markup
        assert "Projects" in markup

    def test_missing_daily_note(self) -> None:
        row = RowView(display_name="2024-03-15", kind=ItemKind.DAILY_NOTE, label="Today", exists=False)
        markup = format_row(row)
        assert "Today" in markup
        assert "(new)" in markup

    def test_markup_in_names_is_escaped(self) -> None:
        markup = format_row(RowView(display_name="[bold]x", item_index=0))
        assert "\\[bold]x" in markup


class TestPaletteScreen:
    """Tests for keyboard interaction with the palette."""

    @pytest.mark.asyncio
    async def test_renders_enabled_sections(self, make_controller, open_tabs) -> None:
        open_tabs("inbox.md", "Notes/random.md")
        app = PaletteTestApp(make_controller())
        async with app.run_test() as pilot:
            await pilot.pause()
            screen = app.screen
            assert isinstance(screen, PaletteScreen)

            tab_rows = section_rows(screen, SectionId.TABS)
            assert [r.row.display_name for r in tab_rows] == ["random", "inbox"]
            assert tab_rows[0].has_class("-selected")
            assert len(section_rows(screen, SectionId.DAILY_NOTES)) == 3
            assert screen.query_one("#palette-input", Input).has_focus

    @pytest.mark.asyncio
    async def test_typing_searches_the_vault(self, make_controller) -> None:
        controller = make_controller()
        app = PaletteTestApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("p", "r", "o", "j")
            await pilot.pause()

            assert controller.query == "proj"
            rows = section_rows(app.screen, SectionId.SEARCH)
            assert [r.row.path for r in rows] == ["Projects/alpha.md", "Projects/beta.md"]

    @pytest.mark.asyncio
    async def test_enter_focuses_selected_tab(self, make_controller, open_tabs, workspace) -> None:
        handles = open_tabs("inbox.md", "Notes/random.md")
        controller = make_controller()
        app = PaletteTestApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("down")
            await pilot.press("enter")
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert workspace.active_handle() == handles[0]
            assert controller.is_open is False
            assert not isinstance(app.screen, PaletteScreen)

    @pytest.mark.asyncio
    async def test_escape_closes(self, make_controller, open_tabs) -> None:
        open_tabs("inbox.md")
        controller = make_controller()
        app = PaletteTestApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("escape")
            await pilot.pause()

            assert controller.is_open is False
            assert not isinstance(app.screen, PaletteScreen)

    @pytest.mark.asyncio
    async def test_left_right_switch_sections(self, make_controller, open_tabs) -> None:
        open_tabs("inbox.md")
        controller = make_controller()
        app = PaletteTestApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("down")
            await pilot.press("right")
            await pilot.pause()
            assert controller.active_section is SectionId.BOOKMARKS

            await pilot.press("left", "left")
            await pilot.pause()
            assert controller.active_section is SectionId.SEARCH
            assert app.screen.query_one("#palette-input", Input).has_focus

    @pytest.mark.asyncio
    async def test_typing_in_lists_returns_to_query(self, make_controller, open_tabs) -> None:
        open_tabs("inbox.md")
        controller = make_controller()
        app = PaletteTestApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("down")
            assert not app.screen.query_one("#palette-input", Input).has_focus

            await pilot.press("b")
            await pilot.pause()

            input_widget = app.screen.query_one("#palette-input", Input)
            assert input_widget.has_focus
            assert input_widget.value == "b"
            assert controller.query == "b"

    @pytest.mark.asyncio
    async def test_ctrl_b_toggles_bookmark(self, make_controller, open_tabs, bookmark_store) -> None:
        open_tabs("inbox.md")
        controller = make_controller()
        app = PaletteTestApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("ctrl+b")
            await pilot.pause()

            assert bookmark_store.paths == ["inbox.md"]
            assert len(section_rows(app.screen, SectionId.BOOKMARKS)) == 1

    @pytest.mark.asyncio
    async def test_ctrl_w_closes_tab(self, make_controller, open_tabs, workspace) -> None:
        open_tabs("inbox.md", "Notes/random.md")
        controller = make_controller()
        app = PaletteTestApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("ctrl+w")
            await pilot.pause()

            assert [v.file_path for v in workspace.list_open_views()] == ["inbox.md"]
            rows = section_rows(app.screen, SectionId.TABS)
            assert [r.row.display_name for r in rows] == ["inbox", "Recently closed", "random"]
            assert rows[1].has_class("-separator")

    @pytest.mark.asyncio
    async def test_missing_daily_note_asks_before_creating(self, make_controller, file_index) -> None:
        controller = make_controller()
        app = PaletteTestApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            assert controller.active_section is SectionId.DAILY_NOTES
            await pilot.press("down")
            await pilot.press("enter")
            await pilot.pause()
            await pilot.pause()

            assert isinstance(app.screen, ConfirmCreateScreen)
            assert controller.is_open is True

            await pilot.press("y")
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert file_index.created == [("2024-03-15.md", "")]
            assert controller.is_open is False
            assert not isinstance(app.screen, (PaletteScreen, ConfirmCreateScreen))

    @pytest.mark.asyncio
    async def test_declining_creation_keeps_palette_open(self, make_controller, file_index) -> None:
        controller = make_controller()
        app = PaletteTestApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press("down")
            await pilot.press("enter")
            await pilot.pause()
            await pilot.pause()
            await pilot.press("n")
            await pilot.pause()
            await app.workers.wait_for_complete()
            await pilot.pause()

            assert file_index.created == []
            assert controller.is_open is True
            assert isinstance(app.screen, PaletteScreen)

    @pytest.mark.asyncio
    async def test_all_sections_disabled_dismisses(self, make_controller) -> None:
        config = PaletteSettings(
            enable_search=False, enable_tabs=False, enable_bookmarks=False, enable_daily_notes=False
        )
        controller = make_controller(config)
        app = PaletteTestApp(controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.pause()

            assert controller.is_open is False
            assert not isinstance(app.screen, PaletteScreen)
