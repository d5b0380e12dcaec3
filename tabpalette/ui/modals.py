"""
Modal screens for the tabpalette TUI.
"""

import logging

from rich.markup import escape
from textual.app import ComposeResult
from textual.containers import Grid
from textual.screen import ModalScreen
from textual.widgets import Button, Label

logger = logging.getLogger(__name__)


class ConfirmCreateScreen(ModalScreen[bool]):
    """Ask before creating a daily note that does not exist yet."""

    CSS = """
    ConfirmCreateScreen {
        align: center middle;
    }

    #dialog {
        grid-size: 2;
        grid-gutter: 1 2;
        grid-rows: 1fr 3;
        padding: 0 2;
        width: 60;
        height: 11;
        border: thick $background 80%;
        background: $surface;
    }

    #question {
        column-span: 2;
        height: 3;
        content-align: center middle;
        text-style: bold;
    }

    Button {
        width: 100%;
    }
    """

    BINDINGS = [
        ("y", "confirm", "Yes"),
        ("n", "cancel", "No"),
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(self, path: str, label: str):
        super().__init__()
        self.path = path
        self.label = label

    def compose(self) -> ComposeResult:
        with Grid(id="dialog"):
            yield Label(
                f"{escape(self.label)}'s note does not exist yet.\n"
                f'Create "{escape(self.path)}"?\n\n'
                f"[dim]Press [bold]y[/bold] to create, [bold]n[/bold] to cancel[/dim]",
                id="question",
            )
            yield Button("Cancel (n)", variant="primary", id="cancel")
            yield Button("Create (y)", variant="success", id="create")

    def on_mount(self) -> None:
        logger.debug(f"ConfirmCreateScreen mounted for {self.path}")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "create")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)
