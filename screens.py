"""Modal screens for the weekly tracker application."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Input, Label
from textual.screen import ModalScreen

from models import DAILY_MINIMUM_MINUTES
from utils import format_minutes


class ConfirmScreen(ModalScreen[bool]):
    """Simple confirmation dialog."""

    CSS = """
    ConfirmScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $warning;
    }

    #confirm-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
    }

    #confirm-buttons Button {
        width: 1fr;
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
    ]

    def __init__(self, message: str):
        super().__init__()
        self.message = message

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label(self.message)
            with Horizontal(id="confirm-buttons"):
                yield Button("Yes (Y)", variant="warning", id="yes")
                yield Button("No (N)", variant="default", id="no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class LogHoursScreen(ModalScreen[tuple[str, str] | None]):
    """Modal screen for logging today's hours by hand.

    Dismisses with the raw (hours, minutes) text; parsing and validation
    happen in the tracker so rejected input surfaces the same messages.
    """

    CSS = """
    LogHoursScreen {
        align: center middle;
    }

    #log-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: thick $primary;
    }

    #log-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    .field-group {
        width: 1fr;
        height: auto;
        margin: 0 1 0 0;
    }

    .field-label {
        height: 1;
        color: $text-muted;
    }

    .field-row {
        width: 100%;
        height: auto;
        margin-bottom: 1;
    }

    #log-hint {
        color: $text-muted;
    }

    #log-buttons {
        width: 100%;
        height: auto;
        margin-top: 1;
        align: center middle;
    }

    #log-buttons Button {
        width: auto;
        min-width: 12;
        margin: 0 2;
    }
    """

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    # Field order for Enter key navigation
    FIELD_ORDER = ["hours", "minutes"]

    def __init__(self, daily_minimum: int = DAILY_MINIMUM_MINUTES):
        super().__init__()
        self.daily_minimum = daily_minimum

    def compose(self) -> ComposeResult:
        with Vertical(id="log-dialog"):
            yield Label("Log Today's Hours", id="log-title")
            with Horizontal(classes="field-row"):
                with Vertical(classes="field-group"):
                    yield Label("Hours", classes="field-label")
                    yield Input(placeholder="8", id="hours")
                with Vertical(classes="field-group"):
                    yield Label("Minutes", classes="field-label")
                    yield Input(placeholder="0", id="minutes")
            yield Label(f"Daily minimum: {format_minutes(self.daily_minimum)}", id="log-hint")
            with Horizontal(id="log-buttons"):
                yield Button("Log", variant="primary", id="log")
                yield Button("Cancel", variant="default", id="cancel")

    def on_mount(self) -> None:
        self.query_one("#hours", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Move to next field on Enter, or submit if on last field."""
        current_id = event.input.id
        if current_id in self.FIELD_ORDER:
            current_idx = self.FIELD_ORDER.index(current_id)
            if current_idx < len(self.FIELD_ORDER) - 1:
                next_id = self.FIELD_ORDER[current_idx + 1]
                self.query_one(f"#{next_id}", Input).focus()
            else:
                self._submit()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.dismiss(None)
        elif event.button.id == "log":
            self._submit()

    def action_cancel(self) -> None:
        self.dismiss(None)

    def _submit(self) -> None:
        hours = self.query_one("#hours", Input).value
        minutes = self.query_one("#minutes", Input).value
        self.dismiss((hours, minutes))
