"""Quantity entry modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static


class QuantityModal(ModalScreen[int | None]):
    """Prompt for a new quantity for the selected bill line. Zero removes it."""

    CSS = """
    QuantityModal {
        align: center middle;
        background: $background 60%;
    }

    #quantity-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #quantity-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #quantity-prompt {
        color: white;
        margin-bottom: 1;
    }

    #quantity-value {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #quantity-error {
        color: #ffb3b3;
        margin-bottom: 1;
    }

    #quantity-help {
        color: #dddddd;
    }
    """

    MAX_DIGITS = 3

    def __init__(self, item_name: str, current: int) -> None:
        super().__init__()
        self.item_name = item_name
        self.value = str(current)
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="quantity-dialog"):
            yield Static("Quantity", id="quantity-title")
            yield Static(f"{self.item_name}: enter 0 to remove the line", id="quantity-prompt")
            yield Static(id="quantity-value")
            yield Static(id="quantity-error")
            yield Static("Digits only. Enter confirm. Backspace delete. Esc/Ctrl+C cancel.", id="quantity-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            if self.value:
                self.value = self.value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character and event.character.isdigit():
            if len(self.value) < self.MAX_DIGITS:
                self.value += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        if not self.value:
            self.error = "Quantity is required."
            self._refresh_content()
            return
        self.dismiss(int(self.value))

    def _refresh_content(self) -> None:
        self.query_one("#quantity-value", Static).update(self.value or "")
        self.query_one("#quantity-error", Static).update(self.error or "")
