"""Bill details modal screen."""

from __future__ import annotations

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

FIELDS = (
    ("table_number", "Table"),
    ("customer_name", "Customer"),
    ("waiter_name", "Waiter"),
)


class BillDetailsModal(ModalScreen[dict[str, str] | None]):
    """Edit the table number, customer name and waiter name of the open bill."""

    CSS = """
    BillDetailsModal {
        align: center middle;
        background: $background 60%;
    }

    #details-dialog {
        width: 60;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #details-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #details-fields {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
        margin-bottom: 1;
    }

    #details-help {
        color: #dddddd;
    }
    """

    MAX_LENGTH = 30

    def __init__(
        self,
        table_number: str | None = None,
        customer_name: str | None = None,
        waiter_name: str | None = None,
    ) -> None:
        super().__init__()
        self.values = {
            "table_number": table_number or "",
            "customer_name": customer_name or "",
            "waiter_name": waiter_name or "",
        }
        self.active = 0

    def compose(self) -> ComposeResult:
        with Container(id="details-dialog"):
            yield Static("Bill Details", id="details-title")
            yield Static(id="details-fields")
            yield Static("Tab/Up/Down switch field. Enter save. Backspace delete. Esc cancel.", id="details-help")

    def on_mount(self) -> None:
        self._refresh_content()

    @property
    def active_field(self) -> str:
        return FIELDS[self.active][0]

    def on_key(self, event: Key) -> None:
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(None)
            event.stop()
            return

        if event.key == "enter":
            self.dismiss(dict(self.values))
            event.stop()
            return

        if event.key in {"tab", "down", "up", "shift+tab"}:
            step = -1 if event.key in {"up", "shift+tab"} else 1
            self.active = (self.active + step) % len(FIELDS)
            self._refresh_content()
            event.stop()
            return

        if event.key == "backspace":
            self.values[self.active_field] = self.values[self.active_field][:-1]
            self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character and len(event.character) == 1:
            if len(self.values[self.active_field]) < self.MAX_LENGTH:
                self.values[self.active_field] += event.character
            self._refresh_content()
            event.stop()

    def _refresh_content(self) -> None:
        text = Text()
        for idx, (name, label) in enumerate(FIELDS):
            if idx:
                text.append("\n")
            pointer = "➤ " if idx == self.active else "  "
            text.append(f"{pointer}{label}: ", style="bold" if idx == self.active else "")
            text.append(self.values[name])
        self.query_one("#details-fields", Static).update(text)
