"""Cashier billing screen."""

from __future__ import annotations

import logging

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.css.query import NoMatches
from textual.events import Key
from textual.reactive import reactive
from textual.screen import ModalScreen
from textual.widgets import Header, Static

from dinerpos.bill import BillDraft
from dinerpos.bill_details_modal import BillDetailsModal
from dinerpos.models import BillItem, Deal, MenuItem
from dinerpos.pos import PointOfSale
from dinerpos.quantity_modal import QuantityModal
from dinerpos.rendering import badge_style, format_bill_line, format_money, format_result_label, result_matches

logger = logging.getLogger(__name__)


class CashierApp(App):
    """A Textual app for composing bills from menu items and active deals."""

    TITLE = "Diner POS"
    SUB_TITLE = "Billing"

    CSS = """
    Screen {
        layout: vertical;
    }

    #main-layout {
        height: 1fr;
    }

    #bill-pane {
        width: 3fr;
        border: round $primary;
        padding: 1;
    }

    #search-pane {
        width: 2fr;
        border: round $secondary;
        padding: 1;
    }

    #search-bar {
        border: heavy $secondary;
        padding: 0 1;
        margin-bottom: 1;
        height: 3;
    }

    #results {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #bill-lines {
        height: 1fr;
        border: tall $surface;
        padding: 0 1;
    }

    #bill-details {
        height: 1;
        text-style: italic;
    }

    #bill-total {
        height: 1;
        text-style: bold;
    }

    .pane-title {
        text-style: bold;
        margin-bottom: 1;
    }
    """

    input_state = reactive("normal")
    search_mode = reactive("M")
    search_text = reactive("")
    selected_index = reactive(0)
    line_selected_index = reactive(None)

    BINDINGS = [
        ("tab", "cycle_results(1)", "Next result"),
        ("up", "cycle_results(-1)", "Previous result"),
        ("down", "cycle_results(1)", "Next result"),
        ("enter", "add_selected", "Add to bill"),
        ("backspace", "backspace_search", "Delete search char"),
        Binding("ctrl+s", "generate_invoice", "Generate invoice", priority=True),
        ("ctrl+c", "cancel_active_mode", "Exit search"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, pos: PointOfSale, cashier_id: str) -> None:
        super().__init__()
        self.pos = pos
        self.bill: BillDraft = pos.new_bill(cashier_id)
        self.menu_items: list[MenuItem] = []
        self.active_deals: list[Deal] = []
        self.system_status = ""

    def compose(self) -> ComposeResult:
        yield Header()
        with Horizontal(id="main-layout"):
            with Vertical(id="bill-pane"):
                yield Static("Current Bill", classes="pane-title")
                yield Static(id="bill-details")
                yield Static("(no items yet)", id="bill-lines")
                yield Static(id="bill-total")
            with Vertical(id="search-pane"):
                yield Static(id="search-bar")
                yield Static(id="results")

    def on_mount(self) -> None:
        self.pos.refresh()
        self.menu_items = self.pos.list_menu_items()
        self.active_deals = self.pos.list_deals(active_only=True)
        self.sub_title = f"Billing - {self.bill.cashier_id} - business day {self.pos.get_business_day()}"
        logger.info(
            "cashier_app_mounted cashier_id=%s items=%d deals=%d",
            self.bill.cashier_id,
            len(self.menu_items),
            len(self.active_deals),
        )
        self._refresh_all()

    def on_key(self, event: Key) -> None:
        if isinstance(self.screen, ModalScreen):
            return

        if not event.is_printable or not event.character or len(event.character) != 1:
            return

        char = event.character
        if self.input_state == "normal":
            if char == "+":
                self._change_selected_quantity(1)
            elif char == "-":
                self._change_selected_quantity(-1)
            elif char == "d":
                self._remove_selected_line()
            elif char == "j":
                self._move_line_selection(1)
            elif char == "k":
                self._move_line_selection(-1)
            elif char == "n":
                self._open_quantity_for_selected_line()
            elif char == "t":
                self._open_bill_details()
            elif char in {"m", "e"}:
                self.search_mode = "M" if char == "m" else "D"
                self.input_state = "active"
                self.search_text = ""
                self.selected_index = 0
                self._refresh_search()
            else:
                return
            event.stop()
            return

        if not char.isprintable():
            return
        self.search_text += char
        self.selected_index = 0
        self._refresh_search()
        event.stop()

    def action_cancel_active_mode(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state == "normal":
            return

        self.input_state = "normal"
        self.search_text = ""
        self.selected_index = 0
        self._refresh_search()

    def action_cycle_results(self, delta: int) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            self.selected_index = 0
            self._refresh_results(results)
            return
        self.selected_index = (self.selected_index + delta) % len(results)
        self._refresh_results(results)

    def action_add_selected(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        results = self._filtered_results()
        if not results:
            return

        result = results[self.selected_index]
        if isinstance(result, Deal):
            warnings = self.bill.add_deal(result, self.menu_items)
            self.system_status = warnings[0] if warnings else f'Deal "{result.name}" added to bill.'
        else:
            self.bill.add_menu_item(result)
            self.system_status = f"{result.name} added to bill."
        self.line_selected_index = len(self.bill.items) - 1 if self.bill.items else None
        self._refresh_all()

    def action_backspace_search(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "active":
            return

        if not self.search_text:
            return
        self.search_text = self.search_text[:-1]
        self.selected_index = 0
        self._refresh_search()

    def action_generate_invoice(self) -> None:
        if isinstance(self.screen, ModalScreen):
            return
        if self.input_state != "normal":
            self.system_status = "Invoice only in NORMAL mode (Ctrl+C to exit search)"
            self._refresh_search()
            return
        if not self.bill.items:
            self.system_status = "Cannot generate an empty invoice."
            self._refresh_search()
            return

        sale = self.bill.generate_invoice()
        if sale is None:
            self.system_status = "Cashier ID not found. Please re-login."
        else:
            self.system_status = f"Invoice {sale.id} recorded: {format_money(sale.total_amount)}"
        self.line_selected_index = None
        self._refresh_all()

    def _filtered_results(self) -> list[MenuItem | Deal]:
        source: list[MenuItem | Deal] = list(self.active_deals if self.search_mode == "D" else self.menu_items)
        if not self.search_text:
            return source
        return [result for result in source if result_matches(result, self.search_text)]

    def _refresh_all(self) -> None:
        self._refresh_bill()
        self._refresh_search()

    def _selected_line(self) -> BillItem | None:
        if self.line_selected_index is None:
            return None
        if not (0 <= self.line_selected_index < len(self.bill.items)):
            return None
        return self.bill.items[self.line_selected_index]

    def _move_line_selection(self, delta: int) -> None:
        if not self.bill.items:
            return

        if self.line_selected_index is None:
            self.line_selected_index = 0 if delta > 0 else len(self.bill.items) - 1
        else:
            self.line_selected_index = (self.line_selected_index + delta) % len(self.bill.items)
        self._refresh_bill()

    def _set_selected_quantity(self, quantity: int) -> None:
        line = self._selected_line()
        if line is None:
            return
        self.bill.update_quantity(line.bill_item_id, quantity)
        if quantity < 1:
            self.system_status = f"{line.name} removed from bill."
        self._clamp_line_selection()
        self._refresh_all()

    def _change_selected_quantity(self, delta: int) -> None:
        line = self._selected_line()
        if line is None:
            return
        self._set_selected_quantity(line.quantity + delta)

    def _remove_selected_line(self) -> None:
        line = self._selected_line()
        if line is None:
            return
        self.bill.remove_line(line.bill_item_id)
        self.system_status = f"{line.name} removed from bill."
        self._clamp_line_selection()
        self._refresh_all()

    def _clamp_line_selection(self) -> None:
        if not self.bill.items:
            self.line_selected_index = None
        elif self.line_selected_index is not None:
            self.line_selected_index = min(self.line_selected_index, len(self.bill.items) - 1)

    def _open_quantity_for_selected_line(self) -> None:
        line = self._selected_line()
        if line is None:
            return

        def _apply(quantity: int | None) -> None:
            if quantity is not None:
                self._set_selected_quantity(quantity)

        self.push_screen(QuantityModal(line.name, line.quantity), _apply)

    def _open_bill_details(self) -> None:
        def _apply(details: dict[str, str] | None) -> None:
            if details is None:
                return
            self.bill.set_details(**details)
            self.system_status = "Bill details updated."
            self._refresh_all()

        self.push_screen(
            BillDetailsModal(self.bill.table_number, self.bill.customer_name, self.bill.waiter_name),
            _apply,
        )

    def _visible_rows(self, widget: Static) -> int:
        height = widget.size.height
        if height <= 0:
            return 8
        return max(1, height)

    def _window_bounds(self, total: int, rows: int, selected: int | None) -> tuple[int, int]:
        if total <= 0:
            return (0, 0)

        rows = max(1, rows)
        if total <= rows:
            return (0, total)

        if selected is None:
            start = 0
        else:
            start = max(0, selected - rows // 2)
            start = min(start, total - rows)

        return (start, start + rows)

    def _refresh_bill(self) -> None:
        try:
            lines_widget = self.query_one("#bill-lines", Static)
            details_widget = self.query_one("#bill-details", Static)
            total_widget = self.query_one("#bill-total", Static)
        except NoMatches:
            return

        total_widget.update(f"Total: {format_money(self.bill.total)}")
        details_widget.update(
            f"Table: {self.bill.table_number or '-'}  "
            f"Customer: {self.bill.customer_name or '-'}  "
            f"Waiter: {self.bill.waiter_name or '-'}"
        )
        if not self.bill.items:
            self.line_selected_index = None
            lines_widget.update("(no items yet)")
            return

        visible_rows = self._visible_rows(lines_widget)
        start, end = self._window_bounds(len(self.bill.items), visible_rows, self.line_selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == self.line_selected_index else "  "
            lines.append(pointer)
            lines.append(f"{idx + 1}. ")
            lines.append_text(format_bill_line(self.bill.items[idx]))

        if end < len(self.bill.items):
            lines.append("\n⋮", style="dim")

        lines_widget.update(lines)

    def _refresh_search(self) -> None:
        self._refresh_search_bar()
        if self.input_state == "normal":
            self._refresh_results([])
            return
        self._refresh_results(self._filtered_results())

    def _refresh_search_bar(self) -> None:
        try:
            bar = self.query_one("#search-bar", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            status = self.system_status or "Ready"
            bar.update(f"M items, E deals. j/k select, +/- qty, n set qty, d remove, t details, Ctrl+S invoice.\n{status}")
            return

        text = Text()
        text.append(self.search_mode, style=badge_style(self.search_mode))
        text.append(f": {self.search_text}")
        bar.update(text)

    def _refresh_results(self, results: list[MenuItem | Deal]) -> None:
        try:
            results_widget = self.query_one("#results", Static)
        except NoMatches:
            return
        if self.input_state == "normal":
            results_widget.update("")
            return

        if not results:
            results_widget.update("No results")
            return

        if self.selected_index >= len(results):
            self.selected_index = 0

        visible_rows = self._visible_rows(results_widget)
        start, end = self._window_bounds(len(results), visible_rows, self.selected_index)

        lines = Text()
        if start > 0:
            lines.append("⋮\n", style="dim")

        for idx in range(start, end):
            if idx > start:
                lines.append("\n")
            pointer = "➤ " if idx == self.selected_index else "  "
            lines.append(f"{pointer}{format_result_label(results[idx])}")

        if end < len(results):
            lines.append("\n⋮", style="dim")

        results_widget.update(lines)
