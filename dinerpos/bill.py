"""In-progress bill composed by a cashier."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable

from dinerpos.billing import bill_item_from_menu_item, bill_subtotal, expand_deal, line_total, new_id
from dinerpos.config import UNKNOWN_CASHIER_ID
from dinerpos.models import BillItem, Deal, DeletedItemLogEntry, MenuItem, SaleEntry
from dinerpos.repositories import DeletedItemLogRepository, SaleRepository

logger = logging.getLogger(__name__)

REASON_QUANTITY_ZERO = "Quantity reduced to zero"
REASON_REMOVED = "Removed by cashier"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BillDraft:
    """Lines a cashier is assembling before the invoice is generated.

    Plain lines for the same menu item at the same price coalesce; deal lines
    never do. Lines removed from the draft are written to the deletion log.
    """

    def __init__(
        self,
        cashier_id: str | None,
        sales: SaleRepository,
        deleted_logs: DeletedItemLogRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.cashier_id = cashier_id
        self.sales = sales
        self.deleted_logs = deleted_logs
        self._clock = clock
        self.items: list[BillItem] = []
        self.table_number: str | None = None
        self.customer_name: str | None = None
        self.waiter_name: str | None = None
        self.last_invoice: SaleEntry | None = None

    @property
    def subtotal(self) -> float:
        return bill_subtotal(self.items)

    @property
    def total(self) -> float:
        return self.subtotal

    def set_details(
        self,
        table_number: str | None = None,
        customer_name: str | None = None,
        waiter_name: str | None = None,
    ) -> None:
        """Set the optional header fields; blank values clear them."""
        self.table_number = (table_number or "").strip() or None
        self.customer_name = (customer_name or "").strip() or None
        self.waiter_name = (waiter_name or "").strip() or None

    def find_line(self, bill_item_id: str) -> BillItem | None:
        for line in self.items:
            if line.bill_item_id == bill_item_id:
                return line
        return None

    def add_menu_item(self, item: MenuItem) -> BillItem:
        for line in self.items:
            if line.menu_item_id == item.id and line.price == item.price and not line.is_deal_line:
                line.quantity += 1
                line.total_price = line_total(line.price, line.quantity)
                return line

        line = bill_item_from_menu_item(item)
        self.items.append(line)
        return line

    def add_deal(self, deal: Deal, menu_items: Iterable[MenuItem]) -> list[str]:
        """Append a fresh set of deal lines; returns warnings for skipped items."""
        lines, warnings = expand_deal(deal, menu_items)
        self.items.extend(lines)
        for warning in warnings:
            logger.warning("deal_item_skipped deal_id=%s detail=%s", deal.id, warning)
        return warnings

    def update_quantity(self, bill_item_id: str, quantity: int) -> BillItem | None:
        """Set a line's quantity; anything below 1 removes the line."""
        line = self.find_line(bill_item_id)
        if line is None:
            return None

        if quantity < 1:
            self._log_removal(line, REASON_QUANTITY_ZERO)
            self.items.remove(line)
            return None

        line.quantity = quantity
        line.total_price = line_total(line.price, quantity)
        return line

    def remove_line(self, bill_item_id: str) -> BillItem | None:
        line = self.find_line(bill_item_id)
        if line is None:
            return None
        self._log_removal(line, REASON_REMOVED)
        self.items.remove(line)
        return line

    def _log_removal(self, line: BillItem, reason: str) -> DeletedItemLogEntry:
        entry = DeletedItemLogEntry(
            id=new_id("del"),
            menu_item_id=line.menu_item_id,
            item_name=line.name,
            item_code=line.code,
            quantity_removed=line.quantity,
            price_per_item=line.price,
            removed_by_cashier_id=self.cashier_id or UNKNOWN_CASHIER_ID,
            timestamp=to_timestamp(self._clock()),
            bill_id=self.last_invoice.id if self.last_invoice else None,
            reason=reason,
            is_deal_item=line.is_deal_line,
            deal_name=line.deal_context.deal_name if line.deal_context else None,
        )
        self.deleted_logs.add(entry)
        return entry

    def generate_invoice(self) -> SaleEntry | None:
        """Commit the draft to the sales ledger and start a new one."""
        if not self.cashier_id:
            logger.warning("invoice_rejected reason=no_cashier")
            return None
        if not self.items:
            logger.warning("invoice_rejected reason=empty_bill cashier_id=%s", self.cashier_id)
            return None

        subtotal = self.subtotal
        sale = SaleEntry(
            id=new_id("bill"),
            table_number=self.table_number,
            customer_name=self.customer_name,
            waiter_name=self.waiter_name,
            items=list(self.items),
            subtotal=subtotal,
            total_amount=subtotal,
            created_at=to_timestamp(self._clock()),
            cashier_id=self.cashier_id,
        )
        self.sales.add(sale)
        logger.info("sale_recorded bill_id=%s cashier_id=%s total=%s", sale.id, sale.cashier_id, sale.total_amount)

        self.last_invoice = sale
        self.items = []
        self.table_number = None
        self.customer_name = None
        self.waiter_name = None
        return sale
