"""Point of sale facade over the store, repositories, clock and backups."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, Iterable

from dinerpos.backup import BackupManager
from dinerpos.bill import BillDraft, utc_now
from dinerpos.billing import deal_total, find_menu_item, new_id
from dinerpos.business_day import BusinessDayClock, parse_day
from dinerpos.closing import ClosingAmounts, ClosingResult, reconcile
from dinerpos.config import BACKUP_DIR, USERS
from dinerpos.models import DashboardSummary, Deal, DealItem, DeletedItemLogEntry, MenuItem, SaleEntry, User
from dinerpos.persistence import JsonStore
from dinerpos.repositories import DealRepository, DeletedItemLogRepository, MenuItemRepository, SaleRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DealLine:
    """Deal form input for one menu item."""

    menu_item_id: str
    quantity: int
    deal_price_per_item: float


def authenticate(username: str, password: str) -> User | None:
    record = USERS.get(username)
    if record is None or record["password"] != password:
        return None
    return User(id=record["id"], username=username, role=record["role"])


def cashier_ids() -> list[str]:
    return [record["id"] for record in USERS.values() if record["role"] == "cashier"]


class PointOfSale:
    """Single owner of all persisted state.

    Build one per process and hand it to whichever surface needs it. Every
    mutation returns the affected entity, or None/False when it was rejected.
    """

    def __init__(
        self,
        store_path: str | Path | None,
        today: Callable[[], date] = date.today,
        now: Callable[[], datetime] = utc_now,
        backup_dir: str | Path = BACKUP_DIR,
    ) -> None:
        self.store = JsonStore(store_path)
        self.menu_items = MenuItemRepository(self.store)
        self.sales = SaleRepository(self.store)
        self.deleted_logs = DeletedItemLogRepository(self.store)
        self.deals = DealRepository(self.store)
        self.clock = BusinessDayClock(self.store, today=today)
        self.backups = BackupManager(self.menu_items, self.sales, self.deleted_logs, self.deals, self.clock)
        self.backup_dir = Path(backup_dir)
        self._now = now
        self.clock.get()

    def refresh(self) -> None:
        for repo in (self.menu_items, self.sales, self.deleted_logs, self.deals):
            repo.refresh()

    # Reads

    def list_menu_items(self) -> list[MenuItem]:
        return self.menu_items.list()

    def list_deals(self, active_only: bool = False) -> list[Deal]:
        deals = self.deals.list()
        if active_only:
            return [deal for deal in deals if deal.is_active]
        return deals

    def list_sales(self) -> list[SaleEntry]:
        return self.sales.list()

    def list_deleted_logs(self) -> list[DeletedItemLogEntry]:
        return self.deleted_logs.list()

    def get_business_day(self) -> str:
        return self.clock.get()

    # Menu items

    def create_menu_item(self, name: str, code: str, price: float, category: str | None = None) -> MenuItem | None:
        if not name or not code or price is None:
            logger.warning("menu_item_rejected reason=missing_fields")
            return None
        if price < 0:
            logger.warning("menu_item_rejected reason=negative_price price=%s", price)
            return None
        item = MenuItem(id=new_id("item"), code=code, name=name, price=price, category=category or None)
        return self.menu_items.add(item)

    def edit_menu_item(
        self,
        item_id: str,
        name: str,
        code: str,
        price: float,
        category: str | None = None,
    ) -> MenuItem | None:
        if not name or not code or price is None or price < 0:
            logger.warning("menu_item_rejected reason=invalid_fields id=%s", item_id)
            return None
        return self.menu_items.update(MenuItem(id=item_id, code=code, name=name, price=price, category=category or None))

    def get_menu_item(self, item_id: str) -> MenuItem | None:
        return self.menu_items.get(item_id)

    def add_menu_item(self, item: MenuItem) -> MenuItem | None:
        return self.menu_items.add(item)

    def update_menu_item(self, item: MenuItem) -> MenuItem | None:
        if item.price < 0:
            return None
        return self.menu_items.update(item)

    def remove_menu_item(self, item_id: str) -> MenuItem | None:
        return self.menu_items.remove(item_id)

    # Deals

    def _build_deal_items(self, lines: Iterable[DealLine]) -> list[DealItem] | None:
        menu_items = self.menu_items.list()
        items: list[DealItem] = []
        for line in lines:
            if line.quantity <= 0 or line.deal_price_per_item < 0:
                logger.warning("deal_rejected reason=invalid_line menu_item_id=%s", line.menu_item_id)
                return None
            base = find_menu_item(line.menu_item_id, menu_items)
            if base is None:
                logger.warning("deal_rejected reason=unknown_menu_item menu_item_id=%s", line.menu_item_id)
                return None
            deal_item = DealItem(
                menu_item_id=base.id,
                name=base.name,
                quantity=line.quantity,
                deal_price_per_item=line.deal_price_per_item,
                original_price_per_item=base.price,
            )
            # A repeated menu item replaces its earlier line.
            items = [existing for existing in items if existing.menu_item_id != base.id] + [deal_item]
        return items

    def _deal_from_form(
        self,
        deal_id: str,
        deal_number: str,
        name: str,
        lines: Iterable[DealLine],
        description: str | None,
        is_active: bool,
    ) -> Deal | None:
        lines = list(lines)
        if not deal_number or not name or not lines:
            logger.warning("deal_rejected reason=missing_fields")
            return None
        items = self._build_deal_items(lines)
        if items is None:
            return None
        return Deal(
            id=deal_id,
            deal_number=deal_number,
            name=name,
            description=description,
            items=items,
            calculated_total_deal_price=deal_total(items),
            is_active=is_active,
        )

    def create_deal(
        self,
        deal_number: str,
        name: str,
        lines: Iterable[DealLine],
        description: str | None = None,
        is_active: bool = True,
    ) -> Deal | None:
        deal = self._deal_from_form(new_id("deal"), deal_number, name, lines, description, is_active)
        if deal is None:
            return None
        return self.deals.add(deal)

    def edit_deal(
        self,
        deal_id: str,
        deal_number: str,
        name: str,
        lines: Iterable[DealLine],
        description: str | None = None,
        is_active: bool = True,
    ) -> Deal | None:
        deal = self._deal_from_form(deal_id, deal_number, name, lines, description, is_active)
        if deal is None:
            return None
        return self.deals.update(deal)

    def get_deal(self, deal_id: str) -> Deal | None:
        return self.deals.get(deal_id)

    def set_deal_active(self, deal_id: str, is_active: bool) -> Deal | None:
        deal = self.deals.get(deal_id)
        if deal is None:
            return None
        deal.is_active = is_active
        return self.deals.update(deal)

    def add_deal(self, deal: Deal) -> Deal | None:
        return self.deals.add(deal)

    def update_deal(self, deal: Deal) -> Deal | None:
        return self.deals.update(deal)

    def remove_deal(self, deal_id: str) -> Deal | None:
        return self.deals.remove(deal_id)

    # Sales and logs

    def new_bill(self, cashier_id: str | None) -> BillDraft:
        return BillDraft(cashier_id, self.sales, self.deleted_logs, clock=self._now)

    def record_sale(self, sale: SaleEntry) -> SaleEntry | None:
        return self.sales.add(sale)

    def remove_sale(self, sale_id: str) -> SaleEntry | None:
        """Return a bill: drop its sale record and hand it back."""
        sale_id = sale_id.strip()
        if not sale_id:
            return None
        removed = self.sales.remove(sale_id)
        if removed is None:
            logger.warning("return_rejected reason=not_found bill_id=%s", sale_id)
        return removed

    def clear_sales(self) -> None:
        self.sales.clear()

    def log_deleted_item(self, entry: DeletedItemLogEntry) -> DeletedItemLogEntry | None:
        return self.deleted_logs.add(entry)

    # Business day, closing and backups

    def advance_day(self) -> str:
        return self.clock.advance()

    def end_business_day(self) -> tuple[str, Path | None]:
        """Advance the business day, then write an automatic backup."""
        day = self.clock.advance()
        return day, self.backups.write_backup(self.backup_dir, auto=True)

    def calculate_closing(
        self,
        cashier_id: str,
        amounts: ClosingAmounts,
        business_date: date | str | None = None,
    ) -> ClosingResult | None:
        if business_date is None:
            business_date = self.clock.get()
        if isinstance(business_date, str):
            parsed = parse_day(business_date)
            if parsed is None:
                return None
            business_date = parsed
        return reconcile(self.sales.list(), cashier_id, business_date, amounts)

    def export_all(self) -> dict[str, Any]:
        return self.backups.export_all()

    def write_backup(self, directory: str | Path | None = None, auto: bool = False) -> Path | None:
        return self.backups.write_backup(directory if directory is not None else self.backup_dir, auto=auto)

    def restore(self, bundle: Any) -> bool:
        return self.backups.restore(bundle)

    def restore_from_file(self, path: str | Path) -> bool:
        bundle = self.backups.read_backup(path)
        if bundle is None:
            return False
        return self.backups.restore(bundle)

    def reset(self) -> None:
        self.backups.reset()

    def dashboard_summary(self, recent: int = 5) -> DashboardSummary:
        sales = self.sales.list()
        newest_first = sorted(sales, key=lambda sale: sale.created_at, reverse=True)
        return DashboardSummary(
            business_day=self.clock.get(),
            total_sales_amount=sum((sale.total_amount for sale in sales), 0),
            sales_count=len(sales),
            menu_item_count=len(self.menu_items.list()),
            deleted_log_count=len(self.deleted_logs.list()),
            recent_sales=newest_first[:recent],
        )
