"""Backup, restore and reset across every persisted slot."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping

from dinerpos.business_day import BusinessDayClock, parse_day
from dinerpos.config import AUTO_BACKUP_FILE_PREFIX, BACKUP_FILE_PREFIX
from dinerpos.models import Deal, DeletedItemLogEntry, MenuItem, SaleEntry
from dinerpos.repositories import (
    DealRepository,
    DeletedItemLogRepository,
    MenuItemRepository,
    SaleRepository,
    parse_records,
)

logger = logging.getLogger(__name__)

BUNDLE_FIELDS = ("menuItems", "sales", "deletedItemLogs", "deals", "currentBusinessDay")


class BackupManager:
    """Moves the four collections and the business day as one bundle.

    Restores are validated in full before anything is touched. Once valid, the
    in-memory collections are swapped first and each slot is then persisted
    on its own, so a storage failure part-way is logged but leaves memory
    consistent.
    """

    def __init__(
        self,
        menu_items: MenuItemRepository,
        sales: SaleRepository,
        deleted_logs: DeletedItemLogRepository,
        deals: DealRepository,
        clock: BusinessDayClock,
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.menu_items = menu_items
        self.sales = sales
        self.deleted_logs = deleted_logs
        self.deals = deals
        self.clock = clock
        self._now = now

    def export_all(self) -> dict[str, Any]:
        return {
            "menuItems": self.menu_items.to_records(),
            "sales": self.sales.to_records(),
            "deletedItemLogs": self.deleted_logs.to_records(),
            "deals": self.deals.to_records(),
            "currentBusinessDay": self.clock.get(),
        }

    def restore(self, bundle: Any) -> bool:
        if not isinstance(bundle, Mapping):
            logger.error("restore_rejected reason=not_an_object")
            return False

        missing = [name for name in BUNDLE_FIELDS if name not in bundle]
        if missing:
            logger.error("restore_rejected reason=missing_fields fields=%s", ",".join(missing))
            return False

        for name in BUNDLE_FIELDS[:4]:
            if not isinstance(bundle[name], list):
                logger.error("restore_rejected reason=not_a_list field=%s", name)
                return False

        day = bundle["currentBusinessDay"]
        if parse_day(day) is None:
            logger.error("restore_rejected reason=invalid_business_day value=%r", day)
            return False

        try:
            menu_items = parse_records(bundle["menuItems"], MenuItem.from_dict)
            sales = parse_records(bundle["sales"], SaleEntry.from_dict)
            deleted_logs = parse_records(bundle["deletedItemLogs"], DeletedItemLogEntry.from_dict)
            deals = parse_records(bundle["deals"], Deal.from_dict)
        except ValueError as exc:
            logger.error("restore_rejected reason=bad_record detail=%s", exc)
            return False

        self.menu_items.replace_all(menu_items)
        self.sales.replace_all(sales)
        self.deleted_logs.replace_all(deleted_logs)
        self.deals.replace_all(deals)
        self.clock.set(day)
        logger.info(
            "restore_completed menu_items=%d sales=%d deleted_logs=%d deals=%d day=%s",
            len(menu_items),
            len(sales),
            len(deleted_logs),
            len(deals),
            day,
        )
        return True

    def reset(self) -> None:
        """Empty every collection and set the business day to today."""
        self.menu_items.replace_all([])
        self.sales.replace_all([])
        self.deleted_logs.replace_all([])
        self.deals.replace_all([])
        self.clock.set(self.clock.today())
        logger.info("reset_completed day=%s", self.clock.today())

    def write_backup(self, directory: str | Path, auto: bool = False) -> Path | None:
        """Write the current bundle to a timestamped JSON file."""
        prefix = AUTO_BACKUP_FILE_PREFIX if auto else BACKUP_FILE_PREFIX
        path = Path(directory) / f"{prefix}{self._now().strftime('%Y-%m-%d_%H%M%S')}.json"
        try:
            payload = json.dumps(self.export_all(), indent=2)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except (OSError, TypeError, ValueError):
            logger.exception("backup_failed path=%s", path)
            return None
        logger.info("backup_written path=%s auto=%s", path, auto)
        return path

    def read_backup(self, path: str | Path) -> Any:
        """Load a backup file; None when it cannot be read or parsed."""
        try:
            return json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.exception("backup_read_failed path=%s", path)
            return None
