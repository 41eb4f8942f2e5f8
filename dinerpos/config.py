"""Runtime configuration defaults for storage, backups and logging."""

from __future__ import annotations

import os

DB_PATH = os.environ.get("DINERPOS_DB_PATH", "data/dinerpos.db")
BACKUP_DIR = os.environ.get("DINERPOS_BACKUP_DIR", "backups")
DEBUG_LOG_PATH = os.environ.get("DINERPOS_LOG_PATH", "/tmp/dinerpos-debug.log")
LOG_LEVEL = os.environ.get("DINERPOS_LOG_LEVEL", "INFO")

# Storage slot names, one per persisted value.
MENU_ITEMS_KEY = "pos_menu_items"
SALES_KEY = "pos_sales"
DELETED_ITEMS_KEY = "pos_deleted_items_log"
DEALS_KEY = "pos_deals"
BUSINESS_DAY_KEY = "pos_current_business_day"

BACKUP_FILE_PREFIX = "pos_backup_"
AUTO_BACKUP_FILE_PREFIX = "pos_backup_auto_"

CURRENCY = "PKR"
UNKNOWN_ITEM_LABEL = "Unknown Item"
UNKNOWN_CASHIER_ID = "unknown_cashier"

# Fixed user table; credentials are compared as plain strings.
USERS: dict[str, dict[str, str]] = {
    "admin": {"id": "admin001", "password": "password", "role": "admin"},
    "ca1": {"id": "ca1", "password": "password", "role": "cashier"},
    "ca2": {"id": "ca2", "password": "password", "role": "cashier"},
}
