"""SQLite-backed key-value store for persisted slots."""

from __future__ import annotations

import copy
import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class JsonStore:
    """Durable JSON values keyed by slot name.

    Each call opens its own connection and nothing is cached between calls.
    With ``path=None`` there is no durable layer: ``load`` hands back a copy of
    the default and ``save`` does nothing.
    """

    def __init__(self, path: str | Path | None) -> None:
        self.path = Path(path) if path is not None else None

    @property
    def available(self) -> bool:
        return self.path is not None

    def _connect(self) -> sqlite3.Connection:
        assert self.path is not None
        self.path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.path)
        conn.execute("CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)")
        return conn

    def _read_raw(self, key: str) -> str | None:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        return row[0] if row else None

    def load(self, key: str, default: T) -> T:
        """Return the stored value for ``key``, or persist and return ``default``."""
        if not self.available:
            return copy.deepcopy(default)

        try:
            raw = self._read_raw(key)
        except (sqlite3.Error, OSError):
            logger.exception("store_read_failed key=%s", key)
            return copy.deepcopy(default)

        if raw is None:
            self.save(key, default)
            return copy.deepcopy(default)

        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("store_corrupt key=%s reason=unparseable resetting to default", key)
            self.save(key, default)
            return copy.deepcopy(default)

        if isinstance(default, list) and not isinstance(parsed, list):
            logger.warning("store_corrupt key=%s reason=not_a_list resetting to default", key)
            self.save(key, default)
            return copy.deepcopy(default)

        return parsed

    def save(self, key: str, value: Any) -> None:
        """Persist ``value`` under ``key``; failures are logged, never raised."""
        if not self.available:
            return

        try:
            payload = json.dumps(value)
        except (TypeError, ValueError):
            logger.exception("store_serialize_failed key=%s", key)
            return

        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute(
                        "INSERT INTO kv (key, value) VALUES (?, ?) "
                        "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                        (key, payload),
                    )
            finally:
                conn.close()
        except (sqlite3.Error, OSError):
            logger.exception("store_write_failed key=%s", key)
