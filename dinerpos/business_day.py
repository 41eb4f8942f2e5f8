"""Business day clock."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Callable

from dinerpos.config import BUSINESS_DAY_KEY
from dinerpos.persistence import JsonStore

logger = logging.getLogger(__name__)

DAY_FORMAT = "%Y-%m-%d"


def parse_day(value: Any) -> date | None:
    """Parse a ``YYYY-MM-DD`` string, or return None if it is not a calendar date."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.strptime(value, DAY_FORMAT).date()
    except ValueError:
        return None
    # strptime also takes unpadded fields such as 2024-1-5.
    if format_day(parsed) != value:
        return None
    return parsed


def format_day(day: date) -> str:
    return day.strftime(DAY_FORMAT)


class BusinessDayClock:
    """Owns the persisted current business day.

    Every read validates the stored value. A malformed value is replaced by
    today's system date and the replacement is persisted; a well-formed date
    is trusted as-is, however far it has been advanced.
    """

    def __init__(self, store: JsonStore, today: Callable[[], date] = date.today) -> None:
        self.store = store
        self._today = today
        # Fallback value while no durable layer is available.
        self._current = format_day(today())

    def today(self) -> str:
        return format_day(self._today())

    def get(self) -> str:
        stored = self.store.load(BUSINESS_DAY_KEY, self._current)
        if parse_day(stored) is not None:
            self._current = stored
            return stored

        logger.warning("business_day_invalid stored=%r resetting to system date", stored)
        self._current = self.today()
        self.store.save(BUSINESS_DAY_KEY, self._current)
        return self._current

    def advance(self) -> str:
        """Move the business day forward by one calendar day and return it."""
        current = parse_day(self.get())
        assert current is not None
        self._current = format_day(current + timedelta(days=1))
        self.store.save(BUSINESS_DAY_KEY, self._current)
        logger.info("business_day_advanced day=%s", self._current)
        return self._current

    def set(self, value: str) -> bool:
        if parse_day(value) is None:
            return False
        self._current = value
        self.store.save(BUSINESS_DAY_KEY, self._current)
        return True
