"""
Tests for the business day clock.
"""

from datetime import date

import pytest

from dinerpos.business_day import BusinessDayClock, parse_day
from dinerpos.config import BUSINESS_DAY_KEY


@pytest.fixture
def clock(store):
    return BusinessDayClock(store, today=lambda: date(2024, 3, 10))


class TestParseDay:
    """Day string validation."""

    @pytest.mark.parametrize("value", ["not-a-date", "", "2024-02-30", "2024/03/10", "2024-1-5", "2024-03-5", None, 20240310])
    def test_rejects_invalid_values(self, value):
        assert parse_day(value) is None

    def test_accepts_calendar_date(self):
        assert parse_day("2024-02-29") == date(2024, 2, 29)


class TestBusinessDayClock:
    """Reading, self-healing and advancing the business day."""

    def test_first_read_uses_system_date(self, clock, store):
        assert clock.get() == "2024-03-10"
        assert store.load(BUSINESS_DAY_KEY, "") == "2024-03-10"

    def test_invalid_stored_value_self_heals(self, clock, store):
        store.save(BUSINESS_DAY_KEY, "not-a-date")
        assert clock.get() == "2024-03-10"
        assert store.load(BUSINESS_DAY_KEY, "") == "2024-03-10"

    def test_future_day_is_trusted(self, clock, store):
        store.save(BUSINESS_DAY_KEY, "2030-01-01")
        assert clock.get() == "2030-01-01"

    def test_advance_moves_one_calendar_day(self, clock, store):
        store.save(BUSINESS_DAY_KEY, "2024-02-28")
        assert clock.advance() == "2024-02-29"
        assert clock.advance() == "2024-03-01"
        assert store.load(BUSINESS_DAY_KEY, "") == "2024-03-01"

    def test_advance_across_year_end(self, clock, store):
        store.save(BUSINESS_DAY_KEY, "2023-12-31")
        assert clock.advance() == "2024-01-01"

    def test_advance_from_invalid_value_starts_at_system_date(self, clock, store):
        store.save(BUSINESS_DAY_KEY, "garbage")
        assert clock.advance() == "2024-03-11"

    def test_set_rejects_invalid_day(self, clock):
        assert clock.set("nope") is False
        assert clock.set("2024-05-01") is True
        assert clock.get() == "2024-05-01"

    def test_set_rejects_unpadded_day(self, clock):
        assert clock.set("2024-1-5") is False
        assert clock.get() == "2024-03-10"

    def test_unpadded_stored_value_self_heals(self, clock, store):
        store.save(BUSINESS_DAY_KEY, "2024-1-5")
        assert clock.get() == "2024-03-10"
        assert store.load(BUSINESS_DAY_KEY, "") == "2024-03-10"
