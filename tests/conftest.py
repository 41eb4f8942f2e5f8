"""
Pytest configuration and fixtures for diner-pos tests.
"""

from datetime import date, datetime, timezone

import pytest

from dinerpos.models import MenuItem
from dinerpos.persistence import JsonStore
from dinerpos.pos import DealLine, PointOfSale

TODAY = date(2024, 3, 10)
NOW = datetime(2024, 3, 10, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "pos.db"


@pytest.fixture
def store(store_path):
    return JsonStore(store_path)


@pytest.fixture
def pos(store_path, tmp_path):
    """A point of sale on a fresh store with a fixed calendar."""
    return PointOfSale(
        store_path,
        today=lambda: TODAY,
        now=lambda: NOW,
        backup_dir=tmp_path / "backups",
    )


@pytest.fixture
def menu(pos):
    """Seed three menu items and return them keyed by code."""
    items = [
        MenuItem(id="item-burger", code="B01", name="Zinger Burger", price=100, category="Burgers"),
        MenuItem(id="item-fries", code="F01", name="Fries", price=50, category="Sides"),
        MenuItem(id="item-cola", code="D01", name="Cola", price=30),
    ]
    for item in items:
        pos.add_menu_item(item)
    return {item.code: item for item in items}


@pytest.fixture
def combo_deal(pos, menu):
    """An active deal: two burgers at 80 and one fries at 40."""
    return pos.create_deal(
        "D-1",
        "Burger Combo",
        [
            DealLine(menu_item_id="item-burger", quantity=2, deal_price_per_item=80),
            DealLine(menu_item_id="item-fries", quantity=1, deal_price_per_item=40),
        ],
        description="Two burgers and fries",
    )
