"""
Tests for backup, restore and reset.
"""

import copy
import json

import pytest

from dinerpos.config import BUSINESS_DAY_KEY, DEALS_KEY, MENU_ITEMS_KEY, SALES_KEY
from dinerpos.persistence import JsonStore
from dinerpos.pos import PointOfSale


@pytest.fixture
def populated(pos, menu, combo_deal):
    """A store with menu items, a deal, a sale and a deletion log."""
    bill = pos.new_bill("ca1")
    bill.add_deal(combo_deal, pos.list_menu_items())
    bill.add_menu_item(menu["D01"])
    bill.add_menu_item(menu["F01"])
    bill.remove_line(bill.items[-1].bill_item_id)
    bill.generate_invoice()
    pos.advance_day()
    return pos


class TestExportAll:
    """The bundle shape."""

    def test_bundle_has_exactly_the_five_fields(self, populated):
        bundle = populated.export_all()
        assert set(bundle) == {"menuItems", "sales", "deletedItemLogs", "deals", "currentBusinessDay"}
        assert len(bundle["menuItems"]) == 3
        assert len(bundle["sales"]) == 1
        assert len(bundle["deletedItemLogs"]) == 1
        assert len(bundle["deals"]) == 1
        assert bundle["currentBusinessDay"] == "2024-03-11"

    def test_bundle_uses_camel_case_records(self, populated):
        sale = populated.export_all()["sales"][0]
        assert sale["cashierId"] == "ca1"
        assert sale["totalAmount"] == sale["subtotal"]
        assert sale["items"][0]["dealContext"]["dealName"] == "Burger Combo"


class TestRestore:
    """Validation and replacement of the full data set."""

    def test_round_trip_is_identical(self, populated):
        before = populated.export_all()
        assert populated.restore(copy.deepcopy(before)) is True
        assert json.dumps(populated.export_all()) == json.dumps(before)

    def test_restore_into_fresh_store(self, populated, tmp_path):
        bundle = populated.export_all()
        other = PointOfSale(tmp_path / "other.db")
        assert other.restore(bundle) is True
        assert other.export_all() == bundle

        store = JsonStore(tmp_path / "other.db")
        assert store.load(BUSINESS_DAY_KEY, "") == "2024-03-11"
        assert len(store.load(SALES_KEY, [])) == 1

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda b: b.pop("deals"),
            lambda b: b.update(sales={"not": "a list"}),
            lambda b: b.update(menuItems=None),
            lambda b: b.update(currentBusinessDay=""),
            lambda b: b.update(currentBusinessDay="not-a-date"),
            lambda b: b.update(currentBusinessDay=20240101),
            lambda b: b.update(currentBusinessDay="2024-1-5"),
            lambda b: b["menuItems"].append({"id": "broken"}),
            lambda b: b["menuItems"].append({"id": "m9", "code": "X9", "name": "Tea", "price": -1}),
            lambda b: b["deals"].append(
                {
                    "id": "deal-bad",
                    "dealNumber": "D-9",
                    "name": "Bad",
                    "items": [
                        {
                            "menuItemId": "item-cola",
                            "name": "Cola",
                            "quantity": -2.5,
                            "dealPricePerItem": -1,
                            "originalPricePerItem": 30,
                        }
                    ],
                    "calculatedTotalDealPrice": 2.5,
                    "isActive": True,
                }
            ),
        ],
    )
    def test_invalid_bundle_is_rejected_without_changes(self, populated, store, mutate):
        before = populated.export_all()
        bundle = copy.deepcopy(before)
        bundle["menuItems"] = []
        bundle["deals"] = []
        mutate(bundle)

        assert populated.restore(bundle) is False
        assert populated.export_all() == before
        assert len(store.load(MENU_ITEMS_KEY, [])) == 3
        assert len(store.load(DEALS_KEY, [])) == 1

    @pytest.mark.parametrize("bundle", [None, [], "backup", 42])
    def test_non_object_bundle_is_rejected(self, pos, bundle):
        assert pos.restore(bundle) is False


class TestReset:
    """Reset to empty defaults."""

    def test_reset_empties_everything(self, populated, store):
        populated.reset()

        bundle = populated.export_all()
        assert bundle == {
            "menuItems": [],
            "sales": [],
            "deletedItemLogs": [],
            "deals": [],
            "currentBusinessDay": "2024-03-10",
        }
        assert store.load(SALES_KEY, ["x"]) == []
        assert store.load(BUSINESS_DAY_KEY, "") == "2024-03-10"


class TestBackupFiles:
    """Writing and reading backup files."""

    def test_write_then_restore_from_file(self, populated, tmp_path):
        path = populated.write_backup(tmp_path / "manual")
        assert path is not None
        assert path.name.startswith("pos_backup_")
        assert not path.name.startswith("pos_backup_auto_")

        before = populated.export_all()
        populated.reset()
        assert populated.restore_from_file(path) is True
        assert populated.export_all() == before

    def test_end_of_day_writes_auto_backup(self, populated, tmp_path):
        day, path = populated.end_business_day()
        assert day == "2024-03-12"
        assert path is not None
        assert path.parent == tmp_path / "backups"
        assert path.name.startswith("pos_backup_auto_")
        assert json.loads(path.read_text(encoding="utf-8"))["currentBusinessDay"] == "2024-03-12"

    def test_unreadable_file_is_rejected(self, pos, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("{ not json", encoding="utf-8")
        assert pos.restore_from_file(bad) is False
        assert pos.restore_from_file(tmp_path / "missing.json") is False
