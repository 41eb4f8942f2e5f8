"""
Tests for bill arithmetic and the in-progress bill.
"""

from dinerpos.billing import bill_subtotal, deal_total, expand_deal, line_total, menu_item_label
from dinerpos.models import Deal, DealItem, MenuItem


class TestBillingCalculator:
    """Pure totals and deal expansion."""

    def test_line_and_bill_totals(self, pos, menu):
        bill = pos.new_bill("ca1")
        bill.add_menu_item(menu["B01"])
        bill.add_menu_item(menu["D01"])
        assert line_total(100, 3) == 300
        assert bill_subtotal(bill.items) == 130
        assert bill.total == bill.subtotal

    def test_deal_total(self):
        items = [DealItem("a", "A", 2, 80, 100), DealItem("b", "B", 1, 40, 50)]
        assert deal_total(items) == 200

    def test_expand_deal_uses_deal_price_and_quantity(self, menu, combo_deal):
        lines, warnings = expand_deal(combo_deal, menu.values())

        assert warnings == []
        assert [(line.menu_item_id, line.price, line.quantity, line.total_price) for line in lines] == [
            ("item-burger", 80, 2, 160),
            ("item-fries", 40, 1, 40),
        ]
        assert all(line.deal_context.deal_id == combo_deal.id for line in lines)
        assert lines[0].deal_context.original_price_per_item == 100

    def test_expand_deal_skips_missing_menu_item(self, menu):
        deal = Deal(
            id="deal-x",
            deal_number="X",
            name="Ghost Deal",
            items=[DealItem("item-gone", "Gone", 1, 10, 20), DealItem("item-cola", "Cola", 2, 25, 30)],
            calculated_total_deal_price=60,
        )
        lines, warnings = expand_deal(deal, menu.values())

        assert [line.menu_item_id for line in lines] == ["item-cola"]
        assert len(warnings) == 1
        assert "Gone" in warnings[0]

    def test_menu_item_label_falls_back(self, menu):
        assert menu_item_label("item-cola", menu.values()) == "Cola"
        assert menu_item_label("item-gone", menu.values()) == "Unknown Item"


class TestBillDraft:
    """Coalescing, quantity edits, removals and invoicing."""

    def test_same_plain_item_coalesces(self, pos, menu):
        bill = pos.new_bill("ca1")
        bill.add_menu_item(menu["B01"])
        bill.add_menu_item(menu["B01"])

        assert len(bill.items) == 1
        assert bill.items[0].quantity == 2
        assert bill.items[0].total_price == 200

    def test_price_change_starts_new_line(self, pos, menu):
        bill = pos.new_bill("ca1")
        bill.add_menu_item(menu["B01"])
        repriced = MenuItem(id="item-burger", code="B01", name="Zinger Burger", price=120)
        bill.add_menu_item(repriced)
        assert [line.price for line in bill.items] == [100, 120]

    def test_deal_and_plain_lines_stay_separate(self, pos, menu, combo_deal):
        bill = pos.new_bill("ca1")
        bill.add_deal(combo_deal, menu.values())
        bill.add_menu_item(menu["B01"])

        burger_lines = [line for line in bill.items if line.menu_item_id == "item-burger"]
        assert len(burger_lines) == 2
        assert [line.is_deal_line for line in burger_lines] == [True, False]

    def test_same_deal_twice_gives_independent_lines(self, pos, menu, combo_deal):
        bill = pos.new_bill("ca1")
        bill.add_deal(combo_deal, menu.values())
        bill.add_deal(combo_deal, menu.values())

        assert len(bill.items) == 4
        assert len({line.bill_item_id for line in bill.items}) == 4
        assert bill.subtotal == 400

    def test_quantity_to_zero_removes_and_logs_once(self, pos, menu):
        bill = pos.new_bill("ca1")
        for _ in range(3):
            bill.add_menu_item(menu["F01"])
        line_id = bill.items[0].bill_item_id

        assert bill.update_quantity(line_id, 0) is None

        assert bill.items == []
        logs = pos.list_deleted_logs()
        assert len(logs) == 1
        assert logs[0].quantity_removed == 3
        assert logs[0].price_per_item == 50
        assert logs[0].reason == "Quantity reduced to zero"
        assert logs[0].removed_by_cashier_id == "ca1"
        assert logs[0].is_deal_item is False

    def test_quantity_update_recomputes_total(self, pos, menu):
        bill = pos.new_bill("ca1")
        line = bill.add_menu_item(menu["D01"])
        bill.update_quantity(line.bill_item_id, 4)
        assert line.quantity == 4
        assert line.total_price == 120
        assert pos.list_deleted_logs() == []

    def test_remove_deal_line_logs_deal_name(self, pos, menu, combo_deal):
        bill = pos.new_bill("ca1")
        bill.add_deal(combo_deal, menu.values())
        removed = bill.remove_line(bill.items[0].bill_item_id)

        assert removed is not None
        log = pos.list_deleted_logs()[0]
        assert log.is_deal_item is True
        assert log.deal_name == "Burger Combo"
        assert log.reason == "Removed by cashier"
        assert log.quantity_removed == 2

    def test_unknown_line_is_ignored(self, pos):
        bill = pos.new_bill("ca1")
        assert bill.update_quantity("nope", 0) is None
        assert bill.remove_line("nope") is None
        assert pos.list_deleted_logs() == []

    def test_generate_invoice_records_sale(self, pos, menu):
        bill = pos.new_bill("ca1")
        bill.table_number = "7"
        bill.add_menu_item(menu["B01"])
        bill.add_menu_item(menu["F01"])

        sale = bill.generate_invoice()

        assert sale is not None
        assert sale.subtotal == 150
        assert sale.total_amount == 150
        assert sale.cashier_id == "ca1"
        assert sale.table_number == "7"
        assert sale.created_at == "2024-03-10T12:30:00.000Z"
        assert [s.id for s in pos.list_sales()] == [sale.id]
        assert bill.items == []
        assert bill.table_number is None

    def test_removal_after_invoice_references_last_bill(self, pos, menu):
        bill = pos.new_bill("ca1")
        bill.add_menu_item(menu["B01"])
        sale = bill.generate_invoice()
        line = bill.add_menu_item(menu["D01"])
        bill.remove_line(line.bill_item_id)
        assert pos.list_deleted_logs()[0].bill_id == sale.id

    def test_empty_bill_is_rejected(self, pos):
        assert pos.new_bill("ca1").generate_invoice() is None
        assert pos.list_sales() == []

    def test_missing_cashier_is_rejected(self, pos, menu):
        bill = pos.new_bill(None)
        bill.add_menu_item(menu["B01"])
        assert bill.generate_invoice() is None
        assert pos.list_sales() == []

    def test_set_details_trims_and_clears_blanks(self, pos):
        bill = pos.new_bill("ca1")
        bill.set_details(" 5 ", "Ali", "")
        assert (bill.table_number, bill.customer_name, bill.waiter_name) == ("5", "Ali", None)
        bill.set_details()
        assert bill.table_number is None
