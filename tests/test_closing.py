"""
Tests for closing reconciliation.
"""

from datetime import date

import pytest

from dinerpos.closing import BALANCED, OVERAGE, SHORTAGE, ClosingAmounts, reconcile, sale_date
from dinerpos.models import SaleEntry


def _sale(sale_id, total, cashier="ca1", created_at="2024-03-10T09:15:00.000Z"):
    return SaleEntry(
        id=sale_id,
        items=[],
        subtotal=total,
        total_amount=total,
        created_at=created_at,
        cashier_id=cashier,
    )


SALES = [
    _sale("b1", 600),
    _sale("b2", 400, created_at="2024-03-10T22:59:00.000Z"),
    _sale("b3", 999, cashier="ca2"),
    _sale("b4", 250, created_at="2024-03-09T23:00:00.000Z"),
]


class TestReconcile:
    """Classification of the signed difference."""

    @pytest.mark.parametrize(
        "cash, expected_difference, expected_status",
        [(1000, 0, BALANCED), (800, 200, SHORTAGE), (1200, -200, OVERAGE)],
    )
    def test_classification(self, cash, expected_difference, expected_status):
        result = reconcile(SALES, "ca1", date(2024, 3, 10), ClosingAmounts(cash=cash))

        assert result.system_total == 1000
        assert result.submitted_total == cash
        assert result.difference == expected_difference
        assert result.status == expected_status

    def test_submitted_components_are_summed(self):
        amounts = ClosingAmounts(cash=700, expenses=150, other=100, returns=50)
        result = reconcile(SALES, "ca1", date(2024, 3, 10), amounts)
        assert result.submitted_total == 1000
        assert result.status == BALANCED

    def test_only_matching_cashier_and_day_count(self):
        assert reconcile(SALES, "ca2", date(2024, 3, 10), ClosingAmounts()).system_total == 999
        assert reconcile(SALES, "ca1", date(2024, 3, 9), ClosingAmounts()).system_total == 250
        assert reconcile(SALES, "ca1", date(2024, 3, 11), ClosingAmounts()).system_total == 0

    def test_negative_amount_is_rejected(self):
        assert reconcile(SALES, "ca1", date(2024, 3, 10), ClosingAmounts(cash=1000, returns=-1)) is None

    def test_float_noise_still_balances(self):
        sales = [_sale("c1", 0.1), _sale("c2", 0.2)]
        result = reconcile(sales, "ca1", date(2024, 3, 10), ClosingAmounts(cash=0.3))
        assert result.status == BALANCED

    def test_unparseable_timestamp_is_ignored(self):
        assert sale_date(_sale("bad", 10, created_at="yesterday")) is None
        result = reconcile([_sale("bad", 10, created_at="yesterday")], "ca1", date(2024, 3, 10), ClosingAmounts())
        assert result.system_total == 0
