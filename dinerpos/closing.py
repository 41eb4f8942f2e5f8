"""End-of-day cash reconciliation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from dinerpos.models import SaleEntry

BALANCED = "balanced"
SHORTAGE = "shortage"
OVERAGE = "overage"


@dataclass(frozen=True)
class ClosingAmounts:
    """Amounts a cashier accounts for at closing."""

    cash: float = 0
    expenses: float = 0
    other: float = 0
    returns: float = 0

    @property
    def total(self) -> float:
        return self.cash + self.expenses + self.other + self.returns

    def has_negative(self) -> bool:
        return any(amount < 0 for amount in (self.cash, self.expenses, self.other, self.returns))


@dataclass(frozen=True)
class ClosingResult:
    cashier_id: str
    business_date: date
    system_total: float
    submitted_total: float
    difference: float
    status: str


def sale_date(sale: SaleEntry) -> date | None:
    """Calendar day of the sale's stored timestamp."""
    try:
        return datetime.fromisoformat(sale.created_at.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def system_total_for(sales: Iterable[SaleEntry], cashier_id: str, business_date: date) -> float:
    return sum(
        (sale.total_amount for sale in sales if sale.cashier_id == cashier_id and sale_date(sale) == business_date),
        0,
    )


def classify(difference: float) -> str:
    if difference == 0:
        return BALANCED
    if difference > 0:
        return SHORTAGE
    return OVERAGE


def reconcile(
    sales: Iterable[SaleEntry],
    cashier_id: str,
    business_date: date,
    amounts: ClosingAmounts,
) -> ClosingResult | None:
    """Compare recorded sales against submitted amounts.

    A positive difference means the system recorded more than was accounted
    for. Returns None when any submitted amount is negative.
    """
    if amounts.has_negative():
        return None

    system_total = round(system_total_for(sales, cashier_id, business_date), 2)
    submitted_total = round(amounts.total, 2)
    difference = round(system_total - submitted_total, 2)
    return ClosingResult(
        cashier_id=cashier_id,
        business_date=business_date,
        system_total=system_total,
        submitted_total=submitted_total,
        difference=difference,
        status=classify(difference),
    )
