"""Pure bill arithmetic and deal expansion."""

from __future__ import annotations

from typing import Iterable
from uuid import uuid4

from dinerpos.config import UNKNOWN_ITEM_LABEL
from dinerpos.models import BillItem, Deal, DealContext, DealItem, MenuItem


def new_id(prefix: str) -> str:
    """Return a fresh identifier such as ``bill3f2a...``."""
    return f"{prefix}{uuid4().hex[:12]}"


def line_total(unit_price: float, quantity: int) -> float:
    return unit_price * quantity


def bill_subtotal(items: Iterable[BillItem]) -> float:
    return sum((item.total_price for item in items), 0)


def deal_total(items: Iterable[DealItem]) -> float:
    """Sum of quantity x deal price, computed when a deal is saved."""
    return sum((item.quantity * item.deal_price_per_item for item in items), 0)


def find_menu_item(menu_item_id: str, menu_items: Iterable[MenuItem]) -> MenuItem | None:
    for item in menu_items:
        if item.id == menu_item_id:
            return item
    return None


def menu_item_label(menu_item_id: str, menu_items: Iterable[MenuItem]) -> str:
    item = find_menu_item(menu_item_id, menu_items)
    if item is None:
        return UNKNOWN_ITEM_LABEL
    return item.name


def bill_item_from_menu_item(item: MenuItem, quantity: int = 1) -> BillItem:
    return BillItem(
        bill_item_id=new_id(f"billItem_{item.id}_"),
        menu_item_id=item.id,
        code=item.code,
        name=item.name,
        price=item.price,
        quantity=quantity,
        total_price=line_total(item.price, quantity),
        category=item.category,
    )


def expand_deal(deal: Deal, menu_items: Iterable[MenuItem]) -> tuple[list[BillItem], list[str]]:
    """Turn a deal into bill lines, one per deal item at its defined quantity.

    Deal items whose menu item no longer exists are skipped and reported in
    the returned warnings; the rest of the deal is still expanded.
    """
    menu_items = list(menu_items)
    lines: list[BillItem] = []
    warnings: list[str] = []
    for deal_item in deal.items:
        base = find_menu_item(deal_item.menu_item_id, menu_items)
        if base is None:
            warnings.append(f"Menu item {deal_item.name} in deal not found. Skipping.")
            continue
        lines.append(
            BillItem(
                bill_item_id=new_id(f"billItem_deal_{deal_item.menu_item_id}_"),
                menu_item_id=base.id,
                code=base.code,
                name=base.name,
                price=deal_item.deal_price_per_item,
                quantity=deal_item.quantity,
                total_price=line_total(deal_item.deal_price_per_item, deal_item.quantity),
                category=base.category,
                deal_context=DealContext(
                    deal_id=deal.id,
                    deal_name=deal.name,
                    original_price_per_item=deal_item.original_price_per_item,
                ),
            )
        )
    return lines, warnings
