"""Domain models for diner-pos.

Every model round-trips through the camelCase JSON shape used by storage and
backup files. Optional fields that are unset are left out of ``to_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{key} must be a string")
    return value


def _require_number(data: Mapping[str, Any], key: str) -> float:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key} must be a number")
    return value


def _require_price(data: Mapping[str, Any], key: str) -> float:
    value = _require_number(data, key)
    if value < 0:
        raise ValueError(f"{key} must not be negative")
    return value


def _require_quantity(data: Mapping[str, Any], key: str) -> int:
    value = _require_number(data, key)
    if (isinstance(value, float) and not value.is_integer()) or value < 1:
        raise ValueError(f"{key} must be a positive whole number")
    return int(value)


def _optional_number(data: Mapping[str, Any], key: str) -> float | None:
    if data.get(key) is None:
        return None
    return _require_number(data, key)


def _require_list(data: Mapping[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list")
    return value


def _check_mapping(data: Any, kind: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"{kind} record must be an object")
    return data


def _drop_none(payload: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


@dataclass
class MenuItem:
    """A sellable menu item at its standard price."""

    id: str
    code: str
    name: str
    price: float
    category: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {"id": self.id, "code": self.code, "name": self.name, "price": self.price, "category": self.category}
        )

    @classmethod
    def from_dict(cls, data: Any) -> MenuItem:
        data = _check_mapping(data, "MenuItem")
        return cls(
            id=_require_str(data, "id"),
            code=_require_str(data, "code"),
            name=_require_str(data, "name"),
            price=_require_price(data, "price"),
            category=_optional_str(data, "category"),
        )


@dataclass
class DealItem:
    """One menu item inside a deal definition.

    ``name`` and ``original_price_per_item`` are snapshots taken when the deal
    was authored.
    """

    menu_item_id: str
    name: str
    quantity: int
    deal_price_per_item: float
    original_price_per_item: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "menuItemId": self.menu_item_id,
            "name": self.name,
            "quantity": self.quantity,
            "dealPricePerItem": self.deal_price_per_item,
            "originalPricePerItem": self.original_price_per_item,
        }

    @classmethod
    def from_dict(cls, data: Any) -> DealItem:
        data = _check_mapping(data, "DealItem")
        return cls(
            menu_item_id=_require_str(data, "menuItemId"),
            name=_require_str(data, "name"),
            quantity=_require_quantity(data, "quantity"),
            deal_price_per_item=_require_price(data, "dealPricePerItem"),
            original_price_per_item=_require_price(data, "originalPricePerItem"),
        )


@dataclass
class Deal:
    """A bundle of menu items sold together at per-item deal prices."""

    id: str
    deal_number: str
    name: str
    items: list[DealItem]
    calculated_total_deal_price: float
    is_active: bool = True
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "dealNumber": self.deal_number,
                "name": self.name,
                "description": self.description,
                "items": [item.to_dict() for item in self.items],
                "calculatedTotalDealPrice": self.calculated_total_deal_price,
                "isActive": self.is_active,
            }
        )

    @classmethod
    def from_dict(cls, data: Any) -> Deal:
        data = _check_mapping(data, "Deal")
        is_active = data.get("isActive", True)
        if not isinstance(is_active, bool):
            raise ValueError("isActive must be a boolean")
        return cls(
            id=_require_str(data, "id"),
            deal_number=_require_str(data, "dealNumber"),
            name=_require_str(data, "name"),
            description=_optional_str(data, "description"),
            items=[DealItem.from_dict(item) for item in _require_list(data, "items")],
            calculated_total_deal_price=_require_number(data, "calculatedTotalDealPrice"),
            is_active=is_active,
        )


@dataclass
class DealContext:
    """Marks a bill line as coming from a deal."""

    deal_id: str
    deal_name: str
    original_price_per_item: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "dealId": self.deal_id,
                "dealName": self.deal_name,
                "originalPricePerItem": self.original_price_per_item,
            }
        )

    @classmethod
    def from_dict(cls, data: Any) -> DealContext:
        data = _check_mapping(data, "DealContext")
        return cls(
            deal_id=_require_str(data, "dealId"),
            deal_name=_require_str(data, "dealName"),
            original_price_per_item=_optional_number(data, "originalPricePerItem"),
        )


@dataclass
class BillItem:
    """A line on a bill, charged at ``price`` per unit."""

    bill_item_id: str
    menu_item_id: str
    code: str
    name: str
    price: float
    quantity: int
    total_price: float
    category: str | None = None
    deal_context: DealContext | None = None

    @property
    def is_deal_line(self) -> bool:
        return self.deal_context is not None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "billItemId": self.bill_item_id,
                "menuItemId": self.menu_item_id,
                "code": self.code,
                "name": self.name,
                "price": self.price,
                "quantity": self.quantity,
                "totalPrice": self.total_price,
                "category": self.category,
                "dealContext": self.deal_context.to_dict() if self.deal_context else None,
            }
        )

    @classmethod
    def from_dict(cls, data: Any) -> BillItem:
        data = _check_mapping(data, "BillItem")
        context = data.get("dealContext")
        return cls(
            bill_item_id=_require_str(data, "billItemId"),
            menu_item_id=_require_str(data, "menuItemId"),
            code=_require_str(data, "code"),
            name=_require_str(data, "name"),
            price=_require_price(data, "price"),
            quantity=_require_quantity(data, "quantity"),
            total_price=_require_number(data, "totalPrice"),
            category=_optional_str(data, "category"),
            deal_context=DealContext.from_dict(context) if context is not None else None,
        )


@dataclass
class SaleEntry:
    """A bill committed to the sales ledger."""

    id: str
    items: list[BillItem]
    subtotal: float
    total_amount: float
    created_at: str
    cashier_id: str
    table_number: str | None = None
    customer_name: str | None = None
    waiter_name: str | None = None
    tax: float | None = None
    discount: float | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "tableNumber": self.table_number,
                "customerName": self.customer_name,
                "waiterName": self.waiter_name,
                "items": [item.to_dict() for item in self.items],
                "subtotal": self.subtotal,
                "tax": self.tax,
                "discount": self.discount,
                "totalAmount": self.total_amount,
                "createdAt": self.created_at,
                "cashierId": self.cashier_id,
            }
        )

    @classmethod
    def from_dict(cls, data: Any) -> SaleEntry:
        data = _check_mapping(data, "SaleEntry")
        return cls(
            id=_require_str(data, "id"),
            table_number=_optional_str(data, "tableNumber"),
            customer_name=_optional_str(data, "customerName"),
            waiter_name=_optional_str(data, "waiterName"),
            items=[BillItem.from_dict(item) for item in _require_list(data, "items")],
            subtotal=_require_number(data, "subtotal"),
            tax=_optional_number(data, "tax"),
            discount=_optional_number(data, "discount"),
            total_amount=_require_number(data, "totalAmount"),
            created_at=_require_str(data, "createdAt"),
            cashier_id=_require_str(data, "cashierId"),
        )


# A committed bill and a sale share one shape.
Bill = SaleEntry


@dataclass
class DeletedItemLogEntry:
    """Audit record for a line a cashier removed from a bill."""

    id: str
    menu_item_id: str
    item_name: str
    item_code: str
    quantity_removed: int
    price_per_item: float
    removed_by_cashier_id: str
    timestamp: str
    bill_id: str | None = None
    reason: str | None = None
    is_deal_item: bool | None = None
    deal_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _drop_none(
            {
                "id": self.id,
                "menuItemId": self.menu_item_id,
                "itemName": self.item_name,
                "itemCode": self.item_code,
                "quantityRemoved": self.quantity_removed,
                "pricePerItem": self.price_per_item,
                "removedByCashierId": self.removed_by_cashier_id,
                "billId": self.bill_id,
                "timestamp": self.timestamp,
                "reason": self.reason,
                "isDealItem": self.is_deal_item,
                "dealName": self.deal_name,
            }
        )

    @classmethod
    def from_dict(cls, data: Any) -> DeletedItemLogEntry:
        data = _check_mapping(data, "DeletedItemLogEntry")
        is_deal_item = data.get("isDealItem")
        if is_deal_item is not None and not isinstance(is_deal_item, bool):
            raise ValueError("isDealItem must be a boolean")
        return cls(
            id=_require_str(data, "id"),
            menu_item_id=_require_str(data, "menuItemId"),
            item_name=_require_str(data, "itemName"),
            item_code=_require_str(data, "itemCode"),
            quantity_removed=_require_number(data, "quantityRemoved"),
            price_per_item=_require_number(data, "pricePerItem"),
            removed_by_cashier_id=_require_str(data, "removedByCashierId"),
            timestamp=_require_str(data, "timestamp"),
            bill_id=_optional_str(data, "billId"),
            reason=_optional_str(data, "reason"),
            is_deal_item=is_deal_item,
            deal_name=_optional_str(data, "dealName"),
        )


@dataclass(frozen=True)
class User:
    """A login identity from the fixed user table."""

    id: str
    username: str
    role: str


@dataclass
class DashboardSummary:
    """Headline figures for the admin overview."""

    business_day: str
    total_sales_amount: float
    sales_count: int
    menu_item_count: int
    deleted_log_count: int
    recent_sales: list[SaleEntry] = field(default_factory=list)
