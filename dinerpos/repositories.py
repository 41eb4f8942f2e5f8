"""Typed collection repositories over the JSON store."""

from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Generic, Iterable, TypeVar

from dinerpos.config import DEALS_KEY, DELETED_ITEMS_KEY, MENU_ITEMS_KEY, SALES_KEY
from dinerpos.models import Deal, DeletedItemLogEntry, MenuItem, SaleEntry
from dinerpos.persistence import JsonStore

logger = logging.getLogger(__name__)

E = TypeVar("E", MenuItem, SaleEntry, DeletedItemLogEntry, Deal)


def parse_records(records: Iterable[Any], parse: Callable[[Any], E]) -> list[E]:
    """Parse raw records, raising ``ValueError`` on the first bad one."""
    return [parse(record) for record in records]


class CollectionRepository(Generic[E]):
    """In-memory collection written through to one store slot.

    Reads re-sync from the store first so a cache never outlives the durable
    value it mirrors. Entities going in and out are copies, so callers never
    hold a reference into the cache.
    """

    key: str
    entity_name: str

    def __init__(self, store: JsonStore, parse: Callable[[Any], E]) -> None:
        self.store = store
        self._parse = parse
        self._items: list[E] = []
        self.refresh()

    def refresh(self) -> None:
        """Reload the in-memory collection from the store."""
        raw = self.store.load(self.key, [])
        items: list[E] = []
        for record in raw:
            try:
                items.append(self._parse(record))
            except ValueError as exc:
                logger.warning("record_skipped key=%s reason=%s", self.key, exc)
        self._items = items

    def _detached(self, entity: E) -> E:
        return copy.deepcopy(entity)

    def _sync(self) -> None:
        if self.store.available:
            self.refresh()

    def _persist(self) -> None:
        self.store.save(self.key, [item.to_dict() for item in self._items])

    def _index_of(self, entity_id: str) -> int | None:
        for idx, item in enumerate(self._items):
            if item.id == entity_id:
                return idx
        return None

    def list(self) -> list[E]:
        self._sync()
        return [self._detached(item) for item in self._items]

    def get(self, entity_id: str) -> E | None:
        self._sync()
        idx = self._index_of(entity_id)
        if idx is None:
            return None
        return self._detached(self._items[idx])

    def add(self, entity: E) -> E | None:
        self._sync()
        self._items.append(self._detached(entity))
        self._persist()
        logger.info("%s_added id=%s", self.entity_name, entity.id)
        return entity

    def update(self, entity: E) -> E | None:
        self._sync()
        idx = self._index_of(entity.id)
        if idx is None:
            return None
        self._items[idx] = self._detached(entity)
        self._persist()
        logger.info("%s_updated id=%s", self.entity_name, entity.id)
        return entity

    def remove(self, entity_id: str) -> E | None:
        self._sync()
        idx = self._index_of(entity_id)
        if idx is None:
            return None
        removed = self._items.pop(idx)
        self._persist()
        logger.info("%s_removed id=%s", self.entity_name, entity_id)
        return removed

    def replace_all(self, entities: Iterable[E]) -> None:
        """Swap the whole collection, then persist it."""
        self._items = [self._detached(entity) for entity in entities]
        self._persist()

    def to_records(self) -> list[dict[str, Any]]:
        return [item.to_dict() for item in self.list()]


class MenuItemRepository(CollectionRepository[MenuItem]):
    key = MENU_ITEMS_KEY
    entity_name = "menu_item"

    def __init__(self, store: JsonStore) -> None:
        super().__init__(store, MenuItem.from_dict)


class SaleRepository(CollectionRepository[SaleEntry]):
    key = SALES_KEY
    entity_name = "sale"

    def __init__(self, store: JsonStore) -> None:
        super().__init__(store, SaleEntry.from_dict)

    def clear(self) -> None:
        self._items = []
        self._persist()
        logger.info("sales_cleared")


class DeletedItemLogRepository(CollectionRepository[DeletedItemLogEntry]):
    key = DELETED_ITEMS_KEY
    entity_name = "deleted_item_log"

    def __init__(self, store: JsonStore) -> None:
        super().__init__(store, DeletedItemLogEntry.from_dict)


class DealRepository(CollectionRepository[Deal]):
    key = DEALS_KEY
    entity_name = "deal"

    def __init__(self, store: JsonStore) -> None:
        super().__init__(store, Deal.from_dict)

    def _number_taken(self, deal_number: str, exclude_id: str | None = None) -> bool:
        return any(d.deal_number == deal_number and d.id != exclude_id for d in self._items)

    def add(self, entity: Deal) -> Deal | None:
        self._sync()
        if self._number_taken(entity.deal_number):
            logger.warning("deal_rejected reason=duplicate_number deal_number=%s", entity.deal_number)
            return None
        return super().add(entity)

    def update(self, entity: Deal) -> Deal | None:
        self._sync()
        if self._index_of(entity.id) is None:
            return None
        if self._number_taken(entity.deal_number, exclude_id=entity.id):
            logger.warning("deal_rejected reason=duplicate_number deal_number=%s", entity.deal_number)
            return None
        return super().update(entity)
