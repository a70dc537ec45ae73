"""
Authoritative item state.

InMemoryItemStore serializes mutations per item: each item owns a
``threading.Lock`` created when the item is inserted, so bids on
different items never wait on each other. Readers take no lock at all;
they read the current immutable AuctionItem reference.
"""
import threading
import logging
from typing import Callable, Dict, List, Protocol

from .errors import ItemNotFound, StoreError, VersionConflict
from .items import AuctionItem

logger = logging.getLogger(__name__)

Mutation = Callable[[AuctionItem], AuctionItem]


class ItemStore(Protocol):
    def get(self, item_id: int) -> AuctionItem: ...

    def list_items(self) -> List[AuctionItem]: ...

    def insert(self, item: AuctionItem) -> AuctionItem: ...

    def compare_and_apply(self, item_id: int, expected_version: int, mutation: Mutation) -> AuctionItem: ...


def check_mutation(before: AuctionItem, after: AuctionItem) -> None:
    """Reject mutations that would break the version/identity invariants."""
    if after.id != before.id:
        raise StoreError(f"Mutation changed item id {before.id} -> {after.id}")
    if after.version != before.version + 1:
        raise StoreError(
            f"Mutation on item {before.id} must advance version by 1 "
            f"({before.version} -> {after.version})"
        )


class InMemoryItemStore:
    """Process-local ItemStore with per-item exclusive writers."""

    def __init__(self):
        self._items: Dict[int, AuctionItem] = {}
        self._item_locks: Dict[int, threading.Lock] = {}
        self._registry_lock = threading.Lock()  # Guards insertion into the two dicts

    def get(self, item_id: int) -> AuctionItem:
        item = self._items.get(item_id)
        if item is None:
            raise ItemNotFound(item_id)
        return item

    def list_items(self) -> List[AuctionItem]:
        return list(self._items.values())

    def insert(self, item: AuctionItem) -> AuctionItem:
        with self._registry_lock:
            if item.id in self._items:
                raise ValueError(f"Item {item.id} already exists")
            self._item_locks[item.id] = threading.Lock()
            self._items[item.id] = item
        return item

    def compare_and_apply(self, item_id: int, expected_version: int, mutation: Mutation) -> AuctionItem:
        """
        Apply ``mutation`` if the stored version still equals ``expected_version``.

        Raises:
            ItemNotFound: unknown item
            VersionConflict: stored version moved on; nothing is written
            StoreError: the mutation raised or broke the version invariant
        """
        item_lock = self._item_locks.get(item_id)
        if item_lock is None:
            raise ItemNotFound(item_id)

        with item_lock:
            current = self._items[item_id]
            if current.version != expected_version:
                raise VersionConflict(item_id, expected_version, current.version)
            try:
                updated = mutation(current)
            except Exception as e:
                raise StoreError(f"Mutation failed for item {item_id}: {e}") from e
            check_mutation(current, updated)
            self._items[item_id] = updated

        logger.debug(f"Item {item_id} advanced to version {updated.version}")
        return updated
