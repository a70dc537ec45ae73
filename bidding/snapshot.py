"""Read-only projection of the store for polling clients."""
from typing import List

from .items import AuctionItem
from .store import ItemStore


class SnapshotService:
    def __init__(self, store: ItemStore):
        self.store = store

    def get_all(self) -> List[AuctionItem]:
        """All items ordered by id. Each item is read independently."""
        return sorted(self.store.list_items(), key=lambda item: item.id)

    def get_one(self, item_id: int) -> AuctionItem:
        return self.store.get(item_id)
