from .items import AuctionItem, Bidder, BidRequest, BID_INCREMENT
from .errors import (
    BidRejected, ItemNotFound, AuctionClosed, ItemLocked, SelfBid, VersionConflict, StoreError,
)
from .lock_policy import LockPolicy, is_locked
from .schedule import AuctionSchedule
from .store import ItemStore, InMemoryItemStore
from .arbiter import BidArbiter
from .snapshot import SnapshotService

__all__ = [
    "AuctionItem", "Bidder", "BidRequest", "BID_INCREMENT",
    "BidRejected", "ItemNotFound", "AuctionClosed", "ItemLocked", "SelfBid", "VersionConflict", "StoreError",
    "LockPolicy", "is_locked", "AuctionSchedule", "ItemStore", "InMemoryItemStore",
    "BidArbiter", "SnapshotService",
]
