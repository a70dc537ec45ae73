"""Typed bid outcomes. Every rejection carries a stable wire code."""
from datetime import datetime
from typing import Optional


class BidRejected(Exception):
    """Base class for expected rejections of a bid request."""

    code = "rejected"
    retryable = False

    def __init__(self, item_id: int, message: Optional[str] = None):
        self.item_id = item_id
        super().__init__(message or f"Bid on item {item_id} rejected: {self.code}")


class ItemNotFound(BidRejected):
    code = "not_found"

    def __init__(self, item_id: int):
        super().__init__(item_id, f"Item {item_id} not found")


class AuctionClosed(BidRejected):
    code = "closed"

    def __init__(self, item_id: int):
        super().__init__(item_id, f"Auction for item {item_id} is closed")


class ItemLocked(BidRejected):
    code = "locked"
    retryable = True

    def __init__(self, item_id: int, lock_expires_at: datetime, retry_after: float = 0.0):
        self.lock_expires_at = lock_expires_at
        self.retry_after = retry_after
        super().__init__(item_id, f"Item {item_id} is locked until {lock_expires_at.isoformat()}")


class SelfBid(BidRejected):
    code = "self_bid"

    def __init__(self, item_id: int, bidder_id: str):
        self.bidder_id = bidder_id
        super().__init__(item_id, f"Bidder {bidder_id} already holds the highest bid on item {item_id}")


class VersionConflict(BidRejected):
    code = "version_conflict"
    retryable = True

    def __init__(self, item_id: int, expected_version: int, current_version: int):
        self.expected_version = expected_version
        self.current_version = current_version
        super().__init__(
            item_id,
            f"Item {item_id} is at version {current_version}, bid expected {expected_version}",
        )


class StoreError(Exception):
    """Unexpected failure inside an item store. Never shown to callers verbatim."""

    code = "internal"
