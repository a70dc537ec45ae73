"""
Value types for the bidding core.

AuctionItem is a frozen dataclass: every read from a store hands out an
immutable snapshot, and a mutation produces a new instance.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

BID_INCREMENT = 1


@dataclass(frozen=True)
class Bidder:
    """Authenticated identity supplied by the transport layer."""
    id: str
    name: str


@dataclass(frozen=True)
class AuctionItem:
    id: int
    name: str
    description: str
    image_url: str
    current_bid: int
    created_at: datetime
    version: int = 0
    last_bidder_id: Optional[str] = None
    last_bidder_name: Optional[str] = None
    last_bid_time: Optional[datetime] = None
    lock_expires_at: Optional[datetime] = None

    @property
    def has_bids(self) -> bool:
        return self.last_bidder_id is not None


@dataclass(frozen=True)
class BidRequest:
    item_id: int
    bidder: Bidder
    expected_version: int


def apply_bid(item: AuctionItem, bidder: Bidder, now: datetime, lock_expires_at: datetime) -> AuctionItem:
    """Return the state of ``item`` after ``bidder`` wins the next increment."""
    return replace(
        item,
        current_bid=item.current_bid + BID_INCREMENT,
        last_bidder_id=bidder.id,
        last_bidder_name=bidder.name,
        last_bid_time=now,
        version=item.version + 1,
        lock_expires_at=lock_expires_at,
    )
