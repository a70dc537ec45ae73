"""
Bid arbitration.

The arbiter validates a bid against a snapshot of the item and then hands
the write to the store's compare-and-apply. The arbiter never re-checks
the version after reading: a bid that lands between the read and the
apply is caught by the store, which is the only place a race is decided.
"""
import logging
from datetime import datetime, timezone
from functools import partial
from typing import Callable

from .errors import AuctionClosed, ItemLocked, SelfBid, VersionConflict
from .items import AuctionItem, BidRequest, Bidder, apply_bid
from .lock_policy import LockPolicy
from .schedule import AuctionSchedule
from .store import ItemStore

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BidArbiter:
    """Accepts at most one bid per item version."""

    def __init__(
        self,
        store: ItemStore,
        lock_policy: LockPolicy,
        schedule: AuctionSchedule,
        clock: Clock = utc_now,
    ):
        self.store = store
        self.lock_policy = lock_policy
        self.schedule = schedule
        self.clock = clock

    def place_bid(self, item_id: int, bidder: Bidder, expected_version: int) -> AuctionItem:
        """
        Place one bid. Checks run in a fixed order and the first failure wins:
        not_found, closed, locked, self_bid, version_conflict.

        Returns the updated item snapshot. Raises a BidRejected subclass on
        rejection; rejected bids never write to the store.
        """
        now = self.clock()
        item = self.store.get(item_id)

        if not self.schedule.is_open(item_id, now):
            raise AuctionClosed(item_id)

        if self.lock_policy.is_locked(item.lock_expires_at, now):
            raise ItemLocked(
                item_id,
                item.lock_expires_at,
                retry_after=self.lock_policy.seconds_remaining(item.lock_expires_at, now),
            )

        if item.last_bidder_id is not None and bidder.id == item.last_bidder_id:
            raise SelfBid(item_id, bidder.id)

        if expected_version != item.version:
            raise VersionConflict(item_id, expected_version, item.version)

        mutation = partial(
            apply_bid,
            bidder=bidder,
            now=now,
            lock_expires_at=self.lock_policy.start_lock(now),
        )
        updated = self.store.compare_and_apply(item_id, expected_version, mutation)

        logger.info(
            f"Bid accepted on item {item_id} by {bidder.id}: "
            f"current_bid={updated.current_bid} version={updated.version}"
        )
        return updated

    def submit(self, request: BidRequest) -> AuctionItem:
        return self.place_bid(request.item_id, request.bidder, request.expected_version)
