import pytest
from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

from bidding.items import AuctionItem, Bidder, BID_INCREMENT, apply_bid
from auction_server.models import AuctionItemResponse, ErrorResponse

WIRE_FIELDS = {
    "id", "name", "description", "image_url", "current_bid", "last_bidder_id",
    "last_bidder", "last_bid_time", "is_locked", "lock_expires_at", "version", "created_at",
}


def test_new_item_has_no_bids(item_factory):
    item = item_factory(1)
    assert item.version == 0
    assert item.last_bidder_id is None
    assert item.last_bid_time is None
    assert item.lock_expires_at is None
    assert item.has_bids is False


def test_item_is_immutable(item_factory):
    item = item_factory(1)
    with pytest.raises(FrozenInstanceError):
        item.current_bid = 500


def test_apply_bid_advances_price_and_version(item_factory):
    item = item_factory(1, current_bid=100)
    now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    expires = now + timedelta(seconds=5)

    updated = apply_bid(item, Bidder(id="alice", name="Alice"), now, expires)

    assert updated.current_bid == item.current_bid + BID_INCREMENT
    assert updated.version == item.version + 1
    assert updated.last_bidder_id == "alice"
    assert updated.last_bidder_name == "Alice"
    assert updated.last_bid_time == now
    assert updated.lock_expires_at == expires
    assert updated.has_bids is True
    # Descriptive fields are untouched
    assert (updated.name, updated.description, updated.image_url, updated.created_at) == (
        item.name, item.description, item.image_url, item.created_at
    )
    # Original snapshot is unchanged
    assert item.current_bid == 100
    assert item.version == 0


def test_wire_projection_of_fresh_item(item_factory):
    item = item_factory(3)
    data = AuctionItemResponse.from_item(item, datetime.now(timezone.utc)).model_dump(mode="json")

    assert set(data) == WIRE_FIELDS
    assert data["last_bidder_id"] is None
    assert data["last_bidder"] is None
    assert data["last_bid_time"] is None
    assert data["lock_expires_at"] is None
    assert data["is_locked"] is False


def test_wire_projection_derives_lock(item_factory):
    now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    item = apply_bid(item_factory(1), Bidder(id="bob", name="Bob"), now, now + timedelta(seconds=5))

    locked = AuctionItemResponse.from_item(item, now + timedelta(seconds=1))
    unlocked = AuctionItemResponse.from_item(item, now + timedelta(seconds=5))

    assert locked.is_locked is True
    assert unlocked.is_locked is False
    assert locked.last_bidder == "Bob"
    assert locked.last_bidder_id == "bob"
    assert datetime.fromisoformat(
        locked.model_dump(mode="json")["lock_expires_at"].replace("Z", "+00:00")
    ) == now + timedelta(seconds=5)


def test_error_response_defaults():
    body = ErrorResponse(error="self_bid").model_dump(mode="json", exclude_none=True)
    assert body == {"success": False, "error": "self_bid"}
