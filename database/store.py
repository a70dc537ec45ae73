"""
SQL-backed ItemStore.

compare_and_apply is a single conditional UPDATE filtered on both id and
version. When two writers race on the same expected version the database
lets exactly one of them match the row; the other sees rowcount 0 and
reports a VersionConflict.
"""
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from bidding.errors import ItemNotFound, StoreError, VersionConflict
from bidding.items import AuctionItem
from bidding.store import Mutation, check_mutation
from .models import AuctionItemRecord

logger = logging.getLogger(__name__)

_MUTABLE_COLUMNS = (
    "current_bid",
    "version",
    "last_bidder_id",
    "last_bidder_name",
    "last_bid_time",
    "lock_expires_at",
)


def _aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite drops tzinfo; everything stored is UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def record_to_item(record: AuctionItemRecord) -> AuctionItem:
    return AuctionItem(
        id=record.id,
        name=record.name,
        description=record.description,
        image_url=record.image_url,
        current_bid=record.current_bid,
        version=record.version,
        last_bidder_id=record.last_bidder_id,
        last_bidder_name=record.last_bidder_name,
        last_bid_time=_aware(record.last_bid_time),
        lock_expires_at=_aware(record.lock_expires_at),
        created_at=_aware(record.created_at),
    )


def item_to_record(item: AuctionItem) -> AuctionItemRecord:
    return AuctionItemRecord(
        id=item.id,
        name=item.name,
        description=item.description,
        image_url=item.image_url,
        current_bid=item.current_bid,
        version=item.version,
        last_bidder_id=item.last_bidder_id,
        last_bidder_name=item.last_bidder_name,
        last_bid_time=item.last_bid_time,
        lock_expires_at=item.lock_expires_at,
        created_at=item.created_at,
    )


class SqlItemStore:
    """ItemStore over a SQLAlchemy session factory. One session per call."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def get(self, item_id: int) -> AuctionItem:
        db = self._session_factory()
        try:
            record = db.get(AuctionItemRecord, item_id)
            if record is None:
                raise ItemNotFound(item_id)
            return record_to_item(record)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to read item {item_id}: {e}") from e
        finally:
            db.close()

    def list_items(self) -> List[AuctionItem]:
        db = self._session_factory()
        try:
            records = db.execute(select(AuctionItemRecord).order_by(AuctionItemRecord.id)).scalars().all()
            return [record_to_item(r) for r in records]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list items: {e}") from e
        finally:
            db.close()

    def insert(self, item: AuctionItem) -> AuctionItem:
        db = self._session_factory()
        try:
            db.add(item_to_record(item))
            db.commit()
            return item
        except IntegrityError as e:
            db.rollback()
            raise ValueError(f"Item {item.id} already exists") from e
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"Failed to insert item {item.id}: {e}") from e
        finally:
            db.close()

    def compare_and_apply(self, item_id: int, expected_version: int, mutation: Mutation) -> AuctionItem:
        db = self._session_factory()
        try:
            record = db.get(AuctionItemRecord, item_id)
            if record is None:
                raise ItemNotFound(item_id)
            current = record_to_item(record)
            if current.version != expected_version:
                raise VersionConflict(item_id, expected_version, current.version)

            try:
                updated = mutation(current)
            except Exception as e:
                raise StoreError(f"Mutation failed for item {item_id}: {e}") from e
            check_mutation(current, updated)

            # Atomic update: only matches while the row is still at expected_version
            result = db.execute(
                update(AuctionItemRecord)
                .where(
                    AuctionItemRecord.id == item_id,
                    AuctionItemRecord.version == expected_version,
                )
                .values({column: getattr(updated, column) for column in _MUTABLE_COLUMNS})
                .execution_options(synchronize_session=False)
            )

            if result.rowcount == 0:
                db.rollback()
                db.expire_all()
                latest = db.get(AuctionItemRecord, item_id)
                if latest is None:
                    raise ItemNotFound(item_id)
                logger.info(f"Item {item_id} moved to version {latest.version} before apply")
                raise VersionConflict(item_id, expected_version, latest.version)

            db.commit()
            return updated
        except SQLAlchemyError as e:
            db.rollback()
            raise StoreError(f"Failed to apply bid to item {item_id}: {e}") from e
        finally:
            db.close()
