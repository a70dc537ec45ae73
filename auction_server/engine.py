"""Wires store, lock policy, schedule, arbiter and snapshots from settings."""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from bidding.arbiter import BidArbiter, Clock, utc_now
from bidding.catalogue import load_catalogue, seed_store
from bidding.lock_policy import LockPolicy
from bidding.schedule import AuctionSchedule
from bidding.snapshot import SnapshotService
from bidding.store import InMemoryItemStore, ItemStore
from .config import Settings

logger = logging.getLogger(__name__)


@dataclass
class AuctionEngine:
    store: ItemStore
    lock_policy: LockPolicy
    schedule: AuctionSchedule
    arbiter: BidArbiter
    snapshots: SnapshotService

    @property
    def clock(self) -> Clock:
        return self.arbiter.clock


def create_engine_for(
    store: ItemStore,
    lock_policy: Optional[LockPolicy] = None,
    schedule: Optional[AuctionSchedule] = None,
    clock: Clock = utc_now,
) -> AuctionEngine:
    lock_policy = lock_policy or LockPolicy()
    schedule = schedule or AuctionSchedule()
    return AuctionEngine(
        store=store,
        lock_policy=lock_policy,
        schedule=schedule,
        arbiter=BidArbiter(store, lock_policy, schedule, clock=clock),
        snapshots=SnapshotService(store),
    )


def build_store(settings: Settings) -> ItemStore:
    if settings.item_store_backend == "memory":
        return InMemoryItemStore()
    if settings.item_store_backend == "sql":
        from database import SqlItemStore, init_db, make_engine, make_session_factory
        engine = make_engine(settings.database_url)
        init_db(engine)
        return SqlItemStore(make_session_factory(engine))
    raise ValueError(f"unknown item store backend {settings.item_store_backend}")


def build_engine(settings: Settings) -> AuctionEngine:
    store = build_store(settings)
    if settings.seed_file:
        seed_store(store, load_catalogue(Path(settings.seed_file)))
    logger.info(
        f"Auction engine ready: backend={settings.item_store_backend} "
        f"lock_seconds={settings.lock_seconds}"
    )
    return create_engine_for(store, lock_policy=LockPolicy.from_seconds(settings.lock_seconds))
