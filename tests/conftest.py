import pytest
import os
import tempfile
from datetime import datetime, timedelta, timezone
from sqlalchemy import create_engine
import jwt

# Set test settings before any app imports
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ITEM_STORE_BACKEND"] = "memory"
os.environ.pop("AUCTION_SEED_FILE", None)

from bidding.items import AuctionItem, Bidder
from bidding.lock_policy import LockPolicy
from bidding.schedule import AuctionSchedule
from bidding.store import InMemoryItemStore
from bidding.arbiter import BidArbiter
from database.models import Base
from database.session import make_session_factory
from database.store import SqlItemStore

START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
LOCK_SECONDS = 5


class FakeClock:
    """Adjustable server clock."""

    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float):
        self.now = self.now + timedelta(seconds=seconds)


def make_item(item_id: int = 1, current_bid: int = 100, **overrides) -> AuctionItem:
    fields = dict(
        id=item_id,
        name=f"Item {item_id}",
        description=f"Description of item {item_id}",
        image_url=f"https://images.example.com/{item_id}.jpg",
        current_bid=current_bid,
        created_at=START - timedelta(days=1),
    )
    fields.update(overrides)
    return AuctionItem(**fields)


def make_token(bidder_id: str, name: str = None) -> str:
    payload = {
        "sub": bidder_id,
        "name": name or bidder_id.title(),
        "exp": datetime.now(timezone.utc) + timedelta(days=1),
    }
    return jwt.encode(payload, "test-secret-key", algorithm="HS256")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def lock_policy():
    return LockPolicy(timedelta(seconds=LOCK_SECONDS))


@pytest.fixture
def schedule():
    return AuctionSchedule()


@pytest.fixture
def store():
    """In-memory store with two fresh items."""
    item_store = InMemoryItemStore()
    item_store.insert(make_item(1, current_bid=100))
    item_store.insert(make_item(2, current_bid=50))
    return item_store


@pytest.fixture
def arbiter(store, lock_policy, schedule, clock):
    return BidArbiter(store, lock_policy, schedule, clock=clock)


@pytest.fixture
def alice():
    return Bidder(id="alice", name="Alice")


@pytest.fixture
def bob():
    return Bidder(id="bob", name="Bob")


@pytest.fixture
def carol():
    return Bidder(id="carol", name="Carol")


@pytest.fixture(scope="function")
def db_engine():
    """File-based SQLite engine, one database per test."""
    test_db = tempfile.NamedTemporaryFile(delete=False, suffix='.db')
    test_db.close()

    engine = create_engine(f"sqlite:///{test_db.name}", connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    try:
        os.unlink(test_db.name)
    except OSError:
        pass


@pytest.fixture
def sql_store(db_engine):
    item_store = SqlItemStore(make_session_factory(db_engine))
    item_store.insert(make_item(1, current_bid=100))
    item_store.insert(make_item(2, current_bid=50))
    return item_store


@pytest.fixture
def engine(store, lock_policy, schedule, clock):
    from auction_server.engine import create_engine_for
    return create_engine_for(store, lock_policy=lock_policy, schedule=schedule, clock=clock)


@pytest.fixture
def client(engine):
    """Test client with the auction engine overridden."""
    from fastapi.testclient import TestClient
    from auction_server.api import app, get_engine

    app.dependency_overrides.clear()
    app.dependency_overrides[get_engine] = lambda: engine
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token('alice', 'Alice')}"}


@pytest.fixture
def bob_headers():
    return {"Authorization": f"Bearer {make_token('bob', 'Bob')}"}


@pytest.fixture
def cli_home(tmp_path, monkeypatch):
    """Point the CLI config directory at a temporary folder."""
    import auction_cli.config as cli_config
    config_dir = tmp_path / ".auction-hub"
    monkeypatch.setattr(cli_config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(cli_config, "CONFIG_FILE", config_dir / "config.json")
    monkeypatch.setattr(cli_config, "TOKEN_FILE", config_dir / "token.txt")
    config_dir.mkdir()
    (config_dir / "config.json").write_text('{"timezone": "UTC"}')
    return config_dir


@pytest.fixture
def item_factory():
    return make_item


@pytest.fixture
def token_factory():
    return make_token
