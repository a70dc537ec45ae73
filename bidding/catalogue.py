"""Loading auction items at setup time."""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .items import AuctionItem
from .store import ItemStore

logger = logging.getLogger(__name__)


def item_from_entry(entry: Dict[str, Any], created_at: Optional[datetime] = None) -> AuctionItem:
    """Build a fresh, never-bid item from one catalogue entry."""
    try:
        item_id = int(entry["id"])
        name = str(entry["name"])
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid catalogue entry {entry!r}: {e}") from e
    if item_id <= 0:
        raise ValueError(f"Item id must be positive, got {item_id}")
    starting_bid = int(entry.get("starting_bid", 0))
    if starting_bid < 0:
        raise ValueError(f"Starting bid for item {item_id} must not be negative")
    return AuctionItem(
        id=item_id,
        name=name,
        description=str(entry.get("description", "")),
        image_url=str(entry.get("image_url", "")),
        current_bid=starting_bid,
        created_at=created_at or datetime.now(timezone.utc),
    )


def load_catalogue(path: Path) -> List[AuctionItem]:
    """Parse a JSON list of item entries."""
    data = json.loads(Path(path).read_text())
    if not isinstance(data, list):
        raise ValueError(f"Catalogue {path} must contain a JSON list")
    return [item_from_entry(entry) for entry in data]


def seed_store(store: ItemStore, items: List[AuctionItem]) -> int:
    """Insert items not yet present. Returns the number inserted."""
    existing = {item.id for item in store.list_items()}
    inserted = 0
    for item in items:
        if item.id in existing:
            continue
        store.insert(item)
        existing.add(item.id)
        inserted += 1
    logger.info(f"Seeded {inserted} item(s), skipped {len(items) - inserted} existing")
    return inserted
