"""Open/closed query hook for auction items."""
import threading
from datetime import datetime
from typing import Dict, Optional, Set


class AuctionSchedule:
    """
    Tracks which items stopped accepting bids.

    Items are open by default. An item becomes closed either explicitly via
    ``close`` or once the server clock reaches the time given to ``close_at``.
    Closed is terminal for the arbiter; ``reopen`` exists for setup code only.
    """

    def __init__(self):
        self._closed: Set[int] = set()
        self._closes_at: Dict[int, datetime] = {}
        self._lock = threading.Lock()

    def close(self, item_id: int) -> None:
        with self._lock:
            self._closed.add(item_id)

    def close_at(self, item_id: int, when: datetime) -> None:
        with self._lock:
            self._closes_at[item_id] = when

    def reopen(self, item_id: int) -> None:
        with self._lock:
            self._closed.discard(item_id)
            self._closes_at.pop(item_id, None)

    def closing_time(self, item_id: int) -> Optional[datetime]:
        with self._lock:
            return self._closes_at.get(item_id)

    def is_open(self, item_id: int, now: datetime) -> bool:
        with self._lock:
            if item_id in self._closed:
                return False
            deadline = self._closes_at.get(item_id)
        return deadline is None or now < deadline
