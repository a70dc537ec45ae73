"""
Lock window arithmetic.

Lock state is never stored as a flag. It is recomputed from the stored
expiry and the server clock every time it is needed, so there is no
timer or sweep that could race a concurrent read.
"""
from datetime import datetime, timedelta
from typing import Optional

DEFAULT_LOCK_SECONDS = 5.0


def is_locked(lock_expires_at: Optional[datetime], now: datetime) -> bool:
    return lock_expires_at is not None and now < lock_expires_at


class LockPolicy:
    """Fixed-length lock window started by every accepted bid."""

    def __init__(self, duration: timedelta = timedelta(seconds=DEFAULT_LOCK_SECONDS)):
        if duration <= timedelta(0):
            raise ValueError("Lock duration must be positive")
        self.duration = duration

    @classmethod
    def from_seconds(cls, seconds: float) -> "LockPolicy":
        return cls(timedelta(seconds=seconds))

    def is_locked(self, lock_expires_at: Optional[datetime], now: datetime) -> bool:
        return is_locked(lock_expires_at, now)

    def start_lock(self, now: datetime) -> datetime:
        return now + self.duration

    def seconds_remaining(self, lock_expires_at: Optional[datetime], now: datetime) -> float:
        """Time left on the lock, 0 when unlocked. Used for Retry-After hints."""
        if not is_locked(lock_expires_at, now):
            return 0.0
        return (lock_expires_at - now).total_seconds()
