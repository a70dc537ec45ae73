"""Server settings read from the environment (and a .env file, if present)."""
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from bidding.lock_policy import DEFAULT_LOCK_SECONDS

BACKENDS = ("memory", "sql")


@dataclass(frozen=True)
class Settings:
    secret_key: str
    lock_seconds: float
    item_store_backend: str
    database_url: str
    seed_file: Optional[str]
    token_ttl_days: int
    port: int
    log_level: str


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def load_settings() -> Settings:
    load_dotenv()
    backend = os.getenv("ITEM_STORE_BACKEND", "memory").lower()
    if backend not in BACKENDS:
        raise ValueError(f"ITEM_STORE_BACKEND must be one of {BACKENDS}, got {backend!r}")
    lock_seconds = _float_env("LOCK_SECONDS", DEFAULT_LOCK_SECONDS)
    if lock_seconds <= 0:
        raise ValueError("LOCK_SECONDS must be positive")
    return Settings(
        secret_key=os.getenv("SECRET_KEY", "change-me-in-production"),
        lock_seconds=lock_seconds,
        item_store_backend=backend,
        database_url=os.getenv("DATABASE_URL", "sqlite:///./auction_hub.db"),
        seed_file=os.getenv("AUCTION_SEED_FILE") or None,
        token_ttl_days=_int_env("TOKEN_TTL_DAYS", 30),
        port=_int_env("PORT", 8000),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
