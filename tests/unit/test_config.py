import pytest

from auction_server.config import load_settings


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("LOCK_SECONDS", "ITEM_STORE_BACKEND", "DATABASE_URL", "AUCTION_SEED_FILE",
                 "TOKEN_TTL_DAYS", "PORT", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("SECRET_KEY", "test-secret-key")
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings()
    assert settings.secret_key == "test-secret-key"
    assert settings.lock_seconds == 5.0
    assert settings.item_store_backend == "memory"
    assert settings.database_url.startswith("sqlite:///")
    assert settings.seed_file is None
    assert settings.token_ttl_days == 30
    assert settings.port == 8000
    assert settings.log_level == "INFO"


def test_overrides(clean_env):
    clean_env.setenv("LOCK_SECONDS", "2.5")
    clean_env.setenv("ITEM_STORE_BACKEND", "SQL")
    clean_env.setenv("DATABASE_URL", "sqlite:///tmp/x.db")
    clean_env.setenv("AUCTION_SEED_FILE", "items.json")
    clean_env.setenv("PORT", "9000")
    clean_env.setenv("LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.lock_seconds == 2.5
    assert settings.item_store_backend == "sql"
    assert settings.database_url == "sqlite:///tmp/x.db"
    assert settings.seed_file == "items.json"
    assert settings.port == 9000
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("name,value", [
    ("LOCK_SECONDS", "soon"),
    ("LOCK_SECONDS", "0"),
    ("PORT", "eighty"),
    ("ITEM_STORE_BACKEND", "redis"),
])
def test_invalid_values(clean_env, name, value):
    clean_env.setenv(name, value)
    with pytest.raises(ValueError):
        load_settings()
