import os
import json
from pathlib import Path
from typing import Optional
import datetime

CONFIG_DIR = Path.home() / ".auction-hub"
CONFIG_FILE = CONFIG_DIR / "config.json"
TOKEN_FILE = CONFIG_DIR / "token.txt"
SERVER_URL = os.getenv("AUCTION_SERVER_URL", "http://localhost:8000")


def ensure_config_dir():
    """Ensure config directory exists."""
    CONFIG_DIR.mkdir(exist_ok=True)


def get_token() -> Optional[str]:
    """Get stored bidder token."""
    ensure_config_dir()
    if TOKEN_FILE.exists():
        return TOKEN_FILE.read_text().strip()
    return None


def save_token(token: str):
    """Save bidder token."""
    ensure_config_dir()
    TOKEN_FILE.write_text(token)


def get_timezone() -> str:
    """Get display timezone from config, or the system local timezone."""
    ensure_config_dir()
    if CONFIG_FILE.exists():
        config = json.loads(CONFIG_FILE.read_text())
        configured_tz = config.get("timezone")
        if configured_tz:
            return configured_tz

    # /etc/localtime links into a zoneinfo tree, e.g. /usr/share/zoneinfo/Europe/London
    localtime_path = Path("/etc/localtime")
    if localtime_path.exists():
        parts = localtime_path.resolve().parts
        for zoneinfo_name in ["zoneinfo", "zoneinfo.default"]:
            if zoneinfo_name in parts:
                tz_name = "/".join(parts[parts.index(zoneinfo_name) + 1:])
                if tz_name:
                    return tz_name

    local_tz = datetime.datetime.now().astimezone().tzinfo
    key = getattr(local_tz, "key", None)
    if key:
        return key

    return "UTC"
