import requests
from typing import Optional, List, Dict, Any
from datetime import datetime
import pytz
from .config import SERVER_URL, get_token, get_timezone


class BidFailed(Exception):
    """A bid the server refused. ``code`` is the wire error code."""

    def __init__(self, code: str, status_code: int, payload: Dict[str, Any]):
        self.code = code
        self.status_code = status_code
        self.payload = payload
        super().__init__(f"{status_code}: {code}")


class AuctionClient:
    """Client for communicating with the auction server."""

    def __init__(self, server_url: Optional[str] = None, token: Optional[str] = None):
        self.server_url = (server_url or SERVER_URL).rstrip("/")
        self.token: Optional[str] = token if token is not None else get_token()
        self.timezone = pytz.timezone(get_timezone())

    def _get_headers(self) -> Dict[str, str]:
        """Get headers with authentication."""
        if not self.token:
            raise ValueError("Not authenticated. Run 'auction-hub auth' first.")
        return {"Authorization": f"Bearer {self.token}"}

    def authenticate(self, username: str, password: str, display_name: Optional[str] = None) -> str:
        """Authenticate and return token."""
        payload = {"username": username, "password": password}
        if display_name:
            payload["display_name"] = display_name
        response = requests.post(f"{self.server_url}/auth", json=payload)
        response.raise_for_status()
        data = response.json()
        self.token = data["token"]
        return self.token

    def list_auctions(self) -> List[Dict[str, Any]]:
        """All items in the auction."""
        response = requests.get(f"{self.server_url}/auctions")
        response.raise_for_status()
        return response.json()["items"]

    def get_auction(self, item_id: int) -> Dict[str, Any]:
        response = requests.get(f"{self.server_url}/auctions/{item_id}")
        if response.status_code == 404:
            raise BidFailed("not_found", 404, response.json())
        response.raise_for_status()
        return response.json()["item"]

    def place_bid(self, item_id: int, version: int) -> Dict[str, Any]:
        """
        Bid one increment on an item at the version last observed.

        Returns the updated item. Raises BidFailed with the server's error
        code (locked, self_bid, version_conflict, closed, not_found).
        """
        response = requests.post(
            f"{self.server_url}/auctions/{item_id}/bid",
            json={"version": version},
            headers=self._get_headers()
        )
        if response.ok:
            return response.json()["item"]
        try:
            payload = response.json()
        except ValueError:
            response.raise_for_status()
            raise
        code = payload.get("error") if isinstance(payload, dict) else None
        if not code:
            # 401/422 responses carry FastAPI's "detail" instead of an error code
            response.raise_for_status()
        raise BidFailed(code, response.status_code, payload)

    def to_local_time(self, utc_time_str: str) -> str:
        """Convert UTC time string to local timezone string."""
        dt_utc = datetime.fromisoformat(utc_time_str.replace("Z", "+00:00"))
        if dt_utc.tzinfo is None:
            dt_utc = pytz.UTC.localize(dt_utc)

        dt_local = dt_utc.astimezone(self.timezone)
        return dt_local.strftime("%Y-%m-%d %H:%M:%S")
