from pydantic import BaseModel
from datetime import datetime
from typing import Optional, List

from bidding.items import AuctionItem
from bidding.lock_policy import is_locked


class AuthRequest(BaseModel):
    username: str
    password: str
    display_name: Optional[str] = None


class UserInfo(BaseModel):
    id: str
    name: str


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: UserInfo


class PlaceBidRequest(BaseModel):
    version: int


class AuctionItemResponse(BaseModel):
    id: int
    name: str
    description: str
    image_url: str
    current_bid: int
    last_bidder_id: Optional[str]
    last_bidder: Optional[str]
    last_bid_time: Optional[datetime]
    is_locked: bool
    lock_expires_at: Optional[datetime]
    version: int
    created_at: datetime

    @classmethod
    def from_item(cls, item: AuctionItem, now: datetime) -> "AuctionItemResponse":
        """Project a stored snapshot onto the wire, deriving is_locked at ``now``."""
        return cls(
            id=item.id,
            name=item.name,
            description=item.description,
            image_url=item.image_url,
            current_bid=item.current_bid,
            last_bidder_id=item.last_bidder_id,
            last_bidder=item.last_bidder_name,
            last_bid_time=item.last_bid_time,
            is_locked=is_locked(item.lock_expires_at, now),
            lock_expires_at=item.lock_expires_at,
            version=item.version,
            created_at=item.created_at,
        )


class AuctionListResponse(BaseModel):
    success: bool = True
    items: List[AuctionItemResponse]


class AuctionItemEnvelope(BaseModel):
    success: bool = True
    item: AuctionItemResponse


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    lock_expires_at: Optional[datetime] = None
    current_version: Optional[int] = None
