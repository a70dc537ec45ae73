from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow():
    return datetime.now(timezone.utc)


class AuctionItemRecord(Base):
    __tablename__ = "auction_items"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    image_url = Column(String, nullable=False, default="")
    current_bid = Column(Integer, nullable=False, default=0)
    version = Column(Integer, nullable=False, default=0)
    last_bidder_id = Column(String, nullable=True)
    last_bidder_name = Column(String, nullable=True)
    last_bid_time = Column(DateTime(timezone=True), nullable=True)
    lock_expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
