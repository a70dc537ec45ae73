from .models import Base, AuctionItemRecord
from .session import init_db, make_engine, make_session_factory
from .store import SqlItemStore

__all__ = ["Base", "AuctionItemRecord", "init_db", "make_engine", "make_session_factory", "SqlItemStore"]
