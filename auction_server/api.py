from fastapi import FastAPI, Depends, HTTPException, Header, Request
from fastapi.responses import JSONResponse
from datetime import datetime, timedelta, timezone
from typing import Optional
import math
import threading
import jwt
import logging

from bidding.errors import BidRejected, ItemLocked, StoreError, VersionConflict
from bidding.items import Bidder
from .config import get_settings
from .engine import AuctionEngine, build_engine
from .models import (
    AuthRequest, AuthResponse, UserInfo, PlaceBidRequest, AuctionItemResponse,
    AuctionListResponse, AuctionItemEnvelope, ErrorResponse,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Auction Hub")

_engine: Optional[AuctionEngine] = None
_engine_lock = threading.Lock()

# HTTP status per rejection code
STATUS_BY_CODE = {
    "not_found": 404,
    "closed": 410,
    "locked": 409,
    "self_bid": 409,
    "version_conflict": 409,
}


def get_engine() -> AuctionEngine:
    """Process-wide engine, built from settings on first use."""
    global _engine
    with _engine_lock:
        if _engine is None:
            _engine = build_engine(get_settings())
    return _engine


def get_current_bidder(authorization: str = Header(None)) -> Bidder:
    """Verify the bearer token and return the bidder it identifies."""
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Missing or invalid authorization header")

    token = authorization.split(" ")[1]
    try:
        payload = jwt.decode(token, get_settings().secret_key, algorithms=["HS256"])
    except jwt.InvalidTokenError:
        raise HTTPException(status_code=401, detail="Invalid token")

    bidder_id = payload.get("sub")
    if not bidder_id:
        raise HTTPException(status_code=401, detail="Token has no subject")
    return Bidder(id=bidder_id, name=payload.get("name") or bidder_id)


@app.exception_handler(BidRejected)
async def bid_rejected_handler(request: Request, exc: BidRejected):
    logger.info(f"Rejected {request.method} {request.url.path}: {exc.code} ({exc})")
    body = ErrorResponse(error=exc.code)
    headers = {}
    if isinstance(exc, ItemLocked):
        body.lock_expires_at = exc.lock_expires_at
        headers["Retry-After"] = str(max(1, math.ceil(exc.retry_after)))
    elif isinstance(exc, VersionConflict):
        body.current_version = exc.current_version
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(exc.code, 409),
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Item store failure on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"success": False, "error": exc.code})


@app.post("/auth", response_model=AuthResponse)
def auth(request: AuthRequest):
    """Issue a bidder token."""
    # Simplified identity provider - credentials are not verified
    settings = get_settings()
    name = request.display_name or request.username
    token = jwt.encode(
        {
            "sub": request.username,
            "name": name,
            "exp": datetime.now(timezone.utc) + timedelta(days=settings.token_ttl_days),
        },
        settings.secret_key,
        algorithm="HS256"
    )
    return AuthResponse(token=token, user=UserInfo(id=request.username, name=name))


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/auctions", response_model=AuctionListResponse)
def list_auctions(engine: AuctionEngine = Depends(get_engine)):
    """All items, ordered by id. Safe to poll at any rate."""
    items = engine.snapshots.get_all()
    now = engine.clock()
    return AuctionListResponse(items=[AuctionItemResponse.from_item(item, now) for item in items])


@app.get("/auctions/{item_id}", response_model=AuctionItemEnvelope)
def get_auction(item_id: int, engine: AuctionEngine = Depends(get_engine)):
    item = engine.snapshots.get_one(item_id)
    return AuctionItemEnvelope(item=AuctionItemResponse.from_item(item, engine.clock()))


@app.post("/auctions/{item_id}/bid", response_model=AuctionItemEnvelope)
def place_bid(
    item_id: int,
    request: PlaceBidRequest,
    engine: AuctionEngine = Depends(get_engine),
    bidder: Bidder = Depends(get_current_bidder),
):
    """Bid one increment above the current price at the version the client last saw."""
    item = engine.arbiter.place_bid(item_id, bidder, request.version)
    return AuctionItemEnvelope(item=AuctionItemResponse.from_item(item, engine.clock()))
