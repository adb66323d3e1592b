"""Watchlist router - FastAPI endpoints for the user's watchlist"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User, WatchlistItem
from .schemas import WatchlistItemCreate, WatchlistItemResponse
from .service import WatchlistService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/watchlist", tags=["Watchlist"])


def get_watchlist_service(db: Session = Depends(get_db)) -> WatchlistService:
    """Dependency injection for WatchlistService"""
    return WatchlistService(db)


def _to_response(item: WatchlistItem) -> WatchlistItemResponse:
    return WatchlistItemResponse(symbol=item.symbol, company=item.company, addedAt=item.added_at)


@router.get("", response_model=list[WatchlistItemResponse])
async def get_watchlist(
    current_user: User = Depends(get_current_user),
    service: WatchlistService = Depends(get_watchlist_service),
):
    """Get the current user's watchlist, newest first"""
    return [_to_response(item) for item in service.get_items(current_user)]


@router.post("", response_model=WatchlistItemResponse)
async def add_to_watchlist(
    data: WatchlistItemCreate,
    current_user: User = Depends(get_current_user),
    service: WatchlistService = Depends(get_watchlist_service),
):
    return _to_response(service.add_item(data, current_user))


@router.delete("/{symbol}")
async def remove_from_watchlist(
    symbol: str,
    current_user: User = Depends(get_current_user),
    service: WatchlistService = Depends(get_watchlist_service),
):
    service.remove_item(symbol, current_user)
    return {"message": "Symbol removed from watchlist"}
