"""Watchlist service - Business logic for watchlist operations"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import User, WatchlistItem
from ...shared.validators import validate_symbol
from .repository import WatchlistRepository
from .schemas import WatchlistItemCreate

logger = logging.getLogger(__name__)


class WatchlistService:
    """Service layer for watchlist business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = WatchlistRepository()

    def get_items(self, user: User) -> list[WatchlistItem]:
        return self.repo.get_items(self.db, user.id)

    def add_item(self, data: WatchlistItemCreate, user: User) -> WatchlistItem:
        """Add a symbol, returning the existing item when already watched"""
        existing = self.repo.get_item(self.db, user.id, data.symbol)
        if existing:
            return existing

        item = self.repo.add_item(self.db, user.id, data.symbol, data.company)
        logger.info(f"⭐ {data.symbol} added to watchlist of user {user.id}")
        return item

    def remove_item(self, symbol: str, user: User) -> None:
        try:
            ticker = validate_symbol(symbol)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        item = self.repo.get_item(self.db, user.id, ticker)
        if not item:
            raise HTTPException(status_code=404, detail="Symbol not in watchlist")

        self.repo.delete_item(self.db, item)
        logger.info(f"🗑️ {ticker} removed from watchlist of user {user.id}")
