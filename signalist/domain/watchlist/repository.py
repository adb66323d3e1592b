"""Watchlist repository - Database operations for watchlist items"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import WatchlistItem


class WatchlistRepository:
    """Repository for watchlist database operations"""

    @staticmethod
    def get_items(db: Session, user_id: int) -> list[WatchlistItem]:
        return (
            db.query(WatchlistItem)
            .filter(WatchlistItem.user_id == user_id)
            .order_by(WatchlistItem.added_at.desc(), WatchlistItem.id.desc())
            .all()
        )

    @staticmethod
    def get_item(db: Session, user_id: int, symbol: str) -> Optional[WatchlistItem]:
        return (
            db.query(WatchlistItem)
            .filter(WatchlistItem.user_id == user_id, WatchlistItem.symbol == symbol)
            .first()
        )

    @staticmethod
    def add_item(db: Session, user_id: int, symbol: str, company: Optional[str]) -> WatchlistItem:
        item = WatchlistItem(user_id=user_id, symbol=symbol, company=company)
        db.add(item)
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def delete_item(db: Session, item: WatchlistItem) -> None:
        db.delete(item)
        db.commit()
