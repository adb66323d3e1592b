"""User repository - Database operations for user profiles"""

from typing import Optional

from sqlalchemy.orm import Session, selectinload

from ...models import User


class UserRepository:
    """Repository for user profile database operations"""

    @staticmethod
    def get_user_by_firebase_uid(db: Session, firebase_uid: str) -> Optional[User]:
        return db.query(User).filter(User.firebase_uid == firebase_uid).first()

    @staticmethod
    def create_user(db: Session, firebase_uid: str, **profile) -> User:
        """Create a user profile row"""
        user = User(firebase_uid=firebase_uid, **profile)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def delete_user(db: Session, user: User) -> None:
        """Delete a profile row. Watchlist items go with it."""
        db.delete(user)
        db.commit()

    @staticmethod
    def get_users_for_news_email(db: Session) -> list[User]:
        """All users with an email address, watchlists eagerly loaded"""
        return (
            db.query(User)
            .options(selectinload(User.watchlist_items))
            .filter(User.email.isnot(None), User.email != "")
            .order_by(User.id)
            .all()
        )

    @staticmethod
    def get_watchlist_symbols(user: User) -> list[str]:
        return [item.symbol for item in user.watchlist_items]
