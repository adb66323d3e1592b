"""Domain event schemas"""

import uuid
from datetime import date, datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

USER_CREATED = "app/user.created"
NEWS_SUMMARY_REQUESTED = "app/news.summary.requested"


class DomainEvent(BaseModel):
    """A named state change with its payload. Not persisted."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    data: dict[str, Any] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class PublishResult(BaseModel):
    """Outcome of a publish, independent of the operation that triggered it"""

    success: bool
    event_id: Optional[str] = None
    job_id: Optional[str] = None
    duplicate: bool = False
    error: Optional[str] = None


def user_created_key(firebase_uid: str) -> str:
    """One welcome event per account"""
    return f"{USER_CREATED}:{firebase_uid}"


def news_summary_key(user_id: int, day: date) -> str:
    """One news summary event per user and day"""
    return f"{NEWS_SUMMARY_REQUESTED}:{user_id}:{day.isoformat()}"
