"""Watchlist schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_symbol


class WatchlistItemCreate(BaseModel):
    symbol: str
    company: Optional[str] = None

    @field_validator("symbol")
    @classmethod
    def check_symbol(cls, v: str) -> str:
        return validate_symbol(v)


class WatchlistItemResponse(BaseModel):
    symbol: str
    company: Optional[str] = None
    addedAt: Optional[datetime] = None
