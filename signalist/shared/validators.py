"""Shared validation utilities"""

import re
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
COUNTRY_CODE_PATTERN = re.compile(r"^[A-Z]{2}$")
SYMBOL_PATTERN = re.compile(r"^[A-Z0-9.\-:]{1,20}$")


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")

    return email


def validate_country_code(country: str) -> str:
    """Normalize and validate an ISO 3166-1 alpha-2 country code"""
    value = (country or "").strip().upper()
    if not COUNTRY_CODE_PATTERN.match(value):
        raise ValueError("Country must be a two-letter ISO country code")
    return value


def validate_full_name(name: str) -> str:
    value = " ".join((name or "").split())
    if len(value) < 2:
        raise ValueError("Name must be at least 2 characters long")
    return value


def validate_symbol(symbol: str) -> str:
    """Normalize a ticker symbol (e.g. ' aapl ' -> 'AAPL')"""
    value = (symbol or "").strip().upper()
    if not SYMBOL_PATTERN.match(value):
        raise ValueError("Invalid ticker symbol")
    return value
