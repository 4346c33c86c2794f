"""
Normalizes raw form inputs into typed query parameters.

Every parameter is optional: a value is kept only if it reads as a
non-negative integer, anything else is dropped without an error.
"""
from typing import Optional

from .models import QueryParameters


def parse_non_negative_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    text = str(raw).strip()
    # Only ASCII digits; signs are rejected, so negative values never reach int()
    if not (text.isascii() and text.isdecimal()):
        return None
    return int(text)


def validate(offset: Optional[str] = None, limit: Optional[str] = None, row: Optional[str] = None) -> QueryParameters:
    return QueryParameters(
        offset=parse_non_negative_int(offset),
        limit=parse_non_negative_int(limit),
        row=parse_non_negative_int(row),
    )
