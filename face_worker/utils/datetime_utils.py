"""
DateTime Utilities
==================

All timestamps produced by the worker are timezone-aware UTC datetimes and
are serialized as RFC3339 strings with a ``Z`` suffix.

Functions:
- utc_now(): Returns timezone-aware UTC datetime
- ensure_utc(): Normalize a datetime to timezone-aware UTC
- to_rfc3339(): Convert datetime object to an RFC3339 string
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Get current UTC time as a timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime into a timezone-aware UTC datetime.

    - If dt is None -> None
    - If dt is naive -> assume it represents UTC
    - If dt is aware -> convert to UTC
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_rfc3339(dt: Optional[datetime]) -> Optional[str]:
    """
    Convert a datetime to an RFC3339 string in UTC, e.g. ``2025-01-15T12:00:00.123456Z``.

    Returns None if dt is None.
    """
    dt = ensure_utc(dt)
    if dt is None:
        return None
    return dt.isoformat().replace("+00:00", "Z")
