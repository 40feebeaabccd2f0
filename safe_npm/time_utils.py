"""
Shared datetime helpers.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional


def ensure_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp and normalize it to UTC."""
    if not value or not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return ensure_utc(parsed)


def compute_cutoff(min_age_days: float, now: Optional[datetime] = None) -> datetime:
    """Return the latest publish time a version may have to be eligible."""
    if min_age_days < 0:
        raise ValueError("min_age_days must be non-negative")
    reference = ensure_utc(now) if now is not None else datetime.now(timezone.utc)
    return reference - timedelta(days=min_age_days)
