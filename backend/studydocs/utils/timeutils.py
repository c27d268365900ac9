from datetime import datetime, timezone
from typing import Optional


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a timestamp to an aware UTC instant.

    Naive values are taken to already be UTC: the primary store writes UTC
    and search requests without an offset are read as UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_iso_utc(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 string of the UTC instant, as stored in the index."""
    normalized = to_utc(value)
    return normalized.isoformat() if normalized else None
