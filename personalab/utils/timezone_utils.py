"""
Timezone helpers for persona timestamps.

Stored timestamps are UTC. SQLite drops tzinfo on the way back, so values
read from the store pass through ensure_utc before they leave the repository.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)

DISPLAY_FORMAT = "%Y-%m-%d %H:%M UTC"


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """
    Normalize a datetime to aware UTC.

    Naive values are taken to be UTC already.
    """
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_to_utc(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp (a trailing ``Z`` is accepted) as UTC.

    Raises:
        ValueError: the string is not an ISO timestamp
    """
    normalized = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        logger.warning(f"Unparseable timestamp: {value!r}")
        raise ValueError(f"Invalid ISO datetime string: {value}") from None
    return ensure_utc(parsed)


def format_display_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Timestamp as printed on exported documents, e.g. ``2024-03-01 14:05 UTC``."""
    if dt is None:
        return None
    return ensure_utc(dt).strftime(DISPLAY_FORMAT)
