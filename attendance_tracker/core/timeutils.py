"""Wall-clock helpers. Every timestamp the app produces is UTC-aware."""
from datetime import datetime
from typing import Optional

import pytz


def utcnow() -> datetime:
    """Current UTC time.

    Wrapped so tests can patch it.
    """
    return datetime.now(pytz.utc)


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on read)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return pytz.utc.localize(value)
    return value.astimezone(pytz.utc)
