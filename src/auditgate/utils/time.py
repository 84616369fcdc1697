"""Time utilities."""

from datetime import datetime, timezone
from typing import Optional


def utc_now() -> datetime:
    """Return a timezone-aware UTC timestamp."""
    return datetime.now(timezone.utc)


def epoch_millis(value: Optional[datetime] = None) -> int:
    """Epoch milliseconds for a datetime (now when omitted), as producers stamp events."""
    return int((value or utc_now()).timestamp() * 1000)
