"""UTC datetime and unix-timestamp utilities.

Round windows are stored as unix seconds (BIGINT) so that the core can treat
the clock as a plain integer supplied by the caller.
"""

import time
from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def unix_now() -> int:
    """Current unix time in whole seconds."""
    return int(time.time())


def from_unix(ts: int) -> datetime:
    """Unix seconds -> timezone-aware UTC datetime."""
    return datetime.fromtimestamp(ts, tz=timezone.utc)
