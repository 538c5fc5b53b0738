"""Clock — the single place the shell reads the current time.

Invariants:
    - Always returns a timezone-aware UTC datetime
    - Core functions receive its value as `now`; they never call it

Design Decisions:
    - Exposed as a FastAPI dependency (get_clock): tests override it with a fixed time
"""

from datetime import datetime, timezone
from typing import Callable


Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_clock() -> Clock:
    """FastAPI dependency for the request clock."""
    return utc_now
