"""Clock helpers.

Services take a Clock so that time-dependent rules (the edit window) can be
tested by injecting "now" instead of patching the wall clock.
"""

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)
