"""
Module: timefmt.py
Description: Display formatting for relay timestamps.

Timestamps are integer milliseconds since the Unix epoch. The remote log
expects a US short date followed by a medium time, e.g. ``1/15/24 3:04:05 PM``.
"""

import time
from datetime import datetime, tzinfo
from typing import Optional


def now_millis() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def format_timestamp(timestamp: int, tz: Optional[tzinfo] = None) -> str:
    """
    Format an epoch-millisecond timestamp as short date and medium time.

    Args:
        timestamp: Milliseconds since the Unix epoch
        tz: Zone to render in; local time when None

    Returns:
        String in ``M/d/yy h:mm:ss AM|PM`` form
    """
    moment = datetime.fromtimestamp(timestamp / 1000, tz=tz)
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment:%y} "
        f"{hour}:{moment:%M}:{moment:%S} {meridiem}"
    )
