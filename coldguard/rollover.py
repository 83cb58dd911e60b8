"""
Lazy window rollover.

Counters are never reset by a timer. Each window is a pure function of the
last recorded timestamp and the current time, evaluated when a record is
read or written.
"""

import math
from datetime import datetime, timedelta
from typing import Optional


def is_new_day(last: Optional[datetime], now: datetime) -> bool:
    """True when ``now`` falls on a different calendar day than ``last``."""
    if last is None:
        return True
    return last.date() != now.date()


def is_new_month(last: Optional[datetime], now: datetime) -> bool:
    """True when ``now`` falls in a different calendar month or year."""
    if last is None:
        return True
    return (last.year, last.month) != (now.year, now.month)


def is_new_rate_window(
    window_start: Optional[datetime],
    now: datetime,
    window_seconds: int,
) -> bool:
    """True once strictly more than ``window_seconds`` have passed."""
    if window_start is None:
        return True
    return now - window_start > timedelta(seconds=window_seconds)


def rate_window_remaining(
    window_start: Optional[datetime],
    now: datetime,
    window_seconds: int,
) -> int:
    """Whole seconds until the current rate window closes (0 if closed)."""
    if window_start is None:
        return 0
    end = window_start + timedelta(seconds=window_seconds)
    remaining = (end - now).total_seconds()
    if remaining <= 0:
        return 0
    return math.ceil(remaining)
