"""
Deadline arithmetic for display.

Nothing here gates writes: applications are accepted after the deadline.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta

_DAY = timedelta(days=1)


def deadline_midnight(deadline: date | datetime, now: datetime) -> datetime:
    """Start of the deadline day, in the same timezone as `now`."""
    day = deadline.date() if isinstance(deadline, datetime) else deadline
    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def days_until(deadline: date | datetime, now: datetime) -> int:
    """Whole days left before the deadline, rounded up.

    ceil((deadline_midnight - now) / 1 day): 0 for today, 1 for tomorrow,
    negative once the deadline day is gone.
    """
    remaining = deadline_midnight(deadline, now) - now
    return int(math.ceil(remaining / _DAY))


def is_past_deadline(deadline: date | datetime, now: datetime) -> bool:
    return days_until(deadline, now) < 0


def deadline_label(days: int) -> str:
    """Human label for a days_until() result."""
    if days == 0:
        return "due today"
    if days == 1:
        return "1 day left"
    if days > 1:
        return f"{days} days left"
    if days == -1:
        return "closed 1 day ago"
    return f"closed {-days} days ago"
