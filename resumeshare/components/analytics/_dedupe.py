"""
Unique view detection.

A view is unique when no earlier view of the same resume from the same IP
address falls inside the trailing window (now - window, now]. The flag is
computed once, before the event is written, and never revisited.

The store lookup and the insert are separate operations with no
transaction around them. Two concurrent views for the same pair can both
be classified unique; counts are analytics quality, not exact.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from .models import ViewEvent

DEFAULT_UNIQUE_WINDOW = timedelta(hours=24)


def window_start(now: datetime, window: timedelta = DEFAULT_UNIQUE_WINDOW) -> datetime:
    """Earliest timestamp a store lookup needs to return."""
    return now - window


def is_unique_view(
    resume_id: str,
    ip_address: str,
    existing: Iterable[ViewEvent],
    now: datetime,
    window: timedelta = DEFAULT_UNIQUE_WINDOW,
) -> bool:
    """Return True if no prior view of resume_id from ip_address is in the window."""
    cutoff = now - window
    for event in existing:
        if event.resume_id != resume_id or event.ip_address != ip_address:
            continue
        if cutoff < event.timestamp <= now:
            return False
    return True
