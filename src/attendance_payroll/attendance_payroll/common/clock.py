from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock:
    """Wall clock in the configured time zone, returned as naive local time."""

    def __init__(self, tz: Optional[str] = None):
        self._tz = ZoneInfo(tz) if tz else None

    def now(self) -> datetime:
        if self._tz is None:
            return datetime.now()
        return datetime.now(self._tz).replace(tzinfo=None)
