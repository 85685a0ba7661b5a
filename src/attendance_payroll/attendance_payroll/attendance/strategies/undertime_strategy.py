from __future__ import annotations

from datetime import timedelta

from ...core.enums import AttendanceStatus
from .base import CheckoutStrategy, StatusDecision


class UndertimeStrategy(CheckoutStrategy):
    """Left before the shift length was covered."""

    def decide(self, *, worked: timedelta, shift_length: timedelta) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.UNDERTIME,
            hours_worked=worked,
            overtime=timedelta(0),
            undertime=max(shift_length - worked, timedelta(0)),
        )
