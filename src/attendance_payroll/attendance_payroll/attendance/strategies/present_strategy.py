from __future__ import annotations

from datetime import timedelta

from ...core.enums import AttendanceStatus
from .base import CheckoutStrategy, StatusDecision


class PresentStrategy(CheckoutStrategy):
    """Worked at least the full shift; the surplus is overtime."""

    def decide(self, *, worked: timedelta, shift_length: timedelta) -> StatusDecision:
        return StatusDecision(
            status=AttendanceStatus.PRESENT,
            hours_worked=worked,
            overtime=max(worked - shift_length, timedelta(0)),
            undertime=timedelta(0),
        )
