from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    hours_worked: timedelta
    overtime: timedelta
    undertime: timedelta


class CheckoutStrategy(ABC):
    """Strategy Pattern: encapsulate how a closed punch pair is classified."""

    @abstractmethod
    def decide(self, *, worked: timedelta, shift_length: timedelta) -> StatusDecision:
        raise NotImplementedError
