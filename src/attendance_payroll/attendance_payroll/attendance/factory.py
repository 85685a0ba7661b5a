from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from .strategies.base import CheckoutStrategy, StatusDecision
from .strategies.present_strategy import PresentStrategy
from .strategies.undertime_strategy import UndertimeStrategy


@dataclass
class CheckoutStrategyFactory:
    """Factory Pattern: choose the strategy from worked time vs shift length."""

    def for_checkout(self, *, worked: timedelta, shift_length: timedelta) -> CheckoutStrategy:
        # equality counts as a full shift
        if worked >= shift_length:
            return PresentStrategy()
        return UndertimeStrategy()

    def decide(self, *, worked: timedelta, shift_length: timedelta) -> StatusDecision:
        strategy = self.for_checkout(worked=worked, shift_length=shift_length)
        return strategy.decide(worked=worked, shift_length=shift_length)
