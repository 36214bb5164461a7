# billing/services/clock.py

"""
CLOCK PROVIDER

Single canonical source for "now" and the promotion day code.
Day codes are derived in settings.TIME_ZONE (timezone.localtime).

Services accept a clock argument; tests pass FixedClock.
"""

from __future__ import annotations

from datetime import date, datetime

from django.utils import timezone

from billing.services.promotion_selector import day_code_for


class SystemClock:
    def now(self) -> datetime:
        return timezone.now()

    def today(self) -> date:
        return timezone.localtime(self.now()).date()

    def today_code(self) -> str:
        return day_code_for(self.today())


class FixedClock(SystemClock):
    def __init__(self, instant: datetime):
        if timezone.is_naive(instant):
            instant = timezone.make_aware(instant)
        self._instant = instant

    def now(self) -> datetime:
        return self._instant


system_clock = SystemClock()
