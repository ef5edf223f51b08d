"""
Clock abstraction. Services take `clock=` so lateness rules can be tested
against a fixed calendar date.
"""
from django.utils import timezone


class SystemClock:
    """Today in the studio's configured TIME_ZONE."""

    def today(self):
        return timezone.localdate()


class FixedClock:
    """Always returns the same date."""

    def __init__(self, today):
        self._today = today

    def today(self):
        return self._today

    def __repr__(self):
        return f"FixedClock({self._today.isoformat()})"


system_clock = SystemClock()


def resolve_clock(clock=None):
    return clock or system_clock
