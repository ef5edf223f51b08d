"""
Billing months. A month is a datetime.date pinned to day 1; the wire format is YYYY-MM.
"""
import re
from datetime import date, datetime

_MONTH_RE = re.compile(r'^(\d{4})-(\d{2})$')


def month_of(value):
    """First day of the month containing `value` (date or datetime)."""
    if isinstance(value, datetime):
        value = value.date()
    return value.replace(day=1)


def parse_month(raw):
    """
    Parse 'YYYY-MM' (or a date) into a month.
    Raises ValueError for anything else.
    """
    if isinstance(raw, date):
        return month_of(raw)
    if not isinstance(raw, str):
        raise ValueError(f"Invalid month: {raw!r}")
    m = _MONTH_RE.match(raw.strip())
    if not m:
        raise ValueError(f"Invalid month {raw!r}; expected YYYY-MM")
    year, month = int(m.group(1)), int(m.group(2))
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month {raw!r}; month must be 01-12")
    return date(year, month, 1)


def format_month(value):
    return value.strftime('%Y-%m')


LATE_AFTER_DAY = 10


def is_late(payment_date, month):
    """
    A payment (or today's date, for unpaid dues) is late when it falls after the
    10th day of the month it is for.
    """
    return payment_date.day > LATE_AFTER_DAY and month_of(payment_date) == month_of(month)
