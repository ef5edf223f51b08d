"""
Core utilities - lookups that return None on a miss, and lookups that raise a ledger error.
"""
from datetime import date

from core.exceptions import InvalidArgument
from core.months import parse_month


def find_by_id(queryset, pk):
    """Row with primary key `pk`, or None."""
    if pk is None:
        return None
    return queryset.filter(pk=pk).first()


def get_or_raise(queryset, pk, error_cls):
    """
    Row with primary key `pk`; raises error_cls(pk) when it doesn't exist.
    error_cls is one of the *NotFound ledger errors.
    """
    obj = find_by_id(queryset, pk)
    if obj is None:
        raise error_cls(pk)
    return obj


def parse_iso_date(raw, field):
    """YYYY-MM-DD query parameter -> date, InvalidArgument otherwise."""
    try:
        return date.fromisoformat(str(raw).strip())
    except (TypeError, ValueError):
        raise InvalidArgument(f"{field} must be a date in YYYY-MM-DD format", field=field)


def parse_month_param(raw, field='month'):
    """YYYY-MM path/query parameter -> first day of month, InvalidArgument otherwise."""
    try:
        return parse_month(raw)
    except ValueError:
        raise InvalidArgument(f"{field} must be a month in YYYY-MM format", field=field)
