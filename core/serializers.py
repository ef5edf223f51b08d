"""
Shared serializer fields
"""
from rest_framework import serializers

from core.money import MONEY_MAX_DIGITS
from core.months import format_month, parse_month


class MonthField(serializers.Field):
    """Billing month on the wire as 'YYYY-MM'; internally the first day of the month."""
    default_error_messages = {
        'invalid': 'Month must be in YYYY-MM format.',
    }

    def to_internal_value(self, data):
        try:
            return parse_month(data)
        except ValueError:
            self.fail('invalid')

    def to_representation(self, value):
        return format_month(value) if value else None


class MoneyField(serializers.DecimalField):
    """Currency amount: 2 decimals, strictly positive."""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_digits', MONEY_MAX_DIGITS)
        kwargs.setdefault('decimal_places', 2)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than 0")
        return value
