"""
Money helpers. Currency values are stored and returned with 2 decimals;
allocation factors keep 4 decimals. Rounding is always ROUND_HALF_UP.
"""
from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal('0.01')
FACTOR_PRECISION = Decimal('0.0001')
ZERO = Decimal('0.00')
# Largest value a NUMERIC(10, 2) money column holds
MAX_AMOUNT = Decimal('99999999.99')
MONEY_MAX_DIGITS = 10


def to_decimal(value):
    if isinstance(value, Decimal):
        return value
    if value is None:
        return ZERO
    # str() first so floats like 0.1 don't carry binary noise
    return Decimal(str(value))


def quantize_money(value):
    """Round to 2 decimals, half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def quantize_factor(value):
    """Round an allocation factor to 4 decimals, half-up."""
    return to_decimal(value).quantize(FACTOR_PRECISION, rounding=ROUND_HALF_UP)


def money_sum(values):
    total = ZERO
    for value in values:
        total += to_decimal(value)
    return quantize_money(total)
