"""Monetary rounding helpers shared by the calculators."""

from decimal import ROUND_HALF_UP, Decimal

# All served currencies use cents as the minor unit
MINOR_UNIT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    """Convert through ``str`` so 0.1 stays 0.1 rather than its binary expansion."""
    return value if isinstance(value, Decimal) else Decimal(str(value))


def round_money(value) -> Decimal:
    return to_decimal(value).quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)
