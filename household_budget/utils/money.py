"""Currency rounding helpers"""

from decimal import Decimal, ROUND_CEILING, ROUND_HALF_UP

CENT = Decimal("0.01")


def round_currency(amount: float) -> float:
    """Round to the cent, halves away from zero (1.005 -> 1.01)"""
    return float(Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP))


def ceil_currency(amount: float) -> float:
    """Round up to the next cent"""
    return float(Decimal(str(amount)).quantize(CENT, rounding=ROUND_CEILING))
