from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP


def round_half_up(value: float, ndigits: int = 0) -> float | int:
    """Round like a spreadsheet does (0.5 goes up), not banker's rounding."""
    quantum = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if ndigits == 0 else float(rounded)


def percentage(part: int, whole: int, ndigits: int = 0) -> float | int:
    if not whole:
        return 0
    return round_half_up(part / whole * 100.0, ndigits)


INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1


def parse_int(value) -> int | None:
    """Whole number from JSON or query-string input, or None.

    Booleans, fractions and values that do not fit an INTEGER column are refused.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not value.is_integer():
            return None
        number = int(value)
    elif isinstance(value, int):
        number = value
    elif isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if INT_MIN <= number <= INT_MAX else None
