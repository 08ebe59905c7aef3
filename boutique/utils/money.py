from decimal import Decimal
from typing import Union


def plain_number(value: Decimal) -> Union[int, float]:
    """Whole amounts as ints, everything else as floats (the browser app's shape)."""
    value = Decimal(value)
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def format_amount(value: Decimal) -> str:
    return str(plain_number(value))
