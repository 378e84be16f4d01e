from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any


CENT = Decimal('0.01')


def to_money(value: Any) -> Decimal:
    """
    Exact two-place decimal from API or user input.

    Floats go through their shortest repr so 25.1 stays 25.10 instead of
    picking up binary noise.
    """
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            raise ValueError(f'Not a monetary amount: {value!r}')
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    return (unit_price * quantity).quantize(CENT, rounding=ROUND_HALF_UP)
