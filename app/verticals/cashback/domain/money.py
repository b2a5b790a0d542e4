from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

D = Decimal

ZERO = D("0")
CENT = D("0.01")
HUNDRED = D("100")


def to_decimal(value: Any) -> D:
    """
    Lenient number parsing: alles wat geen getal is wordt 0.

    Accepts Decimal/int/float/str; "12,5" is read as 12.5. NaN and infinity
    count as unparsable.
    """
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, D):
        d = value
    else:
        s = str(value).strip().replace(",", ".")
        if s == "":
            return ZERO
        try:
            d = D(s)
        except (InvalidOperation, ValueError):
            return ZERO
    if not d.is_finite():
        return ZERO
    return d


def non_negative(value: Any) -> D:
    d = to_decimal(value)
    return d if d > ZERO else ZERO


def round_money(amount: D) -> D:
    # half away from zero, 2 decimals
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)
