"""
Currency helpers. Amounts are integer cents; rounding is half away from zero.
"""

import math
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, Union

_AMOUNT = re.compile(r"-?\d{1,3}(?:,\d{3})+(?:\.\d+)?|-?\d+(?:\.\d+)?")


def round_half_away(value: Union[int, float, Decimal]) -> int:
    """Round to the nearest integer, halves away from zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_cents(value: Union[str, int, float, None]) -> Optional[int]:
    """
    Parse a dollar amount into cents, floored at zero.

    Numbers are taken as dollars. Text may carry a currency symbol and
    thousands separators ("$1,234.50"); the first number found is used.
    Returns None when nothing parses.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        amount = Decimal(str(value))
    else:
        match = _AMOUNT.search(str(value))
        if not match:
            return None
        try:
            amount = Decimal(match.group(0).replace(",", ""))
        except InvalidOperation:
            return None

    return max(0, round_half_away(amount * 100))


def format_cents(cents: Optional[int]) -> str:
    """Format cents as dollars, e.g. 123450 -> "$1,234.50"."""
    if cents is None:
        return ""
    sign = "-" if cents < 0 else ""
    dollars, rem = divmod(abs(cents), 100)
    return f"{sign}${dollars:,}.{rem:02d}"
