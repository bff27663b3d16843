"""Money rounding and BRL display helpers"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

_CENT = Decimal("0.01")
_NO_CENTS_ABOVE = 1e15  # floats carry no cent precision beyond this


def round2(amount: float) -> float:
    """
    Round to 2 decimals, half away from zero.

    Works on the shortest decimal repr of the float, so 1.005 rounds to 1.01
    instead of the 1.00 binary rounding would give. Only used when splitting
    a total into installments; subtotal math stays at full precision.
    """
    if not math.isfinite(amount) or abs(amount) >= _NO_CENTS_ABOVE:
        return float(amount)
    return float(Decimal(repr(float(amount))).quantize(_CENT, rounding=ROUND_HALF_UP))


def format_currency(amount: Optional[float]) -> str:
    """
    Format as Brazilian Real: "R$ 1.234,56", "-R$ 10,00".

    Accepts anything float() does (Decimal, numpy scalars); None, NaN,
    infinities and non-numeric values render as zero.
    """
    try:
        value = float(amount)
    except (TypeError, ValueError, OverflowError):
        value = 0.0
    if not math.isfinite(value):
        value = 0.0

    value = round2(value)
    sign = "-" if value < 0 else ""

    # en-US grouping first, then swap separators to pt-BR
    digits = f"{abs(value):,.2f}"
    digits = digits.replace(",", "_").replace(".", ",").replace("_", ".")

    return f"{sign}R$ {digits}"
