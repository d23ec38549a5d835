"""Number formatting following ECMAScript's Number::toString (radix 10)."""

from __future__ import annotations

import math
from decimal import Decimal


def shortest_digits(x: float) -> tuple[str, int]:
    """
    Shortest round-tripping decimal digits of a positive finite float and the
    exponent n such that x == 0.<digits> * 10**n.
    """
    _, digits, exponent = Decimal(repr(x)).as_tuple()
    text = "".join(map(str, digits)).rstrip("0")
    exponent += len(digits) - len(text)
    return text, len(text) + exponent


def number_to_source(value: int | float) -> str:
    if isinstance(value, int):
        return str(int(value))
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    sign = "-" if value < 0 else ""
    digits, n = shortest_digits(abs(value))
    k = len(digits)
    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits
    e = n - 1
    exponent = f"e+{e}" if e >= 0 else f"e-{-e}"
    if k == 1:
        return sign + digits + exponent
    return sign + digits[0] + "." + digits[1:] + exponent
