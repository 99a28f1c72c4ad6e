"""Extended-range numbers stored as ``base * 10 ** exponent``.

Every operation accepts a BigNumber or anything ``to_safe_number`` can
coerce (int, float, numeric string, ``{"base", "exponent"}`` mapping) and
returns a normalized BigNumber. Nothing here raises for bad numeric input:
division by zero, overflow and garbage degrade to ZERO or MAX_VALUE.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Union

# Magnitudes below this precision collapse to zero.
PRECISION_EXPONENT = 15
MIN_BASE = 1e-15
COMPARE_TOLERANCE = 1e-10
FLOOR_TOLERANCE = 1e-9
MAX_SAFE_INTEGER = float(2 ** 53 - 1)


@dataclass(frozen=True)
class BigNumber:
    base: float = 0.0
    exponent: int = 0

    def to_dict(self) -> dict:
        return {"base": self.base, "exponent": self.exponent}

    @classmethod
    def from_dict(cls, data: Mapping) -> "BigNumber":
        return to_safe_number(data)

    def is_zero(self) -> bool:
        return self.base == 0.0

    def __lt__(self, other: "Number") -> bool:
        return compare(self, other) < 0

    def __le__(self, other: "Number") -> bool:
        return compare(self, other) <= 0

    def __gt__(self, other: "Number") -> bool:
        return compare(self, other) > 0

    def __ge__(self, other: "Number") -> bool:
        return compare(self, other) >= 0

    def __str__(self) -> str:
        return f"{self.base}e{self.exponent}"


Number = Union[BigNumber, int, float, str, Mapping]

ZERO = BigNumber(0.0, 0)
ONE = BigNumber(1.0, 0)
MAX_VALUE = BigNumber(1.7976931348623157, 308)


def normalize(base: float, exponent: int = 0) -> BigNumber:
    """Scale ``base`` into [1, 10) and adjust ``exponent`` to match."""
    if isinstance(base, bool):
        base = float(base)
    if not isinstance(base, (int, float)) or math.isnan(base):
        return ZERO
    if math.isinf(base):
        return MAX_VALUE if base > 0 else negate(MAX_VALUE)
    base = float(base)
    exponent = int(exponent)
    if base == 0.0:
        return ZERO
    if abs(base) >= 10.0 or abs(base) < 1.0:
        shift = int(math.floor(math.log10(abs(base))))
        if exponent + shift < -PRECISION_EXPONENT:
            return ZERO
        if abs(shift) <= 300:
            # Single scaling step; the loops below only fix off-by-one results.
            if shift > 0:
                base /= 10.0 ** shift
            else:
                base *= 10.0 ** -shift
            exponent += shift
    while abs(base) >= 10.0:
        base /= 10.0
        exponent += 1
    while abs(base) < 1.0:
        base *= 10.0
        exponent -= 1
    if abs(base) < MIN_BASE or exponent < -PRECISION_EXPONENT:
        return ZERO
    return BigNumber(base, exponent)


def create(value: float, exponent: int = 0) -> BigNumber:
    return normalize(value, exponent)


def to_safe_number(value: Number) -> BigNumber:
    """Coerce any supported representation into a normalized BigNumber."""
    if isinstance(value, BigNumber):
        return normalize(value.base, value.exponent)
    if isinstance(value, Mapping):
        try:
            return normalize(float(value.get("base", 0.0)), int(value.get("exponent", 0)))
        except (TypeError, ValueError, OverflowError):
            return ZERO
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return ZERO
    if isinstance(value, int) and not isinstance(value, bool):
        # Large ints lose nothing but float precision when split this way.
        if abs(value) >= 10 ** 300:
            digits = len(str(abs(value))) - 1
            lead = value / 10 ** (digits - 15) if digits > 15 else float(value)
            return normalize(lead, max(0, digits - 15))
        return normalize(float(value))
    if isinstance(value, (float, bool)):
        return normalize(float(value))
    return ZERO


def to_plain_number(value: Number) -> float:
    """Convert to a float; exponents above 15 are capped at MAX_SAFE_INTEGER."""
    n = to_safe_number(value)
    if n.base == 0.0:
        return 0.0
    if n.exponent > PRECISION_EXPONENT:
        return MAX_SAFE_INTEGER if n.base > 0 else -MAX_SAFE_INTEGER
    return n.base * 10.0 ** n.exponent


def is_zero(value: Number) -> bool:
    return to_safe_number(value).base == 0.0


def negate(value: Number) -> BigNumber:
    n = to_safe_number(value)
    if n.base == 0.0:
        return ZERO
    return BigNumber(-n.base, n.exponent)


def add(a: Number, b: Number) -> BigNumber:
    x = to_safe_number(a)
    y = to_safe_number(b)
    if y.base == 0.0:
        return x
    if x.base == 0.0:
        return y
    if x.exponent == y.exponent:
        return normalize(x.base + y.base, x.exponent)
    diff = x.exponent - y.exponent
    if abs(diff) > PRECISION_EXPONENT:
        return x if diff > 0 else y
    if diff > 0:
        return normalize(x.base + y.base / 10.0 ** diff, x.exponent)
    return normalize(x.base / 10.0 ** -diff + y.base, y.exponent)


def subtract(a: Number, b: Number) -> BigNumber:
    """``a - b`` clamped at zero. Not for signed arithmetic."""
    result = add(a, negate(b))
    if result.base < 0.0:
        return ZERO
    return result


def multiply(a: Number, b: Number) -> BigNumber:
    x = to_safe_number(a)
    y = to_safe_number(b)
    if x.base == 0.0 or y.base == 0.0:
        return ZERO
    return normalize(x.base * y.base, x.exponent + y.exponent)


def divide(a: Number, b: Number) -> BigNumber:
    x = to_safe_number(a)
    y = to_safe_number(b)
    if y.base == 0.0:
        return MAX_VALUE
    if x.base == 0.0:
        return ZERO
    return normalize(x.base / y.base, x.exponent - y.exponent)


def _sign(base: float) -> int:
    if base > 0.0:
        return 1
    if base < 0.0:
        return -1
    return 0


def compare(a: Number, b: Number) -> int:
    """Return -1, 0 or 1. Bases within 1e-10 of each other compare equal."""
    x = to_safe_number(a)
    y = to_safe_number(b)
    sx = _sign(x.base)
    sy = _sign(y.base)
    if sx != sy:
        return 1 if sx > sy else -1
    if sx == 0:
        return 0
    if x.exponent != y.exponent:
        result = 1 if x.exponent > y.exponent else -1
        return result * sx
    diff = x.base - y.base
    if abs(diff) < COMPARE_TOLERANCE:
        return 0
    return 1 if diff > 0 else -1


def safe_min(a: Number, b: Number) -> BigNumber:
    return to_safe_number(a) if compare(a, b) <= 0 else to_safe_number(b)


def safe_max(a: Number, b: Number) -> BigNumber:
    return to_safe_number(a) if compare(a, b) >= 0 else to_safe_number(b)


def log10(value: Number) -> float:
    """Base-10 logarithm as a float; non-positive input yields 0.0."""
    n = to_safe_number(value)
    if n.base <= 0.0:
        return 0.0
    return math.log10(n.base) + n.exponent


def power(base: Number, exponent: Number) -> BigNumber:
    """Raise ``base`` to ``exponent``.

    Exponents up to 15 use ordinary ``pow``. Larger exponents go through
    ``10 ** (exponent * log10(base))``; once that result exponent passes 15
    only the sign and the integer exponent are kept.
    """
    b = to_safe_number(base)
    if isinstance(exponent, (int, float)):
        e = float(exponent)
    else:
        e = to_plain_number(exponent)
    if math.isnan(e):
        return ZERO
    if e == 0.0:
        return ONE
    if b.base == 0.0:
        return ZERO if e > 0 else MAX_VALUE
    integral = math.isfinite(e) and e.is_integer()
    if b.base < 0.0 and not integral:
        return ZERO
    sign = -1 if b.base < 0.0 and int(e) % 2 == 1 else 1
    magnitude = BigNumber(abs(b.base), b.exponent)

    result_exponent = e * log10(magnitude)
    if math.isnan(result_exponent):
        # 1 ** inf
        return ONE
    if math.isinf(result_exponent):
        return MAX_VALUE if result_exponent > 0 else ZERO

    if e <= PRECISION_EXPONENT:
        if b.exponent <= PRECISION_EXPONENT:
            try:
                plain = math.pow(to_plain_number(magnitude), e)
            except (OverflowError, ValueError):
                plain = None
            if plain is not None and math.isfinite(plain):
                return normalize(sign * plain)
    elif result_exponent > PRECISION_EXPONENT:
        return BigNumber(float(sign), int(math.floor(result_exponent)))

    if result_exponent < -PRECISION_EXPONENT:
        return ZERO
    whole = math.floor(result_exponent)
    return normalize(sign * 10.0 ** (result_exponent - whole), whole)


def sqrt(value: Number) -> BigNumber:
    n = to_safe_number(value)
    if n.base <= 0.0:
        return ZERO
    if n.exponent % 2 == 0:
        return normalize(math.sqrt(n.base), n.exponent // 2)
    return normalize(math.sqrt(n.base * 10.0), (n.exponent - 1) // 2)


def floor(value: Number) -> BigNumber:
    """Round down to a whole number.

    Above exponent 15 only the base is floored. Below it the value is
    floored as a plain float, treating anything within 1e-9 of the next
    integer as that integer.
    """
    n = to_safe_number(value)
    if n.base == 0.0:
        return ZERO
    if n.exponent > PRECISION_EXPONENT:
        return normalize(math.floor(n.base), n.exponent)
    plain = to_plain_number(n)
    nearest = round(plain)
    if abs(plain - nearest) < FLOOR_TOLERANCE:
        return normalize(float(nearest))
    return normalize(float(math.floor(plain)))


def total(values: Iterable[Number]) -> BigNumber:
    result = ZERO
    for value in values:
        result = add(result, value)
    return result
