from __future__ import annotations

import math

from fishsim import bignum
from fishsim.bignum import Number

SUFFIXES = [
    "",
    "K",
    "M",
    "B",
    "T",
    "Qa",
    "Qi",
    "Sx",
    "Sp",
    "Oc",
    "No",
    "Dc",
]

SCIENTIFIC_EXPONENT = 15


def format_number(value: Number) -> str:
    """Human-readable fish count: suffixes below 1e15, e-notation above."""
    n = bignum.to_safe_number(value)
    if n.base == 0.0:
        return "0"
    if n.exponent >= SCIENTIFIC_EXPONENT:
        return f"{n.base:.2f}e{n.exponent}"

    plain = bignum.to_plain_number(n)
    sign = "-" if plain < 0 else ""
    scaled = abs(plain)
    group = 0
    while scaled >= 1000.0 and group < len(SUFFIXES) - 1:
        scaled /= 1000.0
        group += 1

    if scaled >= 100.0 or (group == 0 and float(scaled).is_integer()):
        out = str(int(math.floor(scaled)))
    else:
        out = f"{scaled:.2f}"
    return f"{sign}{out}{SUFFIXES[group]}"


def format_duration(seconds: float) -> str:
    if not math.isfinite(seconds) or seconds <= 0.0:
        return "0s"
    if seconds < 60.0:
        return f"{seconds:.1f}s"
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes}m {secs}s"
    return f"{minutes}m {secs}s"
