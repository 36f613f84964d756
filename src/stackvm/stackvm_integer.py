"""32-bit machine integer helpers."""

import re

INT_BITS = 32
INT_MIN = -(1 << (INT_BITS - 1))
INT_MAX = (1 << (INT_BITS - 1)) - 1

_MASK = (1 << INT_BITS) - 1
_LITERAL = re.compile(r"[+-]?[0-9]+")


def wrap(value: int) -> int:
    """Reduce an arbitrary Python int to a two's-complement machine integer."""
    value &= _MASK
    if value > INT_MAX:
        value -= 1 << INT_BITS

    return value


def parse_literal(text: str) -> int:
    """
    Parse a decimal machine integer literal.

    Surrounding whitespace and a single leading sign are accepted.

    Raises:
        ValueError: If the text is not a decimal integer or does not fit in a machine integer
    """
    stripped = text.strip()
    if not _LITERAL.fullmatch(stripped):
        raise ValueError(f"not a decimal integer: {text!r}")

    value = int(stripped)
    if value < INT_MIN or value > INT_MAX:
        raise ValueError(f"integer out of range: {text!r}")

    return value


def truncating_divide(a: int, b: int) -> int:
    """Divide rounding toward zero; callers reject MIN / -1 before calling."""
    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient

    return quotient


def truncating_modulo(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend."""
    remainder = abs(a) % abs(b)
    return -remainder if a < 0 else remainder
