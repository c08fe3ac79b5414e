"""
arithmetic.py - Checked u128 Arithmetic

Every balance, allowance and supply mutation routes through checked_add and
checked_sub. Neither wraps nor saturates: an out-of-range result raises.
"""

from __future__ import annotations

from .core import (
    Amount, U128_MAX,
    ArithmeticOverflow, ArithmeticUnderflow,
)


def require_amount(value: Amount, what: str = "amount") -> Amount:
    """
    Validate that value is an int in [0, U128_MAX].

    bool is rejected even though it subclasses int.

    Raises:
        ValueError: If value is not an int or is out of range.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what} must be int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{what} must be non-negative, got {value}")
    if value > U128_MAX:
        raise ValueError(f"{what} exceeds u128 range, got {value}")
    return value


def checked_add(a: Amount, b: Amount) -> Amount:
    """
    Return a + b.

    Raises:
        ArithmeticOverflow: If the sum exceeds U128_MAX.
    """
    result = a + b
    if result > U128_MAX:
        raise ArithmeticOverflow(f"{a} + {b} overflows u128")
    return result


def checked_sub(a: Amount, b: Amount) -> Amount:
    """
    Return a - b.

    Raises:
        ArithmeticUnderflow: If b > a.
    """
    if b > a:
        raise ArithmeticUnderflow(f"{a} - {b} underflows u128")
    return a - b
