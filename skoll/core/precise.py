#!/usr/bin/env python3
"""
SKOLL - Precise Unit Math

Fixed-point arithmetic on plain ints with 18 fractional decimal digits (WAD).

Python ints never overflow, so intermediates such as ``a * b`` before the
division by WAD are exact. Results are checked against the 256-bit ranges the
prices and units are defined over; leaving them is an error, never a wrap.

Signed multiplication and division truncate toward zero, unsigned ones floor
(identical for non-negative operands).
"""

from skoll.exceptions import FixedPointOverflowError, NegativeValuationError

WAD = 10**18
WAD_DECIMALS = 18

MAX_UINT256 = 2**256 - 1
MAX_INT256 = 2**255 - 1
MIN_INT256 = -(2**255)


def _div_toward_zero(numerator: int, denominator: int) -> int:
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


def check_int256(value: int) -> int:
    """Return ``value`` unchanged if it fits a signed 256-bit integer."""
    if value < MIN_INT256 or value > MAX_INT256:
        raise FixedPointOverflowError(f"Value outside int256 range: {value}")
    return value


def check_uint256(value: int) -> int:
    """Return ``value`` unchanged if it fits an unsigned 256-bit integer."""
    if value < 0 or value > MAX_UINT256:
        raise FixedPointOverflowError(f"Value outside uint256 range: {value}")
    return value


def to_uint256(value: int) -> int:
    """
    Checked signed -> unsigned narrowing.

    Raises:
        NegativeValuationError: value is below zero
        FixedPointOverflowError: value does not fit 256 bits
    """
    if value < 0:
        raise NegativeValuationError()
    return check_uint256(value)


def precise_mul(a: int, b: int) -> int:
    """a * b / WAD, truncated toward zero."""
    return check_int256(_div_toward_zero(a * b, WAD))


def precise_div(a: int, b: int) -> int:
    """a * WAD / b, truncated toward zero."""
    if b == 0:
        raise ZeroDivisionError("Cant divide by 0")
    return check_int256(_div_toward_zero(a * WAD, b))


def scale_to_wad(value: int, decimals: int) -> int:
    """
    Rescale a raw feed value carrying ``decimals`` fractional digits to WAD.

    Examples:
        >>> scale_to_wad(180322583, 5)
        1803225830000000000000
        >>> scale_to_wad(10**20, 20)
        1000000000000000000
    """
    if decimals < 0:
        raise ValueError(f"decimals must be non-negative, got {decimals}")
    if decimals <= WAD_DECIMALS:
        return check_uint256(value * 10 ** (WAD_DECIMALS - decimals))
    return value // 10 ** (decimals - WAD_DECIMALS)


def invert_wad(value: int) -> int:
    """Reciprocal of a WAD value, kept at WAD scale: WAD * WAD / value."""
    if value == 0:
        raise ZeroDivisionError("Cant invert 0")
    return check_uint256(WAD * WAD // value)


def ether(amount: "int | str") -> int:
    """Whole units to WAD. ``ether(230) == 230 * 10**18``."""
    return units(amount, WAD_DECIMALS)


def units(amount: "int | str", decimals: int) -> int:
    """
    Human amount to integer units at ``decimals`` (``units(100, 6) == 100_000_000``).

    Strings may carry a fractional part: ``units("1.5", 6) == 1_500_000``.
    Digits beyond ``decimals`` are truncated.
    """
    if isinstance(amount, int):
        return amount * 10**decimals

    text = amount.strip()
    negative = text.startswith("-")
    if negative:
        text = text[1:]
    whole, _, frac = text.partition(".")
    frac = (frac + "0" * decimals)[:decimals]
    result = int(whole or "0") * 10**decimals + int(frac or "0")
    return -result if negative else result
