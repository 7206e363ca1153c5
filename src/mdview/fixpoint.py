"""Exact fixed-point decimal type for price-like values.

A Fixpoint stores ``value * 10_000`` as a signed 64-bit integer, giving
exactly four fractional digits. Arithmetic runs on the scaled integers so
that prices compare reproducibly. Comparisons with plain numbers are exact
and never round the other operand, which keeps equality consistent with
hashing: ``Fixpoint("0.1") != 0.1`` because the float is not exactly 0.1.

Multiplication and division split each magnitude into integral and
fractional parts before combining, so intermediate products stay within the
64-bit range for realistic prices. Results truncate toward zero.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Callable
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from numbers import Integral, Rational, Real
from typing import Any

PRECISION = 4
FACTOR = 10_000

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_ONE = Decimal(1)


def _check_range(raw: int) -> int:
    if not _INT64_MIN <= raw <= _INT64_MAX:
        raise OverflowError(f"Fixpoint representation out of int64 range: {raw}")
    return raw


def _decimal_to_raw(value: Decimal) -> int:
    if not value.is_finite():
        raise ValueError(f"Cannot represent {value} as Fixpoint")
    try:
        scaled = (value * FACTOR).quantize(_ONE, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise OverflowError(f"Fixpoint representation out of int64 range: {value}") from exc
    return _check_range(int(scaled))


def _to_raw(value: object) -> int:
    """Convert a number to the scaled representation, rounding half away from zero."""
    if isinstance(value, Fixpoint):
        return value.raw
    if isinstance(value, Integral):
        return _check_range(int(value) * FACTOR)
    if isinstance(value, Decimal):
        return _decimal_to_raw(value)
    if isinstance(value, Real):
        number = float(value)
        if not math.isfinite(number):
            raise ValueError(f"Cannot represent {number} as Fixpoint")
        # repr() gives the shortest string that round-trips, so 0.1 stays 0.1
        return _decimal_to_raw(Decimal(repr(number)))
    if isinstance(value, str):
        try:
            parsed = Decimal(value.strip())
        except InvalidOperation as exc:
            raise ValueError(f"Invalid Fixpoint literal: {value!r}") from exc
        return _decimal_to_raw(parsed)
    raise TypeError(f"Cannot convert {type(value).__name__} to Fixpoint")


def _is_nan(value: object) -> bool:
    if isinstance(value, Decimal):
        return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


def _multiply_magnitudes(a: int, b: int) -> int:
    return a // FACTOR * b + b // FACTOR * (a % FACTOR) + (a % FACTOR) * (b % FACTOR) // FACTOR


def _divide_magnitudes(a: int, b: int) -> int:
    return a // b * FACTOR + a % b * FACTOR // b


class Fixpoint:
    """Immutable decimal number with four fractional digits.

    Accepts ints, floats, Decimals, strings and other Fixpoints. Mixed
    arithmetic with plain numbers converts the number to Fixpoint first;
    mixed comparisons do not.

    Usage:
        price = Fixpoint("100.5")
        price * 2            # Fixpoint('201')
        str(Fixpoint(1.25))  # '1.25'
    """

    __slots__ = ("_raw",)

    MIN_RAW = _INT64_MIN
    MAX_RAW = _INT64_MAX

    def __init__(self, value: object = 0) -> None:
        object.__setattr__(self, "_raw", _to_raw(value))

    @classmethod
    def from_raw(cls, raw: int) -> Fixpoint:
        """Build a Fixpoint directly from its scaled representation."""
        obj = cls.__new__(cls)
        object.__setattr__(obj, "_raw", _check_range(int(raw)))
        return obj

    @classmethod
    def parse(cls, text: str) -> Fixpoint:
        """Parse the canonical string form produced by ``str()``."""
        if not isinstance(text, str):
            raise TypeError(f"Fixpoint.parse expects str, got {type(text).__name__}")
        return cls(text)

    @property
    def raw(self) -> int:
        """The scaled integer representation (value * 10_000)."""
        return self._raw

    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError("Fixpoint is immutable")

    def __reduce__(self) -> tuple:
        return (Fixpoint.from_raw, (self._raw,))

    # ──────────────────────────────────────────────
    # Conversions
    # ──────────────────────────────────────────────

    def to_decimal(self) -> Decimal:
        """Return the exact value as a Decimal with four fractional digits."""
        return Decimal(self._raw).scaleb(-PRECISION)

    def __int__(self) -> int:
        whole = abs(self._raw) // FACTOR
        return -whole if self._raw < 0 else whole

    def __float__(self) -> float:
        whole = int(self)
        return float(whole) + (self._raw - whole * FACTOR) / FACTOR

    def __bool__(self) -> bool:
        return self._raw != 0

    def __str__(self) -> str:
        whole, fraction = divmod(abs(self._raw), FACTOR)
        sign = "-" if self._raw < 0 else ""
        if fraction == 0:
            return f"{sign}{whole}"
        return f"{sign}{whole}.{fraction:04d}".rstrip("0")

    def __repr__(self) -> str:
        return f"Fixpoint('{self}')"

    def __hash__(self) -> int:
        # Matches the hash of equal ints, floats and Decimals
        return hash(self.to_decimal())

    # ──────────────────────────────────────────────
    # Comparisons
    # ──────────────────────────────────────────────

    def _compare(self, other: object, op: Callable[[Any, Any], bool]) -> bool:
        """Compare exactly against another Fixpoint or a plain number.

        Plain numbers are not rounded to four digits first, so a Fixpoint
        equals a number only when their hashes agree. NaN is unordered and
        never equal.
        """
        if isinstance(other, Fixpoint):
            return op(self._raw, other._raw)
        if isinstance(other, Integral):
            value: Any = int(other)
        elif isinstance(other, (Decimal, Rational)):
            value = other
        elif isinstance(other, Real):
            value = float(other)
        else:
            return NotImplemented
        if _is_nan(value):
            return False
        return op(self.to_decimal(), value)

    def __eq__(self, other: object) -> bool:
        return self._compare(other, operator.eq)

    def __lt__(self, other: object) -> bool:
        return self._compare(other, operator.lt)

    def __le__(self, other: object) -> bool:
        return self._compare(other, operator.le)

    def __gt__(self, other: object) -> bool:
        return self._compare(other, operator.gt)

    def __ge__(self, other: object) -> bool:
        return self._compare(other, operator.ge)

    # ──────────────────────────────────────────────
    # Arithmetic
    # ──────────────────────────────────────────────

    @staticmethod
    def _coerce(other: object) -> int | None:
        """Scaled form of an arithmetic operand; plain numbers round to four digits."""
        if isinstance(other, (Fixpoint, Real, Decimal)):
            return _to_raw(other)
        return None

    def __pos__(self) -> Fixpoint:
        return self

    def __neg__(self) -> Fixpoint:
        return Fixpoint.from_raw(-self._raw)

    def __abs__(self) -> Fixpoint:
        return Fixpoint.from_raw(abs(self._raw))

    def __add__(self, other: object) -> Fixpoint:
        raw = self._coerce(other)
        if raw is None:
            return NotImplemented
        return Fixpoint.from_raw(self._raw + raw)

    __radd__ = __add__

    def __sub__(self, other: object) -> Fixpoint:
        raw = self._coerce(other)
        if raw is None:
            return NotImplemented
        return Fixpoint.from_raw(self._raw - raw)

    def __rsub__(self, other: object) -> Fixpoint:
        raw = self._coerce(other)
        if raw is None:
            return NotImplemented
        return Fixpoint.from_raw(raw - self._raw)

    def __mul__(self, other: object) -> Fixpoint:
        raw = self._coerce(other)
        if raw is None:
            return NotImplemented
        return _signed(_multiply_magnitudes(abs(self._raw), abs(raw)), self._raw, raw)

    __rmul__ = __mul__

    def __truediv__(self, other: object) -> Fixpoint:
        raw = self._coerce(other)
        if raw is None:
            return NotImplemented
        if raw == 0:
            raise ZeroDivisionError("Fixpoint division by zero")
        return _signed(_divide_magnitudes(abs(self._raw), abs(raw)), self._raw, raw)

    def __rtruediv__(self, other: object) -> Fixpoint:
        raw = self._coerce(other)
        if raw is None:
            return NotImplemented
        return Fixpoint.from_raw(raw) / self


def _signed(magnitude: int, lhs: int, rhs: int) -> Fixpoint:
    negative = (lhs < 0) != (rhs < 0)
    return Fixpoint.from_raw(-magnitude if negative else magnitude)
