"""Totally ordered, hashable floating point scalar.

Geometric objects are deduplicated by value, so every coordinate needs a
well defined equality, ordering and hash.  Raw floats don't provide that:
``nan != nan`` and ``-0.0`` compares equal to ``0.0`` while having a
different bit pattern.  ``Scalar`` fixes one explicit rule:

- ``-0.0`` is canonicalised to ``0.0``;
- every NaN is canonicalised to a single NaN, which equals itself and
  sorts above ``+inf``.

All other values compare exactly, as floats do.  Use :meth:`Scalar.is_close`
where a tolerant comparison is wanted.

Copyright (c) 2025 brepcore contributors
MIT License
"""

from __future__ import annotations

import math
import numbers
from functools import total_ordering
from typing import Optional, Tuple, Union

Number = Union[int, float, "Scalar"]

_NAN = float("nan")


def _canonical(value) -> float:
    value = float(value)
    if value != value:
        return _NAN
    if value == 0.0:
        return 0.0
    return value


def _as_float(value) -> Optional[float]:
    if isinstance(value, Scalar):
        return value._value
    if isinstance(value, numbers.Real) and not isinstance(value, bool):
        return float(value)
    return None


@total_ordering
class Scalar:
    """A float with canonical equality, total ordering and hashing."""

    __slots__ = ("_value",)

    def __init__(self, value: Number = 0.0):
        if isinstance(value, Scalar):
            self._value = value._value
        else:
            self._value = _canonical(value)

    @classmethod
    def from_f64(cls, value: float) -> "Scalar":
        return cls(value)

    def into_f64(self) -> float:
        return self._value

    def is_nan(self) -> bool:
        return self._value != self._value

    def _key(self) -> Tuple[int, float]:
        # NaN sorts above everything else, including +inf
        if self.is_nan():
            return (1, 0.0)
        return (0, self._value)

    # -- comparison ------------------------------------------------------

    def __eq__(self, other) -> bool:
        o = _as_float(other)
        if o is None:
            return NotImplemented
        return self._key() == Scalar(o)._key()

    def __lt__(self, other) -> bool:
        o = _as_float(other)
        if o is None:
            return NotImplemented
        return self._key() < Scalar(o)._key()

    def __hash__(self) -> int:
        if self.is_nan():
            return hash((1, 0.0))
        return hash(self._value)

    def is_close(self, other: Number, tol: float) -> bool:
        """Return ``True`` if ``self`` and ``other`` differ by at most ``tol``."""
        return abs(self._value - float(other)) <= tol

    # -- arithmetic ------------------------------------------------------

    def __add__(self, other: Number) -> "Scalar":
        o = _as_float(other)
        if o is None:
            return NotImplemented
        return Scalar(self._value + o)

    __radd__ = __add__

    def __sub__(self, other: Number) -> "Scalar":
        o = _as_float(other)
        if o is None:
            return NotImplemented
        return Scalar(self._value - o)

    def __rsub__(self, other: Number) -> "Scalar":
        o = _as_float(other)
        if o is None:
            return NotImplemented
        return Scalar(o - self._value)

    def __mul__(self, other: Number) -> "Scalar":
        o = _as_float(other)
        if o is None:
            return NotImplemented
        return Scalar(self._value * o)

    __rmul__ = __mul__

    def __truediv__(self, other: Number) -> "Scalar":
        o = _as_float(other)
        if o is None:
            return NotImplemented
        return Scalar(self._value / o)

    def __rtruediv__(self, other: Number) -> "Scalar":
        o = _as_float(other)
        if o is None:
            return NotImplemented
        return Scalar(o / self._value)

    def __neg__(self) -> "Scalar":
        return Scalar(-self._value)

    def __abs__(self) -> "Scalar":
        return Scalar(abs(self._value))

    def __float__(self) -> float:
        return self._value

    def __bool__(self) -> bool:
        return self._value != 0.0

    # -- functions -------------------------------------------------------

    def sqrt(self) -> "Scalar":
        return Scalar(math.sqrt(self._value))

    def sin(self) -> "Scalar":
        return Scalar(math.sin(self._value))

    def cos(self) -> "Scalar":
        return Scalar(math.cos(self._value))

    def sin_cos(self) -> Tuple["Scalar", "Scalar"]:
        return self.sin(), self.cos()

    @staticmethod
    def atan2(y: Number, x: Number) -> "Scalar":
        return Scalar(math.atan2(float(y), float(x)))

    def round(self, decimals: int = 0) -> "Scalar":
        return Scalar(round(self._value, decimals))

    def __repr__(self) -> str:
        return f"Scalar({self._value!r})"

    def __str__(self) -> str:
        return str(self._value)


Scalar.ZERO = Scalar(0.0)
Scalar.ONE = Scalar(1.0)
Scalar.TWO = Scalar(2.0)
Scalar.PI = Scalar(math.pi)


__all__ = ["Scalar"]
