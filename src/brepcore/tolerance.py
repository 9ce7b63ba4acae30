"""Approximation tolerance.

The tolerance bounds how far an approximated polyline may deviate from the
curve it stands in for.  It is always passed explicitly; there is no
global tolerance.
"""

from __future__ import annotations

import math

from brepcore.geom import Aabb
from brepcore.scalar import Scalar

## models are approximated to this fraction of their smallest extent
TOLERANCE_DIVISOR = 1000.0


class Tolerance:
    """A positive, finite distance."""

    __slots__ = ('_value',)

    def __init__(self, value):
        value = float(value)
        if not math.isfinite(value) or value <= 0.0:
            raise ValueError(f"tolerance must be positive and finite, got {value}")
        self._value = Scalar(value)

    @classmethod
    def from_aabb(cls, aabb: Aabb, divisor: float = TOLERANCE_DIVISOR) -> "Tolerance":
        """Derive a tolerance from the smallest non-zero extent of ``aabb``.

        Flat models (a single face, say) have a zero extent along one axis;
        that axis is ignored.
        """
        extents = [float(e) for e in aabb.extents() if float(e) > 0.0]
        if not extents:
            raise ValueError("can't derive a tolerance from an empty bounding box")
        return cls(min(extents) / divisor)

    def inner(self) -> Scalar:
        return self._value

    def __float__(self) -> float:
        return float(self._value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tolerance):
            return NotImplemented
        return self._value == other._value

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"Tolerance({float(self._value)!r})"


__all__ = ['TOLERANCE_DIVISOR', 'Tolerance']
