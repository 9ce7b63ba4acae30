"""Points, vectors and simple compound primitives for brepcore.

Points and vectors are immutable tuples of :class:`~brepcore.scalar.Scalar`
of any dimension.  Subtracting two points yields a vector; adding a vector
to a point yields a point.  Both are hashable and totally ordered
(lexicographically), so they can serve as deduplication keys.

Copyright (c) 2025 brepcore contributors
MIT License
"""

from __future__ import annotations

import math
from typing import Iterable, Iterator, Optional, Sequence, Tuple

import numpy as np

from brepcore.scalar import Scalar

## default tolerance for geometric validation, in model units
epsilon = 0.000005


def _scalars(values: Iterable) -> Tuple[Scalar, ...]:
    return tuple(v if isinstance(v, Scalar) else Scalar(v) for v in values)


class _Coords:
    """Shared behaviour of :class:`Point` and :class:`Vector`."""

    __slots__ = ("_coords",)

    def __init__(self, coords: Iterable = ()):
        if isinstance(coords, _Coords):
            coords = coords._coords
        elif isinstance(coords, np.ndarray):
            coords = coords.tolist()
        self._coords = _scalars(coords)

    @classmethod
    def from_array(cls, array):
        return cls(np.asarray(array, dtype=float).tolist())

    def to_array(self) -> np.ndarray:
        return np.array([float(c) for c in self._coords], dtype=float)

    def to_floats(self) -> Tuple[float, ...]:
        return tuple(float(c) for c in self._coords)

    @property
    def dim(self) -> int:
        return len(self._coords)

    @property
    def components(self) -> Tuple[Scalar, ...]:
        return self._coords

    def __len__(self) -> int:
        return len(self._coords)

    def __iter__(self) -> Iterator[Scalar]:
        return iter(self._coords)

    def __getitem__(self, index) -> Scalar:
        return self._coords[index]

    @property
    def x(self) -> Scalar:
        return self._coords[0]

    @property
    def y(self) -> Scalar:
        return self._coords[1]

    @property
    def z(self) -> Scalar:
        return self._coords[2]

    # surface coordinates
    u = x
    v = y

    # curve coordinate
    t = x

    def _check_dim(self, other: "_Coords") -> None:
        if len(self._coords) != len(other._coords):
            raise ValueError(
                f"dimension mismatch: {len(self._coords)} != {len(other._coords)}")

    def __eq__(self, other) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._coords == other._coords

    def __lt__(self, other) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._coords < other._coords

    def __le__(self, other) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._coords <= other._coords

    def __gt__(self, other) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._coords > other._coords

    def __ge__(self, other) -> bool:
        if type(self) is not type(other):
            return NotImplemented
        return self._coords >= other._coords

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._coords))

    def is_finite(self) -> bool:
        return all(math.isfinite(float(c)) for c in self._coords)

    def __repr__(self) -> str:
        inner = ", ".join(repr(float(c)) for c in self._coords)
        return f"{type(self).__name__}([{inner}])"


class Vector(_Coords):
    """A D-dimensional vector."""

    __slots__ = ()

    @classmethod
    def zero(cls, dim: int) -> "Vector":
        return cls([0.0] * dim)

    def __add__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_dim(other)
        return Vector(a + b for a, b in zip(self._coords, other._coords))

    def __sub__(self, other: "Vector") -> "Vector":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_dim(other)
        return Vector(a - b for a, b in zip(self._coords, other._coords))

    def __mul__(self, factor) -> "Vector":
        return Vector(c * factor for c in self._coords)

    __rmul__ = __mul__

    def __truediv__(self, divisor) -> "Vector":
        return Vector(c / divisor for c in self._coords)

    def __neg__(self) -> "Vector":
        return Vector(-c for c in self._coords)

    def dot(self, other: "Vector") -> Scalar:
        self._check_dim(other)
        return Scalar(sum(float(a) * float(b)
                          for a, b in zip(self._coords, other._coords)))

    def cross(self, other: "Vector") -> "Vector":
        if len(self) != 3 or len(other) != 3:
            raise ValueError("cross product is only defined for 3D vectors")
        ax, ay, az = self.to_floats()
        bx, by, bz = other.to_floats()
        return Vector([ay * bz - az * by,
                       az * bx - ax * bz,
                       ax * by - ay * bx])

    def magnitude(self) -> Scalar:
        return Scalar(math.sqrt(sum(float(c) ** 2 for c in self._coords)))

    def normalize(self) -> "Vector":
        mag = self.magnitude()
        if not mag:
            raise ValueError("cannot normalize a zero-length vector")
        return self / mag


class Point(_Coords):
    """A D-dimensional point."""

    __slots__ = ()

    @classmethod
    def origin(cls, dim: int = 3) -> "Point":
        return cls([0.0] * dim)

    @property
    def coords(self) -> Vector:
        """The vector from the origin to this point."""
        return Vector(self._coords)

    def __add__(self, other: Vector) -> "Point":
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_dim(other)
        return Point(a + b for a, b in zip(self._coords, other._coords))

    def __sub__(self, other):
        if isinstance(other, Point):
            self._check_dim(other)
            return Vector(a - b for a, b in zip(self._coords, other._coords))
        if isinstance(other, Vector):
            self._check_dim(other)
            return Point(a - b for a, b in zip(self._coords, other._coords))
        return NotImplemented

    def distance_to(self, other: "Point") -> Scalar:
        return (self - other).magnitude()


class Segment:
    """A straight segment between two points."""

    __slots__ = ("points",)

    def __init__(self, a: Point, b: Point):
        self.points = (a, b)

    @property
    def a(self) -> Point:
        return self.points[0]

    @property
    def b(self) -> Point:
        return self.points[1]

    def midpoint(self) -> Point:
        a, b = self.points
        return a + (b - a) / Scalar.TWO

    def reverse(self) -> "Segment":
        return Segment(self.points[1], self.points[0])

    def __iter__(self):
        return iter(self.points)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Segment):
            return NotImplemented
        return self.points == other.points

    def __hash__(self) -> int:
        return hash(("Segment",) + self.points)

    def __repr__(self) -> str:
        return f"Segment({self.points[0]!r}, {self.points[1]!r})"


class Triangle:
    """Three points; 2D in surface space or 3D in model space."""

    __slots__ = ("points",)

    def __init__(self, a: Point, b: Point, c: Point):
        self.points = (a, b, c)

    def __iter__(self):
        return iter(self.points)

    def __getitem__(self, index) -> Point:
        return self.points[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Triangle):
            return NotImplemented
        return self.points == other.points

    def __hash__(self) -> int:
        return hash(("Triangle",) + self.points)

    def reverse(self) -> "Triangle":
        a, b, c = self.points
        return Triangle(a, c, b)

    def signed_area(self) -> float:
        """Signed area of a 2D triangle; positive when counter-clockwise."""
        (ax, ay), (bx, by), (cx, cy) = (p.to_floats()[:2] for p in self.points)
        return 0.5 * ((bx - ax) * (cy - ay) - (cx - ax) * (by - ay))

    def area(self) -> float:
        a, b, c = self.points
        if a.dim == 2:
            return abs(self.signed_area())
        return 0.5 * float((b - a).cross(c - a).magnitude())

    def normal(self) -> Optional[Vector]:
        """Unit normal of a 3D triangle, or ``None`` if degenerate."""
        a, b, c = self.points
        n = (b - a).cross(c - a)
        if float(n.magnitude()) <= epsilon * epsilon:
            return None
        return n.normalize()

    def __repr__(self) -> str:
        return "Triangle({!r}, {!r}, {!r})".format(*self.points)


class Aabb:
    """Axis-aligned bounding box.

    An empty box is represented with ``min == max``.
    """

    __slots__ = ("min", "max")

    def __init__(self, min: Point, max: Point):
        self.min = min
        self.max = max

    @classmethod
    def from_points(cls, points: Iterable[Point], dim: int = 3) -> "Aabb":
        arr = [p.to_floats() for p in points]
        if not arr:
            origin = Point.origin(dim)
            return cls(origin, origin)
        data = np.asarray(arr, dtype=float)
        return cls(Point.from_array(data.min(axis=0)),
                   Point.from_array(data.max(axis=0)))

    def extents(self) -> Vector:
        return self.max - self.min

    def center(self) -> Point:
        return self.min + self.extents() / Scalar.TWO

    def merged(self, other: "Aabb") -> "Aabb":
        lo = np.minimum(self.min.to_array(), other.min.to_array())
        hi = np.maximum(self.max.to_array(), other.max.to_array())
        return Aabb(Point.from_array(lo), Point.from_array(hi))

    def contains(self, point: Point) -> bool:
        return all(lo <= c <= hi for lo, c, hi in zip(self.min, point, self.max))

    def is_empty(self) -> bool:
        return self.min == self.max

    def __eq__(self, other) -> bool:
        if not isinstance(other, Aabb):
            return NotImplemented
        return self.min == other.min and self.max == other.max

    def __repr__(self) -> str:
        return f"Aabb(min={self.min!r}, max={self.max!r})"


def points(values: Sequence[Sequence[float]]) -> Tuple[Point, ...]:
    """Convenience: turn nested coordinate sequences into points."""
    return tuple(Point(v) for v in values)


__all__ = [
    'epsilon',
    'Point',
    'Vector',
    'Segment',
    'Triangle',
    'Aabb',
    'points',
]
