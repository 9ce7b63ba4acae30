"""Parametric curves: circles and lines.

Curves map between a D-dimensional point and a one-dimensional curve
coordinate.  Both curve types implement the same small protocol:

- ``point_to_curve_coords(point) -> Point<1>``
- ``point_from_curve_coords(point) -> Point<D>``
- ``vector_from_curve_coords(vector) -> Vector<D>``
- ``distance_to_point(point) -> float``

Curves carry geometry only; they have no notion of topology.

Copyright (c) 2025 brepcore contributors
MIT License
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Union

from brepcore.geom import Point, Vector
from brepcore.scalar import Scalar

TAU = 2.0 * math.pi


def _coord(value) -> Scalar:
    """Extract the single component of a 1D point/vector or a bare number."""
    if isinstance(value, (Point, Vector)):
        return value.t
    if isinstance(value, (list, tuple)):
        return Scalar(value[0])
    return Scalar(value)


@dataclass(frozen=True, order=True)
class Circle:
    """An n-dimensional circle.

    ``a`` points from the center to the start of the circle (coordinate 0)
    and its length is the radius.  ``b`` must have the same length and be
    perpendicular to ``a``; together they define the plane of the circle
    and its direction.  These conditions are checked when a circle is
    inserted into a :class:`~brepcore.shape.Shape`, not here.
    """

    center: Point
    a: Vector
    b: Vector

    @classmethod
    def from_center_and_radius(cls, center, radius) -> "Circle":
        """Circle in the plane spanned by the first two axes."""
        center = Point(center)
        r = float(radius)
        a = [0.0] * center.dim
        b = [0.0] * center.dim
        a[0] = r
        b[1] = r
        return cls(center, Vector(a), Vector(b))

    @property
    def radius(self) -> Scalar:
        return self.a.magnitude()

    def reverse(self) -> "Circle":
        """Return the same circle, traversed in the opposite direction."""
        return Circle(self.center, self.a, -self.b)

    def point_to_circle_coords(self, point) -> Point:
        """Convert a point to circle coordinates in ``[0, 2π)``.

        The point is projected into the plane of the circle before its
        angle is computed, ignoring the radius.  This keeps the conversion
        robust against points that are slightly off the curve.  Note that a
        point that is not on the circle at all is not reported as an error;
        callers are responsible for passing sensible points.
        """
        offset = Point(point) - self.center
        u = float(offset.dot(self.a)) / float(self.a.dot(self.a))
        v = float(offset.dot(self.b)) / float(self.b.dot(self.b))
        coord = math.atan2(v, u)
        if coord < 0.0:
            coord += TAU
        # -tiny + 2π can round up to exactly 2π
        if coord >= TAU:
            coord -= TAU
        return Point([coord])

    def point_from_circle_coords(self, point) -> Point:
        return self.center + self.vector_from_circle_coords(point)

    def vector_from_circle_coords(self, vector) -> Vector:
        sin, cos = _coord(vector).sin_cos()
        return self.a * cos + self.b * sin

    def distance_to_point(self, point) -> float:
        point = Point(point)
        nearest = self.point_from_circle_coords(self.point_to_circle_coords(point))
        return float(point.distance_to(nearest))

    # curve protocol
    point_to_curve_coords = point_to_circle_coords
    point_from_curve_coords = point_from_circle_coords
    vector_from_curve_coords = vector_from_circle_coords


@dataclass(frozen=True, order=True)
class Line:
    """An infinite line through ``origin`` along ``direction``.

    The line coordinate of ``origin`` is 0, that of ``origin + direction``
    is 1.
    """

    origin: Point
    direction: Vector

    @classmethod
    def from_points(cls, points: Sequence) -> "Line":
        a, b = (Point(p) for p in points)
        return cls(a, b - a)

    def reverse(self) -> "Line":
        return Line(self.origin + self.direction, -self.direction)

    def point_to_line_coords(self, point) -> Point:
        offset = Point(point) - self.origin
        t = float(offset.dot(self.direction)) / float(self.direction.dot(self.direction))
        return Point([t])

    def point_from_line_coords(self, point) -> Point:
        return self.origin + self.vector_from_line_coords(point)

    def vector_from_line_coords(self, vector) -> Vector:
        return self.direction * _coord(vector)

    def distance_to_point(self, point) -> float:
        point = Point(point)
        nearest = self.point_from_line_coords(self.point_to_line_coords(point))
        return float(point.distance_to(nearest))

    point_to_curve_coords = point_to_line_coords
    point_from_curve_coords = point_from_line_coords
    vector_from_curve_coords = vector_from_line_coords


Curve = Union[Circle, Line]


def is_curve(obj) -> bool:
    return isinstance(obj, (Circle, Line))


__all__ = [
    'TAU',
    'Circle',
    'Line',
    'Curve',
    'is_curve',
]
