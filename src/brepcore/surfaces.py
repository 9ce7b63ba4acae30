"""Surface parametrisation between model space and surface space.

A :class:`Surface` is the plane swept by the line ``origin + s·u`` along
the vector ``v``.  Surface coordinates ``(s, t)`` map to the model point
``origin + u·s + v·t``.  ``u`` and ``v`` need not be unit length or
orthogonal, only independent, so converting model points back into
surface coordinates solves the 2x2 normal equations of the projection.

Copyright (c) 2025 brepcore contributors
MIT License
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from brepcore.geom import Point, Vector


@dataclass(frozen=True, order=True)
class Surface:
    """A planar surface with a 2D parametrisation."""

    origin: Point
    u: Vector
    v: Vector

    @classmethod
    def xy_plane(cls) -> "Surface":
        return cls(Point([0.0, 0.0, 0.0]),
                   Vector([1.0, 0.0, 0.0]),
                   Vector([0.0, 1.0, 0.0]))

    @classmethod
    def from_points(cls, points: Sequence) -> "Surface":
        """Plane through three points; ``a`` is the surface origin."""
        a, b, c = (Point(p) for p in points)
        return cls(a, b - a, c - a)

    def _basis(self) -> np.ndarray:
        return np.column_stack([self.u.to_array(), self.v.to_array()])

    def point_model_to_surface(self, point) -> Point:
        """Project a model point into surface coordinates.

        Points off the surface are projected perpendicularly.
        """
        basis = self._basis()
        offset = Point(point).to_array() - self.origin.to_array()
        gram = basis.T @ basis
        coords = np.linalg.solve(gram, basis.T @ offset)
        return Point.from_array(coords)

    def point_surface_to_model(self, point) -> Point:
        return self.origin + self.vector_surface_to_model(Point(point).coords)

    def vector_surface_to_model(self, vector) -> Vector:
        s, t = Vector(vector)
        return self.u * s + self.v * t

    def normal(self) -> Vector:
        return self.u.cross(self.v).normalize()

    def distance_to_point(self, point) -> float:
        offset = Point(point) - self.origin
        return abs(float(offset.dot(self.normal())))

    def reverse(self) -> "Surface":
        """Same plane with the opposite normal."""
        return Surface(self.origin, self.u, -self.v)


__all__ = ['Surface']
