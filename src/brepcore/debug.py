"""Diagnostic records for visualising the triangle containment checks.

A :class:`DebugInfo` is passed explicitly into the triangulation and only
ever appended to.  Recording is optional and never changes results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from brepcore.geom import Point, Vector


@dataclass
class Ray:
    """A ray in model space; ``direction`` is not normalised."""

    origin: Point
    direction: Vector


@dataclass
class TriangleEdgeCheck:
    """One ray cast from the midpoint of a triangle edge.

    ``hits`` holds the distinct, rounded ray parameters at which the ray
    crossed the face boundary.
    """

    ray: Ray
    hits: List[float] = field(default_factory=list)


@dataclass
class DebugInfo:
    triangle_edge_checks: List[TriangleEdgeCheck] = field(default_factory=list)

    def clear(self) -> None:
        self.triangle_edge_checks.clear()

    def extend(self, other: "DebugInfo") -> None:
        self.triangle_edge_checks.extend(other.triangle_edge_checks)


__all__ = ['Ray', 'TriangleEdgeCheck', 'DebugInfo']
