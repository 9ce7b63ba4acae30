"""Polyline approximation of curves, edges and cycles.

Every approximation takes the tolerance as an explicit argument; the
maximum distance between a polyline and the curve it approximates stays
within that tolerance.  Edge approximations start and end on the exact
vertex points, so neighbouring edges of a cycle share their endpoints
bit for bit.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Set, Tuple

from brepcore.curves import TAU, Circle, Line
from brepcore.geom import Point
from brepcore.shape import Handle
from brepcore.tolerance import Tolerance
from brepcore.topology import edge_directions


def number_of_vertices_for_circle(tolerance, radius) -> int:
    """Vertices needed so a regular polygon stays within ``tolerance`` of a
    circle of ``radius``."""
    tol = float(tolerance)
    r = float(radius)
    if tol >= r:
        return 3
    n = math.ceil(math.pi / math.acos(1.0 - tol / r))
    return max(n, 3)


def approx_curve(curve, tolerance, start: Optional[Point] = None,
                 end: Optional[Point] = None) -> List[Point]:
    """Approximate ``curve`` as a list of model points.

    Without ``start``/``end`` a circle is sampled all the way around; the
    first point is not repeated at the end.  With both given, the points
    run from ``start`` to ``end`` (counter-clockwise in circle
    coordinates for circles) and include both.
    """
    if isinstance(curve, Line):
        if start is None or end is None:
            raise ValueError("a line can only be approximated between two points")
        return [start, end]

    if not isinstance(curve, Circle):
        raise TypeError(f"can't approximate {type(curve).__name__}")

    n = number_of_vertices_for_circle(tolerance, curve.radius)
    if start is None or end is None:
        return [curve.point_from_circle_coords([TAU * i / n]) for i in range(n)]

    t0 = float(curve.point_to_circle_coords(start).t)
    t1 = float(curve.point_to_circle_coords(end).t)
    if t1 <= t0:
        t1 += TAU
    steps = max(math.ceil(n * (t1 - t0) / TAU), 1)
    inner = [curve.point_from_circle_coords([t0 + (t1 - t0) * i / steps])
             for i in range(1, steps)]
    return [start] + inner + [end]


def approx_edge(edge: Handle, tolerance, reverse: bool = False) -> List[Point]:
    shape = edge.store
    e = edge.get()
    curve = shape.get(e.curve)
    if e.vertices is None:
        points = approx_curve(curve, tolerance)
    else:
        start, end = (shape.get(shape.get(v).point) for v in e.vertices)
        points = approx_curve(curve, tolerance, start, end)
    if reverse:
        points.reverse()
    return points


def _edge_directions(shape, edges: Sequence[Handle]) -> List[bool]:
    """For each edge of a cycle, whether it is traversed backwards."""
    directions = edge_directions(shape.get(e) for e in edges)
    if directions is None:
        raise ValueError("the edges of the cycle don't form a closed chain")
    return directions


@dataclass
class CycleApprox:
    """Closed polyline approximating one cycle.

    ``points`` starts and ends with the same point.
    """

    points: List[Point]

    @classmethod
    def from_cycle(cls, cycle: Handle, tolerance) -> "CycleApprox":
        shape = cycle.store
        edges = shape.get(cycle).edges
        points: List[Point] = []
        for edge, backwards in zip(edges, _edge_directions(shape, edges)):
            for point in approx_edge(edge, tolerance, reverse=backwards):
                if points and points[-1] == point:
                    continue
                points.append(point)
        if points and points[0] != points[-1]:
            points.append(points[0])
        return cls(points)

    def segments(self) -> List[Tuple[Point, Point]]:
        return [(a, b) for a, b in zip(self.points, self.points[1:])]


@dataclass
class FaceApprox:
    """Approximation of all boundary cycles of a face."""

    exterior: CycleApprox
    interiors: List[CycleApprox] = field(default_factory=list)

    @classmethod
    def from_face(cls, face: Handle, tolerance) -> "FaceApprox":
        if not isinstance(tolerance, Tolerance):
            tolerance = Tolerance(tolerance)
        f = face.get()
        return cls(CycleApprox.from_cycle(f.exterior, tolerance),
                   [CycleApprox.from_cycle(c, tolerance) for c in f.interiors])

    def cycles(self) -> List[CycleApprox]:
        return [self.exterior] + list(self.interiors)

    def points(self) -> Set[Point]:
        return {p for cycle in self.cycles() for p in cycle.points}


__all__ = [
    'number_of_vertices_for_circle',
    'approx_curve',
    'approx_edge',
    'CycleApprox',
    'FaceApprox',
]
