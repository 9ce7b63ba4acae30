"""Face triangulation for brepcore.

Each face is triangulated independently:

1. approximate every boundary cycle as a closed polyline;
2. project the polylines into surface coordinates (a :class:`Polygon`);
3. triangulate the boundary points without constraints, which covers the
   convex hull of the face (``scipy.spatial.Delaunay``);
4. keep only the candidate triangles that :meth:`Polygon.contains_triangle`
   accepts;
5. lift the accepted triangles back into model space.

The containment test casts a ray from the midpoint of every triangle edge
that isn't itself a boundary segment toward a point known to lie outside
the face, and counts boundary crossings.  Ray parameters are rounded before
they are counted so that a ray passing through a boundary vertex, and
therefore hitting both segments attached to it, is counted once.

Triangulation never fails; a degenerate face simply yields fewer or no
triangles.

Copyright (c) 2025 brepcore contributors
MIT License
"""

from __future__ import annotations

import concurrent.futures
import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger
from scipy.spatial import Delaunay, QhullError

from brepcore.approx import CycleApprox, FaceApprox
from brepcore.debug import DebugInfo, Ray, TriangleEdgeCheck
from brepcore.geom import Aabb, Point, Segment, Triangle
from brepcore.shape import Handle, Shape
from brepcore.surfaces import Surface
from brepcore.tolerance import Tolerance

## ray parameters are rounded to this many decimal digits before counting
HIT_DECIMALS = 6

# segment parameters this close outside [0, 1] still count as a hit
_SEGMENT_SLACK = 1e-12

Point2D = Tuple[float, float]


def ray_segment_intersection(origin: Point2D, direction: Point2D,
                             a: Point2D, b: Point2D) -> Optional[float]:
    """Return the ray parameter where the ray hits segment ``a``-``b``.

    The parameter is measured in units of ``direction``.  Rays parallel to
    the segment, and any NaN input, count as no intersection.
    """
    ox, oy = origin
    dx, dy = direction
    ax, ay = a
    ex, ey = b[0] - ax, b[1] - ay

    denom = dx * ey - dy * ex
    if denom == 0.0 or not math.isfinite(denom):
        return None

    wx, wy = ax - ox, ay - oy
    t = (wx * ey - wy * ex) / denom
    s = (wx * dy - wy * dx) / denom
    if t >= 0.0 and -_SEGMENT_SLACK <= s <= 1.0 + _SEGMENT_SLACK:
        return t
    return None


class Polygon:
    """The boundary of a face, in surface coordinates.

    Parameters
    ----------
    surface : Surface
        The surface of the face; used to project the boundary and to
        lift debug rays back into model space.
    exterior : CycleApprox
        Approximation of the outer boundary.
    interiors : iterable of CycleApprox
        Approximations of the holes.
    """

    def __init__(self, surface: Surface, exterior: CycleApprox,
                 interiors: Iterable[CycleApprox] = ()):
        self.surface = surface
        self._model_points: Dict[Point, Point] = {}
        self._surface_points: Dict[Point, Point] = {}
        self._segments: List[Tuple[Point, Point]] = []
        self._segment_set = set()

        for cycle in [exterior, *interiors]:
            for a, b in cycle.segments():
                segment = (self._project(a), self._project(b))
                if segment not in self._segment_set:
                    self._segment_set.add(segment)
                    self._segments.append(segment)

        self._segment_floats = [(a.to_floats(), b.to_floats())
                                for a, b in self._segments]

    def _project(self, point: Point) -> Point:
        projected = self._surface_points.get(point)
        if projected is None:
            projected = self.surface.point_model_to_surface(point)
            self._surface_points[point] = projected
            self._model_points.setdefault(projected, point)
        return projected

    @property
    def segments(self) -> List[Tuple[Point, Point]]:
        return list(self._segments)

    def points(self) -> List[Point]:
        """Distinct boundary points in surface coordinates, in boundary order."""
        return list(self._model_points)

    def point_to_model(self, point: Point) -> Point:
        """Lift a surface point to model space.

        Boundary points map back to the exact model points they were
        projected from.
        """
        model = self._model_points.get(point)
        if model is None:
            model = self.surface.point_surface_to_model(point)
        return model

    def contains_segment(self, segment) -> bool:
        """Return True if ``segment`` is a boundary segment, in either
        orientation."""
        a, b = segment
        return (a, b) in self._segment_set or (b, a) in self._segment_set

    def contains_point(self, point: Point, outside: Point,
                       debug_info: Optional[DebugInfo] = None,
                       decimals: int = HIT_DECIMALS) -> bool:
        """Ray-casting parity test for a single surface point.

        ``outside`` must lie outside the face.  Points exactly on the
        boundary are not handled specially.
        """
        direction = outside - point
        origin = point.to_floats()
        dir_ = direction.to_floats()
        hits = []
        for a, b in self._segment_floats:
            t = ray_segment_intersection(origin, dir_, a, b)
            if t is None:
                continue
            t = round(t, decimals)
            if t not in hits:
                hits.append(t)

        if debug_info is not None:
            ray = Ray(self.surface.point_surface_to_model(point),
                      self.surface.vector_surface_to_model(direction))
            debug_info.triangle_edge_checks.append(TriangleEdgeCheck(ray, hits))

        return len(hits) % 2 == 1

    def contains_triangle(self, triangle, outside: Point,
                          debug_info: Optional[DebugInfo] = None,
                          decimals: int = HIT_DECIMALS) -> bool:
        """Return True if ``triangle`` lies within the face.

        Every edge of the triangle is either a boundary segment, or its
        midpoint must be inside the face.  The first edge found outside
        rejects the whole triangle.
        """
        a, b, c = triangle
        for segment in ((a, b), (b, c), (c, a)):
            if self.contains_segment(segment):
                continue
            center = Segment(*segment).midpoint()
            if not self.contains_point(center, outside, debug_info, decimals):
                return False
        return True


def delaunay(points: Sequence[Point]) -> List[Triangle]:
    """Unconstrained Delaunay triangulation of 2D ``points``.

    The result covers the convex hull of the points.  Fewer than three
    points, or a degenerate (e.g. collinear) point set, yield no triangles.
    """
    points = list(points)
    if len(points) < 3:
        return []
    coords = np.asarray([p.to_floats()[:2] for p in points], dtype=float)
    try:
        tri = Delaunay(coords)
    except QhullError:
        return []
    return [Triangle(points[i], points[j], points[k])
            for i, j, k in tri.simplices]


def outside_point(points: Iterable[Point]) -> Point:
    """A 2D point outside the bounding box of ``points``."""
    aabb = Aabb.from_points(points, dim=2)
    offset = [float(e) if float(e) > 0.0 else 1.0 for e in aabb.extents()]
    return Point([float(m) + o for m, o in zip(aabb.max, offset)])


def triangulate_face(face: Handle, tolerance,
                     debug_info: Optional[DebugInfo] = None) -> List[Triangle]:
    """Triangulate one face into model-space triangles.

    Accepted triangles are wound counter-clockwise in surface coordinates,
    so their normals agree with the surface normal.
    """
    if not isinstance(tolerance, Tolerance):
        tolerance = Tolerance(tolerance)

    shape = face.store
    surface = shape.get(face.get().surface)
    approx = FaceApprox.from_face(face, tolerance)
    polygon = Polygon(surface, approx.exterior, approx.interiors)

    points = polygon.points()
    outside = outside_point(points)
    candidates = delaunay(points)

    triangles = []
    for candidate in candidates:
        if not polygon.contains_triangle(candidate, outside, debug_info):
            continue
        if candidate.signed_area() < 0.0:
            candidate = candidate.reverse()
        triangles.append(Triangle(*(polygon.point_to_model(p) for p in candidate)))

    logger.debug("face {}: {} boundary points, {} candidates, {} triangles",
                 face.index, len(points), len(candidates), len(triangles))
    return triangles


def triangulate(shape: Shape, tolerance,
                debug_info: Optional[DebugInfo] = None,
                max_workers: Optional[int] = None) -> List[Triangle]:
    """Triangulate every face of ``shape``.

    Per-face meshes are concatenated in face insertion order.  With
    ``max_workers`` greater than one, faces are triangulated concurrently;
    each face records into its own :class:`DebugInfo`, and those are merged
    into ``debug_info`` in face order.
    """
    if not isinstance(tolerance, Tolerance):
        tolerance = Tolerance(tolerance)

    faces = list(shape.faces())
    if max_workers is None or max_workers <= 1 or len(faces) < 2:
        results = [triangulate_face(face, tolerance, debug_info) for face in faces]
    else:
        infos = [DebugInfo() if debug_info is not None else None for _ in faces]
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = [executor.submit(triangulate_face, face, tolerance, info)
                       for face, info in zip(faces, infos)]
            results = [future.result() for future in futures]
        if debug_info is not None:
            for info in infos:
                debug_info.extend(info)

    triangles = [triangle for result in results for triangle in result]
    logger.debug("triangulated {} faces into {} triangles", len(faces), len(triangles))
    return triangles


__all__ = [
    'HIT_DECIMALS',
    'ray_segment_intersection',
    'Polygon',
    'delaunay',
    'outside_point',
    'triangulate_face',
    'triangulate',
]
