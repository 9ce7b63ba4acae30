"""Tests for the polygon containment test and face triangulation."""

import itertools
import math

import pytest

from brepcore.approx import FaceApprox
from brepcore.builders import CycleBuilder, FaceBuilder
from brepcore.debug import DebugInfo
from brepcore.geom import Point, Triangle, Vector
from brepcore.shape import Shape
from brepcore.surfaces import Surface
from brepcore.triangulation import (
    Polygon,
    delaunay,
    outside_point,
    ray_segment_intersection,
    triangulate,
    triangulate_face,
)


OUTER = [[0, 0, 0], [4, 0, 0], [4, 4, 0], [0, 4, 0]]
INNER = [[1, 1, 0], [3, 1, 0], [3, 3, 0], [1, 3, 0]]
L_SHAPE = [[0, 0, 0], [4, 0, 0], [4, 2, 0], [2, 2, 0], [2, 4, 0], [0, 4, 0]]

# arbitrary points well outside every test face
OUTSIDE = [Point([8, 8]), Point([-3.17, 11.53]), Point([13.9, -2.41])]


def _polygon(exterior, interiors=()):
    shape = Shape()
    face = FaceBuilder(shape).polygon(exterior, interiors=interiors)
    approx = FaceApprox.from_face(face, 0.01)
    return face, Polygon(Surface.xy_plane(), approx.exterior, approx.interiors)


def _centroid(triangle):
    xs, ys = zip(*(p.to_floats()[:2] for p in triangle))
    return sum(xs) / 3.0, sum(ys) / 3.0


def _in_hole(triangle):
    x, y = _centroid(triangle)
    return 1.0 < x < 3.0 and 1.0 < y < 3.0


def _in_notch(triangle):
    x, y = _centroid(triangle)
    return x > 2.0 and y > 2.0


class TestRaySegmentIntersection:

    def test_hit(self):
        t = ray_segment_intersection((0, 0), (2, 0), (1, -1), (1, 1))
        assert t == pytest.approx(0.5)

    def test_behind_origin(self):
        assert ray_segment_intersection((0, 0), (1, 0), (-1, -1), (-1, 1)) is None

    def test_beside_segment(self):
        assert ray_segment_intersection((0, 0), (1, 0), (1, 1), (1, 2)) is None

    def test_parallel_is_no_intersection(self):
        assert ray_segment_intersection((0, 0), (1, 0), (0, 1), (5, 1)) is None
        assert ray_segment_intersection((0, 0), (1, 0), (1, 0), (5, 0)) is None

    def test_nan_is_no_intersection(self):
        nan = float('nan')
        assert ray_segment_intersection((nan, 0), (1, 0), (1, -1), (1, 1)) is None
        assert ray_segment_intersection((0, 0), (nan, nan), (1, -1), (1, 1)) is None

    def test_segment_endpoint_counts(self):
        t = ray_segment_intersection((0, 0), (1, 1), (1, 1), (2, 0))
        assert t == pytest.approx(1.0)


class TestPolygon:

    def test_contains_segment_either_orientation(self):
        _, polygon = _polygon(OUTER, [INNER])
        assert polygon.contains_segment((Point([0, 0]), Point([4, 0])))
        assert polygon.contains_segment((Point([4, 0]), Point([0, 0])))
        assert polygon.contains_segment((Point([3, 3]), Point([3, 1])))
        assert not polygon.contains_segment((Point([0, 0]), Point([1, 1])))

    def test_contains_point(self):
        _, polygon = _polygon(OUTER, [INNER])
        outside = OUTSIDE[1]
        assert polygon.contains_point(Point([0.5, 2.2]), outside)
        assert not polygon.contains_point(Point([2.1, 1.9]), outside)
        assert not polygon.contains_point(Point([5.1, 1.9]), outside)

    def test_vertex_hits_are_counted_once(self):
        _, polygon = _polygon(OUTER, [INNER])
        # the ray runs along the diagonal, through two corners of the hole
        # and one corner of the outer square
        info = DebugInfo()
        assert polygon.contains_point(Point([0.5, 0.5]), Point([8, 8]), info)
        assert len(info.triangle_edge_checks[0].hits) == 3

    def test_rays_are_only_lifted_for_debug_info(self, monkeypatch):
        _, polygon = _polygon(OUTER, [INNER])

        def fail(*args):
            raise AssertionError("lifted a ray without a debug sink")

        monkeypatch.setattr(Surface, 'point_surface_to_model', fail)
        monkeypatch.setattr(Surface, 'vector_surface_to_model', fail)
        assert polygon.contains_point(Point([0.5, 2.2]), OUTSIDE[1])
        assert not polygon.contains_point(Point([2.1, 1.9]), OUTSIDE[1])

    def test_square_with_hole(self):
        _, polygon = _polygon(OUTER, [INNER])
        candidates = delaunay(polygon.points())
        assert candidates
        accepted = []
        for candidate in candidates:
            inside = polygon.contains_triangle(candidate, OUTSIDE[0])
            assert inside == (not _in_hole(candidate))
            if inside:
                accepted.append(candidate)
        area = sum(t.area() for t in accepted)
        assert area == pytest.approx(16.0 - 4.0)

    def test_order_independent(self):
        _, polygon = _polygon(OUTER, [INNER])
        for candidate in delaunay(polygon.points()):
            results = {polygon.contains_triangle(Triangle(*perm), OUTSIDE[0])
                       for perm in itertools.permutations(candidate.points)}
            assert len(results) == 1

    def test_outside_point_independent(self):
        _, polygon = _polygon(OUTER, [INNER])
        for candidate in delaunay(polygon.points()):
            results = {polygon.contains_triangle(candidate, outside)
                       for outside in OUTSIDE}
            assert len(results) == 1

    def test_no_holes(self):
        _, polygon = _polygon(L_SHAPE)
        candidates = delaunay(polygon.points())
        assert any(_in_notch(c) for c in candidates)
        for candidate in candidates:
            for outside in OUTSIDE:
                inside = polygon.contains_triangle(candidate, outside)
                assert inside == (not _in_notch(candidate))

    def test_hand_made_triangles(self):
        _, polygon = _polygon(OUTER, [INNER])
        inside = Triangle(Point([0.2, 0.2]), Point([0.8, 0.2]), Point([0.2, 0.8]))
        in_hole = Triangle(Point([1.5, 1.5]), Point([2.5, 1.5]), Point([1.5, 2.5]))
        beyond = Triangle(Point([5, 5]), Point([6, 5]), Point([5, 6]))
        for outside in OUTSIDE:
            assert polygon.contains_triangle(inside, outside)
            assert not polygon.contains_triangle(in_hole, outside)
            assert not polygon.contains_triangle(beyond, outside)

    def test_debug_info_does_not_change_results(self):
        _, polygon = _polygon(OUTER, [INNER])
        info = DebugInfo()
        for candidate in delaunay(polygon.points()):
            assert polygon.contains_triangle(candidate, OUTSIDE[0], info) == \
                polygon.contains_triangle(candidate, OUTSIDE[0])
        assert info.triangle_edge_checks
        check = info.triangle_edge_checks[0]
        assert check.ray.origin.dim == 3
        assert check.ray.direction.dim == 3
        assert len(check.hits) == len(set(check.hits))


class TestHelpers:

    def test_delaunay_degenerate(self):
        assert delaunay([Point([0, 0]), Point([1, 0])]) == []
        assert delaunay([Point([0, 0]), Point([1, 0]), Point([2, 0])]) == []

    def test_delaunay_covers_hull(self):
        pts = [Point(p) for p in ([0, 0], [2, 0], [2, 2], [0, 2], [1, 0.5])]
        triangles = delaunay(pts)
        assert sum(t.area() for t in triangles) == pytest.approx(4.0)
        used = {p for t in triangles for p in t}
        assert used == set(pts)

    def test_outside_point(self):
        pts = [Point([0, 0]), Point([4, 2])]
        outside = outside_point(pts)
        assert outside == Point([8, 4])
        flat = outside_point([Point([0, 1]), Point([3, 1])])
        assert flat == Point([6, 2])


class TestTriangulateFace:

    def test_square_with_hole(self):
        shape = Shape()
        face = FaceBuilder(shape).polygon(OUTER, interiors=[INNER])
        triangles = triangulate_face(face, 0.01)
        assert sum(t.area() for t in triangles) == pytest.approx(12.0)
        for t in triangles:
            assert t.normal() == Vector([0, 0, 1])
            assert all(p.dim == 3 for p in t)

    def test_triangles_reuse_boundary_points(self):
        shape = Shape()
        face = FaceBuilder(shape).polygon(OUTER, interiors=[INNER])
        boundary = {Point(p) for p in OUTER + INNER}
        for t in triangulate_face(face, 0.01):
            assert set(t.points) <= boundary

    def test_tilted_face(self):
        surface = Surface.from_points([[0, 0, 0], [1, 0, 1], [0, 1, 0]])
        shape = Shape()
        exterior = [[0, 0, 0], [2, 0, 2], [2, 2, 2], [0, 2, 0]]
        face = FaceBuilder(shape).polygon(exterior, surface=surface)
        triangles = triangulate_face(face, 0.01)
        assert sum(t.area() for t in triangles) == pytest.approx(2.0 * 2.0 * math.sqrt(2))

    def test_disk(self):
        shape = Shape()
        cycle = CycleBuilder(shape).circle(1.0)
        face = FaceBuilder(shape).from_cycles(Surface.xy_plane(), cycle)
        tolerance = 0.001
        triangles = triangulate_face(face, tolerance)
        area = sum(t.area() for t in triangles)
        assert area < math.pi
        assert area > math.pi * (1.0 - tolerance) ** 2

    def test_disk_with_hole_rejects_hole(self):
        shape = Shape()
        cycles = CycleBuilder(shape)
        face = FaceBuilder(shape).from_cycles(
            Surface.xy_plane(), cycles.circle(1.0), [cycles.circle(0.5)])
        triangles = triangulate_face(face, 0.01)
        assert triangles
        for t in triangles:
            x, y = _centroid(t)
            assert math.hypot(x, y) > 0.45

    def test_degenerate_face_yields_nothing(self):
        shape = Shape()
        face = FaceBuilder(shape).polygon([[0, 0, 0], [1, 0, 0], [2, 0, 0]])
        assert triangulate_face(face, 0.01) == []

    def test_debug_info_collects_checks(self):
        shape = Shape()
        face = FaceBuilder(shape).polygon(OUTER, interiors=[INNER])
        info = DebugInfo()
        triangulate_face(face, 0.01, info)
        assert info.triangle_edge_checks
        info.clear()
        assert info.triangle_edge_checks == []


class TestTriangulateShape:

    def _two_faces(self):
        shape = Shape()
        fb = FaceBuilder(shape)
        fb.polygon(OUTER, interiors=[INNER])
        fb.polygon([[0, 0, 0], [4, 0, 0], [4, 0, 4], [0, 0, 4]],
                   surface=Surface.from_points([[0, 0, 0], [1, 0, 0], [0, 0, 1]]))
        return shape

    def test_concatenates_faces(self):
        shape = self._two_faces()
        triangles = triangulate(shape, 0.01)
        assert sum(t.area() for t in triangles) == pytest.approx(12.0 + 16.0)

    def test_parallel_matches_sequential(self):
        shape = self._two_faces()
        sequential_info = DebugInfo()
        parallel_info = DebugInfo()
        sequential = triangulate(shape, 0.01, sequential_info)
        parallel = triangulate(shape, 0.01, parallel_info, max_workers=2)
        assert sequential == parallel
        assert len(sequential_info.triangle_edge_checks) == \
            len(parallel_info.triangle_edge_checks)

    def test_empty_shape(self):
        assert triangulate(Shape(), 0.01) == []

    def test_invalid_tolerance(self):
        with pytest.raises(ValueError):
            triangulate(self._two_faces(), 0.0)
