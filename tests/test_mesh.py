"""Tests for the indexed mesh and the mesh checks."""

import pytest

from brepcore.builders import FaceBuilder
from brepcore.checks import CheckResult, edge_use, faces_oriented, mesh_watertight
from brepcore.geom import Point, Triangle
from brepcore.mesh import Mesh, mesh_view
from brepcore.shape import Shape
from brepcore.triangulation import triangulate

A = Point([0, 0, 0])
B = Point([1, 0, 0])
C = Point([1, 1, 0])
D = Point([0, 1, 0])
APEX = Point([0, 0, 1])


class TestMesh:

    def test_vertices_are_shared(self):
        mesh = Mesh.from_triangles([Triangle(A, B, C), Triangle(A, C, D)])
        assert mesh.vertices == [A, B, C, D]
        assert mesh.indices == [0, 1, 2, 0, 2, 3]
        assert mesh.triangle_indices() == [(0, 1, 2), (0, 2, 3)]
        assert len(mesh) == 2
        assert mesh.area() == pytest.approx(1.0)

    def test_push_vertex(self):
        mesh = Mesh()
        assert mesh.push_vertex(A) == 0
        assert mesh.push_vertex(B) == 1
        assert mesh.push_vertex(Point([0.0, -0.0, 0.0])) == 0
        assert len(mesh.vertices) == 2

    def test_triangles_round_trip(self):
        triangles = [Triangle(A, B, C), Triangle(A, C, D)]
        assert list(Mesh.from_triangles(triangles).triangles()) == triangles

    def test_from_triangulated_shape(self):
        shape = Shape()
        FaceBuilder(shape).polygon([[0, 0, 0], [4, 0, 0], [4, 4, 0], [0, 4, 0]],
                                   interiors=[[[1, 1, 0], [3, 1, 0], [3, 3, 0], [1, 3, 0]]])
        mesh = Mesh.from_triangles(triangulate(shape, 0.01))
        assert len(mesh.vertices) == 8
        assert mesh.area() == pytest.approx(12.0)


class TestMeshView:

    def test_normals_and_vertices(self):
        view = list(mesh_view([Triangle(A, B, C)]))
        assert view == [((0.0, 0.0, 1.0), (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0))]

    def test_degenerate_triangles_are_skipped(self):
        flat = Triangle(A, B, Point([2, 0, 0]))
        assert list(mesh_view([flat, Triangle(A, B, C)]))[0][0] == (0.0, 0.0, 1.0)
        assert len(list(mesh_view([flat]))) == 0


class TestChecks:

    def _tetrahedron(self):
        return Mesh.from_triangles([
            Triangle(A, D, B),
            Triangle(A, B, APEX),
            Triangle(B, D, APEX),
            Triangle(D, A, APEX),
        ])

    def test_closed_mesh_is_watertight(self):
        result = mesh_watertight(self._tetrahedron())
        assert isinstance(result, CheckResult)
        assert result.ok
        assert result.warnings == []

    def test_open_mesh_has_boundary(self):
        result = mesh_watertight(Mesh.from_triangles([Triangle(A, B, C), Triangle(A, C, D)]))
        assert not result
        assert '4 boundary edges detected' in result.warnings

    def test_consistent_orientation(self):
        mesh = Mesh.from_triangles([Triangle(A, B, C), Triangle(A, C, D)])
        assert faces_oriented(mesh).ok

    def test_flipped_triangle(self):
        mesh = Mesh.from_triangles([Triangle(A, B, C), Triangle(A, D, C)])
        result = faces_oriented(mesh)
        assert not result.ok
        assert '[1]' in result.warnings[0]

    def test_no_faces(self):
        result = faces_oriented(Mesh())
        assert result.ok
        assert result.warnings

    def test_edge_use(self):
        mesh = Mesh.from_triangles([Triangle(A, B, C), Triangle(A, C, D)])
        uses = edge_use(mesh)
        assert uses[(0, 2)] == 2
        assert uses[(0, 1)] == 1
        assert sum(uses.values()) == 6

    def test_edge_shared_by_three_triangles(self):
        mesh = Mesh.from_triangles([
            Triangle(A, B, C), Triangle(B, A, D), Triangle(A, B, APEX)])
        result = mesh_watertight(mesh)
        assert not result
        assert any('more than two' in w and '(0, 1)' in w for w in result.warnings)
