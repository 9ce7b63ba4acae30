"""Indexed triangle meshes built from triangulated faces."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

from brepcore.geom import Point, Triangle

Vec3 = Tuple[float, float, float]
TriTuple = Tuple[Vec3, Vec3, Vec3, Vec3]


class Mesh:
    """Triangle mesh that shares vertices between triangles.

    Vertices are deduplicated by value, so triangles of neighbouring faces
    that meet at the same model points end up sharing indices.
    """

    def __init__(self):
        self._vertices: List[Point] = []
        self._index: Dict[Point, int] = {}
        self._indices: List[int] = []

    @classmethod
    def from_triangles(cls, triangles: Iterable[Triangle]) -> "Mesh":
        mesh = cls()
        for triangle in triangles:
            mesh.push_triangle(triangle)
        return mesh

    def push_vertex(self, point: Point) -> int:
        index = self._index.get(point)
        if index is None:
            index = len(self._vertices)
            self._vertices.append(point)
            self._index[point] = index
        self._indices.append(index)
        return index

    def push_triangle(self, triangle: Triangle) -> None:
        for point in triangle:
            self.push_vertex(point)

    @property
    def vertices(self) -> List[Point]:
        return list(self._vertices)

    @property
    def indices(self) -> List[int]:
        return list(self._indices)

    def triangle_indices(self) -> List[Tuple[int, int, int]]:
        idx = self._indices
        return [(idx[i], idx[i + 1], idx[i + 2]) for i in range(0, len(idx), 3)]

    def triangles(self) -> Iterator[Triangle]:
        for a, b, c in self.triangle_indices():
            yield Triangle(self._vertices[a], self._vertices[b], self._vertices[c])

    def area(self) -> float:
        return sum(t.area() for t in self.triangles())

    def __len__(self) -> int:
        return len(self._indices) // 3


def mesh_view(triangles: Iterable[Triangle]) -> Iterator[TriTuple]:
    """Yield triangles as ``(normal, v0, v1, v2)`` float tuples.

    Normals are unit vectors.  Degenerate (zero area) triangles are skipped
    silently.
    """
    for triangle in triangles:
        normal = triangle.normal()
        if normal is None:
            continue
        v0, v1, v2 = (p.to_floats() for p in triangle)
        yield normal.to_floats(), v0, v1, v2


__all__ = ['Mesh', 'mesh_view']
