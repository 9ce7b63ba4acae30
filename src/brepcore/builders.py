"""Builders that sequence the inserts for higher-level topology.

Builders never bypass the store: every object they create goes through
:meth:`Shape.get_handle_or_insert` or :meth:`Shape.insert`, so building the
same geometry twice converges on the same handles.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from brepcore.curves import Circle, Line
from brepcore.errors import StructuralError
from brepcore.geom import Point
from brepcore.shape import Handle, Shape
from brepcore.surfaces import Surface
from brepcore.topology import Cycle, Edge, Face, Vertex


class VertexBuilder:
    """API for building a :class:`~brepcore.topology.Vertex`."""

    def __init__(self, shape: Shape):
        self.shape = shape

    def from_point(self, point) -> Handle:
        """Build a vertex from a point.

        If an identical point or vertex is already part of the shape, those
        objects are reused.
        """
        point = self.shape.get_handle_or_insert(Point(point))
        return self.shape.get_handle_or_insert(Vertex(point))


class EdgeBuilder:
    """API for building an :class:`~brepcore.topology.Edge`."""

    def __init__(self, shape: Shape):
        self.shape = shape

    def circle(self, radius) -> Handle:
        """Full circle around the origin, in the XY plane."""
        curve = self.shape.insert(
            Circle.from_center_and_radius([0.0, 0.0, 0.0], radius))
        return self.shape.insert(Edge(curve, None))

    def line_segment_from_vertices(self, vertices: Sequence[Handle]) -> Handle:
        """Line segment from the first to the second vertex.

        Raises ``StructuralError`` before anything is inserted if either
        vertex is not part of this shape.
        """
        start, end = vertices
        for vertex in (start, end):
            if not self.shape.contains(vertex) or vertex.kind != 'vertices':
                raise StructuralError(f"{vertex!r} is not part of this shape",
                                      {'handle': vertex, 'kind': 'vertices'})
        line = Line.from_points([self.shape.get(self.shape.get(v).point)
                                 for v in (start, end)])
        curve = self.shape.insert(line)
        return self.shape.insert(Edge(curve, (start, end)))

    def line_segment_from_points(self, points: Sequence) -> Handle:
        vertex_builder = VertexBuilder(self.shape)
        vertices = [vertex_builder.from_point(p) for p in points]
        return self.line_segment_from_vertices(vertices)


class CycleBuilder:
    """API for building a :class:`~brepcore.topology.Cycle`."""

    def __init__(self, shape: Shape):
        self.shape = shape

    def from_edges(self, edges: Iterable[Handle]) -> Handle:
        return self.shape.insert(Cycle(tuple(edges)))

    def polygon_from_points(self, points: Sequence) -> Handle:
        """Closed polygon through ``points``; the last point connects back
        to the first."""
        vertex_builder = VertexBuilder(self.shape)
        edge_builder = EdgeBuilder(self.shape)
        vertices = [vertex_builder.from_point(p) for p in points]
        edges = []
        for i, start in enumerate(vertices):
            end = vertices[(i + 1) % len(vertices)]
            edges.append(edge_builder.line_segment_from_vertices([start, end]))
        return self.from_edges(edges)

    def circle(self, radius) -> Handle:
        return self.from_edges([EdgeBuilder(self.shape).circle(radius)])


class FaceBuilder:
    """API for building a :class:`~brepcore.topology.Face`."""

    def __init__(self, shape: Shape):
        self.shape = shape

    def from_cycles(self, surface, exterior: Handle,
                    interiors: Iterable[Handle] = ()) -> Handle:
        if not isinstance(surface, Handle):
            surface = self.shape.get_handle_or_insert(surface)
        return self.shape.insert(Face(surface, exterior, tuple(interiors)))

    def polygon(self, exterior: Sequence, interiors: Iterable[Sequence] = (),
                surface: Optional[Surface] = None) -> Handle:
        """Polygonal face, optionally with polygonal holes.

        Points are model points; they must lie on ``surface`` (the XY plane
        unless given).
        """
        if surface is None:
            surface = Surface.xy_plane()
        cycles = CycleBuilder(self.shape)
        outer = cycles.polygon_from_points(exterior)
        holes = [cycles.polygon_from_points(points) for points in interiors]
        return self.from_cycles(surface, outer, holes)


__all__ = ['VertexBuilder', 'EdgeBuilder', 'CycleBuilder', 'FaceBuilder']
