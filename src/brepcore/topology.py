"""Topological entities: vertices, edges, cycles and faces.

Topological objects never hold geometry directly.  They reference points,
curves and surfaces (and each other) through :class:`~brepcore.shape.Handle`
objects issued by a :class:`~brepcore.shape.Shape`.  Because the store
never hands out two handles for equal values, comparing two of these
objects by their handles is the same as comparing them by value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Iterator, List, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from brepcore.shape import Handle


@dataclass(frozen=True)
class Vertex:
    """A point that is part of the topology."""

    point: "Handle"

    def references(self) -> Iterator[Tuple[str, "Handle"]]:
        yield 'points', self.point


@dataclass(frozen=True)
class Edge:
    """A curve, optionally bounded by a start and an end vertex.

    ``vertices is None`` means the curve is used whole, which only makes
    sense for closed curves like a full circle.
    """

    curve: "Handle"
    vertices: Optional[Tuple["Handle", "Handle"]] = None

    def references(self) -> Iterator[Tuple[str, "Handle"]]:
        yield 'curves', self.curve
        if self.vertices is not None:
            for vertex in self.vertices:
                yield 'vertices', vertex


@dataclass(frozen=True)
class Cycle:
    """A closed loop of edges."""

    edges: Tuple["Handle", ...]

    def references(self) -> Iterator[Tuple[str, "Handle"]]:
        for edge in self.edges:
            yield 'edges', edge


@dataclass(frozen=True)
class Face:
    """A bounded region of a surface.

    ``exterior`` is the outer boundary; each entry of ``interiors`` bounds
    a hole.
    """

    surface: "Handle"
    exterior: "Handle"
    interiors: Tuple["Handle", ...] = ()

    def cycles(self) -> Tuple["Handle", ...]:
        return (self.exterior,) + tuple(self.interiors)

    def references(self) -> Iterator[Tuple[str, "Handle"]]:
        yield 'surfaces', self.surface
        for cycle in self.cycles():
            yield 'cycles', cycle


def edge_directions(edges: Iterable[Edge]) -> Optional[List[bool]]:
    """Orient the edges of a cycle along a closed chain.

    Returns one flag per edge, ``True`` where the edge is traversed from
    its end vertex to its start vertex, or ``None`` if the edges don't
    form a closed chain.  A single edge without vertices (a full circle,
    say) is a closed chain on its own.
    """
    edges = list(edges)
    if len(edges) == 1 and edges[0].vertices is None:
        return [False]
    if not edges or any(edge.vertices is None for edge in edges):
        return None
    for first_backwards in (False, True):
        directions = _walk(edges, first_backwards)
        if directions is not None:
            return directions
    return None


def _walk(edges: List[Edge], first_backwards: bool) -> Optional[List[bool]]:
    start, current = edges[0].vertices
    if first_backwards:
        start, current = current, start
    directions = [first_backwards]
    for edge in edges[1:]:
        a, b = edge.vertices
        if a == current:
            directions.append(False)
            current = b
        elif b == current:
            directions.append(True)
            current = a
        else:
            return None
    if current != start:
        return None
    return directions


__all__ = ['Vertex', 'Edge', 'Cycle', 'Face', 'edge_directions']
