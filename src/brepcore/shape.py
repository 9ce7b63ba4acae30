"""The shape store: a deduplicating, validating object graph.

A :class:`Shape` owns one arena per kind of object (points, curves,
surfaces, vertices, edges, cycles, faces).  Objects are addressed through
:class:`Handle` instances, which are an index into an arena plus the kind
and the identity of the owning store.

Two invariants hold for every store:

- no two handles of the same kind refer to value-equal objects, so handle
  identity and value identity coincide;
- an object is only admitted once every handle it references resolves
  inside this store, and it passes the geometric checks for its type.

A failed insertion raises a :class:`~brepcore.errors.ValidationError` and
leaves the store unchanged.  Stores are built by one owner on one thread;
no locking is done here.

Copyright (c) 2025 brepcore contributors
MIT License
"""

from __future__ import annotations

import math
from typing import Dict, Generic, Iterator, List, TypeVar

import numpy as np
from loguru import logger

from brepcore.curves import Circle, Line
from brepcore.errors import GeometricError, StructuralError, ValidationError
from brepcore.geom import Aabb, Point, epsilon
from brepcore.surfaces import Surface
from brepcore.topology import Cycle, Edge, Face, Vertex, edge_directions

T = TypeVar('T')

KINDS = ('points', 'curves', 'surfaces', 'vertices', 'edges', 'cycles', 'faces')

_KIND_OF_TYPE = {
    Point: 'points',
    Circle: 'curves',
    Line: 'curves',
    Surface: 'surfaces',
    Vertex: 'vertices',
    Edge: 'edges',
    Cycle: 'cycles',
    Face: 'faces',
}


def kind_of(obj) -> str:
    """Return the arena name for ``obj`` or raise ``TypeError``."""
    try:
        return _KIND_OF_TYPE[type(obj)]
    except KeyError:
        raise TypeError(f"objects of type {type(obj).__name__} can't be "
                        "stored in a Shape") from None


class Handle(Generic[T]):
    """Stable reference to an object stored in a :class:`Shape`.

    Handles compare, hash and sort by ``(store, kind, index)``.
    """

    __slots__ = ('_store', 'kind', 'index')

    def __init__(self, store: "Shape", kind: str, index: int):
        self._store = store
        self.kind = kind
        self.index = index

    @property
    def store(self) -> "Shape":
        return self._store

    def get(self) -> T:
        """Return the referenced object."""
        return self._store.get(self)

    def _key(self):
        return (id(self._store), self.kind, self.index)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Handle):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other) -> bool:
        if not isinstance(other, Handle):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        return f"Handle({self.kind}[{self.index}])"


class _Arena:
    """Growable slot list plus a value -> slot index."""

    __slots__ = ('objects', 'index')

    def __init__(self):
        self.objects: List = []
        self.index: Dict = {}

    def __len__(self) -> int:
        return len(self.objects)


class Shape:
    """Deduplicating store for geometric and topological objects.

    Parameters
    ----------
    tolerance : float, optional
        Distance used by geometric validation, e.g. how far an edge vertex
        may be from its curve.  Defaults to :data:`brepcore.geom.epsilon`.
    """

    def __init__(self, tolerance: float = epsilon):
        self.tolerance = float(tolerance)
        self._arenas = {kind: _Arena() for kind in KINDS}

    # -------------------------------------------------------------------------
    # Insertion
    # -------------------------------------------------------------------------

    def insert(self, obj: T) -> Handle[T]:
        """Validate ``obj`` and return its handle.

        If a value-equal object is already stored, its handle is returned
        and nothing is added.

        Raises
        ------
        StructuralError
            ``obj`` references a handle that doesn't resolve in this store.
        GeometricError
            ``obj`` fails a geometric consistency check.
        """
        kind = kind_of(obj)
        try:
            self._validate_structure(obj)
            self._validate_geometry(obj)
        except ValidationError as err:
            logger.debug("rejected {} insert: {}", kind, err)
            raise
        return self._store(kind, obj)

    def get_handle_or_insert(self, obj: T) -> Handle[T]:
        """Return the handle of an equal stored object, inserting if needed."""
        arena = self._arenas[kind_of(obj)]
        index = arena.index.get(obj)
        if index is not None:
            return Handle(self, kind_of(obj), index)
        return self.insert(obj)

    def _store(self, kind: str, obj) -> Handle:
        arena = self._arenas[kind]
        index = arena.index.get(obj)
        if index is None:
            index = len(arena.objects)
            arena.objects.append(obj)
            arena.index[obj] = index
        return Handle(self, kind, index)

    # -------------------------------------------------------------------------
    # Access
    # -------------------------------------------------------------------------

    def contains(self, handle: Handle) -> bool:
        """Return True if ``handle`` resolves inside this store."""
        return (isinstance(handle, Handle)
                and handle.store is self
                and handle.kind in self._arenas
                and 0 <= handle.index < len(self._arenas[handle.kind]))

    def get(self, handle: Handle):
        if not self.contains(handle):
            raise KeyError(f"{handle!r} does not belong to this shape")
        return self._arenas[handle.kind].objects[handle.index]

    def handles(self, kind: str) -> Iterator[Handle]:
        """Iterate over all handles of ``kind``, in insertion order."""
        for index in range(len(self._arenas[kind])):
            yield Handle(self, kind, index)

    def points(self) -> Iterator[Handle]:
        return self.handles('points')

    def curves(self) -> Iterator[Handle]:
        return self.handles('curves')

    def surfaces(self) -> Iterator[Handle]:
        return self.handles('surfaces')

    def vertices(self) -> Iterator[Handle]:
        return self.handles('vertices')

    def edges(self) -> Iterator[Handle]:
        return self.handles('edges')

    def cycles(self) -> Iterator[Handle]:
        return self.handles('cycles')

    def faces(self) -> Iterator[Handle]:
        return self.handles('faces')

    def summary(self) -> Dict[str, int]:
        """Return the number of stored objects per kind."""
        return {kind: len(arena) for kind, arena in self._arenas.items()}

    def bounding_volume(self) -> Aabb:
        """Axis-aligned box around all stored geometry.

        Circles contribute their full extent, not only their vertices.  An
        empty shape yields a box with ``min == max`` at the origin.
        """
        boxes = []
        pts = self._arenas['points'].objects
        if pts:
            boxes.append(Aabb.from_points(pts))
        for curve in self._arenas['curves'].objects:
            if isinstance(curve, Circle):
                center = curve.center.to_array()
                reach = np.sqrt(curve.a.to_array() ** 2 + curve.b.to_array() ** 2)
                boxes.append(Aabb(Point.from_array(center - reach),
                                  Point.from_array(center + reach)))
        if not boxes:
            return Aabb.from_points([])
        box = boxes[0]
        for other in boxes[1:]:
            box = box.merged(other)
        return box

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _validate_structure(self, obj) -> None:
        references = getattr(obj, 'references', None)
        if references is None:
            return
        for kind, handle in references():
            if not isinstance(handle, Handle):
                raise StructuralError(
                    f"expected a handle to {kind}, got {handle!r}",
                    {'handle': handle, 'kind': kind})
            if handle.kind != kind:
                raise StructuralError(
                    f"expected a handle to {kind}, got one to {handle.kind}",
                    {'handle': handle, 'kind': kind})
            if not self.contains(handle):
                raise StructuralError(
                    f"{handle!r} is not part of this shape",
                    {'handle': handle, 'kind': kind})

    def _validate_geometry(self, obj) -> None:
        check = getattr(self, '_check_' + type(obj).__name__.lower())
        check(obj)

    def _fail(self, predicate: str, message: str, **details) -> None:
        details['predicate'] = predicate
        raise GeometricError(message, details)

    def _check_point(self, point: Point) -> None:
        if point.dim != 3:
            self._fail('point_dimension', f"model points must be 3D, got {point.dim}D",
                       point=point)
        if not point.is_finite():
            self._fail('point_finite', f"point {point!r} has non-finite coordinates",
                       point=point)

    def _check_circle(self, circle: Circle) -> None:
        if circle.center.dim != 3 or circle.a.dim != 3 or circle.b.dim != 3:
            self._fail('curve_dimension', "curves must be embedded in 3D")
        ra = float(circle.a.magnitude())
        rb = float(circle.b.magnitude())
        if not (math.isfinite(ra) and math.isfinite(rb)) or ra <= self.tolerance:
            self._fail('circle_radius', f"circle radius {ra} is degenerate",
                       circle=circle)
        if abs(ra - rb) > self.tolerance:
            self._fail('circle_radius',
                       f"circle vectors differ in length ({ra} != {rb})",
                       circle=circle)
        if abs(float(circle.a.dot(circle.b))) > self.tolerance * ra:
            self._fail('circle_perpendicular',
                       "circle vectors a and b are not perpendicular",
                       circle=circle)

    def _check_line(self, line: Line) -> None:
        if line.origin.dim != 3 or line.direction.dim != 3:
            self._fail('curve_dimension', "curves must be embedded in 3D")
        if float(line.direction.magnitude()) <= self.tolerance:
            self._fail('line_direction', "line direction has zero length", line=line)

    def _check_surface(self, surface: Surface) -> None:
        if surface.origin.dim != 3 or surface.u.dim != 3 or surface.v.dim != 3:
            self._fail('surface_dimension', "surfaces must be embedded in 3D")
        if float(surface.u.cross(surface.v).magnitude()) <= self.tolerance ** 2:
            self._fail('surface_basis', "surface vectors u and v are not independent",
                       surface=surface)

    def _check_vertex(self, vertex: Vertex) -> None:
        pass

    def _check_edge(self, edge: Edge) -> None:
        curve = self.get(edge.curve)
        if edge.vertices is None:
            if isinstance(curve, Line):
                self._fail('edge_bounded', "a line edge needs start and end vertices",
                           edge=edge)
            return
        for vertex in edge.vertices:
            point = self.get(self.get(vertex).point)
            distance = curve.distance_to_point(point)
            if distance > self.tolerance:
                self._fail('vertex_on_curve',
                           f"vertex {point!r} is {distance} away from its curve",
                           edge=edge, vertex=vertex, distance=distance)

    def _check_cycle(self, cycle: Cycle) -> None:
        if not cycle.edges:
            self._fail('cycle_empty', "a cycle needs at least one edge", cycle=cycle)
        edges = [self.get(e) for e in cycle.edges]
        if any(e.vertices is None for e in edges) and len(edges) != 1:
            self._fail('cycle_connected',
                       "a closed edge can only form a cycle on its own",
                       cycle=cycle)
        if edge_directions(edges) is None:
            self._fail('cycle_connected',
                       "the edges of the cycle don't form a closed chain",
                       cycle=cycle)

    def _check_face(self, face: Face) -> None:
        surface = self.get(face.surface)
        for cycle_handle in face.cycles():
            for edge_handle in self.get(cycle_handle).edges:
                edge = self.get(edge_handle)
                curve = self.get(edge.curve)
                points = []
                if isinstance(curve, Circle):
                    points += [curve.center, curve.center + curve.a,
                               curve.center + curve.b]
                if edge.vertices is not None:
                    points += [self.get(self.get(v).point) for v in edge.vertices]
                for point in points:
                    distance = surface.distance_to_point(point)
                    if distance > self.tolerance:
                        self._fail('boundary_on_surface',
                                   f"boundary point {point!r} is {distance} away "
                                   "from the face surface",
                                   face=face, distance=distance)


__all__ = ['KINDS', 'Handle', 'Shape', 'kind_of']
