"""Sanity checks for triangulated meshes.

Every check returns a :class:`CheckResult`, truthy when the mesh passes,
with readable findings in ``warnings`` otherwise.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import List, Tuple

from brepcore.geom import epsilon
from brepcore.mesh import Mesh


@dataclass
class CheckResult:
    ok: bool
    warnings: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok


def edge_use(mesh: Mesh) -> Counter:
    """Count the triangles using each undirected edge.

    Edges are keyed by their sorted pair of vertex indices.
    """
    uses: Counter = Counter()
    for a, b, c in mesh.triangle_indices():
        for pair in ((a, b), (b, c), (c, a)):
            uses[_undirected(*pair)] += 1
    return uses


def mesh_watertight(mesh: Mesh) -> CheckResult:
    """A closed mesh uses every edge in exactly two triangles."""
    uses = edge_use(mesh)
    open_edges = [edge for edge, count in uses.items() if count == 1]
    overused = sorted(edge for edge, count in uses.items() if count > 2)

    warnings = []
    if open_edges:
        warnings.append(f'{len(open_edges)} boundary edges detected')
    if overused:
        warnings.append(f'edges used by more than two triangles: {overused}')
    return CheckResult(not warnings, warnings)


def faces_oriented(mesh: Mesh) -> CheckResult:
    """For planar meshes: every normal agrees with the first one.

    Degenerate triangles have no normal and are ignored.
    """
    normals = [(index, triangle.normal())
               for index, triangle in enumerate(mesh.triangles())]
    normals = [(index, normal) for index, normal in normals if normal is not None]
    if not normals:
        return CheckResult(True, ['no non-degenerate triangles found'])

    _, reference = normals[0]
    flipped = [index for index, normal in normals[1:]
               if float(reference.dot(normal)) < -epsilon]
    if flipped:
        return CheckResult(False, [f'triangles wound against the first one: {flipped}'])
    return CheckResult(True)


def _undirected(a: int, b: int) -> Tuple[int, int]:
    return (a, b) if a < b else (b, a)


__all__ = ['CheckResult', 'edge_use', 'mesh_watertight', 'faces_oriented']
