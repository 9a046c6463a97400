"""Triangles, edges and a bounded triangle store for expanding polytopes.

Triangles refer to their vertices by index into a shared sequence of
3-vectors. Each triangle knows the point of its plane closest to the origin
and the three edges of neighbouring triangles that border it, which allows
the silhouette seen from a new vertex to be carved out and replaced.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

MAX_TRIANGLES = 200


def circ_next(i: int) -> int:
    """Index of the next corner of a triangle, cyclically."""
    return (i + 1) % 3


def circ_prev(i: int) -> int:
    """Index of the previous corner of a triangle, cyclically."""
    return (i + 2) % 3


def _vec(value) -> np.ndarray:
    return np.asarray(value, dtype=float)


@dataclass(frozen=True)
class Edge:
    """The directed edge of ``triangle`` that starts at corner ``index``."""

    triangle: Optional["Triangle"] = None
    index: int = 0

    def source(self) -> int:
        """Vertex index the edge starts from."""
        return self.triangle[self.index]

    def target(self) -> int:
        """Vertex index the edge ends at."""
        return self.triangle[circ_next(self.index)]

    def _attach(self, verts, index: int, store: "TriangleStore") -> bool:
        triangle = store.new_triangle(verts, index, self.target(), self.source())
        if triangle is None:
            return False
        half_link(Edge(triangle, 1), self)
        return True

    def silhouette(self, verts, index: int, store: "TriangleStore") -> bool:
        """Walk the hull across this edge, replacing what vertex ``index`` sees.

        Returns False when a replacement triangle could not be created.
        """
        triangle = self.triangle
        if triangle.obsolete:
            return True

        if not triangle.is_visible_from(verts, index):
            return self._attach(verts, index, store)

        triangle.obsolete = True
        backup = len(store)

        if not triangle.adj_edge(circ_next(self.index)).silhouette(verts, index, store):
            triangle.obsolete = False
            return self._attach(verts, index, store)

        if not triangle.adj_edge(circ_prev(self.index)).silhouette(verts, index, store):
            triangle.obsolete = False
            store.set_free(backup)
            return self._attach(verts, index, store)

        return True


class Triangle:
    """A triangle over three vertex indices with its closest point to the origin."""

    def __init__(self, i0: int, i1: int, i2: int):
        self._indices = (i0, i1, i2)
        self._adj_edges = [Edge(), Edge(), Edge()]
        self.obsolete = False
        self.det = 0.0
        self.lambda1 = 0.0
        self.lambda2 = 0.0
        self.closest = np.zeros(3)
        self.dist2 = 0.0

    def __repr__(self) -> str:
        return f"Triangle{self._indices}"

    def __getitem__(self, i: int) -> int:
        return self._indices[i]

    @property
    def indices(self) -> tuple:
        return self._indices

    def adj_edge(self, i: int) -> Edge:
        """Edge of the neighbouring triangle that borders edge ``i``."""
        return self._adj_edges[i]

    def compute_closest(self, verts: Sequence) -> bool:
        """Compute the closest point of the triangle's plane to the origin.

        Returns False for a degenerate triangle.
        """
        p0 = _vec(verts[self._indices[0]])
        v1 = _vec(verts[self._indices[1]]) - p0
        v2 = _vec(verts[self._indices[2]]) - p0
        v1dv1 = float(v1 @ v1)
        v1dv2 = float(v1 @ v2)
        v2dv2 = float(v2 @ v2)
        p0dv1 = float(p0 @ v1)
        p0dv2 = float(p0 @ v2)

        self.det = v1dv1 * v2dv2 - v1dv2 * v1dv2
        self.lambda1 = p0dv2 * v1dv2 - p0dv1 * v2dv2
        self.lambda2 = p0dv1 * v1dv2 - p0dv2 * v1dv1

        if self.det > 0.0:
            self.closest = p0 + (v1 * self.lambda1 + v2 * self.lambda2) / self.det
            self.dist2 = float(self.closest @ self.closest)
            return True
        return False

    def is_closest_internal(self) -> bool:
        """Whether the closest point lies inside the triangle."""
        return (
            self.lambda1 >= 0.0
            and self.lambda2 >= 0.0
            and self.lambda1 + self.lambda2 <= self.det
        )

    def is_visible_from(self, verts: Sequence, index: int) -> bool:
        """Whether vertex ``index`` lies on the outer side of the triangle."""
        lever = _vec(verts[index]) - self.closest
        return float(self.closest @ lever) > 0.0

    def closest_point(self, points: Sequence) -> np.ndarray:
        """Interpolate ``points`` with the barycentric weights of the closest point."""
        p0 = _vec(points[self._indices[0]])
        p1 = _vec(points[self._indices[1]])
        p2 = _vec(points[self._indices[2]])
        return p0 + ((p1 - p0) * self.lambda1 + (p2 - p0) * self.lambda2) / self.det

    def silhouette(self, verts, index: int, store: "TriangleStore") -> bool:
        """Replace the part of the hull visible from vertex ``index``.

        New triangles are appended to ``store`` and linked to each other and
        to the remaining hull. Returns False on failure.
        """
        first = len(store)
        self.obsolete = True

        result = all(edge.silhouette(verts, index, store) for edge in self._adj_edges)

        if result:
            free = len(store)
            previous = free - 1
            for i in range(first, free):
                triangle = store[i]
                half_link(triangle.adj_edge(1), Edge(triangle, 1))
                if not link(Edge(triangle, 0), Edge(store[previous], 2)):
                    return False
                previous = i
        return result


def _opposed(edge0: Edge, edge1: Edge) -> bool:
    return edge0.source() == edge1.target() and edge0.target() == edge1.source()


def link(edge0: Edge, edge1: Edge) -> bool:
    """Make two opposed edges neighbours of each other.

    Returns False, changing nothing, when the edges do not run opposite ways
    over the same pair of vertices.
    """
    if not _opposed(edge0, edge1):
        return False
    edge0.triangle._adj_edges[edge0.index] = edge1
    edge1.triangle._adj_edges[edge1.index] = edge0
    return True


def half_link(edge0: Edge, edge1: Edge) -> None:
    """Record ``edge1`` as the neighbour of ``edge0`` only."""
    if not _opposed(edge0, edge1):
        raise ValueError("edges do not share opposite endpoints")
    edge0.triangle._adj_edges[edge0.index] = edge1


class TriangleStore:
    """A bounded stack of triangles; its length is the first free slot."""

    def __init__(self):
        self._triangles: list[Triangle] = []

    def clear(self) -> None:
        self._triangles.clear()

    def __getitem__(self, i: int) -> Triangle:
        return self._triangles[i]

    def __len__(self) -> int:
        return len(self._triangles)

    def last(self) -> Triangle:
        """The most recently added triangle."""
        if not self._triangles:
            raise IndexError("the store is empty")
        return self._triangles[-1]

    def set_free(self, backup: int) -> None:
        """Drop every triangle from position ``backup`` on."""
        if not 0 <= backup <= len(self._triangles):
            raise IndexError("free position out of range")
        del self._triangles[backup:]

    def new_triangle(self, verts, i0: int, i1: int, i2: int) -> Optional[Triangle]:
        """Add a triangle, or return None if the store is full or it is degenerate."""
        if len(self._triangles) >= MAX_TRIANGLES:
            return None
        triangle = Triangle(i0, i1, i2)
        if not triangle.compute_closest(verts):
            return None
        self._triangles.append(triangle)
        return triangle