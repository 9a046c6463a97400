"""Penetration depth of two intersecting convex objects.

The objects are given by their support mappings. Starting from a simplex of
the Minkowski difference that encloses the origin, a polytope is expanded
until its face nearest to the origin lies on the boundary of the difference.
"""

from __future__ import annotations

import heapq
import itertools
import math
from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

import numpy as np

from penetra.triedge import Edge, Triangle, TriangleStore, link

MAX_SUPPORT_POINTS = 100
DEFAULT_PRECISION = 1e-3
EPSILON = 1e-8

_SIN_60 = math.sqrt(3.0) * 0.5


class SupportMapping(Protocol):
    """A convex object that yields its furthest point in a given direction."""

    def support(self, direction: np.ndarray) -> Sequence[float]:
        ...


@dataclass(frozen=True)
class PenetrationResult:
    """Squared penetration depth, its vector and the witness points.

    The vector and points are None when no penetration could be measured.
    """

    distance_squared: float
    vector: Optional[np.ndarray] = None
    point1: Optional[np.ndarray] = None
    point2: Optional[np.ndarray] = None


def _vec(value) -> np.ndarray:
    return np.asarray(value, dtype=float)


def furthest_axis(v) -> int:
    """Index of the component of ``v`` with the smallest absolute value."""
    a = np.abs(_vec(v))
    if a[0] < a[1]:
        return 0 if a[0] < a[2] else 2
    return 1 if a[1] < a[2] else 2


def origin_in_tetrahedron(p1, p2, p3, p4) -> int:
    """Return 0 if the origin is inside the tetrahedron.

    Otherwise return the number (1 to 4) of the vertex opposite a face that
    separates the origin from the tetrahedron.
    """
    p1, p2, p3, p4 = (_vec(p) for p in (p1, p2, p3, p4))
    checks = (
        (np.cross(p2 - p1, p3 - p1), p1, p4, 4),
        (np.cross(p4 - p2, p3 - p2), p2, p1, 1),
        (np.cross(p4 - p3, p1 - p3), p3, p2, 2),
        (np.cross(p2 - p4, p1 - p4), p4, p3, 3),
    )
    for normal, on_face, opposite, vertex in checks:
        if (float(normal @ on_face) >= 0.0) == (float(normal @ opposite) > 0.0):
            return vertex
    return 0


def _rotation_from_quaternion(x: float, y: float, z: float, w: float) -> np.ndarray:
    return np.array(
        [
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
            [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
        ]
    )


class PenetrationDepth:
    """Expanding-polytope penetration depth between two support mappings."""

    def __init__(self, obj1: SupportMapping, obj2: SupportMapping):
        self.obj1 = obj1
        self.obj2 = obj2
        self.precision = DEFAULT_PRECISION
        self.epsilon = EPSILON

    def set_epsilon(self, s: float) -> None:
        """Set the absolute convergence tolerance."""
        self.epsilon = s

    def set_relative_precision(self, s: float) -> None:
        """Set the relative convergence tolerance; it is stored squared."""
        self.precision = s * s

    def _support(self, direction: np.ndarray):
        p = _vec(self.obj1.support(direction))
        q = _vec(self.obj2.support(-direction))
        return p, q, p - q

    def penetration_depth(self, simplex, simplex1, simplex2) -> PenetrationResult:
        """Measure the penetration from a simplex enclosing the origin.

        ``simplex`` holds points of the Minkowski difference, ``simplex1`` and
        ``simplex2`` the points of each object they were made from.
        """
        y = [_vec(v) for v in simplex]
        p = [_vec(v) for v in simplex1]
        q = [_vec(v) for v in simplex2]
        count = len(y)
        if count not in (1, 2, 3, 4) or len(p) != count or len(q) != count:
            raise ValueError("a simplex of 1 to 4 matching points is required")

        if count == 1:
            # Touching contact: a collision, but no penetration.
            return PenetrationResult(0.0)

        store = TriangleStore()
        heap: list = []
        order = itertools.count()

        def add_candidate(triangle: Triangle, upper2: float) -> None:
            if triangle.is_closest_internal() and triangle.dist2 <= upper2:
                heapq.heappush(heap, (triangle.dist2, next(order), triangle))

        def append(direction: np.ndarray) -> None:
            pp, qq, yy = self._support(direction)
            p.append(pp)
            q.append(qq)
            y.append(yy)

        def replace(dst: int, src: int) -> None:
            p[dst], q[dst], y[dst] = p[src], q[src], y[src]

        def truncate(size: int) -> None:
            for points in (p, q, y):
                del points[size:]

        def build(corners):
            triangles = [store.new_triangle(y, *c) for c in corners]
            if all(t is not None and t.dist2 > 0.0 for t in triangles):
                return triangles
            return None

        if count == 2:
            direction = y[1] - y[0]
            direction = direction / np.linalg.norm(direction)
            axis = furthest_axis(direction)
            rotation = _rotation_from_quaternion(*(direction * _SIN_60), 0.5)
            aux1 = np.cross(direction, np.array([axis == 0, axis == 1, axis == 2], dtype=float))
            aux2 = rotation @ aux1
            aux3 = rotation @ aux2
            for aux in (aux1, aux2, aux3):
                append(aux)
            if origin_in_tetrahedron(y[0], y[2], y[3], y[4]) == 0:
                replace(1, 4)
            elif origin_in_tetrahedron(y[1], y[2], y[3], y[4]) == 0:
                replace(0, 4)
            else:
                return PenetrationResult(0.0)
            count = 4

        if count == 4:
            bad_vertex = origin_in_tetrahedron(y[0], y[1], y[2], y[3])
            if bad_vertex == 0:
                truncate(4)
                faces = build([(0, 1, 2), (0, 3, 1), (0, 2, 3), (1, 3, 2)])
                if faces is None:
                    return PenetrationResult(0.0)
                f0, f1, f2, f3 = faces
                link(Edge(f0, 0), Edge(f1, 2))
                link(Edge(f0, 1), Edge(f3, 2))
                link(Edge(f0, 2), Edge(f2, 0))
                link(Edge(f1, 0), Edge(f2, 2))
                link(Edge(f1, 1), Edge(f3, 0))
                link(Edge(f2, 1), Edge(f3, 1))
                for face in faces:
                    add_candidate(face, math.inf)
            else:
                if bad_vertex < 4:
                    replace(bad_vertex - 1, 4 if len(y) > 4 else 3)
                count = 3

        if count == 3:
            # Blow the triangle up into a double pyramid.
            truncate(3)
            normal = np.cross(y[1] - y[0], y[2] - y[0])
            append(normal)
            append(-normal)
            faces = build([(0, 1, 3), (1, 2, 3), (2, 0, 3), (0, 2, 4), (2, 1, 4), (1, 0, 4)])
            if faces is None:
                return PenetrationResult(0.0)
            f0, f1, f2, f3, f4, f5 = faces
            link(Edge(f0, 1), Edge(f1, 2))
            link(Edge(f1, 1), Edge(f2, 2))
            link(Edge(f2, 1), Edge(f0, 2))
            link(Edge(f0, 0), Edge(f5, 0))
            link(Edge(f1, 0), Edge(f4, 0))
            link(Edge(f2, 0), Edge(f3, 0))
            link(Edge(f3, 1), Edge(f4, 2))
            link(Edge(f4, 1), Edge(f5, 2))
            link(Edge(f5, 1), Edge(f3, 2))
            for face in faces:
                add_candidate(face, math.inf)

        if not heap:
            return PenetrationResult(0.0)

        upper_bound2 = math.inf
        triangle: Triangle
        while True:
            _, _, triangle = heapq.heappop(heap)

            if not triangle.obsolete:
                if len(y) == MAX_SUPPORT_POINTS:
                    break

                closest = triangle.closest
                append(closest)
                index = len(y) - 1
                far_dist = float(y[index] @ closest)

                if far_dist < 0.0:
                    break
                upper_bound2 = min(upper_bound2, far_dist * far_dist / triangle.dist2)

                error = far_dist - triangle.dist2
                if error <= max(self.precision * far_dist, self.epsilon) or any(
                    np.array_equal(y[index], y[triangle[k]]) for k in range(3)
                ):
                    break

                first = len(store)
                if not triangle.silhouette(y, index, store):
                    break
                for i in range(first, len(store)):
                    add_candidate(store[i], upper_bound2)

            if not heap or heap[0][0] > upper_bound2:
                break

        vector = np.array(triangle.closest, dtype=float)
        return PenetrationResult(
            float(vector @ vector),
            vector,
            triangle.closest_point(p),
            triangle.closest_point(q),
        )