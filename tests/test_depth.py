import numpy as np
import pytest

from penetra.depth import (
    PenetrationDepth,
    PenetrationResult,
    furthest_axis,
    origin_in_tetrahedron,
)

TETRA_DIRECTIONS = [
    np.array(s, dtype=float)
    for s in [(1, 1, 1), (1, -1, -1), (-1, 1, -1), (-1, -1, 1)]
]


class Box:
    def __init__(self, center, half):
        self.center = np.asarray(center, dtype=float)
        self.half = float(half)

    def support(self, direction):
        d = np.asarray(direction, dtype=float)
        return self.center + self.half * np.where(d >= 0, 1.0, -1.0)

    def contains(self, point, tol=1e-9):
        return bool(np.all(np.abs(np.asarray(point) - self.center) <= self.half + tol))


def tetra_simplex(a, b):
    s1 = [a.support(d) for d in TETRA_DIRECTIONS]
    s2 = [b.support(-d) for d in TETRA_DIRECTIONS]
    s = [x - y for x, y in zip(s1, s2)]
    return s, s1, s2


def run(center_b):
    a = Box((0, 0, 0), 1.0)
    b = Box(center_b, 1.0)
    solver = PenetrationDepth(a, b)
    return a, b, solver.penetration_depth(*tetra_simplex(a, b))


def test_furthest_axis_picks_smallest_component():
    assert furthest_axis((1.0, 2.0, 3.0)) == 0
    assert furthest_axis((3.0, 1.0, 2.0)) == 1
    assert furthest_axis((3.0, -2.0, 1.0)) == 2


def test_origin_inside_regular_tetrahedron():
    points = [tuple(d) for d in TETRA_DIRECTIONS]
    assert origin_in_tetrahedron(*points) == 0


def test_origin_outside_tetrahedron_reports_vertex():
    points = [tuple(d + np.array([10.0, 0.0, 0.0])) for d in TETRA_DIRECTIONS]
    assert origin_in_tetrahedron(*points) in (1, 2, 3, 4)


def test_single_point_simplex_means_touching():
    solver = PenetrationDepth(Box((0, 0, 0), 1), Box((2, 0, 0), 1))
    result = solver.penetration_depth([(0, 0, 0)], [(1, 0, 0)], [(1, 0, 0)])
    assert result == PenetrationResult(0.0)
    assert result.vector is None


@pytest.mark.parametrize("size", [0, 5])
def test_invalid_simplex_size_raises(size):
    solver = PenetrationDepth(Box((0, 0, 0), 1), Box((1, 0, 0), 1))
    points = [(float(i), 0.0, 0.0) for i in range(size)]
    with pytest.raises(ValueError):
        solver.penetration_depth(points, points, points)


def test_mismatched_simplices_raise():
    solver = PenetrationDepth(Box((0, 0, 0), 1), Box((1, 0, 0), 1))
    with pytest.raises(ValueError):
        solver.penetration_depth([(0, 0, 0), (1, 0, 0)], [(0, 0, 0)], [(0, 0, 0)])


def test_overlapping_boxes_depth():
    _, _, result = run((1.5, 0.2, 0.1))
    assert result.distance_squared == pytest.approx(0.25, abs=1e-9)
    assert np.allclose(result.vector, [0.5, 0.0, 0.0], atol=1e-9)


@pytest.mark.parametrize("center", [(1.5, 0.2, 0.1), (0.3, -1.2, 0.4)])
def test_witness_points_differ_by_vector(center):
    a, b, result = run(center)
    assert np.allclose(result.point1 - result.point2, result.vector, atol=1e-9)
    assert result.distance_squared == pytest.approx(float(result.vector @ result.vector))
    assert a.contains(result.point1)
    assert b.contains(result.point2)


@pytest.mark.parametrize("center", [(1.5, 0.2, 0.1), (0.3, -1.2, 0.4)])
def test_depth_matches_smallest_overlap(center):
    _, _, result = run(center)
    overlaps = [2.0 - abs(c) for c in center]
    depth = min(overlaps)
    assert np.sqrt(result.distance_squared) == pytest.approx(depth, abs=1e-9)
    axis = int(np.argmin(overlaps))
    others = [i for i in range(3) if i != axis]
    assert np.allclose(result.vector[others], 0.0, atol=1e-9)


def test_relative_precision_is_stored_squared():
    solver = PenetrationDepth(Box((0, 0, 0), 1), Box((1, 0, 0), 1))
    solver.set_relative_precision(0.1)
    solver.set_epsilon(1e-6)
    assert solver.precision == pytest.approx(0.01)
    assert solver.epsilon == 1e-6