# penetra

`penetra` measures how deeply two intersecting convex shapes overlap.
You give it a simplex of the shapes' Minkowski difference that encloses the
origin. It grows a polytope inside the difference until the face nearest the
origin settles. The result is the penetration vector and a witness point on
each shape.

## Installation

```
pip install penetra
```

The only dependency is `numpy`.

## Modules

- `penetra.depth` provides `PenetrationDepth` and `PenetrationResult`. It also
  provides the helpers `furthest_axis` and `origin_in_tetrahedron`.
- `penetra.triedge` provides the polytope bookkeeping: `Triangle`, `Edge`,
  `TriangleStore`, `link`, `half_link`, `circ_next` and `circ_prev`.
- `penetra.parsing` provides `SimplestParsing`, a small cursor over text for
  scanning simple file formats.

## Penetration depth

A shape is any object with a `support(direction)` method. The method returns
the point of the shape that lies furthest along `direction`.

```python
import math
import numpy as np
from penetra.depth import PenetrationDepth

class Sphere:
    def __init__(self, centre, radius):
        self.centre = np.asarray(centre, dtype=float)
        self.radius = radius

    def support(self, d):
        d = np.asarray(d, dtype=float)
        n = np.linalg.norm(d)
        return self.centre if n == 0 else self.centre + self.radius * d / n

a = Sphere([0.0, 0.0, 0.0], 1.0)
b = Sphere([1.5, 0.0, 0.0], 1.0)

# Four directions of a regular tetrahedron; the support points of a - b
# along them enclose the origin for these two spheres.
s2, s6 = math.sqrt(2.0), math.sqrt(6.0)
directions = [
    np.array([1.0, 0.0, 0.0]),
    np.array([-1 / 3, 2 * s2 / 3, 0.0]),
    np.array([-1 / 3, -s2 / 3, s6 / 3]),
    np.array([-1 / 3, -s2 / 3, -s6 / 3]),
]
simplex1 = [a.support(d) for d in directions]
simplex2 = [b.support(-d) for d in directions]
simplex = [p - q for p, q in zip(simplex1, simplex2)]

solver = PenetrationDepth(a, b)
result = solver.penetration_depth(simplex, simplex1, simplex2)
print(result.distance_squared, result.vector, result.point1, result.point2)
```

`simplex` holds one to four points of the difference `obj1 - obj2`.
`simplex1` and `simplex2` hold the matching points on each shape, so
`simplex1[i] - simplex2[i]` equals `simplex[i]`. Any other number of points,
or lists of different lengths, raises `ValueError`.

The call returns a `PenetrationResult` with these fields:

- `distance_squared`: the squared length of the penetration vector.
- `vector`: the point of the final polytope face nearest the origin.
- `point1`, `point2`: the witness points on the first and second shape.

The result has `distance_squared == 0.0`, and `vector`, `point1` and `point2`
set to `None`, in these cases:

- The simplex is a single point, meaning the shapes touch.
- No polytope that encloses the origin could be built.

### Tolerances

- `set_epsilon(s)` sets the absolute convergence tolerance. The default is
  `1e-8`.
- `set_relative_precision(s)` sets the relative tolerance. It is stored as
  `s * s`. The default stored value is `1e-3`.

The expansion stops in any of these cases:

- The improvement falls within the tolerances.
- A new support point repeats a vertex of the nearest face.
- 100 support points have been used.
- The triangle store, which holds at most 200 triangles, can take no more.

## Text scanning

`SimplestParsing` holds text and a read position.

```python
from penetra.parsing import SimplestParsing

p = SimplestParsing("header\n  value 42")
p.find("header")                  # True, cursor just past "header"
p.jump_separators()               # True, cursor at "value"
p.check_if_next_string("value")   # True, cursor just past "value"
p().read()                        # " 42"
```

- `find(s)` moves just past the next occurrence of `s`. If there is no
  occurrence, it leaves the cursor at the end of the text and returns `False`.
- `jump_separators()` skips spaces, tabs, `\n` and `\r`. It returns `False`
  if the text ends first.
- `check_if_next_string(s)` consumes `s` only if the text continues with it.
  Otherwise the cursor stays where it was.
- Calling the object returns the underlying `io.StringIO`, positioned at the
  cursor.
- `load(filename)` appends the contents of a UTF-8 file and keeps the cursor
  where it was. A file that cannot be opened raises `ValueError`.

## What it does not do

`penetra` does not provide any of the following:

- Shapes of its own.
- An intersection test that finds the starting simplex. That has to come from
  elsewhere, for example a GJK-style test.
- A command-line program.

## Tests

```
pip install "penetra[test]"
pytest
```