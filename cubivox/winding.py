"""Generalized winding numbers over triangle soups, with a hierarchical speed-up.

Implements the inside/outside evaluation described by Jacobson et al. in
"Robust Inside-Outside Segmentation using Generalized Winding Numbers":
triangles are grouped into a tree of patches, and a patch whose bounds do not
contain the query point is replaced by its (usually much smaller) set of
closing triangles.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

Vector3 = tuple[float, float, float]

_MIN_PATCH_TRIANGLES = 100  # Soft limit: leaves may hold fewer.


def _vec(v: Sequence[float]) -> Vector3:
    return (float(v[0]), float(v[1]), float(v[2]))


def _sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _dot(a: Vector3, b: Vector3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _length(a: Vector3) -> float:
    return math.sqrt(_dot(a, a))


@dataclass(frozen=True)
class Triangle:
    """A triangle given by three vertices in counter-clockwise order."""

    a: Vector3
    b: Vector3
    c: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(self, "a", _vec(self.a))
        object.__setattr__(self, "b", _vec(self.b))
        object.__setattr__(self, "c", _vec(self.c))

    @property
    def vertices(self) -> tuple[Vector3, Vector3, Vector3]:
        return (self.a, self.b, self.c)

    def centre(self) -> Vector3:
        """Mean of the three vertices."""
        a, b, c = self.vertices
        return ((a[0] + b[0] + c[0]) / 3.0, (a[1] + b[1] + c[1]) / 3.0, (a[2] + b[2] + c[2]) / 3.0)

    def area(self) -> float:
        """Surface area of the triangle."""
        a, b, c = self.vertices
        return 0.5 * _length(_cross(_sub(b, a), _sub(c, a)))

    def side_length(self, index: int) -> float:
        """Length of the side running from vertex ``index`` to the next vertex."""
        if not 0 <= index < 3:
            raise IndexError(f"triangle side index {index} out of range")
        vertices = self.vertices
        return _length(_sub(vertices[(index + 1) % 3], vertices[index]))


@dataclass(frozen=True)
class Box3:
    """Inclusive axis-aligned box."""

    lower: Vector3
    upper: Vector3

    def __post_init__(self) -> None:
        object.__setattr__(self, "lower", _vec(self.lower))
        object.__setattr__(self, "upper", _vec(self.upper))

    def contains(self, point: Sequence[float]) -> bool:
        """Whether ``point`` lies inside or on the box."""
        return all(lo <= p <= hi for lo, p, hi in zip(self.lower, point, self.upper))

    def dilate(self, amount: float) -> Box3:
        """A copy of the box grown by ``amount`` on every side."""
        return Box3(
            tuple(v - amount for v in self.lower),  # type: ignore[arg-type]
            tuple(v + amount for v in self.upper),  # type: ignore[arg-type]
        )

    def dimensions(self) -> Vector3:
        return _sub(self.upper, self.lower)


def triangle_bounds(triangles: Iterable[Triangle]) -> Box3:
    """Smallest box containing every vertex of ``triangles``."""
    points = [v for triangle in triangles for v in triangle.vertices]
    if not points:
        raise ValueError("cannot compute bounds of no triangles")
    lower = tuple(min(p[axis] for p in points) for axis in range(3))
    upper = tuple(max(p[axis] for p in points) for axis in range(3))
    return Box3(lower, upper)  # type: ignore[arg-type]


def compute_winding_number(query_point: Sequence[float], triangles: Iterable[Triangle]) -> float:
    """Generalized winding number of ``triangles`` at ``query_point``.

    A closed, outward-facing surface gives 1 inside and 0 outside.
    """
    q = _vec(query_point)
    total = 0.0
    for triangle in triangles:
        qa, qb, qc = (_sub(v, q) for v in triangle.vertices)
        la, lb, lc = _length(qa), _length(qb), _length(qc)
        # A query point on a vertex contributes nothing (and would give NaNs).
        if la == 0.0 or lb == 0.0 or lc == 0.0:
            continue
        qa = (qa[0] / la, qa[1] / la, qa[2] / la)
        qb = (qb[0] / lb, qb[1] / lb, qb[2] / lb)
        qc = (qc[0] / lc, qc[1] / lc, qc[2] / lc)

        # Relative vectors give a more stable result for distant triangles.
        numerator = _dot(qa, _cross(_sub(qb, qa), _sub(qc, qa)))
        denominator = 1.0 + _dot(qa, qb) + _dot(qa, qc) + _dot(qb, qc)
        if numerator != 0.0:  # Zero means the point is on the triangle's plane.
            total += 2.0 * math.atan2(numerator, denominator)

    return total / (4.0 * math.pi)


def patch_winding_number(query_point: Sequence[float], patch: Patch) -> float:
    """Winding number of the triangles under ``patch``, evaluated hierarchically."""
    if not patch.children:
        return compute_winding_number(query_point, patch.triangles)
    if not patch.bounds.contains(query_point):
        # Closing triangles face the other way, hence the negation.
        return -compute_winding_number(query_point, patch.closing_triangles)
    return sum(patch_winding_number(query_point, child) for child in patch.children)


def compute_closing_triangles(triangles: Sequence[Triangle]) -> list[Triangle]:
    """Triangles which close every exterior edge of ``triangles``.

    Each unmatched edge is fanned to the first vertex of the first triangle,
    oriented against the edge, once per unit of imbalance.
    """
    edge_counts: dict[tuple[Vector3, Vector3], int] = {}
    for triangle in triangles:
        vertices = triangle.vertices
        for i in range(3):
            v0, v1 = vertices[i], vertices[(i + 1) % 3]
            if v0 < v1:
                edge_counts[(v0, v1)] = edge_counts.get((v0, v1), 0) + 1
            else:
                edge_counts[(v1, v0)] = edge_counts.get((v1, v0), 0) - 1

    closing: list[Triangle] = []
    for (first, second), count in edge_counts.items():
        if count < 0:
            first, second = second, first
            count = -count
        if count:
            apex = triangles[0].vertices[0]
            closing.extend([Triangle(second, first, apex)] * count)
    return closing


@dataclass(eq=False)
class Patch:
    """Node of a binary tree of triangles used to speed up winding numbers."""

    triangles: list[Triangle]
    bounds: Box3 = field(init=False)
    closing_triangles: list[Triangle] = field(init=False)
    children: list[Patch] = field(init=False)

    def __init__(self, triangles: Iterable[Triangle]) -> None:
        self.triangles = list(triangles)
        self.bounds = triangle_bounds(self.triangles)
        self.closing_triangles = compute_closing_triangles(self.triangles)
        self.children = []

        count = len(self.triangles)
        if count > len(self.closing_triangles) and count > _MIN_PATCH_TRIANGLES:
            # Split at the median along the longest axis.
            dims = self.bounds.dimensions()
            axis = dims.index(max(dims))
            self.triangles.sort(key=lambda t: t.centre()[axis])
            split = count // 2
            self.children = [Patch(self.triangles[:split]), Patch(self.triangles[split:])]