"""Camera description used by the visibility calculator.

Matrices are tuples of four columns, each a tuple of four floats, so that
``m[column][row]`` addresses an element.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, auto

Vector3 = tuple[float, float, float]
Matrix4 = tuple[tuple[float, float, float, float], ...]

_NEAR_PLANE = 0.1
_FAR_PLANE = 100.0


class NormalEstimation(Enum):
    """How glyph normals are estimated."""

    NONE = auto()
    FROM_CHILDREN = auto()
    FROM_NEIGHBOURS = auto()


@dataclass
class Glyph:
    """A visible octree node: centre, size, normal (a, b, c) and material (d)."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    size: float = 0.0
    a: float = 0.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0


def _vec(v: Sequence[float]) -> Vector3:
    return (float(v[0]), float(v[1]), float(v[2]))


def _add(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def _sub(a: Vector3, b: Vector3) -> Vector3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _scale(a: Vector3, s: float) -> Vector3:
    return (a[0] * s, a[1] * s, a[2] * s)


def _neg(a: Vector3) -> Vector3:
    return (-a[0], -a[1], -a[2])


def _dot(a: Vector3, b: Vector3) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def _cross(a: Vector3, b: Vector3) -> Vector3:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _normalize(a: Vector3) -> Vector3:
    length = math.sqrt(_dot(a, a))
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length vector")
    return _scale(a, 1.0 / length)


def _mat_mul(a: Matrix4, b: Matrix4) -> Matrix4:
    return tuple(
        tuple(sum(a[k][row] * b_col[k] for k in range(4)) for row in range(4))
        for b_col in b
    )


def _inverse(m: Matrix4) -> Matrix4:
    size = 4
    # Work on rows of the augmented matrix [M | I].
    rows = [
        [m[col][row] for col in range(size)] + [1.0 if row == col else 0.0 for col in range(size)]
        for row in range(size)
    ]
    for pivot in range(size):
        best = max(range(pivot, size), key=lambda r: abs(rows[r][pivot]))
        if abs(rows[best][pivot]) < 1e-12:
            raise ValueError("matrix is singular")
        rows[pivot], rows[best] = rows[best], rows[pivot]
        factor = rows[pivot][pivot]
        rows[pivot] = [value / factor for value in rows[pivot]]
        for r, row in enumerate(rows):
            if r != pivot and row[pivot] != 0.0:
                scale = row[pivot]
                rows[r] = [value - scale * p for value, p in zip(row, rows[pivot])]
    return tuple(tuple(rows[row][size + col] for row in range(size)) for col in range(size))


def perspective_matrix(fovy: float, aspect: float, near: float, far: float) -> Matrix4:
    """OpenGL-style perspective projection looking down -z, depth mapped to [-1, 1]."""
    if near == far:
        raise ValueError("near and far planes must differ")
    half_height = near * math.tan(fovy / 2.0)
    half_width = half_height * aspect
    if half_height == 0.0 or half_width == 0.0:
        raise ValueError("field of view and aspect ratio must be non-zero")
    depth = far - near
    return (
        (near / half_width, 0.0, 0.0, 0.0),
        (0.0, near / half_height, 0.0, 0.0),
        (0.0, 0.0, -(far + near) / depth, -1.0),
        (0.0, 0.0, -2.0 * near * far / depth, 0.0),
    )


def look_at(eye: Sequence[float], centre: Sequence[float], up: Sequence[float]) -> Matrix4:
    """Right-handed view matrix placing ``eye`` at the origin looking at ``centre``."""
    eye_v, centre_v, up_v = _vec(eye), _vec(centre), _vec(up)
    forward = _normalize(_sub(centre_v, eye_v))
    side = _normalize(_cross(forward, up_v))
    true_up = _cross(side, forward)
    return (
        (side[0], true_up[0], -forward[0], 0.0),
        (side[1], true_up[1], -forward[1], 0.0),
        (side[2], true_up[2], -forward[2], 0.0),
        (-_dot(side, eye_v), -_dot(true_up, eye_v), _dot(forward, eye_v), 1.0),
    )


class CameraData:
    """Camera position, matrices and view-space frustum side-plane normals."""

    def __init__(
        self,
        position: Sequence[float],
        centre: Sequence[float],
        up: Sequence[float],
        fovy: float,
        aspect: float,
    ) -> None:
        self.position: Vector3 = _vec(position)
        self.proj_matrix: Matrix4 = perspective_matrix(fovy, aspect, _NEAR_PLANE, _FAR_PLANE)
        self.view_matrix: Matrix4 = look_at(position, centre, up)
        self.inv_view_matrix: Matrix4 = _inverse(self.view_matrix)
        self.view_proj_matrix: Matrix4 = _mat_mul(self.proj_matrix, self.view_matrix)

        # The camera sits at the view-space origin looking down -z.
        y_scale = math.tan(fovy / 2.0)
        x_scale = y_scale * aspect
        up_vs: Vector3 = (0.0, 1.0, 0.0)
        right_vs: Vector3 = (1.0, 0.0, 0.0)
        forward_vs: Vector3 = (0.0, 0.0, -1.0)

        # Normals point towards the interior of the frustum.
        self.left_normal: Vector3 = _cross(
            _neg(up_vs), _normalize(_sub(forward_vs, _scale(right_vs, x_scale)))
        )
        self.right_normal: Vector3 = _cross(
            up_vs, _normalize(_add(forward_vs, _scale(right_vs, x_scale)))
        )
        self.bottom_normal: Vector3 = _cross(
            right_vs, _normalize(_sub(forward_vs, _scale(up_vs, y_scale)))
        )
        self.top_normal: Vector3 = _cross(
            _neg(right_vs), _normalize(_add(forward_vs, _scale(up_vs, y_scale)))
        )
        self.normals_view_space: tuple[Vector3, Vector3, Vector3, Vector3] = (
            self.left_normal,
            self.right_normal,
            self.bottom_normal,
            self.top_normal,
        )