"""Integer 2D helpers shared by the visibility rasteriser: hashing, edge tests and bounds."""

from __future__ import annotations

import struct
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

Point2 = tuple[int, int]

_MASK32 = 0xFFFFFFFF
_C1 = 0xCC9E2D51
_C2 = 0x1B873593


@dataclass(frozen=True)
class Bounds:
    """Inclusive axis-aligned integer rectangle."""

    lower: Point2
    upper: Point2


def murmur_hash3(data: bytes | bytearray | memoryview, seed: int = 0) -> int:
    """Return the 32-bit MurmurHash3 (x86 variant) of ``data``."""
    data = bytes(data)
    length = len(data)
    block_count = length // 4
    h = seed & _MASK32

    for k in struct.unpack_from(f"<{block_count}I", data):
        k = (k * _C1) & _MASK32
        k = ((k << 15) | (k >> 17)) & _MASK32
        k = (k * _C2) & _MASK32
        h ^= k
        h = ((h << 13) | (h >> 19)) & _MASK32
        h = (h * 5 + 0xE6546B64) & _MASK32

    tail = data[block_count * 4:]
    if tail:
        k = int.from_bytes(tail, "little")
        k = (k * _C1) & _MASK32
        k = ((k << 15) | (k >> 17)) & _MASK32
        k = (k * _C2) & _MASK32
        h ^= k

    h ^= length & _MASK32
    h ^= h >> 16
    h = (h * 0x85EBCA6B) & _MASK32
    h ^= h >> 13
    h = (h * 0xC2B2AE35) & _MASK32
    h ^= h >> 16
    return h


def det(v0: Sequence[int], v1: Sequence[int], p: Sequence[int]) -> int:
    """Twice the signed area of triangle (v0, v1, p).

    Positive when ``p`` lies left of the edge v0->v1, negative when right,
    and zero when it lies on the edge or the edge is degenerate.
    """
    return (v1[0] - v0[0]) * (p[1] - v0[1]) - (v1[1] - v0[1]) * (p[0] - v0[0])


def floordiv(a: int, b: int) -> int:
    """Division rounding towards negative infinity for a positive divisor.

    Follows the rasteriser's rule: negative numerators are biased by
    ``b - 1`` before a division that truncates towards zero.
    """
    if b == 0:
        raise ZeroDivisionError("floordiv by zero")
    numerator = a - (b - 1) if a < 0 else a
    quotient = abs(numerator) // abs(b)
    return quotient if (numerator < 0) == (b < 0) else -quotient


def compute_bounds(vertices: Iterable[Sequence[int]]) -> Bounds:
    """Smallest inclusive rectangle containing every vertex."""
    points = [(int(v[0]), int(v[1])) for v in vertices]
    if not points:
        raise ValueError("cannot compute bounds of no vertices")
    xs = [x for x, _ in points]
    ys = [y for _, y in points]
    return Bounds((min(xs), min(ys)), (max(xs), max(ys)))