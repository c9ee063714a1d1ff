"""Tiled one-bit visibility mask used for occlusion testing."""

from __future__ import annotations

import struct
import warnings
from collections.abc import Sequence

from cubivox.raster2d import Bounds, det, floordiv, murmur_hash3

Vector4 = tuple[int, int, int, int]

_TILE_BITS = 64
_FULL_TILE = (1 << _TILE_BITS) - 1
_HASH_SEED = 42


def _signed_left_shift(value: int, amount: int) -> int:
    """Shift left for positive amounts and right for negative ones, within 64 bits."""
    if abs(amount) >= _TILE_BITS:
        raise ValueError("shift amount must be smaller than the tile width in bits")
    if amount >= 0:
        return (value << amount) & _FULL_TILE
    return value >> -amount


class VisibilityMask:
    """A binary image stored as 8x8 tiles, each packed into a 64-bit integer.

    Bit ``y * TILE_SIZE + x`` of a tile holds pixel (x, y) within that tile.
    Tiles outside the image behave as fully occupied, so fragments tested
    against them are hidden and fragments drawn to them have no effect.
    """

    TILE_SIZE = 8

    def __init__(self, width: int, height: int) -> None:
        if width % self.TILE_SIZE or height % self.TILE_SIZE:
            warnings.warn(
                f"Visibility mask dimensions should be a multiple of tile size ({self.TILE_SIZE})",
                stacklevel=2,
            )
        self.width = width
        self.height = height
        self.width_in_tiles = width // self.TILE_SIZE
        self.height_in_tiles = height // self.TILE_SIZE
        self.tiles: list[int] = [0] * (self.width_in_tiles * self.height_in_tiles)
        self.cached_tiles: dict[int, int] = {}

    # Tile access -------------------------------------------------------

    def _tile_index(self, tile_x: int, tile_y: int) -> int | None:
        if 0 <= tile_x < self.width_in_tiles and 0 <= tile_y < self.height_in_tiles:
            return tile_y * self.width_in_tiles + tile_x
        return None

    def _tile(self, tile_x: int, tile_y: int) -> int:
        index = self._tile_index(tile_x, tile_y)
        return _FULL_TILE if index is None else self.tiles[index]

    def _or_tile(self, tile_x: int, tile_y: int, bits: int) -> None:
        index = self._tile_index(tile_x, tile_y)
        if index is not None:
            self.tiles[index] |= bits

    def _locate(self, x: int, y: int) -> tuple[int, int, int]:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) lies outside the mask")
        size = self.TILE_SIZE
        offset = (x % size) + (y % size) * size
        return x // size, y // size, 1 << offset

    # Whole-mask operations ----------------------------------------------

    def clear(self) -> None:
        """Reset every pixel to empty and forget cached tiles."""
        self.tiles = [0] * (self.width_in_tiles * self.height_in_tiles)
        self.cached_tiles.clear()

    def set_opaque(self) -> None:
        """Mark every pixel as drawn."""
        self.tiles = [_FULL_TILE] * (self.width_in_tiles * self.height_in_tiles)

    def hash(self) -> int:
        """MurmurHash3 of the tile memory (little-endian 64-bit words, seed 42)."""
        data = struct.pack(f"<{len(self.tiles)}Q", *self.tiles)
        return murmur_hash3(data, _HASH_SEED)

    def face_size(self) -> int:
        """Side length of a square mask."""
        if self.width != self.height:
            raise ValueError("face size is only defined for square masks")
        return self.width

    # Geometric tests ---------------------------------------------------

    def point_in_rect(
        self, point: Sequence[int], lower_left: Sequence[int], upper_right: Sequence[int]
    ) -> bool:
        """Whether ``point`` lies inside the inclusive rectangle."""
        return (
            lower_left[0] <= point[0] <= upper_right[0]
            and lower_left[1] <= point[1] <= upper_right[1]
        )

    def point_in_quad(self, point: Sequence[int], vertices: Sequence[Sequence[int]]) -> bool:
        """Whether ``point`` lies on or inside a counter-clockwise quad."""
        return all(
            det(vertices[i], vertices[(i + 1) % 4], point) >= 0 for i in range(4)
        )

    # Pixel operations --------------------------------------------------

    def get_pixel(self, x: int, y: int, tile: int) -> bool:
        """Read pixel (x, y) of a single tile value."""
        return bool((tile >> (y * self.TILE_SIZE + x)) & 1)

    def set_pixel(self, x: int, y: int, tile: int) -> int:
        """Return ``tile`` with pixel (x, y) set."""
        return tile | (1 << (y * self.TILE_SIZE + x))

    def draw_pixel(self, x: int, y: int, write_enabled: bool) -> bool:
        """Draw a pixel if writing is enabled; True if it was previously empty."""
        tile_x, tile_y, mask = self._locate(x, y)
        was_set = self._tile(tile_x, tile_y) & mask
        if write_enabled:
            self._or_tile(tile_x, tile_y, mask)
        return was_set == 0

    def test_pixel(self, x: int, y: int) -> bool:
        """Whether a pixel has been drawn."""
        tile_x, tile_y, mask = self._locate(x, y)
        return (self._tile(tile_x, tile_y) & mask) != 0

    # Rasterisation -----------------------------------------------------

    def setup_quad(
        self, vertices: Sequence[Sequence[int]], lower_corner: Sequence[int]
    ) -> tuple[Vector4, Vector4, Vector4]:
        """Edge-function values at ``lower_corner`` and their x and y steps.

        Returns ``(w, a, b)``: ``w[i]`` is the edge function of the edge opposite
        vertex ``i`` at the corner, ``a[i]`` its increment per pixel in x and
        ``b[i]`` its increment per pixel in y.
        """
        v = vertices
        a = (
            v[1][1] - v[2][1],
            v[2][1] - v[3][1],
            v[3][1] - v[0][1],
            v[0][1] - v[1][1],
        )
        b = (
            v[2][0] - v[1][0],
            v[3][0] - v[2][0],
            v[0][0] - v[3][0],
            v[1][0] - v[0][0],
        )
        w = (
            det(v[1], v[2], lower_corner),
            det(v[2], v[3], lower_corner),
            det(v[3], v[0], lower_corner),
            det(v[0], v[1], lower_corner),
        )
        return w, a, b

    def rasterise_tile(
        self,
        w_tile: Sequence[int],
        a: Sequence[int],
        b: Sequence[int],
        bounds: Bounds,
    ) -> int:
        """Rasterise a quad into one tile, restricted to ``bounds`` in tile space."""
        size = self.TILE_SIZE
        min_x = max(0, bounds.lower[0])
        min_y = max(0, bounds.lower[1])
        max_x = min(size - 1, bounds.upper[0])
        max_y = min(size - 1, bounds.upper[1])

        result = 0
        for y in range(min_y, max_y + 1):
            row = [w + bi * y for w, bi in zip(w_tile, b)]
            for x in range(min_x, max_x + 1):
                if all(r + ai * x >= 0 for r, ai in zip(row, a)):
                    result |= 1 << (y * size + x)
        return result

    def blit_tile_ref(self, tile: int, position: Sequence[int], write_enabled: bool) -> bool:
        """Pixel-by-pixel blit of a tile at ``position``; True if any hole was covered."""
        size = self.TILE_SIZE
        drew_pixel = False
        for y in range(size):
            for x in range(size):
                if not self.get_pixel(x, y, tile):
                    continue
                px, py = position[0] + x, position[1] + y
                if 0 <= px < self.width and 0 <= py < self.height and not self.test_pixel(px, py):
                    self.draw_pixel(px, py, write_enabled)
                    drew_pixel = True
        return drew_pixel

    def blit_tile(self, tile: int, position: Sequence[int], write_enabled: bool) -> bool:
        """Blit a tile at ``position`` using whole-tile bit operations.

        Returns True if any of its set pixels covered an empty pixel of the mask.
        """
        size = self.TILE_SIZE
        lower_tile_x = floordiv(position[0], size)
        lower_tile_y = floordiv(position[1], size)
        offset_x = position[0] - lower_tile_x * size
        offset_y = position[1] - lower_tile_y * size

        # Bits shifted past the left/right tile edges wrap into adjacent rows.
        wrapped_columns = (0x0101010101010101 * ((1 << offset_x) - 1)) & _FULL_TILE
        horz_mask = (~wrapped_columns & _FULL_TILE, wrapped_columns)

        drawn = 0
        for tile_dy in range(2 if offset_y else 1):
            for tile_dx in range(2 if offset_x else 1):
                shift = (offset_y - size * tile_dy) * size + (offset_x - size * tile_dx)
                shifted = _signed_left_shift(tile, shift) & horz_mask[tile_dx]
                dst_x, dst_y = lower_tile_x + tile_dx, lower_tile_y + tile_dy
                drawn |= ~self._tile(dst_x, dst_y) & shifted
                if write_enabled:
                    self._or_tile(dst_x, dst_y, shifted)
        return drawn != 0