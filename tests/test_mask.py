import struct

import pytest

from cubivox.mask import VisibilityMask
from cubivox.raster2d import Bounds, murmur_hash3

FULL = (1 << 64) - 1
SQUARE = [(0, 0), (8, 0), (8, 8), (0, 8)]


def _tile_from_points(mask, points):
    tile = 0
    for x, y in points:
        tile = mask.set_pixel(x, y, tile)
    return tile


def test_dimensions_in_tiles():
    mask = VisibilityMask(32, 16)
    assert (mask.width_in_tiles, mask.height_in_tiles) == (4, 2)
    assert len(mask.tiles) == 8


def test_non_multiple_size_warns():
    with pytest.warns(UserWarning):
        VisibilityMask(10, 16)


def test_draw_pixel_then_test():
    mask = VisibilityMask(16, 16)
    assert mask.test_pixel(3, 9) is False
    assert mask.draw_pixel(3, 9, True) is True
    assert mask.test_pixel(3, 9) is True
    assert mask.draw_pixel(3, 9, True) is False


def test_draw_pixel_without_write_leaves_mask():
    mask = VisibilityMask(16, 16)
    assert mask.draw_pixel(5, 5, False) is True
    assert mask.test_pixel(5, 5) is False
    assert all(tile == 0 for tile in mask.tiles)


def test_pixel_out_of_range_raises():
    mask = VisibilityMask(16, 16)
    with pytest.raises(IndexError):
        mask.test_pixel(16, 0)
    with pytest.raises(IndexError):
        mask.draw_pixel(0, -1, True)


def test_clear_and_set_opaque():
    mask = VisibilityMask(16, 16)
    mask.set_opaque()
    assert all(mask.test_pixel(x, y) for x in range(16) for y in range(16))
    mask.cached_tiles[1] = 5
    mask.clear()
    assert not any(mask.test_pixel(x, y) for x in range(16) for y in range(16))
    assert mask.cached_tiles == {}


def test_hash_matches_tile_memory():
    mask = VisibilityMask(16, 16)
    mask.draw_pixel(1, 2, True)
    expected = murmur_hash3(struct.pack("<4Q", *mask.tiles), 42)
    assert mask.hash() == expected


def test_hash_tracks_content():
    a = VisibilityMask(16, 16)
    b = VisibilityMask(16, 16)
    assert a.hash() == b.hash()
    a.draw_pixel(7, 7, True)
    assert a.hash() != b.hash()
    b.draw_pixel(7, 7, True)
    assert a.hash() == b.hash()


def test_face_size():
    assert VisibilityMask(32, 32).face_size() == 32
    with pytest.raises(ValueError):
        VisibilityMask(32, 16).face_size()


def test_point_in_rect():
    mask = VisibilityMask(8, 8)
    assert mask.point_in_rect((2, 3), (2, 3), (4, 5))
    assert mask.point_in_rect((4, 5), (2, 3), (4, 5))
    assert not mask.point_in_rect((5, 5), (2, 3), (4, 5))


def test_point_in_quad():
    mask = VisibilityMask(8, 8)
    assert mask.point_in_quad((4, 4), SQUARE)
    assert mask.point_in_quad((0, 0), SQUARE)
    assert not mask.point_in_quad((9, 4), SQUARE)
    assert not mask.point_in_quad((4, 4), list(reversed(SQUARE)))


def test_get_set_pixel_round_trip():
    mask = VisibilityMask(8, 8)
    tile = mask.set_pixel(3, 6, 0)
    assert mask.get_pixel(3, 6, tile)
    assert not mask.get_pixel(6, 3, tile)
    assert mask.get_pixel(7, 7, FULL)


def test_rasterise_full_tile():
    mask = VisibilityMask(8, 8)
    w, a, b = mask.setup_quad(SQUARE, (0, 0))
    assert mask.rasterise_tile(w, a, b, Bounds((0, 0), (7, 7))) == FULL


def test_rasterise_matches_point_in_quad():
    mask = VisibilityMask(8, 8)
    quad = [(1, 0), (7, 2), (5, 7), (0, 4)]
    w, a, b = mask.setup_quad(quad, (0, 0))
    tile = mask.rasterise_tile(w, a, b, Bounds((0, 0), (7, 7)))
    for y in range(8):
        for x in range(8):
            assert mask.get_pixel(x, y, tile) == mask.point_in_quad((x, y), quad)


def test_rasterise_respects_bounds():
    mask = VisibilityMask(8, 8)
    w, a, b = mask.setup_quad(SQUARE, (0, 0))
    tile = mask.rasterise_tile(w, a, b, Bounds((2, 3), (4, 5)))
    for y in range(8):
        for x in range(8):
            assert mask.get_pixel(x, y, tile) == (2 <= x <= 4 and 3 <= y <= 5)


def test_setup_quad_edge_values_at_corner():
    mask = VisibilityMask(8, 8)
    w, a, b = mask.setup_quad(SQUARE, (2, 3))
    w0, a0, b0 = mask.setup_quad(SQUARE, (0, 0))
    for i in range(4):
        assert w[i] == w0[i] + 2 * a0[i] + 3 * b0[i]
    assert (a, b) == (a0, b0)


@pytest.mark.parametrize("position", [(0, 0), (3, 5), (8, 1), (-3, -2), (13, 12), (1, 9)])
def test_blit_tile_matches_reference(position):
    source = VisibilityMask(8, 8)
    tile = _tile_from_points(source, [(0, 0), (7, 0), (3, 4), (7, 7), (0, 7), (5, 2)])

    fast = VisibilityMask(16, 16)
    ref = VisibilityMask(16, 16)
    for m in (fast, ref):
        m.draw_pixel(4, 5, True)

    assert fast.blit_tile(tile, position, True) == ref.blit_tile_ref(tile, position, True)
    assert fast.tiles == ref.tiles


def test_blit_tile_reports_only_new_pixels():
    mask = VisibilityMask(16, 16)
    tile = _tile_from_points(mask, [(1, 1)])
    assert mask.blit_tile(tile, (2, 3), True) is True
    assert mask.test_pixel(3, 4)
    assert mask.blit_tile(tile, (2, 3), True) is False


def test_blit_tile_without_write_leaves_mask():
    mask = VisibilityMask(16, 16)
    tile = _tile_from_points(mask, [(0, 0), (2, 2)])
    assert mask.blit_tile(tile, (5, 6), False) is True
    assert all(t == 0 for t in mask.tiles)


def test_blit_tile_off_screen_is_hidden():
    mask = VisibilityMask(16, 16)
    tile = _tile_from_points(mask, [(0, 0)])
    assert mask.blit_tile(tile, (-8, -8), True) is False
    assert all(t == 0 for t in mask.tiles)