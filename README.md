# cubivox

Pure-Python building blocks for occlusion testing and inside/outside tests in micro-voxel
scenes. There are no dependencies beyond the standard library.

## Modules

- **`cubivox.raster2d`** holds the integer 2D helpers:
  - `Bounds`: an inclusive rectangle.
  - `compute_bounds(vertices)`: the bounding rectangle of some vertices.
  - `det(v0, v1, p)`: the signed edge function.
  - `floordiv(a, b)`: division that rounds down.
  - `murmur_hash3(data, seed)`: the 32-bit MurmurHash3, x86 variant.
- **`cubivox.mask`** provides `VisibilityMask`, a one-bit image stored as 8×8 tiles. Each tile
  is packed into a 64-bit integer, and bit `y * 8 + x` holds pixel (x, y). Tiles outside the
  image behave as fully drawn. Its methods are:
  - `draw_pixel` and `test_pixel` for single pixels.
  - `get_pixel` and `set_pixel` for single tile values.
  - `point_in_rect` and `point_in_quad` for geometric tests. Quads are counter-clockwise.
  - `setup_quad` and `rasterise_tile` to rasterise a quad into one tile using edge functions.
  - `blit_tile` (bitwise) and `blit_tile_ref` (pixel by pixel) to place a tile anywhere.
  - `clear`, `set_opaque`, `hash` (MurmurHash3 of the tile memory, seed 42) and `face_size`.
- **`cubivox.camera`** provides:
  - `perspective_matrix`: an OpenGL-style projection.
  - `look_at`: a right-handed view matrix.
  - `CameraData`: position, view, inverse view, projection and view-projection matrices, plus
    the four view-space frustum side-plane normals, which point inwards.
  - `Glyph` and `NormalEstimation`: plain descriptions of visible nodes.

  Matrices are stored as tuples of columns, so `m[column][row]` reads one element.
- **`cubivox.winding`** provides generalised winding numbers after Jacobson et al.:
  - `Triangle` and `Box3`, with `triangle_bounds` to compute the box around triangles.
  - `compute_winding_number`: the brute-force sum over triangles.
  - `compute_closing_triangles`: triangles that close the open edges of a patch.
  - `Patch`: a median-split tree of triangles.
  - `patch_winding_number`: hierarchical evaluation using that tree.

## Installation

```
pip install cubivox
```

## Example: visibility mask

```python
from cubivox.mask import VisibilityMask
from cubivox.raster2d import Bounds

mask = VisibilityMask(64, 64)

print(mask.draw_pixel(3, 4, True))   # True: the pixel was empty
print(mask.draw_pixel(3, 4, True))   # False: already drawn
print(mask.test_pixel(3, 4))         # True

# Rasterise a 4x4 counter-clockwise square into a tile and blit it.
square = [(0, 0), (3, 0), (3, 3), (0, 3)]
w, a, b = mask.setup_quad(square, (0, 0))
tile = mask.rasterise_tile(w, a, b, Bounds((0, 0), (7, 7)))
print(mask.blit_tile(tile, (10, 10), True))  # True: it covered empty pixels
print(mask.test_pixel(12, 12))               # True
```

## Example: winding numbers

```python
from cubivox.winding import Patch, Triangle, compute_winding_number, patch_winding_number

triangles = [...]  # a closed, outward-facing list of Triangle objects
w = compute_winding_number((0.0, 0.0, 0.0), triangles)  # about 1.0 inside, 0.0 outside
tree = Patch(triangles)
w_fast = patch_winding_number((0.0, 0.0, 0.0), tree)
```

## What the package does not do

- **No projected cube nodes in a mask.** The package does not draw whole projected cube
  nodes into a `VisibilityMask`. It offers the per-tile and per-pixel operations those are
  built from.
- **No octree traversal.** It does not walk an octree to collect `Glyph`s.
- **No voxelisation.** It does not scan-convert triangles into voxels or fill a volume from
  a mesh.
- **No storage.** It has no volume storage, no file formats and no command-line program.

## Running the tests

```
pip install -e .[test]
pytest
```