"""Visibility masks, camera frustum data and generalised winding numbers for micro-voxel scenes."""

__version__ = "0.1.0"
__all__ = ["camera", "mask", "raster2d", "winding"]