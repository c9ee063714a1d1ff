[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cubivox"
version = "0.1.0"
description = "Tiled one-bit visibility masks, camera frustum data and generalised winding numbers for micro-voxel scenes"
requires-python = ">=3.10"
dependencies = []
keywords = ["voxel", "occlusion", "visibility mask", "rasterisation", "winding number", "camera"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cubivox"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
