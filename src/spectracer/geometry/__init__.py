"""Geometry module for shape primitives.

Components:
    shape: Shape capability protocol and SurfaceHit
    sphere: Sphere with robust ray-sphere intersection
    plane: Infinite plane
    quad: Parallelogram
    box: Axis-aligned box (slab method)
    aabb: Bounding boxes for candidate pruning
    transform: Translation, rotation and uniform scale

Shapes intersect rays in their own frame and return the nearest hit within
the ray's parametric range, or None for misses and degenerate input.
"""

from .aabb import Aabb
from .box import Box
from .plane import Plane
from .quad import Quad
from .shape import Shape, SurfaceHit
from .sphere import Sphere
from .transform import IDENTITY, Transform

__all__ = [
    "Aabb",
    "Box",
    "Plane",
    "Quad",
    "Shape",
    "SurfaceHit",
    "Sphere",
    "Transform",
    "IDENTITY",
]
