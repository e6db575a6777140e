"""Shape capability protocol and the per-shape hit record.

Shapes are open for extension: anything implementing ``intersect``,
``normal_at`` and ``bounds`` can be placed in a scene. Shapes work in their
own local coordinate frame; placement in the world is handled by
``Transform`` in the intersection shader.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from spectracer.core.ray import Ray, Vec3

if TYPE_CHECKING:
    from spectracer.geometry.aabb import Aabb


@dataclass(frozen=True, eq=False)
class SurfaceHit:
    """Result of a successful shape intersection, in the shape's frame.

    Attributes:
        t: The parameter value along the ray where intersection occurred.
        point: The point where the ray hit the surface.
        normal: Outward unit surface normal at the hit point.
    """

    t: float
    point: Vec3
    normal: Vec3


@runtime_checkable
class Shape(Protocol):
    """Capability contract every scene shape satisfies."""

    def intersect(self, ray: Ray) -> SurfaceHit | None:
        """Nearest hit within ``[ray.t_min, ray.t_max]``, or None."""
        ...

    def normal_at(self, point: Vec3) -> Vec3:
        """Outward unit normal at a point on the surface."""
        ...

    def bounds(self) -> Aabb | None:
        """Local bounding box, or None for unbounded shapes."""
        ...


def is_testable(ray: Ray) -> bool:
    """Whether a ray can be intersected at all.

    Degenerate directions, inverted or non-numeric ranges are rejected up
    front so every shape answers "no intersection" for them.
    """
    if ray.degenerate:
        return False
    if math.isnan(ray.t_min) or math.isnan(ray.t_max):
        return False
    return ray.t_min <= ray.t_max


def in_range(ray: Ray, t: float) -> bool:
    """Whether t is a finite value inside the ray's parametric range."""
    return math.isfinite(t) and ray.t_min <= t <= ray.t_max
