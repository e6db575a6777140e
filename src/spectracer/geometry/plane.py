"""Infinite plane primitive."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from spectracer.core.ray import Ray, Vec3, as_vec3, normalize
from spectracer.geometry.shape import SurfaceHit, in_range, is_testable

# Rays closer to parallel than this never hit a plane
PARALLEL_EPSILON = 1e-8


@dataclass(frozen=True, eq=False)
class Plane:
    """An infinite plane through ``point`` facing ``normal``.

    Planes are unbounded, so the acceleration structure always treats them
    as candidates.

    Attributes:
        point: Any point on the plane.
        normal: Unit normal of the plane (normalized on construction).
    """

    point: Vec3
    normal: Vec3

    def __post_init__(self) -> None:
        normal = normalize(as_vec3(self.normal))
        if not np.any(normal):
            raise ValueError("Plane normal must be non-zero")
        object.__setattr__(self, "point", as_vec3(self.point))
        object.__setattr__(self, "normal", normal)

    def intersect(self, ray: Ray) -> SurfaceHit | None:
        """Ray-plane intersection: t = dot(n, P - O) / dot(n, D)."""
        if not is_testable(ray):
            return None
        denom = float(np.dot(self.normal, ray.direction))
        if abs(denom) < PARALLEL_EPSILON:
            return None
        t = float(np.dot(self.normal, self.point - ray.origin)) / denom
        if not in_range(ray, t):
            return None
        return SurfaceHit(t, ray.origin + t * ray.direction, self.normal)

    def normal_at(self, point: Vec3) -> Vec3:
        return self.normal

    def bounds(self) -> None:
        return None
