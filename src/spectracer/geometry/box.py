"""Axis-aligned box primitive (slab method).

Rotated boxes are expressed by giving the scene object a ``Transform``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from spectracer.core.ray import Ray, Vec3, as_vec3
from spectracer.geometry.aabb import Aabb
from spectracer.geometry.shape import SurfaceHit, in_range, is_testable


@dataclass(frozen=True, eq=False)
class Box:
    """A solid axis-aligned box between two opposite corners.

    Attributes:
        minimum: Componentwise smallest corner.
        maximum: Componentwise largest corner.
    """

    minimum: Vec3
    maximum: Vec3

    def __post_init__(self) -> None:
        lo = as_vec3(self.minimum)
        hi = as_vec3(self.maximum)
        lo, hi = np.minimum(lo, hi), np.maximum(lo, hi)
        if np.any(hi - lo <= 0.0):
            raise ValueError("Box must have a positive extent along every axis")
        object.__setattr__(self, "minimum", lo)
        object.__setattr__(self, "maximum", hi)

    @classmethod
    def from_center(cls, center: Vec3, size: Vec3) -> Box:
        """Create a box from its center and edge lengths."""
        center = as_vec3(center)
        half = 0.5 * as_vec3(size)
        return cls(center - half, center + half)

    def intersect(self, ray: Ray) -> SurfaceHit | None:
        """Slab test that also reports which face was crossed.

        Returns the entry point when it lies in the ray's range, otherwise the
        exit point (ray starting inside the box).
        """
        if not is_testable(ray):
            return None

        t_near, t_far = -math.inf, math.inf
        near_axis = far_axis = -1
        for axis in range(3):
            origin = ray.origin[axis]
            direction = ray.direction[axis]
            if abs(direction) < 1e-12:
                if origin < self.minimum[axis] or origin > self.maximum[axis]:
                    return None
                continue
            t0 = (self.minimum[axis] - origin) / direction
            t1 = (self.maximum[axis] - origin) / direction
            if t0 > t1:
                t0, t1 = t1, t0
            if t0 > t_near:
                t_near, near_axis = float(t0), axis
            if t1 < t_far:
                t_far, far_axis = float(t1), axis
            if t_near > t_far:
                return None

        if near_axis >= 0 and in_range(ray, t_near):
            normal = np.zeros(3, dtype=np.float64)
            normal[near_axis] = -math.copysign(1.0, ray.direction[near_axis])
            return SurfaceHit(t_near, ray.origin + t_near * ray.direction, normal)
        if far_axis >= 0 and in_range(ray, t_far):
            normal = np.zeros(3, dtype=np.float64)
            normal[far_axis] = math.copysign(1.0, ray.direction[far_axis])
            return SurfaceHit(t_far, ray.origin + t_far * ray.direction, normal)
        return None

    def normal_at(self, point: Vec3) -> Vec3:
        """Outward normal of the face closest to the point."""
        point = as_vec3(point)
        distances = np.concatenate((np.abs(point - self.minimum), np.abs(point - self.maximum)))
        index = int(np.argmin(distances))
        normal = np.zeros(3, dtype=np.float64)
        normal[index % 3] = -1.0 if index < 3 else 1.0
        return normal

    def bounds(self) -> Aabb:
        return Aabb(self.minimum, self.maximum)
