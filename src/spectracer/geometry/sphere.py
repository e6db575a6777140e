"""Sphere primitive with robust ray-sphere intersection.

The intersection uses the robust quadratic formula from Ray Tracing Gems to
avoid catastrophic cancellation when b^2 is nearly equal to 4ac.

Example:
    >>> from spectracer.core.ray import Ray, vec3
    >>> from spectracer.geometry.sphere import Sphere
    >>> sphere = Sphere(center=vec3(0, 0, -1), radius=0.5)
    >>> sphere.intersect(Ray(vec3(0, 0, 0), vec3(0, 0, -1))).t
    0.5
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from spectracer.core.ray import Ray, Vec3, as_vec3
from spectracer.geometry.aabb import Aabb
from spectracer.geometry.shape import SurfaceHit, in_range, is_testable


def _solve_quadratic_robust(h: float, a: float, c: float, sqrt_d: float) -> tuple[float, float]:
    """Solve a*t^2 + 2*h*t + c = 0 using a numerically stable method.

    Args:
        h: Half of the linear coefficient.
        a: Quadratic coefficient.
        c: Constant term.
        sqrt_d: Square root of discriminant (h^2 - a*c).

    Returns:
        Tuple of (t0, t1) where t0 <= t1.
    """
    # q = -(h + sign(h) * sqrt(discriminant))
    sign_h = -1.0 if h < 0.0 else 1.0
    q = -(h + sign_h * sqrt_d)

    if abs(q) < 1e-10:
        # Tangent ray through the origin of the parameterization
        t0 = (-h - sqrt_d) / a
        t1 = (-h + sqrt_d) / a
    else:
        t0 = q / a
        t1 = c / q

    if t0 > t1:
        t0, t1 = t1, t0
    return t0, t1


@dataclass(frozen=True, eq=False)
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere.
        radius: The radius of the sphere (positive).
    """

    center: Vec3
    radius: float

    def __post_init__(self) -> None:
        if not self.radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {self.radius}")
        object.__setattr__(self, "center", as_vec3(self.center))
        object.__setattr__(self, "radius", float(self.radius))

    def intersect(self, ray: Ray) -> SurfaceHit | None:
        """Test for ray-sphere intersection.

        The intersection is found by solving:
            |origin + t * direction - center|^2 = radius^2

        which expands to a*t^2 + 2*h*t + c = 0 with
            a = dot(direction, direction)
            h = dot(direction, oc)
            c = dot(oc, oc) - radius^2
            oc = origin - center

        Args:
            ray: The ray to test.

        Returns:
            The nearest hit within the ray's range, or None. A ray starting
            inside the sphere hits the far side.
        """
        if not is_testable(ray):
            return None

        oc = ray.origin - self.center
        a = float(np.dot(ray.direction, ray.direction))
        h = float(np.dot(ray.direction, oc))
        c = float(np.dot(oc, oc)) - self.radius * self.radius

        discriminant = h * h - a * c
        if not discriminant >= 0.0:
            return None

        t0, t1 = _solve_quadratic_robust(h, a, c, math.sqrt(discriminant))
        for t in (t0, t1):
            if in_range(ray, t):
                point = ray.origin + t * ray.direction
                return SurfaceHit(t, point, self.normal_at(point))
        return None

    def normal_at(self, point: Vec3) -> Vec3:
        """Outward normal: points from the center to the surface point."""
        return (point - self.center) / self.radius

    def bounds(self) -> Aabb:
        return Aabb(self.center - self.radius, self.center + self.radius)
