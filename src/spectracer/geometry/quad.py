"""Quad primitive with ray-quad intersection.

A quad is defined by:
- q: A corner point of the quad
- u: Edge vector from q to adjacent corner
- v: Edge vector from q to other adjacent corner

The quad spans the parallelogram from q to q+u+v. The normal is
normalize(cross(u, v)), pointing in the direction determined by the
right-hand rule.

Ray-quad intersection uses the parametric plane test:
1. Find where the ray intersects the plane containing the quad
2. Check if the intersection point lies within the quad bounds

Example:
    >>> from spectracer.core.ray import vec3
    >>> from spectracer.geometry.quad import Quad
    >>> # Floor quad at y=0, spanning x=[0,1] and z=[0,1]
    >>> floor = Quad(q=vec3(0, 0, 0), u=vec3(1, 0, 0), v=vec3(0, 0, 1))
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

from spectracer.core.ray import Ray, Vec3, as_vec3
from spectracer.geometry.aabb import Aabb
from spectracer.geometry.shape import SurfaceHit, in_range, is_testable


@dataclass(frozen=True, eq=False)
class Quad:
    """A parallelogram defined by a corner point and two edge vectors.

    The quad has vertices at q, q+u, q+v and q+u+v.

    Attributes:
        q: The corner point of the quad.
        u: Edge vector from q to adjacent corner.
        v: Edge vector from q to other adjacent corner.
    """

    q: Vec3
    u: Vec3
    v: Vec3
    normal: Vec3 = field(init=False, repr=False)
    _d: float = field(init=False, repr=False)
    _w_u: Vec3 = field(init=False, repr=False)
    _w_v: Vec3 = field(init=False, repr=False)

    def __post_init__(self) -> None:
        q, u, v = as_vec3(self.q), as_vec3(self.u), as_vec3(self.v)
        n = np.cross(u, v)
        n_dot_n = float(np.dot(n, n))
        if n_dot_n < 1e-20:
            raise ValueError("Quad edges must not be parallel")
        normal = n / np.sqrt(n_dot_n)

        # w_u = v x n / |n|^2 and w_v = n x u / |n|^2 satisfy
        # dot(w_u, u) = 1, dot(w_u, v) = 0, dot(w_v, u) = 0, dot(w_v, v) = 1
        object.__setattr__(self, "q", q)
        object.__setattr__(self, "u", u)
        object.__setattr__(self, "v", v)
        object.__setattr__(self, "normal", normal)
        object.__setattr__(self, "_d", float(np.dot(normal, q)))
        object.__setattr__(self, "_w_u", np.cross(v, n) / n_dot_n)
        object.__setattr__(self, "_w_v", np.cross(n, u) / n_dot_n)

    def intersect(self, ray: Ray) -> SurfaceHit | None:
        """Test for ray-quad intersection.

        Solving ray.origin + t * ray.direction = q + alpha * u + beta * v
        against the plane normal gives
            t = (d - dot(normal, origin)) / dot(normal, direction)
        and the hit is inside when 0 <= alpha, beta <= 1.
        """
        if not is_testable(ray):
            return None

        denom = float(np.dot(self.normal, ray.direction))
        if abs(denom) < 1e-8:
            return None

        t = (self._d - float(np.dot(self.normal, ray.origin))) / denom
        if not in_range(ray, t):
            return None

        point = ray.origin + t * ray.direction
        p_minus_q = point - self.q
        alpha = float(np.dot(self._w_u, p_minus_q))
        beta = float(np.dot(self._w_v, p_minus_q))
        if not (0.0 <= alpha <= 1.0 and 0.0 <= beta <= 1.0):
            return None
        return SurfaceHit(t, point, self.normal)

    def normal_at(self, point: Vec3) -> Vec3:
        return self.normal

    def area(self) -> float:
        """Area of the parallelogram, |u x v|."""
        return float(np.linalg.norm(np.cross(self.u, self.v)))

    def bounds(self) -> Aabb:
        corners = [self.q, self.q + self.u, self.q + self.v, self.q + self.u + self.v]
        return Aabb(np.min(corners, axis=0), np.max(corners, axis=0)).padded()
