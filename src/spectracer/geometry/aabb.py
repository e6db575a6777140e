"""Axis-aligned bounding boxes used to prune intersection candidates.

Example:
    >>> from spectracer.core.ray import Ray, vec3
    >>> from spectracer.geometry.aabb import Aabb
    >>> box = Aabb(vec3(-1, -1, -1), vec3(1, 1, 1))
    >>> box.hit(Ray(vec3(0, 0, -5), vec3(0, 0, 1)))
    True
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import product

import numpy as np

from spectracer.core.ray import Ray, Vec3, as_vec3


@dataclass(frozen=True, eq=False)
class Aabb:
    """An axis-aligned box spanning ``minimum`` to ``maximum``.

    Attributes:
        minimum: Componentwise smallest corner.
        maximum: Componentwise largest corner.
    """

    minimum: Vec3
    maximum: Vec3

    def __post_init__(self) -> None:
        lo = as_vec3(self.minimum)
        hi = as_vec3(self.maximum)
        object.__setattr__(self, "minimum", np.minimum(lo, hi))
        object.__setattr__(self, "maximum", np.maximum(lo, hi))

    @property
    def center(self) -> Vec3:
        return 0.5 * (self.minimum + self.maximum)

    def corners(self) -> list[Vec3]:
        """The eight corner points of the box."""
        return [
            np.array((x, y, z), dtype=np.float64)
            for x, y, z in product(*zip(self.minimum, self.maximum))
        ]

    def union(self, other: Aabb) -> Aabb:
        """Smallest box containing both boxes."""
        return Aabb(
            np.minimum(self.minimum, other.minimum),
            np.maximum(self.maximum, other.maximum),
        )

    def padded(self, amount: float = 1e-4) -> Aabb:
        """Grow the box by a small margin on every side."""
        return Aabb(self.minimum - amount, self.maximum + amount)

    def hit(self, ray: Ray) -> bool:
        """Slab test: does the ray cross the box within its parametric range?

        Rays parallel to a slab are tested by whether the origin lies between
        the slab planes; division by zero never occurs.
        """
        if ray.degenerate or not ray.t_min <= ray.t_max:
            return False
        t_near = ray.t_min
        t_far = ray.t_max
        for axis in range(3):
            origin = ray.origin[axis]
            direction = ray.direction[axis]
            lo = self.minimum[axis]
            hi = self.maximum[axis]
            if abs(direction) < 1e-12:
                if origin < lo or origin > hi:
                    return False
                continue
            inv = 1.0 / direction
            t0 = (lo - origin) * inv
            t1 = (hi - origin) * inv
            if t0 > t1:
                t0, t1 = t1, t0
            t_near = max(t_near, t0)
            t_far = min(t_far, t1)
            if t_near > t_far:
                return False
        return True
