"""Object placement: translation, rotation and uniform scale.

A transform maps object space to world space as

    world = translation + R @ (scale * local)

with R the rotation about x, then y, then z (angles in degrees). Because the
scale is uniform, directions stay unit length after rotation and normals need
no inverse-transpose: world normal = R @ local normal.

Example:
    >>> from spectracer.geometry.transform import Transform
    >>> t = Transform(translation=(0, 1, 0), rotation_deg=(0, 45, 0))
    >>> t.point_to_world((1, 0, 0))
    array([ 0.70710678,  1.        , -0.70710678])
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

from spectracer.core.ray import Ray, Vec3, as_vec3
from spectracer.geometry.aabb import Aabb


def rotation_matrix(rotation_deg: Vec3) -> np.ndarray:
    """Rotation about x, then y, then z by the given angles in degrees."""
    rx, ry, rz = (math.radians(float(angle)) for angle in rotation_deg)
    cx, sx = math.cos(rx), math.sin(rx)
    cy, sy = math.cos(ry), math.sin(ry)
    cz, sz = math.cos(rz), math.sin(rz)
    x_axis = np.array([[1.0, 0.0, 0.0], [0.0, cx, -sx], [0.0, sx, cx]])
    y_axis = np.array([[cy, 0.0, sy], [0.0, 1.0, 0.0], [-sy, 0.0, cy]])
    z_axis = np.array([[cz, -sz, 0.0], [sz, cz, 0.0], [0.0, 0.0, 1.0]])
    return z_axis @ y_axis @ x_axis


@dataclass(frozen=True, eq=False)
class Transform:
    """Placement of a shape in the world.

    Attributes:
        translation: Offset of the object origin in world space.
        rotation_deg: Euler angles in degrees about x, y and z.
        scale: Uniform scale factor (positive).
    """

    translation: Vec3 = (0.0, 0.0, 0.0)
    rotation_deg: Vec3 = (0.0, 0.0, 0.0)
    scale: float = 1.0
    matrix: np.ndarray = field(init=False, repr=False)
    is_identity: bool = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.scale > 0.0:
            raise ValueError(f"Scale must be positive, got {self.scale}")
        translation = as_vec3(self.translation)
        rotation = as_vec3(self.rotation_deg)
        object.__setattr__(self, "translation", translation)
        object.__setattr__(self, "rotation_deg", rotation)
        object.__setattr__(self, "scale", float(self.scale))
        object.__setattr__(self, "matrix", rotation_matrix(rotation))
        object.__setattr__(
            self,
            "is_identity",
            not np.any(translation) and not np.any(rotation) and self.scale == 1.0,
        )

    def point_to_world(self, point: Vec3) -> Vec3:
        return self.translation + self.matrix @ (self.scale * as_vec3(point))

    def point_to_local(self, point: Vec3) -> Vec3:
        return (self.matrix.T @ (as_vec3(point) - self.translation)) / self.scale

    def direction_to_world(self, direction: Vec3) -> Vec3:
        return self.matrix @ direction

    def direction_to_local(self, direction: Vec3) -> Vec3:
        return self.matrix.T @ direction

    def ray_to_local(self, ray: Ray) -> Ray:
        """Express a world ray in object space.

        The local direction stays unit length, so local distances are world
        distances divided by the scale; the parametric range is rescaled to
        match.
        """
        if self.is_identity:
            return ray
        return Ray(
            self.point_to_local(ray.origin),
            self.direction_to_local(ray.direction),
            ray.t_min / self.scale,
            ray.t_max / self.scale,
        )

    def t_to_world(self, t_local: float) -> float:
        return t_local * self.scale

    def bounds_to_world(self, bounds: Aabb) -> Aabb:
        """World box enclosing the transformed corners of a local box."""
        if self.is_identity:
            return bounds
        corners = [self.point_to_world(corner) for corner in bounds.corners()]
        return Aabb(np.min(corners, axis=0), np.max(corners, axis=0))


IDENTITY = Transform()
