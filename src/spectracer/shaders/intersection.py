"""Intersection shader: world ray against one scene object."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from spectracer.core.ray import Ray, normalize
from spectracer.geometry.shape import in_range, is_testable
from spectracer.shaders.contracts import HitRecord

if TYPE_CHECKING:
    from spectracer.scene.scene import SceneObject


def intersect_object(ray: Ray, scene_object: SceneObject) -> HitRecord | None:
    """Test a ray against a scene object.

    The ray is moved into object space, tested against the shape and the
    result is transformed back. Degenerate input (zero direction, inverted
    range, parallel or tangent cases, non-finite values) yields None.

    Args:
        ray: World-space ray; only hits within [t_min, t_max] count.
        scene_object: The object to test.

    Returns:
        A HitRecord with a normal facing the incoming ray, or None.
    """
    if not is_testable(ray):
        return None

    transform = scene_object.transform
    surface = scene_object.shape.intersect(transform.ray_to_local(ray))
    if surface is None:
        return None

    if transform.is_identity:
        t = surface.t
        point = surface.point
        outward = surface.normal
    else:
        t = transform.t_to_world(surface.t)
        point = ray.origin + t * ray.direction
        outward = normalize(transform.direction_to_world(surface.normal))

    if not in_range(ray, t):
        return None
    if not (np.all(np.isfinite(point)) and np.all(np.isfinite(outward))):
        return None
    if not np.any(outward):
        return None

    front_face = float(np.dot(ray.direction, outward)) < 0.0
    return HitRecord(
        t=float(t),
        point=point,
        normal=outward if front_face else -outward,
        front_face=front_face,
        object_id=scene_object.object_id,
        material=scene_object.material,
    )
