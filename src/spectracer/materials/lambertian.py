"""Lambertian (ideal diffuse) local illumination.

Diffuse surfaces are shaded by direct lighting only: every point light that
is visible from the hit point contributes

    reflectance * emission * cos(theta) / distance^2

where theta is the angle between the surface normal and the direction to the
light. Visibility is decided by a shadow ray through the acceleration
structure.

Example:
    >>> from spectracer.materials.lambertian import direct_lighting
    >>> # light = direct_lighting(point, normal, material.reflectance,
    >>> #                         scene.lights, acceleration.occluded)
"""

from __future__ import annotations

import math
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

import numpy as np

from spectracer.core.ray import RAY_EPSILON, Ray, Vec3, offset_origin
from spectracer.core.spectrum import Spectrum

if TYPE_CHECKING:
    from spectracer.scene.scene import PointLight


def light_cosine(normal: Vec3, to_light: Vec3) -> float:
    """Lambert cosine for a unit direction towards the light (0 if behind)."""
    return max(float(np.dot(normal, to_light)), 0.0)


def shadow_ray(point: Vec3, normal: Vec3, light_position: Vec3) -> Ray | None:
    """Build the ray from a surface point to a light.

    The ray stops just short of the light so the light itself (or geometry
    behind it) never occludes. Returns None when the light coincides with
    the point.
    """
    to_light = light_position - point
    distance = float(np.linalg.norm(to_light))
    if distance < 2.0 * RAY_EPSILON:
        return None
    direction = to_light / distance
    origin = offset_origin(point, normal, direction)
    return Ray(origin, direction, RAY_EPSILON, distance - RAY_EPSILON)


def direct_lighting(
    point: Vec3,
    normal: Vec3,
    reflectance: Spectrum,
    lights: Iterable[PointLight],
    occluded: Callable[[Ray], bool],
) -> Spectrum:
    """Sum the visible point-light contributions at a diffuse surface point.

    Args:
        point: World-space hit point.
        normal: Unit normal facing the incoming ray.
        reflectance: Diffuse reflectance of the surface.
        lights: Point lights of the scene.
        occluded: Shadow query returning True if anything blocks the ray.

    Returns:
        Reflected radiance towards the viewer.
    """
    incoming = Spectrum.zeros(reflectance.grid)
    if reflectance.is_black():
        return incoming

    for light in lights:
        ray = shadow_ray(point, normal, light.position)
        if ray is None:
            continue
        cosine = light_cosine(normal, ray.direction)
        if cosine <= 0.0:
            continue
        if occluded(ray):
            continue
        distance_sq = float(np.dot(light.position - point, light.position - point))
        falloff = cosine / distance_sq
        if not math.isfinite(falloff):
            continue
        incoming = incoming + light.emission * falloff

    return incoming * reflectance
