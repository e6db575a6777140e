"""Metal (specular reflective) scattering.

Perfect metals (roughness=0) produce mirror reflections; rougher metals
perturb the reflected direction within a cone:

    R = I - 2(I . N)N
    R' = normalize(R + roughness * random_in_unit_sphere())

The ray is absorbed if the perturbed direction ends up below the surface.
"""

from __future__ import annotations

import numpy as np

from spectracer.core.ray import Vec3, normalize, random_in_unit_sphere, reflect


def scatter_metal(
    incident_direction: Vec3,
    normal: Vec3,
    roughness: float = 0.0,
    rng: np.random.Generator | None = None,
) -> Vec3 | None:
    """Compute the scattered direction for a metal surface.

    Args:
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal facing the incoming ray.
        roughness: The surface roughness in [0, 1]. 0 = perfect mirror.
        rng: Random generator used for the roughness perturbation.

    Returns:
        The reflected unit direction, or None if the ray is absorbed.
    """
    reflected = reflect(incident_direction, normal)
    if roughness > 0.0 and rng is not None:
        reflected = reflected + roughness * random_in_unit_sphere(rng)
    scattered = normalize(reflected)
    if float(np.dot(scattered, normal)) <= 0.0:
        return None
    return scattered
