"""Dielectric (glass/water) scattering with per-wavelength refraction.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when sin(theta_t) > 1

Instead of randomly choosing between reflection and refraction, the hit
shader follows both and weights them by the Fresnel reflectance. Because the
index of refraction depends on wavelength, the reflectance and the refracted
direction are available per band, which is what produces dispersion.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from spectracer.core.ray import Vec3, reflect, refract


@dataclass(frozen=True, eq=False)
class DielectricScatter:
    """Directions and Fresnel weight at a dielectric interface.

    Attributes:
        reflected: Mirror reflection direction.
        refracted: Refracted direction, or None on total internal reflection.
        reflectance: Fraction of light reflected (1.0 on total internal
            reflection); the rest is transmitted.
    """

    reflected: Vec3
    refracted: Vec3 | None
    reflectance: float


def refraction_ratio(ior: float, front_face: bool) -> float:
    """n_incident / n_transmitted for a ray entering (front face) or leaving."""
    return 1.0 / ior if front_face else ior


def incident_cosine(incident_direction: Vec3, normal: Vec3) -> float:
    return min(-float(np.dot(incident_direction, normal)), 1.0)


def fresnel_reflectance(
    cos_theta: float, eta: float | npt.NDArray[np.float64]
) -> float | npt.NDArray[np.float64]:
    """Schlick reflectance, equal to 1 where total internal reflection occurs.

    Accepts a scalar ratio or an array of per-band ratios.

    Args:
        cos_theta: Cosine of the incident angle.
        eta: Ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        Reflectance in [0, 1], with the same shape as eta.
    """
    eta = np.asarray(eta, dtype=np.float64)
    sin_theta = np.sqrt(max(0.0, 1.0 - cos_theta * cos_theta))
    r0 = ((1.0 - eta) / (1.0 + eta)) ** 2
    schlick = r0 + (1.0 - r0) * (1.0 - cos_theta) ** 5
    result = np.where(eta * sin_theta > 1.0, 1.0, schlick)
    if result.ndim == 0:
        return float(result)
    return result


def scatter_dielectric(
    incident_direction: Vec3, normal: Vec3, front_face: bool, ior: float
) -> DielectricScatter:
    """Compute reflection and refraction at a dielectric surface.

    Args:
        incident_direction: The incoming ray direction (normalized).
        normal: The surface normal facing the incoming ray.
        front_face: True if the ray hits the outside of the surface.
        ior: Index of refraction of the material for this wavelength.

    Returns:
        The reflected and refracted directions with the Fresnel reflectance.
    """
    eta = refraction_ratio(ior, front_face)
    cos_theta = incident_cosine(incident_direction, normal)
    reflected = reflect(incident_direction, normal)
    refracted = refract(incident_direction, normal, eta)
    if refracted is None:
        return DielectricScatter(reflected, None, 1.0)
    return DielectricScatter(reflected, refracted, fresnel_reflectance(cos_theta, eta))
