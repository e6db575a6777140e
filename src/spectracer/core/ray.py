"""Ray data structure and vector utilities for CPU ray tracing.

This module provides the fundamental Ray dataclass and the vector helpers
used by every shader stage. Vectors are plain NumPy ``float64`` arrays of
shape ``(3,)``; rays are immutable values, so secondary rays are always
constructed anew rather than mutated.

Example:
    >>> from spectracer.core.ray import Ray, vec3, ray_at
    >>> ray = Ray(origin=vec3(0.0, 0.0, 0.0), direction=vec3(0.0, 0.0, -2.0))
    >>> ray.direction  # normalized on construction
    array([ 0.,  0., -1.])
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

Vec3 = npt.NDArray[np.float64]

# Default parametric range for rays
T_MIN = 1e-4
T_MAX = 1e10

# Offset used to push secondary ray origins off a surface
RAY_EPSILON = 1e-4

# Directions shorter than this are treated as degenerate
DEGENERATE_LENGTH = 1e-12


def vec3(x: float, y: float, z: float) -> Vec3:
    """Create a 3D vector."""
    return np.array((x, y, z), dtype=np.float64)


def as_vec3(value) -> Vec3:
    """Convert a 3-sequence (tuple, list or array) into a float64 vector.

    Raises:
        ValueError: If the value does not have exactly three components.
    """
    array = np.asarray(value, dtype=np.float64).reshape(-1)
    if array.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {array.shape}")
    return array.copy()


def _frozen(array: Vec3) -> Vec3:
    array.setflags(write=False)
    return array


@dataclass(frozen=True, eq=False)
class Ray:
    """A ray with an origin, a unit direction and a valid parametric range.

    The direction is normalized on construction. A zero-length (or
    non-finite) direction is stored as the zero vector and marks the ray as
    degenerate; intersection tests treat such rays as missing everything.

    Attributes:
        origin: The starting point of the ray.
        direction: Unit direction of travel (zero vector if degenerate).
        t_min: Smallest accepted parameter value.
        t_max: Largest accepted parameter value.
    """

    origin: Vec3
    direction: Vec3
    t_min: float = T_MIN
    t_max: float = T_MAX
    degenerate: bool = field(init=False, default=False)

    def __post_init__(self) -> None:
        origin = as_vec3(self.origin)
        direction = as_vec3(self.direction)
        norm = float(np.linalg.norm(direction))
        degenerate = (
            not math.isfinite(norm)
            or norm < DEGENERATE_LENGTH
            or not np.all(np.isfinite(origin))
        )
        if degenerate:
            direction = np.zeros(3, dtype=np.float64)
        else:
            direction = direction / norm
        object.__setattr__(self, "origin", _frozen(origin))
        object.__setattr__(self, "direction", _frozen(direction))
        object.__setattr__(self, "t_min", float(self.t_min))
        object.__setattr__(self, "t_max", float(self.t_max))
        object.__setattr__(self, "degenerate", degenerate)

    @property
    def has_valid_range(self) -> bool:
        """Whether ``t_min <= t_max`` and both bounds are numbers."""
        return self.t_min <= self.t_max

    def with_range(self, t_min: float, t_max: float) -> Ray:
        """Return a copy of this ray with a different parametric range."""
        return Ray(self.origin, self.direction, t_min, t_max)


def ray_at(ray: Ray, t: float) -> Vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


# =============================================================================
# Vector Utility Functions
# =============================================================================


def length(v: Vec3) -> float:
    """Compute the Euclidean length of a vector."""
    return float(np.linalg.norm(v))


def dot(a: Vec3, b: Vec3) -> float:
    """Compute the dot product of two vectors."""
    return float(np.dot(a, b))


def cross(a: Vec3, b: Vec3) -> Vec3:
    """Compute the cross product of two vectors."""
    return np.cross(a, b)


def normalize(v: Vec3) -> Vec3:
    """Normalize a vector to unit length.

    Returns:
        A unit vector in the same direction as v. If v is (nearly)
        zero-length, returns a zero vector.
    """
    norm = float(np.linalg.norm(v))
    if norm < DEGENERATE_LENGTH:
        return np.zeros(3, dtype=np.float64)
    return v / norm


def near_zero(v: Vec3, eps: float = 1e-8) -> bool:
    """Check if a vector is near zero in all components."""
    return bool(np.all(np.abs(v) < eps))


def are_linearly_dependent(a: Vec3, b: Vec3, eps: float = 1e-6) -> bool:
    """Check whether two vectors point along the same line.

    Used to reject camera setups whose up vector is parallel to the view
    direction (the cross product vanishes).
    """
    return near_zero(np.cross(a, b), eps)


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Reflect an incident vector about a normal.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * np.dot(incident, normal) * normal


def refract(incident: Vec3, normal: Vec3, eta: float) -> Vec3 | None:
    """Refract an incident vector through a surface using Snell's law.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The surface normal facing the incoming ray (normalized).
        eta: The ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted unit direction, or None on total internal reflection.
    """
    cos_i = min(-float(np.dot(incident, normal)), 1.0)
    sin2_t = eta * eta * (1.0 - cos_i * cos_i)
    if sin2_t > 1.0:
        return None
    cos_t = math.sqrt(1.0 - sin2_t)
    return normalize(eta * incident + (eta * cos_i - cos_t) * normal)


def schlick_fresnel(cosine: float, ref_idx: float) -> float:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ref_idx: Ratio of refractive indices.

    Returns:
        The approximate Fresnel reflectance coefficient in [0, 1].
    """
    r0 = ((1.0 - ref_idx) / (1.0 + ref_idx)) ** 2
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


def offset_origin(point: Vec3, normal: Vec3, direction: Vec3) -> Vec3:
    """Offset a secondary ray origin to avoid self-intersection.

    Pushes the point slightly along the normal on the side the new ray
    travels to (above the surface for reflection, below for refraction).
    """
    if np.dot(direction, normal) < 0.0:
        return point - RAY_EPSILON * normal
    return point + RAY_EPSILON * normal


def build_onb_from_normal(normal: Vec3) -> tuple[Vec3, Vec3, Vec3]:
    """Build an orthonormal basis whose z-axis is the given normal.

    Returns:
        A tuple (tangent, bitangent, normal).
    """
    a = vec3(0.0, 1.0, 0.0) if abs(normal[0]) > 0.9 else vec3(1.0, 0.0, 0.0)
    tangent = normalize(np.cross(a, normal))
    bitangent = np.cross(normal, tangent)
    return tangent, bitangent, normal


def random_in_unit_sphere(rng: np.random.Generator) -> Vec3:
    """Generate a random point inside the unit sphere by rejection sampling."""
    for _ in range(100):
        p = rng.uniform(-1.0, 1.0, size=3)
        if np.dot(p, p) < 1.0:
            return p
    return np.zeros(3, dtype=np.float64)
