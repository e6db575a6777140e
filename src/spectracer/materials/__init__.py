"""Materials module.

Components:
    material: Material description, kinds and index of refraction curves
    lambertian: Direct lighting of diffuse surfaces
    metal: Specular reflection with optional roughness
    dielectric: Fresnel-weighted reflection and refraction
"""

from .dielectric import DielectricScatter, fresnel_reflectance, scatter_dielectric
from .lambertian import direct_lighting
from .material import (
    ALPHA_CUTOUT_THRESHOLD,
    CauchyIor,
    ConstantIor,
    Material,
    MaterialKind,
    dielectric,
    diffuse,
    emissive,
    metal,
    mirror,
)
from .metal import scatter_metal

__all__ = [
    "Material",
    "MaterialKind",
    "CauchyIor",
    "ConstantIor",
    "ALPHA_CUTOUT_THRESHOLD",
    "diffuse",
    "emissive",
    "metal",
    "mirror",
    "dielectric",
    "direct_lighting",
    "scatter_metal",
    "scatter_dielectric",
    "fresnel_reflectance",
    "DielectricScatter",
]
