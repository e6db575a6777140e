"""Shader pipeline stages.

Components:
    contracts: HitRecord, outcomes, stage protocols and ShadingContext
    intersection: Ray against a single scene object
    any_hit: Accept/reject filters (alpha cutout, shadow early-out)
    hit: Material shading and secondary rays
    miss: Backgrounds
    table: ShaderTable bundling one implementation per stage
    raygen: Per-pixel entry point and recursive trace
"""

from .any_hit import accept_opaque, first_occluder
from .contracts import MISS, AnyHitDecision, Hit, HitRecord, Miss, ShadingContext
from .hit import MIN_CONTRIBUTION, shade_hit
from .intersection import intersect_object
from .miss import ConstantBackground, SkyGradient
from .table import DEFAULT_SHADERS, ShaderTable

# Note: raygen is NOT imported here to avoid circular imports with the scene
# package. Use: from spectracer.shaders.raygen import RayGenerationShader

__all__ = [
    "HitRecord",
    "Hit",
    "Miss",
    "MISS",
    "AnyHitDecision",
    "ShadingContext",
    "intersect_object",
    "accept_opaque",
    "first_occluder",
    "shade_hit",
    "MIN_CONTRIBUTION",
    "ConstantBackground",
    "SkyGradient",
    "ShaderTable",
    "DEFAULT_SHADERS",
]
