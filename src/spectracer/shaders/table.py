"""The set of shader stages used by a render."""

from __future__ import annotations

from dataclasses import dataclass

from spectracer.shaders.any_hit import accept_opaque, first_occluder
from spectracer.shaders.contracts import AnyHitShader, HitShader, IntersectionShader, MissShader
from spectracer.shaders.hit import shade_hit
from spectracer.shaders.intersection import intersect_object


@dataclass(frozen=True)
class ShaderTable:
    """One implementation per shader stage.

    Attributes:
        intersection: Ray against a single scene object.
        any_hit: Candidate filter for closest-hit queries.
        shadow_any_hit: Candidate filter for shadow queries.
        hit: Shading of the nearest accepted hit.
        miss: Background; None uses the scene's background.
    """

    intersection: IntersectionShader = intersect_object
    any_hit: AnyHitShader = accept_opaque
    shadow_any_hit: AnyHitShader = first_occluder
    hit: HitShader = shade_hit
    miss: MissShader | None = None


DEFAULT_SHADERS = ShaderTable()
