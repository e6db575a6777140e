"""Scene-level ray queries: the acceleration structure.

The acceleration structure resolves a ray against every object of a scene
and dispatches the outcome to the hit or miss shader. Bounded objects are
pruned with their world-space bounding boxes first; unbounded objects (such
as planes) are always tested. Pruning never changes the result.

Example:
    >>> from spectracer.scene.intersection import AccelerationStructure
    >>> accel = AccelerationStructure(scene)
    >>> outcome = accel.query(ray)
    >>> blocked = accel.occluded(shadow_ray)
"""

from __future__ import annotations

from collections.abc import Iterator

from spectracer.core.ray import Ray
from spectracer.core.spectrum import Spectrum
from spectracer.scene.scene import Scene, SceneObject
from spectracer.shaders.contracts import (
    MISS,
    AnyHitDecision,
    AnyHitShader,
    Hit,
    HitRecord,
    MissShader,
    ShadingContext,
    TraceOutcome,
)
from spectracer.shaders.table import DEFAULT_SHADERS, ShaderTable


class AccelerationStructure:
    """Nearest-hit and occlusion queries over a scene.

    Attributes:
        scene: The scene being queried.
        shaders: Shader stages used for intersection, any-hit, hit and miss.
    """

    def __init__(self, scene: Scene, shaders: ShaderTable = DEFAULT_SHADERS) -> None:
        self.scene = scene
        self.shaders = shaders

    @property
    def miss_shader(self) -> MissShader:
        return self.shaders.miss if self.shaders.miss is not None else self.scene.background

    def candidates(self, ray: Ray) -> Iterator[SceneObject]:
        """Objects the ray may hit, in scene order."""
        for obj in self.scene.objects:
            if obj.world_bounds is None or obj.world_bounds.hit(ray):
                yield obj

    def query(self, ray: Ray, any_hit: AnyHitShader | None = None) -> TraceOutcome:
        """Find the nearest accepted intersection.

        Each candidate is intersected within [t_min, closest t so far] and
        passed to the any-hit shader. A hit replaces the current one only if
        it is strictly closer, so among hits at equal distance the object
        that comes first in the scene wins. ACCEPT_AND_STOP ends the search
        immediately with that hit.

        Args:
            ray: The ray to resolve.
            any_hit: Candidate filter; defaults to the table's any-hit shader.

        Returns:
            ``Hit(record)`` or ``MISS``.
        """
        if any_hit is None:
            any_hit = self.shaders.any_hit
        intersect = self.shaders.intersection

        closest: HitRecord | None = None
        current = ray
        for obj in self.scene.objects:
            if obj.world_bounds is not None and not obj.world_bounds.hit(current):
                continue
            record = intersect(current, obj)
            if record is None:
                continue
            decision = any_hit(record, ray)
            if decision == AnyHitDecision.REJECT:
                continue
            if decision == AnyHitDecision.ACCEPT_AND_STOP:
                return Hit(record)
            if closest is None or record.t < closest.t:
                closest = record
                current = ray.with_range(ray.t_min, record.t)

        if closest is None:
            return MISS
        return Hit(closest)

    def occluded(self, ray: Ray) -> bool:
        """Whether anything blocks the ray within its range (shadow query)."""
        return isinstance(self.query(ray, self.shaders.shadow_any_hit), Hit)

    def trace(self, ray: Ray, depth: int, context: ShadingContext) -> Spectrum:
        """Resolve the ray and return the light produced by hit or miss."""
        outcome = self.query(ray)
        if isinstance(outcome, Hit):
            return self.shaders.hit(outcome.record, ray, depth, context)
        return self.miss_shader(ray, context)
