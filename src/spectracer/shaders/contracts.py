"""Shader stage contracts.

The pipeline is made of five fixed roles, each a plain callable:

- Intersection: ``(ray, scene_object) -> HitRecord | None``
- Any-hit: ``(record, ray) -> AnyHitDecision``
- Hit: ``(record, ray, depth, context) -> Spectrum``
- Miss: ``(ray, context) -> Spectrum``
- Ray generation: per-pixel entry point that owns the recursive
  ``trace_ray`` used by hit shaders for secondary rays

The acceleration structure orchestrates intersection and any-hit and then
dispatches the outcome to hit or miss. A ``ShaderTable`` bundles one
implementation of each stage; any stage can be swapped independently.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import TYPE_CHECKING, Protocol

import numpy as np

from spectracer.core.ray import Ray, Vec3
from spectracer.core.spectrum import SpectralGrid, Spectrum
from spectracer.materials.material import Material

if TYPE_CHECKING:
    from spectracer.scene.intersection import AccelerationStructure
    from spectracer.scene.scene import Scene, SceneObject


# =============================================================================
# Records and outcomes
# =============================================================================


@dataclass(frozen=True, eq=False)
class HitRecord:
    """A candidate or accepted ray-object intersection in world space.

    Attributes:
        t: Distance along the ray.
        point: World-space hit point.
        normal: Unit world-space normal facing the incoming ray.
        front_face: True if the ray hit the outside of the surface.
        object_id: Index of the hit object in the scene.
        material: Material of the hit object.
    """

    t: float
    point: Vec3
    normal: Vec3
    front_face: bool
    object_id: int
    material: Material


@dataclass(frozen=True, eq=False)
class Hit:
    """Outcome of a query that found an accepted intersection."""

    record: HitRecord


class Miss:
    """Outcome of a query that found nothing."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "MISS"


MISS = Miss()

TraceOutcome = Hit | Miss


class AnyHitDecision(IntEnum):
    """What to do with a candidate intersection."""

    ACCEPT = 0
    REJECT = 1
    ACCEPT_AND_STOP = 2


# =============================================================================
# Shading context
# =============================================================================

Tracer = Callable[[Ray, int, "ShadingContext"], Spectrum]


@dataclass(frozen=True, eq=False)
class ShadingContext:
    """Per-path state handed to hit and miss shaders.

    A context is created per primary sample; secondary rays derive a new
    one with ``spawn``. Nothing in it is shared between pixels.

    Attributes:
        scene: The scene being rendered.
        acceleration: Acceleration structure for shadow queries.
        tracer: Recursive trace entry point of the ray generation shader.
        rng: Random generator of the current pixel sample.
        band: Index of the wavelength band this path is locked to, or None
            while the path still carries the whole spectrum.
        throughput: Peak weight of the path so far.
    """

    scene: Scene
    acceleration: AccelerationStructure
    tracer: Tracer
    rng: np.random.Generator
    band: int | None = None
    throughput: float = 1.0

    @property
    def grid(self) -> SpectralGrid:
        return self.scene.grid

    def trace(self, ray: Ray, depth: int) -> Spectrum:
        """Trace a secondary ray with the given remaining depth."""
        return self.tracer(ray, depth, self)

    def spawn(self, *, band: int | None = None, throughput: float | None = None) -> ShadingContext:
        """Context for a child path, optionally locked to a wavelength band."""
        return replace(
            self,
            band=self.band if band is None else band,
            throughput=self.throughput if throughput is None else throughput,
        )


# =============================================================================
# Stage protocols
# =============================================================================


class IntersectionShader(Protocol):
    def __call__(self, ray: Ray, scene_object: SceneObject) -> HitRecord | None: ...


class AnyHitShader(Protocol):
    def __call__(self, record: HitRecord, ray: Ray) -> AnyHitDecision: ...


class HitShader(Protocol):
    def __call__(
        self, record: HitRecord, ray: Ray, depth: int, context: ShadingContext
    ) -> Spectrum: ...


class MissShader(Protocol):
    def __call__(self, ray: Ray, context: ShadingContext | None) -> Spectrum: ...
