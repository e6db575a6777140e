"""Any-hit shaders: accept or reject candidate intersections.

Any-hit shaders only look at the record; they never change its geometry.
"""

from __future__ import annotations

from spectracer.core.ray import Ray
from spectracer.shaders.contracts import AnyHitDecision, HitRecord


def accept_opaque(record: HitRecord, ray: Ray) -> AnyHitDecision:
    """Default: accept every surface except alpha cutouts."""
    if record.material.is_cutout:
        return AnyHitDecision.REJECT
    return AnyHitDecision.ACCEPT


def first_occluder(record: HitRecord, ray: Ray) -> AnyHitDecision:
    """Shadow rays: any non-cutout surface ends the search."""
    if record.material.is_cutout:
        return AnyHitDecision.REJECT
    return AnyHitDecision.ACCEPT_AND_STOP
