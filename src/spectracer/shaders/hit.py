"""Hit shader: local shading and secondary rays.

Outgoing light at an accepted hit is

    emission
    + direct lighting from point lights (diffuse surfaces)
    + reflected light (metals, dielectrics)
    + refracted light (dielectrics)

Secondary rays go back through the ray generation shader's trace entry
point with one less bounce of remaining depth. At depth 0 no secondary rays
are spawned, so the path contributes nothing beyond emission and direct
light.

Dispersion: a dielectric with a wavelength-dependent index of refraction
splits an unlocked path into one refracted ray per wavelength band. Each of
those rays is locked to its band, uses that band's index for every later
refraction and is never split again; only its band's sample is kept.
"""

from __future__ import annotations

import logging

import numpy as np

from spectracer.core.ray import Ray, Vec3, offset_origin, reflect, refract
from spectracer.core.spectrum import Spectrum
from spectracer.materials.dielectric import (
    fresnel_reflectance,
    incident_cosine,
    refraction_ratio,
    scatter_dielectric,
)
from spectracer.materials.lambertian import direct_lighting
from spectracer.materials.material import Material, MaterialKind
from spectracer.materials.metal import scatter_metal
from spectracer.shaders.contracts import HitRecord, ShadingContext

logger = logging.getLogger(__name__)

# Secondary rays whose path weight falls below this are not traced
MIN_CONTRIBUTION = 1e-4


def trace_secondary(
    point: Vec3,
    normal: Vec3,
    direction: Vec3,
    weight: Spectrum,
    depth: int,
    context: ShadingContext,
) -> Spectrum:
    """Trace a weighted secondary ray leaving a surface.

    Args:
        point: Surface point the ray starts from.
        normal: Surface normal facing the incoming ray.
        direction: Direction of the new ray.
        weight: Fraction of the returned light that reaches the parent path.
        depth: Remaining depth for the new ray.
        context: Context of the parent path.

    Returns:
        The weighted incoming light, or zero if the ray is not worth tracing.
    """
    throughput = context.throughput * weight.max()
    if throughput < MIN_CONTRIBUTION:
        return Spectrum.zeros(context.grid)
    ray = Ray(offset_origin(point, normal, direction), direction)
    return context.spawn(throughput=throughput).trace(ray, depth) * weight


def shade_hit(record: HitRecord, ray: Ray, depth: int, context: ShadingContext) -> Spectrum:
    """Default hit shader dispatching on the material kind."""
    material = record.material
    result = material.emission

    if material.kind == MaterialKind.DIFFUSE:
        return result + direct_lighting(
            record.point,
            record.normal,
            material.reflectance,
            context.scene.lights,
            context.acceleration.occluded,
        )

    if depth <= 0:
        return result

    if material.kind == MaterialKind.METAL:
        direction = scatter_metal(
            ray.direction, record.normal, material.roughness, context.rng
        )
        if direction is None:
            return result
        return result + trace_secondary(
            record.point, record.normal, direction, material.reflectance, depth - 1, context
        )

    if material.kind == MaterialKind.DIELECTRIC:
        if material.ior.is_dispersive and context.band is None:
            return result + _shade_dispersive(record, ray, depth, context)
        return result + _shade_dielectric(record, ray, depth, context)

    logger.debug("Unknown material kind %r, treating as black", material.kind)
    return result


def _band_ior(material: Material, context: ShadingContext) -> float:
    grid = context.grid
    if context.band is None:
        # Non-dispersive: the same index everywhere
        return material.ior.at(0.5 * (grid.lower_nm + grid.upper_nm))
    return material.ior.at(float(grid.wavelengths[context.band]))


def _shade_dielectric(
    record: HitRecord, ray: Ray, depth: int, context: ShadingContext
) -> Spectrum:
    """Fresnel-weighted reflection plus refraction with a single index."""
    material = record.material
    scatter = scatter_dielectric(
        ray.direction, record.normal, record.front_face, _band_ior(material, context)
    )
    light = trace_secondary(
        record.point,
        record.normal,
        scatter.reflected,
        material.reflectance * scatter.reflectance,
        depth - 1,
        context,
    )
    if scatter.refracted is not None and scatter.reflectance < 1.0:
        light = light + trace_secondary(
            record.point,
            record.normal,
            scatter.refracted,
            material.transmittance * (1.0 - scatter.reflectance),
            depth - 1,
            context,
        )
    return light


def _shade_dispersive(
    record: HitRecord, ray: Ray, depth: int, context: ShadingContext
) -> Spectrum:
    """Split refraction into one band-locked ray per wavelength band."""
    material = record.material
    grid = context.grid
    iors = material.ior.values(grid.wavelengths)
    etas = np.array([refraction_ratio(float(n), record.front_face) for n in iors])
    reflectance = np.asarray(
        fresnel_reflectance(incident_cosine(ray.direction, record.normal), etas)
    )

    # Reflection does not depend on the index, so one ray serves every band
    light = trace_secondary(
        record.point,
        record.normal,
        reflect(ray.direction, record.normal),
        material.reflectance * Spectrum.from_values(grid, reflectance),
        depth - 1,
        context,
    )

    refracted_light = np.zeros(grid.samples, dtype=np.float64)
    transmittance = material.transmittance.values
    for band in range(grid.samples):
        weight = float(transmittance[band] * (1.0 - reflectance[band]))
        throughput = context.throughput * weight
        if throughput < MIN_CONTRIBUTION:
            continue
        direction = refract(ray.direction, record.normal, float(etas[band]))
        if direction is None:
            continue
        band_ray = Ray(offset_origin(record.point, record.normal, direction), direction)
        band_context = context.spawn(band=band, throughput=throughput)
        refracted_light[band] = band_context.trace(band_ray, depth - 1)[band] * weight

    return light + Spectrum.from_values(grid, refracted_light)
