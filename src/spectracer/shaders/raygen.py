"""Ray generation shader: the per-pixel entry point of the pipeline.

For a pixel (x, y) the shader generates ``samples_per_pixel`` primary rays,
traces each through the acceleration structure, averages the resulting
spectra and converts the average to RGB. ``trace_ray`` is the recursive
entry point used by hit shaders for secondary rays; the remaining depth is
passed explicitly and a ray with negative depth contributes nothing.

Every pixel sample gets its own random generator seeded with
``(seed, frame, y, x)``, so the result of a pixel does not depend on which
thread renders it or in which order.

Example:
    >>> from spectracer.core.config import RenderConfig
    >>> from spectracer.shaders.raygen import RayGenerationShader
    >>> raygen = RayGenerationShader(scene, RenderConfig(width=64, height=48))
    >>> r, g, b = raygen.render_pixel(32, 24)
"""

from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt

from spectracer.core.colorimetry import to_rgb
from spectracer.core.config import RenderConfig
from spectracer.core.ray import Ray
from spectracer.core.spectrum import Spectrum
from spectracer.scene.intersection import AccelerationStructure
from spectracer.scene.scene import Scene
from spectracer.shaders.contracts import ShadingContext
from spectracer.shaders.table import DEFAULT_SHADERS, ShaderTable

logger = logging.getLogger(__name__)


class RayGenerationShader:
    """Generates, traces and accumulates the primary rays of each pixel.

    The shader holds only read-only state (scene, configuration, camera
    frame), so one instance can serve all worker threads.

    Attributes:
        scene: The scene being rendered.
        config: The render configuration.
        shaders: Shader table used for every ray.
        acceleration: Acceleration structure over the scene.
        camera: Camera frame for the configured resolution.
    """

    def __init__(
        self,
        scene: Scene,
        config: RenderConfig,
        shaders: ShaderTable = DEFAULT_SHADERS,
    ) -> None:
        self.scene = scene
        self.config = config
        self.shaders = shaders
        self.acceleration = AccelerationStructure(scene, shaders)
        self.camera = scene.camera.frame(config.width, config.height)

    def pixel_rng(self, x: int, y: int, frame: int = 0) -> np.random.Generator:
        return np.random.default_rng((self.config.seed, frame, y, x))

    def primary_ray(self, x: int, y: int, rng: np.random.Generator) -> Ray:
        """Primary ray through pixel (x, y), jittered if enabled."""
        if self.config.jitter:
            dx, dy = rng.random(2)
        else:
            dx = dy = 0.5
        return self.camera.get_ray(x + dx, y + dy)

    def _context(self, rng: np.random.Generator, band: int | None = None) -> ShadingContext:
        return ShadingContext(
            scene=self.scene,
            acceleration=self.acceleration,
            tracer=self._trace,
            rng=rng,
            band=band,
        )

    def trace_ray(
        self,
        ray: Ray,
        depth: int | None = None,
        band: int | None = None,
        rng: np.random.Generator | None = None,
    ) -> Spectrum:
        """Trace a ray and return the light arriving along it.

        Args:
            ray: The ray to trace.
            depth: Remaining bounces; defaults to the configured max_depth.
            band: Wavelength band the ray is locked to, if any.
            rng: Random generator; a fresh seeded one if omitted.

        Returns:
            The incoming spectrum. Negative depth yields zero light.
        """
        if depth is None:
            depth = self.config.max_depth
        if rng is None:
            rng = np.random.default_rng(self.config.seed)
        return self._trace(ray, depth, self._context(rng, band))

    def _trace(self, ray: Ray, depth: int, context: ShadingContext) -> Spectrum:
        if depth < 0:
            return Spectrum.zeros(self.scene.grid)
        try:
            spectrum = self.acceleration.trace(ray, depth, context)
        except (ArithmeticError, ValueError) as exc:
            logger.debug("Ray failed (%s), using background", exc)
            return self.acceleration.miss_shader(ray, context)
        if not spectrum.is_finite():
            logger.debug("Non-finite spectrum for ray, using background")
            return self.acceleration.miss_shader(ray, context)
        return spectrum

    def shade_pixel(self, x: int, y: int, frame: int = 0) -> Spectrum:
        """Average spectrum of all samples of pixel (x, y)."""
        rng = self.pixel_rng(x, y, frame)
        context = self._context(rng)
        depth = self.config.max_depth
        total = Spectrum.zeros(self.scene.grid)
        for _ in range(self.config.samples_per_pixel):
            ray = self.primary_ray(x, y, rng)
            total = total + self._trace(ray, depth, context)
        return total / self.config.samples_per_pixel

    def render_pixel(self, x: int, y: int, frame: int = 0) -> tuple[float, float, float]:
        """Display RGB of pixel (x, y); the only spectral-to-RGB conversion."""
        return to_rgb(self.shade_pixel(x, y, frame), self.config.gamma)

    def render_row(self, y: int, frame: int = 0) -> npt.NDArray[np.float32]:
        """RGB values of every pixel in row y, shape (width, 3)."""
        row = np.empty((self.config.width, 3), dtype=np.float32)
        for x in range(self.config.width):
            row[x] = self.render_pixel(x, y, frame)
        return row
