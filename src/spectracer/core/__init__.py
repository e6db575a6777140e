"""Core rendering module.

Components:
    ray: Ray data structure and vector utilities
    spectrum: Sampled spectra on a shared wavelength grid
    colorimetry: CIE colour matching and spectrum to RGB conversion
    config: Render configuration
    errors: Exception types
    image: Row-partitioned image buffer
    dispatcher: Concurrent per-row rendering
    progressive: Frame accumulation on top of the dispatcher
"""

from .colorimetry import spectrum_to_xyz, to_rgb, wavelength_to_xyz
from .config import RenderConfig, default_worker_count
from .errors import ConfigurationError, RenderError, SpectracerError
from .image import ImageBuffer
from .ray import Ray, ray_at, vec3
from .spectrum import SpectralGrid, Spectrum, black_body_radiation

# Note: dispatcher and progressive are NOT imported here to avoid circular imports.
# Import directly from spectracer.core.dispatcher or spectracer.core.progressive.

__all__ = [
    "Ray",
    "ray_at",
    "vec3",
    "SpectralGrid",
    "Spectrum",
    "black_body_radiation",
    "to_rgb",
    "spectrum_to_xyz",
    "wavelength_to_xyz",
    "RenderConfig",
    "default_worker_count",
    "ImageBuffer",
    "SpectracerError",
    "ConfigurationError",
    "RenderError",
]
