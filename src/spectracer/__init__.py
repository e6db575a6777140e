"""spectracer: a spectral CPU ray tracer.

Rays carry a sampled light spectrum instead of an RGB triple; spectra become
display colours only when a pixel is written. This makes wavelength
dependent effects such as dispersion part of ordinary tracing.

Subpackages:
    core: Rays, spectra, colorimetry, configuration, image buffer,
        dispatcher and progressive renderer
    geometry: Shapes, bounding boxes and transforms
    materials: Material description and per-kind scattering
    shaders: Shader stage contracts and default implementations
    scene: Scene description, builder, acceleration structure and presets
    camera: Pinhole camera
    preview: PNG export
"""

__version__ = "0.1.0"
