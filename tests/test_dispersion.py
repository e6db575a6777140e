"""Tests for wavelength-dependent refraction.

A glass sphere sits in front of the camera and a narrow bright slit lies in
the background, off to one side. Each pixel row crosses the sphere; light
from the slit reaches a pixel only if that pixel's refracted path leaves the
sphere towards the slit. With a dispersive glass the path depends on the
wavelength, so red and blue light from the slit arrive at different pixels.

Tests cover:
- Dispersive glass separating red and blue
- Non-dispersive glass keeping them together
- Band-locked paths never splitting again
"""

import math

import numpy as np

SLIT_ANGLE = -0.25
SLIT_WIDTH = 0.01
WIDTH = 64
HEIGHT = 3


class SlitBackground:
    """A vertical slit of white light at a fixed horizontal angle."""

    def __init__(self, grid):
        from spectracer.core.spectrum import Spectrum

        self.white = Spectrum.flat(grid, 0.5)
        self.black = Spectrum.zeros(grid)

    def __call__(self, ray, context=None):
        direction = ray.direction
        if direction[2] <= 0.0:
            return self.black
        angle = math.atan2(direction[0], direction[2])
        weight = math.exp(-0.5 * ((angle - SLIT_ANGLE) / SLIT_WIDTH) ** 2)
        return self.white * weight

    def spectra(self):
        return (self.white,)


def _render_row(ior):
    from spectracer.camera.pinhole import PinholeCamera
    from spectracer.core.config import RenderConfig
    from spectracer.core.dispatcher import render
    from spectracer.core.spectrum import SpectralGrid
    from spectracer.scene.manager import SceneManager

    grid = SpectralGrid(samples=16)
    manager = SceneManager(grid)
    glass = manager.add_dielectric_material(ior, name="Glass")
    manager.add_sphere((0.0, 0.0, 4.0), 1.0, glass)

    # Horizontal half-angle of about 11 degrees; every pixel sees the sphere
    vfov = math.degrees(2.0 * math.atan(0.2 * HEIGHT / WIDTH))
    camera = PinholeCamera(lookfrom=(0.0, 0.0, 0.0), lookat=(0.0, 0.0, 1.0), vfov=vfov)
    scene = manager.build(camera=camera, background=SlitBackground(grid))

    config = RenderConfig(
        width=WIDTH, height=HEIGHT, workers=4, max_depth=3, jitter=False, samples_per_pixel=1
    )
    return render(scene, config).image.pixels[1]


class TestDispersion:
    """Tests for spectral splitting at dispersive surfaces."""

    def test_dispersive_glass_separates_colors(self):
        """Test red and blue light from the slit land on different pixels."""
        from spectracer.materials.material import CauchyIor

        row = _render_row(CauchyIor(1.3, 0.12))
        assert row[:, 0].max() > 0.0
        assert row[:, 2].max() > 0.0
        assert abs(int(np.argmax(row[:, 0])) - int(np.argmax(row[:, 2]))) > 1

    def test_constant_glass_keeps_colors_together(self):
        """Test without dispersion every wavelength takes the same path."""
        from spectracer.materials.material import CauchyIor

        row = _render_row(CauchyIor(1.5, 0.0))
        assert row[:, 0].max() > 0.0
        assert int(np.argmax(row[:, 0])) == int(np.argmax(row[:, 2]))

    def test_band_locked_path_keeps_one_band(self, grid):
        """Test a path locked to a band does not split again at a dispersive surface."""
        from spectracer.core.config import RenderConfig
        from spectracer.core.ray import Ray
        from spectracer.core.spectrum import Spectrum
        from spectracer.materials.material import CauchyIor
        from spectracer.scene.manager import SceneManager
        from spectracer.shaders.hit import shade_hit
        from spectracer.shaders.miss import ConstantBackground
        from spectracer.shaders.raygen import RayGenerationShader
        from spectracer.shaders.table import ShaderTable

        manager = SceneManager(grid)
        glass = manager.add_dielectric_material(CauchyIor(1.3, 0.12))
        manager.add_sphere((0.0, 0.0, -4.0), 1.0, glass)
        scene = manager.build(background=ConstantBackground(Spectrum.flat(grid, 1.0)))

        bands = []

        def recording(record, ray, depth, context):
            bands.append(context.band)
            return shade_hit(record, ray, depth, context)

        config = RenderConfig(width=4, height=4, workers=1, max_depth=4)
        raygen = RayGenerationShader(scene, config, ShaderTable(hit=recording))
        ray = Ray((0.0, 0.0, 0.0), (0.05, 0.0, -1.0))

        free = raygen.trace_ray(ray)
        assert free.is_finite()
        assert np.all(free.values > 0.5)
        assert bands[0] is None
        assert set(range(grid.samples)) <= set(bands)

        bands.clear()
        locked = raygen.trace_ray(ray, band=5)
        assert locked[5] > 0.5
        assert set(bands) == {5}
