"""Pytest configuration for spectracer tests.

Shared fixtures: a small spectral grid, a minimal single-sphere scene and a
render configuration small enough for unit tests.
"""

import pytest


@pytest.fixture
def grid():
    """A coarse spectral grid that keeps per-ray work small."""
    from spectracer.core.spectrum import SpectralGrid

    return SpectralGrid(samples=16)


@pytest.fixture
def small_config():
    """An 8x6 image, two workers, deterministic primary rays."""
    from spectracer.core.config import RenderConfig

    return RenderConfig(width=8, height=6, workers=2, max_depth=4, jitter=False)


@pytest.fixture
def sphere_scene(grid):
    """A grey sphere in front of the camera, lit from above and behind the camera."""
    from spectracer.camera.pinhole import PinholeCamera
    from spectracer.core.spectrum import Spectrum
    from spectracer.scene.manager import SceneManager
    from spectracer.shaders.miss import ConstantBackground

    manager = SceneManager(grid)
    grey = manager.add_diffuse_material(0.7, name="Grey")
    manager.add_sphere((0.0, 0.0, -3.0), 1.0, grey, name="Sphere")
    manager.add_point_light((0.0, 3.0, 0.0), Spectrum.sunlight(grid, 1e-3), "Light")
    return manager.build(
        camera=PinholeCamera(lookfrom=(0.0, 0.0, 0.0), lookat=(0.0, 0.0, -1.0), vfov=60.0),
        background=ConstantBackground(Spectrum.flat(grid, 0.2)),
    )
