"""Ready-made scenes.

- ``create_cornell_box_scene``: a closed box with a red left wall, a green
  right wall, grey floor, ceiling and back wall, two rotated grey blocks and
  a sunlight-coloured point light under the ceiling.
- ``create_default_scene``: a tall mirror, two grey spheres and a floor, lit
  by a close light and a distant sun.
- ``create_prism_scene``: a strongly dispersive glass sphere in front of a
  narrow bright strip, which splits into a rainbow.

The box scene uses a normalized scale: its interior spans [-1, 1] on every
axis and the camera looks along +z from z = -2, so +x is on the left of
the image.

Example:
    >>> from spectracer.scene.presets import create_cornell_box_scene
    >>> scene = create_cornell_box_scene()
    >>> len(scene.objects)
    7
"""

from __future__ import annotations

from dataclasses import dataclass

from spectracer.camera.pinhole import PinholeCamera
from spectracer.core.spectrum import SpectralGrid, Spectrum
from spectracer.materials.material import CauchyIor
from spectracer.scene.manager import SceneManager
from spectracer.scene.scene import Scene
from spectracer.shaders.miss import ConstantBackground

# =============================================================================
# Cornell Box Parameters
# =============================================================================


@dataclass
class CornellBoxParams:
    """Parameters for configuring a Cornell box scene.

    Attributes:
        light_multiplier: Scale of the 6500 K black-body light spectrum.
        light_position: Position of the point light.
        wall_reflectance: Reflectance of the grey walls and blocks.
        colored_wall_reflectance: Peak reflectance of the red and green walls.
    """

    light_multiplier: float = 1e-4
    light_position: tuple[float, float, float] = (0.0, 0.9, 0.0)
    wall_reflectance: float = 0.7
    colored_wall_reflectance: float = 1.0


DEFAULT_CAMERA = PinholeCamera(
    lookfrom=(0.0, 0.0, -2.0),
    lookat=(0.0, 0.0, 0.0),
    vup=(0.0, 1.0, 0.0),
    vfov=60.0,
)

# Walls are 2-unit cubes placed around the [-1, 1] interior
WALL_SIZE = (2.0, 2.0, 2.0)


def create_cornell_box_scene(
    grid: SpectralGrid | None = None,
    params: CornellBoxParams | None = None,
) -> Scene:
    """Create a Cornell box scene.

    Args:
        grid: Spectral grid for all spectra; the default grid if None.
        params: Light and wall parameters; defaults if None.

    Returns:
        The finished scene.
    """
    if params is None:
        params = CornellBoxParams()
    manager = SceneManager(grid)
    grid = manager.grid

    grey = manager.add_diffuse_material(params.wall_reflectance, name="Reflective grey")
    red = manager.add_diffuse_material(
        Spectrum.reflective_red(grid, params.colored_wall_reflectance), name="Reflective red"
    )
    green = manager.add_diffuse_material(
        Spectrum.reflective_green(grid, params.colored_wall_reflectance),
        name="Reflective green",
    )

    # =========================================================================
    # Walls
    # =========================================================================

    manager.add_box((0.0, 0.0, 2.0), WALL_SIZE, grey, name="Back wall")
    manager.add_box((0.0, 2.0, 0.0), WALL_SIZE, grey, name="Ceiling")
    manager.add_box((0.0, -2.0, 0.0), WALL_SIZE, grey, name="Floor")
    manager.add_box((2.0, 0.0, 0.0), WALL_SIZE, red, name="Left wall")
    manager.add_box((-2.0, 0.0, 0.0), WALL_SIZE, green, name="Right wall")

    # =========================================================================
    # Blocks
    # =========================================================================

    manager.add_box(
        (-0.5, -0.75, -0.5), (0.5, 0.5, 0.5), grey, rotation_deg=(0.0, 57.3, 0.0),
        name="Right front box",
    )
    manager.add_box(
        (0.5, -0.4, 0.5), (0.5, 1.2, 0.5), grey, rotation_deg=(0.0, -28.6, 0.0),
        name="Left back box",
    )

    manager.add_point_light(
        params.light_position,
        Spectrum.sunlight(grid, params.light_multiplier),
        name="Top light",
    )
    return manager.build(camera=DEFAULT_CAMERA)


def create_default_scene(grid: SpectralGrid | None = None) -> Scene:
    """A mirror, two spheres and a floor under a close light and a far sun."""
    manager = SceneManager(grid)
    grid = manager.grid

    white_mirror = manager.add_metal_material(1.0, name="White mirror")
    grey = manager.add_diffuse_material(0.7, name="Grey")

    manager.add_box((1.5, 0.0, 1.0), (0.25, 3.0, 30.0), white_mirror, name="Left mirror")
    manager.add_sphere((0.0, 0.0, 1.0), 0.5, grey, name="Left sphere")
    manager.add_sphere((-1.0, 0.0, 1.0), 0.5, grey, name="Right sphere")
    manager.add_box((0.0, -1.0, 0.0), (50.0, 0.1, 50.0), grey, name="Floor")

    manager.add_point_light((0.0, 2.0, -1.0), Spectrum.sunlight(grid, 1e-3), "Close light")
    manager.add_point_light((0.0, 1000.0, 0.0), Spectrum.sunlight(grid, 100.0), "Far away sun")
    return manager.build(camera=DEFAULT_CAMERA)


def create_prism_scene(
    grid: SpectralGrid | None = None,
    ior: CauchyIor | None = None,
) -> Scene:
    """A dispersive glass sphere in front of a narrow bright strip.

    Seen through the sphere the strip is refracted by a different amount
    for every wavelength and fans out into coloured bands.

    Args:
        grid: Spectral grid for all spectra; the default grid if None.
        ior: Dispersion curve of the glass. Defaults to an exaggerated
            Cauchy glass so the effect is visible at low resolution.
    """
    manager = SceneManager(grid)
    grid = manager.grid
    if ior is None:
        ior = CauchyIor(1.3, 0.12)

    glass = manager.add_dielectric_material(ior, name="Dispersive glass")
    strip = manager.add_emissive_material(Spectrum.flat(grid, 2.0), name="Light strip")
    dark = manager.add_diffuse_material(0.05, name="Backdrop")

    manager.add_sphere((0.0, 0.0, 4.0), 1.0, glass, name="Glass sphere")
    manager.add_quad((-1.4, -3.0, 9.0), (0.15, 0.0, 0.0), (0.0, 6.0, 0.0), strip, "Strip")
    manager.add_plane((0.0, 0.0, 10.0), (0.0, 0.0, -1.0), dark, name="Backdrop")

    camera = PinholeCamera(lookfrom=(0.0, 0.0, 0.0), lookat=(0.0, 0.0, 4.0), vfov=30.0)
    return manager.build(
        camera=camera, background=ConstantBackground(Spectrum.zeros(grid))
    )
