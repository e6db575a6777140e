"""Scene builder coordinating materials, objects and lights.

SceneManager is the mutable side of scene construction. It keeps a material
registry addressed by integer ids, collects objects and lights, and produces
an immutable ``Scene`` with ``build()``. Everything it creates lives on one
spectral grid.

Example:
    >>> from spectracer.core.spectrum import Spectrum
    >>> from spectracer.scene.manager import SceneManager
    >>> manager = SceneManager()
    >>> grey = manager.add_diffuse_material(0.7)
    >>> glass = manager.add_dielectric_material(ior=1.5)
    >>> manager.add_sphere((0, 0, 1), 0.5, grey)
    >>> manager.add_sphere((1, 0, 1), 0.5, glass)
    >>> manager.add_point_light((0, 2, -1), Spectrum.sunlight(manager.grid, 1e-3))
    >>> scene = manager.build()
"""

from __future__ import annotations

import logging

from spectracer.camera.pinhole import PinholeCamera
from spectracer.core.ray import Vec3
from spectracer.core.spectrum import SpectralGrid, Spectrum
from spectracer.geometry.box import Box
from spectracer.geometry.plane import Plane
from spectracer.geometry.quad import Quad
from spectracer.geometry.shape import Shape
from spectracer.geometry.sphere import Sphere
from spectracer.geometry.transform import IDENTITY, Transform
from spectracer.materials.material import (
    IorCurve,
    Material,
    dielectric,
    diffuse,
    emissive,
    metal,
)
from spectracer.scene.scene import PointLight, Scene, SceneObject
from spectracer.shaders.contracts import MissShader

logger = logging.getLogger(__name__)

SpectrumLike = Spectrum | float


class SceneManager:
    """Mutable builder for an immutable Scene.

    Attributes:
        grid: Spectral grid shared by every spectrum of the scene.
        materials: Registered materials; the list index is the material id.
        objects: Objects added so far, in scene order.
        lights: Point lights added so far.
        camera: Camera used by ``build`` unless one is passed.
        background: Miss shader used by ``build`` unless one is passed.
    """

    def __init__(self, grid: SpectralGrid | None = None) -> None:
        self.grid = grid if grid is not None else SpectralGrid()
        self.materials: list[Material] = []
        self.objects: list[SceneObject] = []
        self.lights: list[PointLight] = []
        self.camera = PinholeCamera()
        self.background: MissShader | None = None

    def clear(self) -> None:
        """Remove all materials, objects and lights."""
        self.materials.clear()
        self.objects.clear()
        self.lights.clear()

    def spectrum(self, value: SpectrumLike) -> Spectrum:
        """Accept a Spectrum or a flat intensity and return a Spectrum."""
        if isinstance(value, Spectrum):
            return value
        return Spectrum.flat(self.grid, float(value))

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(self, material: Material) -> int:
        """Register a material and return its id.

        Raises:
            ValueError: If the material uses a different spectral grid.
        """
        if material.grid != self.grid:
            raise ValueError("Material uses a different spectral grid than the scene")
        self.materials.append(material)
        return len(self.materials) - 1

    def add_diffuse_material(
        self,
        reflectance: SpectrumLike,
        emission: Spectrum | None = None,
        alpha: float = 1.0,
        name: str = "",
    ) -> int:
        """Add a Lambertian material; reflectance is clamped to at most 1."""
        return self.add_material(
            diffuse(self.spectrum(reflectance), emission, alpha, name)
        )

    def add_metal_material(
        self, reflectance: SpectrumLike = 1.0, roughness: float = 0.0, name: str = ""
    ) -> int:
        """Add a metal material. Roughness 0 is a perfect mirror."""
        return self.add_material(metal(self.spectrum(reflectance), roughness, name))

    def add_dielectric_material(
        self,
        ior: IorCurve | float = 1.5,
        transmittance: Spectrum | None = None,
        name: str = "",
    ) -> int:
        """Add a glass-like material; a CauchyIor makes it dispersive."""
        return self.add_material(dielectric(self.grid, ior, transmittance, name))

    def add_emissive_material(self, emission: Spectrum, name: str = "") -> int:
        """Add a light-emitting, non-reflecting material."""
        return self.add_material(emissive(emission, name))

    def get_material(self, material_id: int) -> Material:
        """Look up a registered material.

        Raises:
            KeyError: If no material has this id.
        """
        if not 0 <= material_id < len(self.materials):
            raise KeyError(f"Unknown material id {material_id}")
        return self.materials[material_id]

    def get_material_count(self) -> int:
        return len(self.materials)

    # =========================================================================
    # Objects
    # =========================================================================

    def add_object(
        self,
        shape: Shape,
        material_id: int,
        transform: Transform | None = None,
        name: str = "",
    ) -> int:
        """Add any shape with a registered material; returns the object index."""
        scene_object = SceneObject(
            shape=shape,
            material=self.get_material(material_id),
            transform=transform if transform is not None else IDENTITY,
            object_id=len(self.objects),
            name=name,
        )
        self.objects.append(scene_object)
        return scene_object.object_id

    def add_sphere(self, center: Vec3, radius: float, material_id: int, name: str = "") -> int:
        return self.add_object(Sphere(center, radius), material_id, name=name)

    def add_plane(self, point: Vec3, normal: Vec3, material_id: int, name: str = "") -> int:
        return self.add_object(Plane(point, normal), material_id, name=name)

    def add_quad(self, q: Vec3, u: Vec3, v: Vec3, material_id: int, name: str = "") -> int:
        """Add the parallelogram with corners q, q+u, q+v and q+u+v."""
        return self.add_object(Quad(q, u, v), material_id, name=name)

    def add_box(
        self,
        center: Vec3,
        size: Vec3,
        material_id: int,
        rotation_deg: Vec3 | None = None,
        name: str = "",
    ) -> int:
        """Add a box given its center and edge lengths, optionally rotated.

        A rotated box is an axis-aligned box around the origin placed with a
        Transform, so it rotates about its own center.
        """
        if rotation_deg is None:
            return self.add_object(Box.from_center(center, size), material_id, name=name)
        transform = Transform(translation=center, rotation_deg=rotation_deg)
        return self.add_object(
            Box.from_center((0.0, 0.0, 0.0), size), material_id, transform, name
        )

    def get_object_count(self) -> int:
        return len(self.objects)

    # =========================================================================
    # Lights, camera and background
    # =========================================================================

    def add_point_light(self, position: Vec3, emission: Spectrum, name: str = "") -> int:
        """Add a point light; returns the light index.

        Raises:
            ValueError: If the emission uses a different spectral grid.
        """
        if emission.grid != self.grid:
            raise ValueError("Light emission uses a different spectral grid than the scene")
        self.lights.append(PointLight(position, emission, name))
        return len(self.lights) - 1

    def set_camera(self, camera: PinholeCamera) -> None:
        self.camera = camera

    def set_background(self, background: MissShader) -> None:
        self.background = background

    def build(
        self,
        camera: PinholeCamera | None = None,
        background: MissShader | None = None,
    ) -> Scene:
        """Freeze the current state into an immutable Scene.

        Later changes to the manager do not affect scenes already built.

        Raises:
            ConfigurationError: If a spectrum does not match the scene grid.
        """
        scene = Scene(
            objects=tuple(self.objects),
            lights=tuple(self.lights),
            camera=camera if camera is not None else self.camera,
            grid=self.grid,
            background=background if background is not None else self.background,
        )
        logger.debug(
            "Built scene with %d objects, %d lights, %d materials",
            len(scene.objects),
            len(scene.lights),
            len(self.materials),
        )
        return scene
