"""Immutable scene description consumed by the renderer.

A Scene is a finished snapshot: objects, point lights, camera, spectral grid
and background. It is handed to the render dispatcher and shared read-only by
every worker thread. Use ``SceneManager`` to assemble one incrementally.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from spectracer.camera.pinhole import PinholeCamera
from spectracer.core.errors import ConfigurationError
from spectracer.core.ray import Vec3, as_vec3
from spectracer.core.spectrum import SpectralGrid, Spectrum
from spectracer.geometry.aabb import Aabb
from spectracer.geometry.shape import Shape
from spectracer.geometry.transform import IDENTITY, Transform
from spectracer.materials.material import Material
from spectracer.shaders.miss import ConstantBackground

if TYPE_CHECKING:
    from spectracer.shaders.contracts import MissShader


@dataclass(frozen=True, eq=False)
class SceneObject:
    """A shape placed in the world with a material.

    Attributes:
        shape: Geometry in object space.
        material: Surface response.
        transform: Placement of the shape in the world.
        object_id: Index of the object in its scene (assigned by the scene).
        name: Optional label.
        world_bounds: World-space bounding box, or None if unbounded.
    """

    shape: Shape
    material: Material
    transform: Transform = IDENTITY
    object_id: int = -1
    name: str = ""
    world_bounds: Aabb | None = field(init=False, repr=False)

    def __post_init__(self) -> None:
        local = self.shape.bounds()
        bounds = None if local is None else self.transform.bounds_to_world(local).padded()
        object.__setattr__(self, "world_bounds", bounds)

    @property
    def is_bounded(self) -> bool:
        return self.world_bounds is not None


@dataclass(frozen=True, eq=False)
class PointLight:
    """An infinitely small light emitting ``emission`` in all directions.

    Attributes:
        position: Light position in world space.
        emission: Emitted spectrum; irradiance falls off with distance squared.
        name: Optional label.
    """

    position: Vec3
    emission: Spectrum
    name: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_vec3(self.position))


@dataclass(frozen=True, eq=False)
class Scene:
    """Finalized scene snapshot.

    Attributes:
        objects: Scene objects; their order decides ties between hits at
            the same distance (earlier objects win).
        lights: Point lights.
        camera: The camera rays are generated from.
        grid: Spectral grid shared by every spectrum in the scene.
        background: Miss shader evaluated for rays that hit nothing.

    Raises:
        ConfigurationError: If any spectrum uses a different grid.
    """

    objects: tuple[SceneObject, ...] = ()
    lights: tuple[PointLight, ...] = ()
    camera: PinholeCamera = field(default_factory=PinholeCamera)
    grid: SpectralGrid = field(default_factory=SpectralGrid)
    background: MissShader | None = None

    def __post_init__(self) -> None:
        objects = tuple(
            obj if obj.object_id == index else replace(obj, object_id=index)
            for index, obj in enumerate(self.objects)
        )
        object.__setattr__(self, "objects", objects)
        object.__setattr__(self, "lights", tuple(self.lights))
        if self.background is None:
            object.__setattr__(self, "background", ConstantBackground(Spectrum.zeros(self.grid)))
        self._check_grids()

    def _check_grids(self) -> None:
        for obj in self.objects:
            for spectrum in obj.material.spectra():
                if spectrum.grid != self.grid:
                    raise ConfigurationError(
                        f"Material of object {obj.object_id} ({obj.name or obj.material.name}) "
                        f"uses a different spectral grid than the scene"
                    )
        for light in self.lights:
            if light.emission.grid != self.grid:
                raise ConfigurationError(
                    f"Light {light.name!r} uses a different spectral grid than the scene"
                )
        background_spectra = getattr(self.background, "spectra", None)
        if background_spectra is not None:
            for spectrum in background_spectra():
                if spectrum.grid != self.grid:
                    raise ConfigurationError(
                        "Background uses a different spectral grid than the scene"
                    )

    @property
    def is_empty(self) -> bool:
        return not self.objects

    def validate_for_render(self) -> None:
        """Checks performed by the dispatcher before any rendering work.

        Raises:
            ConfigurationError: If the scene has no objects or the camera is
                invalid.
        """
        if self.is_empty:
            raise ConfigurationError("Cannot render an empty scene")
        self.camera.validate()

    def with_camera(self, camera: PinholeCamera) -> Scene:
        return replace(self, camera=camera)
