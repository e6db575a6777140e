"""Pinhole camera model for perspective projection ray generation.

The camera supports:
- Look-at positioning (lookfrom, lookat, vup)
- Vertical field of view
- Arbitrary aspect ratios (taken from the render resolution)
- Sub-pixel sample positions for anti-aliasing

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from lookat toward lookfrom (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

A ``PinholeCamera`` is the user-facing description; combined with an image
resolution it yields an immutable ``CameraFrame`` that the ray generation
shader uses for every primary ray of a render.

Example:
    >>> from spectracer.camera.pinhole import PinholeCamera
    >>> camera = PinholeCamera(lookfrom=(0.0, 0.0, 3.0), lookat=(0.0, 0.0, 0.0))
    >>> frame = camera.frame(320, 240)
    >>> ray = frame.get_ray(160.0, 120.0)  # Ray through image center
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from spectracer.core.errors import ConfigurationError
from spectracer.core.ray import Ray, Vec3, are_linearly_dependent, as_vec3, normalize

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass(frozen=True)
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    A pinhole camera produces perfect perspective projection with no
    depth of field effects.

    Attributes:
        lookfrom: Camera position in world space (x, y, z).
        lookat: Point the camera is looking at in world space (x, y, z).
        vup: Up direction vector for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees (typically 40-90).
    """

    lookfrom: tuple[float, float, float] = (0.0, 0.0, 0.0)
    lookat: tuple[float, float, float] = (0.0, 0.0, -1.0)
    vup: tuple[float, float, float] = (0.0, 1.0, 0.0)
    vfov: float = 60.0

    def validate(self) -> None:
        """Reject camera setups that do not define an orientation.

        Raises:
            ConfigurationError: If the view direction is zero, the up vector
                is parallel to it, or the field of view is out of range.
        """
        view = as_vec3(self.lookat) - as_vec3(self.lookfrom)
        if not np.all(np.isfinite(view)) or float(np.linalg.norm(view)) < 1e-12:
            raise ConfigurationError("Camera lookfrom and lookat must be distinct points")
        if are_linearly_dependent(normalize(view), normalize(as_vec3(self.vup))):
            raise ConfigurationError(
                "Camera up vector must not be parallel to the view direction"
            )
        if not 0.0 < self.vfov < 180.0:
            raise ConfigurationError(f"Field of view must be in (0, 180), got {self.vfov}")

    def frame(self, width: int, height: int) -> CameraFrame:
        """Compute the camera basis and viewport for an image resolution.

        The viewport is a virtual image plane at unit distance from the
        camera. Ray directions are computed by interpolating across it.

        Raises:
            ConfigurationError: See ``validate``.
        """
        self.validate()
        theta = math.radians(self.vfov)
        h = math.tan(theta / 2.0)

        # Viewport dimensions at unit distance
        viewport_height = 2.0 * h
        viewport_width = (width / height) * viewport_height

        lookfrom = as_vec3(self.lookfrom)
        w = normalize(lookfrom - as_vec3(self.lookat))
        u = normalize(np.cross(as_vec3(self.vup), w))
        v = np.cross(w, u)

        horizontal = viewport_width * u
        vertical = viewport_height * v
        # Origin - w (move forward) - horizontal/2 (left) - vertical/2 (down)
        lower_left = lookfrom - w - horizontal / 2.0 - vertical / 2.0

        return CameraFrame(
            origin=lookfrom,
            u=u,
            v=v,
            w=w,
            horizontal=horizontal,
            vertical=vertical,
            lower_left=lower_left,
            width=width,
            height=height,
        )


@dataclass(frozen=True, eq=False)
class CameraFrame:
    """Camera basis and viewport for one render resolution.

    Attributes:
        origin: Camera position.
        u: Right direction in world space.
        v: Up direction in world space.
        w: Backward direction (opposite view direction).
        horizontal: Full viewport width vector.
        vertical: Full viewport height vector.
        lower_left: Lower-left corner of the viewport.
        width: Image width in pixels.
        height: Image height in pixels.
    """

    origin: Vec3
    u: Vec3
    v: Vec3
    w: Vec3
    horizontal: Vec3
    vertical: Vec3
    lower_left: Vec3
    width: int
    height: int

    def ray_through(self, s: float, t: float) -> Ray:
        """Ray through normalized image coordinates.

        Args:
            s: Horizontal coordinate in [0, 1] (left to right).
            t: Vertical coordinate in [0, 1] (bottom to top).
        """
        point = self.lower_left + s * self.horizontal + t * self.vertical
        return Ray(self.origin, point - self.origin)

    def get_ray(self, px: float, py: float) -> Ray:
        """Ray through a continuous pixel position.

        Row 0 is the top of the image; the center of pixel (x, y) is at
        (x + 0.5, y + 0.5).
        """
        return self.ray_through(px / self.width, 1.0 - py / self.height)

    @property
    def view_direction(self) -> Vec3:
        return -self.w
