"""Miss shaders: the background seen by rays that hit nothing.

Any callable ``(ray, context) -> Spectrum`` can serve as a miss shader.

Example:
    >>> from spectracer.core.spectrum import SpectralGrid, Spectrum
    >>> from spectracer.shaders.miss import SkyGradient
    >>> grid = SpectralGrid()
    >>> sky = SkyGradient(horizon=Spectrum.flat(grid, 1.0),
    ...                   zenith=Spectrum.reflective_blue(grid, 0.7))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from spectracer.core.ray import Ray
from spectracer.core.spectrum import Spectrum

if TYPE_CHECKING:
    from spectracer.shaders.contracts import ShadingContext


@dataclass(frozen=True, eq=False)
class ConstantBackground:
    """The same spectrum in every direction."""

    spectrum: Spectrum

    def __call__(self, ray: Ray, context: ShadingContext | None = None) -> Spectrum:
        return self.spectrum

    def spectra(self) -> tuple[Spectrum, ...]:
        return (self.spectrum,)


@dataclass(frozen=True, eq=False)
class SkyGradient:
    """Blend from ``horizon`` (looking down) to ``zenith`` (looking up).

    The blend factor is 0.5 * (direction.y + 1).
    """

    horizon: Spectrum
    zenith: Spectrum

    def __post_init__(self) -> None:
        if self.horizon.grid != self.zenith.grid:
            raise ValueError("Sky gradient spectra must share one spectral grid")

    def __call__(self, ray: Ray, context: ShadingContext | None = None) -> Spectrum:
        t = min(max(0.5 * (float(ray.direction[1]) + 1.0), 0.0), 1.0)
        return self.horizon * (1.0 - t) + self.zenith * t

    def spectra(self) -> tuple[Spectrum, ...]:
        return (self.horizon, self.zenith)
