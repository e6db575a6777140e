"""Material description shared by all shading code.

Materials form a closed set of behaviours (``MaterialKind``) dispatched by the
hit shader. Every material carries spectral data on the render's grid:

- reflectance: fraction of incoming light reflected per wavelength
- transmittance: fraction transmitted through dielectrics
- emission: light emitted by the surface (zero for non-emissive objects)
- ior: index of refraction as a function of wavelength

Materials are frozen and shared read-only between worker threads.

Example:
    >>> from spectracer.core.spectrum import SpectralGrid, Spectrum
    >>> from spectracer.materials.material import CauchyIor, dielectric, diffuse
    >>> grid = SpectralGrid()
    >>> red_wall = diffuse(Spectrum.reflective_red(grid, 0.8))
    >>> flint = dielectric(grid, CauchyIor(1.62, 0.0144))
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Protocol

import numpy as np
import numpy.typing as npt

from spectracer.core.spectrum import SpectralGrid, Spectrum

# Surfaces with alpha below this value are cut out by the any-hit shader
ALPHA_CUTOUT_THRESHOLD = 0.5


class MaterialKind(IntEnum):
    """The closed set of surface behaviours."""

    DIFFUSE = 0
    METAL = 1
    DIELECTRIC = 2


class IorCurve(Protocol):
    """Index of refraction as a function of wavelength."""

    @property
    def is_dispersive(self) -> bool: ...

    def at(self, wavelength_nm: float) -> float: ...

    def values(self, wavelengths_nm: npt.ArrayLike) -> npt.NDArray[np.float64]: ...


@dataclass(frozen=True)
class ConstantIor:
    """The same index of refraction at every wavelength.

    Common values: air 1.0, water 1.33, glass 1.5, diamond 2.4.
    """

    n: float = 1.5

    def __post_init__(self) -> None:
        if not self.n > 0.0:
            raise ValueError(f"Index of refraction must be positive, got {self.n}")

    @property
    def is_dispersive(self) -> bool:
        return False

    def at(self, wavelength_nm: float) -> float:
        return self.n

    def values(self, wavelengths_nm: npt.ArrayLike) -> npt.NDArray[np.float64]:
        return np.full(np.shape(wavelengths_nm), self.n, dtype=np.float64)


@dataclass(frozen=True)
class CauchyIor:
    """Cauchy's dispersion formula n(l) = a + b / l^2 with l in micrometers.

    Typical coefficients: fused silica a=1.458, b=0.00354; dense flint glass
    a=1.7280, b=0.01342.

    Attributes:
        a: Constant term (the index at infinite wavelength).
        b: Dispersion coefficient in square micrometers.
    """

    a: float = 1.5
    b: float = 0.0

    def __post_init__(self) -> None:
        if not self.a > 0.0 or self.b < 0.0:
            raise ValueError(f"Invalid Cauchy coefficients a={self.a}, b={self.b}")

    @property
    def is_dispersive(self) -> bool:
        return self.b != 0.0

    def at(self, wavelength_nm: float) -> float:
        microns = wavelength_nm * 1e-3
        return self.a + self.b / (microns * microns)

    def values(self, wavelengths_nm: npt.ArrayLike) -> npt.NDArray[np.float64]:
        microns = np.asarray(wavelengths_nm, dtype=np.float64) * 1e-3
        return self.a + self.b / (microns * microns)


@dataclass(frozen=True, eq=False)
class Material:
    """Surface response of a scene object.

    Attributes:
        kind: Which shading behaviour applies.
        reflectance: Per-wavelength reflectance (albedo for diffuse, tint for
            metal, tint of the reflected part for dielectric).
        transmittance: Per-wavelength transmittance of a dielectric.
            Defaults to fully clear.
        ior: Index of refraction curve (dielectric only).
        emission: Emitted spectrum. Defaults to no emission.
        alpha: Coverage in [0, 1]; values below the cutout threshold make
            the surface invisible to rays.
        roughness: Fuzz of metal reflections in [0, 1].
        name: Optional label for logging.
    """

    kind: MaterialKind
    reflectance: Spectrum
    transmittance: Spectrum | None = None
    ior: IorCurve = field(default_factory=ConstantIor)
    emission: Spectrum | None = None
    alpha: float = 1.0
    roughness: float = 0.0
    name: str = ""

    def __post_init__(self) -> None:
        grid = self.reflectance.grid
        if self.transmittance is None:
            object.__setattr__(self, "transmittance", Spectrum.flat(grid, 1.0))
        if self.emission is None:
            object.__setattr__(self, "emission", Spectrum.zeros(grid))
        for spectrum in (self.transmittance, self.emission):
            if spectrum.grid != grid:
                raise ValueError("All spectra of a material must share one spectral grid")
        if not 0.0 <= self.alpha <= 1.0:
            raise ValueError(f"Alpha must be in [0, 1], got {self.alpha}")
        if not 0.0 <= self.roughness <= 1.0:
            raise ValueError(f"Roughness must be in [0, 1], got {self.roughness}")
        object.__setattr__(self, "kind", MaterialKind(self.kind))

    @property
    def grid(self) -> SpectralGrid:
        return self.reflectance.grid

    @property
    def is_emissive(self) -> bool:
        return not self.emission.is_black()

    @property
    def is_cutout(self) -> bool:
        return self.alpha < ALPHA_CUTOUT_THRESHOLD

    def spectra(self) -> tuple[Spectrum, ...]:
        return (self.reflectance, self.transmittance, self.emission)


# =============================================================================
# Constructors
# =============================================================================


def diffuse(
    reflectance: Spectrum,
    emission: Spectrum | None = None,
    alpha: float = 1.0,
    name: str = "",
) -> Material:
    """Create a Lambertian material."""
    return Material(
        MaterialKind.DIFFUSE,
        reflectance.clamp_reflectance(),
        emission=emission,
        alpha=alpha,
        name=name,
    )


def emissive(emission: Spectrum, name: str = "") -> Material:
    """Create a light-emitting surface that reflects nothing."""
    return Material(
        MaterialKind.DIFFUSE, Spectrum.zeros(emission.grid), emission=emission, name=name
    )


def metal(reflectance: Spectrum, roughness: float = 0.0, name: str = "") -> Material:
    """Create a specular (optionally fuzzy) reflector."""
    return Material(
        MaterialKind.METAL, reflectance.clamp_reflectance(), roughness=roughness, name=name
    )


def mirror(grid: SpectralGrid, name: str = "mirror") -> Material:
    """A perfect mirror reflecting every wavelength completely."""
    return metal(Spectrum.flat(grid, 1.0), name=name)


def dielectric(
    grid: SpectralGrid,
    ior: IorCurve | float = 1.5,
    transmittance: Spectrum | None = None,
    name: str = "",
) -> Material:
    """Create a glass-like material; pass a CauchyIor for dispersion."""
    if isinstance(ior, (int, float)):
        ior = ConstantIor(float(ior))
    return Material(
        MaterialKind.DIELECTRIC,
        Spectrum.flat(grid, 1.0),
        transmittance=None if transmittance is None else transmittance.clamp_reflectance(),
        ior=ior,
        name=name,
    )
