"""Sampled spectra: the light quantity carried by every ray.

A Spectrum replaces the RGB triple of a conventional ray tracer. It holds
non-negative intensities sampled at equidistant wavelengths of a shared
SpectralGrid. All spectra taking part in one render use the same grid, so
elementwise operations are always aligned; mixing grids is an error.

Spectra are immutable values: arithmetic returns new spectra and the
underlying NumPy array is read-only, which makes them safe to share between
worker threads.

Example:
    >>> from spectracer.core.spectrum import SpectralGrid, Spectrum
    >>> grid = SpectralGrid(380.0, 780.0, 32)
    >>> light = Spectrum.blackbody(grid, 6500.0, multiplier=1e-4)
    >>> red_paint = Spectrum.reflective_red(grid)
    >>> reflected = light * red_paint * 0.5
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from spectracer.core import colorimetry

VISIBLE_LIGHT_WAVELENGTH_LOWER_BOUND = 380.0
VISIBLE_LIGHT_WAVELENGTH_UPPER_BOUND = 780.0

DEFAULT_SAMPLE_COUNT = 32
MIN_SAMPLE_COUNT = 2
MAX_SAMPLE_COUNT = 128

# Physical constants for Planck's law
SPEED_OF_LIGHT = 299_792_458.0  # m/s
PLANCK_CONSTANT = 6.62607015e-34  # J s
BOLTZMANN_CONSTANT = 1.380649e-23  # J/K

# Colour temperature used as the stand-in for daylight
SUNLIGHT_TEMPERATURE_K = 6500.0


@dataclass(frozen=True)
class SpectralGrid:
    """A fixed wavelength sampling shared by all spectra of a render.

    Samples are equidistant: sample ``i`` sits at
    ``lower_nm + i * (upper_nm - lower_nm) / (samples - 1)``.

    Attributes:
        lower_nm: Wavelength of the first sample in nanometers.
        upper_nm: Wavelength of the last sample in nanometers.
        samples: Number of samples (between 2 and 128).
    """

    lower_nm: float = VISIBLE_LIGHT_WAVELENGTH_LOWER_BOUND
    upper_nm: float = VISIBLE_LIGHT_WAVELENGTH_UPPER_BOUND
    samples: int = DEFAULT_SAMPLE_COUNT
    wavelengths: npt.NDArray[np.float64] = field(init=False, repr=False, compare=False)
    color_matching: npt.NDArray[np.float64] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not MIN_SAMPLE_COUNT <= self.samples <= MAX_SAMPLE_COUNT:
            raise ValueError(
                f"Sample count {self.samples} outside "
                f"[{MIN_SAMPLE_COUNT}, {MAX_SAMPLE_COUNT}]"
            )
        if not 0.0 < self.lower_nm < self.upper_nm:
            raise ValueError(
                f"Invalid wavelength range [{self.lower_nm}, {self.upper_nm}] nm"
            )
        wavelengths = np.linspace(self.lower_nm, self.upper_nm, self.samples)
        wavelengths.setflags(write=False)
        cmf = colorimetry.color_matching(wavelengths)
        cmf.setflags(write=False)
        object.__setattr__(self, "wavelengths", wavelengths)
        object.__setattr__(self, "color_matching", cmf)

    @property
    def step(self) -> float:
        """Distance between two neighbouring samples in nanometers."""
        return (self.upper_nm - self.lower_nm) / (self.samples - 1)

    def band_of(self, wavelength: float) -> int:
        """Index of the sample closest to the given wavelength."""
        index = round((wavelength - self.lower_nm) / self.step)
        return min(max(index, 0), self.samples - 1)


def black_body_radiation(wavelength_nm: float, temperature_k: float) -> float:
    """Spectral radiance of a black body according to Planck's law.

    B(l, T) = 2hc^2 / l^5 * 1 / (exp(hc / (l k T)) - 1)

    Args:
        wavelength_nm: Wavelength in nanometers.
        temperature_k: Absolute temperature in Kelvin.

    Returns:
        Spectral radiance in W / sr / m^2 / nm.

    Raises:
        ValueError: If the wavelength or the temperature is not positive.
    """
    if not wavelength_nm > 0.0:
        raise ValueError(
            f"Wavelengths must be physical, positive values. Got: {wavelength_nm}nm."
        )
    if not temperature_k > 0.0:
        raise ValueError(
            f"Temperatures in Kelvin must be positive values. Got: {temperature_k}K."
        )

    wavelength_m = wavelength_nm * 1e-9
    hc = PLANCK_CONSTANT * SPEED_OF_LIGHT
    exponent = hc / (wavelength_m * BOLTZMANN_CONSTANT * temperature_k)
    if exponent > 700.0:
        # exp() would overflow; the radiance is zero at double precision
        return 0.0
    radiance_per_m = (2.0 * hc * SPEED_OF_LIGHT / wavelength_m**5) / math.expm1(exponent)
    return radiance_per_m * 1e-9


class Spectrum:
    """An immutable, non-negative spectral distribution on a SpectralGrid.

    Supported arithmetic:
        - ``spectrum * scalar`` / ``scalar * spectrum``: scale.
        - ``spectrum + other``: elementwise addition.
        - ``spectrum * other``: elementwise product (light times reflectance).
        - ``spectrum / scalar``: scale by the reciprocal.

    Attributes:
        grid: The wavelength grid the samples live on.
        values: Read-only array of intensities, one per grid sample.
    """

    __slots__ = ("grid", "values")

    def __init__(self, grid: SpectralGrid, values: npt.ArrayLike) -> None:
        array = np.array(values, dtype=np.float64).reshape(-1)
        if array.shape != (grid.samples,):
            raise ValueError(
                f"Expected {grid.samples} samples, got {array.size}"
            )
        if not np.all(array >= 0.0):
            raise ValueError("Spectral intensities must be non-negative numbers")
        array.setflags(write=False)
        self.grid = grid
        self.values = array

    @classmethod
    def _trusted(cls, grid: SpectralGrid, array: npt.NDArray[np.float64]) -> Spectrum:
        # Arithmetic results of non-negative operands skip validation.
        spectrum = cls.__new__(cls)
        array.setflags(write=False)
        spectrum.grid = grid
        spectrum.values = array
        return spectrum

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def zeros(cls, grid: SpectralGrid) -> Spectrum:
        """The "no light" spectrum."""
        return cls._trusted(grid, np.zeros(grid.samples, dtype=np.float64))

    @classmethod
    def flat(cls, grid: SpectralGrid, value: float) -> Spectrum:
        """A spectrum with the same intensity at every sample."""
        if not value >= 0.0:
            raise ValueError(f"Spectral intensity must be non-negative, got {value}")
        return cls._trusted(grid, np.full(grid.samples, float(value), dtype=np.float64))

    @classmethod
    def from_values(cls, grid: SpectralGrid, values: npt.ArrayLike) -> Spectrum:
        """Create a spectrum from one intensity per grid sample."""
        return cls(grid, values)

    @classmethod
    def from_function(cls, grid: SpectralGrid, func) -> Spectrum:
        """Create a spectrum by evaluating ``func(wavelength_nm)`` per sample."""
        return cls(grid, [func(float(wl)) for wl in grid.wavelengths])

    @classmethod
    def blackbody(
        cls, grid: SpectralGrid, temperature_k: float, multiplier: float = 1.0
    ) -> Spectrum:
        """Black-body radiation at the given temperature, scaled by multiplier."""
        values = [
            black_body_radiation(float(wl), temperature_k) * multiplier
            for wl in grid.wavelengths
        ]
        return cls(grid, values)

    @classmethod
    def sunlight(cls, grid: SpectralGrid, multiplier: float = 1.0) -> Spectrum:
        """Daylight approximated by a 6500 K black body."""
        return cls.blackbody(grid, SUNLIGHT_TEMPERATURE_K, multiplier)

    @classmethod
    def normalized_white(cls, grid: SpectralGrid) -> Spectrum:
        """Daylight scaled so that its largest linear RGB component is 1."""
        return cls.sunlight(grid).normalize()

    @classmethod
    def _band(cls, grid: SpectralGrid, factor: float, lower: float, upper: float) -> Spectrum:
        wl = grid.wavelengths
        mask = (wl > lower) & (wl < upper)
        return cls(grid, np.where(mask, float(factor), 0.0))

    @classmethod
    def reflective_red(cls, grid: SpectralGrid, factor: float = 1.0) -> Spectrum:
        """Reflectance of ``factor`` above 550 nm (where red cones respond)."""
        return cls._band(grid, factor, 550.0, math.inf)

    @classmethod
    def reflective_green(cls, grid: SpectralGrid, factor: float = 1.0) -> Spectrum:
        """Reflectance of ``factor`` between 500 nm and 575 nm."""
        return cls._band(grid, factor, 500.0, 575.0)

    @classmethod
    def reflective_blue(cls, grid: SpectralGrid, factor: float = 1.0) -> Spectrum:
        """Reflectance of ``factor`` below 475 nm."""
        return cls._band(grid, factor, -math.inf, 475.0)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _check_grid(self, other: Spectrum) -> None:
        if other.grid is not self.grid and other.grid != self.grid:
            raise ValueError(
                f"Spectral grids do not match: {self.grid} vs {other.grid}"
            )

    def __add__(self, other: Spectrum) -> Spectrum:
        if not isinstance(other, Spectrum):
            return NotImplemented
        self._check_grid(other)
        return Spectrum._trusted(self.grid, self.values + other.values)

    def __mul__(self, other: Spectrum | float) -> Spectrum:
        if isinstance(other, Spectrum):
            self._check_grid(other)
            return Spectrum._trusted(self.grid, self.values * other.values)
        if isinstance(other, (int, float, np.floating)):
            return self.scale(float(other))
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Spectrum:
        if not isinstance(scalar, (int, float, np.floating)):
            return NotImplemented
        if scalar == 0.0:
            raise ValueError("Cannot divide a spectrum by zero")
        return self.scale(1.0 / float(scalar))

    def scale(self, factor: float) -> Spectrum:
        """Multiply every sample by a non-negative scalar."""
        if not factor >= 0.0:
            raise ValueError(f"Scale factor must be non-negative, got {factor}")
        return Spectrum._trusted(self.grid, self.values * factor)

    def multiply(self, reflectance: Spectrum) -> Spectrum:
        """Elementwise product with a reflectance spectrum."""
        return self * reflectance

    def isolate_band(self, band: int) -> Spectrum:
        """A spectrum that keeps only the given sample and zeroes the rest."""
        array = np.zeros(self.grid.samples, dtype=np.float64)
        array[band] = self.values[band]
        return Spectrum._trusted(self.grid, array)

    def clamp_reflectance(self) -> Spectrum:
        """Limit every sample to at most 1.0 (energy-conserving reflectance)."""
        return Spectrum._trusted(self.grid, np.minimum(self.values, 1.0))

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def wavelengths(self) -> npt.NDArray[np.float64]:
        """Wavelength of every sample in nanometers."""
        return self.grid.wavelengths

    def __len__(self) -> int:
        return self.grid.samples

    def __getitem__(self, index: int) -> float:
        return float(self.values[index])

    def __iter__(self) -> Iterator[tuple[float, float]]:
        """Iterate over (wavelength, intensity) pairs."""
        for wavelength, value in zip(self.grid.wavelengths, self.values):
            yield float(wavelength), float(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Spectrum):
            return NotImplemented
        return self.grid == other.grid and bool(np.array_equal(self.values, other.values))

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Spectrum({self.grid.lower_nm:g}-{self.grid.upper_nm:g} nm, "
            f"{self.grid.samples} samples, peak={self.max():.4g})"
        )

    def is_black(self) -> bool:
        """Whether every sample is zero."""
        return not np.any(self.values)

    def is_finite(self) -> bool:
        """Whether every sample is a finite number."""
        return bool(np.all(np.isfinite(self.values)))

    def max(self) -> float:
        """Largest sample value."""
        return float(self.values.max())

    def value_at(self, wavelength: float) -> float:
        """Spectral radiance at an arbitrary wavelength.

        Linearly interpolates between the two nearest samples. Wavelengths
        outside the grid range return 0.
        """
        if not self.grid.lower_nm <= wavelength <= self.grid.upper_nm:
            return 0.0
        return float(np.interp(wavelength, self.grid.wavelengths, self.values))

    def radiance(self) -> float:
        """Integral of the spectral radiance over the grid (sum of sample * step)."""
        return float(self.values.sum() * self.grid.step)

    def resample(self, samples: int) -> Spectrum:
        """Re-sample onto a grid with the same range and a new sample count."""
        if samples == self.grid.samples:
            return self
        grid = SpectralGrid(self.grid.lower_nm, self.grid.upper_nm, samples)
        return Spectrum(grid, np.interp(grid.wavelengths, self.grid.wavelengths, self.values))

    def on_grid(self, grid: SpectralGrid) -> Spectrum:
        """Re-sample onto an arbitrary grid (zero outside this spectrum's range)."""
        if grid == self.grid:
            return self
        return Spectrum(grid, [self.value_at(float(wl)) for wl in grid.wavelengths])

    def to_rgb(self, gamma: float = colorimetry.DEFAULT_GAMMA) -> tuple[float, float, float]:
        """Convert to a display RGB triple (see colorimetry.to_rgb)."""
        return colorimetry.to_rgb(self, gamma)

    def normalize(self) -> Spectrum:
        """Scale so that the largest linear RGB component becomes 1.

        The shape of the distribution is unchanged. A spectrum without any
        visible contribution is returned as is.
        """
        peak = float(colorimetry.to_linear_rgb(self).max())
        if peak <= 0.0:
            return self
        return self / peak
