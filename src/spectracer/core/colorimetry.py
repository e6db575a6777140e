"""Colorimetry: CIE colour matching and the spectral-to-display conversion.

The conversion pipeline is:

1. Integrate the spectrum against the CIE 1931 2-degree standard observer
   colour matching functions, normalized so that a flat spectrum of 1.0 has
   luminance Y = 1.
2. Transform XYZ to linear RGB in the Adobe RGB (1998) working space
   (D65 white point maps to equal R, G and B).
3. Clamp to the representable [0, 1] range (negative and out-of-gamut
   values are clamped, never wrapped).
4. Gamma-encode for display.

Example:
    >>> from spectracer.core.colorimetry import wavelength_to_xyz
    >>> wavelength_to_xyz(555.0)
    (0.616053, 0.99911, 0.001091)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt

if TYPE_CHECKING:
    from spectracer.core.spectrum import Spectrum

# Visible range covered by the colour matching table
VISIBLE_LOWER_NM = 380.0
VISIBLE_UPPER_NM = 780.0
CMF_STEP_NM = 5.0

# Default display gamma
DEFAULT_GAMMA = 2.2

# XYZ -> linear Adobe RGB (1998), D65 reference white
XYZ_TO_RGB_MATRIX = np.array(
    [
        [2.041369, -0.5649464, -0.3446944],
        [-0.969266, 1.8760108, 0.0415560],
        [0.0134474, -0.1183897, 1.0154096],
    ],
    dtype=np.float64,
)

# CIE 1931 2-degree colour matching functions (x-bar, y-bar, z-bar),
# 380 nm to 780 nm in 5 nm steps.
CIE_1931_CMF = np.array(
    [
        (0.00016, 0.000017, 0.000705),  # 380 nm
        (0.000662, 0.000072, 0.002928),
        (0.002362, 0.000253, 0.010482),
        (0.007242, 0.000769, 0.032344),
        (0.01911, 0.002004, 0.086011),  # 400 nm
        (0.0434, 0.004509, 0.197120),
        (0.084736, 0.008756, 0.389366),
        (0.140638, 0.014456, 0.656760),
        (0.204492, 0.021391, 0.972542),
        (0.264737, 0.029497, 1.28250),
        (0.314679, 0.038676, 1.55348),
        (0.357719, 0.049602, 1.79850),
        (0.383734, 0.062077, 1.96728),
        (0.386726, 0.074704, 2.02730),
        (0.370702, 0.089456, 1.99480),  # 450 nm
        (0.342957, 0.106256, 1.90070),
        (0.302273, 0.128201, 1.74537),
        (0.254085, 0.152761, 1.55490),
        (0.195618, 0.18519, 1.31756),
        (0.132349, 0.21994, 1.03020),
        (0.080507, 0.253589, 0.772125),
        (0.041072, 0.297665, 0.570060),
        (0.016172, 0.339133, 0.415254),
        (0.005132, 0.395379, 0.302356),
        (0.003816, 0.460777, 0.218502),  # 500 nm
        (0.015444, 0.53136, 0.159249),
        (0.037465, 0.606741, 0.112044),
        (0.071358, 0.68566, 0.082248),
        (0.117749, 0.761757, 0.060709),
        (0.172953, 0.82333, 0.043050),
        (0.236491, 0.875211, 0.030451),
        (0.304213, 0.92381, 0.020584),
        (0.376772, 0.961988, 0.013676),
        (0.451584, 0.9822, 0.007918),
        (0.529826, 0.991761, 0.003988),  # 550 nm
        (0.616053, 0.99911, 0.001091),
        (0.705224, 0.99734, 0.000000),
        (0.793832, 0.98238, 0.000000),
        (0.878655, 0.955552, 0.000000),
        (0.951162, 0.915175, 0.000000),
        (1.01416, 0.868934, 0.000000),
        (1.0743, 0.825623, 0.000000),
        (1.11852, 0.777405, 0.000000),
        (1.1343, 0.720353, 0.000000),
        (1.12399, 0.658341, 0.000000),  # 600 nm
        (1.0891, 0.593878, 0.000000),
        (1.03048, 0.527963, 0.000000),
        (0.95074, 0.461834, 0.000000),
        (0.856297, 0.398057, 0.000000),
        (0.75493, 0.339554, 0.000000),
        (0.647467, 0.283493, 0.000000),
        (0.53511, 0.228254, 0.000000),
        (0.431567, 0.179828, 0.000000),
        (0.34369, 0.140211, 0.000000),
        (0.268329, 0.107633, 0.000000),  # 650 nm
        (0.2043, 0.081187, 0.000000),
        (0.152568, 0.060281, 0.000000),
        (0.11221, 0.044096, 0.000000),
        (0.081261, 0.0318, 0.000000),
        (0.05793, 0.022602, 0.000000),
        (0.040851, 0.015905, 0.000000),
        (0.028623, 0.01113, 0.000000),
        (0.019941, 0.007749, 0.000000),
        (0.013842, 0.005375, 0.000000),
        (0.009577, 0.003718, 0.000000),  # 700 nm
        (0.006605, 0.002565, 0.000000),
        (0.004553, 0.001768, 0.000000),
        (0.003145, 0.001222, 0.000000),
        (0.002175, 0.000846, 0.000000),
        (0.001506, 0.000586, 0.000000),
        (0.001045, 0.000407, 0.000000),
        (0.000727, 0.000284, 0.000000),
        (0.000508, 0.000199, 0.000000),
        (0.000356, 0.00014, 0.000000),
        (0.000251, 0.000098, 0.000000),  # 750 nm
        (0.000178, 0.00007, 0.000000),
        (0.000126, 0.00005, 0.000000),
        (0.00009, 0.000036, 0.000000),
        (0.000065, 0.000025, 0.000000),
        (0.000046, 0.000018, 0.000000),
        (0.000033, 0.000013, 0.000000),  # 780 nm
    ],
    dtype=np.float64,
)
CIE_1931_CMF.setflags(write=False)

_CMF_WAVELENGTHS = np.linspace(VISIBLE_LOWER_NM, VISIBLE_UPPER_NM, len(CIE_1931_CMF))


def color_matching(wavelengths: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Look up the colour matching functions for an array of wavelengths.

    Values between table entries are linearly interpolated; wavelengths
    outside the visible range map to zero.

    Args:
        wavelengths: Wavelengths in nanometers.

    Returns:
        Array of shape (N, 3) with x-bar, y-bar and z-bar per wavelength.
    """
    wl = np.atleast_1d(np.asarray(wavelengths, dtype=np.float64))
    result = np.empty((wl.size, 3), dtype=np.float64)
    for channel in range(3):
        result[:, channel] = np.interp(
            wl, _CMF_WAVELENGTHS, CIE_1931_CMF[:, channel], left=0.0, right=0.0
        )
    return result


def wavelength_to_xyz(wavelength: float) -> tuple[float, float, float]:
    """Compute the XYZ colour of a single wavelength (in nanometers)."""
    x, y, z = color_matching(wavelength)[0]
    return float(x), float(y), float(z)


def spectrum_to_xyz(spectrum: Spectrum) -> npt.NDArray[np.float64]:
    """Integrate a spectrum into CIE XYZ tristimulus values.

    The integral is normalized by the sum of y-bar over the same grid, so a
    flat spectrum with intensity 1.0 yields Y = 1 regardless of the number
    of samples.

    Args:
        spectrum: The spectrum to integrate.

    Returns:
        Array (X, Y, Z).
    """
    cmf = spectrum.grid.color_matching
    y_sum = float(cmf[:, 1].sum())
    if y_sum <= 0.0:
        # The whole grid lies outside the visible range
        return np.zeros(3, dtype=np.float64)
    return (spectrum.values @ cmf) / y_sum


def xyz_to_linear_rgb(xyz: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """Transform XYZ into linear (unclamped) working-space RGB."""
    return XYZ_TO_RGB_MATRIX @ np.asarray(xyz, dtype=np.float64)


def linear_to_display(
    rgb: npt.ArrayLike, gamma: float = DEFAULT_GAMMA
) -> npt.NDArray[np.float64]:
    """Clamp linear RGB to [0, 1] and apply gamma encoding.

    Non-finite components are treated as zero.
    """
    rgb = np.nan_to_num(np.asarray(rgb, dtype=np.float64), nan=0.0, posinf=1.0, neginf=0.0)
    rgb = np.clip(rgb, 0.0, 1.0)
    if gamma == 1.0:
        return rgb
    return np.power(rgb, 1.0 / gamma)


def to_linear_rgb(spectrum: Spectrum) -> npt.NDArray[np.float64]:
    """Convert a spectrum to linear, unclamped RGB."""
    return xyz_to_linear_rgb(spectrum_to_xyz(spectrum))


def to_rgb(spectrum: Spectrum, gamma: float = DEFAULT_GAMMA) -> tuple[float, float, float]:
    """Convert a spectrum to a display RGB triple in [0, 1].

    This is the single place spectral data becomes a display colour. It is
    called by the ray generation shader when a pixel is written.

    Args:
        spectrum: The accumulated pixel spectrum.
        gamma: Display gamma (2.2 by default, 1.0 for linear output).

    Returns:
        Tuple (r, g, b), each clamped to [0, 1] and gamma encoded.
    """
    r, g, b = linear_to_display(to_linear_rgb(spectrum), gamma)
    return float(r), float(g), float(b)
