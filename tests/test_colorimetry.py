"""Unit tests for spectrum to RGB conversion.

Tests cover:
- Colour matching function lookup and interpolation
- XYZ normalization
- XYZ to RGB matrix
- Display encoding (clamping, gamma, NaN handling)
"""

import numpy as np
import pytest


class TestColorMatching:
    """Tests for the CIE colour matching lookup."""

    def test_table_entry(self):
        """Test a wavelength on a table row returns that row."""
        from spectracer.core.colorimetry import CIE_1931_CMF, wavelength_to_xyz

        assert wavelength_to_xyz(380.0) == pytest.approx(tuple(CIE_1931_CMF[0]))

    def test_interpolates_between_rows(self):
        """Test a wavelength between rows is linearly interpolated."""
        from spectracer.core.colorimetry import CIE_1931_CMF, wavelength_to_xyz

        expected = 0.5 * (CIE_1931_CMF[0] + CIE_1931_CMF[1])
        assert wavelength_to_xyz(382.5) == pytest.approx(tuple(expected))

    def test_outside_visible_is_zero(self):
        """Test wavelengths outside 380-780 nm contribute nothing."""
        from spectracer.core.colorimetry import wavelength_to_xyz

        assert wavelength_to_xyz(379.0) == (0.0, 0.0, 0.0)
        assert wavelength_to_xyz(781.0) == (0.0, 0.0, 0.0)

    def test_shape(self):
        """Test an array of wavelengths returns an (N, 3) table."""
        from spectracer.core.colorimetry import color_matching

        assert color_matching(np.linspace(400, 700, 7)).shape == (7, 3)


class TestSpectrumToXyz:
    """Tests for spectral integration."""

    def test_flat_spectrum_has_unit_luminance(self):
        """Test Y = 1 for a flat unit spectrum regardless of sample count."""
        from spectracer.core.colorimetry import spectrum_to_xyz
        from spectracer.core.spectrum import SpectralGrid, Spectrum

        for samples in (8, 32, 100):
            xyz = spectrum_to_xyz(Spectrum.flat(SpectralGrid(samples=samples), 1.0))
            assert xyz[1] == pytest.approx(1.0)

    def test_black_is_zero(self, grid):
        """Test the zero spectrum maps to zero XYZ."""
        from spectracer.core.colorimetry import spectrum_to_xyz
        from spectracer.core.spectrum import Spectrum

        assert np.all(spectrum_to_xyz(Spectrum.zeros(grid)) == 0.0)

    def test_invisible_grid_is_zero(self):
        """Test a grid entirely outside the visible range yields zero."""
        from spectracer.core.colorimetry import spectrum_to_xyz
        from spectracer.core.spectrum import SpectralGrid, Spectrum

        infrared = SpectralGrid(900.0, 1000.0, 4)
        assert np.all(spectrum_to_xyz(Spectrum.flat(infrared, 1.0)) == 0.0)


class TestRgbConversion:
    """Tests for XYZ to RGB and display encoding."""

    def test_d65_white_maps_to_equal_channels(self):
        """Test the D65 white point maps to (nearly) equal RGB."""
        from spectracer.core.colorimetry import xyz_to_linear_rgb

        rgb = xyz_to_linear_rgb([95.047, 100.0, 108.883])
        assert rgb == pytest.approx([100.0, 100.0, 100.0], rel=2e-3)

    def test_display_clamps(self):
        """Test values are clamped into [0, 1] and NaN becomes 0."""
        from spectracer.core.colorimetry import linear_to_display

        out = linear_to_display([-1.0, 2.0, np.nan], gamma=1.0)
        assert list(out) == [0.0, 1.0, 0.0]

    def test_gamma_encoding(self):
        """Test gamma 2.2 encodes 0.5 as 0.5 ** (1 / 2.2)."""
        from spectracer.core.colorimetry import linear_to_display

        out = linear_to_display([0.5, 0.5, 0.5], gamma=2.2)
        assert out[0] == pytest.approx(0.5 ** (1.0 / 2.2))

    def test_to_rgb_black(self, grid):
        """Test no light gives black."""
        from spectracer.core.colorimetry import to_rgb
        from spectracer.core.spectrum import Spectrum

        assert to_rgb(Spectrum.zeros(grid)) == (0.0, 0.0, 0.0)

    def test_red_band_is_reddish(self):
        """Test a long-wavelength spectrum is dominated by the red channel."""
        from spectracer.core.spectrum import SpectralGrid, Spectrum

        grid = SpectralGrid(samples=64)
        r, g, b = Spectrum.reflective_red(grid).to_rgb()
        assert r > g
        assert r > b

    def test_to_rgb_range(self, grid):
        """Test a very bright spectrum stays within [0, 1]."""
        from spectracer.core.spectrum import Spectrum

        rgb = Spectrum.flat(grid, 1e6).to_rgb()
        assert all(0.0 <= c <= 1.0 for c in rgb)
