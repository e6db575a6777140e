"""Unit tests for image export.

Tests cover:
- Float to 8-bit conversion
- PNG round trip through Pillow
- Shape validation
- RMSE comparison
"""

import numpy as np
import pytest


class TestExport:
    """Tests for PNG export."""

    def test_image_to_uint8(self):
        """Test clamping, rounding and NaN handling."""
        from spectracer.preview.export import image_to_uint8

        out = image_to_uint8(np.array([[[0.0, 0.5, 1.0], [np.nan, 2.0, -1.0]]]))
        assert out.dtype == np.uint8
        assert out.tolist() == [[[0, 128, 255], [0, 255, 0]]]

    def test_png_round_trip(self, tmp_path):
        """Test an image survives saving and loading within 8-bit precision."""
        from spectracer.preview.export import load_png, save_png_from_array

        rng = np.random.default_rng(0)
        image = rng.random((5, 7, 3)).astype(np.float32)
        path = tmp_path / "out.png"
        save_png_from_array(image, path)
        loaded = load_png(path)
        assert loaded.shape == (5, 7, 3)
        assert np.max(np.abs(loaded - image)) <= 0.5 / 255.0 + 1e-6

    def test_save_image_buffer(self, tmp_path):
        """Test saving an ImageBuffer directly."""
        from spectracer.core.image import ImageBuffer
        from spectracer.preview.export import load_png, save_png

        image = ImageBuffer(3, 2)
        image.write_row(0, np.ones((3, 3)))
        path = tmp_path / "buffer.png"
        save_png(image, path)
        loaded = load_png(path)
        assert np.all(loaded[0] == 1.0)
        assert np.all(loaded[1] == 0.0)

    def test_rejects_non_rgb(self, tmp_path):
        """Test arrays that are not (H, W, 3) are rejected."""
        from spectracer.preview.export import save_png_from_array

        with pytest.raises(ValueError):
            save_png_from_array(np.zeros((4, 4)), tmp_path / "bad.png")

    def test_rmse(self):
        """Test RMSE of identical and different images."""
        from spectracer.preview.export import compute_rmse

        a = np.zeros((2, 2, 3))
        assert compute_rmse(a, a) == 0.0
        assert compute_rmse(a, a + 0.5) == pytest.approx(0.5)
        with pytest.raises(ValueError):
            compute_rmse(a, np.zeros((2, 3, 3)))
