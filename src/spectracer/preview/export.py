"""Image export utilities for rendered images.

Rendered images are already display encoded (spectra are converted to
gamma-encoded RGB when each pixel is written), so export only quantizes to
8 bits and hands the data to Pillow.

Supported formats:
    - PNG (8-bit RGB via Pillow)

Example:
    >>> from spectracer.core.dispatcher import render
    >>> from spectracer.preview.export import save_png
    >>>
    >>> result = render(scene, config)
    >>> save_png(result.image, "output.png")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from spectracer.core.image import ImageBuffer

logger = logging.getLogger(__name__)


def image_to_uint8(image: npt.NDArray[np.floating]) -> npt.NDArray[np.uint8]:
    """Convert a float RGB image in [0, 1] to uint8.

    Values are clamped and rounded to the nearest 8-bit level; NaN becomes 0.

    Args:
        image: Image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3).
    """
    data = np.nan_to_num(np.asarray(image, dtype=np.float64), nan=0.0)
    return (np.clip(data, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)


def save_png_from_array(image: npt.NDArray[np.floating], filepath: str | Path) -> None:
    """Save a float RGB array of shape (H, W, 3) as an 8-bit PNG.

    Raises:
        ValueError: If the array is not an RGB image.
    """
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    pil_image = PILImage.fromarray(image_to_uint8(image))
    pil_image.save(filepath)
    logger.info("Saved %dx%d image to %s", image.shape[1], image.shape[0], filepath)


def save_png(image: ImageBuffer, filepath: str | Path) -> None:
    """Save an image buffer as an 8-bit PNG."""
    save_png_from_array(image.pixels, filepath)


def load_png(filepath: str | Path) -> npt.NDArray[np.float32]:
    """Load a PNG as a float32 RGB array in [0, 1]."""
    with PILImage.open(filepath) as pil_image:
        data = np.asarray(pil_image.convert("RGB"), dtype=np.float32)
    return data / 255.0


def compute_rmse(
    image_a: npt.NDArray[np.floating],
    image_b: npt.NDArray[np.floating],
) -> float:
    """Compute root mean squared error between two images.

    Args:
        image_a: First image array.
        image_b: Second image array (must have same shape as image_a).

    Returns:
        RMSE value (lower is more similar).

    Raises:
        ValueError: If image shapes don't match.
    """
    if image_a.shape != image_b.shape:
        raise ValueError(
            f"Image shapes must match: {image_a.shape} vs {image_b.shape}"
        )

    diff = image_a.astype(np.float64) - image_b.astype(np.float64)
    return float(np.sqrt(np.mean(diff**2)))
