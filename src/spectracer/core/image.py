"""Row-partitioned RGB image buffer.

Each row is owned by exactly one render task and written exactly once, so
workers can fill the buffer concurrently without locking.
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


class ImageBuffer:
    """A height x width x 3 float32 RGB image filled one row at a time.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        pixels: The RGB data, values in [0, 1].
    """

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 3), dtype=np.float32)
        self._written = np.zeros(height, dtype=bool)
        self._write_counts = np.zeros(height, dtype=np.int32)

    def write_row(self, y: int, row: npt.ArrayLike) -> None:
        """Store the RGB values of row y.

        Raises:
            IndexError: If y is outside the image.
            ValueError: If the row does not have shape (width, 3).
            RuntimeError: If the row was already written.
        """
        if not 0 <= y < self.height:
            raise IndexError(f"Row {y} outside image of height {self.height}")
        data = np.asarray(row, dtype=np.float32)
        if data.shape != (self.width, 3):
            raise ValueError(f"Row must have shape ({self.width}, 3), got {data.shape}")
        self._write_counts[y] += 1
        if self._written[y]:
            raise RuntimeError(f"Row {y} was already written")
        self.pixels[y] = data
        self._written[y] = True

    def row(self, y: int) -> npt.NDArray[np.float32]:
        """Read-only view of one row; the buffer itself stays writable."""
        view = self.pixels[y].view()
        view.flags.writeable = False
        return view

    def is_row_written(self, y: int) -> bool:
        return bool(self._written[y])

    @property
    def rows_written(self) -> int:
        return int(self._written.sum())

    @property
    def is_complete(self) -> bool:
        return bool(self._written.all())

    def write_counts(self) -> npt.NDArray[np.int32]:
        """How often each row was written (attempts, including rejected ones)."""
        return self._write_counts.copy()

    def blend(self, other: ImageBuffer, weight: float) -> None:
        """Blend another image into this one: self = (1 - w) * self + w * other.

        Used for progressive accumulation, where frame n is blended in with
        weight 1 / (n + 1) to maintain a running average.
        """
        if other.pixels.shape != self.pixels.shape:
            raise ValueError("Cannot blend images of different sizes")
        self.pixels *= np.float32(1.0 - weight)
        self.pixels += np.float32(weight) * other.pixels
        self._written |= other._written

    def copy(self) -> ImageBuffer:
        clone = ImageBuffer(self.width, self.height)
        clone.pixels[:] = self.pixels
        clone._written[:] = self._written
        clone._write_counts[:] = self._write_counts
        return clone

    def to_array(self) -> npt.NDArray[np.float32]:
        """A copy of the pixel data as a (height, width, 3) float32 array."""
        return self.pixels.copy()

    def to_uint8(self) -> npt.NDArray[np.uint8]:
        """Convert to 8-bit RGB, rounding to the nearest value."""
        return (np.clip(self.pixels, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
