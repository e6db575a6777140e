"""Render configuration.

Configuration loading is left to the caller; the renderer only consumes a
finished ``RenderConfig`` and validates it before any work starts.

Example:
    >>> from spectracer.core.config import RenderConfig
    >>> config = RenderConfig(width=320, height=240, samples_per_pixel=4)
    >>> config.validate()
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from spectracer.core.errors import ConfigurationError

# Worker count used when the CPU count cannot be determined
FALLBACK_WORKER_COUNT = 20
MAX_WORKERS = 64

DEFAULT_MAX_DEPTH = 30
MAX_DEPTH_LIMIT = 100


def default_worker_count() -> int:
    """Number of worker threads matching the available hardware parallelism."""
    count = os.cpu_count()
    if count is None:
        return FALLBACK_WORKER_COUNT
    return max(1, min(count, MAX_WORKERS))


@dataclass(frozen=True)
class RenderConfig:
    """Parameters of a single render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        workers: Number of worker threads (one image row per task).
        max_depth: Maximum number of secondary-ray bounces.
        samples_per_pixel: Primary rays averaged per pixel.
        seed: Seed of the per-pixel random generators.
        jitter: Whether primary rays are jittered inside the pixel. When
            disabled every sample goes through the pixel center.
        frames: Number of passes accumulated by the progressive renderer.
        gamma: Display gamma used when converting spectra to RGB.
    """

    width: int = 400
    height: int = 300
    workers: int = field(default_factory=default_worker_count)
    max_depth: int = DEFAULT_MAX_DEPTH
    samples_per_pixel: int = 1
    seed: int = 0
    jitter: bool = True
    frames: int = 1
    gamma: float = 2.2

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def with_overrides(self, **changes) -> RenderConfig:
        """Return a copy with some fields replaced."""
        return replace(self, **changes)

    def validate(self) -> None:
        """Reject configurations that cannot produce an image.

        Raises:
            ConfigurationError: Describing the first invalid field.
        """
        for name in ("width", "height", "workers", "samples_per_pixel", "frames"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        if self.workers > MAX_WORKERS:
            raise ConfigurationError(
                f"workers must be at most {MAX_WORKERS}, got {self.workers}"
            )
        if not isinstance(self.max_depth, int) or isinstance(self.max_depth, bool):
            raise ConfigurationError(f"max_depth must be an integer, got {self.max_depth!r}")
        if not 0 <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise ConfigurationError(
                f"max_depth must be in [0, {MAX_DEPTH_LIMIT}], got {self.max_depth}"
            )
        if not isinstance(self.seed, int) or self.seed < 0:
            raise ConfigurationError(f"seed must be a non-negative integer, got {self.seed!r}")
        if not self.gamma > 0.0:
            raise ConfigurationError(f"gamma must be positive, got {self.gamma}")
