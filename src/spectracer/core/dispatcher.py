"""Render dispatcher: concurrent per-row rendering.

The image is split into rows, one task per row, executed by a fixed-size
thread pool. The scene, configuration and ray generation shader are shared
read-only; each task writes only its own row of the image buffer, so no
locking is needed. The caller thread collects finished rows, reports
progress and waits for every row before the render is complete.

Cancellation is cooperative: a ``threading.Event`` is checked before each
row starts. A fault in any row aborts the whole render with a RenderError;
no partially valid image is returned.

Example:
    >>> from spectracer.core.config import RenderConfig
    >>> from spectracer.core.dispatcher import RenderDispatcher
    >>> dispatcher = RenderDispatcher(scene, RenderConfig(width=320, height=240))
    >>> result = dispatcher.render(progress=lambda done, total: None)
    >>> pixels = result.image.to_uint8()
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from spectracer.core.config import RenderConfig
from spectracer.core.errors import RenderError
from spectracer.core.image import ImageBuffer
from spectracer.scene.scene import Scene
from spectracer.shaders.raygen import RayGenerationShader
from spectracer.shaders.table import DEFAULT_SHADERS, ShaderTable

logger = logging.getLogger(__name__)

# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]
# Callback receives (row index, RGB row of shape (width, 3))
RowCallback = Callable[[int, npt.NDArray[np.float32]], None]


@dataclass(frozen=True)
class RenderResult:
    """Outcome of a render.

    Attributes:
        image: The image buffer. Rows skipped because of cancellation stay
            black and are reported as unwritten.
        cancelled: Whether the render stopped early on request.
        rows_completed: Number of rows that were rendered.
        elapsed: Wall-clock duration in seconds.
    """

    image: ImageBuffer
    cancelled: bool
    rows_completed: int
    elapsed: float


class RenderDispatcher:
    """Drives the ray generation shader over an image with worker threads.

    Attributes:
        scene: The scene to render.
        config: Render configuration.
        shaders: Shader table used for every ray.
    """

    def __init__(
        self,
        scene: Scene,
        config: RenderConfig,
        shaders: ShaderTable = DEFAULT_SHADERS,
    ) -> None:
        self.scene = scene
        self.config = config
        self.shaders = shaders

    def prepare(self) -> RayGenerationShader:
        """Validate the inputs and build the shared ray generation shader.

        Raises:
            ConfigurationError: If the configuration, scene or camera is
                invalid. Nothing has been rendered at that point.
        """
        self.config.validate()
        self.scene.validate_for_render()
        return RayGenerationShader(self.scene, self.config, self.shaders)

    def render(
        self,
        *,
        frame: int = 0,
        cancel: threading.Event | None = None,
        progress: ProgressCallback | None = None,
        on_row: RowCallback | None = None,
    ) -> RenderResult:
        """Render every row of the image once.

        Args:
            frame: Frame index mixed into the per-pixel random seeds.
            cancel: Set to stop before the next row starts.
            progress: Called on the caller thread after each finished row.
            on_row: Called on the caller thread with each finished row.

        Returns:
            The render result.

        Raises:
            ConfigurationError: For invalid input, before rendering starts.
            RenderError: If rendering a row failed.
        """
        raygen = self.prepare()
        config = self.config
        image = ImageBuffer(config.width, config.height)
        cancel = cancel if cancel is not None else threading.Event()
        abort = threading.Event()

        def render_row(y: int) -> int | None:
            if cancel.is_set() or abort.is_set():
                return None
            image.write_row(y, raygen.render_row(y, frame))
            return y

        logger.info(
            "Rendering %dx%d (frame %d) with %d workers, %d spp, depth %d",
            config.width,
            config.height,
            frame,
            config.workers,
            config.samples_per_pixel,
            config.max_depth,
        )
        start = time.perf_counter()
        rows_done = 0

        with ThreadPoolExecutor(
            max_workers=config.workers, thread_name_prefix="spectracer-row"
        ) as executor:
            futures: list[Future[int | None]] = [
                executor.submit(render_row, y) for y in range(config.height)
            ]
            try:
                for future in as_completed(futures):
                    y = future.result()
                    if y is None:
                        continue
                    rows_done += 1
                    if progress is not None:
                        progress(rows_done, config.height)
                    if on_row is not None:
                        on_row(y, image.row(y))
            except Exception as exc:
                abort.set()
                for pending in futures:
                    pending.cancel()
                logger.error("Render failed after %d rows: %s", rows_done, exc)
                raise RenderError(f"Render failed: {exc}") from exc

        elapsed = time.perf_counter() - start
        cancelled = rows_done < config.height
        if cancelled:
            logger.info("Render cancelled after %d/%d rows", rows_done, config.height)
        else:
            logger.info("Rendered %d rows in %.2fs", rows_done, elapsed)
        return RenderResult(
            image=image, cancelled=cancelled, rows_completed=rows_done, elapsed=elapsed
        )


def render(
    scene: Scene,
    config: RenderConfig,
    shaders: ShaderTable = DEFAULT_SHADERS,
    **kwargs,
) -> RenderResult:
    """Convenience wrapper: ``RenderDispatcher(scene, config, shaders).render(**kwargs)``."""
    return RenderDispatcher(scene, config, shaders).render(**kwargs)
