"""Progressive renderer for iterative frame accumulation.

This module wraps the render dispatcher to support:
- Progressive rendering that refines over time
- Progress callbacks for UI updates
- A generator interface yielding after each frame
- Cancellation between frames and rows

Each frame is a full dispatcher render with its own frame index (and so its
own jitter pattern). Frame n is blended into the accumulated image with
weight 1 / (n + 1), which keeps a running average of all frames.

Example:
    >>> from spectracer.core.config import RenderConfig
    >>> from spectracer.core.progressive import ProgressiveRenderer
    >>> from spectracer.scene.presets import create_cornell_box_scene
    >>>
    >>> renderer = ProgressiveRenderer(create_cornell_box_scene(), RenderConfig(frames=16))
    >>> image = renderer.render()
    >>> pixels = image.to_uint8()
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Generator

from spectracer.core.config import RenderConfig
from spectracer.core.dispatcher import RenderDispatcher
from spectracer.core.image import ImageBuffer
from spectracer.scene.scene import Scene
from spectracer.shaders.table import DEFAULT_SHADERS, ShaderTable

logger = logging.getLogger(__name__)

# Callback receives (frames_done, total_frames)
ProgressCallback = Callable[[int, int], None]


class ProgressiveRenderer:
    """A progressive renderer that accumulates frames over time.

    Attributes:
        scene: The scene to render.
        config: Render configuration; ``frames`` is the default frame count.
    """

    def __init__(
        self,
        scene: Scene,
        config: RenderConfig,
        shaders: ShaderTable = DEFAULT_SHADERS,
    ) -> None:
        self.scene = scene
        self.config = config
        self._dispatcher = RenderDispatcher(scene, config, shaders)
        self._cancel = threading.Event()
        self._image: ImageBuffer | None = None
        self._frame_count = 0

    @property
    def width(self) -> int:
        return self.config.width

    @property
    def height(self) -> int:
        return self.config.height

    @property
    def frame_count(self) -> int:
        """Number of frames accumulated so far."""
        return self._frame_count

    @property
    def image(self) -> ImageBuffer | None:
        """The accumulated image, or None before the first frame."""
        return self._image

    def reset(self) -> None:
        """Discard the accumulated image and clear a pending cancellation."""
        self._image = None
        self._frame_count = 0
        self._cancel.clear()

    def cancel(self) -> None:
        """Request the render to stop before the next row or frame."""
        self._cancel.set()

    def render(
        self,
        num_frames: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> ImageBuffer:
        """Render frames progressively with an optional progress callback.

        Can be called multiple times to continue refining the image.

        Args:
            num_frames: Frames to add; defaults to ``config.frames``.
            callback: Called after each frame with (frames_done, target).

        Returns:
            The accumulated image.
        """
        for done, target in self.render_progressive(num_frames):
            if callback is not None:
                callback(done, target)
        if self._image is None:
            self._dispatcher.prepare()
            return ImageBuffer(self.width, self.height)
        return self._image

    def render_progressive(
        self, num_frames: int | None = None
    ) -> Generator[tuple[int, int], None, None]:
        """Render frames progressively, yielding progress after each frame.

        A frame interrupted by cancellation is not blended in.

        Yields:
            Tuple of (frames_done, target_frames).

        Raises:
            ConfigurationError: For invalid input, before the first frame.
            RenderError: If a frame failed.
        """
        if num_frames is None:
            num_frames = self.config.frames
        target = self._frame_count + num_frames

        for _ in range(num_frames):
            if self._cancel.is_set():
                logger.info("Progressive render cancelled at frame %d", self._frame_count)
                return
            result = self._dispatcher.render(frame=self._frame_count, cancel=self._cancel)
            if result.cancelled:
                logger.info("Progressive render cancelled at frame %d", self._frame_count)
                return
            if self._image is None:
                self._image = result.image
            else:
                self._image.blend(result.image, 1.0 / (self._frame_count + 1))
            self._frame_count += 1
            yield self._frame_count, target

    def __repr__(self) -> str:
        return (
            f"ProgressiveRenderer(width={self.width}, height={self.height}, "
            f"frames={self.frame_count})"
        )
