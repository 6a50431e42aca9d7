"""Row-by-row frame rendering and animation playback.

This module wraps the sampler's render target with a small stateful renderer
that supports:
- Rendering a frame one raster row at a time with progress callbacks
- Generator-based row rendering for cooperative loops
- Rendering a whole animation and handing each finished frame to a sink

Animation time runs backwards: an animation of ``length`` seconds at ``fps``
frames per second renders the time values length*fps, length*fps - 1, ..., 1.
Moving spheres are periodic in time, so the direction only affects the order
in which frames are produced.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.blurtrace.core.animation import AnimationRenderer
    >>> from src.blurtrace.preview.export import PngSequenceSink
    >>> from src.blurtrace.scene.presets import create_default_scene
    >>>
    >>> scene = create_default_scene()
    >>> renderer = AnimationRenderer(320, 240, grid=2)
    >>> renderer.render_animation(length=2, fps=10, sink=PngSequenceSink("frames"))
"""

import logging
from collections.abc import Callable, Generator
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt

from src.blurtrace.core.sampler import (
    clear_render_target,
    get_display_image,
    get_image_numpy,
    render_row,
    setup_render_target,
)

logger = logging.getLogger(__name__)

# Type alias for progress callback
# Callback receives (rows_done, total_rows)
ProgressCallback = Callable[[int, int], None]

# Type alias for frame sinks
# Sink receives (frame_index, display_image) with frame_index counting from 0
FrameSink = Callable[[int, npt.NDArray[np.int32]], None]


@dataclass
class RenderSettings:
    """Output settings for an animation render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        grid: Supersampling grid size; each pixel averages grid * grid samples.
        length: Animation length in seconds.
        fps: Frames per second.
    """

    width: int = 320
    height: int = 240
    grid: int = 2
    length: int = 10
    fps: int = 10

    @property
    def frame_count(self) -> int:
        """Number of frames the animation renders."""
        return frame_count(self.length, self.fps)


def frame_count(length: int, fps: int) -> int:
    """Number of frames rendered for an animation of length seconds at fps."""
    return max(int(length * fps), 0)


def frame_times(length: int, fps: int) -> list[int]:
    """Time values of the animation frames, in render order.

    Args:
        length: Animation length in seconds.
        fps: Frames per second.

    Returns:
        The time values counting down from length * fps to 1.
    """
    return list(range(frame_count(length, fps), 0, -1))


class AnimationRenderer:
    """Renders frames and animations into the sampler's render target.

    The renderer keeps the image size and supersampling grid and delegates
    all pixel work to the global sampler buffers (which are Taichi fields).

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        grid: Supersampling grid size.
    """

    def __init__(self, width: int, height: int, grid: int = 1) -> None:
        """Initialize the renderer and its render target.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            grid: Supersampling grid size (at least 1).

        Raises:
            ValueError: If dimensions exceed the maximum supported size or
                grid is less than 1.
        """
        if grid < 1:
            raise ValueError(f"Supersampling grid size must be at least 1, got {grid}")
        self._width = width
        self._height = height
        self._grid = grid
        setup_render_target(width, height)

    @property
    def width(self) -> int:
        """Get the image width."""
        return self._width

    @property
    def height(self) -> int:
        """Get the image height."""
        return self._height

    @property
    def grid(self) -> int:
        """Get the supersampling grid size."""
        return self._grid

    def reset(self) -> None:
        """Clear the render target without changing its size."""
        clear_render_target()

    def render_frame(self, time: float, callback: ProgressCallback | None = None) -> None:
        """Render one frame row by row.

        Args:
            time: Base time of the frame.
            callback: Optional callback called after each row.
                Receives (rows_done, total_rows).
        """
        for rows_done, total in self.render_rows(time):
            if callback is not None:
                callback(rows_done, total)

    def render_rows(self, time: float) -> Generator[tuple[int, int], None, None]:
        """Render one frame row by row, yielding progress after each row.

        Rows are rendered top to bottom.

        Args:
            time: Base time of the frame.

        Yields:
            Tuple of (rows_done, total_rows).
        """
        for y in range(self._height):
            render_row(y, self._grid, time)
            yield (y + 1, self._height)

    def render_animation(
        self,
        length: int,
        fps: int,
        sink: FrameSink,
        callback: ProgressCallback | None = None,
    ) -> int:
        """Render an animation and hand each finished frame to a sink.

        Args:
            length: Animation length in seconds.
            fps: Frames per second.
            sink: Called with (frame_index, display_image) after each frame.
            callback: Optional row progress callback, forwarded to
                render_frame() for every frame.

        Returns:
            The number of frames rendered.
        """
        times = frame_times(length, fps)
        logger.info(
            "Rendering %d frames at %dx%d (grid %d)",
            len(times),
            self._width,
            self._height,
            self._grid,
        )

        for index, time in enumerate(times):
            self.render_frame(float(time), callback=callback)
            sink(index, self.get_display_image())
            logger.debug("Frame %d/%d done (time %d)", index + 1, len(times), time)

        return len(times)

    def get_image_numpy(self) -> npt.NDArray[np.float32]:
        """Get the averaged colors of the last frame, shape (height, width, 3)."""
        return get_image_numpy()

    def get_display_image(self) -> npt.NDArray[np.int32]:
        """Get the display channels of the last frame, shape (height, width, 3)."""
        return get_display_image()

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"AnimationRenderer(width={self.width}, height={self.height}, "
            f"grid={self.grid})"
        )
