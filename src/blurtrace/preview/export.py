"""Image export utilities for rendered frames.

This module turns the renderer's display channels into image files. The
display conversion in the renderer clamps channels to at most 255 but never
from below, so every export first clips into 0..255.

Supported formats:
    - PNG (8-bit RGB via Pillow), single images or numbered frame sequences
    - GIF (animated, via Pillow)

Frame sinks are callables taking (frame_index, display_image) and can be
handed straight to AnimationRenderer.render_animation().

Example:
    >>> from src.blurtrace.core.animation import AnimationRenderer
    >>> from src.blurtrace.preview.export import AnimatedGifSink
    >>>
    >>> renderer = AnimationRenderer(320, 240, grid=2)
    >>> sink = AnimatedGifSink("animation.gif", fps=10)
    >>> renderer.render_animation(length=2, fps=10, sink=sink)
    >>> sink.save()
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

if TYPE_CHECKING:
    from src.blurtrace.core.animation import AnimationRenderer

logger = logging.getLogger(__name__)


def display_to_uint8(image: npt.NDArray[np.integer]) -> npt.NDArray[np.uint8]:
    """Clip display channels into 0..255 and convert to uint8.

    Args:
        image: Display image array of shape (H, W, 3).

    Returns:
        8-bit image array of shape (H, W, 3) with dtype uint8.
    """
    return np.clip(image, 0, 255).astype(np.uint8)


def save_png(renderer: AnimationRenderer, filepath: str | Path) -> None:
    """Save the renderer's last frame as a PNG file.

    Args:
        renderer: The AnimationRenderer instance to save.
        filepath: Output file path (should end in .png).
    """
    save_png_from_array(renderer.get_display_image(), filepath)


def save_png_from_array(image: npt.NDArray[np.integer], filepath: str | Path) -> None:
    """Save a display image array as a PNG file.

    Args:
        image: Display image array of shape (H, W, 3), channels 0..255.
        filepath: Output file path (should end in .png).
    """
    pil_image = PILImage.fromarray(display_to_uint8(image))
    pil_image.save(filepath)


class PngSequenceSink:
    """Frame sink writing each frame to its own numbered PNG file.

    Files are named ``{prefix}_{index:0{digits}d}.png`` inside the output
    directory, which is created if missing.

    Attributes:
        directory: Output directory.
        paths: Paths written so far, in frame order.
    """

    def __init__(self, directory: str | Path, prefix: str = "frame", digits: int = 4) -> None:
        self.directory = Path(directory)
        self.prefix = prefix
        self.digits = digits
        self.paths: list[Path] = []
        self.directory.mkdir(parents=True, exist_ok=True)

    def frame_path(self, frame_index: int) -> Path:
        """Path of the file for a given frame index."""
        return self.directory / f"{self.prefix}_{frame_index:0{self.digits}d}.png"

    def __call__(self, frame_index: int, image: npt.NDArray[np.integer]) -> None:
        path = self.frame_path(frame_index)
        save_png_from_array(image, path)
        self.paths.append(path)
        logger.debug("Wrote %s", path)


class AnimatedGifSink:
    """Frame sink collecting frames into one looping animated GIF.

    Frames are kept in memory until save() is called.

    Attributes:
        filepath: Output file path (should end in .gif).
        fps: Playback rate in frames per second.
        frames: Collected frames as Pillow images.
    """

    def __init__(self, filepath: str | Path, fps: int = 10) -> None:
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.filepath = Path(filepath)
        self.fps = fps
        self.frames: list[PILImage.Image] = []

    def __call__(self, frame_index: int, image: npt.NDArray[np.integer]) -> None:
        self.frames.append(PILImage.fromarray(display_to_uint8(image)))

    def save(self) -> Path:
        """Write the collected frames to the GIF file.

        Returns:
            The path written.

        Raises:
            RuntimeError: If no frames were collected.
        """
        if not self.frames:
            raise RuntimeError("No frames to save")

        first, *rest = self.frames
        first.save(
            self.filepath,
            save_all=True,
            append_images=rest,
            duration=int(round(1000 / self.fps)),
            loop=0,
        )
        logger.info("Saved %d frames to %s", len(self.frames), self.filepath)
        return self.filepath
