"""Preview module for rendered output.

Components:
    export: PNG and animated GIF export, and frame sinks for animations

Example:
    >>> from src.blurtrace.preview import PngSequenceSink
    >>> from src.blurtrace.core.animation import AnimationRenderer
    >>>
    >>> renderer = AnimationRenderer(320, 240, grid=2)
    >>> renderer.render_animation(length=1, fps=10, sink=PngSequenceSink("frames"))
"""

from src.blurtrace.preview.export import (
    AnimatedGifSink,
    PngSequenceSink,
    display_to_uint8,
    save_png,
    save_png_from_array,
)

__all__ = [
    "AnimatedGifSink",
    "PngSequenceSink",
    "display_to_uint8",
    "save_png",
    "save_png_from_array",
]
