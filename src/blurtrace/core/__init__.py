"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector utilities
    color: Color constants and display conversion
    tracer: Direct lighting, shadows and the reflection loop
    sampler: Supersampling driver and render target buffers
    animation: Row-by-row frame rendering and animation playback

All per-ray work runs in Taichi functions and kernels; scene data is read
from Taichi fields filled on the Python side.
"""

from .color import (
    BACKGROUND,
    BLACK,
    DEFAULT_COLOR,
    GREY,
    WHITE,
    legalize,
    to_drawing_color,
)
from .ray import (
    Ray,
    cross,
    dot,
    length,
    make_ray,
    normalize,
    ray_at,
    reflect,
    vec3,
)

# Note: tracer, sampler and animation are NOT imported here to avoid circular imports.
# Import directly from src.blurtrace.core.tracer (etc.) when needed.
#
# For animation rendering, use:
#   from src.blurtrace.core.animation import AnimationRenderer

__all__ = [
    "Ray",
    "ray_at",
    "make_ray",
    "vec3",
    "length",
    "normalize",
    "dot",
    "cross",
    "reflect",
    "WHITE",
    "GREY",
    "BLACK",
    "BACKGROUND",
    "DEFAULT_COLOR",
    "legalize",
    "to_drawing_color",
]
