"""Color constants and the display-conversion step.

Colors are ``ti.math.vec3`` triples (r, g, b) with an unbounded range while
shading: light contributions are simply added, so channels may exceed 1 or,
for unusual light colors, drop below 0. Scaling, addition and component-wise
multiplication are the native vec3 operators.

Only at display conversion are channels legalized: each channel is clamped to
at most 1 (there is no lower clamp), scaled by 255 and floored to an integer.
"""

import taichi as ti
import taichi.math as tm

# Type alias for RGB colors (same layout as vectors)
color3 = tm.vec3

WHITE = color3(1.0, 1.0, 1.0)
GREY = color3(0.5, 0.5, 0.5)
BLACK = color3(0.0, 0.0, 0.0)

# Returned for rays that escape the scene
BACKGROUND = BLACK

# Contribution of a light that does not reach a point
DEFAULT_COLOR = BLACK

# Largest integer channel value after display conversion
CHANNEL_MAX = 255


@ti.func
def legalize(c: color3) -> color3:
    """Clamp each channel to at most 1.0, leaving negative values untouched."""
    return ti.min(c, 1.0)


@ti.func
def to_drawing_color(c: color3) -> tm.ivec3:
    """Convert a shading color to integer display channels.

    Args:
        c: The averaged pixel color.

    Returns:
        floor(min(c, 1) * 255) per channel as an integer vector.
    """
    return ti.cast(ti.floor(legalize(c) * CHANNEL_MAX), ti.i32)
