"""Point light storage.

Lights are points with a color. There is no falloff with distance and no area
component, so every light casts hard shadows.
"""

import taichi as ti
import taichi.math as tm

vec3 = tm.vec3

MAX_LIGHTS = 32

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights."""
    num_lights[None] = 0


def add_light(position: vec3, color: vec3) -> int:
    """Add a point light.

    Args:
        position: World-space position of the light.
        color: RGB color (intensity) of the light.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
    """
    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")
    light_positions[idx] = position
    light_colors[idx] = color
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])
