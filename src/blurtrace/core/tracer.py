"""Whitted-style shading: direct lighting, hard shadows and mirror reflection.

The color seen along a ray is defined recursively:

    trace(ray, depth) = BACKGROUND                       if the ray hits nothing
                        shade(hit, depth)                otherwise

    shade(hit, depth) = BACKGROUND + natural(hit)
                        + GREY                           if depth >= MAX_DEPTH
                        + reflect(pos) * trace(mirror ray, depth + 1)   otherwise

Kernels cannot recurse, so trace_ray() walks the mirror path in a loop and
carries the product of the reflectivities seen so far. Expanding the
recursion gives the same sum:

    n0 + r0 * (n1 + r1 * (n2 + ... + GREY))

The depth cap bounds the work per ray to MAX_DEPTH + 1 nearest-hit scans plus
one shadow scan per light at every step.

Shadow and reflection rays start exactly at the hit point with no offset, so
floating-point self-hits on curved surfaces are possible and are accepted.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.blurtrace.core.tracer import trace
    >>> trace((0.0, 1.0, -5.0), (0.0, 0.0, 1.0))  # empty scene
    (0.0, 0.0, 0.0)
"""

import taichi as ti
import taichi.math as tm

from src.blurtrace.core.color import BACKGROUND, DEFAULT_COLOR, GREY
from src.blurtrace.core.ray import Ray, dot, length, make_ray, normalize, reflect
from src.blurtrace.materials.surface import (
    surface_diffuse,
    surface_reflect,
    surface_roughness,
    surface_specular,
)
from src.blurtrace.scene.intersection import (
    nearest_hit,
    probe_ray,
    thing_normal,
    thing_surface,
)
from src.blurtrace.scene.lights import light_colors, light_positions, num_lights

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Reflection depth at which the mirror bounce is replaced by flat GREY
MAX_DEPTH = 5


@ti.dataclass
class PathResult:
    """Outcome of tracing a ray and its mirror reflections.

    Attributes:
        color: The unclamped color seen along the ray.
        reflections: Number of mirror rays traced after the first hit.
    """

    color: vec3
    reflections: ti.i32


# =============================================================================
# Direct Lighting
# =============================================================================


@ti.func
def natural_color(
    surface_id: ti.i32,
    pos: vec3,
    normal: vec3,
    reflect_dir: vec3,
    time: ti.f32,
) -> vec3:
    """Sum the diffuse and specular contribution of every light at a point.

    A light contributes nothing when the nearest hit along the ray towards it
    is no farther than the light itself. Otherwise it adds

        diffuse(pos)  * max(dot(L, N), 0) * light.color
        specular(pos) * max(dot(L, norm(R)), 0)^roughness * light.color

    where L is the unit vector to the light, N the surface normal and R the
    mirror-reflection direction.

    Args:
        surface_id: Surface of the thing being shaded.
        pos: The hit position.
        normal: The unit surface normal at pos.
        reflect_dir: The mirror-reflection direction at pos.
        time: The time used for shadow-ray intersections.

    Returns:
        The accumulated light color.
    """
    color = DEFAULT_COLOR
    roughness = surface_roughness(surface_id)

    for i in range(num_lights[None]):
        ldis = light_positions[i] - pos
        livec = normalize(ldis)

        in_shadow = 0
        blocker = probe_ray(pos, livec, time)
        if blocker.hit == 1:
            if blocker.dist <= length(ldis):
                in_shadow = 1

        if in_shadow == 0:
            illum = dot(livec, normal)
            lcolor = DEFAULT_COLOR
            if illum > 0.0:
                lcolor = illum * light_colors[i]

            specular = dot(livec, normalize(reflect_dir))
            scolor = DEFAULT_COLOR
            if specular > 0.0:
                scolor = (specular**roughness) * light_colors[i]

            color += surface_diffuse(surface_id, pos) * lcolor + surface_specular(
                surface_id, pos
            ) * scolor

    return color


# =============================================================================
# Ray Tracing Core
# =============================================================================


@ti.func
def trace_path(ray: Ray, depth: ti.i32, time: ti.f32) -> PathResult:
    """Trace a ray and its chain of mirror reflections.

    Args:
        ray: The ray to trace.
        depth: Reflection depth of the ray (0 for camera rays).
        time: The time at which the scene is evaluated.

    Returns:
        A PathResult with the color and the reflection count.
    """
    origin = ray.origin
    direction = ray.direction
    current_depth = depth

    color = vec3(0.0, 0.0, 0.0)
    # Product of the reflectivities along the mirror path so far
    weight = 1.0
    reflections = 0

    # Active flag for path continuation (Taichi doesn't support break in ti.func loops)
    active = 1

    for _ in range(MAX_DEPTH + 1):
        if active == 1:
            isect = nearest_hit(origin, direction, time)

            if isect.hit == 0:
                color += weight * BACKGROUND
                active = 0
            else:
                pos = isect.origin + isect.dist * isect.direction
                normal = thing_normal(isect.thing, pos, time)
                reflect_dir = reflect(isect.direction, normal)
                surface_id = thing_surface(isect.thing)

                color += weight * (
                    BACKGROUND + natural_color(surface_id, pos, normal, reflect_dir, time)
                )

                if current_depth >= MAX_DEPTH:
                    color += weight * GREY
                    active = 0
                else:
                    weight *= surface_reflect(surface_id, pos)
                    origin = pos
                    direction = reflect_dir
                    current_depth += 1
                    reflections += 1

    return PathResult(color=color, reflections=reflections)


@ti.func
def trace_ray(ray: Ray, depth: ti.i32, time: ti.f32) -> vec3:
    """Color seen along a ray.

    Args:
        ray: The ray to trace.
        depth: Reflection depth of the ray (0 for camera rays).
        time: The time at which the scene is evaluated.

    Returns:
        The unclamped color; BACKGROUND if the ray hits nothing.
    """
    return trace_path(ray, depth, time).color


# =============================================================================
# Python-callable Tracing
# =============================================================================


_trace_color = ti.Vector.field(3, dtype=ti.f32, shape=())
_trace_reflections = ti.field(dtype=ti.i32, shape=())


@ti.kernel
def _trace_single(origin: vec3, direction: vec3, depth: ti.i32, time: ti.f32):
    # Single-iteration outer loop so the loops inside trace_path stay serial
    for _ in range(1):
        result = trace_path(make_ray(origin, direction), depth, time)
        _trace_color[None] = result.color
        _trace_reflections[None] = result.reflections


def trace(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
    time: float = 0.0,
) -> tuple[float, float, float]:
    """Trace a single ray from Python.

    This is a Python-callable function for testing and debugging. For
    production rendering, use the sampler which traces all pixels in parallel.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Unit ray direction as (x, y, z).
        depth: Starting reflection depth (0 for camera rays).
        time: The time at which the scene is evaluated.

    Returns:
        Tuple of (R, G, B) color values.
    """
    _trace_single(vec3(*origin), vec3(*direction), depth, time)
    color = _trace_color[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def count_reflections(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    depth: int = 0,
    time: float = 0.0,
) -> int:
    """Count the mirror rays traced for a ray, for inspecting the depth cap.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Unit ray direction as (x, y, z).
        depth: Starting reflection depth (0 for camera rays).
        time: The time at which the scene is evaluated.

    Returns:
        The number of reflection rays traced.
    """
    _trace_single(vec3(*origin), vec3(*direction), depth, time)
    return int(_trace_reflections[None])
