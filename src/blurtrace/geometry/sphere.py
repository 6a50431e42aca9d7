"""Sphere primitives: static spheres and spheres oscillating over time.

Both variants share one intersection routine parameterized by the center to
test against; the moving sphere only differs in how that center is derived
from the time value.

The intersection is the classic geometric ray-sphere test. With
``eo = center - origin`` and ``v = dot(eo, direction)``:

    - v < 0: the center lies behind the ray origin, no hit.
    - disc = radius^2 - (dot(eo, eo) - v^2) < 0: the ray misses, no hit.
    - otherwise the near root ``v - sqrt(disc)`` is the hit distance.

A computed distance of exactly zero is reported as a miss. Only the near root
is ever returned, so a ray starting inside a sphere gets a negative distance
that the scene-level nearest-hit scan discards.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.blurtrace.geometry.sphere import hit_sphere, vec3
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.blurtrace.core.ray import dot, normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Moving spheres swing along x by AMPLITUDE * sin(angle)^3 where
# angle = ANGULAR_RATE * (PHASE_TIME - time).
OSCILLATION_AMPLITUDE = 2.0
OSCILLATION_ANGULAR_RATE = tm.pi / 10.0
OSCILLATION_PHASE_TIME = 20.0


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: 1 if the ray intersected the primitive, 0 otherwise.
        dist: Distance along the ray to the intersection. Only valid if
            hit == 1. May be negative for the near root of a sphere the ray
            starts inside, or for a plane behind the ray origin.
    """

    hit: ti.i32
    dist: ti.f32


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    center: vec3,
    radius2: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection against the near root only.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        center: The sphere center (already resolved for the current time).
        radius2: The squared sphere radius.

    Returns:
        A HitRecord; hit is 0 when the ray misses or the distance is zero.
    """
    eo = center - ray_origin
    v = dot(eo, ray_direction)
    dist = 0.0
    if v >= 0.0:
        disc = radius2 - (dot(eo, eo) - v * v)
        if disc >= 0.0:
            dist = v - ti.sqrt(disc)

    did_hit = 0
    if dist != 0.0:
        did_hit = 1
    return HitRecord(hit=did_hit, dist=dist)


@ti.func
def moving_sphere_center(center: vec3, time: ti.f32) -> vec3:
    """Resolve a moving sphere's center at a given time.

    Only x moves: ``x + sin(pi/10 * (20 - time))^3 * 2``. The same time value
    must be used for the intersection and for the normal at that hit.

    Args:
        center: The rest center of the sphere.
        time: The animation time (frame index, possibly fractional).

    Returns:
        The effective center at that time.
    """
    angle = OSCILLATION_ANGULAR_RATE * (OSCILLATION_PHASE_TIME - time)
    s = ti.sin(angle)
    return vec3(center.x + s * s * s * OSCILLATION_AMPLITUDE, center.y, center.z)


@ti.func
def sphere_normal(center: vec3, pos: vec3) -> vec3:
    """Outward unit normal of a sphere at a surface point."""
    return normalize(pos - center)
