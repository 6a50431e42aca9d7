"""Ray data structure and vector utilities for Whitted-style ray tracing.

This module provides the Ray dataclass and the small set of vector operations
the tracer needs. Vectors are ``ti.math.vec3`` values, so scaling, addition and
subtraction are the native operators; the functions below cover the rest.

Zero-length vectors follow a fixed policy: ``normalize`` of the zero vector
returns a vector with infinite components instead of raising or returning
zero. Callers that can produce a zero vector (a degenerate camera, a light
placed exactly on a surface) inherit that result.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin point and a unit direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3). Camera, reflection and
            shadow rays are always built from normalized directions.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at distance t.

    Args:
        ray: The ray to evaluate.
        t: The distance along the ray.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the length (magnitude) of a vector."""
    return ti.sqrt(dot(v, v))


@ti.func
def cross(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return vec3(
        a.y * b.z - a.z * b.y,
        a.z * b.x - a.x * b.z,
        a.x * b.y - a.y * b.x,
    )


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v. The zero vector has an
        infinite reciprocal magnitude, so it maps to (inf, inf, inf).
    """
    mag = length(v)
    result = vec3(tm.inf, tm.inf, tm.inf)
    if mag != 0.0:
        result = v * (1.0 / mag)
    return result


@ti.func
def reflect(direction: vec3, normal: vec3) -> vec3:
    """Mirror a direction about a surface normal.

    Computes d - 2 * dot(n, d) * n. The normal must be unit length.

    Args:
        direction: The incoming ray direction.
        normal: The unit surface normal at the hit point.

    Returns:
        The mirror-reflection direction.
    """
    return direction - 2.0 * dot(normal, direction) * normal
