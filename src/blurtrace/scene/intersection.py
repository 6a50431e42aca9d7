"""Scene-level primitive storage and nearest-hit queries.

This module stores every primitive ("thing") of the scene in Taichi fields and
provides the intersection engine: a linear scan over all things that keeps the
closest positive hit distance.

Things are a tagged variant. Each slot carries a ThingKind plus the parameters
its kind reads:

    SPHERE          center, radius^2
    MOVING_SPHERE   rest center, radius^2 (center resolved per time value)
    PLANE           unit normal, signed offset

and the index of the surface used to shade it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.blurtrace.scene.intersection import add_plane, add_sphere, clear_scene
    >>> clear_scene()
    >>> add_plane(vec3(0, 1, 0), 0.0, surface_id=0)
    >>> add_sphere(vec3(0, 1, 0), 1.0, surface_id=1)
    >>> # Use nearest_hit within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

from src.blurtrace.geometry.plane import hit_plane
from src.blurtrace.geometry.sphere import (
    HitRecord,
    hit_sphere,
    moving_sphere_center,
    sphere_normal,
)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


class ThingKind(IntEnum):
    """Enumeration of primitive kinds, used for dispatch in kernels."""

    SPHERE = 0
    MOVING_SPHERE = 1
    PLANE = 2


@ti.dataclass
class Intersection:
    """Record of the nearest ray-scene intersection.

    Attributes:
        hit: 1 if any thing was hit, 0 otherwise.
        thing: Index of the hit thing. Only valid if hit == 1.
        origin: Origin of the ray that produced the hit.
        direction: Direction of the ray that produced the hit.
        dist: Distance along the ray to the hit. Only valid if hit == 1.
    """

    hit: ti.i32
    thing: ti.i32
    origin: vec3
    direction: vec3
    dist: ti.f32


# Maximum number of things supported in the scene
MAX_THINGS = 256

# Thing storage: Structure of Arrays layout
thing_kinds = ti.field(dtype=ti.i32, shape=MAX_THINGS)
thing_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_THINGS)
thing_radii2 = ti.field(dtype=ti.f32, shape=MAX_THINGS)
thing_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_THINGS)
thing_offsets = ti.field(dtype=ti.f32, shape=MAX_THINGS)
thing_surface_ids = ti.field(dtype=ti.i32, shape=MAX_THINGS)
num_things = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Clear all things from the scene.

    Resets the thing count to zero. The field data is overwritten when new
    things are added.
    """
    num_things[None] = 0


def get_thing_count() -> int:
    """Get the number of things in the scene."""
    return int(num_things[None])


def _next_thing_index() -> int:
    idx = num_things[None]
    if idx >= MAX_THINGS:
        raise RuntimeError(f"Maximum number of things ({MAX_THINGS}) exceeded")
    return idx


def _add_sphere_kind(kind: ThingKind, center: vec3, radius: float, surface_id: int) -> int:
    idx = _next_thing_index()
    thing_kinds[idx] = int(kind)
    thing_centers[idx] = center
    thing_radii2[idx] = radius * radius
    thing_surface_ids[idx] = surface_id
    num_things[None] = idx + 1
    return idx


def add_sphere(center: vec3, radius: float, surface_id: int = 0) -> int:
    """Add a static sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere.
        surface_id: The surface used to shade the sphere.

    Returns:
        The index of the added thing.

    Raises:
        RuntimeError: If the maximum number of things is exceeded.
    """
    return _add_sphere_kind(ThingKind.SPHERE, center, radius, surface_id)


def add_moving_sphere(center: vec3, radius: float, surface_id: int = 0) -> int:
    """Add a sphere whose center oscillates along x over time.

    Args:
        center: The rest center of the sphere.
        radius: The radius of the sphere.
        surface_id: The surface used to shade the sphere.

    Returns:
        The index of the added thing.

    Raises:
        RuntimeError: If the maximum number of things is exceeded.
    """
    return _add_sphere_kind(ThingKind.MOVING_SPHERE, center, radius, surface_id)


def add_plane(normal: vec3, offset: float, surface_id: int = 0) -> int:
    """Add an infinite plane to the scene.

    Args:
        normal: The unit normal of the plane.
        offset: The signed offset of the plane from the origin.
        surface_id: The surface used to shade the plane.

    Returns:
        The index of the added thing.

    Raises:
        RuntimeError: If the maximum number of things is exceeded.
    """
    idx = _next_thing_index()
    thing_kinds[idx] = int(ThingKind.PLANE)
    thing_normals[idx] = normal
    thing_offsets[idx] = offset
    thing_surface_ids[idx] = surface_id
    num_things[None] = idx + 1
    return idx


# =============================================================================
# Per-thing Queries
# =============================================================================


@ti.func
def thing_center(i: ti.i32, time: ti.f32) -> vec3:
    """Center of a sphere-like thing at the given time."""
    center = thing_centers[i]
    if thing_kinds[i] == int(ThingKind.MOVING_SPHERE):
        center = moving_sphere_center(center, time)
    return center


@ti.func
def intersect_thing(i: ti.i32, ray_origin: vec3, ray_direction: vec3, time: ti.f32) -> HitRecord:
    """Intersect a ray with thing i at the given time."""
    result = HitRecord(hit=0, dist=0.0)
    if thing_kinds[i] == int(ThingKind.PLANE):
        result = hit_plane(ray_origin, ray_direction, thing_normals[i], thing_offsets[i])
    else:
        result = hit_sphere(ray_origin, ray_direction, thing_center(i, time), thing_radii2[i])
    return result


@ti.func
def thing_normal(i: ti.i32, pos: vec3, time: ti.f32) -> vec3:
    """Unit surface normal of thing i at a surface point and time."""
    normal = thing_normals[i]
    if thing_kinds[i] != int(ThingKind.PLANE):
        normal = sphere_normal(thing_center(i, time), pos)
    return normal


@ti.func
def thing_surface(i: ti.i32) -> ti.i32:
    """Surface index of thing i."""
    return thing_surface_ids[i]


# =============================================================================
# Scene Queries
# =============================================================================


@ti.func
def nearest_hit(ray_origin: vec3, ray_direction: vec3, time: ti.f32) -> Intersection:
    """Find the closest thing hit by a ray.

    Scans every thing in insertion order and keeps the smallest positive
    distance strictly below the best found so far, starting from +infinity.
    Equal distances keep the earlier thing.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        time: The time at which moving things are evaluated.

    Returns:
        The nearest Intersection, with hit == 0 if nothing was hit.
    """
    closest = tm.inf
    result = Intersection(
        hit=0,
        thing=-1,
        origin=ray_origin,
        direction=ray_direction,
        dist=0.0,
    )

    for i in range(num_things[None]):
        rec = intersect_thing(i, ray_origin, ray_direction, time)
        if rec.hit == 1 and rec.dist > 0.0 and rec.dist < closest:
            closest = rec.dist
            result.hit = 1
            result.thing = i
            result.dist = rec.dist

    return result


@ti.func
def probe_ray(ray_origin: vec3, ray_direction: vec3, time: ti.f32) -> HitRecord:
    """Distance to the nearest hit along a ray (shadow ray query).

    Returns:
        A HitRecord with the nearest distance, hit == 0 if nothing was hit.
    """
    isect = nearest_hit(ray_origin, ray_direction, time)
    return HitRecord(hit=isect.hit, dist=isect.dist)


# =============================================================================
# Python-callable Queries
# =============================================================================

_query_hit = ti.field(dtype=ti.i32, shape=())
_query_thing = ti.field(dtype=ti.i32, shape=())
_query_dist = ti.field(dtype=ti.f32, shape=())


@ti.kernel
def _nearest_hit_kernel(ray_origin: vec3, ray_direction: vec3, time: ti.f32):
    # Single-iteration outer loop so the scan over things stays serial
    for _ in range(1):
        isect = nearest_hit(ray_origin, ray_direction, time)
        _query_hit[None] = isect.hit
        _query_thing[None] = isect.thing
        _query_dist[None] = isect.dist


def find_nearest_hit(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    time: float = 0.0,
) -> tuple[int, float] | None:
    """Find the nearest thing along a ray from Python.

    This is a Python-callable wrapper for testing and debugging. Rendering
    uses nearest_hit() directly inside kernels.

    Args:
        origin: Ray origin as (x, y, z).
        direction: Unit ray direction as (x, y, z).
        time: The time at which moving things are evaluated.

    Returns:
        Tuple of (thing_index, distance), or None if the ray hits nothing.
    """
    _nearest_hit_kernel(vec3(*origin), vec3(*direction), time)
    if _query_hit[None] == 0:
        return None
    return int(_query_thing[None]), float(_query_dist[None])


_query_normal = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _thing_normal_kernel(i: ti.i32, pos: vec3, time: ti.f32):
    _query_normal[None] = thing_normal(i, pos, time)


def get_thing_normal(
    thing_index: int,
    pos: tuple[float, float, float],
    time: float = 0.0,
) -> tuple[float, float, float]:
    """Surface normal of a thing at a point from Python.

    Args:
        thing_index: Index returned when the thing was added.
        pos: A point on the thing's surface.
        time: The time at which moving things are evaluated.

    Returns:
        The unit normal as (x, y, z).

    Raises:
        ValueError: If thing_index does not name a thing in the scene.
    """
    if thing_index < 0 or thing_index >= num_things[None]:
        raise ValueError(f"Invalid thing index: {thing_index}")
    _thing_normal_kernel(thing_index, vec3(*pos), time)
    normal = _query_normal[None]
    return (float(normal[0]), float(normal[1]), float(normal[2]))
