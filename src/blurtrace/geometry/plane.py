"""Infinite plane primitive.

A plane is given by a unit normal and a signed offset: points p on the plane
satisfy ``dot(normal, p) + offset = 0``. The plane is one-sided for
intersection purposes; rays travelling along the normal's side never hit it.
Planes do not move, so time plays no part here.
"""

import taichi as ti
import taichi.math as tm

from src.blurtrace.core.ray import dot
from src.blurtrace.geometry.sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    normal: vec3,
    offset: ti.f32,
) -> HitRecord:
    """Test for ray-plane intersection.

    If ``dot(normal, direction) > 0`` the ray moves away from the facing side
    and there is no hit. Otherwise the distance is
    ``(dot(normal, origin) + offset) / -dot(normal, direction)``. A ray lying
    parallel to the plane divides by zero and yields an infinite (or NaN)
    distance, which the nearest-hit scan never accepts.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        normal: The unit plane normal.
        offset: The signed plane offset from the origin.

    Returns:
        A HitRecord with the distance along the ray.
    """
    denom = dot(normal, ray_direction)
    did_hit = 0
    dist = 0.0
    if denom <= 0.0:
        did_hit = 1
        dist = (dot(normal, ray_origin) + offset) / (-denom)
    return HitRecord(hit=did_hit, dist=dist)
