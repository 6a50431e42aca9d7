"""Geometry module for shape primitives.

Components:
    sphere: Sphere intersection, surface normal and moving-sphere center
    plane: Infinite plane intersection

All intersection routines are Taichi functions (@ti.func) returning a
HitRecord with the hit flag and the distance along the ray.
"""

from .plane import hit_plane
from .sphere import HitRecord, hit_sphere, moving_sphere_center, sphere_normal

__all__ = [
    "HitRecord",
    "hit_sphere",
    "sphere_normal",
    "moving_sphere_center",
    "hit_plane",
]
