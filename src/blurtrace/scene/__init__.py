"""Scene module for scene storage and ray-scene queries.

Components:
    intersection: Thing storage and the nearest-hit engine
    lights: Point light storage
    manager: Scene builder coordinating things, surfaces, lights and camera
    presets: Ready-made demo scenes

Scene data is organized for efficient access from kernels:
    - Structure-of-Arrays layout for geometric data
    - A kind tag per thing for dispatch
    - Surface IDs referring into the surface registry
"""

from .intersection import (
    MAX_THINGS,
    Intersection,
    ThingKind,
    add_moving_sphere,
    add_plane,
    add_sphere,
    clear_scene,
    find_nearest_hit,
    get_thing_normal,
    get_thing_count,
    nearest_hit,
    probe_ray,
)
from .lights import MAX_LIGHTS, add_light, clear_lights, get_light_count
from .manager import LightInfo, SceneManager, SurfaceInfo, ThingInfo
from .presets import (
    PRESETS,
    create_default_scene,
    create_preset_scene,
    create_twin_spheres_scene,
)

__all__ = [
    # Intersection module
    "Intersection",
    "ThingKind",
    "add_sphere",
    "add_moving_sphere",
    "add_plane",
    "clear_scene",
    "get_thing_count",
    "nearest_hit",
    "probe_ray",
    "find_nearest_hit",
    "get_thing_normal",
    "MAX_THINGS",
    # Lights module
    "add_light",
    "clear_lights",
    "get_light_count",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "SurfaceInfo",
    "ThingInfo",
    "LightInfo",
    # Presets module
    "PRESETS",
    "create_default_scene",
    "create_twin_spheres_scene",
    "create_preset_scene",
]
