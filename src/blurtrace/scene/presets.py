"""Preset demo scenes.

Two scenes share the same ingredients: a checkerboard floor in the y = 0
plane, polished white spheres and a handful of weak coloured point lights
whose contributions add up where they overlap.

default
    One moving sphere swinging along x behind a small static sphere, four
    lights (red, blue, green and a dim bluish-white overhead light), viewed
    from (3, 2, 4).

twin_spheres
    Two moving spheres side by side, three lights (blue, green, red), viewed
    almost straight down from (1, 6, 0) with a short focal distance.

Each factory clears the scene registries, builds the scene and sets its
camera, so the result is ready to render.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.blurtrace.scene.presets import create_default_scene
    >>> scene = create_default_scene()
    >>> scene.get_thing_count()
    3
"""

import logging
from collections.abc import Callable

from src.blurtrace.camera.camera import Camera
from src.blurtrace.scene.manager import SceneManager

logger = logging.getLogger(__name__)

# =============================================================================
# Default Scene
# =============================================================================

DEFAULT_LIGHTS = (
    ((-2.0, 2.5, 0.0), (0.49, 0.07, 0.07)),
    ((1.5, 2.5, 1.5), (0.07, 0.07, 0.49)),
    ((1.5, 2.5, -1.5), (0.07, 0.49, 0.071)),
    ((0.0, 3.5, 0.0), (0.21, 0.21, 0.35)),
)

DEFAULT_CAMERA = Camera(
    pos=(3.0, 2.0, 4.0),
    look_at=(-1.0, 0.5, 0.0),
    distance=2.5,
    hsize=4.0,
    vsize=3.0,
)

# =============================================================================
# Twin Spheres Scene
# =============================================================================

TWIN_SPHERES_LIGHTS = (
    ((-2.0, 2.5, 0.0), (0.0, 0.0, 0.4)),
    ((1.5, 2.5, 1.5), (0.0, 0.4, 0.0)),
    ((1.5, 2.5, -1.5), (0.4, 0.0, 0.0)),
)

TWIN_SPHERES_CAMERA = Camera(
    pos=(1.0, 6.0, 0.0),
    look_at=(0.1, 1.0, 0.0),
    distance=0.5,
    hsize=4.0,
    vsize=3.0,
)


def _add_floor(scene: SceneManager) -> int:
    """Add the checkerboard floor plane and return the shiny surface ID."""
    checkerboard = scene.add_checkerboard_surface()
    shiny = scene.add_shiny_surface()
    scene.add_plane(normal=(0.0, 1.0, 0.0), offset=0.0, surface_id=checkerboard)
    return shiny


def create_default_scene() -> SceneManager:
    """Create the default scene with one moving and one static sphere.

    Returns:
        The populated SceneManager with its camera set.
    """
    scene = SceneManager()
    shiny = _add_floor(scene)
    scene.add_moving_sphere(center=(0.0, 1.0, -0.25), radius=1.0, surface_id=shiny)
    scene.add_sphere(center=(-1.0, 0.5, 1.5), radius=0.5, surface_id=shiny)

    for position, color in DEFAULT_LIGHTS:
        scene.add_light(position, color)

    scene.set_camera(DEFAULT_CAMERA)
    logger.info(
        "Built default scene: %d things, %d lights",
        scene.get_thing_count(),
        scene.get_light_count(),
    )
    return scene


def create_twin_spheres_scene() -> SceneManager:
    """Create the scene with two moving spheres seen from above.

    Returns:
        The populated SceneManager with its camera set.
    """
    scene = SceneManager()
    shiny = _add_floor(scene)
    scene.add_moving_sphere(center=(1.0, 1.0, -1.0), radius=1.0, surface_id=shiny)
    scene.add_moving_sphere(center=(1.0, 1.0, 1.0), radius=1.0, surface_id=shiny)

    for position, color in TWIN_SPHERES_LIGHTS:
        scene.add_light(position, color)

    scene.set_camera(TWIN_SPHERES_CAMERA)
    logger.info(
        "Built twin spheres scene: %d things, %d lights",
        scene.get_thing_count(),
        scene.get_light_count(),
    )
    return scene


# Scene factories by name, for command-line selection
PRESETS: dict[str, Callable[[], SceneManager]] = {
    "default": create_default_scene,
    "twin_spheres": create_twin_spheres_scene,
}


def create_preset_scene(name: str) -> SceneManager:
    """Create a preset scene by name.

    Args:
        name: One of the keys of PRESETS.

    Returns:
        The populated SceneManager with its camera set.

    Raises:
        ValueError: If no preset has that name.
    """
    try:
        factory = PRESETS[name]
    except KeyError:
        raise ValueError(
            f"Unknown scene preset: {name!r} (choose from {', '.join(sorted(PRESETS))})"
        ) from None
    return factory()
