"""Unified scene manager for coordinating things, surfaces, lights and camera.

This module provides a high-level scene management API on top of the Taichi
registries that the tracer reads. Surfaces are registered first and referred
to by their index when things are added, so a scene is built in the order

    surfaces -> things -> lights -> camera

The SceneManager maintains:
- Python-side records of everything that was added (the *Info dataclasses)
- Validation of surface references before they reach the Taichi fields
- Convenience methods for the built-in surfaces

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.blurtrace.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> floor = scene.add_checkerboard_surface()
    >>> shiny = scene.add_shiny_surface()
    >>> scene.add_plane(normal=(0, 1, 0), offset=0.0, surface_id=floor)
    >>> scene.add_sphere(center=(0, 1, 0), radius=1.0, surface_id=shiny)
    >>> scene.add_light(position=(0, 3.5, 0), color=(0.21, 0.21, 0.35))
"""

import logging
from dataclasses import dataclass
from typing import Any

import taichi.math as tm

from src.blurtrace.camera.camera import Camera, setup_camera
from src.blurtrace.materials.surface import (
    CHECKER_EVEN_DIFFUSE,
    CHECKER_EVEN_REFLECT,
    CHECKER_ODD_DIFFUSE,
    CHECKER_ODD_REFLECT,
    CHECKER_ROUGHNESS,
    CHECKER_SPECULAR,
    MAX_SURFACES,
    SHINY_DIFFUSE,
    SHINY_REFLECT,
    SHINY_ROUGHNESS,
    SHINY_SPECULAR,
    SurfaceKind,
    add_checkerboard_surface,
    add_uniform_surface,
    clear_surfaces,
    get_surface_count,
)
from src.blurtrace.scene.intersection import (
    MAX_THINGS,
    ThingKind,
    add_moving_sphere,
    add_plane,
    add_sphere,
    clear_scene,
    get_thing_count,
)
from src.blurtrace.scene.lights import MAX_LIGHTS, add_light, clear_lights, get_light_count

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3


@dataclass
class SurfaceInfo:
    """Information about a registered surface.

    Attributes:
        surface_id: The index of the surface in the registry.
        kind: UNIFORM or CHECKERBOARD.
        params: The surface parameters as provided during creation.
    """

    surface_id: int
    kind: SurfaceKind
    params: dict[str, Any]


@dataclass
class ThingInfo:
    """Information about a thing (primitive) in the scene.

    Attributes:
        thing_index: The index in the thing storage arrays.
        kind: SPHERE, MOVING_SPHERE or PLANE.
        params: The geometric parameters (center/radius or normal/offset).
        surface_id: The surface assigned to the thing.
    """

    thing_index: int
    kind: ThingKind
    params: dict[str, Any]
    surface_id: int


@dataclass
class LightInfo:
    """Information about a point light in the scene.

    Attributes:
        light_index: The index in the light storage arrays.
        position: World-space position of the light.
        color: RGB color of the light.
    """

    light_index: int
    position: tuple[float, float, float]
    color: tuple[float, float, float]


class SceneManager:
    """Scene builder coordinating things, surfaces, lights and the camera.

    The tracer reads global Taichi registries, so only one scene is live at a
    time. Creating a SceneManager clears those registries.

    Attributes:
        surfaces: List of SurfaceInfo for all registered surfaces.
        things: List of ThingInfo for all things in the scene.
        lights: List of LightInfo for all lights in the scene.
        camera: The camera set with set_camera(), or None.

    Example:
        >>> scene = SceneManager()
        >>> mirror = scene.add_uniform_surface((0, 0, 0), (0, 0, 0), 1.0, 1.0)
        >>> scene.add_plane((0, 1, 0), 0.0, mirror)
        >>> scene.add_plane((0, -1, 0), 2.0, mirror)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.surfaces: list[SurfaceInfo] = []
        self.things: list[ThingInfo] = []
        self.lights: list[LightInfo] = []
        self.camera: Camera | None = None
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_surfaces()
        clear_lights()
        self.surfaces.clear()
        self.things.clear()
        self.lights.clear()
        self.camera = None

    def clear(self) -> None:
        """Clear the entire scene (things, surfaces, lights and camera)."""
        self._clear_all()
        logger.debug("Scene cleared")

    # =========================================================================
    # Surface Management
    # =========================================================================

    def add_uniform_surface(
        self,
        diffuse: tuple[float, float, float],
        specular: tuple[float, float, float],
        reflect: float,
        roughness: float,
    ) -> int:
        """Add a surface whose properties do not depend on position.

        Args:
            diffuse: Diffuse color as (R, G, B).
            specular: Specular color as (R, G, B).
            reflect: Reflectivity in [0, 1].
            roughness: Specular exponent (non-negative).

        Returns:
            The surface ID.

        Raises:
            RuntimeError: If the maximum number of surfaces is exceeded.
            ValueError: If reflect is outside [0, 1] or roughness is negative.
        """
        surface_id = add_uniform_surface(diffuse, specular, reflect, roughness)
        self.surfaces.append(
            SurfaceInfo(
                surface_id=surface_id,
                kind=SurfaceKind.UNIFORM,
                params={
                    "diffuse": diffuse,
                    "specular": specular,
                    "reflect": reflect,
                    "roughness": roughness,
                },
            )
        )
        logger.debug("Added uniform surface %d", surface_id)
        return surface_id

    def add_checkerboard_surface(
        self,
        odd_diffuse: tuple[float, float, float] = CHECKER_ODD_DIFFUSE,
        even_diffuse: tuple[float, float, float] = CHECKER_EVEN_DIFFUSE,
        specular: tuple[float, float, float] = CHECKER_SPECULAR,
        odd_reflect: float = CHECKER_ODD_REFLECT,
        even_reflect: float = CHECKER_EVEN_REFLECT,
        roughness: float = CHECKER_ROUGHNESS,
    ) -> int:
        """Add a checkerboard surface; the defaults give the classic floor.

        Args:
            odd_diffuse: Diffuse color where floor(x) + floor(z) is odd.
            even_diffuse: Diffuse color where floor(x) + floor(z) is even.
            specular: Specular color for every cell.
            odd_reflect: Reflectivity of odd cells, in [0, 1].
            even_reflect: Reflectivity of even cells, in [0, 1].
            roughness: Specular exponent (non-negative).

        Returns:
            The surface ID.

        Raises:
            RuntimeError: If the maximum number of surfaces is exceeded.
            ValueError: If a reflectivity is outside [0, 1] or roughness is negative.
        """
        surface_id = add_checkerboard_surface(
            odd_diffuse=odd_diffuse,
            even_diffuse=even_diffuse,
            specular=specular,
            odd_reflect=odd_reflect,
            even_reflect=even_reflect,
            roughness=roughness,
        )
        self.surfaces.append(
            SurfaceInfo(
                surface_id=surface_id,
                kind=SurfaceKind.CHECKERBOARD,
                params={
                    "odd_diffuse": odd_diffuse,
                    "even_diffuse": even_diffuse,
                    "specular": specular,
                    "odd_reflect": odd_reflect,
                    "even_reflect": even_reflect,
                    "roughness": roughness,
                },
            )
        )
        logger.debug("Added checkerboard surface %d", surface_id)
        return surface_id

    def add_shiny_surface(self) -> int:
        """Add the built-in polished white surface.

        Returns:
            The surface ID.
        """
        return self.add_uniform_surface(
            SHINY_DIFFUSE, SHINY_SPECULAR, SHINY_REFLECT, SHINY_ROUGHNESS
        )

    def get_surface_info(self, surface_id: int) -> SurfaceInfo | None:
        """Get information about a surface by ID.

        Args:
            surface_id: The surface ID.

        Returns:
            SurfaceInfo for the surface, or None if not found.
        """
        if 0 <= surface_id < len(self.surfaces):
            return self.surfaces[surface_id]
        return None

    def _check_surface_id(self, surface_id: int) -> None:
        if surface_id < 0 or surface_id >= get_surface_count():
            raise ValueError(f"Invalid surface_id: {surface_id}")

    # =========================================================================
    # Thing Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        surface_id: int,
    ) -> int:
        """Add a static sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere.
            surface_id: The surface ID to shade the sphere with.

        Returns:
            The index of the added thing.

        Raises:
            RuntimeError: If the maximum number of things is exceeded.
            ValueError: If surface_id is invalid.
        """
        self._check_surface_id(surface_id)
        thing_index = add_sphere(vec3(center[0], center[1], center[2]), radius, surface_id)
        self.things.append(
            ThingInfo(
                thing_index=thing_index,
                kind=ThingKind.SPHERE,
                params={"center": center, "radius": radius},
                surface_id=surface_id,
            )
        )
        logger.debug("Added sphere %d at %s (r=%s)", thing_index, center, radius)
        return thing_index

    def add_moving_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        surface_id: int,
    ) -> int:
        """Add a sphere that swings along x around its rest center over time.

        Args:
            center: The rest center of the sphere as (x, y, z).
            radius: The radius of the sphere.
            surface_id: The surface ID to shade the sphere with.

        Returns:
            The index of the added thing.

        Raises:
            RuntimeError: If the maximum number of things is exceeded.
            ValueError: If surface_id is invalid.
        """
        self._check_surface_id(surface_id)
        thing_index = add_moving_sphere(
            vec3(center[0], center[1], center[2]), radius, surface_id
        )
        self.things.append(
            ThingInfo(
                thing_index=thing_index,
                kind=ThingKind.MOVING_SPHERE,
                params={"center": center, "radius": radius},
                surface_id=surface_id,
            )
        )
        logger.debug("Added moving sphere %d at %s (r=%s)", thing_index, center, radius)
        return thing_index

    def add_plane(
        self,
        normal: tuple[float, float, float],
        offset: float,
        surface_id: int,
    ) -> int:
        """Add an infinite plane to the scene.

        The plane holds the points p with dot(normal, p) + offset == 0.

        Args:
            normal: The unit normal of the plane as (x, y, z).
            offset: The signed offset of the plane.
            surface_id: The surface ID to shade the plane with.

        Returns:
            The index of the added thing.

        Raises:
            RuntimeError: If the maximum number of things is exceeded.
            ValueError: If surface_id is invalid.
        """
        self._check_surface_id(surface_id)
        thing_index = add_plane(vec3(normal[0], normal[1], normal[2]), offset, surface_id)
        self.things.append(
            ThingInfo(
                thing_index=thing_index,
                kind=ThingKind.PLANE,
                params={"normal": normal, "offset": offset},
                surface_id=surface_id,
            )
        )
        logger.debug("Added plane %d with normal %s", thing_index, normal)
        return thing_index

    # =========================================================================
    # Lights and Camera
    # =========================================================================

    def add_light(
        self,
        position: tuple[float, float, float],
        color: tuple[float, float, float],
    ) -> int:
        """Add a point light.

        Args:
            position: World-space position as (x, y, z).
            color: RGB color of the light.

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
        """
        light_index = add_light(
            vec3(position[0], position[1], position[2]),
            vec3(color[0], color[1], color[2]),
        )
        self.lights.append(LightInfo(light_index=light_index, position=position, color=color))
        logger.debug("Added light %d at %s", light_index, position)
        return light_index

    def set_camera(self, camera: Camera) -> None:
        """Use a camera for rendering this scene.

        Args:
            camera: The camera configuration.
        """
        setup_camera(camera)
        self.camera = camera
        logger.debug("Camera at %s looking at %s", camera.pos, camera.look_at)

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_thing_count(self) -> int:
        """Get the number of things in the scene."""
        return get_thing_count()

    def get_surface_count(self) -> int:
        """Get the number of registered surfaces."""
        return get_surface_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_things() -> int:
        """Get the maximum number of things supported."""
        return MAX_THINGS

    @staticmethod
    def get_max_surfaces() -> int:
        """Get the maximum number of surfaces supported."""
        return MAX_SURFACES

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS
