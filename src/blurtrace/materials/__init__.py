"""Materials module for surface models.

Components:
    surface: Uniform and checkerboard surface registry

Each surface provides diffuse and specular colors, a reflectivity and a
roughness (specular exponent), looked up by surface ID at a hit position.
"""

from .surface import (
    MAX_SURFACES,
    SurfaceKind,
    add_checkerboard_surface,
    add_shiny_surface,
    add_uniform_surface,
    clear_surfaces,
    get_surface_count,
    surface_diffuse,
    surface_reflect,
    surface_roughness,
    surface_specular,
)

__all__ = [
    "SurfaceKind",
    "MAX_SURFACES",
    "add_uniform_surface",
    "add_checkerboard_surface",
    "add_shiny_surface",
    "clear_surfaces",
    "get_surface_count",
    "surface_diffuse",
    "surface_specular",
    "surface_reflect",
    "surface_roughness",
]
