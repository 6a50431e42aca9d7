"""Position-dependent surface (material) model.

A surface answers four queries at a hit position:

    diffuse(pos)   -> color multiplied with the diffuse light term
    specular(pos)  -> color multiplied with the specular highlight term
    reflect(pos)   -> reflectivity in [0, 1] scaling the mirror bounce
    roughness      -> specular exponent (larger is a tighter highlight)

Two kinds exist. A UNIFORM surface returns the same values everywhere. A
CHECKERBOARD surface alternates its diffuse color and reflectivity on the
parity of ``floor(x) + floor(z)``: odd cells use the "odd" parameters, even
cells the "even" ones. Specular color and roughness are constant for both.

Surfaces are stored in a registry of Taichi fields and referenced by index
from the scene's primitives.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.blurtrace.materials.surface import add_uniform_surface
    >>> shiny = add_uniform_surface((1, 1, 1), (0.5, 0.5, 0.5), 0.7, 250.0)
    >>> # Use surface_diffuse(shiny, pos) within a Taichi kernel
"""

from enum import IntEnum

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


class SurfaceKind(IntEnum):
    """Enumeration of supported surface kinds, used for dispatch in kernels."""

    UNIFORM = 0
    CHECKERBOARD = 1


# =============================================================================
# Built-in Surface Parameters
# =============================================================================

# Polished white surface with a grey highlight
SHINY_DIFFUSE = (1.0, 1.0, 1.0)
SHINY_SPECULAR = (0.5, 0.5, 0.5)
SHINY_REFLECT = 0.7
SHINY_ROUGHNESS = 250.0

# White/black floor tiles; the black tiles are the more reflective ones
CHECKER_ODD_DIFFUSE = (1.0, 1.0, 1.0)
CHECKER_EVEN_DIFFUSE = (0.0, 0.0, 0.0)
CHECKER_SPECULAR = (1.0, 1.0, 1.0)
CHECKER_ODD_REFLECT = 0.1
CHECKER_EVEN_REFLECT = 0.7
CHECKER_ROUGHNESS = 150.0


# =============================================================================
# Surface Field Storage
# =============================================================================

MAX_SURFACES = 64

surface_kinds = ti.field(dtype=ti.i32, shape=MAX_SURFACES)
# For UNIFORM surfaces only the "even" slots are read
surface_even_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SURFACES)
surface_odd_diffuse = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SURFACES)
surface_even_reflect = ti.field(dtype=ti.f32, shape=MAX_SURFACES)
surface_odd_reflect = ti.field(dtype=ti.f32, shape=MAX_SURFACES)
surface_specular_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SURFACES)
surface_roughnesses = ti.field(dtype=ti.f32, shape=MAX_SURFACES)
num_surfaces = ti.field(dtype=ti.i32, shape=())


def clear_surfaces() -> None:
    """Clear all surfaces from the registry."""
    num_surfaces[None] = 0


def get_surface_count() -> int:
    """Get the number of surfaces in the registry."""
    return int(num_surfaces[None])


def _validate_reflect(name: str, value: float) -> None:
    if value < 0.0 or value > 1.0:
        raise ValueError(f"{name} = {value} is outside [0, 1].")


def _validate_roughness(value: float) -> None:
    if value < 0.0:
        raise ValueError(f"Roughness = {value} is negative.")


def _store_surface(
    kind: SurfaceKind,
    even_diffuse: tuple[float, float, float],
    odd_diffuse: tuple[float, float, float],
    specular: tuple[float, float, float],
    even_reflect: float,
    odd_reflect: float,
    roughness: float,
) -> int:
    """Write one surface into the registry and return its index."""
    idx = num_surfaces[None]
    if idx >= MAX_SURFACES:
        raise RuntimeError(f"Maximum number of surfaces ({MAX_SURFACES}) exceeded")

    surface_kinds[idx] = int(kind)
    surface_even_diffuse[idx] = vec3(even_diffuse[0], even_diffuse[1], even_diffuse[2])
    surface_odd_diffuse[idx] = vec3(odd_diffuse[0], odd_diffuse[1], odd_diffuse[2])
    surface_specular_colors[idx] = vec3(specular[0], specular[1], specular[2])
    surface_even_reflect[idx] = even_reflect
    surface_odd_reflect[idx] = odd_reflect
    surface_roughnesses[idx] = roughness
    num_surfaces[None] = idx + 1
    return idx


def add_uniform_surface(
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
        The index of the added surface.

    Raises:
        RuntimeError: If the maximum number of surfaces is exceeded.
        ValueError: If reflect is outside [0, 1] or roughness is negative.
    """
    _validate_reflect("Reflect", reflect)
    _validate_roughness(roughness)
    return _store_surface(
        SurfaceKind.UNIFORM, diffuse, diffuse, specular, reflect, reflect, roughness
    )


def add_checkerboard_surface(
    odd_diffuse: tuple[float, float, float] = CHECKER_ODD_DIFFUSE,
    even_diffuse: tuple[float, float, float] = CHECKER_EVEN_DIFFUSE,
    specular: tuple[float, float, float] = CHECKER_SPECULAR,
    odd_reflect: float = CHECKER_ODD_REFLECT,
    even_reflect: float = CHECKER_EVEN_REFLECT,
    roughness: float = CHECKER_ROUGHNESS,
) -> int:
    """Add a checkerboard surface tiled on unit cells of the xz-plane.

    The defaults reproduce the classic white/black reflective floor.

    Args:
        odd_diffuse: Diffuse color where floor(x) + floor(z) is odd.
        even_diffuse: Diffuse color where floor(x) + floor(z) is even.
        specular: Specular color for every cell.
        odd_reflect: Reflectivity of odd cells, in [0, 1].
        even_reflect: Reflectivity of even cells, in [0, 1].
        roughness: Specular exponent (non-negative).

    Returns:
        The index of the added surface.

    Raises:
        RuntimeError: If the maximum number of surfaces is exceeded.
        ValueError: If a reflectivity is outside [0, 1] or roughness is negative.
    """
    _validate_reflect("Odd reflect", odd_reflect)
    _validate_reflect("Even reflect", even_reflect)
    _validate_roughness(roughness)
    return _store_surface(
        SurfaceKind.CHECKERBOARD,
        even_diffuse,
        odd_diffuse,
        specular,
        even_reflect,
        odd_reflect,
        roughness,
    )


def add_shiny_surface() -> int:
    """Add the built-in polished white surface."""
    return add_uniform_surface(SHINY_DIFFUSE, SHINY_SPECULAR, SHINY_REFLECT, SHINY_ROUGHNESS)


# =============================================================================
# Surface Queries (Taichi-side)
# =============================================================================


@ti.func
def _is_odd_cell(pos: vec3) -> ti.i32:
    """Return 1 if floor(x) + floor(z) at pos is odd."""
    cell = ti.cast(ti.floor(pos.z), ti.i32) + ti.cast(ti.floor(pos.x), ti.i32)
    result = 0
    if cell % 2 != 0:
        result = 1
    return result


@ti.func
def _uses_odd_params(surface_id: ti.i32, pos: vec3) -> ti.i32:
    result = 0
    if surface_kinds[surface_id] == int(SurfaceKind.CHECKERBOARD):
        result = _is_odd_cell(pos)
    return result


@ti.func
def surface_diffuse(surface_id: ti.i32, pos: vec3) -> vec3:
    """Diffuse color of a surface at a position."""
    result = surface_even_diffuse[surface_id]
    if _uses_odd_params(surface_id, pos) == 1:
        result = surface_odd_diffuse[surface_id]
    return result


@ti.func
def surface_specular(surface_id: ti.i32, pos: vec3) -> vec3:
    """Specular color of a surface at a position (constant for both kinds)."""
    return surface_specular_colors[surface_id]


@ti.func
def surface_reflect(surface_id: ti.i32, pos: vec3) -> ti.f32:
    """Reflectivity of a surface at a position, in [0, 1]."""
    result = surface_even_reflect[surface_id]
    if _uses_odd_params(surface_id, pos) == 1:
        result = surface_odd_reflect[surface_id]
    return result


@ti.func
def surface_roughness(surface_id: ti.i32) -> ti.f32:
    """Specular exponent of a surface."""
    return surface_roughnesses[surface_id]
