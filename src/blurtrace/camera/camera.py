"""Look-at camera with pre-scaled image-plane axes.

The camera stores its position, a unit forward axis and two image-plane axes
(right and up) that are already scaled by the horizontal and vertical extent
of the view. The basis is derived by cross products against a fixed "down"
reference vector (0, -1, 0):

    forward = norm(look_at - pos)
    right   = hsize * norm(cross(forward, down))
    up      = vsize * norm(cross(forward, right))

A camera looking straight up or straight down has forward parallel to the
reference vector, so the cross product vanishes and the basis degenerates.
That configuration is not guarded.

Ray directions for pixel coordinates are produced by get_point(), which maps
raster coordinates (row 0 at the top) to a normalized combination of the
three axes.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.blurtrace.camera.camera import Camera, setup_camera
    >>> camera = Camera(pos=(3.0, 2.0, 4.0), look_at=(-1.0, 0.5, 0.0))
    >>> setup_camera(camera)
    >>> # Use get_point(x, y, width, height) within a Taichi kernel
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.blurtrace.core.ray import normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Reference vector the camera basis is built against
DOWN = (0.0, -1.0, 0.0)

# Image-plane offsets are shrunk by this factor after recentering to [-1, 1]
VIEW_SCALE = 4.0


# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class Camera:
    """Configuration for the look-at camera.

    Attributes:
        pos: Camera position in world space (x, y, z).
        look_at: Point the camera is looking at (x, y, z).
        distance: Focal distance; weight of the forward axis in ray directions.
        hsize: Horizontal extent of the view; scales the right axis.
        vsize: Vertical extent of the view; scales the up axis.
    """

    pos: tuple[float, float, float]
    look_at: tuple[float, float, float]
    distance: float = 2.5
    hsize: float = 4.0
    vsize: float = 3.0


def _norm(v: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    mag = np.linalg.norm(v)
    div = np.inf if mag == 0 else 1.0 / mag
    return div * v


def compute_camera_basis(
    camera: Camera,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    """Derive the camera's forward, right and up axes.

    Args:
        camera: The camera configuration.

    Returns:
        Tuple of (forward, right, up) as float64 arrays. forward is unit
        length; right has length hsize and up has length vsize.
    """
    pos = np.asarray(camera.pos, dtype=np.float64)
    look_at = np.asarray(camera.look_at, dtype=np.float64)
    down = np.asarray(DOWN, dtype=np.float64)

    forward = _norm(look_at - pos)
    right = camera.hsize * _norm(np.cross(forward, down))
    up = camera.vsize * _norm(np.cross(forward, right))
    return forward, right, up


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_pos = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_forward = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_right = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_up = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_distance = ti.field(dtype=ti.f32, shape=())
_camera_hsize = ti.field(dtype=ti.f32, shape=())
_camera_vsize = ti.field(dtype=ti.f32, shape=())


def setup_camera(camera: Camera) -> None:
    """Store a camera's position and derived basis for rendering.

    Must be called before rendering. Writes to Taichi fields, so it should be
    called from Python, not from within a kernel.

    Args:
        camera: The camera configuration.
    """
    forward, right, up = compute_camera_basis(camera)

    _camera_pos[None] = list(camera.pos)
    _camera_forward[None] = forward.tolist()
    _camera_right[None] = right.tolist()
    _camera_up[None] = up.tolist()
    _camera_distance[None] = camera.distance
    _camera_hsize[None] = camera.hsize
    _camera_vsize[None] = camera.vsize


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def get_camera_pos() -> vec3:
    """Camera position in world space."""
    return _camera_pos[None]


@ti.func
def get_point(x: ti.f32, y: ti.f32, width: ti.f32, height: ti.f32) -> vec3:
    """Ray direction through raster coordinates (x, y).

    x runs left to right over [0, width); y runs top to bottom over
    [0, height). Both are recentered to [-1, 1], scaled by 1/VIEW_SCALE, and
    used as weights of the right and up axes (y flipped so row 0 looks up).

    Args:
        x: Horizontal raster coordinate, fractional for sub-pixel samples.
        y: Vertical raster coordinate, fractional for sub-pixel samples.
        width: Output raster width in pixels.
        height: Output raster height in pixels.

    Returns:
        The unit direction from the camera through that raster position.
    """
    hsize = _camera_hsize[None]
    vsize = _camera_vsize[None]
    half_h = hsize / 2.0
    half_v = vsize / 2.0
    recenter_x = ((x * (hsize / width) - half_h) / half_h) / VIEW_SCALE
    recenter_y = -((y * (vsize / height) - half_v) / half_v) / VIEW_SCALE
    return normalize(
        _camera_distance[None] * _camera_forward[None]
        + (recenter_x * _camera_right[None] + recenter_y * _camera_up[None])
    )


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, tuple[float, float, float]]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with pos, forward, right and up as (x, y, z) tuples.
    """
    info = {}
    for name, field in (
        ("pos", _camera_pos),
        ("forward", _camera_forward),
        ("right", _camera_right),
        ("up", _camera_up),
    ):
        v = field[None]
        info[name] = (float(v[0]), float(v[1]), float(v[2]))
    return info
