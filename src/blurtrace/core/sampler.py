"""Supersampling driver and render target.

For every output pixel the sampler casts a grid x grid set of jittered
sub-pixel rays, each at its own jittered time, traces them at depth 0 and
averages the colors. The averaged color is stored unclamped, and its display
form (clamped to at most 1, scaled to 0..255 and floored) is stored alongside
it for the presentation side to pick up.

Sample (p, q) of pixel (x, y) goes through raster position

    (x + (p + rx) / grid, y + (q + ry) / grid)

at time ``time + rt``, with rx, ry and rt uniform in [0, 1). The spatial jitter
anti-aliases edges; the time jitter blurs motion within a frame.

Pixels are independent of each other and the scene is read-only while
rendering, so frame and row kernels evaluate pixels in parallel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, fast_math=False)
    >>> from src.blurtrace.core.sampler import render_frame, setup_render_target
    >>> from src.blurtrace.scene.presets import create_default_scene
    >>>
    >>> scene = create_default_scene()
    >>> setup_render_target(320, 240)
    >>> render_frame(grid=2, time=20.0)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from src.blurtrace.camera.camera import get_camera_pos, get_point
from src.blurtrace.core.color import to_drawing_color
from src.blurtrace.core.ray import make_ray
from src.blurtrace.core.tracer import trace_ray

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Render Target (Image Buffers)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 1024
MAX_IMAGE_HEIGHT = 1024

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Averaged pixel colors, indexed [x, y] with y = 0 the top row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Display channels after the display-conversion step
_display_buffer = ti.Vector.field(3, dtype=ti.i32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target buffers.

    Args:
        width: Image width in pixels (1 to MAX_IMAGE_WIDTH).
        height: Image height in pixels (1 to MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum size.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the render target buffers to zero."""
    _color_buffer.fill(0.0)
    _display_buffer.fill(0)


def reset_render_target() -> None:
    """Forget the render target setup; used between independent renders."""
    _render_target_initialized[None] = 0
    clear_render_target()


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def _check_grid(grid: int) -> None:
    if grid < 1:
        raise ValueError(f"Supersampling grid size must be at least 1, got {grid}")


# =============================================================================
# Per-pixel Sampling
# =============================================================================


@ti.func
def sample_pixel(
    x: ti.i32,
    y: ti.i32,
    width: ti.i32,
    height: ti.i32,
    grid: ti.i32,
    time: ti.f32,
) -> vec3:
    """Average grid x grid jittered samples for one pixel.

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.
        grid: Samples per pixel along each axis.
        time: Base time of the frame; each sample adds jitter in [0, 1).

    Returns:
        The averaged, unclamped pixel color.
    """
    origin = get_camera_pos()
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    g = ti.cast(grid, ti.f32)

    total = vec3(0.0, 0.0, 0.0)
    for p in range(grid):
        for q in range(grid):
            rx = ti.random(ti.f32)
            ry = ti.random(ti.f32)
            sx = ti.cast(x, ti.f32) + (ti.cast(p, ti.f32) + rx) / g
            sy = ti.cast(y, ti.f32) + (ry + ti.cast(q, ti.f32)) / g
            direction = get_point(sx, sy, w, h)
            total += trace_ray(make_ray(origin, direction), 0, time + ti.random(ti.f32))

    return total / (g * g)


@ti.func
def _store_pixel(x: ti.i32, y: ti.i32, color: vec3):
    _color_buffer[x, y] = color
    _display_buffer[x, y] = to_drawing_color(color)


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_frame(width: ti.i32, height: ti.i32, grid: ti.i32, time: ti.f32):
    for x, y in ti.ndrange(width, height):
        _store_pixel(x, y, sample_pixel(x, y, width, height, grid, time))


@ti.kernel
def _render_row(y: ti.i32, width: ti.i32, height: ti.i32, grid: ti.i32, time: ti.f32):
    for x in range(width):
        _store_pixel(x, y, sample_pixel(x, y, width, height, grid, time))


_pixel_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _render_single_pixel(
    x: ti.i32, y: ti.i32, width: ti.i32, height: ti.i32, grid: ti.i32, time: ti.f32
):
    # Single-iteration outer loop so the sample loops stay serial
    for _ in range(1):
        _pixel_result[None] = sample_pixel(x, y, width, height, grid, time)


# =============================================================================
# Public Rendering API
# =============================================================================


def render_pixel(x: int, y: int, grid: int, time: float) -> tuple[float, float, float]:
    """Render one pixel without touching the buffers.

    This is a Python-callable function for testing. For production rendering,
    use render_frame() or render_row().

    Args:
        x: Pixel column (0 = left).
        y: Pixel row (0 = top).
        grid: Samples per pixel along each axis.
        time: Base time of the frame.

    Returns:
        Tuple of (R, G, B) averaged color values.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If grid is less than 1 or the pixel is out of range.
    """
    _check_render_target_initialized()
    _check_grid(grid)

    width, height = get_image_dimensions()
    if x < 0 or x >= width or y < 0 or y >= height:
        raise ValueError(f"Pixel ({x}, {y}) is outside the image ({width}x{height})")
    _render_single_pixel(x, y, width, height, grid, time)
    color = _pixel_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def render_row(y: int, grid: int, time: float) -> None:
    """Render one raster row into the buffers.

    Args:
        y: Row index (0 = top).
        grid: Samples per pixel along each axis.
        time: Base time of the frame.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If grid is less than 1 or the row is out of range.
    """
    _check_render_target_initialized()
    _check_grid(grid)

    width, height = get_image_dimensions()
    if y < 0 or y >= height:
        raise ValueError(f"Row {y} is outside the image (height {height})")
    _render_row(y, width, height, grid, time)


def render_frame(grid: int, time: float) -> None:
    """Render every pixel of the image into the buffers.

    Args:
        grid: Samples per pixel along each axis.
        time: Base time of the frame.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If grid is less than 1.
    """
    _check_render_target_initialized()
    _check_grid(grid)

    width, height = get_image_dimensions()
    _render_frame(width, height, grid, time)


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the averaged colors as a NumPy array.

    Values are unclamped. The array shape is (height, width, 3), row 0 at the
    top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    image = _color_buffer.to_numpy()[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3)
    return np.transpose(image, (1, 0, 2)).astype(np.float32)


def get_display_image() -> npt.NDArray[np.int32]:
    """Get the display-converted channels as a NumPy array.

    Channels are at most 255 but are not clamped from below, so strongly
    negative colors give negative values. The array shape is
    (height, width, 3), row 0 at the top.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()
    image = _display_buffer.to_numpy()[:width, :height, :]
    return np.transpose(image, (1, 0, 2)).astype(np.int32)
