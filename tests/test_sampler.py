"""Unit tests for the supersampling driver and render target.

Tests cover:
- Render target setup, validation and clearing
- Exact averaging when every sub-sample sees the same constant color
- Frame and row rendering into the color and display buffers
- Row orientation (row 0 at the top)
"""

import numpy as np
import pytest


@pytest.fixture
def corridor_view(mirror_corridor):
    """The mirror corridor seen from between the mirrors, looking up and ahead."""
    from src.blurtrace.camera.camera import Camera

    mirror_corridor.set_camera(Camera(pos=(0.0, 1.0, 0.0), look_at=(0.0, 2.0, -1.0)))
    return mirror_corridor


class TestRenderTarget:
    """Tests for render target setup."""

    def test_setup_and_dimensions(self):
        """Test setup stores the active size."""
        from src.blurtrace.core.sampler import get_image_dimensions, setup_render_target

        setup_render_target(64, 48)
        assert get_image_dimensions() == (64, 48)

    @pytest.mark.parametrize("width, height", [(2048, 10), (10, 2048), (0, 10), (10, -1)])
    def test_invalid_dimensions(self, width, height):
        """Test sizes outside 1..MAX are rejected."""
        from src.blurtrace.core.sampler import setup_render_target

        with pytest.raises(ValueError):
            setup_render_target(width, height)

    def test_use_before_setup(self):
        """Test rendering or reading before setup raises RuntimeError."""
        from src.blurtrace.core.sampler import get_display_image, get_image_numpy, render_frame

        with pytest.raises(RuntimeError):
            render_frame(grid=1, time=0.0)
        with pytest.raises(RuntimeError):
            get_image_numpy()
        with pytest.raises(RuntimeError):
            get_display_image()

    def test_invalid_grid(self):
        """Test a grid size below 1 is rejected."""
        from src.blurtrace.core.sampler import render_frame, render_pixel, setup_render_target

        setup_render_target(4, 3)
        with pytest.raises(ValueError):
            render_frame(grid=0, time=0.0)
        with pytest.raises(ValueError):
            render_pixel(0, 0, grid=-1, time=0.0)

    def test_row_out_of_range(self):
        """Test rendering a row outside the image is rejected."""
        from src.blurtrace.core.sampler import render_row, setup_render_target

        setup_render_target(4, 3)
        with pytest.raises(ValueError):
            render_row(3, grid=1, time=0.0)

    @pytest.mark.parametrize("x, y", [(4, 0), (0, 3), (-1, 0), (0, -1)])
    def test_pixel_out_of_range(self, x, y):
        """Test rendering a pixel outside the image is rejected."""
        from src.blurtrace.core.sampler import render_pixel, setup_render_target

        setup_render_target(4, 3)
        with pytest.raises(ValueError):
            render_pixel(x, y, grid=1, time=0.0)

    def test_fresh_target_is_black(self):
        """Test a newly set up target reads back as zeros with (H, W, 3) shape."""
        from src.blurtrace.core.sampler import get_display_image, get_image_numpy, setup_render_target

        setup_render_target(5, 2)
        image = get_image_numpy()
        display = get_display_image()
        assert image.shape == (2, 5, 3)
        assert image.dtype == np.float32
        assert display.shape == (2, 5, 3)
        assert display.dtype == np.int32
        assert not image.any()
        assert not display.any()


class TestSupersampling:
    """Tests for per-pixel averaging."""

    @pytest.mark.parametrize("grid", [1, 2, 4])
    def test_constant_integrand_averages_exactly(self, corridor_view, grid):
        """Test sub-samples that all see grey average to exactly grey."""
        from src.blurtrace.core.sampler import render_pixel, setup_render_target

        setup_render_target(8, 6)
        for x, y in [(0, 0), (3, 2), (7, 5)]:
            assert render_pixel(x, y, grid=grid, time=20.0) == (0.5, 0.5, 0.5)

    def test_render_frame_fills_buffers(self, corridor_view):
        """Test every pixel of a rendered frame holds the exact average."""
        from src.blurtrace.core.sampler import (
            get_display_image,
            get_image_numpy,
            render_frame,
            setup_render_target,
        )

        setup_render_target(8, 6)
        render_frame(grid=4, time=3.0)

        image = get_image_numpy()
        assert image.shape == (6, 8, 3)
        assert np.all(image == 0.5)
        assert np.all(get_display_image() == 127)

    def test_render_row_only_touches_that_row(self, corridor_view):
        """Test a row render leaves the other rows untouched."""
        from src.blurtrace.core.sampler import get_image_numpy, render_row, setup_render_target

        setup_render_target(8, 6)
        render_row(2, grid=2, time=0.0)

        image = get_image_numpy()
        assert np.all(image[2] == 0.5)
        assert not np.delete(image, 2, axis=0).any()

    def test_clear_render_target(self, corridor_view):
        """Test clearing zeroes both buffers but keeps the setup."""
        from src.blurtrace.core.sampler import (
            clear_render_target,
            get_display_image,
            get_image_numpy,
            render_frame,
            setup_render_target,
        )

        setup_render_target(4, 3)
        render_frame(grid=1, time=0.0)
        clear_render_target()
        assert not get_image_numpy().any()
        assert not get_display_image().any()


class TestImageOrientation:
    """Tests for row ordering of the output image."""

    def test_top_row_sees_sky(self):
        """Test row 0 is the top of the view and the last row sees the floor."""
        from src.blurtrace.camera.camera import Camera
        from src.blurtrace.core.sampler import get_image_numpy, render_frame, setup_render_target
        from src.blurtrace.scene.manager import SceneManager

        scene = SceneManager()
        matte = scene.add_uniform_surface((1.0, 1.0, 1.0), (0.0, 0.0, 0.0), 0.0, 1.0)
        scene.add_plane((0.0, 1.0, 0.0), 0.0, matte)
        scene.add_light((0.0, 5.0, 0.0), (1.0, 1.0, 1.0))
        scene.set_camera(Camera(pos=(0.0, 1.0, 0.0), look_at=(0.0, 1.0, -1.0)))

        setup_render_target(4, 4)
        render_frame(grid=2, time=0.0)
        image = get_image_numpy()

        assert not image[0].any()
        assert np.all(image[3] > 0.0)
