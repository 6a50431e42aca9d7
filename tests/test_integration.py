"""Integration tests for end-to-end rendering pipeline.

This module tests the complete rendering pipeline from preset scene creation
through animation frames written to disk. It verifies that all components
work together and that the output meets basic quality criteria.

Tests are designed to be fast (low resolution, grid 1 or 2) while still
exercising the full pipeline.

Note: Imports are done inside test methods to avoid Taichi initialization issues.
The conftest.py fixture initializes Taichi before tests run.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image


@pytest.fixture(params=["default", "twin_spheres"])
def preset_frame(request):
    """Render one 32x24 frame of a preset scene and return the renderer."""
    from src.blurtrace.core.animation import AnimationRenderer
    from src.blurtrace.scene.presets import create_preset_scene

    create_preset_scene(request.param)
    renderer = AnimationRenderer(32, 24, grid=2)
    renderer.render_frame(20.0)
    return renderer


class TestPresetRendering:
    """Integration tests for rendering the preset scenes."""

    def test_output_shape(self, preset_frame) -> None:
        """Test the color and display images have (height, width, 3) shape."""
        assert preset_frame.get_image_numpy().shape == (24, 32, 3)
        assert preset_frame.get_display_image().shape == (24, 32, 3)

    def test_output_is_finite(self, preset_frame) -> None:
        """Test no pixel is NaN or infinite."""
        assert np.all(np.isfinite(preset_frame.get_image_numpy()))

    def test_scene_is_lit(self, preset_frame) -> None:
        """Test the lights produce some nonzero pixels."""
        assert preset_frame.get_image_numpy().max() > 0.0

    def test_display_channels_capped(self, preset_frame) -> None:
        """Test display channels never exceed 255."""
        assert preset_frame.get_display_image().max() <= 255


class TestAnimationOutput:
    """Integration tests for writing animations."""

    def test_png_sequence(self, tmp_path: Path) -> None:
        """Test a short animation writes one PNG per frame."""
        from src.blurtrace.core.animation import AnimationRenderer
        from src.blurtrace.preview.export import PngSequenceSink
        from src.blurtrace.scene.presets import create_default_scene

        create_default_scene()
        renderer = AnimationRenderer(16, 12, grid=1)
        sink = PngSequenceSink(tmp_path)
        count = renderer.render_animation(1, 3, sink)

        assert count == 3
        assert len(sink.paths) == 3
        with Image.open(sink.paths[0]) as img:
            assert img.size == (16, 12)

    def test_animated_gif(self, tmp_path: Path) -> None:
        """Test a short animation collects into one GIF."""
        from src.blurtrace.core.animation import AnimationRenderer
        from src.blurtrace.preview.export import AnimatedGifSink
        from src.blurtrace.scene.presets import create_twin_spheres_scene

        create_twin_spheres_scene()
        renderer = AnimationRenderer(16, 12, grid=1)
        sink = AnimatedGifSink(tmp_path / "twin.gif", fps=2)
        renderer.render_animation(1, 2, sink)
        path = sink.save()

        assert path.exists()
        assert len(sink.frames) == 2
