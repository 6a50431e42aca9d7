"""Unit tests for the animation renderer."""

import numpy as np
import pytest


class TestFrameTimes:
    """Tests for the frame countdown."""

    def test_times_count_down_to_one(self):
        """Test time values run from length * fps down to 1."""
        from src.blurtrace.core.animation import frame_times

        assert frame_times(2, 3) == [6, 5, 4, 3, 2, 1]

    def test_empty_animation(self):
        """Test a zero-length animation renders nothing."""
        from src.blurtrace.core.animation import frame_count, frame_times

        assert frame_times(0, 10) == []
        assert frame_count(0, 10) == 0

    def test_render_settings(self):
        """Test RenderSettings defaults and derived frame count."""
        from src.blurtrace.core.animation import RenderSettings

        settings = RenderSettings()
        assert (settings.width, settings.height, settings.grid) == (320, 240, 2)
        assert settings.frame_count == 100
        assert RenderSettings(length=3, fps=4).frame_count == 12


class TestAnimationRenderer:
    """Tests for AnimationRenderer."""

    def test_invalid_grid(self):
        """Test a grid size below 1 is rejected."""
        from src.blurtrace.core.animation import AnimationRenderer

        with pytest.raises(ValueError):
            AnimationRenderer(4, 3, grid=0)

    def test_properties_and_repr(self):
        """Test size and grid are exposed."""
        from src.blurtrace.core.animation import AnimationRenderer

        renderer = AnimationRenderer(4, 3, grid=2)
        assert (renderer.width, renderer.height, renderer.grid) == (4, 3, 2)
        assert repr(renderer) == "AnimationRenderer(width=4, height=3, grid=2)"

    def test_render_rows_yields_progress(self, mirror_corridor):
        """Test the row generator reports each finished row."""
        from src.blurtrace.camera.camera import Camera
        from src.blurtrace.core.animation import AnimationRenderer

        mirror_corridor.set_camera(Camera(pos=(0.0, 1.0, 0.0), look_at=(0.0, 2.0, -1.0)))
        renderer = AnimationRenderer(4, 3, grid=1)

        assert list(renderer.render_rows(20.0)) == [(1, 3), (2, 3), (3, 3)]
        assert np.all(renderer.get_image_numpy() == 0.5)

    def test_render_frame_callback(self, mirror_corridor):
        """Test the frame callback is called once per row."""
        from src.blurtrace.camera.camera import Camera
        from src.blurtrace.core.animation import AnimationRenderer

        mirror_corridor.set_camera(Camera(pos=(0.0, 1.0, 0.0), look_at=(0.0, 2.0, -1.0)))
        renderer = AnimationRenderer(4, 3, grid=1)

        calls = []
        renderer.render_frame(20.0, callback=lambda done, total: calls.append((done, total)))
        assert calls == [(1, 3), (2, 3), (3, 3)]

    def test_render_animation_hands_frames_to_sink(self, mirror_corridor):
        """Test every frame reaches the sink in order with its display image."""
        from src.blurtrace.camera.camera import Camera
        from src.blurtrace.core.animation import AnimationRenderer

        mirror_corridor.set_camera(Camera(pos=(0.0, 1.0, 0.0), look_at=(0.0, 2.0, -1.0)))
        renderer = AnimationRenderer(4, 3, grid=1)

        frames = []
        count = renderer.render_animation(1, 3, lambda i, image: frames.append((i, image.copy())))

        assert count == 3
        assert [i for i, _ in frames] == [0, 1, 2]
        for _, image in frames:
            assert image.shape == (3, 4, 3)
            assert np.all(image == 127)

    def test_reset_clears_image(self, mirror_corridor):
        """Test reset zeroes the last frame."""
        from src.blurtrace.camera.camera import Camera
        from src.blurtrace.core.animation import AnimationRenderer

        mirror_corridor.set_camera(Camera(pos=(0.0, 1.0, 0.0), look_at=(0.0, 2.0, -1.0)))
        renderer = AnimationRenderer(4, 3, grid=1)
        renderer.render_frame(1.0)
        renderer.reset()
        assert not renderer.get_display_image().any()
