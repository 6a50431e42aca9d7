"""Unit tests for image export and frame sinks."""

import numpy as np
import pytest
from PIL import Image


@pytest.fixture
def display_image():
    """A 2x3 display image including out-of-range channels."""
    return np.array(
        [
            [[-26, 0, 255], [127, 300, 10], [0, 0, 0]],
            [[255, 255, 255], [1, 2, 3], [-1, 128, 256]],
        ],
        dtype=np.int32,
    )


class TestDisplayToUint8:
    """Tests for display_to_uint8."""

    def test_clips_into_byte_range(self, display_image):
        """Test negative channels clip to 0 and large ones to 255."""
        from src.blurtrace.preview.export import display_to_uint8

        result = display_to_uint8(display_image)
        assert result.dtype == np.uint8
        assert result.shape == (2, 3, 3)
        assert result[0, 0].tolist() == [0, 0, 255]
        assert result[0, 1].tolist() == [127, 255, 10]
        assert result[1, 2].tolist() == [0, 128, 255]


class TestPngExport:
    """Tests for PNG export."""

    def test_save_png_from_array(self, tmp_path, display_image):
        """Test the saved PNG holds the clipped channels."""
        from src.blurtrace.preview.export import display_to_uint8, save_png_from_array

        path = tmp_path / "frame.png"
        save_png_from_array(display_image, path)

        with Image.open(path) as img:
            assert img.size == (3, 2)
            np.testing.assert_array_equal(np.asarray(img), display_to_uint8(display_image))

    def test_save_png_from_renderer(self, tmp_path, mirror_corridor):
        """Test saving the renderer's last frame."""
        from src.blurtrace.camera.camera import Camera
        from src.blurtrace.core.animation import AnimationRenderer
        from src.blurtrace.preview.export import save_png

        mirror_corridor.set_camera(Camera(pos=(0.0, 1.0, 0.0), look_at=(0.0, 2.0, -1.0)))
        renderer = AnimationRenderer(4, 3, grid=1)
        renderer.render_frame(20.0)

        path = tmp_path / "grey.png"
        save_png(renderer, path)
        with Image.open(path) as img:
            assert img.size == (4, 3)
            assert np.all(np.asarray(img) == 127)

    def test_png_sequence_sink(self, tmp_path, display_image):
        """Test frames are written as numbered files."""
        from src.blurtrace.preview.export import PngSequenceSink

        sink = PngSequenceSink(tmp_path / "frames", prefix="shot", digits=3)
        sink(0, display_image)
        sink(1, display_image)

        assert [p.name for p in sink.paths] == ["shot_000.png", "shot_001.png"]
        assert all(p.exists() for p in sink.paths)


class TestGifExport:
    """Tests for the animated GIF sink."""

    def test_collects_and_saves_frames(self, tmp_path, display_image):
        """Test all collected frames end up in one GIF."""
        from src.blurtrace.preview.export import AnimatedGifSink

        sink = AnimatedGifSink(tmp_path / "anim.gif", fps=5)
        for i in range(3):
            sink(i, display_image + i)
        path = sink.save()

        with Image.open(path) as img:
            assert img.size == (3, 2)
            assert img.n_frames == 3

    def test_save_without_frames(self, tmp_path):
        """Test saving an empty animation raises RuntimeError."""
        from src.blurtrace.preview.export import AnimatedGifSink

        with pytest.raises(RuntimeError):
            AnimatedGifSink(tmp_path / "empty.gif").save()

    def test_invalid_fps(self, tmp_path):
        """Test a non-positive frame rate is rejected."""
        from src.blurtrace.preview.export import AnimatedGifSink

        with pytest.raises(ValueError):
            AnimatedGifSink(tmp_path / "anim.gif", fps=0)
