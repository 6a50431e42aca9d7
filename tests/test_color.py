"""Unit tests for color constants and display conversion."""

import taichi as ti


class TestColorConstants:
    """Tests for the named color constants."""

    def test_constant_values(self):
        """Test white, grey, black and the background."""
        from src.blurtrace.core.color import BACKGROUND, BLACK, DEFAULT_COLOR, GREY, WHITE

        assert WHITE.to_numpy().tolist() == [1.0, 1.0, 1.0]
        assert GREY.to_numpy().tolist() == [0.5, 0.5, 0.5]
        assert BLACK.to_numpy().tolist() == [0.0, 0.0, 0.0]
        assert BACKGROUND.to_numpy().tolist() == [0.0, 0.0, 0.0]
        assert DEFAULT_COLOR.to_numpy().tolist() == [0.0, 0.0, 0.0]


class TestDisplayConversion:
    """Tests for legalize and to_drawing_color."""

    def test_legalize_clamps_only_from_above(self):
        """Test channels above 1 are clamped and the rest pass through."""
        from src.blurtrace.core.color import color3, legalize

        result = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = legalize(color3(2.0, 0.25, -0.5))

        test_kernel()
        r = result[None]
        assert abs(r[0] - 1.0) < 1e-6
        assert abs(r[1] - 0.25) < 1e-6
        assert abs(r[2] + 0.5) < 1e-6

    def test_to_drawing_color(self):
        """Test scaling to 0..255 with floor and no lower clamp."""
        from src.blurtrace.core.color import color3, to_drawing_color

        result = ti.Vector.field(3, dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            result[None] = to_drawing_color(color3(2.0, 0.5, -0.1))

        test_kernel()
        r = result[None]
        assert int(r[0]) == 255
        assert int(r[1]) == 127
        assert int(r[2]) == -26

    def test_to_drawing_color_black_and_white(self):
        """Test the extreme colors map to 0 and 255."""
        from src.blurtrace.core.color import BLACK, WHITE, to_drawing_color

        black = ti.Vector.field(3, dtype=ti.i32, shape=())
        white = ti.Vector.field(3, dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            black[None] = to_drawing_color(BLACK)
            white[None] = to_drawing_color(WHITE)

        test_kernel()
        assert black[None].to_numpy().tolist() == [0, 0, 0]
        assert white[None].to_numpy().tolist() == [255, 255, 255]
