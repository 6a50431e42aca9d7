"""Unit tests for the preset scenes."""

import math

import pytest


class TestDefaultScene:
    """Tests for create_default_scene."""

    def test_contents(self):
        """Test the floor, both spheres, four lights and the camera."""
        from src.blurtrace.scene.intersection import ThingKind
        from src.blurtrace.scene.presets import create_default_scene

        scene = create_default_scene()
        assert scene.get_surface_count() == 2
        assert [t.kind for t in scene.things] == [
            ThingKind.PLANE,
            ThingKind.MOVING_SPHERE,
            ThingKind.SPHERE,
        ]
        assert scene.get_light_count() == 4
        assert scene.camera.pos == (3.0, 2.0, 4.0)
        assert scene.camera.look_at == (-1.0, 0.5, 0.0)
        assert scene.camera.distance == 2.5

    def test_floor_below_static_sphere(self):
        """Test a ray straight down through the small sphere hits it before the floor."""
        from src.blurtrace.scene.intersection import find_nearest_hit
        from src.blurtrace.scene.presets import create_default_scene

        create_default_scene()
        thing, dist = find_nearest_hit((-1.0, 5.0, 1.5), (0.0, -1.0, 0.0))
        assert thing == 2
        assert abs(dist - 4.0) < 1e-5

    def test_trace_gives_finite_color(self):
        """Test a camera ray toward the static sphere shades to a lit, finite color."""
        from src.blurtrace.core.tracer import trace
        from src.blurtrace.scene.presets import create_default_scene

        create_default_scene()
        d = (-4.0, -1.5, -2.5)
        n = math.sqrt(sum(c * c for c in d))
        color = trace((3.0, 2.0, 4.0), tuple(c / n for c in d), time=12.5)
        assert all(math.isfinite(c) for c in color)
        assert any(c > 0.0 for c in color)


class TestTwinSpheresScene:
    """Tests for create_twin_spheres_scene."""

    def test_contents(self):
        """Test the floor, two moving spheres, three lights and the camera."""
        from src.blurtrace.scene.intersection import ThingKind
        from src.blurtrace.scene.presets import create_twin_spheres_scene

        scene = create_twin_spheres_scene()
        assert [t.kind for t in scene.things] == [
            ThingKind.PLANE,
            ThingKind.MOVING_SPHERE,
            ThingKind.MOVING_SPHERE,
        ]
        assert scene.get_light_count() == 3
        assert scene.camera.pos == (1.0, 6.0, 0.0)
        assert scene.camera.distance == 0.5


class TestPresetLookup:
    """Tests for create_preset_scene."""

    @pytest.mark.parametrize("name, things", [("default", 3), ("twin_spheres", 3)])
    def test_known_presets(self, name, things):
        """Test presets are built by name."""
        from src.blurtrace.scene.presets import create_preset_scene

        assert create_preset_scene(name).get_thing_count() == things

    def test_unknown_preset(self):
        """Test an unknown name raises ValueError."""
        from src.blurtrace.scene.presets import create_preset_scene

        with pytest.raises(ValueError, match="Unknown scene preset"):
            create_preset_scene("cornell")
