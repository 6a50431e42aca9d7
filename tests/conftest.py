"""Pytest configuration for raytracer tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts. Fast math stays off
    so infinite distances compare the way intersection code expects.
    """
    ti.init(arch=ti.cpu, random_seed=42, fast_math=False)
    yield
    # Note: We don't call ti.reset() here as it can cause issues
    # with subsequent tests if any cleanup happens after


@pytest.fixture(autouse=True)
def clear_all_scene_data():
    """Clear scene data before each test.

    This ensures tests are isolated from each other.
    """
    # Import here to ensure Taichi is initialized first
    from src.blurtrace.core.sampler import reset_render_target
    from src.blurtrace.materials.surface import clear_surfaces
    from src.blurtrace.scene.intersection import clear_scene
    from src.blurtrace.scene.lights import clear_lights

    def _clear_all():
        clear_scene()
        clear_surfaces()
        clear_lights()
        reset_render_target()

    # Clear everything before test
    _clear_all()

    yield

    # Clear everything after test
    _clear_all()


@pytest.fixture
def mirror_corridor():
    """Two facing perfect mirrors at y = 0 and y = 2 with no lights.

    Every bounce adds black, so a vertical ray between them returns exactly
    the GREY fallback once the reflection depth is exhausted.
    """
    from src.blurtrace.scene.manager import SceneManager

    scene = SceneManager()
    mirror = scene.add_uniform_surface((0.0, 0.0, 0.0), (0.0, 0.0, 0.0), 1.0, 1.0)
    scene.add_plane((0.0, 1.0, 0.0), 0.0, mirror)
    scene.add_plane((0.0, -1.0, 0.0), 2.0, mirror)
    return scene
