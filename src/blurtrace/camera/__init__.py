"""Camera module for view and ray generation.

Components:
    camera: Look-at camera with pre-scaled image-plane axes

Ray generation uses raster coordinates:
    x in [0, width): left to right across the image
    y in [0, height): top to bottom across the image
"""

from .camera import (
    Camera,
    compute_camera_basis,
    get_camera_info,
    get_camera_pos,
    get_point,
    setup_camera,
)

__all__ = [
    "Camera",
    "compute_camera_basis",
    "setup_camera",
    "get_point",
    "get_camera_pos",
    "get_camera_info",
]
