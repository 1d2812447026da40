"""Camera module for primary ray generation.

Components:
    pinhole: Perspective camera with look-at positioning
"""

from .pinhole import (
    CameraGeometry,
    PinholeCamera,
    cast_ray,
    compute_camera_geometry,
    setup_camera,
)

__all__ = [
    "PinholeCamera",
    "CameraGeometry",
    "compute_camera_geometry",
    "setup_camera",
    "cast_ray",
]
