"""Pinhole camera model for perspective projection ray generation.

The camera supports:
- Look-at positioning (eye, look_at, up)
- Vertical field of view specification
- Pixel-space ray casting with fractional coordinates for jitter

The camera builds an orthonormal basis (u, v, w) from the view parameters:
- w: points from look_at toward eye (opposite view direction)
- u: points right in the image plane
- v: points up in the image plane

The viewport sits one unit in front of the eye. Its horizontal and vertical
extents are divided by (width - 1) and (height - 1), so ray casting takes
pixel coordinates directly: u in [0, width - 1] runs left to right and
v in [0, height - 1] runs bottom to top.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.camera.pinhole import PinholeCamera, setup_camera, cast_ray
    >>>
    >>> camera = PinholeCamera(
    ...     eye=(13.0, 2.0, 3.0),
    ...     look_at=(0.0, 0.0, 0.0),
    ...     up=(0.0, 1.0, 0.0),
    ...     vfov=40.0,
    ...     width=1280,
    ...     height=800,
    ... )
    >>> geometry = setup_camera(camera)
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = cast_ray(639.5, 399.5, 1.0)  # Ray through image center
"""

import math
from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from mcray.core.ray import Ray, make_ray, vec3
from mcray.core.vector import UnitVector3, as_vec3
from mcray.errors import DegenerateGeometryError

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for a pinhole (perspective) camera.

    Attributes:
        eye: Camera position in world space (x, y, z).
        look_at: Point the camera is looking at in world space (x, y, z).
        up: Up direction for camera orientation (typically (0, 1, 0)).
        vfov: Vertical field of view in degrees.
        width: Output image width in pixels.
        height: Output image height in pixels.
    """

    eye: tuple[float, float, float]
    look_at: tuple[float, float, float]
    up: tuple[float, float, float]
    vfov: float
    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class CameraGeometry:
    """Viewport geometry derived once from a PinholeCamera.

    Attributes:
        origin: The eye position.
        u: Unit vector pointing right.
        v: Unit vector pointing up.
        w: Unit vector pointing backward (from look_at to eye).
        lower_left: Lower-left corner of the viewport.
        horizontal_step: Viewport step per pixel to the right.
        vertical_step: Viewport step per pixel upward.
    """

    origin: npt.NDArray[np.float64]
    u: UnitVector3
    v: UnitVector3
    w: UnitVector3
    lower_left: npt.NDArray[np.float64]
    horizontal_step: npt.NDArray[np.float64]
    vertical_step: npt.NDArray[np.float64]

    def ray_direction(self, px: float, py: float) -> npt.NDArray[np.float64]:
        """Unnormalized direction of the primary ray through pixel (px, py)."""
        return (
            self.lower_left + px * self.horizontal_step + py * self.vertical_step - self.origin
        )


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())
_lower_left_corner = ti.Vector.field(3, dtype=ti.f32, shape=())
_horizontal_step = ti.Vector.field(3, dtype=ti.f32, shape=())
_vertical_step = ti.Vector.field(3, dtype=ti.f32, shape=())
_camera_ready = ti.field(dtype=ti.i32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def compute_camera_geometry(camera: PinholeCamera) -> CameraGeometry:
    """Derive the viewport geometry of a camera.

    viewport_height = 2 * tan(vfov / 2) and viewport_width scales it by the
    aspect ratio. The lower-left corner is eye - horizontal/2 - vertical/2 - w,
    computed before the extents are turned into per-pixel steps.

    Args:
        camera: Camera configuration.

    Returns:
        The derived CameraGeometry.

    Raises:
        DegenerateGeometryError: If eye equals look_at or up is parallel to
            the view direction.
        ValueError: If vfov is outside (0, 180) or a dimension is below 2.
    """
    if not 0.0 < camera.vfov < 180.0:
        raise ValueError(f"Vertical field of view = {camera.vfov} must be in (0, 180) degrees")
    if camera.width < 2 or camera.height < 2:
        raise ValueError(
            f"Image dimensions ({camera.width}x{camera.height}) must be at least 2x2"
        )

    eye = as_vec3(camera.eye, "eye")
    look_at = as_vec3(camera.look_at, "look_at")
    up = as_vec3(camera.up, "up")

    theta = math.radians(camera.vfov)
    viewport_height = 2.0 * math.tan(theta / 2.0)
    viewport_width = viewport_height * camera.aspect_ratio

    try:
        w = UnitVector3.normalize(eye - look_at, "eye - look_at")
    except DegenerateGeometryError as exc:
        raise DegenerateGeometryError(
            f"Camera eye {tuple(eye)} coincides with look_at {tuple(look_at)}"
        ) from exc
    try:
        u = UnitVector3.normalize(np.cross(up, np.asarray(w)), "up x w")
    except DegenerateGeometryError as exc:
        raise DegenerateGeometryError(
            f"Camera up {tuple(up)} is parallel to the view direction"
        ) from exc
    v = UnitVector3.normalize(w.cross(u), "w x u")

    horizontal = viewport_width * np.asarray(u)
    vertical = viewport_height * np.asarray(v)
    lower_left = eye - horizontal / 2.0 - vertical / 2.0 - np.asarray(w)

    return CameraGeometry(
        origin=eye,
        u=u,
        v=v,
        w=w,
        lower_left=lower_left,
        horizontal_step=horizontal / (camera.width - 1),
        vertical_step=vertical / (camera.height - 1),
    )


def setup_camera(camera: PinholeCamera) -> CameraGeometry:
    """Initialize camera state from configuration.

    Computes the geometry with :func:`compute_camera_geometry` and stores it
    in Taichi fields for :func:`cast_ray`. This must be called before
    rendering.

    Args:
        camera: Camera configuration.

    Returns:
        The derived CameraGeometry.

    Raises:
        DegenerateGeometryError: If the camera basis cannot be normalised.
        ValueError: If vfov or the image dimensions are out of range.
    """
    geometry = compute_camera_geometry(camera)

    _camera_origin[None] = geometry.origin.tolist()
    _lower_left_corner[None] = geometry.lower_left.tolist()
    _horizontal_step[None] = geometry.horizontal_step.tolist()
    _vertical_step[None] = geometry.vertical_step.tolist()
    _camera_ready[None] = 1

    return geometry


def is_camera_ready() -> bool:
    """Check whether setup_camera() has been called."""
    return bool(_camera_ready[None])


def reset_camera() -> None:
    """Forget the current camera."""
    _camera_ready[None] = 0


# =============================================================================
# Ray Generation
# =============================================================================


@ti.func
def cast_ray(u: ti.f32, v: ti.f32, sample_weight: ti.f32) -> Ray:
    """Generate a primary ray through fractional pixel coordinates (u, v).

    Args:
        u: Horizontal pixel coordinate in [0, width - 1] (left to right).
        v: Vertical pixel coordinate in [0, height - 1] (bottom to top).
        sample_weight: Initial attenuation of the ray in every channel,
            typically 1 / samples_per_pixel so samples can simply be summed.

    Returns:
        A Ray from the camera origin toward the viewport point.
    """
    origin = _camera_origin[None]
    target = _lower_left_corner[None] + u * _horizontal_step[None] + v * _vertical_step[None]
    weight = vec3(sample_weight, sample_weight, sample_weight)
    return make_ray(origin, target - origin, weight)

