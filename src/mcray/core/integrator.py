"""Monte Carlo integrator for sphere scenes.

This module traces rays through the scene, bouncing off surfaces according
to their material, and accumulates the colour carried back from the sky
into a preallocated colour buffer.

Key features:
    - Material dispatch (Lambertian, Metal, Dielectric)
    - Sky gradient background weighted by the ray's attenuation
    - Fixed bounce budget: a path that runs out of bounces contributes black
    - One independent random stream per pixel, so a render depends only on
      the seed and the scene

Each primary ray starts with attenuation ``sample_weight`` (usually
``1 / samples_per_pixel``) and the colour of every sample is added straight
into the buffer, one sample at a time. Splitting a render into batches
therefore gives the same buffer as a single call.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.core.integrator import render_samples, setup_render_target
    >>> from mcray.scene.presets import create_showcase_scene
    >>> from mcray.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_showcase_scene(64, 48)
    >>> setup_camera(camera)
    >>> setup_render_target(64, 48, seed=7)
    >>> render_samples(count=16, sample_weight=1.0 / 16)
"""

import logging

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from mcray.camera.pinhole import cast_ray, is_camera_ready
from mcray.core.ray import Ray, get_degenerate_count, lerp, make_ray, raise_if_degenerate
from mcray.core.rng import next_uniform, stream_seed
from mcray.core.vector import UnitVector3, as_vec3
from mcray.materials.material import scatter_material
from mcray.scene.intersection import intersect_scene

logger = logging.getLogger(__name__)

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Maximum ray bounces (path length)
MAX_DEPTH = 50

# Sky gradient endpoints: horizon (white) to zenith (blue)
WHITE = vec3(1.0, 1.0, 1.0)
SKY_BLUE = vec3(0.5, 0.7, 1.0)


# =============================================================================
# Path Tracing
# =============================================================================


@ti.func
def background(ray: Ray) -> vec3:
    """Colour of a ray that escapes the scene.

    Blends white and sky blue by the height of the ray direction and
    scales the result by the ray's attenuation.
    """
    t = 0.5 * (ray.direction.y + 1.0)
    return lerp(WHITE, SKY_BLUE, t) * ray.attenuation


@ti.func
def ray_color(ray: Ray, max_depth: ti.i32, t_min: ti.f32, state: ti.u32):
    """Follow ``ray`` through the scene for at most ``max_depth`` bounces.

    Every hit scatters the ray off the struck sphere's material, folding
    the bounce's attenuation into the ray. The path ends when the ray
    escapes (returning the attenuated background) or when the bounce budget
    is exhausted (returning black). A budget of zero is immediately black.

    Args:
        ray: The ray to follow.
        max_depth: Bounce budget.
        t_min: Smallest accepted hit distance.
        state: The current random stream state.

    Returns:
        A tuple of (new_state, color).
    """
    s = state
    origin = ray.origin
    direction = ray.direction
    attenuation = ray.attenuation
    color = vec3(0.0, 0.0, 0.0)

    # Active flag for path continuation (Taichi doesn't support break in ti.func loops)
    active = 1

    for _ in range(max_depth):
        if active == 1:
            current = Ray(origin=origin, direction=direction, attenuation=attenuation)
            rec = intersect_scene(current, t_min)

            if rec.hit == 0:
                color = background(current)
                active = 0
            else:
                s, scattered = scatter_material(current, rec, rec.index, s)
                origin = scattered.origin
                direction = scattered.direction
                attenuation = scattered.attenuation

    return s, color


# =============================================================================
# Render Target (Image Buffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

# Image dimensions (actual active size)
_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Color accumulation buffer (preallocated to max size); j = 0 is the bottom row
_color_buffer = ti.Vector.field(3, dtype=ti.f32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Random stream state per pixel
_rng_states = ti.field(dtype=ti.u32, shape=(MAX_IMAGE_WIDTH, MAX_IMAGE_HEIGHT))

# Samples added to every pixel since the last clear
_total_samples = ti.field(dtype=ti.i32, shape=())

# Flag to track if render target is initialized
_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Result slot for trace_ray()
_trace_result = ti.Vector.field(3, dtype=ti.f32, shape=())


@ti.kernel
def _seed_streams(seed: ti.u32, width: ti.i32, height: ti.i32):
    for i, j in ti.ndrange(width, height):
        _rng_states[i, j] = stream_seed(seed, ti.cast(j * width + i, ti.u32))


def setup_render_target(width: int, height: int, seed: int = 0) -> None:
    """Initialize the render target buffers.

    Sets the active image dimensions, clears the colour buffer and seeds
    one random stream per pixel from ``seed`` and the pixel index
    ``j * width + i``.

    Args:
        width: Image width in pixels (max MAX_IMAGE_WIDTH).
        height: Image height in pixels (max MAX_IMAGE_HEIGHT).
        seed: Render seed; only the low 32 bits are used.

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum
            supported size.
    """
    if width < 1 or height < 1:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()
    _seed_streams(seed & 0xFFFFFFFF, width, height)
    logger.debug("Render target %dx%d seeded with %#x", width, height, seed & 0xFFFFFFFF)


def clear_render_target() -> None:
    """Clear the colour buffer and the sample count."""
    _color_buffer.fill(0.0)
    _total_samples[None] = 0


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def get_total_samples() -> int:
    """Get the number of samples added to every pixel since the last clear."""
    return int(_total_samples[None])


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_batch(
    count: ti.i32,
    sample_weight: ti.f32,
    max_depth: ti.i32,
    t_min: ti.f32,
    width: ti.i32,
    height: ti.i32,
):
    """Add ``count`` jittered samples to every pixel.

    Each sample draws the horizontal jitter, then the vertical jitter, then
    whatever the bounces need, all from the pixel's own stream.
    """
    ti.loop_config(serialize=True)
    for i, j in ti.ndrange(width, height):
        state = _rng_states[i, j]
        for _sample in range(count):
            state, du = next_uniform(state)
            state, dv = next_uniform(state)
            ray = cast_ray(ti.cast(i, ti.f32) + du, ti.cast(j, ti.f32) + dv, sample_weight)
            state, color = ray_color(ray, max_depth, t_min, state)
            _color_buffer[i, j] += color
        _rng_states[i, j] = state


@ti.kernel
def _trace_ray_kernel(
    origin: vec3,
    direction: vec3,
    max_depth: ti.i32,
    seed: ti.u32,
    t_min: ti.f32,
):
    for _ in range(1):
        state = stream_seed(seed, ti.u32(0))
        ray = make_ray(origin, direction, vec3(1.0, 1.0, 1.0))
        state, color = ray_color(ray, max_depth, t_min, state)
        _trace_result[None] = color


# =============================================================================
# Public Rendering API
# =============================================================================


def render_samples(
    count: int,
    sample_weight: float,
    max_depth: int = MAX_DEPTH,
    t_min: float = 0.0,
) -> None:
    """Add ``count`` samples per pixel to the colour buffer.

    Can be called repeatedly; each call continues every pixel's stream
    where the previous call left it.

    Args:
        count: Number of samples to add per pixel.
        sample_weight: Initial attenuation of every primary ray.
        max_depth: Bounce budget per path.
        t_min: Smallest accepted hit distance.

    Raises:
        RuntimeError: If the render target or the camera has not been set up.
        ValueError: If count or max_depth is negative.
        DegenerateGeometryError: If the scene produced a zero-length vector.
            The colour buffer and sample count are cleared first.
    """
    _check_render_target_initialized()
    if not is_camera_ready():
        raise RuntimeError("Camera not set up. Call setup_camera() first.")
    if count < 0:
        raise ValueError(f"Sample count = {count} is negative")
    if max_depth < 0:
        raise ValueError(f"Max depth = {max_depth} is negative")
    if count == 0:
        return

    width, height = get_image_dimensions()
    _render_batch(count, sample_weight, max_depth, t_min, width, height)
    if get_degenerate_count():
        # The batch is already in the buffer; drop it with the earlier samples
        clear_render_target()
    raise_if_degenerate("render")

    _total_samples[None] += count
    logger.debug("Added %d sample(s) per pixel (total %d)", count, get_total_samples())


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = MAX_DEPTH,
    seed: int = 0,
    t_min: float = 0.0,
) -> tuple[float, float, float]:
    """Trace a single ray with unit attenuation through the current scene.

    Useful for testing and debugging individual paths.

    Args:
        origin: Ray origin.
        direction: Ray direction (any non-zero vector).
        max_depth: Bounce budget.
        seed: Seed of the ray's random stream.
        t_min: Smallest accepted hit distance.

    Returns:
        Tuple of (R, G, B) color values.

    Raises:
        DegenerateGeometryError: If direction is zero or the path produced a
            zero-length vector.
    """
    unit = UnitVector3.normalize(direction, "ray direction")
    start = as_vec3(origin, "ray origin")

    _trace_ray_kernel(
        vec3(*start.tolist()),
        vec3(*unit.to_tuple()),
        max_depth,
        seed & 0xFFFFFFFF,
        t_min,
    )
    raise_if_degenerate("trace_ray")

    color = _trace_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def get_image_numpy() -> npt.NDArray[np.float32]:
    """Get the accumulated colour buffer as a NumPy array.

    The array shape is (height, width, 3) with dtype float32; row 0 is the
    top of the scene.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()

    width, height = get_image_dimensions()

    # Get raw image data (full buffer) and extract the active region
    image = _color_buffer.to_numpy()[:width, :height, :]

    # Transpose from (width, height, 3) to (height, width, 3) for standard image format
    image = np.transpose(image, (1, 0, 2))

    # Flip vertically (the buffer uses a bottom-left origin, images use top-left)
    image = np.flipud(image)

    return np.ascontiguousarray(image, dtype=np.float32)
