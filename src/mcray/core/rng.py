"""Explicit random streams for Monte Carlo sampling.

Every function that needs entropy takes the current 32-bit stream state and
returns ``(new_state, value)``. Nothing reads a process-wide generator, so
the output of a render depends only on the seed, the scene and the order
of draws.

Each pixel gets its own stream, derived from the render seed and the pixel
index with :func:`stream_seed`. Streams advance with xorshift32; seeds are
scrambled with a Wang hash so neighbouring pixels start far apart.

Example:
    >>> # Inside a Taichi kernel:
    >>> # state = stream_seed(seed, ti.u32(pixel_index))
    >>> # state, u = next_uniform(state)
    >>> # state, direction = random_unit_vector(state)
"""

import taichi as ti
import taichi.math as tm

from mcray.core.ray import length_squared, normalize_checked

vec3 = tm.vec3

# Rejection sampling gives up after this many tries; the chance of getting
# there is (1 - pi/6) ** 64, far below float resolution.
MAX_REJECTION_TRIES = 64

# 2^-24: maps the top 24 bits of a draw onto [0, 1)
_UNIT_SCALE = 1.0 / 16777216.0


@ti.func
def wang_hash(value: ti.u32) -> ti.u32:
    """Scramble a 32-bit integer (Thomas Wang's hash)."""
    h = (value ^ ti.u32(61)) ^ (value >> ti.u32(16))
    h = h * ti.u32(9)
    h = h ^ (h >> ti.u32(4))
    h = h * ti.u32(0x27D4EB2D)
    h = h ^ (h >> ti.u32(15))
    return h


@ti.func
def stream_seed(seed: ti.u32, stream: ti.u32) -> ti.u32:
    """Derive the starting state of an independent sub-stream.

    Args:
        seed: The render-wide seed.
        stream: The sub-stream index (the pixel index for renders).

    Returns:
        A non-zero xorshift32 state.
    """
    state = wang_hash(seed ^ wang_hash(stream + ti.u32(1)))
    if state == ti.u32(0):
        state = ti.u32(0x6D2B79F5)
    return state


@ti.func
def next_state(state: ti.u32) -> ti.u32:
    """Advance an xorshift32 state by one step."""
    x = state
    x = x ^ (x << ti.u32(13))
    x = x ^ (x >> ti.u32(17))
    x = x ^ (x << ti.u32(5))
    return x


@ti.func
def next_uniform(state: ti.u32):
    """Draw a uniform float in [0, 1).

    Returns:
        A tuple of (new_state, value).
    """
    s = next_state(state)
    value = ti.cast(s >> ti.u32(8), ti.f32) * _UNIT_SCALE
    return s, value


@ti.func
def random_in_unit_sphere(state: ti.u32):
    """Draw a point uniformly distributed inside the unit sphere.

    Uses rejection sampling over the enclosing cube, accepting points with
    squared length <= 1.

    Returns:
        A tuple of (new_state, point).
    """
    s = state
    p = vec3(0.0, 0.0, 0.0)
    found = 0
    for _ in range(MAX_REJECTION_TRIES):
        if found == 0:
            s, x = next_uniform(s)
            s, y = next_uniform(s)
            s, z = next_uniform(s)
            candidate = 2.0 * vec3(x, y, z) - vec3(1.0, 1.0, 1.0)
            if length_squared(candidate) <= 1.0:
                p = candidate
                found = 1
    return s, p


@ti.func
def random_unit_vector(state: ti.u32):
    """Draw a unit vector uniformly distributed on the sphere's surface.

    This is the normalized version of random_in_unit_sphere().

    Returns:
        A tuple of (new_state, unit_vector).
    """
    s, p = random_in_unit_sphere(state)
    return s, normalize_checked(p)
