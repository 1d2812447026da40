"""Lambertian (ideal diffuse) material.

The scattered direction is the surface normal plus a unit vector drawn
uniformly on the sphere's surface. This is the classic "true Lambertian"
construction from the ray-tracing-in-a-weekend lineage, not an explicit
cosine-weighted sampler with an orthonormal basis, and the attenuation is
simply the albedo.

Example:
    >>> # Within a Taichi kernel:
    >>> # state, direction, attenuation = scatter_lambertian(albedo, normal, state)
"""

import taichi as ti
import taichi.math as tm

from mcray.core.rng import random_unit_vector

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_lambertian(albedo: vec3, normal: vec3, state: ti.u32):
    """Sample a scattered direction for a Lambertian surface.

    Args:
        albedo: The diffuse reflectance color (RGB, each component in [0, 1]).
        normal: The unit surface normal facing the incoming ray.
        state: The current random stream state.

    Returns:
        A tuple of (new_state, scattered_direction, attenuation). The
        direction is not normalised; an exactly opposite random sample gives
        a zero vector, which the ray constructor reports as degenerate.
    """
    s, on_sphere = random_unit_vector(state)
    scattered_direction = normal + on_sphere
    return s, scattered_direction, albedo
