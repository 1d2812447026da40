"""Metal (specular reflective) material.

The reflection formula is:
    R = I - 2(I . N)N

A fuzz parameter perturbs the mirror direction by a random point inside a
sphere of that radius. When the perturbed direction dips below the surface
the bounce carries zero attenuation: the path keeps going but contributes
no more energy.

Example:
    >>> # Within a Taichi kernel:
    >>> # state, direction, attenuation = scatter_metal(
    >>> #     albedo, fuzz, incident_dir, normal, state
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from mcray.core.ray import reflect
from mcray.core.rng import random_in_unit_sphere

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def scatter_metal(
    albedo: vec3,
    fuzz: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    state: ti.u32,
):
    """Compute the scattered direction for a metal surface.

    The fuzz sample is drawn even for a perfect mirror (fuzz = 0) so the
    number of draws per bounce does not depend on the material parameters.

    Args:
        albedo: The reflective color (RGB, each component in [0, 1]).
        fuzz: Radius of the perturbation sphere (>= 0). 0 = perfect mirror.
        incident_direction: The incoming ray direction (unit length).
        normal: The unit surface normal facing the incoming ray.
        state: The current random stream state.

    Returns:
        A tuple of (new_state, scattered_direction, attenuation) where the
        attenuation is the albedo if the direction leaves the surface and
        zero otherwise.
    """
    s, offset = random_in_unit_sphere(state)
    scattered_direction = reflect(incident_direction, normal) + fuzz * offset

    attenuation = vec3(0.0, 0.0, 0.0)
    if tm.dot(scattered_direction, normal) > 0.0:
        attenuation = albedo

    return s, scattered_direction, attenuation
