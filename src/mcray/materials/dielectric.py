"""Dielectric (glass/water) material.

Key physics:
    - Snell's law for refraction: n1 * sin(theta1) = n2 * sin(theta2)
    - Schlick's approximation for Fresnel reflectance
    - Total internal reflection when ratio * sin(theta) > 1

The material reflects on total internal reflection, otherwise flips a coin
weighted by the Schlick reflectance. Glass never tints: the attenuation is
white, so the incoming ray's attenuation passes through bit for bit.

Example:
    >>> # Within a Taichi kernel:
    >>> # state, direction, attenuation = scatter_dielectric(
    >>> #     refractive_index, incident_dir, normal, front_face, state
    >>> # )
"""

import taichi as ti
import taichi.math as tm

from mcray.core.ray import reflect, refract, schlick_reflectance
from mcray.core.rng import next_uniform

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.func
def refraction_ratio(refractive_index: ti.f32, front_face: ti.i32) -> ti.f32:
    """Ratio of refractive indices for the side the ray arrives from.

    Entering from outside (front_face=1): 1 / ior (air to glass).
    Leaving from inside (front_face=0): ior (glass to air).
    """
    ratio = refractive_index
    if front_face == 1:
        ratio = 1.0 / refractive_index
    return ratio


@ti.func
def cannot_refract(ratio: ti.f32, incident_direction: vec3, normal: vec3) -> ti.i32:
    """Check for total internal reflection.

    Returns:
        1 if ratio * sin(theta) > 1, 0 otherwise.
    """
    cos_theta = tm.min(-tm.dot(normal, incident_direction), 1.0)
    sin_theta = ti.sqrt(1.0 - cos_theta * cos_theta)
    return 1 if ratio * sin_theta > 1.0 else 0


@ti.func
def scatter_dielectric(
    refractive_index: ti.f32,
    incident_direction: vec3,
    normal: vec3,
    front_face: ti.i32,
    state: ti.u32,
):
    """Compute the scattered direction for a dielectric surface.

    The Fresnel coin is only drawn when refraction is possible, so total
    internal reflection consumes no randomness.

    Args:
        refractive_index: Index of refraction of the material (> 0).
        incident_direction: The incoming ray direction (unit length).
        normal: The unit surface normal facing the incoming ray.
        front_face: 1 if the ray hit the outside of the surface,
            0 if it hit from within.
        state: The current random stream state.

    Returns:
        A tuple of (new_state, scattered_direction, attenuation) with a
        white attenuation.
    """
    ratio = refraction_ratio(refractive_index, front_face)
    cos_theta = tm.min(-tm.dot(normal, incident_direction), 1.0)

    s = state
    do_reflect = cannot_refract(ratio, incident_direction, normal)
    if do_reflect == 0:
        s, coin = next_uniform(s)
        if coin < schlick_reflectance(cos_theta, ratio):
            do_reflect = 1

    scattered_direction = vec3(0.0, 0.0, 0.0)
    if do_reflect == 1:
        scattered_direction = reflect(incident_direction, normal)
    else:
        scattered_direction = refract(incident_direction, normal, cos_theta, ratio)

    attenuation = vec3(1.0, 1.0, 1.0)
    return s, scattered_direction, attenuation
