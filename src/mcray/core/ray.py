"""Ray data structure and vector utilities for kernel-side ray tracing.

A ray carries its origin, a unit-length direction and the attenuation it
has accumulated so far. Bounces never mutate a ray: :func:`attenuated`
builds the next one, multiplying the attenuation by the bounce's albedo so
the integrator needs no separate colour stack.

Directions are normalised with :func:`normalize_checked`. A zero-length
input cannot be normalised; instead of letting NaN spread through the
image, the function counts the event in a global field which the host
checks after every kernel launch (see :func:`raise_if_degenerate`).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.core.ray import Ray, make_ray, ray_at, vec3
    >>> # Inside a Taichi kernel:
    >>> # ray = make_ray(vec3(0, 0, 0), vec3(0, 0, -2), vec3(1, 1, 1))
    >>> # point = ray_at(ray, 5.0)  # (0, 0, -5)
"""

import taichi as ti
import taichi.math as tm

from mcray.errors import DegenerateGeometryError

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Ray:
    """A ray with an origin, unit direction and accumulated attenuation.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction of the ray (vec3, unit length).
        attenuation: Per-channel multiplicative light loss carried by the
            ray (vec3). Primary rays start at the per-sample weight.
    """

    origin: vec3
    direction: vec3
    attenuation: vec3


# Number of zero-length vectors hit by normalize_checked since the last reset
_degenerate_count = ti.field(dtype=ti.i32, shape=())


def clear_degenerate_count() -> None:
    """Reset the degenerate-vector counter."""
    _degenerate_count[None] = 0


def get_degenerate_count() -> int:
    """Get the number of zero-length vectors seen since the last reset."""
    return int(_degenerate_count[None])


def raise_if_degenerate(context: str) -> None:
    """Raise if any kernel tried to normalise a zero-length vector.

    The counter is reset before raising so a caller can recover and retry
    with different input.

    Args:
        context: What was running, for the error message.

    Raises:
        DegenerateGeometryError: If the counter is non-zero.
    """
    count = get_degenerate_count()
    if count:
        clear_degenerate_count()
        raise DegenerateGeometryError(
            f"{context}: {count} zero-length vector(s) could not be normalised"
        )


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector."""
    return tm.dot(v, v)


@ti.func
def normalize_checked(v: vec3) -> vec3:
    """Normalize a vector to unit length, recording zero-length input.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v, or the zero vector if v
        has zero length (in which case the degenerate counter is bumped).
    """
    len_sq = tm.dot(v, v)
    result = vec3(0.0, 0.0, 0.0)
    if len_sq > 0.0:
        result = v / ti.sqrt(len_sq)
    else:
        _degenerate_count[None] += 1
    return result


@ti.func
def lerp(a: vec3, b: vec3, t: ti.f32) -> vec3:
    """Linear interpolation: a at t=0, b at t=1."""
    return (1.0 - t) * a + t * b


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes v - 2(v . n)n. The normal should be unit length.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (unit length).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, cos_theta: ti.f32, ratio: ti.f32) -> vec3:
    """Refract a unit incident vector through a surface.

    The caller has already ruled out total internal reflection, so the
    perpendicular part never exceeds unit length mathematically; rounding
    is clamped so the square root stays real.

    Args:
        incident: The incoming direction (unit length).
        normal: The surface normal facing the incident ray (unit length).
        cos_theta: min(1, -normal . incident).
        ratio: Ratio of refractive indices (n_incident / n_transmitted).

    Returns:
        The refracted direction.
    """
    r_perp = ratio * incident + (ratio * cos_theta) * normal
    r_parallel = -ti.sqrt(tm.max(0.0, 1.0 - tm.dot(r_perp, r_perp))) * normal
    return r_perp + r_parallel


@ti.func
def schlick_reflectance(cosine: ti.f32, ratio: ti.f32) -> ti.f32:
    """Compute Fresnel reflectance using Schlick's approximation.

    Args:
        cosine: Cosine of the angle between incident direction and normal.
        ratio: Ratio of refractive indices.

    Returns:
        The approximate Fresnel reflectance coefficient.
    """
    r0 = (1.0 - ratio) / (1.0 + ratio)
    r0 = r0 * r0
    return r0 + (1.0 - r0) * ((1.0 - cosine) ** 5)


# =============================================================================
# Ray Construction
# =============================================================================


@ti.func
def make_ray(origin: vec3, direction: vec3, attenuation: vec3) -> Ray:
    """Create a ray, normalising its direction.

    Args:
        origin: The starting point of the ray.
        direction: Any non-zero direction vector.
        attenuation: The attenuation the ray starts with.

    Returns:
        A new Ray instance.
    """
    return Ray(origin=origin, direction=normalize_checked(direction), attenuation=attenuation)


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at distance t."""
    return ray.origin + t * ray.direction


@ti.func
def attenuated(ray: Ray, new_origin: vec3, new_direction: vec3, extra: vec3) -> Ray:
    """Compose one bounce: a new ray whose attenuation is ray's times extra.

    Args:
        ray: The incoming ray.
        new_origin: Origin of the outgoing ray (the hit point).
        new_direction: Direction of the outgoing ray, not necessarily unit.
        extra: Per-channel attenuation of this bounce (albedo or white).

    Returns:
        The outgoing ray.
    """
    return make_ray(new_origin, new_direction, ray.attenuation * extra)
