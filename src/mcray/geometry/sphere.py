"""Sphere primitive and ray-sphere intersection.

The intersection solves |origin + t * direction - center|^2 = radius^2 in
half-b form and only ever considers the near root:

    a      = dot(direction, direction)      (1 for unit directions)
    half_b = dot(origin - center, direction)
    c      = |origin - center|^2 - radius^2
    t      = (-half_b - sqrt(half_b^2 - a*c)) / a

A ray that starts strictly inside a sphere has a negative near root and so
reports no hit. Hits are accepted for t >= t_min, where t_min = 0 reproduces
the classic behaviour without a self-intersection epsilon. With t_min = 0 a
bounce ray starting on the surface can still report a hit at t ~ 0 when
rounding puts its origin just outside; a refracted ray entering glass is the
usual case. Raise t_min to suppress it.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -1), radius=0.5)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from mcray.core.ray import Ray, normalize_checked, ray_at

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (non-negative float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-sphere intersection.

    Attributes:
        hit: Whether the ray intersected the sphere (1 if hit, 0 if miss).
        distance: Distance along the ray to the intersection.
            Only valid if hit == 1.
        point: The 3D point where the ray intersected the sphere.
        normal: The unit surface normal, flipped so it always opposes the
            incoming ray.
        front_face: 1 if the ray struck the outward side, 0 otherwise.
    """

    hit: ti.i32
    distance: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32


@ti.func
def hit_sphere(ray: Ray, sphere: Sphere, t_min: ti.f32) -> HitRecord:
    """Test for ray-sphere intersection at the near root.

    Args:
        ray: The ray to test.
        sphere: The sphere to test intersection against.
        t_min: Smallest accepted distance (0 for no epsilon).

    Returns:
        A HitRecord; check its hit field to determine if intersection
        occurred. A discriminant of exactly zero (tangent ray) is an ordinary
        hit.
    """
    oc = ray.origin - sphere.center
    a = tm.dot(ray.direction, ray.direction)
    half_b = tm.dot(oc, ray.direction)
    c = tm.dot(oc, oc) - sphere.radius * sphere.radius
    discriminant = half_b * half_b - a * c

    # Initialize result fields (Taichi requires outer-scope declaration)
    did_hit = 0
    distance = 0.0
    point = vec3(0.0, 0.0, 0.0)
    normal = vec3(0.0, 0.0, 0.0)
    front_face = 0

    if discriminant >= 0.0:
        t = (-half_b - ti.sqrt(discriminant)) / a
        if t >= t_min:
            did_hit = 1
            distance = t
            point = ray_at(ray, t)
            outward_normal = normalize_checked(point - sphere.center)
            if tm.dot(outward_normal, ray.direction) < 0.0:
                front_face = 1
                normal = outward_normal
            else:
                normal = -outward_normal

    return HitRecord(
        hit=did_hit,
        distance=distance,
        point=point,
        normal=normal,
        front_face=front_face,
    )
