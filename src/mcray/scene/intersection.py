"""Scene-level nearest-hit queries over sphere storage.

Spheres are stored in Taichi fields (structure of arrays). The owning
material of sphere i lives at index i of the material table, so a hit only
has to report the index of the sphere it struck.

The query is a brute-force linear scan: every sphere is tested and the
smallest accepted distance wins. On exactly equal distances the earlier
sphere is kept.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.scene.intersection import add_sphere, clear_scene
    >>> clear_scene()
    >>> add_sphere((0.0, 0.0, -1.0), 0.5)
    0
    >>> # Use intersect_scene within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from mcray.core.ray import Ray
from mcray.geometry.sphere import Sphere, hit_sphere

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with the owning shape index.

    Attributes:
        hit: Whether the ray intersected any sphere (1 if hit, 0 if miss).
        distance: Distance along the ray to the nearest intersection.
        point: The 3D point where the ray intersected the surface.
        normal: The unit surface normal, opposing the incoming ray.
        front_face: 1 if the ray struck the outward side, 0 otherwise.
        index: Index of the struck sphere (and of its material).
            -1 on a miss.
    """

    hit: ti.i32
    distance: ti.f32
    point: vec3
    normal: vec3
    front_face: ti.i32
    index: ti.i32


# Maximum number of spheres supported in the scene
MAX_SPHERES = 1024

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())


def clear_scene() -> None:
    """Remove all spheres from the scene.

    Resets the sphere count to zero. The field data is overwritten when new
    spheres are added.
    """
    num_spheres[None] = 0


def add_sphere(center: tuple[float, float, float], radius: float) -> int:
    """Append a sphere to the scene storage.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere (non-negative).

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
    """
    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = [center[0], center[1], center[2]]
    sphere_radii[idx] = radius
    num_spheres[None] = idx + 1
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        distance=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        front_face=0,
        index=-1,
    )


@ti.func
def intersect_scene(ray: Ray, t_min: ti.f32) -> SceneHitRecord:
    """Find the nearest sphere hit by ``ray``.

    Args:
        ray: The ray to test.
        t_min: Smallest accepted hit distance (0 for no epsilon).

    Returns:
        A SceneHitRecord for the closest intersection, or a miss record if
        no sphere was hit.
    """
    result = _make_miss_record()

    for i in range(num_spheres[None]):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray, sphere, t_min)
        if rec.hit == 1:
            if result.hit == 0 or rec.distance < result.distance:
                result = SceneHitRecord(
                    hit=1,
                    distance=rec.distance,
                    point=rec.point,
                    normal=rec.normal,
                    front_face=rec.front_face,
                    index=i,
                )

    return result
