"""Scene container pairing each sphere with the material that governs it.

A :class:`Scene` is two equal-length parallel sequences: ``shapes[i]`` is a
sphere and ``materials[i]`` is its material. Adding an element writes both
the sphere storage and the material table at the same index, so kernels
resolve the material of a hit directly from the hit's index. Scenes are
append-only; :meth:`Scene.clear` starts over.

The device-side storage is global (Taichi fields), so only one scene is
live at a time; creating a Scene clears whatever was stored before.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.materials.material import Material
    >>> from mcray.scene.manager import Scene
    >>> scene = Scene()
    >>> scene.add((0, 0, -1), 0.5, Material.lambertian((0.1, 0.2, 0.5)))
    0
    >>> scene.add_dielectric_sphere((-1, 0, -1), 0.5, refractive_index=1.5)
    1
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from mcray.core.vector import as_vec3
from mcray.materials.material import MAX_MATERIALS, Material, store_material
from mcray.scene.intersection import (
    MAX_SPHERES,
    add_sphere,
    clear_scene,
    get_sphere_count,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        center: The center of the sphere.
        radius: The radius of the sphere (>= 0).
    """

    center: tuple[float, float, float]
    radius: float


class Scene:
    """Append-only collection of (sphere, material) pairs.

    Only the most recently created Scene is live: creating a Scene clears the
    device storage, so an older Scene no longer describes what kernels see.
    Adding to a scene that is no longer live raises RuntimeError.

    Attributes:
        shapes: SphereInfo for every sphere, in insertion order.
        materials: Material of every sphere; materials[i] governs shapes[i].
    """

    _live: Scene | None = None

    def __init__(self) -> None:
        """Initialize an empty scene, clearing the device storage."""
        self.shapes: list[SphereInfo] = []
        self.materials: list[Material] = []
        clear_scene()
        Scene._live = self

    @property
    def is_live(self) -> bool:
        """Whether the device storage holds this scene."""
        return Scene._live is self

    def clear(self) -> None:
        """Remove every sphere and material, making this scene live again."""
        self.shapes.clear()
        self.materials.clear()
        clear_scene()
        Scene._live = self

    def add(
        self,
        center: tuple[float, float, float],
        radius: float,
        material: Material,
    ) -> int:
        """Add a sphere together with its material.

        Args:
            center: The center of the sphere.
            radius: The radius of the sphere (must be >= 0).
            material: The material governing the sphere.

        Returns:
            The index shared by the sphere and its material.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded
                or the scene is no longer live.
            ValueError: If the radius is negative or the center is malformed.
        """
        if not self.is_live:
            raise RuntimeError("Scene was replaced by a newer Scene; its storage is gone")
        if radius < 0.0:
            raise ValueError(f"Sphere radius = {radius} is negative")
        if len(self.shapes) >= min(MAX_SPHERES, MAX_MATERIALS):
            raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")

        center_vec = as_vec3(center, "center")
        center_tuple = (float(center_vec[0]), float(center_vec[1]), float(center_vec[2]))

        index = add_sphere(center_tuple, float(radius))
        store_material(index, material)

        self.shapes.append(SphereInfo(center=center_tuple, radius=float(radius)))
        self.materials.append(material)
        logger.debug("Added sphere %d at %s (r=%g): %s", index, center_tuple, radius, material.kind.name)
        return index

    # =========================================================================
    # Convenience Methods
    # =========================================================================

    def add_lambertian_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
    ) -> int:
        """Add a sphere with a Lambertian material."""
        return self.add(center, radius, Material.lambertian(albedo))

    def add_metal_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        albedo: tuple[float, float, float],
        fuzz: float = 0.0,
    ) -> int:
        """Add a sphere with a metal material."""
        return self.add(center, radius, Material.metal(albedo, fuzz))

    def add_dielectric_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        refractive_index: float = 1.5,
    ) -> int:
        """Add a sphere with a dielectric material."""
        return self.add(center, radius, Material.dielectric(refractive_index))

    # =========================================================================
    # Queries
    # =========================================================================

    def __len__(self) -> int:
        return len(self.shapes)

    def __iter__(self) -> Iterator[tuple[SphereInfo, Material]]:
        return iter(zip(self.shapes, self.materials))

    def get_sphere_count(self) -> int:
        """Get the number of spheres stored on the device."""
        return get_sphere_count()

    def to_dict(self) -> dict[str, Any]:
        """Describe the scene as plain data."""
        return {
            "spheres": [
                {"center": shape.center, "radius": shape.radius, "material": material.to_dict()}
                for shape, material in self
            ]
        }

    def __repr__(self) -> str:
        return f"Scene(spheres={len(self)})"
