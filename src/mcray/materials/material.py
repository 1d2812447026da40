"""Material variants, the material table and scatter dispatch.

The material set is closed: Lambertian, Metal and Dielectric. On the host a
material is a frozen :class:`Material`; on the device it lives in a
structure-of-arrays table indexed by the index of the shape that owns it.
:func:`scatter_material` dispatches on the kind with a single switch and
composes the outgoing ray with :func:`mcray.core.ray.attenuated`.

Example:
    >>> glass = Material.dielectric(1.5)
    >>> gold = Material.metal((0.8, 0.6, 0.2), fuzz=0.3)
    >>> store_material(0, glass)
    >>> # Within a Taichi kernel:
    >>> # state, scattered = scatter_material(ray, hit_record, 0, state)
"""

from dataclasses import dataclass
from enum import IntEnum

import taichi as ti
import taichi.math as tm

from mcray.core.ray import Ray, attenuated
from mcray.materials.dielectric import scatter_dielectric
from mcray.materials.lambertian import scatter_lambertian
from mcray.materials.metal import scatter_metal

# Type alias for 3D vectors
vec3 = tm.vec3


class MaterialKind(IntEnum):
    """Enumeration of supported material types.

    Used for material dispatch in the integrator.
    """

    LAMBERTIAN = 0
    METAL = 1
    DIELECTRIC = 2


def _validate_albedo(albedo: tuple[float, float, float]) -> tuple[float, float, float]:
    if len(albedo) != 3:
        raise ValueError(f"Albedo must have 3 components, got {len(albedo)}")
    for i, component in enumerate(albedo):
        if not 0.0 <= component <= 1.0:
            raise ValueError(
                f"Albedo component {i} = {component} is outside [0, 1]. "
                "This would violate energy conservation."
            )
    return (float(albedo[0]), float(albedo[1]), float(albedo[2]))


@dataclass(frozen=True)
class Material:
    """Immutable material configuration.

    Build instances with :meth:`lambertian`, :meth:`metal` or
    :meth:`dielectric`; unused parameters keep their defaults.

    Attributes:
        kind: Which variant this is.
        albedo: Reflectance color (Lambertian, Metal).
        fuzz: Mirror perturbation radius (Metal).
        refractive_index: Index of refraction (Dielectric).
    """

    kind: MaterialKind
    albedo: tuple[float, float, float] = (0.0, 0.0, 0.0)
    fuzz: float = 0.0
    refractive_index: float = 1.0

    @classmethod
    def lambertian(cls, albedo: tuple[float, float, float]) -> "Material":
        """Diffuse material.

        Raises:
            ValueError: If any albedo component is outside [0, 1].
        """
        return cls(MaterialKind.LAMBERTIAN, albedo=_validate_albedo(albedo))

    @classmethod
    def metal(cls, albedo: tuple[float, float, float], fuzz: float = 0.0) -> "Material":
        """Reflective material.

        Raises:
            ValueError: If any albedo component is outside [0, 1] or fuzz
                is negative.
        """
        if fuzz < 0.0:
            raise ValueError(f"Fuzz = {fuzz} is negative. Fuzz must be >= 0 (0 = perfect mirror).")
        return cls(MaterialKind.METAL, albedo=_validate_albedo(albedo), fuzz=float(fuzz))

    @classmethod
    def dielectric(cls, refractive_index: float = 1.5) -> "Material":
        """Transparent refractive material.

        Common values: Water=1.33, Glass=1.5, Diamond=2.4.

        Raises:
            ValueError: If the refractive index is not positive.
        """
        if not refractive_index > 0.0:
            raise ValueError(
                f"Index of refraction = {refractive_index} must be positive."
            )
        return cls(MaterialKind.DIELECTRIC, refractive_index=float(refractive_index))

    def to_dict(self) -> dict[str, object]:
        """Describe the material with only the parameters its kind uses."""
        if self.kind == MaterialKind.LAMBERTIAN:
            return {"type": "lambertian", "albedo": self.albedo}
        if self.kind == MaterialKind.METAL:
            return {"type": "metal", "albedo": self.albedo, "fuzz": self.fuzz}
        return {"type": "dielectric", "refractive_index": self.refractive_index}


# =============================================================================
# Material Table (parallel to the scene's sphere storage)
# =============================================================================

# Maximum number of materials; one per shape
MAX_MATERIALS = 1024

material_kinds = ti.field(dtype=ti.i32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_fuzz = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)


def store_material(index: int, material: Material) -> None:
    """Write a material into the device table at ``index``.

    Raises:
        RuntimeError: If index is outside the table.
    """
    if not 0 <= index < MAX_MATERIALS:
        raise RuntimeError(f"Material index {index} outside table of {MAX_MATERIALS}")
    material_kinds[index] = int(material.kind)
    material_albedos[index] = list(material.albedo)
    material_fuzz[index] = material.fuzz
    material_refractive_indices[index] = material.refractive_index


# =============================================================================
# Material Dispatch
# =============================================================================


@ti.func
def scatter_material(ray: Ray, rec, index: ti.i32, state: ti.u32):
    """Scatter ``ray`` off the surface described by ``rec``.

    Dispatches on the kind of material ``index`` and composes the outgoing
    ray: origin at the hit point, attenuation multiplied by the bounce's
    attenuation.

    Args:
        ray: The incoming ray.
        rec: The hit record (HitRecord or SceneHitRecord).
        index: Index of the owning shape in the material table.
        state: The current random stream state.

    Returns:
        A tuple of (new_state, scattered_ray).
    """
    kind = material_kinds[index]

    s = state
    direction = vec3(0.0, 0.0, 0.0)
    extra = vec3(0.0, 0.0, 0.0)

    if kind == int(MaterialKind.LAMBERTIAN):
        s, direction, extra = scatter_lambertian(material_albedos[index], rec.normal, s)

    elif kind == int(MaterialKind.METAL):
        s, direction, extra = scatter_metal(
            material_albedos[index], material_fuzz[index], ray.direction, rec.normal, s
        )

    elif kind == int(MaterialKind.DIELECTRIC):
        s, direction, extra = scatter_dielectric(
            material_refractive_indices[index], ray.direction, rec.normal, rec.front_face, s
        )

    return s, attenuated(ray, rec.point, direction, extra)
