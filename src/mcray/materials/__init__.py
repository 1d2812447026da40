"""Materials module for light scattering.

Components:
    lambertian: Diffuse reflection (normal + random unit vector)
    metal: Mirror reflection with optional fuzz
    dielectric: Glass-like refraction with Schlick reflectance
    material: Host-side Material variants, the device material table and
        the single dispatch switch used by the integrator

Each variant's scatter function takes the explicit random stream state and
returns (new_state, scattered_direction, attenuation).
"""

from .dielectric import cannot_refract, refraction_ratio, scatter_dielectric
from .lambertian import scatter_lambertian
from .material import (
    MAX_MATERIALS,
    Material,
    MaterialKind,
    scatter_material,
    store_material,
)
from .metal import scatter_metal

__all__ = [
    "Material",
    "MaterialKind",
    "MAX_MATERIALS",
    "store_material",
    "scatter_material",
    "scatter_lambertian",
    "scatter_metal",
    "scatter_dielectric",
    "refraction_ratio",
    "cannot_refract",
]
