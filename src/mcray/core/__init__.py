"""Core rendering module.

Components:
    vector: Host-side NumPy vectors and the UnitVector3 direction type
    ray: Ray data structure, kernel-side vector utilities and the
        degenerate-vector check
    rng: Explicit per-pixel random streams
    integrator: Background model, bounce loop and render kernels
    progressive: Batched renderer with progress callbacks

Note: integrator and progressive are NOT imported here to avoid circular
imports. Import them directly from mcray.core.integrator or
mcray.core.progressive when needed.
"""

from .ray import (
    Ray,
    attenuated,
    clear_degenerate_count,
    get_degenerate_count,
    length_squared,
    lerp,
    make_ray,
    normalize_checked,
    raise_if_degenerate,
    ray_at,
    reflect,
    refract,
    schlick_reflectance,
    vec3,
)
from .rng import (
    next_uniform,
    random_in_unit_sphere,
    random_unit_vector,
    stream_seed,
)
from .vector import UnitVector3, as_vec3

__all__ = [
    "Ray",
    "make_ray",
    "ray_at",
    "attenuated",
    "vec3",
    "length_squared",
    "normalize_checked",
    "lerp",
    "reflect",
    "refract",
    "schlick_reflectance",
    "clear_degenerate_count",
    "get_degenerate_count",
    "raise_if_degenerate",
    "stream_seed",
    "next_uniform",
    "random_in_unit_sphere",
    "random_unit_vector",
    "UnitVector3",
    "as_vec3",
]
