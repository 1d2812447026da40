"""Geometry module for shape primitives.

Components:
    sphere: Sphere primitive with near-root ray-sphere intersection

Intersection routines are Taichi functions (@ti.func) that take a Ray and
return a HitRecord whose normal always opposes the incoming ray.
"""

from .sphere import HitRecord, Sphere, hit_sphere

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
]
