"""Offline Monte Carlo ray tracer for sphere scenes, built on Taichi.

The renderer traces jittered primary rays from a pinhole camera through a
scene of spheres with Lambertian, metal and dielectric materials and writes
the result as a plain-text PPM (or, via Pillow, any other raster format).

Subpackages:
    core: Vectors, rays, random streams, the integrator and the renderer
    geometry: Sphere primitive and ray-sphere intersection
    materials: Lambertian, metal and dielectric scattering
    scene: Scene storage, nearest-hit queries and preset scenes
    camera: Pinhole camera with look-at positioning
    output: Gamma correction, 8-bit conversion and image writers

Taichi must be initialised before importing any module that declares
fields (everything under ``core``, ``geometry``, ``materials``, ``scene``
and ``camera``); ``mcray.cli`` does this for command-line use.
"""

__version__ = "0.1.0"
