"""Ready-made scenes, each paired with a camera that frames it.

Two scenes are provided:
- ``random``: the "final scene" of a large field of small random spheres
  around three big ones (glass, diffuse, metal), seen from (13, 2, 3)
- ``showcase``: three spheres (glass, diffuse, metal) on a large ground
  sphere, seen from the origin looking down -z

The random scene draws from ``numpy.random.default_rng(seed)``, so the same
seed always yields the same scene.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from mcray.scene.presets import create_random_scene
    >>> from mcray.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_random_scene(320, 200, seed=42)
    >>> setup_camera(camera)
"""

import logging
from collections.abc import Callable

import numpy as np

from mcray.camera.pinhole import PinholeCamera
from mcray.scene.manager import Scene

logger = logging.getLogger(__name__)

SceneFactory = Callable[[int, int, int], tuple[Scene, PinholeCamera]]

# Default output dimensions
DEFAULT_WIDTH = 1280
DEFAULT_HEIGHT = 800

# Small spheres stay this far from the big metal sphere's footprint
_CLEARANCE_POINT = np.array([4.0, 0.2, 0.0])
_CLEARANCE = 0.9


def create_random_scene(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    seed: int = 0,
) -> tuple[Scene, PinholeCamera]:
    """Create the random-spheres scene.

    A grey ground sphere of radius 1000 carries a 22x22 grid of small
    spheres (radius 0.2) jittered inside their cells. Each small sphere is
    diffuse with probability 0.8, metal with probability 0.15 and glass
    otherwise. Three unit spheres sit in the middle: glass at (0, 1, 0),
    brown diffuse at (-4, 1, 0) and polished metal at (4, 1, 0).

    Args:
        width: Image width in pixels.
        height: Image height in pixels.
        seed: Seed of the scene generator.

    Returns:
        Tuple of (Scene, PinholeCamera).
    """
    rng = np.random.default_rng(seed)
    scene = Scene()

    scene.add_lambertian_sphere((0.0, -1000.0, 0.0), 1000.0, (0.5, 0.5, 0.5))

    for a in range(-11, 11):
        for b in range(-11, 11):
            choose_mat = rng.random()
            center = np.array([a + 0.9 * rng.random(), 0.2, b + 0.9 * rng.random()])

            if np.linalg.norm(center - _CLEARANCE_POINT) <= _CLEARANCE:
                continue

            position = (float(center[0]), float(center[1]), float(center[2]))
            if choose_mat < 0.8:
                albedo = rng.random(3) * rng.random(3)
                scene.add_lambertian_sphere(position, 0.2, tuple(albedo.tolist()))
            elif choose_mat < 0.95:
                albedo = rng.uniform(0.5, 1.0, 3)
                fuzz = rng.uniform(0.0, 0.5)
                scene.add_metal_sphere(position, 0.2, tuple(albedo.tolist()), float(fuzz))
            else:
                scene.add_dielectric_sphere(position, 0.2, 1.5)

    scene.add_dielectric_sphere((0.0, 1.0, 0.0), 1.0, 1.5)
    scene.add_lambertian_sphere((-4.0, 1.0, 0.0), 1.0, (0.4, 0.2, 0.1))
    scene.add_metal_sphere((4.0, 1.0, 0.0), 1.0, (0.7, 0.6, 0.5), 0.0)

    camera = PinholeCamera(
        eye=(13.0, 2.0, 3.0),
        look_at=(0.0, 0.0, 0.0),
        up=(0.0, 1.0, 0.0),
        vfov=40.0,
        width=width,
        height=height,
    )

    logger.info("Generated random scene with %d spheres (seed %d)", len(scene), seed)
    return scene, camera


def create_showcase_scene(
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    seed: int = 0,
) -> tuple[Scene, PinholeCamera]:
    """Create the three-sphere showcase scene.

    The scene is fixed; ``seed`` is accepted so every preset shares one
    signature.

    Returns:
        Tuple of (Scene, PinholeCamera).
    """
    scene = Scene()

    scene.add_lambertian_sphere((0.0, -100.5, -1.0), 100.0, (0.8, 0.8, 0.0))
    scene.add_lambertian_sphere((0.0, 0.0, -1.0), 0.5, (0.1, 0.2, 0.5))
    scene.add_dielectric_sphere((-1.0, 0.0, -1.0), 0.5, 1.5)
    scene.add_metal_sphere((1.0, 0.0, -1.0), 0.5, (0.8, 0.6, 0.2), 0.0)

    camera = PinholeCamera(
        eye=(0.0, 0.0, 0.0),
        look_at=(0.0, 0.0, -1.0),
        up=(0.0, 1.0, 0.0),
        vfov=90.0,
        width=width,
        height=height,
    )

    logger.info("Generated showcase scene with %d spheres", len(scene))
    return scene, camera


SCENES: dict[str, SceneFactory] = {
    "random": create_random_scene,
    "showcase": create_showcase_scene,
}


def create_scene(
    name: str,
    width: int = DEFAULT_WIDTH,
    height: int = DEFAULT_HEIGHT,
    seed: int = 0,
) -> tuple[Scene, PinholeCamera]:
    """Create a preset scene by name.

    Raises:
        KeyError: If no preset has that name.
    """
    try:
        factory = SCENES[name]
    except KeyError:
        raise KeyError(f"Unknown scene {name!r}; choose from {sorted(SCENES)}") from None
    return factory(width, height, seed)
