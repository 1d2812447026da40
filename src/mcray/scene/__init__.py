"""Scene module: sphere storage, the Scene container and preset scenes.

Components:
    intersection: Sphere fields and the nearest-hit scan
    manager: Scene pairing every sphere with its material
    presets: Ready-made scenes with matching cameras
"""

from .intersection import SceneHitRecord, intersect_scene
from .manager import Scene, SphereInfo
from .presets import SCENES, create_random_scene, create_scene, create_showcase_scene

__all__ = [
    "Scene",
    "SphereInfo",
    "SceneHitRecord",
    "intersect_scene",
    "SCENES",
    "create_scene",
    "create_random_scene",
    "create_showcase_scene",
]
