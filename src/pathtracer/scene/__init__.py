"""Scene module.

Components:
    scene: Host-side scene container and primitive descriptions
    intersection: Device upload, nearest-hit query and material dispatch
    presets: Built-in demo and showcase scenes
"""

from src.pathtracer.scene.intersection import SceneData
from src.pathtracer.scene.presets import (
    SCENE_NAMES,
    create_demo_scene,
    create_scene,
    create_showcase_scene,
)
from src.pathtracer.scene.scene import (
    MAX_PRIMITIVES,
    MovingSphereInfo,
    Primitive,
    PrimitiveType,
    Scene,
    SphereInfo,
)

__all__ = [
    "Scene",
    "SphereInfo",
    "MovingSphereInfo",
    "Primitive",
    "PrimitiveType",
    "MAX_PRIMITIVES",
    "SceneData",
    "SCENE_NAMES",
    "create_scene",
    "create_demo_scene",
    "create_showcase_scene",
]
