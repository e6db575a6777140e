"""Scene module.

Components:
    scene: Immutable Scene, SceneObject and PointLight
    manager: SceneManager builder
    intersection: AccelerationStructure (nearest hit and occlusion queries)
    presets: Cornell box, default and prism scenes
"""

from .intersection import AccelerationStructure
from .manager import SceneManager
from .presets import (
    CornellBoxParams,
    create_cornell_box_scene,
    create_default_scene,
    create_prism_scene,
)
from .scene import PointLight, Scene, SceneObject

__all__ = [
    "Scene",
    "SceneObject",
    "PointLight",
    "SceneManager",
    "AccelerationStructure",
    "CornellBoxParams",
    "create_cornell_box_scene",
    "create_default_scene",
    "create_prism_scene",
]
