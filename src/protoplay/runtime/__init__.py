"""Scene loading and bootstrap"""

from .bootstrap import Scene, SceneBootstrap, bootstrap_scene, load_scene, parse_scene

__all__ = ["Scene", "SceneBootstrap", "bootstrap_scene", "load_scene", "parse_scene"]
