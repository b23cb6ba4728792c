"""
protoplay - prototype animation replay engine

Replays design-tool prototype animations on a rendered element tree:
detects what differs between two snapshots of a node, compiles the
differences into inline style writes with CSS transitions, and drives
variant switches, timeout chains and click reactions.

Typical use:
    from protoplay import AnimationSystem, ConfigManager, bootstrap_scene

    system = AnimationSystem(ConfigManager().load())
    scene = bootstrap_scene("scene.yaml", system)
"""

from protoplay.engine import AnimationSystem, VariantHandler
from protoplay.managers import ConfigManager
from protoplay.runtime import Scene, SceneBootstrap, bootstrap_scene, load_scene, parse_scene

__version__ = "0.1.0"

__all__ = [
    "AnimationSystem",
    "VariantHandler",
    "ConfigManager",
    "Scene",
    "SceneBootstrap",
    "bootstrap_scene",
    "load_scene",
    "parse_scene",
]
