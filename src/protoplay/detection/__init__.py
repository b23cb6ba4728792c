"""
Change detection

Snapshot diffing with auto-layout aware child position resolution.
"""

from .change_detector import ChangeDetector, detect_changes, create_recursive_child_map
from .layout_resolver import LayoutResolver, PositionOverride, PositionRule

__all__ = [
    "ChangeDetector",
    "detect_changes",
    "create_recursive_child_map",
    "LayoutResolver",
    "PositionOverride",
    "PositionRule",
]
