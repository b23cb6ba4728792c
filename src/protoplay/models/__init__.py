"""Runtime models: snapshots, changes, animation options, variant records"""

from .enums import (
    NodeType,
    LayoutMode,
    AxisAlign,
    LayoutSizing,
    FillType,
    TriggerType,
    TransitionType,
    EasingType,
    ChangeProperty,
    StyleChangeType,
    LogLevel,
    LogCategory,
)
from .snapshot import RGBA, GradientStop, Fill, VectorPath, Trigger, Transition, Action, Reaction, Snapshot, ResolvedInstance
from .change import Size, Position, Sizing, LayoutProperties, Change, StyleChange
from .animation import AnimationOptions, get_easing_function
from .variant import VariantInstance

__all__ = [
    "NodeType",
    "LayoutMode",
    "AxisAlign",
    "LayoutSizing",
    "FillType",
    "TriggerType",
    "TransitionType",
    "EasingType",
    "ChangeProperty",
    "StyleChangeType",
    "LogLevel",
    "LogCategory",
    "RGBA",
    "GradientStop",
    "Fill",
    "VectorPath",
    "Trigger",
    "Transition",
    "Action",
    "Reaction",
    "Snapshot",
    "ResolvedInstance",
    "Size",
    "Position",
    "Sizing",
    "LayoutProperties",
    "Change",
    "StyleChange",
    "AnimationOptions",
    "get_easing_function",
    "VariantInstance",
]
