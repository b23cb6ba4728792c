"""
Snapshot Models

Immutable, read-only views of exported scene nodes. A snapshot captures
one state of one element (geometry, paint, auto-layout, reactions) plus
its ordered children. Absent optional properties stay None so consumers
can tell "absent" from a real value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from protoplay.models.enums import (
    AxisAlign,
    EasingType,
    FillType,
    LayoutMode,
    LayoutSizing,
    NodeType,
    TransitionType,
    TriggerType,
)


@dataclass(frozen=True)
class RGBA:
    """Channel values in 0.0-1.0"""
    r: float
    g: float
    b: float
    a: Optional[float] = None


@dataclass(frozen=True)
class GradientStop:
    position: float
    color: RGBA


@dataclass(frozen=True)
class Fill:
    """Single paint layer of a node"""
    type: FillType
    color: Optional[RGBA] = None
    opacity: Optional[float] = None
    gradient_stops: Optional[Tuple[GradientStop, ...]] = None
    visible: Optional[bool] = None


@dataclass(frozen=True)
class VectorPath:
    """SVG path data of a vector node"""
    data: str
    winding_rule: Optional[str] = None


@dataclass(frozen=True)
class Trigger:
    type: TriggerType
    timeout: Optional[float] = None  # seconds, AFTER_TIMEOUT only


@dataclass(frozen=True)
class Transition:
    type: TransitionType
    duration: Optional[float] = None  # seconds
    easing: Optional[EasingType] = None


@dataclass(frozen=True)
class Action:
    destination_id: Optional[str] = None
    type: Optional[str] = None
    transition: Optional[Transition] = None


@dataclass(frozen=True)
class Reaction:
    """Trigger -> action pair attached to a node"""
    trigger: Trigger
    action: Action


@dataclass(frozen=True)
class Snapshot:
    """
    One captured state of a scene node.

    Coordinates are relative to the parent. Children are ordered as
    exported and are themselves snapshots.
    """
    id: str
    name: str
    type: NodeType = NodeType.FRAME
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    opacity: Optional[float] = None
    fills: Optional[Tuple[Fill, ...]] = None
    corner_radius: Optional[float] = None

    # Auto-layout
    layout_mode: Optional[LayoutMode] = None
    primary_axis_align_items: Optional[AxisAlign] = None
    counter_axis_align_items: Optional[AxisAlign] = None
    item_spacing: Optional[float] = None
    padding_left: Optional[float] = None
    padding_right: Optional[float] = None
    padding_top: Optional[float] = None
    padding_bottom: Optional[float] = None
    layout_sizing_horizontal: Optional[LayoutSizing] = None
    layout_sizing_vertical: Optional[LayoutSizing] = None

    vector_paths: Optional[Tuple[VectorPath, ...]] = None
    reactions: Tuple[Reaction, ...] = ()
    children: Tuple["Snapshot", ...] = ()

    @property
    def effective_opacity(self) -> float:
        return 1.0 if self.opacity is None else self.opacity

    @property
    def has_auto_layout(self) -> bool:
        return self.layout_mode is not None and self.layout_mode != LayoutMode.NONE

    def iter_descendants(self) -> Iterator["Snapshot"]:
        """Depth-first walk over every descendant (self excluded)."""
        for child in self.children:
            yield child
            yield from child.iter_descendants()

    def find(self, node_id: str) -> Optional["Snapshot"]:
        """Find node by id in this subtree (self included)."""
        if self.id == node_id:
            return self
        for node in self.iter_descendants():
            if node.id == node_id:
                return node
        return None

    def __repr__(self):
        return f"Snapshot({self.type.name} {self.id!r} {self.name!r}, {len(self.children)} children)"


@dataclass(frozen=True)
class ResolvedInstance:
    """
    Component instance with its variant family resolved.

    `variants` are the members of the owning component set in export
    order; `active_variant` is the one the instance currently shows.
    """
    instance: Snapshot
    active_variant: Snapshot
    variants: Tuple[Snapshot, ...] = ()
    main_component: Optional[Snapshot] = None
    component_set: Optional[Snapshot] = None
