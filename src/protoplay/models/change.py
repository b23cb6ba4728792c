"""
Change Models

Typed results of snapshot diffing and their compiled style form.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Tuple, Union

from protoplay.models.enums import AxisAlign, ChangeProperty, LayoutMode, LayoutSizing, StyleChangeType
from protoplay.models.snapshot import Fill, Snapshot, VectorPath

if TYPE_CHECKING:
    from protoplay.dom.element import ElementHandle


@dataclass(frozen=True)
class Size:
    width: float
    height: float


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class Sizing:
    horizontal: Optional[LayoutSizing] = None
    vertical: Optional[LayoutSizing] = None


@dataclass(frozen=True)
class LayoutProperties:
    """The auto-layout fields compared by the detector"""
    layout_mode: Optional[LayoutMode] = None
    counter_axis_align_items: Optional[AxisAlign] = None
    primary_axis_align_items: Optional[AxisAlign] = None
    item_spacing: Optional[float] = None
    padding_left: Optional[float] = None
    padding_right: Optional[float] = None
    padding_top: Optional[float] = None
    padding_bottom: Optional[float] = None

    @classmethod
    def of(cls, node: Snapshot) -> "LayoutProperties":
        return cls(
            layout_mode=node.layout_mode,
            counter_axis_align_items=node.counter_axis_align_items,
            primary_axis_align_items=node.primary_axis_align_items,
            item_spacing=node.item_spacing,
            padding_left=node.padding_left,
            padding_right=node.padding_right,
            padding_top=node.padding_top,
            padding_bottom=node.padding_bottom,
        )


Fills = Optional[Tuple[Fill, ...]]
VectorPaths = Optional[Tuple[VectorPath, ...]]

ChangeValue = Union[Size, Position, Sizing, LayoutProperties, float, Fills, VectorPaths]


@dataclass(frozen=True)
class Change:
    """
    One detected difference between a source and a target snapshot.

    Child changes carry the slash-joined name path of the descendant
    (relative to the compared root) and the descendant's source id.
    """
    property: ChangeProperty
    source_value: ChangeValue
    target_value: ChangeValue
    child_name: Optional[str] = None
    child_id: Optional[str] = None

    @property
    def is_child_change(self) -> bool:
        return self.property.is_child

    @property
    def leaf_name(self) -> Optional[str]:
        """Last segment of the child path"""
        if self.child_name is None:
            return None
        return self.child_name.rsplit("/", 1)[-1]

    def __repr__(self):
        where = f" @{self.child_name}" if self.child_name else ""
        return f"Change({self.property.value}{where}: {self.source_value!r} -> {self.target_value!r})"


@dataclass
class StyleChange:
    """
    Compiled, not yet applied, style mutation.

    SIZE carries width/height as CSS strings ("120px", "100%",
    "fit-content"); either may be None when the axis is untouched.
    """
    type: StyleChangeType
    target: "ElementHandle"
    value: Optional[str] = None
    width: Optional[str] = None
    height: Optional[str] = None
