"""
Layout-Aware Position Resolver

Overrides a child's target position when its parent is an auto-layout
container whose alignment or size changed between the two states. The
exported coordinates of such a child describe where the layout engine put
it, so the change is reclassified from the parent's layout instead.

Rules are evaluated in order; the first rule whose condition holds
produces the override.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional

from protoplay.models.change import Position
from protoplay.models.enums import AxisAlign, LogCategory
from protoplay.models.snapshot import Snapshot
from protoplay.utils.logger import get_logger

log = get_logger().for_category(LogCategory.LAYOUT)


@dataclass(frozen=True)
class LayoutContext:
    """Matched child pair plus the nearest auto-layout ancestor on both sides"""
    source_child: Snapshot
    target_child: Snapshot
    source_parent: Snapshot
    target_parent: Snapshot


@dataclass(frozen=True)
class PositionOverride:
    source: Position
    target: Position
    reason: str


@dataclass(frozen=True)
class PositionRule:
    name: str
    condition: Callable[[LayoutContext], bool]
    action: Callable[[LayoutContext], Position]


def find_ancestors(root: Snapshot, child_id: str) -> Optional[List[Snapshot]]:
    """
    Containment chain from `root` down to the parent of `child_id`.

    Returns:
        [root, ..., parent], or None when `child_id` is not below `root`
    """
    for child in root.children:
        if child.id == child_id:
            return [root]
        chain = find_ancestors(child, child_id)
        if chain is not None:
            return [root, *chain]
    return None


def find_layout_parent(root: Snapshot, child_id: str) -> Optional[Snapshot]:
    """Nearest ancestor of `child_id` with an explicit auto-layout mode."""
    for ancestor in reversed(find_ancestors(root, child_id) or []):
        if ancestor.has_auto_layout:
            return ancestor
    return None


def aligned_x(child: Snapshot, parent: Snapshot) -> float:
    """X offset implied by the parent's primary axis alignment"""
    align = parent.primary_axis_align_items
    pw = parent.width or 0.0
    cw = child.width or 0.0

    if align == AxisAlign.MIN:
        return 0.0
    if align == AxisAlign.CENTER:
        return (pw - cw) / 2
    if align == AxisAlign.MAX:
        return pw - cw
    if align == AxisAlign.SPACE_BETWEEN:
        return 0.0
    return child.x


def _alignment_changed(ctx: LayoutContext) -> bool:
    return ctx.source_parent.primary_axis_align_items != ctx.target_parent.primary_axis_align_items


def _realign(ctx: LayoutContext) -> Position:
    return Position(aligned_x(ctx.target_child, ctx.target_parent), ctx.target_child.y)


def _parent_resized(ctx: LayoutContext) -> bool:
    return (
        (ctx.source_parent.width or 0.0) != (ctx.target_parent.width or 0.0)
        or (ctx.source_parent.height or 0.0) != (ctx.target_parent.height or 0.0)
    )


def _rescale(ctx: LayoutContext) -> Position:
    old_w = ctx.source_parent.width or 0.0
    old_h = ctx.source_parent.height or 0.0
    new_w = ctx.target_parent.width or 0.0
    new_h = ctx.target_parent.height or 0.0

    if old_w:
        x = ctx.source_child.x / old_w * new_w
    else:
        log.debug("Zero source parent width, keeping target x", parent=ctx.source_parent.id)
        x = ctx.target_child.x

    if old_h:
        y = ctx.source_child.y / old_h * new_h
    else:
        log.debug("Zero source parent height, keeping target y", parent=ctx.source_parent.id)
        y = ctx.target_child.y

    return Position(x, y)


DEFAULT_RULES: List[PositionRule] = [
    PositionRule("alignment", _alignment_changed, _realign),
    PositionRule("parent-resize", _parent_resized, _rescale),
]


class LayoutResolver:
    """
    Computes layout-driven position overrides for matched children.

    Example:
        resolver = LayoutResolver()
        override = resolver.resolve(source_root, target_root, src_child, tgt_child)
        if override:
            print(override.target)
    """

    def __init__(self, rules: Optional[List[PositionRule]] = None):
        self.rules = list(rules) if rules is not None else list(DEFAULT_RULES)

    def resolve(
        self,
        source_root: Snapshot,
        target_root: Snapshot,
        source_child: Snapshot,
        target_child: Snapshot
    ) -> Optional[PositionOverride]:
        """
        Args:
            source_root: Compared root in the source state
            target_root: Compared root in the target state
            source_child: Child as found in the source tree
            target_child: Same child (by name path) in the target tree

        Returns:
            Override with source and adjusted target position, or None when
            no auto-layout parent explains the move
        """
        source_parent = find_layout_parent(source_root, source_child.id)
        target_parent = find_layout_parent(target_root, target_child.id)

        if source_parent is None or target_parent is None:
            return None

        ctx = LayoutContext(source_child, target_child, source_parent, target_parent)
        for rule in self.rules:
            if rule.condition(ctx):
                target = rule.action(ctx)
                log.debug(
                    "Layout-driven position",
                    child=target_child.name,
                    rule=rule.name,
                    target=f"{target.x},{target.y}"
                )
                return PositionOverride(
                    source=Position(source_child.x, source_child.y),
                    target=target,
                    reason=rule.name,
                )
        return None
