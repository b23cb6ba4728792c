"""
Change Detector

Structural diff between two snapshots of one logical element (typically
two variants of a component). Root properties are compared first in a
fixed order, then every descendant matched by its name path.

Pure and deterministic: the same pair of snapshots always yields the same
ordered change list.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from protoplay.detection.layout_resolver import LayoutResolver
from protoplay.models.change import Change, LayoutProperties, Position, Size, Sizing
from protoplay.models.enums import ChangeProperty, LogCategory, NodeType
from protoplay.models.snapshot import Fill, Snapshot
from protoplay.utils.logger import get_logger

log = get_logger().for_category(LogCategory.DETECTION)

PATH_SEPARATOR = "/"


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------

def fills_differ(source: Optional[Tuple[Fill, ...]], target: Optional[Tuple[Fill, ...]]) -> bool:
    """
    Compare two fill lists by value.

    Both absent are equal, one absent differs. Per index only type,
    opacity and (when both carry a color) the RGB channels count.
    """
    if source is None and target is None:
        return False
    if source is None or target is None:
        return True
    if len(source) != len(target):
        return True

    for a, b in zip(source, target):
        if a.type != b.type or a.opacity != b.opacity:
            return True
        if a.color is not None and b.color is not None:
            if a.color.r != b.color.r or a.color.g != b.color.g or a.color.b != b.color.b:
                return True
    return False


def layout_differs(source: Snapshot, target: Snapshot) -> bool:
    return LayoutProperties.of(source) != LayoutProperties.of(target)


def sizing_differs(source: Snapshot, target: Snapshot) -> bool:
    return (
        source.layout_sizing_horizontal != target.layout_sizing_horizontal
        or source.layout_sizing_vertical != target.layout_sizing_vertical
    )


def create_recursive_child_map(node: Snapshot, prefix: str = "") -> Dict[str, Snapshot]:
    """
    Map every descendant to its name path relative to `node`.

    Args:
        node: Root of the walk (not included in the map)
        prefix: Path of `node` itself, used by the recursion

    Returns:
        Ordered dict {"Card/Header/Icon": snapshot, ...}. A repeated path
        keeps its last occurrence.
    """
    result: Dict[str, Snapshot] = {}
    for child in node.children:
        path = f"{prefix}{PATH_SEPARATOR}{child.name}" if prefix else child.name
        result[path] = child
        result.update(create_recursive_child_map(child, path))
    return result


# ---------------------------------------------------------------------------
# Detector
# ---------------------------------------------------------------------------

class ChangeDetector:
    """
    Computes the ordered change list between two snapshots.

    Example:
        detector = ChangeDetector()
        changes = detector.detect_changes(variant_a, variant_b)
        for change in changes:
            print(change.property.value, change.child_name)
    """

    def __init__(
        self,
        resolver: Optional[LayoutResolver] = None,
        enable_position_adjustment: bool = True
    ):
        """
        Args:
            resolver: Layout-aware position resolver (default rules if None)
            enable_position_adjustment: Consult the resolver for child moves
        """
        self.resolver = resolver or LayoutResolver()
        self.enable_position_adjustment = enable_position_adjustment

    def detect_changes(self, source: Snapshot, target: Snapshot) -> List[Change]:
        changes: List[Change] = []

        if source.width != target.width or source.height != target.height:
            changes.append(Change(
                ChangeProperty.SIZE,
                Size(source.width, source.height),
                Size(target.width, target.height),
            ))

        if source.effective_opacity != target.effective_opacity:
            changes.append(Change(
                ChangeProperty.OPACITY,
                source.effective_opacity,
                target.effective_opacity,
            ))

        if fills_differ(source.fills, target.fills):
            changes.append(Change(ChangeProperty.BACKGROUND, source.fills, target.fills))

        source_radius = source.corner_radius or 0.0
        target_radius = target.corner_radius or 0.0
        if source_radius != target_radius:
            changes.append(Change(ChangeProperty.BORDER_RADIUS, source_radius, target_radius))

        if layout_differs(source, target):
            changes.append(Change(
                ChangeProperty.LAYOUT,
                LayoutProperties.of(source),
                LayoutProperties.of(target),
            ))

        if sizing_differs(source, target):
            changes.append(Change(
                ChangeProperty.SIZING,
                Sizing(source.layout_sizing_horizontal, source.layout_sizing_vertical),
                Sizing(target.layout_sizing_horizontal, target.layout_sizing_vertical),
            ))

        changes.extend(self._detect_child_changes(source, target))

        log.debug(
            "Changes detected",
            source=source.id,
            target=target.id,
            count=len(changes)
        )
        return changes

    def _detect_child_changes(self, source: Snapshot, target: Snapshot) -> List[Change]:
        source_map = create_recursive_child_map(source)
        target_map = create_recursive_child_map(target)
        changes: List[Change] = []

        for path, source_child in source_map.items():
            target_child = target_map.get(path)
            if target_child is None:
                continue

            def child_change(prop: ChangeProperty, old, new) -> Change:
                return Change(prop, old, new, child_name=path, child_id=source_child.id)

            if source_child.x != target_child.x or source_child.y != target_child.y:
                changes.append(child_change(
                    ChangeProperty.CHILD_POSITION,
                    *self._position_pair(source, target, source_child, target_child),
                ))

            if source_child.width != target_child.width or source_child.height != target_child.height:
                changes.append(child_change(
                    ChangeProperty.CHILD_SIZE,
                    Size(source_child.width, source_child.height),
                    Size(target_child.width, target_child.height),
                ))

            if source_child.effective_opacity != target_child.effective_opacity:
                changes.append(child_change(
                    ChangeProperty.CHILD_OPACITY,
                    source_child.effective_opacity,
                    target_child.effective_opacity,
                ))

            if fills_differ(source_child.fills, target_child.fills):
                prop = (
                    ChangeProperty.CHILD_FILL
                    if source_child.type == NodeType.VECTOR
                    else ChangeProperty.CHILD_BACKGROUND
                )
                changes.append(child_change(prop, source_child.fills, target_child.fills))

            if source_child.type == NodeType.VECTOR and source_child.vector_paths != target_child.vector_paths:
                changes.append(child_change(
                    ChangeProperty.VECTOR_PATHS,
                    source_child.vector_paths,
                    target_child.vector_paths,
                ))

        return changes

    def _position_pair(
        self,
        source_root: Snapshot,
        target_root: Snapshot,
        source_child: Snapshot,
        target_child: Snapshot
    ) -> Tuple[Position, Position]:
        raw = (Position(source_child.x, source_child.y), Position(target_child.x, target_child.y))
        if not self.enable_position_adjustment:
            return raw

        override = self.resolver.resolve(source_root, target_root, source_child, target_child)
        if override is None:
            return raw
        return override.source, override.target


_default_detector = ChangeDetector()


def detect_changes(source: Snapshot, target: Snapshot) -> List[Change]:
    """Detect changes with the default detector."""
    return _default_detector.detect_changes(source, target)
