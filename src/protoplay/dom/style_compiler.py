"""
DOM Manipulator - Style-change compiler and mutation applier

Turns detected changes into inline style writes. Two strategies:
- apply_change: compile and write in one step (simple animation paths)
- prepare_change + apply_style_change: compile a whole batch first, then
  write it, so no write can perturb the lookups of a later change

An unresolvable target skips that single mutation; nothing here raises on
missing elements.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from protoplay.dom.element import (
    COMPONENT_SET_ATTRIBUTE,
    IMPORTANT,
    NAME_ATTRIBUTE,
    VARIANT_ATTRIBUTE,
    ElementHandle,
)
from protoplay.models.change import Change, Size, StyleChange
from protoplay.models.enums import ChangeProperty, LayoutSizing, LogCategory, StyleChangeType
from protoplay.utils.css import first_fill_rgba, format_number, px, translate
from protoplay.utils.logger import get_logger

log = get_logger().for_category(LogCategory.DOM)

# Inline properties saved before a batched animation and restored after it
CAPTURED_PROPERTIES = ("transition", "transform", "opacity", "background-color", "fill")

SIZING_VALUES = {
    LayoutSizing.FILL: "100%",
    LayoutSizing.HUG: "fit-content",
}


@dataclass
class CapturedStyle:
    """Inline style values (value, priority) of an element subtree"""
    entries: List[Tuple[ElementHandle, Dict[str, Tuple[str, str]]]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)


def _sizing_value(mode: Optional[LayoutSizing]) -> Optional[str]:
    return SIZING_VALUES.get(mode) if mode is not None else None


class DomManipulator:
    """
    Compiles and applies style mutations for detected changes.

    Example:
        dom = DomManipulator()
        batch = dom.prepare_changes(source_element, changes)
        dom.apply_style_changes(batch)
    """

    # === Lookup ===

    def find_child_element(self, element: ElementHandle, change: Change) -> Optional[ElementHandle]:
        """
        Resolve the descendant addressed by a child change.

        Looks up by id first, then by the last name path segment against
        the name attribute.
        """
        child = None
        if change.child_id:
            child = element.query_descendant_by_id(change.child_id)
        if child is None and change.leaf_name:
            child = element.query_descendant_by_attribute(NAME_ATTRIBUTE, change.leaf_name)
        if child is None:
            log.debug(
                "Child element not found",
                child_id=change.child_id,
                child_name=change.child_name,
                property=change.property.value
            )
        return child

    def find_path_element(self, child: ElementHandle) -> Optional[ElementHandle]:
        """First nested vector path of an SVG-rendered child"""
        return child.query_selector("g path") or child.query_selector("path")

    # === Compile ===

    def prepare_change(self, element: ElementHandle, change: Change) -> Optional[StyleChange]:
        """
        Compile a change into a StyleChange without writing anything.

        Returns:
            StyleChange, or None when the change has no mutation or its
            target cannot be resolved
        """
        prop = change.property

        if prop == ChangeProperty.SIZE:
            size: Size = change.target_value
            return StyleChange(StyleChangeType.SIZE, element, width=px(size.width), height=px(size.height))

        if prop == ChangeProperty.OPACITY:
            return StyleChange(StyleChangeType.OPACITY, element, value=format_number(change.target_value))

        if prop == ChangeProperty.BACKGROUND:
            color = first_fill_rgba(change.target_value)
            if color is None:
                return None
            return StyleChange(StyleChangeType.BACKGROUND_COLOR, element, value=color)

        if prop == ChangeProperty.BORDER_RADIUS:
            return StyleChange(StyleChangeType.BORDER_RADIUS, element, value=px(change.target_value))

        if prop == ChangeProperty.SIZING:
            width = _sizing_value(change.target_value.horizontal)
            height = _sizing_value(change.target_value.vertical)
            if width is None and height is None:
                return None
            return StyleChange(StyleChangeType.SIZE, element, width=width, height=height)

        if prop in (ChangeProperty.LAYOUT, ChangeProperty.VECTOR_PATHS):
            return None

        # Child changes
        child = self.find_child_element(element, change)
        if child is None:
            return None

        if prop == ChangeProperty.CHILD_POSITION:
            dx = change.target_value.x - change.source_value.x
            dy = change.target_value.y - change.source_value.y
            return StyleChange(StyleChangeType.TRANSFORM, child, value=translate(dx, dy))

        if prop == ChangeProperty.CHILD_SIZE:
            size = change.target_value
            return StyleChange(StyleChangeType.CHILD_SIZE, child, width=px(size.width), height=px(size.height))

        if prop == ChangeProperty.CHILD_OPACITY:
            return StyleChange(StyleChangeType.OPACITY, child, value=format_number(change.target_value))

        if prop == ChangeProperty.CHILD_BACKGROUND:
            color = first_fill_rgba(change.target_value)
            if color is None:
                return None
            return StyleChange(StyleChangeType.BACKGROUND_COLOR, child, value=color)

        if prop == ChangeProperty.CHILD_FILL:
            color = first_fill_rgba(change.target_value)
            path = self.find_path_element(child)
            if color is None or path is None:
                log.debug("No fill target", child_name=change.child_name)
                return None
            return StyleChange(StyleChangeType.FILL, path, value=color)

        return None

    def prepare_changes(self, element: ElementHandle, changes: Sequence[Change]) -> List[StyleChange]:
        """Compile a batch, dropping changes without a mutation."""
        prepared = []
        for change in changes:
            style_change = self.prepare_change(element, change)
            if style_change is not None:
                prepared.append(style_change)
        return prepared

    # === Apply ===

    def apply_style_change(self, style_change: StyleChange) -> None:
        style = style_change.target.style
        kind = style_change.type

        if kind in (StyleChangeType.SIZE, StyleChangeType.CHILD_SIZE):
            if style_change.width is not None:
                style.set_property("width", style_change.width)
            if style_change.height is not None:
                style.set_property("height", style_change.height)
        elif kind == StyleChangeType.TRANSFORM:
            style.set_property("transform", style_change.value)
        elif kind == StyleChangeType.OPACITY:
            style.set_property("opacity", style_change.value)
        elif kind == StyleChangeType.BACKGROUND_COLOR:
            style.set_property("background-color", style_change.value)
        elif kind == StyleChangeType.FILL:
            style.set_property("fill", style_change.value)
        elif kind == StyleChangeType.BORDER_RADIUS:
            style.set_property("border-radius", style_change.value)

    def apply_style_changes(self, style_changes: Sequence[StyleChange]) -> None:
        for style_change in style_changes:
            self.apply_style_change(style_change)

    def apply_change(self, element: ElementHandle, change: Change) -> bool:
        """
        Compile and write one change immediately.

        Returns:
            True if a mutation was written
        """
        style_change = self.prepare_change(element, change)
        if style_change is None:
            return False
        self.apply_style_change(style_change)
        return True

    # === State capture ===

    def capture_state(self, element: ElementHandle) -> CapturedStyle:
        """Save animated inline properties of element and all its descendants."""
        captured = CapturedStyle()
        targets = [element]
        targets.extend(element.iter_descendants())
        for target in targets:
            values = {
                name: (target.style.get_property_value(name), target.style.get_property_priority(name))
                for name in CAPTURED_PROPERTIES
            }
            captured.entries.append((target, values))
        return captured

    def restore_state(self, captured: CapturedStyle) -> None:
        for target, values in captured.entries:
            for name, (value, priority) in values.items():
                target.style.set_property(name, value, priority)

    # === Layout ===

    def apply_layout_flattening(self, element: ElementHandle) -> bool:
        """
        Pin the children of a flex parent to absolute boxes.

        Positions come from the current element boxes relative to the
        parent; the parent then stops laying them out.

        Returns:
            True if the parent was flattened
        """
        parent = element.parent
        if parent is None or parent.style.get_property_value("display") != "flex":
            return False

        parent_box = parent.bounding_box()
        for child in parent.children:
            box = child.bounding_box()
            child.style.set_property("position", "absolute")
            child.style.set_property("left", px(box.x - parent_box.x))
            child.style.set_property("top", px(box.y - parent_box.y))
            child.style.set_property("width", px(box.width))
            child.style.set_property("height", px(box.height))

        parent.style.set_property("display", "block")
        log.debug("Flex layout flattened", parent=parent.get_attribute("data-figma-id"))
        return True

    # === Visibility ===

    def show_element(self, element: ElementHandle, display: str = "block", important: bool = False) -> None:
        priority = IMPORTANT if important else ""
        element.style.set_property("display", display, priority)
        element.style.set_property("opacity", "1", priority)
        element.style.set_property("transform", "")

    def hide_element(self, element: ElementHandle) -> None:
        element.style.set_property("display", "none")

    def perform_element_switch(self, source: ElementHandle, target: ElementHandle) -> None:
        """
        Plain switch used outside variant instances.

        Hides every variant of the source's component set (when it has
        one), then shows the target.
        """
        component_set = source.closest(COMPONENT_SET_ATTRIBUTE)
        if component_set is not None:
            for variant in component_set.iter_descendants_with_attribute(VARIANT_ATTRIBUTE):
                self.hide_element(variant)

        target.style.set_property("display", "")
        target.style.set_property("opacity", "1")
        target.style.set_property("transform", "")
