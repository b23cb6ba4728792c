"""
Transition Scheduler

Derives CSS transition declarations from a change list and installs them
on the animated element and on each addressed child, so the subsequent
style writes interpolate instead of jumping.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from protoplay.dom.element import ElementHandle
from protoplay.dom.style_compiler import DomManipulator
from protoplay.models.animation import AnimationOptions
from protoplay.models.change import Change
from protoplay.models.enums import ChangeProperty, LogCategory
from protoplay.utils.css import format_number
from protoplay.utils.logger import get_logger

log = get_logger().for_category(LogCategory.TRANSITION)

TRANSITION_PROPERTIES: Dict[ChangeProperty, Tuple[str, ...]] = {
    ChangeProperty.SIZE: ("transform",),
    ChangeProperty.CHILD_POSITION: ("transform",),
    ChangeProperty.CHILD_SIZE: ("transform",),
    ChangeProperty.OPACITY: ("opacity",),
    ChangeProperty.CHILD_OPACITY: ("opacity",),
    ChangeProperty.BACKGROUND: ("background-color",),
    ChangeProperty.CHILD_BACKGROUND: ("background-color",),
    ChangeProperty.CHILD_FILL: ("fill",),
    ChangeProperty.BORDER_RADIUS: ("border-radius",),
    ChangeProperty.SIZING: ("width", "height"),
    ChangeProperty.LAYOUT: ("all",),
    ChangeProperty.VECTOR_PATHS: (),
}


def get_transition_properties(changes: Sequence[Change]) -> List[str]:
    """
    CSS properties that must transition for a change list.

    Ordered by first occurrence, without duplicates.
    """
    properties: List[str] = []
    for change in changes:
        for name in TRANSITION_PROPERTIES.get(change.property, ()):
            if name not in properties:
                properties.append(name)
    return properties


def build_transition(properties: Sequence[str], options: AnimationOptions) -> str:
    """
    Render a transition declaration.

    Example:
        build_transition(["opacity"], AnimationOptions(TransitionType.DISSOLVE, 0.3, EasingType.LINEAR))
        # "opacity 0.3s linear"
    """
    duration = format_number(options.duration)
    easing = options.easing_function
    return ", ".join(f"{name} {duration}s {easing}" for name in properties)


class TransitionScheduler:
    """
    Installs transition declarations on elements.

    Example:
        scheduler = TransitionScheduler()
        scheduler.setup_transitions(element, changes, options)
        scheduler.setup_child_transitions(element, changes, options)
    """

    def __init__(self, dom: Optional[DomManipulator] = None):
        self.dom = dom or DomManipulator()

    def setup_transitions(self, element: ElementHandle, changes: Sequence[Change], options: AnimationOptions) -> str:
        """
        Set the element's own transition from all changes.

        Returns:
            The declaration written ("" when nothing transitions)
        """
        properties = get_transition_properties(changes)
        if not properties:
            return ""
        declaration = build_transition(properties, options)
        element.style.set_property("transition", declaration)
        log.debug("Transition set", element=element.get_attribute("data-figma-id"), transition=declaration)
        return declaration

    def setup_child_transitions(
        self,
        element: ElementHandle,
        changes: Sequence[Change],
        options: AnimationOptions
    ) -> int:
        """
        Give each addressed child a transition for its own changes only.

        Children that cannot be resolved are skipped. A childFill
        transition goes on the nested path that receives the fill.

        Returns:
            Number of elements that received a transition
        """
        grouped: List[Tuple[ElementHandle, List[Change]]] = []

        for change in changes:
            if not change.is_child_change or not TRANSITION_PROPERTIES.get(change.property):
                continue
            target = self.dom.find_child_element(element, change)
            if target is not None and change.property == ChangeProperty.CHILD_FILL:
                target = self.dom.find_path_element(target)
            if target is None:
                continue

            for existing, bucket in grouped:
                if existing is target:
                    bucket.append(change)
                    break
            else:
                grouped.append((target, [change]))

        for target, child_changes in grouped:
            target.style.set_property(
                "transition",
                build_transition(get_transition_properties(child_changes), options)
            )

        return len(grouped)

    def setup_opacity_transition(self, element: ElementHandle, options: AnimationOptions) -> None:
        element.style.set_property("transition", build_transition(["opacity"], options))
