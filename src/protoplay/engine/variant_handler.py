"""
Variant Handler - Variant registry and switch state machine

Tracks which of the mutually exclusive variant elements of each component
instance is active, and animates from one variant to another.

Flow of a SMART_ANIMATE switch:
1. Detect changes between the two variant snapshots
2. Flatten a flex parent when the layout itself changes
3. Capture the source subtree's animated inline styles
4. Install transitions (element + addressed children)
5. Compile every change, yield one frame, write the whole batch at once
6. Wait for the duration, restore the captured styles, switch
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Sequence

from protoplay.detection.change_detector import ChangeDetector
from protoplay.dom.element import ID_ATTRIBUTE, ElementHandle
from protoplay.dom.style_compiler import DomManipulator
from protoplay.dom.transitions import TransitionScheduler
from protoplay.engine.frame_clock import FrameClock
from protoplay.models.animation import AnimationOptions
from protoplay.models.change import Change
from protoplay.models.enums import ChangeProperty, LogCategory, TransitionType
from protoplay.models.events import Event, VariantSwitchedEvent
from protoplay.models.snapshot import Snapshot
from protoplay.models.variant import VariantInstance
from protoplay.services.event_bus import EventBus
from protoplay.utils.logger import get_logger

log = get_logger().for_category(LogCategory.VARIANT)


class VariantHandler:
    """
    Owns the variant instance records and performs variant animations.

    Args:
        elements: Shared id -> element registry (owned by the orchestrator)
        detector: Change detector
        dom: Style compiler / applier
        scheduler: Transition scheduler
        clock: Frame clock for the one-frame yield
        event_bus: Optional bus receiving VARIANT_SWITCHED
    """

    def __init__(
        self,
        elements: Dict[str, ElementHandle],
        detector: Optional[ChangeDetector] = None,
        dom: Optional[DomManipulator] = None,
        scheduler: Optional[TransitionScheduler] = None,
        clock: Optional[FrameClock] = None,
        event_bus: Optional[EventBus] = None
    ):
        self._elements = elements
        self._instances: List[VariantInstance] = []
        self.detector = detector or ChangeDetector()
        self.dom = dom or DomManipulator()
        self.scheduler = scheduler or TransitionScheduler(self.dom)
        self.clock = clock or FrameClock()
        self.event_bus = event_bus

    # === Registry ===

    def register_variant_instances(self, instances: Sequence[VariantInstance]) -> None:
        """Replace the instance records."""
        self._instances = list(instances)
        log.info("Variant instances registered", count=len(self._instances))

    @property
    def instances(self) -> List[VariantInstance]:
        return list(self._instances)

    def find_variant_instance(self, node_id: str) -> Optional[VariantInstance]:
        """Instance owning node_id as a member variant or as its instance id."""
        for instance in self._instances:
            if instance.owns(node_id):
                return instance
        return None

    def find_variant_instance_by_target(self, target_id: str) -> Optional[VariantInstance]:
        """Instance with target_id among its member variants."""
        for instance in self._instances:
            if target_id in instance:
                return instance
        return None

    def clear(self) -> None:
        self._instances.clear()

    # === Animation ===

    async def execute_variant_animation(
        self,
        instance: VariantInstance,
        source_id: str,
        target_id: str,
        source_element: Optional[ElementHandle],
        target_element: Optional[ElementHandle],
        source_node: Optional[Snapshot],
        target_node: Optional[Snapshot],
        options: AnimationOptions
    ) -> bool:
        """
        Animate from one variant to another and switch.

        Returns:
            True if the switch happened; False when an element or
            snapshot is missing (instance state left untouched)
        """
        if source_element is None or target_element is None or source_node is None or target_node is None:
            log.error(
                "Missing variant elements or nodes for animation",
                source=source_id,
                target=target_id
            )
            return False

        changes = self.detector.detect_changes(source_node, target_node)
        log.info(
            "Variant animation",
            instance=instance.instance_id,
            transition=f"{source_id} -> {target_id}",
            type=options.transition_type.name,
            changes=len(changes)
        )

        if options.transition_type == TransitionType.SMART_ANIMATE:
            await self._smart_animate(source_element, changes, options)
        elif options.transition_type == TransitionType.DISSOLVE:
            await self._dissolve(source_element, target_element, options)

        previous = instance.active_variant
        self.perform_variant_switch(instance, source_id, target_id, source_element, target_element)
        await self._publish(VariantSwitchedEvent(instance.instance_id, previous, instance.active_variant))
        return True

    async def _smart_animate(
        self,
        source_element: ElementHandle,
        changes: List[Change],
        options: AnimationOptions
    ) -> None:
        if any(change.property == ChangeProperty.LAYOUT for change in changes):
            self.dom.apply_layout_flattening(source_element)

        captured = self.dom.capture_state(source_element)

        self.scheduler.setup_transitions(source_element, changes, options)
        self.scheduler.setup_child_transitions(source_element, changes, options)

        batch = self.dom.prepare_changes(source_element, changes)

        await self.clock.next_frame()
        self.dom.apply_style_changes(batch)
        log.debug("Style batch applied", mutations=len(batch))

        await asyncio.sleep(options.duration)

        self.dom.restore_state(captured)

    async def _dissolve(
        self,
        source_element: ElementHandle,
        target_element: ElementHandle,
        options: AnimationOptions
    ) -> None:
        self.scheduler.setup_opacity_transition(source_element, options)
        self.scheduler.setup_opacity_transition(target_element, options)

        target_element.style.set_property("display", "")
        target_element.style.set_property("opacity", "0")

        await self.clock.next_frame()
        source_element.style.set_property("opacity", "0")
        target_element.style.set_property("opacity", "1")

        await asyncio.sleep(options.duration)

    def perform_variant_switch(
        self,
        instance: VariantInstance,
        source_id: str,
        target_id: str,
        source_element: ElementHandle,
        target_element: ElementHandle
    ) -> None:
        """
        Make target the only visible variant of the instance.

        Resets the source subtree's animation styles, hides every variant,
        then shows the target at important priority.
        """
        for element in [source_element, *source_element.iter_descendants_with_attribute(ID_ATTRIBUTE)]:
            element.style.set_property("transition", "")
            element.style.set_property("transform", "")
            element.style.set_property("opacity", "")

        for variant_id in instance.variants:
            variant_element = self._elements.get(variant_id)
            if variant_element is not None:
                self.dom.hide_element(variant_element)

        self.dom.show_element(target_element, "block", important=True)

        if target_id in instance:
            instance.activate(target_id)
            log.info("Variant switch", source=source_id, target=target_id, index=instance.current_index)
        else:
            log.warn(
                "Switch target is not a variant of the instance",
                instance=instance.instance_id,
                target=target_id
            )

    async def _publish(self, event: Event) -> None:
        if self.event_bus is not None:
            await self.event_bus.publish(event)
