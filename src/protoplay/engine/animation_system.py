"""
Animation System - Orchestrator of prototype animations

One AnimationSystem per exported document. It owns the element and node
registries, the variant handler and every timer it schedules.

execute_animation(source_id, target_id) routes to:
- the variant path when source (member or instance id) or target (member)
  belongs to a registered variant instance
- the element path otherwise

After a successful animation the target's own timeout and click reactions
are installed, which is how prototype chains advance.
"""

from __future__ import annotations

import asyncio
from typing import Dict, Optional, Sequence

from protoplay.detection.change_detector import ChangeDetector
from protoplay.detection.layout_resolver import LayoutResolver
from protoplay.dom.element import ID_ATTRIBUTE, DomEvent, ElementHandle
from protoplay.dom.style_compiler import DomManipulator
from protoplay.dom.transitions import TransitionScheduler
from protoplay.engine.frame_clock import FrameClock
from protoplay.engine.variant_handler import VariantHandler
from protoplay.lifecycle.timer_registry import TimerCategory, TimerRegistry
from protoplay.models.animation import AnimationOptions
from protoplay.models.config import EngineConfig
from protoplay.models.enums import LogCategory, TransitionType, TriggerType
from protoplay.models.events import (
    AnimationAbortedEvent,
    AnimationCompletedEvent,
    AnimationStartedEvent,
    Event,
    ReactionTriggeredEvent,
)
from protoplay.models.snapshot import Snapshot
from protoplay.models.variant import VariantInstance
from protoplay.services.event_bus import EventBus
from protoplay.utils.logger import get_logger

log = get_logger().for_category(LogCategory.ANIMATION)
reaction_log = log.with_category(LogCategory.REACTION)

CLICK_TRIGGERS = (TriggerType.ON_CLICK, TriggerType.ON_PRESS)


class AnimationSystem:
    """
    Prototype animation orchestrator.

    Example:
        system = AnimationSystem()
        system.register_element("1:1", card_a, snapshot_a)
        system.register_element("1:2", card_b, snapshot_b)
        system.register_variant_instances([VariantInstance("3:1", ["1:1", "1:2"], "1:1", 0)])
        await system.execute_animation("1:1", "1:2")
        system.destroy()
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        event_bus: Optional[EventBus] = None,
        timers: Optional[TimerRegistry] = None
    ):
        """
        Args:
            config: Engine configuration (defaults if None)
            event_bus: Optional bus for lifecycle events
            timers: Timer registry (a fresh one if None)
        """
        self.config = config or EngineConfig()
        self.event_bus = event_bus
        self.timers = timers or TimerRegistry()

        self._elements: Dict[str, ElementHandle] = {}
        self._nodes: Dict[str, Snapshot] = {}

        self.detector = ChangeDetector(
            LayoutResolver(),
            enable_position_adjustment=self.config.layout.enable_position_adjustment,
        )
        self.dom = DomManipulator()
        self.scheduler = TransitionScheduler(self.dom)
        self.clock = FrameClock(self.config.animation.frame_interval)
        self.variant_handler = VariantHandler(
            self._elements,
            detector=self.detector,
            dom=self.dom,
            scheduler=self.scheduler,
            clock=self.clock,
            event_bus=event_bus,
        )

        log.info("AnimationSystem initialized")

    # === Registration ===

    def register_element(self, node_id: str, element: ElementHandle, node: Snapshot) -> None:
        self._elements[node_id] = element
        self._nodes[node_id] = node
        element.set_attribute(ID_ATTRIBUTE, node_id)
        log.debug("Registered element", id=node_id, name=node.name)

    def register_variant_instances(self, instances: Sequence[VariantInstance]) -> None:
        self.variant_handler.register_variant_instances(instances)

    def get_element(self, node_id: str) -> Optional[ElementHandle]:
        return self._elements.get(node_id)

    def get_node(self, node_id: str) -> Optional[Snapshot]:
        return self._nodes.get(node_id)

    @property
    def element_count(self) -> int:
        return len(self._elements)

    # === Options ===

    def get_animation_options(self, node: Optional[Snapshot]) -> AnimationOptions:
        """
        Options defined by the node's first reaction.

        Missing reaction or transition means an instant switch. SMART_ANIMATE
        degrades to instant when disabled in config.
        """
        options = AnimationOptions.from_node(
            node,
            default_duration=self.config.animation.default_duration,
            default_easing=self.config.animation.default_easing,
        )
        if options.transition_type == TransitionType.SMART_ANIMATE and not self.config.animation.enable_smart_animate:
            return AnimationOptions.instant()
        return options

    # === Execution ===

    async def execute_animation(self, source_id: str, target_id: str) -> bool:
        """
        Animate from source to target and install the target's reactions.

        Returns:
            True if the target became visible; False when the call aborted
            on a missing element or snapshot (no state is changed)
        """
        log.info("Executing animation", source=source_id, target=target_id)

        instance = self.variant_handler.find_variant_instance(source_id)
        if instance is None:
            instance = self.variant_handler.find_variant_instance_by_target(target_id)

        if instance is not None:
            completed = await self.execute_variant_animation(instance, source_id, target_id)
        else:
            completed = await self.execute_element_animation(source_id, target_id)

        if completed:
            await self._publish(AnimationCompletedEvent(source_id, target_id))
            self.setup_timeout_reactions(target_id)
            self.setup_click_reactions(target_id)
        return completed

    async def execute_variant_animation(self, instance: VariantInstance, source_id: str, target_id: str) -> bool:
        source_element = self._elements.get(source_id)
        target_element = self._elements.get(target_id)
        source_node = self._nodes.get(source_id)
        target_node = self._nodes.get(target_id)

        if any(item is None for item in (source_element, target_element, source_node, target_node)):
            return await self._abort(source_id, target_id, "Missing variant elements or nodes for animation")

        # The animation runs from the variant currently shown
        from_id, from_element, from_node = source_id, source_element, source_node
        if source_id not in instance:
            from_id = instance.active_variant
            from_element = self._elements.get(from_id)
            from_node = self._nodes.get(from_id)
            if from_element is None or from_node is None:
                return await self._abort(source_id, target_id, "Missing current active variant for animation")

        # Only the variant elements may be visible while animating
        instance_element = self._elements.get(instance.instance_id)
        if instance_element is not None:
            self.dom.hide_element(instance_element)

        # Options always come from the node that carries the reaction
        options = self.get_animation_options(source_node)
        await self._publish(AnimationStartedEvent(source_id, target_id, options.transition_type, options.duration))
        return await self.variant_handler.execute_variant_animation(
            instance, from_id, target_id,
            from_element, target_element,
            from_node, target_node,
            options,
        )

    async def execute_element_animation(self, source_id: str, target_id: str) -> bool:
        source_element = self._elements.get(source_id)
        target_element = self._elements.get(target_id)
        source_node = self._nodes.get(source_id)
        target_node = self._nodes.get(target_id)

        if any(item is None for item in (source_element, target_element, source_node, target_node)):
            return await self._abort(source_id, target_id, "Missing elements or nodes for animation")

        options = self.get_animation_options(source_node)
        await self._publish(AnimationStartedEvent(source_id, target_id, options.transition_type, options.duration))

        if options.transition_type == TransitionType.SMART_ANIMATE:
            changes = self.detector.detect_changes(source_node, target_node)
            log.info("Smart animate", duration=f"{options.duration}s", easing=options.easing_function, changes=len(changes))

            self.scheduler.setup_transitions(source_element, changes, options)
            for change in changes:
                self.dom.apply_change(source_element, change)

            await asyncio.sleep(options.duration)
            self.dom.perform_element_switch(source_element, target_element)

        elif options.transition_type == TransitionType.DISSOLVE:
            log.info("Dissolve", duration=f"{options.duration}s")

            self.scheduler.setup_opacity_transition(source_element, options)
            self.scheduler.setup_opacity_transition(target_element, options)
            target_element.style.set_property("display", "")
            target_element.style.set_property("opacity", "0")

            await self.clock.next_frame()
            source_element.style.set_property("opacity", "0")
            target_element.style.set_property("opacity", "1")

            await asyncio.sleep(options.duration)
            self.dom.hide_element(source_element)

        else:
            self.dom.perform_element_switch(source_element, target_element)

        return True

    async def _abort(self, source_id: str, target_id: str, reason: str) -> bool:
        log.error(reason, source=source_id, target=target_id)
        await self._publish(AnimationAbortedEvent(source_id, target_id, reason))
        return False

    # === Reactions ===

    def setup_timeout_reactions(self, node_id: str) -> int:
        """
        Schedule every AFTER_TIMEOUT reaction of a node.

        Returns:
            Number of timers scheduled
        """
        node = self._nodes.get(node_id)
        if node is None or not node.reactions:
            return 0

        count = 0
        for reaction in node.reactions:
            if reaction.trigger.type != TriggerType.AFTER_TIMEOUT:
                continue
            destination = reaction.action.destination_id
            if not destination:
                continue
            delay = reaction.trigger.timeout or 0.0

            self.timers.call_later(
                delay,
                self._timeout_callback(node_id, destination, delay),
                category=TimerCategory.TIMEOUT,
                description=f"{node_id} -> {destination}",
                node_id=node_id,
            )
            reaction_log.info("Timeout reaction scheduled", node=node_id, destination=destination, delay=f"{delay}s")
            count += 1
        return count

    def _timeout_callback(self, node_id: str, destination: str, delay: float):
        def fire():
            reaction_log.info("Timeout fired", node=node_id, destination=destination)
            self.timers.create_task(
                self._run_reaction(node_id, destination, TriggerType.AFTER_TIMEOUT, delay),
                category=TimerCategory.ANIMATION,
                description=f"timeout {node_id} -> {destination}",
                node_id=node_id,
            )
        return fire

    def setup_click_reactions(self, node_id: str) -> int:
        """
        Attach a click listener per ON_CLICK/ON_PRESS reaction of a node.

        Listeners are not deduplicated; installing twice fires twice.

        Returns:
            Number of listeners attached
        """
        node = self._nodes.get(node_id)
        if node is None or not node.reactions:
            return 0

        element = self._elements.get(node_id)
        if element is None:
            reaction_log.warn("Element not found for click setup", node=node_id)
            return 0

        count = 0
        for reaction in node.reactions:
            if reaction.trigger.type not in CLICK_TRIGGERS:
                continue
            destination = reaction.action.destination_id
            if not destination:
                continue

            element.add_event_listener("click", self._click_listener(node_id, destination, reaction.trigger.type))
            element.style.set_property("cursor", "pointer")
            element.style.set_property("user-select", "none")
            reaction_log.debug("Click reaction installed", node=node_id, destination=destination)
            count += 1
        return count

    def _click_listener(self, node_id: str, destination: str, trigger: TriggerType):
        def on_click(event: DomEvent) -> None:
            event.prevent_default()
            event.stop_propagation()
            reaction_log.info("Click detected", node=node_id, destination=destination)
            self.timers.create_task(
                self._run_reaction(node_id, destination, trigger),
                category=TimerCategory.CLICK,
                description=f"click {node_id} -> {destination}",
                node_id=node_id,
            )
        return on_click

    async def _run_reaction(
        self,
        node_id: str,
        destination: str,
        trigger: TriggerType,
        timeout: Optional[float] = None
    ) -> bool:
        await self._publish(ReactionTriggeredEvent(node_id, destination, trigger, timeout))
        return await self.execute_animation(node_id, destination)

    # === Teardown ===

    def clear_all_timeouts(self) -> int:
        """Cancel every pending timeout reaction (and animations they started)."""
        count = self.timers.cancel_timers()
        reaction_log.info("All timeout reactions cleared", cancelled=count)
        return count

    def destroy(self) -> None:
        """Cancel all scheduled work and clear every registry."""
        self.clear_all_timeouts()
        self.timers.cancel_all()
        self.timers.clear()
        self._elements.clear()
        self._nodes.clear()
        self.variant_handler.clear()
        log.info("AnimationSystem destroyed")

    async def _publish(self, event: Event) -> None:
        if self.event_bus is not None:
            await self.event_bus.publish(event)
