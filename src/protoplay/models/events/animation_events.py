from dataclasses import dataclass
from typing import Optional

from protoplay.models.events.base import Event
from protoplay.models.events.types import EventType
from protoplay.models.events.sources import EventSource
from protoplay.models.enums import TransitionType, TriggerType


@dataclass(init=False)
class AnimationStartedEvent(Event):
    source_id: str
    target_id: str
    transition_type: TransitionType
    duration: float

    def __init__(self, source_id: str, target_id: str, transition_type: TransitionType, duration: float):
        super().__init__(
            type=EventType.ANIMATION_STARTED,
            source=EventSource.ANIMATION_SYSTEM,
        )
        self.source_id = source_id
        self.target_id = target_id
        self.transition_type = transition_type
        self.duration = duration


@dataclass(init=False)
class AnimationCompletedEvent(Event):
    source_id: str
    target_id: str

    def __init__(self, source_id: str, target_id: str):
        super().__init__(
            type=EventType.ANIMATION_COMPLETED,
            source=EventSource.ANIMATION_SYSTEM,
        )
        self.source_id = source_id
        self.target_id = target_id


@dataclass(init=False)
class AnimationAbortedEvent(Event):
    source_id: str
    target_id: str
    reason: str

    def __init__(self, source_id: str, target_id: str, reason: str):
        super().__init__(
            type=EventType.ANIMATION_ABORTED,
            source=EventSource.ANIMATION_SYSTEM,
        )
        self.source_id = source_id
        self.target_id = target_id
        self.reason = reason


@dataclass(init=False)
class VariantSwitchedEvent(Event):
    instance_id: str
    previous_variant: str
    active_variant: str

    def __init__(self, instance_id: str, previous_variant: str, active_variant: str):
        super().__init__(
            type=EventType.VARIANT_SWITCHED,
            source=EventSource.VARIANT_HANDLER,
        )
        self.instance_id = instance_id
        self.previous_variant = previous_variant
        self.active_variant = active_variant


@dataclass(init=False)
class ReactionTriggeredEvent(Event):
    node_id: str
    destination_id: str
    trigger: TriggerType
    timeout: Optional[float]

    def __init__(self, node_id: str, destination_id: str, trigger: TriggerType, timeout: Optional[float] = None):
        super().__init__(
            type=EventType.REACTION_TRIGGERED,
            source=EventSource.REACTION,
        )
        self.node_id = node_id
        self.destination_id = destination_id
        self.trigger = trigger
        self.timeout = timeout
