"""
Event system for the animation engine

Lifecycle events published by the orchestrator and the variant handler.
"""

from protoplay.models.events.types import EventType
from protoplay.models.events.base import Event
from protoplay.models.events.sources import EventSource

from protoplay.models.events.animation_events import (
    AnimationStartedEvent,
    AnimationCompletedEvent,
    AnimationAbortedEvent,
    VariantSwitchedEvent,
    ReactionTriggeredEvent,
)

__all__ = [
    # Type, base, and sources
    "EventType",
    "Event",
    "EventSource",

    # Animation lifecycle
    "AnimationStartedEvent",
    "AnimationCompletedEvent",
    "AnimationAbortedEvent",
    "VariantSwitchedEvent",
    "ReactionTriggeredEvent",
]
