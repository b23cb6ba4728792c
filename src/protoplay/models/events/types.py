from enum import Enum, auto


class EventType(Enum):
    # Animation lifecycle
    ANIMATION_STARTED = auto()
    ANIMATION_COMPLETED = auto()
    ANIMATION_ABORTED = auto()

    # Variants
    VARIANT_SWITCHED = auto()

    # Reactions (timeout fired, element clicked)
    REACTION_TRIGGERED = auto()
