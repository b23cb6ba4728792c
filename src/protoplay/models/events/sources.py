from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers for engine events"""
    ANIMATION_SYSTEM = auto()   # Orchestrator (execute_animation)
    VARIANT_HANDLER = auto()    # Variant switch state machine
    REACTION = auto()           # Timeout timers and click listeners
