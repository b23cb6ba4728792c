"""Animation engine: orchestrator, variant handler, frame clock"""

from .animation_system import AnimationSystem
from .variant_handler import VariantHandler
from .frame_clock import FrameClock

__all__ = ["AnimationSystem", "VariantHandler", "FrameClock"]
