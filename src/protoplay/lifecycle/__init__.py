"""
Lifecycle subsystem
-------------------

Tracking and cancellation of the timers and tasks an engine schedules.

    from protoplay.lifecycle import TimerRegistry, TimerCategory
"""

from .timer_registry import TimerRegistry, TimerCategory, TimerInfo

__all__ = ["TimerRegistry", "TimerCategory", "TimerInfo"]
