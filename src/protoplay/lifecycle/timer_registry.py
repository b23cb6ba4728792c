"""
Timer Registry
--------------

Tracking of the timers and asyncio tasks an animation engine schedules:
timeout reactions (loop.call_later handles) and the animation tasks that
timers and click listeners spawn.

Features:
- Register timers/tasks with metadata (category, description, node)
- Track firing, completion, cancellation, errors
- Introspection API for debugging and tests
- Bulk cancellation for clear_all_timeouts() / destroy()

Failures inside a spawned animation are logged here and never propagate
into the event loop.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum, auto
from typing import Callable, Dict, List, Optional, Coroutine, Any

from protoplay.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.TASK)


# ---------------------------------------------------------------------------
# TIMER CATEGORY ENUM
# ---------------------------------------------------------------------------

class TimerCategory(Enum):
    """Logical grouping of scheduled work."""
    TIMEOUT = auto()     # AFTER_TIMEOUT reaction timer
    ANIMATION = auto()   # Animation spawned by a fired timer
    CLICK = auto()       # Animation spawned by a click listener
    GENERAL = auto()


# ---------------------------------------------------------------------------
# TIMER METADATA
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TimerInfo:
    """Immutable metadata captured at scheduling time."""
    id: int
    category: TimerCategory
    description: str
    created_at: str  # ISO UTC string
    created_timestamp: float
    delay: Optional[float] = None  # seconds, timers only
    node_id: Optional[str] = None


@dataclass
class TimerRecord:
    """Internal structure tracking one timer or task."""
    info: TimerInfo
    handle: Optional[asyncio.TimerHandle] = None
    task: Optional[asyncio.Task] = None
    fired: bool = False
    cancelled: bool = False
    finished_with_error: Optional[BaseException] = None
    finished_at: Optional[str] = None

    @property
    def is_timer(self) -> bool:
        return self.handle is not None

    @property
    def done(self) -> bool:
        if self.task is not None:
            return self.task.done()
        return self.fired or self.cancelled


# ---------------------------------------------------------------------------
# TIMER REGISTRY
# ---------------------------------------------------------------------------

class TimerRegistry:
    """
    Registry of everything an engine has scheduled on the loop.

    One registry per engine; there is no global instance.

    Example:
        timers = TimerRegistry()
        timers.call_later(2.0, fire, category=TimerCategory.TIMEOUT, description="1:1 -> 1:2")
        ...
        timers.cancel_timers()
    """

    def __init__(self, history_limit: int = 256) -> None:
        self._records: Dict[int, TimerRecord] = {}
        self._next_id: int = 1
        self._history_limit = history_limit

    # -----------------------------
    # Register
    # -----------------------------
    def _new_info(
        self,
        category: TimerCategory,
        description: str,
        delay: Optional[float],
        node_id: Optional[str]
    ) -> TimerInfo:
        timer_id = self._next_id
        self._next_id += 1
        now = datetime.now(timezone.utc)
        return TimerInfo(
            id=timer_id,
            category=category,
            description=description,
            created_at=now.isoformat(),
            created_timestamp=now.timestamp(),
            delay=delay,
            node_id=node_id,
        )

    def call_later(
        self,
        delay: float,
        callback: Callable[[], Any],
        *,
        category: TimerCategory = TimerCategory.TIMEOUT,
        description: str = "",
        node_id: Optional[str] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None
    ) -> int:
        """
        Schedule a plain callback after `delay` seconds.

        Returns:
            Timer id
        """
        loop = loop or asyncio.get_running_loop()
        info = self._new_info(category, description, max(0.0, delay), node_id)
        record = TimerRecord(info=info)
        record.handle = loop.call_later(info.delay, self._on_timer_fired, info.id, callback)
        self._store(record)

        log.debug(f"[Timer {info.id}] Scheduled ({category.name}) in {info.delay}s - {description}")
        return info.id

    def create_task(
        self,
        coro: Coroutine[Any, Any, Any],
        *,
        category: TimerCategory,
        description: str,
        node_id: Optional[str] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None
    ) -> asyncio.Task:
        """Create and register a task in a single call."""
        loop = loop or asyncio.get_running_loop()
        task = loop.create_task(coro)

        info = self._new_info(category, description, None, node_id)
        self._store(TimerRecord(info=info, task=task))
        task.add_done_callback(self._on_task_done)

        log.debug(f"[Task {info.id}] Registered ({category.name}) - {description}")
        return task

    def _store(self, record: TimerRecord) -> None:
        self._records[record.info.id] = record
        if len(self._records) > self._history_limit:
            self._prune()

    def _prune(self) -> None:
        """Drop the oldest finished records beyond the history limit."""
        excess = len(self._records) - self._history_limit
        for timer_id in [tid for tid, r in self._records.items() if r.done][:excess]:
            del self._records[timer_id]

    # -----------------------------
    # Internal completion handlers
    # -----------------------------
    def _on_timer_fired(self, timer_id: int, callback: Callable[[], Any]) -> None:
        record = self._records.get(timer_id)
        if record is not None:
            record.fired = True
            record.finished_at = datetime.now(timezone.utc).isoformat()
        try:
            callback()
        except Exception as exc:
            if record is not None:
                record.finished_with_error = exc
            log.error(f"[Timer {timer_id}] FAILED: {exc}", error_type=type(exc).__name__)

    def _on_task_done(self, task: asyncio.Task) -> None:
        record = self._get_record_by_task(task)
        if record is None:
            return

        record.finished_at = datetime.now(timezone.utc).isoformat()
        if task.cancelled():
            record.cancelled = True
            log.debug(f"[Task {record.info.id}] Cancelled")
            return

        exc = task.exception()
        if exc:
            record.finished_with_error = exc
            log.error(
                f"[Task {record.info.id}] FAILED: {exc}",
                description=record.info.description,
                error_type=type(exc).__name__
            )
        else:
            log.debug(f"[Task {record.info.id}] Completed successfully")

    def _get_record_by_task(self, task: asyncio.Task) -> Optional[TimerRecord]:
        for record in self._records.values():
            if record.task is task:
                return record
        return None

    # -----------------------------
    # Public API
    # -----------------------------

    def list_all(self) -> List[TimerRecord]:
        return list(self._records.values())

    def pending_timers(self) -> List[TimerRecord]:
        """Timers that have neither fired nor been cancelled."""
        return [r for r in self._records.values() if r.is_timer and not r.done]

    def active_tasks(self) -> List[TimerRecord]:
        return [r for r in self._records.values() if r.task is not None and not r.task.done()]

    def failed(self) -> List[TimerRecord]:
        return [r for r in self._records.values() if r.finished_with_error is not None]

    def cancelled(self) -> List[TimerRecord]:
        return [r for r in self._records.values() if r.cancelled]

    def summary(self) -> str:
        return (
            f"Timers: total={len(self._records)}, pending={len(self.pending_timers())}, "
            f"running={len(self.active_tasks())}, failed={len(self.failed())}, "
            f"cancelled={len(self.cancelled())}"
        )

    # -----------------------------
    # Cancellation
    # -----------------------------

    def cancel_timers(self) -> int:
        """
        Cancel every pending timer and every task a timer spawned.

        Returns:
            Number of timers/tasks cancelled
        """
        return self._cancel(lambda r: r.is_timer or r.info.category == TimerCategory.ANIMATION)

    def cancel_all(self) -> int:
        """Cancel every pending timer and running task (except the caller's own task)."""
        return self._cancel(lambda r: True)

    def _cancel(self, predicate: Callable[[TimerRecord], bool]) -> int:
        try:
            current = asyncio.current_task()
        except RuntimeError:
            current = None

        count = 0
        for record in self._records.values():
            if record.done or not predicate(record):
                continue
            if record.handle is not None:
                record.handle.cancel()
                record.cancelled = True
                count += 1
            elif record.task is not None and record.task is not current:
                record.task.cancel()
                count += 1

        log.debug(f"Cancelled {count} timers/tasks")
        return count

    def clear(self) -> None:
        """Forget all records (does not cancel anything)."""
        self._records.clear()
