"""
Event Bus - fan-out of animation lifecycle events

Engine components publish (animation started/completed/aborted, variant
switched, reaction fired); observers subscribe per event type. Middleware
sees every event first and may rewrite or drop it.

    bus = EventBus()
    bus.subscribe(EventType.VARIANT_SWITCHED, on_switch, priority=10,
                  filter_fn=lambda e: e.instance_id == "3:1")
    await bus.publish(VariantSwitchedEvent("3:1", "1:1", "1:2"))
"""

import inspect
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Dict, List, Optional

from protoplay.models.events import Event, EventType
from protoplay.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.EVENT)

Handler = Callable[[Event], None]
Middleware = Callable[[Event], Optional[Event]]


def _name(fn) -> str:
    return getattr(fn, "__name__", repr(fn))


@dataclass
class Subscription:
    handler: Handler
    priority: int
    filter_fn: Optional[Callable[[Event], bool]]

    def accepts(self, event: Event) -> bool:
        return self.filter_fn is None or self.filter_fn(event)


class EventBus:
    """
    Priority-ordered pub/sub for engine events.

    Handlers may be sync or async. A failing handler is logged and the
    remaining handlers still run. Equal priorities keep subscription order.

    Args:
        history_limit: How many delivered events to remember
    """

    def __init__(self, history_limit: int = 100):
        self._subscriptions: Dict[EventType, List[Subscription]] = {}
        self._middleware: List[Middleware] = []
        self._history: Deque[Event] = deque(maxlen=history_limit)

    def subscribe(
        self,
        event_type: EventType,
        handler: Handler,
        priority: int = 0,
        filter_fn: Optional[Callable[[Event], bool]] = None
    ) -> None:
        """
        Register handler for event_type.

        Args:
            event_type: Event type to listen for
            handler: Callable or coroutine function taking the event
            priority: Higher runs earlier
            filter_fn: Predicate; handler is skipped when it returns False
        """
        subs = self._subscriptions.setdefault(event_type, [])
        subs.append(Subscription(handler, priority, filter_fn))
        subs.sort(key=lambda s: -s.priority)

        log.debug("Handler subscribed", event_type=event_type.name, handler=_name(handler), priority=priority)

    def unsubscribe(self, event_type: EventType, handler: Handler) -> None:
        """Drop every subscription of handler to event_type."""
        subs = self._subscriptions.get(event_type)
        if subs:
            self._subscriptions[event_type] = [s for s in subs if s.handler != handler]

    def add_middleware(self, middleware: Middleware) -> None:
        """Append middleware; it returns the (possibly new) event, or None to drop it."""
        self._middleware.append(middleware)
        log.debug("Middleware registered", middleware=_name(middleware))

    def _apply_middleware(self, event: Event) -> Optional[Event]:
        for middleware in self._middleware:
            event = middleware(event)
            if event is None:
                log.debug("Event dropped by middleware", middleware=_name(middleware))
                return None
        return event

    async def _dispatch(self, subscription: Subscription, event: Event) -> None:
        try:
            result = subscription.handler(event)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            log.error(
                f"Event handler failed: {_name(subscription.handler)}",
                event_type=event.type.name,
                exception=e
            )

    async def publish(self, event: Event) -> None:
        """Run middleware, record the event, then deliver it by priority."""
        event = self._apply_middleware(event)
        if event is None:
            return

        self._history.append(event)

        # Snapshot so handlers may (un)subscribe while being dispatched
        for subscription in list(self._subscriptions.get(event.type, ())):
            if subscription.accepts(event):
                await self._dispatch(subscription, event)

    def get_event_history(self, limit: int = 10) -> List[Event]:
        """Most recent delivered events, oldest first."""
        return list(self._history)[-limit:]

    def clear_history(self) -> None:
        self._history.clear()
