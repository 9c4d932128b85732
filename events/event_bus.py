"""
Synchronous publish/subscribe dispatcher for runtime and lifecycle events
"""

import logging
import threading
from collections import defaultdict
from typing import Dict, Any, List, Callable, Optional


logger = logging.getLogger(__name__)


class HandlerFailure:
    """Records a handler that raised while an event was being delivered"""

    def __init__(self, event_name: str, handler: Callable, error: Exception):
        self.event_name = event_name
        self.handler = handler
        self.error = error

    def __repr__(self):
        name = getattr(self.handler, "__qualname__", repr(self.handler))
        return f"HandlerFailure({self.event_name!r}, {name}, {self.error!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert failure to dictionary"""
        return {
            "event": self.event_name,
            "handler": getattr(self.handler, "__qualname__", repr(self.handler)),
            "error_type": type(self.error).__name__,
            "error_message": str(self.error)
        }


class EventDispatcher:
    """Named-event dispatcher delivering to handlers in registration order"""

    WILDCARD = "*"

    def __init__(self):
        self.listeners: Dict[str, List[Callable]] = defaultdict(list)
        self.lock = threading.RLock()

        # Delivery metrics
        self.event_counts = defaultdict(int)
        self.failure_count = 0

    def on(self, event_name: str, handler: Callable[[Any], None]):
        """Register a handler for an event; the same handler may be added twice"""
        with self.lock:
            self.listeners[event_name].append(handler)

    def on_all(self, handler: Callable[[str, Any], None]):
        """Register a handler called with (event_name, data) for every event"""
        with self.lock:
            self.listeners[self.WILDCARD].append(handler)

    def off(self, event_name: str, handler: Callable) -> bool:
        """Remove the first registration of handler, returns True if one was removed"""
        with self.lock:
            handlers = self.listeners.get(event_name)
            if handlers and handler in handlers:
                handlers.remove(handler)
                return True
            return False

    def emit(self, event_name: str, data: Any = None) -> List[HandlerFailure]:
        """
        Deliver data to every handler registered for event_name

        Handlers run synchronously on the calling thread. A handler that
        raises is logged and skipped, the rest still receive the event.

        Args:
            event_name: Name of the event
            data: Payload passed to each handler

        Returns:
            Failures raised by handlers during this emission
        """
        with self.lock:
            handlers = list(self.listeners.get(event_name, ()))
            wildcard = list(self.listeners.get(self.WILDCARD, ())) if event_name != self.WILDCARD else []
            if handlers or wildcard:
                self.event_counts[event_name] += 1

        failures: List[HandlerFailure] = []

        for handler in handlers:
            failure = self._invoke(event_name, handler, data)
            if failure:
                failures.append(failure)

        for handler in wildcard:
            failure = self._invoke(event_name, handler, event_name, data)
            if failure:
                failures.append(failure)

        if failures:
            with self.lock:
                self.failure_count += len(failures)

        return failures

    def _invoke(self, event_name: str, handler: Callable, *args) -> Optional[HandlerFailure]:
        try:
            handler(*args)
        except Exception as e:
            logger.error(f"Error in event handler for {event_name}: {e}", exc_info=True, extra={
                "extra_data": {"event": event_name, "error_type": type(e).__name__}
            })
            return HandlerFailure(event_name, handler, e)
        return None

    def listener_count(self, event_name: str) -> int:
        """Number of handlers registered for an event"""
        with self.lock:
            return len(self.listeners.get(event_name, ()))

    def get_stats(self) -> Dict[str, Any]:
        """Get dispatcher statistics"""
        with self.lock:
            return {
                "total_events": sum(self.event_counts.values()),
                "event_counts": dict(self.event_counts),
                "failure_count": self.failure_count,
                "listener_counts": {
                    event_name: len(handlers)
                    for event_name, handlers in self.listeners.items()
                    if handlers
                }
            }


# Constructor exposed under its conventional name
EventEmitter = EventDispatcher


# Event name constants
class EventTypes:
    # Host lifecycle signals
    READY = "ready"
    RESOURCE_LOADED = "resource-loaded"
    BEFORE_TEARDOWN = "before-teardown"
    UNCAUGHT_ERROR = "uncaught-error"
    UNHANDLED_ASYNC_FAILURE = "unhandled-async-failure"

    # Connection events
    CONNECTION_STATE_CHANGED = "connection.state_changed"
