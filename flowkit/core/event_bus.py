"""Event fan-out between actions, the synchronizer and views."""

import asyncio
import os
import threading
from collections import defaultdict, deque
from typing import Callable, Deque, Dict, List, Optional, Type, TypeVar

from ..io.logger import get_logger
from .constants import SystemDefaults
from .events import Event

logger = get_logger("event_bus")

T = TypeVar("T", bound=Event)


class EventBus:
    """Delivers each event to every handler subscribed to its type or a base.

    Handlers may be plain functions or coroutines. The most recent events
    are kept for inspection.
    """

    def __init__(self, max_history_size: int = SystemDefaults.MAX_EVENT_HISTORY):
        self._handlers: Dict[Type[Event], List[Callable]] = defaultdict(list)
        self._history: Deque[Event] = deque(maxlen=max_history_size)
        self._lock = threading.RLock()

    async def emit(self, event: Event) -> None:
        """Record ``event`` and run its handlers in subscription order.

        A failing handler is logged and skipped.
        """
        with self._lock:
            self._history.append(event)
            handlers = [
                handler
                for event_type, registered in self._handlers.items()
                if isinstance(event, event_type)
                for handler in registered
            ]

        for handler in handlers:
            try:
                if asyncio.iscoroutinefunction(handler):
                    await handler(event)
                else:
                    handler(event)
            except Exception as e:
                name = getattr(handler, "__qualname__", repr(handler))
                logger.error(
                    f"{type(event).__name__} handler {name} failed: {e}",
                    exc_info=bool(os.getenv("FLOWKIT_DEBUG")),
                )

    def subscribe(
        self, event_type: Type[T], handler: Callable[[T], None]
    ) -> Callable[[], None]:
        """Register ``handler`` for ``event_type`` and its subclasses.

        Returns:
            A callable that removes the subscription again
        """
        with self._lock:
            self._handlers[event_type].append(handler)
        return lambda: self.unsubscribe(event_type, handler)

    def unsubscribe(self, event_type: Type[T], handler: Callable[[T], None]) -> None:
        with self._lock:
            registered = self._handlers.get(event_type, [])
            if handler in registered:
                registered.remove(handler)

    def get_history(self, event_type: Optional[Type[T]] = None) -> List[Event]:
        """Recent events, oldest first, optionally only of one type."""
        with self._lock:
            if event_type is None:
                return list(self._history)
            return [e for e in self._history if isinstance(e, event_type)]

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()
