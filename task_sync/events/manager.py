"""
Central event coordination for Task Sync.

Manages event handlers and middleware, and delivers emitted events.
"""

import asyncio
import logging
from collections import deque
from contextvars import ContextVar
from typing import Optional

from task_sync.config import get_settings
from task_sync.events.types import (
    EventData,
    EventHandler,
    EventMiddleware,
    EventType,
    PluginEvent,
)

logger = logging.getLogger(__name__)

# Managers whose delivery loop is running in the current context. Handler
# tasks created by asyncio.wait_for inherit it, so emits from inside a
# handler are recognised as nested.
_delivering: ContextVar[tuple["EventManager", ...]] = ContextVar("_delivering", default=())


class EventManager:
    """
    Delivers events to registered handlers.

    Events are processed one at a time in emission order. An event emitted
    from inside a handler is queued and delivered by the emit call already
    running, after the current event. An emit from any other task waits its
    turn and returns once its event has been delivered. Within an event,
    handlers run in registration order; a failing or timed-out handler is
    logged and, unless ``continue_on_error`` is False, does not prevent
    delivery to the rest.
    """

    def __init__(self, handler_timeout: Optional[float] = None):
        self.handler_timeout = (
            get_settings().event_handler_timeout if handler_timeout is None else handler_timeout
        )
        self._handlers: dict[EventType, list[EventHandler]] = {}
        self._middleware: list[EventMiddleware] = []
        self._queue: deque[tuple[PluginEvent, bool]] = deque()
        self._lock = asyncio.Lock()
        self._is_processing = False
        self._processed = 0

    def register_handler(self, handler: EventHandler) -> None:
        for event_type in handler.supported_event_types():
            handlers = self._handlers.setdefault(event_type, [])
            if handler not in handlers:
                handlers.append(handler)
                logger.debug(f"Registered {type(handler).__name__} for {event_type.value}")

    def unregister_handler(self, handler: EventHandler) -> None:
        for event_type in handler.supported_event_types():
            handlers = self._handlers.get(event_type, [])
            if handler in handlers:
                handlers.remove(handler)
                logger.debug(f"Unregistered {type(handler).__name__} for {event_type.value}")

    def register_middleware(self, middleware: EventMiddleware) -> None:
        if middleware not in self._middleware:
            self._middleware.append(middleware)

    def unregister_middleware(self, middleware: EventMiddleware) -> None:
        if middleware in self._middleware:
            self._middleware.remove(middleware)

    async def emit(
        self,
        event_type: EventType,
        data: EventData,
        continue_on_error: bool = True,
    ) -> None:
        """
        Emit an event and wait until every interested handler has run.

        Called from inside a handler, the event is queued behind the one
        being delivered and this call returns immediately.

        Args:
            event_type: Type of event
            data: Event payload
            continue_on_error: If False, the first handler or middleware
                failure is re-raised to the caller and events still queued
                behind it are dropped

        Raises:
            Exception: Only when continue_on_error is False
        """
        event = PluginEvent(type=event_type, data=data)
        if self._is_processing and self in _delivering.get():
            # Delivered by the emit call already draining the queue
            self._queue.append((event, continue_on_error))
            return

        async with self._lock:
            self._queue.append((event, continue_on_error))
            token = _delivering.set(_delivering.get() + (self,))
            self._is_processing = True
            try:
                while self._queue:
                    queued, queued_continue_on_error = self._queue.popleft()
                    await self._process_event(queued, queued_continue_on_error)
                    self._processed += 1
            finally:
                self._is_processing = False
                _delivering.reset(token)
                if self._queue:
                    logger.warning(f"Dropping {len(self._queue)} queued events after a delivery failure")
                    self._queue.clear()

    async def _process_event(self, event: PluginEvent, continue_on_error: bool) -> None:
        processed: Optional[PluginEvent] = event
        for middleware in list(self._middleware):
            try:
                processed = await asyncio.wait_for(middleware(processed), self.handler_timeout)
            except Exception:
                logger.exception(f"Middleware error for {event.type.value}")
                if not continue_on_error:
                    raise
                continue
            if processed is None:
                logger.debug(f"Event {event.type.value} cancelled by middleware")
                return

        for handler in list(self._handlers.get(processed.type, [])):
            if not handler.should_handle(processed):
                continue
            try:
                await asyncio.wait_for(handler.handle(processed), self.handler_timeout)
            except Exception:
                logger.exception(
                    f"Handler {type(handler).__name__} failed for {processed.type.value}"
                )
                if not continue_on_error:
                    raise

    def registered_event_types(self) -> list[EventType]:
        return [event_type for event_type, handlers in self._handlers.items() if handlers]

    def handler_count(self, event_type: EventType) -> int:
        return len(self._handlers.get(event_type, []))

    def stats(self) -> dict:
        """Statistics about registered handlers (for debugging/testing)."""
        handlers_by_type = {
            event_type.value: len(handlers) for event_type, handlers in self._handlers.items()
        }
        return {
            "total_handlers": sum(handlers_by_type.values()),
            "middleware_count": len(self._middleware),
            "processed_events": self._processed,
            "queue_size": len(self._queue),
            "handlers_by_type": handlers_by_type,
        }

    def clear(self) -> None:
        self._handlers.clear()
        self._middleware.clear()
        self._queue.clear()
        logger.info("Cleared all event handlers and middleware")
