"""Event Bus - Named pub/sub channel shared by plugins and extensions.

Handlers subscribe to an exact event name. Subscribing the same handler
twice to the same event collapses to one subscription. Emission is
synchronous: by the time ``emit`` returns every subscribed handler's
synchronous part has run. Handlers returning awaitables are scheduled on
the running loop and not awaited.

Dispatch order is unordered. Do not rely on subscription order.

Usage:
    bus = EventBus()

    # Subscribe, keeping the unsubscribe callback
    off = bus.on("theme.changed", lambda payload: print(payload))

    # Emit
    bus.emit("theme.changed", {"current": "dark"})

    # Unsubscribe
    off()
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Union

from luckmd.errors import HandlerError

logger = logging.getLogger(__name__)

# Events emitted by the runtime itself
RUNTIME_READY = "runtime.ready"
RUNTIME_DISPOSED = "runtime.disposed"
THEME_CHANGED = "theme.changed"
EXTENSION_ACTIVATED = "extension.activated"
EXTENSION_FAILED = "extension.failed"
PLUGIN_ACTIVATED = "plugin.activated"

EventHandler = Callable[[Any], Union[None, Awaitable[Any]]]
Unsubscribe = Callable[[], None]


def _handler_name(handler: Callable[..., Any]) -> str:
    return getattr(handler, "__qualname__", None) or repr(handler)


class EventBus:
    """Event emitter with per-handler failure isolation.

    A handler that raises is logged and recorded in ``errors``; the
    remaining handlers for the same emission still run.
    """

    def __init__(self, max_errors: int = 100):
        # dict keys keep set semantics with stable iteration
        self._listeners: Dict[str, Dict[EventHandler, None]] = {}
        # once() subscriptions: original handler -> dispatching wrapper
        self._once: Dict[str, Dict[EventHandler, EventHandler]] = {}
        self._tasks: Set[asyncio.Task[Any]] = set()
        self._max_errors = max_errors
        self.errors: List[HandlerError] = []

    def on(self, event: str, handler: EventHandler) -> Unsubscribe:
        """Subscribe a handler to an event.

        Args:
            event: Event name
            handler: Callable receiving the emitted payload

        Returns:
            Callback that removes this subscription
        """
        self._listeners.setdefault(event, {})[handler] = None
        logger.debug("EventBus: Subscribed %s to '%s'", _handler_name(handler), event)
        return lambda: self.off(event, handler)

    def once(self, event: str, handler: EventHandler) -> Unsubscribe:
        """Subscribe a handler that is removed after its first call.

        The subscription is keyed by ``handler``: a repeated ``once`` for
        the same handler is a no-op, and ``off(event, handler)`` removes it.
        """
        wrappers = self._once.setdefault(event, {})
        if handler not in wrappers:

            def _wrapper(payload: Any) -> Any:
                self.off(event, handler)
                return handler(payload)

            wrappers[handler] = _wrapper
            self.on(event, _wrapper)
        return lambda: self.off(event, handler)

    def off(self, event: str, handler: EventHandler) -> None:
        """Remove a subscription. Unknown handlers are ignored."""
        wrappers = self._once.get(event)
        if wrappers and handler in wrappers:
            wrapper = wrappers.pop(handler)
            if not wrappers:
                del self._once[event]
            self._remove(event, wrapper)
        self._remove(event, handler)

    def _remove(self, event: str, handler: EventHandler) -> None:
        listeners = self._listeners.get(event)
        if not listeners or handler not in listeners:
            return
        del listeners[handler]
        if not listeners:
            del self._listeners[event]
        logger.debug("EventBus: Unsubscribed %s from '%s'", _handler_name(handler), event)

    def emit(self, event: str, payload: Any = None) -> int:
        """Invoke every handler currently subscribed to ``event``.

        Args:
            event: Event name
            payload: Value passed to each handler

        Returns:
            Number of handlers that were invoked
        """
        # Snapshot so handlers may subscribe/unsubscribe during dispatch
        handlers = list(self._listeners.get(event, ()))
        count = 0
        for handler in handlers:
            count += 1
            try:
                result = handler(payload)
            except Exception as e:
                self._record_error(event, handler, e)
                continue
            if inspect.isawaitable(result):
                self._schedule(event, handler, result)

        if count:
            logger.debug(f"EventBus: Emitted {event} to {count} handlers")
        return count

    def _schedule(self, event: str, handler: EventHandler, awaitable: Awaitable[Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            self._record_error(
                event,
                handler,
                RuntimeError("async handler emitted outside a running event loop"),
            )
            return

        task = asyncio.ensure_future(awaitable, loop=loop)
        self._tasks.add(task)

        def _done(t: asyncio.Task[Any]) -> None:
            self._tasks.discard(t)
            if t.cancelled():
                return
            exc = t.exception()
            if exc is not None:
                self._record_error(event, handler, exc)

        task.add_done_callback(_done)

    def _record_error(self, event: str, handler: EventHandler, exc: BaseException) -> None:
        name = _handler_name(handler)
        logger.error(f"EventBus: Handler error for {name} on '{event}': {exc}")
        self.errors.append(HandlerError(event=event, handler=name, message=str(exc)))
        if len(self.errors) > self._max_errors:
            self.errors = self.errors[-self._max_errors:]

    async def drain(self) -> None:
        """Wait for scheduled async handlers to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def clear_errors(self) -> None:
        """Clear recorded handler errors."""
        self.errors.clear()

    def listener_count(self, event: Optional[str] = None) -> int:
        """Number of subscriptions, for one event or overall."""
        if event is not None:
            return len(self._listeners.get(event, ()))
        return sum(len(handlers) for handlers in self._listeners.values())

    def clear(self, event: Optional[str] = None) -> None:
        """Drop all subscriptions, or those of a single event."""
        if event is None:
            self._listeners.clear()
            self._once.clear()
        else:
            self._listeners.pop(event, None)
            self._once.pop(event, None)
