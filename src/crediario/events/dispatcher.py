"""In-process domain event dispatcher.

One dispatcher instance lives for the lifetime of the application and is
injected into command handlers. Delivery is synchronous: publish() returns
after every subscribed handler has run.
"""

import inspect
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Type, TypeVar, Union

from ..domain.events import BaseEvent
from ..utils.logging_config import get_module_logger

logger = get_module_logger(__name__)

E = TypeVar("E", bound=BaseEvent)
EventHandler = Callable[[E], Union[None, Awaitable[None]]]


class EventDispatcher:
    """Typed subscribe/publish registry with no global state."""

    def __init__(self):
        self._handlers: Dict[Type[BaseEvent], List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type[E], handler: EventHandler) -> None:
        """Register a handler for an event class (and its subclasses)."""
        self._handlers[event_type].append(handler)
        logger.debug(f"Subscribed {_handler_name(handler)} to {event_type.__name__}")

    def unsubscribe(self, event_type: Type[E], handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event_type: Type[BaseEvent]) -> List[EventHandler]:
        """Handlers registered for the class or any of its bases, most specific first."""
        handlers: List[EventHandler] = []
        for klass in event_type.__mro__:
            handlers.extend(self._handlers.get(klass, []))
        return handlers

    async def publish(self, event: BaseEvent) -> int:
        """
        Deliver an event to every matching handler in registration order.

        Handler exceptions propagate to the publisher.

        Returns:
            Number of handlers that received the event
        """
        handlers = self.handlers_for(type(event))
        logger.info(f"Publishing {event.event_type} ({event.event_id}) to {len(handlers)} handler(s)")

        for handler in handlers:
            result: Any = handler(event)
            if inspect.isawaitable(result):
                await result

        return len(handlers)


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__qualname__", type(handler).__name__)
