"""Event bus for pub/sub delivery of domain events."""

import logging
from collections import defaultdict
from typing import Callable, Iterable, TypeVar

from turnbuckle.events.types import DomainEvent

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=DomainEvent)
EventHandler = Callable[[DomainEvent], None]


class EventBus:
    """
    Pub/sub event bus that delivers engine output to the outside world.

    Engines never hold a reference to the bus. They return event values and
    the caller dispatches them after committing its own work. A failing
    handler is logged and skipped so one bad subscriber cannot block the
    rest, and so dispatch never undoes a booking.

    Example:
        bus = EventBus()

        def on_fans(event: FanAwardedEvent):
            print(f"{event.wrestler_name}: {event.amount:+,} fans")

        bus.subscribe(FanAwardedEvent, on_fans)
        bus.dispatch(result.events)
    """

    def __init__(self) -> None:
        """Initialize the event bus."""
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self._global_handlers: list[EventHandler] = []
        self._failures = 0

    def subscribe(
        self,
        event_type: type[T],
        handler: Callable[[T], None],
    ) -> None:
        """
        Register a handler for a specific event type.

        Args:
            event_type: The type of event to handle
            handler: Callback function that receives the event
        """
        self._handlers[event_type].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        """Register a handler for all events."""
        self._global_handlers.append(handler)

    def unsubscribe(
        self,
        event_type: type[T],
        handler: Callable[[T], None],
    ) -> None:
        """Remove a handler for a specific event type."""
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)

    def unsubscribe_all(self, handler: EventHandler) -> None:
        """Remove a global handler."""
        if handler in self._global_handlers:
            self._global_handlers.remove(handler)

    def emit(self, event: DomainEvent) -> int:
        """
        Deliver one event to its handlers.

        Handlers for the specific event type are called first,
        then global handlers that receive all events.

        Returns:
            Number of handlers that raised
        """
        failures = 0
        for handler in [*self._handlers[type(event)], *self._global_handlers]:
            try:
                handler(event)
            except Exception:
                failures += 1
                logger.exception(f"Handler {handler!r} failed on {event.event_type}")
        self._failures += failures
        return failures

    def dispatch(self, events: Iterable[DomainEvent]) -> int:
        """Deliver events in order. Returns the number of handler failures."""
        return sum(self.emit(event) for event in events)

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()
        self._global_handlers.clear()

    @property
    def failure_count(self) -> int:
        return self._failures

    def handler_count(self, event_type: type[DomainEvent] | None = None) -> int:
        """
        Get the number of registered handlers.

        Args:
            event_type: If provided, count handlers for this type only.
                       If None, count all handlers including global.
        """
        if event_type is None:
            total = sum(len(handlers) for handlers in self._handlers.values())
            return total + len(self._global_handlers)
        return len(self._handlers[event_type])
