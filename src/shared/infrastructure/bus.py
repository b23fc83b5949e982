"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, Iterable, List, Type

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent


class InMemoryEventBus(IEventBus):
    """Synchronous in-process bus.

    Handlers run in subscription order; an exception raised by a handler
    propagates to the publisher, which decides whether to retry.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.get(event_class, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event_class: Type[DomainEvent]) -> List[IEventHandler]:
        return list(self._handlers.get(event_class, []))

    def publish(self, event: DomainEvent) -> int:
        """Dispatch *event* and return how many handlers received it."""
        handlers = self.handlers_for(type(event))
        for handler in handlers:
            handler.handle(event)
        return len(handlers)

    def publish_all(self, events: Iterable[DomainEvent]) -> int:
        return sum(self.publish(event) for event in events)


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
