"""Domain events primitives for the modular monolith."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, Type
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Base domain event (immutable).

    Every concrete subclass is registered by class name so events persisted
    in the outbox can be rebuilt with :func:`event_from_payload`.
    """

    registry: ClassVar[Dict[str, Type[DomainEvent]]] = {}

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        DomainEvent.registry[cls.__name__] = cls

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)


class UnknownEventType(LookupError):
    """No ``DomainEvent`` subclass is registered under the given name."""


def event_from_payload(event_type: str, payload: Dict[str, Any]) -> DomainEvent:
    """Rebuild a domain event from its outbox ``event_type`` and JSON payload."""
    try:
        event_class = DomainEvent.registry[event_type]
    except KeyError as exc:
        raise UnknownEventType(f"Unknown domain event type: {event_type}") from exc

    kwargs: Dict[str, Any] = {}
    for event_field in fields(event_class):
        if not event_field.init or event_field.name not in payload:
            continue
        kwargs[event_field.name] = payload[event_field.name]

    for key in ("aggregate_id", "event_id"):
        if isinstance(kwargs.get(key), str):
            kwargs[key] = UUID(kwargs[key])
    if isinstance(kwargs.get("occurred_on"), str):
        kwargs["occurred_on"] = datetime.fromisoformat(kwargs["occurred_on"])

    return event_class(**kwargs)


class DomainEventMixin:
    """Mixin for aggregate roots that collect domain events in memory."""

    _domain_events: list[DomainEvent]

    def add_domain_event(self, event: DomainEvent) -> None:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        self._domain_events.append(event)

    def clear_domain_events(self) -> None:
        if hasattr(self, "_domain_events"):
            self._domain_events.clear()

    @property
    def domain_events(self) -> list[DomainEvent]:
        if not hasattr(self, "_domain_events"):
            self._domain_events = []
        return list(self._domain_events)
