"""Event type registry - closed mapping from discriminator to event shape.

Classification is a table lookup. Anything not registered (unknown strings,
the IGNORED marker, non-string values) classifies as unknown and is dropped
by ingestion; it never raises.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional

from pydantic import ValidationError

from auditgate.errors import UnknownEventType, ValidationFailure
from auditgate.models.enums import EventCategory, EventType
from auditgate.models.events import (
    ActivityCancelledEvent,
    ActivityCompletedEvent,
    ActivityEvent,
    ActivityStartedEvent,
    ProcessCancelledEvent,
    ProcessCompletedEvent,
    ProcessEvent,
    ProcessStartedEvent,
    RuntimeEvent,
    TaskAssignedEvent,
    TaskCancelledEvent,
    TaskCompletedEvent,
    TaskCreatedEvent,
    TaskEvent,
)

DISCRIMINATOR_KEYS = ("eventType", "event_type")


def _activity_defaults(event: ActivityEvent) -> dict[str, Any]:
    return {
        "entity_id": event.entity.element_id,
        "process_instance_id": event.entity.process_instance_id,
        "process_definition_id": event.entity.process_definition_id,
    }


def _process_defaults(event: ProcessEvent) -> dict[str, Any]:
    return {
        "entity_id": event.entity.id,
        "process_instance_id": event.entity.id,
        "process_definition_id": event.entity.process_definition_id,
        "process_definition_key": event.entity.process_definition_key,
        "parent_process_instance_id": event.entity.parent_id,
        "business_key": event.entity.business_key,
    }


def _task_defaults(event: TaskEvent) -> dict[str, Any]:
    return {
        "entity_id": event.entity.id,
        "process_instance_id": event.entity.process_instance_id,
        "process_definition_id": event.entity.process_definition_id,
    }


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or '<root>'}: {err['msg']}"
        for err in exc.errors()
    )


def read_discriminator(raw: Mapping[str, Any]) -> Any:
    """Return the raw eventType value of a record (None if missing)."""
    for key in DISCRIMINATOR_KEYS:
        if key in raw:
            return raw[key]
    return None


@dataclass(frozen=True)
class EventVariant:
    """A known event shape: its model and the envelope fields it derives."""

    event_type: EventType
    model: type[RuntimeEvent]
    defaults: Callable[[Any], dict[str, Any]]

    @property
    def category(self) -> EventCategory:
        return self.event_type.category

    def decode(self, raw: Mapping[str, Any]) -> RuntimeEvent:
        """
        Decode a raw record into this variant.

        Envelope fields the producer left empty are filled from the embedded
        entity; fields the producer did set are never overwritten.

        Raises:
            ValidationFailure: required fields missing or malformed
        """
        data = {k: v for k, v in raw.items() if k not in DISCRIMINATOR_KEYS}
        data["event_type"] = self.event_type

        try:
            event = self.model.model_validate(data)
        except ValidationError as e:
            event_id = raw.get("id")
            raise ValidationFailure(
                self.event_type.value,
                _describe(e),
                event_id=event_id if isinstance(event_id, str) else None,
            ) from e

        updates = {
            name: value
            for name, value in self.defaults(event).items()
            if value is not None and getattr(event, name) is None
        }
        return event.model_copy(update=updates) if updates else event


class EventTypeRegistry:
    """Lookup table of known event variants."""

    def __init__(self) -> None:
        self._variants: dict[EventType, EventVariant] = {}

    def register(self, variant: EventVariant) -> None:
        if variant.event_type in self._variants:
            raise ValueError(f"Event type already registered: {variant.event_type.value}")
        self._variants[variant.event_type] = variant

    def classify(self, discriminator: Any) -> Optional[EventVariant]:
        """Return the variant for a discriminator, or None when unknown."""
        if isinstance(discriminator, EventType):
            return self._variants.get(discriminator)
        if not isinstance(discriminator, str):
            return None
        try:
            event_type = EventType(discriminator)
        except ValueError:
            return None
        return self._variants.get(event_type)

    def resolve(self, discriminator: Any) -> EventVariant:
        """Like classify, but raises UnknownEventType."""
        variant = self.classify(discriminator)
        if variant is None:
            raise UnknownEventType(discriminator)
        return variant

    def known_event_types(self) -> list[EventType]:
        return list(self._variants)

    def __contains__(self, discriminator: Any) -> bool:
        return self.classify(discriminator) is not None

    def __iter__(self) -> Iterator[EventVariant]:
        return iter(self._variants.values())

    def __len__(self) -> int:
        return len(self._variants)


def build_default_registry() -> EventTypeRegistry:
    """Registry covering every activity, process and task event."""
    registry = EventTypeRegistry()
    for event_type, model, defaults in (
        (EventType.ACTIVITY_STARTED, ActivityStartedEvent, _activity_defaults),
        (EventType.ACTIVITY_COMPLETED, ActivityCompletedEvent, _activity_defaults),
        (EventType.ACTIVITY_CANCELLED, ActivityCancelledEvent, _activity_defaults),
        (EventType.PROCESS_STARTED, ProcessStartedEvent, _process_defaults),
        (EventType.PROCESS_COMPLETED, ProcessCompletedEvent, _process_defaults),
        (EventType.PROCESS_CANCELLED, ProcessCancelledEvent, _process_defaults),
        (EventType.TASK_CREATED, TaskCreatedEvent, _task_defaults),
        (EventType.TASK_ASSIGNED, TaskAssignedEvent, _task_defaults),
        (EventType.TASK_COMPLETED, TaskCompletedEvent, _task_defaults),
        (EventType.TASK_CANCELLED, TaskCancelledEvent, _task_defaults),
    ):
        registry.register(EventVariant(event_type=event_type, model=model, defaults=defaults))
    return registry


registry = build_default_registry()
