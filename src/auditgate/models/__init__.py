"""AuditGate data models."""

from auditgate.models.enums import (
    EventCategory,
    EventType,
    IgnoredEventType,
    ProcessInstanceStatus,
    TaskStatus,
)
from auditgate.models.entities import BPMNActivity, ProcessInstance, Task
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
from auditgate.models.registry import EventTypeRegistry, EventVariant, registry

__all__ = [
    "ActivityCancelledEvent",
    "ActivityCompletedEvent",
    "ActivityEvent",
    "ActivityStartedEvent",
    "BPMNActivity",
    "EventCategory",
    "EventType",
    "EventTypeRegistry",
    "EventVariant",
    "IgnoredEventType",
    "ProcessCancelledEvent",
    "ProcessCompletedEvent",
    "ProcessEvent",
    "ProcessInstance",
    "ProcessInstanceStatus",
    "ProcessStartedEvent",
    "RuntimeEvent",
    "Task",
    "TaskAssignedEvent",
    "TaskCancelledEvent",
    "TaskCompletedEvent",
    "TaskCreatedEvent",
    "TaskEvent",
    "TaskStatus",
    "registry",
]
