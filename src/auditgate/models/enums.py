"""AuditGate enumerations."""

from enum import Enum


class EventCategory(str, Enum):
    """Kind of runtime object an event is about."""

    ACTIVITY = "activity"
    PROCESS = "process"
    TASK = "task"


class EventType(str, Enum):
    """Discriminator for runtime events accepted into the audit trail."""

    # BPMN activity lifecycle
    ACTIVITY_STARTED = "ACTIVITY_STARTED"
    ACTIVITY_COMPLETED = "ACTIVITY_COMPLETED"
    ACTIVITY_CANCELLED = "ACTIVITY_CANCELLED"
    # Process instance lifecycle
    PROCESS_STARTED = "PROCESS_STARTED"
    PROCESS_COMPLETED = "PROCESS_COMPLETED"
    PROCESS_CANCELLED = "PROCESS_CANCELLED"
    # Human task lifecycle
    TASK_CREATED = "TASK_CREATED"
    TASK_ASSIGNED = "TASK_ASSIGNED"
    TASK_COMPLETED = "TASK_COMPLETED"
    TASK_CANCELLED = "TASK_CANCELLED"

    @property
    def category(self) -> EventCategory:
        """Return the category encoded in the discriminator prefix."""
        return EventCategory(self.value.split("_", 1)[0].lower())


class IgnoredEventType(str, Enum):
    """Marker emitted by producers for events the audit trail must drop."""

    IGNORED = "IGNORED"


class TaskStatus(str, Enum):
    """Status carried by the embedded task descriptor."""

    CREATED = "CREATED"
    ASSIGNED = "ASSIGNED"
    SUSPENDED = "SUSPENDED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    DELETED = "DELETED"


class ProcessInstanceStatus(str, Enum):
    """Status carried by the embedded process-instance descriptor."""

    CREATED = "CREATED"
    RUNNING = "RUNNING"
    SUSPENDED = "SUSPENDED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    DELETED = "DELETED"
