"""Runtime event models - the audit trail's tagged union."""

from typing import Literal, Optional

from pydantic import Field

from auditgate.models.entities import BPMNActivity, CamelModel, ProcessInstance, Task
from auditgate.models.enums import EventCategory, EventType


class RuntimeEvent(CamelModel):
    """
    Common envelope for every audit record. Immutable once built.

    Undeclared envelope keys are kept in model_extra and stored alongside
    the declared columns.
    """

    # Identity
    id: str = Field(..., min_length=1, max_length=255)
    event_type: EventType
    timestamp: int = Field(..., description="Producer time, epoch milliseconds")
    message_id: Optional[str] = None
    sequence_number: Optional[int] = None

    # Provenance
    app_name: Optional[str] = None
    app_version: Optional[str] = None
    service_name: Optional[str] = None
    service_full_name: Optional[str] = None
    service_type: Optional[str] = None
    service_version: Optional[str] = None

    # Ownership
    entity_id: Optional[str] = None
    process_instance_id: Optional[str] = None
    process_definition_id: Optional[str] = None
    process_definition_key: Optional[str] = None
    process_definition_version: Optional[int] = None
    parent_process_instance_id: Optional[str] = None
    business_key: Optional[str] = None

    @property
    def category(self) -> EventCategory:
        return self.event_type.category


# ============================================================================
# Activity events
# ============================================================================


class ActivityEvent(RuntimeEvent):
    entity: BPMNActivity


class ActivityStartedEvent(ActivityEvent):
    event_type: Literal[EventType.ACTIVITY_STARTED] = EventType.ACTIVITY_STARTED


class ActivityCompletedEvent(ActivityEvent):
    event_type: Literal[EventType.ACTIVITY_COMPLETED] = EventType.ACTIVITY_COMPLETED


class ActivityCancelledEvent(ActivityEvent):
    event_type: Literal[EventType.ACTIVITY_CANCELLED] = EventType.ACTIVITY_CANCELLED
    cause: Optional[str] = None


# ============================================================================
# Process events
# ============================================================================


class ProcessEvent(RuntimeEvent):
    entity: ProcessInstance


class ProcessStartedEvent(ProcessEvent):
    event_type: Literal[EventType.PROCESS_STARTED] = EventType.PROCESS_STARTED


class ProcessCompletedEvent(ProcessEvent):
    event_type: Literal[EventType.PROCESS_COMPLETED] = EventType.PROCESS_COMPLETED


class ProcessCancelledEvent(ProcessEvent):
    event_type: Literal[EventType.PROCESS_CANCELLED] = EventType.PROCESS_CANCELLED
    cause: Optional[str] = None


# ============================================================================
# Task events
# ============================================================================


class TaskEvent(RuntimeEvent):
    entity: Task


class TaskCreatedEvent(TaskEvent):
    event_type: Literal[EventType.TASK_CREATED] = EventType.TASK_CREATED


class TaskAssignedEvent(TaskEvent):
    event_type: Literal[EventType.TASK_ASSIGNED] = EventType.TASK_ASSIGNED


class TaskCompletedEvent(TaskEvent):
    event_type: Literal[EventType.TASK_COMPLETED] = EventType.TASK_COMPLETED


class TaskCancelledEvent(TaskEvent):
    event_type: Literal[EventType.TASK_CANCELLED] = EventType.TASK_CANCELLED
    cause: Optional[str] = None
