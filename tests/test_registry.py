"""
Event type registry: classification and decoding of raw records.
"""

import pytest
from pydantic import ValidationError

from auditgate.errors import UnknownEventType, ValidationFailure
from auditgate.models import (
    ActivityCancelledEvent,
    ActivityStartedEvent,
    EventCategory,
    EventType,
    EventTypeRegistry,
    EventVariant,
    IgnoredEventType,
    ProcessInstanceStatus,
    ProcessStartedEvent,
    TaskAssignedEvent,
    TaskStatus,
    registry,
)
from auditgate.models.registry import build_default_registry

from conftest import activity_event, process_event, task_event


def test_every_event_type_is_registered():
    """All ten discriminators classify to a variant of the matching category."""
    assert len(registry) == len(EventType)
    for event_type in EventType:
        variant = registry.classify(event_type.value)
        assert variant is not None, f"{event_type.value} should be known"
        assert variant.event_type is event_type
        assert variant.category is event_type.category


@pytest.mark.parametrize(
    "discriminator",
    [
        IgnoredEventType.IGNORED,
        "IGNORED",
        "VARIABLE_CREATED",
        "activity_started",
        "",
        None,
        42,
        ["ACTIVITY_STARTED"],
    ],
)
def test_unknown_discriminators_classify_as_unknown(discriminator):
    """Anything outside the table yields None, never an error."""
    assert registry.classify(discriminator) is None
    assert discriminator not in registry


def test_resolve_raises_for_unknown():
    with pytest.raises(UnknownEventType) as exc_info:
        registry.resolve("IGNORED")
    assert exc_info.value.code == "UNKNOWN_EVENT_TYPE"


def test_category_is_encoded_in_discriminator():
    assert EventType.ACTIVITY_CANCELLED.category is EventCategory.ACTIVITY
    assert EventType.PROCESS_STARTED.category is EventCategory.PROCESS
    assert EventType.TASK_ASSIGNED.category is EventCategory.TASK


def test_decode_activity_keeps_descriptor_and_envelope():
    raw = activity_event(
        "a-1", "ACTIVITY_STARTED", "3", "4",
        element_id="1", activity_name="My Service Task", activity_type="Service Task",
    )
    event = registry.resolve(raw["eventType"]).decode(raw)

    assert isinstance(event, ActivityStartedEvent)
    assert event.id == "a-1"
    assert event.event_type is EventType.ACTIVITY_STARTED
    assert event.process_definition_id == "3"
    assert event.process_instance_id == "4"
    assert event.entity.activity_name == "My Service Task"
    assert event.entity.activity_type == "Service Task"
    # Activity events concern the flow element
    assert event.entity_id == "1"
    assert event.service_name == "rb-my-app"


def test_decode_activity_cancelled_carries_cause():
    raw = activity_event("a-2", "ACTIVITY_CANCELLED", "103", "104", cause="manually cancelled")
    event = registry.resolve("ACTIVITY_CANCELLED").decode(raw)

    assert isinstance(event, ActivityCancelledEvent)
    assert event.cause == "manually cancelled"
    assert event.entity_id is None


def test_decode_process_derives_ids_from_instance():
    raw = process_event("p-1", "PROCESS_STARTED", "25", "44", businessKey="order-7")
    event = registry.resolve("PROCESS_STARTED").decode(raw)

    assert isinstance(event, ProcessStartedEvent)
    assert event.entity_id == "25"
    assert event.process_instance_id == "25"
    assert event.process_definition_id == "44"
    assert event.business_key == "order-7"


def test_decode_task_derives_ids_from_task():
    raw = task_event("t-1", "TASK_ASSIGNED", "1234-abc-5678-def", "task assigned", "ASSIGNED", "27", "46")
    event = registry.resolve("TASK_ASSIGNED").decode(raw)

    assert isinstance(event, TaskAssignedEvent)
    assert event.entity_id == "1234-abc-5678-def"
    assert event.process_definition_id == "27"
    assert event.process_instance_id == "46"
    assert event.entity.status is TaskStatus.ASSIGNED


def test_decode_never_overwrites_producer_fields():
    raw = task_event("t-2", "TASK_CREATED", "task-1", "t", "CREATED", "27", "46")
    raw["entityId"] = "explicit-entity"
    raw["processInstanceId"] = "explicit-instance"

    event = registry.resolve("TASK_CREATED").decode(raw)

    assert event.entity_id == "explicit-entity"
    assert event.process_instance_id == "explicit-instance"
    assert event.process_definition_id == "27"


def test_decode_accepts_snake_case_keys():
    raw = {
        "id": "t-3",
        "event_type": "TASK_COMPLETED",
        "timestamp": 1700000000000,
        "service_name": "rb",
        "entity": {"id": "task-9", "process_instance_id": "77"},
    }
    event = registry.resolve("TASK_COMPLETED").decode(raw)

    assert event.service_name == "rb"
    assert event.process_instance_id == "77"


def test_activity_event_requires_descriptor():
    raw = activity_event("a-3", "ACTIVITY_STARTED", "3", "4")
    del raw["entity"]

    with pytest.raises(ValidationFailure) as exc_info:
        registry.resolve("ACTIVITY_STARTED").decode(raw)

    assert exc_info.value.event_id == "a-3"
    assert "entity" in exc_info.value.reason


@pytest.mark.parametrize("missing", ["id", "timestamp"])
def test_envelope_requires_id_and_timestamp(missing):
    raw = process_event("p-2", "PROCESS_COMPLETED", "24", "43")
    del raw[missing]

    with pytest.raises(ValidationFailure) as exc_info:
        registry.resolve("PROCESS_COMPLETED").decode(raw)
    assert exc_info.value.code == "VALIDATION_FAILURE"


def test_task_descriptor_requires_task_id():
    raw = task_event("t-4", "TASK_CANCELLED", "x", "t", "CANCELLED", "1", "2")
    del raw["entity"]["id"]

    with pytest.raises(ValidationFailure):
        registry.resolve("TASK_CANCELLED").decode(raw)


def test_decoded_events_are_immutable():
    raw = process_event("p-3", "PROCESS_STARTED", "1", "2")
    event = registry.resolve("PROCESS_STARTED").decode(raw)

    with pytest.raises(ValidationError):
        event.entity_id = "changed"


def test_registry_is_open_for_new_entries():
    """A registry built from a subset only knows what was registered."""
    default = build_default_registry()
    partial = EventTypeRegistry()
    partial.register(default.resolve(EventType.TASK_CREATED))

    assert partial.classify("TASK_CREATED") is not None
    assert partial.classify("TASK_ASSIGNED") is None
    assert partial.known_event_types() == [EventType.TASK_CREATED]


def test_register_rejects_duplicates():
    fresh = build_default_registry()
    variant = fresh.resolve(EventType.PROCESS_STARTED)

    with pytest.raises(ValueError, match="already registered"):
        fresh.register(
            EventVariant(event_type=variant.event_type, model=variant.model, defaults=variant.defaults)
        )


@pytest.mark.parametrize("status", ["CREATED", "RUNNING", "DELETED"])
def test_process_statuses_are_recognized(status):
    raw = process_event("p-4", "PROCESS_STARTED", "26", "45")
    raw["entity"]["status"] = status

    event = registry.resolve("PROCESS_STARTED").decode(raw)

    assert event.entity.status is ProcessInstanceStatus(status)


def test_unrecognized_descriptor_status_does_not_fail_record():
    """Optional descriptor fields never reject a record with a valid envelope."""
    raw = task_event("t-5", "TASK_CREATED", "task-2", "t", "PENDING_REVIEW", "27", "46")
    process = process_event("p-5", "PROCESS_STARTED", "27", "46")
    process["entity"]["status"] = "MIGRATING"

    task = registry.resolve("TASK_CREATED").decode(raw)
    started = registry.resolve("PROCESS_STARTED").decode(process)

    assert task.entity.status == "PENDING_REVIEW"
    assert started.entity.status == "MIGRATING"


def test_decode_keeps_undeclared_producer_fields():
    raw = task_event("t-6", "TASK_CREATED", "task-3", "t", "CREATED", "27", "46")
    raw["entity"].update({"owner": "alice", "dueDate": "2026-11-01T00:00:00Z", "formKey": "approve-form"})
    raw.update({"processDefinitionVersion": 3, "messageId": "msg-1", "sequenceNumber": 7, "tenant": "acme"})

    event = registry.resolve("TASK_CREATED").decode(raw)

    assert event.entity.owner == "alice"
    assert event.entity.model_extra == {"dueDate": "2026-11-01T00:00:00Z", "formKey": "approve-form"}
    assert event.process_definition_version == 3
    assert event.message_id == "msg-1"
    assert event.sequence_number == 7
    assert event.model_extra == {"tenant": "acme"}
