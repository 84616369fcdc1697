"""Runtime entity descriptors embedded in events."""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from auditgate.models.enums import ProcessInstanceStatus, TaskStatus


class CamelModel(BaseModel):
    """
    Immutable model that reads and writes camelCase wire keys.

    Keys without a declared field are kept as extras and written back out
    unchanged, so producer data survives a store round trip.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="allow",
    )


class BPMNActivity(CamelModel):
    """A BPMN flow element being executed (service task, user task, gateway...)."""

    element_id: Optional[str] = None
    activity_name: Optional[str] = None
    activity_type: Optional[str] = None
    process_instance_id: Optional[str] = None
    process_definition_id: Optional[str] = None


class ProcessInstance(CamelModel):
    """A running (or finished) process instance."""

    id: str
    process_definition_id: Optional[str] = None
    process_definition_key: Optional[str] = None
    parent_id: Optional[str] = None
    business_key: Optional[str] = None
    initiator: Optional[str] = None
    name: Optional[str] = None
    # Unrecognized statuses stay plain strings
    status: Optional[Union[ProcessInstanceStatus, str]] = Field(default=None, union_mode="left_to_right")


class Task(CamelModel):
    """A human task owned by a process instance."""

    id: str
    name: Optional[str] = None
    status: Optional[Union[TaskStatus, str]] = Field(default=None, union_mode="left_to_right")
    assignee: Optional[str] = None
    owner: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[int] = None
    process_instance_id: Optional[str] = None
    process_definition_id: Optional[str] = None
