"""AuditGate errors."""

from typing import Any, Optional


class AuditGateError(Exception):
    """Base error for AuditGate operations."""

    def __init__(self, message: str, code: str = "AUDITGATE_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class UnknownEventType(AuditGateError):
    """Discriminator is not registered. Never fatal: the record is skipped."""

    def __init__(self, event_type: Any):
        super().__init__(f"Unknown event type: {event_type!r}", "UNKNOWN_EVENT_TYPE")
        self.event_type = event_type


class ValidationFailure(AuditGateError):
    """Known discriminator but structurally incomplete payload."""

    def __init__(self, event_type: str, reason: str, event_id: Optional[str] = None):
        super().__init__(
            f"Invalid {event_type} event {event_id or '<no id>'}: {reason}",
            "VALIDATION_FAILURE",
        )
        self.event_type = event_type
        self.event_id = event_id
        self.reason = reason


class DuplicateKey(AuditGateError):
    """Event id already stored."""

    def __init__(self, event_id: str):
        super().__init__(f"Event already stored: {event_id}", "DUPLICATE_KEY")
        self.event_id = event_id


class EventNotFound(AuditGateError):
    """Event does not exist."""

    def __init__(self, event_id: str):
        super().__init__(f"Event not found: {event_id}", "EVENT_NOT_FOUND")
        self.event_id = event_id


class UnsupportedFilter(AuditGateError):
    """Query names an attribute the event store does not index."""

    def __init__(self, names: list[str], supported: list[str]):
        super().__init__(
            f"Unsupported filter(s): {', '.join(sorted(names))}. "
            f"Supported: {', '.join(supported)}",
            "UNSUPPORTED_FILTER",
        )
        self.names = names
        self.supported = supported


class RepeatedFilter(UnsupportedFilter):
    """Query names the same attribute more than once; filters match one value each."""

    def __init__(self, names: list[str], supported: list[str]):
        AuditGateError.__init__(
            self,
            f"Filter(s) given more than once: {', '.join(sorted(names))}",
            "UNSUPPORTED_FILTER",
        )
        self.names = names
        self.supported = supported


class InvalidPagination(AuditGateError):
    """Page index or page size out of range."""

    def __init__(self, message: str):
        super().__init__(message, "INVALID_PAGINATION")
