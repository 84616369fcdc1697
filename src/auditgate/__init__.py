"""AuditGate - durable audit trail for process runtime events."""

__version__ = "0.1.0"
