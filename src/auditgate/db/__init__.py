"""AuditGate database layer."""

from auditgate.db.base import Base, init_db
from auditgate.db.repositories import FILTERABLE_COLUMNS, EventStore
from auditgate.db.tables import RuntimeEventTable

__all__ = [
    "Base",
    "EventStore",
    "FILTERABLE_COLUMNS",
    "RuntimeEventTable",
    "init_db",
]
