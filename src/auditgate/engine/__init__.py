"""AuditGate engine - ingestion pipeline and query engine."""

from auditgate.engine.core import AuditGateEngine
from auditgate.engine.ingestion import (
    FailedRecord,
    IngestionPipeline,
    IngestionReport,
    SkippedRecord,
)
from auditgate.engine.query import QUERY_FILTERS, Page, QueryEngine
from auditgate.errors import (
    AuditGateError,
    DuplicateKey,
    EventNotFound,
    InvalidPagination,
    RepeatedFilter,
    UnknownEventType,
    UnsupportedFilter,
    ValidationFailure,
)

__all__ = [
    "AuditGateEngine",
    "AuditGateError",
    "DuplicateKey",
    "EventNotFound",
    "FailedRecord",
    "IngestionPipeline",
    "IngestionReport",
    "InvalidPagination",
    "Page",
    "QUERY_FILTERS",
    "QueryEngine",
    "RepeatedFilter",
    "SkippedRecord",
    "UnknownEventType",
    "UnsupportedFilter",
    "ValidationFailure",
]
