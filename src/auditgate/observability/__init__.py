"""Observability helpers for AuditGate."""

from auditgate.observability.metrics import metrics
from auditgate.observability.trace import TraceIdFilter, get_trace_id, set_trace_id

__all__ = ["TraceIdFilter", "metrics", "get_trace_id", "set_trace_id"]
