"""Middleware components for AuditGate API."""

from auditgate.middleware.trace import TRACE_HEADER, trace_id_middleware

__all__ = ["TRACE_HEADER", "trace_id_middleware"]
