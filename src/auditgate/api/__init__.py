"""AuditGate HTTP API."""

from auditgate.api.router import admin_router, router

__all__ = ["admin_router", "router"]
