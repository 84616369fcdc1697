"""AuditGate main application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auditgate import __version__
from auditgate.api import admin_router, router
from auditgate.api.deps import validate_auth_config
from auditgate.config import settings
from auditgate.db.base import close_db, init_db
from auditgate.middleware.trace import trace_id_middleware
from auditgate.models import registry
from auditgate.observability.trace import TraceIdFilter

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()),
    format="%(asctime)s - %(name)s - %(levelname)s - [%(trace_id)s] %(message)s",
)
for _handler in logging.getLogger().handlers:
    _handler.addFilter(TraceIdFilter())
logger = logging.getLogger("auditgate")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting AuditGate server...")
    logger.info(f"Environment: {settings.env.value}")
    logger.info(
        f"Accepting {len(registry)} event types: "
        + ", ".join(t.value for t in registry.known_event_types())
    )

    # Validate authentication configuration (fail fast if insecure)
    validate_auth_config()

    # Initialize database
    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down AuditGate server...")
    await close_db()
    logger.info("Shutdown complete")


app = FastAPI(
    title="AuditGate",
    description="Durable, queryable audit trail for process runtime events",
    version=__version__,
    lifespan=lifespan,
)

# Trace ID middleware (correlation across logs)
app.middleware("http")(trace_id_middleware)

# CORS (explicit allowlist, no wildcards with credentials)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allowed_methods,
    allow_headers=settings.cors_allowed_headers,
)

app.include_router(router)
app.include_router(admin_router)


def main():
    """Entry point for the application."""
    uvicorn.run(
        "auditgate.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
