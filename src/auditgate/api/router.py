"""REST API router."""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from auditgate import __version__
from auditgate.api.deps import get_db_session, verify_api_key
from auditgate.api.schemas import (
    EventPageResponse,
    HealthResponse,
    IngestResponse,
    PurgeResponse,
    event_to_wire,
)
from auditgate.config import settings
from auditgate.engine import (
    QUERY_FILTERS,
    AuditGateEngine,
    AuditGateError,
    EventNotFound,
    RepeatedFilter,
)
from auditgate.models import registry
from auditgate.observability.metrics import metrics

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])
admin_router = APIRouter(prefix="/admin/v1", dependencies=[Depends(verify_api_key)])

# Query params that drive pagination; every other param is a filter
PAGINATION_PARAMS = {"page", "size"}


def _http_error(error: AuditGateError, status_code: int) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"code": error.code, "message": error.message},
    )


# ============================================================================
# Health & Metrics
# ============================================================================


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        service=settings.service_name,
        version=__version__,
        event_types=[t.value for t in registry.known_event_types()],
    )


@router.get("/metrics")
async def get_metrics() -> dict[str, Any]:
    """In-process metrics snapshot."""
    return metrics.snapshot()


# ============================================================================
# Ingestion (transport adapter)
# ============================================================================


@router.post("/events", response_model=IngestResponse)
async def ingest_events(
    payload: Any = Body(...),
    session: AsyncSession = Depends(get_db_session),
):
    """
    Ingest a batch of raw runtime events.

    Accepts a JSON array of event objects (a single object is treated as a
    batch of one). Unknown event types are skipped and invalid records are
    reported per record; neither fails the request.
    """
    if isinstance(payload, dict):
        batch = [payload]
    elif isinstance(payload, list):
        batch = payload
    else:
        raise HTTPException(status_code=422, detail="Body must be an event object or an array of events")

    if len(batch) > settings.max_batch_size:
        raise HTTPException(
            status_code=413,
            detail=f"Batch of {len(batch)} events exceeds max_batch_size ({settings.max_batch_size})",
        )

    engine = AuditGateEngine(session)
    report = await engine.ingest(batch)
    return IngestResponse.from_report(report)


# ============================================================================
# Queries
# ============================================================================


@router.get("/events", response_model=EventPageResponse)
async def find_events(
    request: Request,
    page: int = Query(0),
    size: Optional[int] = Query(None),
    session: AsyncSession = Depends(get_db_session),
):
    """
    List events, filtered by any of eventType, entityId, processInstanceId,
    processDefinitionId (exact match, ANDed). Unknown or repeated params are
    rejected, as are a negative page or a non-positive size.
    """
    filters: dict[str, str] = {}
    repeated: list[str] = []
    for name, value in request.query_params.multi_items():
        if name in PAGINATION_PARAMS:
            continue
        if name in filters and name not in repeated:
            repeated.append(name)
        filters[name] = value

    engine = AuditGateEngine(session)
    try:
        if repeated:
            raise RepeatedFilter(repeated, list(QUERY_FILTERS))
        result = await engine.find_all(filters, page=page, page_size=size)
    except AuditGateError as e:
        raise _http_error(e, 400)

    return EventPageResponse.from_page(result)


@router.get("/events/{event_id}")
async def get_event(
    event_id: str,
    session: AsyncSession = Depends(get_db_session),
) -> dict[str, Any]:
    """Get an event by id."""
    engine = AuditGateEngine(session)
    try:
        event = await engine.get_event(event_id)
    except EventNotFound as e:
        raise _http_error(e, 404)

    return event_to_wire(event)


# ============================================================================
# Administration
# ============================================================================


@admin_router.delete("/events", response_model=PurgeResponse)
async def purge_events(
    session: AsyncSession = Depends(get_db_session),
):
    """Delete every stored event. Environment resets only."""
    engine = AuditGateEngine(session)
    purged = await engine.purge_all()
    return PurgeResponse(purged=purged)
