"""AuditGate core engine - canonical operations."""

import logging
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from auditgate.db.repositories import EventStore
from auditgate.engine.ingestion import IngestionPipeline, IngestionReport
from auditgate.engine.query import Page, QueryEngine
from auditgate.errors import EventNotFound
from auditgate.models import RuntimeEvent
from auditgate.models.registry import EventTypeRegistry
from auditgate.models.registry import registry as default_registry
from auditgate.observability.metrics import metrics

logger = logging.getLogger(__name__)


class AuditGateEngine:
    """Core engine binding store, ingestion and queries to one session."""

    def __init__(self, session: AsyncSession, registry: EventTypeRegistry | None = None):
        self.session = session
        self.registry = registry or default_registry
        self.events = EventStore(session, self.registry)
        self.ingestion = IngestionPipeline(session, self.events, self.registry)
        self.query = QueryEngine(self.events)

    # =========================================================================
    # Ingestion (transport side)
    # =========================================================================

    async def ingest(self, batch: Iterable[Any]) -> IngestionReport:
        """Classify and store a batch; see IngestionPipeline."""
        return await self.ingestion.ingest(batch)

    # =========================================================================
    # Queries (read side)
    # =========================================================================

    async def find_all(
        self,
        filters: Mapping[str, Any] | None = None,
        page: int = 0,
        page_size: Optional[int] = None,
    ) -> Page[RuntimeEvent]:
        return await self.query.find_all(filters, page=page, page_size=page_size)

    async def find_by_id(self, event_id: str) -> RuntimeEvent | None:
        return await self.query.find_by_id(event_id)

    async def get_event(self, event_id: str) -> RuntimeEvent:
        """Like find_by_id, but raises EventNotFound."""
        event = await self.query.find_by_id(event_id)
        if event is None:
            raise EventNotFound(event_id)
        return event

    # =========================================================================
    # Administration
    # =========================================================================

    async def purge_all(self) -> int:
        """Remove every stored event. Not part of the steady-state API."""
        removed = await self.events.purge_all()
        await self.session.commit()
        metrics.increment("admin.purged", removed)
        logger.warning(f"Purged {removed} events from the audit trail")
        return removed
