"""Database repositories for AuditGate entities."""

import logging
from enum import Enum
from typing import Any, Mapping

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auditgate.db.tables import RuntimeEventTable
from auditgate.errors import DuplicateKey, UnsupportedFilter
from auditgate.models import RuntimeEvent
from auditgate.models.registry import EventTypeRegistry, registry as default_registry
from auditgate.utils.time import utc_now

logger = logging.getLogger(__name__)

# Wire attribute name -> indexed column
FILTERABLE_COLUMNS = {
    "id": RuntimeEventTable.event_id,
    "eventType": RuntimeEventTable.event_type,
    "entityId": RuntimeEventTable.entity_id,
    "processInstanceId": RuntimeEventTable.process_instance_id,
    "processDefinitionId": RuntimeEventTable.process_definition_id,
}

# Total order: producer timestamp, then id. Ids are unique, so no ties.
ORDER_BY = (RuntimeEventTable.timestamp.asc(), RuntimeEventTable.event_id.asc())


def _filter_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


class EventStore:
    """
    Append-only store of runtime events.

    Events are keyed by their producer-assigned id. Appending an id that is
    already stored is a no-op (at-least-once delivery makes replays normal);
    nothing is ever updated in place.
    """

    def __init__(self, session: AsyncSession, registry: EventTypeRegistry | None = None):
        self.session = session
        self.registry = registry or default_registry

    async def append(self, event: RuntimeEvent, strict: bool = False) -> bool:
        """
        Append an event.

        Returns True if stored, False if the id was already present (or
        raises DuplicateKey when strict). A concurrent writer of the same id
        loses on the primary key; only its insert is rolled back.
        """
        if await self.exists(event.id):
            if strict:
                raise DuplicateKey(event.id)
            return False

        try:
            # Only this insert is undone on a key conflict
            async with self.session.begin_nested():
                self.session.add(self._model_to_row(event))
        except IntegrityError:
            logger.debug(f"Event {event.id} stored concurrently by another writer")
            if strict:
                raise DuplicateKey(event.id)
            return False
        return True

    async def exists(self, event_id: str) -> bool:
        result = await self.session.execute(
            select(RuntimeEventTable.event_id).where(RuntimeEventTable.event_id == event_id)
        )
        return result.scalar_one_or_none() is not None

    async def get(self, event_id: str) -> RuntimeEvent | None:
        """Get an event by id."""
        result = await self.session.execute(
            select(RuntimeEventTable).where(RuntimeEventTable.event_id == event_id)
        )
        row = result.scalar_one_or_none()
        return self._row_to_model(row) if row else None

    async def query_all(
        self,
        filters: Mapping[str, Any] | None = None,
        page: int = 0,
        page_size: int = 20,
    ) -> tuple[list[RuntimeEvent], int]:
        """
        Query events matching every supplied filter.

        Returns one page of events ordered by (timestamp, id) plus the total
        number of matches across all pages. Both come from one statement, so
        the total always agrees with the rows returned.

        Raises:
            UnsupportedFilter: a filter names an attribute that is not indexed
        """
        conditions = self._build_conditions(filters)

        query = (
            select(RuntimeEventTable, func.count().over().label("total"))
            .where(*conditions)
            .order_by(*ORDER_BY)
            .offset(page * page_size)
            .limit(page_size)
        )
        result = await self.session.execute(query)
        rows = result.all()

        if rows:
            total = rows[0].total
        elif page > 0:
            # Past the last page no row carries the window count
            total = await self._count(conditions)
        else:
            total = 0

        return [self._row_to_model(row) for row, _ in rows], total

    async def count(self, filters: Mapping[str, Any] | None = None) -> int:
        """Count events matching every supplied filter."""
        return await self._count(self._build_conditions(filters))

    async def purge_all(self) -> int:
        """Delete every stored event. Administrative reset only."""
        result = await self.session.execute(delete(RuntimeEventTable))
        return result.rowcount or 0

    async def _count(self, conditions: list) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(RuntimeEventTable).where(*conditions)
        )
        return result.scalar_one()

    def _build_conditions(self, filters: Mapping[str, Any] | None) -> list:
        if not filters:
            return []

        unsupported = [name for name in filters if name not in FILTERABLE_COLUMNS]
        if unsupported:
            raise UnsupportedFilter(unsupported, list(FILTERABLE_COLUMNS))

        return [
            FILTERABLE_COLUMNS[name] == _filter_value(value)
            for name, value in filters.items()
            if value is not None
        ]

    def _model_to_row(self, event: RuntimeEvent) -> RuntimeEventTable:
        entity = getattr(event, "entity", None)
        return RuntimeEventTable(
            event_id=event.id,
            event_type=event.event_type.value,
            timestamp=event.timestamp,
            message_id=event.message_id,
            sequence_number=event.sequence_number,
            app_name=event.app_name,
            app_version=event.app_version,
            service_name=event.service_name,
            service_full_name=event.service_full_name,
            service_type=event.service_type,
            service_version=event.service_version,
            entity_id=event.entity_id,
            process_instance_id=event.process_instance_id,
            process_definition_id=event.process_definition_id,
            process_definition_key=event.process_definition_key,
            process_definition_version=event.process_definition_version,
            parent_process_instance_id=event.parent_process_instance_id,
            business_key=event.business_key,
            entity=entity.model_dump(by_alias=True, mode="json", exclude_none=True) if entity is not None else {},
            cause=getattr(event, "cause", None),
            attributes=dict(event.model_extra or {}),
            ingested_at=utc_now(),
        )

    def _row_to_model(self, row: RuntimeEventTable) -> RuntimeEvent:
        """Convert database row to its concrete event variant."""
        variant = self.registry.resolve(row.event_type)
        data = dict(row.attributes or {})
        if row.cause is not None:
            data["cause"] = row.cause
        data.update(
            {
                "id": row.event_id,
                "event_type": variant.event_type,
                "timestamp": row.timestamp,
                "message_id": row.message_id,
                "sequence_number": row.sequence_number,
                "app_name": row.app_name,
                "app_version": row.app_version,
                "service_name": row.service_name,
                "service_full_name": row.service_full_name,
                "service_type": row.service_type,
                "service_version": row.service_version,
                "entity_id": row.entity_id,
                "process_instance_id": row.process_instance_id,
                "process_definition_id": row.process_definition_id,
                "process_definition_key": row.process_definition_key,
                "process_definition_version": row.process_definition_version,
                "parent_process_instance_id": row.parent_process_instance_id,
                "business_key": row.business_key,
                "entity": row.entity,
            }
        )
        return variant.model.model_validate(data)
