"""Query engine - conjunctive attribute filters over the event store."""

import math
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Optional, TypeVar

from auditgate.config import settings
from auditgate.db.repositories import EventStore
from auditgate.errors import InvalidPagination, UnsupportedFilter
from auditgate.models import RuntimeEvent
from auditgate.observability.metrics import metrics

T = TypeVar("T")

# Attributes clients may filter on. The store also indexes "id", but lookups
# by id go through find_by_id.
QUERY_FILTERS = ("eventType", "entityId", "processInstanceId", "processDefinitionId")


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of an ordered result set."""

    items: list[T]
    page: int
    page_size: int
    total_elements: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_elements / self.page_size) if self.page_size else 0

    def __len__(self) -> int:
        return len(self.items)


class QueryEngine:
    """Stateless read path over the event store."""

    def __init__(self, store: EventStore):
        self.store = store

    async def find_all(
        self,
        filters: Mapping[str, Any] | None = None,
        page: int = 0,
        page_size: Optional[int] = None,
    ) -> Page[RuntimeEvent]:
        """
        Find events matching all filters (exact equality), one page at a time.

        Empty filters match everything. page is zero-based; page_size is
        clamped to settings.max_page_size.

        Raises:
            UnsupportedFilter: filter key outside QUERY_FILTERS
            InvalidPagination: negative page or non-positive page size
        """
        filters = dict(filters or {})
        unsupported = [name for name in filters if name not in QUERY_FILTERS]
        if unsupported:
            raise UnsupportedFilter(unsupported, list(QUERY_FILTERS))

        if page < 0:
            raise InvalidPagination(f"page must be >= 0, got {page}")
        if page_size is not None and page_size < 1:
            raise InvalidPagination(f"page size must be >= 1, got {page_size}")
        size = min(page_size or settings.default_page_size, settings.max_page_size)

        with metrics.timed("query.find_all"):
            items, total = await self.store.query_all(filters, page=page, page_size=size)

        return Page(items=items, page=page, page_size=size, total_elements=total)

    async def find_by_id(self, event_id: str) -> RuntimeEvent | None:
        """Return the event with this id, or None."""
        return await self.store.get(event_id)
