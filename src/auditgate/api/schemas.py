"""API request/response schemas."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from auditgate.engine import IngestionReport, Page
from auditgate.models import RuntimeEvent


def event_to_wire(event: RuntimeEvent) -> dict[str, Any]:
    """Serialize an event with camelCase keys, omitting unset fields."""
    return event.model_dump(by_alias=True, mode="json", exclude_none=True)


# ============================================================================
# Ingestion schemas
# ============================================================================


class SkippedRecordSchema(BaseModel):
    """Record dropped for an unknown event type."""

    index: int
    event_type: Any = None
    event_id: Optional[str] = None


class FailedRecordSchema(BaseModel):
    """Record that could not be stored."""

    index: int
    code: str
    reason: str
    event_id: Optional[str] = None


class IngestResponse(BaseModel):
    """Per-record outcome of an ingestion batch."""

    received: int
    stored: list[str] = Field(default_factory=list)
    duplicates: list[str] = Field(default_factory=list)
    skipped: list[SkippedRecordSchema] = Field(default_factory=list)
    failed: list[FailedRecordSchema] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: IngestionReport) -> "IngestResponse":
        return cls(
            received=report.received,
            stored=report.stored,
            duplicates=report.duplicates,
            skipped=[SkippedRecordSchema(**vars(s)) for s in report.skipped],
            failed=[FailedRecordSchema(**vars(f)) for f in report.failed],
        )


# ============================================================================
# Query schemas
# ============================================================================


class PageMetadata(BaseModel):
    """Pagination metadata (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    number: int
    size: int
    total_elements: int
    total_pages: int


class EventPageResponse(BaseModel):
    """One page of events."""

    content: list[dict[str, Any]]
    page: PageMetadata

    @classmethod
    def from_page(cls, page: Page[RuntimeEvent]) -> "EventPageResponse":
        return cls(
            content=[event_to_wire(e) for e in page.items],
            page=PageMetadata(
                number=page.page,
                size=page.page_size,
                total_elements=page.total_elements,
                total_pages=page.total_pages,
            ),
        )


# ============================================================================
# Admin & health schemas
# ============================================================================


class PurgeResponse(BaseModel):
    """Administrative purge result."""

    purged: int


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    event_types: list[str]
