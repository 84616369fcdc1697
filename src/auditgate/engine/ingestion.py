"""Ingestion pipeline - classify, validate and append raw event batches."""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auditgate.db.repositories import EventStore
from auditgate.errors import ValidationFailure
from auditgate.models.registry import EventTypeRegistry, read_discriminator
from auditgate.models.registry import registry as default_registry
from auditgate.observability.metrics import metrics

logger = logging.getLogger(__name__)


@dataclass
class SkippedRecord:
    """Record dropped because its discriminator is not registered."""

    index: int
    event_type: Any
    event_id: Optional[str] = None


@dataclass
class FailedRecord:
    """Record with a known discriminator that could not be stored."""

    index: int
    code: str
    reason: str
    event_id: Optional[str] = None


@dataclass
class IngestionReport:
    """Per-record outcome of one batch. Every input lands in exactly one bucket."""

    received: int = 0
    stored: list[str] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)
    skipped: list[SkippedRecord] = field(default_factory=list)
    failed: list[FailedRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def counts(self) -> dict[str, int]:
        return {
            "received": self.received,
            "stored": len(self.stored),
            "duplicates": len(self.duplicates),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
        }

    def summary(self) -> str:
        return " ".join(f"{name}={count}" for name, count in self.counts().items())


def _raw_id(raw: Mapping[str, Any]) -> Optional[str]:
    value = raw.get("id")
    return value if isinstance(value, str) else None


class IngestionPipeline:
    """
    Turns a batch of raw polymorphic records into store appends.

    Each record is handled on its own: unknown discriminators are skipped,
    invalid payloads and store errors are recorded as failures, and every
    stored record is committed before the next one is looked at. Nothing a
    single record does can drop or corrupt its siblings.
    """

    def __init__(
        self,
        session: AsyncSession,
        store: EventStore | None = None,
        registry: EventTypeRegistry | None = None,
    ):
        self.session = session
        self.registry = registry or default_registry
        self.store = store or EventStore(session, self.registry)

    async def ingest(self, batch: Iterable[Any]) -> IngestionReport:
        report = IngestionReport()

        for index, raw in enumerate(batch):
            report.received += 1
            await self._ingest_one(index, raw, report)

        metrics.record_ingest(**report.counts())

        logger.info(f"Ingested batch: {report.summary()}")
        return report

    async def _ingest_one(self, index: int, raw: Any, report: IngestionReport) -> None:
        if not isinstance(raw, Mapping):
            report.failed.append(
                FailedRecord(
                    index=index,
                    code="VALIDATION_FAILURE",
                    reason=f"record must be an object, got {type(raw).__name__}",
                )
            )
            return

        discriminator = read_discriminator(raw)
        variant = self.registry.classify(discriminator)
        if variant is None:
            logger.info(f"Skipping record {index} with unknown event type {discriminator!r}")
            report.skipped.append(
                SkippedRecord(index=index, event_type=discriminator, event_id=_raw_id(raw))
            )
            return

        try:
            event = variant.decode(raw)
        except ValidationFailure as e:
            logger.warning(f"Rejected record {index}: {e.message}")
            report.failed.append(
                FailedRecord(index=index, code=e.code, reason=e.reason, event_id=e.event_id)
            )
            return

        try:
            stored = await self.store.append(event)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.warning(f"Failed to store event {event.id}: {e}", exc_info=True)
            report.failed.append(
                FailedRecord(index=index, code="STORE_ERROR", reason=str(e), event_id=event.id)
            )
            return

        if stored:
            report.stored.append(event.id)
        else:
            logger.debug(f"Event {event.id} already stored, ignoring replay")
            report.duplicates.append(event.id)
