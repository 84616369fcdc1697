"""SQLAlchemy table definitions."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from auditgate.db.base import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite for local runs)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class RuntimeEventTable(Base):
    """Runtime events table - append-only audit trail."""

    __tablename__ = "runtime_events"

    # Producer-assigned identity
    event_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    event_type: Mapped[str] = mapped_column(String(64), nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    message_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sequence_number: Mapped[int | None] = mapped_column(Integer, nullable=True)

    # Provenance
    app_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    app_version: Mapped[str | None] = mapped_column(String(64), nullable=True)
    service_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    service_full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    service_type: Mapped[str | None] = mapped_column(String(64), nullable=True)
    service_version: Mapped[str | None] = mapped_column(String(64), nullable=True)

    # Ownership (filterable)
    entity_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    process_instance_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    process_definition_id: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Process context (stored only)
    process_definition_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    process_definition_version: Mapped[int | None] = mapped_column(Integer, nullable=True)
    parent_process_instance_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    business_key: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Variant payload
    entity: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)
    cause: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Envelope keys without a dedicated column
    attributes: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False, default=dict)

    # Store-side bookkeeping
    ingested_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        # Default ordering (timestamp, event_id) for unfiltered pages
        Index("idx_events_order", "timestamp", "event_id"),
        Index("idx_events_type", "event_type", "timestamp", "event_id"),
        Index("idx_events_entity", "entity_id", "timestamp", "event_id"),
        Index("idx_events_process_instance", "process_instance_id", "timestamp", "event_id"),
        Index("idx_events_process_definition", "process_definition_id", "timestamp", "event_id"),
    )
