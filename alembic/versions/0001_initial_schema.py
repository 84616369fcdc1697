"""Initial AuditGate schema."""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create the runtime events table and its query indexes."""
    op.create_table(
        "runtime_events",
        sa.Column("event_id", sa.String(length=255), primary_key=True),
        sa.Column("event_type", sa.String(length=64), nullable=False),
        sa.Column("timestamp", sa.BigInteger(), nullable=False),
        sa.Column("message_id", sa.String(length=255), nullable=True),
        sa.Column("sequence_number", sa.Integer(), nullable=True),
        sa.Column("app_name", sa.String(length=255), nullable=True),
        sa.Column("app_version", sa.String(length=64), nullable=True),
        sa.Column("service_name", sa.String(length=255), nullable=True),
        sa.Column("service_full_name", sa.String(length=255), nullable=True),
        sa.Column("service_type", sa.String(length=64), nullable=True),
        sa.Column("service_version", sa.String(length=64), nullable=True),
        sa.Column("entity_id", sa.String(length=255), nullable=True),
        sa.Column("process_instance_id", sa.String(length=255), nullable=True),
        sa.Column("process_definition_id", sa.String(length=255), nullable=True),
        sa.Column("process_definition_key", sa.String(length=255), nullable=True),
        sa.Column("process_definition_version", sa.Integer(), nullable=True),
        sa.Column("parent_process_instance_id", sa.String(length=255), nullable=True),
        sa.Column("business_key", sa.String(length=255), nullable=True),
        sa.Column(
            "entity",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("cause", sa.Text(), nullable=True),
        sa.Column(
            "attributes",
            sa.JSON().with_variant(postgresql.JSONB(), "postgresql"),
            nullable=False,
        ),
        sa.Column("ingested_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_events_order", "runtime_events", ["timestamp", "event_id"])
    op.create_index("idx_events_type", "runtime_events", ["event_type", "timestamp", "event_id"])
    op.create_index("idx_events_entity", "runtime_events", ["entity_id", "timestamp", "event_id"])
    op.create_index(
        "idx_events_process_instance",
        "runtime_events",
        ["process_instance_id", "timestamp", "event_id"],
    )
    op.create_index(
        "idx_events_process_definition",
        "runtime_events",
        ["process_definition_id", "timestamp", "event_id"],
    )


def downgrade() -> None:
    """Drop the runtime events table."""
    op.drop_index("idx_events_process_definition", table_name="runtime_events")
    op.drop_index("idx_events_process_instance", table_name="runtime_events")
    op.drop_index("idx_events_entity", table_name="runtime_events")
    op.drop_index("idx_events_type", table_name="runtime_events")
    op.drop_index("idx_events_order", table_name="runtime_events")
    op.drop_table("runtime_events")
