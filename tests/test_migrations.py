"""
The Alembic revision builds the same schema as the ORM metadata.
"""

import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import inspect

from auditgate.db.base import Base, build_engine
from auditgate.db.tables import RuntimeEventTable

MIGRATION = Path(__file__).resolve().parent.parent / "alembic" / "versions" / "0001_initial_schema.py"


def _load_migration():
    spec = importlib.util.spec_from_file_location("auditgate_migration_0001", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def _run(connection, step):
    context = MigrationContext.configure(connection)
    with Operations.context(context):
        step()


def _describe(connection):
    inspector = inspect(connection)
    columns = {c["name"]: c["nullable"] for c in inspector.get_columns("runtime_events")}
    indexes = {i["name"]: tuple(i["column_names"]) for i in inspector.get_indexes("runtime_events")}
    return columns, indexes


@pytest.mark.asyncio
async def test_migration_matches_orm_metadata(tmp_path):
    migration = _load_migration()

    migrated = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'migrated.db'}")
    declared = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'declared.db'}")
    try:
        async with migrated.begin() as conn:
            await conn.run_sync(_run, migration.upgrade)
            migrated_schema = await conn.run_sync(_describe)

        async with declared.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
            declared_schema = await conn.run_sync(_describe)

        assert migrated_schema == declared_schema
        assert set(migrated_schema[0]) == {c.name for c in RuntimeEventTable.__table__.columns}

        async with migrated.begin() as conn:
            await conn.run_sync(_run, migration.downgrade)
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        assert "runtime_events" not in tables
    finally:
        await migrated.dispose()
        await declared.dispose()
