"""
Pytest fixtures for AuditGate tests.
"""

import os
import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# Ensure test config is set before importing auditgate modules.
os.environ.setdefault("AUDITGATE_ALLOW_INSECURE_DEV", "true")
os.environ.setdefault("AUDITGATE_ENV", "development")
os.environ.setdefault("AUDITGATE_DATABASE_URL", "sqlite+aiosqlite://")

from auditgate.db import base as db_base
from auditgate.db.base import Base, build_engine
import auditgate.db.tables  # noqa: F401
from auditgate.observability.metrics import metrics
from auditgate.utils.time import epoch_millis


def _ensure_test_database_url(database_url: str) -> None:
    if not database_url.startswith("sqlite") and "test" not in database_url:
        raise RuntimeError(
            "Refusing to run AuditGate tests against a non-test database. "
            "Set AUDITGATE_TEST_DATABASE_URL to a dedicated test database."
        )


@pytest.fixture
async def engine(tmp_path):
    """
    Fresh database per test, wired into auditgate.db.base.

    Uses a throwaway SQLite file unless AUDITGATE_TEST_DATABASE_URL points
    at a dedicated database.
    """
    database_url = os.getenv(
        "AUDITGATE_TEST_DATABASE_URL",
        f"sqlite+aiosqlite:///{tmp_path / 'auditgate_test.db'}",
    )
    _ensure_test_database_url(database_url)
    engine = build_engine(database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    # Override global engine/session factory for dependency injection.
    original_engine = db_base.engine
    original_factory = db_base.async_session_factory
    db_base.engine = engine
    db_base.async_session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    yield engine

    db_base.engine = original_engine
    db_base.async_session_factory = original_factory
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    """Provide a database session per test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
async def client(engine):
    """Async test client against the app, one DB session per request."""
    from auditgate.api.deps import verify_api_key
    from auditgate.main import app

    async def override_verify_api_key():
        return "insecure_dev"

    app.dependency_overrides[verify_api_key] = override_verify_api_key

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics.reset()
    yield


# ============================================================================
# Raw event records, as a producer would publish them
# ============================================================================


def _envelope(event_id: str, event_type: str, **extra) -> dict:
    record = {
        "id": event_id,
        "eventType": event_type,
        "timestamp": epoch_millis(),
        "appName": "default-app",
        "serviceName": "rb-my-app",
        "serviceFullName": "rb-my-app",
        "serviceType": "runtime-bundle",
        "serviceVersion": "1",
    }
    record.update(extra)
    return record


def activity_event(
    event_id: str,
    event_type: str,
    process_definition_id: str,
    process_instance_id: str,
    element_id: str | None = None,
    activity_name: str | None = None,
    activity_type: str | None = None,
    **extra,
) -> dict:
    entity = {
        key: value
        for key, value in (
            ("elementId", element_id),
            ("activityName", activity_name),
            ("activityType", activity_type),
        )
        if value is not None
    }
    return _envelope(
        event_id,
        event_type,
        processDefinitionId=process_definition_id,
        processInstanceId=process_instance_id,
        entity=entity,
        **extra,
    )


def process_event(event_id: str, event_type: str, instance_id: str, definition_id: str, **extra) -> dict:
    return _envelope(
        event_id,
        event_type,
        entity={"id": instance_id, "processDefinitionId": definition_id},
        **extra,
    )


def task_event(
    event_id: str,
    event_type: str,
    task_id: str,
    name: str,
    status: str,
    process_definition_id: str,
    process_instance_id: str,
) -> dict:
    return _envelope(
        event_id,
        event_type,
        entity={
            "id": task_id,
            "name": name,
            "status": status,
            "processDefinitionId": process_definition_id,
            "processInstanceId": process_instance_id,
        },
    )


TASK_ID = "1234-abc-5678-def"


@pytest.fixture
def test_events() -> list[dict]:
    """Twelve events across all categories: activity x4, process x3, task x5."""
    return [
        activity_event(
            "ActivityCancelledEventId", "ACTIVITY_CANCELLED", "103", "104",
            cause="manually cancelled",
        ),
        activity_event(
            "ActivityStartedEventId", "ACTIVITY_STARTED", "3", "4",
            element_id="1", activity_name="My Service Task", activity_type="Service Task",
        ),
        activity_event(
            "ActivityStartedEventId2", "ACTIVITY_STARTED", "3", "4",
            element_id="2", activity_name="My User Task", activity_type="User Task",
        ),
        activity_event("ActivityCompletedEventId", "ACTIVITY_COMPLETED", "23", "42"),
        process_event("ProcessCompletedEventId", "PROCESS_COMPLETED", "24", "43"),
        process_event("ProcessCancelledEventId", "PROCESS_CANCELLED", "124", "143"),
        process_event("ProcessStartedEventId", "PROCESS_STARTED", "25", "44"),
        task_event("TaskAssignedEventId", "TASK_ASSIGNED", TASK_ID, "task assigned", "ASSIGNED", "27", "46"),
        task_event("TaskCompletedEventId", "TASK_COMPLETED", TASK_ID, "task completed", "COMPLETED", "28", "47"),
        task_event("TaskCreatedEventId", "TASK_CREATED", TASK_ID, "task created", "CREATED", "28", "47"),
        task_event("TaskCancelledEventId", "TASK_CANCELLED", TASK_ID, "task cancelled", "CANCELLED", "28", "47"),
        task_event("OtherTaskCreatedEventId", "TASK_CREATED", "9876-zyx-5432-wvu", "other task", "CREATED", "28", "48"),
    ]


@pytest.fixture
def task_cancelled_events() -> list[dict]:
    """One task going created -> assigned -> cancelled."""
    return [
        task_event("TaskCreatedEventId", "TASK_CREATED", TASK_ID, "my task", "CREATED", "proc-def", "100"),
        task_event("TaskAssignedEventId", "TASK_ASSIGNED", TASK_ID, "my task", "ASSIGNED", "proc-def", "100"),
        task_event("TaskCancelledEventId", "TASK_CANCELLED", TASK_ID, "my task", "CANCELLED", "proc-def", "100"),
    ]


@pytest.fixture
def activity_started_event():
    """Factory for a single activity-started record with a unique id."""

    def _make(activity_name: str = "first step") -> dict:
        return activity_event(
            f"ActivityStartedEventId{uuid.uuid4()}",
            "ACTIVITY_STARTED",
            "3",
            "4",
            activity_name=activity_name,
        )

    return _make


@pytest.fixture
def ignored_event() -> dict:
    """Record carrying the IGNORED marker type."""
    return _envelope(f"IgnoredEventId{uuid.uuid4()}", "IGNORED")
