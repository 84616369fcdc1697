#!/usr/bin/env python3
"""Golden path demo for AuditGate (publish a process lifecycle, read it back)."""

from __future__ import annotations

import json
import os
import sys
import time
import uuid
from typing import Any
from urllib.error import HTTPError
from urllib.parse import urlencode
from urllib.request import Request, urlopen


def _env(name: str, default: str | None = None) -> str | None:
    value = os.environ.get(name)
    if value is None or value == "":
        return default
    return value


class HttpClient:
    def __init__(self, base_url: str, api_key: str | None = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers: dict[str, str] = {"Content-Type": "application/json"}
        if api_key:
            self.headers["Authorization"] = f"Bearer {api_key}"

    def request_json(
        self,
        method: str,
        path: str,
        payload: Any = None,
        query: dict[str, Any] | None = None,
        timeout: float = 10.0,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        if query:
            query = {k: v for k, v in query.items() if v is not None}
            if query:
                url = f"{url}?{urlencode(query)}"

        data = None
        if payload is not None:
            data = json.dumps(payload, default=str).encode("utf-8")

        req = Request(url, data=data, method=method)
        for key, value in self.headers.items():
            req.add_header(key, value)

        try:
            with urlopen(req, timeout=timeout) as response:
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="replace")
            raise RuntimeError(f"{method} {url} failed: {exc.code} {exc.reason}: {detail}") from None

        if not raw:
            return {}
        return json.loads(raw.decode("utf-8"))


def _lifecycle(run_id: str) -> list[dict[str, Any]]:
    """One process instance with a single user task, as a runtime bundle would publish it."""
    now = int(time.time() * 1000)
    instance_id = f"pi-{run_id}"
    task_id = f"task-{run_id}"
    envelope = {"serviceName": "golden-path", "serviceVersion": "1", "processDefinitionId": "demo:1"}

    def event(offset: int, suffix: str, event_type: str, entity: dict[str, Any]) -> dict[str, Any]:
        return {
            **envelope,
            "id": f"{run_id}-{suffix}",
            "eventType": event_type,
            "timestamp": now + offset,
            "processInstanceId": instance_id,
            "entity": entity,
        }

    task = {"id": task_id, "name": "Approve", "processInstanceId": instance_id, "processDefinitionId": "demo:1"}
    return [
        event(0, "started", "PROCESS_STARTED", {"id": instance_id, "processDefinitionId": "demo:1"}),
        event(1, "activity", "ACTIVITY_STARTED", {"elementId": "approve", "activityType": "userTask"}),
        event(2, "task-created", "TASK_CREATED", {**task, "status": "CREATED"}),
        event(3, "task-assigned", "TASK_ASSIGNED", {**task, "status": "ASSIGNED", "assignee": "demo"}),
        event(4, "task-completed", "TASK_COMPLETED", {**task, "status": "COMPLETED"}),
        event(5, "completed", "PROCESS_COMPLETED", {"id": instance_id, "processDefinitionId": "demo:1"}),
        # Not an audited type: must be skipped without failing the batch
        event(6, "variable", "VARIABLE_CREATED", {"name": "approved"}),
    ]


def main() -> int:
    auditgate_url = _env("AUDITGATE_URL", "http://localhost:8080")
    api_key = _env("AUDITGATE_API_KEY")
    run_id = _env("AUDITGATE_RUN_ID", uuid.uuid4().hex[:12])

    client = HttpClient(auditgate_url, api_key=api_key)

    print("Checking health...")
    health = client.request_json("GET", "/v1/health")
    if health.get("status") != "healthy":
        raise RuntimeError(f"Unexpected health response: {health}")

    batch = _lifecycle(run_id)

    print(f"Publishing {len(batch)} events...")
    report = client.request_json("POST", "/v1/events", payload=batch)
    if len(report.get("stored", [])) != 6 or len(report.get("skipped", [])) != 1:
        raise RuntimeError(f"Unexpected ingestion report: {report}")

    print("Replaying the batch...")
    replay = client.request_json("POST", "/v1/events", payload=batch)
    if replay.get("stored") or len(replay.get("duplicates", [])) != 6:
        raise RuntimeError(f"Replay was not idempotent: {replay}")

    instance_id = f"pi-{run_id}"
    page = client.request_json("GET", "/v1/events", query={"processInstanceId": instance_id, "size": 50})
    types = [e.get("eventType") for e in page.get("content", [])]
    expected = [
        "PROCESS_STARTED",
        "ACTIVITY_STARTED",
        "TASK_CREATED",
        "TASK_ASSIGNED",
        "TASK_COMPLETED",
        "PROCESS_COMPLETED",
    ]
    if types != expected:
        raise RuntimeError(f"Unexpected audit trail for {instance_id}: {types}")

    task_events = client.request_json(
        "GET",
        "/v1/events",
        query={"entityId": f"task-{run_id}", "eventType": "TASK_ASSIGNED"},
    ).get("content", [])
    if len(task_events) != 1 or task_events[0]["entity"].get("assignee") != "demo":
        raise RuntimeError(f"Task assignment not found: {task_events}")

    event = client.request_json("GET", f"/v1/events/{run_id}-completed")
    if event.get("entityId") != instance_id:
        raise RuntimeError(f"Lookup by id returned {event}")

    print("Golden path complete: lifecycle stored once, ordered, and queryable.")
    return 0


if __name__ == "__main__":
    try:
        raise SystemExit(main())
    except Exception as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        raise
