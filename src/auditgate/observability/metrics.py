"""In-process metrics for the audit trail: ingestion outcomes and latencies."""

from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass
from threading import Lock
from time import perf_counter
from typing import Any, Iterator

# Per-record buckets of an ingestion batch, in report order
INGEST_OUTCOMES = ("received", "stored", "duplicates", "skipped", "failed")


@dataclass
class LatencySummary:
    """Running count/total/min/max of durations in milliseconds."""

    count: int = 0
    total_ms: float = 0.0
    min_ms: float | None = None
    max_ms: float | None = None

    def record(self, duration_ms: float) -> None:
        self.count += 1
        self.total_ms += duration_ms
        self.min_ms = duration_ms if self.min_ms is None else min(self.min_ms, duration_ms)
        self.max_ms = duration_ms if self.max_ms is None else max(self.max_ms, duration_ms)

    def as_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "total_ms": self.total_ms,
            "min_ms": self.min_ms,
            "max_ms": self.max_ms,
            "avg_ms": self.total_ms / self.count if self.count else 0.0,
        }


class AuditMetrics:
    """
    Thread-safe process-wide metrics.

    Counters are flat dotted names ("ingest.stored", "db.query.count").
    Latencies are kept per operation name and reported in milliseconds.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._counts: defaultdict[str, float] = defaultdict(float)
        self._latency: dict[str, LatencySummary] = {}

    def increment(self, name: str, amount: float = 1.0) -> None:
        with self._lock:
            self._counts[name] += amount

    def record_ingest(self, **outcomes: int) -> None:
        """Count one ingestion batch; keyword names must be INGEST_OUTCOMES."""
        unknown = set(outcomes) - set(INGEST_OUTCOMES)
        if unknown:
            raise ValueError(f"Unknown ingestion outcome(s): {', '.join(sorted(unknown))}")
        with self._lock:
            self._counts["ingest.batches"] += 1
            for outcome in INGEST_OUTCOMES:
                self._counts[f"ingest.{outcome}"] += outcomes.get(outcome, 0)

    def record_latency(self, name: str, duration_ms: float) -> None:
        with self._lock:
            self._latency.setdefault(name, LatencySummary()).record(duration_ms)

    @contextmanager
    def timed(self, name: str) -> Iterator[None]:
        """Record the wall time of the enclosed block under name."""
        start = perf_counter()
        try:
            yield
        finally:
            self.record_latency(name, (perf_counter() - start) * 1000.0)

    def get_counter(self, name: str) -> float:
        with self._lock:
            return self._counts.get(name, 0.0)

    def snapshot(self) -> dict[str, Any]:
        with self._lock:
            return {
                "counters": dict(self._counts),
                "latency_ms": {name: summary.as_dict() for name, summary in self._latency.items()},
            }

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
            self._latency.clear()


metrics = AuditMetrics()
