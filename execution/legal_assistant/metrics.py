"""
Metrics Collection for the Legal Assistant

Tracks per-operation latency and outcomes (queries, document generation,
validation) plus ingestion throughput. Exposed through the API and CLI.
"""

import time
import logging
import threading
from dataclasses import dataclass, field
from collections import defaultdict
from typing import Optional
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)

OPERATIONS = ("query", "writing", "validation")


@dataclass
class OperationRecord:
    """One tracked operation."""
    operation: str
    label: str
    start_time: float
    end_time: float = 0
    latency_ms: float = 0
    sources_count: int = 0
    error: Optional[str] = None


def _percentile(values: list[float], fraction: float) -> float:
    if not values:
        return 0
    ordered = sorted(values)
    index = int(len(ordered) * fraction)
    return ordered[min(index, len(ordered) - 1)]


@dataclass
class OperationStats:
    """Aggregated stats for one operation kind."""
    total: int = 0
    successful: int = 0
    failed: int = 0
    total_latency_ms: float = 0
    latencies: list = field(default_factory=list)

    @property
    def avg_latency_ms(self) -> float:
        if self.total == 0:
            return 0
        return self.total_latency_ms / self.total

    @property
    def error_rate(self) -> float:
        if self.total == 0:
            return 0
        return self.failed / self.total

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "error_rate": f"{self.error_rate:.2%}",
            "latency_ms": {
                "avg": round(self.avg_latency_ms, 2),
                "p50": round(_percentile(self.latencies, 0.50), 2),
                "p95": round(_percentile(self.latencies, 0.95), 2),
                "p99": round(_percentile(self.latencies, 0.99), 2),
            },
        }


@dataclass
class SystemMetrics:
    """Aggregated system metrics."""
    operations: dict = field(
        default_factory=lambda: {name: OperationStats() for name in OPERATIONS}
    )

    # Ingestion
    documents_ingested: int = 0
    ingestion_failures: int = 0
    total_ingestion_time_ms: float = 0
    documents_by_category: dict = field(default_factory=lambda: defaultdict(int))

    errors_by_type: dict = field(default_factory=lambda: defaultdict(int))

    def to_dict(self) -> dict:
        """Convert to dictionary for display."""
        return {
            "operations": {name: stats.to_dict() for name, stats in self.operations.items()},
            "ingestion": {
                "documents": self.documents_ingested,
                "failures": self.ingestion_failures,
                "avg_time_ms": round(
                    self.total_ingestion_time_ms / max(self.documents_ingested, 1), 2
                ),
                "by_category": dict(self.documents_by_category),
            },
            "errors": dict(self.errors_by_type),
        }


class MetricsCollector:
    """
    Collects and aggregates system metrics.

    Usage:
        collector = get_metrics_collector()

        with collector.track_operation("query", question) as tracker:
            response = service.process_query(query)
            tracker.set_sources(len(response.sources))

        collector.get_metrics_dict()
    """

    _instance = None

    def __new__(cls):
        """Singleton pattern for global metrics collection."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._lock = threading.Lock()
        self.metrics = SystemMetrics()
        self._history: list[OperationRecord] = []
        self._max_history = 1000
        self._start_time = datetime.now()
        self._initialized = True

    def reset(self):
        """Reset all metrics (for testing)."""
        with self._lock:
            self.metrics = SystemMetrics()
            self._history = []
            self._start_time = datetime.now()

    class OperationTracker:
        """Context manager timing one operation."""

        def __init__(self, collector: 'MetricsCollector', operation: str, label: str):
            self.collector = collector
            self.record = OperationRecord(
                operation=operation,
                label=label[:200],
                start_time=time.time(),
            )

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            self.record.end_time = time.time()
            self.record.latency_ms = (self.record.end_time - self.record.start_time) * 1000

            if exc_type:
                self.fail(exc_val)

            self.collector._record_operation(self.record)
            return False  # Don't suppress exceptions

        def set_sources(self, count: int):
            self.record.sources_count = count

        def fail(self, error: BaseException):
            """Mark the operation failed when the caller handles the exception itself."""
            if self.record.error is None:
                self.record.error = str(error)
                self.collector._record_error(type(error).__name__)

    def track_operation(self, operation: str, label: str = "") -> OperationTracker:
        """Create a tracker for one of OPERATIONS."""
        return self.OperationTracker(self, operation, label)

    def _record_operation(self, record: OperationRecord):
        with self._lock:
            stats = self.metrics.operations.setdefault(record.operation, OperationStats())
            stats.total += 1
            if record.error:
                stats.failed += 1
            else:
                stats.successful += 1

            stats.total_latency_ms += record.latency_ms
            stats.latencies.append(record.latency_ms)
            if len(stats.latencies) > self._max_history:
                stats.latencies = stats.latencies[-self._max_history:]

            self._history.append(record)
            if len(self._history) > self._max_history:
                self._history = self._history[-self._max_history:]

    def _record_error(self, error_type: str):
        with self._lock:
            self.metrics.errors_by_type[error_type] += 1

    def record_ingestion(self, category: str, duration_ms: float, success: bool = True):
        """Record one ingestion attempt."""
        with self._lock:
            if success:
                self.metrics.documents_ingested += 1
                self.metrics.total_ingestion_time_ms += duration_ms
                self.metrics.documents_by_category[category] += 1
            else:
                self.metrics.ingestion_failures += 1

    def get_metrics(self) -> SystemMetrics:
        return self.metrics

    def get_metrics_dict(self) -> dict:
        data = self.metrics.to_dict()
        data["uptime_seconds"] = round(self.get_uptime().total_seconds(), 1)
        return data

    def get_recent_operations(self, limit: int = 10) -> list[OperationRecord]:
        return self._history[-limit:]

    def get_uptime(self) -> timedelta:
        return datetime.now() - self._start_time


# Global metrics collector instance
_collector = None


def get_metrics_collector() -> MetricsCollector:
    """Get the global metrics collector instance."""
    global _collector
    if _collector is None:
        _collector = MetricsCollector()
    return _collector
