"""Prometheus metrics for the petition dual-store.

Counters:
- petition_store_backend_operations_total{backend, operation, outcome}
- petition_store_read_source_total{backend, realtime}
- petition_store_warnings_total{kind}

All counters carry service/environment labels taken from SERVICE_NAME and
ENVIRONMENT.
"""

import os
import threading

from prometheus_client import CollectorRegistry, Counter, generate_latest

from src.application.ports.dual_store_metrics import DualStoreMetricsProtocol

# Content type for Prometheus exposition
METRICS_CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

_collector_lock = threading.Lock()


class PrometheusDualStoreMetrics(DualStoreMetricsProtocol):
    """Prometheus implementation of DualStoreMetricsProtocol.

    Attributes:
        backend_operations_total: Backend calls by backend/operation/outcome.
        read_source_total: Read-source selections by backend and freshness.
        warnings_total: Non-fatal warnings by kind.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize the counters.

        Args:
            registry: Optional custom registry for testing isolation.
        """
        self._registry = registry or CollectorRegistry()
        self._environment = os.environ.get("ENVIRONMENT", "development")
        self._service_name = os.environ.get("SERVICE_NAME", "petition-store")

        self.backend_operations_total = Counter(
            name="petition_store_backend_operations_total",
            documentation="Backend calls issued by the petition dual-store",
            labelnames=["service", "environment", "backend", "operation", "outcome"],
            registry=self._registry,
        )
        self.read_source_total = Counter(
            name="petition_store_read_source_total",
            documentation="Read-source selections by backend and freshness",
            labelnames=["service", "environment", "backend", "realtime"],
            registry=self._registry,
        )
        self.warnings_total = Counter(
            name="petition_store_warnings_total",
            documentation="Non-fatal warnings attached to save/delete results",
            labelnames=["service", "environment", "kind"],
            registry=self._registry,
        )

    def record_backend_operation(
        self, backend: str, operation: str, outcome: str
    ) -> None:
        self.backend_operations_total.labels(
            service=self._service_name,
            environment=self._environment,
            backend=backend,
            operation=operation,
            outcome=outcome,
        ).inc()

    def record_read_source(self, backend: str, realtime: bool) -> None:
        self.read_source_total.labels(
            service=self._service_name,
            environment=self._environment,
            backend=backend,
            realtime=str(realtime).lower(),
        ).inc()

    def record_warning(self, kind: str) -> None:
        self.warnings_total.labels(
            service=self._service_name,
            environment=self._environment,
            kind=kind,
        ).inc()

    def get_registry(self) -> CollectorRegistry:
        """Return the registry holding these counters."""
        return self._registry


_metrics: PrometheusDualStoreMetrics | None = None


def get_dual_store_metrics() -> PrometheusDualStoreMetrics:
    """Return the process-wide metrics instance, creating it on first use."""
    global _metrics
    if _metrics is None:
        with _collector_lock:
            if _metrics is None:
                _metrics = PrometheusDualStoreMetrics()
    return _metrics


def generate_metrics() -> bytes:
    """Render the process-wide metrics in Prometheus exposition format."""
    return generate_latest(get_dual_store_metrics().get_registry())


def reset_dual_store_metrics() -> None:
    """Drop the process-wide instance (for test isolation)."""
    global _metrics
    with _collector_lock:
        _metrics = None
