"""Unit tests for the Prometheus dual-store metrics.

Each test uses its own CollectorRegistry for isolation.
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from prometheus_client import CollectorRegistry

from src.infrastructure.monitoring.metrics import (
    PrometheusDualStoreMetrics,
    generate_metrics,
    get_dual_store_metrics,
    reset_dual_store_metrics,
)


@pytest.fixture
def registry() -> CollectorRegistry:
    """Create an isolated registry."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> PrometheusDualStoreMetrics:
    """Create metrics with fixed service labels."""
    with patch.dict(os.environ, {"SERVICE_NAME": "petitions", "ENVIRONMENT": "test"}):
        return PrometheusDualStoreMetrics(registry=registry)


def _labels(**labels: str) -> dict[str, str]:
    return {"service": "petitions", "environment": "test", **labels}


class TestCounters:
    """Tests for the three counters."""

    def test_backend_operations(
        self, metrics: PrometheusDualStoreMetrics, registry: CollectorRegistry
    ) -> None:
        metrics.record_backend_operation("document_store", "save", "success")
        metrics.record_backend_operation("document_store", "save", "success")
        metrics.record_backend_operation("relational_store", "save", "failure")

        assert registry.get_sample_value(
            "petition_store_backend_operations_total",
            _labels(backend="document_store", operation="save", outcome="success"),
        ) == 2.0
        assert registry.get_sample_value(
            "petition_store_backend_operations_total",
            _labels(backend="relational_store", operation="save", outcome="failure"),
        ) == 1.0

    def test_read_source_labels_realtime_as_text(
        self, metrics: PrometheusDualStoreMetrics, registry: CollectorRegistry
    ) -> None:
        metrics.record_read_source("relational_store", True)
        metrics.record_read_source("document_store", False)

        assert registry.get_sample_value(
            "petition_store_read_source_total",
            _labels(backend="relational_store", realtime="true"),
        ) == 1.0
        assert registry.get_sample_value(
            "petition_store_read_source_total",
            _labels(backend="document_store", realtime="false"),
        ) == 1.0

    def test_warnings(
        self, metrics: PrometheusDualStoreMetrics, registry: CollectorRegistry
    ) -> None:
        metrics.record_warning("short_url_unavailable")

        assert registry.get_sample_value(
            "petition_store_warnings_total", _labels(kind="short_url_unavailable")
        ) == 1.0

    def test_default_labels(self, registry: CollectorRegistry) -> None:
        with patch.dict(os.environ, {}, clear=True):
            metrics = PrometheusDualStoreMetrics(registry=registry)
        metrics.record_warning("relational_write_failed")

        assert registry.get_sample_value(
            "petition_store_warnings_total",
            {
                "service": "petition-store",
                "environment": "development",
                "kind": "relational_write_failed",
            },
        ) == 1.0


class TestSingleton:
    """Tests for the process-wide instance."""

    def setup_method(self) -> None:
        reset_dual_store_metrics()

    def teardown_method(self) -> None:
        reset_dual_store_metrics()

    def test_same_instance_until_reset(self) -> None:
        first = get_dual_store_metrics()
        assert get_dual_store_metrics() is first
        reset_dual_store_metrics()
        assert get_dual_store_metrics() is not first

    def test_generate_metrics_exposition(self) -> None:
        get_dual_store_metrics().record_warning("short_url_unavailable")
        output = generate_metrics()
        assert b"petition_store_warnings_total" in output
        assert b'kind="short_url_unavailable"' in output
