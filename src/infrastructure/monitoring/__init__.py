"""Infrastructure monitoring: Prometheus metrics for the petition dual-store."""

from src.infrastructure.monitoring.metrics import (
    METRICS_CONTENT_TYPE,
    PrometheusDualStoreMetrics,
    generate_metrics,
    get_dual_store_metrics,
    reset_dual_store_metrics,
)

__all__ = [
    "METRICS_CONTENT_TYPE",
    "PrometheusDualStoreMetrics",
    "generate_metrics",
    "get_dual_store_metrics",
    "reset_dual_store_metrics",
]
