"""Dual-store metrics port definition.

Defines the abstract interface for dual-store operational metrics. This port
enables the orchestrators to record backend outcomes without depending on
the Prometheus implementation in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class DualStoreMetricsProtocol(ABC):
    """Abstract interface for dual-store metrics collection."""

    @abstractmethod
    def record_backend_operation(
        self, backend: str, operation: str, outcome: str
    ) -> None:
        """Count one backend call.

        Args:
            backend: StorageBackend value (or "url_shortener").
            operation: "save", "delete" or "query".
            outcome: "success" or "failure".
        """
        ...

    @abstractmethod
    def record_read_source(self, backend: str, realtime: bool) -> None:
        """Count one read-source selection.

        Args:
            backend: The selected StorageBackend value.
            realtime: Whether a realtime read was requested.
        """
        ...

    @abstractmethod
    def record_warning(self, kind: str) -> None:
        """Count one non-fatal warning.

        Args:
            kind: StoreWarningKind value.
        """
        ...
