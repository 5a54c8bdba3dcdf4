"""
Infrastructure layer - External adapters for the petition dual-store.

This layer contains:
- MongoDB adapter (legacy document store)
- SQLAlchemy adapter (relational store)
- HTTP URL-shortener client
- Prometheus metrics, structlog configuration, in-memory stubs

IMPORT RULES:
- CAN import from: domain, application, config
- Implements ports defined in application layer
"""

__all__: list[str] = []
