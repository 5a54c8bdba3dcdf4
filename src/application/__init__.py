"""
Application layer - Orchestration of petition persistence across two stores.

This layer contains:
- Ports (document store, relational store, queries, URL shortener, metrics)
- Services (identity reconciler, save/load/delete orchestrators, backfill)

IMPORT RULES:
- CAN import from: domain, config
- Depends on infrastructure only through ports
"""

__all__: list[str] = []
