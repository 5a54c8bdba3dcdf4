"""Migration phase registry for the petition dual-store.

This module exposes the four independent storage capabilities the
orchestrators consult on every call:
- mongo-read / mongo-write: document store reads and writes
- mysql-read / mysql-write: relational store reads and writes

Capabilities derive from a named MigrationPhase, optionally overridden
per capability. Values are read fresh on each call so an operator can
change phase mid-run without restarting callers.

Environment Variables:
- PETITION_MIGRATION_PHASE: Phase name (default: MONGO_ONLY)
- PETITION_MONGO_READ: Override mongo-read (true/false)
- PETITION_MONGO_WRITE: Override mongo-write (true/false)
- PETITION_MYSQL_READ: Override mysql-read (true/false)
- PETITION_MYSQL_WRITE: Override mysql-write (true/false)

Undefined or unknown phases resolve to MONGO_ONLY (document store active,
relational store inactive), never to "all disabled".
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

import structlog

from src.domain.models.storage_backend import StorageBackend

log = structlog.get_logger()

PHASE_ENV = "PETITION_MIGRATION_PHASE"
MONGO_READ_ENV = "PETITION_MONGO_READ"
MONGO_WRITE_ENV = "PETITION_MONGO_WRITE"
MYSQL_READ_ENV = "PETITION_MYSQL_READ"
MYSQL_WRITE_ENV = "PETITION_MYSQL_WRITE"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class MigrationPhase(str, Enum):
    """Operator-selected migration phases, in rollout order."""

    MONGO_ONLY = "mongo_only"
    DUAL_WRITE_MONGO_READ = "dual_write_mongo_read"
    DUAL_WRITE_DUAL_READ = "dual_write_dual_read"
    DUAL_WRITE_MYSQL_READ = "dual_write_mysql_read"
    MYSQL_ONLY = "mysql_only"


DEFAULT_MIGRATION_PHASE = MigrationPhase.MONGO_ONLY


@dataclass(frozen=True)
class PhaseCapabilities:
    """Snapshot of the four storage capabilities.

    Attributes:
        mongo_read: Document store may serve reads.
        mongo_write: Document store receives writes.
        mysql_read: Relational store may serve reads.
        mysql_write: Relational store receives writes.
    """

    mongo_read: bool = True
    mongo_write: bool = True
    mysql_read: bool = False
    mysql_write: bool = False

    @classmethod
    def for_phase(cls, phase: MigrationPhase) -> "PhaseCapabilities":
        """Return the capabilities of a named phase.

        Args:
            phase: The migration phase.

        Returns:
            PhaseCapabilities for the phase.
        """
        return _PHASE_CAPABILITIES[phase]

    @property
    def any_read_enabled(self) -> bool:
        """Return True if at least one store is readable."""
        return self.mongo_read or self.mysql_read

    @property
    def both_reads_enabled(self) -> bool:
        """Return True during overlapping read phases."""
        return self.mongo_read and self.mysql_read

    @property
    def preferred_write_backend(self) -> Optional[StorageBackend]:
        """Return the store preferred for writes.

        The document store is the original write target and is written
        first, so it is preferred whenever it receives writes.
        """
        if self.mongo_write:
            return StorageBackend.DOCUMENT_STORE
        if self.mysql_write:
            return StorageBackend.RELATIONAL_STORE
        return None

    @property
    def relational_authoritative(self) -> bool:
        """Return True if the relational store is the authoritative record.

        The relational store is authoritative once it serves reads, or when
        the document store no longer receives writes.
        """
        return self.mysql_write and (self.mysql_read or not self.mongo_write)

    def is_read_enabled(self, backend: StorageBackend) -> bool:
        """Return True if the given backend is readable."""
        if backend == StorageBackend.DOCUMENT_STORE:
            return self.mongo_read
        return self.mysql_read


_PHASE_CAPABILITIES: dict[MigrationPhase, PhaseCapabilities] = {
    MigrationPhase.MONGO_ONLY: PhaseCapabilities(
        mongo_read=True, mongo_write=True, mysql_read=False, mysql_write=False
    ),
    MigrationPhase.DUAL_WRITE_MONGO_READ: PhaseCapabilities(
        mongo_read=True, mongo_write=True, mysql_read=False, mysql_write=True
    ),
    MigrationPhase.DUAL_WRITE_DUAL_READ: PhaseCapabilities(
        mongo_read=True, mongo_write=True, mysql_read=True, mysql_write=True
    ),
    MigrationPhase.DUAL_WRITE_MYSQL_READ: PhaseCapabilities(
        mongo_read=False, mongo_write=True, mysql_read=True, mysql_write=True
    ),
    MigrationPhase.MYSQL_ONLY: PhaseCapabilities(
        mongo_read=False, mongo_write=False, mysql_read=True, mysql_write=True
    ),
}


def _parse_bool(value: str | None) -> Optional[bool]:
    """Parse a boolean environment value.

    Args:
        value: Raw environment value.

    Returns:
        True/False, or None if unset or unparseable.
    """
    if value is None:
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    return None


def parse_phase(value: str | None) -> MigrationPhase:
    """Parse a phase name, falling back to the safe default.

    Accepts enum values or names in any case ("dual_write_dual_read",
    "DUAL_WRITE_DUAL_READ", "dual-write-dual-read").

    Args:
        value: Raw phase name.

    Returns:
        The parsed MigrationPhase, or DEFAULT_MIGRATION_PHASE.
    """
    if not value or not value.strip():
        return DEFAULT_MIGRATION_PHASE
    normalized = value.strip().lower().replace("-", "_")
    try:
        return MigrationPhase(normalized)
    except ValueError:
        log.warning(
            "unknown_migration_phase",
            phase=value,
            fallback=DEFAULT_MIGRATION_PHASE.value,
        )
        return DEFAULT_MIGRATION_PHASE


def capabilities_from_mapping(environ: Mapping[str, str]) -> PhaseCapabilities:
    """Resolve capabilities from an environment-like mapping.

    Args:
        environ: Mapping holding the phase variables.

    Returns:
        PhaseCapabilities for the named phase with overrides applied.
    """
    base = PhaseCapabilities.for_phase(parse_phase(environ.get(PHASE_ENV)))
    overrides: dict[str, bool] = {}
    for attr, key in (
        ("mongo_read", MONGO_READ_ENV),
        ("mongo_write", MONGO_WRITE_ENV),
        ("mysql_read", MYSQL_READ_ENV),
        ("mysql_write", MYSQL_WRITE_ENV),
    ):
        parsed = _parse_bool(environ.get(key))
        if parsed is not None:
            overrides[attr] = parsed
    return replace(base, **overrides) if overrides else base


class MigrationPhaseRegistry:
    """Process-wide view of the current migration phase.

    Every accessor resolves the capabilities again; nothing is cached.
    Orchestrators take one ``capabilities()`` snapshot per call so that a
    single save, load or delete sees a consistent phase.

    Usage:
        registry = MigrationPhaseRegistry.from_environment()
        if registry.is_mysql_write_enabled():
            ...

        # Deterministic tests
        registry = MigrationPhaseRegistry.fixed(
            PhaseCapabilities.for_phase(MigrationPhase.DUAL_WRITE_DUAL_READ)
        )
    """

    def __init__(self, resolver: Callable[[], PhaseCapabilities]) -> None:
        """Initialize the registry.

        Args:
            resolver: Zero-argument callable returning the current capabilities.
        """
        self._resolver = resolver

    @classmethod
    def from_environment(
        cls, environ: Optional[Mapping[str, str]] = None
    ) -> "MigrationPhaseRegistry":
        """Create a registry backed by environment variables.

        Args:
            environ: Mapping to read (defaults to os.environ, read on each call).

        Returns:
            MigrationPhaseRegistry reading the phase variables on every call.
        """
        source = environ if environ is not None else os.environ
        return cls(lambda: capabilities_from_mapping(source))

    @classmethod
    def fixed(cls, capabilities: PhaseCapabilities) -> "MigrationPhaseRegistry":
        """Create a registry that always returns the given capabilities."""
        return cls(lambda: capabilities)

    @classmethod
    def for_phase(cls, phase: MigrationPhase) -> "MigrationPhaseRegistry":
        """Create a registry pinned to a named phase."""
        return cls.fixed(PhaseCapabilities.for_phase(phase))

    def capabilities(self) -> PhaseCapabilities:
        """Return a fresh capabilities snapshot."""
        return self._resolver()

    def is_mongo_read_enabled(self) -> bool:
        """Return True if the document store may serve reads."""
        return self.capabilities().mongo_read

    def is_mongo_write_enabled(self) -> bool:
        """Return True if the document store receives writes."""
        return self.capabilities().mongo_write

    def is_mysql_read_enabled(self) -> bool:
        """Return True if the relational store may serve reads."""
        return self.capabilities().mysql_read

    def is_mysql_write_enabled(self) -> bool:
        """Return True if the relational store receives writes."""
        return self.capabilities().mysql_write
