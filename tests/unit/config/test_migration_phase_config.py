"""Unit tests for the migration phase registry.

Tests cover:
- Capabilities of every named phase
- Safe default for unset and unknown phases
- Per-capability overrides
- Derived properties (preferred write backend, relational authority)
- Fresh resolution on every call
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest

from src.config.migration_phase_config import (
    DEFAULT_MIGRATION_PHASE,
    MONGO_READ_ENV,
    MYSQL_READ_ENV,
    MYSQL_WRITE_ENV,
    PHASE_ENV,
    MigrationPhase,
    MigrationPhaseRegistry,
    PhaseCapabilities,
    capabilities_from_mapping,
    parse_phase,
)
from src.domain.models.storage_backend import StorageBackend


class TestPhaseCapabilities:
    """Tests for the phase table."""

    @pytest.mark.parametrize(
        ("phase", "expected"),
        [
            (MigrationPhase.MONGO_ONLY, (True, True, False, False)),
            (MigrationPhase.DUAL_WRITE_MONGO_READ, (True, True, False, True)),
            (MigrationPhase.DUAL_WRITE_DUAL_READ, (True, True, True, True)),
            (MigrationPhase.DUAL_WRITE_MYSQL_READ, (False, True, True, True)),
            (MigrationPhase.MYSQL_ONLY, (False, False, True, True)),
        ],
    )
    def test_phase_table(
        self, phase: MigrationPhase, expected: tuple[bool, bool, bool, bool]
    ) -> None:
        """Each phase maps to its (mongo-read, mongo-write, mysql-read, mysql-write)."""
        caps = PhaseCapabilities.for_phase(phase)
        assert (
            caps.mongo_read,
            caps.mongo_write,
            caps.mysql_read,
            caps.mysql_write,
        ) == expected

    def test_default_capabilities_are_mongo_only(self) -> None:
        """The dataclass defaults match the MONGO_ONLY phase."""
        assert PhaseCapabilities() == PhaseCapabilities.for_phase(
            MigrationPhase.MONGO_ONLY
        )

    def test_capabilities_are_immutable(self) -> None:
        """Snapshots cannot be mutated."""
        caps = PhaseCapabilities()
        with pytest.raises(AttributeError):
            caps.mysql_write = True  # type: ignore[misc]

    class TestPreferredWriteBackend:
        """Tests for preferred_write_backend."""

        def test_document_store_when_mongo_writes(self) -> None:
            caps = PhaseCapabilities.for_phase(MigrationPhase.DUAL_WRITE_DUAL_READ)
            assert caps.preferred_write_backend == StorageBackend.DOCUMENT_STORE

        def test_relational_when_only_mysql_writes(self) -> None:
            caps = PhaseCapabilities.for_phase(MigrationPhase.MYSQL_ONLY)
            assert caps.preferred_write_backend == StorageBackend.RELATIONAL_STORE

        def test_none_when_no_writes(self) -> None:
            caps = PhaseCapabilities(mongo_write=False, mysql_write=False)
            assert caps.preferred_write_backend is None

    class TestRelationalAuthoritative:
        """Tests for relational_authoritative."""

        @pytest.mark.parametrize(
            ("phase", "expected"),
            [
                (MigrationPhase.MONGO_ONLY, False),
                (MigrationPhase.DUAL_WRITE_MONGO_READ, False),
                (MigrationPhase.DUAL_WRITE_DUAL_READ, True),
                (MigrationPhase.DUAL_WRITE_MYSQL_READ, True),
                (MigrationPhase.MYSQL_ONLY, True),
            ],
        )
        def test_by_phase(self, phase: MigrationPhase, expected: bool) -> None:
            assert PhaseCapabilities.for_phase(phase).relational_authoritative is expected

        def test_sole_write_target_is_authoritative(self) -> None:
            """mysql-write without mongo-write is authoritative even without reads."""
            caps = PhaseCapabilities(
                mongo_read=True, mongo_write=False, mysql_read=False, mysql_write=True
            )
            assert caps.relational_authoritative is True

    def test_read_flags(self) -> None:
        """any/both read helpers reflect the read capabilities."""
        none = PhaseCapabilities(mongo_read=False, mysql_read=False)
        both = PhaseCapabilities(mongo_read=True, mysql_read=True)
        assert none.any_read_enabled is False
        assert both.both_reads_enabled is True
        assert both.is_read_enabled(StorageBackend.RELATIONAL_STORE) is True
        assert none.is_read_enabled(StorageBackend.DOCUMENT_STORE) is False


class TestParsePhase:
    """Tests for parse_phase()."""

    def test_unset_falls_back_to_default(self) -> None:
        assert parse_phase(None) == DEFAULT_MIGRATION_PHASE
        assert parse_phase("   ") == DEFAULT_MIGRATION_PHASE

    def test_default_is_mongo_only(self) -> None:
        assert DEFAULT_MIGRATION_PHASE == MigrationPhase.MONGO_ONLY

    @pytest.mark.parametrize(
        "raw",
        ["dual_write_dual_read", "DUAL_WRITE_DUAL_READ", "dual-write-dual-read", " Dual_Write_Dual_Read "],
    )
    def test_accepts_names_in_any_case(self, raw: str) -> None:
        assert parse_phase(raw) == MigrationPhase.DUAL_WRITE_DUAL_READ

    def test_unknown_phase_falls_back_to_default(self) -> None:
        """Unknown phases resolve to MONGO_ONLY, never to all-disabled."""
        assert parse_phase("halfway_there") == MigrationPhase.MONGO_ONLY


class TestCapabilitiesFromMapping:
    """Tests for environment resolution with overrides."""

    def test_empty_mapping_is_mongo_only(self) -> None:
        assert capabilities_from_mapping({}) == PhaseCapabilities.for_phase(
            MigrationPhase.MONGO_ONLY
        )

    def test_named_phase(self) -> None:
        caps = capabilities_from_mapping({PHASE_ENV: "mysql_only"})
        assert caps == PhaseCapabilities.for_phase(MigrationPhase.MYSQL_ONLY)

    def test_override_applies_on_top_of_phase(self) -> None:
        caps = capabilities_from_mapping(
            {PHASE_ENV: "dual_write_mongo_read", MYSQL_READ_ENV: "true"}
        )
        assert caps.mysql_read is True
        assert caps.mongo_read is True
        assert caps.mysql_write is True

    def test_override_can_disable(self) -> None:
        caps = capabilities_from_mapping(
            {PHASE_ENV: "dual_write_dual_read", MONGO_READ_ENV: "off"}
        )
        assert caps.mongo_read is False

    def test_unparseable_override_is_ignored(self) -> None:
        caps = capabilities_from_mapping({MYSQL_WRITE_ENV: "maybe"})
        assert caps.mysql_write is False


class TestMigrationPhaseRegistry:
    """Tests for MigrationPhaseRegistry."""

    def test_fixed_registry(self) -> None:
        caps = PhaseCapabilities.for_phase(MigrationPhase.DUAL_WRITE_MYSQL_READ)
        registry = MigrationPhaseRegistry.fixed(caps)
        assert registry.capabilities() == caps
        assert registry.is_mongo_read_enabled() is False
        assert registry.is_mongo_write_enabled() is True
        assert registry.is_mysql_read_enabled() is True
        assert registry.is_mysql_write_enabled() is True

    def test_for_phase(self) -> None:
        registry = MigrationPhaseRegistry.for_phase(MigrationPhase.MYSQL_ONLY)
        assert registry.is_mongo_write_enabled() is False

    def test_reads_mapping_fresh_on_every_call(self) -> None:
        """A phase change is visible without rebuilding the registry."""
        environ: dict[str, str] = {}
        registry = MigrationPhaseRegistry.from_environment(environ)
        assert registry.is_mysql_write_enabled() is False

        environ[PHASE_ENV] = "dual_write_mongo_read"
        assert registry.is_mysql_write_enabled() is True

    def test_reads_os_environ_by_default(self) -> None:
        registry = MigrationPhaseRegistry.from_environment()
        with patch.dict(os.environ, {PHASE_ENV: "mysql_only"}):
            assert registry.is_mongo_read_enabled() is False
        with patch.dict(os.environ, {PHASE_ENV: "mongo_only"}):
            assert registry.is_mongo_read_enabled() is True
