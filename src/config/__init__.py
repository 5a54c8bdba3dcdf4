"""Configuration module for the petition dual-store.

This module provides centralized configuration for the migration controller.

Available Configurations:
- MigrationPhaseRegistry: Four storage capabilities, read fresh per call
- PetitionUrlConfig: Base URL for nice URLs
- DocumentStoreConfig: MongoDB petition collection
- UrlShortenerConfig: URL-shortening service endpoint
"""

from src.config.migration_phase_config import (
    DEFAULT_MIGRATION_PHASE,
    MigrationPhase,
    MigrationPhaseRegistry,
    PhaseCapabilities,
)
from src.config.petition_store_config import (
    DEFAULT_PETITION_URL_CONFIG,
    TEST_PETITION_URL_CONFIG,
    DocumentStoreConfig,
    PetitionUrlConfig,
    UrlShortenerConfig,
)

__all__ = [
    "DEFAULT_MIGRATION_PHASE",
    "DEFAULT_PETITION_URL_CONFIG",
    "TEST_PETITION_URL_CONFIG",
    "DocumentStoreConfig",
    "MigrationPhase",
    "MigrationPhaseRegistry",
    "PetitionUrlConfig",
    "PhaseCapabilities",
    "UrlShortenerConfig",
]
