"""Bootstrap wiring for the petition dual-store.

Adapters are chosen from the environment; a backend that is not
configured (or fails to initialize) falls back to its in-memory stub and
the choice is logged.

Environment Variables:
- DATABASE_URL / DATABASE_REPLICA_URL: relational store (SqlPetitionStore)
- MONGO_URL / MONGO_DATABASE / MONGO_PETITION_COLLECTION: document store
- URL_SHORTENER_API_URL / URL_SHORTENER_TOKEN / URL_SHORTENER_TIMEOUT_SECONDS
- PETITION_BASE_URL: base of nice URLs
- PETITION_MIGRATION_PHASE and PETITION_{MONGO,MYSQL}_{READ,WRITE}
"""

from __future__ import annotations

from typing import Optional

from structlog import get_logger

from src.application.ports.document_store import DocumentStoreProtocol
from src.application.ports.dual_store_metrics import DualStoreMetricsProtocol
from src.application.ports.relational_store import RelationalStoreProtocol
from src.application.ports.url_shortener import UrlShortenerProtocol
from src.application.services.identity_reconciler import IdentityReconciler
from src.application.services.petition_backfill_service import (
    PetitionBackfillService,
)
from src.application.services.petition_delete_orchestrator import (
    PetitionDeleteOrchestrator,
)
from src.application.services.petition_load_orchestrator import (
    PetitionLoadOrchestrator,
)
from src.application.services.petition_query_factory import PetitionQueryFactory
from src.application.services.petition_save_orchestrator import (
    PetitionSaveOrchestrator,
)
from src.application.services.petition_store_service import PetitionStoreService
from src.config.migration_phase_config import MigrationPhaseRegistry
from src.config.petition_store_config import (
    DocumentStoreConfig,
    PetitionUrlConfig,
    UrlShortenerConfig,
)
from src.infrastructure.monitoring.metrics import get_dual_store_metrics
from src.infrastructure.stubs.document_store_stub import DocumentStoreStub
from src.infrastructure.stubs.relational_store_stub import RelationalStoreStub
from src.infrastructure.stubs.url_shortener_stub import UrlShortenerStub

logger = get_logger()

_phase_registry: MigrationPhaseRegistry | None = None
_document_store: DocumentStoreProtocol | None = None
_relational_store: RelationalStoreProtocol | None = None
_url_shortener: UrlShortenerProtocol | None = None
_petition_store_service: PetitionStoreService | None = None


def build_petition_store_service(
    phase_registry: MigrationPhaseRegistry,
    document_store: DocumentStoreProtocol,
    relational_store: RelationalStoreProtocol,
    url_shortener: UrlShortenerProtocol,
    url_config: Optional[PetitionUrlConfig] = None,
    metrics: Optional[DualStoreMetricsProtocol] = None,
) -> PetitionStoreService:
    """Compose the facade from its collaborators."""
    reconciler = IdentityReconciler(url_shortener, url_config)
    loader = build_load_orchestrator(
        phase_registry, document_store, relational_store, metrics
    )
    return PetitionStoreService(
        save_orchestrator=PetitionSaveOrchestrator(
            phase_registry, document_store, relational_store, reconciler, metrics
        ),
        load_orchestrator=loader,
        delete_orchestrator=PetitionDeleteOrchestrator(
            phase_registry, loader, document_store, relational_store, metrics
        ),
    )


def build_load_orchestrator(
    phase_registry: MigrationPhaseRegistry,
    document_store: DocumentStoreProtocol,
    relational_store: RelationalStoreProtocol,
    metrics: Optional[DualStoreMetricsProtocol] = None,
) -> PetitionLoadOrchestrator:
    """Compose a load orchestrator over both stores."""
    return PetitionLoadOrchestrator(
        phase_registry,
        PetitionQueryFactory(document_store, relational_store),
        metrics,
    )


def get_phase_registry() -> MigrationPhaseRegistry:
    """Get the environment-backed phase registry."""
    global _phase_registry
    if _phase_registry is None:
        _phase_registry = MigrationPhaseRegistry.from_environment()
        logger.info(
            "migration_phase_registry_initialized",
            capabilities=str(_phase_registry.capabilities()),
        )
    return _phase_registry


def get_document_store() -> DocumentStoreProtocol:
    """Get the document store: MongoDB if MONGO_URL is set, else a stub."""
    global _document_store
    if _document_store is None:
        config = DocumentStoreConfig.from_environment()
        if config.is_configured:
            try:
                from src.infrastructure.adapters.persistence.mongo_petition_store import (
                    MongoPetitionStore,
                )

                _document_store = MongoPetitionStore.from_config(config)
                logger.info(
                    "document_store_initialized",
                    store_type="MongoDB",
                    database=config.database,
                    collection=config.collection,
                )
            except Exception as e:
                logger.error(
                    "mongo_store_init_failed",
                    error=str(e),
                    message="Falling back to in-memory stub",
                )
                _document_store = DocumentStoreStub()
        else:
            logger.warning(
                "document_store_initialized",
                store_type="InMemoryStub",
                message="MONGO_URL not set - using in-memory stub (data will not persist)",
            )
            _document_store = DocumentStoreStub()
    return _document_store


def get_relational_store() -> RelationalStoreProtocol:
    """Get the relational store: SQL if DATABASE_URL is set, else a stub."""
    global _relational_store
    if _relational_store is None:
        from src.bootstrap.database import is_database_configured

        if is_database_configured():
            try:
                from src.bootstrap.database import (
                    get_replica_session_factory,
                    get_session_factory,
                )
                from src.infrastructure.adapters.persistence.sql_petition_store import (
                    SqlPetitionStore,
                )

                replica_factory = get_replica_session_factory()
                _relational_store = SqlPetitionStore(
                    session_factory=get_session_factory(),
                    replica_session_factory=replica_factory,
                )
                logger.info(
                    "relational_store_initialized",
                    store_type="SQL",
                    replica_configured=replica_factory is not None,
                )
            except Exception as e:
                logger.error(
                    "sql_store_init_failed",
                    error=str(e),
                    message="Falling back to in-memory stub",
                )
                _relational_store = RelationalStoreStub()
        else:
            logger.warning(
                "relational_store_initialized",
                store_type="InMemoryStub",
                message="DATABASE_URL not set - using in-memory stub (data will not persist)",
            )
            _relational_store = RelationalStoreStub()
    return _relational_store


def get_url_shortener() -> UrlShortenerProtocol:
    """Get the URL shortener: HTTP if configured, else a stub."""
    global _url_shortener
    if _url_shortener is None:
        config = UrlShortenerConfig.from_environment()
        if config.is_configured:
            from src.infrastructure.adapters.external.url_shortener_client import (
                HttpUrlShortener,
            )

            _url_shortener = HttpUrlShortener(config)
            logger.info("url_shortener_initialized", shortener_type="HTTP")
        else:
            logger.warning(
                "url_shortener_initialized",
                shortener_type="InMemoryStub",
                message="URL_SHORTENER_API_URL not set - short links are not public",
            )
            _url_shortener = UrlShortenerStub()
    return _url_shortener


def get_petition_store_service() -> PetitionStoreService:
    """Get the caller-facing petition store service."""
    global _petition_store_service
    if _petition_store_service is None:
        _petition_store_service = build_petition_store_service(
            phase_registry=get_phase_registry(),
            document_store=get_document_store(),
            relational_store=get_relational_store(),
            url_shortener=get_url_shortener(),
            url_config=PetitionUrlConfig.from_environment(),
            metrics=get_dual_store_metrics(),
        )
    return _petition_store_service


def get_backfill_service() -> PetitionBackfillService:
    """Get a backfill service over the configured stores."""
    metrics = get_dual_store_metrics()
    document_store = get_document_store()
    relational_store = get_relational_store()
    return PetitionBackfillService(
        document_store=document_store,
        relational_store=relational_store,
        loader=build_load_orchestrator(
            get_phase_registry(), document_store, relational_store, metrics
        ),
        reconciler=IdentityReconciler(
            get_url_shortener(), PetitionUrlConfig.from_environment()
        ),
    )


def reset_petition_store_bootstrap() -> None:
    """Reset petition store singletons for testing."""
    global _phase_registry, _document_store, _relational_store
    global _url_shortener, _petition_store_service
    _phase_registry = None
    _document_store = None
    _relational_store = None
    _url_shortener = None
    _petition_store_service = None
