"""Application services for the petition dual-store."""

from src.application.services.identity_reconciler import IdentityReconciler
from src.application.services.petition_backfill_service import (
    BackfillReport,
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

__all__: list[str] = [
    "BackfillReport",
    "IdentityReconciler",
    "PetitionBackfillService",
    "PetitionDeleteOrchestrator",
    "PetitionLoadOrchestrator",
    "PetitionQueryFactory",
    "PetitionSaveOrchestrator",
    "PetitionStoreService",
]
