"""Application ports - Abstract interfaces for infrastructure adapters.

Available ports:
- DocumentStoreProtocol: Legacy document store (save/delete/query/fetch_page)
- RelationalStoreProtocol: Relational store (save/delete/query)
- PetitionQueryProtocol: Batch lookup by legacy_id/entity_id
- PetitionQueryFactoryProtocol: Builds queries for a selected backend
- UrlShortenerProtocol: Short URLs for public petitions
- DualStoreMetricsProtocol: Operational counters
"""

from src.application.ports.document_store import DocumentStoreProtocol
from src.application.ports.dual_store_metrics import DualStoreMetricsProtocol
from src.application.ports.petition_query import (
    PetitionQueryFactoryProtocol,
    PetitionQueryProtocol,
    PetitionQuerySourceProtocol,
)
from src.application.ports.relational_store import RelationalStoreProtocol
from src.application.ports.url_shortener import UrlShortenerProtocol

__all__: list[str] = [
    "DocumentStoreProtocol",
    "DualStoreMetricsProtocol",
    "PetitionQueryFactoryProtocol",
    "PetitionQueryProtocol",
    "PetitionQuerySourceProtocol",
    "RelationalStoreProtocol",
    "UrlShortenerProtocol",
]
