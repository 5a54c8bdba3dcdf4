"""Infrastructure stubs for development and testing.

Available stubs:
- DocumentStoreStub: In-memory petition collection with a freezable replica view
- RelationalStoreStub: In-memory petitions table with auto-increment entity ids
- UrlShortenerStub: Deterministic short links
- PetitionQueryStub: In-memory query shared by the store stubs

WARNING: These stubs are NOT for production use.
Production implementations are in src/infrastructure/adapters/.
"""

from src.infrastructure.stubs.document_store_stub import DocumentStoreStub
from src.infrastructure.stubs.petition_query_stub import PetitionQueryStub, QueryCall
from src.infrastructure.stubs.relational_store_stub import RelationalStoreStub
from src.infrastructure.stubs.url_shortener_stub import UrlShortenerStub

__all__: list[str] = [
    "DocumentStoreStub",
    "PetitionQueryStub",
    "QueryCall",
    "RelationalStoreStub",
    "UrlShortenerStub",
]
