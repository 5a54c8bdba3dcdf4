"""Infrastructure adapters for the petition dual-store.

Adapters implement the ports defined in the application layer:
- persistence.MongoPetitionStore: DocumentStoreProtocol (pymongo)
- persistence.SqlPetitionStore: RelationalStoreProtocol (SQLAlchemy)
- external.HttpUrlShortener: UrlShortenerProtocol (httpx)
"""

__all__: list[str] = []
