"""
Petition Dual-Store - phased consistency controller for petition storage.

Keeps a petition readable and writable while its authoritative storage is
migrated, live, from a document store (MongoDB) to a relational store.

Operating Rules:
- The migration phase is read fresh on every call
- The document-store write completes before the relational write begins
- Identifier conflicts are always fatal
- Non-authoritative backend failures become typed warnings, never silent
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
