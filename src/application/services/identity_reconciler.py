"""Identity reconciler for petitions stored in two backends.

This module derives and validates the two identifiers a petition carries
during migration and computes the URLs that depend on them:
- legacy_id: minted by the document store
- entity_id: minted by the relational store
- nice_url / legacy_path: canonical URL built from whichever id is known
- short_url: obtained from the URL-shortening collaborator

Developer Golden Rules:
1. IMMUTABLE IDS - An identifier, once set, never changes
2. FAIL LOUD ON CONFLICT - A different incoming id raises IdentityConflictError
3. SHORT URLS ARE OPTIONAL - Shortener failures raise ShortUrlUnavailableError,
   which orchestrators downgrade to warnings
"""

from __future__ import annotations

import re
from typing import Any

import structlog

from src.application.ports.url_shortener import UrlShortenerProtocol
from src.config.petition_store_config import PetitionUrlConfig
from src.domain.errors.petition_store import (
    IdentityConflictError,
    MissingIdentityError,
    ShortUrlUnavailableError,
)
from src.domain.models.petition_item import (
    ENTITY_ID_FIELD,
    LEGACY_ID_FIELD,
    PetitionItem,
)

log = structlog.get_logger()

PETITION_PATH_PREFIX = "petition"
MAX_SLUG_LENGTH = 60

_SLUG_INVALID = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Turn a title into a URL slug.

    Args:
        text: Free-form title.

    Returns:
        Lowercase ASCII slug, possibly empty.
    """
    slug = _SLUG_INVALID.sub("-", text.lower()).strip("-")
    return slug[:MAX_SLUG_LENGTH].rstrip("-")


class IdentityReconciler:
    """Assigns identifiers and computes derived URLs for a petition.

    The reconciler holds no state besides its collaborators; it mutates the
    petition only through the ``assign_*`` methods.
    """

    def __init__(
        self,
        url_shortener: UrlShortenerProtocol,
        url_config: PetitionUrlConfig | None = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            url_shortener: Collaborator used for short URLs.
            url_config: Base URL configuration (defaults to PetitionUrlConfig()).
        """
        self._url_shortener = url_shortener
        self._url_config = url_config or PetitionUrlConfig()

    def assign_legacy_identity(self, petition: PetitionItem, raw_legacy_id: Any) -> None:
        """Set legacy_id if unset; verify it otherwise.

        Args:
            petition: The petition to update in place.
            raw_legacy_id: Identifier returned by the document store.

        Raises:
            MissingIdentityError: If the raw identifier is empty.
            IdentityConflictError: If a different legacy_id is already set.
        """
        if raw_legacy_id is None or str(raw_legacy_id) == "":
            raise MissingIdentityError(
                LEGACY_ID_FIELD, "Document store returned an empty legacy_id"
            )
        legacy_id = str(raw_legacy_id)
        if petition.legacy_id is None:
            petition.legacy_id = legacy_id
            return
        if petition.legacy_id != legacy_id:
            log.error(
                "legacy_identity_conflict",
                existing=petition.legacy_id,
                incoming=legacy_id,
            )
            raise IdentityConflictError(LEGACY_ID_FIELD, petition.legacy_id, legacy_id)

    def assign_entity_identity(self, petition: PetitionItem, raw_entity_id: Any) -> None:
        """Set entity_id if unset; verify it otherwise.

        Args:
            petition: The petition to update in place.
            raw_entity_id: Identifier returned by the relational store.

        Raises:
            MissingIdentityError: If the raw identifier is empty or not numeric.
            IdentityConflictError: If a different entity_id is already set.
        """
        if raw_entity_id is None or isinstance(raw_entity_id, bool):
            raise MissingIdentityError(
                ENTITY_ID_FIELD, "Relational store returned an empty entity_id"
            )
        try:
            entity_id = int(raw_entity_id)
        except (TypeError, ValueError) as exc:
            raise MissingIdentityError(
                ENTITY_ID_FIELD,
                f"Relational store returned a non-numeric entity_id: {raw_entity_id!r}",
            ) from exc
        if petition.entity_id is None:
            petition.entity_id = entity_id
            return
        if petition.entity_id != entity_id:
            log.error(
                "entity_identity_conflict",
                existing=petition.entity_id,
                incoming=entity_id,
            )
            raise IdentityConflictError(ENTITY_ID_FIELD, petition.entity_id, entity_id)

    def build_path(self, petition: PetitionItem, identifier: str | int) -> str:
        """Build the site-relative path for a petition.

        Args:
            petition: The petition (its title feeds the slug).
            identifier: The identifier that ends the path.

        Returns:
            "petition/{slug}/{identifier}" or "petition/{identifier}".
        """
        slug = slugify(petition.title or "")
        if slug:
            return f"{PETITION_PATH_PREFIX}/{slug}/{identifier}"
        return f"{PETITION_PATH_PREFIX}/{identifier}"

    def compute_nice_url_from_legacy(self, petition: PetitionItem) -> str:
        """Build the canonical URL from the legacy identifier.

        Raises:
            MissingIdentityError: If legacy_id is unset.
        """
        if petition.legacy_id is None:
            raise MissingIdentityError(LEGACY_ID_FIELD)
        return f"{self._url_config.base_url}/{self.build_path(petition, petition.legacy_id)}"

    def compute_nice_url_from_entity(self, petition: PetitionItem) -> str:
        """Build the canonical URL from the entity identifier.

        Raises:
            MissingIdentityError: If entity_id is unset.
        """
        if petition.entity_id is None:
            raise MissingIdentityError(ENTITY_ID_FIELD)
        return f"{self._url_config.base_url}/{self.build_path(petition, petition.entity_id)}"

    def path_of(self, nice_url: str) -> str:
        """Return the site-relative path of a nice URL."""
        prefix = f"{self._url_config.base_url}/"
        if nice_url.startswith(prefix):
            return nice_url[len(prefix) :]
        return nice_url

    async def compute_short_url(self, petition: PetitionItem) -> str:
        """Shorten the petition's current nice URL.

        Only called by orchestrators for non-draft petitions.

        Args:
            petition: Petition with nice_url set.

        Returns:
            The short URL.

        Raises:
            ShortUrlUnavailableError: If nice_url is unset or the shortener fails.
        """
        if not petition.nice_url:
            raise ShortUrlUnavailableError("", "petition has no nice_url")
        try:
            short_url = await self._url_shortener.shorten(petition.nice_url)
        except Exception as exc:
            raise ShortUrlUnavailableError(petition.nice_url, str(exc)) from exc
        if not short_url:
            raise ShortUrlUnavailableError(petition.nice_url, "empty response")
        return short_url
