"""Unit tests for the PetitionItem domain model.

Tests cover:
- Record shapes (document, relational, flat)
- Identity and URL fields overriding payload keys
- Identifier partitioning and matching
"""

from __future__ import annotations

import pytest

from src.domain.models.petition_item import (
    ENTITY_ID_FIELD,
    LEGACY_ID_FIELD,
    PetitionItem,
    PetitionItemStatus,
    flatten_relational_record,
    matches_identifier,
    partition_identifiers,
)


def _published(**overrides: object) -> PetitionItem:
    fields: dict = {
        "status": PetitionItemStatus.PUBLISHED,
        "payload": {"title": "Save the Park", "body": "Keep it green"},
    }
    fields.update(overrides)
    return PetitionItem(**fields)


class TestPetitionItemBasics:
    """Tests for simple properties."""

    def test_new_petition_is_a_draft_without_identifiers(self) -> None:
        petition = PetitionItem()
        assert petition.is_draft is True
        assert petition.identifiers() == []

    def test_title_comes_from_payload(self) -> None:
        assert _published().title == "Save the Park"
        assert PetitionItem().title is None

    def test_identifiers_lists_known_ids(self) -> None:
        petition = _published(legacy_id="abc", entity_id=7)
        assert petition.identifiers() == ["abc", 7]

    def test_apply_nice_url_mirrors_path(self) -> None:
        petition = _published()
        petition.apply_nice_url("https://p.test/petition/x/1", "petition/x/1")
        assert petition.nice_url == "https://p.test/petition/x/1"
        assert petition.legacy_path == "petition/x/1"

    def test_derived_fields(self) -> None:
        petition = _published(nice_url="n", short_url="s", legacy_path="p")
        assert petition.derived_fields() == ("n", "s", "p")


class TestToDocument:
    """Tests for the flat document representation."""

    def test_payload_is_flattened(self) -> None:
        document = _published(legacy_id="abc").to_document()
        assert document["title"] == "Save the Park"
        assert document[LEGACY_ID_FIELD] == "abc"
        assert document["status"] == "published"

    def test_identity_fields_override_payload(self) -> None:
        petition = _published(payload={"title": "T", "status": "bogus", "short_url": "x"})
        document = petition.to_document()
        assert document["status"] == "published"
        assert document["short_url"] is None

    def test_document_is_a_copy(self) -> None:
        petition = _published()
        petition.to_document()["title"] = "Changed"
        assert petition.payload["title"] == "Save the Park"


class TestToRelationalRecord:
    """Tests for the relational representation."""

    def test_embeds_legacy_id(self) -> None:
        record = _published(legacy_id="abc").to_relational_record()
        assert record[LEGACY_ID_FIELD] == "abc"
        assert record[ENTITY_ID_FIELD] is None

    def test_payload_is_nested(self) -> None:
        record = _published().to_relational_record()
        assert record["payload"] == {"title": "Save the Park", "body": "Keep it green"}
        assert "title" not in record


class TestFromRecord:
    """Tests for hydration."""

    def test_round_trip_through_document(self) -> None:
        petition = _published(legacy_id="abc", entity_id=3, nice_url="n", short_url="s")
        assert PetitionItem.from_record(petition.to_document()) == petition

    def test_round_trip_through_relational_record(self) -> None:
        petition = _published(legacy_id="abc", entity_id=3, legacy_path="p")
        flat = flatten_relational_record(petition.to_relational_record())
        assert PetitionItem.from_record(flat) == petition

    def test_missing_status_defaults_to_draft(self) -> None:
        petition = PetitionItem.from_record({LEGACY_ID_FIELD: "abc"})
        assert petition.status == PetitionItemStatus.DRAFT

    def test_partial_record_leaves_entity_id_unset(self) -> None:
        """A document written before dual writes carries no entity_id."""
        petition = PetitionItem.from_record({LEGACY_ID_FIELD: "abc", "status": "published"})
        assert petition.entity_id is None
        assert petition.legacy_id == "abc"

    def test_numeric_strings_are_coerced(self) -> None:
        petition = PetitionItem.from_record({ENTITY_ID_FIELD: "12", "status": "archived"})
        assert petition.entity_id == 12

    def test_unrecognised_status_is_kept_verbatim(self) -> None:
        """Older clients wrote statuses this layer does not define."""
        petition = PetitionItem.from_record({LEGACY_ID_FIELD: "abc", "status": "closed"})

        assert petition.status.value == "closed"
        assert petition.status == "closed"
        assert petition.is_draft is False
        assert petition.to_document()["status"] == "closed"
        assert petition.to_relational_record()["status"] == "closed"

    def test_non_string_status_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            PetitionItem.from_record({LEGACY_ID_FIELD: "abc", "status": 7})


class TestPartitionIdentifiers:
    """Tests for partition_identifiers()."""

    def test_splits_and_dedupes(self) -> None:
        legacy_ids, entity_ids = partition_identifiers(["a", 1, "b", "a", 1, 2])
        assert legacy_ids == ["a", "b"]
        assert entity_ids == [1, 2]

    def test_accepts_sets(self) -> None:
        legacy_ids, entity_ids = partition_identifiers({"a", "b"})
        assert sorted(legacy_ids) == ["a", "b"]
        assert entity_ids == []

    @pytest.mark.parametrize("bad", [True, 1.5, None, b"a"])
    def test_rejects_other_types(self, bad: object) -> None:
        with pytest.raises(TypeError):
            partition_identifiers([bad])  # type: ignore[list-item]


class TestMatchesIdentifier:
    """Tests for matches_identifier()."""

    def test_int_matches_entity_id(self) -> None:
        record = {LEGACY_ID_FIELD: "abc", ENTITY_ID_FIELD: 5}
        assert matches_identifier(record, 5) is True
        assert matches_identifier(record, 6) is False

    def test_str_matches_legacy_id(self) -> None:
        record = {LEGACY_ID_FIELD: "abc", ENTITY_ID_FIELD: 5}
        assert matches_identifier(record, "abc") is True
        assert matches_identifier(record, "5") is False
