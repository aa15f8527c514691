"""Unit tests for document translation."""

from datetime import UTC, datetime, timedelta

import pytest

from membership.domain.value_objects import GroupId, UserId
from membership.infrastructure.documents import (
    GROUP_UPDATABLE_FIELDS,
    check_update_fields,
    group_from_document,
    next_updated_at,
    user_from_document,
)
from membership.ports.exceptions import InvalidArgumentError, InvalidDocumentError

NOW = datetime(2024, 1, 1, tzinfo=UTC)


def group_document(**overrides):
    document = {
        "id": "1" * 24,
        "name": "Admins",
        "slug": "admins",
        "users": ["a" * 24],
        "count": 1,
        "created_at": NOW,
        "updated_at": NOW,
        "deleted_at": None,
        "deleted": False,
    }
    document.update(overrides)
    return document


class TestGroupFromDocument:
    """Tests for group_from_document()."""

    def test_builds_group(self):
        group = group_from_document(group_document())

        assert group.id == GroupId("1" * 24)
        assert group.users == [UserId("a" * 24)]
        assert group.count == 1
        assert group.deleted is False

    def test_missing_field(self):
        document = group_document()
        del document["slug"]

        with pytest.raises(InvalidDocumentError, match="slug"):
            group_from_document(document)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"users": "a" * 24},
            {"users": [1]},
            {"count": True},
            {"count": "1"},
            {"created_at": "2024-01-01"},
            {"deleted": 0},
        ],
    )
    def test_wrong_types(self, overrides):
        with pytest.raises(InvalidDocumentError):
            group_from_document(group_document(**overrides))

    def test_rejects_non_mapping(self):
        with pytest.raises(InvalidDocumentError):
            group_from_document(["not", "a", "document"])


class TestUserFromDocument:
    """Tests for user_from_document()."""

    def test_builds_membership(self):
        membership = user_from_document(
            {
                "id": "a" * 24,
                "groups": ["1" * 24, "2" * 24],
                "count": 2,
                "created_at": NOW,
                "updated_at": NOW,
                "deleted_at": NOW,
                "deleted": True,
            }
        )

        assert membership.id == UserId("a" * 24)
        assert membership.group_values() == ["1" * 24, "2" * 24]
        assert membership.deleted_at == NOW

    def test_group_document_is_not_a_membership(self):
        with pytest.raises(InvalidDocumentError, match="groups"):
            user_from_document(group_document())


class TestUpdateHelpers:
    """Tests for update field checks and timestamp bumps."""

    def test_allows_updatable_fields(self):
        check_update_fields({"name": "x", "slug": "x"}, GROUP_UPDATABLE_FIELDS)

    def test_rejects_immutable_fields(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            check_update_fields({"id": "x", "created_at": NOW}, GROUP_UPDATABLE_FIELDS)
        assert exc_info.value.argument == "fields"

    def test_next_updated_at_is_strictly_later(self):
        future = datetime.now(UTC) + timedelta(hours=1)
        assert next_updated_at(future) > future

    def test_next_updated_at_uses_now(self):
        assert next_updated_at(NOW) > NOW
        assert next_updated_at(None) is not None
