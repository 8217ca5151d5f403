"""Tests for the publish gate."""

import pytest

from marketplace.domain.collection import Collection
from marketplace.domain.exceptions import PublishBlockedError
from marketplace.domain.publication import PublicationState, check_publishable
from marketplace.domain.value_objects import CollectionType

TAG_SUMMER = {"type": "tag", "operator": "contains", "value": "summer"}


class TestCheckPublishable:
    """Tests for check_publishable."""

    def test_empty_manual_blocked(self) -> None:
        with pytest.raises(PublishBlockedError) as exc_info:
            check_publishable("c1", CollectionType.MANUAL, [], [])
        assert exc_info.value.error_code == "PUBLISH_BLOCKED"
        assert exc_info.value.details["collection_type"] == "manual"

    def test_empty_smart_blocked(self) -> None:
        with pytest.raises(PublishBlockedError):
            check_publishable("c1", CollectionType.SMART, ["p1"], [])

    def test_manual_with_member_passes(self) -> None:
        check_publishable("c1", CollectionType.MANUAL, ["p1"], [])


class TestPublishTransitions:
    """Tests for draft/published transitions on the aggregate."""

    def test_publish_empty_manual_rejected(self) -> None:
        """Publishing an empty manual collection fails and changes nothing."""
        collection = Collection.create("seller-1", {"name": "Empty", "type": "manual"})
        with pytest.raises(PublishBlockedError):
            collection.apply_changes({"is_draft": False, "name": "Renamed"})
        assert collection.is_draft is True
        assert collection.name == "Empty"

    def test_publish_smart_with_rules(self) -> None:
        collection = Collection.create(
            "seller-1", {"name": "Summer", "type": "smart", "rules": [TAG_SUMMER]}
        )
        collection.collect_events()

        collection.apply_changes({"is_draft": False})

        assert collection.publication_state == PublicationState.PUBLISHED
        assert collection.published_at is not None
        event_types = [e.event_type for e in collection.collect_events()]
        assert "collection.published" in event_types

    def test_publish_checks_result_of_same_update(self) -> None:
        """Members supplied alongside the publish flag count."""
        collection = Collection.create("seller-1", {"name": "Picks", "type": "manual"})
        collection.apply_changes({"is_draft": False, "manual_members": ["p1"]})
        assert collection.is_draft is False

    def test_published_at_stamped_once(self) -> None:
        collection = Collection.create(
            "seller-1", {"name": "Picks", "type": "manual", "manual_members": ["p1"]}
        )
        collection.apply_changes({"is_draft": False})
        first = collection.published_at

        collection.apply_changes({"is_draft": True})
        collection.apply_changes({"is_draft": False})

        assert collection.published_at == first

    def test_unpublish_never_guarded(self) -> None:
        """Unpublishing succeeds even when the collection is empty."""
        collection = Collection.create(
            "seller-1", {"name": "Picks", "type": "manual", "manual_members": ["p1"]}
        )
        collection.apply_changes({"is_draft": False})
        collection.apply_changes({"is_draft": True, "manual_members": []})
        assert collection.is_draft is True
        assert collection.manual_members == []

    def test_reconfirming_published_is_guarded(self) -> None:
        """Emptying a published collection while keeping it published fails."""
        collection = Collection.create(
            "seller-1", {"name": "Picks", "type": "manual", "manual_members": ["p1"]}
        )
        collection.apply_changes({"is_draft": False})
        with pytest.raises(PublishBlockedError):
            collection.apply_changes({"is_draft": False, "manual_members": []})
        assert collection.manual_members == ["p1"]

    def test_create_published_requires_content(self) -> None:
        with pytest.raises(PublishBlockedError):
            Collection.create("seller-1", {"name": "Summer", "type": "smart", "is_draft": False})

    def test_create_published(self) -> None:
        collection = Collection.create(
            "seller-1",
            {"name": "Summer", "type": "smart", "rules": [TAG_SUMMER], "is_draft": False},
        )
        assert collection.is_draft is False
        assert collection.published_at is not None
