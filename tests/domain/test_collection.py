"""Tests for the collection aggregate and membership invariant."""

import pytest

from marketplace.domain.collection import Collection, apply_collection_fields, slugify
from marketplace.domain.conditions import Condition
from marketplace.domain.exceptions import (
    CollectionTypeMismatchError,
    CollectionValidationError,
    MembershipOrderError,
)
from marketplace.domain.value_objects import CollectionType, SortOrder

TAG_SUMMER = {"type": "tag", "operator": "contains", "value": "summer"}


@pytest.fixture
def manual_collection() -> Collection:
    """Draft manual collection with two members."""
    return Collection.create(
        "seller-1",
        {"name": "Picks", "type": "manual", "manual_members": ["p1", "p2"]},
    )


@pytest.fixture
def smart_collection() -> Collection:
    """Draft smart collection with one rule."""
    return Collection.create(
        "seller-1",
        {"name": "Summer", "type": "smart", "rules": [TAG_SUMMER]},
    )


class TestSlugify:
    """Tests for slug derivation."""

    def test_basic(self) -> None:
        assert slugify("Summer Sale") == "summer-sale"

    def test_punctuation_and_runs(self) -> None:
        assert slugify("  Summer  Sale -- 2024! ") == "summer-sale-2024"

    def test_underscores_collapse(self) -> None:
        assert slugify("new_in__stock") == "new-in-stock"


class TestCreate:
    """Tests for Collection.create."""

    def test_defaults(self, manual_collection: Collection) -> None:
        """New collections are active drafts with default metadata."""
        assert manual_collection.is_draft is True
        assert manual_collection.is_active is True
        assert manual_collection.sort_order == SortOrder.MANUAL
        assert manual_collection.visibility.storefront is True
        assert manual_collection.published_at is None
        assert manual_collection.slug == "picks"

    def test_supplied_slug_kept(self) -> None:
        collection = Collection.create(
            "seller-1", {"name": "Picks", "type": "manual", "slug": "my-picks"}
        )
        assert collection.slug == "my-picks"

    def test_name_required(self) -> None:
        with pytest.raises(CollectionValidationError) as exc_info:
            Collection.create("seller-1", {"type": "manual"})
        assert exc_info.value.details["field"] == "name"

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(CollectionValidationError):
            Collection.create("seller-1", {"name": "   ", "type": "manual"})

    def test_type_required(self) -> None:
        with pytest.raises(CollectionValidationError) as exc_info:
            Collection.create("seller-1", {"name": "Picks"})
        assert exc_info.value.details["field"] == "type"

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(CollectionValidationError):
            Collection.create("seller-1", {"name": "Picks", "type": "curated"})

    def test_manual_drops_supplied_rules(self) -> None:
        """A manual collection never stores rules."""
        collection = Collection.create(
            "seller-1",
            {"name": "Picks", "type": "manual", "manual_members": ["p1"], "rules": [TAG_SUMMER]},
        )
        assert collection.manual_members == ["p1"]
        assert collection.rules == []

    def test_smart_drops_supplied_members(self) -> None:
        """A smart collection never stores a member list."""
        collection = Collection.create(
            "seller-1",
            {"name": "Summer", "type": "smart", "manual_members": ["p1"], "rules": [TAG_SUMMER]},
        )
        assert collection.manual_members == []
        assert collection.rules == [Condition.from_dict(TAG_SUMMER)]

    def test_duplicate_members_collapsed(self) -> None:
        collection = Collection.create(
            "seller-1",
            {"name": "Picks", "type": "manual", "manual_members": ["p1", "p2", "p1"]},
        )
        assert collection.manual_members == ["p1", "p2"]

    def test_records_created_event(self, manual_collection: Collection) -> None:
        events = manual_collection.collect_events()
        assert [e.event_type for e in events] == ["collection.created"]
        assert manual_collection.collect_events() == []


class TestInvariantOnUpdate:
    """Tests for re-applying the membership invariant on update."""

    def test_switch_manual_to_smart_clears_members(self, manual_collection: Collection) -> None:
        manual_collection.apply_changes({"type": "smart", "rules": [TAG_SUMMER]})
        assert manual_collection.type == CollectionType.SMART
        assert manual_collection.manual_members == []
        assert len(manual_collection.rules) == 1

    def test_switch_smart_to_manual_clears_rules(self, smart_collection: Collection) -> None:
        smart_collection.apply_changes({"type": "manual"})
        assert smart_collection.type == CollectionType.MANUAL
        assert smart_collection.rules == []
        assert smart_collection.manual_members == []

    def test_switch_without_new_list_starts_empty(self, manual_collection: Collection) -> None:
        """Members are not carried across a type change."""
        manual_collection.apply_changes({"type": "smart"})
        assert manual_collection.rules == []
        assert manual_collection.manual_members == []

    def test_inactive_side_ignored_without_type(self, manual_collection: Collection) -> None:
        """Rules sent to a manual collection are dropped silently."""
        manual_collection.apply_changes({"rules": [TAG_SUMMER]})
        assert manual_collection.rules == []
        assert manual_collection.manual_members == ["p1", "p2"]

    def test_untouched_fields_kept(self, smart_collection: Collection) -> None:
        smart_collection.apply_changes({"description": "Hot weather picks"})
        assert smart_collection.name == "Summer"
        assert smart_collection.description == "Hot weather picks"
        assert smart_collection.rules == [Condition.from_dict(TAG_SUMMER)]

    def test_returns_changed_fields(self, smart_collection: Collection) -> None:
        changed = smart_collection.apply_changes({"name": "Summer 2026", "is_featured": True})
        assert set(changed) == {"name", "is_featured"}

    def test_no_change_no_event(self, smart_collection: Collection) -> None:
        smart_collection.collect_events()
        changed = smart_collection.apply_changes({"name": "Summer"})
        assert changed == []
        assert smart_collection.collect_events() == []

    def test_invalid_sort_order(self, smart_collection: Collection) -> None:
        with pytest.raises(CollectionValidationError):
            smart_collection.apply_changes({"sort_order": "random"})

    def test_enforcer_requires_type_on_create(self) -> None:
        with pytest.raises(CollectionValidationError):
            apply_collection_fields(None, {"name": "x"})

    def test_enforcer_keeps_existing_type(self, smart_collection: Collection) -> None:
        fields = apply_collection_fields(smart_collection, {"manual_members": ["p9"]})
        assert fields["type"] == CollectionType.SMART
        assert fields["manual_members"] == []
        assert fields["rules"] == smart_collection.rules


class TestManualMembership:
    """Tests for the manual membership editor."""

    def test_add_appends(self, manual_collection: Collection) -> None:
        assert manual_collection.add_member("p3") is True
        assert manual_collection.manual_members == ["p1", "p2", "p3"]

    def test_add_is_idempotent(self, manual_collection: Collection) -> None:
        assert manual_collection.add_member("p1") is False
        assert manual_collection.manual_members == ["p1", "p2"]

    def test_remove(self, manual_collection: Collection) -> None:
        assert manual_collection.remove_member("p1") is True
        assert manual_collection.manual_members == ["p2"]

    def test_remove_absent_is_noop(self, manual_collection: Collection) -> None:
        assert manual_collection.remove_member("p9") is False
        assert manual_collection.manual_members == ["p1", "p2"]

    def test_reorder(self, manual_collection: Collection) -> None:
        manual_collection.reorder_members(["p2", "p1"])
        assert manual_collection.manual_members == ["p2", "p1"]

    def test_reorder_must_be_permutation(self, manual_collection: Collection) -> None:
        with pytest.raises(MembershipOrderError) as exc_info:
            manual_collection.reorder_members(["p2", "p3"])
        assert exc_info.value.details["missing"] == ["p1"]
        assert exc_info.value.details["unexpected"] == ["p3"]
        assert manual_collection.manual_members == ["p1", "p2"]

    def test_reorder_rejects_duplicates(self, manual_collection: Collection) -> None:
        with pytest.raises(MembershipOrderError) as exc_info:
            manual_collection.reorder_members(["p1", "p2", "p1"])
        assert exc_info.value.details["duplicates"] == ["p1"]

    @pytest.mark.parametrize("operation", ["add_member", "remove_member"])
    def test_smart_rejects_member_edits(self, smart_collection: Collection, operation: str) -> None:
        with pytest.raises(CollectionTypeMismatchError):
            getattr(smart_collection, operation)("p1")

    def test_smart_rejects_reorder(self, smart_collection: Collection) -> None:
        with pytest.raises(CollectionTypeMismatchError):
            smart_collection.reorder_members([])


class TestReplaceRules:
    """Tests for the rule set editor."""

    def test_replace(self, smart_collection: Collection) -> None:
        smart_collection.replace_rules([{"type": "stock", "operator": "in_stock"}])
        assert smart_collection.rules == [Condition(type="stock", operator="in_stock")]

    def test_manual_rejected(self, manual_collection: Collection) -> None:
        with pytest.raises(CollectionTypeMismatchError) as exc_info:
            manual_collection.replace_rules([TAG_SUMMER])
        assert exc_info.value.error_code == "COLLECTION_TYPE_MISMATCH"
