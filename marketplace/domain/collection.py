"""Collection aggregate and membership invariant enforcement.

A collection is either *manual* (an explicit, ordered list of product
ids) or *smart* (a rule set evaluated against the live catalog). The two
representations never coexist: whenever fields are written, the side
that does not match the effective type is forced empty.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from marketplace.domain.base import AggregateRoot, utcnow
from marketplace.domain.conditions import Condition, parse_conditions
from marketplace.domain.events import (
    CollectionCreated,
    CollectionMemberAdded,
    CollectionMemberRemoved,
    CollectionMembersReordered,
    CollectionPublished,
    CollectionRulesReplaced,
    CollectionUnpublished,
    CollectionUpdated,
)
from marketplace.domain.exceptions import (
    CollectionTypeMismatchError,
    CollectionValidationError,
    MembershipOrderError,
)
from marketplace.domain.publication import PublicationState, check_publishable
from marketplace.domain.value_objects import (
    CollectionType,
    Placement,
    SortOrder,
    Visibility,
    parse_enum,
)

# Descriptive fields copied through after normalisation. Membership
# (manual_members / rules) and type are handled by the invariant.
_BOOLEAN_FIELDS = (
    "is_active",
    "is_featured",
    "is_draft",
    "is_trending",
    "is_seasonal",
    "is_sale",
)
_OPTIONAL_TEXT_FIELDS = (
    "slug",
    "description",
    "image_url",
    "cover_image_url",
    "seo_title",
    "seo_description",
)
_DATETIME_FIELDS = ("published_at", "scheduled_publish_at")


def slugify(text: str) -> str:
    """Derive a URL slug from a collection name.

    Example:
        >>> slugify("  Summer Sale -- 2024! ")
        'summer-sale-2024'
    """
    slug = text.lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")


# ============================================================================
# Invariant Enforcer
# ============================================================================


def apply_collection_fields(
    existing: "Collection | None",
    incoming: Mapping[str, Any],
    declared_type: CollectionType | str | None = None,
) -> dict[str, Any]:
    """Compute the fields to persist for a create or partial update.

    Only keys present in ``incoming`` change; everything else keeps the
    existing value. The membership invariant is then re-applied: the
    representation matching the effective type adopts the incoming value
    (or keeps the stored one), the other is forced empty.

    Args:
        existing: Stored collection, or ``None`` when creating.
        incoming: Field values explicitly supplied by the caller.
        declared_type: Type supplied by the caller, if any.

    Returns:
        Normalised field values including ``type``, ``manual_members``
        and ``rules``.

    Raises:
        CollectionValidationError: If a field is missing or malformed.
        ConditionShapeError: If a rule entry is not condition-shaped.
    """
    if declared_type is not None:
        effective_type = parse_enum(CollectionType, declared_type, "type")
    elif existing is not None:
        effective_type = existing.type
    else:
        raise CollectionValidationError("type", "is required")

    fields: dict[str, Any] = {"type": effective_type}

    if "name" in incoming or existing is None:
        fields["name"] = _clean_name(incoming.get("name"))

    for key in _BOOLEAN_FIELDS:
        if key in incoming and incoming[key] is not None:
            fields[key] = bool(incoming[key])

    for key in _OPTIONAL_TEXT_FIELDS:
        if key in incoming:
            value = incoming[key]
            if isinstance(value, str):
                value = value.strip() or None
            fields[key] = value

    for key in _DATETIME_FIELDS:
        if key in incoming:
            value = incoming[key]
            if value is not None and not isinstance(value, datetime):
                raise CollectionValidationError(key, "must be a datetime")
            fields[key] = value

    if incoming.get("sort_order") is not None:
        fields["sort_order"] = parse_enum(SortOrder, incoming["sort_order"], "sort_order")

    if "visibility" in incoming:
        fields["visibility"] = Visibility.from_dict(_as_mapping(incoming["visibility"]))

    if "placement" in incoming:
        raw = incoming["placement"]
        fields["placement"] = None if raw is None else Placement.from_dict(_as_mapping(raw))

    if incoming.get("placement_priority") is not None:
        try:
            fields["placement_priority"] = int(incoming["placement_priority"])
        except (TypeError, ValueError):
            raise CollectionValidationError("placement_priority", "must be an integer") from None

    # Membership invariant
    if effective_type == CollectionType.MANUAL:
        if "manual_members" in incoming:
            fields["manual_members"] = _clean_members(incoming["manual_members"])
        elif existing is not None and existing.type == CollectionType.MANUAL:
            fields["manual_members"] = list(existing.manual_members)
        else:
            fields["manual_members"] = []
        fields["rules"] = []
    else:
        if "rules" in incoming:
            fields["rules"] = parse_conditions(incoming["rules"])
        elif existing is not None and existing.type == CollectionType.SMART:
            fields["rules"] = list(existing.rules)
        else:
            fields["rules"] = []
        fields["manual_members"] = []

    return fields


def _clean_name(raw: Any) -> str:
    if not isinstance(raw, str) or not raw.strip():
        raise CollectionValidationError("name", "is required")
    return raw.strip()


def _clean_members(raw: Any) -> list[str]:
    if raw is None:
        return []
    if isinstance(raw, str) or not isinstance(raw, Iterable):
        raise CollectionValidationError("manual_members", "must be a list of product ids")
    members: list[str] = []
    for product_id in raw:
        if not isinstance(product_id, str) or not product_id:
            raise CollectionValidationError("manual_members", "must be a list of product ids")
        if product_id not in members:
            members.append(product_id)
    return members


def _as_mapping(raw: Any) -> Mapping[str, Any]:
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise CollectionValidationError("visibility/placement", "must be an object")
    return raw


# ============================================================================
# Collection Aggregate Root
# ============================================================================


@dataclass(kw_only=True, eq=False)
class Collection(AggregateRoot):
    """Seller-owned product collection.

    ``product_count`` is not stored: it is always computed at
    read time by the resolution service.

    Attributes:
        owner_id: Seller that owns the collection (immutable).
        name: Display name.
        type: Manual or smart.
        manual_members: Ordered product ids (manual collections only).
        rules: Ordered conditions, AND-combined (smart collections only).
        sort_order: Advisory storefront display order.
        is_draft: Whether the collection is unpublished.
    """

    owner_id: str
    name: str
    type: CollectionType
    slug: str | None = None
    description: str | None = None
    image_url: str | None = None
    cover_image_url: str | None = None
    manual_members: list[str] = field(default_factory=list)
    rules: list[Condition] = field(default_factory=list)
    sort_order: SortOrder = SortOrder.MANUAL
    visibility: Visibility = field(default_factory=Visibility)
    is_active: bool = True
    is_featured: bool = False
    is_draft: bool = True
    is_trending: bool = False
    is_seasonal: bool = False
    is_sale: bool = False
    seo_title: str | None = None
    seo_description: str | None = None
    placement: Placement | None = None
    placement_priority: int = 0
    published_at: datetime | None = None
    scheduled_publish_at: datetime | None = None

    @property
    def publication_state(self) -> PublicationState:
        """Current publication state."""
        return PublicationState.from_draft_flag(self.is_draft)

    @classmethod
    def create(
        cls,
        owner_id: str,
        incoming: Mapping[str, Any],
        collection_id: str | None = None,
    ) -> "Collection":
        """Create a new collection.

        The collection starts as a draft unless ``is_draft`` is explicitly
        supplied; publishing on creation goes through the publish gate.

        Args:
            owner_id: Owning seller.
            incoming: Supplied fields, including the required ``name`` and ``type``.
            collection_id: Optional pre-generated ID.

        Returns:
            New Collection instance.

        Raises:
            CollectionValidationError: If name or type is missing.
            PublishBlockedError: If created published without content.
        """
        collection_id = collection_id or str(uuid4())
        fields = apply_collection_fields(None, incoming, incoming.get("type"))
        fields.setdefault("is_draft", True)
        if not fields.get("slug"):
            fields["slug"] = slugify(fields["name"]) or None

        if not fields["is_draft"]:
            check_publishable(
                collection_id,
                fields["type"],
                fields["manual_members"],
                fields["rules"],
            )
            fields["published_at"] = fields.get("published_at") or utcnow()

        collection = cls(id=collection_id, owner_id=owner_id, **fields)
        collection._record_event(
            CollectionCreated(
                aggregate_id=collection.id,
                owner_id=owner_id,
                collection_type=collection.type.value,
                is_draft=collection.is_draft,
            )
        )
        if not collection.is_draft:
            collection._record_event(
                CollectionPublished(
                    aggregate_id=collection.id,
                    collection_type=collection.type.value,
                )
            )
        return collection

    def apply_changes(self, incoming: Mapping[str, Any]) -> list[str]:
        """Apply a partial update.

        Publishing (``is_draft`` explicitly false, including re-confirming an
        already published collection) is checked against the publish gate
        before anything is written. Unpublishing is never guarded.

        Args:
            incoming: Fields explicitly supplied by the caller; ``type`` may
                re-declare the collection type.

        Returns:
            Names of fields whose value changed.

        Raises:
            CollectionValidationError: If a supplied field is malformed.
            PublishBlockedError: If the publish gate rejects the result.
        """
        fields = apply_collection_fields(self, incoming, incoming.get("type"))
        was_draft = self.is_draft

        if incoming.get("is_draft") is False:
            check_publishable(
                self.id,
                fields["type"],
                fields["manual_members"],
                fields["rules"],
            )

        type_changed = fields["type"] != self.type
        changed = [name for name, value in fields.items() if getattr(self, name) != value]
        for name in changed:
            setattr(self, name, fields[name])

        if was_draft and not self.is_draft:
            if self.published_at is None:
                self.published_at = utcnow()
                changed.append("published_at")
            self._record_event(
                CollectionPublished(aggregate_id=self.id, collection_type=self.type.value)
            )
        elif not was_draft and self.is_draft:
            self._record_event(CollectionUnpublished(aggregate_id=self.id))

        if changed:
            self._touch()
            self._record_event(
                CollectionUpdated(
                    aggregate_id=self.id,
                    changed_fields=tuple(changed),
                    type_changed=type_changed,
                )
            )
        return changed

    # ------------------------------------------------------------------
    # Manual membership editor
    # ------------------------------------------------------------------

    def add_member(self, product_id: str) -> bool:
        """Append a product to a manual collection.

        Adding a product that is already a member is a silent no-op.

        Returns:
            True if the product was appended.

        Raises:
            CollectionTypeMismatchError: If the collection is smart.
        """
        self.require_type(CollectionType.MANUAL, "add_member")
        if product_id in self.manual_members:
            return False
        self.manual_members = [*self.manual_members, product_id]
        self._touch()
        self._record_event(
            CollectionMemberAdded(
                aggregate_id=self.id,
                product_id=product_id,
                member_count=len(self.manual_members),
            )
        )
        return True

    def remove_member(self, product_id: str) -> bool:
        """Remove a product from a manual collection.

        Removing a product that is not a member is a silent no-op.

        Returns:
            True if the product was removed.

        Raises:
            CollectionTypeMismatchError: If the collection is smart.
        """
        self.require_type(CollectionType.MANUAL, "remove_member")
        if product_id not in self.manual_members:
            return False
        self.manual_members = [pid for pid in self.manual_members if pid != product_id]
        self._touch()
        self._record_event(
            CollectionMemberRemoved(
                aggregate_id=self.id,
                product_id=product_id,
                member_count=len(self.manual_members),
            )
        )
        return True

    def reorder_members(self, ordered_ids: list[str]) -> None:
        """Replace the display order of a manual collection.

        The supplied list must be a permutation of the current members;
        reordering never adds or drops products.

        Raises:
            CollectionTypeMismatchError: If the collection is smart.
            MembershipOrderError: If the ids are not a permutation.
        """
        self.require_type(CollectionType.MANUAL, "reorder_members")

        current = set(self.manual_members)
        seen: set[str] = set()
        duplicates: list[str] = []
        for product_id in ordered_ids:
            if product_id in seen and product_id not in duplicates:
                duplicates.append(product_id)
            seen.add(product_id)

        missing = [pid for pid in self.manual_members if pid not in seen]
        unexpected = [pid for pid in dict.fromkeys(ordered_ids) if pid not in current]
        if missing or unexpected or duplicates:
            raise MembershipOrderError(missing, unexpected, duplicates)

        self.manual_members = list(ordered_ids)
        self._touch()
        self._record_event(
            CollectionMembersReordered(
                aggregate_id=self.id,
                member_count=len(self.manual_members),
            )
        )

    # ------------------------------------------------------------------
    # Rule set editor
    # ------------------------------------------------------------------

    def replace_rules(self, rules: list[Condition] | list[dict[str, Any]]) -> None:
        """Replace the rule set of a smart collection.

        Raises:
            CollectionTypeMismatchError: If the collection is manual.
            ConditionShapeError: If a rule entry is not condition-shaped.
        """
        self.require_type(CollectionType.SMART, "replace_rules")
        self.rules = parse_conditions(rules)
        self._touch()
        self._record_event(
            CollectionRulesReplaced(
                aggregate_id=self.id,
                rules=tuple(rule.to_dict() for rule in self.rules),
            )
        )

    def require_type(self, required: CollectionType, operation: str) -> None:
        """Raise CollectionTypeMismatchError unless the collection has ``required`` type."""
        if self.type != required:
            raise CollectionTypeMismatchError(
                self.id,
                operation,
                required.value,
                self.type.value,
            )
