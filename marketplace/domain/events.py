"""Domain events emitted by the collection aggregate."""

from dataclasses import dataclass, field
from typing import Any

from marketplace.domain.base import DomainEvent


@dataclass(frozen=True)
class CollectionCreated(DomainEvent):
    """A seller created a collection."""

    event_type = "collection.created"

    owner_id: str = ""
    collection_type: str = ""
    is_draft: bool = True

    def _payload(self) -> dict[str, Any]:
        return {
            "owner_id": self.owner_id,
            "collection_type": self.collection_type,
            "is_draft": self.is_draft,
        }


@dataclass(frozen=True)
class CollectionUpdated(DomainEvent):
    """Collection fields changed."""

    event_type = "collection.updated"

    changed_fields: tuple[str, ...] = ()
    type_changed: bool = False

    def _payload(self) -> dict[str, Any]:
        return {
            "changed_fields": list(self.changed_fields),
            "type_changed": self.type_changed,
        }


@dataclass(frozen=True)
class CollectionPublished(DomainEvent):
    """A collection passed the publish gate and left draft."""

    event_type = "collection.published"

    collection_type: str = ""

    def _payload(self) -> dict[str, Any]:
        return {"collection_type": self.collection_type}


@dataclass(frozen=True)
class CollectionUnpublished(DomainEvent):
    """A published collection went back to draft."""

    event_type = "collection.unpublished"

    def _payload(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True)
class CollectionMemberAdded(DomainEvent):
    """A product was appended to a manual collection."""

    event_type = "collection.member_added"

    product_id: str = ""
    member_count: int = 0

    def _payload(self) -> dict[str, Any]:
        return {"product_id": self.product_id, "member_count": self.member_count}


@dataclass(frozen=True)
class CollectionMemberRemoved(DomainEvent):
    """A product was removed from a manual collection."""

    event_type = "collection.member_removed"

    product_id: str = ""
    member_count: int = 0

    def _payload(self) -> dict[str, Any]:
        return {"product_id": self.product_id, "member_count": self.member_count}


@dataclass(frozen=True)
class CollectionMembersReordered(DomainEvent):
    """Manual members were put in a new display order."""

    event_type = "collection.members_reordered"

    member_count: int = 0

    def _payload(self) -> dict[str, Any]:
        return {"member_count": self.member_count}


@dataclass(frozen=True)
class CollectionRulesReplaced(DomainEvent):
    """A smart collection's rule set was replaced."""

    event_type = "collection.rules_replaced"

    rules: tuple[dict[str, str], ...] = field(default=())

    def _payload(self) -> dict[str, Any]:
        return {"rule_count": len(self.rules), "rules": list(self.rules)}
