"""Publish gate for collections.

Publication is modelled by the ``is_draft`` flag rather than a richer
status enum:

    DRAFT ──── publish (gate checked) ────► PUBLISHED
      ▲                                         │
      └──────────── unpublish (no gate) ────────┘

The gate only looks at configuration, never at resolved membership: a
smart collection whose rules currently match nothing may still publish.
"""

from enum import Enum

from marketplace.domain.conditions import Condition
from marketplace.domain.exceptions import PublishBlockedError
from marketplace.domain.value_objects import CollectionType


class PublicationState(str, Enum):
    """Collection publication state derived from ``is_draft``."""

    DRAFT = "draft"
    PUBLISHED = "published"

    @classmethod
    def from_draft_flag(cls, is_draft: bool) -> "PublicationState":
        """Map the stored draft flag to a state."""
        return cls.DRAFT if is_draft else cls.PUBLISHED


def check_publishable(
    collection_id: str,
    collection_type: CollectionType,
    manual_members: list[str],
    rules: list[Condition],
) -> None:
    """Ensure a collection is minimally configured before it goes live.

    Args:
        collection_id: ID of the collection being published.
        collection_type: Effective collection type.
        manual_members: Membership list that would be persisted.
        rules: Rule set that would be persisted.

    Raises:
        PublishBlockedError: If a manual collection has no members or a
            smart collection has no rules.
    """
    if collection_type == CollectionType.MANUAL and not manual_members:
        raise PublishBlockedError(
            collection_id,
            collection_type.value,
            "a manual collection needs at least one product",
        )
    if collection_type == CollectionType.SMART and not rules:
        raise PublishBlockedError(
            collection_id,
            collection_type.value,
            "a smart collection needs at least one condition",
        )
