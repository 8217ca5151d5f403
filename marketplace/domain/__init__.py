"""Domain layer - collection aggregate, conditions, publish gate, events.

- **Aggregate**: ``Collection`` (manual list XOR smart rule set)
- **Value Objects**: ``Condition``, ``Visibility``, ``Placement`` and enums
- **Publish gate**: ``check_publishable`` guarding draft -> published
- **Exceptions**: NotFound / Validation / TypeMismatch taxonomy

Example usage:
    from marketplace.domain import Collection

    collection = Collection.create(
        owner_id="seller-1",
        incoming={"name": "Summer picks", "type": "manual"},
    )
    collection.add_member("product-1")
    collection.apply_changes({"is_draft": False})
"""

from marketplace.domain.base import AggregateRoot, DomainEvent, ValueObject
from marketplace.domain.collection import Collection, apply_collection_fields, slugify
from marketplace.domain.conditions import (
    Condition,
    ConditionOperator,
    ConditionType,
    parse_conditions,
)
from marketplace.domain.exceptions import (
    CollectionNotFoundError,
    CollectionTypeMismatchError,
    CollectionValidationError,
    ConditionShapeError,
    DomainError,
    MembershipOrderError,
    NotFoundError,
    ProductNotFoundError,
    PublishBlockedError,
    ValidationError,
)
from marketplace.domain.publication import PublicationState, check_publishable
from marketplace.domain.value_objects import CollectionType, Placement, SortOrder, Visibility

__all__ = [
    # Base
    "AggregateRoot",
    "DomainEvent",
    "ValueObject",
    # Aggregate
    "Collection",
    "apply_collection_fields",
    "slugify",
    # Conditions
    "Condition",
    "ConditionOperator",
    "ConditionType",
    "parse_conditions",
    # Value objects
    "CollectionType",
    "Placement",
    "SortOrder",
    "Visibility",
    # Publication
    "PublicationState",
    "check_publishable",
    # Exceptions
    "CollectionNotFoundError",
    "CollectionTypeMismatchError",
    "CollectionValidationError",
    "ConditionShapeError",
    "DomainError",
    "MembershipOrderError",
    "NotFoundError",
    "ProductNotFoundError",
    "PublishBlockedError",
    "ValidationError",
]
