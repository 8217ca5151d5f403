"""Domain exceptions.

All domain-level errors that represent business rule violations.
These are raised by the collection aggregate, the condition model and
the publish gate, and translated to API errors by the application layer.
"""

from typing import Any


class DomainError(Exception):
    """Base class for all domain exceptions.

    Attributes:
        error_code: Machine-readable code surfaced to API clients.
    """

    error_code = "DOMAIN_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


# ============================================================================
# Not Found Errors
# ============================================================================


class NotFoundError(DomainError):
    """Base class for missing (or foreign-owned) records.

    A record owned by another seller is reported exactly like a record
    that does not exist.
    """

    error_code = "NOT_FOUND"


class CollectionNotFoundError(NotFoundError):
    """Raised when a collection is absent or owned by another seller."""

    error_code = "COLLECTION_NOT_FOUND"

    def __init__(self, collection_id: str) -> None:
        super().__init__(
            f"Collection not found: {collection_id}",
            details={"collection_id": collection_id},
        )


class ProductNotFoundError(NotFoundError):
    """Raised when a product is absent or owned by another seller."""

    error_code = "PRODUCT_NOT_FOUND"

    def __init__(self, product_id: str) -> None:
        super().__init__(
            f"Product not found: {product_id}",
            details={"product_id": product_id},
        )


# ============================================================================
# Validation Errors
# ============================================================================


class ValidationError(DomainError):
    """Base class for invalid input or invalid state."""

    error_code = "VALIDATION_ERROR"


class CollectionValidationError(ValidationError):
    """Raised when collection fields are missing or malformed."""

    def __init__(self, field: str, reason: str) -> None:
        """Initialize collection validation error.

        Args:
            field: Name of the offending field.
            reason: Explanation of what is wrong.
        """
        super().__init__(
            f"Invalid collection field '{field}': {reason}",
            details={"field": field, "reason": reason},
        )


class ConditionShapeError(ValidationError):
    """Raised when a rule entry is not shaped like a condition at all."""

    def __init__(self, index: int, reason: str) -> None:
        super().__init__(
            f"Condition #{index} is malformed: {reason}",
            details={"index": index, "reason": reason},
        )


class PublishBlockedError(ValidationError):
    """Raised when a collection fails the publish gate."""

    error_code = "PUBLISH_BLOCKED"

    def __init__(self, collection_id: str, collection_type: str, reason: str) -> None:
        """Initialize publish blocked error.

        Args:
            collection_id: ID of the collection.
            collection_type: Collection type value.
            reason: Why the collection cannot be published.
        """
        super().__init__(
            f"Collection {collection_id} cannot be published: {reason}",
            details={
                "collection_id": collection_id,
                "collection_type": collection_type,
                "reason": reason,
            },
        )


class MembershipOrderError(ValidationError):
    """Raised when a reorder is not a permutation of the current members."""

    def __init__(self, missing: list[str], unexpected: list[str], duplicates: list[str]) -> None:
        super().__init__(
            "Product order must contain exactly the current collection members",
            details={
                "missing": missing,
                "unexpected": unexpected,
                "duplicates": duplicates,
            },
        )


# ============================================================================
# Type Mismatch Errors
# ============================================================================


class CollectionTypeMismatchError(DomainError):
    """Raised when an operation is invoked against the wrong collection type."""

    error_code = "COLLECTION_TYPE_MISMATCH"

    def __init__(self, collection_id: str, operation: str, required: str, actual: str) -> None:
        """Initialize type mismatch error.

        Args:
            collection_id: ID of the collection.
            operation: Name of the attempted operation.
            required: Collection type the operation needs.
            actual: Collection's actual type.
        """
        super().__init__(
            f"Operation '{operation}' requires a {required} collection, "
            f"but collection {collection_id} is {actual}",
            details={
                "collection_id": collection_id,
                "operation": operation,
                "required_type": required,
                "actual_type": actual,
            },
        )
