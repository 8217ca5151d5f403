"""Collection application service.

Orchestrates seller collection management:
- Create / update / delete with the membership invariant re-applied
- Publish gate on draft -> published
- Manual membership editing (add, remove, reorder)
- Live resolution, product counts and rule previews
"""

from dataclasses import dataclass, field
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.application.resolution import MembershipResolver, PreviewResult
from marketplace.catalog.models import Product
from marketplace.catalog.repository import ProductRepository
from marketplace.domain.collection import Collection
from marketplace.domain.conditions import Condition, parse_conditions
from marketplace.domain.exceptions import (
    CollectionNotFoundError,
    DomainError,
    ProductNotFoundError,
)
from marketplace.domain.value_objects import CollectionType
from marketplace.infrastructure.repositories import CollectionRepository

logger = structlog.get_logger()


# ============================================================================
# Service Result Types
# ============================================================================


@dataclass
class CollectionResult:
    """Result of reading or writing a single collection."""

    collection: Collection | None = None
    product_count: int = 0
    success: bool = True
    error: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class ListCollectionsResult:
    """Result of listing a seller's collections."""

    items: list[CollectionResult] = field(default_factory=list)
    success: bool = True

    @property
    def total(self) -> int:
        """Number of collections returned."""
        return len(self.items)


@dataclass
class MembershipResult:
    """Result of a manual membership edit."""

    collection: Collection | None = None
    changed: bool = False
    product_count: int = 0
    success: bool = True
    error: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class CollectionProductsResult:
    """Result of resolving a collection to product details."""

    collection: Collection | None = None
    products: list[Product] = field(default_factory=list)
    total: int = 0
    success: bool = True
    error: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class PreviewRulesResult:
    """Result of previewing a rule set."""

    preview: PreviewResult | None = None
    rules: list[Condition] = field(default_factory=list)
    collection_id: str | None = None
    success: bool = True
    error: str | None = None
    error_code: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


def _failure(result_cls: type, error: DomainError, **kwargs: Any) -> Any:
    return result_cls(
        success=False,
        error=error.message,
        error_code=error.error_code,
        details=error.details,
        **kwargs,
    )


# ============================================================================
# Collection Service
# ============================================================================


class CollectionService:
    """Application service for seller collections.

    Every operation is scoped to ``owner_id``; a collection owned by a
    different seller is reported as not found.
    """

    def __init__(
        self,
        session: AsyncSession,
        request_id: str | None = None,
        resolver: MembershipResolver | None = None,
    ) -> None:
        """Initialize service.

        Args:
            session: Async SQLAlchemy session for this request.
            request_id: Request ID for correlation.
            resolver: Membership resolver (defaults to one on ``session``).
        """
        self.collections = CollectionRepository(session)
        self.products = ProductRepository(session)
        self.resolver = resolver or MembershipResolver(session)
        self.request_id = request_id

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_collections(
        self,
        owner_id: str,
        featured: bool | None = None,
        active: bool | None = None,
    ) -> ListCollectionsResult:
        """List a seller's collections with live product counts.

        Args:
            owner_id: Owning seller.
            featured: Optional featured filter.
            active: Optional active filter.

        Returns:
            ListCollectionsResult, most recently updated first.
        """
        collections = await self.collections.list_for_owner(
            owner_id,
            is_featured=featured,
            is_active=active,
        )
        items = [
            CollectionResult(
                collection=collection,
                product_count=await self.resolver.product_count(collection),
            )
            for collection in collections
        ]
        return ListCollectionsResult(items=items)

    async def get_collection(self, owner_id: str, collection_id: str) -> CollectionResult:
        """Get a collection with its live product count."""
        try:
            collection = await self._load(owner_id, collection_id)
        except DomainError as e:
            return _failure(CollectionResult, e)
        return await self._collection_result(collection)

    async def list_collection_products(
        self,
        owner_id: str,
        collection_id: str,
    ) -> CollectionProductsResult:
        """Resolve a collection to its current member products."""
        try:
            collection = await self._load(owner_id, collection_id)
        except DomainError as e:
            return _failure(CollectionProductsResult, e)

        products = await self.resolver.resolve_products(collection)
        return CollectionProductsResult(
            collection=collection,
            products=products,
            total=len(products),
        )

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create_collection(
        self,
        owner_id: str,
        incoming: dict[str, Any],
    ) -> CollectionResult:
        """Create a collection, in draft unless ``is_draft`` says otherwise.

        Args:
            owner_id: Owning seller.
            incoming: Supplied fields (``name`` and ``type`` required).

        Returns:
            CollectionResult with the created collection.
        """
        try:
            collection = Collection.create(owner_id, incoming)
            await self.collections.add(collection)
        except DomainError as e:
            logger.info(
                "Collection creation rejected",
                owner_id=owner_id,
                error_code=e.error_code,
                error=e.message,
                request_id=self.request_id,
            )
            return _failure(CollectionResult, e)

        self._log_events(collection)
        return await self._collection_result(collection)

    async def update_collection(
        self,
        owner_id: str,
        collection_id: str,
        incoming: dict[str, Any],
    ) -> CollectionResult:
        """Apply a partial update and re-apply the membership invariant.

        Args:
            owner_id: Owning seller.
            collection_id: Collection to update.
            incoming: Only the fields the caller supplied.

        Returns:
            CollectionResult with the updated collection.
        """
        try:
            collection = await self._load(owner_id, collection_id)
            changed = collection.apply_changes(incoming)
            if changed:
                await self.collections.save(collection)
        except DomainError as e:
            logger.info(
                "Collection update rejected",
                collection_id=collection_id,
                owner_id=owner_id,
                error_code=e.error_code,
                error=e.message,
                request_id=self.request_id,
            )
            return _failure(CollectionResult, e)

        self._log_events(collection)
        return await self._collection_result(collection)

    async def replace_rules(
        self,
        owner_id: str,
        collection_id: str,
        rules: list[Any],
    ) -> CollectionResult:
        """Replace the rule set of a smart collection."""
        try:
            collection = await self._load(owner_id, collection_id)
            collection.replace_rules(rules)
            await self.collections.save(collection)
        except DomainError as e:
            return _failure(CollectionResult, e)

        self._log_events(collection)
        return await self._collection_result(collection)

    async def delete_collection(self, owner_id: str, collection_id: str) -> CollectionResult:
        """Delete a collection unconditionally."""
        deleted = await self.collections.delete(collection_id, owner_id)
        if not deleted:
            return _failure(CollectionResult, CollectionNotFoundError(collection_id))

        logger.info(
            "collection.deleted",
            collection_id=collection_id,
            owner_id=owner_id,
            request_id=self.request_id,
        )
        return CollectionResult()

    # ------------------------------------------------------------------
    # Manual membership editor
    # ------------------------------------------------------------------

    async def add_product(
        self,
        owner_id: str,
        collection_id: str,
        product_id: str,
    ) -> MembershipResult:
        """Append a product to a manual collection (idempotent).

        The product must belong to the same seller.
        """
        try:
            collection = await self._load(owner_id, collection_id)
            collection.require_type(CollectionType.MANUAL, "add_member")
            if await self.products.get_for_seller(product_id, owner_id) is None:
                raise ProductNotFoundError(product_id)
            changed = collection.add_member(product_id)
            if changed:
                await self.collections.save(collection)
        except DomainError as e:
            return _failure(MembershipResult, e)

        self._log_events(collection)
        return MembershipResult(
            collection=collection,
            changed=changed,
            product_count=len(collection.manual_members),
        )

    async def remove_product(
        self,
        owner_id: str,
        collection_id: str,
        product_id: str,
    ) -> MembershipResult:
        """Remove a product from a manual collection (absent is a no-op)."""
        try:
            collection = await self._load(owner_id, collection_id)
            changed = collection.remove_member(product_id)
            if changed:
                await self.collections.save(collection)
        except DomainError as e:
            return _failure(MembershipResult, e)

        self._log_events(collection)
        return MembershipResult(
            collection=collection,
            changed=changed,
            product_count=len(collection.manual_members),
        )

    async def reorder_products(
        self,
        owner_id: str,
        collection_id: str,
        product_ids: list[str],
    ) -> MembershipResult:
        """Set the display order of a manual collection's members."""
        try:
            collection = await self._load(owner_id, collection_id)
            collection.reorder_members(product_ids)
            await self.collections.save(collection)
        except DomainError as e:
            return _failure(MembershipResult, e)

        self._log_events(collection)
        return MembershipResult(
            collection=collection,
            changed=True,
            product_count=len(collection.manual_members),
        )

    # ------------------------------------------------------------------
    # Previews
    # ------------------------------------------------------------------

    async def preview_rules(self, owner_id: str, rules: list[Any]) -> PreviewRulesResult:
        """Preview an unsaved rule set against the seller's catalog."""
        try:
            conditions = parse_conditions(rules)
        except DomainError as e:
            return _failure(PreviewRulesResult, e)

        preview = await self.resolver.preview(conditions, owner_id)
        return PreviewRulesResult(preview=preview, rules=conditions)

    async def preview_collection(
        self,
        owner_id: str,
        collection_id: str,
        rules: list[Any] | None = None,
    ) -> PreviewRulesResult:
        """Preview an existing collection's rules, or an override set.

        Args:
            owner_id: Owning seller.
            collection_id: Collection whose rules are previewed.
            rules: Optional override; the stored rules are used when ``None``.

        Returns:
            PreviewRulesResult with the capped sample and true total.
        """
        try:
            collection = await self._load(owner_id, collection_id)
            conditions = collection.rules if rules is None else parse_conditions(rules)
        except DomainError as e:
            return _failure(PreviewRulesResult, e)

        preview = await self.resolver.preview(conditions, owner_id)
        return PreviewRulesResult(
            preview=preview,
            rules=list(conditions),
            collection_id=collection.id,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load(self, owner_id: str, collection_id: str) -> Collection:
        collection = await self.collections.get(collection_id, owner_id)
        if collection is None:
            raise CollectionNotFoundError(collection_id)
        return collection

    async def _collection_result(self, collection: Collection) -> CollectionResult:
        return CollectionResult(
            collection=collection,
            product_count=await self.resolver.product_count(collection),
        )

    def _log_events(self, collection: Collection) -> None:
        for event in collection.collect_events():
            payload = {"owner_id": collection.owner_id, **event.to_dict()}
            logger.info(event.event_type, request_id=self.request_id, **payload)


# ============================================================================
# Service Factory
# ============================================================================


def get_collection_service(
    session: AsyncSession,
    request_id: str | None = None,
) -> CollectionService:
    """Get collection service instance.

    Args:
        session: Async SQLAlchemy session for this request.
        request_id: Request ID for correlation.

    Returns:
        CollectionService instance.
    """
    return CollectionService(session, request_id=request_id)
