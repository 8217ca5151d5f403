"""Membership resolution for collections.

Manual collections resolve to their stored list verbatim; smart
collections are compiled and evaluated against the live catalog on
every call. Nothing is cached, so ``product_count`` is always a fresh
figure and two calls moments apart may differ as the catalog changes.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.catalog.models import Product
from marketplace.catalog.repository import ProductRepository
from marketplace.catalog.rules import compile_rules
from marketplace.domain.collection import Collection
from marketplace.domain.conditions import Condition
from marketplace.domain.value_objects import CollectionType
from marketplace.infrastructure.config import settings


@dataclass
class PreviewResult:
    """Capped sample of a rule set's matches.

    ``total`` is the true number of matches; ``products`` holds at most
    ``limit`` of them and must not be mistaken for the full membership.
    """

    products: list[Product]
    total: int
    limit: int

    @property
    def truncated(self) -> bool:
        """Whether more products match than were returned."""
        return self.total > len(self.products)


class MembershipResolver:
    """Resolves the current members of a collection.

    Example usage:
        resolver = MembershipResolver(session)
        count = await resolver.product_count(collection)
        preview = await resolver.preview(rules, owner_id="seller-1")
    """

    def __init__(self, session: AsyncSession, preview_limit: int | None = None) -> None:
        """Initialize resolver.

        Args:
            session: Async SQLAlchemy session.
            preview_limit: Maximum products returned by previews.
        """
        self.products = ProductRepository(session)
        self.preview_limit = settings.preview_limit if preview_limit is None else preview_limit

    async def resolve_members(self, collection: Collection) -> list[str]:
        """Resolve a collection to an ordered list of product IDs.

        Args:
            collection: Collection to resolve.

        Returns:
            Stored order for manual collections, catalog default order
            for smart ones.
        """
        if collection.type == CollectionType.MANUAL:
            return list(collection.manual_members)
        if not collection.rules:
            return []
        rule_filter = compile_rules(collection.rules, collection.owner_id)
        return await self.products.ids_matching(rule_filter)

    async def product_count(self, collection: Collection) -> int:
        """Count the collection's current members."""
        if collection.type == CollectionType.MANUAL:
            return len(collection.manual_members)
        return await self._count_rules(collection.rules, collection.owner_id)

    async def resolve_products(self, collection: Collection) -> list[Product]:
        """Resolve a collection to product details.

        Manual members that have since disappeared from the seller's
        catalog are left out of the details.
        """
        if collection.type == CollectionType.MANUAL:
            return await self.products.get_many_for_seller(
                collection.manual_members,
                collection.owner_id,
            )
        if not collection.rules:
            return []
        rule_filter = compile_rules(collection.rules, collection.owner_id)
        return list(await self.products.find_matching(rule_filter))

    async def preview(self, rules: Sequence[Condition], owner_id: str) -> PreviewResult:
        """Resolve an unsaved rule set against the catalog.

        An empty rule list previews as empty rather than as the whole
        catalog.

        Args:
            rules: Conditions to evaluate.
            owner_id: Seller whose catalog is searched.

        Returns:
            Capped product sample plus the uncapped total.
        """
        if not rules:
            return PreviewResult(products=[], total=0, limit=self.preview_limit)

        rule_filter = compile_rules(rules, owner_id)
        total = await self.products.count_matching(rule_filter)
        sample = await self.products.find_matching(rule_filter, limit=self.preview_limit)
        return PreviewResult(products=list(sample), total=total, limit=self.preview_limit)

    async def _count_rules(self, rules: Sequence[Condition], owner_id: str) -> int:
        if not rules:
            return 0
        return await self.products.count_matching(compile_rules(rules, owner_id))
