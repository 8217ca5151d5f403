"""Product repository for database operations.

Read access to the catalog for collection resolution, plus bulk save
for seeding.
"""

from collections.abc import Sequence

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.catalog.models import Product
from marketplace.catalog.rules import RuleFilter


class ProductRepository:
    """Repository for Product database operations.

    Example usage:
        async with async_session_factory() as session:
            repo = ProductRepository(session)
            rule_filter = compile_rules(rules, owner_id="seller-1")
            total = await repo.count_matching(rule_filter)
            sample = await repo.find_matching(rule_filter, limit=50)
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def save_all(self, products: list[Product]) -> list[Product]:
        """Save multiple products to database.

        Args:
            products: Products to save.

        Returns:
            Saved products.
        """
        self.session.add_all(products)
        await self.session.flush()
        return products

    async def delete_by_seller(self, seller_id: str) -> int:
        """Delete all products listed by a seller.

        Args:
            seller_id: Seller ID.

        Returns:
            Number of deleted products.
        """
        result = await self.session.execute(select(Product).where(Product.seller_id == seller_id))
        products = result.scalars().all()
        for product in products:
            await self.session.delete(product)
        await self.session.flush()
        return len(products)

    async def get_for_seller(self, product_id: str, seller_id: str) -> Product | None:
        """Get a product if it belongs to ``seller_id``.

        Args:
            product_id: Product ID.
            seller_id: Expected owner.

        Returns:
            Product if found and owned by the seller, None otherwise.
        """
        query = select(Product).where(
            and_(
                Product.id == product_id,
                Product.seller_id == seller_id,
            )
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_many_for_seller(
        self,
        product_ids: Sequence[str],
        seller_id: str,
    ) -> list[Product]:
        """Get products by ID, preserving the order of ``product_ids``.

        IDs that no longer exist (or belong to another seller) are dropped.

        Args:
            product_ids: Ordered product IDs.
            seller_id: Expected owner.

        Returns:
            Products in the requested order.
        """
        if not product_ids:
            return []

        query = select(Product).where(
            and_(
                Product.id.in_(list(product_ids)),
                Product.seller_id == seller_id,
            )
        )
        result = await self.session.execute(query)
        by_id = {product.id: product for product in result.scalars().all()}
        return [by_id[pid] for pid in product_ids if pid in by_id]

    async def find_matching(
        self,
        rule_filter: RuleFilter,
        limit: int | None = None,
    ) -> Sequence[Product]:
        """Find products matching a compiled rule filter.

        Args:
            rule_filter: Compiled smart-collection filter.
            limit: Optional maximum number of results.

        Returns:
            Matching products in catalog default order (newest first).
        """
        query = rule_filter.apply(select(Product))
        query = query.order_by(Product.created_at.desc(), Product.id)
        if limit is not None:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return result.scalars().all()

    async def ids_matching(self, rule_filter: RuleFilter) -> list[str]:
        """Get IDs of products matching a compiled rule filter."""
        query = rule_filter.apply(select(Product.id))
        query = query.order_by(Product.created_at.desc(), Product.id)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_matching(self, rule_filter: RuleFilter) -> int:
        """Count products matching a compiled rule filter."""
        query = rule_filter.apply(select(func.count(Product.id)))
        result = await self.session.execute(query)
        return result.scalar_one()
