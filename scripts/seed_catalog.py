#!/usr/bin/env python3
"""Seed product catalog script.

Generates a deterministic demo catalog for a seller so that smart
collection previews have something realistic to match against.

Usage:
    python scripts/seed_catalog.py --mode small
    python scripts/seed_catalog.py --mode full --seller seller-demo
    python scripts/seed_catalog.py --mode small --no-clear
"""

import argparse
import asyncio
import sys
from collections import Counter
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from marketplace.catalog.generator import GeneratorConfig, ProductGenerator
from marketplace.catalog.repository import ProductRepository
from marketplace.infrastructure.database import Base, async_session_factory, engine
from marketplace.infrastructure import models  # noqa: F401  register collections table


async def create_tables() -> None:
    """Create database tables if they don't exist."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_seller(seller_id: str, mode: str, clear: bool = True) -> dict:
    """Seed catalog for a single seller.

    Args:
        seller_id: Seller ID.
        mode: Catalog size (small/full).
        clear: Whether to clear existing products.

    Returns:
        Seeding result.
    """
    config = GeneratorConfig.full(seller_id) if mode == "full" else GeneratorConfig.small(seller_id)
    products = ProductGenerator(config).generate_list()

    async with async_session_factory() as session:
        repo = ProductRepository(session)
        deleted = await repo.delete_by_seller(seller_id) if clear else 0
        await repo.save_all(products)
        await session.commit()

    statuses = Counter(product.status for product in products)
    return {
        "deleted": deleted,
        "products_created": len(products),
        "categories_used": len({product.category for product in products}),
        "statuses": dict(statuses),
    }


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Seed product catalog for a seller")
    parser.add_argument(
        "--mode",
        choices=["small", "full"],
        default="small",
        help="Catalog size: small (~20 products) or full (~100 products)",
    )
    parser.add_argument(
        "--seller",
        default="seller-demo",
        help="Seller ID to seed (default: seller-demo)",
    )
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Don't clear existing products before seeding",
    )

    args = parser.parse_args()

    print("=" * 60)
    print("Marketplace Catalog Seeder")
    print("=" * 60)
    print(f"Mode: {args.mode}")
    print(f"Seller: {args.seller}")
    print(f"Clear existing: {not args.no_clear}")
    print()

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    result = await seed_seller(args.seller, args.mode, clear=not args.no_clear)

    print(f"  Deleted: {result['deleted']} existing products")
    print(f"  Created: {result['products_created']} products")
    print(f"  Categories: {result['categories_used']}")
    print(f"  Statuses: {result['statuses']}")
    print()
    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
