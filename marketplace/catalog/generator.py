"""Demo catalog generator with deterministic seeding.

Produces a small, reproducible seller catalog (titles, categories, tags,
prices and inventory) for exercising smart-collection rules.
"""

import hashlib
import random
from dataclasses import dataclass
from typing import Iterator

from marketplace.catalog.models import InventoryStatus, Product, ProductTag


# ============================================================================
# Constants
# ============================================================================

BRANDS = [
    "Acme",
    "Contoso",
    "Northwind",
    "Fabrikam",
    "Tailwind",
]

# Category -> (price range in cents, title templates, candidate tags)
CATEGORIES: dict[str, tuple[tuple[int, int], list[str], list[str]]] = {
    "Furniture": (
        (9999, 149999),
        ["{brand} {adj} Armchair", "{brand} {adj} Side Table", "{brand} Oak {adj} Shelf"],
        ["living-room", "wood", "handmade", "bestseller"],
    ),
    "Lighting": (
        (1999, 39999),
        ["{brand} {adj} Floor Lamp", "{brand} {adj} Pendant Light"],
        ["living-room", "brass", "modern", "sale"],
    ),
    "Textiles": (
        (999, 19999),
        ["{brand} {adj} Throw Blanket", "{brand} Linen {adj} Cushion"],
        ["bedroom", "cotton", "handmade", "summer"],
    ),
    "Kitchen": (
        (499, 29999),
        ["{brand} {adj} Chef Knife", "{brand} Ceramic {adj} Bowl Set"],
        ["kitchen", "ceramic", "gift", "sale"],
    ),
}

ADJECTIVES = ["Classic", "Nordic", "Compact", "Deluxe", "Rustic", "Minimal"]


@dataclass
class GeneratorConfig:
    """Configuration for catalog generation.

    Attributes:
        seller_id: Seller that owns the generated products.
        products_per_category: Products generated per category.
        seed: Random seed for reproducible output.
        out_of_stock_ratio: Share of products generated with no stock.
    """

    seller_id: str = "seller-demo"
    products_per_category: int = 5
    seed: int = 42
    out_of_stock_ratio: float = 0.15

    @classmethod
    def small(cls, seller_id: str = "seller-demo") -> "GeneratorConfig":
        """Small catalog for local development."""
        return cls(seller_id=seller_id, products_per_category=5)

    @classmethod
    def full(cls, seller_id: str = "seller-demo") -> "GeneratorConfig":
        """Larger catalog, enough to exceed the preview cap."""
        return cls(seller_id=seller_id, products_per_category=25)


class ProductGenerator:
    """Deterministic product generator.

    The same config always yields the same products, including IDs.
    """

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config
        self.rng = random.Random(config.seed)

    def _deterministic_id(self, *parts: str | int) -> str:
        digest = hashlib.sha256(
            ":".join(str(p) for p in (self.config.seed, self.config.seller_id, *parts)).encode()
        ).hexdigest()
        return f"{digest[:8]}-{digest[8:12]}-{digest[12:16]}-{digest[16:20]}-{digest[20:32]}"

    def _generate_product(self, category: str, index: int) -> Product:
        (low, high), templates, tag_pool = CATEGORIES[category]
        brand = self.rng.choice(BRANDS)
        title = self.rng.choice(templates).format(brand=brand, adj=self.rng.choice(ADJECTIVES))
        # Round to .99 pricing
        price = (self.rng.randint(low, high) // 100) * 100 + 99

        if self.rng.random() < self.config.out_of_stock_ratio:
            stock, status = 0, InventoryStatus.OUT_OF_STOCK
        else:
            stock = self.rng.randint(1, 120)
            status = InventoryStatus.LOW_STOCK if stock < 10 else InventoryStatus.IN_STOCK

        tags = self.rng.sample(tag_pool, k=self.rng.randint(1, len(tag_pool)))

        return Product(
            id=self._deterministic_id(category, index),
            seller_id=self.config.seller_id,
            sku=f"{category[:3].upper()}-{index:04d}",
            title=title,
            description=f"{title} from the {category.lower()} range.",
            category=category,
            base_price=price,
            currency="USD",
            stock_quantity=stock,
            status=status.value,
            tags=[ProductTag(name=tag) for tag in tags],
        )

    def generate(self) -> Iterator[Product]:
        """Yield products category by category."""
        for category in CATEGORIES:
            for index in range(self.config.products_per_category):
                yield self._generate_product(category, index)

    def generate_list(self) -> list[Product]:
        """Generate all products as a list."""
        return list(self.generate())

    @property
    def expected_count(self) -> int:
        """Number of products ``generate`` yields."""
        return len(CATEGORIES) * self.config.products_per_category
