"""SQLAlchemy models for the product catalog.

The catalog is owned by the listing side of the marketplace; the
collection engine only reads it.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from marketplace.infrastructure.database import Base


class InventoryStatus(str, Enum):
    """Inventory status maintained by the catalog."""

    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


# Statuses under which a product may appear in any collection
SELLABLE_STATUSES = (InventoryStatus.IN_STOCK.value, InventoryStatus.LOW_STOCK.value)


class Product(Base):
    """Product listed by a seller.

    Attributes:
        id: Unique product identifier.
        seller_id: Seller that lists this product.
        sku: Stock Keeping Unit (unique per seller).
        title: Product title.
        description: Product description.
        category: Category name.
        base_price: Price in cents.
        currency: Currency code (default USD).
        stock_quantity: Units on hand.
        status: Inventory status (see ``InventoryStatus``).
        image_url: Product image URL.
        tags: Free-form seller tags.
    """

    __tablename__ = "products"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    seller_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    sku: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(200), nullable=True, index=True)
    base_price: Mapped[int] = mapped_column(Integer, nullable=False)  # in cents
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=InventoryStatus.IN_STOCK.value,
        index=True,
    )
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    tags: Mapped[list["ProductTag"]] = relationship(
        "ProductTag",
        back_populates="product",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("seller_id", "sku", name="uq_products_seller_sku"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<Product(id={self.id}, sku={self.sku}, title={self.title[:30]}...)>"

    @property
    def price_decimal(self) -> Decimal:
        """Price in major currency units."""
        return Decimal(self.base_price) / 100

    @property
    def tag_names(self) -> list[str]:
        """Tag names in insertion order."""
        return [tag.name for tag in self.tags]

    @property
    def is_sellable(self) -> bool:
        """Whether the product may appear in collections."""
        return self.status in SELLABLE_STATUSES

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "seller_id": self.seller_id,
            "sku": self.sku,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "tags": self.tag_names,
            "price": {
                "amount": self.base_price,
                "currency": self.currency,
            },
            "stock_quantity": self.stock_quantity,
            "status": self.status,
            "image_url": self.image_url,
        }


class ProductTag(Base):
    """A tag attached to a product."""

    __tablename__ = "product_tags"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    product_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("products.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Relationships
    product: Mapped["Product"] = relationship("Product", back_populates="tags")

    __table_args__ = (
        UniqueConstraint("product_id", "name", name="uq_product_tags_product_name"),
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<ProductTag(product_id={self.product_id}, name={self.name})>"
