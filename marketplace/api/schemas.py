"""API schemas for the collections service.

Pydantic models for request/response validation and serialization.

Request models keep domain-validated fields loosely typed (``type``,
``sort_order``, ``conditions``) so that bad values surface as the
service's own 400 errors rather than framework validation errors.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from marketplace.catalog.models import Product
from marketplace.domain.collection import Collection
from marketplace.domain.conditions import Condition


# ============================================================================
# Common Schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Standard error response.

    All API errors follow this format for consistency.
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(
        default_factory=dict, description="Additional error details"
    )
    request_id: str | None = Field(
        default=None, description="Request ID for correlation"
    )


class PriceSchema(BaseModel):
    """Price representation."""

    amount: int = Field(..., description="Amount in smallest currency unit (cents)")
    currency: str = Field(default="USD", description="Currency code")


# ============================================================================
# Condition Schemas
# ============================================================================


class ConditionSchema(BaseModel):
    """A stored smart-collection condition."""

    type: str = Field(..., description="Condition type (tag, price, title, stock, category)")
    operator: str = Field(..., description="Operator (contains, equals, greater_than, ...)")
    value: str | None = Field(default=None, description="Single-value payload")
    min: str | None = Field(default=None, description="Lower bound for 'between'")
    max: str | None = Field(default=None, description="Upper bound for 'between'")
    field: str | None = Field(default=None, description="Optional attribute hint")
    description: str = Field(..., description="Human-readable summary")

    @classmethod
    def from_condition(cls, condition: Condition) -> "ConditionSchema":
        return cls(**condition.to_dict(), description=condition.describe())


# ============================================================================
# Collection Schemas
# ============================================================================


class VisibilitySchema(BaseModel):
    """Channels a collection is shown on."""

    storefront: bool = True
    mobile_app: bool = True


class PlacementSchema(BaseModel):
    """Storefront slots a collection is promoted in."""

    homepage_banner: bool = False
    homepage_featured: bool = False
    homepage_tabs: bool = False
    category_page: bool = False
    navigation_menu: bool = False


class CollectionFieldsRequest(BaseModel):
    """Fields shared by create and update requests.

    Only fields present in the request body are applied.
    """

    name: str | None = Field(default=None, max_length=200, description="Display name")
    type: str | None = Field(default=None, description="Collection type: manual or smart")
    slug: str | None = Field(default=None, max_length=200, description="URL slug")
    description: str | None = Field(default=None, description="Collection description")
    image_url: str | None = Field(default=None, description="Thumbnail image URL")
    cover_image_url: str | None = Field(default=None, description="Cover image URL")
    product_ids: list[str] | None = Field(
        default=None, description="Ordered product IDs (manual collections)"
    )
    conditions: list[Any] | None = Field(
        default=None, description="Rule conditions, AND-combined (smart collections)"
    )
    sort_order: str | None = Field(default=None, description="Storefront display order")
    visibility: VisibilitySchema | None = Field(default=None, description="Channel visibility")
    is_active: bool | None = None
    is_featured: bool | None = None
    is_draft: bool | None = Field(default=None, description="False publishes the collection")
    is_trending: bool | None = None
    is_seasonal: bool | None = None
    is_sale: bool | None = None
    seo_title: str | None = Field(default=None, max_length=200)
    seo_description: str | None = Field(default=None, max_length=500)
    placement: PlacementSchema | None = None
    placement_priority: int | None = None
    scheduled_publish_at: datetime | None = None

    def to_fields(self) -> dict[str, Any]:
        """Map supplied request fields onto collection field names."""
        fields = self.model_dump(exclude_unset=True)
        if "product_ids" in fields:
            fields["manual_members"] = fields.pop("product_ids")
        if "conditions" in fields:
            fields["rules"] = fields.pop("conditions")
        return fields


class CollectionCreateRequest(CollectionFieldsRequest):
    """Request to create a collection (``name`` and ``type`` required)."""


class CollectionUpdateRequest(CollectionFieldsRequest):
    """Partial update; ``type`` may re-declare the collection type."""


class CollectionResponse(BaseModel):
    """Response for a collection."""

    id: str = Field(..., description="Unique collection identifier")
    owner_id: str = Field(..., description="Owning seller")
    name: str
    slug: str | None = None
    description: str | None = None
    image_url: str | None = None
    cover_image_url: str | None = None
    type: str = Field(..., description="manual or smart")
    product_ids: list[str] = Field(default_factory=list, description="Manual members")
    conditions: list[ConditionSchema] = Field(default_factory=list, description="Smart rules")
    product_count: int = Field(..., description="Live member count")
    sort_order: str
    visibility: VisibilitySchema
    is_active: bool
    is_featured: bool
    is_draft: bool
    is_trending: bool
    is_seasonal: bool
    is_sale: bool
    seo_title: str | None = None
    seo_description: str | None = None
    placement: PlacementSchema | None = None
    placement_priority: int = 0
    published_at: datetime | None = None
    scheduled_publish_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_collection(cls, collection: Collection, product_count: int) -> "CollectionResponse":
        return cls(
            id=collection.id,
            owner_id=collection.owner_id,
            name=collection.name,
            slug=collection.slug,
            description=collection.description,
            image_url=collection.image_url,
            cover_image_url=collection.cover_image_url,
            type=collection.type.value,
            product_ids=list(collection.manual_members),
            conditions=[ConditionSchema.from_condition(c) for c in collection.rules],
            product_count=product_count,
            sort_order=collection.sort_order.value,
            visibility=VisibilitySchema(**collection.visibility.to_dict()),
            is_active=collection.is_active,
            is_featured=collection.is_featured,
            is_draft=collection.is_draft,
            is_trending=collection.is_trending,
            is_seasonal=collection.is_seasonal,
            is_sale=collection.is_sale,
            seo_title=collection.seo_title,
            seo_description=collection.seo_description,
            placement=(
                PlacementSchema(**collection.placement.to_dict())
                if collection.placement
                else None
            ),
            placement_priority=collection.placement_priority,
            published_at=collection.published_at,
            scheduled_publish_at=collection.scheduled_publish_at,
            created_at=collection.created_at,
            updated_at=collection.updated_at,
        )


class CollectionsListResponse(BaseModel):
    """List of a seller's collections."""

    items: list[CollectionResponse] = Field(..., description="Collections")
    total: int = Field(..., description="Number of collections returned")


# ============================================================================
# Product Schemas
# ============================================================================


class ProductSchema(BaseModel):
    """Catalog product as shown in a collection."""

    id: str
    sku: str
    title: str
    description: str | None = None
    category: str | None = None
    tags: list[str] = Field(default_factory=list)
    price: PriceSchema
    stock_quantity: int
    status: str
    image_url: str | None = None

    @classmethod
    def from_product(cls, product: Product) -> "ProductSchema":
        return cls(
            id=product.id,
            sku=product.sku,
            title=product.title,
            description=product.description,
            category=product.category,
            tags=product.tag_names,
            price=PriceSchema(amount=product.base_price, currency=product.currency),
            stock_quantity=product.stock_quantity,
            status=product.status,
            image_url=product.image_url,
        )


class CollectionProductsResponse(BaseModel):
    """Resolved member products of a collection."""

    collection_id: str
    type: str
    items: list[ProductSchema]
    total: int


# ============================================================================
# Membership Schemas
# ============================================================================


class AddProductRequest(BaseModel):
    """Request to add a product to a manual collection."""

    product_id: str = Field(..., min_length=1, description="Product to append")


class ReorderProductsRequest(BaseModel):
    """Request to reorder a manual collection."""

    product_ids: list[str] = Field(
        ..., description="All current members, in the new display order"
    )


class MembershipResponse(BaseModel):
    """Result of a membership edit."""

    collection_id: str
    changed: bool = Field(..., description="Whether the membership list changed")
    product_ids: list[str]
    product_count: int


# ============================================================================
# Rule Schemas
# ============================================================================


class RulesReplaceRequest(BaseModel):
    """Request to replace a smart collection's rule set."""

    conditions: list[Any] = Field(..., description="New rule conditions")


class PreviewRequest(BaseModel):
    """Request to preview an unsaved rule set."""

    conditions: list[Any] = Field(default_factory=list, description="Conditions to evaluate")


class CollectionPreviewRequest(BaseModel):
    """Request to preview an existing collection, optionally with override rules."""

    conditions: list[Any] | None = Field(
        default=None, description="Override conditions; stored rules are used if omitted"
    )


class PreviewResponse(BaseModel):
    """Capped sample of a rule set's matches."""

    collection_id: str | None = None
    conditions: list[ConditionSchema]
    items: list[ProductSchema] = Field(..., description="At most 'limit' matching products")
    total: int = Field(..., description="True number of matching products")
    limit: int = Field(..., description="Sample cap")
    truncated: bool = Field(..., description="Whether more products match than returned")
