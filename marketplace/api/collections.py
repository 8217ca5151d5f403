"""Seller collection API endpoints.

Provides endpoints for collection management:
- GET /seller/collections - list collections with live product counts
- POST /seller/collections - create a collection
- POST /seller/collections/preview - preview an unsaved rule set
- GET /seller/collections/{id} - collection details
- PATCH /seller/collections/{id} - partial update
- DELETE /seller/collections/{id} - delete a collection
- GET /seller/collections/{id}/products - resolved member products
- POST /seller/collections/{id}/products - add a product (manual)
- DELETE /seller/collections/{id}/products/{product_id} - remove a product (manual)
- PUT /seller/collections/{id}/products/order - reorder products (manual)
- PUT /seller/collections/{id}/rules - replace rules (smart)
- POST /seller/collections/{id}/preview - preview stored or override rules
"""

from typing import Annotated, NoReturn

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.api.schemas import (
    AddProductRequest,
    CollectionCreateRequest,
    CollectionPreviewRequest,
    CollectionProductsResponse,
    CollectionResponse,
    CollectionsListResponse,
    CollectionUpdateRequest,
    ConditionSchema,
    ErrorResponse,
    MembershipResponse,
    PreviewRequest,
    PreviewResponse,
    ProductSchema,
    ReorderProductsRequest,
    RulesReplaceRequest,
)
from marketplace.application.collection_service import (
    CollectionProductsResult,
    CollectionResult,
    CollectionService,
    MembershipResult,
    PreviewRulesResult,
    get_collection_service,
)
from marketplace.infrastructure.config import settings
from marketplace.infrastructure.database import get_session

router = APIRouter(prefix="/seller/collections", tags=["Collections"])

NOT_FOUND_CODES = {"COLLECTION_NOT_FOUND", "PRODUCT_NOT_FOUND"}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


# ============================================================================
# Dependencies
# ============================================================================


def get_seller_id(
    seller_id: Annotated[str | None, Header(alias=settings.seller_header)] = None,
) -> str:
    """Get the authenticated seller supplied by the auth gateway."""
    if not seller_id or not seller_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error_code": "SELLER_CONTEXT_MISSING",
                "message": f"Missing {settings.seller_header} header",
            },
        )
    return seller_id.strip()


def get_service(
    request: Request,
    session: Annotated[AsyncSession, Depends(get_session)],
) -> CollectionService:
    """Get collection service with request ID."""
    request_id = getattr(request.state, "request_id", None)
    return get_collection_service(session, request_id=request_id)


SellerId = Annotated[str, Depends(get_seller_id)]
Service = Annotated[CollectionService, Depends(get_service)]


def raise_for_result(
    result: CollectionResult | CollectionProductsResult | MembershipResult | PreviewRulesResult,
) -> NoReturn:
    """Translate a failed service result into an HTTP error."""
    status_code = (
        status.HTTP_404_NOT_FOUND
        if result.error_code in NOT_FOUND_CODES
        else status.HTTP_400_BAD_REQUEST
    )
    raise HTTPException(
        status_code=status_code,
        detail={
            "error_code": result.error_code or "COLLECTION_ERROR",
            "message": result.error or "Collection request failed",
            "details": result.details,
        },
    )


def membership_response(result: MembershipResult) -> MembershipResponse:
    """Convert MembershipResult to MembershipResponse."""
    return MembershipResponse(
        collection_id=result.collection.id,
        changed=result.changed,
        product_ids=list(result.collection.manual_members),
        product_count=result.product_count,
    )


def preview_response(result: PreviewRulesResult) -> PreviewResponse:
    """Convert PreviewRulesResult to PreviewResponse."""
    preview = result.preview
    return PreviewResponse(
        collection_id=result.collection_id,
        conditions=[ConditionSchema.from_condition(c) for c in result.rules],
        items=[ProductSchema.from_product(p) for p in preview.products],
        total=preview.total,
        limit=preview.limit,
        truncated=preview.truncated,
    )


# ============================================================================
# Collection Endpoints
# ============================================================================


@router.get(
    "",
    response_model=CollectionsListResponse,
    responses={401: {"model": ErrorResponse}},
    summary="List collections",
    description="List the seller's collections, most recently updated first.",
)
async def list_collections(
    seller_id: SellerId,
    service: Service,
    featured: bool | None = Query(default=None, description="Filter by featured flag"),
    active: bool | None = Query(default=None, description="Filter by active flag"),
) -> CollectionsListResponse:
    """List collections with live product counts.

    Args:
        seller_id: Authenticated seller.
        service: Collection service.
        featured: Optional featured filter.
        active: Optional active filter.

    Returns:
        Seller's collections.
    """
    result = await service.list_collections(seller_id, featured=featured, active=active)
    items = [
        CollectionResponse.from_collection(item.collection, item.product_count)
        for item in result.items
    ]
    return CollectionsListResponse(items=items, total=result.total)


@router.post(
    "",
    response_model=CollectionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Create collection",
    description="Create a manual or smart collection. New collections are drafts "
    "unless is_draft is explicitly false.",
)
async def create_collection(
    request: CollectionCreateRequest,
    seller_id: SellerId,
    service: Service,
) -> CollectionResponse:
    """Create a collection.

    Raises:
        HTTPException: If name/type are missing or the publish gate rejects it.
    """
    result = await service.create_collection(seller_id, request.to_fields())
    if not result.success:
        raise_for_result(result)
    return CollectionResponse.from_collection(result.collection, result.product_count)


@router.post(
    "/preview",
    response_model=PreviewResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
    summary="Preview rules",
    description="Evaluate an unsaved rule set. Returns a capped sample and the true total.",
)
async def preview_rules(
    request: PreviewRequest,
    seller_id: SellerId,
    service: Service,
) -> PreviewResponse:
    """Preview an unsaved rule set; empty rules give an empty result."""
    result = await service.preview_rules(seller_id, request.conditions)
    if not result.success:
        raise_for_result(result)
    return preview_response(result)


@router.get(
    "/{collection_id}",
    response_model=CollectionResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Get collection",
)
async def get_collection(
    collection_id: str,
    seller_id: SellerId,
    service: Service,
) -> CollectionResponse:
    """Get a collection by ID with its live product count."""
    result = await service.get_collection(seller_id, collection_id)
    if not result.success:
        raise_for_result(result)
    return CollectionResponse.from_collection(result.collection, result.product_count)


@router.patch(
    "/{collection_id}",
    response_model=CollectionResponse,
    responses=ERROR_RESPONSES,
    summary="Update collection",
    description="Apply a partial update. The manual/smart membership invariant is "
    "re-applied on every update.",
)
async def update_collection(
    collection_id: str,
    request: CollectionUpdateRequest,
    seller_id: SellerId,
    service: Service,
) -> CollectionResponse:
    """Update a collection.

    Args:
        collection_id: Collection identifier.
        request: Fields to change.
        seller_id: Authenticated seller.
        service: Collection service.

    Returns:
        Updated collection.

    Raises:
        HTTPException: If not found, invalid, or blocked by the publish gate.
    """
    result = await service.update_collection(seller_id, collection_id, request.to_fields())
    if not result.success:
        raise_for_result(result)
    return CollectionResponse.from_collection(result.collection, result.product_count)


@router.delete(
    "/{collection_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete collection",
)
async def delete_collection(
    collection_id: str,
    seller_id: SellerId,
    service: Service,
) -> None:
    """Delete a collection unconditionally."""
    result = await service.delete_collection(seller_id, collection_id)
    if not result.success:
        raise_for_result(result)


# ============================================================================
# Membership Endpoints
# ============================================================================


@router.get(
    "/{collection_id}/products",
    response_model=CollectionProductsResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="List collection products",
    description="Resolve the collection to its current member products.",
)
async def list_collection_products(
    collection_id: str,
    seller_id: SellerId,
    service: Service,
) -> CollectionProductsResponse:
    """List resolved member products."""
    result = await service.list_collection_products(seller_id, collection_id)
    if not result.success:
        raise_for_result(result)
    return CollectionProductsResponse(
        collection_id=result.collection.id,
        type=result.collection.type.value,
        items=[ProductSchema.from_product(p) for p in result.products],
        total=result.total,
    )


@router.post(
    "/{collection_id}/products",
    response_model=MembershipResponse,
    responses=ERROR_RESPONSES,
    summary="Add product",
    description="Append a product to a manual collection. Adding an existing member is a no-op.",
)
async def add_product(
    collection_id: str,
    request: AddProductRequest,
    seller_id: SellerId,
    service: Service,
) -> MembershipResponse:
    """Add a product to a manual collection."""
    result = await service.add_product(seller_id, collection_id, request.product_id)
    if not result.success:
        raise_for_result(result)
    return membership_response(result)


@router.delete(
    "/{collection_id}/products/{product_id}",
    response_model=MembershipResponse,
    responses=ERROR_RESPONSES,
    summary="Remove product",
    description="Remove a product from a manual collection. Removing a non-member is a no-op.",
)
async def remove_product(
    collection_id: str,
    product_id: str,
    seller_id: SellerId,
    service: Service,
) -> MembershipResponse:
    """Remove a product from a manual collection."""
    result = await service.remove_product(seller_id, collection_id, product_id)
    if not result.success:
        raise_for_result(result)
    return membership_response(result)


@router.put(
    "/{collection_id}/products/order",
    response_model=MembershipResponse,
    responses=ERROR_RESPONSES,
    summary="Reorder products",
    description="Set the display order. The list must contain exactly the current members.",
)
async def reorder_products(
    collection_id: str,
    request: ReorderProductsRequest,
    seller_id: SellerId,
    service: Service,
) -> MembershipResponse:
    """Reorder a manual collection."""
    result = await service.reorder_products(seller_id, collection_id, request.product_ids)
    if not result.success:
        raise_for_result(result)
    return membership_response(result)


# ============================================================================
# Rule Endpoints
# ============================================================================


@router.put(
    "/{collection_id}/rules",
    response_model=CollectionResponse,
    responses=ERROR_RESPONSES,
    summary="Replace rules",
    description="Replace the rule set of a smart collection.",
)
async def replace_rules(
    collection_id: str,
    request: RulesReplaceRequest,
    seller_id: SellerId,
    service: Service,
) -> CollectionResponse:
    """Replace a smart collection's rules."""
    result = await service.replace_rules(seller_id, collection_id, request.conditions)
    if not result.success:
        raise_for_result(result)
    return CollectionResponse.from_collection(result.collection, result.product_count)


@router.post(
    "/{collection_id}/preview",
    response_model=PreviewResponse,
    responses=ERROR_RESPONSES,
    summary="Preview collection rules",
    description="Preview the stored rules, or an override rule set, of an existing collection.",
)
async def preview_collection(
    collection_id: str,
    seller_id: SellerId,
    service: Service,
    request: CollectionPreviewRequest | None = None,
) -> PreviewResponse:
    """Preview an existing collection."""
    rules = request.conditions if request is not None else None
    result = await service.preview_collection(seller_id, collection_id, rules)
    if not result.success:
        raise_for_result(result)
    return preview_response(result)
