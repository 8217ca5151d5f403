"""Collection repository.

Maps the ``Collection`` aggregate to the ``collections`` table. Every
read and write is scoped by ``(id, owner_id)`` so a collection owned by
another seller is indistinguishable from a missing one.
"""

from sqlalchemy import and_, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.domain.collection import Collection
from marketplace.domain.conditions import Condition
from marketplace.domain.value_objects import CollectionType, Placement, SortOrder, Visibility
from marketplace.infrastructure.models import CollectionModel

_SCALAR_COLUMNS = (
    "name",
    "slug",
    "description",
    "image_url",
    "cover_image_url",
    "is_active",
    "is_featured",
    "is_draft",
    "is_trending",
    "is_seasonal",
    "is_sale",
    "seo_title",
    "seo_description",
    "placement_priority",
    "published_at",
    "scheduled_publish_at",
    "created_at",
    "updated_at",
)


class CollectionRepository:
    """Repository for Collection persistence.

    Each mutation is a single-row write; there is no optimistic
    concurrency check, so concurrent editors resolve last-write-wins.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: Async SQLAlchemy session.
        """
        self.session = session

    async def add(self, collection: Collection) -> Collection:
        """Insert a new collection."""
        model = CollectionModel(id=collection.id, owner_id=collection.owner_id)
        _write_model(model, collection)
        self.session.add(model)
        await self.session.flush()
        return collection

    async def get(self, collection_id: str, owner_id: str) -> Collection | None:
        """Get a collection owned by ``owner_id``.

        Returns:
            Collection if found and owned by the seller, None otherwise.
        """
        model = await self._get_model(collection_id, owner_id)
        return _to_entity(model) if model else None

    async def list_for_owner(
        self,
        owner_id: str,
        is_featured: bool | None = None,
        is_active: bool | None = None,
    ) -> list[Collection]:
        """List a seller's collections, most recently updated first.

        Args:
            owner_id: Owning seller.
            is_featured: Optional featured filter.
            is_active: Optional active filter.

        Returns:
            Matching collections.
        """
        conditions = [CollectionModel.owner_id == owner_id]
        if is_featured is not None:
            conditions.append(CollectionModel.is_featured == is_featured)
        if is_active is not None:
            conditions.append(CollectionModel.is_active == is_active)

        query = (
            select(CollectionModel)
            .where(and_(*conditions))
            .order_by(CollectionModel.updated_at.desc(), CollectionModel.id)
        )
        result = await self.session.execute(query)
        return [_to_entity(model) for model in result.scalars().all()]

    async def save(self, collection: Collection) -> Collection:
        """Write an existing collection back.

        Returns:
            The saved collection.

        Raises:
            LookupError: If the row vanished since it was read.
        """
        model = await self._get_model(collection.id, collection.owner_id)
        if model is None:
            raise LookupError(f"Collection row missing: {collection.id}")
        _write_model(model, collection)
        await self.session.flush()
        return collection

    async def delete(self, collection_id: str, owner_id: str) -> bool:
        """Delete a collection by id and owner.

        Returns:
            True if a row was deleted.
        """
        result = await self.session.execute(
            delete(CollectionModel).where(
                and_(
                    CollectionModel.id == collection_id,
                    CollectionModel.owner_id == owner_id,
                )
            )
        )
        await self.session.flush()
        return result.rowcount > 0

    async def _get_model(self, collection_id: str, owner_id: str) -> CollectionModel | None:
        query = select(CollectionModel).where(
            and_(
                CollectionModel.id == collection_id,
                CollectionModel.owner_id == owner_id,
            )
        )
        result = await self.session.execute(query)
        return result.scalar_one_or_none()


# ============================================================================
# Mapping
# ============================================================================


def _write_model(model: CollectionModel, collection: Collection) -> None:
    for name in _SCALAR_COLUMNS:
        setattr(model, name, getattr(collection, name))
    model.type = collection.type.value
    model.sort_order = collection.sort_order.value
    model.manual_members = list(collection.manual_members)
    model.rules = [rule.to_dict() for rule in collection.rules]
    model.visibility = collection.visibility.to_dict()
    model.placement = collection.placement.to_dict() if collection.placement else None


def _to_entity(model: CollectionModel) -> Collection:
    return Collection(
        id=model.id,
        owner_id=model.owner_id,
        type=CollectionType(model.type),
        sort_order=SortOrder(model.sort_order),
        manual_members=list(model.manual_members or []),
        rules=[Condition.from_dict(raw, index) for index, raw in enumerate(model.rules or [])],
        visibility=Visibility.from_dict(model.visibility),
        placement=Placement.from_dict(model.placement) if model.placement is not None else None,
        **{name: getattr(model, name) for name in _SCALAR_COLUMNS},
    )
