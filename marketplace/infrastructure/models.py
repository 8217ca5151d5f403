"""SQLAlchemy models for collection persistence."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from marketplace.infrastructure.database import Base

# JSONB on PostgreSQL, plain JSON elsewhere
JsonType = JSON().with_variant(JSONB(), "postgresql")


class CollectionModel(Base):
    """Collection model for database persistence.

    ``manual_members`` and ``rules`` are stored as JSON arrays; at most
    one of them is non-empty for any row. There is no product count
    column: counts are computed when read.
    """

    __tablename__ = "collections"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    owner_id = Column(String(100), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=True, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(1000), nullable=True)
    cover_image_url = Column(String(1000), nullable=True)
    type = Column(String(10), nullable=False, default="manual")
    sort_order = Column(String(20), nullable=False, default="manual")

    # Membership (manual XOR smart)
    manual_members = Column(JsonType, nullable=False, default=list)
    rules = Column(JsonType, nullable=False, default=list)

    # Flags
    visibility = Column(JsonType, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_draft = Column(Boolean, nullable=False, default=True, index=True)
    is_trending = Column(Boolean, nullable=False, default=False)
    is_seasonal = Column(Boolean, nullable=False, default=False)
    is_sale = Column(Boolean, nullable=False, default=False)

    # SEO / placement
    seo_title = Column(String(255), nullable=True)
    seo_description = Column(Text, nullable=True)
    placement = Column(JsonType, nullable=True)
    placement_priority = Column(Integer, nullable=False, default=0)

    # Timestamps
    published_at = Column(DateTime(timezone=True), nullable=True)
    scheduled_publish_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
