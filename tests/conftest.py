"""Shared fixtures: in-memory database, catalog factory and API client."""

import itertools
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from marketplace.catalog.models import InventoryStatus, Product, ProductTag
from marketplace.infrastructure import models  # noqa: F401  register collections table
from marketplace.infrastructure.config import settings
from marketplace.infrastructure.database import Base, get_session
from marketplace.main import app

SELLER_ID = "seller-1"
OTHER_SELLER_ID = "seller-2"

_BASE_TIME = datetime(2026, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """A session for direct repository/service tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_product() -> Callable[..., Product]:
    """Factory for catalog products.

    Each product gets a later ``created_at`` than the previous one, so
    the catalog default order (newest first) is the reverse of creation.
    """
    counter = itertools.count(1)

    def _make(
        title: str = "Oak Side Table",
        price: int = 1000,
        tags: tuple[str, ...] = (),
        category: str | None = "Furniture",
        stock: int = 10,
        status: InventoryStatus | None = None,
        seller_id: str = SELLER_ID,
    ) -> Product:
        n = next(counter)
        if status is None:
            status = InventoryStatus.IN_STOCK if stock > 0 else InventoryStatus.OUT_OF_STOCK
        return Product(
            id=f"prod-{n:03d}",
            seller_id=seller_id,
            sku=f"SKU-{n:03d}",
            title=title,
            category=category,
            base_price=price,
            currency="USD",
            stock_quantity=stock,
            status=status.value,
            tags=[ProductTag(name=tag) for tag in tags],
            created_at=_BASE_TIME + timedelta(minutes=n),
        )

    return _make


@pytest.fixture
def seed_products(
    session_factory: async_sessionmaker[AsyncSession],
) -> Callable[..., Awaitable[list[Product]]]:
    """Persist products in their own committed transaction."""

    async def _seed(*products: Product) -> list[Product]:
        async with session_factory() as session:
            session.add_all(products)
            await session.commit()
        return list(products)

    return _seed


@pytest.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """API client authenticated as ``SELLER_ID`` against the test database."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={
            "Authorization": f"Bearer {settings.marketplace_api_key}",
            settings.seller_header: SELLER_ID,
        },
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
async def anon_client(client: AsyncClient) -> AsyncGenerator[AsyncClient, None]:
    """API client without any authentication headers."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as anon:
        yield anon
