"""API layer module.

Contains FastAPI routers and request/response schemas.
"""

from marketplace.api.collections import router as collections_router
from marketplace.api.health import router as health_router

__all__ = [
    "collections_router",
    "health_router",
]
