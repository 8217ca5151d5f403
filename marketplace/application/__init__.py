"""Application layer module.

Contains application services (use cases) that orchestrate
domain logic, catalog resolution and persistence.
"""

from marketplace.application.collection_service import (
    CollectionService,
    get_collection_service,
)
from marketplace.application.resolution import MembershipResolver, PreviewResult

__all__ = [
    "CollectionService",
    "get_collection_service",
    "MembershipResolver",
    "PreviewResult",
]
