"""Product catalog access.

The catalog itself is maintained elsewhere; this package provides the
models, the read repository, and the rule compiler that turns smart
collection conditions into catalog filters.
"""

from marketplace.catalog.generator import GeneratorConfig, ProductGenerator
from marketplace.catalog.models import InventoryStatus, Product, ProductTag
from marketplace.catalog.repository import ProductRepository
from marketplace.catalog.rules import RuleFilter, compile_rules

__all__ = [
    # Models
    "InventoryStatus",
    "Product",
    "ProductTag",
    # Repository
    "ProductRepository",
    # Rule compiler
    "RuleFilter",
    "compile_rules",
    # Generator
    "GeneratorConfig",
    "ProductGenerator",
]
