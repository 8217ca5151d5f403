"""Rule compiler for smart collections.

Translates an ordered list of conditions into a single SQL predicate over
the ``products`` table. Each well-formed condition becomes its own
clause and all clauses are AND-combined, so two conditions on the same
attribute (say two ``price greater_than``) intersect instead of one
overwriting the other.

The result is always scoped to the owning seller and to sellable
inventory, independently of any stock condition. Conditions with an
unknown type/operator combination or a missing/unparseable payload are
skipped: they contribute no clause and raise no error.
"""

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, DecimalException

import structlog
from sqlalchemy import ColumnElement, Select, and_, func

from marketplace.catalog.models import SELLABLE_STATUSES, Product, ProductTag
from marketplace.domain.conditions import Condition, ConditionOperator, ConditionType

logger = structlog.get_logger()

ClauseBuilder = Callable[[Condition], ColumnElement[bool] | None]

# Bounds of the 32-bit ``products.base_price`` column
MIN_PRICE_CENTS = -(2**31)
MAX_PRICE_CENTS = 2**31 - 1


# ============================================================================
# Payload Helpers
# ============================================================================


def _text(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _to_cents(value: str | None) -> int | None:
    """Parse a major-unit price string ("19.99") into cents.

    Returns None for unparseable values and for amounts the price column
    cannot hold.
    """
    text = _text(value)
    if text is None:
        return None
    try:
        amount = Decimal(text)
        if not amount.is_finite():
            return None
        cents = int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    except DecimalException:
        return None
    if not MIN_PRICE_CENTS <= cents <= MAX_PRICE_CENTS:
        return None
    return cents


# ============================================================================
# Clause Builders
# ============================================================================


def _tag_contains(condition: Condition) -> ColumnElement[bool] | None:
    # Case-insensitive membership in the product's tag set
    value = _text(condition.value)
    if value is None:
        return None
    return Product.tags.any(func.lower(ProductTag.name) == value.lower())


def _tag_equals(condition: Condition) -> ColumnElement[bool] | None:
    # Exact, case-sensitive tag match
    value = _text(condition.value)
    if value is None:
        return None
    return Product.tags.any(ProductTag.name == value)


def _price_greater_than(condition: Condition) -> ColumnElement[bool] | None:
    cents = _to_cents(condition.value)
    if cents is None:
        return None
    return Product.base_price > cents


def _price_less_than(condition: Condition) -> ColumnElement[bool] | None:
    cents = _to_cents(condition.value)
    if cents is None:
        return None
    return Product.base_price < cents


def _price_between(condition: Condition) -> ColumnElement[bool] | None:
    low = _to_cents(condition.min)
    high = _to_cents(condition.max)
    if low is None or high is None:
        return None
    return Product.base_price.between(low, high)


def _title_contains(condition: Condition) -> ColumnElement[bool] | None:
    value = _text(condition.value)
    if value is None:
        return None
    return Product.title.icontains(value, autoescape=True)


def _in_stock(condition: Condition) -> ColumnElement[bool]:
    return Product.stock_quantity > 0


def _out_of_stock(condition: Condition) -> ColumnElement[bool]:
    return Product.stock_quantity == 0


def _category_is(condition: Condition) -> ColumnElement[bool] | None:
    value = _text(condition.value)
    if value is None:
        return None
    return Product.category == value


_OPERATOR_BUILDERS: dict[tuple[str, str], ClauseBuilder] = {
    (ConditionType.TAG.value, ConditionOperator.CONTAINS.value): _tag_contains,
    (ConditionType.TAG.value, ConditionOperator.EQUALS.value): _tag_equals,
    (ConditionType.PRICE.value, ConditionOperator.GREATER_THAN.value): _price_greater_than,
    (ConditionType.PRICE.value, ConditionOperator.LESS_THAN.value): _price_less_than,
    (ConditionType.PRICE.value, ConditionOperator.BETWEEN.value): _price_between,
    (ConditionType.TITLE.value, ConditionOperator.CONTAINS.value): _title_contains,
    (ConditionType.STOCK.value, ConditionOperator.IN_STOCK.value): _in_stock,
    (ConditionType.STOCK.value, ConditionOperator.OUT_OF_STOCK.value): _out_of_stock,
}

# Types whose meaning does not depend on the operator
_TYPE_BUILDERS: dict[str, ClauseBuilder] = {
    ConditionType.CATEGORY.value: _category_is,
}


def _builder_for(condition: Condition) -> ClauseBuilder | None:
    builder = _OPERATOR_BUILDERS.get((condition.type, condition.operator))
    if builder is None:
        builder = _TYPE_BUILDERS.get(condition.type)
    return builder


# ============================================================================
# Compiled Filter
# ============================================================================


@dataclass
class RuleFilter:
    """Deferred catalog filter produced by ``compile_rules``.

    Nothing is executed until a repository applies the filter to a query.

    Attributes:
        owner_id: Seller the filter is scoped to.
        clauses: One clause per applied condition.
        applied: Conditions that produced a clause.
        skipped: Conditions that contributed nothing.
    """

    owner_id: str
    clauses: list[ColumnElement[bool]] = field(default_factory=list)
    applied: list[Condition] = field(default_factory=list)
    skipped: list[Condition] = field(default_factory=list)

    @property
    def scope_clauses(self) -> list[ColumnElement[bool]]:
        """Owner and sellable-inventory scope, always present."""
        return [
            Product.seller_id == self.owner_id,
            Product.status.in_(SELLABLE_STATUSES),
        ]

    def where_clause(self) -> ColumnElement[bool]:
        """Single conjunctive predicate: scope AND every applied condition."""
        return and_(*self.scope_clauses, *self.clauses)

    def apply(self, query: Select) -> Select:
        """Restrict a ``select`` over ``Product`` to matching rows."""
        return query.where(self.where_clause())


def compile_rules(rules: Sequence[Condition], owner_id: str) -> RuleFilter:
    """Compile conditions into a conjunctive catalog filter.

    Args:
        rules: Conditions in the order they were defined.
        owner_id: Seller whose catalog is being filtered.

    Returns:
        RuleFilter ready to apply to a product query.
    """
    compiled = RuleFilter(owner_id=owner_id)

    for condition in rules:
        builder = _builder_for(condition)
        clause = builder(condition) if builder else None
        if clause is None:
            compiled.skipped.append(condition)
            continue
        compiled.clauses.append(clause)
        compiled.applied.append(condition)

    if compiled.skipped:
        logger.debug(
            "Skipped unusable conditions",
            owner_id=owner_id,
            skipped=[c.to_dict() for c in compiled.skipped],
            applied_count=len(compiled.applied),
        )

    return compiled
