"""Condition model for smart collections.

A condition is one declarative predicate (type, operator and payload).
This module only validates the *shape* of a condition; whether a
type/operator combination means anything is decided by the rule
compiler, which quietly skips combinations it does not understand.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Self

from marketplace.domain.base import ValueObject
from marketplace.domain.exceptions import ConditionShapeError


class ConditionType(str, Enum):
    """Product attribute a condition inspects."""

    TAG = "tag"
    PRICE = "price"
    TITLE = "title"
    STOCK = "stock"
    CATEGORY = "category"


class ConditionOperator(str, Enum):
    """Comparison a condition applies."""

    CONTAINS = "contains"
    EQUALS = "equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"
    BETWEEN = "between"
    IN_STOCK = "in_stock"
    OUT_OF_STOCK = "out_of_stock"


_PAYLOAD_FIELDS = ("value", "min", "max")


@dataclass(frozen=True)
class Condition(ValueObject):
    """A single smart-collection predicate.

    Payload values are kept as strings, matching how sellers type them
    into the rule builder; numeric interpretation happens at compile time.

    Attributes:
        type: Condition type (see ``ConditionType``); unknown types are kept.
        operator: Operator (see ``ConditionOperator``); unknown operators are kept.
        value: Single-value payload.
        min: Lower bound for ``between``.
        max: Upper bound for ``between``.
        field: Optional attribute hint carried through unchanged.
    """

    type: str
    operator: str
    value: str | None = None
    min: str | None = None
    max: str | None = None
    field: str | None = None

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> Self:
        """Build a condition from a request payload.

        Args:
            data: Mapping with ``type``, ``operator`` and optional payload.
            index: Position in the rule list, used in error details.

        Returns:
            Condition instance.

        Raises:
            ConditionShapeError: If ``data`` is not condition-shaped.
        """
        if isinstance(data, Condition):
            return data
        if not isinstance(data, dict):
            raise ConditionShapeError(index, "expected an object")

        for key in ("type", "operator"):
            raw = data.get(key)
            if not isinstance(raw, str) or not raw.strip():
                raise ConditionShapeError(index, f"'{key}' must be a non-empty string")

        payload: dict[str, str | None] = {}
        for key in _PAYLOAD_FIELDS:
            payload[key] = _coerce_payload(data.get(key), key, index)

        hint = data.get("field")
        if hint is not None and not isinstance(hint, str):
            raise ConditionShapeError(index, "'field' must be a string")

        return cls(
            type=data["type"].strip(),
            operator=data["operator"].strip(),
            field=hint,
            **payload,
        )

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary, omitting empty payload keys."""
        result = {"type": self.type, "operator": self.operator}
        for key in ("field", *_PAYLOAD_FIELDS):
            val = getattr(self, key)
            if val is not None:
                result[key] = val
        return result

    def describe(self) -> str:
        """Human-readable summary shown in the rule builder."""
        if self.type == ConditionType.TAG:
            if self.operator == ConditionOperator.CONTAINS:
                return f'Product tag contains "{self.value}"'
            if self.operator == ConditionOperator.EQUALS:
                return f'Product tag is "{self.value}"'
        if self.type == ConditionType.TITLE and self.operator == ConditionOperator.CONTAINS:
            return f'Product title contains "{self.value}"'
        # Category matches on value whatever the operator
        if self.type == ConditionType.CATEGORY:
            return f'Product category is "{self.value}"'
        if self.type == ConditionType.PRICE:
            if self.operator == ConditionOperator.LESS_THAN:
                return f"Price is less than ${self.value}"
            if self.operator == ConditionOperator.GREATER_THAN:
                return f"Price is greater than ${self.value}"
            if self.operator == ConditionOperator.BETWEEN:
                return f"Price is between ${self.min} and ${self.max}"
        if self.type == ConditionType.STOCK:
            if self.operator == ConditionOperator.IN_STOCK:
                return "Stock is in stock"
            if self.operator == ConditionOperator.OUT_OF_STOCK:
                return "Stock is out of stock"
        if self.value is not None:
            payload = self.value
        elif self.min is not None or self.max is not None:
            payload = f"{self.min}-{self.max}"
        else:
            payload = ""
        return f"{self.type}: {self.operator} {payload}".rstrip()


def _coerce_payload(raw: Any, key: str, index: int) -> str | None:
    if raw is None:
        return None
    # bool is an int subclass; a checkbox value is not a price
    if isinstance(raw, bool):
        raise ConditionShapeError(index, f"'{key}' must be a string or number")
    if isinstance(raw, (int, float)):
        return str(raw)
    if isinstance(raw, str):
        return raw
    raise ConditionShapeError(index, f"'{key}' must be a string or number")


def parse_conditions(raw: Any) -> list[Condition]:
    """Parse a list of condition payloads.

    Args:
        raw: Sequence of condition mappings (or ``None`` for no rules).

    Returns:
        Conditions in their original order.

    Raises:
        ConditionShapeError: If the list or any entry is malformed.
    """
    if raw is None:
        return []
    if not isinstance(raw, (list, tuple)):
        raise ConditionShapeError(0, "rules must be a list")
    return [Condition.from_dict(item, index) for index, item in enumerate(raw)]
