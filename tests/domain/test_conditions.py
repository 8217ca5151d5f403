"""Tests for the condition model."""

import pytest

from marketplace.domain.conditions import Condition, parse_conditions
from marketplace.domain.exceptions import ConditionShapeError


class TestConditionFromDict:
    """Tests for building conditions from request payloads."""

    def test_numeric_payload_kept_as_string(self) -> None:
        """Numbers are stored the way sellers type them."""
        condition = Condition.from_dict({"type": "price", "operator": "greater_than", "value": 100})
        assert condition.value == "100"

    def test_between_bounds(self) -> None:
        """Between conditions carry min and max."""
        condition = Condition.from_dict(
            {"type": "price", "operator": "between", "min": "10", "max": 20.5}
        )
        assert condition.min == "10"
        assert condition.max == "20.5"
        assert condition.value is None

    def test_unknown_type_is_kept(self) -> None:
        """Shape is validated, meaning is not."""
        condition = Condition.from_dict({"type": "colour", "operator": "equals", "value": "red"})
        assert condition.type == "colour"

    def test_missing_operator_rejected(self) -> None:
        """Operator is part of the shape."""
        with pytest.raises(ConditionShapeError) as exc_info:
            Condition.from_dict({"type": "tag", "value": "summer"}, index=3)
        assert exc_info.value.details["index"] == 3

    def test_non_object_rejected(self) -> None:
        """A rule entry must be an object."""
        with pytest.raises(ConditionShapeError):
            Condition.from_dict("tag contains summer")

    def test_boolean_payload_rejected(self) -> None:
        """Booleans are not prices or tags."""
        with pytest.raises(ConditionShapeError):
            Condition.from_dict({"type": "price", "operator": "less_than", "value": True})

    def test_to_dict_omits_empty_payload(self) -> None:
        """Serialised form has no null keys."""
        condition = Condition(type="stock", operator="in_stock")
        assert condition.to_dict() == {"type": "stock", "operator": "in_stock"}


class TestConditionDescribe:
    """Tests for human-readable summaries."""

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ({"type": "tag", "operator": "contains", "value": "summer"}, 'Product tag contains "summer"'),
            ({"type": "tag", "operator": "equals", "value": "sale"}, 'Product tag is "sale"'),
            ({"type": "title", "operator": "contains", "value": "lamp"}, 'Product title contains "lamp"'),
            ({"type": "price", "operator": "less_than", "value": "20"}, "Price is less than $20"),
            (
                {"type": "price", "operator": "between", "min": "10", "max": "20"},
                "Price is between $10 and $20",
            ),
            ({"type": "stock", "operator": "in_stock"}, "Stock is in stock"),
            ({"type": "category", "operator": "equals", "value": "Lighting"}, 'Product category is "Lighting"'),
            ({"type": "stock", "operator": "out_of_stock"}, "Stock is out of stock"),
        ],
    )
    def test_describe(self, data: dict, expected: str) -> None:
        assert Condition.from_dict(data).describe() == expected

    @pytest.mark.parametrize(
        ("data", "expected"),
        [
            ({"type": "stock", "operator": "sometimes"}, "stock: sometimes"),
            ({"type": "tag", "operator": "starts_with", "value": "sum"}, "tag: starts_with sum"),
            ({"type": "title", "operator": "equals", "value": "Lamp"}, "title: equals Lamp"),
            ({"type": "price", "operator": "around", "min": "10", "max": "20"}, "price: around 10-20"),
            ({"type": "colour", "operator": "equals", "value": "red"}, "colour: equals red"),
        ],
    )
    def test_describe_unsupported_combination(self, data: dict, expected: str) -> None:
        assert Condition.from_dict(data).describe() == expected


class TestParseConditions:
    """Tests for parsing rule lists."""

    def test_none_is_empty(self) -> None:
        assert parse_conditions(None) == []

    def test_order_preserved(self) -> None:
        rules = parse_conditions(
            [
                {"type": "tag", "operator": "contains", "value": "a"},
                {"type": "tag", "operator": "contains", "value": "b"},
            ]
        )
        assert [rule.value for rule in rules] == ["a", "b"]

    def test_not_a_list(self) -> None:
        with pytest.raises(ConditionShapeError):
            parse_conditions({"type": "tag"})
