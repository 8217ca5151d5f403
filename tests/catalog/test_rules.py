"""Tests for the smart collection rule compiler, run against SQLite."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from marketplace.catalog.models import InventoryStatus
from marketplace.catalog.repository import ProductRepository
from marketplace.catalog.rules import compile_rules
from marketplace.domain.conditions import Condition

SELLER = "seller-1"


def rules(*raw: dict) -> list[Condition]:
    return [Condition.from_dict(item) for item in raw]


async def matching_titles(session: AsyncSession, conditions: list[Condition]) -> set[str]:
    products = await ProductRepository(session).find_matching(compile_rules(conditions, SELLER))
    return {product.title for product in products}


@pytest.fixture
async def catalog(seed_products, make_product):
    """A small mixed catalog for seller-1 plus one foreign product."""
    return await seed_products(
        make_product("Linen Beach Towel", price=5000, tags=("Summer", "beach"), category="Textiles"),
        make_product("Rattan Lamp", price=15000, tags=("summer",), category="Lighting"),
        make_product("Wool Throw", price=25000, tags=("winter",), category="Textiles"),
        make_product("Oak Stool", price=9000, tags=("summer",), stock=0),
        make_product("Beach Chair", price=7000, tags=("summer",), stock=3, status=InventoryStatus.LOW_STOCK),
        make_product("Rival Towel", price=5000, tags=("summer",), seller_id="seller-2"),
    )


class TestScope:
    """Owner and sellable scope apply to every rule set."""

    async def test_foreign_products_excluded(self, catalog, session) -> None:
        titles = await matching_titles(session, rules({"type": "tag", "operator": "contains", "value": "summer"}))
        assert "Rival Towel" not in titles

    async def test_out_of_stock_excluded(self, catalog, session) -> None:
        titles = await matching_titles(session, rules({"type": "tag", "operator": "contains", "value": "summer"}))
        assert titles == {"Linen Beach Towel", "Rattan Lamp", "Beach Chair"}

    async def test_out_of_stock_rule_cannot_override_scope(self, catalog, session) -> None:
        titles = await matching_titles(session, rules({"type": "stock", "operator": "out_of_stock"}))
        assert titles == set()


class TestConditions:
    """One test per supported type/operator."""

    async def test_tag_contains_is_case_insensitive(self, catalog, session) -> None:
        titles = await matching_titles(session, rules({"type": "tag", "operator": "contains", "value": "SUMMER"}))
        assert "Linen Beach Towel" in titles

    async def test_tag_equals_is_exact(self, catalog, session) -> None:
        titles = await matching_titles(session, rules({"type": "tag", "operator": "equals", "value": "Summer"}))
        assert titles == {"Linen Beach Towel"}

    async def test_title_contains(self, catalog, session) -> None:
        titles = await matching_titles(session, rules({"type": "title", "operator": "contains", "value": "beach"}))
        assert titles == {"Linen Beach Towel", "Beach Chair"}

    async def test_title_wildcards_are_literal(self, catalog, session) -> None:
        titles = await matching_titles(session, rules({"type": "title", "operator": "contains", "value": "%"}))
        assert titles == set()

    async def test_category(self, catalog, session) -> None:
        titles = await matching_titles(session, rules({"type": "category", "operator": "equals", "value": "Textiles"}))
        assert titles == {"Linen Beach Towel", "Wool Throw"}

    async def test_in_stock(self, catalog, session) -> None:
        titles = await matching_titles(session, rules({"type": "stock", "operator": "in_stock"}))
        assert titles == {"Linen Beach Towel", "Rattan Lamp", "Wool Throw", "Beach Chair"}

    async def test_price_less_than_is_strict(self, catalog, session) -> None:
        titles = await matching_titles(session, rules({"type": "price", "operator": "less_than", "value": "70"}))
        assert titles == {"Linen Beach Towel"}

    async def test_price_between_is_inclusive(self, catalog, session) -> None:
        titles = await matching_titles(
            session, rules({"type": "price", "operator": "between", "min": "50", "max": "150"})
        )
        assert titles == {"Linen Beach Towel", "Rattan Lamp", "Beach Chair"}


class TestPriceComposition:
    """Multiple price conditions intersect."""

    @pytest.fixture
    async def priced(self, seed_products, make_product):
        return await seed_products(
            make_product("Fifty", price=5000),
            make_product("One Fifty", price=15000),
            make_product("Two Fifty", price=25000),
        )

    async def test_range_from_two_bounds(self, priced, session) -> None:
        titles = await matching_titles(
            session,
            rules(
                {"type": "price", "operator": "greater_than", "value": "100"},
                {"type": "price", "operator": "less_than", "value": "200"},
            ),
        )
        assert titles == {"One Fifty"}

    async def test_two_lower_bounds_intersect(self, priced, session) -> None:
        titles = await matching_titles(
            session,
            rules(
                {"type": "price", "operator": "greater_than", "value": "200"},
                {"type": "price", "operator": "greater_than", "value": "100"},
            ),
        )
        assert titles == {"Two Fifty"}

    async def test_decimal_values(self, priced, session) -> None:
        titles = await matching_titles(
            session, rules({"type": "price", "operator": "greater_than", "value": "149.99"})
        )
        assert titles == {"One Fifty", "Two Fifty"}


class TestMalformedConditions:
    """Unusable conditions contribute nothing."""

    @pytest.mark.parametrize(
        "bad",
        [
            {"type": "colour", "operator": "equals", "value": "red"},
            {"type": "price", "operator": "between", "min": "10"},
            {"type": "price", "operator": "greater_than", "value": "cheap"},
            {"type": "tag", "operator": "contains"},
            {"type": "tag", "operator": "contains", "value": "   "},
            {"type": "stock", "operator": "sometimes"},
            {"type": "price", "operator": "greater_than", "value": "1e30"},
            {"type": "price", "operator": "less_than", "value": "99999999999999999999"},
            {"type": "price", "operator": "between", "min": "1e30", "max": "1e31"},
            {"type": "price", "operator": "greater_than", "value": "-99999999999"},
            {"type": "price", "operator": "less_than", "value": "9e999999999"},
        ],
    )
    async def test_skipped_condition_does_not_change_result(self, catalog, session, bad: dict) -> None:
        valid = {"type": "tag", "operator": "contains", "value": "summer"}
        expected = await matching_titles(session, rules(valid))
        assert await matching_titles(session, rules(valid, bad)) == expected

    def test_compile_reports_skipped(self) -> None:
        compiled = compile_rules(
            rules(
                {"type": "tag", "operator": "contains", "value": "summer"},
                {"type": "colour", "operator": "equals", "value": "red"},
            ),
            SELLER,
        )
        assert len(compiled.applied) == 1
        assert [c.type for c in compiled.skipped] == ["colour"]

    @pytest.mark.parametrize("value", ["1e30", "21474836.48", "-21474836.49"])
    def test_price_beyond_column_range_is_skipped(self, value: str) -> None:
        compiled = compile_rules(rules({"type": "price", "operator": "greater_than", "value": value}), SELLER)
        assert compiled.clauses == []
        assert len(compiled.skipped) == 1

    def test_price_at_column_limit_is_applied(self) -> None:
        compiled = compile_rules(
            rules({"type": "price", "operator": "less_than", "value": "21474836.47"}), SELLER
        )
        assert len(compiled.applied) == 1

    async def test_all_skipped_matches_sellable_catalog(self, catalog, session) -> None:
        titles = await matching_titles(session, rules({"type": "colour", "operator": "equals", "value": "red"}))
        assert titles == {"Linen Beach Towel", "Rattan Lamp", "Wool Throw", "Beach Chair"}


class TestRepositoryQueries:
    """Counting and ordering of matches."""

    async def test_count_matches_find(self, catalog, session) -> None:
        repo = ProductRepository(session)
        rule_filter = compile_rules(rules({"type": "tag", "operator": "contains", "value": "summer"}), SELLER)
        assert await repo.count_matching(rule_filter) == 3

    async def test_newest_first(self, catalog, session) -> None:
        repo = ProductRepository(session)
        rule_filter = compile_rules(rules({"type": "tag", "operator": "contains", "value": "summer"}), SELLER)
        products = await repo.find_matching(rule_filter)
        assert [p.title for p in products] == ["Beach Chair", "Rattan Lamp", "Linen Beach Towel"]

    async def test_limit(self, catalog, session) -> None:
        repo = ProductRepository(session)
        rule_filter = compile_rules(rules({"type": "stock", "operator": "in_stock"}), SELLER)
        assert len(await repo.find_matching(rule_filter, limit=2)) == 2
