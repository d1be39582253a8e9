from decimal import Decimal

import pytest

from builder import PROFILE_RATIOS, allocate_build, best_under, ceilings, is_complete, ratios_for
from schemas import CATEGORIES, Product

from conftest import make_product


def test_gaming_example_picks_most_expensive_under_ceiling():
    products = [Product(**make_product(1, "cpu", 100)), Product(**make_product(2, "cpu", 200))]
    result = allocate_build(1000, "gaming", products)
    assert [p.id for p in result.build] == [2]
    assert result.total == 200


@pytest.mark.parametrize("usage", ["gaming", "editing", "office", None])
def test_tiny_budget_gives_empty_build(catalog, usage):
    result = allocate_build(10, usage, catalog)
    assert result.build == []
    assert result.total == 0


def test_zero_budget_is_not_an_error(catalog):
    assert allocate_build(0, "gaming", catalog).build == []


def test_unknown_profile_uses_default_ratios():
    assert ratios_for("office") == ratios_for(None) == ratios_for("default")
    assert ratios_for("gaming")["gpu"] == Decimal("0.40")
    assert ratios_for("editing")["ram"] == Decimal("0.12")


def test_every_profile_covers_the_seven_categories():
    for table in PROFILE_RATIOS.values():
        assert set(table) == set(CATEGORIES)


@pytest.mark.parametrize("budget", [25000, 60000, 100000, 150000, 333333])
@pytest.mark.parametrize("usage", ["gaming", "editing", "default"])
def test_selection_respects_ceilings_and_category_order(catalog, budget, usage):
    limits = ceilings(budget, usage)
    result = allocate_build(budget, usage, catalog)
    cats = [p.category for p in result.build]
    assert len(cats) == len(set(cats))
    assert cats == [c for c in CATEGORIES if c in cats]
    for p in result.build:
        assert p.price <= limits[p.category]
    assert result.total == sum(p.price for p in result.build)


def test_missing_category_is_omitted(catalog):
    no_gpu = [p for p in catalog if p.category != "gpu"]
    result = allocate_build(200000, "gaming", no_gpu)
    assert "gpu" not in [p.category for p in result.build]
    assert len(result.build) == 6


def test_ceiling_is_exact_decimal():
    assert ceilings(1000, "gaming")["cpu"] == Decimal("200")
    assert ceilings(100, "default")["gpu"] == Decimal("35")


def test_tie_keeps_catalog_order():
    products = [
        Product(**make_product(7, "ram", 4000, name="first")),
        Product(**make_product(3, "ram", 4000, name="second")),
    ]
    assert best_under(products, "ram", Decimal("5000")).name == "first"


def test_allocator_is_idempotent(catalog):
    first = allocate_build(120000, "editing", catalog)
    second = allocate_build(120000, "editing", catalog)
    assert first == second


def test_is_complete_needs_three_parts(catalog):
    assert not is_complete(allocate_build(10, "gaming", catalog))
    assert is_complete(allocate_build(200000, "gaming", catalog))
