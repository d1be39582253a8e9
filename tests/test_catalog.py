import pytest

from catalog import ProductRepository, filter_products, sort_products
from errors import NotFoundError
from schemas import Product

from conftest import make_product


@pytest.fixture
def products():
    return [Product(**p) for p in [
        make_product(1, "gpu", 39000, name="NVIDIA RTX 4060 Ti"),
        make_product(2, "cpu", 11500, name="amd Ryzen 5 5600"),
        make_product(3, "cpu", 18500, name="Intel Core i5"),
        make_product(4, "ram", 3800, name="Corsair Vengeance"),
    ]]


def test_filter_by_category(products):
    assert [p.id for p in filter_products(products, "cpu")] == [2, 3]
    assert len(filter_products(products, "all")) == 4
    assert len(filter_products(products, None)) == 4


def test_search_matches_name_or_category(products):
    assert [p.id for p in filter_products(products, q="RYZEN")] == [2]
    assert [p.id for p in filter_products(products, q="ram")] == [4]
    assert [p.id for p in filter_products(products, "cpu", q="intel")] == [3]


def test_sorting(products):
    assert [p.id for p in sort_products(products, "price-asc")] == [4, 2, 3, 1]
    assert [p.id for p in sort_products(products, "price-desc")] == [1, 3, 2, 4]
    assert [p.id for p in sort_products(products, "name-asc")] == [2, 4, 3, 1]
    assert [p.id for p in sort_products(products, "default")] == [1, 2, 3, 4]


def test_repository_reads_once_until_reload(db, write_products):
    write_products([make_product(1, "cpu", 100)])
    repo = ProductRepository(db)
    assert [p.id for p in repo.all()] == [1]

    write_products([make_product(1, "cpu", 100), make_product(2, "gpu", 200)])
    assert len(repo.all()) == 1
    assert len(repo.reload()) == 2
    assert repo.get(2).category == "gpu"


def test_repository_get_unknown_id(db):
    with pytest.raises(NotFoundError):
        ProductRepository(db).get(42)


def test_repository_skips_invalid_records(db, write_products):
    write_products([
        make_product(1, "cpu", 100),
        {"id": 2, "name": "Curved Monitor", "category": "monitor", "price": 999.5},
        {"id": 3, "category": "gpu"},
        make_product(4, "gpu", 300),
    ])
    assert [p.id for p in ProductRepository(db).all()] == [1, 4]
