import json

import pytest
from fastapi.testclient import TestClient

from database import JsonDatabase
from main import create_app
from schemas import Product


def make_product(id, category, price, name=None, **extra):
    return {"id": id, "name": name or f"{category}-{id}", "category": category, "price": price, **extra}


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    d.mkdir()
    return d


@pytest.fixture
def db(data_dir):
    return JsonDatabase(str(data_dir))


@pytest.fixture
def write_products(data_dir):
    def _write(products):
        data_dir.mkdir(parents=True, exist_ok=True)
        (data_dir / "products.json").write_text(json.dumps(products), encoding="utf-8")
    return _write


@pytest.fixture
def app(data_dir):
    return create_app(data_dir=str(data_dir))


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def catalog():
    return [Product(**p) for p in [
        make_product(1, "cpu", 10000),
        make_product(2, "cpu", 20000),
        make_product(3, "gpu", 30000),
        make_product(4, "gpu", 45000),
        make_product(5, "motherboard", 9000),
        make_product(6, "ram", 4000),
        make_product(7, "storage", 5000),
        make_product(8, "psu", 4000),
        make_product(9, "cabinet", 3000),
    ]]
