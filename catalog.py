"""
Catalog store: a read-through product repository and the listing helpers.
"""
import logging
import threading
from typing import List, Optional

from pydantic import ValidationError

from database import JsonDatabase
from errors import NotFoundError
from schemas import Product

logger = logging.getLogger("quantum_build")


class ProductRepository:
    """Loads the products collection on first use and keeps the snapshot.

    Built once at start-up and handed to the request handlers; call
    ``reload()`` after the collection file changes (e.g. seeding).
    """

    def __init__(self, db: JsonDatabase):
        self.db = db
        self._products: Optional[List[Product]] = None
        self._lock = threading.Lock()

    def all(self) -> List[Product]:
        with self._lock:
            if self._products is None:
                self._products = self._load()
                logger.info("Loaded %d products from %s", len(self._products), self.db.path("products"))
            return list(self._products)

    def _load(self) -> List[Product]:
        products = []
        for doc in self.db.read("products"):
            try:
                products.append(Product(**doc))
            except (ValidationError, TypeError) as e:
                logger.error("Skipping bad product record %r: %s", doc, e)
        return products

    def get(self, product_id: int) -> Product:
        for p in self.all():
            if p.id == product_id:
                return p
        raise NotFoundError("Product not found")

    def reload(self) -> List[Product]:
        with self._lock:
            self._products = None
        return self.all()


def filter_products(products: List[Product], category: Optional[str] = None, q: Optional[str] = None) -> List[Product]:
    """Keep products in ``category`` ("all"/empty = any) whose name or category contains ``q``."""
    needle = (q or "").strip().lower()
    out = []
    for p in products:
        if category and category != "all" and p.category != category:
            continue
        if needle and needle not in p.name.lower() and needle not in p.category:
            continue
        out.append(p)
    return out


def sort_products(products: List[Product], sort: Optional[str] = None) -> List[Product]:
    if sort == "price-asc":
        return sorted(products, key=lambda p: p.price)
    if sort == "price-desc":
        return sorted(products, key=lambda p: p.price, reverse=True)
    if sort == "name-asc":
        return sorted(products, key=lambda p: p.name.casefold())
    return list(products)
