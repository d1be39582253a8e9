"""
Cart store.

The cart belongs to the client: it is a list of products with quantities,
saved as JSON under one key of whatever key-value store the client has.
The server rebuilds a Cart from order items to total them.
"""
import json
from typing import Iterable, List

from schemas import CartItem, Product


class Cart:
    def __init__(self, items: Iterable[CartItem] = ()):
        self.items: List[CartItem] = []
        for item in items:
            self._merge(item)

    def _merge(self, item: CartItem) -> None:
        for existing in self.items:
            if existing.id == item.id:
                existing.quantity += item.quantity
                return
        self.items.append(item.model_copy())

    def add(self, product: Product, qty: int = 1) -> CartItem:
        if qty < 1:
            raise ValueError("quantity must be at least 1")
        data = product.model_dump(include=set(Product.model_fields))
        self._merge(CartItem(**data, quantity=qty))
        return self.get(product.id)

    def get(self, product_id: int) -> CartItem:
        for item in self.items:
            if item.id == product_id:
                return item
        raise KeyError(product_id)

    def remove(self, product_id: int) -> None:
        self.items = [i for i in self.items if i.id != product_id]

    def clear(self) -> None:
        self.items = []

    @property
    def count(self) -> int:
        return sum(i.quantity for i in self.items)

    @property
    def total(self) -> int:
        return sum(i.line_total for i in self.items)

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    def to_json(self) -> str:
        return json.dumps([i.model_dump(by_alias=True) for i in self.items])

    @classmethod
    def from_json(cls, raw) -> "Cart":
        # a missing or corrupt stored cart starts empty
        if not raw:
            return cls()
        try:
            return cls(CartItem(**d) for d in json.loads(raw))
        except (ValueError, TypeError):
            return cls()
