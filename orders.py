"""
Order recorder: validates a checkout body and appends it to orders.json.
"""
import logging
import uuid
from datetime import datetime, timezone

from cart import Cart
from catalog import ProductRepository
from database import JsonDatabase
from errors import NotFoundError, ValidationError
from schemas import Order, OrderRequest

logger = logging.getLogger("quantum_build")


def price_items(catalog: ProductRepository, body: OrderRequest) -> Cart:
    """Cart built from catalog products; only id and qty come from the client."""
    cart = Cart()
    for item in body.items:
        try:
            product = catalog.get(item.id)
        except NotFoundError:
            raise NotFoundError(f"Product {item.id} not found")
        cart.add(product, qty=item.quantity)
    return cart


def record_order(db: JsonDatabase, catalog: ProductRepository, body: OrderRequest) -> Order:
    if not body.items:
        raise ValidationError("Cart is empty")
    if not body.user or not body.address:
        raise ValidationError("Missing user or address details")

    cart = price_items(catalog, body)
    extra = {k: v for k, v in (body.model_extra or {}).items() if k not in Order.model_fields}
    order = Order(
        id=uuid.uuid4().hex,
        date=datetime.now(timezone.utc).isoformat(),
        status="Pending",
        user=body.user,
        address=body.address,
        items=cart.items,
        total=cart.total,
        **extra,
    )
    db.create_document("orders", order.model_dump(by_alias=True))
    logger.info("Order %s placed: %d items, total %s", order.id, cart.count, order.total)
    return order
