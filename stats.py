"""
Admin dashboard numbers, recomputed from the collections on every request.
"""
from datetime import datetime, timezone

from database import JsonDatabase
from schemas import InventoryRow, Stats

RECENT_ORDERS = 5
INVENTORY_ROWS = 5


def _order_time(order: dict) -> datetime:
    raw = order.get("date") or ""
    try:
        ts = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    except ValueError:
        return datetime.min.replace(tzinfo=timezone.utc)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def _amount(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def compute_stats(orders, products, users) -> Stats:
    revenue = sum(_amount(o.get("total")) for o in orders)
    recent = sorted(orders, key=_order_time, reverse=True)[:RECENT_ORDERS]
    inventory = [
        InventoryRow(name=p.get("name", ""), category=p.get("category", ""), stock=p.get("stock") or 0)
        for p in products[:INVENTORY_ROWS]
    ]
    return Stats(
        totalOrders=len(orders),
        totalRevenue=revenue,
        activeCustomers=len(users),
        recentOrders=recent,
        inventory=inventory,
    )


def admin_stats(db: JsonDatabase) -> Stats:
    return compute_stats(db.read("orders"), db.read("products"), db.read("users"))
