from stats import compute_stats

from conftest import make_product


def test_stats_summary():
    orders = [
        {"id": "o1", "date": "2025-01-01T10:00:00+00:00", "total": 1000},
        {"id": "o2", "date": "2025-03-01T10:00:00+00:00", "total": 2500},
        {"id": "o3", "date": "2025-02-01T10:00:00Z"},
    ]
    users = [{"id": "u1"}, {"id": "u2"}]
    products = [make_product(i, "cpu", 100 * i, stock=i) for i in range(1, 8)]

    stats = compute_stats(orders, products, users)

    assert stats.totalOrders == 3
    assert stats.totalRevenue == 3500
    assert stats.activeCustomers == 2
    assert [o["id"] for o in stats.recentOrders] == ["o2", "o3", "o1"]
    assert [row.stock for row in stats.inventory] == [1, 2, 3, 4, 5]


def test_recent_orders_capped_at_five():
    orders = [{"id": str(i), "date": f"2025-01-{i:02d}T00:00:00+00:00", "total": 1} for i in range(1, 10)]
    stats = compute_stats(orders, [], [])
    assert [o["id"] for o in stats.recentOrders] == ["9", "8", "7", "6", "5"]


def test_inventory_stock_is_deterministic():
    products = [make_product(1, "gpu", 500)]
    first = compute_stats([], products, [])
    second = compute_stats([], products, [])
    assert first.inventory == second.inventory
    assert first.inventory[0].stock == 0


def test_empty_store():
    stats = compute_stats([], [], [])
    assert stats.totalOrders == 0
    assert stats.totalRevenue == 0
    assert stats.recentOrders == []
    assert stats.inventory == []
