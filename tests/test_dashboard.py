from warehouse_service.app.crud.inventory import stock_transactions_crud
from warehouse_service.app.crud.overview import dashboard_crud
from warehouse_service.app.schemas.inventory.stock_transactions_schemas import StockTransactionCreate


def test_stats_scenario(db, make_item):
    make_item("CAM", price=1500000, stock=50, min_level=10)
    make_item("LAP", price=3200000, stock=5, min_level=8)

    stats = dashboard_crud.compute_stats(db)

    assert stats.totalValue == 91_000_000
    assert stats.totalUnits == 55
    assert stats.lowStockCount == 1
    assert stats.skuCount == 2


def test_stats_on_empty_inventory(db):
    stats = dashboard_crud.compute_stats(db)
    assert (stats.totalValue, stats.totalUnits, stats.lowStockCount, stats.skuCount) == (0, 0, 0, 0)


def test_low_stock_list_needs_threshold_and_active(db, make_item):
    make_item("A", stock=2, min_level=5)
    make_item("B", stock=0, min_level=0)
    make_item("C", stock=1, min_level=5, active=False)

    assert [i.sku for i in dashboard_crud.get_low_stock_items(db)] == ["A"]


def test_categories_and_top_outbound(db, make_item, staff_user):
    a = make_item("A", category="Tools", stock=100)
    b = make_item("B", category="Tools", stock=100)
    make_item("C", stock=100)

    for item, qty in ((a, 3), (b, 7), (a, 1)):
        stock_transactions_crud.create_transaction(db, StockTransactionCreate(
            type="outbound", items=[{"item_id": item.id, "qty": qty}]), staff_user)

    categories = {c.name: c.value for c in dashboard_crud.get_category_breakdown(db)}
    assert categories == {"Tools": 2, "Uncategorized": 1}

    top = dashboard_crud.get_top_outbound(db, limit=1)
    assert [(t.sku, t.qty) for t in top] == [("B", 7)]
