from decimal import Decimal

from pos_reports.models import InventoryItem, Receipt, SaleOrder
from pos_reports.providers import (
    classify_stock, paginate, sales_summary, inventory_summary,
    shape_inventory_row, shape_sale_items, to_philippine_time,
)


def test_shape_sale_items_nets_out_returns():
    items = shape_sale_items([
        {"product_name": "Spark Plug", "brand": "NGK", "quantity": 4, "returned_quantity": 1, "price": 150},
        {"product_name": "Wiper Blade", "quantity": 2, "returned_quantity": 2, "price": 120},
        {"quantity": 1, "price": 80},
    ])

    assert [item.product_name for item in items] == ["Spark Plug", "N/A"]
    assert items[0].quantity == 3
    assert items[0].total_price == 450
    assert items[1].brand == "N/A"


def test_classify_stock():
    assert classify_stock(0) == "Out of Stock"
    assert classify_stock(-2) == "Out of Stock"
    assert classify_stock(9) == "Low Stock"
    assert classify_stock(10) == "In Stock"
    assert classify_stock(12, reorder_point=15) == "Low Stock"


def test_shape_inventory_row_defaults():
    item = shape_inventory_row({"name": "Alternator", "current_stock": "3", "reorder_point": None})
    assert item == InventoryItem(
        product_name="Alternator", category="N/A", brand="N/A",
        current_stock=3.0, stock_status="Low Stock", price=0.0,
    )


def test_paginate():
    page = paginate(25, page="3", limit="10")
    assert page.as_dict() == {
        "current_page": 3, "per_page": 10, "total": 25, "total_pages": 3, "from": 21, "to": 25,
    }
    assert paginate(0).total_pages == 0
    assert paginate(5, page=0, limit=0).current_page == 1


def test_to_philippine_time():
    assert to_philippine_time("2024-01-05T16:00:00Z") == "2024-01-06T00:00:00+08:00"
    assert to_philippine_time(None) is None


def test_sales_summary():
    orders = [
        SaleOrder.from_dict({"orderId": "1", "totalAmount": 100, "items": [{"productName": "A", "quantity": 1}]}),
        SaleOrder.from_dict({"orderId": "2", "total": 250.5, "items": []}),
    ]
    summary = sales_summary(orders)
    assert summary["totalSales"] == 2
    assert summary["totalRevenue"] == Decimal("350.50")
    assert summary["averageSale"] == Decimal("175.25")
    assert summary["totalItems"] == 1
    assert sales_summary([])["averageSale"] == 0


def test_inventory_summary():
    products = [
        InventoryItem("A", "C", "B", current_stock=2, stock_status="Low Stock", price=10),
        InventoryItem("B", "C", "B", current_stock=0, stock_status="Out of Stock", price=10),
        InventoryItem("C", "C", "B", current_stock=20, stock_status="In Stock", price=1.5),
    ]
    summary = inventory_summary(products)
    assert summary["lowStockProducts"] == 1
    assert summary["outOfStockProducts"] == 1
    assert summary["inStockProducts"] == 1
    assert summary["totalInventoryValue"] == Decimal("50.00")


def test_models_accept_snake_and_camel_case():
    camel = SaleOrder.from_dict({"orderId": "X", "orderDate": "2024-01-01", "totalAmount": 5})
    snake = SaleOrder.from_dict({"order_id": "X", "order_date": "2024-01-01", "total_amount": 5})
    assert camel == snake


def test_receipt_delivery_address():
    assert Receipt.from_dict({"saleNumber": "1"}).delivery_address == "In-Store Pickup"
    assert Receipt.from_dict({"saleNumber": "1", "shippingOption": "Delivery"}).delivery_address == "N/A"
    assert Receipt.from_dict({"saleNumber": "1", "address": "Pampanga"}).delivery_address == "Pampanga"
