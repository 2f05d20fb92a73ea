"""Shaping of raw sales/inventory/returns records into report rows.

These functions sit between the database rows returned by the reporting
endpoints and the layout engine: they apply defaults, net out returned
quantities, classify stock levels and compute the endpoint summaries.
"""

import math
from dataclasses import dataclass
from datetime import timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .formatting import NOT_AVAILABLE, DateLike, parse_date, to_decimal, to_number, to_text
from .models import InventoryItem, SaleItem, SaleOrder


# Orders whose status is one of these count towards sales figures
ALLOWED_SALE_STATUSES = ("Completed", "Partially Returned", "Pending", None)

DEFAULT_REORDER_POINT = 10
PHILIPPINE_TIME = timezone(timedelta(hours=8))


def shape_sale_item(raw: Mapping[str, Any]) -> Optional[SaleItem]:
    """
    Net out returned units from a raw sale item.

    Returns None for fully returned items; partially returned ones are
    repriced as unit price x remaining quantity.
    """
    quantity = to_number(raw.get("quantity"))
    returned = to_number(raw.get("returned_quantity"))
    net = quantity - returned
    if net <= 0:
        return None
    price = to_number(raw.get("price"))
    return SaleItem(
        product_name=to_text(raw.get("product_name"), NOT_AVAILABLE),
        brand=to_text(raw.get("brand"), NOT_AVAILABLE),
        quantity=net,
        unit_price=price,
        total_price=price * net,
    )


def shape_sale_items(raw_items: Iterable[Mapping[str, Any]]) -> List[SaleItem]:
    """Shape a sale's items, dropping the fully returned ones."""
    shaped = (shape_sale_item(raw) for raw in raw_items)
    return [item for item in shaped if item is not None]


def is_reportable_sale(order: SaleOrder) -> bool:
    return order.status in ALLOWED_SALE_STATUSES


def classify_stock(stock: Any, reorder_point: Any = DEFAULT_REORDER_POINT) -> str:
    """Stock status label used by the inventory report."""
    stock = to_number(stock)
    if stock <= 0:
        return "Out of Stock"
    if stock < to_number(reorder_point):
        return "Low Stock"
    return "In Stock"


def shape_inventory_row(raw: Mapping[str, Any]) -> InventoryItem:
    """Product + inventory join row to an InventoryItem with defaults applied."""
    stock = to_number(raw.get("current_stock"))
    reorder_point = raw.get("reorder_point")
    if reorder_point is None:
        reorder_point = DEFAULT_REORDER_POINT
    return InventoryItem(
        product_name=to_text(raw.get("name"), NOT_AVAILABLE),
        category=to_text(raw.get("category"), NOT_AVAILABLE),
        brand=to_text(raw.get("brand"), NOT_AVAILABLE),
        current_stock=stock,
        stock_status=to_text(raw.get("stock_status")) or classify_stock(stock, reorder_point),
        price=to_number(raw.get("price")),
    )


def to_philippine_time(value: DateLike) -> Optional[str]:
    """Convert a UTC timestamp to an ISO string at UTC+08:00."""
    parsed = parse_date(value)
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(PHILIPPINE_TIME).isoformat()


@dataclass
class Pagination:
    """Pagination block returned alongside a page of report rows."""
    current_page: int
    per_page: int
    total: int
    total_pages: int
    from_: int
    to: int

    def as_dict(self) -> Dict[str, int]:
        return {
            "current_page": self.current_page,
            "per_page": self.per_page,
            "total": self.total,
            "total_pages": self.total_pages,
            "from": self.from_,
            "to": self.to,
        }


def paginate(total: int, page: Any = 1, limit: Any = 10) -> Pagination:
    """Compute pagination metadata; ``page`` and ``limit`` may arrive as strings."""
    page = max(1, int(to_number(page)) or 1)
    limit = max(1, int(to_number(limit)) or 10)
    offset = (page - 1) * limit
    return Pagination(
        current_page=page,
        per_page=limit,
        total=total,
        total_pages=math.ceil(total / limit),
        from_=offset + 1,
        to=min(offset + limit, total),
    )


def sales_summary(orders: List[SaleOrder], total_sales: Optional[int] = None) -> Dict[str, Any]:
    """Summary figures for one page of the sales report endpoint."""
    revenue = sum((to_decimal(order.total_amount) for order in orders), to_decimal(0))
    return {
        "totalSales": len(orders) if total_sales is None else total_sales,
        "totalRevenue": revenue,
        "averageSale": revenue / len(orders) if orders else to_decimal(0),
        "totalItems": sum(len(order.items) for order in orders),
    }


def inventory_summary(products: List[InventoryItem], total_products: Optional[int] = None) -> Dict[str, Any]:
    """Summary figures for one page of the inventory report endpoint."""
    def count(status: str) -> int:
        return sum(1 for product in products if product.stock_status == status)

    return {
        "totalProducts": len(products) if total_products is None else total_products,
        "inStockProducts": count("In Stock"),
        "lowStockProducts": count("Low Stock"),
        "outOfStockProducts": count("Out of Stock"),
        "totalInventoryValue": sum(
            (to_decimal(product.current_stock * product.price) for product in products),
            to_decimal(0),
        ),
    }
