"""Synthetic POS records for demos and tests."""

from datetime import date, datetime, timedelta
from typing import List
import numpy as np
from faker import Faker

from .providers import classify_stock


CATEGORIES = ["Engine Parts", "Brakes", "Suspension", "Electrical", "Lubricants", "Accessories"]
BRANDS = ["Bosch", "Denso", "NGK", "Brembo", "Monroe", "Castrol", "Motul", "KYB"]
PARTS = [
    "Spark Plug", "Brake Pad Set", "Oil Filter", "Air Filter", "Shock Absorber",
    "Timing Belt", "Alternator", "Radiator Hose", "Wiper Blade", "Engine Oil 1L",
    "Clutch Disc", "Fuel Pump", "Headlight Bulb", "Battery 12V", "CV Joint Boot",
]
RETURN_REASONS = ["Defective/Damaged", "Wrong Item", "Changed Mind", "Not Compatible", "Other"]
PAYMENT_METHODS = ["Cash", "GCash", "Card"]
ORDER_STATUSES = ["Completed", "Completed", "Completed", "Partially Returned", "Pending", "Cancelled"]


def make_faker(rng: np.random.Generator) -> Faker:
    """Faker instance seeded from the numpy generator."""
    fake = Faker()
    fake.seed_instance(int(rng.integers(0, 2**31)))
    return fake


def _product_name(rng: np.random.Generator) -> str:
    return f"{rng.choice(BRANDS)} {rng.choice(PARTS)}"


def _random_day(start: date, end: date, rng: np.random.Generator) -> date:
    span = max((end - start).days, 0)
    return start + timedelta(days=int(rng.integers(0, span + 1)))


def generate_sales_orders(
    start: date,
    end: date,
    rng: np.random.Generator,
    num_orders: int = 20,
) -> List[dict]:
    """Sales orders with 1-4 items each; some items are partly or fully returned."""
    fake = make_faker(rng)
    orders = []

    for i in range(num_orders):
        items = []
        for _ in range(int(rng.integers(1, 5))):
            quantity = int(rng.integers(1, 6))
            # About one item in ten has units returned
            returned = int(rng.integers(0, quantity + 1)) if rng.random() < 0.1 else 0
            items.append({
                "productName": _product_name(rng),
                "brand": str(rng.choice(BRANDS)),
                "quantity": quantity,
                "returnedQuantity": returned,
                "unitPrice": round(float(rng.uniform(80, 4500)), 2),
            })

        total = sum(item["unitPrice"] * (item["quantity"] - item["returnedQuantity"]) for item in items)
        orders.append({
            "orderId": f"SL{start:%y%m%d}{i + 1:04d}",
            "orderDate": _random_day(start, end, rng).isoformat(),
            "customerName": fake.name(),
            "paymentMethod": str(rng.choice(PAYMENT_METHODS)),
            "status": str(rng.choice(ORDER_STATUSES)),
            "totalAmount": round(total, 2),
            "items": items,
        })

    orders.sort(key=lambda order: order["orderDate"])
    return orders


def generate_inventory(rng: np.random.Generator, num_items: int = 30) -> List[dict]:
    """Product rows with stock levels spread across all three stock statuses."""
    rows = []
    for _ in range(num_items):
        reorder_point = int(rng.choice([5, 10, 15]))
        stock = int(rng.choice([0, int(rng.integers(1, reorder_point)), int(rng.integers(reorder_point, 200))],
                               p=[0.1, 0.25, 0.65]))
        rows.append({
            "productName": _product_name(rng),
            "category": str(rng.choice(CATEGORIES)),
            "brand": str(rng.choice(BRANDS)),
            "currentStock": stock,
            "stockStatus": classify_stock(stock, reorder_point),
            "price": round(float(rng.uniform(80, 4500)), 2),
        })
    return rows


def generate_returns(
    start: date,
    end: date,
    rng: np.random.Generator,
    num_returns: int = 12,
) -> List[dict]:
    fake = make_faker(rng)
    rows = []
    for i in range(num_returns):
        rows.append({
            "return_id": f"RET-{i + 1:05d}",
            "sale_number": f"SL{int(rng.integers(100000, 999999))}",
            # Walk-in customers are sometimes unnamed
            "customer_name": fake.name() if rng.random() > 0.15 else None,
            "return_date": _random_day(start, end, rng).isoformat(),
            "return_reason": str(rng.choice(RETURN_REASONS)),
            "refund_amount": round(float(rng.uniform(100, 6000)), 2),
            "restocked": bool(rng.random() < 0.5),
        })
    return rows


def generate_receipt(rng: np.random.Generator, num_items: int = 4) -> dict:
    """A single sale ready for the receipt generator."""
    fake = make_faker(rng)
    items = []
    for _ in range(num_items):
        quantity = int(rng.integers(1, 4))
        serials = []
        if rng.random() < 0.4:
            serials = [f"SN{int(rng.integers(10**7, 10**8))}" for _ in range(quantity)]
        items.append({
            "name": _product_name(rng),
            "quantity": quantity,
            "price": round(float(rng.uniform(80, 4500)), 2),
            "serialNumbers": serials,
        })

    total = round(sum(item["price"] * item["quantity"] for item in items), 2)
    payment = str(rng.choice(PAYMENT_METHODS))
    tendered = float(np.ceil(total / 500) * 500) if payment == "Cash" else 0.0
    delivered = rng.random() < 0.3

    return {
        "saleNumber": f"SL{datetime.now():%y%m%d}{int(rng.integers(1, 9999)):04d}",
        "customerName": fake.name(),
        "items": items,
        "totalAmount": total,
        "paymentMethod": payment,
        "tenderedAmount": tendered,
        "changeAmount": round(tendered - total, 2) if tendered else 0.0,
        "address": fake.address().replace("\n", ", ") if delivered else "",
        "shippingOption": "Delivery" if delivered else "In-Store Pickup",
        "createdAt": datetime.now().replace(microsecond=0).isoformat(),
    }
