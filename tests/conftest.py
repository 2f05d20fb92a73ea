import sys
from datetime import date
from pathlib import Path

import pytest

# Ensure `src` is importable when running tests from repo root.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def generated_on():
    return date(2024, 1, 31)


@pytest.fixture
def two_orders():
    return [
        {
            "orderId": "SL0001",
            "orderDate": "2024-01-05T09:30:00Z",
            "status": "Completed",
            "totalAmount": 100.00,
            "items": [
                {"productName": "Brake Pad Set", "quantity": 2, "unitPrice": 50.00},
            ],
        },
        {
            "orderId": "SL0002",
            "orderDate": "2024-01-06",
            "status": "Partially Returned",
            "totalAmount": 250.50,
            "items": [
                {"productName": "Spark Plug", "quantity": 3, "unitPrice": 50.00},
                {"productName": "Oil Filter", "quantity": 1, "unitPrice": 100.50},
            ],
        },
    ]


@pytest.fixture
def receipt_data():
    return {
        "saleNumber": "SL240105001",
        "customerName": "Juan Dela Cruz",
        "items": [
            {"name": "Bosch Spark Plug", "quantity": 2, "price": 150.00, "serialNumbers": ["SN1", "SN2"]},
            {"name": "Castrol Engine Oil 1L", "quantity": 1, "price": 450.00},
        ],
        "totalAmount": 750.00,
        "paymentMethod": "Cash",
        "tenderedAmount": 1000.00,
        "changeAmount": 250.00,
        "createdAt": "2024-01-05T15:04:00",
    }


@pytest.fixture
def tiny_png(tmp_path):
    """1x1 PNG logo on disk."""
    import base64

    data = base64.b64decode(
        "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
    )
    path = tmp_path / "logo.png"
    path.write_bytes(data)
    return path
