"""Record types handed to the layout engine by the report data provider."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from .formatting import DateLike, NOT_AVAILABLE, to_number, to_text


IN_STORE_PICKUP = "In-Store Pickup"


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first non-empty value among ``keys``."""
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return default


@dataclass
class SaleItem:
    """A single line item of a sale."""
    product_name: str
    quantity: float
    unit_price: float
    total_price: Optional[float] = None
    returned_quantity: float = 0.0
    brand: str = NOT_AVAILABLE

    @property
    def net_quantity(self) -> float:
        """Quantity still sold after returns."""
        return self.quantity - self.returned_quantity

    @property
    def line_total(self) -> float:
        """Stored total, repriced as unit price x net quantity once units are returned."""
        if self.total_price is not None and self.returned_quantity <= 0:
            return self.total_price
        return self.unit_price * self.net_quantity

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SaleItem":
        total = _pick(data, "totalPrice", "total_price", "subtotal")
        return cls(
            product_name=to_text(_pick(data, "productName", "product_name", "name"), NOT_AVAILABLE),
            quantity=to_number(data.get("quantity")),
            unit_price=to_number(_pick(data, "unitPrice", "unit_price", "price")),
            total_price=None if total is None else to_number(total),
            returned_quantity=to_number(_pick(data, "returnedQuantity", "returned_quantity")),
            brand=to_text(data.get("brand"), NOT_AVAILABLE),
        )


@dataclass
class SaleOrder:
    """A sale with its line items, as returned by the sales report endpoint."""
    order_id: str
    order_date: DateLike
    total_amount: float
    status: Optional[str] = None
    customer_name: str = ""
    payment_method: str = ""
    items: List[SaleItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SaleOrder":
        raw_items = data.get("items") or []
        items = [
            item if isinstance(item, SaleItem) else SaleItem.from_dict(item)
            for item in raw_items
        ]
        return cls(
            order_id=to_text(_pick(data, "orderId", "order_id", "sale_number")),
            order_date=_pick(data, "orderDate", "order_date", "created_at"),
            total_amount=to_number(_pick(data, "totalAmount", "total_amount", "total")),
            status=data.get("status"),
            customer_name=to_text(_pick(data, "customerName", "customer_name")),
            payment_method=to_text(_pick(data, "paymentMethod", "payment_method", "payment")),
            items=items,
        )


@dataclass
class InventoryItem:
    """One product row of the inventory report."""
    product_name: str
    category: str
    brand: str
    current_stock: float
    stock_status: str
    price: float = 0.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InventoryItem":
        from .providers import classify_stock

        stock = to_number(_pick(data, "currentStock", "current_stock", "stock"))
        status = _pick(data, "stockStatus", "stock_status")
        if status is None:
            reorder_point = _pick(data, "reorderPoint", "reorder_point", default=10)
            status = classify_stock(stock, to_number(reorder_point))
        return cls(
            product_name=to_text(_pick(data, "productName", "product_name", "name"), NOT_AVAILABLE),
            category=to_text(data.get("category"), NOT_AVAILABLE),
            brand=to_text(data.get("brand"), NOT_AVAILABLE),
            current_stock=stock,
            stock_status=str(status),
            price=to_number(data.get("price")),
        )


@dataclass
class ReturnRecord:
    """A processed return."""
    return_id: str
    sale_number: str
    return_date: DateLike
    refund_amount: float
    customer_name: Optional[str] = None
    return_reason: Optional[str] = None
    restocked: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReturnRecord":
        return cls(
            return_id=to_text(_pick(data, "return_id", "returnId")),
            sale_number=to_text(_pick(data, "sale_number", "saleNumber", "orderId")),
            return_date=_pick(data, "return_date", "returnDate"),
            refund_amount=to_number(_pick(data, "refund_amount", "refundAmount")),
            customer_name=_pick(data, "customer_name", "customerName"),
            return_reason=_pick(data, "return_reason", "returnReason"),
            restocked=bool(data.get("restocked")),
        )


@dataclass
class ReceiptItem:
    """A receipt line; serial numbers print as an italic sub-line."""
    name: str
    quantity: float
    unit_price: float
    serial_numbers: List[str] = field(default_factory=list)

    @property
    def amount(self) -> float:
        return self.unit_price * self.quantity

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReceiptItem":
        serials = _pick(data, "serialNumbers", "serial_numbers", default=[])
        return cls(
            name=to_text(_pick(data, "name", "product_name", "productName")),
            quantity=to_number(data.get("quantity")),
            unit_price=to_number(_pick(data, "price", "unitPrice", "unit_price")),
            serial_numbers=[str(s) for s in serials],
        )


@dataclass
class Receipt:
    """Everything printed on an official receipt."""
    sale_number: str
    customer_name: Optional[str] = None
    items: List[ReceiptItem] = field(default_factory=list)
    total_amount: float = 0.0
    payment_method: str = "Cash"
    tendered_amount: float = 0.0
    change_amount: float = 0.0
    address: str = ""
    shipping_option: str = IN_STORE_PICKUP
    created_at: DateLike = field(default_factory=datetime.now)

    @property
    def delivery_address(self) -> str:
        if self.address:
            return self.address
        if self.shipping_option == IN_STORE_PICKUP:
            return IN_STORE_PICKUP
        return NOT_AVAILABLE

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Receipt":
        kwargs: Dict[str, Any] = {
            "sale_number": to_text(_pick(data, "saleNumber", "sale_number")),
            "customer_name": _pick(data, "customerName", "customer_name"),
            "items": [
                item if isinstance(item, ReceiptItem) else ReceiptItem.from_dict(item)
                for item in data.get("items") or []
            ],
            "total_amount": to_number(_pick(data, "totalAmount", "total_amount")),
            "payment_method": to_text(_pick(data, "paymentMethod", "payment_method"), "Cash"),
            "tendered_amount": to_number(_pick(data, "tenderedAmount", "tendered_amount")),
            "change_amount": to_number(_pick(data, "changeAmount", "change_amount")),
            "address": to_text(data.get("address")),
            "shipping_option": to_text(
                _pick(data, "shippingOption", "shipping_option"), IN_STORE_PICKUP
            ),
        }
        created_at = _pick(data, "createdAt", "created_at")
        if created_at is not None:
            kwargs["created_at"] = created_at
        return cls(**kwargs)
