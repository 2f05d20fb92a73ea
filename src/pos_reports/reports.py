"""Report and receipt generation: prepares rows and runs the layout engine."""

import logging
from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

from .assets import load_logo_async
from .config import ReportConfig
from .draw_commands import LaidOutDocument
from .formatting import DateLike, NOT_AVAILABLE, format_datetime, format_period_text, to_decimal
from .layout_engine import DocumentMeta, HeaderLine, InfoBlock, LayoutEngine
from .models import InventoryItem, Receipt, ReturnRecord, SaleOrder
from .providers import is_reportable_sale
from .report_templates import ReportType, get_template
from .text_metrics import FONT_BOLD, FONT_REGULAR


logger = logging.getLogger(__name__)

Record = Union[Mapping[str, Any], Any]
Rows = List[Dict[str, Any]]


def _coerce(records: Iterable[Record], model) -> list:
    return [r if isinstance(r, model) else model.from_dict(r) for r in records or []]


def prepare_sales_rows(orders: Iterable[Record]) -> Tuple[Rows, Dict[str, Any]]:
    """
    Flatten reportable orders into line-item rows.

    Orders outside ALLOWED_SALE_STATUSES are skipped, and items whose net
    quantity is zero or negative are dropped before layout. Revenue and the
    transaction count come from the order totals, not the rows.
    """
    relevant = [order for order in _coerce(orders, SaleOrder) if is_reportable_sale(order)]

    rows: Rows = []
    for order in relevant:
        for item in order.items:
            if item.net_quantity <= 0:
                continue
            rows.append({
                "order_id": order.order_id,
                "customer_name": order.customer_name,
                "date": order.order_date,
                "product_name": item.product_name,
                "quantity": item.net_quantity,
                "unit_price": item.unit_price,
                "total": item.line_total,
            })

    revenue = sum((to_decimal(order.total_amount) for order in relevant), Decimal("0.00"))
    context = {
        "total_revenue": revenue,
        "total_transactions": len(relevant),
    }
    return rows, context


def prepare_inventory_rows(items: Iterable[Record]) -> Tuple[Rows, Dict[str, Any]]:
    return [asdict(item) for item in _coerce(items, InventoryItem)], {}


def prepare_returns_rows(returns: Iterable[Record]) -> Tuple[Rows, Dict[str, Any]]:
    return [asdict(record) for record in _coerce(returns, ReturnRecord)], {}


def prepare_receipt_rows(receipt: Receipt) -> Tuple[Rows, Dict[str, Any]]:
    rows = [
        {
            "name": item.name,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "amount": item.amount,
            "serials": item.serial_numbers,
        }
        for item in receipt.items
    ]
    context = {
        "payment_method": receipt.payment_method,
        "tendered_amount": receipt.tendered_amount,
        "change_amount": receipt.change_amount,
        "total_amount": receipt.total_amount,
    }
    return rows, context


def report_header(title: str, period_text: str) -> List[HeaderLine]:
    return [
        HeaderLine(title, font=FONT_BOLD, size=18, advance=7),
        HeaderLine(f"Period: {period_text}", font=FONT_REGULAR, size=10, advance=10),
    ]


def receipt_header(config: ReportConfig) -> List[HeaderLine]:
    return [
        HeaderLine(config.store_name, font=FONT_BOLD, size=12, advance=12),
        HeaderLine(config.store_address, size=10, advance=12),
        HeaderLine(config.store_contact, size=10, advance=25),
        HeaderLine("OFFICIAL RECEIPT", font=FONT_BOLD, size=16, advance=30),
    ]


def receipt_info(receipt: Receipt, cashier: str) -> InfoBlock:
    return InfoBlock(
        left=[
            ("Order #:", receipt.sale_number),
            ("Customer:", receipt.customer_name or NOT_AVAILABLE),
            ("Address:", receipt.delivery_address),
        ],
        right=[
            ("Date:", format_datetime(receipt.created_at)),
            ("Cashier:", cashier),
            ("Payment:", receipt.payment_method),
        ],
    )


def build_document(
    report_type: Union[ReportType, str],
    records: Any,
    generated_by: str,
    start_date: DateLike = None,
    end_date: DateLike = None,
    range_label: str = "Daily",
    logo: Optional[bytes] = None,
    config: Optional[ReportConfig] = None,
    generated_on: Optional[date] = None,
) -> LaidOutDocument:
    """
    Lay out one report or receipt synchronously.

    Args:
        report_type: ReportType or its value ("sales", "inventory", ...)
        records: Orders / inventory items / returns (dicts or model objects),
            or a single Receipt (or receipt dict) for ReportType.RECEIPT
        generated_by: Name stamped in the footer (cashier on receipts)
        start_date, end_date, range_label: Reporting period for the header
        logo: Encoded logo bytes; None omits the logo
        config: Currency and letterhead settings
        generated_on: Footer date; defaults to today

    Returns:
        The laid-out document, ready for ``to_pdf_bytes()``
    """
    config = config or ReportConfig()
    template = get_template(report_type, config.currency)
    report_type = template.report_type
    info = None

    if report_type is ReportType.RECEIPT:
        receipt = records if isinstance(records, Receipt) else Receipt.from_dict(records)
        rows, context = prepare_receipt_rows(receipt)
        header = receipt_header(config)
        info = receipt_info(receipt, generated_by)
    else:
        if report_type is ReportType.SALES:
            rows, context = prepare_sales_rows(records)
        elif report_type is ReportType.INVENTORY:
            rows, context = prepare_inventory_rows(records)
        else:
            rows, context = prepare_returns_rows(records)
        header = report_header(template.title, format_period_text(start_date, end_date, range_label))

    meta = DocumentMeta(
        title=template.title,
        header_lines=header,
        generated_by=generated_by,
        generated_on=generated_on or date.today(),
        info=info,
    )
    document = LayoutEngine(template).render(rows, meta, logo=logo, context=context)
    logger.info(
        "Built %s with %d row(s) on %d page(s)",
        template.title, len(rows), document.page_count,
    )
    return document


async def generate_sales_report(
    sales_data: Iterable[Record],
    start_date: DateLike,
    end_date: DateLike,
    admin_name: str,
    range_label: str = "Daily",
    config: Optional[ReportConfig] = None,
    generated_on: Optional[date] = None,
) -> LaidOutDocument:
    """Sales report over orders (each with line items)."""
    config = config or ReportConfig()
    logo = await load_logo_async(config.logo_path)
    return build_document(
        ReportType.SALES, sales_data, admin_name, start_date, end_date, range_label,
        logo=logo, config=config, generated_on=generated_on,
    )


async def generate_inventory_report(
    inventory_data: Iterable[Record],
    start_date: DateLike,
    end_date: DateLike,
    admin_name: str,
    config: Optional[ReportConfig] = None,
    generated_on: Optional[date] = None,
) -> LaidOutDocument:
    config = config or ReportConfig()
    logo = await load_logo_async(config.logo_path)
    return build_document(
        ReportType.INVENTORY, inventory_data, admin_name, start_date, end_date,
        logo=logo, config=config, generated_on=generated_on,
    )


async def generate_returns_report(
    returns_data: Iterable[Record],
    start_date: DateLike,
    end_date: DateLike,
    admin_name: str,
    config: Optional[ReportConfig] = None,
    generated_on: Optional[date] = None,
) -> LaidOutDocument:
    config = config or ReportConfig()
    logo = await load_logo_async(config.logo_path)
    return build_document(
        ReportType.RETURNS, returns_data, admin_name, start_date, end_date,
        logo=logo, config=config, generated_on=generated_on,
    )


async def generate_sale_receipt(
    receipt: Union[Receipt, Mapping[str, Any]],
    cashier: Optional[str] = None,
    config: Optional[ReportConfig] = None,
    generated_on: Optional[date] = None,
) -> LaidOutDocument:
    """Official receipt for a single sale; the cashier defaults to the configured admin."""
    config = config or ReportConfig()
    logo = await load_logo_async(config.logo_path)
    return build_document(
        ReportType.RECEIPT, receipt, cashier or config.default_admin,
        logo=logo, config=config, generated_on=generated_on,
    )
