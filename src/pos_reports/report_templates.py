"""Per-report-type layout templates: columns, fonts, row sizing and summaries."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from functools import partial
from typing import Any, Callable, List, Mapping, Optional, Tuple

from .draw_commands import RGB
from .formatting import (
    DEFAULT_CURRENCY, format_currency, format_date, format_quantity,
    to_decimal, to_number, to_text, truncate,
)
from .layout_engine import PageGeometry, SummaryStyle
from .totals import RunningTotals, Summary, SummaryLine


class ReportType(Enum):
    """Document types the engine can lay out."""
    SALES = "sales"
    INVENTORY = "inventory"
    RETURNS = "returns"
    RECEIPT = "receipt"


ROW_TINT: RGB = (245, 245, 245)
PANEL_TINT: RGB = (240, 240, 240)
RECEIPT_HEADER_TINT: RGB = (241, 243, 245)
RECEIPT_RULE: RGB = (222, 226, 230)


@dataclass
class ColumnSpec:
    """A table column: header label, x position and how values render."""
    key: str
    label: str
    x: float
    alignment: str = "left"  # "left", "center", "right"
    max_chars: Optional[int] = None
    default: Optional[str] = None  # used when the value is missing or empty
    formatter: Callable[[Any], str] = to_text
    wrap_width: Optional[float] = None  # wrap instead of single-line text

    def render(self, value: Any) -> str:
        if (value is None or value == "") and self.default is not None:
            value = self.default
        return truncate(self.formatter(value), self.max_chars)


Accumulator = Callable[[RunningTotals, Mapping[str, Any]], None]
Summarizer = Callable[[RunningTotals, Mapping[str, Any]], Summary]


@dataclass
class ReportTemplate:
    """Everything that differs between report types."""
    report_type: ReportType
    title: str
    columns: List[ColumnSpec]
    geometry: PageGeometry
    accumulate: Accumulator
    summarize: Summarizer
    currency: str = DEFAULT_CURRENCY

    # Document header
    logo_size: Tuple[float, float] = (30, 22)
    logo_gap: float = 5

    # Column header row
    header_font_size: float = 9
    header_height: float = 8
    header_baseline: float = 0
    header_rule_offset: Optional[float] = 3
    header_band_color: Optional[RGB] = None

    # Data rows
    row_font_size: float = 8
    row_height: float = 6
    row_baseline: float = 0
    zebra_color: Optional[RGB] = ROW_TINT
    zebra_offset: float = -4
    row_rule_color: Optional[RGB] = None

    # Content-sized rows (wrap column + optional sub-lines)
    min_row_height: float = 25
    line_height: float = 12
    sub_line_key: Optional[str] = None
    sub_line_prefix: str = "Serials: "
    sub_line_size: float = 8
    sub_line_height: float = 9.6
    sub_line_indent: float = 5
    row_padding: float = 10

    # Closing rule / grand total
    closing_rule: bool = True
    grand_total_label: Optional[str] = None
    grand_total_label_x: float = 130
    grand_total_value_x: float = 160
    grand_total_height: float = 11

    # Summary
    summary_style: SummaryStyle = SummaryStyle.PANEL
    summary_title: str = ""
    summary_title_align: str = "left"
    summary_title_size: float = 12
    summary_body_size: float = 10
    summary_height: float = 35
    summary_band_color: RGB = PANEL_TINT
    ledger_gap: float = 15
    ledger_label_x: float = 0
    ledger_value_x: float = 0
    closing_text: Optional[str] = None
    closing_y: float = 800

    @property
    def wrap_column(self) -> Optional[ColumnSpec]:
        for column in self.columns:
            if column.wrap_width is not None:
                return column
        return None


# ----------------------------------------------------------------------
# Sales
# ----------------------------------------------------------------------

def _accumulate_sales(totals: RunningTotals, row: Mapping[str, Any]):
    totals.add_row(amount=row.get("total"), quantity=row.get("quantity"))
    totals.tally(to_text(row.get("product_name")), row.get("quantity"))


def _summarize_sales(currency: str, totals: RunningTotals, context: Mapping[str, Any]) -> Summary:
    revenue = to_decimal(context.get("total_revenue"))
    transactions = int(to_number(context.get("total_transactions")))
    average = revenue / transactions if transactions > 0 else Decimal("0")
    money = partial(format_currency, currency=currency)
    return Summary(
        grand_total=money(totals.amount),
        fields=[
            ("Total Revenue", money(revenue)),
            ("Avg Transaction Value", money(average)),
            ("Total Items Sold", format_quantity(totals.quantity)),
            ("Best Selling Product", totals.most_frequent()),
            ("Total Transactions", str(transactions)),
        ],
    )


def get_sales_template(currency: str = DEFAULT_CURRENCY) -> ReportTemplate:
    """Sales line items: Date, Product Name, Qty, Unit Price, Total."""
    money = partial(format_currency, currency=currency)
    return ReportTemplate(
        report_type=ReportType.SALES,
        title="Sales Report",
        columns=[
            ColumnSpec("date", "Date", 15, formatter=format_date),
            ColumnSpec("product_name", "Product Name", 50, max_chars=30),
            ColumnSpec("quantity", "Qty", 110, formatter=format_quantity),
            ColumnSpec("unit_price", "Unit Price", 130, formatter=money),
            ColumnSpec("total", "Total", 160, formatter=money),
        ],
        geometry=PageGeometry.a4_millimetres(),
        accumulate=_accumulate_sales,
        summarize=partial(_summarize_sales, currency),
        currency=currency,
        grand_total_label="Grand Total:",
        summary_title="Sales Summary",
        summary_title_align="center",
        summary_title_size=10,
        summary_body_size=9,
        summary_height=35,
    )


# ----------------------------------------------------------------------
# Inventory
# ----------------------------------------------------------------------

LOW_STOCK = "Low Stock"


def _accumulate_inventory(totals: RunningTotals, row: Mapping[str, Any]):
    totals.add_row(quantity=row.get("current_stock"))
    totals.bump("low_stock", row.get("stock_status") == LOW_STOCK)


def _summarize_inventory(totals: RunningTotals, context: Mapping[str, Any]) -> Summary:
    return Summary(fields=[
        ("Total Items", str(totals.count)),
        ("Low Stock Items", str(totals.counter("low_stock"))),
        ("Total Remaining", format_quantity(totals.quantity)),
    ])


def get_inventory_template(currency: str = DEFAULT_CURRENCY) -> ReportTemplate:
    """Inventory: Product Name, Category, Brand, Remaining Qty, Status."""
    return ReportTemplate(
        report_type=ReportType.INVENTORY,
        title="Inventory Report",
        columns=[
            ColumnSpec("product_name", "Product Name", 20, max_chars=35),
            ColumnSpec("category", "Category", 70),
            ColumnSpec("brand", "Brand", 110),
            ColumnSpec("current_stock", "Remaining Qty", 150, formatter=format_quantity),
            ColumnSpec("stock_status", "Status", 175),
        ],
        geometry=PageGeometry.a4_millimetres(),
        accumulate=_accumulate_inventory,
        summarize=_summarize_inventory,
        currency=currency,
        summary_title="Inventory Summary",
        summary_height=30,
    )


# ----------------------------------------------------------------------
# Returns
# ----------------------------------------------------------------------

DEFECTIVE_REASON = "Defective/Damaged"


def _accumulate_returns(totals: RunningTotals, row: Mapping[str, Any]):
    totals.add_row(amount=row.get("refund_amount"))
    totals.bump("defective", row.get("return_reason") == DEFECTIVE_REASON)
    totals.bump("restocked", bool(row.get("restocked")))


def _summarize_returns(currency: str, totals: RunningTotals, context: Mapping[str, Any]) -> Summary:
    return Summary(fields=[
        ("Total Returns Processed", str(totals.count)),
        ("Total Refunded Amount", format_currency(totals.amount, currency)),
        ("Defective/Damaged Items", str(totals.counter("defective"))),
        ("Items Restocked", str(totals.counter("restocked"))),
    ])


def get_returns_template(currency: str = DEFAULT_CURRENCY) -> ReportTemplate:
    """Returns: Return ID, Order ID, Customer, Date, Reason, Amount."""
    return ReportTemplate(
        report_type=ReportType.RETURNS,
        title="Returns Report",
        columns=[
            ColumnSpec("return_id", "Return ID", 15),
            ColumnSpec("sale_number", "Order ID", 50),
            ColumnSpec("customer_name", "Customer", 80, max_chars=20, default="N/A"),
            ColumnSpec("return_date", "Date", 120, formatter=format_date),
            ColumnSpec("return_reason", "Reason", 150, max_chars=15, default="N/A"),
            ColumnSpec("refund_amount", "Amount", 180, formatter=partial(format_currency, currency=currency)),
        ],
        geometry=PageGeometry.a4_millimetres(),
        accumulate=_accumulate_returns,
        summarize=partial(_summarize_returns, currency),
        currency=currency,
        summary_title="Returns Summary",
        summary_height=35,
    )


# ----------------------------------------------------------------------
# Receipt
# ----------------------------------------------------------------------

def _accumulate_receipt(totals: RunningTotals, row: Mapping[str, Any]):
    totals.add_row(amount=row.get("amount"), quantity=row.get("quantity"))


def _summarize_receipt(currency: str, totals: RunningTotals, context: Mapping[str, Any]) -> Summary:
    """
    Ledger lines for the receipt.

    Subtotal is the sum of the printed line amounts rather than the sale's
    stored total, so it always matches the rows above it. TOTAL is the stored
    charged amount, falling back to the subtotal when that is missing or zero.
    """
    money = partial(format_currency, currency=currency)
    payment_method = to_text(context.get("payment_method"), "Cash")
    tendered = to_number(context.get("tendered_amount"))
    charged = to_number(context.get("total_amount"))

    lines = [SummaryLine("Subtotal:", money(totals.amount))]
    if payment_method.lower() == "cash" and tendered > 0:
        lines.append(SummaryLine("Cash Tendered:", money(tendered)))
        lines.append(SummaryLine("Change:", money(context.get("change_amount")), advance=18))
    lines.append(SummaryLine(
        "TOTAL:", money(charged if charged > 0 else totals.amount), bold=True, size=14, advance=24,
    ))
    return Summary(lines=lines)


def get_receipt_template(currency: str = DEFAULT_CURRENCY) -> ReportTemplate:
    """Official receipt: wrapped item descriptions with serial sub-lines."""
    geometry = PageGeometry.a4_points()
    amount_right = geometry.page_width - geometry.margin - 5
    unit_right = amount_right - 90
    qty_center = unit_right - 45
    name_left = geometry.margin + 5
    name_width = qty_center - 25 - name_left
    money = partial(format_currency, currency=currency)

    return ReportTemplate(
        report_type=ReportType.RECEIPT,
        title="Official Receipt",
        columns=[
            ColumnSpec("name", "Item Description", name_left, wrap_width=name_width),
            ColumnSpec("quantity", "Qty", qty_center, alignment="center", formatter=format_quantity),
            ColumnSpec("unit_price", "Unit Price", unit_right, alignment="right", formatter=money),
            ColumnSpec("amount", "Amount", amount_right, alignment="right", formatter=money),
        ],
        geometry=geometry,
        accumulate=_accumulate_receipt,
        summarize=partial(_summarize_receipt, currency),
        currency=currency,
        logo_size=(80, 59),
        logo_gap=10,
        header_font_size=10,
        header_height=20,
        header_baseline=14,
        header_rule_offset=None,
        header_band_color=RECEIPT_HEADER_TINT,
        row_font_size=10,
        row_baseline=16,
        zebra_color=None,
        row_rule_color=RECEIPT_RULE,
        sub_line_key="serials",
        closing_rule=False,
        summary_style=SummaryStyle.LEDGER,
        ledger_label_x=geometry.content_width - 100,
        ledger_value_x=amount_right,
        closing_text="Thank you for your purchase!",
        closing_y=800,
    )


TEMPLATE_BUILDERS = {
    ReportType.SALES: get_sales_template,
    ReportType.INVENTORY: get_inventory_template,
    ReportType.RETURNS: get_returns_template,
    ReportType.RECEIPT: get_receipt_template,
}


def get_template(report_type, currency: str = DEFAULT_CURRENCY) -> ReportTemplate:
    """Get a fresh template by report type (enum member or its value)."""
    try:
        report_type = ReportType(report_type)
    except ValueError:
        raise ValueError(
            f"Unknown report type {report_type!r}; expected one of "
            f"{', '.join(t.value for t in ReportType)}"
        ) from None
    return TEMPLATE_BUILDERS[report_type](currency)
