from datetime import date
from decimal import Decimal

import pytest

from pos_reports.draw_commands import ImageCommand, LineCommand
from pos_reports.formatting import format_currency
from pos_reports.layout_engine import Cursor, DocumentMeta, LayoutEngine, PageGeometry
from pos_reports.report_templates import ColumnSpec, ReportType, get_template
from pos_reports.reports import report_header


def sales_rows(n, name="Brake Pad Set", price=19.99):
    return [
        {
            "date": "2024-01-05",
            "product_name": name,
            "quantity": 1,
            "unit_price": price,
            "total": price,
        }
        for _ in range(n)
    ]


def render_sales(rows, context=None, logo=None):
    engine = LayoutEngine(get_template(ReportType.SALES))
    meta = DocumentMeta(
        title="Sales Report",
        header_lines=report_header("Sales Report", "January 1, 2024 - January 7, 2024"),
        generated_by="Admin",
        generated_on=date(2024, 1, 31),
    )
    return engine.render(rows, meta, logo=logo, context=context)


def column_header(page):
    return [(cmd.text, cmd.x) for cmd in page.texts("column_header")]


def test_rows_never_cross_threshold():
    doc = render_sales(sales_rows(100))
    threshold = doc.geometry.page_break_threshold

    assert doc.page_count == 3
    assert len(doc.row_placements) == 100
    for placement in doc.row_placements:
        assert placement.y_bottom <= threshold


def test_column_header_repeats_on_pages_with_rows():
    doc = render_sales(sales_rows(100))
    first = column_header(doc.page(0))
    assert [text for text, _ in first] == ["Date", "Product Name", "Qty", "Unit Price", "Total"]

    pages_with_rows = {p.page_index for p in doc.row_placements}
    for index in pages_with_rows:
        assert column_header(doc.page(index)) == first

    # Continuation pages start at the top margin with the header
    second_page_header = doc.page(1).texts("column_header")
    assert second_page_header[0].y == doc.geometry.top_margin


def test_first_page_row_capacity():
    # 20 top margin + 7 + 10 header lines + 8 column header = 45; 6mm rows up to 276
    doc = render_sales(sales_rows(100))
    on_first = [p for p in doc.row_placements if p.page_index == 0]
    assert len(on_first) == 38
    assert on_first[0].y_top == 45


def test_grand_total_equals_sum_of_line_totals():
    rows = sales_rows(75, price=19.99) + sales_rows(3, price=0.01)
    doc = render_sales(rows)
    expected = sum((Decimal(str(r["total"])) for r in rows), Decimal("0"))

    assert doc.totals.amount == expected
    assert doc.summary.grand_total == format_currency(expected)
    last_totals = [cmd.text for page in doc.pages for cmd in page.texts("totals")]
    assert last_totals == ["Grand Total:", format_currency(expected)]


def test_grand_total_moves_to_new_page_without_column_header():
    # 38 rows end at y=273, leaving no room for the grand total block
    doc = render_sales(sales_rows(38))

    assert doc.page_count == 2
    assert doc.page(1).texts("column_header") == []
    assert [cmd.text for cmd in doc.page(1).texts("totals")][0] == "Grand Total:"


def test_empty_report_has_one_page_with_defaults():
    doc = render_sales([], context={"total_revenue": 0, "total_transactions": 0})
    summary = doc.summary.as_dict()

    assert doc.page_count == 1
    assert column_header(doc.page(0))
    assert summary["Total Revenue"] == "PHP 0.00"
    assert summary["Avg Transaction Value"] == "PHP 0.00"
    assert summary["Best Selling Product"] == "N/A"
    assert summary["Total Items Sold"] == "0"
    footers = [cmd.text for cmd in doc.page(0).texts("footer")]
    assert footers == ["Generated by: Admin", "Report Generated: January 31, 2024", "Page 1 of 1"]


def test_every_page_gets_a_footer():
    doc = render_sales(sales_rows(100))
    for page in doc.pages:
        footer = [cmd.text for cmd in page.texts("footer")]
        assert f"Page {page.index + 1} of {doc.page_count}" in footer
        assert "Generated by: Admin" in footer


def test_long_product_name_is_truncated():
    doc = render_sales(sales_rows(1, name="P" * 40))
    row_texts = [cmd.text for cmd in doc.page(0).texts("row")]
    assert "P" * 30 + "..." in row_texts


def test_zebra_fill_on_even_rows():
    doc = render_sales(sales_rows(4))
    fills = doc.page(0).with_role("zebra")
    assert len(fills) == 2


def test_logo_is_drawn_when_given():
    doc = render_sales(sales_rows(1), logo=b"fake-image-bytes")
    images = [cmd for cmd in doc.page(0).commands if isinstance(cmd, ImageCommand)]
    assert len(images) == 1
    # Logo pushes the table down by its height plus the gap
    assert doc.row_placements[0].y_top == 45 + 22 + 5


def test_header_rule_under_column_labels():
    doc = render_sales(sales_rows(1))
    rules = [cmd for cmd in doc.page(0).with_role("column_header") if isinstance(cmd, LineCommand)]
    assert len(rules) == 1
    assert rules[0].x1 == 15 and rules[0].x2 == 195


def test_cursor_never_moves_up():
    cursor = Cursor(y=50)
    cursor.advance(10)
    assert cursor.y == 60
    with pytest.raises(ValueError):
        cursor.advance(-1)
    with pytest.raises(ValueError):
        cursor.move_to(20)


def test_select_pages():
    doc = render_sales(sales_rows(100))
    subset = doc.select_pages([2, 0])
    assert subset.page_count == 2
    assert [p.index for p in subset.pages] == [0, 1]
    assert subset.page(1).commands == doc.page(0).commands
    with pytest.raises(IndexError):
        doc.select_pages([5])


def test_column_spec_default_and_truncation():
    column = ColumnSpec("customer_name", "Customer", 80, max_chars=20, default="N/A")
    assert column.render(None) == "N/A"
    assert column.render("") == "N/A"
    assert column.render("C" * 25) == "C" * 20 + "..."


def test_unknown_report_type():
    with pytest.raises(ValueError):
        get_template("payroll")


def test_receipt_geometry_is_points():
    geometry = PageGeometry.a4_points()
    assert geometry.unit == 1.0
    assert round(geometry.page_width) == 595
    assert geometry.content_width == pytest.approx(geometry.page_width - 80)
