from decimal import Decimal

import pytest

from pos_reports.totals import RunningTotals, Summary, SummaryLine


def test_amount_is_cent_exact():
    totals = RunningTotals()
    for _ in range(3):
        totals.add_row(amount=0.1, quantity=1)

    assert totals.amount == Decimal("0.30")
    assert totals.quantity == 3
    assert totals.count == 3


def test_most_frequent_tie_goes_to_first_seen():
    totals = RunningTotals()
    totals.tally("Brake Pad Set", 2)
    totals.tally("Spark Plug", 2)
    assert totals.most_frequent() == "Brake Pad Set"

    totals.tally("Spark Plug", 1)
    assert totals.most_frequent() == "Spark Plug"


def test_most_frequent_empty():
    assert RunningTotals().most_frequent() == "N/A"


def test_counters():
    totals = RunningTotals()
    totals.bump("defective", False)
    totals.bump("defective", True)
    assert totals.counter("defective") == 1
    assert totals.counter("restocked") == 0


def test_closed_totals_are_read_only():
    totals = RunningTotals().close()
    with pytest.raises(RuntimeError):
        totals.add_row(amount=1)
    with pytest.raises(RuntimeError):
        totals.tally("x")


def test_summary_as_dict():
    summary = Summary(
        grand_total="PHP 1.00",
        fields=[("Total Items", "3")],
        lines=[SummaryLine("TOTAL:", "PHP 1.00", bold=True)],
    )
    assert summary.as_dict() == {"Total Items": "3", "TOTAL": "PHP 1.00", "Grand Total": "PHP 1.00"}
