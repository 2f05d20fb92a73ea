"""Command-line interface for generating POS reports and receipts."""

import argparse
import asyncio
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Optional
import numpy as np
import yaml

from .config import ReportConfig, load_config
from .draw_commands import LaidOutDocument
from .report_templates import ReportType
from .reports import (
    generate_inventory_report, generate_returns_report,
    generate_sale_receipt, generate_sales_report,
)
from .sample_data import generate_inventory, generate_receipt, generate_returns, generate_sales_orders


def load_records(path: Path) -> Any:
    """Load records from a YAML or JSON file."""
    with open(path, "r") as f:
        data = yaml.safe_load(f)
    return [] if data is None else data


def sample_records(report_type: ReportType, start: date, end: date, config: ReportConfig) -> Any:
    """Synthetic records for the requested report type."""
    rng = np.random.default_rng(config.seed)
    if report_type is ReportType.SALES:
        return generate_sales_orders(start, end, rng, num_orders=config.sample_rows)
    if report_type is ReportType.INVENTORY:
        return generate_inventory(rng, num_items=config.sample_rows)
    if report_type is ReportType.RETURNS:
        return generate_returns(start, end, rng, num_returns=config.sample_rows)
    return generate_receipt(rng)


async def build_report(
    report_type: ReportType,
    records: Any,
    start: date,
    end: date,
    range_label: str,
    admin: str,
    config: ReportConfig,
) -> LaidOutDocument:
    if report_type is ReportType.SALES:
        return await generate_sales_report(records, start, end, admin, range_label, config=config)
    if report_type is ReportType.INVENTORY:
        return await generate_inventory_report(records, start, end, admin, config=config)
    if report_type is ReportType.RETURNS:
        return await generate_returns_report(records, start, end, admin, config=config)
    return await generate_sale_receipt(records, admin, config=config)


def default_output(report_type: ReportType, end: date, config: ReportConfig) -> Path:
    return config.out_dir / f"{report_type.value}_report_{end.isoformat()}.pdf"


def main(argv: Optional[list] = None):
    """Main entry point for CLI."""
    parser = argparse.ArgumentParser(
        description="POS report and receipt PDF generator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "report",
        choices=[t.value for t in ReportType],
        help="Document type to generate",
    )
    parser.add_argument(
        "--input",
        type=Path,
        help="YAML or JSON file with the records (a single sale for receipts)",
    )
    parser.add_argument(
        "--sample",
        type=int,
        help="Generate N synthetic records instead of reading --input",
    )
    parser.add_argument(
        "--start",
        type=date.fromisoformat,
        help="Period start (YYYY-MM-DD), default 7 days before --end",
    )
    parser.add_argument(
        "--end",
        type=date.fromisoformat,
        help="Period end (YYYY-MM-DD), default today",
    )
    parser.add_argument(
        "--range",
        dest="range_label",
        choices=["Daily", "Weekly", "Monthly"],
        default="Daily",
        help="Reporting granularity shown in the header",
    )
    parser.add_argument(
        "--admin",
        help="Name printed as 'Generated by' (cashier on receipts)",
    )
    parser.add_argument(
        "--out",
        type=Path,
        help="Output PDF path",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for --sample (overrides config)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Debug logging",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Load config
    config = load_config(args.config)

    # Override with CLI args
    if args.sample:
        config.sample_rows = args.sample
    if args.seed is not None:
        config.seed = args.seed

    report_type = ReportType(args.report)
    end = args.end or date.today()
    start = args.start or end - timedelta(days=7)
    admin = args.admin or config.default_admin

    if args.input:
        records = load_records(args.input)
    else:
        records = sample_records(report_type, start, end, config)

    document = asyncio.run(
        build_report(report_type, records, start, end, args.range_label, admin, config)
    )
    out_path = document.save(args.out or default_output(report_type, end, config))

    print(f"\n{document.title} complete!")
    print(f"  Rows: {len(document.row_placements)}")
    print(f"  Pages: {document.page_count}")
    if document.summary is not None:
        for label, value in document.summary.as_dict().items():
            print(f"  {label}: {value}")
    print(f"  Output: {out_path}")

    return out_path


if __name__ == "__main__":
    main()
