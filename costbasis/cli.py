"""Command-line entry point: cost basis report for a QIF investment account."""
from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Sequence

from .config import Config
from .exceptions import CostBasisError
from .export_reports import export_reports
from .holdings import run_transactions
from .logging_config import configure_logging
from .models import SecurityResult
from .qif import load_qif
from .report import render_security
from .supplement import check_sale_prices, load_supplement, merge_supplement

LOGGER = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Represents the structured outcome of a CLI invocation."""

    status: int = 0
    details: Dict[str, Any] = field(default_factory=dict)


def run_report(args: argparse.Namespace) -> CommandResult:
    try:
        transactions = load_qif(Path(args.qif_file), args.encoding)
        wash_sales = args.supp_file is not None
        if wash_sales:
            merge_supplement(transactions, load_supplement(Path(args.supp_file), args.encoding))
            check_sale_prices(transactions)
    except (CostBasisError, OSError) as exc:
        LOGGER.error("%s", exc)
        return CommandResult(status=1, details={"error": str(exc)})

    results: List[SecurityResult] = []
    failed: Dict[str, str] = {}
    for security, items in transactions.items():
        try:
            result = run_transactions(security, items, wash_sales=wash_sales)
        except CostBasisError as exc:
            LOGGER.error("Processing %s failed: %s", security, exc)
            failed[security] = str(exc)
            if not args.keep_going:
                return CommandResult(status=1, details={"results": results, "failed": failed})
            continue
        results.append(result)
        sys.stdout.write(render_security(result, show_lots=args.show_lots))
        sys.stdout.write("\n")

    outputs = {}
    if args.export_dir:
        formats = args.formats or Config.get_export_formats()
        outputs = export_reports(results, Path(args.export_dir), formats)

    return CommandResult(
        status=1 if failed else 0,
        details={"results": results, "failed": failed, "outputs": outputs},
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Compute the cost basis of sales in a QIF investment account export"
    )
    parser.add_argument("qif_file", help="QIF file exported from an investment account")
    parser.add_argument(
        "supp_file",
        nargs="?",
        default=None,
        help="Supplemental file with actual sale prices; enables wash-sale tracking",
    )
    parser.add_argument(
        "-l",
        "--show-lots",
        action="store_true",
        default=Config.SHOW_LOTS,
        help="Show share lots after each transaction",
    )
    parser.add_argument(
        "--export-dir",
        default=None,
        help="Directory to write sale lot and wash sale tables to",
    )
    parser.add_argument(
        "--format",
        dest="formats",
        action="append",
        choices=("csv", "parquet"),
        help="Export format(s); specify multiple times for more than one.",
    )
    parser.add_argument(
        "--encoding",
        default=None,
        help="Encoding of the input files (default: UTF-8, falling back to cp1252)",
    )
    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Report the remaining securities when one of them fails",
    )
    parser.add_argument(
        "--log-level",
        default=Config.LOG_LEVEL,
        help="Python logging level (default: INFO)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    result = run_report(args)
    return result.status


if __name__ == "__main__":
    raise SystemExit(main())
