"""Tabular export of realized sale lots and wash sales."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Sequence

import pandas as pd

from .models import SecurityResult

LOGGER = logging.getLogger(__name__)

SALE_LOT_COLUMNS = [
    "security",
    "sale_date",
    "method",
    "acquired",
    "shares",
    "price",
    "amount",
    "term",
]
WASH_SALE_COLUMNS = [
    "security",
    "sale_date",
    "method",
    "replacement_date",
    "shares",
    "amount",
]


def sale_lots_frame(results: Sequence[SecurityResult]) -> pd.DataFrame:
    """One row per lot slice per valuation method for every sale."""
    rows = []
    for result in results:
        for sale in result.sales:
            for valuation in (sale.fifo, sale.average):
                for lot in valuation.lots:
                    rows.append(
                        {
                            "security": result.security,
                            "sale_date": sale.date,
                            "method": valuation.method,
                            "acquired": lot.date,
                            "shares": lot.shares,
                            "price": lot.price,
                            "amount": lot.amount,
                            "term": lot.term.value,
                        }
                    )
    return pd.DataFrame(rows, columns=SALE_LOT_COLUMNS)


def wash_sales_frame(results: Sequence[SecurityResult]) -> pd.DataFrame:
    """One row per replacement lot or purchase that absorbed a disallowed loss."""
    rows = []
    for result in results:
        for sale in result.sales:
            for valuation in (sale.fifo, sale.average):
                for notice in valuation.wash_notices:
                    rows.append(
                        {
                            "security": result.security,
                            "sale_date": sale.date,
                            "method": valuation.method,
                            "replacement_date": notice.date,
                            "shares": notice.shares,
                            "amount": notice.amount,
                        }
                    )
    return pd.DataFrame(rows, columns=WASH_SALE_COLUMNS)


ARTIFACT_BUILDERS: Dict[str, Callable[[Sequence[SecurityResult]], pd.DataFrame]] = {
    "sale_lots": sale_lots_frame,
    "wash_sales": wash_sales_frame,
}


def write_frame(df: pd.DataFrame, path: Path, fmt: str) -> Path:
    if fmt == "parquet":
        df.to_parquet(path, index=False)
    elif fmt == "csv":
        df.to_csv(path, index=False)
    else:
        raise ValueError(f"Unsupported format: {fmt}")
    return path


def export_reports(
    results: Sequence[SecurityResult],
    output_dir: Path,
    formats: Iterable[str],
) -> dict[str, Path]:
    output_dir.mkdir(parents=True, exist_ok=True)
    data_frames = {name: builder(results) for name, builder in ARTIFACT_BUILDERS.items()}

    outputs: dict[str, Path] = {}
    for fmt in formats:
        for name, df in data_frames.items():
            path = output_dir / f"{name}.{fmt}"
            write_frame(df, path, fmt)
            outputs[f"{name}_{fmt}"] = path
            LOGGER.info("Wrote %s (%d rows)", path.name, len(df))

    return outputs
