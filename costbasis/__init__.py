"""
Cost basis engine for investment account transactions.

This package provides:
- FIFO and average-cost basis of each sale, split into short and long term
- Wash-sale detection and basis adjustment of replacement shares
- QIF export and supplemental sale confirmation readers
- Text report and tabular export of the results
"""
from costbasis.dates import holding_term, parse_qif_date, within_window
from costbasis.exceptions import (
    CostBasisError,
    DateParseError,
    LedgerError,
    MissingPriceError,
    OversellError,
    QifFormatError,
    SupplementError,
)
from costbasis.holdings import Holdings, run_transactions
from costbasis.models import (
    ActionKind,
    BuyEvent,
    Lot,
    LotsSnapshot,
    SaleLot,
    SecurityResult,
    SellEvent,
    SplitEvent,
    Term,
    Totals,
    Transaction,
    Valuation,
    WashAdjustment,
    WashNotice,
)
from costbasis.wash_sale import WashSaleAdjuster

__all__ = [
    "ActionKind",
    "BuyEvent",
    "CostBasisError",
    "DateParseError",
    "Holdings",
    "LedgerError",
    "Lot",
    "LotsSnapshot",
    "MissingPriceError",
    "OversellError",
    "QifFormatError",
    "SaleLot",
    "SecurityResult",
    "SellEvent",
    "SplitEvent",
    "SupplementError",
    "Term",
    "Totals",
    "Transaction",
    "Valuation",
    "WashAdjustment",
    "WashNotice",
    "WashSaleAdjuster",
    "holding_term",
    "parse_qif_date",
    "run_transactions",
    "within_window",
]
