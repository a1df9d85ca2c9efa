"""
Holdings ledger.

Keeps the lots of one security in acquisition order together with running
totals of basis and shares, and applies buy, sell and split transactions
to them in chronological order.
"""
from __future__ import annotations

from typing import List, Sequence

from .config import SHARE_TOLERANCE, SPLIT_RATIO_SCALE
from .dates import format_date
from .exceptions import LedgerError
from .logging_config import get_logger
from .models import (
    ActionKind,
    BuyEvent,
    Event,
    Lot,
    LotsSnapshot,
    SecurityResult,
    SellEvent,
    SplitEvent,
    Totals,
    Transaction,
)
from .sale_matcher import match_sale, value_sale
from .wash_sale import WashSaleAdjuster

logger = get_logger(__name__)


class Holdings:
    """Lots and totals for one security."""

    def __init__(self, wash_sales: bool = False) -> None:
        """
        Args:
            wash_sales: Apply the wash-sale rule to sales whose actual proceeds
                are known (only when a supplemental confirmation file was read)
        """
        self.lots: List[Lot] = []
        self.total_basis = 0.0
        self.total_shares = 0.0
        self.wash_sales = wash_sales

    def totals(self) -> Totals:
        return Totals(shares=self.total_shares, basis=self.total_basis)

    def snapshot(self) -> LotsSnapshot:
        return LotsSnapshot(lots=tuple((lot.date, lot.shares) for lot in self.lots if lot.shares != 0))

    def apply_buy(self, trans: Transaction) -> BuyEvent:
        if trans.shares == 0:
            raise LedgerError(f"Purchase on {format_date(trans.date)} has no shares")

        cost_basis = (trans.amount or 0.0) + trans.commission
        lot = Lot(date=trans.date, price=cost_basis / trans.shares, shares=trans.shares)
        self.lots.append(lot)
        self.total_basis += cost_basis
        self.total_shares += trans.shares

        # Wash-sale adjustments queued by earlier sales.
        self.total_basis += trans.wash.basis_adjust
        lot.price += trans.wash.price_adjust
        lot.washed = trans.wash.washed_shares

        return BuyEvent(
            date=trans.date,
            shares=trans.shares,
            price=trans.price,
            amount=trans.amount,
            totals=self.totals(),
        )

    def apply_split(self, trans: Transaction) -> SplitEvent:
        ratio = trans.shares / SPLIT_RATIO_SCALE
        if ratio == 0:
            raise LedgerError(f"Stock split on {format_date(trans.date)} has no ratio")
        for lot in self.lots:
            lot.shares *= ratio
            lot.price /= ratio
        self.total_shares *= ratio
        logger.debug("Applied %s for 1 split on %s", ratio, trans.date)
        return SplitEvent(date=trans.date, ratio=ratio, totals=self.totals())

    def apply_sell(self, trans: Transaction, remaining: Sequence[Transaction]) -> SellEvent:
        average_basis = self.total_basis / self.total_shares if self.total_shares else 0.0

        slices = match_sale(self.lots, trans.date, trans.shares)

        self.total_basis -= average_basis * trans.shares
        self.total_shares -= trans.shares
        if abs(self.total_shares) < SHARE_TOLERANCE:
            self.total_shares = 0.0
        if abs(self.total_basis) < SHARE_TOLERANCE:
            self.total_basis = 0.0

        fifo, average = value_sale(slices, average_basis)
        if self.wash_sales and trans.amount is not None:
            WashSaleAdjuster(self, remaining, trans).adjust(fifo, average)

        return SellEvent(
            date=trans.date,
            shares=trans.shares,
            price=trans.price,
            amount=trans.amount,
            totals=self.totals(),
            fifo=fifo,
            average=average,
        )

    def apply(self, trans: Transaction, remaining: Sequence[Transaction]) -> List[Event]:
        """Apply one transaction; ``remaining`` are the ones after it, in order."""
        kind = trans.kind
        if kind is ActionKind.BUY:
            event: Event = self.apply_buy(trans)
        elif kind is ActionKind.SELL:
            event = self.apply_sell(trans, remaining)
        elif kind is ActionKind.SPLIT:
            event = self.apply_split(trans)
        else:
            return []
        return [event, self.snapshot()]


def run_transactions(
    security: str,
    transactions: Sequence[Transaction],
    wash_sales: bool = False,
) -> SecurityResult:
    """Apply a security's transactions oldest first and collect the events."""
    holdings = Holdings(wash_sales=wash_sales)
    result = SecurityResult(security=security)
    transactions = list(transactions)
    logger.info("Processing %d transaction(s) for %s", len(transactions), security)
    for index, trans in enumerate(transactions):
        result.events.extend(holdings.apply(trans, transactions[index + 1:]))
    return result
