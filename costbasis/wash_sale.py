"""
Wash-sale adjustment.

A loss on a sale is disallowed when replacement shares of the same security
are bought within 30 days before or after the sale. The disallowed loss is
added to the basis of the replacement shares. Replacements are looked for
first among the lots still held (purchases before the sale, and what is
left of the lots the sale came from), then among the purchases that follow
the sale in the transaction history.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, Sequence, Tuple, Union

from .config import SHARE_TOLERANCE
from .dates import within_window
from .logging_config import get_logger
from .models import ActionKind, Lot, Transaction, Valuation, WashNotice

if TYPE_CHECKING:
    from .holdings import Holdings

logger = get_logger(__name__)

Replacement = Union[Lot, Transaction]


class WashSaleAdjuster:
    """Applies the wash-sale rule for one sell transaction."""

    def __init__(self, holdings: Holdings, remaining: Sequence[Transaction], sale: Transaction):
        """
        Args:
            holdings: Holdings of the security, after the sale was matched
            remaining: Transactions of the security not yet applied, in order
            sale: The sell transaction; its amount is the actual proceeds
        """
        self.holdings = holdings
        self.remaining = remaining
        self.sale = sale

    def _replacements(self) -> Iterator[Tuple[Replacement, float]]:
        """Yield each replacement lot or future purchase with the shares it can absorb."""
        needed = self.sale.shares

        for lot in self.holdings.lots:
            if lot.shares == 0:
                continue
            if needed < SHARE_TOLERANCE:
                return
            if not within_window(lot.date, self.sale.date):
                continue
            # Shares already used to wash an earlier loss are never reused.
            washable = min(lot.shares - lot.washed, needed)
            if washable < SHARE_TOLERANCE:
                continue
            yield lot, washable
            needed -= washable

        for trans in self.remaining:
            if needed < SHARE_TOLERANCE:
                return
            if trans.kind is not ActionKind.BUY:
                continue
            if not within_window(trans.date, self.sale.date):
                continue
            washable = min(trans.shares - trans.wash.washed_shares, needed)
            if washable < SHARE_TOLERANCE:
                continue
            yield trans, washable
            needed -= washable

    def _loss(self, valuation: Valuation) -> float:
        return valuation.total_basis - self.sale.amount

    def wash_fifo(self, valuation: Valuation, loss: float) -> None:
        """
        Raise the price of replacement lots by the disallowed loss.

        The wash amount is spread evenly over all the shares of a lot, not just
        the washed ones; IRS publications do not say how this is to be done.
        """
        loss_per_share = loss / self.sale.shares
        notices: List[WashNotice] = []

        for target, shares in self._replacements():
            wash_amount = shares * loss_per_share
            notices.append(WashNotice(date=target.date, amount=wash_amount, shares=shares))
            if isinstance(target, Lot):
                target.price += wash_amount / target.shares
            else:
                target.wash.price_adjust += wash_amount / target.shares
                logger.debug("Deferred FIFO wash price adjustment on %s", target.date)

        self._record(valuation, notices)

    def wash_average(self, valuation: Valuation, loss: float) -> None:
        """Raise the total basis by the disallowed loss absorbed by held lots."""
        loss_per_share = loss / self.sale.shares
        notices: List[WashNotice] = []
        held_total = 0.0

        for target, shares in self._replacements():
            wash_amount = shares * loss_per_share
            notices.append(WashNotice(date=target.date, amount=wash_amount, shares=shares))
            if isinstance(target, Lot):
                held_total += wash_amount
            else:
                target.wash.basis_adjust += wash_amount
                logger.debug("Deferred average-cost wash basis adjustment on %s", target.date)

        self.holdings.total_basis += held_total
        self._record(valuation, notices)

    def _record(self, valuation: Valuation, notices: List[WashNotice]) -> None:
        total = sum(notice.amount for notice in notices)
        if total > SHARE_TOLERANCE:
            valuation.wash_notices = notices
            valuation.wash_total = total
            logger.info(
                "Wash sale on %s (%s): %.2f disallowed across %d replacement(s)",
                self.sale.date,
                valuation.method,
                total,
                len(notices),
            )

    def mark_washed(self) -> None:
        """Record the replacement shares used by this sale so no later loss reuses them."""
        for target, shares in self._replacements():
            if isinstance(target, Lot):
                target.washed += shares
            else:
                target.wash.washed_shares += shares

    def adjust(self, fifo: Valuation, average: Valuation) -> None:
        """
        Run both valuations through the wash-sale rule.

        Each valuation has its own realized loss. The replacement shares are
        marked once per sale, after both searches, so that a lot is not
        counted as a replacement twice for the same sale.
        """
        got_loss = False

        loss = self._loss(fifo)
        if loss > SHARE_TOLERANCE:
            got_loss = True
            self.wash_fifo(fifo, loss)

        loss = self._loss(average)
        if loss > SHARE_TOLERANCE:
            got_loss = True
            self.wash_average(average, loss)

        if got_loss:
            self.mark_washed()
