"""FIFO matching of a sale against held lots, and the two ways of valuing it."""
from __future__ import annotations

import datetime as dt
from dataclasses import replace
from typing import List, Sequence, Tuple

from .config import SHARE_TOLERANCE
from .dates import format_date, holding_term
from .exceptions import OversellError
from .logging_config import get_logger
from .models import Lot, SaleLot, Valuation

logger = get_logger(__name__)

FIFO = "fifo"
AVERAGE = "average"


def match_sale(lots: Sequence[Lot], sale_date: dt.date, shares: float) -> List[SaleLot]:
    """
    Consume ``shares`` from ``lots`` oldest first and return the slices taken.

    Lots are decremented in place. Regardless of the valuation method the
    lots have to be walked one by one to find the holding period of each slice.
    """
    remaining = shares
    slices: List[SaleLot] = []

    for lot in lots:
        # Lots that were sold off earlier stay in the queue at zero.
        if lot.shares == 0:
            continue

        term = holding_term(lot.date, sale_date)
        if remaining <= lot.shares:
            slices.append(SaleLot(date=lot.date, shares=remaining, price=lot.price, term=term))
            lot.shares -= remaining
            remaining = 0
            break

        slices.append(SaleLot(date=lot.date, shares=lot.shares, price=lot.price, term=term))
        remaining -= lot.shares
        lot.shares = 0

    if remaining > SHARE_TOLERANCE:
        raise OversellError(
            f"Sale of {shares} shares on {format_date(sale_date)} exceeds holdings "
            f"by {remaining:.4f} shares"
        )

    logger.debug(
        "Matched sale of %s shares on %s against %d lot(s)", shares, sale_date, len(slices)
    )
    return slices


def value_sale(slices: Sequence[SaleLot], average_basis: float) -> Tuple[Valuation, Valuation]:
    """Price the sold slices at their own lot prices (FIFO) and at the average basis."""
    fifo = Valuation(method=FIFO, lots=list(slices))
    average = Valuation(
        method=AVERAGE,
        lots=[replace(lot, price=average_basis) for lot in slices],
    )
    return fifo, average
