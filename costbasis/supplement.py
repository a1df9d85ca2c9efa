"""
Supplemental sale confirmations.

QIF exports do not always carry the true price and proceeds of a sale. A
supplemental file provides them:

    Security <security-name>
        Names the security the following lines refer to. Must match the
        security name in the QIF file exactly.
    Sale <date> <price> <amount> <shares>
        Price and proceeds of the sale of <shares> shares on <date>.

Once merged, every sale has its actual proceeds and wash sales can be
determined.
"""
from __future__ import annotations

import datetime as dt
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Optional, TextIO

from .dates import format_date, parse_qif_date
from .exceptions import MissingPriceError, SupplementError
from .logging_config import get_logger
from .models import ActionKind, Transaction
from .qif import parse_number, read_text

logger = get_logger(__name__)


@dataclass(frozen=True)
class SaleConfirmation:
    date: dt.date
    price: float
    amount: float
    shares: float


def read_supplement(stream: TextIO) -> Dict[str, List[SaleConfirmation]]:
    confirmations: Dict[str, List[SaleConfirmation]] = {}
    security: Optional[str] = None

    for line_no, raw in enumerate(stream, start=1):
        line = raw.strip()
        if not line:
            continue
        command, _, param = line.partition(" ")
        command = command.upper()
        param = param.strip()

        if command == "SECURITY":
            security = param
        elif command == "SALE":
            parts = param.split()
            if len(parts) != 4:
                raise SupplementError(
                    f"Line {line_no}: expected 'Sale date price amount shares', got {line!r}"
                )
            date_str, price, amount, shares = parts
            record = SaleConfirmation(
                date=parse_qif_date(date_str),
                price=parse_number(price),
                amount=parse_number(amount),
                shares=parse_number(shares),
            )
            if security:
                confirmations.setdefault(security, []).append(record)
            else:
                logger.warning("Line %d: sale listed before any security; ignored", line_no)
        else:
            raise SupplementError(f"Line {line_no}: unrecognized command {command!r}")

    return confirmations


def load_supplement(path: Path, encoding: Optional[str] = None) -> Dict[str, List[SaleConfirmation]]:
    return read_supplement(io.StringIO(read_text(path, encoding, error_cls=SupplementError)))


def merge_supplement(
    transactions: Mapping[str, List[Transaction]],
    confirmations: Mapping[str, List[SaleConfirmation]],
) -> int:
    """
    Fill in price and amount of the transactions the confirmations refer to.

    A confirmation matches the first transaction of the same security with the
    same date and share count that has no price yet.

    Returns:
        Number of transactions updated
    """
    merged = 0
    for security, records in confirmations.items():
        if security not in transactions:
            raise SupplementError(
                f"Security {security} in supplemental file does not exist in QIF file"
            )

        for record in records:
            for trans in transactions[security]:
                if trans.date == record.date and trans.shares == record.shares and trans.price is None:
                    trans.price = record.price
                    trans.amount = record.amount
                    merged += 1
                    break
            else:
                raise SupplementError(
                    f"Can't find matching transaction for sale of {security} on "
                    f"{format_date(record.date)} for {record.shares} shares"
                )

    logger.info("Merged %d supplemental sale confirmation(s)", merged)
    return merged


def check_sale_prices(transactions: Mapping[str, List[Transaction]]) -> None:
    """Make sure every sale has a price."""
    for security, items in transactions.items():
        for trans in items:
            if trans.kind is ActionKind.SELL and trans.price is None:
                raise MissingPriceError(
                    f"No price for sale of {security} on {format_date(trans.date)} "
                    f"for {trans.shares} shares"
                )
