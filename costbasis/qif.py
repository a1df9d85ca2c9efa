"""
QIF investment account reader.

Each transaction in a QIF file spans several lines. The first character of
a line says what the rest of the line holds:

    Dmm/dd/yy    Date. The day is space-padded when it is a single digit.
                 From 2000 on the format is Dmm/dd'yy.
    Naction      Action, e.g. ShrsIn, ShrsOut, ReinvDiv...
    Ysecurity    Security name. Brokerage accounts trade many securities.
    Iprice       Price per share at which the trade was executed.
    Qshares      Number of shares traded.
    Tamount      Dollar amount of the transaction.
    Ocommission  Commission. For a buy, T plus O is the cost basis.
    ^            End of transaction.

Only the codes above (plus a few ignored ones) are recognized.
"""
from __future__ import annotations

import io
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Type

from .dates import parse_qif_date
from .exceptions import CostBasisError, QifFormatError
from .logging_config import get_logger
from .models import Transaction

logger = get_logger(__name__)

QIF_HEADER = "!type:invst"
IGNORED_CODES = frozenset("U$LMP")

# Quicken writes Windows-1252 on most installs.
FALLBACK_ENCODING = "cp1252"


def parse_number(value: str) -> float:
    """Parse a QIF number; dollar amounts can have comma separators."""
    try:
        return float(value.replace(",", "").strip())
    except ValueError as exc:
        raise QifFormatError(f"Invalid number {value!r}") from exc


def _build_transaction(fields: dict, line_no: int) -> Transaction:
    if "date" not in fields:
        raise QifFormatError(f"Transaction ending on line {line_no} has no date")
    return Transaction(
        date=fields["date"],
        action=fields.get("action", ""),
        shares=fields.get("shares", 0.0),
        amount=fields.get("amount"),
        commission=fields.get("commission", 0.0),
        price=fields.get("price"),
    )


def read_qif(stream: TextIO) -> Dict[str, List[Transaction]]:
    """Read a QIF investment export into transactions grouped by security."""
    header = stream.readline()
    if header.strip().lower() != QIF_HEADER:
        raise QifFormatError("QIF data is not from an investment account")

    transactions: Dict[str, List[Transaction]] = {}
    fields: dict = {}
    security: Optional[str] = None

    for line_no, raw in enumerate(stream, start=2):
        line = raw.rstrip("\r\n")
        if not line.strip():
            continue
        code, param = line[0], line[1:]

        if code == "^":
            if security:
                transactions.setdefault(security, []).append(_build_transaction(fields, line_no))
            fields = {}
            security = None
        elif code == "D":
            fields["date"] = parse_qif_date(param)
        elif code == "N":
            fields["action"] = param.strip()
        elif code == "Y":
            security = param.strip()
        elif code == "I":
            fields["price"] = parse_number(param)
        elif code == "Q":
            fields["shares"] = parse_number(param)
        elif code == "T":
            fields["amount"] = parse_number(param)
        elif code == "O":
            fields["commission"] = parse_number(param)
        elif code in IGNORED_CODES:
            continue
        else:
            raise QifFormatError(f"Unrecognized command code {code!r} on line {line_no}")

    logger.info(
        "Read %d transaction(s) for %d securities",
        sum(len(items) for items in transactions.values()),
        len(transactions),
    )
    return transactions


def read_text(
    path: Path,
    encoding: Optional[str] = None,
    error_cls: Type[CostBasisError] = QifFormatError,
) -> str:
    """
    Read an input file as text.

    Without an explicit ``encoding``, UTF-8 is tried first (dropping a
    byte-order mark) and then cp1252. Content that does not
    decode, or an unknown encoding name, raises ``error_cls``.
    """
    data = Path(path).read_bytes()
    candidates = [encoding] if encoding else ["utf-8-sig", FALLBACK_ENCODING]
    for name in candidates:
        try:
            return data.decode(name)
        except LookupError as exc:
            raise error_cls(f"Unknown encoding {name!r} for {path}") from exc
        except UnicodeDecodeError:
            logger.debug("%s is not valid %s", path, name)
    raise error_cls(f"Cannot decode {path} as {' or '.join(candidates)}")


def load_qif(path: Path, encoding: Optional[str] = None) -> Dict[str, List[Transaction]]:
    return read_qif(io.StringIO(read_text(path, encoding)))
