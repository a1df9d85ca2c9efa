"""Date handling: QIF date parsing, holding-period terms and the wash-sale window."""
from __future__ import annotations

import datetime as dt
import re

from .config import LONG_TERM_MONTHS, WASH_SALE_WINDOW_DAYS
from .exceptions import DateParseError
from .models import Term

# The second and third numbers can be space-padded.
_DATE_19XX = re.compile(r"(\d+)/([ \d]+)/([ \d]+)")
# Years 2000 and beyond use an apostrophe before the year.
_DATE_20XX = re.compile(r"(\d+)/([ \d]+)'([ \d]+)")


def parse_qif_date(value: str) -> dt.date:
    """Parse a QIF date such as ``3/ 5/97`` or ``1/31'05``."""
    for pattern, century in ((_DATE_19XX, 1900), (_DATE_20XX, 2000)):
        match = pattern.search(value)
        if match is None:
            continue
        try:
            month, day, year = (int(part.strip()) for part in match.groups())
            return dt.date(century + year, month, day)
        except ValueError as exc:
            raise DateParseError(f"Unrecognized date: {value!r}") from exc
    raise DateParseError(f"Unrecognized date: {value!r}")


def format_date(value: dt.date) -> str:
    return value.strftime("%Y-%m-%d")


def holding_term(buy_date: dt.date, sell_date: dt.date) -> Term:
    """
    Classify the gain on shares bought on ``buy_date`` and sold on ``sell_date``.

    A holding period is long-term only after the anniversary: March 5, 1997
    to March 5, 1998 is still short-term, March 5, 1997 to March 6, 1998 is not.
    """
    buy_month = buy_date.year * 12 + buy_date.month
    sell_month = sell_date.year * 12 + sell_date.month
    sell_day = sell_date.day
    if sell_day < buy_date.day:
        # Borrow a pseudo-month; only the ordering of days matters.
        sell_day += 31
        sell_month -= 1

    month_diff = sell_month - buy_month
    if sell_day > buy_date.day:
        month_diff += 1

    return Term.SHORT if month_diff <= LONG_TERM_MONTHS else Term.LONG


def within_window(first: dt.date, second: dt.date, days: int = WASH_SALE_WINDOW_DAYS) -> bool:
    """True if the two dates are no more than ``days`` calendar days apart."""
    return abs(second.toordinal() - first.toordinal()) <= days
