"""Plain-text cost basis report."""
from __future__ import annotations

from typing import List, Optional, Sequence

from .config import LOT_DISPLAY_WIDTH
from .dates import format_date
from .models import (
    BuyEvent,
    LotsSnapshot,
    SecurityResult,
    SellEvent,
    SplitEvent,
    Term,
    Totals,
    Valuation,
)

VALUATION_TITLES = {
    "fifo": "FIFO",
    "average": "Average Cost Basis",
}


def cents(value: float) -> str:
    return f"{value:.2f}"


def form4(value: float) -> str:
    return f"{value:.4f}"


def _optional(value: Optional[float]) -> str:
    return "0" if value is None else form4(value)


def join_wrap(items: Sequence[str], sep: str, width: int) -> str:
    """Join ``items`` with ``sep``, starting a new line before ``width`` is exceeded."""
    if not items:
        return ""
    lines: List[str] = []
    current = items[0]
    for item in items[1:]:
        if len(current) + len(sep) + len(item) > width:
            lines.append(current)
            current = item
        else:
            current += sep + item
    lines.append(current)
    return "\n".join(lines)


def render_totals(totals: Totals) -> List[str]:
    average = totals.average_cost
    if average is None:
        return ["    Shares: 0  Total Cost: 0", ""]
    return [
        f"    Shares: {form4(totals.shares)}  Total Cost: {cents(totals.basis)}  "
        f"Average Cost: {form4(average)}",
        "",
    ]


def render_valuation(valuation: Valuation) -> List[str]:
    lines = [f"  {VALUATION_TITLES.get(valuation.method, valuation.method)}:"]
    for lot in valuation.lots:
        lines.append(
            f"  {format_date(lot.date)}: {form4(lot.shares)} * {form4(lot.price)} "
            f"= {cents(lot.amount)} {lot.term.value}"
        )
    lines.append(
        f"  Totals: L={cents(valuation.amount(Term.LONG))} "
        f"({form4(valuation.shares(Term.LONG))} shares)  "
        f"S={cents(valuation.amount(Term.SHORT))} "
        f"({form4(valuation.shares(Term.SHORT))} shares)"
    )
    lines.append("")
    if valuation.wash_notices:
        for notice in valuation.wash_notices:
            lines.append(
                f" ** Wash sale for lot {format_date(notice.date)}: "
                f"{cents(notice.amount)} ({form4(notice.shares)} shares)"
            )
        lines.append(f" *** Wash sale total: {cents(valuation.wash_total)}")
        lines.append("")
    return lines


def render_lots(snapshot: LotsSnapshot) -> List[str]:
    entries = [f"{format_date(date)} {form4(shares)}" for date, shares in snapshot.lots]
    lines = ["  Lots:"]
    if entries:
        lines.append(join_wrap(entries, "  ", LOT_DISPLAY_WIDTH))
    lines.append("")
    return lines


def render_security(result: SecurityResult, show_lots: bool = False) -> str:
    """Render every event of one security as report text."""
    lines = [f"Transactions for {result.security}", ""]

    for event in result.events:
        if isinstance(event, BuyEvent):
            lines.append(
                f"{format_date(event.date)}: BUY {form4(event.shares)} shares at "
                f"{_optional(event.price)} for {cents(event.amount or 0.0)}"
            )
            lines.extend(render_totals(event.totals))
        elif isinstance(event, SellEvent):
            if event.amount is not None:
                lines.append(
                    f"{format_date(event.date)}: SELL {form4(event.shares)} shares at "
                    f"{_optional(event.price)} for {cents(event.amount)}"
                )
            else:
                lines.append(f"{format_date(event.date)}: SELL {form4(event.shares)}")
            lines.extend(render_totals(event.totals))
            lines.extend(render_valuation(event.fifo))
            lines.extend(render_valuation(event.average))
        elif isinstance(event, SplitEvent):
            lines.append(f"{format_date(event.date)}: STOCK SPLIT {event.ratio:g} for 1")
            lines.extend(render_totals(event.totals))
        elif isinstance(event, LotsSnapshot) and show_lots:
            lines.extend(render_lots(event))

    return "\n".join(lines) + "\n"
