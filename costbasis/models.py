"""Record types shared by the ledger, the sale matcher and the wash-sale adjuster."""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

# For tax purposes all reinvestments are purchases on the date of reinvestment.
BUY_ACTIONS = frozenset({"shrsin", "reinvdiv", "reinvint", "reinvsh", "reinvmd", "reinvlg", "buy"})
SELL_ACTIONS = frozenset({"shrsout", "sell"})
SPLIT_ACTIONS = frozenset({"stksplit"})


class ActionKind(Enum):
    BUY = "buy"
    SELL = "sell"
    SPLIT = "split"
    IGNORED = "ignored"


def classify_action(action: Optional[str]) -> ActionKind:
    """Map a QIF action name (case-insensitive) onto the kinds the ledger applies."""
    name = (action or "").strip().lower()
    if name in BUY_ACTIONS:
        return ActionKind.BUY
    if name in SELL_ACTIONS:
        return ActionKind.SELL
    if name in SPLIT_ACTIONS:
        return ActionKind.SPLIT
    return ActionKind.IGNORED


class Term(Enum):
    SHORT = "S"
    LONG = "L"


@dataclass
class WashAdjustment:
    """Wash-sale effects queued on a transaction by earlier sales, applied when it is bought."""

    basis_adjust: float = 0.0  # average-cost method: added to total basis
    price_adjust: float = 0.0  # FIFO method: added to the new lot's price per share
    washed_shares: float = 0.0  # shares already matched as replacements


@dataclass
class Transaction:
    date: dt.date
    action: str
    shares: float = 0.0
    amount: Optional[float] = None
    commission: float = 0.0
    price: Optional[float] = None
    wash: WashAdjustment = field(default_factory=WashAdjustment)

    @property
    def kind(self) -> ActionKind:
        return classify_action(self.action)


@dataclass
class Lot:
    """Shares acquired on one date at one basis price."""

    date: dt.date
    price: float
    shares: float
    washed: float = 0.0


@dataclass(frozen=True)
class SaleLot:
    """The slice of a lot consumed by one sale."""

    date: dt.date
    shares: float
    price: float
    term: Term

    @property
    def amount(self) -> float:
        return self.shares * self.price


@dataclass(frozen=True)
class WashNotice:
    """Disallowed loss absorbed by one replacement lot or future purchase."""

    date: dt.date
    amount: float
    shares: float


@dataclass
class Valuation:
    """One way of pricing the lots consumed by a sale."""

    method: str
    lots: List[SaleLot]
    wash_notices: List[WashNotice] = field(default_factory=list)
    wash_total: float = 0.0

    def amount(self, term: Term) -> float:
        return sum(lot.amount for lot in self.lots if lot.term is term)

    def shares(self, term: Term) -> float:
        return sum(lot.shares for lot in self.lots if lot.term is term)

    @property
    def total_basis(self) -> float:
        return sum(lot.amount for lot in self.lots)


@dataclass(frozen=True)
class Totals:
    shares: float
    basis: float

    @property
    def average_cost(self) -> Optional[float]:
        if self.shares == 0 or self.basis == 0:
            return None
        return self.basis / self.shares


@dataclass(frozen=True)
class BuyEvent:
    date: dt.date
    shares: float
    price: Optional[float]
    amount: Optional[float]
    totals: Totals


@dataclass(frozen=True)
class SellEvent:
    date: dt.date
    shares: float
    price: Optional[float]
    amount: Optional[float]
    totals: Totals
    fifo: Valuation
    average: Valuation


@dataclass(frozen=True)
class SplitEvent:
    date: dt.date
    ratio: float
    totals: Totals


@dataclass(frozen=True)
class LotsSnapshot:
    lots: Tuple[Tuple[dt.date, float], ...]


Event = Union[BuyEvent, SellEvent, SplitEvent, LotsSnapshot]


@dataclass
class SecurityResult:
    """Events produced by running one security's transactions."""

    security: str
    events: List[Event] = field(default_factory=list)

    @property
    def sales(self) -> List[SellEvent]:
        return [event for event in self.events if isinstance(event, SellEvent)]
