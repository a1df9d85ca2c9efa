import datetime as dt

import pytest

from costbasis.models import Transaction


@pytest.fixture
def make_trans():
    """Factory for transactions: make_trans("Buy", date, shares, amount=...)."""

    def _make(action, date, shares, amount=None, commission=0.0, price=None):
        if isinstance(date, str):
            date = dt.date.fromisoformat(date)
        return Transaction(
            date=date,
            action=action,
            shares=shares,
            amount=amount,
            commission=commission,
            price=price,
        )

    return _make


@pytest.fixture
def apply_all():
    """Apply transactions in order the way run_transactions does, returning all events."""

    def _apply(holdings, transactions):
        events = []
        for index, trans in enumerate(transactions):
            events.extend(holdings.apply(trans, transactions[index + 1:]))
        return events

    return _apply
