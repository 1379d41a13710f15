"""
Ledger folds over transactions in their wire shape (dicts with camelCase
keys and a viewer-relative transactionType). Shared by the balance endpoint
and the client Ledger View so both derive the same numbers.
"""

from collections import namedtuple
from datetime import datetime, timezone
from decimal import Decimal

LedgerSummary = namedtuple("LedgerSummary", ["money_in", "money_out"])


class _NoData:
    """Sentinel returned by summary() for an empty transaction set."""

    def __bool__(self):
        return False

    def __repr__(self):
        return "NO_DATA"


NO_DATA = _NoData()


def _amount(tx):
    return Decimal(str(tx.get("amount", 0)))


def _created(tx):
    raw = tx.get("createdAt")
    if not raw:
        return datetime.min.replace(tzinfo=timezone.utc)
    value = datetime.fromisoformat(raw) if isinstance(raw, str) else raw
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


def balance(transactions):
    """Approved incoming minus approved outgoing. Other statuses count for nothing."""
    total = Decimal("0.00")
    for tx in transactions:
        if tx.get("status") != "approved":
            continue
        if tx.get("transactionType") == "incoming":
            total += _amount(tx)
        elif tx.get("transactionType") == "outgoing":
            total -= _amount(tx)
    return total.quantize(Decimal("0.01"))


def history(transactions):
    return sorted(transactions, key=_created, reverse=True)


def summary(transactions):
    transactions = list(transactions)
    if not transactions:
        return NO_DATA
    money_in = sum((_amount(tx) for tx in transactions if tx.get("transactionType") == "incoming"), Decimal("0.00"))
    money_out = sum((_amount(tx) for tx in transactions if tx.get("transactionType") == "outgoing"), Decimal("0.00"))
    return LedgerSummary(money_in=money_in, money_out=money_out)
