"""Record selection rules shared by the profile and balance services."""

from collections import defaultdict
from typing import Dict, Iterable, List, TypeVar

from config.settings import BalanceRiskConfig
from models.records import DataSnapshot, Meeting, Order, Payment

T = TypeVar("T", Order, Payment, Meeting)


def group_by_customer(records: Iterable[T]) -> Dict[str, List[T]]:
    """Index records by customer id, preserving input order."""
    grouped: Dict[str, List[T]] = defaultdict(list)
    for record in records:
        grouped[record.customer_id].append(record)
    return grouped


def visible_payments(snapshot: DataSnapshot) -> List[Payment]:
    """Payments that still exist on the account: not deleted, not cancelled."""
    return [p for p in snapshot.payments if not p.is_deleted and not p.is_cancelled]


def visible_meetings(snapshot: DataSnapshot) -> List[Meeting]:
    return [m for m in snapshot.meetings if not m.is_deleted and not m.is_cancelled]


def settles_debt(payment: Payment, config: BalanceRiskConfig) -> bool:
    """
    Whether a payment reduces the customer's debt.

    Collected payments do; cheques and promissory notes do as soon as they are
    received, even while still pending collection.
    """
    if payment.is_deleted or payment.is_cancelled:
        return False
    if payment.is_collected:
        return True
    return payment.payment_method in config.settling_methods


def is_pending(payment: Payment) -> bool:
    """Neither collected nor cancelled, so still exposed to being late."""
    return not payment.is_deleted and not payment.is_collected and not payment.is_cancelled
