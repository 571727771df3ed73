"""
Customer balances and collection risk.

Independent pass over orders and payments producing, per active customer,
the running balance, overdue/upcoming exposure and a 0-100 collection-risk
score, plus a portfolio summary.

Balances are kept from the customer's side of the ledger:
balance = payments - orders, so a negative balance means the customer owes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Sequence

from config.settings import BalanceRiskConfig, EngineConfig, default_config
from models.balance import (
    BalancesSummary,
    BalanceStatus,
    CustomerBalance,
    DueDateInfo,
    OrderLine,
    PaymentLine,
    RiskAnalysis,
    RiskFactors,
    RiskLevel,
)
from models.records import Customer, DataSnapshot, Order, Payment
from services.currency import sum_reporting
from services.ledger import group_by_customer, is_pending, settles_debt
from utils.logging_config import get_logger
from utils.scoring import ScoringRule, clamp, evaluate_rules, round_half_up

logger = get_logger(__name__)


@dataclass(frozen=True)
class RiskInputs:
    overdue_count: int
    average_delay_days: float
    overdue_ratio: float
    balance_ratio: float
    status: BalanceStatus


def collection_risk_rules(config: BalanceRiskConfig) -> List[ScoringRule]:
    """Weighted, capped factors behind the collection-risk score."""
    return [
        ScoringRule(
            "overdue_count",
            lambda r: r.overdue_count > 0,
            config.overdue_count_weight,
            config.overdue_count_cap,
            magnitude=lambda r: r.overdue_count,
        ),
        ScoringRule(
            "average_delay",
            lambda r: r.average_delay_days > 0,
            config.delay_days_weight,
            config.delay_days_cap,
            magnitude=lambda r: r.average_delay_days,
        ),
        ScoringRule(
            "overdue_ratio",
            lambda r: r.overdue_ratio > 0,
            config.overdue_ratio_weight,
            config.overdue_ratio_cap,
            magnitude=lambda r: r.overdue_ratio,
        ),
        ScoringRule(
            "balance_ratio",
            lambda r: r.status == BalanceStatus.PAYABLE,
            config.balance_ratio_weight,
            config.balance_ratio_cap,
            magnitude=lambda r: r.balance_ratio,
        ),
    ]


def classify_balance(balance: float, config: BalanceRiskConfig) -> BalanceStatus:
    if abs(balance) < config.settled_threshold:
        return BalanceStatus.SETTLED
    return BalanceStatus.RECEIVABLE if balance > 0 else BalanceStatus.PAYABLE


def classify_risk(score: float, config: BalanceRiskConfig) -> RiskLevel:
    if score <= config.low_risk_max:
        return RiskLevel.LOW
    if score <= config.medium_risk_max:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def analyze_risk(
    overdue: Sequence[Payment],
    overdue_total: float,
    total_orders: float,
    balance: float,
    status: BalanceStatus,
    today: date,
    config: BalanceRiskConfig,
) -> RiskAnalysis:
    """Composite collection-risk score with its factor breakdown."""
    overdue_count = len(overdue)
    average_delay = (
        sum((today - p.due_date).days for p in overdue) / overdue_count if overdue_count else 0.0
    )
    overdue_ratio = overdue_total / total_orders * 100 if total_orders > 0 else 0.0
    balance_ratio = abs(balance) / total_orders * 100 if total_orders > 0 else 0.0

    inputs = RiskInputs(overdue_count, average_delay, overdue_ratio, balance_ratio, status)
    total, _ = evaluate_rules(collection_risk_rules(config), inputs)
    score = int(clamp(round_half_up(total)))

    return RiskAnalysis(
        risk_score=score,
        risk_level=classify_risk(score, config),
        factors=RiskFactors(
            overdue_count=overdue_count,
            average_delay_days=round_half_up(average_delay, 1),
            overdue_ratio=round_half_up(overdue_ratio, 1),
            balance_ratio=round_half_up(balance_ratio, 1),
        ),
    )


def calculate_customer_balance(
    customer: Customer,
    orders: Sequence[Order],
    payments: Sequence[Payment],
    today: date,
    config: Optional[EngineConfig] = None,
) -> CustomerBalance:
    """
    Balance for one customer.

    orders must already exclude deleted and cancelled entries; payments may be
    the customer's full non-deleted history.
    """
    config = config or default_config()
    settings = config.balance
    reporting = config.currency.reporting_currency

    visible = [p for p in payments if not p.is_deleted and not p.is_cancelled]
    settling = [p for p in visible if settles_debt(p, settings)]
    pending = [p for p in visible if is_pending(p) and p.due_date is not None]

    total_orders = sum_reporting(((o.total_amount, o.currency) for o in orders), config.currency)
    total_payments = sum_reporting(((p.amount, p.currency) for p in settling), config.currency)
    balance = total_payments - total_orders
    status = classify_balance(balance, settings)

    window_end = today + timedelta(days=settings.upcoming_window_days)
    overdue = [p for p in pending if p.due_date < today]
    upcoming = [p for p in pending if today <= p.due_date <= window_end]
    overdue_total = sum_reporting(((p.amount, p.currency) for p in overdue), config.currency)
    upcoming_total = sum_reporting(((p.amount, p.currency) for p in upcoming), config.currency)

    return CustomerBalance(
        customer=customer,
        total_orders=total_orders,
        total_payments=total_payments,
        balance=balance,
        status=status,
        due_date_info=DueDateInfo(
            overdue_payments=overdue,
            upcoming_payments=upcoming,
            total_overdue_amount=overdue_total,
            total_upcoming_amount=upcoming_total,
        ),
        risk_analysis=analyze_risk(
            overdue, overdue_total, total_orders, balance, status, today, settings
        ),
        order_details=[
            OrderLine(
                id=o.id,
                date=o.order_date,
                amount=o.total_amount,
                currency=o.currency or reporting,
                status=o.status,
            )
            for o in orders
        ],
        payment_details=[
            PaymentLine(
                id=p.id,
                date=p.paid_date or p.due_date,
                amount=p.amount,
                currency=p.currency or reporting,
                method=p.payment_method or "Unspecified",
                status=p.status,
            )
            for p in visible
        ],
    )


def calculate_customer_balances(
    snapshot: DataSnapshot,
    today: Optional[date] = None,
    config: Optional[EngineConfig] = None,
) -> List[CustomerBalance]:
    """One balance per active customer, in customer order."""
    today = today or date.today()
    config = config or default_config()

    orders_by_customer = group_by_customer(snapshot.qualifying_orders())
    payments_by_customer = group_by_customer(p for p in snapshot.payments if not p.is_deleted)

    balances = [
        calculate_customer_balance(
            customer,
            orders_by_customer.get(customer.id, []),
            payments_by_customer.get(customer.id, []),
            today,
            config,
        )
        for customer in snapshot.active_customers()
    ]
    logger.info("Customer balances calculated", extra={"customer_count": len(balances)})
    return balances


def calculate_balances_summary(balances: Sequence[CustomerBalance]) -> BalancesSummary:
    """Portfolio rollup across customer balances."""
    return BalancesSummary(
        total_receivable=sum(b.balance for b in balances if b.status == BalanceStatus.RECEIVABLE),
        total_payable=sum(abs(b.balance) for b in balances if b.status == BalanceStatus.PAYABLE),
        net_balance=sum(b.balance for b in balances),
        settled_count=sum(1 for b in balances if b.status == BalanceStatus.SETTLED),
        total_overdue=sum(b.due_date_info.total_overdue_amount for b in balances),
        total_upcoming=sum(b.due_date_info.total_upcoming_amount for b in balances),
        overdue_count=sum(1 for b in balances if b.due_date_info.overdue_payments),
        upcoming_count=sum(1 for b in balances if b.due_date_info.upcoming_payments),
        high_risk_count=sum(1 for b in balances if b.risk_analysis.risk_level == RiskLevel.HIGH),
        medium_risk_count=sum(
            1 for b in balances if b.risk_analysis.risk_level == RiskLevel.MEDIUM
        ),
        low_risk_count=sum(1 for b in balances if b.risk_analysis.risk_level == RiskLevel.LOW),
    )
