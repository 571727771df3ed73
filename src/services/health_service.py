"""
Customer health profiles.

Combines order, payment and meeting history for each active customer into a
financial-risk score, an engagement score and a predicted next-order date.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Sequence

from config.settings import EngineConfig, HealthScoreConfig, default_config
from models.insights import CustomerHealthProfile
from models.records import Customer, DataSnapshot, Meeting, Order, Payment
from services.currency import sum_reporting
from services.ledger import group_by_customer, settles_debt, visible_meetings
from utils.dates import days_since
from utils.logging_config import get_logger
from utils.scoring import ScoringRule, clamp, evaluate_rules, round_half_up, step_score

logger = get_logger(__name__)


@dataclass(frozen=True)
class HealthFacts:
    """Inputs to the profile scores for one customer."""

    total_debt: float
    order_count: int
    days_since_last_order: int
    days_since_last_payment: int
    days_since_last_contact: int
    average_interval: float
    last_order_date: Optional[date]


def financial_risk_rules(config: HealthScoreConfig) -> List[ScoringRule]:
    """Ordered additive rules behind financial_risk_score."""
    long_days = config.payment_silence_long_days
    medium_days = config.payment_silence_medium_days
    return [
        ScoringRule(
            "debt_above_low",
            lambda f: f.total_debt > config.debt_low_threshold,
            config.debt_low_points,
        ),
        ScoringRule(
            "debt_above_high",
            lambda f: f.total_debt > config.debt_high_threshold,
            config.debt_high_points,
        ),
        ScoringRule(
            "payment_silence_long",
            lambda f: f.total_debt > 0 and f.days_since_last_payment > long_days,
            config.payment_silence_long_points,
        ),
        ScoringRule(
            "payment_silence_medium",
            lambda f: f.total_debt > 0 and medium_days < f.days_since_last_payment <= long_days,
            config.payment_silence_medium_points,
        ),
    ]


def financial_risk_score(facts: HealthFacts, config: HealthScoreConfig) -> float:
    total, _ = evaluate_rules(financial_risk_rules(config), facts)
    return clamp(total)


def engagement_score(days_since_contact: int, config: HealthScoreConfig) -> float:
    return clamp(step_score(days_since_contact, config.engagement_steps, config.engagement_floor))


def average_order_interval(dated_orders: Sequence[Order], fallback: float) -> float:
    """Mean days between consecutive orders (sorted ascending by date)."""
    if len(dated_orders) < 2:
        return fallback
    gaps = [
        (later.order_date - earlier.order_date).days
        for earlier, later in zip(dated_orders, dated_orders[1:])
    ]
    return sum(gaps) / len(gaps)


def _last_payment_date(payments: Sequence[Payment]) -> Optional[date]:
    dates = [p.activity_date for p in payments if p.activity_date is not None]
    return max(dates) if dates else None


def _last_contact_date(meetings: Sequence[Meeting]) -> Optional[date]:
    dates = [m.meeting_date for m in meetings if m.meeting_date is not None]
    return max(dates) if dates else None


def build_customer_profile(
    customer: Customer,
    orders: Sequence[Order],
    payments: Sequence[Payment],
    meetings: Sequence[Meeting],
    today: date,
    config: Optional[EngineConfig] = None,
) -> CustomerHealthProfile:
    """
    Profile one customer from their own records.

    orders must already exclude deleted and cancelled entries; payments and
    meetings may be the customer's full visible history.
    """
    config = config or default_config()
    health = config.health

    settling = [p for p in payments if settles_debt(p, config.balance)]
    if orders:
        invoiced = sum_reporting(((o.total_amount, o.currency) for o in orders), config.currency)
        collected = sum_reporting(((p.amount, p.currency) for p in settling), config.currency)
        total_debt = invoiced - collected
    else:
        total_debt = 0.0

    dated_orders = sorted((o for o in orders if o.order_date is not None), key=lambda o: o.order_date)
    last_order_date = dated_orders[-1].order_date if dated_orders else None
    interval = average_order_interval(dated_orders, health.default_interval_days)

    never = health.never_days
    facts = HealthFacts(
        total_debt=total_debt,
        order_count=len(orders),
        days_since_last_order=days_since(last_order_date, today, never),
        days_since_last_payment=days_since(_last_payment_date(settling), today, never),
        days_since_last_contact=days_since(_last_contact_date(meetings), today, never),
        average_interval=interval,
        last_order_date=last_order_date,
    )

    predicted = None
    if last_order_date is not None:
        predicted = last_order_date + timedelta(days=int(round_half_up(interval)))

    return CustomerHealthProfile(
        customer_id=customer.id,
        customer_name=customer.name,
        total_debt=total_debt,
        financial_risk_score=financial_risk_score(facts, health) if orders else 0.0,
        engagement_score=engagement_score(facts.days_since_last_contact, health),
        order_count=facts.order_count,
        last_order_date=last_order_date,
        order_frequency=interval,
        days_since_last_order=facts.days_since_last_order,
        days_since_last_payment=facts.days_since_last_payment,
        days_since_last_contact=facts.days_since_last_contact,
        predicted_next_order_date=predicted,
    )


def build_customer_profiles(
    snapshot: DataSnapshot,
    today: Optional[date] = None,
    config: Optional[EngineConfig] = None,
) -> List[CustomerHealthProfile]:
    """One profile per active customer, in customer order."""
    today = today or date.today()
    config = config or default_config()

    orders_by_customer = group_by_customer(snapshot.qualifying_orders())
    payments_by_customer = group_by_customer(p for p in snapshot.payments if not p.is_deleted)
    meetings_by_customer = group_by_customer(visible_meetings(snapshot))

    profiles = [
        build_customer_profile(
            customer,
            orders_by_customer.get(customer.id, []),
            payments_by_customer.get(customer.id, []),
            meetings_by_customer.get(customer.id, []),
            today,
            config,
        )
        for customer in snapshot.active_customers()
    ]
    logger.info("Customer profiles built", extra={"profile_count": len(profiles)})
    return profiles
