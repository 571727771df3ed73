"""
Revenue forecasting.

Projects the current month from its run-rate plus a weighted share of hot
quotes, and flags customers whose ordering rhythm has broken. Shipped
tonnage and stale high-value quotes are tracked alongside revenue.
"""

from __future__ import annotations

from datetime import date
from typing import List, Optional, Sequence

from config.settings import EngineConfig, default_config
from models.insights import AtRiskCustomer, MonthlyForecast, TonnageForecast, Trend
from models.records import Customer, Order, OrderItem, Quote, QuoteStatus
from services.currency import sum_reporting, to_reporting
from services.health_service import average_order_interval
from services.ledger import group_by_customer
from utils.dates import month_bounds, previous_month_bounds, subtract_months
from utils.logging_config import get_logger
from utils.scoring import round_half_up

logger = get_logger(__name__)


def _total_between(orders: Sequence[Order], start: date, end: date, config: EngineConfig) -> float:
    return sum_reporting(
        (
            (o.total_amount, o.currency)
            for o in orders
            if o.order_date is not None and start <= o.order_date <= end
        ),
        config.currency,
    )


def hot_quotes(quotes: Sequence[Quote], today: date, max_age_days: int) -> List[Quote]:
    """Prepared quotes issued within the last max_age_days."""
    return [
        q
        for q in quotes
        if not q.is_deleted
        and q.status == QuoteStatus.PREPARED
        and q.quote_date is not None
        and 0 <= (today - q.quote_date).days <= max_age_days
    ]


def forecast_month(
    orders: Sequence[Order],
    quotes: Sequence[Quote],
    today: Optional[date] = None,
    config: Optional[EngineConfig] = None,
) -> MonthlyForecast:
    """Monthly forecast from qualifying orders and open quotes."""
    today = today or date.today()
    config = config or default_config()
    settings = config.forecast

    month_start, month_end = month_bounds(today)
    current_total = _total_between(orders, month_start, month_end, config)
    pending_hot = sum_reporting(
        ((q.total_amount, q.currency) for q in hot_quotes(quotes, today, settings.hot_quote_days)),
        config.currency,
    )

    days_in_month = month_end.day
    days_elapsed = max(today.day, 1)
    run_rate = current_total / days_elapsed
    projected = run_rate * days_in_month

    last_start, last_end = previous_month_bounds(today)
    last_month_total = _total_between(orders, last_start, last_end, config)
    growth_rate = (
        (projected - last_month_total) / last_month_total * 100 if last_month_total > 0 else 0.0
    )
    if growth_rate > 0:
        trend = Trend.UP
    elif growth_rate < 0:
        trend = Trend.DOWN
    else:
        trend = Trend.STABLE

    forecast = MonthlyForecast(
        current_total=current_total,
        realistic=projected + pending_hot * settings.realistic_quote_weight,
        optimistic=projected + pending_hot * settings.optimistic_quote_weight,
        pessimistic=projected * settings.pessimistic_factor,
        pending_hot=pending_hot,
        run_rate=run_rate,
        last_month_total=last_month_total,
        growth_rate=growth_rate,
        trend=trend,
    )
    logger.info(
        "Monthly forecast computed",
        extra={"current_total": current_total, "pending_hot": pending_hot},
    )
    return forecast


def item_tons(item: OrderItem) -> float:
    """Weight of one line in tons; lines without a kg or ton unit weigh nothing."""
    unit = (item.unit or "").lower()
    if "kg" in unit:
        return item.quantity / 1000
    if "ton" in unit:
        return item.quantity
    return 0.0


def forecast_tonnage(orders: Sequence[Order], today: Optional[date] = None) -> TonnageForecast:
    """Tons shipped so far this month, projected to month end at the same pace."""
    today = today or date.today()
    month_start, month_end = month_bounds(today)
    current = sum(
        item_tons(item)
        for o in orders
        if o.order_date is not None and month_start <= o.order_date <= month_end
        for item in o.items
    )
    projected = current / max(today.day, 1) * month_end.day
    return TonnageForecast(current=current, projected=projected)


def high_value_quotes(
    quotes: Sequence[Quote],
    current_total: float,
    today: Optional[date] = None,
    config: Optional[EngineConfig] = None,
) -> List[Quote]:
    """
    Prepared quotes large enough to chase and old enough to have gone quiet.

    A quote is large when it exceeds a share of the month booked so far, or
    the fixed floor while nothing has been booked yet.
    """
    today = today or date.today()
    config = config or default_config()
    settings = config.forecast
    threshold = current_total * settings.high_value_quote_share or settings.high_value_quote_floor
    return [
        q
        for q in quotes
        if not q.is_deleted
        and q.status == QuoteStatus.PREPARED
        and q.quote_date is not None
        and (today - q.quote_date).days > settings.high_value_quote_min_age_days
        and to_reporting(q.total_amount, q.currency, config.currency) > threshold
    ]


def conversion_rate(
    quotes: Sequence[Quote], today: Optional[date] = None, config: Optional[EngineConfig] = None
) -> float:
    """Percent of recent quotes that were approved or turned into an order."""
    today = today or date.today()
    config = config or default_config()
    since = subtract_months(today, config.forecast.conversion_lookback_months)
    recent = [
        q for q in quotes if not q.is_deleted and q.quote_date is not None and q.quote_date >= since
    ]
    if not recent:
        return 0.0
    converted = [q for q in recent if q.status == QuoteStatus.APPROVED or q.order_id]
    return len(converted) / len(recent) * 100


def find_at_risk_customers(
    customers: Sequence[Customer],
    orders: Sequence[Order],
    today: Optional[date] = None,
    config: Optional[EngineConfig] = None,
) -> List[AtRiskCustomer]:
    """Customers silent for longer than their usual ordering interval allows."""
    today = today or date.today()
    config = config or default_config()
    settings = config.forecast
    orders_by_customer = group_by_customer(o for o in orders if o.order_date is not None)

    at_risk: List[AtRiskCustomer] = []
    for customer in customers:
        if customer.is_deleted:
            continue
        dated = sorted(orders_by_customer.get(customer.id, []), key=lambda o: o.order_date)
        if len(dated) < 2:
            continue
        interval = average_order_interval(dated, config.health.default_interval_days)
        silence = (today - dated[-1].order_date).days
        if interval <= 0:
            continue
        if silence > interval * settings.churn_interval_factor and silence > settings.churn_min_silence_days:
            score = min(int(round_half_up(silence / interval * settings.churn_score_per_interval)), 100)
            at_risk.append(
                AtRiskCustomer(
                    customer_id=customer.id,
                    customer_name=customer.name,
                    risk_score=score,
                    average_interval_days=interval,
                    days_since_last_order=silence,
                    reason=f"Usual ordering interval of {interval:.0f} days exceeded.",
                )
            )

    at_risk.sort(key=lambda c: c.risk_score, reverse=True)
    return at_risk[: settings.at_risk_limit]
