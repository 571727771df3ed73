"""
Customer intelligence entry point.

Runs the profile, action and forecast services over one snapshot and bundles
their output for the dashboard.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from config.settings import EngineConfig, default_config
from models.insights import IntelligenceReport
from models.records import DataSnapshot
from services.action_service import generate_actions
from services.forecast_service import (
    conversion_rate,
    find_at_risk_customers,
    forecast_month,
    forecast_tonnage,
    high_value_quotes,
)
from services.health_service import build_customer_profiles
from utils.logging_config import get_logger

logger = get_logger(__name__)


def calculate_intelligence(
    snapshot: DataSnapshot,
    today: Optional[date] = None,
    config: Optional[EngineConfig] = None,
) -> IntelligenceReport:
    """Build the full intelligence report; deterministic for a fixed today."""
    today = today or date.today()
    config = config or default_config()
    orders = snapshot.qualifying_orders()

    profiles = build_customer_profiles(snapshot, today, config)
    forecast = forecast_month(orders, snapshot.quotes, today, config)
    pending = high_value_quotes(snapshot.quotes, forecast.current_total, today, config)
    report = IntelligenceReport(
        generated_on=today,
        reporting_currency=config.currency.reporting_currency,
        daily_actions=generate_actions(profiles, snapshot.products, orders, config, pending),
        customer_profiles=profiles,
        monthly_forecast=forecast,
        at_risk_customers=find_at_risk_customers(snapshot.customers, orders, today, config),
        conversion_rate=conversion_rate(snapshot.quotes, today, config),
        tonnage_forecast=forecast_tonnage(orders, today),
        high_value_quote_ids=[q.id for q in pending],
    )
    logger.info(
        "Intelligence report built",
        extra={
            "generated_on": today.isoformat(),
            "action_count": len(report.daily_actions),
            "profile_count": len(report.customer_profiles),
        },
    )
    return report
