"""
Configuration loading tests.

Run with: pytest tests/unit/test_config.py -v
"""

from dataclasses import replace
from datetime import date, timedelta
from unittest.mock import patch

from config.settings import CurrencyConfig, EngineConfig, HealthScoreConfig, default_config
from models.records import Customer, Order
from services.health_service import build_customer_profile


def test_defaults():
    config = default_config()
    assert config.currency.reporting_currency == "TRY"
    assert config.currency.rates == {"USD": 35.0, "EUR": 38.0}
    assert config.actions.limit == 10


def test_from_environment_overrides():
    env = {
        "ENVIRONMENT": "prod",
        "REPORTING_CURRENCY": "usd",
        "CURRENCY_RATES": "TRY=0.03, EUR=1.08,bogus,GBP=x",
        "ACTION_LIMIT": "5",
        "CACHE_TTL_SECONDS": "60",
    }
    with patch.dict("os.environ", env):
        config = EngineConfig.from_environment()
    assert config.environment == "prod"
    assert config.currency.reporting_currency == "USD"
    assert config.currency.rates == {"TRY": 0.03, "EUR": 1.08}
    assert config.actions.limit == 5
    assert config.cache_ttl_seconds == 60


def test_currency_rate_lookup():
    table = CurrencyConfig()
    assert table.rate_for("TRY") == 1.0
    assert table.rate_for("XYZ") == 1.0
    assert not table.is_supported("XYZ")


def test_thresholds_are_tunable():
    today = date(2024, 6, 20)
    strict = replace(
        default_config(),
        health=HealthScoreConfig(debt_low_threshold=100, debt_low_points=35),
    )
    orders = [Order(customer_id="c1", order_date=today - timedelta(days=1), total_amount=500)]
    profile = build_customer_profile(Customer(id="c1"), orders, [], [], today, strict)
    # 35 for debt plus the long payment-silence penalty
    assert profile.financial_risk_score == 85
