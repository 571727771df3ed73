"""
Scoring and conversion settings.

Every rate, threshold and weight the engine uses lives here so it can be
tuned per environment without touching the services.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Tuple


def _parse_rates(raw: str) -> Dict[str, float]:
    """Parse "USD=35,EUR=38" into a rate table, skipping malformed pairs."""
    rates: Dict[str, float] = {}
    for pair in raw.split(","):
        code, _, value = pair.partition("=")
        code = code.strip().upper()
        if not code or not value.strip():
            continue
        try:
            rates[code] = float(value)
        except ValueError:
            continue
    return rates


@dataclass(frozen=True)
class CurrencyConfig:
    """Fixed conversion table into the reporting currency."""

    reporting_currency: str = "TRY"
    rates: Dict[str, float] = field(default_factory=lambda: {"USD": 35.0, "EUR": 38.0})

    def rate_for(self, currency: str) -> float:
        """Rate for currency; 1.0 for the reporting currency and unknown codes."""
        code = (currency or self.reporting_currency).upper()
        if code == self.reporting_currency:
            return 1.0
        return self.rates.get(code, 1.0)

    def is_supported(self, currency: str) -> bool:
        code = (currency or self.reporting_currency).upper()
        return code == self.reporting_currency or code in self.rates


@dataclass(frozen=True)
class HealthScoreConfig:
    """Thresholds for the per-customer health profile."""

    never_days: int = 999
    default_interval_days: float = 30.0

    # Financial risk rules
    debt_low_threshold: float = 10_000.0
    debt_low_points: float = 20.0
    debt_high_threshold: float = 50_000.0
    debt_high_points: float = 30.0
    payment_silence_long_days: int = 90
    payment_silence_long_points: float = 50.0
    payment_silence_medium_days: int = 45
    payment_silence_medium_points: float = 25.0

    # Engagement: (days since contact upper bound, score), first match wins
    engagement_steps: Tuple[Tuple[float, float], ...] = ((15, 95), (30, 80), (60, 50))
    engagement_floor: float = 20.0


@dataclass(frozen=True)
class ActionConfig:
    """Triggers and ranking for recommended actions."""

    limit: int = 10
    critical_risk_threshold: float = 70.0
    reminder_min_days_since_payment: int = 30
    neglect_min_orders: int = 3
    neglect_min_days_since_contact: int = 60
    neglect_max_risk: float = 50.0
    reorder_window_start: float = 1.1
    reorder_window_end: float = 1.5
    stock_critical_quantity: float = 5.0

    critical_base_score: float = 1000.0
    stock_base_score: float = 900.0
    reminder_base_score: float = 500.0
    neglect_base_score: float = 400.0
    reorder_base_score: float = 300.0
    quote_follow_up_base_score: float = 350.0


@dataclass(frozen=True)
class ForecastConfig:
    """Run-rate projection parameters."""

    hot_quote_days: int = 15
    realistic_quote_weight: float = 0.3
    optimistic_quote_weight: float = 0.6
    pessimistic_factor: float = 0.9
    conversion_lookback_months: int = 3
    churn_interval_factor: float = 1.5
    churn_min_silence_days: int = 15
    churn_score_per_interval: float = 20.0
    at_risk_limit: int = 5

    # Prepared quotes above this share of the month so far (or the floor
    # when nothing has been booked yet) and older than min_age_days.
    high_value_quote_share: float = 0.1
    high_value_quote_floor: float = 50000.0
    high_value_quote_min_age_days: int = 3


@dataclass(frozen=True)
class BalanceRiskConfig:
    """Collection-risk weights and balance classification."""

    settled_threshold: float = 100.0
    upcoming_window_days: int = 7

    overdue_count_weight: float = 10.0
    overdue_count_cap: float = 30.0
    delay_days_weight: float = 2.0
    delay_days_cap: float = 30.0
    overdue_ratio_weight: float = 0.25
    overdue_ratio_cap: float = 25.0
    balance_ratio_weight: float = 0.15
    balance_ratio_cap: float = 15.0

    low_risk_max: float = 30.0
    medium_risk_max: float = 60.0

    # Instruments that settle debt on receipt, before they are collected.
    settling_methods: Tuple[str, ...] = ("Check", "PromissoryNote")


@dataclass(frozen=True)
class EngineConfig:
    """All engine settings plus the adapter cache knobs."""

    environment: str = "dev"
    currency: CurrencyConfig = field(default_factory=CurrencyConfig)
    health: HealthScoreConfig = field(default_factory=HealthScoreConfig)
    actions: ActionConfig = field(default_factory=ActionConfig)
    forecast: ForecastConfig = field(default_factory=ForecastConfig)
    balance: BalanceRiskConfig = field(default_factory=BalanceRiskConfig)

    cache_ttl_seconds: int = 300
    cache_max_size: int = 32

    @classmethod
    def from_environment(cls) -> "EngineConfig":
        """Load overrides from environment variables."""
        base = cls(environment=os.environ.get("ENVIRONMENT", "dev"))

        currency = base.currency
        reporting = os.environ.get("REPORTING_CURRENCY")
        raw_rates = os.environ.get("CURRENCY_RATES")
        if reporting or raw_rates:
            currency = CurrencyConfig(
                reporting_currency=(reporting or currency.reporting_currency).upper(),
                rates=_parse_rates(raw_rates) if raw_rates else dict(currency.rates),
            )

        actions = base.actions
        if os.environ.get("ACTION_LIMIT"):
            actions = replace(actions, limit=int(os.environ["ACTION_LIMIT"]))

        return replace(
            base,
            currency=currency,
            actions=actions,
            cache_ttl_seconds=int(os.environ.get("CACHE_TTL_SECONDS", base.cache_ttl_seconds)),
            cache_max_size=int(os.environ.get("CACHE_MAX_SIZE", base.cache_max_size)),
        )


_DEFAULT = EngineConfig()


def default_config() -> EngineConfig:
    """Built-in configuration shared by calls that do not pass one."""
    return _DEFAULT
