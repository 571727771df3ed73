"""Engine configuration tables."""

from config.settings import (  # noqa: F401
    ActionConfig,
    BalanceRiskConfig,
    CurrencyConfig,
    EngineConfig,
    ForecastConfig,
    HealthScoreConfig,
    default_config,
)
