"""
Currency normalization.

Converts tagged amounts into the reporting currency with the fixed rate
table from settings. Unknown codes pass through unconverted; that is a
tolerated approximation, not an error.
"""

from typing import Iterable, Optional, Tuple

from config.settings import CurrencyConfig
from utils.logging_config import get_logger

logger = get_logger(__name__)


def to_reporting(amount: Optional[float], currency: Optional[str], config: CurrencyConfig) -> float:
    """Express amount in the reporting currency."""
    if not amount:
        return 0.0
    if currency and not config.is_supported(currency):
        logger.debug("Unknown currency passed through", extra={"currency": currency})
    return float(amount) * config.rate_for(currency or config.reporting_currency)


def from_reporting(amount: Optional[float], currency: Optional[str], config: CurrencyConfig) -> float:
    """Express a reporting-currency amount in currency (inverse of to_reporting)."""
    if not amount:
        return 0.0
    return float(amount) / config.rate_for(currency or config.reporting_currency)


def sum_reporting(pairs: Iterable[Tuple[Optional[float], Optional[str]]], config: CurrencyConfig) -> float:
    """Sum (amount, currency) pairs after normalizing each one."""
    return sum(to_reporting(amount, currency, config) for amount, currency in pairs)
