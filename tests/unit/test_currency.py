"""
Currency normalizer tests.

Run with: pytest tests/unit/test_currency.py -v
"""

import pytest

from config.settings import CurrencyConfig
from services.currency import from_reporting, sum_reporting, to_reporting


class TestToReporting:
    """Conversion into the reporting currency."""

    def test_reporting_currency_is_unchanged(self, config):
        assert to_reporting(1500, "TRY", config.currency) == 1500

    def test_known_rates_multiply(self, config):
        assert to_reporting(100, "USD", config.currency) == 3500
        assert to_reporting(100, "EUR", config.currency) == 3800

    def test_lowercase_code_is_accepted(self, config):
        assert to_reporting(2, "usd", config.currency) == 70

    def test_unknown_currency_passes_through(self, config):
        """Unknown codes are a tolerated approximation, never an error."""
        assert to_reporting(250, "GBP", config.currency) == 250

    def test_missing_amount_and_currency_default(self, config):
        assert to_reporting(None, "USD", config.currency) == 0
        assert to_reporting(40, None, config.currency) == 40

    def test_custom_table(self):
        table = CurrencyConfig(reporting_currency="EUR", rates={"USD": 0.9})
        assert to_reporting(10, "USD", table) == pytest.approx(9)
        assert to_reporting(10, "EUR", table) == 10


class TestRoundTrip:
    """Converting there and back approximates the original amount."""

    @pytest.mark.parametrize("currency", ["TRY", "USD", "EUR"])
    def test_round_trip(self, config, currency):
        amount = 1234.56
        converted = to_reporting(amount, currency, config.currency)
        assert from_reporting(converted, currency, config.currency) == pytest.approx(amount)


def test_sum_reporting_mixes_currencies(config):
    total = sum_reporting([(100, "USD"), (100, "EUR"), (100, "TRY"), (None, "USD")], config.currency)
    assert total == 3500 + 3800 + 100
