"""
End-to-end tests for the intelligence report.

Run with: pytest tests/unit/test_intelligence_service.py -v
"""

from datetime import date, timedelta

import pytest

from models.insights import ActionCategory, ActionPriority
from models.records import Customer, DataSnapshot, Order, OrderItem, Quote
from services.intelligence_service import calculate_intelligence


def test_report_for_sample_snapshot(sample_snapshot, today):
    report = calculate_intelligence(sample_snapshot, today)

    assert report.generated_on == today
    assert report.reporting_currency == "TRY"
    assert len(report.customer_profiles) == 3
    assert [a.id for a in report.daily_actions] == [
        "financial-c1",
        "stock-p1",
        "financial-c3",
        "sales-pending-quotes",
        "sales-c2",
    ]
    assert report.high_value_quote_ids == ["q1"]
    forecast = report.monthly_forecast
    assert forecast.current_total == 5000
    assert forecast.pending_hot == 10000
    assert forecast.realistic == pytest.approx(10500)
    assert forecast.optimistic == pytest.approx(13500)
    assert forecast.realistic <= forecast.optimistic
    assert report.conversion_rate == 0
    assert report.at_risk_customers == []
    assert report.tonnage_forecast.current == 0
    assert report.tonnage_forecast.unit == "Ton"


def test_repeated_calls_are_identical(sample_snapshot, today):
    first = calculate_intelligence(sample_snapshot, today)
    second = calculate_intelligence(sample_snapshot, today)
    assert first.model_dump() == second.model_dump()


def test_large_unpaid_order_triggers_collection(today):
    snapshot = DataSnapshot(
        customers=[Customer(id="big", name="Big Buyer")],
        orders=[Order(customer_id="big", order_date=today - timedelta(days=100), total_amount=100000)],
    )
    report = calculate_intelligence(snapshot, today)
    [profile] = report.customer_profiles
    assert profile.financial_risk_score >= 70
    assert any(
        a.category == ActionCategory.FINANCIAL
        and a.priority == ActionPriority.HIGH
        and a.customer_id == "big"
        for a in report.daily_actions
    )


@pytest.mark.parametrize("days_since_last, expect_action", [(35, True), (20, False)])
def test_reorder_window_scenario(today, days_since_last, expect_action):
    last = today - timedelta(days=days_since_last)
    snapshot = DataSnapshot(
        customers=[Customer(id="r1")],
        orders=[
            Order(customer_id="r1", order_date=last - timedelta(days=60), total_amount=100),
            Order(customer_id="r1", order_date=last - timedelta(days=30), total_amount=100),
            Order(customer_id="r1", order_date=last, total_amount=100),
        ],
    )
    actions = calculate_intelligence(snapshot, today).daily_actions
    has_reorder = any(a.category == ActionCategory.SALES and a.customer_id == "r1" for a in actions)
    assert has_reorder is expect_action


def test_tonnage_and_quiet_quotes(today):
    snapshot = DataSnapshot(
        customers=[Customer(id="t1", name="Tonnage Buyer")],
        orders=[
            Order(
                customer_id="t1",
                order_date=date(2024, 6, 10),
                total_amount=20000,
                items=[
                    OrderItem(product_id="p1", quantity=2000, unit="kg"),
                    OrderItem(product_id="p2", quantity=2, unit="ton"),
                ],
            ),
        ],
        quotes=[
            Quote(id="q-big", customer_id="t1", quote_date=today - timedelta(days=6), total_amount=5000),
            Quote(id="q-small", customer_id="t1", quote_date=today - timedelta(days=6), total_amount=1000),
        ],
    )
    report = calculate_intelligence(snapshot, today)
    assert report.tonnage_forecast.current == pytest.approx(4)
    assert report.tonnage_forecast.projected == pytest.approx(6)
    assert report.high_value_quote_ids == ["q-big"]
    assert "sales-pending-quotes" in [a.id for a in report.daily_actions]


def test_empty_snapshot(today):
    report = calculate_intelligence(DataSnapshot(), today)
    assert report.daily_actions == []
    assert report.customer_profiles == []
    assert report.monthly_forecast.current_total == 0


def test_defaults_to_current_day():
    report = calculate_intelligence(DataSnapshot())
    assert report.generated_on == date.today()
