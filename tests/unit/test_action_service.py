"""
Smart action generator tests.

Run with: pytest tests/unit/test_action_service.py -v
"""

from datetime import date, timedelta

from models.insights import ActionCategory, ActionPriority, CustomerHealthProfile
from models.records import Order, OrderItem, Product, Quote
from services.action_service import generate_actions, rank_actions

TODAY = date(2024, 6, 20)


def _profile(customer_id="c1", **overrides):
    values = dict(
        customer_id=customer_id,
        customer_name=f"Customer {customer_id}",
        total_debt=0.0,
        financial_risk_score=0.0,
        engagement_score=95.0,
        order_count=1,
        last_order_date=TODAY - timedelta(days=5),
        order_frequency=30.0,
        days_since_last_order=5,
        days_since_last_payment=3,
        days_since_last_contact=3,
    )
    values.update(overrides)
    return CustomerHealthProfile(**values)


class TestFinancialActions:
    def test_critical_collection(self):
        profile = _profile(total_debt=100000, financial_risk_score=100, days_since_last_payment=999)
        [action] = generate_actions([profile], [], [])
        assert action.category == ActionCategory.FINANCIAL
        assert action.priority == ActionPriority.HIGH
        assert action.customer_id == "c1"
        assert action.id == "financial-c1"

    def test_payment_reminder_below_critical(self):
        profile = _profile(total_debt=8000, financial_risk_score=50, days_since_last_payment=40)
        [action] = generate_actions([profile], [], [])
        assert action.priority == ActionPriority.MEDIUM
        assert action.category == ActionCategory.FINANCIAL

    def test_recent_payment_gets_no_reminder(self):
        profile = _profile(total_debt=8000, days_since_last_payment=10)
        assert generate_actions([profile], [], []) == []

    def test_reminder_without_any_payment(self):
        profile = _profile(total_debt=8000, financial_risk_score=50, days_since_last_payment=999)
        [action] = generate_actions([profile], [], [])
        assert action.message.startswith("No payment recorded yet from Customer c1")
        assert "999" not in action.message

    def test_reminder_mentions_silence_length(self):
        profile = _profile(total_debt=8000, financial_risk_score=50, days_since_last_payment=40)
        [action] = generate_actions([profile], [], [])
        assert action.message.startswith("No payment from Customer c1 in 40 days")


class TestRelationshipActions:
    def test_neglected_customer(self):
        profile = _profile(order_count=6, days_since_last_contact=90)
        [action] = generate_actions([profile], [], [])
        assert action.category == ActionCategory.RELATIONSHIP

    def test_never_met_customer_wording(self):
        profile = _profile(order_count=6, days_since_last_contact=999)
        [action] = generate_actions([profile], [], [])
        assert "no recorded meeting" in action.message

    def test_risky_customer_is_not_courted(self):
        profile = _profile(order_count=6, days_since_last_contact=90, financial_risk_score=60)
        assert all(a.category != ActionCategory.RELATIONSHIP for a in generate_actions([profile], [], []))

    def test_few_orders_are_ignored(self):
        profile = _profile(order_count=3, days_since_last_contact=90)
        assert generate_actions([profile], [], []) == []


class TestReorderWindow:
    def test_inside_window(self):
        profile = _profile(
            order_count=3, days_since_last_order=35, last_order_date=TODAY - timedelta(days=35)
        )
        [action] = generate_actions([profile], [], [])
        assert action.category == ActionCategory.SALES
        assert action.id == "sales-c1"

    def test_too_early(self):
        profile = _profile(
            order_count=3, days_since_last_order=20, last_order_date=TODAY - timedelta(days=20)
        )
        assert generate_actions([profile], [], []) == []

    def test_past_window(self):
        profile = _profile(
            order_count=3, days_since_last_order=50, last_order_date=TODAY - timedelta(days=50)
        )
        assert generate_actions([profile], [], []) == []


class TestStockActions:
    def _orders(self):
        return [Order(customer_id="c1", items=[OrderItem(product_id="p1", quantity=2)])]

    def test_low_stock_of_sold_product(self):
        [action] = generate_actions([], [Product(id="p1", name="Flour", stock_quantity=5)], self._orders())
        assert action.category == ActionCategory.STOCK
        assert action.priority == ActionPriority.HIGH
        assert action.product_id == "p1"
        assert action.id == "stock-p1"

    def test_never_sold_or_stocked_products_are_skipped(self):
        products = [Product(id="p2", stock_quantity=0), Product(id="p1", stock_quantity=6)]
        assert generate_actions([], products, self._orders()) == []


class TestQuoteFollowUp:
    def _quote(self, quote_id, amount, currency="TRY"):
        return Quote(
            id=quote_id,
            customer_id="c1",
            quote_date=TODAY - timedelta(days=5),
            total_amount=amount,
            currency=currency,
        )

    def test_one_action_for_all_pending_quotes(self):
        quotes = [self._quote("q1", 60000), self._quote("q2", 2000, "USD")]
        [action] = generate_actions([], [], [], pending_quotes=quotes)
        assert action.id == "sales-pending-quotes"
        assert action.category == ActionCategory.SALES
        assert action.priority == ActionPriority.MEDIUM
        assert action.customer_id is None
        assert "2 high-value quotes worth 130,000" in action.message

    def test_no_quotes_no_action(self):
        assert generate_actions([], [], [], pending_quotes=[]) == []

    def test_ranks_between_neglect_and_reorder(self):
        neglected = _profile("a", order_count=6, days_since_last_contact=90)
        due = _profile(
            "b",
            order_count=2,
            last_order_date=TODAY - timedelta(days=40),
            days_since_last_order=40,
        )
        actions = generate_actions([neglected, due], [], [], pending_quotes=[self._quote("q1", 60000)])
        assert [a.id for a in actions] == ["relationship-a", "sales-pending-quotes", "sales-b"]


class TestRanking:
    def test_sorted_and_capped(self):
        profiles = [
            _profile(f"c{i}", total_debt=100000, financial_risk_score=71 + i, days_since_last_payment=999)
            for i in range(15)
        ]
        actions = generate_actions(profiles, [], [])
        assert len(actions) == 10
        scores = [a.sort_score for a in actions]
        assert scores == sorted(scores, reverse=True)
        assert actions[0].customer_id == "c14"

    def test_ties_keep_insertion_order(self):
        first = _profile("a", order_count=6, days_since_last_contact=90)
        second = _profile("b", order_count=6, days_since_last_contact=90)
        ranked = rank_actions(generate_actions([first, second], [], []), 10)
        assert [a.customer_id for a in ranked] == ["a", "b"]

    def test_priority_order_across_categories(self, sample_snapshot, today):
        from services.health_service import build_customer_profiles

        profiles = build_customer_profiles(sample_snapshot, today)
        actions = generate_actions(
            profiles, sample_snapshot.products, sample_snapshot.qualifying_orders()
        )
        assert [a.id for a in actions] == ["financial-c1", "stock-p1", "financial-c3", "sales-c2"]
