"""
Smart action generation.

Scans customer profiles, product stock and open quotes for situations worth
acting on today and returns a ranked, capped list of recommendations.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Set

from config.settings import ActionConfig, EngineConfig, default_config
from models.insights import ActionCategory, ActionPriority, CustomerHealthProfile, SmartAction
from models.records import Order, Product, Quote
from services.currency import sum_reporting
from utils.dates import NEVER_DAYS
from utils.logging_config import get_logger

logger = get_logger(__name__)


def _money(amount: float) -> str:
    return f"{amount:,.0f}"


def customer_actions(
    profile: CustomerHealthProfile, config: ActionConfig, never_days: int = NEVER_DAYS
) -> List[SmartAction]:
    """
    Candidate actions for one customer, before ranking.

    never_days is the sentinel the profile uses for "no such event".
    """
    actions: List[SmartAction] = []
    risk = profile.financial_risk_score
    name = profile.customer_name or profile.customer_id

    if risk > config.critical_risk_threshold:
        actions.append(
            SmartAction(
                id=f"{ActionCategory.FINANCIAL.value}-{profile.customer_id}",
                category=ActionCategory.FINANCIAL,
                priority=ActionPriority.HIGH,
                title="Collect now",
                message=(
                    f"{name} carries {_money(profile.total_debt)} of open debt with a "
                    f"risk score of {risk:.0f}. Start collection today."
                ),
                customer_id=profile.customer_id,
                sort_score=config.critical_base_score + risk,
            )
        )
    elif (
        profile.total_debt > 0
        and profile.days_since_last_payment > config.reminder_min_days_since_payment
    ):
        days = profile.days_since_last_payment
        if days >= never_days:
            silence = f"No payment recorded yet from {name}"
        else:
            silence = f"No payment from {name} in {days} days"
        actions.append(
            SmartAction(
                id=f"{ActionCategory.FINANCIAL.value}-{profile.customer_id}",
                category=ActionCategory.FINANCIAL,
                priority=ActionPriority.MEDIUM,
                title="Payment reminder",
                message=f"{silence}; {_money(profile.total_debt)} is still open.",
                customer_id=profile.customer_id,
                sort_score=config.reminder_base_score + min(days, 365) / 10,
            )
        )

    if (
        profile.order_count > config.neglect_min_orders
        and profile.days_since_last_contact > config.neglect_min_days_since_contact
        and risk < config.neglect_max_risk
    ):
        if profile.days_since_last_contact >= never_days:
            contact = "no recorded meeting"
        else:
            contact = f"no meeting in {profile.days_since_last_contact} days"
        actions.append(
            SmartAction(
                id=f"{ActionCategory.RELATIONSHIP.value}-{profile.customer_id}",
                category=ActionCategory.RELATIONSHIP,
                priority=ActionPriority.MEDIUM,
                title="Reconnect",
                message=(
                    f"{name} has {profile.order_count} orders but {contact}. "
                    "Schedule a visit."
                ),
                customer_id=profile.customer_id,
                sort_score=config.neglect_base_score + min(profile.order_count, 50),
            )
        )

    interval = profile.order_frequency
    days = profile.days_since_last_order
    if (
        profile.last_order_date is not None
        and interval > 0
        and interval * config.reorder_window_start <= days <= interval * config.reorder_window_end
    ):
        actions.append(
            SmartAction(
                id=f"{ActionCategory.SALES.value}-{profile.customer_id}",
                category=ActionCategory.SALES,
                priority=ActionPriority.MEDIUM,
                title="Reorder window",
                message=(
                    f"{name} usually orders every {interval:.0f} days and last ordered "
                    f"{days} days ago. Offer a quote."
                ),
                customer_id=profile.customer_id,
                sort_score=config.reorder_base_score + days / interval * 10,
            )
        )

    return actions


def sold_product_ids(orders: Iterable[Order]) -> Set[str]:
    return {item.product_id for order in orders for item in order.items}


def stock_actions(
    products: Sequence[Product], sold: Set[str], config: ActionConfig
) -> List[SmartAction]:
    """Restock warnings for products that have sold and are nearly gone."""
    actions = []
    for product in products:
        if product.id not in sold or product.stock_quantity > config.stock_critical_quantity:
            continue
        actions.append(
            SmartAction(
                id=f"{ActionCategory.STOCK.value}-{product.id}",
                category=ActionCategory.STOCK,
                priority=ActionPriority.HIGH,
                title="Restock",
                message=(
                    f"{product.name or product.id} is down to {product.stock_quantity:g} units."
                ),
                product_id=product.id,
                sort_score=config.stock_base_score
                + (config.stock_critical_quantity - product.stock_quantity),
            )
        )
    return actions


def quote_follow_up_action(
    quotes: Sequence[Quote], config: EngineConfig
) -> Optional[SmartAction]:
    """One follow-up for all stale high-value quotes, or None when there are none."""
    if not quotes:
        return None
    total = sum_reporting(((q.total_amount, q.currency) for q in quotes), config.currency)
    return SmartAction(
        id=f"{ActionCategory.SALES.value}-pending-quotes",
        category=ActionCategory.SALES,
        priority=ActionPriority.MEDIUM,
        title="Follow up quotes",
        message=(
            f"{len(quotes)} high-value quotes worth {_money(total)} are still waiting "
            "for an answer. Call the customers."
        ),
        sort_score=config.actions.quote_follow_up_base_score + min(len(quotes), 50),
    )


def rank_actions(actions: Iterable[SmartAction], limit: int) -> List[SmartAction]:
    """Highest sort_score first; ties keep insertion order."""
    return sorted(actions, key=lambda a: a.sort_score, reverse=True)[:limit]


def generate_actions(
    profiles: Sequence[CustomerHealthProfile],
    products: Sequence[Product],
    orders: Sequence[Order],
    config: Optional[EngineConfig] = None,
    pending_quotes: Sequence[Quote] = (),
) -> List[SmartAction]:
    """
    Ranked daily actions.

    orders should be the qualifying (not deleted, not cancelled) orders; they
    decide which products count as having sold. pending_quotes are the stale
    high-value quotes worth a follow-up call.
    """
    config = config or default_config()
    candidates: List[SmartAction] = []
    for profile in profiles:
        candidates.extend(customer_actions(profile, config.actions, config.health.never_days))
    candidates.extend(stock_actions(products, sold_product_ids(orders), config.actions))
    follow_up = quote_follow_up_action(pending_quotes, config)
    if follow_up is not None:
        candidates.append(follow_up)

    ranked = rank_actions(candidates, config.actions.limit)
    logger.info(
        "Smart actions generated",
        extra={"candidate_count": len(candidates), "returned_count": len(ranked)},
    )
    return ranked
