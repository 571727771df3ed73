"""Computed customer intelligence: profiles, actions and the monthly forecast."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class ActionCategory(str, Enum):
    FINANCIAL = "financial"
    SALES = "sales"
    RELATIONSHIP = "relationship"
    STOCK = "stock"


class ActionPriority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class CustomerHealthProfile(BaseModel):
    """Financial and engagement snapshot for one active customer."""

    customer_id: str
    customer_name: str = ""
    total_debt: float = 0.0
    financial_risk_score: float = Field(default=0.0, ge=0, le=100)
    engagement_score: float = Field(default=0.0, ge=0, le=100)
    order_count: int = 0
    last_order_date: Optional[date] = None
    order_frequency: float = Field(description="Mean days between consecutive orders")
    days_since_last_order: int
    days_since_last_payment: int
    days_since_last_contact: int
    predicted_next_order_date: Optional[date] = None


class SmartAction(BaseModel):
    """A recommended intervention, ranked by sort_score."""

    id: str
    category: ActionCategory
    priority: ActionPriority
    title: str
    message: str
    customer_id: Optional[str] = None
    product_id: Optional[str] = None
    sort_score: float


class MonthlyForecast(BaseModel):
    """Current-month revenue and run-rate projections in the reporting currency."""

    current_total: float
    realistic: float
    optimistic: float
    pessimistic: float
    pending_hot: float
    run_rate: float
    last_month_total: float
    growth_rate: float
    trend: Trend


class TonnageForecast(BaseModel):
    """Shipped weight this month and its month-end projection."""

    current: float
    projected: float
    unit: str = "Ton"


class AtRiskCustomer(BaseModel):
    """Customer whose silence has outgrown their usual ordering rhythm."""

    customer_id: str
    customer_name: str
    risk_score: int = Field(ge=0, le=100)
    average_interval_days: float
    days_since_last_order: int
    reason: str


class IntelligenceReport(BaseModel):
    """Everything the dashboard reads from one engine run."""

    generated_on: date
    reporting_currency: str
    daily_actions: List[SmartAction] = Field(default_factory=list)
    customer_profiles: List[CustomerHealthProfile] = Field(default_factory=list)
    monthly_forecast: MonthlyForecast
    at_risk_customers: List[AtRiskCustomer] = Field(default_factory=list)
    conversion_rate: float = 0.0
    tonnage_forecast: TonnageForecast
    high_value_quote_ids: List[str] = Field(default_factory=list)
