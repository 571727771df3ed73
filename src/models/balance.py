"""Running balances and collection risk per customer."""

from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from models.records import Customer, Payment


class BalanceStatus(str, Enum):
    """Account state seen from the customer's side of the ledger."""

    RECEIVABLE = "receivable"  # customer holds credit
    PAYABLE = "payable"  # customer owes the business
    SETTLED = "settled"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskFactors(BaseModel):
    overdue_count: int = 0
    average_delay_days: float = 0.0
    overdue_ratio: float = Field(default=0.0, description="Overdue sum as % of total orders")
    balance_ratio: float = Field(default=0.0, description="|balance| as % of total orders")


class RiskAnalysis(BaseModel):
    risk_score: int = Field(ge=0, le=100)
    risk_level: RiskLevel
    factors: RiskFactors


class DueDateInfo(BaseModel):
    overdue_payments: List[Payment] = Field(default_factory=list)
    upcoming_payments: List[Payment] = Field(default_factory=list)
    total_overdue_amount: float = 0.0
    total_upcoming_amount: float = 0.0


class OrderLine(BaseModel):
    id: str
    date: Optional[dt.date] = None
    amount: float
    currency: str
    status: str


class PaymentLine(BaseModel):
    id: str
    date: Optional[dt.date] = None
    amount: float
    currency: str
    method: str
    status: str


class CustomerBalance(BaseModel):
    """Balance, due-date exposure and collection risk for one customer."""

    customer: Customer
    total_orders: float
    total_payments: float
    balance: float = Field(description="payments - orders; negative means the customer owes")
    status: BalanceStatus
    due_date_info: DueDateInfo
    risk_analysis: RiskAnalysis
    order_details: List[OrderLine] = Field(default_factory=list)
    payment_details: List[PaymentLine] = Field(default_factory=list)


class BalancesSummary(BaseModel):
    total_receivable: float = 0.0
    total_payable: float = 0.0
    net_balance: float = 0.0
    settled_count: int = 0
    total_overdue: float = 0.0
    total_upcoming: float = 0.0
    overdue_count: int = 0
    upcoming_count: int = 0
    high_risk_count: int = 0
    medium_risk_count: int = 0
    low_risk_count: int = 0
