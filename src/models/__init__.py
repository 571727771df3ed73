"""Pydantic models for input records and computed results."""

from models.balance import (  # noqa: F401
    BalancesSummary,
    BalanceStatus,
    CustomerBalance,
    DueDateInfo,
    RiskAnalysis,
    RiskFactors,
    RiskLevel,
)
from models.insights import (  # noqa: F401
    ActionCategory,
    ActionPriority,
    AtRiskCustomer,
    CustomerHealthProfile,
    IntelligenceReport,
    MonthlyForecast,
    SmartAction,
    TonnageForecast,
    Trend,
)
from models.records import (  # noqa: F401
    Customer,
    DataSnapshot,
    Meeting,
    Order,
    OrderItem,
    OrderStatus,
    Payment,
    PaymentStatus,
    Product,
    Quote,
    QuoteStatus,
)
