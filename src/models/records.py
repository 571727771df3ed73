"""Read-only business records supplied by the document store.

Defaulting happens here, once: missing amounts become 0, missing flags become
False and unparsable dates become None, so the services never need to guard
against absent fields.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from utils.dates import parse_date


class OrderStatus(str, Enum):
    """Order statuses the engine reacts to; other values pass through as text."""

    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class QuoteStatus(str, Enum):
    PREPARED = "Prepared"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    COLLECTED = "Collected"
    OVERDUE = "Overdue"
    CANCELLED = "Cancelled"


class MeetingStatus(str, Enum):
    PLANNED = "Planned"
    DONE = "Done"
    CANCELLED = "Cancelled"


def _alias(*names: str) -> AliasChoices:
    return AliasChoices(*names)


class Record(BaseModel):
    """Immutable input record; unknown keys from the store are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    is_deleted: bool = Field(default=False, validation_alias=_alias("is_deleted", "isDeleted"))

    @field_validator("is_deleted", mode="before")
    @classmethod
    def _flag_default(cls, value: Any) -> bool:
        return False if value is None else value


def _as_number(value: Any) -> Any:
    return 0 if value in (None, "") else value


class Customer(Record):
    id: str
    name: str = ""
    city: Optional[str] = None


class OrderItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    product_id: str = Field(validation_alias=_alias("product_id", "productId"))
    quantity: float = 0
    unit_price: float = Field(default=0, validation_alias=_alias("unit_price", "unitPrice"))
    unit: Optional[str] = None

    @field_validator("quantity", "unit_price", mode="before")
    @classmethod
    def _zero_if_missing(cls, value: Any) -> Any:
        return _as_number(value)


class Order(Record):
    id: str = ""
    customer_id: str = Field(validation_alias=_alias("customer_id", "customerId"))
    order_date: Optional[date] = Field(
        default=None, validation_alias=_alias("order_date", "orderDate")
    )
    status: str = ""
    total_amount: float = Field(
        default=0, validation_alias=_alias("total_amount", "totalAmount")
    )
    currency: Optional[str] = None
    items: List[OrderItem] = Field(default_factory=list)

    @field_validator("order_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Optional[date]:
        return parse_date(value)

    @field_validator("total_amount", mode="before")
    @classmethod
    def _zero_if_missing(cls, value: Any) -> Any:
        return _as_number(value)

    @field_validator("items", mode="before")
    @classmethod
    def _empty_if_missing(cls, value: Any) -> Any:
        return value or []

    @property
    def is_cancelled(self) -> bool:
        return self.status == OrderStatus.CANCELLED


class Quote(Record):
    id: str = ""
    customer_id: str = Field(validation_alias=_alias("customer_id", "customerId"))
    quote_date: Optional[date] = Field(
        default=None, validation_alias=_alias("quote_date", "quoteDate")
    )
    status: str = QuoteStatus.PREPARED.value
    total_amount: float = Field(
        default=0, validation_alias=_alias("total_amount", "totalAmount")
    )
    currency: Optional[str] = None
    order_id: Optional[str] = Field(default=None, validation_alias=_alias("order_id", "orderId"))

    @field_validator("quote_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Optional[date]:
        return parse_date(value)

    @field_validator("total_amount", mode="before")
    @classmethod
    def _zero_if_missing(cls, value: Any) -> Any:
        return _as_number(value)


class Payment(Record):
    id: str = ""
    customer_id: str = Field(validation_alias=_alias("customer_id", "customerId"))
    order_id: Optional[str] = Field(default=None, validation_alias=_alias("order_id", "orderId"))
    amount: float = 0
    currency: Optional[str] = None
    due_date: Optional[date] = Field(default=None, validation_alias=_alias("due_date", "dueDate"))
    paid_date: Optional[date] = Field(
        default=None, validation_alias=_alias("paid_date", "paidDate")
    )
    created_at: Optional[date] = Field(
        default=None, validation_alias=_alias("created_at", "createdAt")
    )
    status: str = PaymentStatus.PENDING.value
    payment_method: Optional[str] = Field(
        default=None, validation_alias=_alias("payment_method", "paymentMethod")
    )

    @field_validator("due_date", "paid_date", "created_at", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Optional[date]:
        return parse_date(value)

    @field_validator("amount", mode="before")
    @classmethod
    def _zero_if_missing(cls, value: Any) -> Any:
        return _as_number(value)

    @property
    def is_cancelled(self) -> bool:
        return self.status == PaymentStatus.CANCELLED

    @property
    def is_collected(self) -> bool:
        return self.status == PaymentStatus.COLLECTED

    @property
    def activity_date(self) -> Optional[date]:
        """When the money moved, falling back to when the record was created."""
        return self.paid_date or self.created_at


class Meeting(Record):
    id: str = ""
    customer_id: str = Field(validation_alias=_alias("customer_id", "customerId"))
    meeting_date: Optional[date] = Field(
        default=None, validation_alias=_alias("meeting_date", "meetingDate")
    )
    next_action_date: Optional[date] = Field(
        default=None, validation_alias=_alias("next_action_date", "nextActionDate")
    )
    status: str = ""

    @field_validator("meeting_date", "next_action_date", mode="before")
    @classmethod
    def _parse_date(cls, value: Any) -> Optional[date]:
        return parse_date(value)

    @property
    def is_cancelled(self) -> bool:
        return self.status == MeetingStatus.CANCELLED


class Product(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    id: str
    name: str = ""
    stock_quantity: float = Field(
        default=0, validation_alias=_alias("stock_quantity", "stockQuantity", "stock")
    )

    @field_validator("stock_quantity", mode="before")
    @classmethod
    def _zero_if_missing(cls, value: Any) -> Any:
        return _as_number(value)


class DataSnapshot(BaseModel):
    """Immutable bundle of every collection the engine reads."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    customers: List[Customer] = Field(default_factory=list)
    orders: List[Order] = Field(default_factory=list)
    quotes: List[Quote] = Field(default_factory=list)
    payments: List[Payment] = Field(default_factory=list)
    meetings: List[Meeting] = Field(default_factory=list)
    products: List[Product] = Field(default_factory=list)

    def active_customers(self) -> List[Customer]:
        return [c for c in self.customers if not c.is_deleted]

    def qualifying_orders(self) -> List[Order]:
        """Orders that count toward money and timing: not deleted, not cancelled."""
        return [o for o in self.orders if not o.is_deleted and not o.is_cancelled]
