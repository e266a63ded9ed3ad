"""
Customer and purchase Pydantic schemas.

Amounts on purchase requests are accepted loosely (numbers or numeric
strings) and parsed by the ledger sync service, which owns the rules for
missing and unparseable values.
"""

from pydantic import Field, StrictFloat, StrictInt
from datetime import datetime
from typing import Optional, List, Union
from trackpay.app.schemas.base import CamelModel
from trackpay.app.domain.ledger.totals import purchase_pending, summarize_purchases

# Strict numbers keep JSON booleans from being coerced to 1.0 / 0.0.
LooseAmount = Union[StrictFloat, StrictInt, str, None]


class CustomerCreate(CamelModel):
    """Schema for creating a new customer."""
    name: str = Field(..., min_length=1, max_length=200, description="Customer name")
    phone: str = Field(..., min_length=1, max_length=50, description="Phone number")
    location: Optional[str] = Field(None, max_length=255)


class CustomerUpdate(CamelModel):
    """Schema for updating an existing customer."""
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, min_length=1, max_length=50)
    location: Optional[str] = Field(None, max_length=255)


class PurchaseCreate(CamelModel):
    """Schema for recording a purchase, optionally with an upfront payment."""
    amount: LooseAmount = Field(None, description="Total owed (required, > 0)")
    paid: LooseAmount = Field(None, description="Amount paid upfront (defaults to 0)")
    description: Optional[str] = Field(None, max_length=255)
    date: Optional[datetime] = None


class PaymentUpdate(CamelModel):
    """
    Schema for recording a payment on an existing purchase.

    ``paid`` is the new absolute paid total, not the amount being added.
    Lowering the total is only allowed with ``correction`` set.
    """
    paid: LooseAmount = Field(None, description="New cumulative paid total")
    correction: bool = Field(False, description="Allow lowering the paid total")


class PurchaseResponse(CamelModel):
    """Schema for purchase response."""
    id: int
    customer_id: int
    amount: float
    paid: float
    pending: float
    description: str
    date: datetime
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, purchase) -> "PurchaseResponse":
        return cls(
            id=purchase.id,
            customer_id=purchase.customer_id,
            amount=purchase.amount,
            paid=purchase.paid,
            pending=purchase_pending(purchase),
            description=purchase.description,
            date=purchase.date,
            created_at=purchase.created_at,
            updated_at=purchase.updated_at,
        )


class CustomerResponse(CamelModel):
    """Schema for customer response, including purchases and derived totals."""
    id: int
    user_id: int
    name: str
    phone: str
    location: Optional[str]
    created_at: datetime
    updated_at: datetime
    purchases: List[PurchaseResponse]
    total_amount: float
    total_paid: float
    pending: float

    @classmethod
    def from_model(cls, customer) -> "CustomerResponse":
        totals = summarize_purchases(customer.purchases)
        return cls(
            id=customer.id,
            user_id=customer.user_id,
            name=customer.name,
            phone=customer.phone,
            location=customer.location,
            created_at=customer.created_at,
            updated_at=customer.updated_at,
            purchases=[PurchaseResponse.from_model(p) for p in customer.purchases],
            total_amount=totals.total_amount,
            total_paid=totals.total_paid,
            pending=totals.pending,
        )


class CustomerSummary(CamelModel):
    """Aggregate totals across all of a user's customers."""
    total_amount: float
    total_pending: float


class CustomerListResponse(CamelModel):
    """Schema for the customer list with its aggregate summary."""
    customers: List[CustomerResponse]
    summary: CustomerSummary
