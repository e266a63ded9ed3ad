"""
Transaction Pydantic schemas.
"""

from pydantic import Field
from datetime import datetime
from typing import Optional, Dict
from trackpay.app.schemas.base import CamelModel
from trackpay.app.models.enums import TransactionType


class TransactionCreate(CamelModel):
    """Schema for creating a dashboard transaction."""
    type: TransactionType
    amount: float = Field(..., gt=0, description="Positive amount")
    category: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=255)
    date: Optional[datetime] = None


class TransactionResponse(CamelModel):
    """Schema for transaction response."""
    id: int
    user_id: int
    type: TransactionType
    amount: float
    category: str
    description: Optional[str]
    date: datetime
    created_at: datetime


class TransactionSummary(CamelModel):
    """Income/expense totals over a date range."""
    income: float
    expense: float
    balance: float
    category_breakdown: Dict[str, float]
