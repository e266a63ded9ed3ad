"""
Transaction API Endpoints.

Dashboard ledger: list, create, delete and summarize income/expense entries.
"""

from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from trackpay.app.db.session import get_db
from trackpay.app.models.transaction import Transaction
from trackpay.app.models.enums import TransactionType
from trackpay.app.schemas.base import MessageResponse
from trackpay.app.schemas.transaction import TransactionCreate, TransactionResponse, TransactionSummary
from trackpay.app.core.dependencies import get_current_user
from trackpay.app.core.exceptions import ValidationError
from trackpay.app.services.ledger_queries import LedgerQueryService
from trackpay.app.domain.ledger.amounts import parse_amount
from trackpay.app.domain.ledger.clock import utcnow, as_utc

router = APIRouter(prefix="/transactions", tags=["Transactions"])


@router.get("", response_model=List[TransactionResponse])
async def list_transactions(
    type: Optional[TransactionType] = Query(None, description="income or expense"),
    category: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List the user's transactions, newest first.

    Date bounds are inclusive.
    """
    transactions = await LedgerQueryService.list_transactions(
        db,
        current_user["user_id"],
        tx_type=type,
        category=category,
        start_date=as_utc(start_date),
        end_date=as_utc(end_date)
    )
    return [TransactionResponse.model_validate(t) for t in transactions]


@router.get("/summary", response_model=TransactionSummary)
async def get_summary(
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Income, expense, balance and expense breakdown by category.
    """
    return await LedgerQueryService.summarize_transactions(
        db,
        current_user["user_id"],
        start_date=as_utc(start_date),
        end_date=as_utc(end_date)
    )


@router.post("", response_model=TransactionResponse, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    transaction_data: TransactionCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Create a manual income or expense entry."""
    category = transaction_data.category.strip()
    if not category:
        raise ValidationError("Category is required", field="category")

    # Stored amounts are in cents; anything that rounds to zero is not positive.
    amount = parse_amount(transaction_data.amount)
    if amount is None or amount <= 0:
        raise ValidationError("Amount must be a positive number", field="amount")

    transaction = Transaction(
        user_id=current_user["user_id"],
        type=transaction_data.type,
        amount=amount,
        category=category,
        description=transaction_data.description or None,
        date=as_utc(transaction_data.date) or utcnow()
    )

    db.add(transaction)
    await db.commit()
    await db.refresh(transaction)

    return TransactionResponse.model_validate(transaction)


@router.delete("/{transaction_id}", response_model=MessageResponse)
async def delete_transaction(
    transaction_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a transaction.

    Deleting a synced income row does not change the purchase it came from.
    """
    transaction = await LedgerQueryService.get_owned_transaction(
        db, current_user["user_id"], transaction_id
    )

    await db.delete(transaction)
    await db.commit()

    return MessageResponse(message="Transaction deleted successfully")
