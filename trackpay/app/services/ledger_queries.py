"""
Ledger Query Service.

Read-side lookups and aggregation for customers and dashboard transactions.
Every query is filtered by the owning user's id.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from trackpay.app.core.exceptions import ResourceNotFoundError
from trackpay.app.models.customer import Customer
from trackpay.app.models.transaction import Transaction
from trackpay.app.models.enums import TransactionType
from trackpay.app.schemas.transaction import TransactionSummary


def _date_range(query, column, start_date: Optional[datetime], end_date: Optional[datetime]):
    # Both bounds inclusive
    if start_date:
        query = query.where(column >= start_date)
    if end_date:
        query = query.where(column <= end_date)
    return query


class LedgerQueryService:

    @staticmethod
    async def get_owned_customer(
        db: AsyncSession,
        user_id: int,
        customer_id: int,
        with_purchases: bool = False
    ) -> Customer:
        """
        Fetch a customer owned by ``user_id``.

        Raises ResourceNotFoundError when the customer does not exist or
        belongs to someone else.
        """
        query = select(Customer).where(
            Customer.id == customer_id,
            Customer.user_id == user_id
        )
        if with_purchases:
            # Refresh the collection even if the customer is already in the session
            query = query.options(selectinload(Customer.purchases)).execution_options(
                populate_existing=True
            )

        result = await db.execute(query)
        customer = result.scalar_one_or_none()

        if not customer:
            raise ResourceNotFoundError("Customer", customer_id)

        return customer

    @staticmethod
    async def list_customers(db: AsyncSession, user_id: int) -> List[Customer]:
        """All of a user's customers with their purchases (newest purchase first)."""
        query = (
            select(Customer)
            .options(selectinload(Customer.purchases))
            .where(Customer.user_id == user_id)
            .order_by(Customer.created_at.desc(), Customer.id.desc())
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def get_owned_transaction(db: AsyncSession, user_id: int, transaction_id: int) -> Transaction:
        result = await db.execute(
            select(Transaction).where(
                Transaction.id == transaction_id,
                Transaction.user_id == user_id
            )
        )
        transaction = result.scalar_one_or_none()

        if not transaction:
            raise ResourceNotFoundError("Transaction", transaction_id)

        return transaction

    @staticmethod
    async def list_transactions(
        db: AsyncSession,
        user_id: int,
        tx_type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> List[Transaction]:
        """A user's transactions, newest first, with optional filters."""
        query = select(Transaction).where(Transaction.user_id == user_id)

        if tx_type:
            query = query.where(Transaction.type == tx_type)
        if category:
            query = query.where(Transaction.category == category)
        query = _date_range(query, Transaction.date, start_date, end_date)

        query = query.order_by(Transaction.date.desc(), Transaction.id.desc())

        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def summarize_transactions(
        db: AsyncSession,
        user_id: int,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None
    ) -> TransactionSummary:
        """
        Income, expense and balance over a date range.

        ``category_breakdown`` covers expense transactions only.
        """
        # 1. Totals per type
        totals_query = select(
            Transaction.type, func.sum(Transaction.amount)
        ).where(Transaction.user_id == user_id)
        totals_query = _date_range(totals_query, Transaction.date, start_date, end_date)
        totals_query = totals_query.group_by(Transaction.type)

        totals = {tx_type: total or 0.0 for tx_type, total in (await db.execute(totals_query)).all()}
        income = round(totals.get(TransactionType.INCOME, 0.0), 2)
        expense = round(totals.get(TransactionType.EXPENSE, 0.0), 2)

        # 2. Expense breakdown per category
        breakdown_query = select(
            Transaction.category, func.sum(Transaction.amount)
        ).where(
            Transaction.user_id == user_id,
            Transaction.type == TransactionType.EXPENSE
        )
        breakdown_query = _date_range(breakdown_query, Transaction.date, start_date, end_date)
        breakdown_query = breakdown_query.group_by(Transaction.category)

        category_breakdown = {
            category: round(total or 0.0, 2)
            for category, total in (await db.execute(breakdown_query)).all()
        }

        return TransactionSummary(
            income=income,
            expense=expense,
            balance=round(income - expense, 2),
            category_breakdown=category_breakdown
        )
