"""
Ledger Sync Service (Domain Logic).

Keeps the customer-purchase ledger and the dashboard transaction ledger in
step: every amount recorded as paid on a purchase is posted exactly once as
an income transaction, in the same database transaction as the purchase
write.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import Select, select

from trackpay.app.core.exceptions import ValidationError, ResourceNotFoundError
from trackpay.app.models.purchase import Purchase
from trackpay.app.models.transaction import Transaction
from trackpay.app.models.enums import TransactionType, SyncCategory
from trackpay.app.domain.ledger.amounts import parse_amount
from trackpay.app.domain.ledger.clock import utcnow, as_utc
from trackpay.app.services.ledger_queries import LedgerQueryService

logger = logging.getLogger("trackpay.ledger_sync")

DEFAULT_PURCHASE_DESCRIPTION = "New Purchase"


class LedgerSyncService:

    @staticmethod
    async def record_purchase(
        db: AsyncSession,
        user_id: int,
        customer_id: int,
        amount: Any,
        paid: Any = None,
        description: Optional[str] = None,
        date: Optional[datetime] = None
    ) -> Purchase:
        """
        Record a purchase and post any upfront payment as income.

        Flow (single DB transaction):
        1. Resolve the customer (owned by user_id)
        2. Validate amount (> 0) and upfront payment (0 <= paid <= amount)
        3. Insert the Purchase
        4. If paid > 0, insert a "Customer Payment" income Transaction

        Args:
            db: Database session (committed or rolled back here)
            user_id: Acting user
            customer_id: Customer the purchase is recorded against
            amount: Total owed, as sent by the client
            paid: Amount paid upfront; absent or unparseable means 0
            description: Optional purchase description
            date: Purchase date, defaults to now

        Returns:
            Created Purchase

        Raises:
            ResourceNotFoundError: customer missing or not owned
            ValidationError: invalid amount or upfront payment
        """
        try:
            customer = await LedgerQueryService.get_owned_customer(db, user_id, customer_id)

            purchase_amount = _require_purchase_amount(amount)

            initial_paid = parse_amount(paid)
            if initial_paid is None:
                initial_paid = 0.0
            if initial_paid < 0:
                raise ValidationError("Paid amount cannot be negative", field="paid")
            if initial_paid > purchase_amount:
                raise ValidationError(
                    f"Paid amount cannot exceed purchase amount ({purchase_amount:.2f})",
                    field="paid"
                )

            description = (description or "").strip()
            purchase_date = as_utc(date) or utcnow()

            purchase = Purchase(
                customer_id=customer.id,
                amount=purchase_amount,
                paid=initial_paid,
                description=description or DEFAULT_PURCHASE_DESCRIPTION,
                date=purchase_date
            )
            db.add(purchase)
            await db.flush()  # To get purchase.id

            if initial_paid > 0:
                income_description = f"Payment from {customer.name}"
                if description:
                    income_description += f" - {description}"

                await LedgerSyncService._post_income(
                    db,
                    user_id=user_id,
                    amount=initial_paid,
                    category=SyncCategory.CUSTOMER_PAYMENT,
                    description=income_description,
                    date=purchase_date
                )

            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Purchase %s recorded for customer %s (amount=%.2f, paid=%.2f)",
            purchase.id, customer_id, purchase.amount, purchase.paid
        )
        return purchase

    @staticmethod
    async def record_payment(
        db: AsyncSession,
        user_id: int,
        customer_id: int,
        purchase_id: int,
        paid: Any,
        correction: bool = False
    ) -> Purchase:
        """
        Set a purchase's paid total and post the increase as income.

        ``paid`` is the new absolute total. Only the difference from the
        stored total is posted, so repeating a call with the same total
        posts nothing.

        Flow (single DB transaction):
        1. Resolve the customer (owned by user_id)
        2. Lock the purchase row (SELECT ... FOR UPDATE)
        3. delta = new total - current total
        4. delta > 0: update paid, insert a "Debt Recovery" income Transaction
           delta = 0: no change
           delta < 0: rejected unless ``correction`` is set, in which case
           paid is lowered and nothing is posted

        Raises:
            ResourceNotFoundError: customer or purchase missing or not owned
            ValidationError: invalid total, total above amount, or decrease
                without correction
        """
        try:
            customer = await LedgerQueryService.get_owned_customer(db, user_id, customer_id)

            result = await db.execute(locked_purchase_query(customer.id, purchase_id))
            purchase = result.scalar_one_or_none()

            if not purchase:
                raise ResourceNotFoundError("Purchase", purchase_id)

            new_total = parse_amount(paid)
            if new_total is None:
                raise ValidationError("Paid amount is required", field="paid")
            if new_total < 0:
                raise ValidationError("Paid amount cannot be negative", field="paid")
            if new_total > purchase.amount:
                raise ValidationError(
                    f"Paid amount cannot exceed purchase amount ({purchase.amount:.2f})",
                    field="paid"
                )

            previous_total = purchase.paid
            delta = round(new_total - previous_total, 2)

            if delta < 0 and not correction:
                logger.warning(
                    "Rejected paid decrease on purchase %s (%.2f -> %.2f)",
                    purchase_id, previous_total, new_total
                )
                raise ValidationError(
                    "Paid amount cannot be lowered without correction=true",
                    field="paid"
                )

            if delta != 0:
                purchase.paid = new_total
                await db.flush()

            if delta > 0:
                await LedgerSyncService._post_income(
                    db,
                    user_id=user_id,
                    amount=delta,
                    category=SyncCategory.DEBT_RECOVERY,
                    description=f"Debt recovered from {customer.name} - {purchase.description}",
                    date=utcnow()
                )

            await db.commit()
        except Exception:
            await db.rollback()
            raise

        if delta < 0:
            logger.info(
                "Purchase %s paid corrected %.2f -> %.2f (no ledger entry)",
                purchase_id, previous_total, new_total
            )
        return purchase

    @staticmethod
    async def _post_income(
        db: AsyncSession,
        user_id: int,
        amount: float,
        category: str,
        description: str,
        date: datetime
    ) -> Transaction:
        """Insert an income transaction into the caller's open unit of work."""
        transaction = Transaction(
            user_id=user_id,
            type=TransactionType.INCOME,
            amount=amount,
            category=category,
            description=description[:255],
            date=date
        )
        db.add(transaction)
        await db.flush()

        logger.info(
            "Posted %s income %.2f for user %s (transaction %s)",
            category, amount, user_id, transaction.id
        )
        return transaction


def _require_purchase_amount(amount: Any) -> float:
    if amount is None or (isinstance(amount, str) and not amount.strip()):
        raise ValidationError("Amount is required", field="amount")

    purchase_amount = parse_amount(amount)
    if purchase_amount is None or purchase_amount <= 0:
        raise ValidationError("Amount must be a positive number", field="amount")

    return purchase_amount


def locked_purchase_query(customer_id: int, purchase_id: int) -> Select:
    """Select a customer's purchase with a row lock held until commit."""
    return (
        select(Purchase)
        .where(Purchase.id == purchase_id, Purchase.customer_id == customer_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
