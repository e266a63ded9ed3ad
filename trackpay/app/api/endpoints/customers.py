"""
Customer API Endpoints.

Customer CRUD plus the purchase endpoints that sync payments into the
dashboard ledger. Every lookup is scoped to the authenticated user; other
users' customers answer 404.
"""

import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from trackpay.app.db.session import get_db
from trackpay.app.models.customer import Customer
from trackpay.app.schemas.base import MessageResponse
from trackpay.app.schemas.customer import (
    CustomerCreate, CustomerUpdate, CustomerResponse, CustomerListResponse,
    CustomerSummary, PurchaseCreate, PaymentUpdate
)
from trackpay.app.core.dependencies import get_current_user
from trackpay.app.core.exceptions import ValidationError
from trackpay.app.services.ledger_queries import LedgerQueryService
from trackpay.app.domain.ledger.ledger_sync import LedgerSyncService
from trackpay.app.domain.ledger.totals import summarize_customers

router = APIRouter(prefix="/customers", tags=["Customers"])
logger = logging.getLogger("trackpay.customers")


async def _customer_response(db: AsyncSession, user_id: int, customer_id: int) -> CustomerResponse:
    customer = await LedgerQueryService.get_owned_customer(db, user_id, customer_id, with_purchases=True)
    return CustomerResponse.from_model(customer)


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    List the user's customers with purchases and an aggregate summary.
    """
    customers = await LedgerQueryService.list_customers(db, current_user["user_id"])
    totals = summarize_customers(customers)

    return CustomerListResponse(
        customers=[CustomerResponse.from_model(c) for c in customers],
        summary=CustomerSummary(total_amount=totals.total_amount, total_pending=totals.pending)
    )


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Get a single customer with purchases."""
    return await _customer_response(db, current_user["user_id"], customer_id)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    customer_data: CustomerCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a customer owned by the authenticated user.
    """
    name = customer_data.name.strip()
    phone = customer_data.phone.strip()
    if not name or not phone:
        raise ValidationError("Name and phone are required")

    new_customer = Customer(
        user_id=current_user["user_id"],
        name=name,
        phone=phone,
        location=(customer_data.location or "").strip() or None
    )

    db.add(new_customer)
    await db.commit()

    logger.info("Customer %s created by user %s", new_customer.id, current_user["user_id"])
    return await _customer_response(db, current_user["user_id"], new_customer.id)


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update customer details. Only provided fields change.
    """
    customer = await LedgerQueryService.get_owned_customer(db, current_user["user_id"], customer_id)

    update_data = customer_data.model_dump(exclude_unset=True)
    for field in ("name", "phone"):
        if field in update_data:
            value = (update_data[field] or "").strip()
            if not value:
                raise ValidationError(f"{field.capitalize()} cannot be empty", field=field)
            update_data[field] = value
    if "location" in update_data:
        update_data["location"] = (update_data["location"] or "").strip() or None

    for field, value in update_data.items():
        setattr(customer, field, value)

    await db.commit()

    return await _customer_response(db, current_user["user_id"], customer_id)


@router.delete("/{customer_id}", response_model=MessageResponse)
async def delete_customer(
    customer_id: int,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a customer and their purchases.

    Income transactions already posted for the customer's payments stay in
    the dashboard ledger.
    """
    customer = await LedgerQueryService.get_owned_customer(
        db, current_user["user_id"], customer_id, with_purchases=True
    )

    await db.delete(customer)
    await db.commit()

    logger.info("Customer %s deleted by user %s", customer_id, current_user["user_id"])
    return MessageResponse(message="Customer deleted successfully")


@router.post("/{customer_id}/purchases", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def add_purchase(
    customer_id: int,
    purchase_data: PurchaseCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Record a purchase for a customer.

    An upfront payment is posted to the dashboard as "Customer Payment"
    income in the same database transaction.
    """
    await LedgerSyncService.record_purchase(
        db,
        user_id=current_user["user_id"],
        customer_id=customer_id,
        amount=purchase_data.amount,
        paid=purchase_data.paid,
        description=purchase_data.description,
        date=purchase_data.date
    )

    return await _customer_response(db, current_user["user_id"], customer_id)


@router.put("/{customer_id}/purchases/{purchase_id}", response_model=CustomerResponse)
async def update_purchase_payment(
    customer_id: int,
    purchase_id: int,
    payment_data: PaymentUpdate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Set the paid total of a purchase.

    ``paid`` is the new cumulative total; only the increase over the stored
    total is posted to the dashboard as "Debt Recovery" income.
    """
    await LedgerSyncService.record_payment(
        db,
        user_id=current_user["user_id"],
        customer_id=customer_id,
        purchase_id=purchase_id,
        paid=payment_data.paid,
        correction=payment_data.correction
    )

    return await _customer_response(db, current_user["user_id"], customer_id)
