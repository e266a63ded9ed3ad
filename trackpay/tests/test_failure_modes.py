"""
Failure Injection Tests.

The purchase write and the income transaction insert must succeed or fail
together; a failed unit of work leaves no trace in either ledger.
"""

import pytest
from sqlalchemy import select, func
from sqlalchemy.dialects import postgresql

from trackpay.app.core.exceptions import ValidationError, ResourceNotFoundError
from trackpay.app.core.security import get_password_hash
from trackpay.app.domain.ledger import ledger_sync
from trackpay.app.domain.ledger.ledger_sync import LedgerSyncService, locked_purchase_query
from trackpay.app.models.customer import Customer
from trackpay.app.models.purchase import Purchase
from trackpay.app.models.transaction import Transaction
from trackpay.app.models.user import User


@pytest.fixture
async def owner_and_customer(db_session):
    """Create a user with one customer directly in the database."""
    user = User(username="ledger_owner", hashed_password=get_password_hash("password123"))
    db_session.add(user)
    await db_session.flush()

    customer = Customer(user_id=user.id, name="Asha", phone="555")
    db_session.add(customer)
    await db_session.commit()

    return user.id, customer.id


@pytest.fixture
def failing_income_post(monkeypatch):
    """Make every income insert fail after the purchase row was written."""
    async def _fail(*args, **kwargs):
        raise RuntimeError("transactions table unavailable")

    monkeypatch.setattr(LedgerSyncService, "_post_income", staticmethod(_fail))


async def _counts(session_factory):
    async with session_factory() as session:
        purchases = (await session.execute(select(func.count(Purchase.id)))).scalar()
        transactions = (await session.execute(select(func.count(Transaction.id)))).scalar()
    return purchases, transactions


@pytest.mark.asyncio
async def test_record_purchase_commits_both_rows(db_session, session_factory, owner_and_customer):
    user_id, customer_id = owner_and_customer

    purchase = await LedgerSyncService.record_purchase(
        db_session, user_id=user_id, customer_id=customer_id, amount=100, paid=40
    )

    assert purchase.amount == 100
    assert purchase.paid == 40

    async with session_factory() as session:
        rows = (await session.execute(select(Transaction))).scalars().all()
    assert len(rows) == 1
    assert rows[0].amount == 40
    assert rows[0].category == "Customer Payment"
    assert rows[0].user_id == user_id


@pytest.mark.asyncio
async def test_record_purchase_rolls_back_when_income_insert_fails(
    db_session, session_factory, owner_and_customer, failing_income_post
):
    user_id, customer_id = owner_and_customer

    with pytest.raises(RuntimeError):
        await LedgerSyncService.record_purchase(
            db_session, user_id=user_id, customer_id=customer_id, amount=100, paid=40
        )

    assert await _counts(session_factory) == (0, 0)


@pytest.mark.asyncio
async def test_unpaid_purchase_does_not_touch_transactions(
    db_session, session_factory, owner_and_customer, failing_income_post
):
    """With nothing paid the income path is never reached."""
    user_id, customer_id = owner_and_customer

    await LedgerSyncService.record_purchase(
        db_session, user_id=user_id, customer_id=customer_id, amount=100
    )

    assert await _counts(session_factory) == (1, 0)


@pytest.mark.asyncio
async def test_record_payment_rolls_back_paid_when_income_insert_fails(
    db_session, session_factory, owner_and_customer, monkeypatch
):
    user_id, customer_id = owner_and_customer

    purchase = await LedgerSyncService.record_purchase(
        db_session, user_id=user_id, customer_id=customer_id, amount=100, paid=40
    )
    purchase_id = purchase.id

    async def _fail(*args, **kwargs):
        raise RuntimeError("transactions table unavailable")

    monkeypatch.setattr(LedgerSyncService, "_post_income", staticmethod(_fail))

    with pytest.raises(RuntimeError):
        await LedgerSyncService.record_payment(
            db_session, user_id=user_id, customer_id=customer_id,
            purchase_id=purchase_id, paid=100
        )

    async with session_factory() as session:
        stored = await session.get(Purchase, purchase_id)
        assert stored.paid == 40
    assert await _counts(session_factory) == (1, 1)


@pytest.mark.asyncio
async def test_session_usable_after_rolled_back_payment(
    db_session, session_factory, owner_and_customer
):
    """A rejected payment leaves the session clean for the next unit of work."""
    user_id, customer_id = owner_and_customer

    purchase = await LedgerSyncService.record_purchase(
        db_session, user_id=user_id, customer_id=customer_id, amount=100, paid=40
    )
    purchase_id = purchase.id

    with pytest.raises(ValidationError):
        await LedgerSyncService.record_payment(
            db_session, user_id=user_id, customer_id=customer_id,
            purchase_id=purchase_id, paid=500
        )

    updated = await LedgerSyncService.record_payment(
        db_session, user_id=user_id, customer_id=customer_id,
        purchase_id=purchase_id, paid=90
    )
    assert updated.paid == 90

    async with session_factory() as session:
        amounts = sorted(
            (await session.execute(select(Transaction.amount))).scalars().all()
        )
    assert amounts == [40, 50]


@pytest.mark.asyncio
async def test_record_payment_for_foreign_user(db_session, owner_and_customer):
    user_id, customer_id = owner_and_customer

    purchase = await LedgerSyncService.record_purchase(
        db_session, user_id=user_id, customer_id=customer_id, amount=100
    )

    with pytest.raises(ResourceNotFoundError):
        await LedgerSyncService.record_payment(
            db_session, user_id=user_id + 1, customer_id=customer_id,
            purchase_id=purchase.id, paid=100
        )


def test_purchase_lookup_locks_row():
    sql = str(locked_purchase_query(1, 2).compile(dialect=postgresql.dialect()))
    assert sql.rstrip().endswith("FOR UPDATE")


@pytest.mark.asyncio
async def test_record_payment_reads_purchase_under_lock(db_session, owner_and_customer, monkeypatch):
    user_id, customer_id = owner_and_customer

    purchase = await LedgerSyncService.record_purchase(
        db_session, user_id=user_id, customer_id=customer_id, amount=100
    )
    purchase_id = purchase.id

    issued = []

    def _tracking_query(*args):
        statement = locked_purchase_query(*args)
        issued.append(statement)
        return statement

    monkeypatch.setattr(ledger_sync, "locked_purchase_query", _tracking_query)

    await LedgerSyncService.record_payment(
        db_session, user_id=user_id, customer_id=customer_id,
        purchase_id=purchase_id, paid=30
    )

    assert len(issued) == 1
    assert issued[0]._for_update_arg is not None
