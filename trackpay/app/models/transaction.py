"""
Transaction database model.

Dashboard ledger entries (income/expense) owned by a user.
"""

from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from trackpay.app.db.session import Base
from trackpay.app.models.enums import TransactionType


class Transaction(Base):
    """
    Transaction model.

    Append-only apart from explicit deletion by the owner.
    Income rows in the "Customer Payment" / "Debt Recovery" categories are
    posted by ledger sync when a purchase is paid.
    """
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)

    type = Column(Enum(TransactionType), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    category = Column(String(100), nullable=False, index=True)
    description = Column(String(255), nullable=True)
    date = Column(DateTime(timezone=True), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Transaction(id={self.id}, type='{self.type.value}', amount={self.amount}, category='{self.category}')>"
