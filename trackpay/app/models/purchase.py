"""
Purchase database model.

A purchase is a debt record against a customer.
"""

from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from trackpay.app.db.session import Base


class Purchase(Base):
    """
    Purchase model.

    ``amount`` is the total owed and ``paid`` the cumulative amount received.
    0 <= paid <= amount. Pending balance is derived on read.
    """
    __tablename__ = "purchases"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    customer_id = Column(Integer, ForeignKey('customers.id', ondelete="CASCADE"), nullable=False, index=True)

    # Financials
    amount = Column(Float, nullable=False)
    paid = Column(Float, nullable=False, default=0.0)

    description = Column(String(255), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    customer = relationship("Customer", back_populates="purchases")

    def __repr__(self):
        return f"<Purchase(id={self.id}, customer_id={self.customer_id}, amount={self.amount}, paid={self.paid})>"
