"""
Customer database model.

A customer is a counterparty the user sells to on credit.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from trackpay.app.db.session import Base


class Customer(Base):
    """
    Customer model.

    Every read and write is filtered by ``user_id`` (the owning user).
    Purchases are deleted together with their customer.
    """
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Ownership
    user_id = Column(Integer, ForeignKey('users.id', ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=False)
    location = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    purchases = relationship(
        "Purchase",
        back_populates="customer",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="desc(Purchase.date)",
    )

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}', user_id={self.user_id})>"
