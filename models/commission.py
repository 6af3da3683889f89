"""
Commission model - the agency's cut of a paid rent installment.

One row per qualifying payment. Uniqueness is enforced by the callers'
existence checks rather than by a constraint, and rows are never
recomputed when a property's rate changes later.
"""
from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, Integer, String, Numeric, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Commission(Base):
     __tablename__ = "commissions"
     __table_args__ = (CheckConstraint("amount >= 0", name="amount_non_negative"),)

     id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
     payment_id = Column(
          String(36),
          ForeignKey("payments.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     lease_id = Column(Integer, ForeignKey("leases.id", ondelete="CASCADE"), nullable=False, index=True)
     amount = Column(Numeric(12, 2), nullable=False)
     rate = Column(Numeric(5, 2), nullable=False)  # percent
     status = Column(String(20), default="pending", nullable=False)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     payment = relationship("Payment", back_populates="commission")

     def __repr__(self):
          return f"<Commission(id={self.id}, payment_id={self.payment_id}, amount={self.amount}, rate={self.rate})>"
