"""
Payment model - every scheduled or recorded money movement tied to a lease.

The persisted status is a cache of what services.payment_status.classify()
computes from due_date / payment_date; it is refreshed on writes and can
drift from "today" between refreshes.
"""
import enum
from uuid import uuid4

from sqlalchemy import (
     Boolean, CheckConstraint, Column, Date, DateTime, Enum, ForeignKey, Integer, Numeric, String, Text, func,
)
from sqlalchemy.orm import relationship
from .base import Base


class PaymentStatus(str, enum.Enum):
     """Enumeration for payment status labels."""
     PAID = "paid"
     ADVANCED = "advanced"
     PENDING = "pending"
     LATE = "late"
     UNDEFINED = "undefined"


class PaymentType(str, enum.Enum):
     """Kinds of obligations a lease produces. Commissions apply to RENT only."""
     RENT = "rent"
     DEPOSIT = "deposit"
     AGENCY_FEE = "agency_fee"
     OTHER = "other"


def _enum_values(enum_cls):
     return [member.value for member in enum_cls]


class Payment(Base):
     __tablename__ = "payments"
     __table_args__ = (CheckConstraint("amount >= 0", name="amount_non_negative"),)

     id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
     lease_id = Column(
          Integer,
          ForeignKey("leases.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )

     amount = Column(Numeric(12, 2), nullable=False)
     due_date = Column(Date, nullable=True, index=True)  # NULL only for legacy/manual rows
     payment_date = Column(Date, nullable=True)
     payment_type = Column(
          Enum(PaymentType, name="payment_type", values_callable=_enum_values, create_constraint=True),
          default=PaymentType.RENT,
          nullable=False,
          index=True
     )
     status = Column(
          Enum(PaymentStatus, name="payment_status", values_callable=_enum_values, create_constraint=True),
          default=PaymentStatus.UNDEFINED,
          nullable=False,
          index=True
     )
     is_auto_generated = Column(Boolean, default=False, nullable=False)

     # Audit / descriptive metadata
     payment_method = Column(String(50), nullable=True)
     transaction_id = Column(String(255), nullable=True)
     notes = Column(Text, nullable=True)
     processed_by = Column(String(36), nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     lease = relationship("Lease", back_populates="payments")
     commission = relationship("Commission", back_populates="payment", uselist=False, cascade="all, delete-orphan")

     def __repr__(self):
          return (
               f"<Payment(id={self.id}, type='{self.payment_type.value}', amount={self.amount}, "
               f"status='{self.status.value}', due_date={self.due_date})>"
          )

     @property
     def is_rent(self) -> bool:
          return self.payment_type == PaymentType.RENT
