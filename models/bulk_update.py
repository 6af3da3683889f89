"""
Audit trail for bulk payment status changes.

A PaymentBulkUpdate row is written once per bulk action, with one
PaymentBulkUpdateItem per targeted payment. Both are append-only.
"""
from uuid import uuid4

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class PaymentBulkUpdate(Base):
     __tablename__ = "payment_bulk_updates"

     id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
     user_id = Column(String(36), nullable=True)
     payments_count = Column(Integer, nullable=False)
     status = Column(String(20), nullable=False)
     notes = Column(Text, nullable=True)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     items = relationship("PaymentBulkUpdateItem", back_populates="bulk_update", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<PaymentBulkUpdate(id={self.id}, count={self.payments_count}, status='{self.status}')>"


class PaymentBulkUpdateItem(Base):
     __tablename__ = "payment_bulk_update_items"

     id = Column(Integer, primary_key=True, autoincrement=True)
     bulk_update_id = Column(
          String(36),
          ForeignKey("payment_bulk_updates.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     payment_id = Column(String(36), nullable=False, index=True)
     previous_status = Column(String(20), nullable=True)  # NULL when the payment was not found
     new_status = Column(String(20), nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     bulk_update = relationship("PaymentBulkUpdate", back_populates="items")

     def __repr__(self):
          return f"<PaymentBulkUpdateItem(payment_id={self.payment_id}, {self.previous_status} -> {self.new_status})>"
