from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class Lease(Base):
     """
     Lease model - rental agreement carrying the financial terms used to
     generate payment obligations.
     Maps to existing 'leases' table in the database.
     """
     __tablename__ = "leases"

     id = Column(Integer, primary_key=True, autoincrement=True)
     property_id = Column(Integer, ForeignKey("properties.id"), nullable=False, index=True)
     tenant_name = Column(String(255), nullable=True)

     # Pricing
     monthly_rent = Column(Numeric(12, 2), nullable=False)
     security_deposit = Column(Numeric(12, 2), nullable=True)
     agency_fee = Column(Numeric(12, 2), nullable=True)
     payment_frequency = Column(String(50), default="monthly", nullable=False)

     # Lease period
     start_date = Column(Date, nullable=True)
     end_date = Column(Date, nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     property = relationship("Property", back_populates="leases")
     payments = relationship("Payment", back_populates="lease", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Lease(id={self.id}, property_id={self.property_id}, frequency='{self.payment_frequency}')>"
