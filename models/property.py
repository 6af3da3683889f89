from sqlalchemy import Column, Integer, String, Numeric, DateTime, func
from sqlalchemy.orm import relationship
from .base import Base


class Property(Base):
     """
     Property model - a managed property with its agency commission configuration.
     Only the columns the payment core reads are mapped here.
     """
     __tablename__ = "properties"

     id = Column(Integer, primary_key=True, autoincrement=True)
     title = Column(String(255), nullable=False)
     location = Column(String(255), nullable=True)
     agency_id = Column(String(36), nullable=True, index=True)

     # Percent of each paid rent installment earned by the agency (NULL = use default)
     agency_commission_rate = Column(Numeric(5, 2), nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     leases = relationship("Lease", back_populates="property")

     def __repr__(self):
          return f"<Property(id={self.id}, title='{self.title}')>"
