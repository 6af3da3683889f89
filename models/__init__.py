from .base import Base
from .property import Property
from .lease import Lease
from .payment import Payment, PaymentStatus, PaymentType
from .commission import Commission
from .bulk_update import PaymentBulkUpdate, PaymentBulkUpdateItem

__all__ = [
     "Base",
     "Property",
     "Lease",
     "Payment",
     "PaymentStatus",
     "PaymentType",
     "Commission",
     "PaymentBulkUpdate",
     "PaymentBulkUpdateItem",
]
