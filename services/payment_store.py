"""
Payment Store - persistence collaborator for the payment core.

Wraps a SQLAlchemy session behind the small set of filtered queries,
inserts and updates the services need. Every write method is one unit of
work: it commits on success, rolls back and raises PersistenceError on
failure. Nothing here spans several logical steps in one transaction.
"""
import logging
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

import config
from models import (
     Commission,
     Lease,
     Payment,
     PaymentBulkUpdate,
     PaymentBulkUpdateItem,
     PaymentStatus,
     PaymentType,
     Property,
)
from .exceptions import LeaseNotFound, PersistenceError

logger = logging.getLogger(__name__)


class PaymentStore:
     """Store for payments, commissions and bulk update audit rows."""

     def __init__(self, db: Session, default_commission_rate: Optional[Decimal] = None):
          self.db = db
          self.default_commission_rate = (
               default_commission_rate
               if default_commission_rate is not None
               else config.DEFAULT_COMMISSION_RATE
          )

     @contextmanager
     def _unit(self, action: str, write: bool = True):
          try:
               yield
               if write:
                    self.db.commit()
          except SQLAlchemyError as exc:
               self.db.rollback()
               logger.error("Store failure while trying to %s: %s", action, exc)
               raise PersistenceError(f"Failed to {action}") from exc

     # ------------------------------------------------------------------
     # Leases
     # ------------------------------------------------------------------

     def get_lease(self, lease_id: int) -> Lease:
          with self._unit("fetch lease", write=False):
               lease = self.db.get(Lease, lease_id)
          if lease is None:
               raise LeaseNotFound(lease_id)
          return lease

     # ------------------------------------------------------------------
     # Payments
     # ------------------------------------------------------------------

     def find_payments(
          self,
          lease_id: Optional[int] = None,
          payment_type: Optional[PaymentType] = None,
          due_date: Optional[date] = None,
          lease_ids: Optional[Iterable[int]] = None,
     ) -> list[Payment]:
          """Payments matching every given filter, ordered by due date."""
          query = select(Payment)
          if lease_id is not None:
               query = query.where(Payment.lease_id == lease_id)
          if lease_ids is not None:
               query = query.where(Payment.lease_id.in_(list(lease_ids)))
          if payment_type is not None:
               query = query.where(Payment.payment_type == payment_type)
          if due_date is not None:
               query = query.where(Payment.due_date == due_date)
          query = query.order_by(Payment.due_date, Payment.created_at)

          with self._unit("fetch payments", write=False):
               return list(self.db.scalars(query).all())

     def find_existing_due_dates(self, lease_id: int, payment_type: PaymentType) -> set[date]:
          """Calendar dates already holding a payment of this type for the lease."""
          query = select(Payment.due_date).where(
               Payment.lease_id == lease_id,
               Payment.payment_type == payment_type,
               Payment.due_date.is_not(None),
          )
          with self._unit("check existing payments", write=False):
               return set(self.db.scalars(query).all())

     def get_payments(self, payment_ids: Sequence[str]) -> list[Payment]:
          if not payment_ids:
               return []
          query = select(Payment).where(Payment.id.in_(list(payment_ids)))
          with self._unit("fetch payments", write=False):
               return list(self.db.scalars(query).all())

     def get_payment(self, payment_id: str) -> Optional[Payment]:
          with self._unit("fetch payment", write=False):
               return self.db.get(Payment, payment_id)

     def insert_payments(self, rows: Sequence[dict]) -> list[Payment]:
          """Insert payment drafts in one write and return them with ids assigned."""
          payments = [Payment(**row) for row in rows]
          with self._unit("insert payments"):
               self.db.add_all(payments)
               self.db.flush()
          return payments

     def update_payments(self, payment_ids: Sequence[str], patch: dict) -> list[Payment]:
          """Apply the same column patch to every listed payment."""
          if not payment_ids:
               return []
          with self._unit("update payments"):
               payments = list(
                    self.db.scalars(select(Payment).where(Payment.id.in_(list(payment_ids)))).all()
               )
               for payment in payments:
                    for column, value in patch.items():
                         setattr(payment, column, value)
               self.db.flush()
          return payments

     def settle_on_due_date(self, payment_ids: Sequence[str]) -> list[Payment]:
          """
          Mark payments paid with payment_date back-dated to their due_date.

          One UPDATE statement for the whole batch; the rows are re-read so
          the returned objects carry the stored values.
          """
          if not payment_ids:
               return []
          ids = list(payment_ids)
          statement = (
               update(Payment)
               .where(Payment.id.in_(ids))
               .values(status=PaymentStatus.PAID, payment_date=Payment.due_date)
               .execution_options(synchronize_session="fetch")
          )
          with self._unit("mark payments paid"):
               self.db.execute(statement)
          query = select(Payment).where(Payment.id.in_(ids)).execution_options(populate_existing=True)
          with self._unit("fetch payments", write=False):
               return list(self.db.scalars(query).all())

     def delete_payments(self, payment_ids: Sequence[str]) -> int:
          if not payment_ids:
               return 0
          with self._unit("delete payments"):
               payments = list(
                    self.db.scalars(select(Payment).where(Payment.id.in_(list(payment_ids)))).all()
               )
               for payment in payments:
                    self.db.delete(payment)
               self.db.flush()
          return len(payments)

     # ------------------------------------------------------------------
     # Commissions
     # ------------------------------------------------------------------

     def insert_commission(self, draft: dict) -> Commission:
          commission = Commission(**draft)
          with self._unit("record commission"):
               self.db.add(commission)
               self.db.flush()
          return commission

     def find_commission(self, payment_id: str) -> Optional[Commission]:
          query = select(Commission).where(Commission.payment_id == payment_id).limit(1)
          with self._unit("fetch commission", write=False):
               return self.db.scalars(query).first()

     def find_commissions(self, payment_ids: Sequence[str]) -> list[Commission]:
          if not payment_ids:
               return []
          query = select(Commission).where(Commission.payment_id.in_(list(payment_ids)))
          with self._unit("fetch commissions", write=False):
               return list(self.db.scalars(query).all())

     def get_commission_rate(self, lease_id: int) -> Decimal:
          """
          Commission rate (percent) configured on the lease's property.

          Properties without a rate (NULL or 0) use the configured default.
          """
          query = (
               select(Property.agency_commission_rate)
               .join(Lease, Lease.property_id == Property.id)
               .where(Lease.id == lease_id)
          )
          with self._unit("fetch commission rate", write=False):
               rate = self.db.scalars(query).first()
          return self._rate_or_default(rate)

     def get_property_commission_rate(self, property_id: int) -> Decimal:
          query = select(Property.agency_commission_rate).where(Property.id == property_id)
          with self._unit("fetch commission rate", write=False):
               rate = self.db.scalars(query).first()
          return self._rate_or_default(rate)

     def _rate_or_default(self, rate) -> Decimal:
          if not rate:
               return Decimal(self.default_commission_rate)
          return Decimal(rate)

     # ------------------------------------------------------------------
     # Bulk update audit trail
     # ------------------------------------------------------------------

     def insert_bulk_update_record(self, draft: dict) -> PaymentBulkUpdate:
          record = PaymentBulkUpdate(**draft)
          with self._unit("create bulk update record"):
               self.db.add(record)
               self.db.flush()
          return record

     def insert_bulk_update_items(self, rows: Sequence[dict]) -> None:
          with self._unit("create bulk update items"):
               self.db.add_all([PaymentBulkUpdateItem(**row) for row in rows])
               self.db.flush()

     # ------------------------------------------------------------------
     # Properties
     # ------------------------------------------------------------------

     def get_property_lease_ids(self, property_id: int) -> list[int]:
          query = select(Lease.id).where(Lease.property_id == property_id)
          with self._unit("fetch property leases", write=False):
               return list(self.db.scalars(query).all())

     def get_property(self, property_id: int) -> Optional[Property]:
          with self._unit("fetch property", write=False):
               return self.db.get(Property, property_id)

     def get_agency_property_ids(self, agency_id: str) -> list[int]:
          query = select(Property.id).where(Property.agency_id == agency_id).order_by(Property.id)
          with self._unit("fetch agency properties", write=False):
               return list(self.db.scalars(query).all())

     def get_agency_lease_ids(self, agency_id: str) -> list[int]:
          query = (
               select(Lease.id)
               .join(Property, Lease.property_id == Property.id)
               .where(Property.agency_id == agency_id)
          )
          with self._unit("fetch agency leases", write=False):
               return list(self.db.scalars(query).all())
