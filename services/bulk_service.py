"""
Bulk Service - administrative status changes across many payments.

The status write is the part that must succeed; the per-item audit rows
and the commissions that follow it are best-effort and only logged on
failure. Nothing already written is rolled back.
"""
import logging
from collections import namedtuple
from datetime import date
from typing import Optional, Sequence

from models import PaymentStatus, PaymentType
from schemas.payment import BulkDeleteResponse, BulkUpdateResponse
from .commission_service import record_commissions
from .exceptions import EmptySelection, PersistenceError
from .payment_store import PaymentStore

logger = logging.getLogger(__name__)


class PaymentSnapshot(namedtuple("PaymentSnapshot", ["id", "status", "payment_type", "amount", "lease_id"])):
     """State of a payment captured before the bulk write; commission eligibility is judged on it."""
     __slots__ = ()

     @property
     def is_rent(self) -> bool:
          return self.payment_type == PaymentType.RENT


def _snapshot(store: PaymentStore, payment_ids: Sequence[str]) -> dict:
     return {
          payment.id: PaymentSnapshot(
               payment.id, payment.status, payment.payment_type, payment.amount, payment.lease_id
          )
          for payment in store.get_payments(payment_ids)
     }


def update_bulk_payments(
     store: PaymentStore,
     payment_ids: Sequence[str],
     status: PaymentStatus,
     notes: Optional[str] = None,
     user_id: Optional[str] = None,
     today: Optional[date] = None,
) -> BulkUpdateResponse:
     """
     Apply one status to a batch of payments.

     Steps:
     1. Snapshot (status, type, amount, lease) of every target
     2. Write the bulk update record
     3. Update status / notes / processed_by; a move to PAID also stamps payment_date = today
     4. Write one audit item per payment (failure is logged, not raised)
     5. On PAID, record commissions for rent payments that were not already paid
        and have no commission yet (failures are logged per payment)

     Raises:
          EmptySelection: no payment ids given
          PersistenceError: the bulk record or the status update could not be written
     """
     if not payment_ids:
          raise EmptySelection("No payment selected")

     new_status = PaymentStatus(status)
     ids = list(dict.fromkeys(payment_ids))
     today = today or date.today()

     snapshot = _snapshot(store, ids)
     missing = [payment_id for payment_id in ids if payment_id not in snapshot]
     if missing:
          logger.warning("Bulk update targets %d unknown payments: %s", len(missing), missing)

     record = store.insert_bulk_update_record(
          {
               "user_id": user_id,
               "payments_count": len(ids),
               "status": new_status.value,
               "notes": notes,
          }
     )

     patch = {"status": new_status}
     if notes:
          patch["notes"] = notes
     if user_id:
          patch["processed_by"] = user_id
     if new_status == PaymentStatus.PAID:
          patch["payment_date"] = today
     store.update_payments(ids, patch)

     items = [
          {
               "bulk_update_id": record.id,
               "payment_id": payment_id,
               "previous_status": snapshot[payment_id].status.value if payment_id in snapshot else None,
               "new_status": new_status.value,
          }
          for payment_id in ids
     ]
     try:
          store.insert_bulk_update_items(items)
     except PersistenceError:
          logger.exception("Error creating bulk update items for bulk update %s", record.id)

     commissions_created = 0
     if new_status == PaymentStatus.PAID:
          newly_paid = [before for before in snapshot.values() if before.status != PaymentStatus.PAID]
          commissions_created = record_commissions(store, newly_paid)

     logger.info(
          "Bulk update %s: %d payments -> %s, %d commissions",
          record.id, len(ids), new_status.value, commissions_created,
     )
     return BulkUpdateResponse(
          success=True,
          bulk_update_id=record.id,
          payments_count=len(ids),
          commissions_created=commissions_created,
     )


def delete_bulk_payments(store: PaymentStore, payment_ids: Sequence[str]) -> BulkDeleteResponse:
     """Administrative escape hatch: physically delete the listed payments."""
     if not payment_ids:
          raise EmptySelection("No payment selected")
     deleted = store.delete_payments(list(dict.fromkeys(payment_ids)))
     logger.warning("Deleted %d payments by bulk delete", deleted)
     return BulkDeleteResponse(deleted=deleted)
