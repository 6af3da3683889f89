"""
Payment Service - manual entry and manual edit of single payments.

Manually entered rows are never flagged auto-generated. When no status is
given, the stored status is whatever classify() makes of the dates. A rent
payment entering "paid" through either path earns its commission unless
one is already recorded.
"""
import logging
from decimal import Decimal
from typing import Optional

from models import Payment, PaymentStatus
from schemas.payment import PaymentCreate, PaymentResponse, PaymentUpdate
from .commission_service import record_commissions
from .exceptions import InvalidAmount, PaymentNotFound
from .payment_status import classify
from .payment_store import PaymentStore

logger = logging.getLogger(__name__)

DATE_FIELDS = ("due_date", "payment_date")


def _check_amount(amount) -> Decimal:
     amount = Decimal(amount)
     if not amount.is_finite() or amount < 0:
          raise InvalidAmount(f"Payment amount cannot be negative, got: {amount}")
     return amount


def _record_commission_if_paid(store: PaymentStore, payment: Payment, previous_status: Optional[PaymentStatus]):
     if payment.status != PaymentStatus.PAID or previous_status == PaymentStatus.PAID:
          return
     if record_commissions(store, [payment]):
          logger.info("Recorded commission for manually paid payment %s", payment.id)


def create_payment(store: PaymentStore, lease_id: int, data: PaymentCreate) -> PaymentResponse:
     """
     Record one manually entered payment for a lease.

     Raises:
          LeaseNotFound: unknown lease_id
          InvalidAmount: negative amount
          PersistenceError: insert failed
     """
     store.get_lease(lease_id)

     row = data.model_dump()
     row["amount"] = _check_amount(row["amount"])
     if row["status"] is None:
          row["status"] = classify(row["due_date"], row["payment_date"])
     row["lease_id"] = lease_id
     row["is_auto_generated"] = False

     payment = store.insert_payments([row])[0]
     logger.info("Created manual %s payment %s for lease %s", payment.payment_type.value, payment.id, lease_id)

     _record_commission_if_paid(store, payment, previous_status=None)
     return PaymentResponse.model_validate(payment)


def update_payment(store: PaymentStore, payment_id: str, data: PaymentUpdate) -> PaymentResponse:
     """
     Apply a manual edit to one payment. Only the fields set on ``data`` change.

     When a date changes and no status is given, the status is recomputed
     from the new dates.

     Raises:
          PaymentNotFound: unknown payment_id
          InvalidAmount: negative amount
          PersistenceError: update failed
     """
     payment = store.get_payment(payment_id)
     if payment is None:
          raise PaymentNotFound(payment_id)
     previous_status = payment.status

     patch = data.model_dump(exclude_unset=True)
     if not patch:
          return PaymentResponse.model_validate(payment)
     if "amount" in patch:
          if patch["amount"] is None:
               raise InvalidAmount("Payment amount is required")
          patch["amount"] = _check_amount(patch["amount"])
     if patch.get("status") is None:
          patch.pop("status", None)
          if any(field in patch for field in DATE_FIELDS):
               patch["status"] = classify(
                    patch.get("due_date", payment.due_date),
                    patch.get("payment_date", payment.payment_date),
               )
     if "payment_type" in patch and patch["payment_type"] is None:
          patch.pop("payment_type")

     payment = store.update_payments([payment_id], patch)[0]
     logger.info("Updated payment %s: %s", payment_id, sorted(patch))

     _record_commission_if_paid(store, payment, previous_status)
     return PaymentResponse.model_validate(payment)
