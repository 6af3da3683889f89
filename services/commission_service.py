"""
Commission Service - agency commissions on paid rent.

A commission is recorded once per rent payment. The calculator itself does
not check for an existing row; record_commissions() is the entry point for
every workflow and loads the existing rows before creating any.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from models import Commission, PaymentStatus, PaymentType
from schemas.payment import (
     AgencyCommissionStats,
     CommissionResponse,
     CommissionSweepResult,
     PropertyCommissionSummary,
)
from .exceptions import PersistenceError, PropertyNotFound
from .payment_status import classify_payment
from .payment_store import PaymentStore

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")
PAID_STATUSES = (PaymentStatus.PAID, PaymentStatus.ADVANCED)


def compute_commission_amount(amount: Decimal, rate: Decimal) -> Decimal:
     """amount * rate%, rounded half-up to cents."""
     return (Decimal(amount) * Decimal(rate) / Decimal(100)).quantize(CENTS, rounding=ROUND_HALF_UP)


def calculate_and_record_commission(
     store: PaymentStore,
     payment_id: str,
     lease_id: int,
     amount: Decimal,
     payment_type: PaymentType,
) -> Optional[Commission]:
     """
     Compute and persist the commission for one paid payment.

     Returns None (no-op) for anything but rent: deposits and agency fees
     never earn a commission.

     Raises:
          PersistenceError: rate lookup or insert failed
     """
     if PaymentType(payment_type) != PaymentType.RENT:
          logger.debug("Skipping commission for %s payment %s", payment_type, payment_id)
          return None

     rate = store.get_commission_rate(lease_id)
     commission_amount = compute_commission_amount(amount, rate)
     if commission_amount < 0:
          raise ValueError(f"Commission amount cannot be negative, got: {commission_amount}")

     commission = store.insert_commission(
          {
               "payment_id": payment_id,
               "lease_id": lease_id,
               "amount": commission_amount,
               "rate": rate,
               "status": "pending",
          }
     )
     logger.info(
          "Recorded commission %s for payment %s: %s at %s%%",
          commission.id, payment_id, commission_amount, rate,
     )
     return commission


def record_commissions(store: PaymentStore, payments: Iterable) -> int:
     """
     Record the commission of every rent payment in ``payments`` that has none.

     ``payments`` are Payment rows or anything exposing ``id``, ``lease_id``,
     ``amount``, ``payment_type`` and ``is_rent``. Existing commissions are
     looked up once for the whole batch. A failure on one payment is logged
     and the others are still processed.

     Returns:
          number of commissions created
     """
     candidates = [payment for payment in payments if payment.is_rent]
     if not candidates:
          return 0

     try:
          recorded = {commission.payment_id for commission in store.find_commissions([p.id for p in candidates])}
     except PersistenceError:
          logger.exception("Could not check existing commissions for %d payments", len(candidates))
          return 0

     created = 0
     for payment in candidates:
          if payment.id in recorded:
               logger.debug("Payment %s already has a commission", payment.id)
               continue
          try:
               commission = calculate_and_record_commission(
                    store, payment.id, payment.lease_id, payment.amount, payment.payment_type
               )
          except Exception:
               logger.exception("Commission calculation failed for payment %s", payment.id)
               continue
          if commission is not None:
               recorded.add(payment.id)
               created += 1
     return created


def _paid_rent(store: PaymentStore, lease_ids: list) -> list:
     if not lease_ids:
          return []
     return [
          payment
          for payment in store.find_payments(lease_ids=lease_ids, payment_type=PaymentType.RENT)
          if classify_payment(payment) in PAID_STATUSES
     ]


def get_property_commissions(store: PaymentStore, property_id: int) -> PropertyCommissionSummary:
     """
     Commissions for the paid rent payments of a property's leases.

     Stored commissions are reported as recorded, never recomputed against
     the property's current rate. Paid rent without a stored commission is
     listed too, with an amount computed at the current rate and
     ``recorded=False``.

     Raises:
          PropertyNotFound: unknown property_id
     """
     if store.get_property(property_id) is None:
          raise PropertyNotFound(property_id)

     paid_rent = _paid_rent(store, store.get_property_lease_ids(property_id))
     if not paid_rent:
          return PropertyCommissionSummary(property_id=property_id, commissions=[], total=Decimal("0"))

     stored = {commission.payment_id: commission for commission in store.find_commissions([p.id for p in paid_rent])}
     current_rate = None

     rows = []
     for payment in paid_rent:
          commission = stored.get(payment.id)
          if commission is not None:
               rows.append(
                    CommissionResponse(
                         id=commission.id,
                         payment_id=payment.id,
                         lease_id=commission.lease_id,
                         payment_amount=payment.amount,
                         amount=commission.amount,
                         rate=commission.rate,
                         status=commission.status,
                         payment_date=payment.payment_date,
                    )
               )
               continue
          if current_rate is None:
               current_rate = store.get_property_commission_rate(property_id)
          rows.append(
               CommissionResponse(
                    recorded=False,
                    payment_id=payment.id,
                    lease_id=payment.lease_id,
                    payment_amount=payment.amount,
                    amount=compute_commission_amount(payment.amount, current_rate),
                    rate=current_rate,
                    status="pending",
                    payment_date=payment.payment_date,
               )
          )

     total = sum((row.amount for row in rows), Decimal("0"))
     return PropertyCommissionSummary(property_id=property_id, commissions=rows, total=total)


def get_agency_commission_stats(store: PaymentStore, agency_id: str) -> AgencyCommissionStats:
     """
     Commission totals across an agency's properties, plus the agency fees
     and security deposits collected on their leases.

     Commissions split into pending and paid by their status (anything but
     "pending" counts as paid). The average rate is taken over every listed
     commission row. An agency without properties gets all-zero figures.
     """
     stats = AgencyCommissionStats(agency_id=agency_id)
     rates = []
     for property_id in store.get_agency_property_ids(agency_id):
          summary = get_property_commissions(store, property_id)
          stats.total_commissions += summary.total
          for row in summary.commissions:
               if row.status == "pending":
                    stats.pending_commissions += row.amount
               else:
                    stats.paid_commissions += row.amount
               rates.append(Decimal(row.rate))

     if rates:
          stats.average_commission_rate = (sum(rates, Decimal("0")) / len(rates)).quantize(
               CENTS, rounding=ROUND_HALF_UP
          )

     lease_ids = store.get_agency_lease_ids(agency_id)
     if lease_ids:
          for payment in store.find_payments(lease_ids=lease_ids):
               if classify_payment(payment) not in PAID_STATUSES:
                    continue
               if payment.payment_type == PaymentType.AGENCY_FEE:
                    stats.agency_fees += Decimal(payment.amount)
               elif payment.payment_type == PaymentType.DEPOSIT:
                    stats.security_deposits += Decimal(payment.amount)
     return stats


def create_missing_commissions(store: PaymentStore, agency_id: str) -> CommissionSweepResult:
     """
     Reconcile an agency's paid rent payments with the commissions table:
     every paid rent payment without a commission gets one at the current rate.
     Safe to run repeatedly.
     """
     paid_rent = _paid_rent(store, store.get_agency_lease_ids(agency_id))
     created = record_commissions(store, paid_rent)
     logger.info(
          "Commission sweep for agency %s: %d paid rent payments, %d commissions created",
          agency_id, len(paid_rent), created,
     )
     return CommissionSweepResult(agency_id=agency_id, paid_rent_payments=len(paid_rent), commissions_created=created)
