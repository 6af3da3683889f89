"""
Stats Service - read-side aggregates over a lease's payments.

Every figure is derived by re-running classify() on the payment dates;
the stored status column is never trusted here. refresh_payment_statuses()
is the one write in this module: it brings that cached column back in
line with the classifier.
"""
import logging
from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Optional

from models import PaymentStatus, PaymentType
from schemas.payment import (
     LeasePaymentStats,
     PaymentResponse,
     PaymentTotalsByType,
     TypeTotals,
)
from .payment_status import classify_payment
from .payment_store import PaymentStore

logger = logging.getLogger(__name__)

PAID_STATUSES = (PaymentStatus.PAID, PaymentStatus.ADVANCED)
OPEN_STATUSES = (PaymentStatus.PENDING, PaymentStatus.UNDEFINED)


def list_lease_payments(store: PaymentStore, lease_id: int) -> list[PaymentResponse]:
     return [PaymentResponse.model_validate(p) for p in store.find_payments(lease_id=lease_id)]


def get_lease_payment_stats(
     store: PaymentStore,
     lease_id: int,
     grace_period_days: Optional[int] = None,
     today: Optional[date] = None,
) -> LeasePaymentStats:
     """
     Paid / pending / late / advanced / undefined aggregates for a lease.

     total_due sums every payment; advanced payments count toward total_paid
     as well as their own counter; balance = total_due - total_paid.
     """
     stats = LeasePaymentStats(lease_id=lease_id)
     for payment in store.find_payments(lease_id=lease_id):
          amount = Decimal(payment.amount)
          stats.total_due += amount

          status = classify_payment(payment, grace_period_days, today)
          if status == PaymentStatus.PAID:
               stats.paid_count += 1
               stats.total_paid += amount
          elif status == PaymentStatus.ADVANCED:
               stats.advanced_count += 1
               stats.total_paid += amount
          elif status == PaymentStatus.PENDING:
               stats.pending_count += 1
          elif status == PaymentStatus.LATE:
               stats.late_count += 1
          else:
               stats.undefined_count += 1

     stats.balance = stats.total_due - stats.total_paid
     return stats


def get_payment_totals_by_type(
     store: PaymentStore,
     lease_id: int,
     grace_period_days: Optional[int] = None,
     today: Optional[date] = None,
) -> PaymentTotalsByType:
     """Total / paid / pending amounts per payment type. Late amounts only count in total."""
     totals = PaymentTotalsByType(lease_id=lease_id)
     buckets = {
          PaymentType.RENT: totals.rent,
          PaymentType.DEPOSIT: totals.deposit,
          PaymentType.AGENCY_FEE: totals.agency_fee,
     }
     for payment in store.find_payments(lease_id=lease_id):
          bucket: TypeTotals = buckets.get(payment.payment_type, totals.other)
          amount = Decimal(payment.amount or 0)
          bucket.total += amount

          status = classify_payment(payment, grace_period_days, today)
          if status in PAID_STATUSES:
               bucket.paid += amount
          elif status in OPEN_STATUSES:
               bucket.pending += amount
     return totals


def refresh_payment_statuses(
     store: PaymentStore,
     lease_id: int,
     grace_period_days: Optional[int] = None,
     today: Optional[date] = None,
) -> int:
     """
     Rewrite stored statuses that differ from the classifier.

     One update per target status. Returns the number of payments changed.
     """
     stale = defaultdict(list)
     for payment in store.find_payments(lease_id=lease_id):
          computed = classify_payment(payment, grace_period_days, today)
          if payment.status != computed:
               stale[computed].append(payment.id)

     changed = 0
     for status, payment_ids in stale.items():
          store.update_payments(payment_ids, {"status": status})
          changed += len(payment_ids)

     if changed:
          logger.info("Refreshed %d payment statuses for lease %s", changed, lease_id)
     return changed
