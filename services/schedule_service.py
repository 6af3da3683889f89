"""
Schedule Service - generation of payment obligations for a lease.

Covers:
- recurring schedules between two dates at a lease's cadence
- the one-off deposit / agency fee obligations of a new lease
- historical backfill for leases that started in the past
- the lease setup workflow tying the three together

Generation is idempotent per (lease, payment type, due date): due dates
already recorded are skipped, so a failed or repeated call can simply be
re-run. The existence checks are read-then-write and not atomic against
concurrent callers for the same lease.
"""
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional

import config
from models import Lease, Payment, PaymentStatus, PaymentType
from schemas.payment import (
     GenerationResult,
     HistoricalGenerationResult,
     LeaseSetupResult,
     PaymentResponse,
)
from .commission_service import record_commissions
from .exceptions import (
     InvalidAmount,
     InvalidRange,
     PartialGenerationError,
     PersistenceError,
)
from .frequency import resolve_frequency
from .payment_store import PaymentStore

logger = logging.getLogger(__name__)


INITIAL_OBLIGATIONS = (
     # payment type, lease attribute, note
     (PaymentType.DEPOSIT, "security_deposit", "Initial security deposit"),
     (PaymentType.AGENCY_FEE, "agency_fee", "Agency fee"),
)


def _to_date(value, field: str) -> date:
     if isinstance(value, datetime):
          return value.date()
     if isinstance(value, date):
          return value
     if isinstance(value, str):
          try:
               return date.fromisoformat(value)
          except ValueError:
               pass
          try:
               return datetime.fromisoformat(value).date()
          except ValueError:
               pass
     raise InvalidRange(f"{field} must be a calendar date, got: {value!r}")


def _to_amount(value) -> Decimal:
     try:
          amount = Decimal(str(value))
     except (InvalidOperation, TypeError, ValueError):
          raise InvalidAmount(f"Payment amount must be a number, got: {value!r}")
     if not amount.is_finite() or amount <= 0:
          raise InvalidAmount(f"Payment amount must be positive, got: {value}")
     return amount


def due_dates_between(start_date: date, end_date: date, frequency: Optional[str] = None) -> list[date]:
     """Every due date from start_date to end_date inclusive, in chronological order."""
     cadence = resolve_frequency(frequency)
     dates = []
     n = 0
     current = start_date
     while current <= end_date:
          dates.append(current)
          n += 1
          current = cadence.nth_date(start_date, n)
     return dates


def _generate_rows(
     store: PaymentStore,
     lease_id: int,
     start_date,
     end_date,
     amount,
     frequency: Optional[str],
     payment_type: PaymentType,
     batch_size: Optional[int],
) -> list[Payment]:
     start = _to_date(start_date, "start_date")
     end = _to_date(end_date, "end_date")
     if start > end:
          raise InvalidRange(f"Start date {start} must not be after end date {end}")
     amount = _to_amount(amount)
     payment_type = PaymentType(payment_type)
     batch_size = batch_size or config.PAYMENT_INSERT_BATCH_SIZE
     if batch_size <= 0:
          raise ValueError(f"batch_size must be positive, got: {batch_size}")

     candidate_dates = due_dates_between(start, end, frequency)
     existing = store.find_existing_due_dates(lease_id, payment_type)
     new_dates = [due for due in candidate_dates if due not in existing]
     if not new_dates:
          return []

     drafts = [
          {
               "lease_id": lease_id,
               "amount": amount,
               "due_date": due,
               "payment_date": None,
               "status": PaymentStatus.UNDEFINED,
               "payment_type": payment_type,
               "payment_method": config.DEFAULT_PAYMENT_METHOD,
               "is_auto_generated": True,
          }
          for due in new_dates
     ]

     created: list[Payment] = []
     for offset in range(0, len(drafts), batch_size):
          batch = drafts[offset:offset + batch_size]
          try:
               created.extend(store.insert_payments(batch))
          except PersistenceError as exc:
               if not created:
                    raise
               raise PartialGenerationError(
                    f"Generated {len(created)} of {len(drafts)} payments before a write failed",
                    created=[PaymentResponse.model_validate(p) for p in created],
               ) from exc
          logger.debug("Inserted payment batch of %d for lease %s", len(batch), lease_id)
     return created


def generate_schedule(
     store: PaymentStore,
     lease_id: int,
     start_date,
     end_date,
     amount,
     frequency: Optional[str] = None,
     payment_type: PaymentType = PaymentType.RENT,
     batch_size: Optional[int] = None,
) -> GenerationResult:
     """
     Generate recurring payments for a lease.

     Walks from start_date to end_date (inclusive) at the resolved cadence,
     skips due dates already recorded for (lease, payment_type), and inserts
     the rest in batches of at most ``batch_size`` rows.

     Returns:
          GenerationResult; ``created`` is empty when every date already existed

     Raises:
          InvalidRange: start_date after end_date or not a date
          InvalidAmount: amount not positive
          InvalidFrequency: unknown cadence name
          PartialGenerationError: a later batch failed (``created`` holds the written rows)
          PersistenceError: the store failed before anything was written
     """
     rows = _generate_rows(store, lease_id, start_date, end_date, amount, frequency, payment_type, batch_size)
     if not rows:
          logger.info("No new %s payments to generate for lease %s", PaymentType(payment_type).value, lease_id)
          return GenerationResult(created=[], message="No new payments to generate")

     logger.info("Generated %d %s payments for lease %s", len(rows), rows[0].payment_type.value, lease_id)
     return GenerationResult(
          created=[PaymentResponse.model_validate(p) for p in rows],
          message=f"Successfully generated {len(rows)} payments",
     )


def generate_initial_obligations(
     store: PaymentStore,
     lease_id: int,
     lease: Optional[Lease] = None,
) -> GenerationResult:
     """
     Create the deposit and agency fee obligations of a lease, once each.

     A type is skipped when a payment of that type already exists for the
     lease or when the lease amount for it is not positive. Both obligations
     are dated on the lease start date (creation date when unset).
     """
     if lease is None:
          lease = store.get_lease(lease_id)

     obligation_date = lease.start_date or (lease.created_at.date() if lease.created_at else date.today())

     drafts = []
     for payment_type, attribute, note in INITIAL_OBLIGATIONS:
          amount = getattr(lease, attribute) or Decimal("0")
          if amount <= 0:
               continue
          if store.find_payments(lease_id=lease_id, payment_type=payment_type):
               logger.debug("Lease %s already has a %s payment", lease_id, payment_type.value)
               continue
          drafts.append(
               {
                    "lease_id": lease_id,
                    "amount": Decimal(amount),
                    "due_date": obligation_date,
                    "payment_date": obligation_date,
                    "status": PaymentStatus.UNDEFINED,
                    "payment_type": payment_type,
                    "payment_method": config.DEFAULT_PAYMENT_METHOD,
                    "is_auto_generated": True,
                    "notes": note,
               }
          )

     if not drafts:
          return GenerationResult(created=[], message="No initial payments to generate")

     rows = store.insert_payments(drafts)
     logger.info("Generated %d initial payments for lease %s", len(rows), lease_id)
     return GenerationResult(
          created=[PaymentResponse.model_validate(p) for p in rows],
          message=f"Successfully generated {len(rows)} initial payments",
     )


def generate_historical_payments(
     store: PaymentStore,
     lease_id: int,
     amount,
     start_date,
     frequency: Optional[str] = None,
     today: Optional[date] = None,
     batch_size: Optional[int] = None,
) -> HistoricalGenerationResult:
     """
     Backfill rent payments from start_date up to today.

     Every generated payment except the chronologically last one is marked
     paid with payment_date = due_date, and earns its commission. The last
     one stays open as the current obligation. Commission failures are
     logged per payment and do not stop the rest.
     """
     today = today or date.today()
     start = _to_date(start_date, "start_date")
     if start > today:
          raise InvalidRange(f"Historical start date {start} is in the future")

     rows = _generate_rows(store, lease_id, start, today, amount, frequency, PaymentType.RENT, batch_size)
     if not rows:
          return HistoricalGenerationResult(created=[], paid_count=0, message="Historical: No new payments to generate")

     # Insert results are not guaranteed to come back in submission order
     rows.sort(key=lambda payment: payment.due_date)
     to_settle = rows[:-1]

     settled = store.settle_on_due_date([payment.id for payment in to_settle])
     record_commissions(store, settled)

     settled_by_id = {payment.id: payment for payment in settled}
     final_rows = [settled_by_id.get(payment.id, payment) for payment in rows]
     logger.info(
          "Backfilled %d payments for lease %s, %d marked paid", len(final_rows), lease_id, len(settled)
     )
     return HistoricalGenerationResult(
          created=[PaymentResponse.model_validate(p) for p in final_rows],
          paid_count=len(settled),
          message=f"Historical: Successfully generated {len(final_rows)} payments",
     )


def setup_lease_payments(
     store: PaymentStore,
     lease_id: int,
     today: Optional[date] = None,
) -> LeaseSetupResult:
     """
     Lease creation / edit workflow.

     Creates the initial obligations, then either backfills history (lease
     started before today) or generates the recurring rent schedule over the
     lease term.
     """
     today = today or date.today()
     lease = store.get_lease(lease_id)
     if lease.start_date is None:
          raise InvalidRange(f"Lease {lease_id} has no start date")

     initial = generate_initial_obligations(store, lease_id, lease)

     if lease.start_date < today:
          schedule = generate_historical_payments(
               store, lease_id, lease.monthly_rent, lease.start_date, lease.payment_frequency, today=today
          )
          return LeaseSetupResult(lease_id=lease_id, historical=True, initial=initial, schedule=schedule)

     if lease.end_date is None:
          raise InvalidRange(f"Lease {lease_id} has no end date")
     schedule = generate_schedule(
          store,
          lease_id,
          lease.start_date,
          lease.end_date,
          lease.monthly_rent,
          lease.payment_frequency,
          PaymentType.RENT,
     )
     return LeaseSetupResult(lease_id=lease_id, historical=False, initial=initial, schedule=schedule)
