"""
Payment status classification.

classify() is the source of truth for a payment's status; the status column
stored on Payment rows is only a cache of its result.
"""
from datetime import date, timedelta
from typing import Optional

import config
from models import PaymentStatus


def classify(
     due_date: Optional[date],
     payment_date: Optional[date],
     grace_period_days: Optional[int] = None,
     today: Optional[date] = None,
) -> PaymentStatus:
     """
     Classify a payment from its dates.

     - no due date                      -> UNDEFINED
     - paid before the due date         -> ADVANCED
     - paid on / after the due date     -> PAID (grace period is irrelevant once paid)
     - unpaid, today <= due + grace     -> PENDING
     - unpaid, past the grace edge      -> LATE

     Args:
          due_date: Date the obligation is owed
          payment_date: Date it was settled, if any
          grace_period_days: Days before an unpaid obligation turns late
               (defaults to PAYMENT_GRACE_PERIOD_DAYS)
          today: Reference date (defaults to date.today())
     """
     if grace_period_days is None:
          grace_period_days = config.PAYMENT_GRACE_PERIOD_DAYS
     if grace_period_days < 0:
          raise ValueError(f"grace_period_days cannot be negative, got: {grace_period_days}")

     if due_date is None:
          return PaymentStatus.UNDEFINED

     if payment_date is not None:
          if payment_date < due_date:
               return PaymentStatus.ADVANCED
          return PaymentStatus.PAID

     if today is None:
          today = date.today()
     grace_edge = due_date + timedelta(days=grace_period_days)
     if today <= grace_edge:
          return PaymentStatus.PENDING
     return PaymentStatus.LATE


def classify_payment(payment, grace_period_days: Optional[int] = None, today: Optional[date] = None) -> PaymentStatus:
     """Classify a Payment row (anything with due_date / payment_date)."""
     return classify(payment.due_date, payment.payment_date, grace_period_days, today)
