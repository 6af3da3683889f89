"""
Application settings loaded from the environment.

Values are read once at import time. A local .env file is honoured via
python-dotenv, the same way database.py picks up the DB_* variables.
"""
import os
from decimal import Decimal

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
     raw = os.getenv(name)
     if raw is None or raw.strip() == "":
          return default
     return int(raw)


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Days an unpaid obligation stays "pending" after its due date
PAYMENT_GRACE_PERIOD_DAYS = _int_env("PAYMENT_GRACE_PERIOD_DAYS", 5)

# Max rows per insert when generating schedules
PAYMENT_INSERT_BATCH_SIZE = _int_env("PAYMENT_INSERT_BATCH_SIZE", 100)
if PAYMENT_INSERT_BATCH_SIZE <= 0:
     raise ValueError("PAYMENT_INSERT_BATCH_SIZE must be a positive integer")

DEFAULT_PAYMENT_METHOD = os.getenv("DEFAULT_PAYMENT_METHOD", "bank_transfer")

# Percent applied when a property has no agency_commission_rate configured
DEFAULT_COMMISSION_RATE = Decimal(os.getenv("DEFAULT_COMMISSION_RATE", "10"))
