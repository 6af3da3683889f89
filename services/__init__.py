from .exceptions import (
     PaymentServiceError,
     ValidationError,
     InvalidFrequency,
     InvalidRange,
     InvalidAmount,
     EmptySelection,
     NotFound,
     LeaseNotFound,
     PaymentNotFound,
     PropertyNotFound,
     PersistenceError,
     PartialGenerationError,
)
from .frequency import Frequency, FrequencyUnit, resolve_frequency
from .payment_status import classify, classify_payment
from .payment_store import PaymentStore
from .commission_service import (
     calculate_and_record_commission,
     compute_commission_amount,
     create_missing_commissions,
     get_agency_commission_stats,
     get_property_commissions,
     record_commissions,
)
from .payment_service import create_payment, update_payment
from .schedule_service import (
     due_dates_between,
     generate_schedule,
     generate_initial_obligations,
     generate_historical_payments,
     setup_lease_payments,
)
from .bulk_service import update_bulk_payments, delete_bulk_payments
from .stats_service import (
     list_lease_payments,
     get_lease_payment_stats,
     get_payment_totals_by_type,
     refresh_payment_statuses,
)

__all__ = [
     "PaymentServiceError",
     "ValidationError",
     "InvalidFrequency",
     "InvalidRange",
     "InvalidAmount",
     "EmptySelection",
     "NotFound",
     "LeaseNotFound",
     "PaymentNotFound",
     "PropertyNotFound",
     "PersistenceError",
     "PartialGenerationError",
     "Frequency",
     "FrequencyUnit",
     "resolve_frequency",
     "classify",
     "classify_payment",
     "PaymentStore",
     "calculate_and_record_commission",
     "compute_commission_amount",
     "get_property_commissions",
     "get_agency_commission_stats",
     "create_missing_commissions",
     "record_commissions",
     "create_payment",
     "update_payment",
     "due_dates_between",
     "generate_schedule",
     "generate_initial_obligations",
     "generate_historical_payments",
     "setup_lease_payments",
     "update_bulk_payments",
     "delete_bulk_payments",
     "list_lease_payments",
     "get_lease_payment_stats",
     "get_payment_totals_by_type",
     "refresh_payment_statuses",
]
