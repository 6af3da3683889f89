from .payment import (
     PaymentResponse,
     GenerationResult,
     HistoricalGenerationResult,
     LeaseSetupResult,
     ScheduleRequest,
     HistoricalRequest,
     BulkUpdateRequest,
     BulkUpdateResponse,
     BulkDeleteRequest,
     BulkDeleteResponse,
     LeasePaymentStats,
     TypeTotals,
     PaymentTotalsByType,
     StatusRefreshResponse,
     ClassificationResponse,
     CommissionResponse,
     PropertyCommissionSummary,
     AgencyCommissionStats,
     CommissionSweepResult,
     PaymentCreate,
     PaymentUpdate,
     ErrorResponse,
)

__all__ = [
     "PaymentResponse",
     "GenerationResult",
     "HistoricalGenerationResult",
     "LeaseSetupResult",
     "ScheduleRequest",
     "HistoricalRequest",
     "BulkUpdateRequest",
     "BulkUpdateResponse",
     "BulkDeleteRequest",
     "BulkDeleteResponse",
     "LeasePaymentStats",
     "TypeTotals",
     "PaymentTotalsByType",
     "StatusRefreshResponse",
     "ClassificationResponse",
     "CommissionResponse",
     "PropertyCommissionSummary",
     "AgencyCommissionStats",
     "CommissionSweepResult",
     "PaymentCreate",
     "PaymentUpdate",
     "ErrorResponse",
]
