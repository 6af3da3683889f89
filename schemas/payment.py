"""
Pydantic schemas for the payment core: API request bodies and the result
objects returned by the services.
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, ConfigDict, SerializeAsAny, computed_field

from models.payment import PaymentStatus, PaymentType


class PaymentResponse(BaseModel):
     """A persisted payment row."""
     id: str
     lease_id: int
     amount: Decimal
     due_date: Optional[date] = None
     payment_date: Optional[date] = None
     payment_type: PaymentType
     status: PaymentStatus
     is_auto_generated: bool = False
     payment_method: Optional[str] = None
     transaction_id: Optional[str] = None
     notes: Optional[str] = None
     processed_by: Optional[str] = None

     model_config = ConfigDict(from_attributes=True)


class GenerationResult(BaseModel):
     """Outcome of a generation call. An empty ``created`` list means nothing was due."""
     created: List[PaymentResponse] = Field(default_factory=list)
     message: str = ""

     @computed_field
     @property
     def payments_generated(self) -> int:
          return len(self.created)


class HistoricalGenerationResult(GenerationResult):
     paid_count: int = 0


class LeaseSetupResult(BaseModel):
     """Initial obligations plus the rent schedule produced for a lease."""
     lease_id: int
     historical: bool = Field(..., description="True when the lease started in the past and was backfilled")
     initial: GenerationResult
     schedule: SerializeAsAny[GenerationResult]


class ScheduleRequest(BaseModel):
     """Request body for recurring schedule generation."""
     start_date: date
     end_date: date
     amount: Decimal
     frequency: Optional[str] = Field(None, description="Cadence name, defaults to monthly")
     payment_type: PaymentType = PaymentType.RENT

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "start_date": "2024-01-01",
                    "end_date": "2024-12-01",
                    "amount": 500.00,
                    "frequency": "monthly",
                    "payment_type": "rent",
               }
          }
     )


class HistoricalRequest(BaseModel):
     """Request body for historical backfill (end date is today)."""
     amount: Decimal
     start_date: date
     frequency: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {"amount": 500.00, "start_date": "2023-06-01", "frequency": "monthly"}
          }
     )


class BulkUpdateRequest(BaseModel):
     """Request body for a bulk status change."""
     payment_ids: List[str]
     status: PaymentStatus
     notes: Optional[str] = None
     user_id: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "payment_ids": ["0b8e7c2a-6f1d-4a4e-9d55-2f7a1c3e9b10"],
                    "status": "paid",
                    "notes": "Received by bank transfer",
                    "user_id": "4f2d1a90-7c3b-4e21-8a6f-0d9e5b2c7a11",
               }
          }
     )


class BulkUpdateResponse(BaseModel):
     success: bool = True
     bulk_update_id: Optional[str] = None
     payments_count: int = 0
     commissions_created: int = 0


class BulkDeleteRequest(BaseModel):
     payment_ids: List[str]


class BulkDeleteResponse(BaseModel):
     deleted: int


class LeasePaymentStats(BaseModel):
     """Aggregates recomputed from payment dates, not from stored status labels."""
     lease_id: int
     total_paid: Decimal = Decimal("0")
     total_due: Decimal = Decimal("0")
     paid_count: int = 0
     pending_count: int = 0
     late_count: int = 0
     advanced_count: int = 0
     undefined_count: int = 0
     balance: Decimal = Decimal("0")


class TypeTotals(BaseModel):
     total: Decimal = Decimal("0")
     paid: Decimal = Decimal("0")
     pending: Decimal = Decimal("0")


class PaymentTotalsByType(BaseModel):
     lease_id: int
     rent: TypeTotals = Field(default_factory=TypeTotals)
     deposit: TypeTotals = Field(default_factory=TypeTotals)
     agency_fee: TypeTotals = Field(default_factory=TypeTotals)
     other: TypeTotals = Field(default_factory=TypeTotals)


class StatusRefreshResponse(BaseModel):
     lease_id: int
     updated: int


class ClassificationResponse(BaseModel):
     due_date: Optional[date] = None
     payment_date: Optional[date] = None
     grace_period_days: int
     status: PaymentStatus


class CommissionResponse(BaseModel):
     """
     Commission of one paid rent payment. ``recorded`` is False for paid rent
     that has no stored commission yet; its amount is computed at the
     property's current rate and ``id`` is None.
     """
     id: Optional[str] = None
     recorded: bool = True
     payment_id: str
     lease_id: int
     payment_amount: Decimal
     amount: Decimal
     rate: Decimal
     status: str
     payment_date: Optional[date] = None


class PropertyCommissionSummary(BaseModel):
     property_id: int
     commissions: List[CommissionResponse] = Field(default_factory=list)
     total: Decimal = Decimal("0")


class AgencyCommissionStats(BaseModel):
     """Commission and collected-fee figures across every property of an agency."""
     agency_id: str
     total_commissions: Decimal = Decimal("0")
     pending_commissions: Decimal = Decimal("0")
     paid_commissions: Decimal = Decimal("0")
     average_commission_rate: Decimal = Decimal("0")
     agency_fees: Decimal = Decimal("0")
     security_deposits: Decimal = Decimal("0")


class CommissionSweepResult(BaseModel):
     agency_id: str
     paid_rent_payments: int = 0
     commissions_created: int = 0


class PaymentCreate(BaseModel):
     """Request body for a manually entered payment."""
     amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
     due_date: Optional[date] = None
     payment_date: Optional[date] = None
     status: Optional[PaymentStatus] = Field(None, description="Computed from the dates when omitted")
     payment_type: PaymentType = PaymentType.RENT
     payment_method: Optional[str] = None
     transaction_id: Optional[str] = None
     notes: Optional[str] = None
     processed_by: Optional[str] = None

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "amount": 500.00,
                    "due_date": "2024-03-01",
                    "payment_date": "2024-03-02",
                    "payment_type": "rent",
                    "payment_method": "cash",
               }
          }
     )


class PaymentUpdate(BaseModel):
     """Request body for a manual edit. Only the fields sent are changed."""
     amount: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     due_date: Optional[date] = None
     payment_date: Optional[date] = None
     status: Optional[PaymentStatus] = None
     payment_type: Optional[PaymentType] = None
     payment_method: Optional[str] = None
     transaction_id: Optional[str] = None
     notes: Optional[str] = None
     processed_by: Optional[str] = None


class ErrorResponse(BaseModel):
     """Error body returned for every payment core failure."""
     kind: str
     message: str
     created: Optional[List[PaymentResponse]] = Field(
          None, description="Payments written before a partial generation failure"
     )
