"""
Payment scheduling and reconciliation API.

Thin layer over the services package: every endpoint builds a PaymentStore
on the request session and delegates. Service errors are turned into
{"kind", "message"} bodies by the handler registered in main.py.
"""
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from database import get_session
from schemas.payment import (
     AgencyCommissionStats,
     BulkDeleteRequest,
     BulkDeleteResponse,
     BulkUpdateRequest,
     BulkUpdateResponse,
     ClassificationResponse,
     CommissionSweepResult,
     ErrorResponse,
     GenerationResult,
     HistoricalGenerationResult,
     HistoricalRequest,
     LeasePaymentStats,
     LeaseSetupResult,
     PaymentCreate,
     PaymentResponse,
     PaymentTotalsByType,
     PaymentUpdate,
     PropertyCommissionSummary,
     ScheduleRequest,
     StatusRefreshResponse,
)
from services import (
     PaymentStore,
     classify,
     create_missing_commissions,
     create_payment,
     delete_bulk_payments,
     generate_historical_payments,
     generate_initial_obligations,
     generate_schedule,
     get_agency_commission_stats,
     get_lease_payment_stats,
     get_payment_totals_by_type,
     get_property_commissions,
     list_lease_payments,
     refresh_payment_statuses,
     setup_lease_payments,
     update_bulk_payments,
     update_payment,
)
import config

router = APIRouter(
     prefix="/api/payments",
     tags=["payments"],
     responses={
          status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
          status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
          status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
     },
)


def get_store(db: Session = Depends(get_session)) -> PaymentStore:
     return PaymentStore(db)


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------

@router.post(
     "/leases/{lease_id}/schedule",
     response_model=GenerationResult,
     status_code=status.HTTP_201_CREATED,
     summary="Generate recurring payments",
)
def create_schedule(lease_id: int, body: ScheduleRequest, store: PaymentStore = Depends(get_store)):
     """
     Generate payments between **start_date** and **end_date** (inclusive) at
     the given **frequency**. Due dates that already exist are skipped.
     """
     store.get_lease(lease_id)
     return generate_schedule(
          store,
          lease_id,
          body.start_date,
          body.end_date,
          body.amount,
          body.frequency,
          body.payment_type,
     )


@router.post(
     "/leases/{lease_id}/initial",
     response_model=GenerationResult,
     status_code=status.HTTP_201_CREATED,
     summary="Generate deposit and agency fee payments",
)
def create_initial_obligations(lease_id: int, store: PaymentStore = Depends(get_store)):
     return generate_initial_obligations(store, lease_id)


@router.post(
     "/leases/{lease_id}/historical",
     response_model=HistoricalGenerationResult,
     status_code=status.HTTP_201_CREATED,
     summary="Backfill past rent payments",
)
def create_historical_payments(lease_id: int, body: HistoricalRequest, store: PaymentStore = Depends(get_store)):
     """
     Generate rent payments from **start_date** up to today. All but the most
     recent are recorded as paid on their due date.
     """
     store.get_lease(lease_id)
     return generate_historical_payments(store, lease_id, body.amount, body.start_date, body.frequency)


@router.post(
     "/leases/{lease_id}/setup",
     response_model=LeaseSetupResult,
     status_code=status.HTTP_201_CREATED,
     summary="Generate every payment a new lease needs",
)
def setup_lease(lease_id: int, store: PaymentStore = Depends(get_store)):
     return setup_lease_payments(store, lease_id)


# ---------------------------------------------------------------------------
# Manual entry
# ---------------------------------------------------------------------------

@router.post(
     "/leases/{lease_id}",
     response_model=PaymentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a payment manually",
)
def create_manual_payment(lease_id: int, body: PaymentCreate, store: PaymentStore = Depends(get_store)):
     """
     Record one payment for the lease. When **status** is omitted it is
     derived from **due_date** and **payment_date**.
     """
     return create_payment(store, lease_id, body)


@router.patch("/{payment_id}", response_model=PaymentResponse, summary="Edit a payment")
def edit_payment(payment_id: str, body: PaymentUpdate, store: PaymentStore = Depends(get_store)):
     return update_payment(store, payment_id, body)


# ---------------------------------------------------------------------------
# Reporting
# ---------------------------------------------------------------------------

@router.get("/leases/{lease_id}", response_model=List[PaymentResponse], summary="List lease payments")
def get_lease_payments(lease_id: int, store: PaymentStore = Depends(get_store)):
     return list_lease_payments(store, lease_id)


@router.get("/leases/{lease_id}/stats", response_model=LeasePaymentStats, summary="Lease payment statistics")
def get_lease_stats(
     lease_id: int,
     grace_period_days: Optional[int] = Query(None, ge=0),
     store: PaymentStore = Depends(get_store),
):
     return get_lease_payment_stats(store, lease_id, grace_period_days)


@router.get("/leases/{lease_id}/totals", response_model=PaymentTotalsByType, summary="Totals per payment type")
def get_lease_totals(lease_id: int, store: PaymentStore = Depends(get_store)):
     return get_payment_totals_by_type(store, lease_id)


@router.post(
     "/leases/{lease_id}/refresh-status",
     response_model=StatusRefreshResponse,
     summary="Recompute stored payment statuses",
)
def refresh_lease_statuses(lease_id: int, store: PaymentStore = Depends(get_store)):
     return StatusRefreshResponse(lease_id=lease_id, updated=refresh_payment_statuses(store, lease_id))


@router.get(
     "/properties/{property_id}/commissions",
     response_model=PropertyCommissionSummary,
     summary="Commissions of a property",
)
def get_commissions_for_property(property_id: int, store: PaymentStore = Depends(get_store)):
     return get_property_commissions(store, property_id)


@router.get(
     "/agencies/{agency_id}/commission-stats",
     response_model=AgencyCommissionStats,
     summary="Commission statistics of an agency",
)
def get_agency_stats(agency_id: str, store: PaymentStore = Depends(get_store)):
     return get_agency_commission_stats(store, agency_id)


@router.post(
     "/agencies/{agency_id}/commissions/sync",
     response_model=CommissionSweepResult,
     summary="Create missing commissions for paid rent",
)
def sync_agency_commissions(agency_id: str, store: PaymentStore = Depends(get_store)):
     return create_missing_commissions(store, agency_id)


@router.get("/classify", response_model=ClassificationResponse, summary="Classify payment dates")
def classify_payment_dates(
     due_date: Optional[date] = Query(None),
     payment_date: Optional[date] = Query(None),
     grace_period_days: int = Query(config.PAYMENT_GRACE_PERIOD_DAYS, ge=0),
     today: Optional[date] = Query(None, description="Reference date, defaults to the server date"),
):
     return ClassificationResponse(
          due_date=due_date,
          payment_date=payment_date,
          grace_period_days=grace_period_days,
          status=classify(due_date, payment_date, grace_period_days, today),
     )


# ---------------------------------------------------------------------------
# Bulk administration
# ---------------------------------------------------------------------------

@router.post("/bulk-update", response_model=BulkUpdateResponse, summary="Bulk status update")
def bulk_update(body: BulkUpdateRequest, store: PaymentStore = Depends(get_store)):
     """
     Set **status** on every payment in **payment_ids**. Moving rent
     payments to `paid` records their agency commission.
     """
     return update_bulk_payments(store, body.payment_ids, body.status, body.notes, body.user_id)


@router.post("/bulk-delete", response_model=BulkDeleteResponse, summary="Bulk delete payments")
def bulk_delete(body: BulkDeleteRequest, store: PaymentStore = Depends(get_store)):
     return delete_bulk_payments(store, body.payment_ids)
