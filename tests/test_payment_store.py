"""
Unit Tests for the Payment Store
"""

import pytest
from datetime import date
from decimal import Decimal
from sqlalchemy.exc import OperationalError
from models import Property, PaymentStatus, PaymentType
from services.exceptions import LeaseNotFound, PersistenceError


class TestPaymentStore:

    def test_find_payments_filters(self, store, lease, make_payment):
        rent = make_payment(due_date=date(2024, 1, 10))
        make_payment(due_date=date(2024, 2, 10))
        make_payment(due_date=date(2024, 1, 10), payment_type=PaymentType.DEPOSIT)

        found = store.find_payments(lease_id=lease.id, payment_type=PaymentType.RENT, due_date=date(2024, 1, 10))
        assert [p.id for p in found] == [rent.id]

    def test_existing_due_dates_ignore_undated_rows(self, store, lease, make_payment):
        make_payment(due_date=date(2024, 1, 10))
        make_payment(due_date=None)
        assert store.find_existing_due_dates(lease.id, PaymentType.RENT) == {date(2024, 1, 10)}

    def test_update_payments_applies_patch(self, store, make_payment):
        first, second = make_payment(), make_payment(due_date=date(2024, 2, 10))
        updated = store.update_payments([first.id, second.id], {"status": PaymentStatus.LATE, "notes": "chased"})
        assert {p.status for p in updated} == {PaymentStatus.LATE}
        assert {p.notes for p in updated} == {"chased"}

    def test_settle_on_due_date(self, store, make_payment):
        payment = make_payment(due_date=date(2024, 3, 5))
        [settled] = store.settle_on_due_date([payment.id])
        assert settled.status == PaymentStatus.PAID
        assert settled.payment_date == date(2024, 3, 5)

    def test_get_lease_missing(self, store):
        with pytest.raises(LeaseNotFound) as exc_info:
            store.get_lease(12345)
        assert exc_info.value.kind == "not_found"

    def test_store_errors_are_wrapped(self, store, db, monkeypatch):
        def broken_scalars(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(db, "scalars", broken_scalars)
        with pytest.raises(PersistenceError) as exc_info:
            store.find_payments(lease_id=1)
        assert exc_info.value.message == "Failed to fetch payments"
        assert isinstance(exc_info.value.__cause__, OperationalError)

    def test_rejects_negative_amount(self, store, lease):
        with pytest.raises(PersistenceError):
            store.insert_payments([{
                "lease_id": lease.id,
                "amount": Decimal("-1"),
                "due_date": date(2024, 1, 1),
                "payment_type": PaymentType.RENT,
                "status": PaymentStatus.UNDEFINED,
            }])

    def test_property_commission_rate_falls_back_to_default(self, store, db, property_):
        bare = Property(title="No Rate Tower", agency_commission_rate=Decimal("0"))
        db.add(bare)
        db.commit()

        assert store.get_property_commission_rate(property_.id) == Decimal("8")
        assert store.get_property_commission_rate(bare.id) == Decimal("10")

    def test_agency_lookups(self, store, db, property_, lease):
        other = Property(title="Elsewhere", agency_id="agency-2")
        db.add(other)
        db.commit()

        assert store.get_agency_property_ids("agency-1") == [property_.id]
        assert store.get_agency_lease_ids("agency-1") == [lease.id]
        assert store.get_agency_lease_ids("agency-2") == []
        assert store.get_property(other.id).title == "Elsewhere"
        assert store.get_payment("missing-id") is None
