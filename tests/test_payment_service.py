"""
Unit Tests for Manual Payment Entry and Edit
"""

import pytest
from datetime import date
from decimal import Decimal
from models import Commission, Payment, PaymentStatus, PaymentType
from schemas.payment import PaymentCreate, PaymentUpdate
from services.exceptions import InvalidAmount, LeaseNotFound, PaymentNotFound
from services.payment_service import create_payment, update_payment


class TestCreatePayment:

    def test_status_derived_from_dates(self, store, db, lease):
        result = create_payment(
            store,
            lease.id,
            PaymentCreate(amount=Decimal("500"), due_date=date(2024, 3, 1), payment_date=date(2024, 2, 25)),
        )

        assert result.status == PaymentStatus.ADVANCED
        assert result.is_auto_generated is False
        assert result.payment_type == PaymentType.RENT
        assert db.get(Payment, result.id).lease_id == lease.id

    def test_paid_rent_earns_commission(self, store, db, lease):
        result = create_payment(
            store,
            lease.id,
            PaymentCreate(amount=Decimal("500"), due_date=date(2024, 3, 1), payment_date=date(2024, 3, 3)),
        )

        assert result.status == PaymentStatus.PAID
        commission = db.query(Commission).one()
        assert commission.payment_id == result.id
        assert commission.amount == Decimal("40.00")

    def test_paid_deposit_earns_nothing(self, store, db, lease):
        create_payment(
            store,
            lease.id,
            PaymentCreate(
                amount=Decimal("1000"),
                due_date=date(2024, 1, 1),
                payment_date=date(2024, 1, 1),
                payment_type=PaymentType.DEPOSIT,
            ),
        )
        assert db.query(Commission).count() == 0

    def test_explicit_status_wins(self, store, lease):
        result = create_payment(
            store,
            lease.id,
            PaymentCreate(amount=Decimal("500"), due_date=date(2024, 3, 1), status=PaymentStatus.PENDING),
        )
        assert result.status == PaymentStatus.PENDING

    def test_unknown_lease(self, store, lease):
        with pytest.raises(LeaseNotFound):
            create_payment(store, lease.id + 1, PaymentCreate(amount=Decimal("500")))

    def test_negative_amount_rejected(self, store, db, lease):
        data = PaymentCreate.model_construct(
            amount=Decimal("-1"),
            due_date=None,
            payment_date=None,
            status=None,
            payment_type=PaymentType.RENT,
            payment_method=None,
            transaction_id=None,
            notes=None,
            processed_by=None,
        )
        with pytest.raises(InvalidAmount):
            create_payment(store, lease.id, data)
        assert db.query(Payment).count() == 0


class TestUpdatePayment:

    def test_marking_paid_records_commission_once(self, store, db, make_payment):
        payment = make_payment(status=PaymentStatus.LATE)

        update_payment(store, payment.id, PaymentUpdate(status=PaymentStatus.PAID, payment_date=date(2024, 1, 12)))
        update_payment(store, payment.id, PaymentUpdate(status=PaymentStatus.PENDING))
        result = update_payment(store, payment.id, PaymentUpdate(status=PaymentStatus.PAID))

        assert result.status == PaymentStatus.PAID
        assert db.query(Commission).filter(Commission.payment_id == payment.id).count() == 1

    def test_date_change_recomputes_status(self, store, make_payment):
        payment = make_payment(status=PaymentStatus.LATE)
        result = update_payment(store, payment.id, PaymentUpdate(payment_date=date(2024, 1, 5)))

        assert result.status == PaymentStatus.ADVANCED
        assert result.payment_date == date(2024, 1, 5)

    def test_only_sent_fields_change(self, store, db, make_payment):
        payment = make_payment(status=PaymentStatus.PENDING)
        result = update_payment(store, payment.id, PaymentUpdate(notes="Called tenant"))

        assert result.notes == "Called tenant"
        assert result.status == PaymentStatus.PENDING
        assert result.amount == Decimal("500")
        assert db.query(Commission).count() == 0

    def test_empty_edit_is_noop(self, store, make_payment):
        payment = make_payment(status=PaymentStatus.PENDING)
        result = update_payment(store, payment.id, PaymentUpdate())
        assert result.status == PaymentStatus.PENDING

    def test_unknown_payment(self, store, lease):
        with pytest.raises(PaymentNotFound) as exc_info:
            update_payment(store, "missing-id", PaymentUpdate(notes="x"))
        assert exc_info.value.to_dict() == {"kind": "not_found", "message": "Payment with ID missing-id not found"}

    def test_null_amount_rejected(self, store, make_payment):
        payment = make_payment()
        with pytest.raises(InvalidAmount):
            update_payment(store, payment.id, PaymentUpdate(amount=None))
