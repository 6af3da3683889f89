"""
Unit Tests for Commission Calculation
"""

import pytest
from datetime import date
from decimal import Decimal
from models import Commission, Lease, PaymentStatus, PaymentType, Property
from services.commission_service import (
    calculate_and_record_commission,
    compute_commission_amount,
    create_missing_commissions,
    get_agency_commission_stats,
    get_property_commissions,
    record_commissions,
)
from services.exceptions import PropertyNotFound
from services.payment_store import PaymentStore


class TestComputeCommissionAmount:

    @pytest.mark.parametrize("amount, rate, expected", [
        ("500", "10", "50.00"),
        ("500", "8", "40.00"),
        ("333.33", "7.5", "25.00"),
        ("0.05", "10", "0.01"),  # half-up
        ("0", "10", "0.00"),
    ])
    def test_rounding(self, amount, rate, expected):
        assert compute_commission_amount(Decimal(amount), Decimal(rate)) == Decimal(expected)


class TestCalculateAndRecordCommission:

    def test_rent_payment_records_commission(self, store, db, lease, make_payment):
        payment = make_payment()
        commission = calculate_and_record_commission(store, payment.id, lease.id, payment.amount, PaymentType.RENT)

        assert commission.payment_id == payment.id
        assert commission.lease_id == lease.id
        assert commission.rate == Decimal("8")
        assert commission.amount == Decimal("40.00")
        assert commission.status == "pending"
        assert store.find_commission(payment.id).id == commission.id

    @pytest.mark.parametrize("payment_type", [PaymentType.DEPOSIT, PaymentType.AGENCY_FEE, PaymentType.OTHER])
    def test_non_rent_is_noop(self, store, db, lease, make_payment, payment_type):
        payment = make_payment(payment_type=payment_type)
        assert calculate_and_record_commission(store, payment.id, lease.id, payment.amount, payment_type) is None
        assert db.query(Commission).count() == 0

    def test_default_rate_when_property_has_none(self, store, db, lease, make_payment):
        prop = Property(title="No Rate Tower", agency_commission_rate=None)
        db.add(prop)
        db.commit()
        other = Lease(
            property_id=prop.id,
            monthly_rent=Decimal("300"),
            payment_frequency="monthly",
            start_date=date(2024, 1, 1),
        )
        db.add(other)
        db.commit()
        payment = make_payment(amount="300", lease_id=other.id)

        commission = calculate_and_record_commission(store, payment.id, other.id, payment.amount, "rent")
        assert commission.rate == Decimal("10")
        assert commission.amount == Decimal("30.00")


class TestPropertyCommissions:

    def test_lists_recorded_commissions_for_paid_rent(self, store, property_, lease, make_payment):
        paid = make_payment(payment_date=date(2024, 1, 10), status=PaymentStatus.PAID)
        open_ = make_payment(due_date=date(2024, 2, 10))
        calculate_and_record_commission(store, paid.id, lease.id, paid.amount, PaymentType.RENT)
        calculate_and_record_commission(store, open_.id, lease.id, open_.amount, PaymentType.RENT)

        summary = get_property_commissions(store, property_.id)

        assert [c.payment_id for c in summary.commissions] == [paid.id]
        assert summary.total == Decimal("40.00")
        assert summary.commissions[0].payment_amount == Decimal("500")

    def test_rate_change_does_not_rewrite_history(self, store, db, property_, lease, make_payment):
        paid = make_payment(payment_date=date(2024, 1, 10), status=PaymentStatus.PAID)
        calculate_and_record_commission(store, paid.id, lease.id, paid.amount, PaymentType.RENT)
        property_.agency_commission_rate = Decimal("12")
        db.commit()

        summary = get_property_commissions(store, property_.id)
        assert summary.commissions[0].rate == Decimal("8")
        assert summary.total == Decimal("40.00")

    def test_paid_rent_without_commission_is_listed_unrecorded(self, store, property_, lease, make_payment):
        recorded = make_payment(payment_date=date(2024, 1, 10))
        missing = make_payment(due_date=date(2024, 2, 10), payment_date=date(2024, 2, 8))
        calculate_and_record_commission(store, recorded.id, lease.id, recorded.amount, PaymentType.RENT)

        summary = get_property_commissions(store, property_.id)

        rows = {c.payment_id: c for c in summary.commissions}
        assert rows[recorded.id].recorded is True
        assert rows[missing.id].recorded is False
        assert rows[missing.id].id is None
        assert rows[missing.id].amount == Decimal("40.00")
        assert rows[missing.id].rate == Decimal("8")
        assert summary.total == Decimal("80.00")

    def test_unknown_property(self, store, property_):
        with pytest.raises(PropertyNotFound) as exc_info:
            get_property_commissions(store, property_.id + 1)
        assert exc_info.value.kind == "not_found"

    def test_property_without_leases(self, store, db):
        prop = Property(title="Empty Lot")
        db.add(prop)
        db.commit()
        summary = get_property_commissions(store, prop.id)
        assert summary.commissions == []
        assert summary.total == Decimal("0")


class ExplodingCommissionStore(PaymentStore):
    def insert_commission(self, draft):
        if draft["amount"] == Decimal("48.00"):
            raise ArithmeticError("bad amount")
        return super().insert_commission(draft)


class TestRecordCommissions:

    def test_skips_payments_that_already_have_one(self, store, db, lease, make_payment):
        done = make_payment(payment_date=date(2024, 1, 10))
        fresh = make_payment(due_date=date(2024, 2, 10), payment_date=date(2024, 2, 10))
        calculate_and_record_commission(store, done.id, lease.id, done.amount, PaymentType.RENT)

        assert record_commissions(store, [done, fresh]) == 1
        assert db.query(Commission).filter(Commission.payment_id == done.id).count() == 1
        assert db.query(Commission).filter(Commission.payment_id == fresh.id).count() == 1

    def test_ignores_non_rent(self, store, db, make_payment):
        deposit = make_payment(amount="1000", payment_type=PaymentType.DEPOSIT, payment_date=date(2024, 1, 10))
        assert record_commissions(store, [deposit]) == 0
        assert db.query(Commission).count() == 0

    def test_same_payment_twice_in_one_call(self, store, db, make_payment):
        payment = make_payment(payment_date=date(2024, 1, 10))
        assert record_commissions(store, [payment, payment]) == 1
        assert db.query(Commission).count() == 1

    def test_one_failure_does_not_stop_the_rest(self, db, make_payment):
        failing = make_payment(amount="600", payment_date=date(2024, 1, 10))
        fine = make_payment(due_date=date(2024, 2, 10), payment_date=date(2024, 2, 10))

        assert record_commissions(ExplodingCommissionStore(db), [failing, fine]) == 1
        assert [c.payment_id for c in db.query(Commission).all()] == [fine.id]


@pytest.fixture
def agency_ledger(db, store, lease, make_payment):
    """Paid and open payments on the agency-1 property, plus one foreign agency."""
    with_commission = make_payment(payment_date=date(2024, 1, 10))
    calculate_and_record_commission(store, with_commission.id, lease.id, with_commission.amount, PaymentType.RENT)
    settled_commission = make_payment(amount="600", due_date=date(2024, 2, 10), payment_date=date(2024, 2, 10))
    commission = calculate_and_record_commission(
        store, settled_commission.id, lease.id, settled_commission.amount, PaymentType.RENT
    )
    commission.status = "paid"
    db.commit()
    make_payment(due_date=date(2024, 3, 10), payment_date=date(2024, 3, 1))  # advanced, no commission
    make_payment(due_date=date(2024, 4, 10))  # still open
    make_payment(amount="1000", payment_type=PaymentType.DEPOSIT, payment_date=date(2024, 1, 10))
    make_payment(amount="250", payment_type=PaymentType.AGENCY_FEE, payment_date=date(2024, 1, 10))
    make_payment(amount="100", payment_type=PaymentType.AGENCY_FEE, due_date=date(2024, 5, 10))

    foreign = Property(title="Elsewhere", agency_id="agency-2", agency_commission_rate=Decimal("5"))
    db.add(foreign)
    db.commit()
    foreign_lease = Lease(property_id=foreign.id, monthly_rent=Decimal("900"), payment_frequency="monthly")
    db.add(foreign_lease)
    db.commit()
    make_payment(amount="900", payment_date=date(2024, 1, 10), lease_id=foreign_lease.id)
    return foreign


class TestAgencyCommissionStats:

    def test_aggregates_properties_of_the_agency(self, store, agency_ledger):
        stats = get_agency_commission_stats(store, "agency-1")

        assert stats.total_commissions == Decimal("128.00")
        assert stats.pending_commissions == Decimal("80.00")
        assert stats.paid_commissions == Decimal("48.00")
        assert stats.average_commission_rate == Decimal("8.00")
        assert stats.agency_fees == Decimal("250")
        assert stats.security_deposits == Decimal("1000")

    def test_unknown_agency_is_all_zero(self, store, agency_ledger):
        stats = get_agency_commission_stats(store, "agency-404")
        assert stats.total_commissions == Decimal("0")
        assert stats.average_commission_rate == Decimal("0")
        assert stats.agency_fees == Decimal("0")


class TestCreateMissingCommissions:

    def test_creates_only_the_missing_ones(self, store, db, property_, agency_ledger):
        result = create_missing_commissions(store, "agency-1")

        assert result.paid_rent_payments == 3
        assert result.commissions_created == 1
        assert db.query(Commission).count() == 3
        assert all(row.recorded for row in get_property_commissions(store, property_.id).commissions)

    def test_rerun_creates_nothing(self, store, db, agency_ledger):
        create_missing_commissions(store, "agency-1")
        again = create_missing_commissions(store, "agency-1")

        assert again.commissions_created == 0
        assert db.query(Commission).count() == 3
