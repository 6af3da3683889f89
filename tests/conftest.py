"""
Shared fixtures: an in-memory SQLite database built from the models'
metadata, a PaymentStore on top of it, and a property/lease to hang
payments on.
"""
import os

# Must be set before database.py is imported anywhere
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from models import Base, Lease, Payment, PaymentStatus, PaymentType, Property
from services.payment_store import PaymentStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return PaymentStore(db, default_commission_rate=Decimal("10"))


@pytest.fixture
def property_(db):
    prop = Property(title="Residence Les Palmiers", agency_id="agency-1", agency_commission_rate=Decimal("8"))
    db.add(prop)
    db.commit()
    return prop


@pytest.fixture
def lease(db, property_):
    lease = Lease(
        property_id=property_.id,
        tenant_name="A. Tenant",
        monthly_rent=Decimal("500"),
        security_deposit=Decimal("1000"),
        agency_fee=Decimal("250"),
        payment_frequency="monthly",
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 1),
    )
    db.add(lease)
    db.commit()
    return lease


@pytest.fixture
def make_payment(db, lease):
    """Factory inserting a payment row directly, bypassing the services."""

    def _make(
        amount="500",
        due_date=date(2024, 1, 10),
        payment_date=None,
        payment_type=PaymentType.RENT,
        status=PaymentStatus.UNDEFINED,
        lease_id=None,
    ):
        payment = Payment(
            lease_id=lease_id or lease.id,
            amount=Decimal(amount),
            due_date=due_date,
            payment_date=payment_date,
            payment_type=payment_type,
            status=status,
        )
        db.add(payment)
        db.commit()
        return payment

    return _make
