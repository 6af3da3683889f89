"""Create lease payment tables

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19

Properties and leases as read by the payment core, payments, commissions
and the bulk update audit trail.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "20261019_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

PAYMENT_TYPES = ("rent", "deposit", "agency_fee", "other")
PAYMENT_STATUSES = ("paid", "advanced", "pending", "late", "undefined")


def upgrade() -> None:
    op.create_table(
        "properties",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("agency_id", sa.String(36), nullable=True),
        sa.Column("agency_commission_rate", sa.Numeric(5, 2), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_properties"),
    )
    op.create_index("ix_properties_agency_id", "properties", ["agency_id"])

    op.create_table(
        "leases",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("property_id", sa.Integer(), nullable=False),
        sa.Column("tenant_name", sa.String(255), nullable=True),
        sa.Column("monthly_rent", sa.Numeric(12, 2), nullable=False),
        sa.Column("security_deposit", sa.Numeric(12, 2), nullable=True),
        sa.Column("agency_fee", sa.Numeric(12, 2), nullable=True),
        sa.Column("payment_frequency", sa.String(50), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_leases"),
        sa.ForeignKeyConstraint(["property_id"], ["properties.id"], name="fk_leases_property_id"),
    )
    op.create_index("ix_leases_property_id", "leases", ["property_id"])

    op.create_table(
        "payments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("payment_date", sa.Date(), nullable=True),
        sa.Column(
            "payment_type",
            sa.Enum(*PAYMENT_TYPES, name="payment_type", create_constraint=True),
            nullable=False,
        ),
        sa.Column(
            "status",
            sa.Enum(*PAYMENT_STATUSES, name="payment_status", create_constraint=True),
            nullable=False,
        ),
        sa.Column("is_auto_generated", sa.Boolean(), nullable=False),
        sa.Column("payment_method", sa.String(50), nullable=True),
        sa.Column("transaction_id", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("processed_by", sa.String(36), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_payments"),
        sa.ForeignKeyConstraint(
            ["lease_id"],
            ["leases.id"],
            name="fk_payments_lease_id",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint("amount >= 0", name="ck_payments_amount_non_negative"),
    )
    op.create_index("ix_payments_lease_id", "payments", ["lease_id"])
    op.create_index("ix_payments_due_date", "payments", ["due_date"])
    op.create_index("ix_payments_payment_type", "payments", ["payment_type"])
    op.create_index("ix_payments_status", "payments", ["status"])

    op.create_table(
        "commissions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("payment_id", sa.String(36), nullable=False),
        sa.Column("lease_id", sa.Integer(), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_commissions"),
        sa.ForeignKeyConstraint(
            ["payment_id"],
            ["payments.id"],
            name="fk_commissions_payment_id",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["lease_id"],
            ["leases.id"],
            name="fk_commissions_lease_id",
            ondelete="CASCADE",
        ),
        sa.CheckConstraint("amount >= 0", name="ck_commissions_amount_non_negative"),
    )
    op.create_index("ix_commissions_payment_id", "commissions", ["payment_id"])
    op.create_index("ix_commissions_lease_id", "commissions", ["lease_id"])

    op.create_table(
        "payment_bulk_updates",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=True),
        sa.Column("payments_count", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_payment_bulk_updates"),
    )

    op.create_table(
        "payment_bulk_update_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("bulk_update_id", sa.String(36), nullable=False),
        sa.Column("payment_id", sa.String(36), nullable=False),
        sa.Column("previous_status", sa.String(20), nullable=True),
        sa.Column("new_status", sa.String(20), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_payment_bulk_update_items"),
        sa.ForeignKeyConstraint(
            ["bulk_update_id"],
            ["payment_bulk_updates.id"],
            name="fk_payment_bulk_update_items_bulk_update_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index(
        "ix_payment_bulk_update_items_bulk_update_id", "payment_bulk_update_items", ["bulk_update_id"]
    )
    op.create_index("ix_payment_bulk_update_items_payment_id", "payment_bulk_update_items", ["payment_id"])


def downgrade() -> None:
    op.drop_index("ix_payment_bulk_update_items_payment_id", table_name="payment_bulk_update_items")
    op.drop_index("ix_payment_bulk_update_items_bulk_update_id", table_name="payment_bulk_update_items")
    op.drop_table("payment_bulk_update_items")
    op.drop_table("payment_bulk_updates")
    op.drop_index("ix_commissions_lease_id", table_name="commissions")
    op.drop_index("ix_commissions_payment_id", table_name="commissions")
    op.drop_table("commissions")
    op.drop_index("ix_payments_status", table_name="payments")
    op.drop_index("ix_payments_payment_type", table_name="payments")
    op.drop_index("ix_payments_due_date", table_name="payments")
    op.drop_index("ix_payments_lease_id", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_leases_property_id", table_name="leases")
    op.drop_table("leases")
    op.drop_index("ix_properties_agency_id", table_name="properties")
    op.drop_table("properties")
