"""create users, customers, invoices and revenue tables

Revision ID: 3f7c2b9e1d04
Revises:
Create Date: 2026-10-18

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "3f7c2b9e1d04"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    existing_tables = set(insp.get_table_names())

    def _has_index(table: str, name: str) -> bool:
        try:
            return any(ix.get("name") == name for ix in insp.get_indexes(table))
        except Exception:
            return False

    if "users" not in existing_tables:
        op.create_table(
            "users",
            sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("email", sa.String(length=320), nullable=False),
            sa.Column("password", sa.Text(), nullable=False),
            sa.Column("image_url", sa.String(length=255), nullable=True),
            sa.UniqueConstraint("email", name="uq_users_email"),
        )

    if "customers" not in existing_tables:
        op.create_table(
            "customers",
            sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
            sa.Column("name", sa.String(length=255), nullable=False),
            sa.Column("email", sa.String(length=320), nullable=False),
            sa.Column("image_url", sa.String(length=255), nullable=False),
        )
    if not _has_index("customers", "idx_customers_name"):
        op.create_index("idx_customers_name", "customers", ["name"])

    if "invoices" not in existing_tables:
        op.create_table(
            "invoices",
            sa.Column("id", sa.String(length=36), primary_key=True, nullable=False),
            sa.Column("customer_id", sa.String(length=36), nullable=False),
            sa.Column("amount", sa.Integer(), nullable=False),
            sa.Column("status", sa.String(length=16), nullable=False),
            sa.Column("date", sa.Date(), nullable=False),
            sa.ForeignKeyConstraint(["customer_id"], ["customers.id"], ondelete="CASCADE"),
            sa.CheckConstraint("status IN ('pending', 'paid')", name="ck_invoices_status"),
        )
    for idx_name, cols in (
        ("idx_invoices_customer_id", ["customer_id"]),
        ("idx_invoices_date", ["date"]),
    ):
        if not _has_index("invoices", idx_name):
            op.create_index(idx_name, "invoices", cols)

    if "revenue" not in existing_tables:
        op.create_table(
            "revenue",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("month", sa.String(length=4), nullable=False),
            sa.Column("revenue", sa.Integer(), nullable=False),
            sa.UniqueConstraint("month", name="uq_revenue_month"),
        )


def downgrade() -> None:
    op.drop_table("revenue")

    op.drop_index("idx_invoices_date", table_name="invoices")
    op.drop_index("idx_invoices_customer_id", table_name="invoices")
    op.drop_table("invoices")

    op.drop_index("idx_customers_name", table_name="customers")
    op.drop_table("customers")

    op.drop_table("users")
