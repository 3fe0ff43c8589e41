from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.dashboard.models import Base, new_id

if TYPE_CHECKING:
    from app.dashboard.modules.invoices.models import Invoice


class Customer(Base):
    """
    Read-only from the dashboard's point of view; rows are loaded by seed/import scripts.
    """

    __tablename__ = "customers"
    __table_args__ = (
        Index("idx_customers_name", "name"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    image_url: Mapped[str] = mapped_column(String(255), nullable=False)

    invoices: Mapped[list["Invoice"]] = relationship(
        "Invoice",
        back_populates="customer",
        lazy="raise",
        passive_deletes=True,  # invoices.customer_id is ON DELETE CASCADE
    )
