from __future__ import annotations

import datetime as dt

from sqlalchemy import CheckConstraint, Date, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.dashboard.models import Base, new_id
from app.dashboard.modules.customers.models import Customer


class Invoice(Base):
    __tablename__ = "invoices"
    __table_args__ = (
        CheckConstraint("status IN ('pending', 'paid')", name="ck_invoices_status"),
        Index("idx_invoices_customer_id", "customer_id"),
        Index("idx_invoices_date", "date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    customer_id: Mapped[str] = mapped_column(ForeignKey("customers.id", ondelete="CASCADE"), nullable=False)

    amount: Mapped[int] = mapped_column(Integer, nullable=False)  # cents
    status: Mapped[str] = mapped_column(String(16), nullable=False)  # pending | paid
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)  # set on create only

    customer: Mapped[Customer] = relationship("Customer", back_populates="invoices", lazy="raise")
