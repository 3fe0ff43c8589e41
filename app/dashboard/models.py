from __future__ import annotations

import uuid

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


def new_id() -> str:
    return str(uuid.uuid4())


class User(Base):
    """
    Dashboard login. Users are provisioned by scripts/init_db.py, never through the app.
    """

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(Text, nullable=False)  # werkzeug hash, never plaintext
    image_url: Mapped[str | None] = mapped_column(String(255), nullable=True)


class Revenue(Base):
    __tablename__ = "revenue"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    month: Mapped[str] = mapped_column(String(4), nullable=False, unique=True)  # e.g. "Jan"
    revenue: Mapped[int] = mapped_column(Integer, nullable=False)


# Ensure module models are imported so Base.metadata includes their tables.
# (Kept at bottom to avoid circular imports.)
from app.dashboard.modules.customers.models import Customer  # noqa: E402,F401
from app.dashboard.modules.invoices.models import Invoice  # noqa: E402,F401
