import argparse
import sys
from datetime import date
from pathlib import Path
import os

from werkzeug.security import generate_password_hash
from sqlalchemy import create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker
from contextlib import contextmanager

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.dashboard.config import load_settings
from app.dashboard.models import Base, Revenue, User
from app.dashboard.modules.customers.models import Customer
from app.dashboard.modules.invoices.models import Invoice


DEMO_CUSTOMERS = [
    ("Evil Rabbit", "evil@rabbit.com", "/customers/evil-rabbit.png"),
    ("Delba de Oliveira", "delba@oliveira.com", "/customers/delba-de-oliveira.png"),
    ("Lee Robinson", "lee@robinson.com", "/customers/lee-robinson.png"),
    ("Michael Novotny", "michael@novotny.com", "/customers/michael-novotny.png"),
    ("Amy Burns", "amy@burns.com", "/customers/amy-burns.png"),
    ("Balazs Orban", "balazs@orban.com", "/customers/balazs-orban.png"),
]

# (customer email, cents, status, date)
DEMO_INVOICES = [
    ("evil@rabbit.com", 15795, "pending", date(2022, 12, 6)),
    ("delba@oliveira.com", 20348, "pending", date(2022, 11, 14)),
    ("amy@burns.com", 3040, "paid", date(2022, 10, 29)),
    ("michael@novotny.com", 44800, "paid", date(2023, 9, 10)),
    ("balazs@orban.com", 34577, "pending", date(2023, 8, 5)),
    ("lee@robinson.com", 54246, "pending", date(2023, 7, 16)),
    ("evil@rabbit.com", 666, "pending", date(2023, 6, 27)),
    ("michael@novotny.com", 32545, "paid", date(2023, 6, 9)),
    ("amy@burns.com", 1250, "paid", date(2023, 6, 17)),
    ("balazs@orban.com", 8546, "paid", date(2023, 6, 7)),
    ("delba@oliveira.com", 500, "paid", date(2023, 8, 19)),
    ("balazs@orban.com", 8945, "paid", date(2023, 6, 3)),
    ("lee@robinson.com", 1000, "paid", date(2022, 6, 5)),
]

DEMO_REVENUE = [
    ("Jan", 2000), ("Feb", 1800), ("Mar", 2200), ("Apr", 2500),
    ("May", 2300), ("Jun", 3200), ("Jul", 3500), ("Aug", 3700),
    ("Sep", 2500), ("Oct", 2800), ("Nov", 3000), ("Dec", 4800),
]


@contextmanager
def _session_scope(database_url: str):
    engine = create_engine(database_url, future=True)
    sm = sessionmaker(bind=engine, class_=Session, autoflush=False, autocommit=False, expire_on_commit=False, future=True)
    s: Session = sm()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()
        engine.dispose()


def _seed_demo(s: Session) -> None:
    """Demo customers/invoices/revenue. Skipped entirely if any customer exists."""
    if s.execute(select(Customer.id).limit(1)).first() is not None:
        print("Demo data skipped (customers already present).")
        return

    by_email: dict[str, Customer] = {}
    for name, email, image_url in DEMO_CUSTOMERS:
        c = Customer(name=name, email=email, image_url=image_url)
        s.add(c)
        by_email[email] = c
    s.flush()

    for email, cents, status, when in DEMO_INVOICES:
        s.add(Invoice(customer_id=by_email[email].id, amount=cents, status=status, date=when))

    existing_months = set(s.execute(select(Revenue.month)).scalars())
    for month, revenue in DEMO_REVENUE:
        if month not in existing_months:
            s.add(Revenue(month=month, revenue=revenue))

    print(f"Seeded demo data: {len(DEMO_CUSTOMERS)} customers, {len(DEMO_INVOICES)} invoices, {len(DEMO_REVENUE)} revenue months.")


def seed_only(*, database_url: str | None = None, demo: bool = False, create_tables: bool = False) -> None:
    """
    Seed the admin user in an idempotent way (optionally demo data).
    Does NOT overwrite an existing admin user's password.
    """
    admin_email = (os.environ.get("ADMIN_EMAIL") or "admin@example.com").strip().lower()
    admin_password = os.environ.get("ADMIN_PASSWORD") or "change-me"
    admin_name = (os.environ.get("ADMIN_NAME") or "Admin").strip()

    db_url = (database_url or load_settings().database_url).strip()

    if create_tables:
        engine = create_engine(db_url, future=True)
        Base.metadata.create_all(bind=engine)
        engine.dispose()

    # Use direct engine/session so this can run in release without importing app.wsgi (avoids recursion).
    with _session_scope(db_url) as s:
        user = s.execute(select(User).where(func.lower(User.email) == admin_email).limit(1)).scalar_one_or_none()
        if not user:
            s.add(User(name=admin_name, email=admin_email, password=generate_password_hash(admin_password)))

        if demo:
            _seed_demo(s)

    print("Initialized database (seed_only).")
    print(f"Admin email: {admin_email}")
    print("Admin password: (from ADMIN_PASSWORD)")


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the dashboard database.")
    parser.add_argument("--demo", action="store_true", help="also load demo customers, invoices and revenue")
    parser.add_argument("--create-tables", action="store_true", help="create tables without alembic (local dev)")
    args = parser.parse_args()
    seed_only(database_url=None, demo=args.demo, create_tables=args.create_tables)


if __name__ == "__main__":
    main()
