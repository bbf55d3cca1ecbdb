import sys
import os
import random
import calendar
from argparse import ArgumentParser
from typing import Optional
from sqlalchemy.orm import Session
from datetime import date, timedelta
from decimal import Decimal
from faker import Faker

# Add the project root to the Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from src.config import Settings
from src.crud.crud_user import hash_password
from src.db.core import (
    Base,
    build_engine,
    build_session_factory,
    UserDB,
    TransactionDB,
    MonthlySalesDB,
    BusinessMetricDB,
    TransactionType,
)

fake = Faker()

DEMO_PASSWORD = "Password123"

INCOME_CATEGORIES = ["Sales", "Services", "Consulting", "Refunds"]
EXPENSE_CATEGORIES = ["Rent", "Payroll", "Utilities", "Marketing", "Supplies", "Software"]


def _money(low: float, high: float) -> Decimal:
    return Decimal(str(round(random.uniform(low, high), 2)))


def seed_user(db: Session, year: int, transactions_per_user: int = 60) -> UserDB:
    """One demo user with a year of monthly sales, recent transactions and monthly metric snapshots."""
    user = UserDB(
        full_name=fake.name(),
        email=fake.unique.email().lower(),
        password_hash=hash_password(DEMO_PASSWORD),
    )
    db.add(user)
    db.flush()

    today = date.today()
    last_month = 12 if year < today.year else today.month
    for month in range(1, last_month + 1):
        db.add(MonthlySalesDB(
            user_id=user.user_id,
            year=year,
            month=month,
            month_name=calendar.month_name[month],
            sales_amount=_money(8000, 30000),
        ))

    for _ in range(transactions_per_user):
        is_income = random.random() < 0.4
        db.add(TransactionDB(
            user_id=user.user_id,
            transaction_date=fake.date_between(start_date="-90d", end_date="today"),
            description=fake.bs().capitalize(),
            amount=_money(200, 5000) if is_income else _money(20, 2500),
            transaction_type=TransactionType.INCOME if is_income else TransactionType.EXPENSE,
            category=random.choice(INCOME_CATEGORIES if is_income else EXPENSE_CATEGORIES),
            notes=fake.sentence() if random.random() < 0.3 else None,
        ))

    for months_back in range(6):
        total_sales = _money(10000, 30000)
        total_expenses = _money(5000, 20000)
        db.add(BusinessMetricDB(
            user_id=user.user_id,
            metric_date=today.replace(day=1) - timedelta(days=31 * months_back),
            total_sales=total_sales,
            total_expenses=total_expenses,
            net_profit=total_sales - total_expenses,
        ))

    return user


def seed_database(db: Optional[Session] = None, users: int = 3, year: Optional[int] = None) -> int:
    """
    Fill the store with demo users. monthly_sales has no API write path, so
    this script is how it gets populated outside production.

    Returns the number of users created, 0 if the database already has users.
    """
    owns_session = db is None
    if owns_session:
        settings = Settings.from_env()
        engine = build_engine(settings)
        Base.metadata.create_all(bind=engine)
        db = build_session_factory(engine)()

    year = year or date.today().year

    try:
        if db.query(UserDB).count() > 0:
            print("Database appears to be already seeded. Exiting.")
            return 0

        print(f"Seeding {users} demo users for {year}...")
        for i in range(users):
            user = seed_user(db, year)
            db.commit()
            print(f"User {i + 1}/{users} seeded: {user.email} / {DEMO_PASSWORD}")

        print("Successfully seeded database.")
        return users
    except Exception:
        db.rollback()
        raise
    finally:
        if owns_session:
            db.close()


if __name__ == "__main__":
    parser = ArgumentParser(description="Seed the dashboard database with demo data")
    parser.add_argument("--users", type=int, default=3)
    parser.add_argument("--year", type=int, default=None)
    args = parser.parse_args()

    seed_database(users=args.users, year=args.year)
