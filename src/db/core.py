from typing import Optional, Iterator
from sqlalchemy import create_engine, ForeignKey, Index, UniqueConstraint, Integer, SmallInteger, String, Text, DECIMAL, DateTime, Date
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import StaticPool
from sqlalchemy.types import Enum
from sqlalchemy.orm import Session, sessionmaker, DeclarativeBase, Mapped, relationship, mapped_column
from fastapi import Request
from datetime import datetime, date
from decimal import Decimal
import enum

from src.config import Settings


class NotFoundError(Exception):
    pass


class ConflictError(Exception):
    pass


class Base(DeclarativeBase):
    pass


class TransactionType(str, enum.Enum):
    INCOME = "Income"
    EXPENSE = "Expense"


class UserDB(Base):
    __tablename__ = "users"

    __table_args__ = (
        UniqueConstraint("email", name="uq_user_email"),
    )

    user_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    transactions = relationship("TransactionDB", back_populates="user")
    monthly_sales = relationship("MonthlySalesDB", back_populates="user")
    business_metrics = relationship("BusinessMetricDB", back_populates="user")


class TransactionDB(Base):
    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transactions_user_date", "user_id", "transaction_date"),
    )

    transaction_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False)

    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(255))
    amount: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), nullable=False)
    # Stored as 'Income' / 'Expense', not the member names
    transaction_type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, name="transaction_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    category: Mapped[Optional[str]] = mapped_column(String(100))
    notes: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user = relationship("UserDB", back_populates="transactions")


class MonthlySalesDB(Base):
    __tablename__ = "monthly_sales"

    __table_args__ = (
        UniqueConstraint("user_id", "year", "month", name="uq_monthly_sales_user_period"),
    )

    sales_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    month: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    month_name: Mapped[str] = mapped_column(String(20), nullable=False)
    sales_amount: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), nullable=False, default=Decimal("0"))

    user = relationship("UserDB", back_populates="monthly_sales")


class BusinessMetricDB(Base):
    __tablename__ = "business_metrics"

    __table_args__ = (
        # Upsert target
        UniqueConstraint("user_id", "metric_date", name="uq_business_metrics_user_date"),
    )

    metric_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.user_id"), nullable=False)
    metric_date: Mapped[date] = mapped_column(Date, nullable=False)
    total_sales: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), nullable=False, default=Decimal("0"))
    total_expenses: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), nullable=False, default=Decimal("0"))
    net_profit: Mapped[Decimal] = mapped_column(DECIMAL(12, 2), nullable=False, default=Decimal("0"))

    user = relationship("UserDB", back_populates="business_metrics")


def build_engine(settings: Settings) -> Engine:
    """
    Create the engine for the configured store.

    Server databases get a fixed-size pool with no overflow, so callers queue
    for a free connection (up to db_pool_timeout seconds) instead of failing.
    """
    url = make_url(settings.database_url)

    if url.get_backend_name() == "sqlite":
        if url.database in (None, "", ":memory:"):
            return create_engine(
                url,
                echo=settings.sql_echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(url, echo=settings.sql_echo, connect_args={"check_same_thread": False})

    return create_engine(
        url,
        echo=settings.sql_echo,
        pool_size=settings.db_pool_size,
        max_overflow=0,
        pool_timeout=settings.db_pool_timeout,
        pool_pre_ping=True,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency to get the database session
def get_db(request: Request) -> Iterator[Session]:
    database = request.app.state.session_factory()
    try:
        yield database
    finally:
        database.close()
