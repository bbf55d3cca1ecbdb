from sqlalchemy.orm import Session
from sqlalchemy import desc
from sqlalchemy.dialects import mysql, postgresql, sqlite
from typing import Optional, List
from datetime import date

from src.db.core import MonthlySalesDB, BusinessMetricDB
from src.models.metrics import BusinessMetricUpsert
from src.logging_config import get_logger

logger = get_logger(__name__)


UPSERT_COLUMNS = ("total_sales", "total_expenses", "net_profit")


# ===== MONTHLY SALES =====

def read_monthly_sales(db: Session, user_id: int, year: Optional[int] = None) -> List[MonthlySalesDB]:
    """A user's monthly sales for one calendar year (default: this year), January first"""
    year = year or date.today().year
    return (
        db.query(MonthlySalesDB)
        .filter(MonthlySalesDB.user_id == user_id, MonthlySalesDB.year == year)
        .order_by(MonthlySalesDB.month)
        .all()
    )


# ===== BUSINESS METRICS =====

def read_latest_metric(db: Session, user_id: int) -> Optional[BusinessMetricDB]:
    return (
        db.query(BusinessMetricDB)
        .filter(BusinessMetricDB.user_id == user_id)
        .order_by(desc(BusinessMetricDB.metric_date))
        .first()
    )


def _metric_upsert_statement(dialect_name: str, values: dict):
    """
    Build a single-statement insert-or-update keyed on (user_id, metric_date).
    """
    if dialect_name in ("mysql", "mariadb"):
        stmt = mysql.insert(BusinessMetricDB).values(**values)
        return stmt.on_duplicate_key_update(
            {column: stmt.inserted[column] for column in UPSERT_COLUMNS}
        )

    if dialect_name in ("postgresql", "sqlite"):
        dialect_insert = postgresql.insert if dialect_name == "postgresql" else sqlite.insert
        stmt = dialect_insert(BusinessMetricDB).values(**values)
        return stmt.on_conflict_do_update(
            index_elements=["user_id", "metric_date"],
            set_={column: stmt.excluded[column] for column in UPSERT_COLUMNS},
        )

    raise ValueError(f"Metric upsert is not supported on {dialect_name}")


def upsert_metric(db: Session, user_id: int, metric: BusinessMetricUpsert) -> None:
    """Insert the snapshot for (user_id, metric_date), overwriting the totals if it exists"""
    values = {"user_id": user_id, **metric.model_dump()}
    stmt = _metric_upsert_statement(db.get_bind().dialect.name, values)

    try:
        db.execute(stmt)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.debug(f"Saved metrics for user {user_id} on {metric.metric_date}")
