from sqlalchemy.orm import Session
from sqlalchemy import or_, desc, func, case
from typing import Optional, List
from datetime import date, datetime, timedelta

from src.db.core import TransactionDB, TransactionType, NotFoundError
from src.models.transaction import TransactionCreate, TransactionUpdate, TransactionFilter, TransactionTotals
from src.logging_config import get_logger

logger = get_logger(__name__)


DEFAULT_RECENT_LIMIT = 10
DEFAULT_TOTALS_DAYS = 30
# A century; larger windows overflow date arithmetic
MAX_TOTALS_DAYS = 36500


# ===== DATABASE OPERATIONS =====

def read_db_transactions(db: Session, user_id: int, filters: Optional[TransactionFilter] = None,
                         limit: Optional[int] = None) -> List[TransactionDB]:
    """Read a user's transactions, newest first, with optional AND-combined filters"""

    query = db.query(TransactionDB).filter(TransactionDB.user_id == user_id)

    if filters:
        if filters.transaction_id is not None:
            query = query.filter(TransactionDB.transaction_id == filters.transaction_id)

        if filters.transaction_type:
            query = query.filter(TransactionDB.transaction_type == filters.transaction_type)

        if filters.start_date:
            query = query.filter(TransactionDB.transaction_date >= filters.start_date)

        if filters.end_date:
            query = query.filter(TransactionDB.transaction_date <= filters.end_date)

        if filters.search:
            like = f"%{filters.search}%"
            query = query.filter(
                or_(
                    TransactionDB.description.ilike(like),
                    TransactionDB.category.ilike(like),
                    TransactionDB.notes.ilike(like),
                )
            )

    query = query.order_by(desc(TransactionDB.transaction_date), desc(TransactionDB.transaction_id))

    if limit:
        query = query.limit(limit)

    return query.all()


def read_recent_transactions(db: Session, user_id: int, limit: int = DEFAULT_RECENT_LIMIT) -> List[TransactionDB]:
    return read_db_transactions(db, user_id, limit=limit)


def create_db_transaction(db: Session, user_id: int, transaction_data: TransactionCreate) -> TransactionDB:
    """Insert a transaction owned by user_id"""

    db_transaction = TransactionDB(
        user_id=user_id,
        transaction_date=transaction_data.transaction_date,
        description=transaction_data.description,
        amount=transaction_data.amount,
        transaction_type=transaction_data.transaction_type,
        category=transaction_data.category,
        notes=transaction_data.notes,
        created_at=datetime.utcnow(),
    )

    try:
        db.add(db_transaction)
        db.commit()
        db.refresh(db_transaction)
    except Exception:
        db.rollback()
        raise

    return db_transaction


def update_db_transaction(db: Session, transaction_id: int, user_id: int,
                          transaction_updates: TransactionUpdate) -> None:
    """
    Replace every editable field of one transaction.

    Raises NotFoundError when the id does not exist or belongs to another user.
    """
    try:
        matched = (
            db.query(TransactionDB)
            .filter(TransactionDB.transaction_id == transaction_id, TransactionDB.user_id == user_id)
            .update(transaction_updates.model_dump(), synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    if matched == 0:
        logger.debug(f"Update of transaction {transaction_id} by user {user_id} matched no row")
        raise NotFoundError(f"Transaction with id {transaction_id} not found")


def delete_db_transaction(db: Session, transaction_id: int, user_id: int) -> None:
    """Delete one transaction; same ownership and not-found rules as update"""
    try:
        deleted = (
            db.query(TransactionDB)
            .filter(TransactionDB.transaction_id == transaction_id, TransactionDB.user_id == user_id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except Exception:
        db.rollback()
        raise

    if deleted == 0:
        logger.debug(f"Delete of transaction {transaction_id} by user {user_id} matched no row")
        raise NotFoundError(f"Transaction with id {transaction_id} not found")


def get_transaction_totals(db: Session, user_id: int, days: int = DEFAULT_TOTALS_DAYS,
                           today: Optional[date] = None) -> TransactionTotals:
    """
    Aggregate the trailing window of `days` days ending today.

    The sign comes from transaction_type, never from the stored amount:
    expenses are summed as stored and only negated inside net_profit.
    """
    since = (today or date.today()) - timedelta(days=days)
    is_income = TransactionDB.transaction_type == TransactionType.INCOME
    is_expense = TransactionDB.transaction_type == TransactionType.EXPENSE

    row = (
        db.query(
            func.coalesce(func.sum(case((is_income, TransactionDB.amount), else_=0)), 0).label("total_sales"),
            func.coalesce(func.sum(case((is_expense, TransactionDB.amount), else_=0)), 0).label("total_expenses"),
            func.coalesce(func.sum(case((is_income, TransactionDB.amount), else_=-TransactionDB.amount)), 0).label("net_profit"),
        )
        .filter(TransactionDB.user_id == user_id, TransactionDB.transaction_date >= since)
        .one()
    )

    return TransactionTotals(
        total_sales=float(row.total_sales),
        total_expenses=float(row.total_expenses),
        net_profit=float(row.net_profit),
    )
