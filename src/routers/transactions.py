from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
from datetime import date

from src.auth import get_current_user_id
from src.db.core import NotFoundError, TransactionType, get_db
from src.models.transaction import TransactionCreate, TransactionUpdate, TransactionResponse, TransactionFilter, TransactionTotals
from src.crud.crud_transaction import (
    read_db_transactions,
    read_recent_transactions,
    create_db_transaction,
    update_db_transaction,
    delete_db_transaction,
    get_transaction_totals,
    DEFAULT_RECENT_LIMIT,
    DEFAULT_TOTALS_DAYS,
    MAX_TOTALS_DAYS,
)
from src.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/transactions",
    tags=["transactions"],
)


def _internal_error(message: str) -> HTTPException:
    logger.exception(message)
    return HTTPException(status_code=500, detail=message)


@router.get("")
def list_transactions(
    search: Optional[str] = None,
    type: Optional[TransactionType] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: Optional[int] = Query(None, ge=1),
    id: Optional[int] = None,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> List[TransactionResponse]:
    filters = TransactionFilter(
        search=search,
        transaction_type=type,
        start_date=start_date,
        end_date=end_date,
        transaction_id=id,
    )
    try:
        rows = read_db_transactions(db, user_id, filters=filters, limit=limit)
    except SQLAlchemyError as e:
        raise _internal_error("Failed to fetch transactions") from e
    return [TransactionResponse.model_validate(t) for t in rows]


@router.get("/recent")
def recent_transactions(
    limit: int = Query(DEFAULT_RECENT_LIMIT, ge=1),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> List[TransactionResponse]:
    try:
        rows = read_recent_transactions(db, user_id, limit=limit)
    except SQLAlchemyError as e:
        raise _internal_error("Failed to fetch recent transactions") from e
    return [TransactionResponse.model_validate(t) for t in rows]


@router.get("/totals")
def transaction_totals(
    days: int = Query(DEFAULT_TOTALS_DAYS, ge=0, le=MAX_TOTALS_DAYS),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> TransactionTotals:
    try:
        return get_transaction_totals(db, user_id, days=days)
    except SQLAlchemyError as e:
        raise _internal_error("Failed to fetch totals") from e


@router.post("")
def create_transaction(
    transaction: TransactionCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        db_transaction = create_db_transaction(db, user_id, transaction)
    except SQLAlchemyError as e:
        raise _internal_error("Failed to add transaction") from e
    return {"success": True, "transaction_id": db_transaction.transaction_id}


@router.put("/{transaction_id}")
def update_transaction(
    transaction_id: int,
    transaction: TransactionUpdate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        update_db_transaction(db, transaction_id=transaction_id, user_id=user_id, transaction_updates=transaction)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Transaction not found") from e
    except SQLAlchemyError as e:
        raise _internal_error("Failed to update transaction") from e
    return {"success": True, "message": "Transaction updated"}


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: int,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        delete_db_transaction(db, transaction_id=transaction_id, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail="Transaction not found") from e
    except SQLAlchemyError as e:
        raise _internal_error("Failed to delete transaction") from e
    return {"success": True, "message": "Transaction deleted"}
