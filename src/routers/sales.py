from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional

from src.auth import get_current_user_id
from src.crud.crud_metrics import read_monthly_sales
from src.db.core import get_db
from src.models.metrics import MonthlySalesResponse
from src.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/sales",
    tags=["sales"],
)


@router.get("/monthly")
def monthly_sales(
    year: Optional[int] = Query(None, ge=1900, le=9999),
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> List[MonthlySalesResponse]:
    """
    Monthly sales for one year, January first. Defaults to the current year.
    """
    try:
        rows = read_monthly_sales(db, user_id, year=year)
    except SQLAlchemyError as e:
        logger.exception("Monthly sales error")
        raise HTTPException(status_code=500, detail="Failed to fetch monthly sales") from e
    return [MonthlySalesResponse.model_validate(r) for r in rows]
