from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from src.auth import get_current_user_id
from src.crud.crud_metrics import read_latest_metric, upsert_metric
from src.db.core import get_db
from src.models.metrics import BusinessMetricUpsert, BusinessMetricResponse
from src.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/metrics",
    tags=["metrics"],
)


@router.get("/latest")
def latest_metric(
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
) -> dict:
    """
    Most recent snapshot by metric_date, or {} when the user has none.
    """
    try:
        metric = read_latest_metric(db, user_id)
    except SQLAlchemyError as e:
        logger.exception("Metrics latest error")
        raise HTTPException(status_code=500, detail="Failed to fetch metrics") from e
    if metric is None:
        return {}
    return BusinessMetricResponse.model_validate(metric).model_dump(mode="json")


@router.post("")
def save_metric(
    metric: BusinessMetricUpsert,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    try:
        upsert_metric(db, user_id, metric)
    except (SQLAlchemyError, ValueError) as e:
        logger.exception("Metrics update error")
        raise HTTPException(status_code=500, detail="Failed to update metrics") from e
    return {"success": True, "message": "Metrics saved"}
