import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from database import get_db
from models import Report

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


class CreateReport(BaseModel):
    listing_id: int
    reason: str = Field(..., min_length=1, max_length=2000)


# -------------------------------------------------
# REPORT A LISTING (ANYONE)
# -------------------------------------------------

@router.post("")
def create_report(
    data: CreateReport,
    db=Depends(get_db),
):
    report = Report(
        listing_id=data.listing_id,
        reason=data.reason,
        created_at=datetime.utcnow(),
    )

    try:
        db.add(report)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("REPORT_CREATE_ERROR listing=%s", data.listing_id)
        raise HTTPException(status_code=500, detail="Failed to submit report")

    logger.info("LISTING_REPORTED listing=%s report=%s", data.listing_id, report.id)
    return {"success": True}
